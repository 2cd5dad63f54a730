"""Management API endpoints.

All routes require the management role cookie.
"""

import logging
import time
from datetime import date

from fastapi import APIRouter, Depends, File, Form, Query, Response, UploadFile, status
from sqlalchemy.orm import Session

from src.api.deps import get_store, log_debug, parse_month, require_management
from src.api.schemas import (
    BuildingCreate,
    BuildingDetailResponse,
    BuildingResponse,
    DocumentResponse,
    ManagementDashboardResponse,
    MonthStatusResponse,
    PaymentCreate,
    PaymentLogItem,
    PaymentResponse,
    RoomCreate,
    RoomResponse,
    SummaryResponse,
    TenantCreate,
    TenantCreatedResponse,
    TenantResponse,
    TenantStatusRow,
    TenantUpdate,
    VacateRequest,
    money,
    month_label,
)
from src.services import get_db
from src.services.building_service import BuildingService
from src.services.dashboard_service import DashboardService
from src.services.document_service import DocumentService
from src.services.payment_service import PaymentService
from src.services.rent_ledger import MonthKey
from src.services.storage import LocalBlobStore
from src.services.tenant_service import TenantService

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/management",
    tags=["management"],
    dependencies=[Depends(require_management)],
)


@router.get("/dashboard", response_model=ManagementDashboardResponse)
def dashboard(
    month: str | None = None,
    db: Session = Depends(get_db),  # noqa: B008
) -> ManagementDashboardResponse:
    """Portfolio overview for a month (default: current month).

    Returns:
        Counts, collection summary over active tenants, last month's revenue
        and payment log, and total monthly potential.
    """
    start_time = time.time()
    overview = DashboardService(db).management_overview(parse_month(month))
    response = ManagementDashboardResponse(
        month=str(overview.month),
        month_label=month_label(overview.month),
        building_count=overview.building_count,
        tenant_count=overview.tenant_count,
        summary=SummaryResponse.build(overview.summary),
        total_monthly_potential=overview.total_monthly_potential,
        total_monthly_potential_display=money(overview.total_monthly_potential),
        last_month=str(overview.last_month),
        last_month_total=overview.last_month_total,
        last_month_total_display=money(overview.last_month_total),
        last_month_count=len(overview.last_month_payments),
        last_month_payments=[PaymentLogItem.from_payment(p) for p in overview.last_month_payments],
        buildings=[BuildingResponse.model_validate(b) for b in overview.buildings],
    )
    log_debug("management.dashboard", start_time, month=overview.month)
    return response


# Buildings and rooms
@router.get("/buildings", response_model=list[BuildingResponse])
def list_buildings(db: Session = Depends(get_db)) -> list[BuildingResponse]:  # noqa: B008
    return [BuildingResponse.model_validate(b) for b in BuildingService(db).list_buildings()]


@router.post("/buildings", response_model=BuildingResponse, status_code=status.HTTP_201_CREATED)
def create_building(
    body: BuildingCreate,
    db: Session = Depends(get_db),  # noqa: B008
) -> BuildingResponse:
    building = BuildingService(db).create_building(body.name, body.address, body.description)
    return BuildingResponse.model_validate(building)


@router.get("/buildings/{building_id}", response_model=BuildingDetailResponse)
def building_detail(
    building_id: int,
    month: str | None = None,
    db: Session = Depends(get_db),  # noqa: B008
) -> BuildingDetailResponse:
    """Building with rooms, tenants and each tenant's status for the month."""
    start_time = time.time()
    overview = DashboardService(db).building_overview(building_id, parse_month(month))
    response = BuildingDetailResponse(
        building=BuildingResponse.model_validate(overview.building),
        month=str(overview.month),
        rooms=[RoomResponse.model_validate(r) for r in overview.rooms],
        tenants=[
            TenantStatusRow(
                tenant=TenantResponse.model_validate(row.tenant),
                status=MonthStatusResponse.build(overview.month, row.status),
            )
            for row in overview.tenants
        ],
        summary=SummaryResponse.build(overview.summary),
        total_monthly=overview.total_monthly,
    )
    log_debug(
        "management.building",
        start_time,
        building_id=building_id,
        month=overview.month,
        count=len(overview.tenants),
    )
    return response


@router.get("/buildings/{building_id}/rooms", response_model=list[RoomResponse])
def list_rooms(
    building_id: int,
    vacant_only: bool = False,
    db: Session = Depends(get_db),  # noqa: B008
) -> list[RoomResponse]:
    buildings = BuildingService(db)
    buildings.get_building(building_id)
    return [RoomResponse.model_validate(r) for r in buildings.list_rooms(building_id, vacant_only)]


@router.post(
    "/buildings/{building_id}/rooms",
    response_model=RoomResponse,
    status_code=status.HTTP_201_CREATED,
)
def add_room(
    building_id: int,
    body: RoomCreate,
    db: Session = Depends(get_db),  # noqa: B008
) -> RoomResponse:
    return RoomResponse.model_validate(BuildingService(db).add_room(building_id, body.room_number))


# Tenants
@router.get("/tenants", response_model=list[TenantResponse])
def list_tenants(
    building_id: int | None = None,
    include_vacated: bool = True,
    db: Session = Depends(get_db),  # noqa: B008
) -> list[TenantResponse]:
    tenants = TenantService(db).list_tenants(building_id=building_id, include_vacated=include_vacated)
    return [TenantResponse.model_validate(t) for t in tenants]


@router.post("/tenants", response_model=TenantCreatedResponse, status_code=status.HTTP_201_CREATED)
def create_tenant(
    body: TenantCreate,
    db: Session = Depends(get_db),  # noqa: B008
) -> TenantCreatedResponse:
    """Onboard a tenant into a vacant room.

    Returns:
        The tenant and the generated username/password (shown only here)
    """
    created = TenantService(db).create_tenant(**body.model_dump())
    return TenantCreatedResponse(
        tenant=TenantResponse.model_validate(created.tenant),
        username=created.credentials.username,
        password=created.credentials.password,
    )


@router.get("/tenants/{tenant_id}", response_model=TenantResponse)
def get_tenant(tenant_id: int, db: Session = Depends(get_db)) -> TenantResponse:  # noqa: B008
    return TenantResponse.model_validate(TenantService(db).get_tenant(tenant_id))


@router.patch("/tenants/{tenant_id}", response_model=TenantResponse)
def update_tenant(
    tenant_id: int,
    body: TenantUpdate,
    db: Session = Depends(get_db),  # noqa: B008
) -> TenantResponse:
    tenant = TenantService(db).update_tenant(tenant_id, **body.model_dump(exclude_unset=True))
    return TenantResponse.model_validate(tenant)


@router.post("/tenants/{tenant_id}/vacate", response_model=TenantResponse)
def vacate_tenant(
    tenant_id: int,
    body: VacateRequest | None = None,
    db: Session = Depends(get_db),  # noqa: B008
) -> TenantResponse:
    vacated_on = body.vacated_on if body else None
    return TenantResponse.model_validate(TenantService(db).vacate_tenant(tenant_id, vacated_on))


@router.delete("/tenants/{tenant_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_tenant(
    tenant_id: int,
    db: Session = Depends(get_db),  # noqa: B008
    store: LocalBlobStore = Depends(get_store),  # noqa: B008
) -> Response:
    """Delete a tenant with their payments, documents and stored files."""
    tenants = TenantService(db)
    documents = DocumentService(db, store)
    tenants.get_tenant(tenant_id)
    # Blobs are removed only after the tenant rows are committed
    storage_paths = documents.storage_paths_for_tenant(tenant_id)
    tenants.delete_tenant(tenant_id)
    documents.remove_files(storage_paths)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/tenants/{tenant_id}/status", response_model=MonthStatusResponse)
def tenant_status(
    tenant_id: int,
    month: str | None = None,
    db: Session = Depends(get_db),  # noqa: B008
) -> MonthStatusResponse:
    """Paid / Partial / Pending for one tenant and month (default: current)."""
    tenant = TenantService(db).get_tenant(tenant_id)
    key = parse_month(month) or MonthKey.from_date(date.today())
    return MonthStatusResponse.build(key, PaymentService(db).month_status(tenant, key))


# Payments
@router.get("/tenants/{tenant_id}/payments", response_model=list[PaymentResponse])
def tenant_payments(
    tenant_id: int,
    db: Session = Depends(get_db),  # noqa: B008
) -> list[PaymentResponse]:
    TenantService(db).get_tenant(tenant_id)
    return [PaymentResponse.model_validate(p) for p in PaymentService(db).list_for_tenant(tenant_id)]


@router.get("/payments", response_model=list[PaymentLogItem])
def payment_log(
    start: date | None = Query(None),  # noqa: B008
    end: date | None = Query(None),  # noqa: B008
    building_id: int | None = None,
    db: Session = Depends(get_db),  # noqa: B008
) -> list[PaymentLogItem]:
    """Payments across tenants with optional paid-on range (inclusive)."""
    start_time = time.time()
    ids = [t.id for t in TenantService(db).list_tenants(building_id=building_id)]
    payments = PaymentService(db).list_for_tenants(ids, start=start, end=end)
    log_debug("management.payments", start_time, count=len(payments))
    return [PaymentLogItem.from_payment(p) for p in payments]


@router.post("/payments", response_model=PaymentResponse, status_code=status.HTTP_201_CREATED)
def record_payment(
    body: PaymentCreate,
    db: Session = Depends(get_db),  # noqa: B008
) -> PaymentResponse:
    """Record a manual (cash, bank transfer, cheque...) payment."""
    payment = PaymentService(db).record_payment(
        tenant_id=body.tenant_id,
        amount=body.amount,
        paid_on=body.paid_on,
        billing_month=parse_month(body.billing_month),
        payment_type=body.payment_type,
        method=body.method,
        notes=body.notes,
    )
    return PaymentResponse.model_validate(payment)


@router.delete("/payments/{payment_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_payment(payment_id: int, db: Session = Depends(get_db)) -> Response:  # noqa: B008
    PaymentService(db).delete_payment(payment_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# Documents
@router.get("/tenants/{tenant_id}/documents", response_model=list[DocumentResponse])
def list_documents(
    tenant_id: int,
    db: Session = Depends(get_db),  # noqa: B008
    store: LocalBlobStore = Depends(get_store),  # noqa: B008
) -> list[DocumentResponse]:
    TenantService(db).get_tenant(tenant_id)
    documents = DocumentService(db, store).list_documents(tenant_id)
    return [DocumentResponse.model_validate(d) for d in documents]


@router.post(
    "/tenants/{tenant_id}/documents",
    response_model=DocumentResponse,
    status_code=status.HTTP_201_CREATED,
)
def upload_document(
    tenant_id: int,
    file: UploadFile = File(...),  # noqa: B008
    label: str | None = Form(None),  # noqa: B008
    db: Session = Depends(get_db),  # noqa: B008
    store: LocalBlobStore = Depends(get_store),  # noqa: B008
) -> DocumentResponse:
    """Upload a file (agreement, ID proof...) for a tenant."""
    content = file.file.read()
    document = DocumentService(db, store).upload(tenant_id, file.filename or "", content, label)
    return DocumentResponse.model_validate(document)


@router.delete("/documents/{document_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_document(
    document_id: int,
    db: Session = Depends(get_db),  # noqa: B008
    store: LocalBlobStore = Depends(get_store),  # noqa: B008
) -> Response:
    DocumentService(db, store).delete_document(document_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

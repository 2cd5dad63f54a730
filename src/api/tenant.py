"""Tenant self-service API endpoints (role=tenant)."""

import logging
import time

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from src.api.deps import get_store, log_debug, parse_month, require_tenant
from src.api.schemas import (
    DocumentResponse,
    MonthStatusResponse,
    PaymentResponse,
    TenantDashboardResponse,
    TenantResponse,
    money,
    month_label,
)
from src.services import get_db
from src.services.dashboard_service import DashboardService
from src.services.document_service import DocumentService
from src.services.storage import LocalBlobStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/tenant", tags=["tenant"])


@router.get("/dashboard", response_model=TenantDashboardResponse)
def dashboard(
    month: str | None = None,
    tenant_id: int = Depends(require_tenant),  # noqa: B008
    db: Session = Depends(get_db),  # noqa: B008
) -> TenantDashboardResponse:
    """Current month status, pending amount, payment history and documents.

    Raises:
        401: Not logged in as a tenant
        404: Tenant no longer exists
    """
    start_time = time.time()
    view = DashboardService(db).tenant_dashboard(tenant_id, parse_month(month))
    response = TenantDashboardResponse(
        tenant=TenantResponse.model_validate(view.tenant),
        month=str(view.month),
        month_label=month_label(view.month),
        room_number=view.room_number,
        monthly_total=view.monthly_total,
        monthly_total_display=money(view.monthly_total),
        advance_paid=view.tenant.advance_paid,
        status=MonthStatusResponse.build(view.month, view.status),
        pending_amount=view.pending_amount,
        pending_amount_display=money(view.pending_amount),
        payments=[PaymentResponse.model_validate(p) for p in view.payments],
        documents=[DocumentResponse.model_validate(d) for d in view.documents],
    )
    log_debug(
        "tenant.dashboard",
        start_time,
        tenant_id=tenant_id,
        month=view.month,
        outcome=view.status.outcome.value,
    )
    return response


@router.get("/documents", response_model=list[DocumentResponse])
def documents(
    tenant_id: int = Depends(require_tenant),  # noqa: B008
    db: Session = Depends(get_db),  # noqa: B008
    store: LocalBlobStore = Depends(get_store),  # noqa: B008
) -> list[DocumentResponse]:
    return [DocumentResponse.model_validate(d) for d in DocumentService(db, store).list_documents(tenant_id)]

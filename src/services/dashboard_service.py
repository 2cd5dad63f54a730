"""Dashboard read models for management and tenants.

Every paid/pending figure goes through the rent ledger so the management
overview, the building page and the tenant dashboard agree with each other.
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

from sqlalchemy.orm import Session

from src.models.building import Building
from src.models.document import TenantDocument
from src.models.payment import Payment
from src.models.room import Room
from src.models.tenant import Tenant
from src.services.building_service import BuildingService
from src.services.payment_service import PaymentService
from src.services.rent_ledger import (
    BuildingSummary,
    MonthKey,
    MonthStatus,
    evaluate_month,
    summarize_building,
)
from src.services.tenant_service import TenantService, tenant_terms, terms_of

logger = logging.getLogger(__name__)


@dataclass
class TenantMonthRow:
    """Tenant with their status for the selected month."""

    tenant: Tenant
    status: MonthStatus


@dataclass
class ManagementOverview:
    """Portfolio-wide figures for the management dashboard."""

    month: MonthKey
    building_count: int
    tenant_count: int
    summary: BuildingSummary
    total_monthly_potential: Decimal
    last_month: MonthKey
    last_month_total: Decimal
    last_month_payments: list[Payment] = field(default_factory=list)
    buildings: list[Building] = field(default_factory=list)


@dataclass
class BuildingOverview:
    """One building with rooms, tenants and the month rollup."""

    building: Building
    month: MonthKey
    rooms: list[Room]
    tenants: list[TenantMonthRow]
    summary: BuildingSummary
    total_monthly: Decimal


@dataclass
class TenantDashboard:
    """Everything a tenant sees after logging in."""

    tenant: Tenant
    month: MonthKey
    room_number: str | None
    monthly_total: Decimal
    status: MonthStatus
    payments: list[Payment]
    documents: list[TenantDocument]

    @property
    def pending_amount(self) -> Decimal:
        return self.status.shortfall


class DashboardService:
    """Builds dashboard read models from the registries."""

    def __init__(self, db_session: Session):
        self.db = db_session
        self.tenants = TenantService(db_session)
        self.payments = PaymentService(db_session)

    def management_overview(self, month: MonthKey | None = None) -> ManagementOverview:
        month = month or MonthKey.from_date(date.today())
        last_month = month.previous()

        buildings = BuildingService(self.db).list_buildings()
        active = self.tenants.list_tenants(include_vacated=False)
        ids = [t.id for t in active]

        summary = summarize_building(
            [tenant_terms(t) for t in active],
            self.payments.records_by_tenant(ids),
            month,
        )

        # Last month's log covers every tenant who paid, vacated or not
        all_ids = [t.id for t in self.tenants.list_tenants()]
        last_payments = self.payments.list_for_tenants(
            all_ids, start=last_month.first_day, end=last_month.last_day
        )

        overview = ManagementOverview(
            month=month,
            building_count=len(buildings),
            tenant_count=len(active),
            summary=summary,
            total_monthly_potential=sum((t.monthly_total for t in active), Decimal("0")),
            last_month=last_month,
            last_month_total=sum((p.amount for p in last_payments), Decimal("0")),
            last_month_payments=last_payments,
            buildings=buildings,
        )
        logger.debug(
            "dashboard.management: month=%s tenants=%d paid=%d pending=%d",
            month,
            overview.tenant_count,
            summary.paid_count,
            summary.pending_count,
        )
        return overview

    def building_overview(self, building_id: int, month: MonthKey | None = None) -> BuildingOverview:
        month = month or MonthKey.from_date(date.today())
        buildings = BuildingService(self.db)
        building = buildings.get_building(building_id)
        tenants = self.tenants.list_tenants(building_id=building.id)
        records = self.payments.records_by_tenant([t.id for t in tenants])

        rows = [
            TenantMonthRow(tenant=t, status=evaluate_month(terms_of(t), records.get(t.id, []), month))
            for t in tenants
        ]
        summary = summarize_building([tenant_terms(t) for t in tenants], records, month)

        return BuildingOverview(
            building=building,
            month=month,
            rooms=buildings.list_rooms(building.id),
            tenants=rows,
            summary=summary,
            total_monthly=sum((t.monthly_total for t in tenants if t.is_active), Decimal("0")),
        )

    def tenant_dashboard(
        self,
        tenant_id: int,
        month: MonthKey | None = None,
    ) -> TenantDashboard:
        month = month or MonthKey.from_date(date.today())
        tenant = self.tenants.get_tenant(tenant_id)
        payments = self.payments.list_for_tenant(tenant.id)
        status = evaluate_month(terms_of(tenant), self.payments.to_records(payments), month)

        return TenantDashboard(
            tenant=tenant,
            month=month,
            room_number=tenant.room.room_number if tenant.room else None,
            monthly_total=tenant.monthly_total,
            status=status,
            payments=payments,
            documents=(
                self.db.query(TenantDocument)
                .filter(TenantDocument.tenant_id == tenant.id)
                .order_by(TenantDocument.created_at.desc(), TenantDocument.id.desc())
                .all()
            ),
        )


__all__ = [
    "BuildingOverview",
    "DashboardService",
    "ManagementOverview",
    "TenantDashboard",
    "TenantMonthRow",
]

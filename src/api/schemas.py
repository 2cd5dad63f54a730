"""Request and response schemas for the HTTP API.

Money is exposed as float in responses; requests accept decimals and are
validated by the services.
"""

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict

from src.models.tenant import TenantStatus
from src.services.locale_service import format_amount, format_month
from src.services.rent_ledger import BuildingSummary, MonthKey, MonthStatus


# Auth
class LoginRequest(BaseModel):
    username: str = ""
    password: str = ""


class LoginResponse(BaseModel):
    """Role granted by a successful login."""

    role: str
    tenant_id: int | None = None
    name: str | None = None


# Buildings and rooms
class BuildingCreate(BaseModel):
    name: str
    address: str | None = None
    description: str | None = None


class BuildingResponse(BaseModel):
    id: int
    name: str
    code: str
    address: str | None = None
    description: str | None = None

    model_config = ConfigDict(from_attributes=True)


class RoomCreate(BaseModel):
    room_number: str


class RoomResponse(BaseModel):
    id: int
    building_id: int
    room_number: str
    is_occupied: bool

    model_config = ConfigDict(from_attributes=True)


# Tenants
class TenantCreate(BaseModel):
    building_id: int
    room_id: int
    name: str
    rent: Decimal
    maintenance: Decimal | None = None
    advance_paid: Decimal | None = None
    phone: str | None = None
    agreement_start: date | None = None
    agreement_end: date | None = None


class TenantUpdate(BaseModel):
    """Partial update; only fields present in the request are applied."""

    name: str | None = None
    phone: str | None = None
    rent: Decimal | None = None
    maintenance: Decimal | None = None
    advance_paid: Decimal | None = None
    agreement_start: date | None = None
    agreement_end: date | None = None


class VacateRequest(BaseModel):
    vacated_on: date | None = None


class TenantResponse(BaseModel):
    id: int
    building_id: int
    room_id: int
    room_number: str | None = None
    name: str
    phone: str | None = None
    username: str
    rent: float
    maintenance: float
    advance_paid: float
    monthly_total: float
    agreement_start: date | None = None
    agreement_end: date | None = None
    status: TenantStatus
    vacated_on: date | None = None

    model_config = ConfigDict(from_attributes=True)


class TenantCreatedResponse(BaseModel):
    """New tenant and the generated login, shown once."""

    tenant: TenantResponse
    username: str
    password: str


class MonthStatusResponse(BaseModel):
    month: str
    total_due: float
    total_paid: float
    outcome: str
    shortfall: float

    @classmethod
    def build(cls, month: MonthKey, status: MonthStatus) -> "MonthStatusResponse":
        return cls(
            month=str(month),
            total_due=status.total_due,
            total_paid=status.total_paid,
            outcome=status.outcome.value,
            shortfall=status.shortfall,
        )


class TenantStatusRow(BaseModel):
    tenant: TenantResponse
    status: MonthStatusResponse


# Payments
class PaymentCreate(BaseModel):
    tenant_id: int
    amount: Decimal
    paid_on: date | None = None
    billing_month: str | None = None  # YYYY-MM
    payment_type: str = "rent"
    method: str = "cash"
    notes: str | None = None


class PaymentResponse(BaseModel):
    id: int
    tenant_id: int
    amount: float
    paid_on: date
    billing_month: date | None = None
    payment_type: str
    method: str
    notes: str | None = None
    external_reference: str | None = None

    model_config = ConfigDict(from_attributes=True)


class PaymentLogItem(PaymentResponse):
    """Payment with tenant name and room for management logs."""

    tenant_name: str | None = None
    room_number: str | None = None

    @classmethod
    def from_payment(cls, payment) -> "PaymentLogItem":
        item = cls.model_validate(payment)
        item.tenant_name = payment.tenant.name if payment.tenant else None
        item.room_number = payment.tenant.room_number if payment.tenant else None
        return item


# Documents
class DocumentResponse(BaseModel):
    id: int
    tenant_id: int
    url: str
    label: str
    file_name: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


# Dashboards
class SummaryResponse(BaseModel):
    occupied_count: int
    paid_count: int
    pending_count: int
    partial_count: int
    total_collected: float

    @classmethod
    def build(cls, summary: BuildingSummary) -> "SummaryResponse":
        return cls(**summary._asdict())


class ManagementDashboardResponse(BaseModel):
    month: str
    month_label: str
    building_count: int
    tenant_count: int
    summary: SummaryResponse
    total_monthly_potential: float
    total_monthly_potential_display: str
    last_month: str
    last_month_total: float
    last_month_total_display: str
    last_month_count: int
    last_month_payments: list[PaymentLogItem]
    buildings: list[BuildingResponse]


class BuildingDetailResponse(BaseModel):
    building: BuildingResponse
    month: str
    rooms: list[RoomResponse]
    tenants: list[TenantStatusRow]
    summary: SummaryResponse
    total_monthly: float


class TenantDashboardResponse(BaseModel):
    tenant: TenantResponse
    month: str
    month_label: str
    room_number: str | None = None
    monthly_total: float
    monthly_total_display: str
    advance_paid: float
    status: MonthStatusResponse
    pending_amount: float
    pending_amount_display: str
    payments: list[PaymentResponse]
    documents: list[DocumentResponse]


def month_label(month: MonthKey) -> str:
    return format_month(month.year, month.month)


def money(amount: Decimal) -> str:
    return format_amount(amount)

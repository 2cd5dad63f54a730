"""Payment ORM model for the tenant payment ledger."""

from datetime import date
from decimal import Decimal
from enum import Enum

from sqlalchemy import Date, ForeignKey, Index, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.models import Base, BaseModel


class PaymentType(str, Enum):
    """What a payment is meant to cover."""

    RENT = "rent"
    DEPOSIT = "deposit"
    """Security deposit, never counted towards a month."""
    MAINTENANCE = "maintenance"
    OTHER = "other"


class PaymentMethod(str, Enum):
    """How the money was received."""

    CASH = "cash"
    BANK_TRANSFER = "bank-transfer"
    CHEQUE = "cheque"
    ONLINE = "online"
    OTHER = "other"


class Payment(Base, BaseModel):
    """Model representing a payment received from a tenant.

    billing_month is stored as the first day of the month it settles. Older
    records carry only paid_on; the rent ledger falls back to it.
    """

    __tablename__ = "payments"

    tenant_id: Mapped[int] = mapped_column(
        ForeignKey("tenants.id"),
        nullable=False,
        index=True,
    )

    amount: Mapped[Decimal] = mapped_column(
        Numeric(12, 2),
        nullable=False,
    )
    paid_on: Mapped[date] = mapped_column(
        Date,
        nullable=False,
        index=True,
        comment="Date the money was received",
    )
    billing_month: Mapped[date | None] = mapped_column(
        Date,
        nullable=True,
        comment="First day of the month this payment settles",
    )
    payment_type: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=PaymentType.RENT.value,
    )
    method: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=PaymentMethod.CASH.value,
    )
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    external_reference: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
        unique=True,
        comment="Checkout session id for online payments",
    )

    # Relationships
    tenant: Mapped["Tenant"] = relationship(  # noqa: F821
        "Tenant",
        back_populates="payments",
    )

    __table_args__ = (
        Index("idx_payment_tenant_date", "tenant_id", "paid_on"),
        Index("idx_payment_tenant_month", "tenant_id", "billing_month"),
    )

    def __repr__(self) -> str:
        return (
            f"<Payment(id={self.id}, tenant_id={self.tenant_id}, amount={self.amount}, "
            f"paid_on={self.paid_on}, billing_month={self.billing_month}, "
            f"payment_type={self.payment_type!r})>"
        )


__all__ = ["Payment", "PaymentMethod", "PaymentType"]

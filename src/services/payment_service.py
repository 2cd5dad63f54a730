"""Payment service for recording tenant payments and reading the ledger.

Provides methods for:
- Recording manual and online payments
- Listing a tenant's history or a date range across tenants
- Administrative deletion
- Converting rows to rent ledger records and evaluating a month
"""

import logging
from collections import defaultdict
from collections.abc import Iterable, Sequence
from datetime import date
from typing import Any, Optional

from sqlalchemy.orm import Session, joinedload

from src.models.payment import Payment, PaymentMethod, PaymentType
from src.models.tenant import Tenant
from src.services.errors import NotFoundError, ValidationError
from src.services.rent_ledger import MonthKey, MonthStatus, PaymentRecord, evaluate_month
from src.services.tenant_service import parse_amount, terms_of

logger = logging.getLogger(__name__)


def _coerce_enum(enum_cls, value: Any, field: str):
    try:
        return enum_cls(value)
    except ValueError as e:
        allowed = ", ".join(m.value for m in enum_cls)
        raise ValidationError(f"Invalid {field} '{value}'. Allowed: {allowed}") from e


class PaymentService:
    """Tenant payment ledger operations."""

    def __init__(self, db: Session):
        """Initialize payment service.

        Args:
            db: SQLAlchemy database session
        """
        self.db = db

    def record_payment(
        self,
        tenant_id: int,
        amount: Any,
        paid_on: Optional[date] = None,
        billing_month: Optional[MonthKey] = None,
        payment_type: PaymentType | str = PaymentType.RENT,
        method: PaymentMethod | str = PaymentMethod.CASH,
        notes: Optional[str] = None,
        external_reference: Optional[str] = None,
    ) -> Payment:
        """Append a payment to a tenant's ledger.

        Args:
            tenant_id: Tenant who paid
            amount: Amount received (must be > 0)
            paid_on: Date money was received (default: today)
            billing_month: Month the payment settles (optional)
            payment_type: rent, deposit, maintenance or other
            method: cash, bank-transfer, cheque, online or other
            notes: Optional free text
            external_reference: Checkout session id for online payments

        Returns:
            Created Payment object

        Raises:
            NotFoundError: If tenant does not exist
            ValidationError: If amount is not positive or type/method unknown
        """
        tenant = self.db.get(Tenant, tenant_id)
        if not tenant:
            raise NotFoundError("Tenant not found.")

        value = parse_amount(amount, "Amount", allow_zero=False)
        payment_type = _coerce_enum(PaymentType, payment_type, "payment type")
        method = _coerce_enum(PaymentMethod, method, "payment method")

        payment = Payment(
            tenant_id=tenant.id,
            amount=value,
            paid_on=paid_on or date.today(),
            billing_month=billing_month.first_day if billing_month else None,
            payment_type=payment_type.value,
            method=method.value,
            notes=(notes or "").strip() or None,
            external_reference=external_reference,
        )
        self.db.add(payment)
        self.db.commit()
        self.db.refresh(payment)
        logger.info(
            f"Recorded {payment.payment_type} payment {payment.id} for tenant {tenant.id}: "
            f"{payment.amount} via {payment.method} (month={billing_month or '-'})"
        )
        return payment

    def get_payment(self, payment_id: int) -> Payment:
        payment = self.db.get(Payment, payment_id)
        if not payment:
            raise NotFoundError("Payment not found.")
        return payment

    def find_by_reference(self, external_reference: str) -> Optional[Payment]:
        return (
            self.db.query(Payment)
            .filter(Payment.external_reference == external_reference)
            .first()
        )

    def list_for_tenant(self, tenant_id: int) -> list[Payment]:
        """Payments of one tenant, newest first."""
        return (
            self.db.query(Payment)
            .filter(Payment.tenant_id == tenant_id)
            .order_by(Payment.paid_on.desc(), Payment.id.desc())
            .all()
        )

    def list_for_tenants(
        self,
        tenant_ids: Iterable[int],
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> list[Payment]:
        """Payments of several tenants, optionally within an inclusive paid_on range.

        Tenant and room are eager-loaded for payment logs.
        """
        ids = list(tenant_ids)
        if not ids:
            return []
        query = (
            self.db.query(Payment)
            .options(joinedload(Payment.tenant).joinedload(Tenant.room))
            .filter(Payment.tenant_id.in_(ids))
        )
        if start is not None:
            query = query.filter(Payment.paid_on >= start)
        if end is not None:
            query = query.filter(Payment.paid_on <= end)
        return query.order_by(Payment.paid_on.desc(), Payment.id.desc()).all()

    def delete_payment(self, payment_id: int) -> None:
        """Remove a payment recorded by mistake."""
        payment = self.get_payment(payment_id)
        self.db.delete(payment)
        self.db.commit()
        logger.warning(f"Deleted payment {payment_id} of tenant {payment.tenant_id}")

    @staticmethod
    def to_record(payment: Payment) -> PaymentRecord:
        payment_type = None
        if payment.payment_type:
            try:
                payment_type = PaymentType(payment.payment_type)
            except ValueError:
                payment_type = PaymentType.OTHER
        return PaymentRecord(
            id=payment.id,
            tenant_id=payment.tenant_id,
            amount=payment.amount,
            paid_on=payment.paid_on,
            billing_month=MonthKey.from_date(payment.billing_month) if payment.billing_month else None,
            payment_type=payment_type,
        )

    @classmethod
    def to_records(cls, payments: Sequence[Payment]) -> list[PaymentRecord]:
        """Convert rows to ledger records, skipping non-positive amounts."""
        records = []
        for payment in payments:
            if payment.amount is None or payment.amount <= 0:
                logger.warning(
                    f"Ignoring payment {payment.id} of tenant {payment.tenant_id} "
                    f"with non-positive amount {payment.amount}"
                )
                continue
            records.append(cls.to_record(payment))
        return records

    def records_by_tenant(self, tenant_ids: Iterable[int]) -> dict[int, list[PaymentRecord]]:
        """Ledger records of several tenants grouped by tenant id."""
        grouped: dict[int, list[PaymentRecord]] = defaultdict(list)
        for record in self.to_records(self.list_for_tenants(tenant_ids)):
            grouped[record.tenant_id].append(record)
        return dict(grouped)

    def month_status(self, tenant: Tenant, month: MonthKey) -> MonthStatus:
        """Evaluate one month for a tenant against their full ledger."""
        records = self.to_records(self.list_for_tenant(tenant.id))
        return evaluate_month(terms_of(tenant), records, month)


__all__ = ["PaymentService"]

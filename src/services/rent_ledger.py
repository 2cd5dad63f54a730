"""Rent ledger evaluation: is a tenant's month paid, partially paid or pending?

Pure functions over a point-in-time snapshot of billing terms and payment
records. Nothing here touches the database or logs; callers convert ORM rows
with PaymentService.to_records() and report data problems themselves.

Matching rules for a month:
- deposits never count towards a month
- non-positive amounts are ignored
- a record tagged with a billing month counts only for that month
- an untagged (legacy) record counts for the month of its paid-on date
"""

from collections.abc import Iterable, Mapping, Sequence
from datetime import date, timedelta
from decimal import Decimal
from enum import Enum
from typing import NamedTuple

from src.models.payment import PaymentType

ZERO = Decimal("0")


def as_decimal(value: Decimal | int | float) -> Decimal:
    """Coerce an amount to Decimal; floats go through str to keep their printed value."""
    return value if isinstance(value, Decimal) else Decimal(str(value))


class MonthKey(NamedTuple):
    """Calendar month the ledger is evaluated against."""

    year: int
    month: int

    @classmethod
    def from_date(cls, value: date) -> "MonthKey":
        return cls(value.year, value.month)

    @classmethod
    def parse(cls, value: str) -> "MonthKey":
        """Parse 'YYYY-MM' or 'YYYY-MM-DD' (day ignored).

        Raises:
            ValueError: If the string is not a valid month
        """
        parts = value.strip().split("-")
        if len(parts) not in (2, 3):
            raise ValueError(f"Invalid month '{value}', expected YYYY-MM")
        try:
            year, month = int(parts[0]), int(parts[1])
        except ValueError as e:
            raise ValueError(f"Invalid month '{value}', expected YYYY-MM") from e
        if not 1 <= month <= 12:
            raise ValueError(f"Invalid month '{value}': month must be 1-12")
        return cls(year, month)

    @property
    def first_day(self) -> date:
        return date(self.year, self.month, 1)

    @property
    def last_day(self) -> date:
        return self.next().first_day - timedelta(days=1)

    def contains(self, value: date) -> bool:
        return value.year == self.year and value.month == self.month

    def previous(self) -> "MonthKey":
        if self.month == 1:
            return MonthKey(self.year - 1, 12)
        return MonthKey(self.year, self.month - 1)

    def next(self) -> "MonthKey":
        if self.month == 12:
            return MonthKey(self.year + 1, 1)
        return MonthKey(self.year, self.month + 1)

    def __str__(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"


class BillingTerms(NamedTuple):
    """Monthly amounts a tenant owes."""

    monthly_rent: Decimal
    monthly_maintenance: Decimal = ZERO

    @property
    def total_due(self) -> Decimal:
        return as_decimal(self.monthly_rent) + as_decimal(self.monthly_maintenance)


class PaymentRecord(NamedTuple):
    """Typed view of one ledger entry."""

    id: int | None
    tenant_id: int
    amount: Decimal
    paid_on: date
    billing_month: MonthKey | None = None
    payment_type: PaymentType | None = None  # None means rent


class PaymentOutcome(str, Enum):
    """Result of evaluating a month."""

    PAID = "paid"
    PARTIAL = "partial"
    PENDING = "pending"


class MonthStatus(NamedTuple):
    """Due/paid totals for one tenant and one month."""

    total_due: Decimal
    total_paid: Decimal
    outcome: PaymentOutcome

    @property
    def shortfall(self) -> Decimal:
        """Amount still owed for the month (0 once paid)."""
        if self.outcome == PaymentOutcome.PAID:
            return ZERO
        return self.total_due - self.total_paid


class TenantTerms(NamedTuple):
    """Minimal tenant snapshot needed for a building rollup."""

    tenant_id: int
    terms: BillingTerms
    is_active: bool = True


class BuildingSummary(NamedTuple):
    """Per-month tally over the active tenants of a building (or portfolio)."""

    occupied_count: int
    paid_count: int
    pending_count: int  # every active tenant not fully paid, partial included
    partial_count: int
    total_collected: Decimal


def counts_towards(record: PaymentRecord, month: MonthKey) -> bool:
    """Return True if the record settles rent for the given month."""
    if record.payment_type == PaymentType.DEPOSIT:
        return False
    if record.amount is None or as_decimal(record.amount) <= ZERO:
        return False
    if record.billing_month is not None:
        return record.billing_month == month
    return month.contains(record.paid_on)


def evaluate_month(
    terms: BillingTerms,
    payments: Iterable[PaymentRecord],
    month: MonthKey,
) -> MonthStatus:
    """Compute the payment status of a month for one tenant.

    Args:
        terms: Current billing terms of the tenant
        payments: The tenant's payment records (any order)
        month: Month to evaluate

    Returns:
        MonthStatus with total due, total paid and outcome
    """
    total_due = terms.total_due
    if total_due <= ZERO:
        return MonthStatus(total_due=total_due, total_paid=ZERO, outcome=PaymentOutcome.PAID)

    total_paid = sum((as_decimal(p.amount) for p in payments if counts_towards(p, month)), ZERO)

    if total_paid == ZERO:
        outcome = PaymentOutcome.PENDING
    elif total_paid >= total_due:
        outcome = PaymentOutcome.PAID
    else:
        outcome = PaymentOutcome.PARTIAL

    return MonthStatus(total_due=total_due, total_paid=total_paid, outcome=outcome)


def summarize_building(
    tenants: Sequence[TenantTerms],
    payments_by_tenant: Mapping[int, Sequence[PaymentRecord]],
    month: MonthKey,
) -> BuildingSummary:
    """Tally month outcomes over active tenants.

    Vacated tenants are skipped. Tenants missing from payments_by_tenant are
    treated as having no payments.
    """
    occupied = paid = partial = 0
    collected = ZERO

    for tenant in tenants:
        if not tenant.is_active:
            continue
        occupied += 1
        status = evaluate_month(tenant.terms, payments_by_tenant.get(tenant.tenant_id, ()), month)
        collected += status.total_paid
        if status.outcome == PaymentOutcome.PAID:
            paid += 1
        elif status.outcome == PaymentOutcome.PARTIAL:
            partial += 1

    return BuildingSummary(
        occupied_count=occupied,
        paid_count=paid,
        pending_count=occupied - paid,
        partial_count=partial,
        total_collected=collected,
    )


__all__ = [
    "BillingTerms",
    "BuildingSummary",
    "MonthKey",
    "MonthStatus",
    "PaymentOutcome",
    "PaymentRecord",
    "TenantTerms",
    "as_decimal",
    "counts_towards",
    "evaluate_month",
    "summarize_building",
]

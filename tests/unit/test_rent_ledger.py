"""Tests for month evaluation and building rollups."""

import random
from datetime import date
from decimal import Decimal

import pytest

from src.models.payment import PaymentType
from src.services.rent_ledger import (
    BillingTerms,
    MonthKey,
    PaymentOutcome,
    PaymentRecord,
    TenantTerms,
    counts_towards,
    evaluate_month,
    summarize_building,
)

TERMS = BillingTerms(monthly_rent=Decimal("8000"), monthly_maintenance=Decimal("2000"))
MARCH = MonthKey(2024, 3)
APRIL = MonthKey(2024, 4)


def rec(amount, paid_on=date(2024, 3, 5), billing_month=None, payment_type=PaymentType.RENT, tenant_id=1):
    return PaymentRecord(
        id=None,
        tenant_id=tenant_id,
        amount=Decimal(str(amount)),
        paid_on=paid_on,
        billing_month=billing_month,
        payment_type=payment_type,
    )


class TestMonthKey:
    def test_parse_month_and_date_forms(self) -> None:
        assert MonthKey.parse("2024-03") == MARCH
        assert MonthKey.parse("2024-03-01") == MARCH

    @pytest.mark.parametrize("value", ["2024", "2024-13", "March", "2024-xx"])
    def test_parse_rejects_invalid(self, value) -> None:
        with pytest.raises(ValueError):
            MonthKey.parse(value)

    def test_bounds_and_neighbours(self) -> None:
        assert MonthKey(2024, 2).last_day == date(2024, 2, 29)
        assert MonthKey(2024, 12).next() == MonthKey(2025, 1)
        assert MonthKey(2024, 1).previous() == MonthKey(2023, 12)
        assert str(MARCH) == "2024-03"


class TestEvaluateMonth:
    def test_fully_paid_with_billing_month(self) -> None:
        status = evaluate_month(TERMS, [rec(10000, billing_month=MARCH)], MARCH)

        assert status.outcome == PaymentOutcome.PAID
        assert status.total_due == Decimal("10000")
        assert status.total_paid == Decimal("10000")
        assert status.shortfall == Decimal("0")

    def test_half_paid_is_partial(self) -> None:
        status = evaluate_month(TERMS, [rec(5000, billing_month=MARCH)], MARCH)

        assert status.outcome == PaymentOutcome.PARTIAL
        assert status.shortfall == Decimal("5000")

    def test_untagged_payment_matches_paid_on_month(self) -> None:
        status = evaluate_month(TERMS, [rec(10000, paid_on=date(2024, 3, 15))], MARCH)

        assert status.outcome == PaymentOutcome.PAID

    def test_deposit_is_excluded(self) -> None:
        deposit = rec(50000, billing_month=MonthKey(2024, 2), payment_type=PaymentType.DEPOSIT)

        status = evaluate_month(TERMS, [deposit], MARCH)

        assert status.outcome == PaymentOutcome.PENDING
        assert status.total_paid == Decimal("0")

    def test_deposit_tagged_for_the_month_still_excluded(self) -> None:
        deposit = rec(50000, billing_month=MARCH, payment_type=PaymentType.DEPOSIT)

        assert evaluate_month(TERMS, [deposit], MARCH).total_paid == Decimal("0")

    def test_billing_month_mismatch(self) -> None:
        payments = [rec(10000, paid_on=date(2024, 3, 28), billing_month=APRIL)]

        assert evaluate_month(TERMS, payments, MARCH).outcome == PaymentOutcome.PENDING
        assert evaluate_month(TERMS, payments, APRIL).outcome == PaymentOutcome.PAID

    def test_billing_month_beats_paid_on_date(self) -> None:
        # Paid in March for February arrears
        payments = [rec(10000, paid_on=date(2024, 3, 2), billing_month=MonthKey(2024, 2))]

        assert evaluate_month(TERMS, payments, MonthKey(2024, 2)).outcome == PaymentOutcome.PAID
        assert evaluate_month(TERMS, payments, MARCH).total_paid == Decimal("0")

    def test_exact_amount_is_paid_and_overpayment_is_paid(self) -> None:
        exact = evaluate_month(TERMS, [rec(6000, billing_month=MARCH), rec(4000)], MARCH)
        over = evaluate_month(TERMS, [rec(12000, billing_month=MARCH)], MARCH)

        assert exact.outcome == PaymentOutcome.PAID
        assert over.outcome == PaymentOutcome.PAID
        assert over.total_paid == Decimal("12000")

    def test_zero_due_is_paid(self) -> None:
        status = evaluate_month(BillingTerms(Decimal("0"), Decimal("0")), [], MARCH)

        assert status.outcome == PaymentOutcome.PAID
        assert status.total_paid == Decimal("0")

    def test_negative_due_is_paid(self) -> None:
        status = evaluate_month(BillingTerms(Decimal("-500"), Decimal("0")), [rec(1000)], MARCH)

        assert status.outcome == PaymentOutcome.PAID
        assert status.total_paid == Decimal("0")
        assert status.total_due == Decimal("-500")

    def test_maintenance_and_other_payments_count(self) -> None:
        payments = [
            rec(8000, billing_month=MARCH),
            rec(1500, billing_month=MARCH, payment_type=PaymentType.MAINTENANCE),
            rec(500, paid_on=date(2024, 3, 20), payment_type=PaymentType.OTHER),
        ]

        status = evaluate_month(TERMS, payments, MARCH)

        assert status.total_paid == Decimal("10000")
        assert status.outcome == PaymentOutcome.PAID

    def test_float_amounts_are_coerced(self) -> None:
        terms = BillingTerms(8000.0, 2000.0)
        payment = PaymentRecord(id=None, tenant_id=1, amount=4000.5, paid_on=date(2024, 3, 5))

        status = evaluate_month(terms, [payment], MARCH)

        assert status.outcome == PaymentOutcome.PARTIAL
        assert status.total_paid == Decimal("4000.5")
        assert status.shortfall == Decimal("5999.5")

    def test_non_positive_amounts_ignored(self) -> None:
        payments = [rec(0, billing_month=MARCH), rec(-500, billing_month=MARCH), rec(3000)]

        status = evaluate_month(TERMS, payments, MARCH)

        assert status.total_paid == Decimal("3000")
        assert status.outcome == PaymentOutcome.PARTIAL

    def test_month_boundaries(self) -> None:
        payments = [rec(4000, paid_on=date(2024, 2, 29)), rec(5000, paid_on=date(2024, 3, 1))]
        payments.append(rec(1000, paid_on=date(2024, 3, 31)))
        payments.append(rec(7000, paid_on=date(2024, 4, 1)))

        assert evaluate_month(TERMS, payments, MARCH).total_paid == Decimal("6000")

    def test_order_independent_and_deterministic(self) -> None:
        payments = [
            rec(2500, billing_month=MARCH),
            rec(1500, paid_on=date(2024, 3, 20)),
            rec(50000, payment_type=PaymentType.DEPOSIT),
            rec(3000, billing_month=APRIL),
            rec(1000, paid_on=date(2024, 2, 10)),
        ]
        expected = evaluate_month(TERMS, payments, MARCH)

        rng = random.Random(7)
        for _ in range(10):
            shuffled = payments[:]
            rng.shuffle(shuffled)
            assert evaluate_month(TERMS, shuffled, MARCH) == expected
        assert expected.total_paid == Decimal("4000")

    def test_untyped_record_counts_as_rent(self) -> None:
        record = rec(10000, billing_month=MARCH, payment_type=None)

        assert counts_towards(record, MARCH)


class TestSummarizeBuilding:
    def test_counts_and_collected_total(self) -> None:
        tenants = [
            TenantTerms(1, TERMS),
            TenantTerms(2, TERMS),
            TenantTerms(3, TERMS),
            TenantTerms(4, TERMS, is_active=False),
        ]
        payments = {
            1: [rec(10000, billing_month=MARCH, tenant_id=1)],
            2: [rec(4000, billing_month=MARCH, tenant_id=2)],
            4: [rec(10000, billing_month=MARCH, tenant_id=4)],
        }

        summary = summarize_building(tenants, payments, MARCH)

        assert summary.occupied_count == 3
        assert summary.paid_count == 1
        assert summary.partial_count == 1
        assert summary.pending_count == 2
        assert summary.total_collected == Decimal("14000")

    def test_empty_building(self) -> None:
        summary = summarize_building([], {}, MARCH)

        assert summary.occupied_count == 0
        assert summary.pending_count == 0
        assert summary.total_collected == Decimal("0")

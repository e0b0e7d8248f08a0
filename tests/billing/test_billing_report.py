from datetime import date, datetime

import pytest

from src.meal_billing.meal_billing.billing.aggregator import PayableAggregator
from src.meal_billing.meal_billing.billing.report import BillingPeriodReport
from src.meal_billing.meal_billing.core.constants import MONTHLY_EXPENSE_PER_HEAD
from src.meal_billing.meal_billing.core.enums import AttendanceStatus, MembershipStatus
from src.meal_billing.meal_billing.core.exceptions import ValidationError

PRESENT = AttendanceStatus.PRESENT
ABSENT = AttendanceStatus.ABSENT


@pytest.fixture
def report(store, history, members, attendance, ledger, set_status):
    store.upsert_version(MONTHLY_EXPENSE_PER_HEAD, "3000", date(2025, 1, 1), actor=1)

    members.add(1, created=datetime(2025, 1, 1, 9, 0), full_name="Arif")
    attendance.add(1, date(2025, 1, 2), PRESENT, True)
    attendance.add(1, date(2025, 1, 3), PRESENT, False, fine="50")
    attendance.add(1, date(2025, 1, 4), ABSENT, True, fine="50")
    ledger.add_guest(1, date(2025, 1, 5), "80")
    ledger.add_payment(1, "1000")

    members.add(2, created=datetime(2025, 1, 10, 9, 0), full_name="Nadia")
    set_status(2, MembershipStatus.INACTIVE, datetime(2025, 1, 21, 14, 0))
    attendance.add(2, date(2025, 1, 12), PRESENT, True)
    attendance.add(2, date(2025, 1, 25), PRESENT, False, fine="50")
    ledger.add_guest(2, date(2025, 1, 15), "80")
    ledger.add_payment(2, "500")

    # Never active during the month.
    members.add(3, created=datetime(2025, 1, 1, 9, 0), full_name="Gone")
    set_status(3, MembershipStatus.INACTIVE, datetime(2025, 1, 1, 10, 0))

    # Joins after the period.
    members.add(4, created=datetime(2025, 2, 5, 9, 0), full_name="Later")

    aggregator = PayableAggregator(store, history, attendance, ledger)
    return BillingPeriodReport(aggregator, history, members, attendance, ledger)


def test_rows_skip_members_without_active_days(report):
    result = report.build(start=date(2025, 1, 1), end=date(2025, 1, 31), today=date(2025, 1, 31))

    assert [r["user_id"] for r in result.rows] == [1, 2]
    assert not result.approximate


def test_row_money_and_tallies(report):
    rows = {r["user_id"]: r for r in report.build(start=date(2025, 1, 1), end=date(2025, 1, 31), today=date(2025, 1, 31)).rows}

    arif = rows[1]
    assert arif["active_days"] == 31
    assert arif["base_expense"] == "3100.00"
    assert arif["fines"] == "100.00"
    assert arif["guest_expenses"] == "80.00"
    assert arif["payments"] == "1000.00"
    assert arif["total_payable"] == "2280.00"
    assert (arif["total_opened"], arif["total_closed"]) == (2, 1)
    assert (arif["total_unopened"], arif["total_unclosed"]) == (1, 1)
    assert arif["guest_count"] == 1

    nadia = rows[2]
    assert nadia["active_days"] == 11
    assert nadia["base_expense"] == "1100.00"
    assert nadia["fines"] == "0.00"
    assert nadia["total_payable"] == "680.00"
    # The 25th falls after deactivation.
    assert (nadia["total_opened"], nadia["total_closed"]) == (1, 0)


def test_stats_total_the_rows(report):
    stats = report.build(start=date(2025, 1, 1), end=date(2025, 1, 31), today=date(2025, 1, 31)).stats

    assert stats["total_days"] == 31
    assert stats["sundays"] == 4
    assert stats["work_days"] == 27
    assert stats["total_users"] == 2
    assert stats["total_payable"] == "2960.00"
    assert stats["base_expense"] == "4200.00"
    assert stats["guest_count"] == 2
    assert stats["total_unopened"] == 1


def test_rejects_inverted_range(report):
    with pytest.raises(ValidationError):
        report.build(start=date(2025, 1, 31), end=date(2025, 1, 1))

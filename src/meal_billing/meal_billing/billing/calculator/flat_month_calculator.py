from __future__ import annotations

from decimal import Decimal

from ...core.constants import DAYS_PER_BILLING_MONTH
from .base import BaseExpenseCalculator


class FlatMonthCalculator(BaseExpenseCalculator):
    """Standard rule: monthly / 30 per active day, whatever the calendar month length.

    The flat divisor is a known simplification kept for parity with existing bills.
    """

    def __init__(self, days_per_month: int = DAYS_PER_BILLING_MONTH):
        self._days_per_month = int(days_per_month)

    def base_expense(self, monthly_expense: Decimal, active_days: int) -> Decimal:
        if active_days <= 0:
            return Decimal("0")
        return monthly_expense * active_days / self._days_per_month

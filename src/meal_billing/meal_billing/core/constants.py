"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from decimal import Decimal

from .enums import MembershipStatus

# Setting keys
CLOSE_TIME = "close_time"
FINE_AMOUNT_UNCLOSED = "fine_amount_unclosed"
FINE_AMOUNT_UNOPENED = "fine_amount_unopened"
GUEST_MEAL_AMOUNT = "guest_meal_amount"
MONTHLY_EXPENSE_PER_HEAD = "monthly_expense_per_head"

DEFAULT_CLOSE_TIME = "18:00"

# Flat month used to prorate the monthly base expense.
DAYS_PER_BILLING_MONTH = 30

MONEY_PLACES = Decimal("0.01")
ZERO = Decimal("0")

DEFAULT_MEMBER_STATUS = MembershipStatus.ACTIVE

MEMBERSHIP_HISTORY_TABLE = "membership_status_changes"

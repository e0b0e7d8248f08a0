from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal

from ..core.constants import ZERO


@dataclass(frozen=True)
class GuestCharge:
    guest_id: int
    inviter_id: int
    guest_date: date
    amount: Decimal


@dataclass(frozen=True)
class Payment:
    transaction_id: int
    user_id: int
    amount: Decimal
    created_at: datetime


@dataclass(frozen=True)
class PayableBreakdown:
    """What a member owes for a window. Money fields are quantized to cents."""

    user_id: int
    window_start: date
    window_end: date
    active_days: int = 0
    base_expense: Decimal = ZERO
    fines: Decimal = ZERO
    guest_expenses: Decimal = ZERO
    payments: Decimal = ZERO
    total_payable: Decimal = ZERO
    approximate: bool = False

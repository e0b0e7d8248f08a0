from __future__ import annotations

from dataclasses import replace
from datetime import date
from typing import Optional

from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import as_date, today_local
from ..common.money import quantize_money, sum_money
from ..common.validators import require_date_range
from ..core.constants import MONTHLY_EXPENSE_PER_HEAD, ZERO
from ..core.enums import MembershipStatus
from ..membership.history import MembershipHistory, MembershipTimeline
from ..membership.model import Member
from ..settings.service import TemporalSettingsStore
from .calculator.base import BaseExpenseCalculator
from .calculator.flat_month_calculator import FlatMonthCalculator
from .model import PayableBreakdown
from .repository import LedgerRepository


class PayableAggregator:
    """Read-only projection of what a member owes over a window.

    Fetches the status log, attendance, guest charges and payments once per
    call and folds over them in memory. Nothing is written.
    """

    def __init__(
        self,
        settings: TemporalSettingsStore,
        membership: MembershipHistory,
        attendance: AttendanceRepository,
        ledger: LedgerRepository,
        *,
        calculator: Optional[BaseExpenseCalculator] = None,
    ):
        self._settings = settings
        self._membership = membership
        self._attendance = attendance
        self._ledger = ledger
        self._calculator = calculator or FlatMonthCalculator()

    def payable_for(
        self,
        user_id: int,
        window_start: date,
        window_end: date,
        *,
        today: Optional[date] = None,
    ) -> PayableBreakdown:
        window_start, window_end = as_date(window_start), as_date(window_end)
        require_date_range(window_start, window_end)
        member = self._membership.member(user_id)
        empty = PayableBreakdown(user_id=member.user_id, window_start=window_start, window_end=window_end)

        start = max(window_start, member.created_on)
        if start > window_end:
            return empty

        timeline = self._membership.timeline(member.user_id, window_end, member=member)
        end = min(window_end, self._last_active_or_existing_day(member, timeline, window_end))
        if start > end:
            return self._mark(empty, timeline)

        active_days = timeline.active_days(start, end)
        if active_days == 0:
            return self._mark(empty, timeline)

        monthly = self._settings.value_at(MONTHLY_EXPENSE_PER_HEAD, as_date(today or today_local()))
        base_expense = self._calculator.base_expense(monthly, active_days)

        fines = sum_money(
            rec.fine_amount
            for rec in self._attendance.list_for_user(member.user_id, start=start, end=end)
            if start <= rec.meal_date <= end and timeline.is_active(rec.meal_date)
        )
        guest_expenses = sum_money(
            g.amount
            for g in self._ledger.list_guest_charges(start=start, end=end, inviter_id=member.user_id)
            if start <= g.guest_date <= end and timeline.is_active(g.guest_date)
        )
        payments = sum_money(p.amount for p in self._ledger.list_payments(user_id=member.user_id))

        total = max(ZERO, base_expense + fines + guest_expenses - payments)

        return PayableBreakdown(
            user_id=member.user_id,
            window_start=window_start,
            window_end=window_end,
            active_days=active_days,
            base_expense=quantize_money(base_expense),
            fines=quantize_money(fines),
            guest_expenses=quantize_money(guest_expenses),
            payments=quantize_money(payments),
            total_payable=quantize_money(total),
            approximate=timeline.approximate,
        )

    @staticmethod
    def _last_active_or_existing_day(member: Member, timeline: MembershipTimeline, window_end: date) -> date:
        if member.status == MembershipStatus.ACTIVE:
            return window_end
        last = timeline.last_change()
        if timeline.approximate or last is None:
            return member.updated_at.date()
        if last.status == MembershipStatus.INACTIVE:
            return last.effective_day
        # Deactivated after the window closed.
        return window_end

    @staticmethod
    def _mark(breakdown: PayableBreakdown, timeline: MembershipTimeline) -> PayableBreakdown:
        return replace(breakdown, approximate=timeline.approximate)

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional

from ..attendance.remark import RemarkTally
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import as_date, iter_days
from ..common.money import format_money
from ..common.validators import require_date_range
from ..core.constants import ZERO
from ..membership.history import MembershipHistory, end_of_day
from ..membership.repository import MemberRepository
from .aggregator import PayableAggregator
from .repository import LedgerRepository

_MONEY_FIELDS = ("base_expense", "fines", "guest_expenses", "payments", "total_payable")
_TALLY_FIELDS = ("total_opened", "total_closed", "total_unopened", "total_unclosed", "guest_count")


@dataclass(frozen=True)
class BillingReport:
    rows: list[dict]
    stats: dict
    approximate: bool = False


class BillingPeriodReport:
    def __init__(
        self,
        aggregator: PayableAggregator,
        membership: MembershipHistory,
        members: MemberRepository,
        attendance: AttendanceRepository,
        ledger: LedgerRepository,
    ):
        self._aggregator = aggregator
        self._membership = membership
        self._members = members
        self._attendance = attendance
        self._ledger = ledger

    def build(self, *, start: date, end: date, today: Optional[date] = None) -> BillingReport:
        start, end = as_date(start), as_date(end)
        require_date_range(start, end)

        attendance_by_user = defaultdict(list)
        for rec in self._attendance.list_range(start=start, end=end):
            attendance_by_user[rec.user_id].append(rec)
        guests_by_user = defaultdict(list)
        for g in self._ledger.list_guest_charges(start=start, end=end):
            guests_by_user[g.inviter_id].append(g)

        rows: list[dict] = []
        totals: dict[str, Decimal] = {f: ZERO for f in _MONEY_FIELDS}
        counts: dict[str, int] = {f: 0 for f in _TALLY_FIELDS}
        approximate = False

        for member in self._members.list_created_before(end_of_day(end)):
            breakdown = self._aggregator.payable_for(member.user_id, start, end, today=today)
            approximate = approximate or breakdown.approximate
            if breakdown.active_days == 0:
                continue

            timeline = self._membership.timeline(member.user_id, end, member=member)
            tally = RemarkTally.from_records(
                r for r in attendance_by_user[member.user_id] if timeline.is_active(r.meal_date)
            )
            guest_count = sum(1 for g in guests_by_user[member.user_id] if timeline.is_active(g.guest_date))

            row = {
                "user_id": member.user_id,
                "full_name": member.full_name,
                "email": member.email,
                "active_days": breakdown.active_days,
                "total_opened": tally.opened,
                "total_closed": tally.closed,
                "total_unopened": tally.unopened,
                "total_unclosed": tally.unclosed,
                "guest_count": guest_count,
                "approximate": breakdown.approximate,
            }
            for f in _MONEY_FIELDS:
                amount = getattr(breakdown, f)
                totals[f] += amount
                row[f] = format_money(amount)
            for f in _TALLY_FIELDS:
                counts[f] += row[f]
            rows.append(row)

        rows.sort(key=lambda x: (Decimal(x["total_payable"]), x["full_name"]), reverse=True)

        days = list(iter_days(start, end))
        sundays = sum(1 for d in days if d.weekday() == 6)
        stats = {
            "start": start.strftime("%Y-%m-%d"),
            "end": end.strftime("%Y-%m-%d"),
            "total_days": len(days),
            "work_days": len(days) - sundays,
            "sundays": sundays,
            "total_users": len(rows),
            **counts,
            **{f: format_money(v) for f, v in totals.items()},
        }
        return BillingReport(rows=rows, stats=stats, approximate=approximate)

from __future__ import annotations

import logging
from bisect import bisect_right
from datetime import date, datetime, time
from typing import Optional, Sequence

from ..common.datetime_utils import as_date, iter_days, now_local
from ..core.constants import DEFAULT_MEMBER_STATUS
from ..core.enums import MembershipStatus
from ..core.exceptions import DegradedDataWarning, NotFoundError, StorageError, ValidationError
from .model import Member, MembershipStatusChange
from .repository import MemberRepository, StatusChangeRepository

logger = logging.getLogger(__name__)


def end_of_day(day: date) -> datetime:
    return datetime.combine(day, time.max)


class MembershipTimeline:
    """A member's status per calendar day up to ``until``, answered from memory.

    Built from the change log fetched once. When ``warning`` is set the log
    was unavailable and the member's current status stands in for every day.
    """

    def __init__(
        self,
        member: Member,
        changes: Sequence[MembershipStatusChange],
        *,
        until: date,
        default_status: MembershipStatus = DEFAULT_MEMBER_STATUS,
        warning: Optional[DegradedDataWarning] = None,
    ):
        self.member = member
        self.until = until
        self.warning = warning
        self._default = default_status
        self._changes = sorted(changes, key=lambda c: (c.changed_at, c.change_id))
        self._days = [c.effective_day for c in self._changes]

    @property
    def approximate(self) -> bool:
        return self.warning is not None

    def last_change(self) -> Optional[MembershipStatusChange]:
        return self._changes[-1] if self._changes else None

    def status_on(self, day: date) -> MembershipStatus:
        day = as_date(day)
        if day > self.until:
            raise ValueError(f"{day} is after the timeline end {self.until}")
        if day < self.member.created_on:
            return MembershipStatus.INACTIVE
        if self.approximate:
            return self.member.status

        i = bisect_right(self._days, day)
        return self._changes[i - 1].status if i else self._default

    def is_active(self, day: date) -> bool:
        return self.status_on(day) == MembershipStatus.ACTIVE

    def active_days(self, start: date, end: date) -> int:
        """Count Active days in [max(start, created), end] with one pass over the log."""

        start = max(as_date(start), self.member.created_on)
        end = as_date(end)
        if end > self.until:
            raise ValueError(f"{end} is after the timeline end {self.until}")
        if start > end:
            return 0

        if self.approximate:
            if self.member.status != MembershipStatus.ACTIVE:
                return 0
            return (end - start).days + 1

        i = bisect_right(self._days, start)
        status = self._changes[i - 1].status if i else self._default
        count = 0
        for day in iter_days(start, end):
            while i < len(self._changes) and self._days[i] <= day:
                status = self._changes[i].status
                i += 1
            if status == MembershipStatus.ACTIVE:
                count += 1
        return count


class MembershipHistory:
    """Reconstructs Active/Inactive membership for any past day.

    ``history_available`` is decided once at wiring time (schema probe or
    config). When False, lookups fall back to the member's current status and
    results are marked approximate.
    """

    def __init__(
        self,
        members: MemberRepository,
        changes: StatusChangeRepository,
        *,
        history_available: bool = True,
        default_status: MembershipStatus = DEFAULT_MEMBER_STATUS,
    ):
        self._members = members
        self._changes = changes
        self._history_available = bool(history_available)
        self._default = default_status

    @property
    def history_available(self) -> bool:
        return self._history_available

    def member(self, user_id: int) -> Member:
        member = self._members.get_by_id(int(user_id))
        if not member:
            raise NotFoundError(f"User {user_id} does not exist")
        return member

    def timeline(self, user_id: int, until: date, *, member: Optional[Member] = None) -> MembershipTimeline:
        member = member or self.member(user_id)
        until = as_date(until)

        if not self._history_available:
            warning = DegradedDataWarning(
                f"membership history unavailable, using current status {member.status.value} "
                f"for user {member.user_id} through {until}"
            )
            logger.warning("%s", warning)
            return MembershipTimeline(member, [], until=until, default_status=self._default, warning=warning)

        changes = self._changes.list_for_user(member.user_id, until=end_of_day(until))
        return MembershipTimeline(member, changes, until=until, default_status=self._default)

    def status_on(self, user_id: int, day: date) -> MembershipStatus:
        day = as_date(day)
        return self.timeline(user_id, day).status_on(day)

    def active_day_count(self, user_id: int, start: date, end: date) -> int:
        end = as_date(end)
        return self.timeline(user_id, end).active_days(start, end)

    def record_change(
        self,
        user_id: int,
        status: MembershipStatus,
        changed_by: Optional[int],
        *,
        changed_at: Optional[datetime] = None,
    ) -> Optional[int]:
        """Append a status transition. Returns change_id, or None when nothing changed.

        Changes are append-only in time: ``changed_at`` may not precede the
        newest logged change, so the log's last row and the member's current
        status always agree.
        """

        if not self._history_available:
            raise StorageError("Membership history is not provisioned")

        member = self.member(user_id)
        status = MembershipStatus(status)
        changed_at = changed_at or now_local()
        if changed_at.date() < member.created_on:
            raise ValidationError("Status change cannot precede the user's creation")

        latest = self._changes.latest_for_user(member.user_id)
        if latest is not None and changed_at < latest.changed_at:
            raise ValidationError(
                f"Status change at {changed_at} precedes the latest recorded change at {latest.changed_at}"
            )
        current = latest.status if latest is not None else member.status
        if current == status:
            return None

        change_id = self._changes.append(
            user_id=member.user_id,
            status=status,
            changed_at=changed_at,
            changed_by=changed_by,
        )
        logger.info("user %s status %s -> %s at %s by %s", member.user_id, current.value, status.value, changed_at, changed_by)
        return change_id

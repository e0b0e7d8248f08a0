from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import MembershipStatus
from .model import Member, MembershipStatusChange


class MemberRepository(Protocol):
    def get_by_id(self, user_id: int) -> Optional[Member]:
        raise NotImplementedError

    def list_created_before(self, until: datetime) -> Sequence[Member]:
        """Members (role=user) created at or before ``until``, oldest first."""

        raise NotImplementedError


class StatusChangeRepository(Protocol):
    def list_for_user(self, user_id: int, *, until: datetime) -> Sequence[MembershipStatusChange]:
        """Changes with changed_at <= until, ordered by changed_at ascending."""

        raise NotImplementedError

    def latest_for_user(self, user_id: int) -> Optional[MembershipStatusChange]:
        """Newest change by (changed_at, change_id), or None when the log is empty."""
        raise NotImplementedError

    def append(
        self,
        *,
        user_id: int,
        status: MembershipStatus,
        changed_at: datetime,
        changed_by: Optional[int],
    ) -> int:
        """Append to the log and update the member's current status in one transaction.

        Returns change_id.
        """

        raise NotImplementedError

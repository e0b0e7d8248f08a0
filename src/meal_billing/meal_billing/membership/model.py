from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import MembershipStatus


@dataclass(frozen=True)
class Member:
    """Domain entity: a meal member as stored in the users table (current state only)."""

    user_id: int
    full_name: str
    email: str
    status: MembershipStatus
    created_at: datetime
    updated_at: datetime

    @property
    def created_on(self) -> date:
        return self.created_at.date()


@dataclass(frozen=True)
class MembershipStatusChange:
    change_id: int
    user_id: int
    status: MembershipStatus
    changed_at: datetime
    changed_by: Optional[int] = None

    @property
    def effective_day(self) -> date:
        """A change applies to the whole calendar day it was made on."""
        return self.changed_at.date()

from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import GuestCharge, Payment


class LedgerRepository(Protocol):
    """Read-only access to guest charges and payments (externally owned tables)."""

    def list_guest_charges(
        self,
        *,
        start: date,
        end: date,
        inviter_id: Optional[int] = None,
    ) -> Sequence[GuestCharge]:
        raise NotImplementedError

    def list_payments(self, *, user_id: Optional[int] = None) -> Sequence[Payment]:
        raise NotImplementedError

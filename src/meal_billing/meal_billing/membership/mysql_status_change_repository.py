from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..core.enums import MembershipStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import MembershipStatusChange
from .repository import StatusChangeRepository


def _to_change(r: dict) -> MembershipStatusChange:
    return MembershipStatusChange(
        change_id=int(r["change_id"]),
        user_id=int(r["user_id"]),
        status=MembershipStatus(r["status"]),
        changed_at=r["changed_at"],
        changed_by=r.get("changed_by"),
    )


class MySQLStatusChangeRepository(StatusChangeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_user(self, user_id: int, *, until: datetime) -> Sequence[MembershipStatusChange]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT change_id, user_id, status, changed_at, changed_by
                FROM membership_status_changes
                WHERE user_id=%s AND changed_at <= %s
                ORDER BY changed_at ASC, change_id ASC
                """,
                (int(user_id), until),
            )
            return [_to_change(r) for r in fetchall(cur)]

    def latest_for_user(self, user_id: int) -> Optional[MembershipStatusChange]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT change_id, user_id, status, changed_at, changed_by
                FROM membership_status_changes
                WHERE user_id=%s
                ORDER BY changed_at DESC, change_id DESC
                LIMIT 1
                """,
                (int(user_id),),
            )
            r = fetchone(cur)
            return _to_change(r) if r else None

    def append(
        self,
        *,
        user_id: int,
        status: MembershipStatus,
        changed_at: datetime,
        changed_by: Optional[int],
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO membership_status_changes(user_id, status, changed_at, changed_by)
                VALUES(%s,%s,%s,%s)
                """,
                (int(user_id), status.value, changed_at, changed_by),
            )
            change_id = int(cur.lastrowid)
            # Current status follows the newest log row only.
            cur.execute(
                """
                UPDATE users SET status=%s, updated_at=%s
                WHERE user_id=%s
                  AND NOT EXISTS (
                    SELECT 1 FROM membership_status_changes
                    WHERE user_id=%s AND changed_at > %s
                  )
                """,
                (status.value, changed_at, int(user_id), int(user_id), changed_at),
            )
            return change_id

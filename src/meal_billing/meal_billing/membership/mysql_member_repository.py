from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..core.enums import MembershipStatus, Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Member
from .repository import MemberRepository


def _to_member(r: dict) -> Member:
    return Member(
        user_id=int(r["user_id"]),
        full_name=r["full_name"],
        email=r["email"],
        status=MembershipStatus(r["status"]),
        created_at=r["created_at"],
        updated_at=r["updated_at"],
    )


class MySQLMemberRepository(MemberRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, user_id: int) -> Optional[Member]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT user_id, full_name, email, status, created_at, updated_at
                FROM users
                WHERE user_id=%s
                """,
                (int(user_id),),
            )
            r = fetchone(cur)
            return _to_member(r) if r else None

    def list_created_before(self, until: datetime) -> Sequence[Member]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT user_id, full_name, email, status, created_at, updated_at
                FROM users
                WHERE role=%s AND created_at <= %s
                ORDER BY created_at ASC, user_id ASC
                """,
                (Role.USER.value, until),
            )
            return [_to_member(r) for r in fetchall(cur)]

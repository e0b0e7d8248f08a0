from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..common.money import to_decimal
from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import AttendanceRecord
from .repository import AttendanceRepository


def _to_record(r: dict) -> AttendanceRecord:
    status = r.get("status")
    is_open = r.get("is_open")
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        user_id=int(r["user_id"]),
        meal_date=r["meal_date"],
        status=AttendanceStatus(status) if status else None,
        # Rows written before the open flag existed count as open.
        is_open=True if is_open is None else bool(is_open),
        fine_amount=to_decimal(r.get("fine_amount")),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_user(self, user_id: int, *, start: date, end: date) -> Sequence[AttendanceRecord]:
        return self.list_range(start=start, end=end, user_id=user_id)

    def list_range(self, *, start: date, end: date, user_id: Optional[int] = None) -> Sequence[AttendanceRecord]:
        clauses = ["meal_date BETWEEN %s AND %s"]
        params: list[object] = [start, end]

        if user_id is not None:
            clauses.append("user_id=%s")
            params.append(int(user_id))

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT attendance_id, user_id, meal_date, status, is_open, fine_amount
                FROM attendance
                WHERE {where}
                ORDER BY meal_date ASC, user_id ASC
                """,
                tuple(params),
            )
            return [_to_record(r) for r in fetchall(cur)]

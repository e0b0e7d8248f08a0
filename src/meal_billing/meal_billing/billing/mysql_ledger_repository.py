from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..common.money import to_decimal
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import GuestCharge, Payment
from .repository import LedgerRepository


class MySQLLedgerRepository(LedgerRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_guest_charges(
        self,
        *,
        start: date,
        end: date,
        inviter_id: Optional[int] = None,
    ) -> Sequence[GuestCharge]:
        clauses = ["guest_date BETWEEN %s AND %s"]
        params: list[object] = [start, end]
        if inviter_id is not None:
            clauses.append("inviter_id=%s")
            params.append(int(inviter_id))

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT guest_id, inviter_id, guest_date, amount
                FROM guests
                WHERE {where}
                ORDER BY guest_date ASC, guest_id ASC
                """,
                tuple(params),
            )
            return [
                GuestCharge(
                    guest_id=int(r["guest_id"]),
                    inviter_id=int(r["inviter_id"]),
                    guest_date=r["guest_date"],
                    amount=to_decimal(r.get("amount")),
                )
                for r in fetchall(cur)
            ]

    def list_payments(self, *, user_id: Optional[int] = None) -> Sequence[Payment]:
        clauses = ["1=1"]
        params: list[object] = []
        if user_id is not None:
            clauses.append("user_id=%s")
            params.append(int(user_id))

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT transaction_id, user_id, amount, created_at
                FROM transactions
                WHERE {where}
                ORDER BY created_at ASC, transaction_id ASC
                """,
                tuple(params),
            )
            return [
                Payment(
                    transaction_id=int(r["transaction_id"]),
                    user_id=int(r["user_id"]),
                    amount=to_decimal(r.get("amount")),
                    created_at=r["created_at"],
                )
                for r in fetchall(cur)
            ]

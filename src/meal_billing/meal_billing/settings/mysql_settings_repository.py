from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

import mysql.connector
from mysql.connector import errorcode

from ..core.enums import ValueType
from ..core.exceptions import OverlapError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import SettingDefinition
from .repository import SettingsRepository


def _to_definition(r: dict) -> SettingDefinition:
    return SettingDefinition(
        key=r["setting_key"],
        value_type=ValueType(r["value_type"]),
        unit=r.get("unit"),
        description=r.get("description"),
        default_value=r.get("default_value"),
    )


class MySQLSettingsRepository(SettingsRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_definition(self, key: str) -> Optional[SettingDefinition]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT setting_key, value_type, unit, description, default_value
                FROM setting_definitions
                WHERE setting_key=%s
                """,
                (key,),
            )
            r = fetchone(cur)
            return _to_definition(r) if r else None

    def list_definitions(self) -> Sequence[SettingDefinition]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT setting_key, value_type, unit, description, default_value
                FROM setting_definitions
                ORDER BY setting_key ASC
                """
            )
            return [_to_definition(r) for r in fetchall(cur)]

    def list_versions(self, key: Optional[str] = None) -> Sequence[dict]:
        clauses = ["1=1"]
        params: list[object] = []
        if key is not None:
            clauses.append("setting_key=%s")
            params.append(key)

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT version_id, setting_key, value, effective_from, effective_to, created_by, created_at
                FROM setting_versions
                WHERE {where}
                ORDER BY effective_from DESC, created_at DESC, version_id DESC
                """,
                tuple(params),
            )
            return fetchall(cur)

    def insert_version(
        self,
        *,
        key: str,
        value: str,
        effective_from: date,
        created_by: Optional[int],
        close_version_id: Optional[int] = None,
        close_effective_to: Optional[date] = None,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            # Serializes writers per key: the catalog row is the lock.
            cur.execute(
                "SELECT setting_key FROM setting_definitions WHERE setting_key=%s FOR UPDATE",
                (key,),
            )
            fetchall(cur)

            cur.execute(
                """
                SELECT version_id
                FROM setting_versions
                WHERE setting_key=%s AND effective_to IS NULL
                """,
                (key,),
            )
            open_ids = {int(r["version_id"]) for r in fetchall(cur)}
            expected = {int(close_version_id)} if close_version_id is not None else set()
            if open_ids != expected:
                raise OverlapError(f"Open version of {key} changed concurrently, retry")

            if close_version_id is not None:
                cur.execute(
                    """
                    UPDATE setting_versions
                    SET effective_to=%s
                    WHERE version_id=%s AND effective_to IS NULL
                    """,
                    (close_effective_to, int(close_version_id)),
                )

            try:
                cur.execute(
                    """
                    INSERT INTO setting_versions(setting_key, value, effective_from, effective_to, created_by)
                    VALUES(%s,%s,%s,NULL,%s)
                    """,
                    (key, value, effective_from, created_by),
                )
            except mysql.connector.IntegrityError as e:
                if e.errno == errorcode.ER_DUP_ENTRY:
                    raise OverlapError(f"A setting with effective date {effective_from} already exists for {key}") from e
                raise
            return int(cur.lastrowid)

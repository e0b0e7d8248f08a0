from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.service import AttendanceAssessor
from .billing.aggregator import PayableAggregator
from .billing.mysql_ledger_repository import MySQLLedgerRepository
from .billing.report import BillingPeriodReport
from .core.constants import MEMBERSHIP_HISTORY_TABLE
from .database.bootstrap import has_table
from .database.connection import DBConfig, DatabaseConnection
from .membership.history import MembershipHistory
from .membership.mysql_member_repository import MySQLMemberRepository
from .membership.mysql_status_change_repository import MySQLStatusChangeRepository
from .settings.mysql_settings_repository import MySQLSettingsRepository
from .settings.service import TemporalSettingsStore


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection

    settings_repo: MySQLSettingsRepository
    members_repo: MySQLMemberRepository
    status_changes_repo: MySQLStatusChangeRepository
    attendance_repo: MySQLAttendanceRepository
    ledger_repo: MySQLLedgerRepository

    settings_store: TemporalSettingsStore
    membership_history: MembershipHistory
    attendance_assessor: AttendanceAssessor
    payable_aggregator: PayableAggregator
    billing_report: BillingPeriodReport


def build_container(*, db_config: dict, history_available: Optional[bool] = None) -> Container:
    """Wire repositories and services.

    ``history_available=None`` probes the schema once for the status-change
    table; pass True/False to force it.
    """

    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    settings_repo = MySQLSettingsRepository(conn)
    members_repo = MySQLMemberRepository(conn)
    status_changes_repo = MySQLStatusChangeRepository(conn)
    attendance_repo = MySQLAttendanceRepository(conn)
    ledger_repo = MySQLLedgerRepository(conn)

    if history_available is None:
        history_available = has_table(db_config, MEMBERSHIP_HISTORY_TABLE)

    settings_store = TemporalSettingsStore(settings_repo)
    membership_history = MembershipHistory(
        members_repo,
        status_changes_repo,
        history_available=history_available,
    )
    attendance_assessor = AttendanceAssessor(settings_store)
    payable_aggregator = PayableAggregator(settings_store, membership_history, attendance_repo, ledger_repo)
    billing_report = BillingPeriodReport(
        payable_aggregator,
        membership_history,
        members_repo,
        attendance_repo,
        ledger_repo,
    )

    return Container(
        conn=conn,
        settings_repo=settings_repo,
        members_repo=members_repo,
        status_changes_repo=status_changes_repo,
        attendance_repo=attendance_repo,
        ledger_repo=ledger_repo,
        settings_store=settings_store,
        membership_history=membership_history,
        attendance_assessor=attendance_assessor,
        payable_aggregator=payable_aggregator,
        billing_report=billing_report,
    )

"""The one place where attendance remarks are derived.

Fine assessment, dashboards and billing reports all call ``RemarkEngine``.

| status  | is_open | remark    |
|---------|---------|-----------|
| None    | any     | None      |
| Present | True    | All Clear |
| Present | False   | Unopened  |
| Absent  | False   | All Clear |
| Absent  | True    | Unclosed  |
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional

from ..core.constants import FINE_AMOUNT_UNCLOSED, FINE_AMOUNT_UNOPENED
from ..core.enums import AttendanceStatus, Remark
from .model import AttendanceRecord

_REMARKS = {
    (AttendanceStatus.PRESENT, True): Remark.ALL_CLEAR,
    (AttendanceStatus.PRESENT, False): Remark.UNOPENED,
    (AttendanceStatus.ABSENT, False): Remark.ALL_CLEAR,
    (AttendanceStatus.ABSENT, True): Remark.UNCLOSED,
}

_FINE_SETTINGS = {
    Remark.UNCLOSED: FINE_AMOUNT_UNCLOSED,
    Remark.UNOPENED: FINE_AMOUNT_UNOPENED,
}


class RemarkEngine:
    @staticmethod
    def remark(status: Optional[AttendanceStatus], is_open: bool) -> Optional[Remark]:
        if status is None:
            return None
        return _REMARKS[(AttendanceStatus(status), bool(is_open))]

    @staticmethod
    def fine_setting_for(remark: Optional[Remark]) -> Optional[str]:
        """Setting key holding the fine for ``remark``; None when no fine applies."""
        if remark is None:
            return None
        return _FINE_SETTINGS.get(remark)


@dataclass
class RemarkTally:
    opened: int = 0
    closed: int = 0
    unopened: int = 0
    unclosed: int = 0

    def add(self, record: AttendanceRecord) -> None:
        if record.is_open:
            self.opened += 1
        else:
            self.closed += 1

        r = RemarkEngine.remark(record.status, record.is_open)
        if r == Remark.UNOPENED:
            self.unopened += 1
        elif r == Remark.UNCLOSED:
            self.unclosed += 1

    @classmethod
    def from_records(cls, records: Iterable[AttendanceRecord]) -> "RemarkTally":
        tally = cls()
        for rec in records:
            tally.add(rec)
        return tally

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from ..core.constants import CLOSE_TIME, GUEST_MEAL_AMOUNT, ZERO
from ..core.enums import AttendanceStatus, Remark
from ..settings.service import TemporalSettingsStore
from .remark import RemarkEngine


@dataclass(frozen=True)
class FineAssessment:
    remark: Optional[Remark]
    fine_amount: Decimal


class AttendanceAssessor:
    """Policy lookups for the attendance workflow, resolved as of the meal day."""

    def __init__(self, settings: TemporalSettingsStore):
        self._settings = settings

    def assess(self, status: Optional[AttendanceStatus], is_open: bool, meal_date: date) -> FineAssessment:
        r = RemarkEngine.remark(status, is_open)
        key = RemarkEngine.fine_setting_for(r)
        if key is None:
            return FineAssessment(remark=r, fine_amount=ZERO)
        return FineAssessment(remark=r, fine_amount=self._settings.value_at(key, meal_date))

    def guest_charge_amount(self, guest_date: date) -> Decimal:
        return self._settings.value_at(GUEST_MEAL_AMOUNT, guest_date)

    def can_change_meal(self, meal_date: date, now: datetime) -> bool:
        """Members may toggle a meal until the close time on its day."""
        cutoff = datetime.combine(meal_date, self._settings.value_at(CLOSE_TIME, meal_date))
        return now < cutoff

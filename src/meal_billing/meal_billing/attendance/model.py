from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional

from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: attendance for one member and one meal day.

    ``status`` is None until the meal is marked. ``is_open`` is the member's
    booking flag (open = meal requested). ``fine_amount`` is stored by the
    attendance workflow when the record is marked.
    """

    attendance_id: int
    user_id: int
    meal_date: date
    status: Optional[AttendanceStatus]
    is_open: bool
    fine_amount: Decimal

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Optional

from ..core.enums import ValueType


@dataclass(frozen=True)
class SettingDefinition:
    """Catalog entry: a policy key and the type of its values."""

    key: str
    value_type: ValueType
    unit: Optional[str] = None
    description: Optional[str] = None
    default_value: Optional[str] = None


@dataclass(frozen=True)
class SettingVersion:
    """One value of a setting over the inclusive range [effective_from, effective_to].

    ``effective_to`` is None while the version is open (latest for its key).
    ``value`` is typed (Decimal, time, bool or str).
    """

    version_id: int
    setting_key: str
    value: Any
    effective_from: date
    effective_to: Optional[date]
    created_by: Optional[int]
    created_at: datetime

    @property
    def is_open(self) -> bool:
        return self.effective_to is None

    def covers(self, day: date) -> bool:
        return self.effective_from <= day and (self.effective_to is None or self.effective_to >= day)

    def overlaps(self, start: date, end: Optional[date]) -> bool:
        """Whether [start, end] (end None = open) intersects this interval."""
        if end is not None and end < self.effective_from:
            return False
        if self.effective_to is not None and self.effective_to < start:
            return False
        return True

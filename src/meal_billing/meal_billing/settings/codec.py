from __future__ import annotations

import re
from datetime import datetime, time
from decimal import Decimal, InvalidOperation
from typing import Any

from ..core.constants import DEFAULT_CLOSE_TIME, ZERO
from ..core.enums import ValueType
from ..core.exceptions import ValidationError
from .model import SettingDefinition

_TIME_RE = re.compile(r"^([0-1]?[0-9]|2[0-3]):[0-5][0-9]$")

_TRUE = {"true", "1", "yes", "on"}
_FALSE = {"false", "0", "no", "off"}


class ValueCodec:
    """Converts typed setting values to and from their stored text form.

    Typed values: Decimal for ``number``, ``datetime.time`` for ``time``,
    bool for ``boolean`` and str for ``string``.
    """

    def parse(self, value_type: ValueType, raw: Any, *, field_name: str = "value") -> Any:
        """Validate caller input and return the typed value."""

        if value_type == ValueType.NUMBER:
            return self._parse_number(raw, field_name)
        if value_type == ValueType.TIME:
            return self._parse_time(raw, field_name)
        if value_type == ValueType.BOOLEAN:
            return self._parse_bool(raw, field_name)
        if raw is None:
            raise ValidationError(f"{field_name} is required")
        return str(raw)

    def encode(self, value_type: ValueType, value: Any) -> str:
        typed = self.parse(value_type, value)
        if value_type == ValueType.NUMBER:
            return format(typed.normalize(), "f")
        if value_type == ValueType.TIME:
            return typed.strftime("%H:%M")
        if value_type == ValueType.BOOLEAN:
            return "true" if typed else "false"
        return typed

    def decode(self, value_type: ValueType, stored: str) -> Any:
        return self.parse(value_type, stored, field_name="stored value")

    def default_for(self, definition: SettingDefinition) -> Any:
        if definition.value_type == ValueType.NUMBER:
            return ZERO
        if definition.value_type == ValueType.BOOLEAN:
            return self.decode(ValueType.BOOLEAN, "false")
        if definition.value_type == ValueType.TIME:
            return self.decode(ValueType.TIME, definition.default_value or DEFAULT_CLOSE_TIME)
        return definition.default_value or ""

    def render(self, value_type: ValueType, value: Any) -> Any:
        """JSON-friendly form of a typed value."""

        if value_type == ValueType.NUMBER:
            return self.encode(value_type, value)
        if value_type == ValueType.TIME:
            return value.strftime("%H:%M")
        return value

    @staticmethod
    def _parse_number(raw: Any, field_name: str) -> Decimal:
        if isinstance(raw, bool) or raw is None:
            raise ValidationError(f"{field_name} must be a non-negative number")
        if isinstance(raw, float):
            raw = repr(raw)
        try:
            number = Decimal(str(raw).strip()) if not isinstance(raw, Decimal) else raw
        except InvalidOperation:
            raise ValidationError(f"{field_name} must be a non-negative number")
        if not number.is_finite() or number < 0:
            raise ValidationError(f"{field_name} must be a non-negative number")
        return number

    @staticmethod
    def _parse_time(raw: Any, field_name: str) -> time:
        if isinstance(raw, time):
            return raw.replace(second=0, microsecond=0)
        text = str(raw or "").strip()
        if not _TIME_RE.match(text):
            raise ValidationError(f"{field_name} must be in HH:mm format (e.g., 18:00)")
        return datetime.strptime(text, "%H:%M").time()

    @staticmethod
    def _parse_bool(raw: Any, field_name: str) -> bool:
        if isinstance(raw, bool):
            return raw
        text = str(raw if raw is not None else "").strip().lower()
        if text in _TRUE:
            return True
        if text in _FALSE:
            return False
        raise ValidationError(f"{field_name} must be true or false")

"""Default catalog of billing policy settings."""

from __future__ import annotations

from ..core.constants import (
    CLOSE_TIME,
    DEFAULT_CLOSE_TIME,
    FINE_AMOUNT_UNCLOSED,
    FINE_AMOUNT_UNOPENED,
    GUEST_MEAL_AMOUNT,
    MONTHLY_EXPENSE_PER_HEAD,
)
from ..core.enums import ValueType
from .model import SettingDefinition

DEFAULT_DEFINITIONS: tuple[SettingDefinition, ...] = (
    SettingDefinition(
        key=CLOSE_TIME,
        value_type=ValueType.TIME,
        unit="HH:mm",
        description="Time after which users cannot change meal status",
        default_value=DEFAULT_CLOSE_TIME,
    ),
    SettingDefinition(
        key=FINE_AMOUNT_UNCLOSED,
        value_type=ValueType.NUMBER,
        unit="Rs",
        description="Fine amount for unclosed meals",
    ),
    SettingDefinition(
        key=FINE_AMOUNT_UNOPENED,
        value_type=ValueType.NUMBER,
        unit="Rs",
        description="Fine amount for unopened meals",
    ),
    SettingDefinition(
        key=GUEST_MEAL_AMOUNT,
        value_type=ValueType.NUMBER,
        unit="Rs",
        description="Amount charged per guest meal",
    ),
    SettingDefinition(
        key=MONTHLY_EXPENSE_PER_HEAD,
        value_type=ValueType.NUMBER,
        unit="Rs",
        description="Monthly base expense per user",
    ),
)

from datetime import time
from decimal import Decimal

import pytest

from src.meal_billing.meal_billing.core.enums import ValueType
from src.meal_billing.meal_billing.core.exceptions import ValidationError
from src.meal_billing.meal_billing.settings.codec import ValueCodec
from src.meal_billing.meal_billing.settings.model import SettingDefinition


codec = ValueCodec()


def test_number_accepts_numeric_text_and_ints():
    assert codec.parse(ValueType.NUMBER, "12.50") == Decimal("12.50")
    assert codec.parse(ValueType.NUMBER, 3000) == Decimal("3000")
    assert codec.parse(ValueType.NUMBER, 0.1) == Decimal("0.1")


@pytest.mark.parametrize("raw", ["-1", "abc", "", None, True, "NaN", "Infinity"])
def test_number_rejects_negative_and_garbage(raw):
    with pytest.raises(ValidationError):
        codec.parse(ValueType.NUMBER, raw)


def test_time_requires_hh_mm():
    assert codec.parse(ValueType.TIME, "18:00") == time(18, 0)
    assert codec.parse(ValueType.TIME, "7:05") == time(7, 5)
    for bad in ("24:00", "18:60", "1800", "18:00:00", ""):
        with pytest.raises(ValidationError):
            codec.parse(ValueType.TIME, bad)


def test_boolean_words():
    assert codec.parse(ValueType.BOOLEAN, "yes") is True
    assert codec.parse(ValueType.BOOLEAN, "OFF") is False
    assert codec.parse(ValueType.BOOLEAN, 1) is True
    with pytest.raises(ValidationError):
        codec.parse(ValueType.BOOLEAN, "maybe")


def test_string_is_coerced():
    assert codec.parse(ValueType.STRING, 42) == "42"
    with pytest.raises(ValidationError):
        codec.parse(ValueType.STRING, None)


def test_encode_uses_canonical_text():
    assert codec.encode(ValueType.NUMBER, Decimal("1000.00")) == "1000"
    assert codec.encode(ValueType.NUMBER, Decimal("12.50")) == "12.5"
    assert codec.encode(ValueType.TIME, "9:30") == "09:30"
    assert codec.encode(ValueType.BOOLEAN, "on") == "true"


def test_defaults_per_type():
    number = SettingDefinition(key="n", value_type=ValueType.NUMBER)
    close = SettingDefinition(key="t", value_type=ValueType.TIME, default_value="17:30")
    untimed = SettingDefinition(key="t2", value_type=ValueType.TIME)

    assert codec.default_for(number) == Decimal("0")
    assert codec.default_for(close) == time(17, 30)
    assert codec.default_for(untimed) == time(18, 0)

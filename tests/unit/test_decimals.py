"""Tests for ns_common.decimals."""

from decimal import Decimal

import pytest

from src.ns_common.decimals import (
    format_decimal,
    is_decimal_string,
    parse_decimal,
    quantize,
    to_decimal_string,
    working_precision,
)


class TestIsDecimalString:
    @pytest.mark.parametrize("value", ["5000", "0.25", ".5", "8.75", "0"])
    def test_valid(self, value: str) -> None:
        assert is_decimal_string(value) is True

    @pytest.mark.parametrize("value", ["", "-1", "1e5", "abc", "1.", "1,000", " 1"])
    def test_invalid(self, value: str) -> None:
        assert is_decimal_string(value) is False

    @pytest.mark.parametrize("value", ["５０００", "٥", "1.٥"])
    def test_non_ascii_digits_rejected(self, value: str) -> None:
        assert is_decimal_string(value) is False


class TestToDecimalString:
    def test_string_passthrough_stripped(self) -> None:
        assert to_decimal_string(" 5000 ") == "5000"

    def test_int_normalized(self) -> None:
        assert to_decimal_string(5000) == "5000"

    def test_float_uses_shortest_repr(self) -> None:
        assert to_decimal_string(8.5) == "8.5"
        assert to_decimal_string(0.1) == "0.1"

    def test_decimal(self) -> None:
        assert to_decimal_string(Decimal("12.50")) == "12.50"

    def test_bool_rejected(self) -> None:
        with pytest.raises(ValueError):
            to_decimal_string(True)

    def test_negative_rejected(self) -> None:
        with pytest.raises(ValueError):
            to_decimal_string("-5")

    def test_none_rejected(self) -> None:
        with pytest.raises(ValueError):
            to_decimal_string(None)

    def test_fullwidth_digits_rejected(self) -> None:
        with pytest.raises(ValueError):
            to_decimal_string("５０００")


class TestArithmetic:
    def test_parse(self) -> None:
        assert parse_decimal("0.25") == Decimal("0.25")

    def test_parse_invalid(self) -> None:
        with pytest.raises(ValueError):
            parse_decimal("abc")

    def test_quantize_half_up(self) -> None:
        assert quantize(Decimal("1234.565")) == Decimal("1234.57")
        assert quantize(Decimal("1.2345678"), 6) == Decimal("1.234568")

    def test_format_has_no_exponent(self) -> None:
        assert format_decimal(Decimal("1E+3")) == "1000.00"
        assert format_decimal(Decimal("34.931507"), 6) == "34.931507"

    def test_quantize_beyond_default_precision(self) -> None:
        big = Decimal("1" + "0" * 30)
        assert quantize(big) == big
        assert format_decimal(big, 6) == "1" + "0" * 30 + ".000000"

    def test_working_precision_grows_with_operands(self) -> None:
        assert working_precision(Decimal("5000"), Decimal("8.5")) == 28
        assert working_precision(Decimal("1" + "0" * 27), Decimal("50"), places=2) > 30

"""Unit tests for jsonbatch.types module."""

from decimal import Decimal
from typing import Any

import pytest

from jsonbatch.errors import CastError
from jsonbatch.types import Type, cast, dump_json, load_json, to_text


class TestTypeLookup:
    """Tests for Type.from_word and type properties."""

    @pytest.mark.parametrize(
        "word,expected",
        [
            ("str", Type.STRING),
            ("string", Type.STRING),
            ("int", Type.INTEGER),
            ("integer", Type.INTEGER),
            ("num", Type.NUMBER),
            ("number", Type.NUMBER),
            ("bool", Type.BOOLEAN),
            ("boolean", Type.BOOLEAN),
            ("obj", Type.OBJECT),
            ("object", Type.OBJECT),
            ("str[]", Type.STRING_ARRAY),
            ("integer[]", Type.INTEGER_ARRAY),
            ("num[]", Type.NUMBER_ARRAY),
            ("bool[]", Type.BOOLEAN_ARRAY),
            ("object[]", Type.OBJECT_ARRAY),
        ],
    )
    def test_aliases(self, word: str, expected: Type) -> None:
        """Test that every alias selects its type."""
        assert Type.from_word(word) is expected

    def test_lookup_is_case_insensitive(self) -> None:
        """Test that type words ignore case."""
        assert Type.from_word("INT") is Type.INTEGER
        assert Type.from_word("Str[]") is Type.STRING_ARRAY

    def test_unknown_word(self) -> None:
        """Test that unknown words return None."""
        assert Type.from_word("weird") is None
        assert Type.from_word("[]") is None

    def test_array_types(self) -> None:
        """Test is_array and element_type for array tags."""
        assert Type.INTEGER_ARRAY.is_array is True
        assert Type.INTEGER_ARRAY.element_type is Type.INTEGER
        assert Type.OBJECT_ARRAY.element_type is Type.OBJECT

    def test_scalar_types(self) -> None:
        """Test is_array and element_type for scalar tags."""
        assert Type.STRING.is_array is False
        assert Type.STRING.element_type is None

    def test_label_is_long_alias(self) -> None:
        """Test that label uses the long spelling."""
        assert Type.INTEGER.label == "integer"
        assert Type.NUMBER_ARRAY.label == "number[]"


class TestToText:
    """Tests for to_text rendering."""

    def test_null(self) -> None:
        assert to_text(None) == "null"

    def test_booleans(self) -> None:
        assert to_text(True) == "true"
        assert to_text(False) == "false"

    def test_decimal_keeps_scale(self) -> None:
        assert to_text(Decimal("1.50")) == "1.50"

    def test_containers_are_compact_json(self) -> None:
        assert to_text({"a": [1, Decimal("2.5")]}) == '{"a":[1,2.5]}'


class TestDumpJson:
    """Tests for exact JSON serialization of Decimal values."""

    def test_integral_decimal_is_an_integer(self) -> None:
        assert dump_json(Decimal("4")) == "4"
        assert dump_json(Decimal("1E+2")) == "100"

    def test_fractional_decimal_keeps_every_digit(self) -> None:
        """Test that no digits are lost to double precision."""
        value = Decimal("12345678901234567890.123456789")
        assert dump_json({"v": value}) == '{"v": 12345678901234567890.123456789}'

    def test_trailing_zeros_are_kept(self) -> None:
        assert dump_json([Decimal("4.0"), Decimal("1.50")]) == "[4.0, 1.50]"

    def test_compact(self) -> None:
        assert dump_json({"a": [1, None, True]}, compact=True) == '{"a":[1,null,true]}'

    def test_non_string_keys(self) -> None:
        assert dump_json({1: "x", None: "y"}) == '{"1": "x", "null": "y"}'

    def test_strings_are_escaped(self) -> None:
        assert dump_json({"q": 'say "hi"'}) == '{"q": "say \\"hi\\""}'

    def test_other_objects_raise(self) -> None:
        """Test that unknown objects are still rejected."""
        with pytest.raises(TypeError):
            dump_json({"x": object()})


class TestLoadJson:
    """Tests for Decimal-preserving JSON parsing."""

    def test_fractions_become_decimals(self) -> None:
        value = load_json('{"x": 0.10000000000000000000001, "n": 3}')
        assert value["x"] == Decimal("0.10000000000000000000001")
        assert value["n"] == 3
        assert isinstance(value["n"], int)

    def test_round_trip_is_exact(self) -> None:
        text = '{"v": 12345678901234567890.123456789}'
        assert dump_json(load_json(text)) == text


class TestCastString:
    """Tests for casting to string."""

    @pytest.mark.parametrize(
        "value,expected",
        [("abc", "abc"), (42, "42"), (True, "true"), ([1, 2], "[1,2]")],
    )
    def test_to_string(self, value: Any, expected: str) -> None:
        assert cast(value, Type.STRING) == expected


class TestCastInteger:
    """Tests for casting to integer."""

    def test_int_passes_through(self) -> None:
        assert cast(7, Type.INTEGER) == 7

    def test_string(self) -> None:
        assert cast(" 12 ", Type.INTEGER) == 12

    def test_fractional_string_fails(self) -> None:
        """Test that strings must be whole numbers."""
        with pytest.raises(CastError):
            cast("1.5", Type.INTEGER)

    @pytest.mark.parametrize(
        "value,expected",
        [(1.4, 1), (2.5, 3), (-2.5, -3), (Decimal("7.49"), 7), (Decimal("7.5"), 8)],
    )
    def test_rounds_half_up(self, value: Any, expected: int) -> None:
        """Test that fractional numbers round half away from zero."""
        assert cast(value, Type.INTEGER) == expected

    def test_boolean_fails(self) -> None:
        with pytest.raises(CastError, match="bool True to integer"):
            cast(True, Type.INTEGER)

    def test_object_fails(self) -> None:
        with pytest.raises(CastError):
            cast({"a": 1}, Type.INTEGER)


class TestCastNumber:
    """Tests for casting to number."""

    def test_string_keeps_precision(self) -> None:
        assert cast("0.10", Type.NUMBER) == Decimal("0.10")

    def test_float_goes_through_text(self) -> None:
        """Test that floats convert via their repr, not their binary value."""
        assert cast(0.1, Type.NUMBER) == Decimal("0.1")

    def test_int(self) -> None:
        assert cast(3, Type.NUMBER) == Decimal(3)

    def test_invalid_string_fails(self) -> None:
        with pytest.raises(CastError):
            cast("abc", Type.NUMBER)

    def test_boolean_fails(self) -> None:
        with pytest.raises(CastError):
            cast(False, Type.NUMBER)


class TestCastBoolean:
    """Tests for casting to boolean."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("true", True),
            ("TRUE", True),
            ("yes", False),
            ("false", False),
            (0, False),
            (2, True),
            (0.0, False),
            (Decimal("0.1"), True),
        ],
    )
    def test_to_boolean(self, value: Any, expected: bool) -> None:
        assert cast(value, Type.BOOLEAN) is expected

    def test_object_fails(self) -> None:
        with pytest.raises(CastError):
            cast([True], Type.BOOLEAN)


class TestCastObject:
    """Tests for casting to object."""

    def test_identity(self) -> None:
        """Test that object casting keeps the value unchanged."""
        value = {"a": [1, 2]}
        assert cast(value, Type.OBJECT) is value


class TestCastIdempotence:
    """Casting an already cast value yields the same value."""

    @pytest.mark.parametrize(
        "value,target",
        [
            (2.5, Type.INTEGER),
            ("1.50", Type.NUMBER),
            (1, Type.BOOLEAN),
            ({"a": 1}, Type.STRING),
            ({"a": 1}, Type.OBJECT),
        ],
    )
    def test_cast_twice(self, value: Any, target: Type) -> None:
        once = cast(value, target)
        assert cast(once, target) == once

# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Schema-level validation tests.

These focus on the field checks themselves: boundary values, shape vs range
precedence, distinct messages for missing and malformed padding keys, and the
fixed check order. Broken values are built with Config.trusted so they reach
the validator untouched.
"""

import pytest

from xkpass.config.exceptions import ConfigValidationError
from xkpass.config.model import Config, LengthRange
from xkpass.config.schema import ALLOWED_SYMBOLS, allowed_symbols, ensure_valid, validate


def _padding(**overrides: object) -> dict[str, object]:
    padding: dict[str, object] = {"char": "!", "before": 0, "after": 0, "to_length": 0}
    padding.update(overrides)
    return padding


def _error(**fields: object) -> str:
    result = validate(Config.trusted(**fields))
    assert not result.ok
    assert result.error is not None
    return result.error


class TestValidConfigs:
    def test_default_config_is_valid(self) -> None:
        result = validate(Config.trusted())
        assert result.ok
        assert result.error is None
        assert result.field is None

    def test_non_config_fails_without_raising(self) -> None:
        result = validate({"num_words": 3})  # type: ignore[arg-type]
        assert not result.ok
        assert "must be a Config" in (result.error or "")


class TestNumWords:
    @pytest.mark.parametrize("value", [1, 5, 10])
    def test_in_range_is_valid(self, value: int) -> None:
        assert validate(Config.trusted(num_words=value)).ok

    @pytest.mark.parametrize("value", [0, 11, -1])
    def test_out_of_range_is_rejected(self, value: int) -> None:
        assert "must be between 1 and 10" in _error(num_words=value)

    def test_non_integer_is_rejected(self) -> None:
        assert "must be between 1 and 10" in _error(num_words="five")

    def test_bool_is_not_an_integer(self) -> None:
        assert "num_words" in _error(num_words=True)


class TestWordLength:
    def test_valid_range(self) -> None:
        assert validate(Config.trusted(word_length=LengthRange(4, 8))).ok

    def test_single_length_range_is_valid(self) -> None:
        assert validate(Config.trusted(word_length=LengthRange(4, 4))).ok

    def test_min_greater_than_max(self) -> None:
        assert "min must be <= max" in _error(word_length=LengthRange(8, 4))

    def test_out_of_default_bounds(self) -> None:
        assert "must be between 4 and 10" in _error(word_length=LengthRange(2, 12))

    @pytest.mark.parametrize("bounds", [LengthRange(3, 8), LengthRange(4, 11)])
    def test_just_outside_default_bounds(self, bounds: LengthRange) -> None:
        assert "must be between 4 and 10" in _error(word_length=bounds)

    def test_string_is_not_a_range(self) -> None:
        assert "must be a Range" in _error(word_length="4..8")

    def test_plain_tuple_is_not_a_range(self) -> None:
        assert "must be a Range" in _error(word_length=(4, 8))

    def test_shape_error_wins_over_range_error(self) -> None:
        # Non-integer bounds are a shape problem even though 100 is also out of range.
        assert "must be a Range" in _error(word_length=LengthRange(4.5, 100))

    def test_absolute_minimum(self) -> None:
        error = _error(word_length=LengthRange(0, 4), word_length_bounds=LengthRange(0, 4))
        assert "at least 1" in error

    def test_absolute_maximum(self) -> None:
        error = _error(word_length=LengthRange(4, 60), word_length_bounds=LengthRange(1, 60))
        assert "at most 50" in error


class TestWordLengthBounds:
    def test_custom_bounds_allow_short_words(self) -> None:
        config = Config.trusted(word_length=LengthRange(1, 3), word_length_bounds=LengthRange(1, 4))
        assert validate(config).ok

    def test_range_outside_custom_bounds(self) -> None:
        error = _error(word_length=LengthRange(2, 6), word_length_bounds=LengthRange(1, 4))
        assert "exceeds custom bounds 1..4" in error

    def test_malformed_bounds(self) -> None:
        error = _error(word_length=LengthRange(4, 8), word_length_bounds=(1, 4))
        assert "word_length_bounds must be a Range" in error

    def test_inverted_bounds(self) -> None:
        error = _error(word_length=LengthRange(4, 8), word_length_bounds=LengthRange(9, 1))
        assert "word_length_bounds must be a Range" in error


class TestCaseTransform:
    @pytest.mark.parametrize(
        "transform", ["none", "alternate", "capitalize", "invert", "lower", "upper", "random"]
    )
    def test_all_transforms_are_valid(self, transform: str) -> None:
        assert validate(Config.trusted(case_transform=transform)).ok

    def test_unknown_transform(self) -> None:
        assert "must be one of" in _error(case_transform="shout")

    def test_non_string_transform(self) -> None:
        assert "case_transform must be one of" in _error(case_transform=1)


class TestSeparator:
    @pytest.mark.parametrize("separator", ["-", "", " ", "!@$%^&*-_+=:|~?/.;"])
    def test_valid_separators(self, separator: str) -> None:
        assert validate(Config.trusted(separator=separator)).ok

    def test_non_string(self) -> None:
        assert "separator must be a string" in _error(separator=123)

    @pytest.mark.parametrize("separator", [">", "a", "7", "-x"])
    def test_symbols_outside_allow_list(self, separator: str) -> None:
        assert "separator contains invalid symbols" in _error(separator=separator)


class TestDigits:
    @pytest.mark.parametrize("digits", [(0, 0), (2, 3), (0, 5), (5, 5)])
    def test_in_range(self, digits: tuple[int, int]) -> None:
        assert validate(Config.trusted(digits=digits)).ok

    @pytest.mark.parametrize("digits", [(0, 6), (10, 0), (-1, 2)])
    def test_out_of_range(self, digits: tuple[int, int]) -> None:
        assert "must be between 0 and 5" in _error(digits=digits)

    def test_list_is_not_a_tuple(self) -> None:
        assert "must be a tuple" in _error(digits=[2, 3])

    def test_wrong_arity(self) -> None:
        assert "must be a tuple" in _error(digits=(1, 2, 3))

    def test_shape_error_wins_over_range_error(self) -> None:
        assert "must be a tuple" in _error(digits=("9", 9))


class TestPadding:
    def test_valid_padding(self) -> None:
        assert validate(Config.trusted(padding=_padding(before=2, after=2))).ok

    def test_not_a_map(self) -> None:
        assert "padding must be a map" in _error(padding="not a map")

    def test_missing_char(self) -> None:
        padding = _padding()
        del padding["char"]
        assert "must have a 'char' key" in _error(padding=padding)

    def test_char_wrong_type(self) -> None:
        assert "padding.char must be a string" in _error(padding=_padding(char=123))

    def test_char_invalid_symbols(self) -> None:
        assert "padding.char contains invalid symbols" in _error(padding=_padding(char="ab"))

    def test_empty_char_is_valid(self) -> None:
        assert validate(Config.trusted(padding=_padding(char=""))).ok

    def test_missing_before_after(self) -> None:
        error = _error(padding={"char": "!", "to_length": 0})
        assert "must have 'before' and 'after' keys" in error

    def test_before_wrong_type(self) -> None:
        error = _error(padding=_padding(before="two"))
        assert "must be integers" in error
        assert "must have" not in error

    @pytest.mark.parametrize("key", ["before", "after"])
    def test_amounts_out_of_range(self, key: str) -> None:
        assert "must be between 0 and 5" in _error(padding=_padding(**{key: 10}))

    @pytest.mark.parametrize("length", [0, 8, 50, 63, 999])
    def test_to_length_valid(self, length: int) -> None:
        assert validate(Config.trusted(padding=_padding(to_length=length))).ok

    @pytest.mark.parametrize("length", [1, 5, 7, 1000])
    def test_to_length_out_of_range(self, length: int) -> None:
        assert "must be 0 or between 8 and 999" in _error(padding=_padding(to_length=length))

    def test_missing_to_length(self) -> None:
        padding = _padding()
        del padding["to_length"]
        assert "must have a 'to_length' key" in _error(padding=padding)

    def test_to_length_wrong_type(self) -> None:
        error = _error(padding=_padding(to_length="fifty"))
        assert "padding.to_length must be an integer" in error

    def test_missing_and_malformed_keys_have_distinct_messages(self) -> None:
        missing = _error(padding={"char": "!", "before": 0, "after": 0})
        malformed = _error(padding=_padding(to_length="fifty"))
        assert missing != malformed


class TestSubstitutions:
    def test_valid_map(self) -> None:
        assert validate(Config.trusted(substitutions={"a": "4", "e": "3"})).ok

    def test_empty_map(self) -> None:
        assert validate(Config.trusted(substitutions={})).ok

    @pytest.mark.parametrize(
        "subs", [{"hello": "w"}, {"a": "world"}, {123: "a"}, {"a": 123}, {"": "a"}]
    )
    def test_entries_must_be_single_characters(self, subs: dict[object, object]) -> None:
        assert "single-character strings" in _error(substitutions=subs)

    def test_not_a_map(self) -> None:
        assert "substitutions must be a map" in _error(substitutions=[("a", "4")])


class TestSubstitutionMode:
    @pytest.mark.parametrize("mode", ["none", "always", "random"])
    def test_valid_modes(self, mode: str) -> None:
        assert validate(Config.trusted(substitution_mode=mode)).ok

    def test_unknown_mode(self) -> None:
        assert "must be one of none, always, random" in _error(substitution_mode="sometimes")


class TestDictionary:
    def test_identifier_is_valid(self) -> None:
        assert validate(Config.trusted(dictionary="eff")).ok

    @pytest.mark.parametrize("value", ["eff list", "", "1eff", 42, None])
    def test_non_identifier_is_rejected(self, value: object) -> None:
        assert "dictionary must be an identifier" in _error(dictionary=value)


class TestCheckOrder:
    def test_first_failing_field_is_reported(self) -> None:
        result = validate(Config.trusted(num_words=0, word_length="bad", separator=1))
        assert result.field == "num_words"

    def test_fields_are_checked_independently(self) -> None:
        result = validate(Config.trusted(separator=">", dictionary=3))
        assert result.field == "separator"

        result = validate(Config.trusted(dictionary=3))
        assert result.field == "dictionary"

    def test_meta_is_not_validated(self) -> None:
        assert validate(Config.trusted(meta={"anything": object()})).ok


class TestEnsureValid:
    def test_returns_config_when_valid(self) -> None:
        config = Config.trusted()
        assert ensure_valid(config) is config

    def test_raises_with_field(self) -> None:
        with pytest.raises(ConfigValidationError) as exc_info:
            ensure_valid(Config.trusted(digits=(0, 6)))
        assert exc_info.value.field == "digits"
        assert "must be between 0 and 5" in exc_info.value.message


class TestAllowedSymbols:
    def test_common_symbols_are_present(self) -> None:
        symbols = allowed_symbols()
        assert "-" in symbols
        assert "!" in symbols
        assert "@" in symbols
        assert " " in symbols

    def test_is_a_frozen_set_of_single_characters(self) -> None:
        symbols = allowed_symbols()
        assert isinstance(symbols, frozenset)
        assert symbols is ALLOWED_SYMBOLS
        assert all(len(symbol) == 1 for symbol in symbols)

    def test_no_letters_or_digits(self) -> None:
        assert not any(symbol.isalnum() for symbol in allowed_symbols())

# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Schema validation for Config values.

``validate`` walks the fields in a fixed order and stops at the first
problem, returning a ValidationResult that names the field and carries a
human-readable message. It never raises for malformed input: a Config built
with ``Config.trusted`` can hold anything, and reporting that is the point.

For each field the shape is checked before the range, so a word_length that
is not a LengthRange says "must be a Range" rather than complaining about
bounds. Missing padding keys, wrong-typed padding values and out-of-range
padding values all get different messages.

Check order:
  num_words, word_length, case_transform, separator, digits, padding,
  substitutions, substitution_mode, dictionary

Custom validators attached to a Config are not run here; see
xkpass.config.validators.
"""

from typing import Any, Callable, Mapping, NamedTuple, Optional

from xkpass.config.exceptions import ConfigValidationError
from xkpass.config.model import CASE_TRANSFORMS, SUBSTITUTION_MODES, Config, LengthRange

MIN_NUM_WORDS = 1
MAX_NUM_WORDS = 10

# Default word_length bound, sized for English/Latin word lists.
MIN_WORD_LENGTH = 4
MAX_WORD_LENGTH = 10

# Hard limits that apply even when word_length_bounds overrides the default.
ABSOLUTE_MIN_WORD_LENGTH = 1
ABSOLUTE_MAX_WORD_LENGTH = 50

MIN_DIGIT_COUNT = 0
MAX_DIGIT_COUNT = 5

MIN_PADDING = 0
MAX_PADDING = 5

MIN_PAD_TO_LENGTH = 8
MAX_PAD_TO_LENGTH = 999

ALLOWED_SYMBOLS: frozenset[str] = frozenset(
    ["-", "_", "~", "+", "*", "=", "@", "!", "#", "&", "$", "%", "?",
     ".", ",", ":", ";", "^", "|", "/", "'", '"', " "]
)


class ValidationResult(NamedTuple):
    """Outcome of a validation pass. ``error`` and ``field`` are None when ok."""

    ok: bool
    error: Optional[str] = None
    field: Optional[str] = None

    @classmethod
    def success(cls) -> "ValidationResult":
        return cls(ok=True)

    @classmethod
    def failure(cls, field: Optional[str], error: str) -> "ValidationResult":
        return cls(ok=False, error=error, field=field)


def allowed_symbols() -> frozenset[str]:
    """
    Characters usable in ``separator`` and ``padding["char"]``.

    Input parsers can use this to reject a bad symbol before a Config exists.
    """
    return ALLOWED_SYMBOLS


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_range(value: Any) -> bool:
    return isinstance(value, LengthRange) and _is_int(value.min) and _is_int(value.max)


def _invalid_symbols(pool: str) -> list[str]:
    return sorted(set(pool) - ALLOWED_SYMBOLS)


# ── Field checks ────────────────────────────────────────────────────────────
# Each returns None when the field is fine, or the error message.


def _check_num_words(config: Config) -> Optional[str]:
    n = config.num_words
    if _is_int(n) and MIN_NUM_WORDS <= n <= MAX_NUM_WORDS:
        return None
    return f"num_words must be between {MIN_NUM_WORDS} and {MAX_NUM_WORDS}, got: {n!r}"


def _check_word_length_bounds(low: int, high: int, bounds: Any) -> Optional[str]:
    if bounds is None:
        if MIN_WORD_LENGTH <= low and high <= MAX_WORD_LENGTH:
            return None
        return (
            f"word_length must be between {MIN_WORD_LENGTH} and {MAX_WORD_LENGTH}, "
            f"got: {low}..{high}. Set word_length_bounds for word lists with "
            f"shorter or longer words."
        )

    if not _is_range(bounds) or bounds.min > bounds.max:
        return f"word_length_bounds must be a Range (e.g. LengthRange(1, 4)) or None, got: {bounds!r}"

    if bounds.min <= low and high <= bounds.max:
        return None
    return f"word_length range {low}..{high} exceeds custom bounds {bounds}"


def _check_word_length(config: Config) -> Optional[str]:
    value = config.word_length
    if not _is_range(value):
        return f"word_length must be a Range (e.g. LengthRange(4, 8)), got: {value!r}"

    low, high = value.min, value.max
    if low > high:
        return f"word_length range invalid: {low}..{high} (min must be <= max)"
    if low < ABSOLUTE_MIN_WORD_LENGTH:
        return f"word_length minimum must be at least {ABSOLUTE_MIN_WORD_LENGTH}, got: {low}"
    if high > ABSOLUTE_MAX_WORD_LENGTH:
        return f"word_length maximum must be at most {ABSOLUTE_MAX_WORD_LENGTH}, got: {high}"

    return _check_word_length_bounds(low, high, config.word_length_bounds)


def _check_case_transform(config: Config) -> Optional[str]:
    value = config.case_transform
    if isinstance(value, str) and value in CASE_TRANSFORMS:
        return None
    return f"case_transform must be one of {', '.join(CASE_TRANSFORMS)}, got: {value!r}"


def _check_separator(config: Config) -> Optional[str]:
    value = config.separator
    if not isinstance(value, str):
        return f"separator must be a string, got: {value!r}"

    invalid = _invalid_symbols(value)
    if invalid:
        return f"separator contains invalid symbols: {invalid}"
    return None


def _check_digits(config: Config) -> Optional[str]:
    value = config.digits
    if not (isinstance(value, tuple) and len(value) == 2 and all(_is_int(v) for v in value)):
        return f"digits must be a tuple (before, after), got: {value!r}"

    before, after = value
    if MIN_DIGIT_COUNT <= before <= MAX_DIGIT_COUNT and MIN_DIGIT_COUNT <= after <= MAX_DIGIT_COUNT:
        return None
    return (
        f"digits tuple values must be between {MIN_DIGIT_COUNT} and {MAX_DIGIT_COUNT}, "
        f"got: ({before}, {after})"
    )


def _check_padding_char(padding: Mapping[str, Any]) -> Optional[str]:
    if "char" not in padding:
        return "padding must have a 'char' key"

    char = padding["char"]
    if not isinstance(char, str):
        return f"padding.char must be a string, got: {char!r}"

    invalid = _invalid_symbols(char)
    if invalid:
        return f"padding.char contains invalid symbols: {invalid}"
    return None


def _check_padding_amounts(padding: Mapping[str, Any]) -> Optional[str]:
    if "before" not in padding or "after" not in padding:
        return "padding must have 'before' and 'after' keys"

    before, after = padding["before"], padding["after"]
    if not (_is_int(before) and _is_int(after)):
        return (
            f"padding.before and padding.after must be integers, "
            f"got: before={before!r}, after={after!r}"
        )

    if MIN_PADDING <= before <= MAX_PADDING and MIN_PADDING <= after <= MAX_PADDING:
        return None
    return (
        f"padding.before and padding.after must be between {MIN_PADDING} and {MAX_PADDING}, "
        f"got: before={before}, after={after}"
    )


def _check_padding_to_length(padding: Mapping[str, Any]) -> Optional[str]:
    if "to_length" not in padding:
        return "padding must have a 'to_length' key"

    length = padding["to_length"]
    if not _is_int(length):
        return f"padding.to_length must be an integer, got: {length!r}"

    # 0 disables length padding and is always allowed.
    if length == 0 or MIN_PAD_TO_LENGTH <= length <= MAX_PAD_TO_LENGTH:
        return None
    return (
        f"padding.to_length must be 0 or between {MIN_PAD_TO_LENGTH} "
        f"and {MAX_PAD_TO_LENGTH}, got: {length}"
    )


def _check_padding(config: Config) -> Optional[str]:
    padding = config.padding
    if not isinstance(padding, Mapping):
        return f"padding must be a map, got: {padding!r}"

    return (
        _check_padding_char(padding)
        or _check_padding_amounts(padding)
        or _check_padding_to_length(padding)
    )


def _check_substitutions(config: Config) -> Optional[str]:
    subs = config.substitutions
    if not isinstance(subs, Mapping):
        return f"substitutions must be a map, got: {subs!r}"

    for key, value in subs.items():
        if not (isinstance(key, str) and isinstance(value, str) and len(key) == 1 and len(value) == 1):
            return (
                "substitutions must be a map of single-character strings "
                "to single-character strings"
            )
    return None


def _check_substitution_mode(config: Config) -> Optional[str]:
    value = config.substitution_mode
    if isinstance(value, str) and value in SUBSTITUTION_MODES:
        return None
    return f"substitution_mode must be one of {', '.join(SUBSTITUTION_MODES)}, got: {value!r}"


def _check_dictionary(config: Config) -> Optional[str]:
    value = config.dictionary
    if isinstance(value, str) and value.isidentifier():
        return None
    return f"dictionary must be an identifier, got: {value!r}"


_FIELD_CHECKS: tuple[tuple[str, Callable[[Config], Optional[str]]], ...] = (
    ("num_words", _check_num_words),
    ("word_length", _check_word_length),
    ("case_transform", _check_case_transform),
    ("separator", _check_separator),
    ("digits", _check_digits),
    ("padding", _check_padding),
    ("substitutions", _check_substitutions),
    ("substitution_mode", _check_substitution_mode),
    ("dictionary", _check_dictionary),
)


def validate(config: Config) -> ValidationResult:
    """
    Check a Config against the schema.

    Args:
        config: The value to check. Anything that isn't a Config fails.

    Returns:
        ValidationResult.success(), or a failure naming the first bad field.
    """
    if not isinstance(config, Config):
        return ValidationResult.failure(None, f"config must be a Config, got: {type(config).__name__}")

    for field, check in _FIELD_CHECKS:
        error = check(config)
        if error is not None:
            return ValidationResult.failure(field, error)

    return ValidationResult.success()


def ensure_valid(config: Config) -> Config:
    """
    Same checks as ``validate``, but raise instead of returning a verdict.

    Returns:
        The config unchanged, so calls can be chained.

    Raises:
        ConfigValidationError: With the first failure's message and field.
    """
    result = validate(config)
    if not result.ok:
        raise ConfigValidationError(result.error or "", field=result.field)
    return config

# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
The Config value: everything the password generator needs to know about
how a passphrase is assembled.

Config is a frozen pydantic model: once built, no attribute can be reassigned.
Every "change" (merge, override, put_meta, add_validator) returns a new value.

There are three ways in:
  - ``Config.new(**fields)`` is the validated entry point. It rejects unknown
    fields, fills a partial ``padding`` mapping from the defaults, runs the
    schema and then any custom validators, and raises ConfigValidationError
    on the first problem.
  - ``Config.trusted(**fields)`` (an alias for pydantic's ``model_construct``)
    stores whatever it is given; tests use it to build deliberately broken
    values. ``freeze`` turns any mappings it was given into read-only copies.
  - ``Config(**fields)`` runs pydantic's own type coercion and then the same
    schema check, reported as a pydantic ValidationError.

Field semantics:
  - ``separator`` and ``padding["char"]`` are symbol pools: the generator picks
    one character from the pool. An empty string turns the feature off.
  - ``word_length`` is a closed interval, LengthRange(4, 8) covers 4..8.
  - ``padding["to_length"] == 0`` means no length padding.
"""

from types import MappingProxyType
from typing import Any, Callable, Mapping, NamedTuple, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictInt, field_validator, model_validator

from xkpass.config.exceptions import ConfigValidationError


class LengthRange(NamedTuple):
    """Inclusive integer range. LengthRange(4, 8) allows 4, 5, 6, 7 and 8."""

    min: StrictInt
    max: StrictInt

    def __str__(self) -> str:
        return f"{self.min}..{self.max}"


CASE_TRANSFORMS: tuple[str, ...] = (
    "none",
    "alternate",
    "capitalize",
    "invert",
    "lower",
    "upper",
    "random",
)

SUBSTITUTION_MODES: tuple[str, ...] = ("none", "always", "random")

DEFAULT_SYMBOL_POOL = "!@$%^&*-_+=:|~?/.;"

DEFAULT_PADDING: Mapping[str, Any] = MappingProxyType({
    "char": DEFAULT_SYMBOL_POOL,
    "before": 2,
    "after": 2,
    "to_length": 0,
})

_MAPPING_FIELDS = ("padding", "substitutions", "meta")


def _read_only_copies(fields: Mapping[str, Any]) -> dict[str, Any]:
    """Replace every mapping-valued field with a private read-only copy."""
    return {
        name: MappingProxyType(dict(value))
        if name in _MAPPING_FIELDS and isinstance(value, Mapping)
        else value
        for name, value in fields.items()
    }


class Config(BaseModel):
    """
    Passphrase generation parameters.

    A Config is produced by users, by the loader, or by the preset registry,
    and consumed by the schema validator and by the generator.

    ``padding``, ``substitutions`` and ``meta`` are held as read-only copies,
    so nothing outside the Config can change them after construction.
    Config is not hashable: those mappings (and ``meta`` values) aren't.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", arbitrary_types_allowed=True)

    num_words: StrictInt = Field(default=3, description="Number of words in the passphrase")
    word_length: LengthRange = Field(
        default=LengthRange(4, 8),
        description="Inclusive bounds on the length of each chosen word",
    )
    case_transform: str = Field(
        default="alternate",
        description="Capitalization policy, one of CASE_TRANSFORMS",
    )
    separator: str = Field(
        default=DEFAULT_SYMBOL_POOL,
        description="Pool of symbols used to join words and digit groups; empty for none",
    )
    digits: tuple[StrictInt, StrictInt] = Field(
        default=(2, 2),
        description="Sizes of the digit groups placed before and after the words",
    )
    padding: Mapping[str, Any] = Field(
        default_factory=lambda: MappingProxyType(dict(DEFAULT_PADDING)),
        description="Symbol padding: char pool, before/after counts, optional to_length",
    )
    substitutions: Mapping[str, str] = Field(
        default_factory=lambda: MappingProxyType({}),
        description="Single-character leetspeak replacements, e.g. {'a': '4'}",
    )
    substitution_mode: str = Field(
        default="none",
        description="Whether substitutions apply: one of SUBSTITUTION_MODES",
    )
    dictionary: str = Field(
        default="eff",
        description="Identifier of the word list to draw from",
    )
    meta: Mapping[str, Any] = Field(
        default_factory=lambda: MappingProxyType({}),
        description="Free-form metadata (name, description, plugin data); never validated",
    )
    validators: tuple[Callable[..., Optional[str]], ...] = Field(
        default=(),
        description="Custom validators run after the schema by Config.new and merge",
    )
    word_length_bounds: Optional[LengthRange] = Field(
        default=None,
        description="Replaces the default 4..10 word_length bound, e.g. 1..4 for short-word scripts",
    )

    @field_validator("padding", "substitutions", "meta", mode="after")
    @classmethod
    def read_only_mapping(cls, value: Mapping[str, Any]) -> Mapping[str, Any]:
        return MappingProxyType(dict(value))

    @model_validator(mode="after")
    def check_schema(self) -> "Config":
        from xkpass.config.schema import validate

        result = validate(self)
        if not result.ok:
            raise ValueError(result.error)
        return self

    @classmethod
    def _reject_unknown(cls, fields: Mapping[str, Any]) -> None:
        unknown = set(fields) - set(cls.model_fields)
        if unknown:
            raise ConfigValidationError(
                f"Unknown config field(s): {', '.join(sorted(unknown))}"
            )

    @classmethod
    def new(cls, **fields: Any) -> "Config":
        """
        Build a Config and validate it.

        A partial ``padding`` mapping is completed from DEFAULT_PADDING, so
        ``Config.new(padding={"before": 0})`` keeps the default char pool.

        Raises:
            ConfigValidationError: Unknown field, schema violation, or a
                custom validator rejecting the value.
        """
        cls._reject_unknown(fields)

        padding = fields.get("padding")
        if isinstance(padding, Mapping):
            fields["padding"] = {**DEFAULT_PADDING, **padding}

        config = cls.model_construct(**_read_only_copies(fields))
        config.ensure_valid()
        return config

    @classmethod
    def trusted(cls, **fields: Any) -> "Config":
        """Store the given fields without any validation."""
        return cls.model_construct(**fields)

    def freeze(self) -> "Config":
        """Return a Config whose mapping fields are read-only, or self if they already are."""
        writable = {}
        for name in _MAPPING_FIELDS:
            value = getattr(self, name)
            if isinstance(value, Mapping) and not isinstance(value, MappingProxyType):
                writable[name] = value
        if not writable:
            return self
        return self.model_copy(update=_read_only_copies(writable))

    def ensure_valid(self) -> None:
        """Run the schema, then custom validators. Raises ConfigValidationError."""
        from xkpass.config.schema import ensure_valid
        from xkpass.config.validators import run_validators

        ensure_valid(self)

        result = run_validators(self)
        if not result.ok:
            raise ConfigValidationError(result.error or "", field=result.field)

    def merge(self, **overrides: Any) -> "Config":
        """
        Validated composition: this config's fields with ``overrides`` on top.

        A partial ``padding`` override is overlaid on this config's padding
        rather than on the defaults.
        """
        padding = overrides.get("padding")
        if isinstance(padding, Mapping) and isinstance(self.padding, Mapping):
            overrides["padding"] = {**self.padding, **padding}

        return type(self).new(**{**dict(self), **overrides})

    def override(self, **overrides: Any) -> "Config":
        """
        Replace whole fields without validating the result.

        Fields absent from ``overrides`` are carried over untouched.

        Raises:
            ConfigValidationError: If an override names a field Config doesn't have.
        """
        self._reject_unknown(overrides)
        return self.model_copy(update=_read_only_copies(overrides))

    def put_meta(self, key: str, value: Any) -> "Config":
        meta = dict(self.meta) if isinstance(self.meta, Mapping) else {}
        meta[key] = value
        return self.model_copy(update={"meta": MappingProxyType(meta)})

    def get_meta(self, key: str, default: Any = None) -> Any:
        if not isinstance(self.meta, Mapping):
            return default
        return self.meta.get(key, default)

    def add_validator(self, validator: Callable[..., Optional[str]]) -> "Config":
        return self.model_copy(update={"validators": (*self.validators, validator)})

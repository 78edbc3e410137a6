# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Pluggable custom validators for Config values.

The schema only knows about shapes and bounds. Policies on top of that
("corporate passwords need at least four words") live in custom validators
attached to a Config via ``validators=`` or ``Config.add_validator``.

A validator is either:
  - an instance of a ConfigValidator subclass, or
  - any callable taking a Config and returning None or an error string.

Contract:
    validate(config) -> None          the config passes
    validate(config) -> "message"     the config fails with that message

Validators only run after the schema has passed, so they can rely on every
field having the right shape.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional

from xkpass.config.model import Config
from xkpass.config.schema import ValidationResult


class ConfigValidator(ABC):
    """
    Base class for reusable validators that want a name in error reports.

    Subclasses implement ``validate``; instances are also callable so they
    can sit in ``Config.validators`` next to plain functions.
    """

    name: str = ""

    @abstractmethod
    def validate(self, config: Config) -> Optional[str]:
        """
        Check a schema-valid Config against this validator's policy.

        Args:
            config: A Config that already passed the schema.

        Returns:
            None if the config is acceptable, otherwise the error message.
        """
        ...

    def __call__(self, config: Config) -> Optional[str]:
        return self.validate(config)


def _validator_name(validator: Any) -> str:
    if isinstance(validator, ConfigValidator) and validator.name:
        return validator.name
    return getattr(validator, "__name__", type(validator).__name__)


def run_validators(config: Config) -> ValidationResult:
    """
    Run the config's custom validators in order, stopping at the first failure.

    Returns:
        ValidationResult.success() if all pass (or there are none). A failure
        has ``field="validators"`` and the validator's own message.
    """
    validators = config.validators
    if not isinstance(validators, (tuple, list)):
        return ValidationResult.failure(
            "validators", f"validators must be a sequence of callables, got: {validators!r}"
        )

    for validator in validators:
        if not callable(validator):
            return ValidationResult.failure(
                "validators", f"validator {validator!r} is not callable"
            )

        error = validator(config)
        if error is not None:
            return ValidationResult.failure("validators", f"{_validator_name(validator)}: {error}")

    return ValidationResult.success()

# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Custom exceptions for the configuration and preset system.

We keep these separate so that callers can catch config-specific or
preset-specific failures without importing the entire config machinery.
"""

from typing import Optional


class ConfigError(Exception):
    """Base for all configuration errors."""


class ConfigLoadError(ConfigError):
    """Raised when a config file cannot be read from disk or parsed as YAML."""


class ConfigValidationError(ConfigError):
    """
    Raised when a config value fails schema validation or a custom validator.

    The message names the offending field and the violated constraint. The
    field name is also kept on the exception so callers can point users at it
    without parsing the message.
    """

    def __init__(self, message: str, field: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.field = field


class PresetError(Exception):
    """Base for all preset registry errors."""


class PresetNotFoundError(PresetError, KeyError):
    """Raised when a composition base names a preset that does not exist."""

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message.
        return str(self.args[0]) if self.args else ""


class InvalidPresetNameError(PresetError, ValueError):
    """Raised when a preset is registered under a name that is not an identifier."""


class RegistryUnavailableError(PresetError):
    """Raised when the registry lock cannot be acquired within the timeout."""

# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Preset registry: named Configs, built-in and user-registered.

There are two tiers:
  - Built-in presets are built once at import time through ``Config.new``,
    so a broken built-in fails the import instead of a later password.
    They live in a read-only mapping and never change.
  - Custom presets are registered at runtime into a PresetRegistry. Writers
    are serialized by a lock and publish a fresh read-only snapshot; readers
    just look at the current snapshot and never block.

Lookup always checks the built-ins first. Registering a custom preset
under a built-in name succeeds, but ``get`` keeps returning the built-in,
so well-known names can't be hijacked at runtime.

Names are identifiers (``"xkcd"``, ``"strong_wifi"``). Strings that can't be
one (too long, spaces, dashes) are treated as "not found" by ``get`` rather
than raising.

Most callers use the module-level functions, which go through a shared
registry started on first use:

    from xkpass.config.presets import get_preset, register_preset

    register_preset("strong_wifi", "wifi", {"num_words": 8})
    config = get_preset("strong_wifi")
"""

from __future__ import annotations

import sys
import threading
from contextlib import contextmanager
from types import MappingProxyType
from typing import Any, Iterator, Mapping, Optional, Union

from xkpass.config.exceptions import (
    InvalidPresetNameError,
    PresetNotFoundError,
    RegistryUnavailableError,
)
from xkpass.config.model import Config, LengthRange
from xkpass.logging.logger import get_logger

logger = get_logger(__name__)

PresetName = Union[str, bytes]

# Longest name accepted as a preset identifier.
MAX_NAME_LENGTH = 255

# Seconds to wait for a registry lock before giving up.
DEFAULT_LOCK_TIMEOUT = 5.0


def preset_key(name: Any) -> Optional[str]:
    """
    Turn a preset name into its lookup key, or None if it can't be one.

    Accepts a str or its UTF-8 bytes form. The result is interned so
    repeated lookups of the same name share one string object.
    """
    if isinstance(name, bytes):
        try:
            name = name.decode("utf-8")
        except UnicodeDecodeError:
            return None

    if not isinstance(name, str):
        return None
    if len(name) > MAX_NAME_LENGTH or not name.isidentifier():
        return None

    return sys.intern(name)


# ── Built-in presets ────────────────────────────────────────────────────────


def _builtin(**fields: Any) -> Config:
    """Validate a built-in definition. Config.new already keeps its mappings read-only."""
    return Config.new(**fields)


BUILTIN_PRESETS: Mapping[str, Config] = MappingProxyType({
    "default": _builtin(
        num_words=3,
        word_length=LengthRange(4, 8),
        case_transform="alternate",
        separator="!@$%^&*-_+=:|~?/.;",
        digits=(2, 2),
        padding={"char": "!@$%^&*-_+=:|~?/.;", "before": 2, "after": 2, "to_length": 0},
        substitutions={},
        substitution_mode="none",
        dictionary="eff",
        meta={
            "name": "default",
            "description": (
                "The default preset resulting in a password consisting of 3 random words "
                "of between 4 and 8 letters with alternating case separated by a random "
                "character, with two random digits before and after, and padded with two "
                "random characters front and back."
            ),
        },
    ),
    "web32": _builtin(
        num_words=4,
        word_length=LengthRange(4, 5),
        case_transform="alternate",
        separator="-+=.*_|~",
        digits=(2, 3),
        padding={"char": "!@$%^&*+=:|~", "before": 1, "after": 1, "to_length": 0},
        dictionary="eff",
        meta={
            "name": "web32",
            "description": "A preset for websites that allow passwords up to 32 characters long.",
        },
    ),
    "web16": _builtin(
        num_words=3,
        word_length=LengthRange(4, 4),
        case_transform="random",
        separator="!@$%^&*-_+=:|~?/.",
        digits=(0, 1),
        padding={"char": "", "before": 0, "after": 0, "to_length": 0},
        dictionary="eff",
        meta={
            "name": "web16",
            "description": (
                "A preset for websites that insist passwords not be longer than 16 "
                "characters. WARNING - only use this preset if you have to, it is too "
                "short to be acceptably secure."
            ),
        },
    ),
    "wifi": _builtin(
        num_words=6,
        word_length=LengthRange(4, 8),
        case_transform="alternate",
        separator="-+=.*_|~,",
        digits=(4, 4),
        padding={"char": "!@$%^&*+=:|~?", "before": 0, "after": 0, "to_length": 63},
        dictionary="eff",
        meta={
            "name": "wifi",
            "description": (
                "A preset for generating 63 character long WPA2 keys (most routers allow "
                "64 characters, but some only 63, hence the odd length)."
            ),
        },
    ),
    "apple_id": _builtin(
        num_words=3,
        word_length=LengthRange(4, 7),
        case_transform="random",
        separator="-:.@&",
        digits=(2, 2),
        padding={"char": "-:.!?@&", "before": 1, "after": 1, "to_length": 0},
        dictionary="eff",
        meta={
            "name": "apple_id",
            "description": (
                "A preset respecting the many prerequisites Apple places on Apple ID "
                "passwords. The preset also limits itself to symbols found on the iOS "
                "letter and number keyboards."
            ),
        },
    ),
    "security": _builtin(
        num_words=6,
        word_length=LengthRange(4, 8),
        case_transform="none",
        separator=" ",
        digits=(0, 0),
        padding={"char": ".!?", "before": 0, "after": 1, "to_length": 0},
        dictionary="eff",
        meta={
            "name": "security",
            "description": "A preset for creating fake answers to security questions.",
        },
    ),
    "xkcd": _builtin(
        num_words=5,
        word_length=LengthRange(4, 8),
        case_transform="random",
        separator="-",
        digits=(0, 0),
        padding={"char": "", "before": 0, "after": 0, "to_length": 0},
        dictionary="eff",
        meta={
            "name": "xkcd",
            "description": (
                "A preset for generating passwords similar to the example in the original "
                "XKCD cartoon, but with an extra word, a dash to separate the random words, "
                "and the capitalization randomized to add sufficient entropy to avoid warnings."
            ),
        },
    ),
})


# ── Registry ────────────────────────────────────────────────────────────────


class PresetRegistry:
    """
    Runtime catalog of custom presets layered under the built-ins.

    Writes take ``_lock`` and replace ``_custom`` with a new read-only
    snapshot; a reader holding the old snapshot still sees a complete,
    consistent catalog.
    """

    def __init__(self, lock_timeout: float = DEFAULT_LOCK_TIMEOUT) -> None:
        self._lock = threading.Lock()
        self._lock_timeout = lock_timeout
        self._custom: Mapping[str, Config] = MappingProxyType({})

    @contextmanager
    def _write_lock(self) -> Iterator[None]:
        if not self._lock.acquire(timeout=self._lock_timeout):
            raise RegistryUnavailableError(
                f"Preset registry is busy: lock not acquired within {self._lock_timeout}s"
            )
        try:
            yield
        finally:
            self._lock.release()

    def get(self, name: Any) -> Optional[Config]:
        """
        Look a preset up by name, built-ins first.

        Args:
            name: Preset name as str or bytes.

        Returns:
            The Config, or None if no preset by that name exists or the
            name can't be a preset identifier at all.
        """
        key = preset_key(name)
        if key is None:
            return None

        builtin = BUILTIN_PRESETS.get(key)
        if builtin is not None:
            return builtin
        return self._custom.get(key)

    def resolve(self, base: Union[PresetName, Config]) -> Config:
        """
        Return ``base`` itself if it is a Config, else the preset it names.

        Raises:
            PresetNotFoundError: If ``base`` names no known preset.
        """
        if isinstance(base, Config):
            return base

        config = self.get(base)
        if config is None:
            raise PresetNotFoundError(f"Unknown base preset {base!r}")
        return config

    def register(
        self,
        name: PresetName,
        base: Union[PresetName, Config],
        overrides: Optional[Mapping[str, Any]] = None,
        *,
        validate: bool = False,
    ) -> Config:
        """
        Store a custom preset, replacing any earlier custom preset of that name.

        With a Config and no overrides the Config is stored as given, except
        that any writable mappings it holds are replaced by read-only copies. With
        overrides (or a preset name as ``base``) the base is resolved first
        and a new Config is composed: every field comes from the base except
        those present in ``overrides``. The result is not validated unless
        ``validate=True``; validate before generating with it.

        Args:
            name: Identifier to store the preset under.
            base: A Config, or the name of a built-in or custom preset.
            overrides: Field values replacing the base's.
            validate: Run the schema and custom validators before storing.

        Returns:
            The stored Config.

        Raises:
            InvalidPresetNameError: ``name`` is not a valid identifier.
            PresetNotFoundError: ``base`` names no known preset.
            ConfigValidationError: An override names an unknown field, or
                ``validate=True`` and the composed config is invalid.
            RegistryUnavailableError: The write lock timed out.
        """
        key = preset_key(name)
        if key is None:
            raise InvalidPresetNameError(
                f"Preset name must be an identifier of at most {MAX_NAME_LENGTH} "
                f"characters, got: {name!r}"
            )

        if not isinstance(base, (Config, str, bytes)):
            raise TypeError(f"base must be a Config or a preset name, got {type(base).__name__}")

        config = self.resolve(base)
        if overrides:
            config = config.override(**overrides)
        config = config.freeze()

        if validate:
            config.ensure_valid()

        with self._write_lock():
            self._custom = MappingProxyType({**self._custom, key: config})

        if key in BUILTIN_PRESETS:
            logger.warning(
                "preset_shadowed_by_builtin",
                extra={"preset": key},
            )
        else:
            logger.debug(
                "preset_registered",
                extra={"preset": key, "overrides": sorted(overrides or ())},
            )

        return config

    def unregister(self, name: PresetName) -> bool:
        """Drop a custom preset. Returns False if there was none by that name."""
        key = preset_key(name)
        if key is None:
            return False

        with self._write_lock():
            if key not in self._custom:
                return False
            self._custom = MappingProxyType(
                {k: v for k, v in self._custom.items() if k != key}
            )

        logger.debug("preset_unregistered", extra={"preset": key})
        return True

    def list(self) -> set[str]:
        """Names of every preset, built-in and custom, each exactly once."""
        return set(BUILTIN_PRESETS) | set(self._custom)

    def all(self) -> list[Config]:
        """The built-in preset configs. Custom presets are not included."""
        return list(BUILTIN_PRESETS.values())

    def custom(self) -> Mapping[str, Config]:
        """Snapshot of the custom presets currently registered."""
        return self._custom


# ── Shared registry lifecycle ───────────────────────────────────────────────

_REGISTRY: Optional[PresetRegistry] = None
_REGISTRY_LOCK = threading.Lock()


def start_registry(lock_timeout: float = DEFAULT_LOCK_TIMEOUT) -> PresetRegistry:
    """
    Start the shared registry, or return it if it's already running.

    Safe to call from any number of threads; all of them get the same
    instance. ``lock_timeout`` only applies when this call creates it.

    Raises:
        RegistryUnavailableError: Another thread held the startup lock
            for longer than ``lock_timeout``.
    """
    global _REGISTRY
    registry = _REGISTRY
    if registry is not None:
        return registry

    if not _REGISTRY_LOCK.acquire(timeout=lock_timeout):
        raise RegistryUnavailableError(
            f"Preset registry did not start within {lock_timeout}s"
        )
    try:
        if _REGISTRY is None:
            _REGISTRY = PresetRegistry(lock_timeout=lock_timeout)
            logger.debug("registry_started", extra={"builtins": sorted(BUILTIN_PRESETS)})
        return _REGISTRY
    finally:
        _REGISTRY_LOCK.release()


def get_registry() -> PresetRegistry:
    """The shared registry, started on first use."""
    return start_registry()


def stop_registry(lock_timeout: float = DEFAULT_LOCK_TIMEOUT) -> None:
    """
    Discard the shared registry and all custom presets in it.

    Raises:
        RegistryUnavailableError: Another thread held the lifecycle lock
            for longer than ``lock_timeout``.
    """
    global _REGISTRY
    if not _REGISTRY_LOCK.acquire(timeout=lock_timeout):
        raise RegistryUnavailableError(
            f"Preset registry did not stop within {lock_timeout}s"
        )
    try:
        _REGISTRY = None
    finally:
        _REGISTRY_LOCK.release()


def get_preset(name: Any) -> Optional[Config]:
    """Look up a preset in the shared registry. None if not found."""
    return get_registry().get(name)


def register_preset(
    name: PresetName,
    base: Union[PresetName, Config],
    overrides: Optional[Mapping[str, Any]] = None,
    *,
    validate: bool = False,
) -> Config:
    """Register a custom preset in the shared registry. See PresetRegistry.register."""
    return get_registry().register(name, base, overrides, validate=validate)


def list_presets() -> set[str]:
    """Names of every built-in and custom preset in the shared registry."""
    return get_registry().list()


def all_presets() -> list[Config]:
    """The built-in preset configs."""
    return get_registry().all()

# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Shared pytest fixtures for xkpass tests.

Fixtures here are available to every test file automatically.
We keep them minimal, just the stuff that multiple test modules need.
"""

import textwrap
from pathlib import Path
from typing import Iterator

import pytest

from xkpass.config.presets import PresetRegistry, stop_registry


@pytest.fixture()
def tmp_config_file(tmp_path: Path) -> Path:
    """A valid config YAML file that builds on the xkcd preset."""
    config_content = textwrap.dedent("""\
        preset: xkcd
        num_words: 6
        word_length: [4, 7]
        padding:
          char: "!?"
          before: 1
    """)
    config_file = tmp_path / "test_config.yaml"
    config_file.write_text(config_content, encoding="utf-8")
    return config_file


@pytest.fixture()
def invalid_config_file(tmp_path: Path) -> Path:
    """A config file that's valid YAML but fails schema validation (num_words out of range)."""
    config_content = textwrap.dedent("""\
        num_words: 11
        separator: "-"
    """)
    config_file = tmp_path / "invalid_config.yaml"
    config_file.write_text(config_content, encoding="utf-8")
    return config_file


@pytest.fixture()
def broken_yaml_file(tmp_path: Path) -> Path:
    """A file that isn't valid YAML at all."""
    config_file = tmp_path / "broken.yaml"
    config_file.write_text("{{not: yaml: at: all:::", encoding="utf-8")
    return config_file


@pytest.fixture()
def registry() -> PresetRegistry:
    """A private registry, so custom presets don't leak between tests."""
    return PresetRegistry(lock_timeout=1.0)


@pytest.fixture()
def shared_registry() -> Iterator[None]:
    """Start every test that touches the shared registry from a clean slate."""
    stop_registry()
    yield
    stop_registry()

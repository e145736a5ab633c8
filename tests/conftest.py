"""Shared fixtures for the host tests.

Every test gets its own settings object so that one test's tweaks cannot leak
into another, and real backend processes are the current Python interpreter
running a short script.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Callable

import pytest

from localcast_host.local.config import MergedSettings


@pytest.fixture
def settings(tmp_path: Path) -> MergedSettings:
    config = MergedSettings(overrides_path=tmp_path / "no-overrides.json")
    config.INSTALL_ROOT = ""
    config.BACKEND_NAME = "localcast"
    config.PACKAGED_HELPERS_SUBPATH = "Contents/Helpers"
    config.MAX_SEARCH_DEPTH = 10
    config.GRACEFUL_SHUTDOWN_TIMEOUT = 5
    config.FORCE_KILL_TIMEOUT = 5.0
    return config


@pytest.fixture
def make_executable() -> Callable[..., Path]:
    """Writes an executable file (a Python script with a shebang) at the given path."""

    def _make(path: Path, body: str = "import sys\nsys.exit(0)\n") -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(f"#!{sys.executable}\n{body}")
        path.chmod(0o755)
        return path

    return _make


@pytest.fixture
def make_marker() -> Callable[[Path], Path]:
    """Creates the project marker file in the given directory."""

    def _make(directory: Path) -> Path:
        directory.mkdir(parents=True, exist_ok=True)
        marker = directory / "Cargo.toml"
        marker.write_text('[package]\nname = "localcast"\n')
        return marker

    return _make

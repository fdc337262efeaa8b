# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Shared fixtures for the hoist test-suite."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from threading import Lock
from types import SimpleNamespace

import pytest


class RecordingRunner:
    """Command runner that records calls instead of spawning processes."""

    def __init__(self) -> None:
        self.calls: list[tuple[tuple[str, ...], Path | None]] = []
        self.program_exit_codes: dict[str, int] = {}
        self.cwd_exit_codes: dict[Path, int] = {}
        self._lock = Lock()

    def __call__(self, args: Sequence[str], cwd: Path | None):
        with self._lock:
            self.calls.append((tuple(args), cwd))
        if cwd is not None and cwd in self.cwd_exit_codes:
            return SimpleNamespace(returncode=self.cwd_exit_codes[cwd])
        return SimpleNamespace(returncode=self.program_exit_codes.get(args[0], 0))

    @property
    def commands(self) -> list[tuple[str, ...]]:
        return [command for command, _ in self.calls]


@pytest.fixture(autouse=True)
def hoist_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point the hoist home at a per-test directory."""

    home = tmp_path / "hoist-home"
    monkeypatch.setenv("APP_HOIST_HOME", str(home))
    return home


@pytest.fixture
def recording_runner() -> RecordingRunner:
    return RecordingRunner()

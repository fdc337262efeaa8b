# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Read-only filesystem probes used by detection rules."""

from __future__ import annotations

import logging
from abc import abstractmethod
from pathlib import Path
from typing import Protocol, runtime_checkable

LOGGER = logging.getLogger(__name__)


@runtime_checkable
class FilesystemProbe(Protocol):
    """Answer existence and content questions relative to one target root.

    Implementations never raise for unreadable entries: a file that cannot be
    read is reported as absent.
    """

    @property
    @abstractmethod
    def root(self) -> Path:
        """Return the directory the probe answers questions about."""

    @abstractmethod
    def exists(self, relative: str) -> bool:
        """Return whether ``relative`` names an existing entry under the root."""

    @abstractmethod
    def read_text(self, relative: str) -> str | None:
        """Return the text of ``relative`` or ``None`` when missing or unreadable."""


class LocalProbe:
    """Probe backed by the local filesystem."""

    def __init__(self, root: Path) -> None:
        self._root = root

    @property
    def root(self) -> Path:
        return self._root

    def exists(self, relative: str) -> bool:
        try:
            return (self._root / relative).exists()
        except OSError:
            return False

    def read_text(self, relative: str) -> str | None:
        candidate = self._root / relative
        try:
            return candidate.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as exc:
            LOGGER.debug("treating unreadable marker %s as absent: %s", candidate, exc)
            return None


__all__ = ["FilesystemProbe", "LocalProbe"]

# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Exception hierarchy shared by the hoist components."""

from __future__ import annotations

from pathlib import Path


class HoistError(RuntimeError):
    """Base class for errors raised by hoist."""


class ConfigError(HoistError):
    """Raised when configuration input is invalid."""


class CacheRootError(HoistError):
    """Raised when the on-disk cache root cannot be created."""

    def __init__(self, root: Path, reason: str) -> None:
        super().__init__(f"Unable to create cache directory {root}: {reason}")
        self.root = root


class ContractViolationError(HoistError):
    """Raised when a selection does not match the catalog offered for a target."""

    def __init__(self, target: Path, flag_id: str, message: str) -> None:
        super().__init__(f"{target}: {message}")
        self.target = target
        self.flag_id = flag_id


class UnknownActionError(ContractViolationError):
    """Raised when a selection names a flag the target's catalog does not offer."""

    def __init__(self, target: Path, flag_id: str) -> None:
        super().__init__(target, flag_id, f"action '{flag_id}' is not available for this target")


class MissingValueError(ContractViolationError):
    """Raised when a value-required action is selected without a value."""

    def __init__(self, target: Path, flag_id: str) -> None:
        super().__init__(target, flag_id, f"action '{flag_id}' requires a value")


class UnexpectedValueError(ContractViolationError):
    """Raised when a value is supplied for an action that takes none."""

    def __init__(self, target: Path, flag_id: str) -> None:
        super().__init__(target, flag_id, f"action '{flag_id}' does not accept a value")


__all__ = [
    "CacheRootError",
    "ConfigError",
    "ContractViolationError",
    "HoistError",
    "MissingValueError",
    "UnexpectedValueError",
    "UnknownActionError",
]

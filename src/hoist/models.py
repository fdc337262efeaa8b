# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Data models shared by detection, synthesis, caching and execution."""

from __future__ import annotations

from collections.abc import Sequence
from enum import Enum
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ProjectKind(Enum):
    """Ecosystem classification produced by detection."""

    MANAGED_PYTHON = "uv"
    VENV_PYTHON = "venv"
    GENERIC_PYTHON = "python"
    GO = "go"
    RUST = "rust"
    JAVASCRIPT = "javascript"
    TYPESCRIPT = "typescript"
    UNKNOWN = "unknown"

    @classmethod
    def from_str(cls, value: str) -> ProjectKind:
        for member in cls:
            if member.value == value:
                return member
        raise ValueError(value)

    @property
    def label(self) -> str:
        return _KIND_LABELS[self]

    @property
    def is_python(self) -> bool:
        return self in {ProjectKind.MANAGED_PYTHON, ProjectKind.VENV_PYTHON, ProjectKind.GENERIC_PYTHON}

    @property
    def is_javascript(self) -> bool:
        return self in {ProjectKind.JAVASCRIPT, ProjectKind.TYPESCRIPT}


_KIND_LABELS: dict[ProjectKind, str] = {
    ProjectKind.MANAGED_PYTHON: "UV",
    ProjectKind.VENV_PYTHON: "venv",
    ProjectKind.GENERIC_PYTHON: "generic Python",
    ProjectKind.GO: "Go",
    ProjectKind.RUST: "Rust",
    ProjectKind.JAVASCRIPT: "JavaScript",
    ProjectKind.TYPESCRIPT: "TypeScript",
    ProjectKind.UNKNOWN: "unknown",
}


class TargetDescriptor(BaseModel):
    """Resolved shape of a target directory.

    ``metadata`` carries detection facts that synthesis needs without touching
    the filesystem, such as the Go module name.
    """

    model_config = ConfigDict(frozen=True)

    path: Path
    kind: ProjectKind
    entry_point: str
    package_manager: str | None = None
    metadata: dict[str, str] = Field(default_factory=dict)


class Action(BaseModel):
    """One selectable operation offered for a target."""

    model_config = ConfigDict(frozen=True)

    flag_id: str
    description: str
    value_required: bool = False


ActionCatalog = tuple[Action, ...]


class Selection(BaseModel):
    """A chosen action and its optional value."""

    model_config = ConfigDict(frozen=True)

    flag_id: str
    value: str | None = None

    @classmethod
    def parse(cls, raw: str) -> Selection:
        """Build a selection from ``flag`` or ``flag=value`` text."""

        flag_id, sep, value = raw.partition("=")
        return cls(flag_id=flag_id.strip(), value=value if sep else None)


SelectionSet = Sequence[Selection]

EmptyReason = Literal["no-selection", "no-contribution"]


class Invocation(BaseModel):
    """Concrete program, arguments and working directory for a target.

    An invocation with no arguments is empty; ``reason`` records whether
    nothing was selected or the selections contributed no tokens.
    """

    model_config = ConfigDict(frozen=True)

    program: str
    argv: tuple[str, ...] = ()
    working_directory: Path
    reason: EmptyReason | None = None

    @field_validator("argv", mode="before")
    @classmethod
    def _coerce_argv(cls, value: object) -> tuple[str, ...]:
        if isinstance(value, str):
            return (value,)
        if isinstance(value, Sequence):
            return tuple(str(entry) for entry in value)
        raise TypeError("Invocation.argv must be a sequence of strings")

    @property
    def is_empty(self) -> bool:
        return not self.argv

    @property
    def command(self) -> tuple[str, ...]:
        return (self.program, *self.argv)


class TwoPhaseInvocation(BaseModel):
    """Build-then-install invocation for compiled targets."""

    model_config = ConfigDict(frozen=True)

    program: str
    build_argv: tuple[str, ...]
    install_name: str
    artifact_path: Path
    working_directory: Path

    @property
    def command(self) -> tuple[str, ...]:
        return (self.program, *self.build_argv)

    def install_command(self, install_dir: Path, mode: str) -> tuple[str, ...]:
        """Return the command copying the built artifact into ``install_dir``."""

        return ("install", "-m", mode, str(self.artifact_path), str(install_dir / self.install_name))


AnyInvocation = Invocation | TwoPhaseInvocation


class CacheRecord(BaseModel):
    """Persisted detection result for one target path."""

    model_config = ConfigDict(validate_assignment=True)

    kind: ProjectKind
    entry_point: str
    package_manager: str | None = None
    last_updated: int = 0
    metadata: dict[str, str] = Field(default_factory=dict)

    def is_valid(self, max_age_seconds: int, now: int) -> bool:
        return max(now - self.last_updated, 0) < max_age_seconds

    @classmethod
    def from_descriptor(cls, descriptor: TargetDescriptor) -> CacheRecord:
        return cls(
            kind=descriptor.kind,
            entry_point=descriptor.entry_point,
            package_manager=descriptor.package_manager,
            metadata=dict(descriptor.metadata),
        )

    def to_descriptor(self, path: Path) -> TargetDescriptor:
        return TargetDescriptor(
            path=path,
            kind=self.kind,
            entry_point=self.entry_point,
            package_manager=self.package_manager,
            metadata=dict(self.metadata),
        )


class CacheStats(BaseModel):
    """Read-only summary of cache occupancy."""

    model_config = ConfigDict(frozen=True)

    memory_entries: int
    file_entries: int
    total_bytes: int
    max_age_seconds: int

    def __str__(self) -> str:
        return (
            f"Cache Stats: {self.memory_entries} in memory, {self.file_entries} on disk, "
            f"{self.total_bytes} bytes total, {self.max_age_seconds}s max age"
        )


class TargetPhase(Enum):
    QUEUED = "queued"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class PhaseEvent(BaseModel):
    model_config = ConfigDict(frozen=True)

    target: Path
    phase: TargetPhase


class ExecutionStatus(Enum):
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    NOOP = "noop"
    DRY_RUN = "dry-run"


FailedPhase = Literal["synthesis", "run", "build", "install"]


class ExecutionResult(BaseModel):
    """Outcome of running one target's invocation.

    ``follow_up`` holds the install command that a dry-run two-phase target
    would run after ``command``.
    """

    model_config = ConfigDict(frozen=True)

    target: Path
    status: ExecutionStatus
    error: str | None = None
    detail: str | None = None
    failed_phase: FailedPhase | None = None
    command: tuple[str, ...] = ()
    follow_up: tuple[str, ...] = ()

    @property
    def success(self) -> bool:
        return self.status is not ExecutionStatus.FAILED


class BatchResult(BaseModel):
    """Per-target results of a batch, in submission order."""

    model_config = ConfigDict(frozen=True)

    results: tuple[ExecutionResult, ...] = ()

    @property
    def failures(self) -> tuple[ExecutionResult, ...]:
        return tuple(result for result in self.results if not result.success)

    @property
    def success(self) -> bool:
        return not self.failures

    def exit_code(self) -> int:
        return 0 if self.success else 1


__all__ = [
    "Action",
    "ActionCatalog",
    "AnyInvocation",
    "BatchResult",
    "CacheRecord",
    "CacheStats",
    "EmptyReason",
    "ExecutionResult",
    "ExecutionStatus",
    "FailedPhase",
    "Invocation",
    "PhaseEvent",
    "ProjectKind",
    "Selection",
    "SelectionSet",
    "TargetDescriptor",
    "TargetPhase",
    "TwoPhaseInvocation",
]

# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Target classification, entry point resolution and manifest inspection.

Detection is expressed as an ordered tuple of :class:`DetectionRule` values.
Each rule is a pure predicate over a :class:`~hoist.probe.FilesystemProbe`, so
the whole policy can be exercised against an in-memory probe. The first rule
that matches decides the kind.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from .constants import (
    BUN_LOCKFILES,
    CARGO_MANIFEST,
    CURRENT_DIRECTORY,
    DEFAULT_PACKAGE_MANAGER,
    GO_ENTRY_CANDIDATES,
    GO_MANIFEST,
    MODULE_METADATA_KEY,
    NPM_MANIFEST,
    PNPM_LOCKFILE,
    PYPROJECT_MANIFEST,
    PYTHON_DEFAULT_ENTRY,
    PYTHON_ENTRY_CANDIDATES,
    TSCONFIG,
    UV_LOCKFILE,
    UV_TOOL_SECTION,
    VENV_ACTIVATE_SCRIPT,
    YARN_LOCKFILE,
)
from .models import ProjectKind, TargetDescriptor
from .probe import FilesystemProbe, LocalProbe

ProbeFactory = Callable[[Path], FilesystemProbe]

_MODULE_DIRECTIVE: Final[re.Pattern[str]] = re.compile(r"^\s*module\s+(?P<path>\"[^\"]+\"|`[^`]+`|\S+)")
_MAJOR_VERSION_SUFFIX: Final[re.Pattern[str]] = re.compile(r"^v\d+$")


@dataclass(frozen=True, slots=True)
class DetectionRule:
    """Map a filesystem predicate to the kind it identifies."""

    kind: ProjectKind
    predicate: Callable[[FilesystemProbe], bool]
    description: str

    def matches(self, probe: FilesystemProbe) -> bool:
        return self.predicate(probe)


def _declares_uv_section(probe: FilesystemProbe) -> bool:
    content = probe.read_text(PYPROJECT_MANIFEST)
    return content is not None and UV_TOOL_SECTION in content


def is_managed_python(probe: FilesystemProbe) -> bool:
    """Return whether ``pyproject.toml`` is managed by uv (``[tool.uv]`` or ``uv.lock``)."""

    if not probe.exists(PYPROJECT_MANIFEST):
        return False
    return _declares_uv_section(probe) or probe.exists(UV_LOCKFILE)


def is_virtualenv(probe: FilesystemProbe) -> bool:
    """Return whether the target is itself a virtualenv with an activation script."""

    return probe.exists(VENV_ACTIVATE_SCRIPT)


def is_go_module(probe: FilesystemProbe) -> bool:
    """Return whether a ``go.mod`` manifest is present."""

    return probe.exists(GO_MANIFEST)


def is_cargo_package(probe: FilesystemProbe) -> bool:
    """Return whether a ``Cargo.toml`` manifest is present."""

    return probe.exists(CARGO_MANIFEST)


def is_typescript_package(probe: FilesystemProbe) -> bool:
    """Return whether ``package.json`` sits beside a ``tsconfig.json``."""

    return probe.exists(NPM_MANIFEST) and probe.exists(TSCONFIG)


def is_javascript_package(probe: FilesystemProbe) -> bool:
    """Return whether a ``package.json`` manifest is present."""

    return probe.exists(NPM_MANIFEST)


def is_python_project(probe: FilesystemProbe) -> bool:
    """Return whether a bare ``pyproject.toml`` is present."""

    return probe.exists(PYPROJECT_MANIFEST)


DEFAULT_RULES: Final[tuple[DetectionRule, ...]] = (
    DetectionRule(ProjectKind.MANAGED_PYTHON, is_managed_python, "pyproject.toml with [tool.uv] or uv.lock"),
    DetectionRule(ProjectKind.VENV_PYTHON, is_virtualenv, "virtualenv activation script"),
    DetectionRule(ProjectKind.GO, is_go_module, "go.mod"),
    DetectionRule(ProjectKind.RUST, is_cargo_package, "Cargo.toml"),
    DetectionRule(ProjectKind.TYPESCRIPT, is_typescript_package, "package.json with tsconfig.json"),
    DetectionRule(ProjectKind.JAVASCRIPT, is_javascript_package, "package.json"),
    DetectionRule(ProjectKind.GENERIC_PYTHON, is_python_project, "pyproject.toml"),
)

ENTRY_CANDIDATES: Final[Mapping[ProjectKind, tuple[str, ...]]] = {
    ProjectKind.MANAGED_PYTHON: PYTHON_ENTRY_CANDIDATES,
    ProjectKind.VENV_PYTHON: PYTHON_ENTRY_CANDIDATES,
    ProjectKind.GENERIC_PYTHON: PYTHON_ENTRY_CANDIDATES,
    ProjectKind.GO: GO_ENTRY_CANDIDATES,
}

# Checked in order; the first lock file present wins.
LOCKFILE_MANAGERS: Final[tuple[tuple[str, str], ...]] = (
    (YARN_LOCKFILE, "yarn"),
    (PNPM_LOCKFILE, "pnpm"),
    *((lockfile, "bun") for lockfile in BUN_LOCKFILES),
)


def detect_kind(
    probe: FilesystemProbe,
    *,
    rules: Iterable[DetectionRule] = DEFAULT_RULES,
    fallback: ProjectKind = ProjectKind.GENERIC_PYTHON,
) -> ProjectKind:
    """Return the kind of the first rule matching ``probe``.

    Args:
        probe: Probe rooted at the target directory.
        rules: Ordered rules; the first match wins.
        fallback: Kind returned when no rule matches.

    Returns:
        ProjectKind: Detected kind.
    """

    for rule in rules:
        if rule.matches(probe):
            return rule.kind
    return fallback


def resolve_entry_point(probe: FilesystemProbe, kind: ProjectKind) -> str:
    """Return the first conventional entry point present for ``kind``.

    Python kinds default to ``app.py``; everything else defaults to the
    target directory itself.
    """

    for candidate in ENTRY_CANDIDATES.get(kind, ()):
        if probe.exists(candidate):
            return candidate
    return PYTHON_DEFAULT_ENTRY if kind.is_python else CURRENT_DIRECTORY


def detect_package_manager(probe: FilesystemProbe) -> str:
    """Return the JavaScript package manager implied by lock files, defaulting to npm."""

    for lockfile, manager in LOCKFILE_MANAGERS:
        if probe.exists(lockfile):
            return manager
    return DEFAULT_PACKAGE_MANAGER


def parse_go_module(content: str) -> str | None:
    """Return the binary name implied by a ``go.mod`` module directive.

    The last element of the module path is used, skipping a trailing major
    version element such as ``v2``.
    """

    for line in content.splitlines():
        match = _MODULE_DIRECTIVE.match(line.split("//", 1)[0])
        if match is None:
            continue
        module_path = match.group("path").strip("\"`")
        parts = [part for part in module_path.split("/") if part]
        if len(parts) > 1 and _MAJOR_VERSION_SUFFIX.match(parts[-1]):
            parts.pop()
        return parts[-1] if parts else None
    return None


def go_module_name(probe: FilesystemProbe) -> str:
    """Return the Go binary name from ``go.mod``, falling back to the directory name."""

    content = probe.read_text(GO_MANIFEST)
    name = parse_go_module(content) if content is not None else None
    return name or probe.root.name


class Detector:
    """Resolve :class:`TargetDescriptor` values for target directories."""

    def __init__(
        self,
        *,
        rules: Iterable[DetectionRule] = DEFAULT_RULES,
        fallback: ProjectKind = ProjectKind.GENERIC_PYTHON,
        probe_factory: ProbeFactory = LocalProbe,
    ) -> None:
        self._rules = tuple(rules)
        self._fallback = fallback
        self._probe_factory = probe_factory

    @property
    def fallback(self) -> ProjectKind:
        return self._fallback

    def detect(self, path: Path) -> ProjectKind:
        return detect_kind(self._probe_factory(path), rules=self._rules, fallback=self._fallback)

    def entry_point(self, path: Path, kind: ProjectKind) -> str:
        return resolve_entry_point(self._probe_factory(path), kind)

    def package_manager(self, path: Path) -> str:
        return detect_package_manager(self._probe_factory(path))

    def describe(self, path: Path) -> TargetDescriptor:
        """Run every detection step for ``path`` and bundle the results.

        Args:
            path: Target directory.

        Returns:
            TargetDescriptor: Kind, entry point and the manifest facts that
            catalog building and synthesis depend on.
        """

        probe = self._probe_factory(path)
        kind = detect_kind(probe, rules=self._rules, fallback=self._fallback)
        package_manager = detect_package_manager(probe) if kind.is_javascript else None
        metadata: dict[str, str] = {}
        if kind is ProjectKind.GO:
            metadata[MODULE_METADATA_KEY] = go_module_name(probe)
        return TargetDescriptor(
            path=path,
            kind=kind,
            entry_point=resolve_entry_point(probe, kind),
            package_manager=package_manager,
            metadata=metadata,
        )


__all__ = [
    "DEFAULT_RULES",
    "ENTRY_CANDIDATES",
    "LOCKFILE_MANAGERS",
    "DetectionRule",
    "Detector",
    "ProbeFactory",
    "detect_kind",
    "detect_package_manager",
    "go_module_name",
    "parse_go_module",
    "resolve_entry_point",
]

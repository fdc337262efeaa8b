# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Per-kind action catalogs and selection validation."""

from __future__ import annotations

from collections.abc import Sequence

from .constants import DEFAULT_PACKAGE_MANAGER
from .errors import MissingValueError, UnexpectedValueError, UnknownActionError
from .models import Action, ActionCatalog, ProjectKind, Selection, TargetDescriptor


def _run_action(entry_point: str) -> Action:
    return Action(flag_id="run", description=f"Run the app ({entry_point})")


def _managed_python(descriptor: TargetDescriptor) -> ActionCatalog:
    return (
        _run_action(descriptor.entry_point),
        Action(flag_id="sync", description="Sync dependencies"),
        Action(flag_id="add", description="Install a package", value_required=True),
        Action(flag_id="remove", description="Uninstall a package", value_required=True),
    )


def _venv_python(descriptor: TargetDescriptor) -> ActionCatalog:
    return (
        _run_action(descriptor.entry_point),
        Action(flag_id="install", description="Install a package", value_required=True),
        Action(flag_id="uninstall", description="Uninstall a package", value_required=True),
    )


def _generic_python(descriptor: TargetDescriptor) -> ActionCatalog:
    return (_run_action(descriptor.entry_point),)


def _go(descriptor: TargetDescriptor) -> ActionCatalog:
    return (
        _run_action(descriptor.entry_point),
        Action(flag_id="build", description="Build the application and install the binary"),
        Action(flag_id="test", description="Run tests"),
        Action(flag_id="tidy", description="Tidy go.mod"),
        Action(flag_id="get", description="Add a module dependency", value_required=True),
    )


def _rust(_descriptor: TargetDescriptor) -> ActionCatalog:
    return (
        Action(flag_id="run", description="Run the binary"),
        Action(flag_id="build", description="Build the project"),
        Action(flag_id="test", description="Run tests"),
        Action(flag_id="check", description="Check code without building"),
        Action(flag_id="clippy", description="Run clippy lints"),
        Action(flag_id="install", description="Install the binary with cargo"),
    )


def _javascript(descriptor: TargetDescriptor) -> ActionCatalog:
    manager = descriptor.package_manager or DEFAULT_PACKAGE_MANAGER
    return (
        Action(flag_id="install", description=f"Install dependencies with {manager}"),
        Action(flag_id="add", description=f"Add a package with {manager}", value_required=True),
        Action(flag_id="run", description=f"Start the app with {manager}"),
        Action(flag_id="test", description=f"Run tests with {manager}"),
        Action(flag_id="build", description=f"Build project with {manager}"),
    )


def _unknown(_descriptor: TargetDescriptor) -> ActionCatalog:
    return ()


_CATALOG_BUILDERS = {
    ProjectKind.MANAGED_PYTHON: _managed_python,
    ProjectKind.VENV_PYTHON: _venv_python,
    ProjectKind.GENERIC_PYTHON: _generic_python,
    ProjectKind.GO: _go,
    ProjectKind.RUST: _rust,
    ProjectKind.JAVASCRIPT: _javascript,
    ProjectKind.TYPESCRIPT: _javascript,
    ProjectKind.UNKNOWN: _unknown,
}


def build_catalog(descriptor: TargetDescriptor) -> ActionCatalog:
    """Return the ordered actions offered for ``descriptor``'s kind."""

    return _CATALOG_BUILDERS[descriptor.kind](descriptor)


def common_catalog(catalogs: Sequence[ActionCatalog]) -> ActionCatalog:
    """Return the actions of the first catalog that every catalog offers.

    Args:
        catalogs: Catalogs of every target taking part in a batch.

    Returns:
        ActionCatalog: Shared actions in the first catalog's order.
    """

    if not catalogs:
        return ()
    first, *rest = catalogs
    shared = [{action.flag_id for action in catalog} for catalog in rest]
    return tuple(action for action in first if all(action.flag_id in flags for flags in shared))


def validate_selections(
    descriptor: TargetDescriptor,
    selections: Sequence[Selection],
    catalog: ActionCatalog | None = None,
) -> None:
    """Reject selections that the target's catalog does not admit.

    Args:
        descriptor: Target the selections apply to.
        selections: Ordered selections chosen by the caller.
        catalog: Catalog to validate against; built from ``descriptor`` when omitted.

    Raises:
        UnknownActionError: If a flag is not offered for the target.
        MissingValueError: If a value-required flag has no value.
        UnexpectedValueError: If a value is supplied for a flag that takes none.
    """

    offered = {action.flag_id: action for action in (catalog if catalog is not None else build_catalog(descriptor))}
    for selection in selections:
        action = offered.get(selection.flag_id)
        if action is None:
            raise UnknownActionError(descriptor.path, selection.flag_id)
        if action.value_required and not selection.value:
            raise MissingValueError(descriptor.path, selection.flag_id)
        if not action.value_required and selection.value is not None:
            raise UnexpectedValueError(descriptor.path, selection.flag_id)


__all__ = ["build_catalog", "common_catalog", "validate_selections"]

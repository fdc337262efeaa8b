# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Project commands: ``run`` and ``actions``."""

from __future__ import annotations

import typer

from ..config import HoistConfig
from ..errors import CacheRootError, ContractViolationError
from ..execution import format_command
from ..logging import MessageLevel, emit, fail, info, ok, section, warn
from ..models import BatchResult, ExecutionStatus, PhaseEvent, Selection, TargetPhase
from ..orchestrator import Orchestrator
from .options import (
    ACTION_OPTION,
    CONFIG_OPTION,
    DRY_RUN_OPTION,
    EMOJI_OPTION,
    JOBS_OPTION,
    MAX_AGE_OPTION,
    PATHS_ARGUMENT,
    CommonOptions,
    resolve_config,
)

_NOOP_MESSAGES = {
    "no-selection": "nothing selected",
    "no-contribution": "selected actions produce no command for this target",
}

_PHASE_LEVELS = {
    TargetPhase.QUEUED: MessageLevel.INFO,
    TargetPhase.RUNNING: MessageLevel.INFO,
    TargetPhase.SUCCEEDED: MessageLevel.OK,
    TargetPhase.FAILED: MessageLevel.FAIL,
}


def register_project_commands(app: typer.Typer) -> None:
    """Attach the ``run`` and ``actions`` commands to ``app``."""

    app.command("run")(run_command)
    app.command("actions")(actions_command)


def run_command(
    paths: PATHS_ARGUMENT,
    action: ACTION_OPTION = None,
    dry_run: DRY_RUN_OPTION = False,
    max_age: MAX_AGE_OPTION = None,
    jobs: JOBS_OPTION = None,
    config: CONFIG_OPTION = None,
    use_emoji: EMOJI_OPTION = None,
) -> None:
    """Run the selected actions against every target."""

    settings = resolve_config(CommonOptions(config_path=config, max_age=max_age, jobs=jobs, use_emoji=use_emoji))
    selections = [Selection.parse(raw) for raw in action or []]
    orchestrator = _build_orchestrator(settings, observe=True)

    try:
        result = orchestrator.run(paths, selections, dry_run=dry_run)
    except ContractViolationError as exc:
        fail(str(exc), use_emoji=settings.use_emoji)
        raise typer.Exit(code=1) from exc

    _report(result, use_emoji=settings.use_emoji)
    raise typer.Exit(code=result.exit_code())


def actions_command(
    paths: PATHS_ARGUMENT,
    max_age: MAX_AGE_OPTION = None,
    config: CONFIG_OPTION = None,
    use_emoji: EMOJI_OPTION = None,
) -> None:
    """List detected kinds and the actions every target supports."""

    settings = resolve_config(CommonOptions(config_path=config, max_age=max_age, jobs=None, use_emoji=use_emoji))
    orchestrator = _build_orchestrator(settings, observe=False)
    descriptors = orchestrator.describe_all(paths)
    for descriptor in descriptors:
        info(f"{descriptor.path}: {descriptor.kind.label} project", use_emoji=settings.use_emoji)
    catalog = orchestrator.common_catalog(descriptors)
    if not catalog:
        warn("No actions are shared by every target", use_emoji=settings.use_emoji)
        return
    section("Actions", use_color=False)
    for entry in catalog:
        flag = f"{entry.flag_id}=VALUE" if entry.value_required else entry.flag_id
        typer.echo(f"  {flag:<20} {entry.description}")


def _build_orchestrator(settings: HoistConfig, *, observe: bool) -> Orchestrator:
    def _observer(event: PhaseEvent) -> None:
        emit(_PHASE_LEVELS[event.phase], f"{event.target}: {event.phase.value}", use_emoji=settings.use_emoji)

    try:
        return Orchestrator.from_config(settings, observer=_observer if observe else None)
    except CacheRootError as exc:
        fail(str(exc), use_emoji=settings.use_emoji)
        raise typer.Exit(code=1) from exc


def _report(result: BatchResult, *, use_emoji: bool) -> None:
    for entry in result.results:
        target = entry.target
        if entry.status is ExecutionStatus.DRY_RUN:
            info(f"DRY RUN: {format_command(entry.command)}", use_emoji=use_emoji)
            if entry.follow_up:
                info(f"DRY RUN: {format_command(entry.follow_up)}", use_emoji=use_emoji)
        elif entry.status is ExecutionStatus.NOOP:
            reason = _NOOP_MESSAGES.get(entry.detail or "", "nothing to execute")
            warn(f"{target}: {reason}", use_emoji=use_emoji)
        elif entry.status is ExecutionStatus.FAILED:
            fail(f"{target}: {entry.error}", use_emoji=use_emoji)
        else:
            ok(f"{target}: {format_command(entry.command)}", use_emoji=use_emoji)

    if len(result.results) > 1:
        failed = len(result.failures)
        summary = f"{len(result.results) - failed} of {len(result.results)} targets succeeded"
        if failed:
            fail(summary, use_emoji=use_emoji)
        else:
            ok(summary, use_emoji=use_emoji)


__all__ = ["actions_command", "register_project_commands", "run_command"]

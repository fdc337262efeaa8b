# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Bounded concurrent execution of synthesized invocations across targets."""

from __future__ import annotations

import logging
import os
import shlex
from collections.abc import Callable, Sequence
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from threading import BoundedSemaphore

from .constants import DEFAULT_BUILD_DIR, INSTALL_MODE
from .errors import HoistError
from .models import (
    BatchResult,
    ExecutionResult,
    ExecutionStatus,
    FailedPhase,
    Invocation,
    PhaseEvent,
    Selection,
    TargetDescriptor,
    TargetPhase,
    TwoPhaseInvocation,
)
from .process_utils import CommandRunner, default_runner
from .synthesis import synthesize

LOGGER = logging.getLogger(__name__)

PhaseObserver = Callable[[PhaseEvent], None]

# Runners are caller-supplied; anything they raise is a failure of that target.
_RUNNER_ERRORS = (Exception,)


def default_jobs() -> int:
    """Return the number of CPUs available to the host (minimum of 1)."""

    return os.cpu_count() or 1


def format_command(command: Sequence[str]) -> str:
    """Render ``command`` as a shell-quoted line for display."""

    return shlex.join(command)


def _failed(
    target: Path,
    phase: FailedPhase,
    error: str,
    command: Sequence[str] = (),
) -> ExecutionResult:
    return ExecutionResult(
        target=target,
        status=ExecutionStatus.FAILED,
        error=error,
        failed_phase=phase,
        command=tuple(command),
    )


class BatchExecutor:
    """Run each target's invocation as a child process under a permit limit.

    One task per target is submitted to a thread pool; a task holds one permit
    from a bounded semaphore while it synthesizes and runs its command. A
    failing target never cancels its siblings, and results come back in
    submission order.
    """

    def __init__(
        self,
        *,
        runner: CommandRunner | None = None,
        jobs: int | None = None,
        build_dir: Path = Path(DEFAULT_BUILD_DIR),
        install_dir: Path | None = None,
        observer: PhaseObserver | None = None,
    ) -> None:
        """Initialise the executor.

        Args:
            runner: Callable running ``(args, cwd)``; defaults to a subprocess runner.
            jobs: Maximum number of targets running at once.
            build_dir: Directory receiving two-phase build artifacts.
            install_dir: Destination of installed two-phase artifacts.
            observer: Callback receiving phase transitions, called from worker threads.

        Raises:
            ValueError: If ``jobs`` is less than one.
        """

        resolved_jobs = default_jobs() if jobs is None else jobs
        if resolved_jobs < 1:
            raise ValueError("jobs must be at least 1")
        self._runner = runner or default_runner
        self._jobs = resolved_jobs
        self._build_dir = build_dir
        self._install_dir = install_dir if install_dir is not None else Path.home() / ".local" / "bin"
        self._observer = observer

    @property
    def jobs(self) -> int:
        return self._jobs

    def run(
        self,
        targets: Sequence[TargetDescriptor],
        selections: Sequence[Selection],
        *,
        dry_run: bool = False,
    ) -> BatchResult:
        """Execute ``selections`` against every target.

        Args:
            targets: Resolved targets; each interprets the selections through its own kind.
            selections: Ordered selections shared by all targets.
            dry_run: Synthesize without starting any process.

        Returns:
            BatchResult: One result per target, in submission order.
        """

        if not targets:
            return BatchResult()
        permits = BoundedSemaphore(self._jobs)
        for target in targets:
            self._emit(target.path, TargetPhase.QUEUED)
        results: list[ExecutionResult | None] = [None] * len(targets)
        with ThreadPoolExecutor(max_workers=min(self._jobs, len(targets))) as pool:
            future_map = {
                pool.submit(self._admit, permits, target, selections, dry_run): order
                for order, target in enumerate(targets)
            }
            for future in as_completed(future_map):
                results[future_map[future]] = future.result()
        return BatchResult(results=tuple(result for result in results if result is not None))

    def _admit(
        self,
        permits: BoundedSemaphore,
        target: TargetDescriptor,
        selections: Sequence[Selection],
        dry_run: bool,
    ) -> ExecutionResult:
        with permits:
            self._emit(target.path, TargetPhase.RUNNING)
            try:
                result = self.execute_target(target, selections, dry_run=dry_run)
            except Exception as exc:  # noqa: BLE001 - one target must not abort the batch
                LOGGER.exception("unexpected error while executing %s", target.path)
                result = _failed(target.path, "run", f"unexpected error: {exc}")
        self._emit(target.path, TargetPhase.SUCCEEDED if result.success else TargetPhase.FAILED)
        return result

    def execute_target(
        self,
        target: TargetDescriptor,
        selections: Sequence[Selection],
        *,
        dry_run: bool = False,
    ) -> ExecutionResult:
        """Synthesize and run one target's invocation without permit accounting."""

        try:
            invocation = synthesize(target, selections, build_dir=self._build_dir)
        except HoistError as exc:
            return _failed(target.path, "synthesis", str(exc))

        if isinstance(invocation, Invocation) and invocation.is_empty:
            return ExecutionResult(target=target.path, status=ExecutionStatus.NOOP, detail=invocation.reason)
        if dry_run:
            follow_up = (
                invocation.install_command(self._install_dir, INSTALL_MODE)
                if isinstance(invocation, TwoPhaseInvocation)
                else ()
            )
            return ExecutionResult(
                target=target.path,
                status=ExecutionStatus.DRY_RUN,
                command=invocation.command,
                follow_up=follow_up,
            )
        if isinstance(invocation, TwoPhaseInvocation):
            return self._run_two_phase(target.path, invocation)
        return self._run_single(target.path, invocation)

    def _run_single(self, target: Path, invocation: Invocation) -> ExecutionResult:
        command = invocation.command
        try:
            completed = self._runner(command, invocation.working_directory)
        except _RUNNER_ERRORS as exc:
            return _failed(target, "run", f"'{format_command(command)}' could not be started: {exc}", command)
        if completed.returncode != 0:
            message = f"'{format_command(command)}' exited with status {completed.returncode}"
            return _failed(target, "run", message, command)
        return ExecutionResult(target=target, status=ExecutionStatus.SUCCEEDED, command=command)

    def _run_two_phase(self, target: Path, invocation: TwoPhaseInvocation) -> ExecutionResult:
        build_command = invocation.command
        try:
            completed = self._runner(build_command, invocation.working_directory)
        except _RUNNER_ERRORS as exc:
            message = f"build failed: '{format_command(build_command)}' could not be started: {exc}"
            return _failed(target, "build", message, build_command)
        if completed.returncode != 0:
            message = f"build failed: '{format_command(build_command)}' exited with status {completed.returncode}"
            return _failed(target, "build", message, build_command)

        install_command = invocation.install_command(self._install_dir, INSTALL_MODE)
        try:
            self._install_dir.mkdir(parents=True, exist_ok=True)
            completed = self._runner(install_command, invocation.working_directory)
        except _RUNNER_ERRORS as exc:
            return _failed(target, "install", f"built but install failed: {exc}", install_command)
        if completed.returncode != 0:
            status = completed.returncode
            message = f"built but install failed: '{format_command(install_command)}' exited with status {status}"
            return _failed(target, "install", message, install_command)
        return ExecutionResult(target=target, status=ExecutionStatus.SUCCEEDED, command=build_command)

    def _emit(self, target: Path, phase: TargetPhase) -> None:
        if self._observer is None:
            return
        try:
            self._observer(PhaseEvent(target=target, phase=phase))
        except Exception:  # noqa: BLE001 - observers never change a target's outcome
            LOGGER.exception("phase observer failed for %s (%s)", target, phase.value)


__all__ = ["BatchExecutor", "PhaseObserver", "default_jobs"]

# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Child process helpers used by the batch executor.

Synthesized commands are argument lists. The program is resolved against
``PATH`` up front so a missing tool surfaces as :class:`ExecutableNotFoundError`
instead of a bare ``OSError`` from deep inside :mod:`subprocess`. Child output
is inherited so build and test logs stream straight to the terminal.
"""

from __future__ import annotations

import shlex
import shutil

# Bandit: commands are argument lists and never pass through an implicit shell.
import subprocess  # nosec B404
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Protocol


class CompletedCommand(Protocol):
    """Minimal view of a finished child process consumed by the executor."""

    returncode: int


class CommandRunner(Protocol):
    def __call__(self, args: Sequence[str], cwd: Path | None) -> CompletedCommand: ...


class ExecutableNotFoundError(FileNotFoundError):
    """Raised when a command's program cannot be located."""

    def __init__(self, program: str) -> None:
        super().__init__(f"Executable '{program}' was not found on PATH")
        self.program = program


class SubprocessExecutionError(RuntimeError):
    """Raised by checked runs when the child exits with a non-zero status."""

    def __init__(self, command: Sequence[str], returncode: int) -> None:
        super().__init__(f"'{shlex.join(command)}' exited with status {returncode}")
        self.command = tuple(command)
        self.returncode = returncode


def resolve_executable(program: str) -> str:
    """Return an absolute path for ``program``.

    Raises:
        ValueError: If ``program`` is empty.
        ExecutableNotFoundError: If ``program`` is not on ``PATH``.
    """

    if not program:
        raise ValueError("command has no program to run")
    if Path(program).is_absolute():
        return program
    located = shutil.which(program)
    if located is None:
        raise ExecutableNotFoundError(program)
    return located


def run_command(
    args: Sequence[str],
    *,
    cwd: Path | None = None,
    env: Mapping[str, str] | None = None,
    check: bool = False,
) -> subprocess.CompletedProcess[bytes]:
    """Run ``args`` in ``cwd`` and wait for it to finish.

    Args:
        args: Program followed by its arguments.
        cwd: Working directory for the child.
        env: Replacement environment; inherits the current one when omitted.
        check: Raise instead of returning when the exit status is non-zero.

    Returns:
        subprocess.CompletedProcess[bytes]: Finished process; output is not captured.

    Raises:
        ValueError: If ``args`` is empty.
        ExecutableNotFoundError: If the program is not on ``PATH``.
        SubprocessExecutionError: If ``check`` is true and the command fails.
    """

    if not args:
        raise ValueError("command has no program to run")
    program, *rest = args
    completed = subprocess.run(  # nosec B603
        [resolve_executable(program), *rest],
        cwd=cwd,
        env=dict(env) if env is not None else None,
        check=False,
    )
    if check and completed.returncode != 0:
        raise SubprocessExecutionError(args, completed.returncode)
    return completed


def default_runner(args: Sequence[str], cwd: Path | None) -> CompletedCommand:
    """Run ``args`` in ``cwd`` with inherited output, leaving exit status handling to the caller."""

    return run_command(args, cwd=cwd)


__all__ = [
    "CommandRunner",
    "CompletedCommand",
    "ExecutableNotFoundError",
    "SubprocessExecutionError",
    "default_runner",
    "resolve_executable",
    "run_command",
]

# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Pure mapping from a target and its selections to a concrete invocation.

Every kind owns a :class:`SynthesisPolicy`: the program to run, a static table
of flag transforms, and an assembler that wraps the collected tokens. Tokens
are contributed in selection order. Synthesis performs no I/O; everything it
needs was resolved by detection and travels on the
:class:`~hoist.models.TargetDescriptor`.
"""

from __future__ import annotations

import shlex
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Final

from .catalog import validate_selections
from .constants import CURRENT_DIRECTORY, DEFAULT_BUILD_DIR, DEFAULT_PACKAGE_MANAGER, MODULE_METADATA_KEY
from .models import AnyInvocation, Invocation, ProjectKind, Selection, TargetDescriptor, TwoPhaseInvocation

TWO_PHASE_FLAG: Final[str] = "build"


@dataclass(frozen=True, slots=True)
class SynthesisContext:
    """Inputs available to flag transforms."""

    descriptor: TargetDescriptor
    build_dir: Path

    @property
    def path(self) -> str:
        return str(self.descriptor.path)

    @property
    def entry_point(self) -> str:
        return self.descriptor.entry_point

    @property
    def install_name(self) -> str:
        return self.descriptor.metadata.get(MODULE_METADATA_KEY) or self.descriptor.path.name

    @property
    def artifact_path(self) -> Path:
        return self.build_dir / self.install_name


Transform = Callable[[SynthesisContext, str | None], tuple[str, ...]]
Assembler = Callable[[SynthesisContext, tuple[str, ...]], tuple[str, ...]]


def _fixed(*tokens: str) -> Transform:
    def transform(_ctx: SynthesisContext, _value: str | None) -> tuple[str, ...]:
        return tokens

    return transform


def _with_value(*tokens: str) -> Transform:
    def transform(_ctx: SynthesisContext, value: str | None) -> tuple[str, ...]:
        return (*tokens, value) if value else ()

    return transform


def _concat(_ctx: SynthesisContext, tokens: tuple[str, ...]) -> tuple[str, ...]:
    return tokens


def _uv_project(ctx: SynthesisContext, tokens: tuple[str, ...]) -> tuple[str, ...]:
    return ("--project", ctx.path, *tokens) if tokens else ()


def _activated_shell(_ctx: SynthesisContext, steps: tuple[str, ...]) -> tuple[str, ...]:
    return ("-c", f"source bin/activate && {' && '.join(steps)}") if steps else ()


def _uv_run(ctx: SynthesisContext, _value: str | None) -> tuple[str, ...]:
    return ("run", ctx.entry_point)


def _venv_run(ctx: SynthesisContext, _value: str | None) -> tuple[str, ...]:
    return (f"python {shlex.quote(ctx.entry_point)}",)


def _venv_pip(*args: str) -> Transform:
    def transform(_ctx: SynthesisContext, value: str | None) -> tuple[str, ...]:
        return (shlex.join(("pip", *args, value)),) if value else ()

    return transform


def _python_run(ctx: SynthesisContext, _value: str | None) -> tuple[str, ...]:
    return (ctx.entry_point,)


def _go_run(ctx: SynthesisContext, _value: str | None) -> tuple[str, ...]:
    return ("run", ctx.entry_point)


def _go_build(ctx: SynthesisContext, _value: str | None) -> tuple[str, ...]:
    return ("build", "-o", str(ctx.artifact_path), CURRENT_DIRECTORY)


def _js_add(ctx: SynthesisContext, value: str | None) -> tuple[str, ...]:
    if not value:
        return ()
    verb = "install" if _package_manager(ctx.descriptor) == DEFAULT_PACKAGE_MANAGER else "add"
    return (verb, value)


def _package_manager(descriptor: TargetDescriptor) -> str:
    return descriptor.package_manager or DEFAULT_PACKAGE_MANAGER


@dataclass(frozen=True, slots=True)
class SynthesisPolicy:
    """Program, flag transforms and token assembly for one kind."""

    program: Callable[[TargetDescriptor], str]
    transforms: Mapping[str, Transform] = field(default_factory=dict)
    assemble: Assembler = _concat
    two_phase_flag: str | None = None


def _program(name: str) -> Callable[[TargetDescriptor], str]:
    def resolve(_descriptor: TargetDescriptor) -> str:
        return name

    return resolve


_JAVASCRIPT_POLICY: Final[SynthesisPolicy] = SynthesisPolicy(
    program=_package_manager,
    transforms={
        "install": _fixed("install"),
        "add": _js_add,
        "run": _fixed("run", "start"),
        "test": _fixed("test"),
        "build": _fixed("run", "build"),
    },
)

POLICIES: Final[Mapping[ProjectKind, SynthesisPolicy]] = {
    ProjectKind.MANAGED_PYTHON: SynthesisPolicy(
        program=_program("uv"),
        transforms={
            "run": _uv_run,
            "sync": _fixed("sync"),
            "add": _with_value("add"),
            "remove": _with_value("remove"),
        },
        assemble=_uv_project,
    ),
    ProjectKind.VENV_PYTHON: SynthesisPolicy(
        program=_program("bash"),
        transforms={
            "run": _venv_run,
            "install": _venv_pip("install"),
            "uninstall": _venv_pip("uninstall", "-y"),
        },
        assemble=_activated_shell,
    ),
    ProjectKind.GENERIC_PYTHON: SynthesisPolicy(
        program=_program("python"),
        transforms={"run": _python_run},
    ),
    ProjectKind.GO: SynthesisPolicy(
        program=_program("go"),
        transforms={
            "run": _go_run,
            "build": _go_build,
            "test": _fixed("test", "./..."),
            "tidy": _fixed("mod", "tidy"),
            "get": _with_value("get"),
        },
        two_phase_flag=TWO_PHASE_FLAG,
    ),
    ProjectKind.RUST: SynthesisPolicy(
        program=_program("cargo"),
        transforms={
            "run": _fixed("run"),
            "build": _fixed("build", "--release"),
            "test": _fixed("test"),
            "check": _fixed("check"),
            "clippy": _fixed("clippy"),
            "install": _fixed("install", "--path", CURRENT_DIRECTORY),
        },
    ),
    ProjectKind.JAVASCRIPT: _JAVASCRIPT_POLICY,
    ProjectKind.TYPESCRIPT: _JAVASCRIPT_POLICY,
    ProjectKind.UNKNOWN: SynthesisPolicy(program=_program("")),
}


def synthesize(
    descriptor: TargetDescriptor,
    selections: Sequence[Selection],
    *,
    build_dir: Path = Path(DEFAULT_BUILD_DIR),
) -> AnyInvocation:
    """Return the invocation realising ``selections`` for ``descriptor``.

    Args:
        descriptor: Resolved target shape.
        selections: Ordered selections; order decides token order.
        build_dir: Directory receiving build artifacts of two-phase targets.

    Returns:
        AnyInvocation: A plain invocation, possibly empty, or the two-phase
        variant when the kind's build flag is selected.

    Raises:
        ContractViolationError: If a selection is not admitted by the
            target's catalog.
    """

    validate_selections(descriptor, selections)
    policy = POLICIES[descriptor.kind]
    ctx = SynthesisContext(descriptor=descriptor, build_dir=build_dir)
    program = policy.program(descriptor)
    cwd = descriptor.path

    if policy.two_phase_flag is not None and any(sel.flag_id == policy.two_phase_flag for sel in selections):
        return TwoPhaseInvocation(
            program=program,
            build_argv=policy.transforms[policy.two_phase_flag](ctx, None),
            install_name=ctx.install_name,
            artifact_path=ctx.artifact_path,
            working_directory=cwd,
        )

    if not selections:
        return Invocation(program=program, argv=(), working_directory=cwd, reason="no-selection")

    tokens: list[str] = []
    for selection in selections:
        tokens.extend(policy.transforms[selection.flag_id](ctx, selection.value))
    argv = policy.assemble(ctx, tuple(tokens))
    if not argv:
        return Invocation(program=program, argv=(), working_directory=cwd, reason="no-contribution")
    return Invocation(program=program, argv=argv, working_directory=cwd)


__all__ = ["POLICIES", "TWO_PHASE_FLAG", "SynthesisContext", "SynthesisPolicy", "synthesize"]

# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Shared Typer option declarations and option normalisation."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Annotated

import typer

from ..config import HoistConfig, load_config
from ..errors import ConfigError
from ..logging import fail

PATHS_ARGUMENT = Annotated[
    list[Path],
    typer.Argument(help="Target directories; several paths run in parallel.", show_default=False),
]
ACTION_OPTION = Annotated[
    list[str] | None,
    typer.Option(
        "--action",
        "-a",
        help="Action to run, as FLAG or FLAG=VALUE. Repeat to select several in order.",
    ),
]
DRY_RUN_OPTION = Annotated[
    bool,
    typer.Option("--dry-run", help="Show the synthesized commands without executing them."),
]
MAX_AGE_OPTION = Annotated[
    int | None,
    typer.Option("--max-age", min=1, help="Seconds a cached detection result stays valid."),
]
JOBS_OPTION = Annotated[
    int | None,
    typer.Option("--jobs", "-j", min=1, help="Maximum number of targets running at once."),
]
CONFIG_OPTION = Annotated[
    Path | None,
    typer.Option("--config", help="Configuration file (defaults to ~/.app-hoist/config.toml)."),
]
EMOJI_OPTION = Annotated[
    bool | None,
    typer.Option(
        "--emoji/--no-emoji",
        help="Toggle emoji output; defaults to the configured value.",
        show_default=False,
    ),
]


@dataclass(slots=True)
class CommonOptions:
    """Normalised CLI inputs shared by the project commands."""

    config_path: Path | None
    max_age: int | None
    jobs: int | None
    use_emoji: bool | None


def resolve_config(options: CommonOptions) -> HoistConfig:
    """Load configuration with CLI values taking precedence.

    Raises:
        typer.Exit: When configuration resolution fails.
    """

    overrides = {
        "max_age_seconds": options.max_age,
        "jobs": options.jobs,
        "use_emoji": options.use_emoji,
    }
    try:
        return load_config(options.config_path, overrides)
    except ConfigError as exc:
        fail(f"Configuration invalid: {exc}", use_emoji=options.use_emoji is not False)
        raise typer.Exit(code=1) from exc


__all__ = [
    "ACTION_OPTION",
    "CONFIG_OPTION",
    "DRY_RUN_OPTION",
    "EMOJI_OPTION",
    "JOBS_OPTION",
    "MAX_AGE_OPTION",
    "PATHS_ARGUMENT",
    "CommonOptions",
    "resolve_config",
]

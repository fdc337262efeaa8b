# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""CLI application entry point wiring commands."""

from __future__ import annotations

import typer

from .cache import cache_app
from .run import register_project_commands

app = typer.Typer(
    name="hoist",
    help="Detect project kinds and run their actions across one or many targets.",
    no_args_is_help=True,
    add_completion=False,
)
register_project_commands(app)
app.add_typer(cache_app, name="cache")

__all__ = ["app"]

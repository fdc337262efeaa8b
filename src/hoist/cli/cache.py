# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Cache maintenance commands."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from ..cache import DetectionCache
from ..errors import CacheRootError
from ..logging import fail, info, ok
from ..orchestrator import normalise_target
from .options import CONFIG_OPTION, EMOJI_OPTION, CommonOptions, resolve_config

cache_app = typer.Typer(help="Inspect and maintain the detection cache.", no_args_is_help=True)


def _open_cache(config_path: Path | None, use_emoji: bool | None) -> tuple[DetectionCache, bool]:
    """Return the configured cache and the effective emoji setting.

    Raises:
        typer.Exit: When configuration is invalid or the cache root cannot be created.
    """

    settings = resolve_config(CommonOptions(config_path=config_path, max_age=None, jobs=None, use_emoji=use_emoji))
    try:
        store = DetectionCache(settings.resolved_cache_dir, max_age_seconds=settings.max_age_seconds)
    except CacheRootError as exc:
        fail(str(exc), use_emoji=settings.use_emoji)
        raise typer.Exit(code=1) from exc
    return store, settings.use_emoji


@cache_app.command("stats")
def stats_command(config: CONFIG_OPTION = None, use_emoji: EMOJI_OPTION = None) -> None:
    """Show cache occupancy."""

    store, emoji_enabled = _open_cache(config, use_emoji)
    info(str(store.stats()), use_emoji=emoji_enabled)


@cache_app.command("clear")
def clear_command(config: CONFIG_OPTION = None, use_emoji: EMOJI_OPTION = None) -> None:
    """Remove every cached detection result."""

    store, emoji_enabled = _open_cache(config, use_emoji)
    store.clear_all()
    ok(f"Cleared cache at {store.root}", use_emoji=emoji_enabled)


@cache_app.command("invalidate")
def invalidate_command(
    path: Annotated[Path, typer.Argument(help="Target directory whose cached result is dropped.")],
    config: CONFIG_OPTION = None,
    use_emoji: EMOJI_OPTION = None,
) -> None:
    """Forget the cached detection result for one target."""

    store, emoji_enabled = _open_cache(config, use_emoji)
    target = normalise_target(path)
    store.invalidate(str(target))
    ok(f"Invalidated cache entry for {target}", use_emoji=emoji_enabled)


__all__ = ["cache_app"]

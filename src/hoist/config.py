# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Configuration model and loader for hoist."""

from __future__ import annotations

import os
import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .constants import (
    CACHE_DIR_NAME,
    CONFIG_FILE_NAME,
    CONFIG_SECTION,
    DEFAULT_BUILD_DIR,
    DEFAULT_MAX_AGE_SECONDS,
    HOME_DIR_NAME,
    HOME_ENV_VAR,
)
from .errors import ConfigError
from .execution import default_jobs


def default_home() -> Path:
    """Return the hoist home directory, honouring ``APP_HOIST_HOME``."""

    env_value = os.environ.get(HOME_ENV_VAR)
    if env_value:
        return Path(env_value).expanduser()
    return Path.home() / HOME_DIR_NAME


class HoistConfig(BaseModel):
    """Settings shared by the cache, detector and executor."""

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    home: Path = Field(default_factory=default_home)
    cache_dir: Path | None = None
    max_age_seconds: int = Field(default=DEFAULT_MAX_AGE_SECONDS, gt=0)
    jobs: int = Field(default_factory=default_jobs, ge=1)
    build_dir: Path = Path(DEFAULT_BUILD_DIR)
    install_dir: Path = Field(default_factory=lambda: Path.home() / ".local" / "bin")
    strict_detection: bool = False
    use_emoji: bool = True

    @field_validator("home", "cache_dir", "build_dir", "install_dir", mode="after")
    @classmethod
    def _expand_user(cls, value: Path | None) -> Path | None:
        return value.expanduser() if value is not None else None

    @property
    def resolved_cache_dir(self) -> Path:
        return self.cache_dir if self.cache_dir is not None else self.home / CACHE_DIR_NAME


def load_config(path: Path | None = None, overrides: Mapping[str, Any] | None = None) -> HoistConfig:
    """Load configuration from ``path`` and apply ``overrides``.

    Args:
        path: TOML file whose ``[hoist]`` table is read; defaults to
            ``<home>/config.toml``. A missing file is not an error.
        overrides: Values taking precedence over the file, typically CLI
            options. ``None`` values are ignored.

    Returns:
        HoistConfig: Validated configuration.

    Raises:
        ConfigError: If the file cannot be parsed or values are invalid.
    """

    config_path = path if path is not None else default_home() / CONFIG_FILE_NAME
    data: dict[str, Any] = {}
    if config_path.is_file():
        try:
            payload = tomllib.loads(config_path.read_text(encoding="utf-8"))
        except (OSError, tomllib.TOMLDecodeError) as exc:
            raise ConfigError(f"Unable to read {config_path}: {exc}") from exc
        section = payload.get(CONFIG_SECTION, {})
        if not isinstance(section, dict):
            raise ConfigError(f"[{CONFIG_SECTION}] in {config_path} must be a table")
        data.update(section)
    data.update({key: value for key, value in (overrides or {}).items() if value is not None})
    try:
        return HoistConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(str(exc)) from exc


__all__ = ["HoistConfig", "default_home", "load_config"]

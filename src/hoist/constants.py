# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Shared constants used across hoist modules."""

from __future__ import annotations

from typing import Final

PYPROJECT_MANIFEST: Final[str] = "pyproject.toml"
UV_LOCKFILE: Final[str] = "uv.lock"
UV_TOOL_SECTION: Final[str] = "[tool.uv]"
VENV_ACTIVATE_SCRIPT: Final[str] = "bin/activate"
GO_MANIFEST: Final[str] = "go.mod"
CARGO_MANIFEST: Final[str] = "Cargo.toml"
NPM_MANIFEST: Final[str] = "package.json"
TSCONFIG: Final[str] = "tsconfig.json"
YARN_LOCKFILE: Final[str] = "yarn.lock"
PNPM_LOCKFILE: Final[str] = "pnpm-lock.yaml"
BUN_LOCKFILES: Final[tuple[str, ...]] = ("bun.lockb", "bun.lock")

DEFAULT_PACKAGE_MANAGER: Final[str] = "npm"
CURRENT_DIRECTORY: Final[str] = "."
PYTHON_DEFAULT_ENTRY: Final[str] = "app.py"
PYTHON_ENTRY_CANDIDATES: Final[tuple[str, ...]] = ("app.py", "main.py", "__main__.py")
GO_ENTRY_CANDIDATES: Final[tuple[str, ...]] = ("main.go", "cmd/main.go")

MODULE_METADATA_KEY: Final[str] = "module"

HOME_ENV_VAR: Final[str] = "APP_HOIST_HOME"
HOME_DIR_NAME: Final[str] = ".app-hoist"
CACHE_DIR_NAME: Final[str] = "cache"
CONFIG_FILE_NAME: Final[str] = "config.toml"
CONFIG_SECTION: Final[str] = "hoist"
CACHE_FILE_SUFFIX: Final[str] = ".json"
DEFAULT_MAX_AGE_SECONDS: Final[int] = 3600
DEFAULT_BUILD_DIR: Final[str] = "/tmp"
INSTALL_MODE: Final[str] = "755"

__all__ = [
    "BUN_LOCKFILES",
    "CACHE_DIR_NAME",
    "CACHE_FILE_SUFFIX",
    "CARGO_MANIFEST",
    "CONFIG_FILE_NAME",
    "CONFIG_SECTION",
    "CURRENT_DIRECTORY",
    "DEFAULT_BUILD_DIR",
    "DEFAULT_MAX_AGE_SECONDS",
    "DEFAULT_PACKAGE_MANAGER",
    "GO_ENTRY_CANDIDATES",
    "GO_MANIFEST",
    "HOME_DIR_NAME",
    "HOME_ENV_VAR",
    "INSTALL_MODE",
    "MODULE_METADATA_KEY",
    "NPM_MANIFEST",
    "PNPM_LOCKFILE",
    "PYPROJECT_MANIFEST",
    "PYTHON_DEFAULT_ENTRY",
    "PYTHON_ENTRY_CANDIDATES",
    "TSCONFIG",
    "UV_LOCKFILE",
    "UV_TOOL_SECTION",
    "VENV_ACTIVATE_SCRIPT",
    "YARN_LOCKFILE",
]

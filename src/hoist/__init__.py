# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Project detection, action synthesis and bounded batch execution."""

from __future__ import annotations

from importlib import metadata

from .cache import DetectionCache
from .catalog import build_catalog, common_catalog, validate_selections
from .detection import Detector
from .execution import BatchExecutor
from .models import ProjectKind, Selection, TargetDescriptor
from .orchestrator import Orchestrator
from .synthesis import synthesize

__all__ = [
    "BatchExecutor",
    "DetectionCache",
    "Detector",
    "Orchestrator",
    "ProjectKind",
    "Selection",
    "TargetDescriptor",
    "__version__",
    "build_catalog",
    "common_catalog",
    "synthesize",
    "validate_selections",
]

try:
    __version__ = metadata.version("app-hoist")
except metadata.PackageNotFoundError:  # pragma: no cover - local development fallback
    __version__ = "0.0.0"

# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Detection result caching."""

from __future__ import annotations

from .store import Clock, DetectionCache, encode_key

__all__ = ["Clock", "DetectionCache", "encode_key"]

# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Wire detection, caching, synthesis and execution for one or many targets."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from pathlib import Path

from .cache import DetectionCache
from .catalog import build_catalog, common_catalog, validate_selections
from .config import HoistConfig
from .constants import DEFAULT_BUILD_DIR
from .detection import Detector
from .execution import BatchExecutor, PhaseObserver
from .models import (
    ActionCatalog,
    AnyInvocation,
    BatchResult,
    CacheRecord,
    ExecutionResult,
    ProjectKind,
    Selection,
    TargetDescriptor,
)
from .process_utils import CommandRunner
from .synthesis import synthesize

LOGGER = logging.getLogger(__name__)


def normalise_target(path: Path) -> Path:
    """Return the absolute, symlink-free form of ``path`` used as the cache key."""

    return path.expanduser().resolve()


class Orchestrator:
    """Resolve targets through the cache and run selections against them.

    A single target is the one-element case of a batch: every run goes through
    the :class:`BatchExecutor`.
    """

    def __init__(
        self,
        *,
        cache: DetectionCache,
        detector: Detector | None = None,
        executor: BatchExecutor | None = None,
        build_dir: Path = Path(DEFAULT_BUILD_DIR),
    ) -> None:
        self._cache = cache
        self._detector = detector or Detector()
        self._executor = executor or BatchExecutor()
        self._build_dir = build_dir

    @classmethod
    def from_config(
        cls,
        config: HoistConfig,
        *,
        runner: CommandRunner | None = None,
        observer: PhaseObserver | None = None,
    ) -> Orchestrator:
        """Build an orchestrator whose components follow ``config``.

        Raises:
            CacheRootError: If the cache directory cannot be created.
        """

        fallback = ProjectKind.UNKNOWN if config.strict_detection else ProjectKind.GENERIC_PYTHON
        return cls(
            cache=DetectionCache(config.resolved_cache_dir, max_age_seconds=config.max_age_seconds),
            detector=Detector(fallback=fallback),
            executor=BatchExecutor(
                runner=runner,
                jobs=config.jobs,
                build_dir=config.build_dir,
                install_dir=config.install_dir,
                observer=observer,
            ),
            build_dir=config.build_dir,
        )

    @property
    def cache(self) -> DetectionCache:
        return self._cache

    def describe(self, path: Path) -> TargetDescriptor:
        """Return the descriptor for ``path``, detecting only on a cache miss.

        Args:
            path: Target directory.

        Returns:
            TargetDescriptor: Cached or freshly detected descriptor.
        """

        target = normalise_target(path)
        key = str(target)
        record = self._cache.get(key)
        if record is not None:
            return record.to_descriptor(target)
        descriptor = self._detector.describe(target)
        LOGGER.debug("detected %s as %s", target, descriptor.kind.value)
        self._cache.set(key, CacheRecord.from_descriptor(descriptor))
        return descriptor

    def describe_all(self, paths: Iterable[Path]) -> list[TargetDescriptor]:
        """Describe every path in order."""

        return [self.describe(path) for path in paths]

    def catalog_for(self, descriptor: TargetDescriptor) -> ActionCatalog:
        """Return the actions offered for one described target."""

        return build_catalog(descriptor)

    def common_catalog(self, descriptors: Sequence[TargetDescriptor]) -> ActionCatalog:
        """Return the actions every target offers, in the first target's order."""

        return common_catalog([build_catalog(descriptor) for descriptor in descriptors])

    def prepare(self, descriptor: TargetDescriptor, selections: Sequence[Selection]) -> AnyInvocation:
        """Return the invocation ``selections`` resolve to for ``descriptor``.

        Raises:
            ContractViolationError: If the selections do not fit the target's catalog.
        """

        return synthesize(descriptor, selections, build_dir=self._build_dir)

    def run(
        self,
        paths: Sequence[Path],
        selections: Sequence[Selection],
        *,
        dry_run: bool = False,
    ) -> BatchResult:
        """Describe ``paths``, validate ``selections`` and execute them.

        Every target's selections are validated before any process starts.

        Args:
            paths: Target directories, in reporting order.
            selections: Ordered selections applied to every target.
            dry_run: Synthesize without starting processes.

        Returns:
            BatchResult: Per-target results in the order of ``paths``.

        Raises:
            ContractViolationError: If any target rejects the selections.
        """

        descriptors = self.describe_all(paths)
        for descriptor in descriptors:
            validate_selections(descriptor, selections)
        return self._executor.run(descriptors, selections, dry_run=dry_run)

    def run_single(
        self,
        path: Path,
        selections: Sequence[Selection],
        *,
        dry_run: bool = False,
    ) -> ExecutionResult:
        """Run ``selections`` against one target; a batch of one."""

        return self.run([path], selections, dry_run=dry_run).results[0]


__all__ = ["Orchestrator", "normalise_target"]

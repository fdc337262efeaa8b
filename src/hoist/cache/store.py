# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Two-tier (memory and disk) cache for target detection results."""

from __future__ import annotations

import hashlib
import json
import logging
import os
import re
import shutil
import tempfile
import time
from collections.abc import Callable
from pathlib import Path
from threading import Lock
from typing import Final

from pydantic import ValidationError

from ..constants import CACHE_FILE_SUFFIX, DEFAULT_MAX_AGE_SECONDS
from ..errors import CacheRootError
from ..models import CacheRecord, CacheStats

LOGGER = logging.getLogger(__name__)

Clock = Callable[[], float]

_SAFE_CHARACTER: Final[re.Pattern[str]] = re.compile(r"[A-Za-z0-9_-]")
_MAX_ENCODED_LENGTH: Final[int] = 200
_TRUNCATED_PREFIX_LENGTH: Final[int] = 150
_TEMP_SUFFIX: Final[str] = ".tmp"


class _CacheMiss(Exception):
    """Raised when an on-disk entry cannot be used."""


def encode_key(key: str) -> str:
    """Return a filesystem-safe, collision-free file stem for ``key``.

    Every character outside ``[A-Za-z0-9_-]`` is percent-encoded (``%`` itself
    included), which keeps the mapping injective. Encodings longer than the
    length limit keep a readable prefix followed by the SHA-256 digest of the
    key.

    Args:
        key: Cache key, normally an absolute target path.

    Returns:
        str: File stem without the cache suffix.
    """

    encoded = "".join(
        char if _SAFE_CHARACTER.fullmatch(char) else "".join(f"%{byte:02X}" for byte in char.encode("utf-8"))
        for char in key
    )
    if len(encoded) <= _MAX_ENCODED_LENGTH:
        return encoded
    digest = hashlib.sha256(key.encode("utf-8")).hexdigest()
    return f"{encoded[:_TRUNCATED_PREFIX_LENGTH]}-{digest}"


class DetectionCache:
    """Cache :class:`CacheRecord` values keyed by target path.

    Reads consult memory first and fall back to disk, promoting valid disk
    records into memory. Records older than ``max_age_seconds`` are never
    returned; expired or malformed entries are removed when encountered.
    """

    def __init__(
        self,
        root: Path,
        *,
        max_age_seconds: int = DEFAULT_MAX_AGE_SECONDS,
        clock: Clock = time.time,
    ) -> None:
        """Initialise the cache rooted at ``root``.

        Args:
            root: Directory holding one JSON file per key.
            max_age_seconds: Age at which a record stops being served.
            clock: Source of epoch seconds.

        Raises:
            CacheRootError: If ``root`` cannot be created.
            ValueError: If ``max_age_seconds`` is not positive.
        """

        if max_age_seconds <= 0:
            raise ValueError("max_age_seconds must be positive")
        self._root = root
        self._max_age = max_age_seconds
        self._clock = clock
        self._memory: dict[str, CacheRecord] = {}
        self._lock = Lock()
        self._writers: dict[str, Lock] = {}
        self._ensure_root()

    @property
    def root(self) -> Path:
        return self._root

    @property
    def max_age_seconds(self) -> int:
        return self._max_age

    def get(self, key: str) -> CacheRecord | None:
        """Return a copy of the valid record for ``key`` or ``None``.

        Args:
            key: Cache key.

        Returns:
            CacheRecord | None: Fresh record, or ``None`` on a miss.
        """

        now = self._now()
        with self._lock:
            record = self._memory.get(key)
            if record is not None:
                if record.is_valid(self._max_age, now):
                    return record.model_copy(deep=True)
                del self._memory[key]

        entry_path = self._entry_path(key)
        if not entry_path.is_file():
            return None
        try:
            loaded: CacheRecord | None = self._read_entry(entry_path)
        except _CacheMiss:
            LOGGER.debug("discarding unreadable cache entry %s", entry_path)
            loaded = None

        # set() publishes to memory before replacing the file: a record in memory
        # is at least as new as the one just read, and a missing file means the
        # key was invalidated or cleared meanwhile.
        with self._lock:
            current = self._memory.get(key)
            if current is not None:
                return current.model_copy(deep=True) if current.is_valid(self._max_age, now) else None
            if loaded is None or not loaded.is_valid(self._max_age, now):
                self._discard(entry_path)
                return None
            if not entry_path.is_file():
                return None
            self._memory[key] = loaded
        return loaded.model_copy(deep=True)

    def set(self, key: str, record: CacheRecord) -> CacheRecord:
        """Stamp ``record`` with the current time and store it in both tiers.

        Disk writes are best-effort: a failure is logged and the memory tier
        still holds the record.

        Args:
            key: Cache key.
            record: Record to store; the caller's instance is not modified.

        Returns:
            CacheRecord: The stored, timestamped record.
        """

        with self._writer_lock(key):
            stored = record.model_copy(deep=True, update={"last_updated": self._now()})
            with self._lock:
                self._memory[key] = stored
            try:
                self._write_entry(self._entry_path(key), stored)
            except OSError as exc:
                LOGGER.warning("unable to persist cache entry for %s: %s", key, exc)
        return stored.model_copy(deep=True)

    def invalidate(self, key: str) -> None:
        """Remove ``key`` from both tiers; unknown keys are ignored."""

        with self._writer_lock(key), self._lock:
            self._memory.pop(key, None)
            self._discard(self._entry_path(key))

    def clear_all(self) -> None:
        """Drop every record from memory and recreate an empty cache root."""

        with self._lock:
            self._memory.clear()
        shutil.rmtree(self._root, ignore_errors=True)
        self._ensure_root()

    def stats(self) -> CacheStats:
        """Count memory records and on-disk entries with their total size."""

        with self._lock:
            memory_entries = len(self._memory)
        file_entries = 0
        total_bytes = 0
        for entry in self._root.glob(f"*{CACHE_FILE_SUFFIX}"):
            try:
                size = entry.stat().st_size
            except OSError:
                continue
            file_entries += 1
            total_bytes += size
        return CacheStats(
            memory_entries=memory_entries,
            file_entries=file_entries,
            total_bytes=total_bytes,
            max_age_seconds=self._max_age,
        )

    def entry_path(self, key: str) -> Path:
        """Return the file that stores ``key`` on disk."""

        return self._entry_path(key)

    def _writer_lock(self, key: str) -> Lock:
        with self._lock:
            return self._writers.setdefault(key, Lock())

    def _now(self) -> int:
        return int(self._clock())

    def _ensure_root(self) -> None:
        try:
            self._root.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise CacheRootError(self._root, str(exc)) from exc

    def _entry_path(self, key: str) -> Path:
        return self._root / f"{encode_key(key)}{CACHE_FILE_SUFFIX}"

    @staticmethod
    def _read_entry(entry_path: Path) -> CacheRecord:
        try:
            raw = json.loads(entry_path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, UnicodeDecodeError, OSError) as exc:
            raise _CacheMiss from exc
        if not isinstance(raw, dict):
            raise _CacheMiss
        try:
            return CacheRecord.model_validate(raw)
        except ValidationError as exc:
            raise _CacheMiss from exc

    def _write_entry(self, entry_path: Path, record: CacheRecord) -> None:
        # Readers only ever see complete files: write a sibling temp file and
        # atomically replace the entry.
        self._root.mkdir(parents=True, exist_ok=True)
        payload = json.dumps(record.model_dump(mode="json"), indent=2)
        handle = tempfile.NamedTemporaryFile(
            "w",
            encoding="utf-8",
            dir=self._root,
            prefix=f".{entry_path.stem[:32]}.",
            suffix=_TEMP_SUFFIX,
            delete=False,
        )
        try:
            with handle:
                handle.write(payload)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(handle.name, entry_path)
        except OSError:
            Path(handle.name).unlink(missing_ok=True)
            raise

    @staticmethod
    def _discard(entry_path: Path) -> None:
        try:
            entry_path.unlink(missing_ok=True)
        except OSError as exc:
            LOGGER.debug("unable to remove cache entry %s: %s", entry_path, exc)


__all__ = ["Clock", "DetectionCache", "encode_key"]

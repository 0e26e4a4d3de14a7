"""Two-tier TTL cache: an in-process dict backed by JSON files on disk."""

from __future__ import annotations

import hashlib
import json
import logging
import os
import re
import tempfile
import time
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .constants import CACHE_EXPIRY_SECONDS

logger = logging.getLogger(__name__)

_UNSAFE_KEY_CHARS = re.compile(r"[^A-Za-z0-9_.-]")


@dataclass(frozen=True)
class CacheEntry:
    key: str
    value: Any
    expires_at: float

    def is_expired(self, now: float) -> bool:
        return now >= self.expires_at


class FileCacheStore:
    """Durable tier holding one JSON document per key.

    Documents carry an absolute ``expires`` timestamp; expiry is enforced by the
    reader, so stale files may stay on disk until overwritten.
    """

    def __init__(self, directory: str | os.PathLike[str], namespace: str = "") -> None:
        self._root = Path(directory) / namespace if namespace else Path(directory)

    def path_for(self, key: str) -> Path:
        """Readable prefix plus a digest of the raw key, so distinct keys never share a file."""
        digest = hashlib.sha256(key.encode("utf-8")).hexdigest()[:16]
        return self._root / f"{_UNSAFE_KEY_CHARS.sub('_', key)}-{digest}.json"

    def read(self, key: str) -> CacheEntry | None:
        path = self.path_for(key)
        try:
            payload = json.loads(path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return None
        except (OSError, ValueError) as exc:
            logger.warning("Ignoring unreadable cache file %s: %s", path, exc)
            return None

        try:
            return CacheEntry(key=key, value=payload["value"], expires_at=float(payload["expires"]))
        except (KeyError, TypeError, ValueError):
            logger.warning("Ignoring malformed cache file %s", path)
            return None

    def write(self, entry: CacheEntry) -> None:
        path = self.path_for(entry.key)
        path.parent.mkdir(parents=True, exist_ok=True)
        document = json.dumps({"value": entry.value, "expires": entry.expires_at})
        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=".cache-", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(document)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise


class LayeredCache:
    """Read-through/write-through cache over a fast and a durable tier."""

    def __init__(
        self,
        durable: FileCacheStore,
        *,
        ttl: float = CACHE_EXPIRY_SECONDS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._durable = durable
        self._ttl = ttl
        self._clock = clock
        self._memory: dict[str, CacheEntry] = {}

    @property
    def ttl(self) -> float:
        return self._ttl

    def get(self, key: str) -> Any | None:
        now = self._clock()

        entry = self._memory.get(key)
        if entry is not None:
            if not entry.is_expired(now):
                return entry.value
            del self._memory[key]

        durable_entry = self._durable.read(key)
        if durable_entry is None or durable_entry.is_expired(now):
            return None

        # keep the durable expiry so the fast tier never outlives it
        self._memory[key] = durable_entry
        return durable_entry.value

    def set(self, key: str, value: Any) -> None:
        entry = CacheEntry(key=key, value=value, expires_at=self._clock() + self._ttl)
        self._memory[key] = entry
        self._durable.write(entry)

"""Incremental build cache stores.

Entries are keyed by source folder path and fully replaced on every
successful transform run. The host pipeline reads them to decide
whether a folder can be skipped.
"""

import json
import logging
from abc import ABC, abstractmethod
from collections.abc import Iterator
from pathlib import Path
from typing import Any

from ..sources.base import AssetTree
from .types import CacheEntry

logger = logging.getLogger(__name__)


class CacheStore(ABC):
    """Abstract cache store scoped to one pipeline run."""

    @abstractmethod
    def get(self, key: str) -> CacheEntry | None:
        pass

    @abstractmethod
    def set(self, key: str, entry: CacheEntry) -> None:
        """Create or overwrite the entry for a source folder."""
        pass

    @abstractmethod
    def delete(self, key: str) -> None:
        pass

    @abstractmethod
    def keys(self) -> list[str]:
        pass

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.get(key) is not None


class MemoryCacheStore(CacheStore):
    """Dictionary-backed cache store."""

    def __init__(self) -> None:
        self._entries: dict[str, CacheEntry] = {}

    def get(self, key: str) -> CacheEntry | None:
        return self._entries.get(key)

    def set(self, key: str, entry: CacheEntry) -> None:
        self._entries[key] = entry

    def delete(self, key: str) -> None:
        self._entries.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._entries.keys())

    def __iter__(self) -> Iterator[str]:
        return iter(self.keys())

    def __len__(self) -> int:
        return len(self._entries)


class JsonCacheStore(MemoryCacheStore):
    """Cache store persisted to a JSON file between runs.

    Example:
        >>> cache = JsonCacheStore(Path('.audiosprite-cache.json'))
        >>> cache.load()
        >>> ...  # run the pipeline
        >>> cache.save()
    """

    VERSION = 1

    def __init__(self, path: Path):
        super().__init__()
        self.path = Path(path)

    def load(self) -> None:
        """Load entries from disk; a missing file means an empty cache.

        Raises:
            json.JSONDecodeError: If the cache file is corrupt
        """
        if not self.path.exists():
            return

        with self.path.open("r", encoding="utf-8") as f:
            data = json.load(f)

        if not isinstance(data, dict):
            logger.warning("Ignoring cache %s: expected a JSON object", self.path)
            return

        if data.get("version") != self.VERSION:
            logger.warning("Ignoring cache %s with unknown version %r", self.path, data.get("version"))
            return

        for key, raw in data.get("entries", {}).items():
            self._entries[key] = CacheEntry(
                tree=AssetTree.from_dict(raw["tree"]),
                transformData=raw["transformData"],
            )
        logger.debug("Loaded %d cache entries from %s", len(self._entries), self.path)

    def save(self) -> None:
        """Write all entries to disk."""
        entries: dict[str, Any] = {
            key: {"tree": entry["tree"].to_dict(), "transformData": entry["transformData"]}
            for key, entry in self._entries.items()
        }

        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("w", encoding="utf-8") as f:
            json.dump({"version": self.VERSION, "entries": entries}, f, indent=2)
        logger.debug("Saved %d cache entries to %s", len(entries), self.path)

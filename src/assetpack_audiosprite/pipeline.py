"""Sprite pipeline over a tree of tagged folders.

This module runs a folder transform over every matching folder of an
input tree. Folders run concurrently and independently: one folder's
failure is recorded and never cancels the others.
"""

import asyncio
import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .core.cache import CacheStore
from .core.reconciler import has_separator
from .core.types import CacheEntry
from .sources.base import AssetTree
from .transformers.base import Processor, Transform

logger = logging.getLogger(__name__)

BUILT = "built"
SKIPPED = "skipped"
EMPTY = "empty"
FAILED = "failed"


@dataclass
class FolderResult:
    """Outcome of the transform for one folder."""

    path: str
    status: str
    entry: CacheEntry | None = None
    error: BaseException | None = None


@dataclass
class PipelineResult:
    """Outcomes for every folder the pipeline visited."""

    folders: list[FolderResult] = field(default_factory=list)

    def with_status(self, status: str) -> list[FolderResult]:
        return [f for f in self.folders if f.status == status]

    @property
    def failed(self) -> list[FolderResult]:
        return self.with_status(FAILED)

    @property
    def ok(self) -> bool:
        return not self.failed

    def summary(self) -> dict[str, Any]:
        """JSON-friendly summary keyed by status."""
        return {
            BUILT: [f.path for f in self.with_status(BUILT)],
            SKIPPED: [f.path for f in self.with_status(SKIPPED)],
            EMPTY: [f.path for f in self.with_status(EMPTY)],
            FAILED: {f.path: str(f.error) for f in self.failed},
        }


class SpritePipeline:
    """Runs a folder transform over a tree.

    Example:
        >>> tree = scan_tree(Path('assets'))
        >>> pipeline = SpritePipeline(
        ...     AudioSpriteTransform(),
        ...     LocalProcessor(Path('assets'), Path('dist')),
        ...     MemoryCacheStore(),
        ... )
        >>> result = await pipeline.run(tree)
    """

    def __init__(
        self,
        transform: Transform,
        processor: Processor,
        cache: CacheStore,
        incremental: bool = False,
        overrides: Mapping[str, Any] | None = None,
    ):
        """Initialize the pipeline.

        Args:
            transform: Folder transform to run
            processor: Host output interface
            cache: Cache store for this run
            incremental: Skip folders whose cache entry is still valid
            overrides: Per-invocation option overrides passed to the transform
        """
        self.transform = transform
        self.processor = processor
        self.cache = cache
        self.incremental = incremental
        self.overrides = overrides

    def tagged_folders(self, tree: AssetTree) -> list[AssetTree]:
        """Find folders the transform applies to.

        Folders nested inside a matching folder are part of the outer
        sprite and are not returned separately.
        """
        matches: list[AssetTree] = []

        def visit(node: AssetTree) -> None:
            if node.is_folder and self.transform.test(node, self.overrides):
                matches.append(node)
                return
            for name in sorted(node.children):
                visit(node.children[name])

        visit(tree)
        return matches

    def reusable_entry(self, folder: AssetTree) -> CacheEntry | None:
        """Return the cached result for a folder if it can be reused.

        The folder's digest and the transform's config fingerprint must
        match the cached ones, and every output recorded for the folder
        must still exist.
        """
        entry = self.cache.get(str(folder.path))
        if entry is None:
            return None

        cached_tree = entry["tree"]
        if folder.digest is None or cached_tree.digest != folder.digest:
            return None

        data = entry["transformData"]
        fingerprint = self.transform.fingerprint(folder, self.processor, self.overrides)
        if fingerprint is not None and data.get("config") != fingerprint:
            logger.debug("Config changed for %s", folder.path)
            return None

        # Bare audio names are relative to the directory the encoder wrote to
        output_dir = data.get("outputDir") or ""
        outputs = [
            p if has_separator(p) else os.path.join(output_dir, p)
            for p in (t.path for t in cached_tree.transformed if t.transform_id == self.transform.name)
        ]
        if not outputs or not all(Path(p).exists() for p in outputs):
            return None
        return entry

    async def run_folder(self, folder: AssetTree) -> FolderResult:
        """Transform one folder, or reuse its cached outputs."""
        key = str(folder.path)

        cached = self.reusable_entry(folder) if self.incremental else None
        if cached is not None:
            if cached["tree"] is not folder:
                for transformed in cached["tree"].transformed:
                    self.processor.add_to_tree(folder, transformed.transform_id, transformed.path)
            logger.info("Up to date: %s", key)
            return FolderResult(path=key, status=SKIPPED, entry=cached)

        entry = await self.transform.transform(folder, self.processor, self.cache, self.overrides)
        if entry is None:
            return FolderResult(path=key, status=EMPTY)
        return FolderResult(path=key, status=BUILT, entry=entry)

    async def run(self, tree: AssetTree) -> PipelineResult:
        """Run the transform over every tagged folder concurrently.

        Args:
            tree: Root of the input tree

        Returns:
            PipelineResult with one FolderResult per tagged folder
        """
        folders = self.tagged_folders(tree)
        logger.info("Found %d tagged folders", len(folders))

        outcomes = await asyncio.gather(
            *(self.run_folder(folder) for folder in folders),
            return_exceptions=True,
        )

        result = PipelineResult()
        for folder, outcome in zip(folders, outcomes):
            if isinstance(outcome, BaseException):
                logger.error("%s failed for %s: %s", self.transform.name, folder.path, outcome)
                result.folders.append(
                    FolderResult(path=str(folder.path), status=FAILED, error=outcome)
                )
            else:
                result.folders.append(outcome)

        return result

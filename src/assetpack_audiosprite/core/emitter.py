"""Output registration and cache recording."""

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING

from .cache import CacheStore
from .types import CacheEntry, TransformDataFile

if TYPE_CHECKING:
    from ..sources.base import AssetTree
    from ..transformers.base import Processor

logger = logging.getLogger(__name__)

TRANSFORM_TYPE = "audiosprite"


def build_cache_entry(
    tree: "AssetTree",
    manifest_paths: Sequence[str],
    processor: "Processor",
    config_fingerprint: str = "",
    output_dir: str = "",
) -> CacheEntry:
    """Summarize the manifests produced for a folder.

    Manifests are grouped by distinct path, in emission order.

    Args:
        tree: Source folder node
        manifest_paths: Absolute manifest output paths
        processor: Host interface used to trim paths
        config_fingerprint: Fingerprint of the resolved config
        output_dir: Directory the encoder wrote its files to

    Returns:
        A fresh cache entry
    """
    files: dict[str, TransformDataFile] = {}

    for path in manifest_paths:
        trimmed = processor.trim_output_path(path)
        data_file = files.setdefault(path, TransformDataFile(name=trimmed, paths=[]))
        data_file["paths"].append(trimmed)

    return CacheEntry(
        tree=tree,
        transformData={
            "type": TRANSFORM_TYPE,
            "files": list(files.values()),
            "config": config_fingerprint,
            "outputDir": output_dir,
        },
    )


def emit(
    tree: "AssetTree",
    outputs: Sequence[str],
    manifest_paths: Sequence[str],
    processor: "Processor",
    cache: CacheStore,
    transform_name: str,
    config_fingerprint: str = "",
    output_dir: str = "",
) -> CacheEntry:
    """Register outputs under the source folder and record the cache entry.

    Any previous entry for the folder is replaced.

    Args:
        tree: Source folder node
        outputs: Every output path (manifests and audio files)
        manifest_paths: Subset of outputs that are manifests
        processor: Host output interface
        cache: Cache store for this pipeline run
        transform_name: Transform id used for tree registration
        config_fingerprint: Fingerprint of the resolved config
        output_dir: Directory the encoder wrote its files to

    Returns:
        The cache entry written
    """
    for output in outputs:
        processor.add_to_tree(tree, transform_name, output)

    entry = build_cache_entry(tree, manifest_paths, processor, config_fingerprint, output_dir)
    cache.set(str(tree.path), entry)

    logger.info("Recorded %d outputs for %s", len(outputs), tree.path)
    return entry

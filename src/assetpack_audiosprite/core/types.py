"""Type definitions for sprite manifests and cache records.

This module defines TypedDict classes that mirror the JSON schemas
shipped in core/schemas/ and the cache record consumed by the host
pipeline's incremental build logic.
"""

from typing import TYPE_CHECKING, Any, TypedDict

if TYPE_CHECKING:
    from ..sources.base import AssetTree


# The encoder emits a format-specific document (jukebox, howler, createjs...).
# Only 'resources' is required; every other key is passed through untouched.
SpriteManifest = dict[str, Any]


class TransformDataFile(TypedDict):
    """One manifest artifact produced for a source folder."""

    name: str  # Output-relative path of the manifest
    paths: list[str]  # Output-relative paths grouped under this manifest


class TransformData(TypedDict):
    """Summary of what a transform produced for a source folder."""

    type: str  # Always "audiosprite"
    files: list[TransformDataFile]
    config: str  # Fingerprint of the resolved config that produced the outputs
    outputDir: str  # Encoder output directory; bare audio names are relative to it


class CacheEntry(TypedDict):
    """Cache record keyed by the source folder path."""

    tree: "AssetTree"  # Folder node the outputs were registered under
    transformData: TransformData

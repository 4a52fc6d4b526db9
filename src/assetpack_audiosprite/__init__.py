"""AssetPack Audiosprite.

This package turns tagged folders of audio files into audio sprites:
it runs an external sprite encoder per folder and rewrites the encoder's
manifest into a portable, cache-aware output layout.
"""

# Core library interface
from .pipeline import FolderResult, PipelineResult, SpritePipeline
from .registry import EncoderRegistry
from .sources.base import AssetTree, has_tag, parse_tags, scan_tree
from .transformers.base import Processor, Transform
from .transformers.processor import LocalProcessor

# Core utilities
from .core import CacheEntry, CacheStore, JsonCacheStore, MemoryCacheStore
from .core import Encoder, EncoderError, MalformedManifestError, TransformCallbackError
from .core import ManifestOptions, SpriteOptions, reconcile, resolve

# Audiosprite platform
from .platforms.audiosprite import AudiospriteEncoder, AudioSpriteTransform

# CLI interface
from .cli import build_sprites, main

__version__ = "0.1.0"

# Auto-discover and register all platforms
EncoderRegistry.discover_platforms()

__all__ = [
    # Primary library interface
    "SpritePipeline",
    "PipelineResult",
    "FolderResult",
    "EncoderRegistry",
    "AudioSpriteTransform",
    "AudiospriteEncoder",
    "Transform",
    "Processor",
    "LocalProcessor",
    "AssetTree",
    "has_tag",
    "parse_tags",
    "scan_tree",
    # Core utilities
    "CacheEntry",
    "CacheStore",
    "JsonCacheStore",
    "MemoryCacheStore",
    "Encoder",
    "EncoderError",
    "MalformedManifestError",
    "TransformCallbackError",
    "ManifestOptions",
    "SpriteOptions",
    "reconcile",
    "resolve",
    # CLI
    "build_sprites",
    "main",
]

"""Core transform logic for audio sprites.

This package contains option resolution, source collection, encoder
invocation, manifest reconciliation and cache recording, shared by
every encoder platform.
"""

from .cache import CacheStore, JsonCacheStore, MemoryCacheStore
from .collector import collect
from .emitter import build_cache_entry, emit
from .encoder import Encoder, invoke_encoder
from .errors import (
    AudioSpriteError,
    ConfigurationError,
    EncoderError,
    MalformedManifestError,
    TransformCallbackError,
)
from .options import (
    DEFAULT_ENCODE_OPTIONS,
    DEFAULT_IMPORT_EXTENSIONS,
    ManifestOptions,
    ResolvedConfig,
    SpriteOptions,
    options_from_mapping,
    resolve,
)
from .reconciler import Reconciliation, reconcile, write_reconciliation
from .types import CacheEntry, SpriteManifest, TransformData, TransformDataFile
from .validator import validate_encoder_manifest, validate_options, validate_options_with_error_details

__all__ = [
    "AudioSpriteError",
    "CacheEntry",
    "CacheStore",
    "ConfigurationError",
    "DEFAULT_ENCODE_OPTIONS",
    "DEFAULT_IMPORT_EXTENSIONS",
    "Encoder",
    "EncoderError",
    "JsonCacheStore",
    "MalformedManifestError",
    "ManifestOptions",
    "MemoryCacheStore",
    "Reconciliation",
    "ResolvedConfig",
    "SpriteManifest",
    "SpriteOptions",
    "TransformCallbackError",
    "TransformData",
    "TransformDataFile",
    "build_cache_entry",
    "collect",
    "emit",
    "invoke_encoder",
    "options_from_mapping",
    "reconcile",
    "resolve",
    "validate_encoder_manifest",
    "validate_options",
    "validate_options_with_error_details",
    "write_reconciliation",
]

"""Audio sprite folder transform.

Packs the audio files of a tagged folder into a sprite:
collect -> encode -> reconcile -> write -> register + cache.
"""

import logging
import os
from collections.abc import Mapping
from typing import Any

from ...core.cache import CacheStore
from ...core.collector import collect
from ...core.emitter import emit
from ...core.encoder import Encoder, invoke_encoder
from ...core.options import (
    SpriteOptions,
    config_fingerprint,
    options_from_mapping,
    resolve,
    resolve_tag,
)
from ...core.reconciler import reconcile, write_reconciliation
from ...core.types import CacheEntry
from ...sources.base import AssetTree, has_tag
from ...transformers.base import Processor, Transform
from .encoder import AudiospriteEncoder

logger = logging.getLogger(__name__)


class AudioSpriteTransform(Transform):
    """Transform that turns a tagged folder of audio files into a sprite.

    Example:
        >>> transform = AudioSpriteTransform({
        ...     "tags": {"audiosprite": "sfx"},
        ...     "imports": [".wav", ".mp3"],
        ...     "nested": False,
        ...     "audiosprite": {"export": "ogg,m4a,mp3", "bitrate": 64},
        ... })
        >>> await transform.transform(tree, processor, cache)
    """

    name = "audiosprite"
    folder = True

    def __init__(
        self,
        options: SpriteOptions | Mapping[str, Any] | None = None,
        encoder: Encoder | None = None,
    ):
        """Initialize the transform.

        Args:
            options: Construction-time options layered over the built-in defaults
            encoder: Encoder to delegate to (defaults to the audiosprite CLI)
        """
        if isinstance(options, Mapping):
            options = options_from_mapping(options)
        self.options = options or SpriteOptions()
        self.encoder = encoder or AudiospriteEncoder()

    def test(self, tree: AssetTree, overrides: Mapping[str, Any] | None = None) -> bool:
        """Apply to folders carrying the configured tag."""
        return tree.is_folder and has_tag(tree, "file", resolve_tag(self.options, overrides))

    def fingerprint(
        self,
        tree: AssetTree,
        processor: Processor,
        overrides: Mapping[str, Any] | None = None,
    ) -> str:
        """Fingerprint of the config this folder would be built with."""
        return config_fingerprint(resolve(self.options, overrides, processor.input_to_output(tree.path)))

    async def transform(
        self,
        tree: AssetTree,
        processor: Processor,
        cache: CacheStore,
        overrides: Mapping[str, Any] | None = None,
    ) -> CacheEntry | None:
        """Build the sprite for one tagged folder.

        Returns:
            The cache entry written, or None if the folder has no audio files

        Raises:
            EncoderError: If the encoder fails
            MalformedManifestError: If the encoder response has no 'resources'
            TransformCallbackError: If the manifest transform hook fails
            OSError: If writing outputs fails
        """
        output_folder = processor.input_to_output(tree.path)
        config = resolve(self.options, overrides, output_folder)

        files = collect(tree.path, config.import_extensions)
        if not files:
            logger.info("No audio files in %s, skipping", tree.path)
            return None

        raw_manifest = await invoke_encoder(self.encoder, files, config.encode_options)

        reconciliation = reconcile(raw_manifest, config.encode_options, config.manifest_options)
        outputs = write_reconciliation(reconciliation, processor)

        return emit(
            tree,
            outputs,
            [reconciliation.manifest_path],
            processor,
            cache,
            self.name,
            config_fingerprint=config_fingerprint(config),
            output_dir=os.path.dirname(reconciliation.raw_manifest_path),
        )

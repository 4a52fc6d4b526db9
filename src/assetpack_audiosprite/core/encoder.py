"""Encoder abstraction and the invocation adapter.

Encoders pack a list of audio files into sprite files and return the
manifest describing them. The adapter below is the only place the
pipeline talks to an encoder.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from typing import Any

from .errors import EncoderError
from .types import SpriteManifest
from .validator import validate_encoder_manifest

logger = logging.getLogger(__name__)


class Encoder(ABC):
    """Abstract base class for audio sprite encoders.

    Implementations run the actual encoding (format conversion, sprite
    offsets) and write the encoded files themselves.
    """

    name: str = "encoder"

    @abstractmethod
    async def encode(self, files: Sequence[str], options: Mapping[str, Any]) -> SpriteManifest:
        """Encode files into an audio sprite.

        Args:
            files: Absolute paths of source audio files
            options: Encoder options, including derived 'output' and 'path'

        Returns:
            Manifest with a 'resources' list plus format-specific keys

        Raises:
            EncoderError: If encoding fails
        """
        pass


async def invoke_encoder(
    encoder: Encoder,
    files: Sequence[str],
    options: Mapping[str, Any],
) -> SpriteManifest:
    """Run an encoder and check its response.

    Args:
        encoder: Encoder to delegate to
        files: Collected source files
        options: Resolved encoder options

    Returns:
        The encoder's manifest, unmodified

    Raises:
        EncoderError: If the encoder raised for any reason
        MalformedManifestError: If the response has no 'resources' list
    """
    logger.info("Encoding %d files with %s -> %s", len(files), encoder.name, options.get("output"))

    try:
        manifest = await encoder.encode(list(files), options)
    except EncoderError:
        raise
    except Exception as e:
        raise EncoderError(f"{encoder.name} failed: {e}") from e

    validate_encoder_manifest(manifest)
    return manifest

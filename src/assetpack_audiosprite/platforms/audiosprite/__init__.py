"""Audiosprite platform for the sprite pipeline.

This platform wraps the audiosprite CLI (tonistiigi/audiosprite) and
provides the folder transform that uses it.
"""

from .encoder import AudiospriteEncoder, build_arguments
from .transformer import AudioSpriteTransform

# Auto-register with the registry
from ...registry import EncoderRegistry


def _create_audiosprite_encoder(executable: str | None = None, **kwargs) -> AudiospriteEncoder:
    """Factory function for creating audiosprite encoders.

    Args:
        executable: Optional path to the audiosprite binary
        **kwargs: Additional parameters (unused)

    Returns:
        AudiospriteEncoder instance
    """
    return AudiospriteEncoder(executable)


# Auto-register at module import
EncoderRegistry.register_factory("audiosprite", _create_audiosprite_encoder)

__all__ = [
    "AudiospriteEncoder",
    "AudioSpriteTransform",
    "build_arguments",
]

"""Encoder platforms for the sprite pipeline.

Each platform module provides an encoder and the transform that uses
it, and auto-registers its encoder with the EncoderRegistry when
imported.
"""

# Platform modules are imported dynamically by EncoderRegistry.discover_platforms()
# to handle missing dependencies gracefully

"""Transforms and the host pipeline interface.

This package contains the base classes for transforms and processors.
Encoder-specific transforms live in the platforms/ directory.
"""

from .base import Processor, Transform
from .processor import LocalProcessor

__all__ = ["LocalProcessor", "Processor", "Transform"]

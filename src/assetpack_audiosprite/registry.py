"""Encoder registry for factory-based encoder creation.

This module provides a central registry for encoder factories,
keeping the transform encoder-agnostic and allowing platforms to be
discovered automatically.
"""

import importlib
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Callable

from .core.errors import ConfigurationError

if TYPE_CHECKING:
    from .core.encoder import Encoder

logger = logging.getLogger(__name__)


class EncoderRegistry:
    """Central registry for encoder factories.

    Platforms register their factories when imported, and the registry
    can automatically discover all available platforms.
    """

    _factories: dict[str, Callable[..., "Encoder"]] = {}

    @classmethod
    def register_factory(cls, name: str, factory: Callable[..., "Encoder"]) -> None:
        """Register a factory function for creating encoders.

        Args:
            name: Name of the encoder (e.g., 'audiosprite')
            factory: Callable that creates an Encoder instance

        Example:
            >>> EncoderRegistry.register_factory('audiosprite', AudiospriteEncoder)
        """
        cls._factories[name] = factory

    @classmethod
    def create_encoder(cls, name: str, **kwargs) -> "Encoder":
        """Create an encoder from a registered factory.

        Args:
            name: Name of the registered encoder
            **kwargs: Arguments passed to the factory

        Returns:
            Encoder instance

        Raises:
            ConfigurationError: If name is not registered
        """
        if name not in cls._factories:
            available = ", ".join(cls._factories.keys()) or "none"
            raise ConfigurationError(f"Unknown encoder: '{name}'. Available encoders: {available}")

        return cls._factories[name](**kwargs)

    @classmethod
    def list_encoders(cls) -> list[str]:
        """List all registered encoder names."""
        return list(cls._factories.keys())

    @classmethod
    def discover_platforms(cls) -> None:
        """Auto-discover and import all platforms.

        Each platform package under platforms/ registers itself from its
        __init__.py. Platforms with missing dependencies are skipped.
        """
        platforms_dir = Path(__file__).parent / "platforms"

        if not platforms_dir.exists():
            return

        for platform_path in sorted(platforms_dir.iterdir()):
            if not platform_path.is_dir():
                continue

            if not (platform_path / "__init__.py").exists():
                continue

            platform_name = platform_path.name

            try:
                importlib.import_module(f".platforms.{platform_name}", package=__package__)
            except ImportError as e:
                logger.debug("Skipping platform %s: %s", platform_name, e)

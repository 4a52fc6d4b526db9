"""Base classes for transforms and the host pipeline interface.

A Transform decides whether it applies to a tree node and, if so,
produces outputs through a Processor. The Processor is the host
pipeline's side of the contract: it owns path mapping, writing and
tree registration.
"""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from pathlib import Path
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from ..core.cache import CacheStore
    from ..core.types import CacheEntry
    from ..sources.base import AssetTree


class Processor(ABC):
    """Host pipeline operations a transform may use."""

    @abstractmethod
    def input_to_output(self, path: str | Path) -> str:
        """Map an input path to its output path."""
        pass

    @abstractmethod
    def trim_output_path(self, path: str) -> str:
        """Make an absolute output path relative to the output root."""
        pass

    @abstractmethod
    def save_to_output(self, path: str, data: bytes | str) -> None:
        """Write data at an output path.

        Raises:
            OSError: If writing fails
        """
        pass

    @abstractmethod
    def add_to_tree(self, tree: "AssetTree", transform_id: str, path: str) -> None:
        """Register an output path under the node that produced it."""
        pass


class Transform(ABC):
    """Abstract base class for folder/file transforms.

    Attributes:
        name: Identifier used when registering outputs
        folder: Whether the transform applies to folders rather than files
    """

    name: str = "transform"
    folder: bool = False

    @abstractmethod
    def test(self, tree: "AssetTree", overrides: Mapping[str, Any] | None = None) -> bool:
        """Return True if this transform applies to the node."""
        pass

    def fingerprint(
        self,
        tree: "AssetTree",
        processor: Processor,
        overrides: Mapping[str, Any] | None = None,
    ) -> str | None:
        """Identify the configuration a node would be transformed with.

        Cached results recorded under a different fingerprint are rebuilt.
        None means the transform has no configuration to compare.
        """
        return None

    @abstractmethod
    async def transform(
        self,
        tree: "AssetTree",
        processor: Processor,
        cache: "CacheStore",
        overrides: Mapping[str, Any] | None = None,
    ) -> "CacheEntry | None":
        """Run the transform for one node.

        Args:
            tree: Node the transform applies to
            processor: Host output interface
            cache: Incremental build cache
            overrides: Per-invocation option overrides

        Returns:
            The cache entry written, or None if there was nothing to do

        Raises:
            Exception: Any failure aborts this node's transform
        """
        pass

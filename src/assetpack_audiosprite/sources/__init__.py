"""Input tree model for the sprite pipeline.

This package contains the folder tree, tag parsing and tag matching
used to find folders a transform applies to.
"""

from .base import AssetTree, TransformedFile, has_tag, parse_tags, scan_tree, strip_tags

__all__ = ["AssetTree", "TransformedFile", "has_tag", "parse_tags", "scan_tree", "strip_tags"]

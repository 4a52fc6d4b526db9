"""Folder tree model for tagged asset directories.

Folders opt into a transform by carrying a tag in their name, e.g.
``sfx{audiosprite}`` or ``music{audiosprite}{fix=1}``. Tags are stripped
from output paths, so ``sfx{audiosprite}`` maps to ``sfx`` in the output.
"""

import hashlib
import os
import re
from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

# {tag} or {tag=value}
TAG_PATTERN = re.compile(r"\{([^{}=]+)(?:=([^{}]*))?\}")

TagValue = str | bool


def parse_tags(name: str) -> tuple[str, dict[str, TagValue]]:
    """Split a file or folder name into its clean name and tags.

    Example:
        "sfx{audiosprite}{rate=2}" -> ("sfx", {"audiosprite": True, "rate": "2"})

    Args:
        name: File or folder name (single path segment)

    Returns:
        Tuple of (name without tags, tag mapping)
    """
    tags: dict[str, TagValue] = {}
    for match in TAG_PATTERN.finditer(name):
        key = match.group(1).strip()
        value = match.group(2)
        tags[key] = True if value is None else value
    return TAG_PATTERN.sub("", name), tags


def strip_tags(path: Path) -> Path:
    """Remove tags from every segment of a relative path."""
    parts = [parse_tags(part)[0] for part in path.parts]
    return Path(*parts) if parts else Path()


@dataclass
class TransformedFile:
    """An output registered on a tree node by a transform."""

    transform_id: str
    path: str


@dataclass(eq=False)
class AssetTree:
    """A file or folder node in the input tree.

    Attributes:
        path: Absolute input path
        is_folder: Whether the node is a directory
        parent: Parent node (None for the root)
        children: Child nodes keyed by name
        tags: Tags parsed from the node's name
        transformed: Outputs transforms registered for this node
        size: File size in bytes (files only)
        mtime_ns: Modification time (files only)
        digest: Content signature of the subtree at scan time
    """

    path: Path
    is_folder: bool = False
    parent: "AssetTree | None" = field(default=None, repr=False)
    children: dict[str, "AssetTree"] = field(default_factory=dict, repr=False)
    tags: dict[str, TagValue] = field(default_factory=dict)
    transformed: list[TransformedFile] = field(default_factory=list)
    size: int = 0
    mtime_ns: int = 0
    digest: str | None = None

    def __post_init__(self) -> None:
        self.path = Path(self.path)
        if not self.tags:
            self.tags = parse_tags(self.path.name)[1]

    def add_child(self, child: "AssetTree") -> "AssetTree":
        child.parent = self
        self.children[child.path.name] = child
        return child

    def walk(self) -> Iterator["AssetTree"]:
        """Yield this node and all descendants, depth-first in name order."""
        yield self
        for name in sorted(self.children):
            yield from self.children[name].walk()

    def files(self) -> Iterator["AssetTree"]:
        return (node for node in self.walk() if not node.is_folder)

    def to_dict(self) -> dict[str, Any]:
        """Serialize the node (without children) for the cache file."""
        return {
            "path": str(self.path),
            "isFolder": self.is_folder,
            "tags": dict(self.tags),
            "digest": self.digest,
            "transformed": [
                {"transformId": t.transform_id, "path": t.path} for t in self.transformed
            ],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AssetTree":
        return cls(
            path=Path(data["path"]),
            is_folder=data.get("isFolder", True),
            tags=dict(data.get("tags") or {}),
            digest=data.get("digest"),
            transformed=[
                TransformedFile(transform_id=t["transformId"], path=t["path"])
                for t in data.get("transformed", [])
            ],
        )


def has_tag(tree: AssetTree, scope: str, tag: str) -> bool:
    """Check whether a node carries a tag.

    Args:
        tree: Node to test
        scope: 'file' to check the node itself, 'path' to include ancestors
        tag: Tag name

    Raises:
        ValueError: If scope is unknown
    """
    if scope == "file":
        return tag in tree.tags
    if scope == "path":
        node: AssetTree | None = tree
        while node is not None:
            if tag in node.tags:
                return True
            node = node.parent
        return False
    raise ValueError(f"Unknown tag scope: '{scope}'. Expected 'file' or 'path'")


def compute_digest(tree: AssetTree) -> str:
    """Hash relative path, size and mtime of every file under a node."""
    sha = hashlib.sha256()
    for node in tree.files():
        relative_path = node.path.relative_to(tree.path).as_posix()
        sha.update(f"{relative_path}\0{node.size}\0{node.mtime_ns}\n".encode("utf-8"))
    return sha.hexdigest()


def scan_tree(root: Path) -> AssetTree:
    """Build an AssetTree for a directory.

    Hidden files and folders are skipped. Every folder node gets a
    digest so incremental builds can detect changes.

    Args:
        root: Input root directory

    Returns:
        Root node of the tree

    Raises:
        ValueError: If root doesn't exist or isn't a directory
    """
    root = Path(root).resolve()

    if not root.exists():
        raise ValueError(f"Path does not exist: {root}")

    if not root.is_dir():
        raise ValueError(f"Path is not a directory: {root}")

    tree = AssetTree(path=root, is_folder=True)
    _scan_into(tree)
    return tree


def _scan_into(folder: AssetTree) -> None:
    with os.scandir(folder.path) as entries:
        for entry in sorted(entries, key=lambda e: e.name):
            if entry.name.startswith("."):
                continue

            if entry.is_dir():
                child = folder.add_child(AssetTree(path=Path(entry.path), is_folder=True))
                _scan_into(child)
            elif entry.is_file():
                stat_info = entry.stat()
                folder.add_child(
                    AssetTree(
                        path=Path(entry.path),
                        size=stat_info.st_size,
                        mtime_ns=stat_info.st_mtime_ns,
                    )
                )

    folder.digest = compute_digest(folder)

"""Source file collection for tagged folders.

This module walks a tagged folder and gathers the audio files the
encoder should pack into a sprite.
"""

import logging
import os
from collections.abc import Iterable
from pathlib import Path

logger = logging.getLogger(__name__)


def file_extension(file_path: Path) -> str:
    """Return the lower-case extension without its dot ('' if none)."""
    return file_path.suffix.lstrip(".").lower()


def collect(folder_path: str | Path, import_extensions: Iterable[str]) -> list[str]:
    """Recursively collect files whose extension is in the allow-list.

    Ordering is by POSIX path relative to the folder, so repeated runs on
    an unchanged filesystem return the same sequence.

    Args:
        folder_path: Tagged source folder
        import_extensions: Lower-case extensions without a leading dot

    Returns:
        Absolute file paths. Empty if nothing matches or the folder is missing.
    """
    root = Path(folder_path).resolve()
    allowed = frozenset(import_extensions)
    matches: list[tuple[str, str]] = []

    if not root.is_dir():
        logger.debug("Source folder %s does not exist", root)
        return []

    # Walk the directory tree
    for dirpath, dirnames, filenames in os.walk(root):
        # Skip hidden directories
        dirnames[:] = [d for d in dirnames if not d.startswith(".")]

        for filename in filenames:
            # Skip hidden files and system files
            if filename.startswith("."):
                continue

            file_path = Path(dirpath) / filename
            if file_extension(file_path) not in allowed:
                continue

            relative_path = file_path.relative_to(root).as_posix()
            matches.append((relative_path, str(file_path)))

    matches.sort()
    logger.debug("Collected %d source files under %s", len(matches), root)
    return [path for _, path in matches]

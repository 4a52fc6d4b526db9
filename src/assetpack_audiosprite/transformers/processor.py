"""Local filesystem implementation of the host pipeline interface."""

import logging
from pathlib import Path

from ..sources.base import AssetTree, TransformedFile, strip_tags
from .base import Processor

logger = logging.getLogger(__name__)


class LocalProcessor(Processor):
    """Maps an input directory onto an output directory.

    Output paths mirror input paths with tags removed:
    ``<input>/audio/sfx{audiosprite}`` -> ``<output>/audio/sfx``.

    Example:
        >>> processor = LocalProcessor(Path('assets'), Path('dist'))
        >>> processor.input_to_output(Path('assets/sfx{audiosprite}'))
        '/abs/dist/sfx'
    """

    def __init__(self, input_root: Path, output_root: Path):
        self.input_root = Path(input_root).resolve()
        self.output_root = Path(output_root).resolve()

    def input_to_output(self, path: str | Path) -> str:
        """Map an input path to its tag-free output path.

        Raises:
            ValueError: If path is outside the input root
        """
        resolved = Path(path).resolve()
        if not resolved.is_relative_to(self.input_root):
            raise ValueError(f"Path {path} is outside input root {self.input_root}")

        relative_path = resolved.relative_to(self.input_root)
        return str(self.output_root / strip_tags(relative_path))

    def trim_output_path(self, path: str) -> str:
        """Return the POSIX path relative to the output root.

        Paths outside the output root are returned unchanged.
        """
        resolved = Path(path).resolve()
        if resolved.is_relative_to(self.output_root):
            return resolved.relative_to(self.output_root).as_posix()
        return Path(path).as_posix()

    def save_to_output(self, path: str, data: bytes | str) -> None:
        output_path = Path(path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        if isinstance(data, str):
            data = data.encode("utf-8")
        output_path.write_bytes(data)
        logger.debug("Wrote %s (%d bytes)", output_path, len(data))

    def add_to_tree(self, tree: AssetTree, transform_id: str, path: str) -> None:
        tree.transformed.append(TransformedFile(transform_id=transform_id, path=path))

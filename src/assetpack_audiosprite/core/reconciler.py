"""Manifest reconciliation.

The encoder writes its manifest as '<path>/<output>.json' and lists its
audio files with whatever path it was given. This module maps that raw
output into the pipeline's output layout:

1. locate the raw manifest and raw audio files,
2. rename the manifest to the configured extension/directory,
3. reduce every 'resources' entry to a bare file name so the manifest
   is portable relative to itself,
4. run the optional user transform,
5. serialize, write, and drop the stale raw manifest after a rename.

Steps 1-4 are pure (see reconcile()); only write_reconciliation() touches
the filesystem.
"""

import copy
import json
import logging
import os
import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any

from .errors import TransformCallbackError
from .options import ManifestOptions
from .types import SpriteManifest

if TYPE_CHECKING:
    from ..transformers.base import Processor

logger = logging.getLogger(__name__)

ENCODER_MANIFEST_SUFFIX = ".json"

_SEPARATORS = re.compile(r"[\\/]")


@dataclass(frozen=True)
class Reconciliation:
    """Result of reconciling one encoder response.

    Attributes:
        raw_manifest_path: Where the encoder wrote its manifest
        manifest_path: Final manifest output path
        audio_paths: Encoded audio files, passed through unchanged
        manifest: Final manifest document
        data: Serialized manifest bytes
    """

    raw_manifest_path: str
    manifest_path: str
    audio_paths: tuple[str, ...]
    manifest: Any
    data: bytes

    @property
    def renamed(self) -> bool:
        """Whether the manifest moves away from the encoder's own file."""
        return os.path.normpath(self.manifest_path) != os.path.normpath(self.raw_manifest_path)

    @property
    def outputs(self) -> list[str]:
        """Manifest path followed by every audio path, in emission order."""
        return [self.manifest_path, *self.audio_paths]


def has_separator(path: str) -> bool:
    return _SEPARATORS.search(path) is not None


def join_encoder_path(base: str, path: str) -> str:
    """Join a path the encoder emitted onto its 'path' option.

    The emitted path is treated as relative to ``base`` even when it
    starts with a separator. An empty ``base`` leaves the path as is.
    """
    if not base:
        return os.path.normpath(path)
    return os.path.normpath(os.path.join(base, path.lstrip("/\\")))


def raw_manifest_path(encode_options: Mapping[str, Any]) -> str:
    """Path of the manifest the encoder writes: '<path>/<output>.json'."""
    output = encode_options["output"]
    return join_encoder_path(encode_options.get("path") or "", output + ENCODER_MANIFEST_SUFFIX)


def raw_resource_paths(resources: Sequence[str], base_path: str) -> list[str]:
    """Resolve each emitted resource to the path the encoder wrote it at.

    Path-qualified entries are joined onto ``base_path``; bare file names
    are already where the encoder put them and pass through unchanged.
    """
    return [join_encoder_path(base_path, res) if has_separator(res) else res for res in resources]


def final_manifest_path(raw_path: str, manifest_options: ManifestOptions) -> str:
    """Compute where the reconciled manifest is written.

    Example:
        '/out/sfx/sfx.json' with extension '.data.json' -> '/out/sfx/sfx.data.json'

    Args:
        raw_path: Manifest path the encoder wrote
        manifest_options: Output directory and extension settings

    Returns:
        Final manifest path
    """
    out_dir = (
        manifest_options.output_dir
        if manifest_options.output_dir is not None
        else os.path.dirname(raw_path)
    )
    name = os.path.basename(raw_path)
    if name.endswith(ENCODER_MANIFEST_SUFFIX):
        name = name[: -len(ENCODER_MANIFEST_SUFFIX)] + manifest_options.extension
    return os.path.join(out_dir, name)


def strip_resource_paths(manifest: SpriteManifest) -> SpriteManifest:
    """Return a copy of the manifest whose resources are bare file names.

    The input manifest is left untouched.
    """
    stripped = copy.deepcopy(manifest)
    stripped["resources"] = [_SEPARATORS.split(res)[-1] for res in manifest["resources"]]
    return stripped


def render_manifest(manifest: Any, minify: bool) -> bytes:
    """Serialize a manifest: two-space indent, or no whitespace when minified."""
    if minify:
        text = json.dumps(manifest, ensure_ascii=False, separators=(",", ":"))
    else:
        text = json.dumps(manifest, ensure_ascii=False, indent=2)
    return text.encode("utf-8")


def apply_transform(
    manifest: SpriteManifest,
    manifest_path: str,
    original_resources: list[str],
    manifest_options: ManifestOptions,
) -> Any:
    """Run the configured transform hook, if any.

    Raises:
        TransformCallbackError: If the hook raises or returns None
    """
    hook = manifest_options.transform
    if hook is None:
        return manifest

    try:
        result = hook(manifest, manifest_path, original_resources)
    except Exception as e:
        raise TransformCallbackError(f"Manifest transform failed for {manifest_path}: {e}") from e

    if result is None:
        raise TransformCallbackError(
            f"Manifest transform returned None for {manifest_path}; it must return the manifest"
        )
    return result


def reconcile(
    raw_manifest: SpriteManifest,
    encode_options: Mapping[str, Any],
    manifest_options: ManifestOptions,
) -> Reconciliation:
    """Map an encoder response onto final output paths and manifest bytes.

    Pure: calling it twice with the same inputs (and a pure transform
    hook) yields identical results.

    Args:
        raw_manifest: Validated encoder response
        encode_options: Resolved encoder options ('output', 'path')
        manifest_options: Manifest output settings

    Returns:
        Reconciliation with final paths and serialized manifest

    Raises:
        TransformCallbackError: If the user transform fails
    """
    original_resources = list(raw_manifest["resources"])

    raw_path = raw_manifest_path(encode_options)
    audio_paths = raw_resource_paths(original_resources, encode_options.get("path") or "")
    manifest_path = final_manifest_path(raw_path, manifest_options)

    manifest = strip_resource_paths(raw_manifest)
    manifest = apply_transform(manifest, manifest_path, original_resources, manifest_options)

    return Reconciliation(
        raw_manifest_path=raw_path,
        manifest_path=manifest_path,
        audio_paths=tuple(audio_paths),
        manifest=manifest,
        data=render_manifest(manifest, manifest_options.minify),
    )


def write_reconciliation(reconciliation: Reconciliation, processor: "Processor") -> list[str]:
    """Write the manifest and remove the raw one if it was renamed.

    Audio files are not touched; the encoder already wrote them.

    Args:
        reconciliation: Result of reconcile()
        processor: Host output interface

    Returns:
        All output paths, manifest first

    Raises:
        OSError: If writing or removing fails
    """
    processor.save_to_output(reconciliation.manifest_path, reconciliation.data)

    if reconciliation.renamed:
        # Stale encoder manifest at the old name
        Path(reconciliation.raw_manifest_path).unlink(missing_ok=True)
        logger.debug(
            "Renamed manifest %s -> %s",
            reconciliation.raw_manifest_path,
            reconciliation.manifest_path,
        )

    return reconciliation.outputs

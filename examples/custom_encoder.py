"""Template for implementing a custom encoder.

This example demonstrates the complete pattern for plugging in an encoder:
- Encoder implementation
- Registration with EncoderRegistry
- Manifest transform hook
- Running the pipeline with the registered encoder

The encoder below is a dry run: it encodes nothing and reports the
files a real build would produce, which is handy for checking output
layout and manifest shape before installing FFmpeg.
"""

import asyncio
import json
import sys
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

from assetpack_audiosprite import (
    AudioSpriteTransform,
    EncoderRegistry,
    LocalProcessor,
    ManifestOptions,
    MemoryCacheStore,
    SpriteOptions,
    SpritePipeline,
    scan_tree,
)
from assetpack_audiosprite.core.encoder import Encoder
from assetpack_audiosprite.core.reconciler import raw_manifest_path


# Step 1: Implement the Encoder interface
class DryRunEncoder(Encoder):
    """Plans sprite outputs without encoding any audio."""

    name = "dry-run"

    async def encode(self, files: Sequence[str], options: Mapping[str, Any]) -> dict[str, Any]:
        output = options["output"]
        resources = [f"{output}.{ext}" for ext in str(options.get("export", "ogg")).split(",")]

        manifest = {
            "resources": resources,
            "spritemap": {Path(f).stem: {"start": 0, "end": 0, "loop": False} for f in files},
        }

        # The reconciler expects the encoder's own manifest on disk
        manifest_path = Path(raw_manifest_path(options))
        manifest_path.parent.mkdir(parents=True, exist_ok=True)
        manifest_path.write_text(json.dumps(manifest), encoding="utf-8")
        return manifest


# Step 2: Register with EncoderRegistry
def create_dry_run_encoder(**kwargs: Any) -> DryRunEncoder:
    """Factory function for creating DryRunEncoder."""
    return DryRunEncoder()


EncoderRegistry.register_factory("dry-run", create_dry_run_encoder)


# Step 3: Optional manifest transform hook
def howler_manifest(manifest: dict[str, Any], manifest_path: str, resources: list[str]) -> dict[str, Any]:
    """Reshape the manifest for Howler.js: {'src': [...], 'sprite': {...}}."""
    return {
        "src": manifest["resources"],
        "sprite": {
            name: [entry["start"] * 1000, (entry["end"] - entry["start"]) * 1000]
            for name, entry in manifest.get("spritemap", {}).items()
        },
    }


# Step 4: Use your encoder
def main():
    """Example usage of a custom encoder."""
    asset_dir = Path("assets")
    if not asset_dir.exists():
        print(f"Directory not found: {asset_dir}", file=sys.stderr)
        return

    transform = AudioSpriteTransform(
        SpriteOptions(output_json=ManifestOptions(transform=howler_manifest)),
        encoder=EncoderRegistry.create_encoder("dry-run"),
    )
    pipeline = SpritePipeline(transform, LocalProcessor(asset_dir, Path("dist")), MemoryCacheStore())

    result = asyncio.run(pipeline.run(scan_tree(asset_dir)))

    for folder in result.folders:
        print(f"\n{folder.status}: {folder.path}")
        if folder.entry is not None:
            for data_file in folder.entry["transformData"]["files"]:
                print(f"  Manifest: {data_file['name']}")


if __name__ == '__main__':
    main()

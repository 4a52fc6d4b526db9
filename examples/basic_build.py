"""Basic sprite build example.

This example demonstrates how to:
- Scan an asset directory for tagged folders
- Build one audio sprite per folder
- Display a summary of the run
- Persist the cache for the next incremental build
"""

import asyncio
import sys
from pathlib import Path

from assetpack_audiosprite import (
    AudioSpriteTransform,
    JsonCacheStore,
    LocalProcessor,
    SpritePipeline,
    scan_tree,
)


async def build(asset_dir: Path, output_dir: Path, cache: JsonCacheStore) -> None:
    transform = AudioSpriteTransform({
        "imports": ["wav", "mp3"],
        "outputJson": {"extension": ".audio.json", "minify": True},
        "audiosprite": {"export": "ogg,mp3", "bitrate": 96},
    })
    pipeline = SpritePipeline(
        transform,
        LocalProcessor(asset_dir, output_dir),
        cache,
        incremental=True,
    )

    result = await pipeline.run(scan_tree(asset_dir))

    summary = result.summary()
    print(f"\nBuilt {len(summary['built'])} sprites", file=sys.stderr)
    print(f"  Up to date: {len(summary['skipped'])}", file=sys.stderr)
    for path, error in summary["failed"].items():
        print(f"  Failed: {path}: {error}", file=sys.stderr)


def main():
    # Folders named like 'sfx{audiosprite}' become sprites
    asset_dir = Path("assets")
    output_dir = Path("dist")

    if not asset_dir.exists():
        print(f"Directory not found: {asset_dir}", file=sys.stderr)
        print("Please update the asset_dir variable in this script", file=sys.stderr)
        return

    print(f"Scanning directory: {asset_dir}", file=sys.stderr)

    cache = JsonCacheStore(Path(".audiosprite-cache.json"))
    cache.load()

    asyncio.run(build(asset_dir, output_dir, cache))

    cache.save()
    print(f"\nCache saved to {cache.path}", file=sys.stderr)


if __name__ == '__main__':
    main()

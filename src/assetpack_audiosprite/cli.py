"""Command-line interface for building audio sprites.

This module provides the CLI entry point that scans an input directory
for tagged folders and builds one audio sprite per folder.
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any

from .core.cache import JsonCacheStore, MemoryCacheStore
from .core.errors import ConfigurationError
from .core.options import options_from_mapping
from .core.validator import validate_options_with_error_details
from .pipeline import PipelineResult, SpritePipeline
from .platforms.audiosprite import AudioSpriteTransform
from .registry import EncoderRegistry
from .sources.base import scan_tree
from .transformers.processor import LocalProcessor


def load_options(config_path: Path | None) -> dict[str, Any]:
    """Load an option file, or return an empty option mapping.

    Raises:
        ConfigurationError: If the file can't be read or parsed
    """
    if config_path is None:
        return {}

    try:
        with config_path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigurationError(f"Cannot read options file {config_path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"Options file {config_path} must contain a JSON object")
    return data


def apply_cli_overrides(options: dict[str, Any], args: argparse.Namespace) -> dict[str, Any]:
    """Layer command-line flags over file options (same layout as the file)."""
    options = dict(options)

    if args.tag:
        options["tags"] = {"audiosprite": args.tag}
    if args.imports:
        options["imports"] = args.imports
    if args.flat:
        options["nested"] = False

    output_json = dict(options.get("outputJson") or {})
    if args.extension:
        output_json["extension"] = args.extension
    if args.json_path:
        output_json["path"] = str(Path(args.json_path).resolve())
    if args.minify:
        output_json["minify"] = True
    if output_json:
        options["outputJson"] = output_json

    if args.export:
        audiosprite = dict(options.get("audiosprite") or {})
        audiosprite["export"] = args.export
        options["audiosprite"] = audiosprite

    return options


def build_sprites(
    input_path: Path,
    output_path: Path,
    options: dict[str, Any],
    encoder_name: str = "audiosprite",
    cache_path: Path | None = None,
    incremental: bool = False,
) -> PipelineResult:
    """Build sprites for every tagged folder under input_path.

    Args:
        input_path: Root directory to scan
        output_path: Root directory for outputs
        options: Validated option mapping
        encoder_name: Registered encoder to use
        cache_path: Optional JSON cache file, loaded before and saved after the run
        incremental: Skip folders whose cached outputs are still valid

    Returns:
        PipelineResult for the run

    Raises:
        ConfigurationError: If options or encoder are invalid
        ValueError: If input_path isn't a directory
    """
    transform = AudioSpriteTransform(
        options_from_mapping(options),
        encoder=EncoderRegistry.create_encoder(encoder_name),
    )

    cache: MemoryCacheStore
    if cache_path is not None:
        cache = JsonCacheStore(cache_path)
        cache.load()
    else:
        cache = MemoryCacheStore()

    print(f"Scanning directory: {input_path.resolve()}", file=sys.stderr)
    tree = scan_tree(input_path)

    pipeline = SpritePipeline(
        transform,
        LocalProcessor(input_path, output_path),
        cache,
        incremental=incremental,
    )
    result = asyncio.run(pipeline.run(tree))

    if isinstance(cache, JsonCacheStore):
        cache.save()

    return result


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Build audio sprites from tagged folders of audio files",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Every folder named like 'sfx{audiosprite}' becomes a sprite
  assetpack-audiosprite --input assets --output dist

  # Custom tag, flat output, minified manifests with a custom extension
  assetpack-audiosprite --input assets --output dist --tag sfx --flat \\
      --minify --extension .data.json

  # Options file plus an incremental cache
  assetpack-audiosprite --input assets --output dist --config audiosprite.json \\
      --cache .audiosprite-cache.json --incremental
        """,
    )

    parser.add_argument("--input", required=True, help="Input root directory to scan")
    parser.add_argument("--output", required=True, help="Output root directory")
    parser.add_argument("--config", help="JSON options file")
    parser.add_argument("--tag", help="Folder tag that activates the transform")
    parser.add_argument(
        "--imports",
        nargs="+",
        help="Source file extensions to collect (space-separated)",
    )
    parser.add_argument(
        "--flat",
        action="store_true",
        help="Write sprites directly into the output folder instead of a nested folder",
    )
    parser.add_argument("--extension", help="Manifest file extension (default: .json)")
    parser.add_argument("--json-path", help="Directory for manifests (default: next to the audio)")
    parser.add_argument("--minify", action="store_true", help="Write minified manifests")
    parser.add_argument("--export", help="Comma-separated audio formats to export")
    parser.add_argument(
        "--encoder",
        default="audiosprite",
        help=f"Encoder to use (available: {', '.join(EncoderRegistry.list_encoders()) or 'none'})",
    )
    parser.add_argument("--cache", help="JSON cache file for incremental builds")
    parser.add_argument(
        "--incremental",
        action="store_true",
        help="Skip folders whose cached outputs are still valid (requires --cache)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def main(argv: list[str] | None = None) -> None:
    """Main entry point for the sprite builder."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    # Validate input path
    input_path = Path(args.input)
    if not input_path.exists():
        print(f"Error: Path does not exist: {input_path}", file=sys.stderr)
        sys.exit(1)

    if not input_path.is_dir():
        print(f"Error: Path is not a directory: {input_path}", file=sys.stderr)
        sys.exit(1)

    if args.incremental and not args.cache:
        print("Error: --incremental requires --cache", file=sys.stderr)
        sys.exit(1)

    try:
        options = apply_cli_overrides(
            load_options(Path(args.config) if args.config else None),
            args,
        )

        # Validate against JSON schema
        is_valid, error_msg = validate_options_with_error_details(options)
        if not is_valid:
            print("Error: Options validation failed:", file=sys.stderr)
            print(error_msg, file=sys.stderr)
            sys.exit(1)

        result = build_sprites(
            input_path,
            Path(args.output),
            options,
            encoder_name=args.encoder,
            cache_path=Path(args.cache) if args.cache else None,
            incremental=args.incremental,
        )

    except ConfigurationError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    summary = result.summary()
    print(
        f"Built {len(summary['built'])}, skipped {len(summary['skipped'])}, "
        f"empty {len(summary['empty'])}, failed {len(summary['failed'])}",
        file=sys.stderr,
    )

    # Output JSON summary to stdout
    json.dump(summary, sys.stdout, indent=2)
    print()

    if not result.ok:
        sys.exit(1)


if __name__ == "__main__":
    main()

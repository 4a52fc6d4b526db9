"""Option resolution for the audio sprite transform.

Options come from three layers: the built-in defaults below, the
options the transform was constructed with, and per-invocation caller
overrides. Each namespace is merged with one of two named strategies:

- ``replace_namespace``: the caller's value replaces the default wholesale
  (tag, imports, nested, outputJson).
- ``merge_namespace``: caller keys override default keys one by one and
  unspecified defaults survive (audiosprite encoder options).

The encoder ``output`` base name is never taken from the caller. It is
derived from the pipeline's output folder for the source folder.
"""

import hashlib
import importlib
import json
import logging
import os
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, Mapping, TypeVar

from .errors import ConfigurationError

logger = logging.getLogger(__name__)

T = TypeVar("T")

# (manifest, final_manifest_path, original_resource_paths) -> manifest
ManifestTransform = Callable[[dict[str, Any], str, list[str]], dict[str, Any]]

DEFAULT_TAG = "audiosprite"

DEFAULT_IMPORT_EXTENSIONS: tuple[str, ...] = (
    "aac", "ac3", "aiff", "caf", "flac", "mp3",
    "mp4", "m4a", "ogg", "opus", "wav", "webm",
)

# Encoder defaults. 'output' is always derived, see resolve().
DEFAULT_ENCODE_OPTIONS: Mapping[str, Any] = MappingProxyType({
    "path": "",
    "export": "ogg,m4a,mp3,ac3",
    "format": "jukebox",
    "autoplay": None,
    "loop": [],
    "silence": 0,
    "gap": 1,
    "minlength": 0,
    "bitrate": 128,
    "vbr": -1,
    "vbr:vorbis": -1,
    "samplerate": 44100,
    "channels": 1,
    "rawparts": "",
    "ignorerounding": 0,
})


@dataclass(frozen=True)
class ManifestOptions:
    """Where and how the reconciled manifest is written.

    Attributes:
        output_dir: Directory for the manifest; defaults to the encoder's output dir
        extension: Replaces the encoder's '.json' suffix
        minify: Serialize without indentation
        transform: Optional hook applied to the manifest before it is written
    """

    output_dir: str | None = None
    extension: str = ".json"
    minify: bool = False
    transform: ManifestTransform | None = None


@dataclass(frozen=True)
class SpriteOptions:
    """Unresolved option set, one field per namespace.

    ``None`` means "not supplied" so that resolve() can tell a caller
    override from a default.
    """

    tag: str | None = None
    imports: tuple[str, ...] | None = None
    nested: bool | None = None
    output_json: ManifestOptions | None = None
    audiosprite: Mapping[str, Any] | None = None


@dataclass(frozen=True)
class ResolvedConfig:
    """Fully resolved configuration for one transform invocation."""

    tag: str
    import_extensions: frozenset[str]
    nested: bool
    manifest_options: ManifestOptions
    encode_options: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))


DEFAULT_OPTIONS = SpriteOptions(
    tag=DEFAULT_TAG,
    imports=DEFAULT_IMPORT_EXTENSIONS,
    nested=True,
    output_json=ManifestOptions(),
    audiosprite=DEFAULT_ENCODE_OPTIONS,
)


def replace_namespace(default: T, override: T | None) -> T:
    """Wholesale strategy: a supplied override replaces the default."""
    return default if override is None else override


def merge_namespace(
    default: Mapping[str, Any] | None,
    override: Mapping[str, Any] | None,
) -> dict[str, Any]:
    """Key-by-key strategy: override keys win, other defaults survive."""
    merged = dict(default or {})
    merged.update(override or {})
    return merged


def normalize_extensions(imports: tuple[str, ...] | list[str]) -> frozenset[str]:
    """Lower-case extensions and strip any leading dot.

    Example:
        ['.WAV', 'mp3'] -> {'wav', 'mp3'}
    """
    return frozenset(ext.strip().lstrip(".").lower() for ext in imports if ext.strip())


def encoder_output_base(output_folder: str, nested: bool) -> str:
    """Compute the encoder's 'output' base name for a folder.

    Args:
        output_folder: Output path mapped from the source folder
        nested: Place sprite files in a subdirectory named after the folder

    Returns:
        '<out>/<basename(out)>' when nested, otherwise '<out>'
    """
    if nested:
        return os.path.join(output_folder, os.path.basename(output_folder.rstrip("/\\")))
    return output_folder


def layer(base: SpriteOptions, override: SpriteOptions | None) -> SpriteOptions:
    """Apply one layer of overrides using the per-namespace strategies."""
    if override is None:
        return base
    return SpriteOptions(
        tag=replace_namespace(base.tag, override.tag),
        imports=replace_namespace(base.imports, override.imports),
        nested=replace_namespace(base.nested, override.nested),
        output_json=replace_namespace(base.output_json, override.output_json),
        audiosprite=merge_namespace(base.audiosprite, override.audiosprite),
    )


def resolve(
    defaults: SpriteOptions,
    caller: SpriteOptions | Mapping[str, Any] | None,
    output_folder: str,
) -> ResolvedConfig:
    """Merge caller options over defaults for one source folder.

    Args:
        defaults: Options the transform was constructed with
        caller: Per-invocation overrides, as SpriteOptions or a
                configuration-surface mapping
        output_folder: Output path the pipeline maps the source folder to

    Returns:
        Immutable ResolvedConfig
    """
    if isinstance(caller, Mapping):
        caller = options_from_mapping(caller)

    options = layer(layer(DEFAULT_OPTIONS, defaults), caller)
    nested = bool(options.nested)

    encode_options = dict(options.audiosprite or {})
    if "output" in encode_options:
        logger.warning(
            "Ignoring audiosprite 'output' option %r; it is derived from the output folder",
            encode_options["output"],
        )
    encode_options["output"] = encoder_output_base(output_folder, nested)
    encode_options.setdefault("path", "")

    return ResolvedConfig(
        tag=options.tag or DEFAULT_TAG,
        import_extensions=normalize_extensions(options.imports or ()),
        nested=nested,
        manifest_options=options.output_json or ManifestOptions(),
        encode_options=MappingProxyType(encode_options),
    )


def resolve_tag(defaults: SpriteOptions, caller: SpriteOptions | Mapping[str, Any] | None) -> str:
    """Resolve only the activating tag, without deriving encoder options."""
    if isinstance(caller, Mapping):
        tags = caller.get("tags") or {}
        caller = SpriteOptions(tag=tags.get("audiosprite"))
    return layer(layer(DEFAULT_OPTIONS, defaults), caller).tag or DEFAULT_TAG


def config_fingerprint(config: ResolvedConfig) -> str:
    """Hash everything in a resolved config that shapes a folder's outputs.

    The transform hook is identified by its module and qualified name, so
    editing the hook's body does not change the fingerprint.
    """
    hook = config.manifest_options.transform
    hook_name = None
    if hook is not None:
        hook_name = f"{getattr(hook, '__module__', '')}:{getattr(hook, '__qualname__', repr(hook))}"

    data = {
        "tag": config.tag,
        "imports": sorted(config.import_extensions),
        "nested": config.nested,
        "outputJson": {
            "path": config.manifest_options.output_dir,
            "extension": config.manifest_options.extension,
            "minify": config.manifest_options.minify,
            "transform": hook_name,
        },
        "audiosprite": dict(config.encode_options),
    }
    payload = json.dumps(data, sort_keys=True, default=str)
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()


def load_transform_hook(import_path: str) -> ManifestTransform:
    """Import a manifest transform from a 'module:function' string.

    Raises:
        ConfigurationError: If the module or attribute can't be loaded
    """
    module_name, _, attr = import_path.partition(":")
    if not module_name or not attr:
        raise ConfigurationError(f"Transform must be 'module:function', got '{import_path}'")

    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise ConfigurationError(f"Cannot import transform module '{module_name}': {e}") from e

    hook = getattr(module, attr, None)
    if not callable(hook):
        raise ConfigurationError(f"'{import_path}' is not a callable")
    return hook  # type: ignore[no-any-return]


def manifest_options_from_mapping(data: Mapping[str, Any]) -> ManifestOptions:
    """Build ManifestOptions from an 'outputJson' mapping.

    Unspecified keys take the ManifestOptions defaults, not the values
    of any previous layer.
    """
    transform = data.get("transform")
    if isinstance(transform, str):
        transform = load_transform_hook(transform)

    return ManifestOptions(
        output_dir=data.get("path"),
        extension=data.get("extension", ".json"),
        minify=bool(data.get("minify", False)),
        transform=transform,
    )


def options_from_mapping(data: Mapping[str, Any]) -> SpriteOptions:
    """Build SpriteOptions from the configuration surface.

    Example:
        >>> options_from_mapping({
        ...     "tags": {"audiosprite": "sfx"},
        ...     "nested": False,
        ...     "audiosprite": {"export": "ogg,mp3"},
        ... })
    """
    tags = data.get("tags") or {}
    imports = data.get("imports")
    output_json = data.get("outputJson")
    audiosprite = data.get("audiosprite")

    return SpriteOptions(
        tag=tags.get("audiosprite"),
        imports=tuple(imports) if imports is not None else None,
        nested=data.get("nested"),
        output_json=manifest_options_from_mapping(output_json) if output_json is not None else None,
        audiosprite=dict(audiosprite) if audiosprite is not None else None,
    )

"""JSON Schema validation for option files and encoder manifests.

This module loads the schemas shipped in core/schemas/ and validates
option documents before they are resolved, and encoder responses
before they are reconciled.
"""

import json
from functools import lru_cache
from pathlib import Path
from typing import Any

import jsonschema
from jsonschema import ValidationError

from .errors import MalformedManifestError

# Schemas live next to this module
SCHEMA_DIR = Path(__file__).parent / "schemas"
OPTIONS_SCHEMA_PATH = SCHEMA_DIR / "options.schema.json"
MANIFEST_SCHEMA_PATH = SCHEMA_DIR / "manifest.schema.json"


@lru_cache(maxsize=None)
def load_schema(schema_path: Path) -> dict[str, Any]:
    """Read one of the packaged schemas, once per process.

    Serves both the options schema and the encoder manifest schema.
    Results are memoized per path.

    Raises:
        FileNotFoundError: If the schema is missing from the install
        json.JSONDecodeError: If the schema file is corrupt
    """
    if not schema_path.exists():
        raise FileNotFoundError(f"Schema file not found: {schema_path}")

    with schema_path.open("r", encoding="utf-8") as f:
        return json.load(f)  # type: ignore[no-any-return]


def format_validation_error(error: ValidationError) -> str:
    """Build a readable message for a schema violation."""
    error_path = " -> ".join(str(p) for p in error.path) if error.path else "root"
    error_msg = f"Validation error at {error_path}: {error.message}"

    # Add context if available
    if error.instance:
        error_msg += f"\nInvalid value: {error.instance}"

    return error_msg


def validate_options(options: dict[str, Any]) -> None:
    """Validate an option document against the options schema.

    Args:
        options: Option mapping in the configuration file layout

    Raises:
        ValidationError: If the options don't conform to the schema
    """
    jsonschema.validate(instance=options, schema=load_schema(OPTIONS_SCHEMA_PATH))


def validate_options_with_error_details(options: dict[str, Any]) -> tuple[bool, str | None]:
    """Validate options and return detailed error information.

    Args:
        options: Option mapping in the configuration file layout

    Returns:
        Tuple of (is_valid, error_message). error_message is None if valid.
    """
    try:
        validate_options(options)
        return True, None
    except ValidationError as e:
        return False, format_validation_error(e)
    except (FileNotFoundError, json.JSONDecodeError) as e:
        return False, f"Schema error: {e}"


def validate_encoder_manifest(manifest: Any) -> None:
    """Check the minimal shape the reconciler depends on.

    Args:
        manifest: Response returned by the encoder

    Raises:
        MalformedManifestError: If 'resources' is missing or not a list of strings
    """
    try:
        jsonschema.validate(instance=manifest, schema=load_schema(MANIFEST_SCHEMA_PATH))
    except ValidationError as e:
        raise MalformedManifestError(
            "Audiosprite emitted malformed JSON. Key 'resources' is required.",
            details=format_validation_error(e),
        ) from e

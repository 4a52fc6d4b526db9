"""Audiosprite CLI encoder.

Runs the ``audiosprite`` command line tool (tonistiigi/audiosprite,
backed by FFmpeg) as a subprocess. The tool encodes the sprite files
and writes its manifest to '<path>/<output>.json', which is read back
as the encoder response.
"""

import asyncio
import json
import logging
import os
import shlex
import shutil
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

from ...core.encoder import Encoder
from ...core.errors import EncoderError
from ...core.reconciler import raw_manifest_path
from ...core.types import SpriteManifest

logger = logging.getLogger(__name__)

EXECUTABLE_ENV_VAR = "AUDIOSPRITE_BIN"
DEFAULT_EXECUTABLE = "audiosprite"

# In-process only, never passed to the CLI
IGNORED_OPTIONS = {"logger"}

# Keep this much of stderr in error messages
STDERR_TAIL_CHARS = 2000


def build_arguments(files: Sequence[str], options: Mapping[str, Any]) -> list[str]:
    """Convert encoder options into audiosprite CLI arguments.

    None and empty-string values are omitted, 'loop' is repeated per
    entry, other lists are comma-joined and booleans become 0/1.

    Example:
        >>> build_arguments(['a.wav'], {'output': 'out/sfx', 'loop': ['a'], 'gap': 1})
        ['--output', 'out/sfx', '--loop', 'a', '--gap', '1', 'a.wav']
    """
    args: list[str] = []

    for key, value in options.items():
        if key in IGNORED_OPTIONS or value is None or value == "":
            continue

        if key == "loop":
            loops = value if isinstance(value, (list, tuple)) else [value]
            for name in loops:
                args += ["--loop", str(name)]
            continue

        if isinstance(value, bool):
            value = int(value)
        elif isinstance(value, (list, tuple)):
            if not value:
                continue
            value = ",".join(str(v) for v in value)

        args += [f"--{key}", str(value)]

    args.extend(files)
    return args


class AudiospriteEncoder(Encoder):
    """Encoder backed by the audiosprite CLI.

    Example:
        >>> encoder = AudiospriteEncoder()
        >>> manifest = await encoder.encode(files, {'output': '/out/sfx/sfx', 'path': ''})
    """

    name = "audiosprite"

    def __init__(self, executable: str | None = None):
        """Initialize the encoder.

        Args:
            executable: Path or name of the audiosprite binary. Defaults to
                        $AUDIOSPRITE_BIN, then 'audiosprite' on PATH.
        """
        self.executable = executable

    def resolve_executable(self) -> str:
        """Locate the audiosprite binary.

        Raises:
            EncoderError: If it can't be found
        """
        candidate = self.executable or os.environ.get(EXECUTABLE_ENV_VAR) or DEFAULT_EXECUTABLE
        resolved = shutil.which(candidate)
        if resolved is None:
            raise EncoderError(
                f"audiosprite executable not found: '{candidate}'. "
                f"Install it with 'npm install -g audiosprite' or set {EXECUTABLE_ENV_VAR}."
            )
        return resolved

    async def encode(self, files: Sequence[str], options: Mapping[str, Any]) -> SpriteManifest:
        """Run audiosprite and return the manifest it wrote.

        Raises:
            EncoderError: On a missing binary, non-zero exit, or unreadable manifest
        """
        executable = self.resolve_executable()
        manifest_path = Path(raw_manifest_path(options))
        manifest_path.parent.mkdir(parents=True, exist_ok=True)

        argv = [executable, *build_arguments(files, options)]
        logger.debug("Running %s", shlex.join(argv))

        try:
            process = await asyncio.create_subprocess_exec(
                *argv,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            raise EncoderError(f"Failed to start {executable}: {e}") from e

        stdout, stderr = await process.communicate()
        stderr_text = stderr.decode("utf-8", errors="replace")[-STDERR_TAIL_CHARS:]

        if stdout:
            logger.debug("audiosprite output:\n%s", stdout.decode("utf-8", errors="replace"))

        if process.returncode != 0:
            raise EncoderError(
                f"audiosprite exited with status {process.returncode}",
                returncode=process.returncode,
                stderr=stderr_text,
            )

        try:
            with manifest_path.open("r", encoding="utf-8") as f:
                return json.load(f)  # type: ignore[no-any-return]
        except (OSError, json.JSONDecodeError) as e:
            raise EncoderError(
                f"Could not read audiosprite manifest {manifest_path}: {e}",
                returncode=process.returncode,
                stderr=stderr_text,
            ) from e

"""Shared fixtures for the sprite pipeline test suite."""

import json
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

import pytest

from assetpack_audiosprite.core.encoder import Encoder
from assetpack_audiosprite.core.reconciler import raw_manifest_path
from assetpack_audiosprite.transformers.processor import LocalProcessor


class FakeEncoder(Encoder):
    """In-process encoder that mimics audiosprite's file layout.

    Writes '<output>.<ext>' for each export format and '<output>.json',
    and returns a jukebox-style manifest with absolute resource paths.
    """

    name = "fake"

    def __init__(
        self,
        response: Any = None,
        error: Exception | None = None,
        fail_for: str | None = None,
    ):
        self.response = response
        self.error = error
        self.fail_for = fail_for
        self.calls: list[tuple[list[str], dict[str, Any]]] = []

    async def encode(self, files: Sequence[str], options: Mapping[str, Any]) -> Any:
        self.calls.append((list(files), dict(options)))

        if self.error is not None:
            raise self.error
        if self.fail_for is not None and any(self.fail_for in f for f in files):
            raise RuntimeError(f"ffmpeg crashed on {self.fail_for}")

        output = options["output"]
        Path(output).parent.mkdir(parents=True, exist_ok=True)

        resources = []
        for ext in options.get("export", "ogg").split(","):
            resource = f"{output}.{ext}"
            Path(resource).write_bytes(b"encoded")
            resources.append(resource)

        manifest = {
            "resources": resources,
            "spritemap": {Path(f).stem: {"start": i * 2.0, "end": i * 2.0 + 1.0, "loop": False}
                          for i, f in enumerate(files)},
        }
        Path(raw_manifest_path(options)).write_text(json.dumps(manifest), encoding="utf-8")

        return manifest if self.response is None else self.response


@pytest.fixture
def fake_encoder() -> FakeEncoder:
    return FakeEncoder()


@pytest.fixture
def input_root(tmp_path: Path) -> Path:
    """Input tree with one tagged folder of audio files.

    in/
      sfx{audiosprite}/cry.wav, laugh.mp3, notes.txt
      music/theme.ogg
    """
    root = tmp_path.resolve() / "in"
    sfx = root / "sfx{audiosprite}"
    sfx.mkdir(parents=True)
    (sfx / "cry.wav").write_bytes(b"RIFF")
    (sfx / "laugh.mp3").write_bytes(b"ID3")
    (sfx / "notes.txt").write_text("not audio")

    music = root / "music"
    music.mkdir()
    (music / "theme.ogg").write_bytes(b"OggS")
    return root


@pytest.fixture
def output_root(tmp_path: Path) -> Path:
    return tmp_path.resolve() / "out"


@pytest.fixture
def processor(input_root: Path, output_root: Path) -> LocalProcessor:
    return LocalProcessor(input_root, output_root)


@pytest.fixture
def encoder_factory() -> type[FakeEncoder]:
    """The FakeEncoder class, for tests that need custom responses or errors."""
    return FakeEncoder

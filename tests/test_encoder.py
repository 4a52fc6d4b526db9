"""Tests for encoder invocation and the audiosprite CLI encoder."""

import json
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, Mock

import pytest

from assetpack_audiosprite.core.encoder import invoke_encoder
from assetpack_audiosprite.core.errors import EncoderError, MalformedManifestError
from assetpack_audiosprite.platforms.audiosprite import encoder as encoder_module
from assetpack_audiosprite.platforms.audiosprite.encoder import (
    AudiospriteEncoder,
    build_arguments,
)
from assetpack_audiosprite.registry import EncoderRegistry


class TestInvokeEncoder:
    """Test the invocation adapter."""

    @pytest.mark.asyncio
    async def test_returns_manifest_unmodified(self, tmp_path: Path, encoder_factory: type) -> None:
        encoder = encoder_factory()
        options = {"output": str(tmp_path / "sfx"), "path": "", "export": "ogg"}

        manifest = await invoke_encoder(encoder, ["/in/a.wav"], options)

        assert manifest["resources"] == [str(tmp_path / "sfx.ogg")]
        assert encoder.calls == [(["/in/a.wav"], options)]

    @pytest.mark.asyncio
    async def test_wraps_encoder_exceptions(self, encoder_factory: type) -> None:
        encoder = encoder_factory(error=RuntimeError("ffmpeg: command not found"))

        with pytest.raises(EncoderError, match="ffmpeg: command not found") as exc_info:
            await invoke_encoder(encoder, ["/in/a.wav"], {"output": "/out/sfx"})

        assert isinstance(exc_info.value.__cause__, RuntimeError)

    @pytest.mark.asyncio
    async def test_encoder_errors_pass_through(self, encoder_factory: type) -> None:
        original = EncoderError("exit 1", returncode=1, stderr="boom")
        encoder = encoder_factory(error=original)

        with pytest.raises(EncoderError) as exc_info:
            await invoke_encoder(encoder, ["/in/a.wav"], {"output": "/out/sfx"})

        assert exc_info.value is original

    @pytest.mark.asyncio
    async def test_missing_resources_is_malformed(self, tmp_path: Path, encoder_factory: type) -> None:
        encoder = encoder_factory(response={"spritemap": {}})

        with pytest.raises(MalformedManifestError, match="Key 'resources' is required"):
            await invoke_encoder(encoder, ["/in/a.wav"], {"output": str(tmp_path / "sfx")})

    @pytest.mark.asyncio
    async def test_non_list_resources_is_malformed(self, tmp_path: Path, encoder_factory: type) -> None:
        encoder = encoder_factory(response={"resources": "sfx.ogg"})

        with pytest.raises(MalformedManifestError):
            await invoke_encoder(encoder, ["/in/a.wav"], {"output": str(tmp_path / "sfx")})

    @pytest.mark.asyncio
    async def test_empty_resources_is_accepted(self, tmp_path: Path, encoder_factory: type) -> None:
        encoder = encoder_factory(response={"resources": []})
        manifest = await invoke_encoder(encoder, ["/in/a.wav"], {"output": str(tmp_path / "sfx")})
        assert manifest == {"resources": []}


class TestBuildArguments:
    """Test conversion of options into CLI flags."""

    def test_default_style_options(self) -> None:
        args = build_arguments(
            ["/in/a.wav", "/in/b.mp3"],
            {
                "output": "/out/sfx/sfx",
                "path": "",
                "export": "ogg,mp3",
                "autoplay": None,
                "loop": [],
                "gap": 1,
                "vbr:vorbis": -1,
                "rawparts": "",
            },
        )

        assert args == [
            "--output", "/out/sfx/sfx",
            "--export", "ogg,mp3",
            "--gap", "1",
            "--vbr:vorbis", "-1",
            "/in/a.wav", "/in/b.mp3",
        ]

    def test_loop_is_repeated(self) -> None:
        args = build_arguments([], {"loop": ["rain", "wind"]})
        assert args == ["--loop", "rain", "--loop", "wind"]

    def test_bools_and_lists(self) -> None:
        args = build_arguments([], {"ignorerounding": True, "export": ["ogg", "m4a"], "logger": object()})
        assert args == ["--ignorerounding", "1", "--export", "ogg,m4a"]


def _fake_process(returncode: int, stderr: bytes = b"") -> Mock:
    process = Mock()
    process.returncode = returncode
    process.communicate = AsyncMock(return_value=(b"info: done", stderr))
    return process


class TestAudiospriteEncoder:
    """Test the subprocess-backed encoder with a faked process."""

    @pytest.fixture(autouse=True)
    def _which(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(
            encoder_module.shutil,
            "which",
            lambda name: None if "missing" in name else f"/usr/local/bin/{Path(name).name}",
        )

    @pytest.mark.asyncio
    async def test_success_reads_written_manifest(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        output = str(tmp_path / "out" / "sfx" / "sfx")
        manifest = {"resources": [output + ".ogg"], "spritemap": {}}
        captured: dict[str, Any] = {}

        async def fake_exec(*argv: str, **kwargs: Any) -> Mock:
            captured["argv"] = argv
            Path(output + ".json").write_text(json.dumps(manifest))
            return _fake_process(0)

        monkeypatch.setattr(encoder_module.asyncio, "create_subprocess_exec", fake_exec)

        result = await AudiospriteEncoder().encode(["/in/a.wav"], {"output": output, "path": ""})

        assert result == manifest
        assert captured["argv"][0] == "/usr/local/bin/audiosprite"
        assert captured["argv"][1:3] == ("--output", output)
        assert captured["argv"][-1] == "/in/a.wav"

    @pytest.mark.asyncio
    async def test_non_zero_exit(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        async def fake_exec(*argv: str, **kwargs: Any) -> Mock:
            return _fake_process(1, stderr=b"Error: ffmpeg not found")

        monkeypatch.setattr(encoder_module.asyncio, "create_subprocess_exec", fake_exec)

        with pytest.raises(EncoderError, match="exited with status 1") as exc_info:
            await AudiospriteEncoder().encode(["/in/a.wav"], {"output": str(tmp_path / "sfx")})

        assert exc_info.value.returncode == 1
        assert "ffmpeg not found" in exc_info.value.stderr

    @pytest.mark.asyncio
    async def test_unreadable_manifest(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        async def fake_exec(*argv: str, **kwargs: Any) -> Mock:
            (tmp_path / "sfx.json").write_text("{not json")
            return _fake_process(0)

        monkeypatch.setattr(encoder_module.asyncio, "create_subprocess_exec", fake_exec)

        with pytest.raises(EncoderError, match="Could not read audiosprite manifest"):
            await AudiospriteEncoder().encode(["/in/a.wav"], {"output": str(tmp_path / "sfx")})

    @pytest.mark.asyncio
    async def test_missing_executable(self, tmp_path: Path) -> None:
        encoder = AudiospriteEncoder(executable="missing-audiosprite")

        with pytest.raises(EncoderError, match="executable not found"):
            await encoder.encode(["/in/a.wav"], {"output": str(tmp_path / "sfx")})

    @pytest.mark.asyncio
    async def test_start_failure(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        async def fake_exec(*argv: str, **kwargs: Any) -> Mock:
            raise PermissionError("not executable")

        monkeypatch.setattr(encoder_module.asyncio, "create_subprocess_exec", fake_exec)

        with pytest.raises(EncoderError, match="Failed to start"):
            await AudiospriteEncoder().encode(["/in/a.wav"], {"output": str(tmp_path / "sfx")})

    def test_environment_variable_overrides_default(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("AUDIOSPRITE_BIN", "/opt/node/bin/audiosprite")
        assert AudiospriteEncoder().resolve_executable() == "/usr/local/bin/audiosprite"

    def test_explicit_executable_wins(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("AUDIOSPRITE_BIN", "missing-from-env")
        assert AudiospriteEncoder("custom-sprite").resolve_executable() == "/usr/local/bin/custom-sprite"


class TestEncoderRegistry:
    """Test encoder factory registration."""

    def test_audiosprite_is_registered(self) -> None:
        assert "audiosprite" in EncoderRegistry.list_encoders()
        assert isinstance(EncoderRegistry.create_encoder("audiosprite"), AudiospriteEncoder)

    def test_factory_kwargs_are_forwarded(self) -> None:
        encoder = EncoderRegistry.create_encoder("audiosprite", executable="/bin/sprite")
        assert isinstance(encoder, AudiospriteEncoder)
        assert encoder.executable == "/bin/sprite"

    def test_unknown_encoder(self) -> None:
        with pytest.raises(ValueError, match="Unknown encoder: 'wwise'"):
            EncoderRegistry.create_encoder("wwise")

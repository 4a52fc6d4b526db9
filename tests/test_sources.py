"""Tests for the folder tree model and the local processor."""

from pathlib import Path

import pytest

from assetpack_audiosprite.sources.base import (
    AssetTree,
    has_tag,
    parse_tags,
    scan_tree,
    strip_tags,
)
from assetpack_audiosprite.transformers.processor import LocalProcessor


class TestParseTags:
    """Test tag parsing from names."""

    def test_flag_and_value_tags(self) -> None:
        name, tags = parse_tags("sfx{audiosprite}{rate=2}")
        assert name == "sfx"
        assert tags == {"audiosprite": True, "rate": "2"}

    def test_no_tags(self) -> None:
        assert parse_tags("music") == ("music", {})

    def test_tag_inside_file_name(self) -> None:
        assert parse_tags("boom{audiosprite}.wav") == ("boom.wav", {"audiosprite": True})

    def test_strip_tags_from_every_segment(self) -> None:
        assert strip_tags(Path("audio{fix}/sfx{audiosprite}")) == Path("audio/sfx")


class TestHasTag:
    """Test tag lookup scopes."""

    def test_file_scope_checks_node_only(self) -> None:
        parent = AssetTree(path=Path("/in/sfx{audiosprite}"), is_folder=True)
        child = parent.add_child(AssetTree(path=Path("/in/sfx{audiosprite}/ui"), is_folder=True))

        assert has_tag(parent, "file", "audiosprite")
        assert not has_tag(child, "file", "audiosprite")

    def test_path_scope_checks_ancestors(self) -> None:
        parent = AssetTree(path=Path("/in/sfx{audiosprite}"), is_folder=True)
        child = parent.add_child(AssetTree(path=Path("/in/sfx{audiosprite}/ui"), is_folder=True))

        assert has_tag(child, "path", "audiosprite")
        assert not has_tag(child, "path", "fix")

    def test_unknown_scope(self) -> None:
        with pytest.raises(ValueError, match="Unknown tag scope"):
            has_tag(AssetTree(path=Path("/in")), "global", "audiosprite")


class TestScanTree:
    """Test building a tree from disk."""

    def test_structure(self, input_root: Path) -> None:
        tree = scan_tree(input_root)

        assert tree.is_folder
        assert sorted(tree.children) == ["music", "sfx{audiosprite}"]

        sfx = tree.children["sfx{audiosprite}"]
        assert sfx.parent is tree
        assert sfx.tags == {"audiosprite": True}
        assert sorted(sfx.children) == ["cry.wav", "laugh.mp3", "notes.txt"]
        assert sfx.children["cry.wav"].size == 4

    def test_hidden_entries_are_skipped(self, tmp_path: Path) -> None:
        (tmp_path / ".git").mkdir()
        (tmp_path / ".DS_Store").write_bytes(b"")
        (tmp_path / "a.wav").write_bytes(b"")

        assert list(scan_tree(tmp_path).children) == ["a.wav"]

    def test_missing_root(self, tmp_path: Path) -> None:
        with pytest.raises(ValueError, match="Path does not exist"):
            scan_tree(tmp_path / "missing")

    def test_file_root(self, tmp_path: Path) -> None:
        (tmp_path / "a.wav").write_bytes(b"")
        with pytest.raises(ValueError, match="Path is not a directory"):
            scan_tree(tmp_path / "a.wav")

    def test_digest_is_stable(self, input_root: Path) -> None:
        first = scan_tree(input_root).children["sfx{audiosprite}"].digest
        second = scan_tree(input_root).children["sfx{audiosprite}"].digest

        assert first is not None
        assert first == second

    def test_digest_changes_with_content(self, input_root: Path) -> None:
        before = scan_tree(input_root)
        (input_root / "sfx{audiosprite}" / "cry.wav").write_bytes(b"RIFF-longer")
        after = scan_tree(input_root)

        assert before.children["sfx{audiosprite}"].digest != after.children["sfx{audiosprite}"].digest
        assert before.children["music"].digest == after.children["music"].digest

    def test_round_trip_through_dict(self, input_root: Path) -> None:
        sfx = scan_tree(input_root).children["sfx{audiosprite}"]
        restored = AssetTree.from_dict(sfx.to_dict())

        assert restored.path == sfx.path
        assert restored.is_folder
        assert restored.tags == sfx.tags
        assert restored.digest == sfx.digest


class TestLocalProcessor:
    """Test input/output path mapping."""

    def test_input_to_output_strips_tags(self, input_root: Path, output_root: Path) -> None:
        processor = LocalProcessor(input_root, output_root)
        assert processor.input_to_output(input_root / "sfx{audiosprite}") == str(output_root / "sfx")

    def test_input_outside_root(self, input_root: Path, output_root: Path, tmp_path: Path) -> None:
        processor = LocalProcessor(input_root, output_root)
        with pytest.raises(ValueError, match="outside input root"):
            processor.input_to_output(tmp_path / "elsewhere")

    def test_trim_output_path(self, input_root: Path, output_root: Path) -> None:
        processor = LocalProcessor(input_root, output_root)

        assert processor.trim_output_path(str(output_root / "sfx" / "sfx.json")) == "sfx/sfx.json"
        assert processor.trim_output_path("/elsewhere/sfx.json") == "/elsewhere/sfx.json"

    def test_save_to_output_creates_parents(self, input_root: Path, output_root: Path) -> None:
        processor = LocalProcessor(input_root, output_root)
        target = output_root / "a" / "b" / "sfx.json"

        processor.save_to_output(str(target), '{"resources": []}')

        assert target.read_text(encoding="utf-8") == '{"resources": []}'

    def test_add_to_tree(self, input_root: Path, output_root: Path) -> None:
        processor = LocalProcessor(input_root, output_root)
        node = AssetTree(path=input_root / "sfx{audiosprite}", is_folder=True)

        processor.add_to_tree(node, "audiosprite", str(output_root / "sfx" / "sfx.ogg"))

        assert node.transformed[0].transform_id == "audiosprite"
        assert node.transformed[0].path == str(output_root / "sfx" / "sfx.ogg")

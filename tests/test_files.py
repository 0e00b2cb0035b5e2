"""Tests for reading and writing payload files."""

import pytest

from codec.files import format_for, read_feedtree, read_tree, write
from config import CodecConfig, Config, OutputConfig
from containers import FeedTree, Tree
from errors import EncodeFailureError, MalformedPayloadError, UnsupportedReadTypeError


class TestFormatFor:
    """Tests for picking the payload format."""

    @pytest.mark.parametrize("name, expected", [
        ("a.json", "json"),
        ("a.jsonc", "jsonc"),
        ("a.msg", "msg"),
        ("dir/A.MSG", "msg"),
    ])
    def test_by_extension(self, name, expected):
        assert format_for(name) == expected

    def test_explicit_format_wins(self):
        assert format_for("a.bin", "msg") == "msg"

    def test_unknown_extension(self):
        with pytest.raises(ValueError):
            format_for("a.txt")

    def test_unknown_format(self):
        with pytest.raises(ValueError):
            format_for("a.json", "yaml")


class TestWriteRead:
    """Round-trips through files."""

    @pytest.mark.parametrize("ext", [".json", ".jsonc", ".msg"])
    def test_tree(self, temp_dir, sample_tree, ext):
        path = write(sample_tree, temp_dir / f"tree{ext}")
        assert path.exists()
        assert read_tree(path) == sample_tree
        assert Tree.read(path) == sample_tree

    @pytest.mark.parametrize("ext", [".json", ".jsonc", ".msg"])
    def test_feedtree(self, temp_dir, sample_feedtree, ext):
        path = sample_feedtree.write(temp_dir / f"feeds{ext}")
        assert read_feedtree(path) == sample_feedtree
        assert FeedTree.read(path) == sample_feedtree

    def test_no_extension_uses_default_format(self, temp_dir, sample_tree):
        config = Config(output=OutputConfig(default_format="jsonc"))
        path = write(sample_tree, temp_dir / "tree", config=config)
        assert path.name == "tree.jsonc"
        assert read_tree(path) == sample_tree

    def test_explicit_format(self, temp_dir, sample_tree):
        path = write(sample_tree, temp_dir / "tree.dat", fmt="msg")
        assert path.read_bytes() == sample_tree.to_msg()
        assert read_tree(path, fmt="msg") == sample_tree

    def test_creates_parent_directories(self, temp_dir, sample_tree):
        path = write(sample_tree, temp_dir / "a" / "b" / "tree.msg")
        assert path.exists()

    def test_text_forms_are_utf8(self, temp_dir, sample_tree):
        path = write(sample_tree, temp_dir / "tree.json")
        assert path.read_text(encoding="utf-8") == sample_tree.to_json()

    def test_codec_config_applies(self, temp_dir, sample_tree):
        config = Config(codec=CodecConfig(json_indent=2))
        path = write(sample_tree, temp_dir / "tree.json", config=config)
        assert "\n  " in path.read_text(encoding="utf-8")

    def test_non_finite_text_needs_matching_config(self, temp_dir):
        tree = Tree("T")
        tree.add_branch("b", [1.0, float("inf")])
        config = Config(codec=CodecConfig(allow_non_finite=True))
        path = write(tree, temp_dir / "tree.jsonc", config=config)

        assert Tree.read(path, config=config) == tree
        with pytest.raises(MalformedPayloadError):
            read_tree(path)

    def test_overwrite(self, temp_dir, sample_tree):
        path = temp_dir / "tree.msg"
        write(Tree("old"), path)
        write(sample_tree, path)
        assert read_tree(path) == sample_tree
        assert not (temp_dir / "tree.msg.tmp").exists()

    def test_non_atomic_write(self, temp_dir, sample_tree):
        config = Config(output=OutputConfig(atomic_write=False))
        path = write(sample_tree, temp_dir / "tree.msg", config=config)
        assert read_tree(path) == sample_tree


class TestFailures:
    """Failed writes leave nothing behind; unreadable payloads raise."""

    def test_encode_failure_writes_nothing(self, temp_dir):
        tree = Tree("T")
        tree.add_branch("b", [float("nan")])
        path = temp_dir / "tree.json"

        with pytest.raises(EncodeFailureError):
            write(tree, path)

        assert list(temp_dir.iterdir()) == []

    def test_encode_failure_keeps_previous_file(self, temp_dir, sample_tree):
        path = write(sample_tree, temp_dir / "tree.json")
        tree = Tree("T")
        tree.add_branch("b", [float("nan")])

        with pytest.raises(EncodeFailureError):
            write(tree, path)

        assert read_tree(path) == sample_tree

    def test_opaque_tree_file(self, temp_dir, particles):
        tree = Tree("T")
        tree.add_branch("particles", particles)
        path = write(tree, temp_dir / "tree.msg")

        with pytest.raises(UnsupportedReadTypeError):
            read_tree(path)

    def test_missing_file(self, temp_dir):
        with pytest.raises(FileNotFoundError):
            read_tree(temp_dir / "missing.msg")

    def test_unknown_extension_on_read(self, temp_dir):
        path = temp_dir / "tree.txt"
        path.write_text("[]", encoding="utf-8")
        with pytest.raises(ValueError):
            read_tree(path)

"""Tests for the three payload encodings.

Covers:
- Wire shapes of the verbose, compact and binary forms
- Payload size ordering
- Malformed input handling
- Encode failures and codec options
"""

import json
import math

import msgpack
import pytest

from config import CodecConfig
from containers import FeedTree, Tree
from errors import EncodeFailureError, MalformedPayloadError
from values import Bin, Collection, Point


@pytest.fixture
def small_tree():
    tree = Tree("T")
    tree.add_field("desc", "x")
    tree.add_branch("b", Collection([1.0, 2.0, 3.0]), "f64")
    tree.add_branch("p", [Point(1.0, 2.0)])
    tree.add_branch("h", [Bin(0.0, 1.0, 4)])
    return tree


class TestWireShapes:
    """The logical layout of each form."""

    def test_verbose_tree(self, small_tree):
        assert json.loads(small_tree.to_json()) == {
            "name": "T",
            "fields": {"desc": "x"},
            "branches": {
                "b": {"type_tag": "f64", "data": [1.0, 2.0, 3.0]},
                "p": {"type_tag": "Point", "data": [{"x": 1.0, "y": 2.0}]},
                "h": {"type_tag": "Bin", "data": [{"count": 4, "range": [0.0, 1.0]}]},
            },
        }

    def test_compact_tree(self, small_tree):
        assert json.loads(small_tree.to_jsonc()) == [
            "T",
            [["desc", "x"]],
            [
                ["b", "f64", [1.0, 2.0, 3.0]],
                ["p", "Point", [[1.0, 2.0]]],
                ["h", "Bin", [[4, [0.0, 1.0]]]],
            ],
        ]

    def test_binary_mirrors_compact(self, small_tree):
        assert msgpack.unpackb(small_tree.to_msg(), raw=False) == json.loads(small_tree.to_jsonc())

    def test_compact_has_no_padding(self, small_tree):
        assert " " not in small_tree.to_jsonc()

    def test_feedtree_keeps_keyed_elements_everywhere(self):
        feedtree = FeedTree("F")
        feedtree.add_feed("p", [Point(1.0, 2.0)])

        compact = json.loads(feedtree.to_jsonc())
        assert compact == ["F", [], [["p", "Point", [{"x": 1.0, "y": 2.0}]]]]
        assert msgpack.unpackb(feedtree.to_msg(), raw=False) == compact
        assert json.loads(feedtree.to_json())["feeds"]["p"]["data"] == [{"x": 1.0, "y": 2.0}]


class TestPayloadSize:
    """Compact forms are smaller for numeric-heavy payloads."""

    def test_size_ordering(self, seed):
        values = Collection(seed.normal(0.0, 100.0, size=2000).tolist())
        points = Collection.plot(values[:1000], values[1000:])

        tree = Tree("sizes")
        tree.add_field("seed", 42)
        tree.add_branch("values", values)
        tree.add_branch("points", points)
        tree.add_branch("hist", values.hist(64))

        size_json = len(tree.to_json().encode("utf-8"))
        size_jsonc = len(tree.to_jsonc().encode("utf-8"))
        size_msg = len(tree.to_msg())

        assert size_msg < size_jsonc < size_json
        assert size_msg < 0.6 * size_json


class TestMalformedInput:
    """Structurally invalid payloads raise MalformedPayloadError."""

    @pytest.mark.parametrize("payload", [
        "not json",
        "[]",
        '{"name": "T", "fields": {}}',
        '{"name": "T", "fields": {}, "branches": {}, "extra": 1}',
        '{"name": "", "fields": {}, "branches": {}}',
        '{"name": "T", "fields": {"a": [1]}, "branches": {}}',
        '{"name": "T", "fields": [], "branches": {}}',
        '{"name": "T", "fields": {}, "branches": {"b": {"type_tag": "f64"}}}',
        '{"name": "T", "fields": {}, "branches": {"b": {"type_tag": "f64", "data": 1.0}}}',
        '{"name": "T", "fields": {}, "branches": {"b": {"type_tag": "f64", "data": ["x"]}}}',
        '{"name": "T", "fields": {}, "branches": {"p": {"type_tag": "Point", "data": [[1, 2]]}}}',
        '{"name": "T", "name": "U", "fields": {}, "branches": {}}',
        '{"name": "T", "fields": {"a": 1, "a": 2}, "branches": {}}',
    ])
    def test_verbose(self, payload):
        with pytest.raises(MalformedPayloadError):
            Tree.from_json(payload)

    @pytest.mark.parametrize("payload", [
        '{"name": "T"}',
        '["T", [], []',
        '["T", []]',
        '[1, [], []]',
        '["T", [["a"]], []]',
        '["T", [[1, "v"]], []]',
        '["T", [], [["b", "f64"]]]',
        '["T", [], [["b", 7, []]]]',
        '["T", [], [["b", "u64", [-1]]]]',
        '["T", [], [["h", "Bin", [[1, [0.0]]]]]]',
        '["T", [], [["p", "Point", [{"x": 1.0, "y": 2.0}]]]]',
    ])
    def test_compact(self, payload):
        with pytest.raises(MalformedPayloadError):
            Tree.from_jsonc(payload)

    @pytest.mark.parametrize("payload", [
        b"\xc1",
        b"\x93\x01",
        b"",
        msgpack.packb({"name": "T"}),
        msgpack.packb(["T", [], []]) + b"\x00",
    ])
    def test_binary(self, payload):
        with pytest.raises(MalformedPayloadError):
            Tree.from_msg(payload)

    def test_repeated_element_key_in_compact_feedtree(self):
        payload = '["F", [], [["pts", "Point", [{"x": 1.0, "x": 5.0, "y": 2.0}]]]]'
        with pytest.raises(MalformedPayloadError):
            FeedTree.from_jsonc(payload)

        decoded = FeedTree.from_jsonc(payload.replace('"x": 5.0, ', ""))
        assert list(decoded.get_feed("pts")) == [Point(1.0, 2.0)]

    def test_invalid_utf8(self):
        with pytest.raises(MalformedPayloadError):
            Tree.from_json(b'{"name": "\xff"}')

    def test_text_payload_as_bytes(self, small_tree):
        assert Tree.from_jsonc(small_tree.to_jsonc().encode("utf-8")) == small_tree


class TestEncodeOptions:
    """Encode failures and CodecConfig behaviour."""

    def test_nan_fails_in_text_forms(self):
        tree = Tree("T")
        tree.add_branch("b", [1.0, float("nan")])

        with pytest.raises(EncodeFailureError):
            tree.to_json()
        with pytest.raises(EncodeFailureError):
            tree.to_jsonc()

    def test_nan_allowed_in_binary(self):
        tree = Tree("T")
        tree.add_branch("b", [float("inf"), float("nan")])

        decoded = Tree.from_msg(tree.to_msg())
        inf, nan = list(decoded.get_branch("b"))
        assert math.isinf(inf)
        assert math.isnan(nan)

    def test_allow_non_finite(self):
        tree = Tree("T")
        tree.add_field("limit", float("inf"))
        config = CodecConfig(allow_non_finite=True)
        text = tree.to_json(config)
        assert "Infinity" in text
        assert Tree.from_json(text, config).get_field("limit") == float("inf")
        assert math.isinf(Tree.from_jsonc(tree.to_jsonc(config), config).get_field("limit"))

    @pytest.mark.parametrize("literal", ["NaN", "Infinity", "-Infinity"])
    def test_non_finite_literals_rejected_by_default(self, literal):
        verbose_text = '{"name": "T", "fields": {}, "branches": {"b": {"type_tag": "f64", "data": [' + literal + ']}}}'
        compact_text = '["T", [], [["b", "f64", [' + literal + ']]]]'

        with pytest.raises(MalformedPayloadError):
            Tree.from_json(verbose_text)
        with pytest.raises(MalformedPayloadError):
            Tree.from_jsonc(compact_text)
        with pytest.raises(MalformedPayloadError):
            FeedTree.from_jsonc('["F", [["limit", ' + literal + ']], []]')

    def test_oversized_int_fails_in_binary(self):
        tree = Tree("T")
        tree.add_field("big", 2 ** 70)
        with pytest.raises(EncodeFailureError):
            tree.to_msg()
        assert json.loads(tree.to_json())["fields"]["big"] == 2 ** 70

    def test_indent(self, small_tree):
        text = small_tree.to_json(CodecConfig(json_indent=2))
        assert "\n  " in text
        assert Tree.from_json(text) == small_tree

    def test_non_ascii_kept_by_default(self):
        tree = Tree("T")
        tree.add_field("label", "café")
        assert "café" in tree.to_jsonc()
        assert "\\u00e9" in tree.to_jsonc(CodecConfig(ensure_ascii=True))

    def test_negative_indent_rejected(self):
        with pytest.raises(ValueError):
            CodecConfig(json_indent=-1)

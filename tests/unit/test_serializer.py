"""Tests for canonical text rendering."""

from __future__ import annotations

import pytest

from yamltools.models.nodes import Mapping, Scalar, Sequence
from yamltools.parser.block import BlockParser
from yamltools.serializer import YAMLSerializer, dump
from tests.conftest import SAMPLE_YAML


class TestFormat:
    def test_flat_mapping(self, serializer: YAMLSerializer) -> None:
        tree = Mapping({"name": Scalar("John"), "age": Scalar(30)})
        assert serializer.format(tree) == "name: John\nage: 30\n"

    def test_nested_mapping_two_space_indent(self, serializer: YAMLSerializer) -> None:
        tree = Mapping({"a": Mapping({"b": Mapping({"c": Scalar(True)})})})
        assert serializer.format(tree) == "a:\n  b:\n    c: true\n"

    def test_sequence_under_key(self, serializer: YAMLSerializer) -> None:
        tree = Mapping({"items": Sequence([Scalar("a"), Scalar(1)])})
        assert serializer.format(tree) == "items:\n  - a\n  - 1\n"

    def test_empty_containers(self, serializer: YAMLSerializer) -> None:
        tree = Mapping({"xs": Sequence([]), "m": Mapping({})})
        assert serializer.format(tree) == "xs: []\nm:\n"

    def test_null_and_float(self, serializer: YAMLSerializer) -> None:
        tree = Mapping({"x": Scalar(None), "y": Scalar(1.0)})
        assert serializer.format(tree) == "x: null\ny: 1.0\n"

    def test_ambiguous_strings_quoted(self, serializer: YAMLSerializer) -> None:
        tree = Mapping({"zip": Scalar("10001"), "flag": Scalar("true"), "t": Scalar("a: b")})
        assert serializer.format(tree) == 'zip: "10001"\nflag: "true"\nt: "a: b"\n'

    def test_special_key_quoted(self, serializer: YAMLSerializer) -> None:
        tree = Mapping({"Customer ID": Scalar(1), "-x": Scalar(2)})
        assert serializer.format(tree) == '"Customer ID": 1\n"-x": 2\n'

    def test_multiline_string_literal(self, serializer: YAMLSerializer) -> None:
        tree = Mapping({"text": Scalar("one\ntwo\n")})
        assert serializer.format(tree) == "text: |\n  one\n  two\n"

    def test_multiline_string_strip(self, serializer: YAMLSerializer) -> None:
        tree = Mapping({"text": Scalar("one\ntwo")})
        assert serializer.format(tree) == "text: |-\n  one\n  two\n"

    def test_leading_spaces_get_indentation_indicator(self, serializer: YAMLSerializer) -> None:
        tree = Mapping({"text": Scalar("  x\n  y\n")})
        assert serializer.format(tree) == "text: |2\n    x\n    y\n"

    def test_embedded_double_quote(self, serializer: YAMLSerializer) -> None:
        tree = Mapping({"k": Scalar('a"b #c')})
        assert serializer.format(tree) == "k: 'a\"b #c'\n"

    def test_both_quotes_and_hash_use_literal_block(self, serializer: YAMLSerializer) -> None:
        tree = Mapping({"k": Scalar("it's \"x\" #1")})
        assert serializer.format(tree) == "k: |-\n  it's \"x\" #1\n"

    def test_root_sequence(self, serializer: YAMLSerializer) -> None:
        assert serializer.format(Sequence([Scalar("a"), Scalar("b")])) == "- a\n- b\n"

    def test_root_scalar(self, serializer: YAMLSerializer) -> None:
        assert serializer.format(Scalar(5)) == "5\n"

    def test_indent_level(self, serializer: YAMLSerializer) -> None:
        tree = Mapping({"a": Scalar(1)})
        assert serializer.format(tree, indent_level=2) == "    a: 1\n"

    def test_empty_document(self) -> None:
        assert dump(Mapping({})) == ""


class TestRoundTrip:
    @pytest.mark.parametrize(
        "text",
        [
            SAMPLE_YAML,
            "name: John\nage: 30\n",
            "items:\n  - a\n  - b\n",
            'version: "1.0"\nratio: 0.5\nnothing: null\n',
            "text: |\n  line one\n    indented\n",
            "strip: |-\n  no newline\nkeep: |+\n  extra\n\n",
            '"Customer ID": 7\nurl: "http://x"\n',
            "xs: []\nm:\nflow: [1, two]\n",
            "k: 'a\"b #c'\n",
            "q: \"it's #1\"\n",
            "text: |2\n    x\n     y\n",
            "big: 1e999\n",
        ],
    )
    def test_parse_format_parse(self, parser: BlockParser, text: str) -> None:
        tree = parser.parse(text)
        assert parser.parse(dump(tree)) == tree

    def test_format_is_idempotent(self, parser: BlockParser) -> None:
        once = dump(parser.parse(SAMPLE_YAML))
        assert dump(parser.parse(once)) == once

    def test_comments_dropped(self, parser: BlockParser) -> None:
        assert dump(parser.parse("# c\na: 1  # note\n")) == "a: 1\n"

    @pytest.mark.parametrize(
        "value",
        ['a"b #c', "it's \"x\" #1", "  x\n  y\n", "  lead\n\n  gap", "1e999"],
    )
    def test_tree_format_parse(self, parser: BlockParser, value: str) -> None:
        tree = Mapping({"k": Scalar(value)})
        assert parser.parse(dump(tree)) == tree
        assert parser.parse(dump(tree))["k"].value == value

"""
Parse and serialize benchmarks comparing jtree against standard libraries.

Libraries compared:
- Python standard library json
- orjson (C-optimized)
- ujson (ultra-fast JSON)
- jtree (document tree)
"""

import json
from collections.abc import Callable
from typing import Any

import orjson
import pytest
import ujson  # type: ignore[import-untyped]

import jtree
from benchmarks.data_generators import DATA_TYPES
from benchmarks.data_generators import generate_commented_data
from benchmarks.data_generators import generate_test_data

PARSERS: list[tuple[str, Callable[[Any], Any]]] = [
    ("stdlib_json", json.loads),
    ("orjson", orjson.loads),
    ("ujson", ujson.loads),
    ("jtree", jtree.loads),
]


def _input_for(parser: str, text: str) -> str | bytes:
    # orjson and jtree both work on UTF-8 bytes natively
    if parser in ("orjson", "jtree"):
        return text.encode("utf-8")
    return text


class TestParsingBenchmarks:
    """Benchmarks for JSON parsing across libraries and document shapes."""

    @pytest.mark.parametrize("data_type", DATA_TYPES)
    @pytest.mark.parametrize("parser,parse_func", PARSERS)
    def test_parsing(
        self,
        benchmark: Any,
        data_type: str,
        parser: str,
        parse_func: Callable[[Any], Any],
    ) -> None:
        benchmark.group = f"parse_{data_type}"
        text = _input_for(parser, generate_test_data(data_type))
        result = benchmark(parse_func, text)
        assert result is not None

    @pytest.mark.benchmark(group="parse_with_comments")
    def test_parsing_with_comments(self, benchmark: Any) -> None:
        """Benchmarks the comment pre-pass on top of parsing."""
        text = generate_commented_data("large_object").encode("utf-8")
        result = benchmark(jtree.parse_string_with_comments, text)
        assert result is not None


class TestSerializationBenchmarks:
    """Benchmarks for JSON serialization of already-parsed documents."""

    @pytest.mark.parametrize("data_type", DATA_TYPES)
    @pytest.mark.parametrize(
        "encoder", ["stdlib_json", "orjson", "ujson", "jtree"]
    )
    def test_serialization(
        self, benchmark: Any, data_type: str, encoder: str
    ) -> None:
        benchmark.group = f"serialize_{data_type}"
        text = generate_test_data(data_type)
        if encoder == "jtree":
            result = benchmark(jtree.dumps, jtree.loads(text))
        else:
            dumps = {
                "stdlib_json": json.dumps,
                "orjson": orjson.dumps,
                "ujson": ujson.dumps,
            }[encoder]
            result = benchmark(dumps, json.loads(text))
        assert result

    @pytest.mark.benchmark(group="serialize_pretty")
    def test_pretty_serialization(self, benchmark: Any) -> None:
        value = jtree.loads(generate_test_data("large_object"))
        config = jtree.EncodeConfig(pretty=True)
        result = benchmark(jtree.serialize_to_string, value, config)
        assert result is not None

    @pytest.mark.benchmark(group="serialize_to_buffer")
    def test_serialize_to_buffer(self, benchmark: Any) -> None:
        """Benchmarks the size pass plus the write pass into one buffer."""
        value = jtree.loads(generate_test_data("large_object"))

        def size_then_write() -> jtree.JsonStatus:
            buf = bytearray(jtree.serialization_size(value))
            return jtree.serialize_to_buffer(value, buf)

        assert benchmark(size_then_write) is jtree.SUCCESS


class TestTreeBenchmarks:
    """Benchmarks for whole-tree operations."""

    @pytest.mark.benchmark(group="tree_ops")
    def test_deep_copy(self, benchmark: Any) -> None:
        value = jtree.loads(generate_test_data("nested_structure"))
        assert benchmark(jtree.deep_copy, value) is not None

    @pytest.mark.benchmark(group="tree_ops")
    def test_value_equals(self, benchmark: Any) -> None:
        text = generate_test_data("nested_structure")
        left, right = jtree.loads(text), jtree.loads(text)
        assert benchmark(jtree.value_equals, left, right)

"""
Comment stripping tests for the comment-tolerant parse entry points.
"""

from pathlib import Path

import pytest

import jtree
from jtree._parser import strip_comments

from .conftest import to_python


def test_block_and_line_comments() -> None:
    text = """
    /* header */
    {
        // the name
        "a": 1, /* inline */ "b": [2, /* two
        lines */ 3] // trailing
    }
    """
    value = jtree.parse_string_with_comments(text)
    assert value is not None
    assert to_python(value) == {"a": 1.0, "b": [2.0, 3.0]}


def test_comments_rejected_by_default() -> None:
    assert jtree.parse_string("/* c */ 1") is None
    assert jtree.parse_string("[1, // c\n 2]") is None
    with pytest.raises(jtree.JSONDecodeError):
        jtree.loads("// c\n[]")


def test_loads_with_allow_comments() -> None:
    value = jtree.loads("// c\n[1 /* x */]", allow_comments=True)
    assert to_python(value) == [1.0]


@pytest.mark.parametrize(
    "text,expected",
    [
        ('{"url": "http://host/*x*/"}', "http://host/*x*/"),
        ('{"url": "a // b"}', "a // b"),
        ('{"url": "q\\"/*x*/"}', 'q"/*x*/'),
        ('{"url": "\\\\"} // c', "\\"),
    ],
)
def test_markers_inside_strings_survive(text: str, expected: str) -> None:
    value = jtree.parse_string_with_comments(text)
    assert value is not None
    assert value.get_object().get_string("url") == expected  # type: ignore[union-attr]


def test_newlines_preserved_for_error_positions() -> None:
    """
    Validates that blanked comments keep line and column numbers intact.
    """
    text = '{\n/* one\ntwo */\n"a" 1}'
    assert strip_comments(text.encode()) == b'{\n      \n      \n"a" 1}'

    with pytest.raises(jtree.JSONDecodeError) as exc_info:
        jtree.loads(text, allow_comments=True)
    exc = exc_info.value
    assert exc.msg == "Expecting ':' delimiter"
    assert exc.pos == 20
    assert exc.lineno == 4
    assert exc.colno == 5


@pytest.mark.parametrize(
    "data,expected_pos",
    [
        (b"/*\x80\x80\x80*/ [1,]", 11),
        (b"/*\xe2\x82*/ [1,]", 9),
        (b"/*\xc3\xa9*/ [1,]", 9),
    ],
)
def test_error_position_after_invalid_bytes_in_comment(
    data: bytes, expected_pos: int
) -> None:
    """
    Validates that positions index the replacement-decoded document when
    bytes input holds invalid UTF-8.
    """
    with pytest.raises(jtree.JSONDecodeError) as exc_info:
        jtree.loads(data, allow_comments=True)
    exc = exc_info.value
    assert exc.msg == "Expecting value"
    assert exc.pos == expected_pos
    assert exc.doc[exc.pos] == "]"


def test_line_comment_runs_to_newline() -> None:
    assert strip_comments(b"1 // x\n2") == b"1     \n2"
    # Block comments are blanked before line comments
    assert strip_comments(b"[1] // x /* y */\n") == b"[1]" + b" " * 13 + b"\n"


def test_unterminated_block_comment_only_blanks_opener() -> None:
    """
    Validates that an unclosed ``/*`` is blanked and everything after it is
    left for the parser.
    """
    assert strip_comments(b"/* [1]") == b"   [1]"
    value = jtree.parse_string_with_comments("/* [1]")
    assert value is not None
    assert to_python(value) == [1.0]

    assert strip_comments(b"[1, /* 2]") == b"[1,    2]"


def test_trailing_line_comment_without_newline() -> None:
    assert to_python(jtree.parse_string_with_comments("[1] // end")) == [1.0]  # type: ignore[arg-type]


def test_comment_config_composes_with_strict() -> None:
    config = jtree.ParseConfig(strict=True)
    assert jtree.parse_string_with_comments("[1] /* done */", config) is not None
    assert jtree.parse_string_with_comments("[1] /* done */ 2", config) is None


def test_parse_file_with_comments(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    path.write_text('{\n  // port\n  "port": 8080\n}\n', encoding="utf-8")

    assert jtree.parse_file(path) is None
    value = jtree.parse_file_with_comments(path)
    assert value is not None
    assert jtree.dotget_number(value.get_object(), "port") == 8080.0  # type: ignore[arg-type]

    assert jtree.parse_file_with_comments(tmp_path / "missing.json") is None

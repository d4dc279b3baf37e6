"""
Descent parser from JSON text to a document tree.

The parser works on UTF-8 bytes with a single cursor. Containers under
construction are kept on an explicit frame stack, so the nesting ceiling in
ParseConfig is the only bound on depth. Failures raise JSONDecodeError with a
character position into the caller's document; the sentinel entry points
turn that into None.
"""

from __future__ import annotations

import dataclasses
import logging
import math
import os
import re
import sys
from pathlib import Path
from typing import IO
from typing import Any
from typing import Final

from jtree._codec import is_valid_utf8
from jtree._codec import unescape_string
from jtree._config import DEFAULT_PARSE_CONFIG
from jtree._config import ParseConfig
from jtree._errors import JSONDecodeError
from jtree._profile import ProfileContext
from jtree._tree import JsonValue
from jtree._utf8_mapper import UTF8PositionMapper

logger = logging.getLogger(__name__)

type JsonText = str | bytes | bytearray | memoryview

_BOM: Final = b"\xef\xbb\xbf"

_QUOTE: Final = ord('"')
_BACKSLASH: Final = ord("\\")
_COLON: Final = ord(":")
_COMMA: Final = ord(",")
_MINUS: Final = ord("-")
_LBRACE: Final = ord("{")
_RBRACE: Final = ord("}")
_LBRACKET: Final = ord("[")
_RBRACKET: Final = ord("]")
_DIGITS: Final = frozenset(b"0123456789")
_END: Final = -1

_WHITESPACE: Final = re.compile(rb"[ \t\n\v\f\r]*")
_STRING_STOP: Final = re.compile(rb'["\\\x00]')
_NUMBER_SPAN: Final = re.compile(rb"[-+.0-9A-Za-z]+")
_DECIMAL_LITERAL: Final = re.compile(
    rb"-?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][-+]?[0-9]+)?"
)
_NONZERO_MANTISSA: Final = re.compile(rb"-?[0.]*[1-9]")

# Every byte maps to a space except the newline
_BLANKING: Final = bytes(
    byte if byte == ord("\n") else ord(" ") for byte in range(256)
)


def is_decimal(span: bytes) -> bool:
    """
    Rejects leading zeros and hexadecimal markers in a number span.

    ``0`` may only be followed by ``.``, and likewise ``-0``.
    """
    if len(span) > 1 and span[0] == ord("0") and span[1] != ord("."):
        return False
    if len(span) > 2 and span.startswith(b"-0") and span[2] != ord("."):
        return False
    return b"x" not in span and b"X" not in span


def _remove_comments(
    buf: bytearray, start_token: bytes, end_token: bytes
) -> None:
    """Blanks every ``start_token`` ... ``end_token`` run outside strings."""
    in_string = False
    escaped = False
    pos = 0
    end = len(buf)
    while pos < end:
        byte = buf[pos]
        if byte == _BACKSLASH and not escaped:
            escaped = True
            pos += 1
            continue
        if byte == _QUOTE and not escaped:
            in_string = not in_string
        elif not in_string and buf.startswith(start_token, pos):
            body = pos + len(start_token)
            buf[pos:body] = b" " * len(start_token)
            stop = buf.find(end_token, body)
            if stop < 0:
                return
            stop += len(end_token)
            buf[body:stop] = buf[body:stop].translate(_BLANKING)
            pos = stop - 1
        escaped = False
        pos += 1


def strip_comments(data: bytes) -> bytes:
    """
    Returns a copy of ``data`` with ``/* */`` and ``//`` comments blanked.

    Block comments go first, then line comments. Newlines inside comments
    survive so line and column numbers still match the input.
    """
    buf = bytearray(data)
    with ProfileContext("strip_comments", len(buf)):
        _remove_comments(buf, b"/*", b"*/")
        _remove_comments(buf, b"//", b"\n")
    return bytes(buf)


class _Frame:
    """A container still being filled by the parser."""

    __slots__ = ("array", "closer", "key", "key_pos", "obj", "value")

    def __init__(self, value: JsonValue, is_object: bool) -> None:
        self.value = value
        self.obj = value.get_object()
        self.array = value.get_array()
        self.closer = _RBRACE if is_object else _RBRACKET
        self.key = b""
        self.key_pos = 0

    @property
    def is_object(self) -> bool:
        return self.obj is not None

    def trim(self) -> None:
        if self.obj is not None:
            self.obj.trim()
        elif self.array is not None:
            self.array.trim()


class JsonParser:
    """
    Cursor-based parser over a UTF-8 buffer.

    ``source`` is what the caller handed in; it only feeds error messages.
    ``original`` is the buffer before comment stripping, used to translate
    byte offsets into character offsets.
    """

    def __init__(
        self,
        data: bytes,
        config: ParseConfig,
        source: str | bytes = b"",
        original: bytes | None = None,
    ) -> None:
        self.data = data
        self.config = config
        self.pos = len(_BOM) if data.startswith(_BOM) else 0
        self._source = source
        self._original = data if original is None else original
        self._key_cache: dict[bytes, bytes] = {}

    def _error(self, msg: str, pos: int) -> JSONDecodeError:
        if isinstance(self._source, str):
            doc = self._source
            char_pos = UTF8PositionMapper(self._original).byte_to_char(pos)
        else:
            # Invalid bytes become U+FFFD in doc, so count them the same way
            doc = self._source.decode("utf-8", "replace")
            char_pos = len(self._original[:pos].decode("utf-8", "replace"))
        return JSONDecodeError(msg, doc, char_pos)

    def _peek(self) -> int:
        if self.pos < len(self.data):
            return self.data[self.pos]
        return _END

    def _skip_whitespace(self) -> None:
        self.pos = _WHITESPACE.match(self.data, self.pos).end()  # type: ignore[union-attr]

    # Scalars

    def _scan_string(self) -> tuple[int, int]:
        """Moves past a quoted string and returns the bounds of its body."""
        start = self.pos + 1
        search = start
        data = self.data
        while True:
            match = _STRING_STOP.search(data, search)
            if match is None:
                raise self._error("Unterminated string starting at", self.pos)
            stop = match.start()
            byte = data[stop]
            if byte == _QUOTE:
                self.pos = stop + 1
                return start, stop
            if byte == _BACKSLASH and stop + 1 < len(data) and data[stop + 1]:
                search = stop + 2
                continue
            raise self._error("Unterminated string starting at", self.pos)

    def _decode_string(self, start: int, stop: int) -> bytes:
        with ProfileContext("parse_string", stop - start):
            decoded = unescape_string(self.data[start:stop])
            if decoded is None:
                raise self._error(
                    "Invalid escape or control character in string", start - 1
                )
            if not is_valid_utf8(decoded):
                raise self._error("Invalid UTF-8 in string", start - 1)
            return decoded

    def _parse_key(self) -> bytes:
        """Parses a member name, reusing decodings of names seen before."""
        start, stop = self._scan_string()
        raw = self.data[start:stop]
        cached = self._key_cache.get(raw)
        if cached is None:
            cached = self._decode_string(start, stop)
            self._key_cache[raw] = cached
        return cached

    def _parse_number(self) -> JsonValue:
        start = self.pos
        match = _NUMBER_SPAN.match(self.data, start)
        span = match.group() if match is not None else b""
        with ProfileContext("parse_number", len(span)):
            if not is_decimal(span) or not _DECIMAL_LITERAL.fullmatch(span):
                raise self._error("Invalid number", start)
            number = float(span)
            if not math.isfinite(number):
                raise self._error("Number out of range", start)
            if number == 0.0 and _NONZERO_MANTISSA.match(span):
                raise self._error("Number out of range", start)
            if 0.0 < abs(number) < sys.float_info.min:
                raise self._error("Number out of range", start)
        self.pos = start + len(span)
        return JsonValue._from_float(number)

    def _parse_literal(self) -> JsonValue:
        data = self.data
        pos = self.pos
        if data.startswith(b"true", pos):
            self.pos += 4
            return JsonValue.new_boolean(True)
        if data.startswith(b"false", pos):
            self.pos += 5
            return JsonValue.new_boolean(False)
        if data.startswith(b"null", pos):
            self.pos += 4
            return JsonValue.new_null()
        raise self._error("Expecting value", pos)

    # Containers

    def _parse_member_key(self, frame: _Frame) -> None:
        if self._peek() != _QUOTE:
            raise self._error(
                "Expecting property name enclosed in double quotes", self.pos
            )
        frame.key_pos = self.pos
        frame.key = self._parse_key()
        self._skip_whitespace()
        if self._peek() != _COLON:
            raise self._error("Expecting ':' delimiter", self.pos)
        self.pos += 1

    def _open_container(self, stack: list[_Frame]) -> JsonValue | None:
        """
        Consumes an opening bracket.

        Returns the finished value for an empty container; otherwise pushes
        a frame and returns None.
        """
        if len(stack) + 1 > self.config.max_nesting:
            raise self._error("Maximum nesting depth exceeded", self.pos)
        is_object = self.data[self.pos] == _LBRACE
        value = JsonValue.new_object() if is_object else JsonValue.new_array()
        self.pos += 1
        self._skip_whitespace()
        frame = _Frame(value, is_object)
        if self._peek() == frame.closer:
            self.pos += 1
            return value
        stack.append(frame)
        if is_object:
            self._parse_member_key(frame)
        return None

    def _parse_value(self, stack: list[_Frame]) -> JsonValue | None:
        byte = self._peek()
        if byte in (_LBRACE, _LBRACKET):
            return self._open_container(stack)
        if byte == _QUOTE:
            start, stop = self._scan_string()
            return JsonValue._from_utf8(self._decode_string(start, stop))
        if byte == _MINUS or byte in _DIGITS:
            return self._parse_number()
        return self._parse_literal()

    def _store(self, frame: _Frame, value: JsonValue) -> None:
        if frame.obj is not None:
            if not frame.obj._add(frame.key, value):
                raise self._error("Duplicate key", frame.key_pos)
        elif frame.array is not None:
            frame.array._add(value)

    def parse(self) -> JsonValue:
        """Parses one complete value starting at the cursor."""
        stack: list[_Frame] = []
        while True:
            self._skip_whitespace()
            value = self._parse_value(stack)
            if value is None:
                continue
            while stack:
                frame = stack[-1]
                self._store(frame, value)
                self._skip_whitespace()
                byte = self._peek()
                if byte == _COMMA:
                    self.pos += 1
                    self._skip_whitespace()
                    if frame.is_object:
                        self._parse_member_key(frame)
                    break
                if byte != frame.closer:
                    raise self._error("Expecting ',' delimiter", self.pos)
                self.pos += 1
                frame.trim()
                stack.pop()
                value = frame.value
            else:
                return value

    def parse_document(self) -> JsonValue:
        """Parses the top-level value and applies the trailing-data policy."""
        with ProfileContext("parse_document", len(self.data)):
            value = self.parse()
            if self.config.strict:
                self._skip_whitespace()
                if self.pos < len(self.data):
                    raise self._error("Extra data", self.pos)
            return value


def _coerce_input(text: JsonText) -> tuple[bytes, str | bytes]:
    if isinstance(text, str):
        # Lone surrogates survive encoding and fail UTF-8 validation later
        return text.encode("utf-8", "surrogatepass"), text
    if isinstance(text, bytes | bytearray | memoryview):
        data = bytes(text)
        return data, data
    raise TypeError(
        f"the JSON object must be str or bytes, not {type(text).__name__}"
    )


def _parse(text: JsonText, config: ParseConfig) -> JsonValue:
    data, source = _coerce_input(text)
    parsed = strip_comments(data) if config.allow_comments else data
    parser = JsonParser(parsed, config, source=source, original=data)
    return parser.parse_document()


def loads(text: JsonText, **kwargs: Any) -> JsonValue:
    """
    Parses JSON text into a document tree.

    Keyword arguments build a ParseConfig. Raises JSONDecodeError on
    malformed input.
    """
    return _parse(text, ParseConfig(**kwargs))


def load(fp: IO[str] | IO[bytes], **kwargs: Any) -> JsonValue:
    """Parses the whole content of a file-like object."""
    return loads(fp.read(), **kwargs)


def parse_string(
    text: JsonText, config: ParseConfig | None = None
) -> JsonValue | None:
    """Parses JSON text; returns None instead of raising on failure."""
    try:
        return _parse(text, config or DEFAULT_PARSE_CONFIG)
    except JSONDecodeError as exc:
        logger.debug("Parse failed: %s", exc)
        return None
    except MemoryError:
        logger.debug("Parse ran out of memory")
        return None


def parse_string_with_comments(
    text: JsonText, config: ParseConfig | None = None
) -> JsonValue | None:
    """Like parse_string, after blanking ``/* */`` and ``//`` comments."""
    config = dataclasses.replace(
        config or DEFAULT_PARSE_CONFIG, allow_comments=True
    )
    return parse_string(text, config)


def _read_file(path: str | os.PathLike[str]) -> bytes | None:
    try:
        data = Path(path).read_bytes()
    except OSError as exc:
        logger.debug("Could not read %s: %s", path, exc)
        return None
    if not data:
        logger.debug("Empty file %s", path)
        return None
    return data


def parse_file(
    path: str | os.PathLike[str], config: ParseConfig | None = None
) -> JsonValue | None:
    """Reads and parses a whole file; None if unreadable or malformed."""
    data = _read_file(path)
    if data is None:
        return None
    return parse_string(data, config)


def parse_file_with_comments(
    path: str | os.PathLike[str], config: ParseConfig | None = None
) -> JsonValue | None:
    data = _read_file(path)
    if data is None:
        return None
    return parse_string_with_comments(data, config)

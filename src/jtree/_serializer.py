"""
Two-pass serializer from a document tree to JSON text.

The same traversal runs twice: once with a counting writer to size the
output exactly, then with a writer over the caller's buffer. Both passes go
through _BufferWriter, so the sizes agree by construction.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator
from pathlib import Path
from typing import IO
from typing import Any
from typing import Final

from jtree._codec import escape_string
from jtree._codec import escaped_length
from jtree._config import DEFAULT_ENCODE_CONFIG
from jtree._config import EncodeConfig
from jtree._errors import JSONEncodeError
from jtree._profile import ProfileContext
from jtree._tree import JsonArray
from jtree._tree import JsonObject
from jtree._tree import JsonValue
from jtree._types import FAILURE
from jtree._types import SUCCESS
from jtree._types import JsonStatus
from jtree._types import JsonValueType

logger = logging.getLogger(__name__)

FLOAT_FORMAT: Final = b"%1.17g"
NUM_BUF_SIZE: Final = 64
INDENT: Final = b"    "


def _encode_number(number: float) -> bytes:
    """Formats a number with 17 significant digits."""
    text = FLOAT_FORMAT % number
    if len(text) >= NUM_BUF_SIZE:
        raise JSONEncodeError(
            f"Number {number!r} does not fit the scratch buffer"
        )
    return text


class _BufferWriter:
    """
    Appends output to a bytearray, or only counts it when ``buf`` is None.

    A writing buffer always keeps one byte free for the trailing NUL.
    """

    __slots__ = ("buf", "escape_slashes", "limit", "written")

    def __init__(self, buf: bytearray | None, escape_slashes: bool) -> None:
        self.buf = buf
        self.escape_slashes = escape_slashes
        self.limit = len(buf) - 1 if buf is not None else 0
        self.written = 0

    def append(self, chunk: bytes) -> None:
        if self.buf is None:
            self.written += len(chunk)
            return
        end = self.written + len(chunk)
        if end > self.limit:
            raise JSONEncodeError("Output buffer too small")
        self.buf[self.written : end] = chunk
        self.written = end

    def append_indent(self, level: int) -> None:
        self.append(INDENT * level)

    def append_string(self, data: bytes) -> None:
        if self.buf is None:
            self.written += escaped_length(data, self.escape_slashes)
        else:
            self.append(escape_string(data, self.escape_slashes))


class _Frame:
    """An open container whose members are still being written."""

    __slots__ = ("closer", "count", "entries", "index", "is_object", "level")

    def __init__(self, members: JsonObject | JsonArray, level: int) -> None:
        self.entries: Iterator[Any]
        if isinstance(members, JsonObject):
            self.is_object = True
            self.entries = members._raw_items()
            self.closer = b"}"
        else:
            self.is_object = False
            self.entries = iter(members)
            self.closer = b"]"
        self.count = len(members)
        self.index = 0
        self.level = level


class JsonSerializer:
    """Walks a tree with an explicit stack and feeds a _BufferWriter."""

    def __init__(self, config: EncodeConfig) -> None:
        self.config = config

    def _emit(
        self,
        node: JsonValue,
        level: int,
        writer: _BufferWriter,
        stack: list[_Frame],
    ) -> None:
        members: JsonObject | JsonArray | None = node.get_object()
        if members is None:
            members = node.get_array()
        if members is not None:
            frame = _Frame(members, level)
            writer.append(b"{" if frame.is_object else b"[")
            if frame.count == 0:
                writer.append(frame.closer)
            else:
                stack.append(frame)
            return

        data = node.get_string_bytes()
        if data is not None:
            writer.append_string(data)
            return
        number = node.get_number()
        if number is not None:
            writer.append(_encode_number(number))
            return

        kind = node.get_type()
        if kind is JsonValueType.BOOLEAN:
            writer.append(b"true" if node.get_boolean() else b"false")
        elif kind is JsonValueType.NULL:
            writer.append(b"null")
        else:
            raise JSONEncodeError(
                f"Cannot serialize a value of type {kind.name}"
            )

    def serialize(self, value: JsonValue | None, writer: _BufferWriter) -> int:
        """Writes ``value`` and returns the byte count, excluding the NUL."""
        if value is None:
            raise JSONEncodeError("Cannot serialize a missing value")
        if not isinstance(value, JsonValue):
            raise TypeError(
                f"expected a JsonValue, not {type(value).__name__}"
            )
        pretty = self.config.pretty
        stack: list[_Frame] = []
        self._emit(value, 0, writer, stack)
        while stack:
            frame = stack[-1]
            index = frame.index
            if index == frame.count:
                stack.pop()
                if pretty:
                    writer.append(b"\n")
                    writer.append_indent(frame.level)
                writer.append(frame.closer)
                continue
            frame.index += 1
            if index:
                writer.append(b",")
            if pretty:
                writer.append(b"\n")
                writer.append_indent(frame.level + 1)
            if frame.is_object:
                name, child = next(frame.entries)
                writer.append_string(name)
                writer.append(b": " if pretty else b":")
            else:
                child = next(frame.entries)
            self._emit(child, frame.level + 1, writer, stack)
        return writer.written


def _measure(value: JsonValue | None, config: EncodeConfig) -> int:
    writer = _BufferWriter(None, config.escape_slashes)
    with ProfileContext("serialization_size"):
        return JsonSerializer(config).serialize(value, writer) + 1


def _write(
    value: JsonValue | None, buf: bytearray, config: EncodeConfig
) -> int:
    writer = _BufferWriter(buf, config.escape_slashes)
    with ProfileContext("serialize_to_buffer", len(buf)):
        written = JsonSerializer(config).serialize(value, writer)
    buf[written] = 0
    return written


def serialization_size(
    value: JsonValue | None, config: EncodeConfig | None = None
) -> int:
    """
    Bytes needed to serialize ``value``, counting the trailing NUL.

    Returns 0 if the tree cannot be serialized.
    """
    try:
        return _measure(value, config or DEFAULT_ENCODE_CONFIG)
    except JSONEncodeError as exc:
        logger.debug("Sizing failed: %s", exc)
        return 0


def serialize_to_buffer(
    value: JsonValue | None,
    buf: bytearray,
    config: EncodeConfig | None = None,
) -> JsonStatus:
    """
    Serializes into ``buf`` followed by a NUL byte.

    ``buf`` must hold at least serialization_size(value) bytes; a smaller
    buffer is left untouched. If writing fails part way, the first byte is
    zeroed.
    """
    config = config or DEFAULT_ENCODE_CONFIG
    needed = serialization_size(value, config)
    if needed == 0 or len(buf) < needed:
        return FAILURE
    try:
        _write(value, buf, config)
    except JSONEncodeError as exc:
        logger.debug("Serialization failed: %s", exc)
        buf[0] = 0
        return FAILURE
    return SUCCESS


def _serialize_to_bytes(
    value: JsonValue | None, config: EncodeConfig
) -> bytes:
    size = _measure(value, config)
    buf = bytearray(size)
    written = _write(value, buf, config)
    return bytes(buf[:written])


def serialize_to_string(
    value: JsonValue | None, config: EncodeConfig | None = None
) -> str | None:
    try:
        data = _serialize_to_bytes(value, config or DEFAULT_ENCODE_CONFIG)
    except JSONEncodeError as exc:
        logger.debug("Serialization failed: %s", exc)
        return None
    except MemoryError:
        logger.debug("Serialization ran out of memory")
        return None
    return data.decode("utf-8")


def serialize_to_file(
    value: JsonValue | None,
    path: str | os.PathLike[str],
    config: EncodeConfig | None = None,
) -> JsonStatus:
    """Serializes ``value`` and writes it to ``path``, replacing the file."""
    try:
        data = _serialize_to_bytes(value, config or DEFAULT_ENCODE_CONFIG)
    except JSONEncodeError as exc:
        logger.debug("Serialization failed: %s", exc)
        return FAILURE
    try:
        Path(path).write_bytes(data)
    except OSError as exc:
        logger.debug("Could not write %s: %s", path, exc)
        return FAILURE
    return SUCCESS


def dumps(value: JsonValue, **kwargs: Any) -> str:
    """
    Serializes a document tree to a JSON string.

    Keyword arguments build an EncodeConfig. Raises JSONEncodeError if the
    tree holds a node that cannot be serialized.
    """
    config = EncodeConfig(**kwargs)
    return _serialize_to_bytes(value, config).decode("utf-8")


def dump(value: JsonValue, fp: IO[str], **kwargs: Any) -> None:
    """Serializes ``value`` and writes the text to a file-like object."""
    fp.write(dumps(value, **kwargs))

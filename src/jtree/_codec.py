"""
UTF-8 / UTF-16 string codec.

Works on raw UTF-8 bytes: sequence validation, decoding of JSON escape
sequences (including surrogate pairs) and the escaping rules used by the
serializer.
"""

from typing import Final

_BACKSLASH: Final = 0x5C
_LOWER_U: Final = 0x75

_HEX_DIGITS: Final = frozenset(b"0123456789abcdefABCDEF")

_LEAD_SURROGATE_MIN: Final = 0xD800
_LEAD_SURROGATE_MAX: Final = 0xDBFF
_TRAIL_SURROGATE_MIN: Final = 0xDC00
_TRAIL_SURROGATE_MAX: Final = 0xDFFF
_MAX_CODE_POINT: Final = 0x10FFFF

# Escape character -> decoded byte
_UNESCAPES: Final = {
    ord('"'): ord('"'),
    ord("\\"): ord("\\"),
    ord("/"): ord("/"),
    ord("b"): ord("\b"),
    ord("f"): ord("\f"),
    ord("n"): ord("\n"),
    ord("r"): ord("\r"),
    ord("t"): ord("\t"),
}

_NAMED_ESCAPES: Final = {
    ord('"'): b'\\"',
    ord("\\"): b"\\\\",
    ord("\b"): b"\\b",
    ord("\f"): b"\\f",
    ord("\n"): b"\\n",
    ord("\r"): b"\\r",
    ord("\t"): b"\\t",
}


def _build_escape_table(escape_slashes: bool) -> tuple[bytes, ...]:
    table = []
    for byte in range(256):
        if byte in _NAMED_ESCAPES:
            table.append(_NAMED_ESCAPES[byte])
        elif byte < 0x20:
            table.append(b"\\u%04x" % byte)
        elif byte == ord("/") and escape_slashes:
            table.append(b"\\/")
        else:
            table.append(bytes((byte,)))
    return tuple(table)


_ESCAPE_TABLES: Final = {
    True: _build_escape_table(True),
    False: _build_escape_table(False),
}
_ESCAPE_LENGTHS: Final = {
    flag: tuple(len(chunk) for chunk in table)
    for flag, table in _ESCAPE_TABLES.items()
}


def is_continuation_byte(byte: int) -> bool:
    return (byte & 0xC0) == 0x80


def num_bytes_in_utf8_sequence(lead: int) -> int:
    """Length of the sequence introduced by ``lead``, or 0 if it cannot lead."""
    if lead in (0xC0, 0xC1) or lead > 0xF4 or is_continuation_byte(lead):
        return 0
    if (lead & 0x80) == 0:
        return 1
    if (lead & 0xE0) == 0xC0:
        return 2
    if (lead & 0xF0) == 0xE0:
        return 3
    if (lead & 0xF8) == 0xF0:
        return 4
    return 0


def verify_utf8_sequence(data: bytes, pos: int) -> int:
    """
    Validates the UTF-8 sequence starting at ``pos``.

    Returns the sequence length, or 0 when the sequence is truncated, lacks
    continuation bytes, is overlong, encodes a surrogate half, or lies past
    U+10FFFF.
    """
    length = num_bytes_in_utf8_sequence(data[pos])
    if length == 0 or pos + length > len(data):
        return 0

    if length == 1:
        return 1

    for offset in range(1, length):
        if not is_continuation_byte(data[pos + offset]):
            return 0

    if length == 2:
        cp = data[pos] & 0x1F
    elif length == 3:
        cp = data[pos] & 0x0F
    else:
        cp = data[pos] & 0x07
    for offset in range(1, length):
        cp = (cp << 6) | (data[pos + offset] & 0x3F)

    # Overlong encodings
    if (
        (cp < 0x80 and length > 1)
        or (cp < 0x800 and length > 2)
        or (cp < 0x10000 and length > 3)
    ):
        return 0

    if cp > _MAX_CODE_POINT:
        return 0

    if _LEAD_SURROGATE_MIN <= cp <= _TRAIL_SURROGATE_MAX:
        return 0

    return length


def is_valid_utf8(data: bytes) -> bool:
    """Checks that every sequence in ``data`` is well-formed UTF-8."""
    if data.isascii():
        return True

    pos = 0
    end = len(data)
    while pos < end:
        length = verify_utf8_sequence(data, pos)
        if not length:
            return False
        pos += length
    return True


def parse_utf16_hex(data: bytes, pos: int) -> int | None:
    """Reads exactly four hex digits at ``pos``."""
    digits = data[pos : pos + 4]
    if len(digits) != 4 or not all(byte in _HEX_DIGITS for byte in digits):
        return None
    return int(digits, 16)


def encode_utf8(cp: int) -> bytes:
    """Encodes a code point as 1-4 UTF-8 bytes without range checks."""
    if cp < 0x80:
        return bytes((cp,))
    if cp < 0x800:
        return bytes((((cp >> 6) & 0x1F) | 0xC0, (cp & 0x3F) | 0x80))
    if cp < 0x10000:
        return bytes(
            (
                ((cp >> 12) & 0x0F) | 0xE0,
                ((cp >> 6) & 0x3F) | 0x80,
                (cp & 0x3F) | 0x80,
            )
        )
    return bytes(
        (
            ((cp >> 18) & 0x07) | 0xF0,
            ((cp >> 12) & 0x3F) | 0x80,
            ((cp >> 6) & 0x3F) | 0x80,
            (cp & 0x3F) | 0x80,
        )
    )


def _decode_unicode_escape(data: bytes, pos: int) -> tuple[bytes, int] | None:
    """
    Decodes ``\\uXXXX`` (or a surrogate pair) whose ``u`` sits at ``pos``.

    Returns the UTF-8 bytes and the index of the last consumed input byte.
    """
    cp = parse_utf16_hex(data, pos + 1)
    if cp is None:
        return None
    last = pos + 4

    if _LEAD_SURROGATE_MIN <= cp <= _LEAD_SURROGATE_MAX:
        if data[last + 1 : last + 3] != b"\\u":
            return None
        trail = parse_utf16_hex(data, last + 3)
        if trail is None or not (
            _TRAIL_SURROGATE_MIN <= trail <= _TRAIL_SURROGATE_MAX
        ):
            return None
        cp = (
            (((cp - _LEAD_SURROGATE_MIN) & 0x3FF) << 10)
            | ((trail - _TRAIL_SURROGATE_MIN) & 0x3FF)
        ) + 0x10000
        last += 6
    elif _TRAIL_SURROGATE_MIN <= cp <= _TRAIL_SURROGATE_MAX:
        # Trail surrogate without a lead
        return None

    return encode_utf8(cp), last


def unescape_string(data: bytes) -> bytes | None:
    """
    Decodes the body of a quoted JSON string (quotes already removed).

    Returns None on an unknown escape, a malformed or unpaired ``\\u``
    escape, or a raw control byte below 0x20. The result is never longer
    than the input.
    """
    if _BACKSLASH not in data and (not data or min(data) >= 0x20):
        return bytes(data)

    out = bytearray()
    pos = 0
    end = len(data)
    while pos < end:
        byte = data[pos]
        if byte == _BACKSLASH:
            pos += 1
            if pos >= end:
                return None
            escape = data[pos]
            if escape in _UNESCAPES:
                out.append(_UNESCAPES[escape])
            elif escape == _LOWER_U:
                decoded = _decode_unicode_escape(data, pos)
                if decoded is None:
                    return None
                chunk, pos = decoded
                out += chunk
            else:
                return None
        elif byte < 0x20:
            return None
        else:
            out.append(byte)
        pos += 1

    return bytes(out)


def escaped_length(data: bytes, escape_slashes: bool = True) -> int:
    """Byte length of ``escape_string(data)`` without building it."""
    lengths = _ESCAPE_LENGTHS[escape_slashes]
    return 2 + sum(lengths[byte] for byte in data)


def escape_string(data: bytes, escape_slashes: bool = True) -> bytes:
    """
    Quotes and escapes UTF-8 bytes for output.

    Non-ASCII bytes pass through unchanged; UTF-8 is not re-validated here.
    """
    table = _ESCAPE_TABLES[escape_slashes]
    return b'"' + b"".join(table[byte] for byte in data) + b'"'

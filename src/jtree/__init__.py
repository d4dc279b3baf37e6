"""
Embeddable JSON codec built around a mutable document tree.

Parses JSON text into JsonValue / JsonObject / JsonArray nodes, lets callers
edit the tree (including dot-notation paths), and serializes it back in
compact or pretty form. Entry points come in two flavours: loads/dumps raise
on bad input, while the parse_* and serialize_* functions return None or
FAILURE and log the reason at DEBUG level.
"""

import logging

from jtree._codec import escape_string
from jtree._codec import escaped_length
from jtree._codec import is_valid_utf8
from jtree._codec import unescape_string
from jtree._compare import deep_copy
from jtree._compare import validate
from jtree._compare import value_equals
from jtree._config import EncodeConfig
from jtree._config import ParseConfig
from jtree._errors import JSONDecodeError
from jtree._errors import JSONEncodeError
from jtree._parser import load
from jtree._parser import loads
from jtree._parser import parse_file
from jtree._parser import parse_file_with_comments
from jtree._parser import parse_string
from jtree._parser import parse_string_with_comments
from jtree._parser import strip_comments
from jtree._path import dotget_array
from jtree._path import dotget_boolean
from jtree._path import dotget_number
from jtree._path import dotget_object
from jtree._path import dotget_string
from jtree._path import dotget_value
from jtree._path import dothas_value
from jtree._path import dothas_value_of_type
from jtree._path import dotremove
from jtree._path import dotset_boolean
from jtree._path import dotset_null
from jtree._path import dotset_number
from jtree._path import dotset_string
from jtree._path import dotset_value
from jtree._profile import clear_hot_path_stats
from jtree._profile import get_hot_path_stats
from jtree._serializer import dump
from jtree._serializer import dumps
from jtree._serializer import serialization_size
from jtree._serializer import serialize_to_buffer
from jtree._serializer import serialize_to_file
from jtree._serializer import serialize_to_string
from jtree._tree import JsonArray
from jtree._tree import JsonObject
from jtree._tree import JsonValue
from jtree._tree import value_type
from jtree._types import FAILURE
from jtree._types import SUCCESS
from jtree._types import JsonStatus
from jtree._types import JsonValueType

__version__ = "0.1.0"

__all__ = [
    "FAILURE",
    "SUCCESS",
    "EncodeConfig",
    "JSONDecodeError",
    "JSONEncodeError",
    "JsonArray",
    "JsonObject",
    "JsonStatus",
    "JsonValue",
    "JsonValueType",
    "ParseConfig",
    "clear_hot_path_stats",
    "deep_copy",
    "dotget_array",
    "dotget_boolean",
    "dotget_number",
    "dotget_object",
    "dotget_string",
    "dotget_value",
    "dothas_value",
    "dothas_value_of_type",
    "dotremove",
    "dotset_boolean",
    "dotset_null",
    "dotset_number",
    "dotset_string",
    "dotset_value",
    "dump",
    "dumps",
    "escape_string",
    "escaped_length",
    "get_hot_path_stats",
    "is_valid_utf8",
    "load",
    "loads",
    "parse_file",
    "parse_file_with_comments",
    "parse_string",
    "parse_string_with_comments",
    "serialization_size",
    "serialize_to_buffer",
    "serialize_to_file",
    "serialize_to_string",
    "strip_comments",
    "unescape_string",
    "validate",
    "value_equals",
    "value_type",
]

logging.getLogger(__name__).addHandler(logging.NullHandler())

"""
Dot-notation access into nested objects.

``"a.b.c"`` names member ``c`` of object ``b`` of object ``a``. Every dot
separates two names, so a name that itself contains a dot cannot be reached
this way; use the plain JsonObject methods for those.
"""

from __future__ import annotations

import logging

from jtree._tree import JsonArray
from jtree._tree import JsonObject
from jtree._tree import JsonValue
from jtree._tree import Name
from jtree._tree import _encode_name
from jtree._tree import creates_cycle
from jtree._tree import new_object_node
from jtree._types import FAILURE
from jtree._types import SUCCESS
from jtree._types import JsonStatus
from jtree._types import JsonValueType

logger = logging.getLogger(__name__)


def _split(name: Name) -> list[bytes] | None:
    key = _encode_name(name)
    return key.split(b".") if key is not None else None


def _walk(obj: JsonObject, parts: list[bytes]) -> JsonObject | None:
    """Follows every part but the last; None if one is not an object."""
    for part in parts[:-1]:
        child = obj.get_object(part)
        if child is None:
            return None
        obj = child
    return obj


def dotget_value(obj: JsonObject, name: Name) -> JsonValue | None:
    parts = _split(name)
    if parts is None:
        return None
    target = _walk(obj, parts)
    return target.get_value(parts[-1]) if target is not None else None


def dotget_string(obj: JsonObject, name: Name) -> str | None:
    value = dotget_value(obj, name)
    return value.get_string() if value is not None else None


def dotget_number(obj: JsonObject, name: Name) -> float | None:
    value = dotget_value(obj, name)
    return value.get_number() if value is not None else None


def dotget_object(obj: JsonObject, name: Name) -> JsonObject | None:
    value = dotget_value(obj, name)
    return value.get_object() if value is not None else None


def dotget_array(obj: JsonObject, name: Name) -> JsonArray | None:
    value = dotget_value(obj, name)
    return value.get_array() if value is not None else None


def dotget_boolean(obj: JsonObject, name: Name) -> bool | None:
    value = dotget_value(obj, name)
    return value.get_boolean() if value is not None else None


def dothas_value(obj: JsonObject, name: Name) -> bool:
    return dotget_value(obj, name) is not None


def dothas_value_of_type(
    obj: JsonObject, name: Name, kind: JsonValueType
) -> bool:
    value = dotget_value(obj, name)
    return value is not None and value.get_type() is kind


def dotset_value(
    obj: JsonObject, name: Name, value: JsonValue | None
) -> JsonStatus:
    """
    Sets the value at a dotted path, creating missing objects on the way.

    Fails without touching the tree if an existing intermediate member is
    not an object or ``value`` already has a parent. Missing intermediates
    are built as a detached chain and attached only after the value is in
    place, so a failure never leaves empty objects behind.
    """
    if value is None or value.get_parent() is not None:
        return FAILURE
    parts = _split(name)
    if parts is None:
        return FAILURE

    depth = len(parts) - 1
    target = obj
    level = 0
    while level < depth:
        existing = target.get_value(parts[level])
        if existing is None:
            break
        next_target = existing.get_object()
        if next_target is None:
            logger.debug(
                "Path member %r is not an object", parts[level].decode("utf-8")
            )
            return FAILURE
        target = next_target
        level += 1

    if level == depth:
        return target.set_value(parts[-1], value)

    if creates_cycle(target.get_wrapping_value(), value):
        return FAILURE
    head, tail = new_object_node()
    for part in parts[level + 1 : depth]:
        child, child_object = new_object_node()
        if not tail.add(part, child):
            return FAILURE
        tail = child_object
    if not tail.set_value(parts[-1], value):
        return FAILURE
    if not target.add(parts[level], head):
        # Hand the value back to the caller unowned
        tail.remove(parts[-1])
        return FAILURE
    return SUCCESS


def dotset_string(obj: JsonObject, name: Name, text: str | bytes) -> JsonStatus:
    return dotset_value(obj, name, JsonValue.new_string(text))


def dotset_number(
    obj: JsonObject, name: Name, number: int | float
) -> JsonStatus:
    return dotset_value(obj, name, JsonValue.new_number(number))


def dotset_boolean(obj: JsonObject, name: Name, flag: object) -> JsonStatus:
    return dotset_value(obj, name, JsonValue.new_boolean(flag))


def dotset_null(obj: JsonObject, name: Name) -> JsonStatus:
    return dotset_value(obj, name, JsonValue.new_null())


def dotremove(obj: JsonObject, name: Name) -> JsonStatus:
    """Removes and releases the value at a dotted path."""
    parts = _split(name)
    if parts is None:
        return FAILURE
    target = _walk(obj, parts)
    if target is None:
        return FAILURE
    return target.remove(parts[-1])

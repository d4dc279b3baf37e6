"""
Whole-tree operations: structural equality, deep copy and the schema check.

All three walk both trees with an explicit work list, so they handle any
depth the tree API can build.
"""

from __future__ import annotations

import logging
from typing import Final

from jtree._tree import JsonValue
from jtree._tree import value_type
from jtree._types import FAILURE
from jtree._types import SUCCESS
from jtree._types import JsonStatus
from jtree._types import JsonValueType

logger = logging.getLogger(__name__)

# Numbers closer than this compare equal
NUMBER_EPSILON: Final = 0.000001


def value_equals(a: JsonValue | None, b: JsonValue | None) -> bool:
    """
    Compares two trees structurally.

    Arrays compare element-wise, objects by name regardless of order,
    strings byte for byte and numbers within NUMBER_EPSILON. Two missing
    values are equal.
    """
    pending: list[tuple[JsonValue | None, JsonValue | None]] = [(a, b)]
    while pending:
        left, right = pending.pop()
        if value_type(left) is not value_type(right):
            return False
        if left is None or right is None:
            continue

        left_array, right_array = left.get_array(), right.get_array()
        if left_array is not None and right_array is not None:
            if len(left_array) != len(right_array):
                return False
            pending.extend(zip(left_array, right_array, strict=True))
            continue

        left_object, right_object = left.get_object(), right.get_object()
        if left_object is not None and right_object is not None:
            if len(left_object) != len(right_object):
                return False
            for name, value in left_object._raw_items():
                pending.append((value, right_object._get(name)))
            continue

        left_number, right_number = left.get_number(), right.get_number()
        if left_number is not None and right_number is not None:
            if abs(left_number - right_number) >= NUMBER_EPSILON:
                return False
        elif left.get_string_bytes() != right.get_string_bytes():
            return False
        elif left.get_boolean() != right.get_boolean():
            return False
    return True


def _copy_node(value: JsonValue) -> JsonValue | None:
    """Copies a scalar, or returns an empty container of the same kind."""
    kind = value.get_type()
    if kind is JsonValueType.OBJECT:
        return JsonValue.new_object()
    if kind is JsonValueType.ARRAY:
        return JsonValue.new_array()
    if kind is JsonValueType.NULL:
        return JsonValue.new_null()
    data = value.get_string_bytes()
    if data is not None:
        return JsonValue._from_utf8(data)
    number = value.get_number()
    if number is not None:
        return JsonValue._from_float(number)
    flag = value.get_boolean()
    if flag is not None:
        return JsonValue.new_boolean(flag)
    return None


def deep_copy(value: JsonValue | None) -> JsonValue | None:
    """
    Returns an independent, parentless copy of ``value``.

    The copy shares no nodes with the source. None comes back if the source
    is missing or holds a node that cannot be copied; no partial copy is
    returned.
    """
    if value is None:
        return None
    root = _copy_node(value)
    if root is None:
        return None
    pending = [(value, root)]
    try:
        while pending:
            source, target = pending.pop()
            source_object = source.get_object()
            target_object = target.get_object()
            if source_object is not None and target_object is not None:
                for name, child in source_object._raw_items():
                    copy = _copy_node(child)
                    if copy is None or not target_object._add(name, copy):
                        return None
                    pending.append((child, copy))
                continue
            source_array = source.get_array()
            target_array = target.get_array()
            if source_array is not None and target_array is not None:
                for child in source_array:
                    copy = _copy_node(child)
                    if copy is None or not target_array._add(copy):
                        return None
                    pending.append((child, copy))
    except MemoryError:
        logger.debug("Deep copy ran out of memory")
        return None
    return root


def validate(schema: JsonValue | None, value: JsonValue | None) -> JsonStatus:
    """
    Checks that ``value`` has the shape described by ``schema``.

    A null in the schema accepts anything. An empty array or object accepts
    any array or object. A non-empty schema array checks every element of
    the target against its first element. A schema object requires each of
    its names in the target, checked recursively; extra target names are
    allowed. Scalars only need matching types.
    """
    pending = [(schema, value)]
    while pending:
        schema_node, node = pending.pop()
        if schema_node is None or node is None:
            return FAILURE
        kind = schema_node.get_type()
        if kind is JsonValueType.NULL:
            continue
        if kind is not node.get_type() or kind is JsonValueType.ERROR:
            return FAILURE

        schema_array, array = schema_node.get_array(), node.get_array()
        if schema_array is not None and array is not None:
            template = schema_array.get_value(0)
            if template is not None:
                pending.extend((template, element) for element in array)
            continue

        schema_object, target = schema_node.get_object(), node.get_object()
        if schema_object is not None and target is not None:
            if len(target) < len(schema_object):
                return FAILURE
            for name, schema_member in schema_object._raw_items():
                member = target._get(name)
                if member is None:
                    return FAILURE
                pending.append((schema_member, member))
    return SUCCESS

"""
Document tree: tagged value nodes and the containers that own them.

Every node has at most one parent. Inserting a node that already has a
parent fails and leaves both the node and the container untouched, which is
what keeps trees acyclic. Containers keep an explicit capacity next to their
count and grow by doubling.
"""

from __future__ import annotations

import logging
import math
import weakref
from collections.abc import Iterator
from typing import TypeGuard

from jtree._codec import is_valid_utf8
from jtree._types import FAILURE
from jtree._types import STARTING_CAPACITY
from jtree._types import SUCCESS
from jtree._types import JsonStatus
from jtree._types import JsonValueType

logger = logging.getLogger(__name__)

type Name = str | bytes
type Payload = None | bool | float | bytes | JsonObject | JsonArray


def _encode_name(name: Name) -> bytes | None:
    """Normalizes an object member name to UTF-8 bytes."""
    if isinstance(name, str):
        try:
            return name.encode("utf-8")
        except UnicodeEncodeError:
            return None
    if isinstance(name, bytes | bytearray):
        data = bytes(name)
        return data if is_valid_utf8(data) else None
    raise TypeError(f"name must be str or bytes, not {type(name).__name__}")


def creates_cycle(container: JsonValue | None, value: JsonValue) -> bool:
    """True if ``value`` is ``container`` or one of its ancestors."""
    node = container
    while node is not None:
        if node is value:
            return True
        node = node.get_parent()
    return False


def value_type(value: JsonValue | None) -> JsonValueType:
    """Type of ``value``; ERROR for a missing value."""
    return value.get_type() if value is not None else JsonValueType.ERROR


def _can_adopt(
    container: JsonValue, value: JsonValue | None
) -> TypeGuard[JsonValue]:
    if value is None:
        return False
    if value.get_parent() is not None:
        logger.debug("Rejected insertion of a value that has a parent")
        return False
    return not creates_cycle(container, value)


def _grown(capacity: int) -> int:
    return max(capacity * 2, STARTING_CAPACITY)


class JsonValue:
    """
    A node of the document tree.

    Nodes are created through the new_* constructors and start out
    parentless. The parent link is weak: it never keeps a container alive.
    """

    __slots__ = ("__weakref__", "_parent", "_payload", "_type")

    def __init__(self, kind: JsonValueType, payload: Payload = None) -> None:
        self._type = kind
        self._payload = payload
        self._parent: weakref.ref[JsonValue] | None = None

    def __repr__(self) -> str:
        kind = self._type.name
        payload = self._payload
        if isinstance(payload, JsonObject | JsonArray):
            return f"JsonValue({kind}, count={len(payload)})"
        if self._type is JsonValueType.STRING:
            return f"JsonValue({kind}, {self.get_string()!r})"
        if self._type is JsonValueType.NULL:
            return f"JsonValue({kind})"
        return f"JsonValue({kind}, {payload!r})"

    # Constructors

    @classmethod
    def new_object(cls) -> JsonValue:
        value = cls(JsonValueType.OBJECT)
        value._payload = JsonObject(value)
        return value

    @classmethod
    def new_array(cls) -> JsonValue:
        value = cls(JsonValueType.ARRAY)
        value._payload = JsonArray(value)
        return value

    @classmethod
    def new_string(cls, text: str | bytes) -> JsonValue | None:
        """
        Creates a string node.

        ``bytes`` must be valid UTF-8 and ``str`` must not contain lone
        surrogates; otherwise None is returned.
        """
        if isinstance(text, str):
            try:
                data = text.encode("utf-8")
            except UnicodeEncodeError:
                logger.debug("Rejected string with lone surrogate")
                return None
        elif isinstance(text, bytes | bytearray):
            data = bytes(text)
            if not is_valid_utf8(data):
                logger.debug("Rejected string with invalid UTF-8")
                return None
        else:
            raise TypeError(
                f"string must be str or bytes, not {type(text).__name__}"
            )
        return cls._from_utf8(data)

    @classmethod
    def _from_utf8(cls, data: bytes) -> JsonValue:
        """Wraps bytes the caller has already validated."""
        return cls(JsonValueType.STRING, data)

    @classmethod
    def new_number(cls, number: int | float) -> JsonValue | None:
        """Creates a number node; NaN, infinities and overflow give None."""
        if not isinstance(number, int | float):
            raise TypeError(
                f"number must be int or float, not {type(number).__name__}"
            )
        try:
            as_float = float(number)
        except OverflowError:
            return None
        if not math.isfinite(as_float):
            return None
        return cls(JsonValueType.NUMBER, as_float)

    @classmethod
    def _from_float(cls, number: float) -> JsonValue:
        """Wraps a float the caller has already checked to be finite."""
        return cls(JsonValueType.NUMBER, number)

    @classmethod
    def new_boolean(cls, flag: object) -> JsonValue:
        return cls(JsonValueType.BOOLEAN, bool(flag))

    @classmethod
    def new_null(cls) -> JsonValue:
        return cls(JsonValueType.NULL)

    # Accessors

    def get_type(self) -> JsonValueType:
        return self._type

    def get_object(self) -> JsonObject | None:
        payload = self._payload
        return payload if isinstance(payload, JsonObject) else None

    def get_array(self) -> JsonArray | None:
        payload = self._payload
        return payload if isinstance(payload, JsonArray) else None

    def get_string(self) -> str | None:
        data = self.get_string_bytes()
        return data.decode("utf-8") if data is not None else None

    def get_string_bytes(self) -> bytes | None:
        payload = self._payload
        return payload if isinstance(payload, bytes) else None

    def get_string_len(self) -> int:
        """Byte length of a string node's UTF-8 data; 0 for other types."""
        data = self.get_string_bytes()
        return len(data) if data is not None else 0

    def get_number(self) -> float | None:
        payload = self._payload
        return payload if isinstance(payload, float) else None

    def get_boolean(self) -> bool | None:
        payload = self._payload
        return payload if isinstance(payload, bool) else None

    def get_parent(self) -> JsonValue | None:
        return self._parent() if self._parent is not None else None

    # Ownership

    def _attach(self, parent: JsonValue) -> None:
        self._parent = weakref.ref(parent)

    def _detach(self) -> None:
        self._parent = None


def new_object_node() -> tuple[JsonValue, JsonObject]:
    """Creates an empty object node and returns it with its JsonObject."""
    value = JsonValue(JsonValueType.OBJECT)
    obj = JsonObject(value)
    value._payload = obj
    return value, obj


def _string_of(value: JsonValue | None) -> str | None:
    return value.get_string() if value is not None else None


def _number_of(value: JsonValue | None) -> float | None:
    return value.get_number() if value is not None else None


def _object_of(value: JsonValue | None) -> JsonObject | None:
    return value.get_object() if value is not None else None


def _array_of(value: JsonValue | None) -> JsonArray | None:
    return value.get_array() if value is not None else None


def _boolean_of(value: JsonValue | None) -> bool | None:
    return value.get_boolean() if value is not None else None


class JsonObject:
    """
    Insertion-ordered mapping of unique names to owned values.

    Names and values live in two parallel lists sharing one capacity.
    Lookup is a linear scan comparing lengths, then bytes.
    """

    __slots__ = ("_capacity", "_names", "_values", "_wrapping_value")

    def __init__(self, wrapping_value: JsonValue) -> None:
        self._wrapping_value = wrapping_value
        self._names: list[bytes] = []
        self._values: list[JsonValue] = []
        self._capacity = 0

    def __len__(self) -> int:
        return len(self._names)

    def __iter__(self) -> Iterator[str]:
        for name in self._names:
            yield name.decode("utf-8")

    def __repr__(self) -> str:
        return f"JsonObject(count={len(self)}, capacity={self._capacity})"

    @property
    def capacity(self) -> int:
        return self._capacity

    def get_count(self) -> int:
        return len(self._names)

    def get_wrapping_value(self) -> JsonValue:
        return self._wrapping_value

    def items(self) -> Iterator[tuple[str, JsonValue]]:
        for name, value in self._raw_items():
            yield name.decode("utf-8"), value

    def _raw_items(self) -> Iterator[tuple[bytes, JsonValue]]:
        return zip(self._names, self._values, strict=True)

    # Storage

    def resize(self, new_capacity: int) -> JsonStatus:
        """Sets the capacity; fails at zero or below the current count."""
        if new_capacity <= 0 or new_capacity < len(self._names):
            return FAILURE
        self._capacity = new_capacity
        return SUCCESS

    def trim(self) -> JsonStatus:
        """Shrinks capacity to exactly the current count."""
        self._capacity = len(self._names)
        return SUCCESS

    def _find(self, key: bytes) -> int:
        key_len = len(key)
        for index, name in enumerate(self._names):
            if len(name) == key_len and name == key:
                return index
        return -1

    def _get(self, key: bytes) -> JsonValue | None:
        index = self._find(key)
        return self._values[index] if index >= 0 else None

    def _add(self, key: bytes, value: JsonValue) -> JsonStatus:
        """Appends a new pair; the caller has checked ``value`` is free."""
        if self._find(key) >= 0:
            return FAILURE
        if len(self._names) >= self._capacity:
            self._capacity = _grown(self._capacity)
        self._names.append(key)
        self._values.append(value)
        value._attach(self._wrapping_value)
        return SUCCESS

    # Lookup

    def get_value(self, name: Name) -> JsonValue | None:
        key = _encode_name(name)
        return self._get(key) if key is not None else None

    def get_string(self, name: Name) -> str | None:
        return _string_of(self.get_value(name))

    def get_number(self, name: Name) -> float | None:
        return _number_of(self.get_value(name))

    def get_object(self, name: Name) -> JsonObject | None:
        return _object_of(self.get_value(name))

    def get_array(self, name: Name) -> JsonArray | None:
        return _array_of(self.get_value(name))

    def get_boolean(self, name: Name) -> bool | None:
        return _boolean_of(self.get_value(name))

    def get_name(self, index: int) -> str | None:
        if not 0 <= index < len(self._names):
            return None
        return self._names[index].decode("utf-8")

    def get_value_at(self, index: int) -> JsonValue | None:
        if not 0 <= index < len(self._values):
            return None
        return self._values[index]

    def has_value(self, name: Name) -> bool:
        return self.get_value(name) is not None

    def has_value_of_type(self, name: Name, kind: JsonValueType) -> bool:
        value = self.get_value(name)
        return value is not None and value.get_type() is kind

    # Mutation

    def add(self, name: Name, value: JsonValue | None) -> JsonStatus:
        """Inserts a new pair; fails if ``name`` is already present."""
        if not _can_adopt(self._wrapping_value, value):
            return FAILURE
        key = _encode_name(name)
        if key is None:
            return FAILURE
        return self._add(key, value)

    def set_value(self, name: Name, value: JsonValue | None) -> JsonStatus:
        """Inserts or overwrites; an overwritten value is released."""
        if not _can_adopt(self._wrapping_value, value):
            return FAILURE
        key = _encode_name(name)
        if key is None:
            return FAILURE
        index = self._find(key)
        if index < 0:
            return self._add(key, value)
        self._values[index]._detach()
        self._values[index] = value
        value._attach(self._wrapping_value)
        return SUCCESS

    def set_string(self, name: Name, text: str | bytes) -> JsonStatus:
        return self.set_value(name, JsonValue.new_string(text))

    def set_number(self, name: Name, number: int | float) -> JsonStatus:
        return self.set_value(name, JsonValue.new_number(number))

    def set_boolean(self, name: Name, flag: object) -> JsonStatus:
        return self.set_value(name, JsonValue.new_boolean(flag))

    def set_null(self, name: Name) -> JsonStatus:
        return self.set_value(name, JsonValue.new_null())

    def remove(self, name: Name) -> JsonStatus:
        """
        Removes and releases the value under ``name``.

        The last pair moves into the freed slot, so order is not preserved.
        """
        key = _encode_name(name)
        index = self._find(key) if key is not None else -1
        if index < 0:
            return FAILURE
        self._values[index]._detach()
        last_name = self._names.pop()
        last_value = self._values.pop()
        if index < len(self._names):
            self._names[index] = last_name
            self._values[index] = last_value
        return SUCCESS

    def clear(self) -> JsonStatus:
        """Releases every pair; capacity is kept."""
        for value in self._values:
            value._detach()
        self._names.clear()
        self._values.clear()
        return SUCCESS


class JsonArray:
    """Index-addressable sequence of owned values."""

    __slots__ = ("_capacity", "_items", "_wrapping_value")

    def __init__(self, wrapping_value: JsonValue) -> None:
        self._wrapping_value = wrapping_value
        self._items: list[JsonValue] = []
        self._capacity = 0

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[JsonValue]:
        return iter(self._items)

    def __repr__(self) -> str:
        return f"JsonArray(count={len(self)}, capacity={self._capacity})"

    @property
    def capacity(self) -> int:
        return self._capacity

    def get_count(self) -> int:
        return len(self._items)

    def get_wrapping_value(self) -> JsonValue:
        return self._wrapping_value

    # Storage

    def resize(self, new_capacity: int) -> JsonStatus:
        if new_capacity <= 0 or new_capacity < len(self._items):
            return FAILURE
        self._capacity = new_capacity
        return SUCCESS

    def trim(self) -> JsonStatus:
        """Shrinks capacity to exactly the current count."""
        self._capacity = len(self._items)
        return SUCCESS

    def _add(self, value: JsonValue) -> JsonStatus:
        if len(self._items) >= self._capacity:
            self._capacity = _grown(self._capacity)
        self._items.append(value)
        value._attach(self._wrapping_value)
        return SUCCESS

    # Lookup

    def get_value(self, index: int) -> JsonValue | None:
        if not 0 <= index < len(self._items):
            return None
        return self._items[index]

    def get_string(self, index: int) -> str | None:
        return _string_of(self.get_value(index))

    def get_number(self, index: int) -> float | None:
        return _number_of(self.get_value(index))

    def get_object(self, index: int) -> JsonObject | None:
        return _object_of(self.get_value(index))

    def get_array(self, index: int) -> JsonArray | None:
        return _array_of(self.get_value(index))

    def get_boolean(self, index: int) -> bool | None:
        return _boolean_of(self.get_value(index))

    # Mutation

    def append_value(self, value: JsonValue | None) -> JsonStatus:
        if not _can_adopt(self._wrapping_value, value):
            return FAILURE
        return self._add(value)

    def append_string(self, text: str | bytes) -> JsonStatus:
        return self.append_value(JsonValue.new_string(text))

    def append_number(self, number: int | float) -> JsonStatus:
        return self.append_value(JsonValue.new_number(number))

    def append_boolean(self, flag: object) -> JsonStatus:
        return self.append_value(JsonValue.new_boolean(flag))

    def append_null(self) -> JsonStatus:
        return self.append_value(JsonValue.new_null())

    def replace_value(self, index: int, value: JsonValue | None) -> JsonStatus:
        """Releases the value at ``index`` and installs ``value`` there."""
        if not 0 <= index < len(self._items):
            return FAILURE
        if not _can_adopt(self._wrapping_value, value):
            return FAILURE
        self._items[index]._detach()
        self._items[index] = value
        value._attach(self._wrapping_value)
        return SUCCESS

    def replace_string(self, index: int, text: str | bytes) -> JsonStatus:
        return self.replace_value(index, JsonValue.new_string(text))

    def replace_number(self, index: int, number: int | float) -> JsonStatus:
        return self.replace_value(index, JsonValue.new_number(number))

    def replace_boolean(self, index: int, flag: object) -> JsonStatus:
        return self.replace_value(index, JsonValue.new_boolean(flag))

    def replace_null(self, index: int) -> JsonStatus:
        return self.replace_value(index, JsonValue.new_null())

    def remove(self, index: int) -> JsonStatus:
        """Releases the value at ``index``; later elements shift left."""
        if not 0 <= index < len(self._items):
            return FAILURE
        self._items.pop(index)._detach()
        return SUCCESS

    def clear(self) -> JsonStatus:
        """Releases every element; capacity is kept."""
        for value in self._items:
            value._detach()
        self._items.clear()
        return SUCCESS

"""Type tag and status enumerations shared by every jtree module."""

from enum import Enum

# Default nesting ceiling for the parser
MAX_NESTING = 1000

# Minimum capacity a container grows to on its first insertion
STARTING_CAPACITY = 16


class JsonValueType(Enum):
    """
    Discriminant for document tree nodes.

    ERROR is never the type of a live node; it is what type queries report
    for a missing value.
    """

    ERROR = -1
    NULL = 1
    STRING = 2
    NUMBER = 3
    OBJECT = 4
    ARRAY = 5
    BOOLEAN = 6


class JsonStatus(Enum):
    """Two-valued result of every mutating operation."""

    SUCCESS = 0
    FAILURE = -1

    def __bool__(self) -> bool:
        return self is JsonStatus.SUCCESS


SUCCESS = JsonStatus.SUCCESS
FAILURE = JsonStatus.FAILURE

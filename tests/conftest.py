"""
Pytest configuration and shared fixtures for jtree tests.

Provides immutable test case records, document fixtures and a converter from
document trees to plain Python objects so results can be compared with other
JSON libraries.
"""

from dataclasses import dataclass
from typing import Any

import pytest

import jtree


@dataclass(frozen=True)
class JsonTestCase:
    """
    Immutable container for JSON test case data.

    Holds test input and expected behavior for consistent test execution.
    """

    description: str
    input_data: str
    should_fail: bool = False
    expected_output: Any = None
    needs_strict: bool = False


def to_python(value: jtree.JsonValue | None) -> Any:
    """Converts a document tree into dicts, lists and scalars."""
    if value is None:
        raise AssertionError("missing value")
    kind = value.get_type()
    if kind is jtree.JsonValueType.OBJECT:
        obj = value.get_object()
        assert obj is not None
        return {name: to_python(member) for name, member in obj.items()}
    if kind is jtree.JsonValueType.ARRAY:
        array = value.get_array()
        assert array is not None
        return [to_python(element) for element in array]
    if kind is jtree.JsonValueType.STRING:
        return value.get_string()
    if kind is jtree.JsonValueType.NUMBER:
        return value.get_number()
    if kind is jtree.JsonValueType.BOOLEAN:
        return value.get_boolean()
    return None


def nested_arrays(depth: int) -> str:
    return "[" * depth + "]" * depth


@pytest.fixture
def json_fail_cases() -> list[JsonTestCase]:
    """
    Provides JSON strings that must fail parsing.

    Based on the json.org JSON_checker suite. Cases that only fail because
    of content after the first complete value carry needs_strict, since
    trailing data is ignored unless ParseConfig(strict=True) is used. The
    string payload and the 19-level nesting cases are valid here and left
    out.
    """
    fail_docs = [
        # https://json.org/JSON_checker/test/fail2.json
        ('["Unclosed array"', False),
        # https://json.org/JSON_checker/test/fail3.json
        ('{unquoted_key: "keys must be quoted"}', False),
        # https://json.org/JSON_checker/test/fail4.json
        ('["extra comma",]', False),
        # https://json.org/JSON_checker/test/fail5.json
        ('["double extra comma",,]', False),
        # https://json.org/JSON_checker/test/fail6.json
        ('[   , "<-- missing value"]', False),
        # https://json.org/JSON_checker/test/fail7.json
        ('["Comma after the close"],', True),
        # https://json.org/JSON_checker/test/fail8.json
        ('["Extra close"]]', True),
        # https://json.org/JSON_checker/test/fail9.json
        ('{"Extra comma": true,}', False),
        # https://json.org/JSON_checker/test/fail10.json
        ('{"Extra value after close": true} "misplaced quoted value"', True),
        # https://json.org/JSON_checker/test/fail11.json
        ('{"Illegal expression": 1 + 2}', False),
        # https://json.org/JSON_checker/test/fail12.json
        ('{"Illegal invocation": alert()}', False),
        # https://json.org/JSON_checker/test/fail13.json
        ('{"Numbers cannot have leading zeroes": 013}', False),
        # https://json.org/JSON_checker/test/fail14.json
        ('{"Numbers cannot be hex": 0x14}', False),
        # https://json.org/JSON_checker/test/fail15.json
        ('["Illegal backslash escape: \\x15"]', False),
        # https://json.org/JSON_checker/test/fail16.json
        ("[\\naked]", False),
        # https://json.org/JSON_checker/test/fail17.json
        ('["Illegal backslash escape: \\017"]', False),
        # https://json.org/JSON_checker/test/fail19.json
        ('{"Missing colon" null}', False),
        # https://json.org/JSON_checker/test/fail20.json
        ('{"Double colon":: null}', False),
        # https://json.org/JSON_checker/test/fail21.json
        ('{"Comma instead of colon", null}', False),
        # https://json.org/JSON_checker/test/fail22.json
        ('["Colon instead of comma": false]', False),
        # https://json.org/JSON_checker/test/fail23.json
        ('["Bad value", truth]', False),
        # https://json.org/JSON_checker/test/fail24.json
        ("['single quote']", False),
        # https://json.org/JSON_checker/test/fail25.json
        ('["\ttab\tcharacter\tin\tstring\t"]', False),
        # https://json.org/JSON_checker/test/fail26.json
        ('["tab\\   character\\   in\\  string\\  "]', False),
        # https://json.org/JSON_checker/test/fail27.json
        ('["line\nbreak"]', False),
        # https://json.org/JSON_checker/test/fail28.json
        ('["line\\\nbreak"]', False),
        # https://json.org/JSON_checker/test/fail29.json
        ("[0e]", False),
        # https://json.org/JSON_checker/test/fail30.json
        ("[0e+]", False),
        # https://json.org/JSON_checker/test/fail31.json
        ("[0e+-1]", False),
        # https://json.org/JSON_checker/test/fail32.json
        ('{"Comma instead if closing brace": true,', False),
        # https://json.org/JSON_checker/test/fail33.json
        ('["mismatch"}', False),
        # https://code.google.com/archive/p/simplejson/issues/3
        ('["A\u001fZ control characters in string"]', False),
    ]

    return [
        JsonTestCase(
            description=f"fail case {idx}",
            input_data=doc,
            should_fail=True,
            needs_strict=needs_strict,
        )
        for idx, (doc, needs_strict) in enumerate(fail_docs)
    ]


@pytest.fixture
def json_pass_cases() -> list[JsonTestCase]:
    """
    Provides JSON strings that must parse successfully.

    These test cases validate standards compliance for valid JSON structures.
    """
    return [
        JsonTestCase(
            description="pass1.json - complex nested structure",
            input_data="""[
    "JSON Test Pattern pass1",
    {"object with 1 member":["array with 1 element"]},
    {},
    [],
    -42,
    true,
    false,
    null,
    {
        "integer": 1234567890,
        "real": -9876.543210,
        "e": 0.123456789e-12,
        "E": 1.234567890E+34,
        "":  23456789012E66,
        "zero": 0,
        "one": 1,
        "space": " ",
        "quote": "\\"",
        "backslash": "\\\\",
        "controls": "\\b\\f\\n\\r\\t",
        "slash": "/ & \\/",
        "alpha": "abcdefghijklmnopqrstuvwyz",
        "ALPHA": "ABCDEFGHIJKLMNOPQRSTUVWYZ",
        "digit": "0123456789",
        "0123456789": "digit",
        "special": "`1~!@#$%^&*()_+-={':[,]}|;.</>?",
        "hex": "\\u0123\\u4567\\u89AB\\uCDEF\\uabcd\\uef4A",
        "true": true,
        "false": false,
        "null": null,
        "array":[  ],
        "object":{  },
        "address": "50 St. James Street",
        "url": "https://www.JSON.org/",
        "comment": "// /* <!-- --",
        "# -- --> */": " ",
        " s p a c e d " :[1,2 , 3

,

4 , 5        ,          6           ,7        ],"compact":[1,2,3,4,5,6,7],
        "jsontext": "{\\"object with 1 member\\":[\\"array with 1 element\\"]}"
    }
]""",
        ),
        JsonTestCase(
            description="pass2.json - deep nesting",
            input_data='[[[[[[[[[[[[[[[[[[["Not too deep"]]]]]]]]]]]]]]]]]]]',
        ),
        JsonTestCase(
            description="pass3.json - simple object",
            input_data='{"JSON Test Pattern pass3": {"The outermost value": "must be an object or array.", "In this test": "It is an object."}}',
        ),
        JsonTestCase(
            description="string payload",
            input_data='"A JSON payload should be an object or array, not a string."',
        ),
    ]


@pytest.fixture
def basic_json_values() -> list[JsonTestCase]:
    """
    Provides basic JSON value test cases for fundamental parsing.

    Covers all JSON primitive types and basic container structures.
    """
    return [
        JsonTestCase("null value", "null", False, None),
        JsonTestCase("true boolean", "true", False, True),
        JsonTestCase("false boolean", "false", False, False),
        JsonTestCase("integer", "42", False, 42.0),
        JsonTestCase("negative integer", "-17", False, -17.0),
        JsonTestCase("float", "3.14", False, 3.14),
        JsonTestCase("zero", "0", False, 0.0),
        JsonTestCase("negative zero", "-0", False, 0.0),
        JsonTestCase("half", "0.5", False, 0.5),
        JsonTestCase("negative half", "-0.5", False, -0.5),
        JsonTestCase("empty string", '""', False, ""),
        JsonTestCase("simple string", '"hello"', False, "hello"),
        JsonTestCase("empty array", "[]", False, []),
        JsonTestCase("empty object", "{}", False, {}),
        JsonTestCase("simple array", "[1, 2, 3]", False, [1.0, 2.0, 3.0]),
        JsonTestCase(
            "simple object", '{"key": "value"}', False, {"key": "value"}
        ),
    ]


@pytest.fixture
def sample_document() -> jtree.JsonValue:
    """A small parsed document used by tree, path and copy tests."""
    value = jtree.loads(
        """
        {
            "name": "jtree",
            "version": 1.5,
            "stable": true,
            "license": null,
            "tags": ["json", "codec"],
            "owner": {"login": "octo", "id": 7}
        }
        """
    )
    return value

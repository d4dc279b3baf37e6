"""
Test data generators for jtree benchmarks.

Every generator returns JSON text built with the standard library encoder
from a seeded random source, so runs are comparable across libraries and
across sessions.
"""

import json
import random
import string
from collections.abc import Callable
from typing import Any

_SEED = 20240115
_ESCAPE_PROBABILITY = 0.3
_ESCAPES = ['"', "\\", "/", "\b", "\f", "\n", "\r", "\t"]


def generate_test_data(data_type: str) -> str:
    """Generates JSON test data based on specified type."""
    if data_type not in GENERATORS:
        raise ValueError(f"Unknown data type: {data_type}")
    return GENERATORS[data_type](random.Random(_SEED))


def generate_commented_data(data_type: str) -> str:
    """Pretty-printed test data with a comment before every line."""
    data = json.loads(generate_test_data(data_type))
    lines = json.dumps(data, indent=4).splitlines()
    return "".join(
        f"/* line {i} */ {line} // end\n" for i, line in enumerate(lines)
    )


def _word(rng: random.Random, length: int) -> str:
    return "".join(rng.choices(string.ascii_letters, k=length))


def _timestamp(rng: random.Random) -> str:
    return (
        f"2024-{rng.randint(1, 12):02d}-{rng.randint(1, 28):02d}"
        f"T{rng.randint(0, 23):02d}:{rng.randint(0, 59):02d}:00Z"
    )


def _small_object(rng: random.Random) -> str:
    """A config-sized object (< 1KB)."""
    return json.dumps(
        {
            "id": 12345,
            "name": "Alice Johnson",
            "email": "alice@example.com",
            "active": True,
            "balance": 1234.56,
            "metadata": {"created": _timestamp(rng), "source": "api"},
        }
    )


def _large_object(rng: random.Random) -> str:
    """A profile with transaction and activity history (> 10KB)."""
    return json.dumps(
        {
            "user_id": rng.randint(1000000, 9999999),
            "profile": {
                "first_name": _word(rng, 10),
                "last_name": _word(rng, 12),
                "address": {
                    "street": f"{rng.randint(1, 9999)} {_word(rng, 8)} St",
                    "city": _word(rng, 12),
                    "zip": f"{rng.randint(10000, 99999)}",
                },
                "notifications": {
                    "email": rng.choice([True, False]),
                    "push": rng.choice([True, False]),
                },
            },
            "transactions": [
                {
                    "id": f"txn_{i:06d}",
                    "amount": round(rng.uniform(1.0, 1000.0), 2),
                    "currency": rng.choice(["USD", "EUR", "GBP", "JPY"]),
                    "timestamp": _timestamp(rng),
                    "status": rng.choice(["completed", "pending", "failed"]),
                }
                for i in range(50)
            ],
            "activity_log": [
                {
                    "timestamp": _timestamp(rng),
                    "action": rng.choice(["login", "logout", "purchase"]),
                    "ip_address": ".".join(
                        str(rng.randint(1, 255)) for _ in range(4)
                    ),
                }
                for _ in range(30)
            ],
        }
    )


def _mixed_array(rng: random.Random) -> str:
    """An array of 200 scalars and small objects."""
    makers: list[Callable[[int], Any]] = [
        lambda i: rng.randint(-1000, 1000),
        lambda i: round(rng.uniform(-100.0, 100.0), 3),
        lambda i: _word(rng, rng.randint(5, 30)),
        lambda i: rng.choice([True, False]),
        lambda i: None,
        lambda i: {"index": i, "score": round(rng.uniform(0, 100), 2)},
    ]
    return json.dumps([rng.choice(makers)(i) for i in range(200)])


def _nested_structure(rng: random.Random) -> str:
    """A tree eight levels deep with a fan-out of four."""

    def node(depth: int) -> dict[str, Any]:
        if depth <= 0:
            return {"value": _word(rng, 10)}
        return {
            "level": depth,
            "items": [node(depth - 1) for _ in range(3)],
            "nested": node(depth - 1),
        }

    return json.dumps(node(8))


def _string_heavy(rng: random.Random) -> str:
    """Strings dense with escapes and non-ASCII text."""

    def escaped() -> str:
        return "".join(
            rng.choice(_ESCAPES)
            if rng.random() < _ESCAPE_PROBABILITY
            else rng.choice(string.ascii_letters + " ")
            for _ in range(50)
        )

    return json.dumps(
        {
            "strings": [escaped() for _ in range(100)],
            "unicode": ["café 中文 \U0001f600" for _ in range(50)],
            "paths": {
                f"key_{i}": f"C:\\Users\\{_word(rng, 8)}\\file_{i}.txt"
                for i in range(20)
            },
        }
    )


def _deep_nesting(rng: random.Random) -> str:
    """Arrays nested 500 levels deep."""
    depth = 500
    return "[" * (depth - 1) + f"[{rng.randint(0, 9)}]" + "]" * (depth - 1)


GENERATORS: dict[str, Callable[[random.Random], str]] = {
    "small_object": _small_object,
    "large_object": _large_object,
    "mixed_array": _mixed_array,
    "nested_structure": _nested_structure,
    "string_heavy": _string_heavy,
    "deep_nesting": _deep_nesting,
}

DATA_TYPES = list(GENERATORS)

"""Quickstart example for arbitraryext.

This example turns raw fuzzer bytes into structured values: a dataclass
with per-field strategies, a recursive expression type, and collection
types derived from annotations.

Note: Examples catch ArbitraryError where a fuzz target would simply
return early. In a real harness, an exhausted or over-recursive input is
not a bug; discard the input and move on.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Annotated

from arbitraryext import (
    ArbitraryError,
    Custom,
    Default,
    GenerationMode,
    arbitrary,
    arbitrary_field,
    derive,
    generate,
)
from arbitraryext.core import Cursor
from arbitraryext.primitives import arbitrary_int

# Example 1: Per-field strategies
print("=" * 50)
print("Example 1: Per-Field Strategies")
print("=" * 50)


def x_in_range(cursor: Cursor) -> int:
    return cursor.int_in_range(0, 100)


@arbitrary
@dataclass
class Point:
    x: int = arbitrary_field(Custom(x_in_range))
    y: int = arbitrary_field(Default(), default=0)
    z: Annotated[int, arbitrary_int(32)] = 0


point = Point.from_bytes(bytes([0x54, 0xEE, 0x85, 0x1C]))
print(point)
# Output: Point(x=84, y=0, z=1869294)

# Example 2: Recursive types
print("\n" + "=" * 50)
print("Example 2: Recursive Types")
print("=" * 50)


class Op(enum.Enum):
    ADD = "+"
    MUL = "*"


@dataclass(frozen=True)
class BinOp:
    op: Op
    left: Expr
    right: Expr


@dataclass(frozen=True)
class Lit:
    value: Annotated[int, arbitrary_int(8, signed=False)]


type Expr = BinOp | Lit


def render(expr: Expr) -> str:
    match expr:
        case Lit(value):
            return str(value)
        case BinOp(op, left, right):
            return f"({render(left)} {op.value} {render(right)})"
    raise TypeError(expr)


for seed in (b"\xff\xff\xff\xff\x07", bytes(range(64)), b""):
    try:
        print(f"{seed[:8]!r:>40} -> {render(generate(Expr, seed))}")
    except ArbitraryError as e:
        print(f"{seed[:8]!r:>40} -> {type(e).__name__}: {e}")
# The empty buffer would recurse forever into BinOp; the guard stops it
# with RecursionLimitExceededError.

# Example 3: Collections and consume-remaining mode
print("\n" + "=" * 50)
print("Example 3: Collections and Consume-Remaining Mode")
print("=" * 50)

data = bytes(range(1, 40))
inventory = derive(dict[str, list[bool]])

print("bounded:          ", generate(inventory, data))
print("consume remaining:", generate(inventory, data, mode=GenerationMode.CONSUME_REMAINING))

# Example 4: Debug logging
print("\n" + "=" * 50)
print("Example 4: Debug Logging")
print("=" * 50)

logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")
generate(tuple[bool, bool], b"\x01\x00 unused tail")
# Output: arbitraryext.derive: ... left 12 of 14 input bytes unused

print("\n" + "=" * 50)
print("All examples completed successfully!")
print("=" * 50)

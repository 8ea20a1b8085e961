"""Generation contract fuzzer.

For any input buffer, a generation attempt either returns a value or raises
exactly one of InputExhaustedError, RecursionLimitExceededError or
IncorrectUsageError (never anything else), is repeatable, and leaves the
attempt's recursion counters at zero.

The grammar below is deliberately recursive through unions, options and
collections so that exhausted input reaches the recursion guard by several
paths.

Run with:
    pytest tests/fuzz/test_generation_contract.py -m fuzz -v

Python 3.13+.
"""

from __future__ import annotations

from dataclasses import dataclass

import pytest
from hypothesis import event, given, settings
from hypothesis import strategies as st

from arbitraryext import ArbitraryError, IncorrectUsageError, derive
from arbitraryext.core import Cursor
from tests.strategies import fuzz_buffers

# Mark entire module as fuzz tests
pytestmark = pytest.mark.fuzz


@dataclass(frozen=True)
class Call:
    name: str
    args: list[Expr]


@dataclass(frozen=True)
class Block:
    body: tuple[Expr, ...]
    result: Expr | None


@dataclass(frozen=True)
class Num:
    value: int


@dataclass(frozen=True)
class Text:
    value: str


# Recursive variants first: exhausted input always selects Call.
Expr = Call | Block | Num | Text


def _depth(value: object) -> int:
    match value:
        case Call(args=args):
            return 1 + max((_depth(a) for a in args), default=0)
        case Block(body=body, result=result):
            return 1 + max((_depth(e) for e in (*body, result)), default=0)
        case _:
            return 0


def _attempt(data: bytes, *, rest: bool) -> tuple[object, int, bool]:
    cursor = Cursor(data)
    ctor = derive(Expr)
    try:
        value: object = ctor.take_rest(cursor) if rest else ctor(cursor)
    except ArbitraryError as e:
        assert not isinstance(e, IncorrectUsageError), e
        value = (e.category, str(e))
    return value, cursor.pos, cursor.context.is_clear()


class TestGenerationContract:
    """Failure contract over a recursive grammar."""

    @given(data=fuzz_buffers(max_size=160), rest=st.booleans())
    @settings(max_examples=1000, deadline=None)
    def test_value_or_typed_error(self, data: bytes, rest: bool) -> None:
        """Only exhaustion or recursion failures occur; counters end at zero."""
        value, pos, clear = _attempt(data, rest=rest)
        assert clear
        assert 0 <= pos <= len(data)
        if isinstance(value, tuple):
            event(f"outcome={value[0]}")
        else:
            event(f"depth={min(_depth(value), 4)}")

    @given(data=fuzz_buffers(max_size=160), rest=st.booleans())
    @settings(max_examples=500, deadline=None)
    def test_repeatable(self, data: bytes, rest: bool) -> None:
        """Identical bytes give identical values and offsets."""
        assert _attempt(data, rest=rest) == _attempt(data, rest=rest)

    @given(data=st.binary(max_size=3))
    @settings(max_examples=200, deadline=None)
    def test_short_inputs_never_hang(self, data: bytes) -> None:
        """Near-empty inputs terminate (guard or exhaustion) quickly."""
        value, _, clear = _attempt(data, rest=False)
        assert clear
        event(f"short_outcome={value[0] if isinstance(value, tuple) else 'ok'}")

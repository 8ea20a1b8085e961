"""Constructors for scalar values: integers, booleans, floats, bytes, text.

Fixed-width values (ints, bools, floats) are decoded from a zero-padded
little-endian read, so they never fail: on exhausted input they decode as
zero. Variable-length values (bytes, str) take their size from
Cursor.arbitrary_byte_size() in bounded mode and everything that remains in
consume-remaining mode.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

import struct
from typing import TYPE_CHECKING

from arbitraryext.constants import INT_WIDTHS
from arbitraryext.constructor import Constructor
from arbitraryext.diagnostics import ErrorTemplate, IncorrectUsageError

if TYPE_CHECKING:
    from arbitraryext.core.cursor import Cursor

__all__ = [
    "arbitrary_bool",
    "arbitrary_bytes",
    "arbitrary_float",
    "arbitrary_int",
    "arbitrary_int_in_range",
    "arbitrary_str",
]

_FLOAT_FORMATS = {32: "<f", 64: "<d"}


def arbitrary_int(bits: int = 64, *, signed: bool = True) -> Constructor[int]:
    """Constructor for a fixed-width integer.

    Args:
        bits: Width in bits (8, 16, 32, 64, or 128)
        signed: Two's-complement signed when True

    Raises:
        IncorrectUsageError: If ``bits`` is not a supported width
    """
    if bits not in INT_WIDTHS:
        raise IncorrectUsageError(ErrorTemplate.invalid_width(bits))
    size = bits // 8

    def build(cursor: Cursor) -> int:
        return int.from_bytes(cursor.fill_buffer(size), "little", signed=signed)

    prefix = "i" if signed else "u"
    return Constructor(build, name=f"{prefix}{bits}")


def arbitrary_int_in_range(lo: int, hi: int) -> Constructor[int]:
    """Constructor drawing uniformly from ``lo..=hi`` via Cursor.int_in_range()."""
    return Constructor(lambda cursor: cursor.int_in_range(lo, hi), name=f"int[{lo}..={hi}]")


def _build_bool(cursor: Cursor) -> bool:
    return cursor.fill_buffer(1)[0] & 1 == 1


arbitrary_bool: Constructor[bool] = Constructor(_build_bool, name="bool")


def arbitrary_float(bits: int = 64) -> Constructor[float]:
    """Constructor for an IEEE 754 float of ``bits`` width (32 or 64).

    Every bit pattern is reachable, including NaNs and infinities.

    Raises:
        IncorrectUsageError: If ``bits`` is not 32 or 64
    """
    fmt = _FLOAT_FORMATS.get(bits)
    if fmt is None:
        raise IncorrectUsageError(ErrorTemplate.invalid_width(bits))
    size = bits // 8

    def build(cursor: Cursor) -> float:
        (value,) = struct.unpack(fmt, cursor.fill_buffer(size))
        return value

    return Constructor(build, name=f"f{bits}")


def _build_bytes(cursor: Cursor) -> bytes:
    return cursor.read_bytes(cursor.arbitrary_byte_size())


def _build_bytes_rest(cursor: Cursor) -> bytes:
    return cursor.take_rest()


arbitrary_bytes: Constructor[bytes] = Constructor(
    _build_bytes, _build_bytes_rest, name="bytes"
)


def _valid_utf8_prefix(raw: bytes) -> tuple[str, int]:
    """Decode the longest valid UTF-8 prefix of ``raw``.

    Returns:
        (text, number of bytes the text occupies in ``raw``)
    """
    try:
        return raw.decode("utf-8"), len(raw)
    except UnicodeDecodeError as e:
        return raw[: e.start].decode("utf-8"), e.start


def _build_str(cursor: Cursor) -> str:
    size = cursor.arbitrary_byte_size()
    text, valid = _valid_utf8_prefix(cursor.peek_bytes(size) or b"")
    # Only the valid prefix is consumed; the rest stays available.
    cursor.read_bytes(valid)
    return text


def _build_str_rest(cursor: Cursor) -> str:
    text, _ = _valid_utf8_prefix(cursor.take_rest())
    return text


arbitrary_str: Constructor[str] = Constructor(_build_str, _build_str_rest, name="str")

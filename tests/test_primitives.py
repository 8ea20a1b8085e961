"""Tests for primitives.py: integers, booleans, floats, bytes, text.

Python 3.13+.
"""

import math
import struct

import pytest
from hypothesis import given
from hypothesis import strategies as st

from arbitraryext.core import Cursor
from arbitraryext.diagnostics import DiagnosticCode, IncorrectUsageError, InputExhaustedError
from arbitraryext.primitives import (
    arbitrary_bool,
    arbitrary_bytes,
    arbitrary_float,
    arbitrary_int,
    arbitrary_int_in_range,
    arbitrary_str,
)


class TestIntegers:
    """Little-endian two's-complement decoding."""

    def test_u8(self) -> None:
        """One byte, unsigned."""
        assert arbitrary_int(8, signed=False)(Cursor(b"\xff")) == 255

    def test_i8(self) -> None:
        """One byte, signed."""
        assert arbitrary_int(8)(Cursor(b"\xff")) == -1

    def test_u32_little_endian(self) -> None:
        """Least significant byte first."""
        assert arbitrary_int(32, signed=False)(Cursor(b"\x01\x02\x03\x04")) == 0x04030201

    def test_i64_default(self) -> None:
        """The default width is signed 64-bit."""
        ctor = arbitrary_int()
        assert ctor.name == "i64"
        assert ctor(Cursor(b"\x00" * 7 + b"\x80")) == -(2**63)

    def test_u128(self) -> None:
        """128-bit values use sixteen bytes."""
        cursor = Cursor(b"\xff" * 17)
        assert arbitrary_int(128, signed=False)(cursor) == 2**128 - 1
        assert len(cursor) == 1

    def test_exhausted_reads_zero(self) -> None:
        """Fixed-width integers never fail; missing bytes are zero."""
        assert arbitrary_int(32)(Cursor(b"")) == 0
        assert arbitrary_int(16, signed=False)(Cursor(b"\x07")) == 7

    @pytest.mark.parametrize("bits", [0, 7, 12, 256])
    def test_invalid_width(self, bits: int) -> None:
        """Only 8/16/32/64/128 are accepted."""
        with pytest.raises(IncorrectUsageError) as exc_info:
            arbitrary_int(bits)

        assert exc_info.value.diagnostic is not None
        assert exc_info.value.diagnostic.code == DiagnosticCode.INVALID_WIDTH

    @given(st.binary(min_size=8, max_size=8))
    def test_i64_matches_struct(self, data: bytes) -> None:
        """Decoding agrees with struct's little-endian q format."""
        assert arbitrary_int(64)(Cursor(data)) == struct.unpack("<q", data)[0]

    def test_int_in_range(self) -> None:
        """Ranged integers go through Cursor.int_in_range()."""
        ctor = arbitrary_int_in_range(10, 20)
        assert ctor(Cursor(b"\x0c")) == 11
        with pytest.raises(InputExhaustedError):
            ctor(Cursor(b""))


class TestBool:
    """Low bit of one byte."""

    @pytest.mark.parametrize(("byte", "expected"), [(0, False), (1, True), (2, False), (0xFF, True)])
    def test_low_bit(self, byte: int, expected: bool) -> None:
        """Only bit 0 matters."""
        assert arbitrary_bool(Cursor(bytes([byte]))) is expected

    def test_exhausted_is_false(self) -> None:
        """No bytes decode as False."""
        assert arbitrary_bool(Cursor(b"")) is False


class TestFloat:
    """Raw IEEE 754 bits."""

    def test_f64_bits(self) -> None:
        """Eight little-endian bytes reinterpret as a double."""
        assert arbitrary_float()(Cursor(struct.pack("<d", 1.5))) == 1.5

    def test_f32_bits(self) -> None:
        """Four little-endian bytes reinterpret as a single."""
        assert arbitrary_float(32)(Cursor(struct.pack("<f", -2.0))) == -2.0

    def test_nan_reachable(self) -> None:
        """Every bit pattern is produced, NaN included."""
        assert math.isnan(arbitrary_float()(Cursor(b"\xff" * 8)))

    def test_exhausted_is_zero(self) -> None:
        """No bytes decode as 0.0."""
        assert arbitrary_float()(Cursor(b"")) == 0.0

    def test_invalid_width(self) -> None:
        """Only 32 and 64 bits are supported."""
        with pytest.raises(IncorrectUsageError):
            arbitrary_float(16)


class TestBytes:
    """Size from the back, payload from the front."""

    def test_bounded(self) -> None:
        """A one-byte trailing prefix selects the payload size."""
        cursor = Cursor(b"hello\x03")
        assert arbitrary_bytes(cursor) == b"hel"
        assert len(cursor) == 2

    def test_empty_input(self) -> None:
        """Empty input builds empty bytes without failing."""
        assert arbitrary_bytes(Cursor(b"")) == b""

    @given(st.binary(max_size=300))
    def test_payload_is_input_prefix(self, data: bytes) -> None:
        """Bounded bytes are always a prefix of the input."""
        assert data.startswith(arbitrary_bytes(Cursor(data)))


class TestStr:
    """Longest valid UTF-8 prefix."""

    def test_ascii(self) -> None:
        """Valid text of the drawn size."""
        assert arbitrary_str(Cursor(b"abc\x02")) == "ab"

    def test_invalid_tail_dropped(self) -> None:
        """Decoding stops at the first invalid byte; only valid bytes are consumed."""
        cursor = Cursor(b"a\xffbc\x03")
        assert arbitrary_str(cursor) == "a"
        assert cursor.pos == 1

    def test_truncated_multibyte(self) -> None:
        """A multi-byte sequence cut by the size is dropped."""
        data = "é".encode() + b"\x01"
        assert arbitrary_str(Cursor(data)) == ""

    @given(st.binary(max_size=300))
    def test_always_valid_text(self, data: bytes) -> None:
        """Any input yields a str that re-encodes to an input prefix."""
        text = arbitrary_str(Cursor(data))
        assert data.startswith(text.encode())

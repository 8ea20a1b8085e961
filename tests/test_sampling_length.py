"""Tests for sampling.arbitrary_len(): the five-tier length distribution.

Engineered buffers force each tier; a seeded 100,000-buffer sweep checks
the overall bias toward short collections.

Python 3.13+.
"""

import random

import pytest
from hypothesis import given

from arbitraryext.constants import LENGTH_TIER_DRAW_MAX, LENGTH_TIERS
from arbitraryext.core import Cursor
from arbitraryext.diagnostics import InputExhaustedError
from arbitraryext.sampling import arbitrary_len
from tests.strategies import LengthTierCase, length_tier_buffers


class TestTierTable:
    """The tier table is contiguous and covers the whole outer draw."""

    def test_outer_ranges_contiguous(self) -> None:
        """Outer ranges tile 0..=1000 without gaps or overlap."""
        expected_lo = 0
        for outer_lo, outer_hi, _, _ in LENGTH_TIERS:
            assert outer_lo == expected_lo
            expected_lo = outer_hi + 1
        assert expected_lo == LENGTH_TIER_DRAW_MAX + 1

    def test_literal_table(self) -> None:
        """Tier boundaries are part of the corpus compatibility contract."""
        assert LENGTH_TIERS == (
            (0, 900, 0, 5),
            (901, 950, 6, 20),
            (951, 990, 21, 50),
            (991, 999, 51, 100),
            (1000, 1000, 101, 1000),
        )


class TestEngineeredBuffers:
    """Specific buffers land in specific tiers."""

    @pytest.mark.parametrize(
        ("data", "expected"),
        [
            (b"\x00\x00\x00", 0),
            (b"\x00\x00\x05", 5),
            (b"\x00\x00\x06", 0),
            (b"\x03\x84\x07", 1),  # n = 900: still tier one
            (b"\x03\x85\x00", 6),  # n = 901
            (b"\x03\x85\x0e", 20),
            (b"\x03\xb7\x00", 21),  # n = 951
            (b"\x03\xdf\x00", 51),  # n = 991
            (b"\x03\xe8\x00\x00", 101),  # n = 1000
            (b"\x03\xe8\x03\x83", 1000),  # 899 + 101
        ],
    )
    def test_exact_length(self, data: bytes, expected: int) -> None:
        """Outer draw picks the tier, the next bytes pick the length."""
        cursor = Cursor(data)
        assert arbitrary_len(cursor) == expected
        assert cursor.is_empty()

    def test_outer_draw_wraps_modulo(self) -> None:
        """Outer values above 1000 wrap modulo 1001."""
        # 0x03E9 = 1001 -> 0
        assert arbitrary_len(Cursor(b"\x03\xe9\x02")) == 2

    @given(case=length_tier_buffers())
    def test_tier_respected(self, case: LengthTierCase) -> None:
        """Every engineered buffer yields a length inside its tier."""
        assert case.len_lo <= arbitrary_len(Cursor(case.data)) <= case.len_hi

    def test_empty_buffer_exhausted(self) -> None:
        """No bytes: the outer draw cannot be made."""
        with pytest.raises(InputExhaustedError):
            arbitrary_len(Cursor(b""))

    def test_outer_draw_without_sub_draw(self) -> None:
        """Two bytes pick a tier but leave nothing for the length."""
        with pytest.raises(InputExhaustedError):
            arbitrary_len(Cursor(b"\x00\x00"))


class TestDistribution:
    """Overall bias toward small collections."""

    def test_short_lengths_dominate(self) -> None:
        """About 90% of random buffers give a length in 0..=5."""
        rng = random.Random(0xA5B1)
        total = 100_000
        short = 0
        for _ in range(total):
            length = arbitrary_len(Cursor(rng.randbytes(4)))
            assert 0 <= length <= 1000
            if length <= 5:
                short += 1
        assert short / total >= 0.85

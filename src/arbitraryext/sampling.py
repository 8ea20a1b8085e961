"""Length sampling and unbiased variant selection.

Two decoding primitives every builder depends on:

- arbitrary_len: tiered, size-biased collection length (90% in 0..=5)
- choose_index: multiply-shift mapping of one 32-bit draw onto N buckets

Both are part of the corpus compatibility contract: draw order, widths, and
tier boundaries must not change.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from arbitraryext.constants import (
    LENGTH_TIER_DRAW_MAX,
    LENGTH_TIERS,
    VARIANT_DRAW_BITS,
    VARIANT_DRAW_BYTES,
)
from arbitraryext.diagnostics import ErrorTemplate, IncorrectUsageError

if TYPE_CHECKING:
    from collections.abc import Sequence

    from arbitraryext.core.cursor import Cursor

__all__ = ["arbitrary_len", "bucket_index", "choose", "choose_index"]


def arbitrary_len(cursor: Cursor) -> int:
    """Draw a collection length biased toward small sizes.

    Outer draw over 0..=1000 picks a tier; a second draw picks the length
    uniformly inside it (see constants.LENGTH_TIERS).

    Raises:
        InputExhaustedError: If the cursor is empty
    """
    n = cursor.int_in_range(0, LENGTH_TIER_DRAW_MAX)
    len_lo, len_hi = next(
        (len_lo, len_hi)
        for outer_lo, outer_hi, len_lo, len_hi in LENGTH_TIERS
        if outer_lo <= n <= outer_hi
    )
    return cursor.int_in_range(len_lo, len_hi)


def bucket_index(raw: int, count: int) -> int:
    """Map an unsigned 32-bit ``raw`` onto ``0..count`` without modulo bias.

    ``(raw * count) >> 32`` spreads the 2**32 raw values into runs whose
    sizes differ by at most one, so no bucket is favored.

    Example:
        >>> bucket_index(0, 7)
        0
        >>> bucket_index(2**32 - 1, 7)
        6
    """
    return (raw * count) >> VARIANT_DRAW_BITS


def choose_index(cursor: Cursor, count: int) -> int:
    """Select one of ``count`` variants using exactly one 32-bit draw.

    The draw is little-endian and zero-padded when short, so selection never
    fails on exhausted input: it resolves to index 0.

    Raises:
        IncorrectUsageError: If count < 1
    """
    if count < 1:
        raise IncorrectUsageError(ErrorTemplate.no_choices())
    raw = int.from_bytes(cursor.fill_buffer(VARIANT_DRAW_BYTES), "little")
    return bucket_index(raw, count)


def choose[T](cursor: Cursor, choices: Sequence[T]) -> T:
    """Return one element of ``choices`` selected by choose_index()."""
    return choices[choose_index(cursor, len(choices))]

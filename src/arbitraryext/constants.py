"""Shared constants for arbitraryext.

This module provides the fixed decoding contracts used across the sampling,
builder, and derive layers. Placing constants here avoids circular imports
and provides a single source of truth.

Constants are grouped by domain:
- Length sampling: Tiered, size-biased collection lengths
- Presence sampling: Optional-slot absence ratio
- Variant selection: Multiply-shift draw width
- Integer widths: Fixed-width integer constructors

Every value below is part of the byte-consumption contract. Changing any of
them changes which value a saved corpus entry decodes to.

Python 3.13+. Zero external dependencies.
"""

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Length sampling
    "LENGTH_TIER_DRAW_MAX",
    "LENGTH_TIERS",
    # Presence sampling
    "ABSENCE_NUMERATOR",
    "ABSENCE_DENOMINATOR",
    # Variant selection
    "VARIANT_DRAW_BITS",
    "VARIANT_DRAW_BYTES",
    # Integer widths
    "INT_WIDTHS",
    "DEFAULT_INT_BITS",
    "DEFAULT_FLOAT_BITS",
]

# ============================================================================
# LENGTH SAMPLING
# ============================================================================
#
# Collection lengths are drawn in two steps: an outer draw over
# 0..=LENGTH_TIER_DRAW_MAX selects a tier, then a second draw picks the length
# uniformly inside that tier's sub-range.
#
#   outer draw   length      probability
#   0..=900      0..=5       90%
#   901..=950    6..=20      5%
#   951..=990    21..=50     4%
#   991..=999    51..=100    0.9%
#   1000         101..=1000  0.1%
#
# ============================================================================

# Inclusive upper bound of the outer tier draw.
LENGTH_TIER_DRAW_MAX: int = 1000

# (outer_lo, outer_hi, length_lo, length_hi), all bounds inclusive.
LENGTH_TIERS: tuple[tuple[int, int, int, int], ...] = (
    (0, 900, 0, 5),
    (901, 950, 6, 20),
    (951, 990, 21, 50),
    (991, 999, 51, 100),
    (1000, 1000, 101, 1000),
)

# ============================================================================
# PRESENCE SAMPLING
# ============================================================================

# ratio(1, 5) == True means the optional slot is absent (1 in 5 on average).
# Argument order is significant: ratio() draws int_in_range(1, denominator).
ABSENCE_NUMERATOR: int = 1
ABSENCE_DENOMINATOR: int = 5

# ============================================================================
# VARIANT SELECTION
# ============================================================================

# Variant index = (raw * count) >> VARIANT_DRAW_BITS, raw an unsigned draw of
# this width. Exactly VARIANT_DRAW_BYTES are consumed per selection.
VARIANT_DRAW_BITS: int = 32
VARIANT_DRAW_BYTES: int = VARIANT_DRAW_BITS // 8

# ============================================================================
# INTEGER WIDTHS
# ============================================================================

# Widths accepted by primitives.arbitrary_int().
INT_WIDTHS: frozenset[int] = frozenset({8, 16, 32, 64, 128})

# Width used when deriving a constructor for a plain ``int`` annotation.
DEFAULT_INT_BITS: int = 64

# Width used when deriving a constructor for a plain ``float`` annotation.
DEFAULT_FLOAT_BITS: int = 64

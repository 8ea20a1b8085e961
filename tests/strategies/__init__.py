"""Hypothesis strategies for arbitraryext property-based testing.

Strategies are organized by domain:

- buffers: raw fuzzer inputs, engineered length-tier buffers, 32-bit draws

Usage:
    from tests.strategies import fuzz_buffers, length_tier_buffers

Event-Emitting Strategies (HypoFuzz-Optimized):
    These strategies emit hypothesis.event() calls for coverage-guided fuzzing:
    - fuzz_buffers, length_tier_buffers, variant_counts
"""

from .buffers import (
    LengthTierCase,
    fuzz_buffers,
    length_tier_buffers,
    u32_draws,
    variant_counts,
)

__all__ = [
    "LengthTierCase",
    "fuzz_buffers",
    "length_tier_buffers",
    "u32_draws",
    "variant_counts",
]

"""Hypothesis strategies for raw input buffers.

Event-Emitting Strategies (HypoFuzz-Optimized):
    - buf_size: Buffer size classification (empty|tiny|small|large)
    - buf_tier: Length tier forced by an engineered buffer
    - variant_count: Candidate count classification (one|few|many)
"""

from __future__ import annotations

from dataclasses import dataclass

from hypothesis import event
from hypothesis import strategies as st

from arbitraryext.constants import LENGTH_TIERS


@st.composite
def fuzz_buffers(draw: st.DrawFn, max_size: int = 512) -> bytes:
    """Generate a fuzzer-style input buffer.

    Bucket-first so empty and tiny buffers (where exhaustion and recursion
    guards fire) are as common as large ones.

    Events emitted:
    - buf_size={empty|tiny|small|large}
    """
    label = draw(st.sampled_from(["empty", "tiny", "small", "large"]))
    match label:
        case "empty":
            data = b""
        case "tiny":
            data = draw(st.binary(min_size=1, max_size=8))
        case "small":
            data = draw(st.binary(min_size=9, max_size=64))
        case _:  # large
            data = draw(st.binary(min_size=65, max_size=max(65, max_size)))
    event(f"buf_size={label}")
    return data


@dataclass(frozen=True, slots=True)
class LengthTierCase:
    """Buffer forcing arbitrary_len() into one tier.

    Attributes:
        data: Engineered buffer (outer draw, then sub-range bytes)
        len_lo: Smallest length of the tier
        len_hi: Largest length of the tier
    """

    data: bytes
    len_lo: int
    len_hi: int


@st.composite
def length_tier_buffers(draw: st.DrawFn) -> LengthTierCase:
    """Generate a buffer whose outer length draw lands in a chosen tier.

    The outer draw covers 0..=1000, so it reads exactly two big-endian bytes
    and any value 0..=1000 maps to itself. The sub-range draw then reads
    one or two more bytes.

    Events emitted:
    - buf_tier={index}
    """
    index = draw(st.integers(min_value=0, max_value=len(LENGTH_TIERS) - 1))
    outer_lo, outer_hi, len_lo, len_hi = LENGTH_TIERS[index]
    n = draw(st.integers(min_value=outer_lo, max_value=outer_hi))
    tail = draw(st.binary(min_size=2, max_size=2))
    event(f"buf_tier={index}")
    return LengthTierCase(n.to_bytes(2, "big") + tail, len_lo, len_hi)


def u32_draws() -> st.SearchStrategy[int]:
    """Unsigned 32-bit raw draws, endpoints included."""
    return st.one_of(
        st.sampled_from([0, 1, 2**31, 2**32 - 2, 2**32 - 1]),
        st.integers(min_value=0, max_value=2**32 - 1),
    )


@st.composite
def variant_counts(draw: st.DrawFn) -> int:
    """Generate a candidate count for RangeMapper tests.

    Events emitted:
    - variant_count={one|few|many}
    """
    label = draw(st.sampled_from(["one", "few", "many"]))
    match label:
        case "one":
            count = 1
        case "few":
            count = draw(st.integers(min_value=2, max_value=16))
        case _:  # many
            count = draw(st.integers(min_value=17, max_value=100_000))
    event(f"variant_count={label}")
    return count

"""Enumerations for arbitraryext type-safe constants.

Uses StrEnum (Python 3.11+) for automatic string conversion.

Python 3.13+.
"""

from enum import StrEnum

__all__ = ["GenerationMode"]


class GenerationMode(StrEnum):
    """How a top-level generation attempt treats the input buffer.

    StrEnum provides automatic string conversion: str(GenerationMode.BOUNDED) == "bounded"
    """

    BOUNDED = "bounded"
    """Take only the bytes each decision needs; trailing bytes are ignored."""

    CONSUME_REMAINING = "consume_remaining"
    """The last sub-value absorbs every trailing byte."""

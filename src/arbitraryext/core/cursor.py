"""Byte cursor: the sole entropy source for one generation attempt.

Wraps an immutable ``bytes`` buffer with two offsets. Reads advance ``pos``
from the front; byte-size prefixes for variable-length strings are taken from
the back by lowering ``end``. Both offsets only ever move toward each other,
so every read either makes progress or reports exhaustion.

Draw Semantics:
    - Ranged draws (int_in_range, ratio) consume the fewest big-endian bytes
      that can cover the range and fail with InputExhaustedError when a real
      choice exists but no bytes remain. A single-value range never consumes
      and never fails.
    - Fixed-width draws (fill_buffer) copy what is left and zero-pad the
      rest. They never fail, so on exhausted input every fixed-width decision
      resolves to zero (the "cheap" branch).

Ownership:
    A Cursor belongs to exactly one attempt. It carries that attempt's
    GenerationContext (recursion counters), so two cursors never share
    counters even when built from identical bytes.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from arbitraryext.diagnostics import (
    ErrorTemplate,
    IncorrectUsageError,
    InputExhaustedError,
)

from .recursion_guard import GenerationContext

__all__ = ["Cursor"]


def _int_in_range_impl(lo: int, hi: int, source: memoryview) -> tuple[int, int]:
    """Map leading bytes of ``source`` onto ``lo..=hi``.

    Returns:
        (value, bytes_consumed)
    """
    delta = hi - lo
    acc = 0
    consumed = 0
    for byte in source:
        if delta >> (8 * consumed) == 0:
            break
        acc = (acc << 8) | byte
        consumed += 1
    return lo + acc % (delta + 1), consumed


@dataclass(slots=True)
class Cursor:
    """Forward-only reader over an immutable byte buffer.

    Example:
        >>> cursor = Cursor(b"\\x07\\x00")
        >>> cursor.int_in_range(0, 5)
        1
        >>> cursor.pos
        1
        >>> len(cursor)
        1

    Attributes:
        data: The input buffer (never modified)
        pos: Offset of the next front read
        end: Exclusive end of the readable window
        context: Recursion counters for this attempt
    """

    data: bytes
    pos: int = field(default=0, init=False)
    end: int = field(init=False)
    context: GenerationContext = field(default_factory=GenerationContext, repr=False)

    def __post_init__(self) -> None:
        """Normalize bytes-like input and open the full window."""
        self.data = bytes(self.data)
        self.end = len(self.data)

    def __len__(self) -> int:
        """Number of unread bytes."""
        return self.end - self.pos

    @property
    def position(self) -> int:
        """Offset of the next front read."""
        return self.pos

    def is_empty(self) -> bool:
        """True when no bytes remain."""
        return self.pos >= self.end

    def _exhausted(self) -> InputExhaustedError:
        return InputExhaustedError(ErrorTemplate.input_exhausted(self.pos))

    def int_in_range(self, lo: int, hi: int) -> int:
        """Draw an integer from the inclusive range ``lo..=hi``.

        Raises:
            IncorrectUsageError: If lo > hi
            InputExhaustedError: If lo < hi and the cursor is empty
        """
        if lo > hi:
            raise IncorrectUsageError(ErrorTemplate.empty_range(lo, hi))
        if lo == hi:
            return lo
        if self.is_empty():
            raise self._exhausted()
        window = memoryview(self.data)[self.pos : self.end]
        value, consumed = _int_in_range_impl(lo, hi, window)
        self.pos += consumed
        return value

    def ratio(self, numerator: int, denominator: int) -> bool:
        """Return True with probability ``numerator / denominator``.

        Raises:
            IncorrectUsageError: Unless 0 < numerator <= denominator
            InputExhaustedError: If a choice exists and the cursor is empty
        """
        if not 0 < numerator <= denominator:
            raise IncorrectUsageError(ErrorTemplate.invalid_ratio(numerator, denominator))
        return self.int_in_range(1, denominator) <= numerator

    def fill_buffer(self, size: int) -> bytes:
        """Read up to ``size`` bytes, zero-padding whatever is missing."""
        chunk = self.data[self.pos : min(self.pos + size, self.end)]
        self.pos += len(chunk)
        if len(chunk) < size:
            return chunk + b"\x00" * (size - len(chunk))
        return chunk

    def read_bytes(self, size: int) -> bytes:
        """Read exactly ``size`` bytes.

        Raises:
            InputExhaustedError: If fewer than ``size`` bytes remain
        """
        if size > len(self):
            raise InputExhaustedError(
                ErrorTemplate.not_enough_bytes(size, len(self), self.pos)
            )
        chunk = self.data[self.pos : self.pos + size]
        self.pos += size
        return chunk

    def peek_bytes(self, size: int) -> bytes | None:
        """Return the next ``size`` bytes without consuming, or None if short."""
        if size > len(self):
            return None
        return self.data[self.pos : self.pos + size]

    def take_rest(self) -> bytes:
        """Consume and return every remaining byte."""
        chunk = self.data[self.pos : self.end]
        self.pos = self.end
        return chunk

    def arbitrary_byte_size(self) -> int:
        """Draw a byte count for a variable-length byte string.

        The size prefix is read from the *back* of the window so that the
        payload bytes stay contiguous at the front. Prefix width grows with
        the remaining length: 1 byte up to 256 remaining, then 2, 4, 8.
        The result never exceeds the bytes left after the prefix.
        """
        remaining = len(self)
        if remaining == 0:
            return 0
        if remaining == 1:
            self.end = self.pos
            return 0
        if remaining <= 0xFF + 1:
            width = 1
        elif remaining <= 0xFFFF + 2:
            width = 2
        elif remaining <= 0xFFFF_FFFF + 4:
            width = 4
        else:
            width = 8
        max_size = remaining - width
        self.end -= width
        prefix = memoryview(self.data)[self.end : self.end + width]
        size, _ = _int_in_range_impl(0, max_size, prefix)
        return size

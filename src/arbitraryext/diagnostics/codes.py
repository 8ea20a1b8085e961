"""Diagnostic codes and data structures.

Defines error codes, categories, and diagnostic messages.
Python 3.13+. Zero external dependencies.
"""

from dataclasses import dataclass
from enum import Enum, StrEnum
from typing import Literal

__all__ = [
    "Diagnostic",
    "DiagnosticCode",
    "ErrorCategory",
]


class ErrorCategory(StrEnum):
    """Error categorization for ArbitraryError.

    Inherits from ``StrEnum`` so that ``str(category)`` and direct string
    comparisons work without accessing ``.value``; log aggregation and fuzz
    reports receive plain strings (``"exhausted"``, ``"recursion"``, ...)
    rather than the ``"ErrorCategory.X"`` repr.

    Categories:
        EXHAUSTED: Entropy required but the buffer is empty
        RECURSION: Recursion guard fired for a self-referential type
        USAGE: Caller misuse (empty range, bad ratio, unsupported type)
    """

    EXHAUSTED = "exhausted"
    RECURSION = "recursion"
    USAGE = "usage"


class DiagnosticCode(Enum):
    """Error codes with unique identifiers.

    Organized by category:
        1000-1999: Input exhaustion
        2000-2999: Recursion limits
        3000-3999: Incorrect usage
    """

    # Input exhaustion (1000-1999)
    INPUT_EXHAUSTED = 1001
    NOT_ENOUGH_BYTES = 1002

    # Recursion limits (2000-2999)
    RECURSION_LIMIT_EXCEEDED = 2001

    # Incorrect usage (3000-3999)
    EMPTY_RANGE = 3001
    INVALID_RATIO = 3002
    NO_CHOICES = 3003
    UNSUPPORTED_TYPE = 3004
    MISSING_DEFAULT = 3005
    INVALID_WIDTH = 3006


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """Structured diagnostic message.

    Attributes:
        code: Unique error code
        message: Human-readable error description
        hint: Suggestion for fixing the error
        position: Cursor offset at the time of the error (None if not applicable)
        type_name: Name of the type being constructed (None if not applicable)
        severity: Error severity level
    """

    code: DiagnosticCode
    message: str
    hint: str | None = None
    position: int | None = None
    type_name: str | None = None
    severity: Literal["error", "warning"] = "error"

    def __str__(self) -> str:
        """Return human-readable error description."""
        return self.message

    def format_error(self) -> str:
        """Format diagnostic like Rust compiler.

        Example output:
            error[RECURSION_LIMIT_EXCEEDED]: Recursion limit exceeded for 'Tree'
              --> byte offset 12
              = type: Tree
              = help: Supply more input bytes or make the recursive branch optional

        Returns:
            Formatted error message
        """
        from .formatter import DiagnosticFormatter  # noqa: PLC0415 - circular

        return DiagnosticFormatter().format(self)

"""Exception hierarchy with structured diagnostics.

Every failure is terminal for the current generation attempt. The caller
discards the attempt and moves on to the next buffer; nothing needs cleanup.

Python 3.13+. Zero external dependencies.
"""

from typing import ClassVar

from .codes import Diagnostic, ErrorCategory

__all__ = [
    "ArbitraryError",
    "IncorrectUsageError",
    "InputExhaustedError",
    "RecursionLimitExceededError",
]


class ArbitraryError(Exception):
    """Base exception for all arbitraryext errors.

    Attributes:
        diagnostic: Structured diagnostic information (optional)
        category: Error category (class-level)
    """

    category: ClassVar[ErrorCategory]

    def __init__(self, message: str | Diagnostic) -> None:
        """Initialize ArbitraryError.

        Args:
            message: Error message string OR Diagnostic object
        """
        if isinstance(message, Diagnostic):
            self.diagnostic: Diagnostic | None = message
            super().__init__(message.message)
        else:
            self.diagnostic = None
            super().__init__(message)


class InputExhaustedError(ArbitraryError):
    """Entropy was required but the buffer had none left.

    Routine outcome for short inputs, not a bug.
    """

    category = ErrorCategory.EXHAUSTED


class RecursionLimitExceededError(ArbitraryError):
    """A self-referential type tried to nest again on exhausted input.

    Routine outcome for short or adversarial inputs, not a bug.
    """

    category = ErrorCategory.RECURSION


class IncorrectUsageError(ArbitraryError):
    """The caller asked for something impossible.

    Examples:
    - Empty numeric range (lo > hi)
    - Ratio with numerator 0 or above the denominator
    - Annotation with no derivable constructor
    """

    category = ErrorCategory.USAGE

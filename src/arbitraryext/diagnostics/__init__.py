"""Diagnostic system for generation failures.

Provides structured error diagnostics with codes, hints, and byte offsets.
Inspired by Rust compiler diagnostics.

Python 3.13+. Zero external dependencies.
"""

from .codes import Diagnostic, DiagnosticCode, ErrorCategory
from .errors import (
    ArbitraryError,
    IncorrectUsageError,
    InputExhaustedError,
    RecursionLimitExceededError,
)
from .formatter import DiagnosticFormatter, OutputFormat
from .templates import ErrorTemplate

__all__ = [
    "ArbitraryError",
    "Diagnostic",
    "DiagnosticCode",
    "DiagnosticFormatter",
    "ErrorCategory",
    "ErrorTemplate",
    "IncorrectUsageError",
    "InputExhaustedError",
    "OutputFormat",
    "RecursionLimitExceededError",
]

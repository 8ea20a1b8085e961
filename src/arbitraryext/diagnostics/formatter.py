"""Diagnostic formatting service.

Centralizes diagnostic output formatting with configurable options.
Python 3.13+. Zero external dependencies.
"""

import json
from collections.abc import Iterable
from dataclasses import dataclass
from enum import StrEnum

from .codes import Diagnostic

__all__ = [
    "DiagnosticFormatter",
    "OutputFormat",
]

# C0 control characters plus DEL, rendered as escapes to keep one
# diagnostic on one logical line.
_CONTROL_ESCAPES = {i: f"\\x{i:02x}" for i in (*range(0x20), 0x7F)}


def _escape(text: str) -> str:
    return text.translate(_CONTROL_ESCAPES)


class OutputFormat(StrEnum):
    """Output format options for diagnostic formatting."""

    RUST = "rust"  # Rust compiler-style output (default)
    SIMPLE = "simple"  # Single-line format
    JSON = "json"  # JSON format for tooling integration


@dataclass(frozen=True, slots=True)
class DiagnosticFormatter:
    """Diagnostic formatting service.

    Attributes:
        output_format: Output style (rust, simple, json)

    Example:
        >>> from arbitraryext.diagnostics import ErrorTemplate
        >>> formatter = DiagnosticFormatter(output_format=OutputFormat.SIMPLE)
        >>> print(formatter.format(ErrorTemplate.empty_range(5, 1)))
        EMPTY_RANGE: Cannot draw from empty range 5..=1
    """

    output_format: OutputFormat = OutputFormat.RUST

    def format(self, diagnostic: Diagnostic) -> str:
        """Format a single diagnostic.

        Args:
            diagnostic: Diagnostic to format

        Returns:
            Formatted diagnostic string
        """
        match self.output_format:
            case OutputFormat.RUST:
                return self._format_rust(diagnostic)
            case OutputFormat.SIMPLE:
                return self._format_simple(diagnostic)
            case OutputFormat.JSON:
                return self._format_json(diagnostic)

    def format_all(self, diagnostics: Iterable[Diagnostic]) -> str:
        """Format multiple diagnostics separated by blank lines."""
        return "\n\n".join(self.format(d) for d in diagnostics)

    def _format_rust(self, diagnostic: Diagnostic) -> str:
        lines = [
            f"{diagnostic.severity}[{diagnostic.code.name}]: {_escape(diagnostic.message)}"
        ]
        if diagnostic.position is not None:
            lines.append(f"  --> byte offset {diagnostic.position}")
        if diagnostic.type_name is not None:
            lines.append(f"  = type: {_escape(diagnostic.type_name)}")
        if diagnostic.hint is not None:
            lines.append(f"  = help: {_escape(diagnostic.hint)}")
        return "\n".join(lines)

    def _format_simple(self, diagnostic: Diagnostic) -> str:
        return f"{diagnostic.code.name}: {_escape(diagnostic.message)}"

    def _format_json(self, diagnostic: Diagnostic) -> str:
        payload = {
            "code": diagnostic.code.name,
            "code_value": diagnostic.code.value,
            "message": diagnostic.message,
            "hint": diagnostic.hint,
            "position": diagnostic.position,
            "type_name": diagnostic.type_name,
            "severity": diagnostic.severity,
        }
        return json.dumps(payload, sort_keys=True)

"""Error message templates.

Centralized error message templates for testable, consistent error messages.
Python 3.13+. Zero external dependencies.
"""

from .codes import Diagnostic, DiagnosticCode

__all__ = ["ErrorTemplate"]


class ErrorTemplate:
    """Centralized error message templates.

    All error messages are created here. NO f-strings in exception constructors!
    This keeps messages testable and documents every failure case in one place.
    """

    @staticmethod
    def input_exhausted(position: int) -> Diagnostic:
        """A decision requiring entropy was attempted on an empty buffer.

        Args:
            position: Cursor offset (equal to the buffer length)

        Returns:
            Diagnostic for INPUT_EXHAUSTED
        """
        msg = f"Input exhausted at byte offset {position}"
        return Diagnostic(
            code=DiagnosticCode.INPUT_EXHAUSTED,
            message=msg,
            hint="Discard this input and continue with the next corpus entry",
            position=position,
        )

    @staticmethod
    def not_enough_bytes(requested: int, available: int, position: int) -> Diagnostic:
        """An exact-size byte read asked for more than remains.

        Args:
            requested: Number of bytes requested
            available: Number of bytes remaining
            position: Cursor offset

        Returns:
            Diagnostic for NOT_ENOUGH_BYTES
        """
        msg = f"Requested {requested} bytes but only {available} remain"
        return Diagnostic(
            code=DiagnosticCode.NOT_ENOUGH_BYTES,
            message=msg,
            position=position,
        )

    @staticmethod
    def recursion_limit_exceeded(type_name: str, position: int) -> Diagnostic:
        """Recursion guard fired for a self-referential type.

        Args:
            type_name: Name of the guarded type
            position: Cursor offset (equal to the buffer length)

        Returns:
            Diagnostic for RECURSION_LIMIT_EXCEEDED
        """
        msg = f"Recursion limit exceeded for '{type_name}' on exhausted input"
        return Diagnostic(
            code=DiagnosticCode.RECURSION_LIMIT_EXCEEDED,
            message=msg,
            hint="Supply more input bytes or make the recursive branch optional",
            position=position,
            type_name=type_name,
        )

    @staticmethod
    def empty_range(lo: int, hi: int) -> Diagnostic:
        """int_in_range() called with lo > hi.

        Args:
            lo: Requested lower bound
            hi: Requested upper bound

        Returns:
            Diagnostic for EMPTY_RANGE
        """
        msg = f"Cannot draw from empty range {lo}..={hi}"
        return Diagnostic(
            code=DiagnosticCode.EMPTY_RANGE,
            message=msg,
            hint="Ensure lo <= hi",
        )

    @staticmethod
    def invalid_ratio(numerator: int, denominator: int) -> Diagnostic:
        """ratio() called outside 0 < numerator <= denominator.

        Args:
            numerator: Requested numerator
            denominator: Requested denominator

        Returns:
            Diagnostic for INVALID_RATIO
        """
        msg = f"Invalid ratio {numerator}/{denominator}"
        return Diagnostic(
            code=DiagnosticCode.INVALID_RATIO,
            message=msg,
            hint="Require 0 < numerator <= denominator",
        )

    @staticmethod
    def no_choices() -> Diagnostic:
        """Variant selection over zero candidates.

        Returns:
            Diagnostic for NO_CHOICES
        """
        return Diagnostic(
            code=DiagnosticCode.NO_CHOICES,
            message="Cannot choose from zero candidates",
            hint="Provide at least one variant",
        )

    @staticmethod
    def unsupported_type(type_name: str) -> Diagnostic:
        """No constructor can be derived for an annotation.

        Args:
            type_name: Printable form of the annotation

        Returns:
            Diagnostic for UNSUPPORTED_TYPE
        """
        msg = f"Cannot derive a constructor for {type_name}"
        return Diagnostic(
            code=DiagnosticCode.UNSUPPORTED_TYPE,
            message=msg,
            hint="Use Custom(func) on the field or register(type, constructor)",
            type_name=type_name,
        )

    @staticmethod
    def missing_default(type_name: str, field_name: str) -> Diagnostic:
        """Default() strategy on a field that has no default.

        Args:
            type_name: Owning dataclass name
            field_name: Field carrying the Default() strategy

        Returns:
            Diagnostic for MISSING_DEFAULT
        """
        msg = f"Field '{field_name}' of '{type_name}' uses Default() but has no default"
        return Diagnostic(
            code=DiagnosticCode.MISSING_DEFAULT,
            message=msg,
            hint="Give the field a default or default_factory",
            type_name=type_name,
        )

    @staticmethod
    def invalid_width(bits: int) -> Diagnostic:
        """Numeric constructor requested with an unsupported width.

        Args:
            bits: Requested width in bits

        Returns:
            Diagnostic for INVALID_WIDTH
        """
        msg = f"Unsupported numeric width: {bits} bits"
        return Diagnostic(
            code=DiagnosticCode.INVALID_WIDTH,
            message=msg,
            hint="Integers: 8, 16, 32, 64, 128. Floats: 32, 64",
        )

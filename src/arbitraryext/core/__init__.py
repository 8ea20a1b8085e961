"""Core primitives shared by the sampling, builder, and derive layers.

Exports:
    Cursor: Forward-only reader over the input buffer
    GenerationContext: Per-attempt recursion counters
    RecursionGuard: Context manager capping re-entry on exhausted input
    guarded: Wrap a Constructor in a RecursionGuard

Python 3.13+.
"""

from .cursor import Cursor
from .recursion_guard import GenerationContext, RecursionGuard, guarded

__all__ = ["Cursor", "GenerationContext", "RecursionGuard", "guarded"]

"""Re-entrancy guard for self-referential types on exhausted input.

Once the cursor runs dry, every fixed-width decision resolves to zero. For a
recursive type whose zero branch recurses, that means one more nested call
forever. The guard caps this: on exhausted input a type may be entered once;
a second nested entry fails fast with RecursionLimitExceededError.

Architecture:
    - GenerationContext: per-attempt mapping of guard key -> nesting depth,
      carried by the attempt's Cursor (no module-level state)
    - RecursionGuard: context manager performing one enter/exit pair
    - guarded(): wraps a Constructor so both generation modes are guarded

Thread Safety:
    Counters live on the attempt's own context, so concurrent attempts are
    fully isolated. No locks are needed.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from arbitraryext.constructor import Constructor, as_constructor
from arbitraryext.diagnostics import ErrorTemplate, RecursionLimitExceededError

if TYPE_CHECKING:
    from collections.abc import Hashable

    from arbitraryext.constructor import Build

    from .cursor import Cursor

__all__ = ["GenerationContext", "RecursionGuard", "guarded"]

logger = logging.getLogger(__name__)


def _key_name(key: Hashable) -> str:
    return getattr(key, "__qualname__", None) or str(key)


@dataclass(slots=True)
class GenerationContext:
    """Recursion counters for one generation attempt.

    Keys with a zero count are removed, so an attempt that finished (in
    success or failure) leaves the context empty.

    Mutability Note:
        Intentionally mutable. Only RecursionGuard enter/exit pairs write to
        it; the pairing is what restores every counter to zero.
    """

    _depths: dict[Hashable, int] = field(default_factory=dict)

    def depth(self, key: Hashable) -> int:
        """Current nesting depth recorded for ``key``."""
        return self._depths.get(key, 0)

    def increment(self, key: Hashable) -> None:
        """Record one more guarded entry for ``key``."""
        self._depths[key] = self._depths.get(key, 0) + 1

    def decrement(self, key: Hashable) -> None:
        """Undo one guarded entry for ``key``."""
        depth = self._depths.get(key, 0) - 1
        if depth > 0:
            self._depths[key] = depth
        else:
            self._depths.pop(key, None)

    def is_clear(self) -> bool:
        """True when no counter is elevated."""
        return not self._depths


class RecursionGuard:
    """Context manager guarding one construction of ``key``.

    Usage:
        with RecursionGuard(cursor, Tree):
            children = build_children(cursor)

    A fresh instance is needed per entry; it remembers whether its own
    __enter__ incremented the counter.
    """

    __slots__ = ("_armed", "_cursor", "_key")

    def __init__(self, cursor: Cursor, key: Hashable) -> None:
        """Bind the guard to an attempt's cursor and a type key."""
        self._cursor = cursor
        self._key = key
        self._armed = False

    def __enter__(self) -> RecursionGuard:
        """Enter guarded section.

        Checks the counter BEFORE incrementing: __exit__ does not run when
        __enter__ raises, so incrementing first would leave the counter
        permanently elevated for the rest of the attempt.

        Raises:
            RecursionLimitExceededError: If the cursor is exhausted and
                ``key`` is already being constructed further up the stack
        """
        cursor = self._cursor
        if not cursor.is_empty():
            return self
        context = cursor.context
        if context.depth(self._key) > 0:
            logger.debug(
                "Recursion guard fired for %s at byte offset %d",
                _key_name(self._key),
                cursor.pos,
            )
            raise RecursionLimitExceededError(
                ErrorTemplate.recursion_limit_exceeded(_key_name(self._key), cursor.pos)
            )
        context.increment(self._key)
        self._armed = True
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        """Exit guarded section, restoring the counter if entry raised it."""
        if self._armed:
            self._cursor.context.decrement(self._key)
            self._armed = False


def guarded[T](
    key: Hashable, constructor: Constructor[T] | Build[T] | None = None
) -> Any:
    """Run every call of a constructor inside a RecursionGuard for ``key``.

    Both generation modes are guarded. Usable directly or as a decorator:

        tree = guarded(Tree, Constructor(build_tree, name="Tree"))

        @guarded(Tree)
        def build_tree(cursor: Cursor) -> Tree: ...

    Returns:
        Guarded Constructor, or a decorator producing one when
        ``constructor`` is omitted
    """
    if constructor is None:
        return lambda func: guarded(key, func)
    inner = as_constructor(constructor)

    def build(cursor: Cursor) -> T:
        with RecursionGuard(cursor, key):
            return inner(cursor)

    def build_rest(cursor: Cursor) -> T:
        with RecursionGuard(cursor, key):
            return inner.take_rest(cursor)

    return Constructor(build, build_rest, name=inner.name)

"""Constructor protocol shared by every builder.

A constructor turns the attempt's Cursor into one value. Each constructor
has two entry shapes:

    constructor(cursor)            bounded: take only what is needed
    constructor.take_rest(cursor)  consume-remaining: absorb trailing bytes

Builders accept either a Constructor or any plain ``cursor -> value``
callable; plain callables behave identically in both modes.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from arbitraryext.core.cursor import Cursor

__all__ = ["Build", "Constructor", "as_constructor", "fixed"]

type Build[T] = Callable[[Cursor], T]


@dataclass(frozen=True, slots=True)
class Constructor[T]:
    """A value constructor with bounded and consume-remaining entry points.

    Attributes:
        build: Bounded-mode function
        build_rest: Consume-remaining function (None: same as ``build``)
        name: Label used in reprs and log messages
    """

    build: Build[T]
    build_rest: Build[T] | None = None
    name: str = "<constructor>"

    def __call__(self, cursor: Cursor) -> T:
        """Construct a value in bounded mode."""
        return self.build(cursor)

    def take_rest(self, cursor: Cursor) -> T:
        """Construct a value in consume-remaining mode."""
        if self.build_rest is None:
            return self.build(cursor)
        return self.build_rest(cursor)

    def map[U](self, func: Callable[[T], U], name: str | None = None) -> Constructor[U]:
        """Return a constructor applying ``func`` to this one's output in both modes."""
        build = self.build
        build_rest = self.take_rest
        return Constructor(
            lambda cursor: func(build(cursor)),
            lambda cursor: func(build_rest(cursor)),
            name=name or self.name,
        )

    def __repr__(self) -> str:
        return f"Constructor({self.name})"


def as_constructor[T](obj: Constructor[T] | Build[T]) -> Constructor[T]:
    """Lift a plain ``cursor -> value`` callable into a Constructor.

    Raises:
        TypeError: If ``obj`` is not callable
    """
    if isinstance(obj, Constructor):
        return obj
    if not callable(obj):
        msg = f"Expected a constructor or callable, got {type(obj).__name__}"
        raise TypeError(msg)
    return Constructor(obj, name=getattr(obj, "__qualname__", repr(obj)))


def fixed(value: Any) -> Constructor[Any]:
    """Constructor that returns ``value`` and consumes nothing."""
    return Constructor(lambda _cursor: value, name=f"fixed({value!r})")

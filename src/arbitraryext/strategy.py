"""Per-field construction strategies for derived dataclasses.

A strategy tells derive() how to produce one dataclass field:

    Derived()      build from the field's type annotation (the default)
    Default()      use the field's default / default_factory, consume nothing
    Custom(func)   call ``func(cursor)`` (a Constructor keeps both modes)
    Fixed(value)   use a copy of ``value``, consume nothing

Example:
    >>> from dataclasses import dataclass
    >>> @dataclass
    ... class Point:
    ...     x: int = arbitrary_field(Custom(lambda u: u.int_in_range(0, 100)))
    ...     y: int = arbitrary_field(Default(), default=7)
    ...     z: int = 0

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from arbitraryext.constructor import Build, Constructor

__all__ = [
    "STRATEGY_METADATA_KEY",
    "Custom",
    "Default",
    "Derived",
    "Fixed",
    "Strategy",
    "arbitrary_field",
    "field_strategy",
]

# Key under which a Strategy is stored in dataclasses.Field.metadata.
STRATEGY_METADATA_KEY = "arbitraryext.strategy"


@dataclass(frozen=True, slots=True)
class Derived:
    """Construct the field from its type annotation."""


@dataclass(frozen=True, slots=True)
class Default:
    """Use the field's own default or default_factory."""


@dataclass(frozen=True, slots=True)
class Custom:
    """Construct the field with a caller-supplied constructor.

    Attributes:
        func: Constructor or ``cursor -> value`` callable
    """

    func: Constructor[Any] | Build[Any]


@dataclass(frozen=True, slots=True)
class Fixed:
    """Use a fixed value; each construction receives its own deep copy.

    Attributes:
        value: The literal to produce
    """

    value: Any


type Strategy = Derived | Default | Custom | Fixed


def arbitrary_field(strategy: Strategy, **kwargs: Any) -> Any:
    """``dataclasses.field()`` carrying a construction strategy.

    All keyword arguments are forwarded to ``dataclasses.field()``; any
    existing ``metadata`` is preserved.
    """
    metadata = dict(kwargs.pop("metadata", None) or {})
    metadata[STRATEGY_METADATA_KEY] = strategy
    return dataclasses.field(metadata=metadata, **kwargs)


def field_strategy(field: dataclasses.Field[Any]) -> Strategy:
    """Strategy attached to ``field`` (Derived() when none)."""
    return field.metadata.get(STRATEGY_METADATA_KEY, Derived())

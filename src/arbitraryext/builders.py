"""Combinators building optional values, collections, records, and variants.

Every builder takes element constructors (Constructor or plain
``cursor -> value`` callables) and returns a Constructor. Builders compose:
an element constructor may itself be any builder.

Bounded mode:
    Sample a length with arbitrary_len(), then construct that many elements
    strictly in order and insert each with the container's native semantics.
    Deduplicating containers still consume the bytes of dropped elements.

Consume-remaining mode:
    Keep constructing elements until the cursor is empty. Stops early if an
    element consumed nothing, since it would otherwise repeat forever.

Example:
    >>> from arbitraryext import Cursor
    >>> from arbitraryext.primitives import arbitrary_bool, arbitrary_int
    >>> flags = arbitrary_dict(arbitrary_int(8, signed=False), arbitrary_list(arbitrary_bool))
    >>> flags(Cursor(b""))
    Traceback (most recent call last):
    ...
    arbitraryext.diagnostics.errors.InputExhaustedError: Input exhausted at byte offset 0

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Callable, Iterator, MutableMapping
from typing import TYPE_CHECKING, Any

from arbitraryext.constants import ABSENCE_DENOMINATOR, ABSENCE_NUMERATOR
from arbitraryext.constructor import Build, Constructor, as_constructor
from arbitraryext.containers import LinkedList, MaxHeap, SortedDict, SortedSet
from arbitraryext.sampling import arbitrary_len, choose_index

if TYPE_CHECKING:
    from arbitraryext.core.cursor import Cursor

__all__ = [
    "arbitrary_deque",
    "arbitrary_dict",
    "arbitrary_frozenset",
    "arbitrary_heap",
    "arbitrary_linked_list",
    "arbitrary_list",
    "arbitrary_one_of",
    "arbitrary_option",
    "arbitrary_set",
    "arbitrary_sorted_dict",
    "arbitrary_sorted_set",
    "arbitrary_tuple",
    "take_rest_iter",
]

logger = logging.getLogger(__name__)

type ElementLike[T] = Constructor[T] | Build[T]


# ============================================================================
# OPTIONAL VALUES
# ============================================================================


def arbitrary_option[T](inner: ElementLike[T]) -> Constructor[T | None]:
    """Optional slot: absent (None) 1 time in 5 on average.

    Draws ``ratio(1, 5)``; True means absent. When present, ``inner`` is
    invoked (in the same mode as the option itself) and its value returned.
    """
    inner = as_constructor(inner)

    def build(cursor: Cursor) -> T | None:
        if cursor.ratio(ABSENCE_NUMERATOR, ABSENCE_DENOMINATOR):
            return None
        return inner(cursor)

    def build_rest(cursor: Cursor) -> T | None:
        if cursor.ratio(ABSENCE_NUMERATOR, ABSENCE_DENOMINATOR):
            return None
        return inner.take_rest(cursor)

    return Constructor(build, build_rest, name=f"option[{inner.name}]")


# ============================================================================
# COLLECTIONS
# ============================================================================


def take_rest_iter[T](cursor: Cursor, element: Constructor[T]) -> Iterator[T]:
    """Yield bounded-mode elements until the cursor is empty.

    Stops after an element that consumed no bytes.
    """
    while not cursor.is_empty():
        start = cursor.pos
        yield element(cursor)
        if cursor.pos == start:
            logger.warning(
                "Element constructor %s consumed no input; stopping at byte offset %d",
                element.name,
                start,
            )
            return


def _collection[C, T](
    kind: str,
    factory: Callable[[], C],
    insert: Callable[[C, T], object],
    element: Constructor[T],
) -> Constructor[C]:
    def build(cursor: Cursor) -> C:
        length = arbitrary_len(cursor)
        container = factory()
        for _ in range(length):
            insert(container, element(cursor))
        return container

    def build_rest(cursor: Cursor) -> C:
        container = factory()
        for value in take_rest_iter(cursor, element):
            insert(container, value)
        return container

    return Constructor(build, build_rest, name=f"{kind}[{element.name}]")


def _pair[K, V](key: ElementLike[K], value: ElementLike[V]) -> Constructor[tuple[K, V]]:
    key = as_constructor(key)
    value = as_constructor(value)

    def build(cursor: Cursor) -> tuple[K, V]:
        k = key(cursor)
        return k, value(cursor)

    return Constructor(build, name=f"{key.name}, {value.name}")


def _store(mapping: MutableMapping[Any, Any], pair: tuple[Any, Any]) -> None:
    mapping[pair[0]] = pair[1]


def arbitrary_list[T](element: ElementLike[T]) -> Constructor[list[T]]:
    """Sequence in insertion order; duplicates allowed."""
    return _collection("list", list, list.append, as_constructor(element))


def arbitrary_deque[T](element: ElementLike[T]) -> Constructor[deque[T]]:
    """Double-ended queue in insertion order; duplicates allowed."""
    return _collection("deque", deque, deque.append, as_constructor(element))


def arbitrary_linked_list[T](element: ElementLike[T]) -> Constructor[LinkedList[T]]:
    """Linked list in insertion order; duplicates allowed."""
    return _collection("linked_list", LinkedList, LinkedList.push_back, as_constructor(element))


def arbitrary_set[T](element: ElementLike[T]) -> Constructor[set[T]]:
    """Hashed set; a later equal element is dropped."""
    return _collection("set", set, set.add, as_constructor(element))


def arbitrary_frozenset[T](element: ElementLike[T]) -> Constructor[frozenset[T]]:
    """Hashed frozen set; built as arbitrary_set() then frozen."""
    return arbitrary_set(element).map(frozenset)


def arbitrary_sorted_set[T](element: ElementLike[T]) -> Constructor[SortedSet[T]]:
    """Set iterating in sorted order; a later equal element is dropped."""
    return _collection("sorted_set", SortedSet, SortedSet.add, as_constructor(element))


def arbitrary_dict[K, V](key: ElementLike[K], value: ElementLike[V]) -> Constructor[dict[K, V]]:
    """Hashed map; each entry draws key then value; later write wins."""
    return _collection("dict", dict, _store, _pair(key, value))


def arbitrary_sorted_dict[K, V](
    key: ElementLike[K], value: ElementLike[V]
) -> Constructor[SortedDict[K, V]]:
    """Map iterating in sorted key order; later write wins."""
    return _collection("sorted_dict", SortedDict, _store, _pair(key, value))


def arbitrary_heap[T](element: ElementLike[T]) -> Constructor[MaxHeap[T]]:
    """Priority queue with max-first extraction; duplicates allowed."""
    return _collection("heap", MaxHeap, MaxHeap.push, as_constructor(element))


# ============================================================================
# RECORDS AND VARIANTS
# ============================================================================


def arbitrary_tuple(*elements: ElementLike[Any]) -> Constructor[tuple[Any, ...]]:
    """Fixed-arity record; fields constructed left to right.

    In consume-remaining mode the last field gets the rest of the input.
    """
    parts = tuple(as_constructor(e) for e in elements)

    def build(cursor: Cursor) -> tuple[Any, ...]:
        return tuple(part(cursor) for part in parts)

    def build_rest(cursor: Cursor) -> tuple[Any, ...]:
        if not parts:
            return ()
        head = [part(cursor) for part in parts[:-1]]
        return (*head, parts[-1].take_rest(cursor))

    names = ", ".join(p.name for p in parts)
    return Constructor(build, build_rest, name=f"tuple[{names}]")


def arbitrary_one_of(*variants: ElementLike[Any]) -> Constructor[Any]:
    """Pick one variant with a single 32-bit draw, then construct it.

    Raises (when called):
        IncorrectUsageError: If no variants were given
    """
    options = tuple(as_constructor(v) for v in variants)

    def build(cursor: Cursor) -> Any:
        return options[choose_index(cursor, len(options))](cursor)

    def build_rest(cursor: Cursor) -> Any:
        return options[choose_index(cursor, len(options))].take_rest(cursor)

    names = " | ".join(o.name for o in options)
    return Constructor(build, build_rest, name=f"one_of[{names}]")

"""Container shapes without a direct standard-library equivalent.

- LinkedList: insertion-ordered singly linked list with O(1) append
- SortedSet: key-sorted set; re-adding an equal element keeps the original
- SortedDict: key-sorted mapping; re-assigning a key overwrites its value
- MaxHeap: priority queue popping the largest element first

SortedSet/SortedDict keep a sorted key list maintained with bisect and
plug into the collections.abc mixins for the rest of their API.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

import heapq
from bisect import bisect_left, insort
from collections.abc import Iterable, Iterator, MutableMapping, MutableSet
from dataclasses import dataclass
from typing import Any

__all__ = ["LinkedList", "MaxHeap", "SortedDict", "SortedSet"]


class _Node:
    __slots__ = ("next", "value")

    def __init__(self, value: Any) -> None:
        self.value = value
        self.next: _Node | None = None


class LinkedList[T]:
    """Singly linked list with head and tail pointers."""

    __slots__ = ("_head", "_len", "_tail")

    def __init__(self, values: Iterable[T] = ()) -> None:
        self._head: _Node | None = None
        self._tail: _Node | None = None
        self._len = 0
        for value in values:
            self.push_back(value)

    def push_back(self, value: T) -> None:
        """Append ``value`` at the tail."""
        node = _Node(value)
        if self._tail is None:
            self._head = node
        else:
            self._tail.next = node
        self._tail = node
        self._len += 1

    def push_front(self, value: T) -> None:
        """Prepend ``value`` at the head."""
        node = _Node(value)
        node.next = self._head
        self._head = node
        if self._tail is None:
            self._tail = node
        self._len += 1

    def pop_front(self) -> T:
        """Remove and return the head value.

        Raises:
            IndexError: If the list is empty
        """
        if self._head is None:
            msg = "pop from empty LinkedList"
            raise IndexError(msg)
        node = self._head
        self._head = node.next
        if self._head is None:
            self._tail = None
        self._len -= 1
        return node.value

    def __iter__(self) -> Iterator[T]:
        node = self._head
        while node is not None:
            yield node.value
            node = node.next

    def __len__(self) -> int:
        return self._len

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LinkedList):
            return NotImplemented
        return len(self) == len(other) and all(
            a == b for a, b in zip(self, other, strict=True)
        )

    def __repr__(self) -> str:
        return f"LinkedList({list(self)!r})"


class SortedSet[T](MutableSet[T]):
    """Set iterating in ascending order."""

    __slots__ = ("_items",)

    def __init__(self, values: Iterable[T] = ()) -> None:
        self._items: list[T] = []
        for value in values:
            self.add(value)

    def add(self, value: T) -> None:
        """Insert ``value`` unless an equal element is already present."""
        index = bisect_left(self._items, value)
        if index < len(self._items) and self._items[index] == value:
            return
        self._items.insert(index, value)

    def discard(self, value: T) -> None:
        """Remove ``value`` if present."""
        index = bisect_left(self._items, value)
        if index < len(self._items) and self._items[index] == value:
            del self._items[index]

    def __contains__(self, value: object) -> bool:
        index = bisect_left(self._items, value)  # type: ignore[call-overload]
        return index < len(self._items) and self._items[index] == value

    def __getitem__(self, index: int) -> T:
        return self._items[index]

    def __iter__(self) -> Iterator[T]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __repr__(self) -> str:
        return f"SortedSet({self._items!r})"


class SortedDict[K, V](MutableMapping[K, V]):
    """Mapping iterating in ascending key order."""

    __slots__ = ("_data", "_keys")

    def __init__(self, items: Iterable[tuple[K, V]] = ()) -> None:
        self._data: dict[K, V] = {}
        self._keys: list[K] = []
        for key, value in items:
            self[key] = value

    def __setitem__(self, key: K, value: V) -> None:
        if key not in self._data:
            insort(self._keys, key)
        self._data[key] = value

    def __getitem__(self, key: K) -> V:
        return self._data[key]

    def __delitem__(self, key: K) -> None:
        del self._data[key]
        del self._keys[bisect_left(self._keys, key)]

    def __iter__(self) -> Iterator[K]:
        return iter(self._keys)

    def __len__(self) -> int:
        return len(self._keys)

    def __repr__(self) -> str:
        return f"SortedDict({[(k, self._data[k]) for k in self._keys]!r})"


@dataclass(frozen=True, slots=True)
class _MaxItem:
    """Ordering inverter so heapq's min-heap pops the maximum."""

    value: Any

    def __lt__(self, other: _MaxItem) -> bool:
        return other.value < self.value


class MaxHeap[T]:
    """Binary max-heap: pop() always returns the largest element."""

    __slots__ = ("_heap",)

    def __init__(self, values: Iterable[T] = ()) -> None:
        self._heap: list[_MaxItem] = [_MaxItem(v) for v in values]
        heapq.heapify(self._heap)

    def push(self, value: T) -> None:
        """Insert ``value``."""
        heapq.heappush(self._heap, _MaxItem(value))

    def pop(self) -> T:
        """Remove and return the largest element.

        Raises:
            IndexError: If the heap is empty
        """
        return heapq.heappop(self._heap).value

    def peek(self) -> T:
        """Return the largest element without removing it.

        Raises:
            IndexError: If the heap is empty
        """
        return self._heap[0].value

    def into_sorted_list(self) -> list[T]:
        """All elements in ascending order (heap unchanged)."""
        return sorted(item.value for item in self._heap)

    def __iter__(self) -> Iterator[T]:
        """Iterate in internal heap order (not sorted)."""
        return (item.value for item in self._heap)

    def __len__(self) -> int:
        return len(self._heap)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MaxHeap):
            return NotImplemented
        return self.into_sorted_list() == other.into_sorted_list()

    def __repr__(self) -> str:
        return f"MaxHeap({self.into_sorted_list()!r})"

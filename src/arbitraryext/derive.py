"""Derive constructors from type annotations.

Maps a type annotation to a Constructor by reflection over ``typing`` forms
and dataclass fields:

    bool, int, float, bytes, str, None    primitives (int: signed 64-bit)
    T | None, Optional[T]                 arbitrary_option
    A | B, Union[A, B]                    arbitrary_one_of over members
    list, deque, set, frozenset, dict     collection builders
    LinkedList, SortedSet, SortedDict,    ordered containers
    MaxHeap
    tuple[A, B], tuple[T, ...]            record / list-then-tuple
    Literal[...], Enum subclasses         one value chosen by RangeMapper
    dataclasses                           fields in declaration order,
                                          guarded against runaway recursion
    Annotated[T, constructor]             the attached constructor
    type aliases (``type X = ...``)       resolved through their value

Anything else can be taught with register(tp, constructor).

Recursion:
    A dataclass or ``type`` alias is cached BEFORE its fields (or value) are
    resolved, so a reference that leads back to it (directly or through a
    union or container) picks up the cached constructor instead of
    recursing at derive time. Both are guarded against runaway recursion
    on exhausted input.

Thread Safety:
    The derive cache and the registry are protected by a module RLock.
    Generation itself shares no state between attempts.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

import copy
import dataclasses
import logging
import types
import typing
from collections import abc, deque
from enum import Enum
from threading import RLock
from typing import TYPE_CHECKING, Any, Literal, TypeAliasType, Union

from arbitraryext.builders import (
    arbitrary_deque,
    arbitrary_dict,
    arbitrary_frozenset,
    arbitrary_heap,
    arbitrary_linked_list,
    arbitrary_list,
    arbitrary_one_of,
    arbitrary_option,
    arbitrary_set,
    arbitrary_sorted_dict,
    arbitrary_sorted_set,
    arbitrary_tuple,
)
from arbitraryext.constants import DEFAULT_FLOAT_BITS, DEFAULT_INT_BITS
from arbitraryext.constructor import Build, Constructor, as_constructor, fixed
from arbitraryext.containers import LinkedList, MaxHeap, SortedDict, SortedSet
from arbitraryext.core.cursor import Cursor
from arbitraryext.core.recursion_guard import guarded
from arbitraryext.diagnostics import ErrorTemplate, IncorrectUsageError
from arbitraryext.enums import GenerationMode
from arbitraryext.primitives import (
    arbitrary_bool,
    arbitrary_bytes,
    arbitrary_float,
    arbitrary_int,
    arbitrary_str,
)
from arbitraryext.sampling import choose
from arbitraryext.strategy import Custom, Default, Derived, Fixed, field_strategy

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

__all__ = [
    "arbitrary",
    "clear_derive_cache",
    "derive",
    "generate",
    "generate_take_rest",
    "register",
]

logger = logging.getLogger(__name__)

_lock = RLock()
_registry: dict[Any, Constructor[Any]] = {}
_cache: dict[Any, Constructor[Any]] = {}

# Origins that take one element type, mapped to their builder.
_ELEMENT_BUILDERS: dict[Any, Callable[[Constructor[Any]], Constructor[Any]]] = {
    list: arbitrary_list,
    abc.Sequence: arbitrary_list,
    abc.MutableSequence: arbitrary_list,
    abc.Iterable: arbitrary_list,
    deque: arbitrary_deque,
    LinkedList: arbitrary_linked_list,
    set: arbitrary_set,
    abc.MutableSet: arbitrary_set,
    frozenset: arbitrary_frozenset,
    abc.Set: arbitrary_frozenset,
    SortedSet: arbitrary_sorted_set,
    MaxHeap: arbitrary_heap,
}

# Origins that take a key type and a value type.
_MAPPING_BUILDERS: dict[Any, Callable[[Constructor[Any], Constructor[Any]], Constructor[Any]]] = {
    dict: arbitrary_dict,
    abc.Mapping: arbitrary_dict,
    abc.MutableMapping: arbitrary_dict,
    SortedDict: arbitrary_sorted_dict,
}

_SCALARS: dict[type, Constructor[Any]] = {
    bool: arbitrary_bool,
    int: arbitrary_int(DEFAULT_INT_BITS),
    float: arbitrary_float(DEFAULT_FLOAT_BITS),
    bytes: arbitrary_bytes,
    str: arbitrary_str,
}


# ============================================================================
# REGISTRY AND CACHE
# ============================================================================


def register(tp: Any, constructor: Constructor[Any] | Build[Any]) -> None:
    """Use ``constructor`` whenever ``tp`` is derived.

    Registration wins over every built-in rule. Previously derived
    constructors are discarded, since they may embed the old resolution.

    Raises:
        TypeError: If ``constructor`` is not callable
    """
    ctor = as_constructor(constructor)
    with _lock:
        _registry[tp] = ctor
        _cache.clear()
    logger.debug("Registered constructor %s for %r", ctor.name, tp)


def clear_derive_cache() -> None:
    """Forget every derived constructor (registrations are kept).

    Useful for testing, or after a dataclass was redefined.
    """
    with _lock:
        _cache.clear()


# ============================================================================
# RESOLUTION
# ============================================================================


def derive(tp: Any) -> Constructor[Any]:
    """Constructor for values of the annotation ``tp``.

    Args:
        tp: A type, typing form, or type alias

    Returns:
        Constructor producing values of ``tp`` in both generation modes

    Raises:
        IncorrectUsageError: If no constructor can be derived for ``tp`` (or
            for any field or member type it contains)
    """
    with _lock:
        try:
            return _cache[tp]
        except KeyError:
            pass
        except TypeError:
            # Unhashable annotation (e.g. Literal over a list); not cached.
            return _resolve(tp)
        ctor = _resolve(tp)
        # Dataclasses install themselves before their fields resolve.
        return _cache.setdefault(tp, ctor)


def _type_name(tp: Any) -> str:
    if isinstance(tp, type):
        return tp.__qualname__
    return repr(tp)


def _lookup_registry(tp: Any) -> Constructor[Any] | None:
    try:
        return _registry.get(tp)
    except TypeError:
        return None


def _resolve(tp: Any) -> Constructor[Any]:
    registered = _lookup_registry(tp)
    if registered is not None:
        return registered

    if tp is None or tp is types.NoneType:
        return fixed(None)

    if isinstance(tp, TypeAliasType):
        return _resolve_alias(tp)

    origin = typing.get_origin(tp)
    if origin is not None:
        return _resolve_generic(tp, origin, typing.get_args(tp))

    if isinstance(tp, type):
        return _resolve_class(tp)

    raise IncorrectUsageError(ErrorTemplate.unsupported_type(_type_name(tp)))


def _resolve_generic(tp: Any, origin: Any, args: tuple[Any, ...]) -> Constructor[Any]:
    if origin is typing.Annotated:
        base, *metadata = args
        for item in metadata:
            if isinstance(item, Constructor):
                return item
        return derive(base)

    if origin is Union or origin is types.UnionType:
        return _resolve_union(args)

    if origin is Literal:
        values = args
        return Constructor(lambda cursor: choose(cursor, values), name=repr(tp))

    if origin is tuple:
        return _resolve_tuple(args)

    element_builder = _ELEMENT_BUILDERS.get(origin)
    if element_builder is not None and len(args) == 1:
        return element_builder(derive(args[0]))

    mapping_builder = _MAPPING_BUILDERS.get(origin)
    if mapping_builder is not None and len(args) == 2:
        return mapping_builder(derive(args[0]), derive(args[1]))

    if isinstance(origin, TypeAliasType) and not origin.__type_params__:
        return derive(origin)

    raise IncorrectUsageError(ErrorTemplate.unsupported_type(_type_name(tp)))


def _resolve_union(args: tuple[Any, ...]) -> Constructor[Any]:
    members = [arg for arg in args if arg is not types.NoneType]
    if len(members) == 1:
        inner = derive(members[0])
    else:
        inner = arbitrary_one_of(*(derive(member) for member in members))
    if len(members) < len(args):
        return arbitrary_option(inner)
    return inner


def _resolve_tuple(args: tuple[Any, ...]) -> Constructor[Any]:
    if len(args) == 2 and args[1] is Ellipsis:
        return arbitrary_list(derive(args[0])).map(tuple, name=f"tuple[{_type_name(args[0])}, ...]")
    # tuple[()] reports no args: the empty record.
    return arbitrary_tuple(*(derive(arg) for arg in args))


def _resolve_class(cls: type) -> Constructor[Any]:
    # bool subclasses int: the table lookup is exact, so bool never becomes i64.
    scalar = _SCALARS.get(cls)
    if scalar is not None:
        return scalar

    if issubclass(cls, Enum):
        members = tuple(cls)
        if not members:
            raise IncorrectUsageError(ErrorTemplate.no_choices())
        return Constructor(lambda cursor: choose(cursor, members), name=cls.__qualname__)

    if dataclasses.is_dataclass(cls):
        return _resolve_dataclass(cls)

    raise IncorrectUsageError(ErrorTemplate.unsupported_type(_type_name(cls)))


def _resolve_alias(alias: TypeAliasType) -> Constructor[Any]:
    """Constructor for a ``type`` alias, which may refer to itself.

    A forwarding constructor is cached before the alias value resolves, so
    ``type Json = list[Json] | ...`` finds it instead of recursing.
    """
    target: list[Constructor[Any]] = []

    def build(cursor: Cursor) -> Any:
        return target[0](cursor)

    def build_rest(cursor: Cursor) -> Any:
        return target[0].take_rest(cursor)

    ctor = guarded(alias, Constructor(build, build_rest, name=alias.__name__))
    _cache[alias] = ctor
    try:
        target.append(derive(alias.__value__))
    except BaseException:
        _cache.clear()
        raise
    return ctor


# ============================================================================
# DATACLASSES
# ============================================================================


def _resolve_dataclass(cls: type) -> Constructor[Any]:
    fields: list[tuple[str, Constructor[Any]]] = []

    def build(cursor: Cursor) -> Any:
        return cls(**{name: ctor(cursor) for name, ctor in fields})

    def build_rest(cursor: Cursor) -> Any:
        values: dict[str, Any] = {}
        last = len(fields) - 1
        for index, (name, ctor) in enumerate(fields):
            values[name] = ctor.take_rest(cursor) if index == last else ctor(cursor)
        return cls(**values)

    ctor = guarded(cls, Constructor(build, build_rest, name=cls.__qualname__))
    _cache[cls] = ctor
    try:
        fields.extend(_field_constructors(cls))
    except BaseException:
        # Other cached constructors may already reference the placeholder.
        _cache.clear()
        raise
    logger.debug("Derived constructor for %s (%d fields)", cls.__qualname__, len(fields))
    return ctor


def _field_constructors(cls: type) -> Iterator[tuple[str, Constructor[Any]]]:
    try:
        hints = typing.get_type_hints(cls, include_extras=True)
    except NameError as e:
        # Forward reference to a name the class's module never defines.
        raise IncorrectUsageError(
            ErrorTemplate.unsupported_type(e.name or cls.__qualname__)
        ) from e
    for field in dataclasses.fields(cls):
        if not field.init:
            continue
        yield field.name, _field_constructor(cls, field, hints[field.name])


def _field_constructor(
    cls: type, field: dataclasses.Field[Any], hint: Any
) -> Constructor[Any]:
    match field_strategy(field):
        case Derived():
            return derive(hint)
        case Default():
            if field.default is not dataclasses.MISSING:
                return fixed(field.default)
            if field.default_factory is not dataclasses.MISSING:
                factory = field.default_factory
                return Constructor(lambda _cursor: factory(), name=f"default({field.name})")
            raise IncorrectUsageError(
                ErrorTemplate.missing_default(cls.__qualname__, field.name)
            )
        case Custom(func=func):
            return as_constructor(func)
        case Fixed(value=value):
            return Constructor(lambda _cursor: copy.deepcopy(value), name=f"fixed({value!r})")
        case other:
            msg = f"Unknown strategy {other!r} on field '{field.name}'"
            raise TypeError(msg)


# ============================================================================
# ENTRY POINTS
# ============================================================================


def _as_target(target: Any) -> Constructor[Any]:
    if isinstance(target, Constructor):
        return target
    if (
        target is None
        or isinstance(target, (type, TypeAliasType, types.UnionType))
        or typing.get_origin(target) is not None
    ):
        return derive(target)
    return as_constructor(target)


def generate(
    target: Any, data: bytes, *, mode: GenerationMode = GenerationMode.BOUNDED
) -> Any:
    """Run one generation attempt over ``data``.

    A fresh Cursor (and recursion context) is created for the attempt, so
    attempts never share state.

    Args:
        target: A Constructor, a plain ``cursor -> value`` callable, or a
            type annotation to derive
        data: Raw input bytes
        mode: BOUNDED ignores trailing bytes; CONSUME_REMAINING hands them
            to the last sub-value

    Returns:
        The constructed value

    Raises:
        InputExhaustedError: If a decision needed entropy the input lacks
        RecursionLimitExceededError: If a recursive type ran out of input
        IncorrectUsageError: If ``target`` cannot be resolved or misuses a primitive
        ValueError: If ``mode`` names no GenerationMode
    """
    constructor = _as_target(target)
    cursor = Cursor(data)
    if GenerationMode(mode) is GenerationMode.CONSUME_REMAINING:
        return constructor.take_rest(cursor)
    value = constructor(cursor)
    if not cursor.is_empty():
        logger.debug(
            "%s left %d of %d input bytes unused", constructor.name, len(cursor), len(data)
        )
    return value


def generate_take_rest(target: Any, data: bytes) -> Any:
    """Shorthand for generate(target, data, mode=GenerationMode.CONSUME_REMAINING)."""
    return generate(target, data, mode=GenerationMode.CONSUME_REMAINING)


# ============================================================================
# CLASS DECORATOR
# ============================================================================


def _arbitrary(cls: type, cursor: Cursor) -> Any:
    return derive(cls)(cursor)


def _arbitrary_take_rest(cls: type, cursor: Cursor) -> Any:
    return derive(cls).take_rest(cursor)


def _from_bytes(
    cls: type, data: bytes, *, mode: GenerationMode = GenerationMode.BOUNDED
) -> Any:
    return generate(cls, data, mode=mode)


def arbitrary[C: type](cls: C) -> C:
    """Class decorator attaching generation classmethods to a dataclass.

    Adds:
        cls.arbitrary(cursor)            bounded construction
        cls.arbitrary_take_rest(cursor)  consume-remaining construction
        cls.from_bytes(data, mode=...)   one whole attempt via generate()

    The constructor is derived on first use, so classes may refer to types
    defined later in the module.

    Example:
        >>> @arbitrary
        ... @dataclass
        ... class Pair:
        ...     left: int
        ...     right: bool
        >>> Pair.from_bytes(bytes(9))
        Pair(left=0, right=False)

    Raises:
        TypeError: If ``cls`` is not a dataclass
    """
    if not dataclasses.is_dataclass(cls):
        msg = f"@arbitrary requires a dataclass, got {cls.__qualname__}"
        raise TypeError(msg)
    cls.arbitrary = classmethod(_arbitrary)  # type: ignore[attr-defined]
    cls.arbitrary_take_rest = classmethod(_arbitrary_take_rest)  # type: ignore[attr-defined]
    cls.from_bytes = classmethod(_from_bytes)  # type: ignore[attr-defined]
    return cls

import collections.abc
from collections import deque
from collections.abc import Callable
from typing import Any, get_origin

from plugopt.annotations import resolve_annotated, resolve_optional
from plugopt.utils import is_class_and_subclass

# Abstract (interface-level) declarations and the concrete container built for each.
_abstract_collection_mapping: dict[Any, type] = {
    collections.abc.Iterable: list,
    collections.abc.Collection: list,
    collections.abc.Sequence: list,
    collections.abc.MutableSequence: list,
    list: list,
    collections.abc.Set: set,
    collections.abc.MutableSet: set,
    set: set,
    deque: deque,
}

# Declarations that look like collections but can't accumulate values.
IMMUTABLE_COLLECTION_TYPES = frozenset({tuple, frozenset})

MAPPING_TYPES = frozenset({dict, collections.abc.Mapping, collections.abc.MutableMapping})


class UnsupportedCollection(TypeError):
    """Raised by :func:`collection_factory`; callers attach the owning option."""


def collection_origin(hint: Any) -> Any:
    """Unparameterized container of ``hint``, e.g. ``list`` for ``list[int]``."""
    hint = resolve_annotated(resolve_optional(resolve_annotated(hint)))
    return get_origin(hint) or hint


def is_collection_hint(hint: Any) -> bool:
    """Whether ``hint`` declares a repeatable (collection) option."""
    origin = collection_origin(hint)
    if origin in _abstract_collection_mapping or origin in IMMUTABLE_COLLECTION_TYPES:
        return True
    if is_class_and_subclass(origin, (str, bytes, bytearray)) or is_mapping_hint(hint):
        return False
    return is_class_and_subclass(origin, collections.abc.Collection)


def is_mapping_hint(hint: Any) -> bool:
    origin = collection_origin(hint)
    return origin in MAPPING_TYPES or is_class_and_subclass(origin, collections.abc.Mapping)


def _adder(container: Any) -> Callable[[Any], None]:
    if isinstance(container, collections.abc.MutableSet):
        return container.add
    return container.append


def collection_factory(hint: Any) -> Callable[[], tuple[Any, Callable[[Any], None]]]:
    """Resolve the constructor for the collection declared by ``hint``.

    The returned callable produces a fresh, empty container and its ``add`` operation.
    Resolving is separate from constructing so that unsupported declarations fail fast,
    once per field, rather than on every parse.

    Raises
    ------
    UnsupportedCollection
        ``hint`` is immutable (``tuple``, ``frozenset``) or an abstract container
        without a known concrete implementation.
    """
    origin = collection_origin(hint)

    if origin in IMMUTABLE_COLLECTION_TYPES or is_class_and_subclass(origin, (tuple, frozenset)):
        raise UnsupportedCollection(f"{origin.__name__} cannot accumulate values")

    try:
        concrete = _abstract_collection_mapping[origin]
    except (KeyError, TypeError):
        concrete = origin

    if not is_class_and_subclass(concrete, (collections.abc.MutableSequence, collections.abc.MutableSet, deque)):
        raise UnsupportedCollection(f"{getattr(origin, '__name__', origin)} is not a mutable sequence or set")
    if getattr(concrete, "__abstractmethods__", None):
        raise UnsupportedCollection(f"{concrete.__name__} is abstract")

    def factory():
        container = concrete()
        return container, _adder(container)

    return factory


def new_collection(hint: Any) -> tuple[Any, Callable[[Any], None]]:
    """Fresh empty container for ``hint`` and its ``add`` operation."""
    return collection_factory(hint)()

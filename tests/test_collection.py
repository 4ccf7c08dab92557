import collections.abc
import typing
from collections import deque
from typing import Annotated, Optional

import pytest

from plugopt.collection import (
    UnsupportedCollection,
    collection_factory,
    is_collection_hint,
    is_mapping_hint,
    new_collection,
)


class TagList(list):
    pass


class AbstractBag(collections.abc.MutableSet):
    pass


@pytest.mark.parametrize(
    "hint, expected_type",
    [
        (list[int], list),
        (typing.List[int], list),  # noqa: UP006
        (collections.abc.Sequence[int], list),
        (collections.abc.MutableSequence[int], list),
        (collections.abc.Iterable[int], list),
        (collections.abc.Collection[int], list),
        (typing.Sequence[str], list),  # noqa: UP006
        (list, list),
        (set[int], set),
        (typing.AbstractSet[int], set),
        (collections.abc.MutableSet[int], set),
        (deque[int], deque),
        (TagList, TagList),
        (Optional[list[int]], list),
        (Annotated[list[int], "meta"], list),
    ],
)
def test_new_collection(hint, expected_type):
    container, add = new_collection(hint)
    assert type(container) is expected_type
    assert len(container) == 0
    add(1)
    add(2)
    assert list(container) == [1, 2]


def test_new_collection_fresh_instances():
    first, _ = new_collection(list[int])
    second, _ = new_collection(list[int])
    assert first is not second


def test_set_add_deduplicates():
    container, add = new_collection(set[str])
    add("a")
    add("a")
    assert container == {"a"}


@pytest.mark.parametrize(
    "hint",
    [
        tuple[int, ...],
        tuple,
        frozenset[int],
        AbstractBag,
    ],
)
def test_unsupported_collection(hint):
    with pytest.raises(UnsupportedCollection):
        collection_factory(hint)


@pytest.mark.parametrize(
    "hint, expected",
    [
        (list[int], True),
        (set[str], True),
        (tuple[int, ...], True),
        (TagList, True),
        (Optional[list[int]], True),
        (str, False),
        (bytes, False),
        (int, False),
        (dict[str, int], False),
    ],
)
def test_is_collection_hint(hint, expected):
    assert is_collection_hint(hint) is expected


@pytest.mark.parametrize(
    "hint, expected",
    [
        (dict[str, int], True),
        (collections.abc.Mapping[str, int], True),
        (typing.Dict[str, int], True),  # noqa: UP006
        (collections.OrderedDict, True),
        (list[int], False),
    ],
)
def test_is_mapping_hint(hint, expected):
    assert is_mapping_hint(hint) is expected

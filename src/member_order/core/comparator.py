"""
Comparator combinators for ordering syntax nodes.

A comparator takes two nodes and returns an ``Order``. Comparators are built
from key functions (``by``), combined (``chain``) and applied to a
predicate-selected part of a list (``capture``).
"""

from collections.abc import Callable, Sequence
from enum import IntEnum
from functools import cmp_to_key
from typing import Any, TypeVar

T = TypeVar("T")
K = TypeVar("K")


class Order(IntEnum):
    """Result of a three-way comparison."""

    LESS = -1
    EQUAL = 0
    GREATER = 1


Comparator = Callable[[Any, Any], Order]


def by(key: Callable[[T], K], compare: Callable[[K, K], Order]) -> Comparator:
    """Compare two items through a derived key.

    Args:
        key: Function deriving the compared value from an item
        compare: Comparator over derived values

    Returns:
        Comparator over the original items
    """

    def comparator(a: T, b: T) -> Order:
        return compare(key(a), key(b))

    return comparator


def chain(*comparators: Comparator) -> Comparator:
    """Combine comparators, each one only breaking the ties of the previous."""

    def comparator(a: Any, b: Any) -> Order:
        for compare in comparators:
            result = compare(a, b)
            if result != Order.EQUAL:
                return result
        return Order.EQUAL

    return comparator


def prefer(predicate: Callable[[Any], bool]) -> Comparator:
    """Order items matching ``predicate`` before the others."""

    def comparator(a: Any, b: Any) -> Order:
        a_match, b_match = bool(predicate(a)), bool(predicate(b))
        if a_match == b_match:
            return Order.EQUAL
        return Order.LESS if a_match else Order.GREATER

    return comparator


def capture(
    items: Sequence[T],
    predicate: Callable[[T], bool],
    compare: Comparator,
) -> list[T]:
    """Stably sort the selected items of a list among their own slots.

    Items failing ``predicate`` keep their absolute index. Items passing it are
    sorted as one subsequence and written back into the indices the selected
    items occupied, in order. The input sequence is left untouched.

    Example:
        Sorting the ints of [3, "x", 1, 2] ascending gives [1, "x", 2, 3].

    Args:
        items: Sibling nodes
        predicate: Selects the items subject to reordering
        compare: Comparator over selected items

    Returns:
        list: A new list of the same length
    """
    result = list(items)
    slots = [i for i, item in enumerate(result) if predicate(item)]

    # sorted() is stable: ties keep their original relative order
    ordered = sorted((result[i] for i in slots), key=cmp_to_key(compare))

    for slot, item in zip(slots, ordered):
        result[slot] = item

    return result

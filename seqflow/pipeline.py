"""
The Sequence class and its transformation and terminal operations.
"""

from itertools import chain
from typing import Callable, Generic, Iterable, List, Optional, TypeVar

from seqflow.base import EmptySequence, Result
from seqflow.logger import get_logger
from seqflow.util import canonical_key, identity, is_iterable

logger = get_logger()

T = TypeVar("T")
U = TypeVar("U")


class Sequence(Generic[T]):
    """
    Sequence is a wrapper around an ordered, finite list of elements of one type. Transformations
    evaluate eagerly and return a new Sequence backed by a new list, so the Sequence they were
    called on stays valid and can be reused. The only exception is peek, which returns self.
    """

    def __init__(self, source: Optional[List[T]] = None):
        """
        Wrap source directly as the backing list. Prefer seqflow.seq or seqflow.from_slice over
        calling this directly.
        :param source: backing list, or None for an absent (empty) Sequence
        :return: Sequence around source
        """
        if isinstance(source, Sequence):
            source = source._source
        elif source is not None and is_iterable(source):
            source = list(source)
        self._source = source

    def _elements(self) -> List[T]:
        if self._source is None:
            return []
        return self._source

    def __iter__(self):
        return iter(self._elements())

    def __len__(self):
        return len(self._elements())

    def __eq__(self, other):
        if isinstance(other, Sequence):
            return self._elements() == other._elements()
        if isinstance(other, (list, tuple)):
            return self._elements() == list(other)
        return NotImplemented

    def __ne__(self, other):
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    def __repr__(self):
        return repr(self._elements())

    def __str__(self):
        return str(self._elements())

    __hash__ = None

    # Transformations

    def distinct(self) -> "Sequence[T]":
        """
        Remove elements structurally equal to an earlier element. The first occurrence wins and
        survivors keep their relative order. Equality is decided by seqflow.util.canonical_key.

        >>> Sequence([3, 1, 2, 1, 3]).distinct()
        [3, 1, 2]

        :return: Sequence without duplicates
        :raises EncodingFailure: if an element cannot be encoded; no partial result is produced
        """
        source = []
        seen = set()
        for v in self._elements():
            k = canonical_key(v)
            if k not in seen:
                seen.add(k)
                source.append(v)
        logger.d("distinct kept %d of %d elements", len(source), len(self))
        return Sequence(source)

    def try_distinct(self) -> "Result[Sequence[T]]":
        """
        Same as distinct, returning a Result instead of raising EncodingFailure.

        :return: Result holding the deduplicated Sequence, or the EncodingFailure
        """
        return Result.capture(self.distinct)

    def distinct_by(self, key: Callable[[T], object]) -> "Sequence[T]":
        """
        Remove elements whose key(element) equals the key of an earlier element. key must return
        hashable values.

        >>> Sequence(["apple", "avocado", "banana"]).distinct_by(lambda s: s[0])
        ['apple', 'banana']

        :param key: function extracting the comparison key
        :return: Sequence without duplicates
        """
        source = []
        seen = set()
        for v in self._elements():
            k = key(v)
            if k not in seen:
                seen.add(k)
                source.append(v)
        return Sequence(source)

    def filter(self, predicate: Callable[[T], bool]) -> "Sequence[T]":
        """
        Keep the elements for which predicate is truthy.

        >>> Sequence([1, 2, 3, 4]).filter(lambda x: x % 2 == 0)
        [2, 4]

        :param predicate: function returning truthy to keep an element
        :return: filtered Sequence
        """
        return Sequence([v for v in self._elements() if predicate(v)])

    def map(self, func: Callable[[T], T]) -> "Sequence[T]":
        """
        Apply func to every element. The result has the same length and order.

        >>> Sequence([1, 2, 3]).map(lambda x: x * 2)
        [2, 4, 6]

        :param func: function from an element to an element of the same type
        :return: mapped Sequence
        """
        return Sequence([func(v) for v in self._elements()])

    def map_to(self, func: Callable[[T], U]) -> "Sequence[U]":
        """
        Apply func to every element where func may change the element type.

        >>> Sequence([1, 2]).map_to(str)
        ['1', '2']

        :param func: function from an element to any value
        :return: mapped Sequence
        """
        return Sequence([func(v) for v in self._elements()])

    def flat_map(self, func: Callable[[T], Iterable[U]]) -> "Sequence[U]":
        """
        Apply func to every element and concatenate the iterables it returns.

        >>> Sequence([[1, 2], [3]]).flat_map(lambda x: x)
        [1, 2, 3]

        :param func: function from an element to an iterable
        :return: flattened Sequence
        """
        return Sequence(list(chain.from_iterable(func(v) for v in self._elements())))

    def peek(self, action: Callable[[T], None]) -> "Sequence[T]":
        """
        Call action on each element in order, for observation. Returns this same Sequence; no
        copy is made.

        :param action: function called on each element
        :return: self
        """
        for v in self._elements():
            action(v)
        return self

    def skip(self, n: int) -> "Sequence[T]":
        """
        Drop the first n elements. n <= 0 returns this Sequence unchanged.

        >>> Sequence([1, 2, 3]).skip(1)
        [2, 3]

        :param n: number of elements to drop
        :return: Sequence without its first n elements
        """
        if n <= 0:
            return self
        source = self._elements()
        if n >= len(source):
            return Sequence([])
        return Sequence(source[n:])

    def limit(self, max_size: int) -> "Sequence[T]":
        """
        Keep at most the first max_size elements. A negative max_size gives an empty Sequence.
        On an absent Sequence this is a no-op returning self.

        >>> Sequence([1, 2, 3]).limit(2)
        [1, 2]

        :param max_size: maximum number of elements to keep
        :return: truncated Sequence
        """
        if self._source is None:
            return self
        if max_size < 0:
            return Sequence([])
        return Sequence(self._source[:max_size])

    def sorted(self, key: Optional[Callable[[T], object]] = None, reverse: bool = False) -> "Sequence[T]":
        """
        Stable sort of the elements.

        :param key: key function passed to sorted
        :param reverse: sort in descending order
        :return: sorted Sequence
        """
        return Sequence(sorted(self._elements(), key=key, reverse=reverse))

    def reverse(self) -> "Sequence[T]":
        return Sequence(self._elements()[::-1])

    def concat(self, *others) -> "Sequence[T]":
        """
        Append the elements of each of others, in argument order.

        >>> Sequence([1]).concat(Sequence([2]), [3])
        [1, 2, 3]

        :param others: Sequences or iterables to append
        :return: concatenated Sequence
        """
        source = list(self._elements())
        for other in others:
            source.extend(other)
        return Sequence(source)

    # Terminal operations

    def all_match(self, predicate: Callable[[T], bool]) -> bool:
        """
        True iff every element satisfies predicate. Vacuously True on an empty Sequence.

        :param predicate: function to test elements with
        :return: whether all elements match
        """
        for v in self._elements():
            if not predicate(v):
                return False
        return True

    def any_match(self, predicate: Callable[[T], bool]) -> bool:
        """
        True iff at least one element satisfies predicate. False on an empty Sequence.

        :param predicate: function to test elements with
        :return: whether any element matches
        """
        for v in self._elements():
            if predicate(v):
                return True
        return False

    def none_match(self, predicate: Callable[[T], bool]) -> bool:
        return not self.any_match(predicate)

    def for_each(self, action: Callable[[T], None]) -> None:
        for v in self._elements():
            action(v)

    def reduce(self, initial: T, accumulator: Callable[[T, T], T]) -> T:
        """
        Left fold of the elements, starting from initial. On an empty Sequence initial is
        returned unchanged. The accumulator is applied strictly left to right.

        >>> Sequence([1, 2, 3]).reduce(0, lambda acc, x: acc + x)
        6

        :param initial: starting accumulator value
        :param accumulator: function of (accumulator, element) returning the next accumulator
        :return: final accumulator value
        """
        acc = initial
        for v in self._elements():
            acc = accumulator(acc, v)
        return acc

    def count(self) -> int:
        return len(self._elements())

    def to_list(self) -> List[T]:
        """
        Return the backing list itself, not a copy. The Sequence never writes to it again, so
        callers should treat it as read only.

        :return: backing list
        """
        if self._source is None:
            return []
        return self._source

    def find_first(self) -> "Result[T]":
        """
        :return: Result holding the first element, failed with EmptySequence when empty
        """
        source = self._elements()
        if not source:
            return Result.fail(EmptySequence("find_first: sequence is empty"))
        return Result.ok(source[0])

    def max(self, key: Optional[Callable[[T], object]] = None) -> "Result[T]":
        """
        :param key: key function to compare elements by
        :return: Result holding the first largest element, failed with EmptySequence when empty
        """
        source = self._elements()
        if not source:
            return Result.fail(EmptySequence("max: sequence is empty"))
        return Result.ok(max(source, key=key or identity))

    def min(self, key: Optional[Callable[[T], object]] = None) -> "Result[T]":
        """
        :param key: key function to compare elements by
        :return: Result holding the first smallest element, failed with EmptySequence when empty
        """
        source = self._elements()
        if not source:
            return Result.fail(EmptySequence("min: sequence is empty"))
        return Result.ok(min(source, key=key or identity))

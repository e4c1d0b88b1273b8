import enum
import functools
import operator
import sys
import threading
from collections import namedtuple
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal

import pytest

from seqflow import EncodingFailure, canonical_key
from seqflow.util import identity, is_iterable, is_primitive

Pair = namedtuple("Pair", ["left", "right"])


class Color(enum.Enum):
    RED = 1
    BLUE = 2


@dataclass(frozen=True)
class Tag:
    name: str
    labels: tuple


class Guarded:
    def __init__(self):
        self.lock = threading.Lock()


def test_key_is_deterministic_for_equal_content():
    assert canonical_key([1, "a", (2.5, None)]) == canonical_key([1, "a", (2.5, None)])


def test_key_ignores_object_identity():
    shared = "x" * 50
    same = [shared, shared]
    separate = ["x" * 50, "".join(["x"] * 50)]
    assert canonical_key(same) == canonical_key(separate)


def test_key_distinguishes_types():
    assert canonical_key(1) != canonical_key(True)
    assert canonical_key(1) != canonical_key(1.0)
    assert canonical_key([1, 2]) != canonical_key((1, 2))
    assert canonical_key(Pair(1, 2)) != canonical_key((1, 2))


def test_key_is_order_sensitive_for_sequences():
    assert canonical_key([1, 2]) != canonical_key([2, 1])


def test_key_is_content_keyed_for_dicts_and_sets():
    assert canonical_key({"a": 1, "b": 2}) == canonical_key({"b": 2, "a": 1})
    assert canonical_key({3, 1, 2}) == canonical_key({1, 2, 3})
    assert canonical_key(frozenset("ab")) != canonical_key({"a", "b"})


def test_key_for_objects():
    assert canonical_key(Tag("t", (1,))) == canonical_key(Tag("t", (1,)))
    assert canonical_key(Tag("t", (1,))) != canonical_key(Tag("t", (2,)))
    assert canonical_key(Color.RED) == canonical_key(Color.RED)
    assert canonical_key(Color.RED) != canonical_key(Color.BLUE)
    moment = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
    assert canonical_key(moment) == canonical_key(moment.replace())
    assert canonical_key(Decimal("1.50")) == canonical_key(Decimal("1.50"))


def test_key_for_classes():
    assert canonical_key(int) == canonical_key(int)
    assert canonical_key(int) != canonical_key(str)


@pytest.mark.parametrize(
    "value",
    [
        lambda x: x,
        len,
        [1, identity],
        {"callback": print},
        (x for x in range(3)),
        threading.Lock(),
        Guarded(),
        str.upper,
        object.__init__,
        functools.partial(len),
        operator.itemgetter(0),
        operator.attrgetter("name"),
        operator.methodcaller("strip"),
        [int.real],
    ],
)
def test_key_rejects_capabilities(value):
    with pytest.raises(EncodingFailure):
        canonical_key(value)


def test_key_rejects_cycles():
    loop = [1]
    loop.append(loop)
    with pytest.raises(EncodingFailure, match="cyclic"):
        canonical_key(loop)


def test_key_allows_shared_references():
    inner = [1]
    assert canonical_key([inner, inner]) == canonical_key([[1], [1]])


def test_encoding_failure_names_type():
    with pytest.raises(EncodingFailure) as info:
        canonical_key(threading.Lock())
    assert "lock" in str(info.value)
    assert isinstance(info.value, TypeError)


def test_helpers():
    assert is_primitive("abc")
    assert not is_primitive([])
    assert is_iterable(iter([1]))
    assert not is_iterable([1])
    obj = object()
    assert identity(obj) is obj


def _nested(depth):
    value = []
    for _ in range(depth):
        value = [value]
    return value


def test_key_rejects_values_nested_past_recursion_limit():
    with pytest.raises(EncodingFailure, match="nested too deeply"):
        canonical_key(_nested(sys.getrecursionlimit() * 3))

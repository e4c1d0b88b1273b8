import io
import enum
import time
import types
import queue
import threading
import operator
import functools
import collections
from pickle import PicklingError

import dill as serializer

from seqflow.base import EncodingFailure

PROTOCOL = serializer.HIGHEST_PROTOCOL

_PRIMITIVE_TYPES = (bool, int, float, str, bytes)

# values that carry behavior or live resources rather than data
_CAPABILITY_TYPES = (
    types.FunctionType,
    types.BuiltinFunctionType,
    types.MethodType,
    types.MethodWrapperType,
    types.MethodDescriptorType,
    types.WrapperDescriptorType,
    types.ClassMethodDescriptorType,
    types.GetSetDescriptorType,
    types.MemberDescriptorType,
    types.ModuleType,
    types.GeneratorType,
    types.CoroutineType,
    types.AsyncGeneratorType,
    functools.partial,
    operator.itemgetter,
    operator.attrgetter,
    operator.methodcaller,
    type(threading.Lock()),
    type(threading.RLock()),
    threading.Thread,
    queue.Queue,
    queue.SimpleQueue,
    io.IOBase,
)


def is_primitive(val):
    """
    Checks if the passed value is a primitive type.

    >>> is_primitive(1)
    True

    >>> is_primitive("abc")
    True

    >>> is_primitive(True)
    True

    >>> is_primitive({})
    False

    >>> is_primitive([])
    False

    :param val: value to check
    :return: True if value is a primitive, else False
    """
    return isinstance(val, (str, bool, float, complex, bytes, int))


def identity(arg):
    """
    Function which returns the argument. Used as a default key function.

    >>> obj = object()
    >>> obj is identity(obj)
    True

    :param arg: object to take identity of
    :return: return arg
    """
    return arg


def is_iterable(val):
    """
    Check if val is not a list, but is a collections.Iterable type. This is used to determine
    when list() should be called on val

    >>> l = [1, 2]
    >>> is_iterable(l)
    False
    >>> is_iterable(iter(l))
    True

    :param val: value to check
    :return: True if it is not a list, but is a collections.Iterable
    """
    if isinstance(val, list):
        return False
    return isinstance(val, collections.abc.Iterable)


def timer(start_time=None):
    if start_time is None:
        return time.monotonic()
    return time.monotonic() - start_time


def type_name(val_type):
    return "{}.{}".format(val_type.__module__, val_type.__qualname__)


def canonical_key(value):
    """
    Derive the comparison key Sequence.distinct uses for value. Two values are duplicates iff
    their keys are byte-identical.

    The value is first reduced to a canonical form made only of tuples and primitives, each
    level tagged with the qualified type name, so 1, 1.0 and True are all different keys.
    Sequences and object fields keep their order, while dict entries and set members are sorted
    by their own encoded keys. The form is then pickled without a memo, so the output depends on
    content alone and never on object identity.

    Every call encodes the whole value; nothing is cached or shared between elements.

    >>> canonical_key((1, "a")) == canonical_key((1, "a"))
    True
    >>> canonical_key({"a": 1, "b": 2}) == canonical_key({"b": 2, "a": 1})
    True
    >>> canonical_key(1) == canonical_key(True)
    False

    :param value: value to encode
    :return: canonical bytes for value
    :raises EncodingFailure: if value holds a function, lock, queue, open file, generator or any
        other object without a data representation, refers to itself, or is nested deeper than
        the interpreter recursion limit
    """
    try:
        return _dump(_canonical_form(value, set()))
    except RecursionError as exc:
        raise EncodingFailure(
            "canonical_key: value of type {} nested too deeply".format(type_name(type(value))),
            value_type=type(value),
        ) from exc


def _dump(form):
    buffer = io.BytesIO()
    pickler = serializer.Pickler(buffer, PROTOCOL)
    pickler.fast = True
    pickler.dump(form)
    return buffer.getvalue()


def _canonical_form(value, active):
    val_type = type(value)
    tag = type_name(val_type)
    if value is None or value is Ellipsis:
        return (tag,)
    if isinstance(value, type):
        return ("type", type_name(value))
    if isinstance(value, _CAPABILITY_TYPES):
        raise EncodingFailure(
            "canonical_key: cannot encode value of type {}".format(tag), value_type=val_type
        )
    if isinstance(value, enum.Enum):
        return (tag, value.name)
    if isinstance(value, complex):
        return (tag, value.real, value.imag)
    if is_primitive(value):
        if val_type not in _PRIMITIVE_TYPES:
            value = next(base for base in _PRIMITIVE_TYPES if isinstance(value, base))(value)
        return (tag, value)
    if isinstance(value, (bytearray, memoryview)):
        return (tag, bytes(value))

    marker = id(value)
    if marker in active:
        raise EncodingFailure(
            "canonical_key: cyclic reference through value of type {}".format(tag),
            value_type=val_type,
        )
    active.add(marker)
    try:
        if isinstance(value, (list, tuple, collections.deque)):
            return (tag, tuple(_canonical_form(item, active) for item in value))
        if isinstance(value, dict):
            entries = []
            for key, item in value.items():
                key_form = _canonical_form(key, active)
                entries.append((_dump(key_form), key_form, _canonical_form(item, active)))
            entries.sort(key=lambda entry: entry[0])
            return (tag, tuple((key_form, item_form) for _, key_form, item_form in entries))
        if isinstance(value, (set, frozenset)):
            members = [_canonical_form(item, active) for item in value]
            members.sort(key=_dump)
            return (tag, tuple(members))
        return (tag, _reduced_form(value, active))
    finally:
        active.discard(marker)


def _reduced_form(value, active):
    """
    Encode an arbitrary object through the pickle reduction protocol: the constructor it names,
    its arguments and its state.
    """
    val_type = type(value)
    try:
        reduced = value.__reduce_ex__(PROTOCOL)
    except (TypeError, ValueError, AttributeError, RuntimeError, PicklingError) as exc:
        raise EncodingFailure(
            "canonical_key: cannot encode value of type {}".format(type_name(val_type)),
            value_type=val_type,
        ) from exc

    if isinstance(reduced, str):
        return ("global", reduced)

    reduced = tuple(reduced) + (None,) * (5 - len(reduced))
    func, args, state, listitems, dictitems = reduced[:5]
    args = tuple(args or ())
    func_name = getattr(func, "__name__", None)
    if func_name == "__newobj__":
        constructor, args = args[0], args[1:]
    elif func_name == "__newobj_ex__":
        constructor, args = args[0], (tuple(args[1]), dict(args[2]))
    else:
        constructor = func

    if isinstance(constructor, type):
        constructor_name = type_name(constructor)
    elif getattr(constructor, "__qualname__", None) and getattr(constructor, "__module__", None):
        constructor_name = "{}.{}".format(constructor.__module__, constructor.__qualname__)
    else:
        raise EncodingFailure(
            "canonical_key: cannot name constructor of type {}".format(type_name(val_type)),
            value_type=val_type,
        )

    return (
        constructor_name,
        _canonical_form(args, active),
        _canonical_form(state, active),
        _canonical_form(list(listitems) if listitems is not None else None, active),
        _canonical_form(list(dictitems) if dictitems is not None else None, active),
    )

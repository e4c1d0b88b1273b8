from typing import Any, Callable, Generic, Optional, TypeVar

T = TypeVar("T")


class SequenceError(Exception):
    """Base class for every error raised by seqflow."""


class PreconditionViolation(SequenceError, ValueError):
    """Raised when a constructor is called with arguments outside its contract."""


class EncodingFailure(SequenceError, TypeError):
    """Raised when an element cannot be turned into a canonical comparison key."""

    def __init__(self, message, value_type=None):
        super(EncodingFailure, self).__init__(message)
        self.value_type = value_type


class DrainTimeout(SequenceError, TimeoutError):
    """Raised when a bounded drain passes its deadline."""

    def __init__(self, message, collected=0):
        super(DrainTimeout, self).__init__(message)
        self.collected = collected


class EmptySequence(SequenceError, LookupError):
    pass


class Result(Generic[T]):
    """
    Explicit success or failure of an operation. Exactly one of value or error is meaningful,
    decided by is_ok.

    >>> Result.ok(3).unwrap()
    3
    >>> Result.fail(EmptySequence("empty")).unwrap_or(0)
    0
    """

    __slots__ = ("_value", "_error")

    def __init__(self, value=None, error: Optional[SequenceError] = None):
        self._value = value
        self._error = error

    @classmethod
    def ok(cls, value: T) -> "Result[T]":
        return cls(value=value)

    @classmethod
    def fail(cls, error: SequenceError) -> "Result[T]":
        if error is None:
            raise ValueError("Result.fail requires an error")
        return cls(error=error)

    @classmethod
    def capture(cls, func: Callable[..., T], *args, **kwargs) -> "Result[T]":
        """
        Call func and wrap its return value, or the SequenceError it raised. Any other exception
        propagates unchanged.
        :param func: function to call
        :return: Result of calling func
        """
        try:
            return cls.ok(func(*args, **kwargs))
        except SequenceError as error:
            return cls.fail(error)

    @property
    def is_ok(self) -> bool:
        return self._error is None

    @property
    def value(self) -> Optional[T]:
        return self._value

    @property
    def error(self) -> Optional[SequenceError]:
        return self._error

    def unwrap(self) -> T:
        if self._error is not None:
            raise self._error
        return self._value

    def unwrap_or(self, default: Any) -> Any:
        if self._error is not None:
            return default
        return self._value

    def __bool__(self):
        return self.is_ok

    def __eq__(self, other):
        if not isinstance(other, Result):
            return NotImplemented
        return self._value == other._value and self._error is other._error

    def __repr__(self):
        if self.is_ok:
            return "Result.ok({!r})".format(self._value)
        return "Result.fail({!r})".format(self._error)

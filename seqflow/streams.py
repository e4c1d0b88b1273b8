"""
Source adapters: every way of building the initial Sequence. Each one materializes its input
completely before returning.
"""

import math
import queue

from seqflow.base import DrainTimeout, PreconditionViolation, Result
from seqflow.logger import get_logger
from seqflow.pipeline import Sequence
from seqflow.util import is_iterable, is_primitive, timer

logger = get_logger()

# queue.ShutDown only exists on Python 3.13+
_SHUTDOWN = getattr(queue, "ShutDown", ())


class _Closed(object):
    def __repr__(self):
        return "CLOSED"


CLOSED = _Closed()


def seq(*args):
    """
    Primary entrypoint. With a single list, Sequence or other non-primitive iterable argument
    the Sequence wraps it, otherwise the arguments themselves become the elements.

    >>> seq([1, 2, 3])
    [1, 2, 3]

    >>> seq(1, 2, 3)
    [1, 2, 3]

    >>> seq("abc")
    ['abc']

    :param args: a single iterable, or the elements
    :return: Sequence wrapping args
    """
    if len(args) == 1:
        arg = args[0]
        if isinstance(arg, (list, Sequence)) or (is_iterable(arg) and not is_primitive(arg)):
            return from_slice(arg)
    return of(*args)


def of(*elems):
    """
    :param elems: elements of the Sequence, in order
    :return: Sequence of elems
    """
    return from_slice(list(elems))


def from_slice(source):
    """
    Wrap source as the backing list of a new Sequence. A list is used as is with no copy, and
    None gives an empty Sequence. Any other iterable is read into a list once.

    :param source: list, Sequence, iterable or None
    :return: Sequence around source
    """
    return Sequence(source)


def generate(generator, max_size=None, timeout=None):
    """
    Build a Sequence by pulling from a producer. generator is called once and must return a
    pull function; each call to it returns (value, has_more). Values are kept while has_more is
    true and pulling stops at the first false, whose value is dropped.

    Blocks until the producer is exhausted unless bounded. max_size stops pulling once that
    many values are kept. timeout is a deadline in seconds, checked before every pull.

    :param generator: zero argument factory returning the pull function
    :param max_size: maximum number of values to keep
    :param timeout: seconds before DrainTimeout is raised
    :return: Sequence of the pulled values
    :raises DrainTimeout: if the deadline passes before the producer is exhausted
    """
    start = timer()
    deadline = None if timeout is None else start + timeout
    source = []
    pull = generator()
    while max_size is None or len(source) < max_size:
        if deadline is not None and timer() >= deadline:
            _timed_out("generate", timeout, source)
        item, has_more = pull()
        if not has_more:
            break
        source.append(item)
    else:
        logger.warn("generate stopped at max_size=%d before the producer was exhausted", max_size)
    logger.d("generate pulled %d values in %.4fs", len(source), timer(start))
    return from_slice(source)


def from_channel(source, max_size=None, timeout=None, sentinel=CLOSED):
    """
    Build a Sequence by draining a channel in arrival order until it is closed.

    Queue-like sources (anything with get and put, such as queue.Queue or
    multiprocessing.Queue) are closed by putting sentinel on them, compared by identity, or by
    Queue.shutdown() where the interpreter provides it. Use sentinel=None for queues that cross
    process boundaries. Any other iterable is closed when it is exhausted.

    max_size stops draining once that many values are read. timeout is a total deadline in
    seconds. For queues it bounds each blocking get, and once it has passed values already
    waiting are still read, so timeout=0 drains a queue that is already closed. For iterables it
    is checked between items.

    :param source: queue-like object or iterable
    :param max_size: maximum number of values to read
    :param timeout: seconds before DrainTimeout is raised
    :param sentinel: value marking the end of a queue
    :return: Sequence of the drained values
    :raises DrainTimeout: if the deadline passes before the channel is closed
    """
    start = timer()
    deadline = None if timeout is None else start + timeout
    if _is_queue(source):
        kind = "queue"
        values = _drain_queue(source, max_size, deadline, timeout, sentinel)
    else:
        kind = "iterable"
        values = _drain_iterable(source, max_size, deadline, timeout)
    logger.d("from_channel drained %d values from %s in %.4fs", len(values), kind, timer(start))
    return from_slice(values)


def _is_queue(source):
    return callable(getattr(source, "get", None)) and callable(getattr(source, "put", None))


def _drain_queue(source, max_size, deadline, timeout, sentinel):
    values = []
    while max_size is None or len(values) < max_size:
        try:
            if deadline is None:
                item = source.get()
            else:
                remaining = deadline - timer()
                if remaining > 0:
                    item = source.get(timeout=remaining)
                else:
                    # past the deadline only values already queued are taken
                    item = source.get(block=False)
        except queue.Empty:
            _timed_out("from_channel", timeout, values)
        except _SHUTDOWN:
            break
        if item is sentinel:
            break
        values.append(item)
    else:
        logger.warn("from_channel stopped at max_size=%d before the queue was closed", max_size)
    return values


def _drain_iterable(source, max_size, deadline, timeout):
    values = []
    iterator = iter(source)
    while max_size is None or len(values) < max_size:
        if deadline is not None and timer() >= deadline:
            _timed_out("from_channel", timeout, values)
        try:
            item = next(iterator)
        except StopIteration:
            break
        values.append(item)
    else:
        logger.warn("from_channel stopped at max_size=%d before the source was exhausted", max_size)
    return values


def _timed_out(name, timeout, collected):
    message = "{}: no end of input after {}s ({} values read)".format(name, timeout, len(collected))
    logger.err(message)
    raise DrainTimeout(message, collected=len(collected))


def from_range(start, end, step=1):
    """
    Numeric Sequence over [start, end], both ends included when end is reached by a whole
    number of steps. There are floor((end - start) / step) + 1 elements.

    >>> from_range(1, 10, 3)
    [1, 4, 7, 10]

    >>> from_range(1, 10, 4)
    [1, 5, 9]

    :param start: first element
    :param end: upper bound, included if reachable
    :param step: positive increment
    :return: Sequence of the range
    :raises PreconditionViolation: if end < start or step <= 0
    """
    if end < start:
        raise PreconditionViolation("from_range: param start should be before param end")
    if step <= 0:
        raise PreconditionViolation("from_range: param step should be positive")

    span = end - start
    if isinstance(span, int) and isinstance(step, int):
        length = span // step + 1
    else:
        length = math.floor(span / step) + 1
    return from_slice([start + i * step for i in range(length)])


def try_from_range(start, end, step=1):
    """
    Same as from_range, returning a Result instead of raising PreconditionViolation.
    """
    return Result.capture(from_range, start, end, step)

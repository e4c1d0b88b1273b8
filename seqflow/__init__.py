"""
Package for chainable, eagerly evaluated sequence pipelines in the style of typed-language stream
APIs: filter, map, distinct, skip, limit, reduce, match and friends. Imports the primary
entrypoint at streams.seq
"""

from seqflow.base import (
    SequenceError,
    PreconditionViolation,
    EncodingFailure,
    DrainTimeout,
    EmptySequence,
    Result,
)
from seqflow.pipeline import Sequence
from seqflow.streams import (
    seq,
    of,
    from_slice,
    generate,
    from_channel,
    from_range,
    try_from_range,
    CLOSED,
)
from seqflow.util import canonical_key
from seqflow.logger import get_logger

__author__ = "Tri Songz"
__license__ = "MIT"
__version__ = "0.1.0"
__maintainer__ = "Tri Songz"
__status__ = "Development"

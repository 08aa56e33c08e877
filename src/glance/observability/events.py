"""Commit outcome events.

Every call into ``DocumentState`` that reaches a decision produces exactly
one event:

- ``DocumentCommitted``: a new snapshot was published after a clean render
- ``CommitSkipped``: the bytes hashed the same as the current snapshot
- ``CommitFailed``: a new error snapshot was published

All events are frozen dataclasses with a ``timestamp_ns`` taken from the
monotonic clock.

Thread Safety:
    All events are frozen (immutable) and safe to share across threads.

"""

import time
from dataclasses import dataclass
from typing import Literal, TypeAlias


@dataclass(frozen=True, slots=True)
class DocumentCommitted:
    """A successful render was published.

    Attributes:
        path: Source file path.
        version: Version number of the new snapshot.
        content_hash: Digest of the rendered bytes.
        size: Number of source bytes rendered.
        render_ms: Time spent rendering in milliseconds.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    path: str
    version: int
    content_hash: str
    size: int
    render_ms: float
    timestamp_ns: int


@dataclass(frozen=True, slots=True)
class CommitSkipped:
    """A commit was a no-op because the content hash did not change."""

    path: str
    version: int
    content_hash: str
    timestamp_ns: int


@dataclass(frozen=True, slots=True)
class CommitFailed:
    """An error snapshot was published.

    Attributes:
        path: Source file path.
        version: Version number of the error snapshot.
        kind: ``render`` for undecodable/unrenderable bytes, ``access`` when
            the file could not be read at all.
        message: Human-readable error description shown on the error page.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    path: str
    version: int
    kind: Literal["render", "access"]
    message: str
    timestamp_ns: int


CommitEvent: TypeAlias = DocumentCommitted | CommitSkipped | CommitFailed


def now_ns() -> int:
    """Return the current monotonic clock value in nanoseconds."""
    return time.monotonic_ns()

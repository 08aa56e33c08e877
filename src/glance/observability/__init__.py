"""Observability — a queryable record of every commit decision.

Quick Start:
    >>> from glance.observability import CommitCollector, EventLog
    >>> log = EventLog()
    >>> collector = CommitCollector(log)
    >>> # pass collector to DocumentState(collector=...)

"""

from glance.observability.collector import CommitCollector
from glance.observability.events import (
    CommitEvent,
    CommitFailed,
    CommitSkipped,
    DocumentCommitted,
    now_ns,
)
from glance.observability.log import EventLog

__all__ = [
    "CommitCollector",
    "CommitEvent",
    "CommitFailed",
    "CommitSkipped",
    "DocumentCommitted",
    "EventLog",
    "now_ns",
]

"""Commit collector — records DocumentState outcomes into an EventLog.

``DocumentState`` calls one ``record_*`` method per commit decision.

Thread Safety:
    Delegates to ``EventLog``, which is internally locked.

"""

from __future__ import annotations

from glance.observability.events import (
    CommitFailed,
    CommitSkipped,
    DocumentCommitted,
    now_ns,
)
from glance.observability.log import EventLog


class CommitCollector:
    """Builds commit events and stores them in a log.

    Args:
        log: The EventLog to store events in.  A fresh one is created
            when omitted.

    """

    __slots__ = ("_log",)

    def __init__(self, log: EventLog | None = None) -> None:
        self._log = log if log is not None else EventLog()

    @property
    def log(self) -> EventLog:
        """The underlying event log."""
        return self._log

    def record_commit(
        self,
        path: str,
        version: int,
        content_hash: str,
        *,
        size: int = 0,
        render_ms: float = 0.0,
    ) -> None:
        self._log.append(
            DocumentCommitted(
                path=path,
                version=version,
                content_hash=content_hash,
                size=size,
                render_ms=render_ms,
                timestamp_ns=now_ns(),
            )
        )

    def record_skip(self, path: str, version: int, content_hash: str) -> None:
        self._log.append(
            CommitSkipped(
                path=path,
                version=version,
                content_hash=content_hash,
                timestamp_ns=now_ns(),
            )
        )

    def record_failure(
        self,
        path: str,
        version: int,
        message: str,
        *,
        kind: str = "render",
    ) -> None:
        self._log.append(
            CommitFailed(
                path=path,
                version=version,
                kind=kind,  # type: ignore[arg-type]
                message=message,
                timestamp_ns=now_ns(),
            )
        )

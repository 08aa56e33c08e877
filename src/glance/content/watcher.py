"""File watcher — re-commits the document whenever the source file changes.

Watches the source file's parent directory with watchfiles so that
editors which write a temporary file and rename it over the original, or
delete and re-create it, are still seen.  Events for other files in the
directory are filtered out.

Flow:
    start        -> one catch-up refresh once the watch is registered
    awatch batch -> producer task -> asyncio.Queue -> consumer task
    consumer     -> drain backlog -> refresh() in a worker thread
    refresh()    -> read bytes    -> DocumentState.commit()

The queue has a single consumer and refreshes run one at a time, so
commits are applied in the order the file changed.  Events that pile up
while a render is running are coalesced into one refresh, which reads
whatever is on disk at that point.
"""

from __future__ import annotations

import asyncio
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from watchfiles import Change

from glance._errors import FileAccessError

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from glance._types import ChangeKind
    from glance.config import GlanceConfig
    from glance.content.state import DocumentState


@dataclass(frozen=True, slots=True)
class ChangeEvent:
    """A filesystem change to the source file.

    Attributes:
        path: Absolute path to the changed file.
        kind: Type of filesystem change.

    """

    path: Path
    kind: ChangeKind


# Mapping from watchfiles Change enum to our kind literals.
_CHANGE_KIND_MAP: dict[Change, ChangeKind] = {
    Change.added: "created",
    Change.modified: "modified",
    Change.deleted: "deleted",
}


def read_source(path: Path) -> bytes:
    """Read the raw bytes of the source file.

    Raises:
        FileAccessError: If the file is missing, not a file, or unreadable.

    """
    try:
        return path.read_bytes()
    except FileNotFoundError as exc:
        msg = f"No such file: {path}"
        raise FileAccessError(msg) from exc
    except IsADirectoryError as exc:
        msg = f"Not a file: {path}"
        raise FileAccessError(msg) from exc
    except OSError as exc:
        msg = f"Cannot read {path}: {exc.strerror or exc}"
        raise FileAccessError(msg) from exc


class DocumentWatcher:
    """Keeps a DocumentState in step with the file on disk.

    Args:
        config: Resolved configuration (source path, debounce, polling).
        state: The document state to commit into.

    """

    def __init__(self, config: GlanceConfig, state: DocumentState) -> None:
        self._config = config
        self._state = state
        self._path = config.source
        self._stop_event: asyncio.Event | None = None
        self._running = False

    @property
    def is_running(self) -> bool:
        """Whether ``changes()`` is currently watching the filesystem."""
        return self._running

    def prime(self) -> bool:
        """Perform the initial commit from the file's current contents."""
        return self.refresh()

    def refresh(self) -> bool:
        """Read the source file and commit it.

        An unreadable file is committed as an error snapshot; this never
        raises for a bad read.

        Returns:
            True if a new snapshot was published.

        """
        try:
            data = read_source(self._path)
        except FileAccessError as exc:
            return self._state.commit_failure(exc)
        return self._state.commit(data)

    def stop(self) -> None:
        """Ask ``changes()`` (and therefore ``run()``) to finish."""
        if self._stop_event is not None:
            self._stop_event.set()

    def _is_source(self, change: Change, path: str) -> bool:
        return Path(path) == self._path

    async def changes(self) -> AsyncIterator[ChangeEvent]:
        """Yield one ChangeEvent per debounced batch touching the source.

        Runs until ``stop()`` is called.  watchfiles' ``debounce`` groups
        the events of a single logical edit into one batch; only the last
        change in a batch is reported.

        """
        from watchfiles import awatch

        self._stop_event = asyncio.Event()
        self._running = True
        try:
            async for raw_changes in awatch(
                self._path.parent,
                watch_filter=self._is_source,
                stop_event=self._stop_event,
                debounce=self._config.debounce_ms,
                step=min(50, self._config.debounce_ms),
                force_polling=self._config.force_polling,
                poll_delay_ms=self._config.poll_interval_ms,
                recursive=False,
            ):
                batch = [
                    ChangeEvent(path=Path(p), kind=_CHANGE_KIND_MAP.get(c, "modified"))
                    for c, p in raw_changes
                    if Path(p) == self._path
                ]
                if batch:
                    yield batch[-1]
        finally:
            self._running = False

    async def run(self) -> None:
        """Watch the source and commit every change until stopped.

        Edits made between ``prime()`` and the start of watching are picked
        up by one refresh as soon as the watch is registered.

        Raises:
            FileAccessError: If watching fails (directory removed, OS watch
                limit reached).  The failure is also printed to stderr.

        """
        queue: asyncio.Queue[ChangeEvent | None] = asyncio.Queue()

        async def _produce() -> None:
            try:
                async for event in self.changes():
                    queue.put_nowait(event)
            finally:
                queue.put_nowait(None)

        producer = asyncio.create_task(_produce())
        try:
            # awatch registers its watch before its first suspension point.
            await asyncio.sleep(0)
            await self._commit(ChangeEvent(path=self._path, kind="modified"))
            await self._consume(queue)
        finally:
            producer.cancel()
            (outcome,) = await asyncio.gather(producer, return_exceptions=True)

        if isinstance(outcome, Exception):
            msg = f"Stopped watching {self._path}: {outcome}"
            print(f"  {msg}", file=sys.stderr)
            raise FileAccessError(msg) from outcome

    async def _consume(self, queue: asyncio.Queue[ChangeEvent | None]) -> None:
        while True:
            event = await queue.get()
            if event is None:
                return
            finished = False
            # Fold anything that arrived during the previous commit.
            while not queue.empty():
                pending = queue.get_nowait()
                if pending is None:
                    finished = True
                    break
                event = pending
            await self._commit(event)
            if finished:
                return

    async def _commit(self, event: ChangeEvent) -> None:
        try:
            changed = await asyncio.to_thread(self.refresh)
        except Exception as exc:
            print(f"  Commit error: {event.path.name}: {exc}", file=sys.stderr)
            return
        if changed:
            _report(self._state, event)


def _report(state: DocumentState, event: ChangeEvent) -> None:
    snapshot = state.current_snapshot()
    if snapshot.ok:
        print(f"  v{snapshot.version}  {event.kind}: {event.path.name}", file=sys.stderr)
    else:
        print(f"  v{snapshot.version}  error: {snapshot.error}", file=sys.stderr)

"""Document state — the single source of truth for what is being served.

Holds the latest rendered snapshot of the source file plus its version.
The HTTP layer only ever calls ``current_snapshot()``; the watcher is the
only caller of ``commit()`` / ``commit_failure()``.

Thread Safety:
    Snapshots are frozen and published by a single attribute assignment,
    so a reader sees either the previous snapshot or the next one in full.
    Writers are serialized by a lock so that the version read, the render
    and the swap happen as one step; readers never take the lock.

"""

from __future__ import annotations

import hashlib
import threading
import time
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from glance._errors import FileAccessError, GlanceError, RenderError

if TYPE_CHECKING:
    from glance._types import ContentHash, SourcePath, Version
    from glance.content.renderer import MarkdownRenderer
    from glance.observability.collector import CommitCollector


def content_hash(data: bytes) -> ContentHash:
    """Digest used to tell real edits apart from metadata-only touches."""
    return hashlib.sha256(data).hexdigest()


@dataclass(frozen=True, slots=True)
class Snapshot:
    """One published state of the document.

    Attributes:
        path: The source file.
        version: Number of commits published so far (0 before the first).
        html: The full page to serve (document or error page).
        content_hash: Digest of the bytes behind ``html``; ``None`` before
            the first commit and while the file is unreadable.
        error: Message of the failure that produced an error page, else
            ``None``.

    """

    path: SourcePath
    version: Version
    html: str
    content_hash: ContentHash | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        """True if this snapshot holds a rendered document."""
        return self.error is None


class DocumentState:
    """Versioned, atomically swapped snapshot of one rendered document.

    Args:
        path: Source file the snapshots describe.
        renderer: Renderer used on every effective commit.
        collector: Optional observability sink for commit outcomes.

    """

    def __init__(
        self,
        path: SourcePath,
        renderer: MarkdownRenderer,
        *,
        collector: CommitCollector | None = None,
    ) -> None:
        self._path = path
        self._renderer = renderer
        self._collector = collector
        self._write_lock = threading.Lock()
        self._snapshot = Snapshot(path=path, version=0, html="")

    @property
    def path(self) -> Path:
        return self._path

    @property
    def version(self) -> Version:
        return self._snapshot.version

    def current_snapshot(self) -> Snapshot:
        """Return the latest published snapshot.  Never blocks."""
        return self._snapshot

    def commit(self, data: bytes) -> bool:
        """Render *data* and publish it as the next version.

        A no-op when *data* hashes the same as the current snapshot.  A
        ``RenderError`` is published as an error page with the attempted
        bytes' hash, so the same broken bytes are not re-committed.

        Returns:
            True if a new snapshot was published.

        """
        digest = content_hash(data)
        with self._write_lock:
            current = self._snapshot
            if digest == current.content_hash:
                if self._collector is not None:
                    self._collector.record_skip(str(self._path), current.version, digest)
                return False

            version = current.version + 1
            t0 = time.perf_counter()
            try:
                page = self._renderer.render_page(data, version=version)
            except RenderError as exc:
                self._publish_error(exc, version, digest, kind="render")
                return True
            render_ms = (time.perf_counter() - t0) * 1000

            self._snapshot = Snapshot(
                path=self._path,
                version=version,
                html=page,
                content_hash=digest,
            )
            if self._collector is not None:
                self._collector.record_commit(
                    str(self._path), version, digest,
                    size=len(data), render_ms=render_ms,
                )
            return True

    def commit_failure(self, error: GlanceError) -> bool:
        """Publish an error page for a source that could not be read.

        Repeating the failure that is already being shown is a no-op, so a
        burst of events on a deleted file bumps the version once.

        Returns:
            True if a new snapshot was published.

        """
        message = str(error)
        with self._write_lock:
            current = self._snapshot
            if current.content_hash is None and current.error == message:
                return False
            kind = "access" if isinstance(error, FileAccessError) else "render"
            self._publish_error(error, current.version + 1, None, kind=kind)
            return True

    def _publish_error(
        self,
        error: GlanceError,
        version: int,
        digest: str | None,
        *,
        kind: str,
    ) -> None:
        # Caller holds the write lock.
        self._snapshot = Snapshot(
            path=self._path,
            version=version,
            html=self._renderer.render_error_page(error, version=version),
            content_hash=digest,
            error=str(error),
        )
        if self._collector is not None:
            self._collector.record_failure(str(self._path), version, str(error), kind=kind)

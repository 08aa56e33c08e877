"""Content layer — render, version and watch the previewed document."""

from glance.content.renderer import MarkdownRenderer
from glance.content.state import DocumentState, Snapshot
from glance.content.watcher import ChangeEvent, DocumentWatcher

__all__ = [
    "ChangeEvent",
    "DocumentState",
    "DocumentWatcher",
    "MarkdownRenderer",
    "Snapshot",
]

"""Shared test fixtures for glance."""

from __future__ import annotations

from pathlib import Path

import httpx
import pytest

from glance.config import GlanceConfig
from glance.content.renderer import MarkdownRenderer
from glance.content.state import DocumentState
from glance.content.watcher import DocumentWatcher
from glance.observability import CommitCollector, EventLog


@pytest.fixture
def source(tmp_path: Path) -> Path:
    """A markdown file containing a single heading."""
    path = tmp_path / "doc.md"
    path.write_bytes(b"# Hi\n")
    return path


@pytest.fixture
def config(source: Path) -> GlanceConfig:
    return GlanceConfig(source=source)


@pytest.fixture
def renderer(config: GlanceConfig) -> MarkdownRenderer:
    return MarkdownRenderer.from_config(config)


@pytest.fixture
def collector() -> CommitCollector:
    return CommitCollector(EventLog())


@pytest.fixture
def state(
    config: GlanceConfig,
    renderer: MarkdownRenderer,
    collector: CommitCollector,
) -> DocumentState:
    """An empty (version 0) document state for the fixture source."""
    return DocumentState(config.source, renderer, collector=collector)


@pytest.fixture
def watcher(config: GlanceConfig, state: DocumentState) -> DocumentWatcher:
    return DocumentWatcher(config, state)


def make_client(app: object) -> httpx.AsyncClient:
    """HTTP client bound to an ASGI app in-process (no lifespan)."""
    transport = httpx.ASGITransport(app=app)  # type: ignore[arg-type]
    return httpx.AsyncClient(transport=transport, base_url="http://testserver")


class FakeRenderer:
    """Renderer stand-in whose output exposes the version it was given."""

    def __init__(self) -> None:
        self.calls = 0

    def render_page(self, source: bytes, *, version: int) -> str:
        self.calls += 1
        return f"<p data-v='{version}'>{source.decode('utf-8', 'replace')}</p>"

    def render_error_page(self, error: BaseException, *, version: int) -> str:
        return f"<p data-v='{version}' class='glance-error'>{error}</p>"

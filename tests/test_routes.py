"""Tests for glance.server.routes — the page and the staleness check."""

from __future__ import annotations

import asyncio
from pathlib import Path

import pytest

from glance._errors import FileAccessError
from glance.content.state import DocumentState
from glance.server import UPDATES_ENDPOINT, VERSION_HEADER, create_app
from glance.server.routes import parse_since
from tests.conftest import make_client


# ---------------------------------------------------------------------------
# parse_since
# ---------------------------------------------------------------------------


class TestParseSince:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            (None, 0),
            ("", 0),
            ("3", 3),
            (" 7 ", 7),
            ("abc", 0),
            ("1.5", 0),
            ("-2", -2),
        ],
    )
    def test_values(self, raw: str | None, expected: int) -> None:
        assert parse_since(raw) == expected


# ---------------------------------------------------------------------------
# GET /
# ---------------------------------------------------------------------------


class TestIndex:
    @pytest.mark.asyncio
    async def test_serves_current_page(self, state: DocumentState) -> None:
        state.commit(b"# Hi")
        async with make_client(create_app(state)) as client:
            resp = await client.get("/")

        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("text/html")
        assert resp.headers[VERSION_HEADER] == "1"
        assert "<h1>Hi</h1>" in resp.text
        assert '<meta name="glance-version" content="1">' in resp.text

    @pytest.mark.asyncio
    async def test_not_cached(self, state: DocumentState) -> None:
        state.commit(b"# Hi")
        async with make_client(create_app(state)) as client:
            resp = await client.get("/")
        assert resp.headers["cache-control"] == "no-store"

    @pytest.mark.asyncio
    async def test_follows_commits(self, state: DocumentState) -> None:
        app = create_app(state)
        async with make_client(app) as client:
            state.commit(b"# One")
            first = await client.get("/")
            state.commit(b"# Two")
            second = await client.get("/")

        assert "<h1>One</h1>" in first.text
        assert "<h1>Two</h1>" in second.text
        assert second.headers[VERSION_HEADER] == "2"

    @pytest.mark.asyncio
    async def test_error_snapshot_served_with_200(self, state: DocumentState) -> None:
        state.commit(b"# Hi")
        state.commit_failure(FileAccessError("No such file: doc.md"))
        async with make_client(create_app(state)) as client:
            resp = await client.get("/")

        assert resp.status_code == 200
        assert "glance-error" in resp.text
        assert "No such file: doc.md" in resp.text

    @pytest.mark.asyncio
    async def test_query_string_ignored(self, state: DocumentState) -> None:
        state.commit(b"# Hi")
        async with make_client(create_app(state)) as client:
            resp = await client.get("/?foo=bar")
        assert resp.status_code == 200


# ---------------------------------------------------------------------------
# GET /updates
# ---------------------------------------------------------------------------


class TestUpdates:
    """200 only when the caller's version is older than the current one."""

    @pytest.mark.asyncio
    async def test_current_version_is_not_stale(self, state: DocumentState) -> None:
        state.commit(b"# Hi")
        async with make_client(create_app(state)) as client:
            resp = await client.get(UPDATES_ENDPOINT, params={"since": "1"})
        assert resp.status_code == 404

    @pytest.mark.asyncio
    async def test_future_version_is_not_stale(self, state: DocumentState) -> None:
        state.commit(b"# Hi")
        async with make_client(create_app(state)) as client:
            resp = await client.get(UPDATES_ENDPOINT, params={"since": "99"})
        assert resp.status_code == 404

    @pytest.mark.asyncio
    async def test_older_version_is_stale(self, state: DocumentState) -> None:
        state.commit(b"# One")
        state.commit(b"# Two")
        async with make_client(create_app(state)) as client:
            resp = await client.get(UPDATES_ENDPOINT, params={"since": "1"})

        assert resp.status_code == 200
        assert resp.json() == {"version": 2, "error": None}

    @pytest.mark.asyncio
    async def test_stale_error_snapshot_reports_error(self, state: DocumentState) -> None:
        state.commit(b"# Hi")
        state.commit(b"\xff")
        async with make_client(create_app(state)) as client:
            resp = await client.get(UPDATES_ENDPOINT, params={"since": "1"})

        assert resp.status_code == 200
        body = resp.json()
        assert body["version"] == 2
        assert "not valid UTF-8" in body["error"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("query", ["", "?since=", "?since=abc", "?other=1"])
    async def test_missing_or_malformed_since_means_zero(
        self, state: DocumentState, query: str,
    ) -> None:
        state.commit(b"# Hi")
        async with make_client(create_app(state)) as client:
            resp = await client.get(UPDATES_ENDPOINT + query)
        assert resp.status_code == 200
        assert resp.json()["version"] == 1

    @pytest.mark.asyncio
    async def test_nothing_committed_yet(self, state: DocumentState) -> None:
        async with make_client(create_app(state)) as client:
            resp = await client.get(UPDATES_ENDPOINT)
        assert resp.status_code == 404

    @pytest.mark.asyncio
    async def test_polling_across_commits(self, state: DocumentState) -> None:
        """A client that reloads on every 200 sees each version once."""
        state.commit(b"v0")
        seen = 1
        reloads = 0
        async with make_client(create_app(state)) as client:
            for i in range(1, 6):
                resp = await client.get(UPDATES_ENDPOINT, params={"since": seen})
                assert resp.status_code == 404

                state.commit(f"v{i}".encode())
                resp = await client.get(UPDATES_ENDPOINT, params={"since": seen})
                assert resp.status_code == 200
                seen = int((await client.get("/")).headers[VERSION_HEADER])
                reloads += 1

        assert reloads == 5
        assert seen == state.version == 6


# ---------------------------------------------------------------------------
# Everything else
# ---------------------------------------------------------------------------


class TestOtherRequests:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("path", ["/doc.md", "/updates/", "/index.html", "/static/x.css"])
    async def test_unknown_paths_404(self, state: DocumentState, path: str) -> None:
        state.commit(b"# Hi")
        async with make_client(create_app(state)) as client:
            resp = await client.get(path)
        assert resp.status_code == 404

    @pytest.mark.asyncio
    @pytest.mark.parametrize("method", ["HEAD", "POST", "PUT", "DELETE", "PATCH", "OPTIONS"])
    @pytest.mark.parametrize("path", ["/", UPDATES_ENDPOINT])
    async def test_other_methods_404(
        self, state: DocumentState, method: str, path: str,
    ) -> None:
        state.commit(b"# Hi")
        async with make_client(create_app(state)) as client:
            resp = await client.request(method, path)
        assert resp.status_code == 404


# ---------------------------------------------------------------------------
# Lifespan
# ---------------------------------------------------------------------------


class _FakeWatcher:
    def __init__(self) -> None:
        self.started = asyncio.Event()
        self.stopped = False

    async def run(self) -> None:
        self.started.set()
        await asyncio.Event().wait()

    def stop(self) -> None:
        self.stopped = True


class TestLifespan:
    @pytest.mark.asyncio
    async def test_watcher_runs_for_app_lifetime(self, state: DocumentState) -> None:
        watcher = _FakeWatcher()
        app = create_app(state, watcher=watcher)  # type: ignore[arg-type]

        async with app.router.lifespan_context(app):
            await asyncio.wait_for(watcher.started.wait(), timeout=5)
            assert not watcher.stopped

        assert watcher.stopped

    @pytest.mark.asyncio
    async def test_no_watcher(self, state: DocumentState) -> None:
        app = create_app(state)
        async with app.router.lifespan_context(app):
            pass

    @pytest.mark.asyncio
    async def test_real_watcher_commits_while_serving(
        self, tmp_path: Path,
    ) -> None:
        from glance.config import GlanceConfig
        from glance.content.renderer import MarkdownRenderer
        from glance.content.watcher import DocumentWatcher

        source = tmp_path / "live.md"
        source.write_bytes(b"# Before\n")
        config = GlanceConfig(
            source=source, force_polling=True, poll_interval_ms=50, debounce_ms=50,
        )
        live = DocumentState(config.source, MarkdownRenderer.from_config(config))
        watcher = DocumentWatcher(config, live)
        watcher.prime()
        app = create_app(live, watcher=watcher)

        async with app.router.lifespan_context(app), make_client(app) as client:
            for _ in range(100):
                if watcher.is_running:
                    break
                await asyncio.sleep(0.01)
            await asyncio.sleep(0.5)

            source.write_bytes(b"# After\n")
            status = 404
            for _ in range(200):
                status = (
                    await client.get(UPDATES_ENDPOINT, params={"since": 1})
                ).status_code
                if status == 200:
                    break
                await asyncio.sleep(0.05)

            assert status == 200
            assert "<h1>After</h1>" in (await client.get("/")).text

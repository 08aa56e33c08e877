"""HTTP delivery — serves the current snapshot and the staleness check.

Exactly two routes exist:

- ``GET /``        the current page, with its version in ``X-Glance-Version``
- ``GET /updates`` ``?since=<version>``: 200 + JSON when something newer has
  been committed, 404 otherwise

Everything else (unknown paths, any other method including HEAD) is a
bare 404.  Handlers only read ``DocumentState.current_snapshot()``;
they never render.
"""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from starlette.applications import Starlette
from starlette.exceptions import HTTPException
from starlette.responses import HTMLResponse, JSONResponse, Response
from starlette.routing import Route

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from starlette.requests import Request

    from glance.content.state import DocumentState
    from glance.content.watcher import DocumentWatcher


INDEX_ENDPOINT = "/"
UPDATES_ENDPOINT = "/updates"
VERSION_HEADER = "X-Glance-Version"


def parse_since(raw: str | None) -> int:
    """Parse the ``since`` query value; missing or malformed means 0."""
    if raw is None:
        return 0
    try:
        return int(raw.strip())
    except ValueError:
        return 0


async def _not_found(request: Request, exc: Exception) -> Response:
    return Response(status_code=404)


def _require_get(request: Request) -> None:
    # Starlette answers HEAD on GET routes; only GET is served.
    if request.method != "GET":
        raise HTTPException(status_code=404)


def create_app(
    state: DocumentState,
    *,
    watcher: DocumentWatcher | None = None,
) -> Starlette:
    """Create the Starlette app serving *state*.

    When *watcher* is given its ``run()`` loop lives inside the app's
    lifespan: started with the server, stopped and cancelled on shutdown.

    """

    async def index(request: Request) -> Response:
        _require_get(request)
        snapshot = state.current_snapshot()
        return HTMLResponse(
            snapshot.html,
            headers={VERSION_HEADER: str(snapshot.version), "Cache-Control": "no-store"},
        )

    async def updates(request: Request) -> Response:
        _require_get(request)
        since = parse_since(request.query_params.get("since"))
        snapshot = state.current_snapshot()
        if since >= snapshot.version:
            return Response(status_code=404, headers={"Cache-Control": "no-store"})
        return JSONResponse(
            {"version": snapshot.version, "error": snapshot.error},
            headers={"Cache-Control": "no-store"},
        )

    @asynccontextmanager
    async def lifespan(app: Starlette) -> AsyncIterator[None]:
        if watcher is None:
            yield
            return
        task = asyncio.create_task(watcher.run())
        try:
            yield
        finally:
            watcher.stop()
            task.cancel()
            await asyncio.gather(task, return_exceptions=True)

    app = Starlette(
        routes=[
            Route(INDEX_ENDPOINT, index, methods=["GET"], name="glance:index"),
            Route(UPDATES_ENDPOINT, updates, methods=["GET"], name="glance:updates"),
        ],
        exception_handlers={404: _not_found, 405: _not_found},
        lifespan=lifespan,
    )
    # "/updates/" is a different path, not a redirect.
    app.router.redirect_slashes = False
    return app

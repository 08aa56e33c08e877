"""Glance application — wires renderer, state, watcher and HTTP server.

``preview()`` is the public entry point.  The helpers are separate so
tests (and embedders) can assemble the pieces without starting a server.
"""

from __future__ import annotations

import socket
import time
from dataclasses import dataclass, replace
from pathlib import Path
from typing import TYPE_CHECKING

from glance._errors import BindError, ConfigError
from glance.config_loader import load_config

if TYPE_CHECKING:
    from starlette.applications import Starlette

    from glance.config import GlanceConfig
    from glance.content.state import DocumentState
    from glance.content.watcher import DocumentWatcher
    from glance.observability.collector import CommitCollector


@dataclass(frozen=True, slots=True)
class Preview:
    """Everything needed to serve one document."""

    config: GlanceConfig
    state: DocumentState
    watcher: DocumentWatcher
    collector: CommitCollector
    app: Starlette


def check_source(path: Path) -> None:
    """Fail fast when the source does not exist or is not a regular file.

    Raises:
        ConfigError: If *path* is missing or not a regular file.

    """
    if not path.is_file():
        msg = f"No such file: {path}"
        raise ConfigError(msg)


def bind_socket(host: str, port: int) -> socket.socket:
    """Bind and listen on *host*:*port*.

    The socket is bound here rather than inside uvicorn so that an address
    in use surfaces as a ``BindError`` before anything is served.

    Raises:
        BindError: If the address cannot be resolved or bound.

    """
    try:
        family, kind, proto, _, address = socket.getaddrinfo(
            host, port, type=socket.SOCK_STREAM,
        )[0]
    except socket.gaierror as exc:
        msg = f"Cannot resolve {host}: {exc}"
        raise BindError(msg) from exc

    sock = socket.socket(family, kind, proto)
    try:
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        sock.bind(address)
        sock.listen()
    except OSError as exc:
        sock.close()
        msg = f"Cannot listen on {host}:{port}: {exc.strerror or exc}"
        raise BindError(msg) from exc
    return sock


def create_preview(config: GlanceConfig) -> Preview:
    """Build the renderer, state, watcher and app for *config*.

    Nothing is read from disk yet; call ``preview.watcher.prime()`` for the
    initial commit.

    """
    from glance.content.renderer import MarkdownRenderer
    from glance.content.state import DocumentState
    from glance.content.watcher import DocumentWatcher
    from glance.observability import CommitCollector, EventLog
    from glance.server.routes import create_app

    collector = CommitCollector(EventLog())
    renderer = MarkdownRenderer.from_config(config)
    state = DocumentState(config.source, renderer, collector=collector)
    watcher = DocumentWatcher(config, state)
    app = create_app(state, watcher=watcher)
    return Preview(
        config=config,
        state=state,
        watcher=watcher,
        collector=collector,
        app=app,
    )


def preview(source: str | Path, **kwargs: object) -> None:
    """Serve a live preview of *source* until interrupted.

    Args:
        source: Path to the markdown file.
        **kwargs: Override GlanceConfig fields.

    Raises:
        ConfigError: Invalid configuration or missing source file.
        BindError: The port is already in use.

    """
    import uvicorn

    from glance.banner import print_banner

    config = load_config(Path(source), **kwargs)
    check_source(config.source)

    parts = create_preview(config)

    t0 = time.perf_counter()
    parts.watcher.prime()
    load_ms = (time.perf_counter() - t0) * 1000

    sock = bind_socket(config.host, config.port)
    bound_port = sock.getsockname()[1]
    if bound_port != config.port:
        # Port 0 asks the OS for a free port.
        config = replace(config, port=bound_port)

    print_banner(config, parts.state.current_snapshot(), load_ms=load_ms)

    server = uvicorn.Server(
        uvicorn.Config(
            parts.app,
            lifespan="on",
            log_level="warning",
            access_log=False,
        )
    )
    try:
        server.run(sockets=[sock])
    finally:
        sock.close()

"""HTTP layer — Starlette app over the document state."""

from glance.server.routes import UPDATES_ENDPOINT, VERSION_HEADER, create_app

__all__ = [
    "UPDATES_ENDPOINT",
    "VERSION_HEADER",
    "create_app",
]

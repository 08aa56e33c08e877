"""Glance — an offline live previewer for a single markdown file.

Renders the file to styled HTML, serves it on a loopback port and reloads
the browser whenever the file changes on disk.  Nothing leaves the machine.

Quick start::

    import glance

    glance.preview("README.md")             # http://127.0.0.1:8000
    glance.preview("notes.md", port=9000)

From the shell::

    glance README.md --port 9000

"""

__version__ = "0.1.0"
__all__ = [
    "GlanceConfig",
    "__version__",
    "preview",
]


def __getattr__(name: str) -> object:
    """Lazy imports for the public API.

    Keeps ``import glance`` fast; the server stack is only imported when
    ``preview`` is actually used.
    """
    if name == "GlanceConfig":
        from glance.config import GlanceConfig

        return GlanceConfig

    if name == "preview":
        from glance.app import preview

        return preview

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)

"""Glance error hierarchy.

All glance-specific errors inherit from GlanceError for easy catching.
"""


class GlanceError(Exception):
    """Base error for all glance operations."""


class ConfigError(GlanceError):
    """Invalid or missing configuration (including a missing source file)."""


class RenderError(GlanceError):
    """Markdown source could not be decoded or rendered."""


class FileAccessError(GlanceError):
    """The source file could not be read (deleted, permission revoked)."""


class BindError(GlanceError):
    """The HTTP listener could not bind its address."""

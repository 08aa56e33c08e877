"""Markdown renderer — source bytes to a sanitized, styled HTML page.

Uses markdown-it-py with the CommonMark preset plus GFM tables and
strikethrough.  Raw HTML in the source is escaped rather than passed
through (``html=False``), and markdown-it's link validation drops
``javascript:``/``vbscript:``/``file:``/``data:`` targets, so a previewed
document cannot inject script into the preview.

The renderer holds no mutable state after construction; one instance is
shared by the watcher thread for every commit.
"""

from __future__ import annotations

import codecs
from typing import TYPE_CHECKING

from markdown_it import MarkdownIt

from glance._errors import RenderError
from glance.content.error_page import render_error_page
from glance.theme import render_page

if TYPE_CHECKING:
    from glance.config import GlanceConfig


def create_markdown(*, hard_breaks: bool = True) -> MarkdownIt:
    """Build the markdown-it parser used for every render."""
    md = MarkdownIt(
        "commonmark",
        {"html": False, "breaks": hard_breaks, "typographer": False},
    )
    md.enable(["table", "strikethrough"])
    return md


def decode_source(source: bytes) -> str:
    """Decode raw file bytes as UTF-8 (a leading BOM is dropped).

    Raises:
        RenderError: If the bytes are not valid UTF-8.

    """
    if source.startswith(codecs.BOM_UTF8):
        source = source[len(codecs.BOM_UTF8):]
    try:
        return source.decode("utf-8")
    except UnicodeDecodeError as exc:
        msg = (
            f"Source is not valid UTF-8: byte 0x{source[exc.start]:02x} "
            f"at offset {exc.start} cannot be decoded"
        )
        raise RenderError(msg) from exc


class MarkdownRenderer:
    """Renders markdown bytes into complete preview pages.

    Args:
        title: Page title (the source path).
        hard_breaks: Render single newlines as ``<br>``.
        poll_interval_ms: Reload poll period embedded in every page.

    """

    __slots__ = ("_md", "_poll_interval_ms", "_title")

    def __init__(
        self,
        *,
        title: str,
        hard_breaks: bool = True,
        poll_interval_ms: int = 1000,
    ) -> None:
        self._title = title
        self._poll_interval_ms = poll_interval_ms
        self._md = create_markdown(hard_breaks=hard_breaks)

    @classmethod
    def from_config(cls, config: GlanceConfig) -> MarkdownRenderer:
        return cls(
            title=config.title,
            hard_breaks=config.hard_breaks,
            poll_interval_ms=config.poll_interval_ms,
        )

    @property
    def title(self) -> str:
        return self._title

    def render_fragment(self, source: bytes) -> str:
        """Render markdown bytes into an HTML fragment.

        Raises:
            RenderError: If the bytes cannot be decoded or the parser fails.

        """
        text = decode_source(source)
        try:
            return self._md.render(text)
        except Exception as exc:
            msg = f"Markdown rendering failed: {exc}"
            raise RenderError(msg) from exc

    def render_page(self, source: bytes, *, version: int) -> str:
        """Render markdown bytes into the full page for *version*."""
        return render_page(
            self.render_fragment(source),
            title=self._title,
            version=version,
            poll_interval_ms=self._poll_interval_ms,
        )

    def render_error_page(self, error: BaseException, *, version: int) -> str:
        """Render the fallback page for *error* at *version*."""
        return render_error_page(
            error,
            title=self._title,
            version=version,
            poll_interval_ms=self._poll_interval_ms,
        )

"""Startup banner — status output printed once the document is primed.

Detects ``NO_COLOR`` / ``TERM`` for safe fallback to plain text.
"""

from __future__ import annotations

import os
import sys
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from glance.config import GlanceConfig
    from glance.content.state import Snapshot


# ---------------------------------------------------------------------------
# ANSI helpers: respect NO_COLOR (https://no-color.org)
# ---------------------------------------------------------------------------

def _supports_color() -> bool:
    """Return True if the terminal supports ANSI colors."""
    if os.environ.get("NO_COLOR"):
        return False
    if os.environ.get("TERM") == "dumb":
        return False
    return hasattr(sys.stderr, "isatty") and sys.stderr.isatty()


_COLOR = _supports_color()

_RESET = "\033[0m" if _COLOR else ""
_BOLD = "\033[1m" if _COLOR else ""
_DIM = "\033[2m" if _COLOR else ""
_CYAN = "\033[36m" if _COLOR else ""
_GREEN = "\033[32m" if _COLOR else ""
_RED = "\033[31m" if _COLOR else ""


def _clickable_url(url: str) -> str:
    """Wrap *url* in an OSC 8 hyperlink escape if the terminal supports it."""
    if not _COLOR:
        return url
    return f"\033]8;;{url}\033\\{_BOLD}{_CYAN}{url}{_RESET}\033]8;;\033\\"


def print_banner(
    config: GlanceConfig,
    snapshot: Snapshot,
    *,
    load_ms: float = 0.0,
) -> None:
    """Print the glance startup banner to stderr.

    Args:
        config: Resolved GlanceConfig.
        snapshot: The snapshot produced by the initial commit.
        load_ms: Time spent on the initial render in milliseconds.

    """
    from glance import __version__

    lines: list[str] = [
        "",
        f"  {_BOLD}glance{_RESET} {_DIM}v{__version__}{_RESET}",
        f"  {_DIM}{'─' * 43}{_RESET}",
        f"  {_DIM}├─{_RESET} file: {config.source}",
    ]

    timing = f" {_DIM}in {load_ms:.0f}ms{_RESET}" if load_ms > 0 else ""
    if snapshot.ok:
        lines.append(f"  {_DIM}├─{_RESET} {_GREEN}rendered{_RESET} v{snapshot.version}{timing}")
    else:
        lines.append(f"  {_DIM}├─{_RESET} {_RED}error{_RESET} {snapshot.error}")

    watch_mode = "polling" if config.force_polling else "notify"
    lines.append(
        f"  {_DIM}└─{_RESET} watching ({watch_mode}, "
        f"{config.debounce_ms}ms debounce)"
    )

    lines.append("")
    lines.append(f"  {_clickable_url(config.url)}")
    lines.append("")
    lines.append(f"  {_DIM}Press Ctrl-C to exit{_RESET}")
    lines.append("")

    print("\n".join(lines), file=sys.stderr)

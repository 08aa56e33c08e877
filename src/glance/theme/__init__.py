"""Glance theme — page template, bundled stylesheet, reload script.

Every page glance serves (rendered document or error page) is
self-contained: the stylesheet is inlined and the reload script is
embedded, so the server needs no asset routes.

Thread Safety:
    The stylesheet is read once and cached; all other values are
    constants.  Safe for concurrent use.

"""

from __future__ import annotations

import functools
import html
from pathlib import Path


def _bundled_theme_path() -> Path:
    """Return the absolute path to the bundled default theme."""
    return Path(__file__).parent / "default"


@functools.cache
def stylesheet() -> str:
    """Return the bundled GitHub-style stylesheet."""
    return (_bundled_theme_path() / "github-markdown.css").read_text(encoding="utf-8")


# Polls the staleness endpoint with the version this page was rendered at
# and reloads once the server reports something newer.
_RELOAD_SCRIPT = """\
<script data-glance-reload>
(function() {{
  var version = {version};
  var interval = {interval};
  function poll() {{
    fetch('/updates?since=' + version, {{cache: 'no-store'}})
      .then(function(r) {{
        if (r.status === 200) {{ location.reload(); return; }}
        setTimeout(poll, interval);
      }})
      .catch(function() {{ setTimeout(poll, interval * 2); }});
  }}
  setTimeout(poll, interval);
}})();
</script>
"""

_PAGE = """\
<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<meta name="viewport" content="width=device-width, initial-scale=1.0">
<meta name="glance-version" content="{version}">
<title>{title}</title>
<style>
{stylesheet}</style>
</head>
<body>
<article class="markdown-body" data-version="{version}">
{content}</article>
{reload_script}</body>
</html>
"""


def reload_script(version: int, interval_ms: int) -> str:
    """Return the client polling script for a page rendered at *version*."""
    return _RELOAD_SCRIPT.format(version=int(version), interval=int(interval_ms))


def render_page(content: str, *, title: str, version: int, poll_interval_ms: int) -> str:
    """Wrap an HTML fragment in the full page template.

    *content* is inserted verbatim; it must already be sanitized.

    """
    return _PAGE.format(
        version=int(version),
        title=html.escape(title),
        stylesheet=stylesheet(),
        content=content,
        reload_script=reload_script(version, poll_interval_ms),
    )

"""Fallback page shown when the document cannot be rendered.

Rendered into the snapshot in place of the document whenever a commit
fails, so the browser's next poll reloads onto the error instead of
keeping stale content.  The page carries the same version marker and
reload script as a normal page: once the file is fixed the next commit
bumps the version and the browser reloads back onto the document.
"""

from __future__ import annotations

import html

from glance.theme import reload_script

# Inline CSS only; the error page must not depend on the document theme.
_ERROR_PAGE = """\
<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<meta name="viewport" content="width=device-width, initial-scale=1.0">
<meta name="glance-version" content="{version}">
<title>Error: {title}</title>
<style>
*,*::before,*::after{{box-sizing:border-box}}
body{{margin:0;font-family:ui-monospace,SFMono-Regular,Menlo,Monaco,Consolas,monospace;
  background:#1a1a1a;color:#e0e0e0;line-height:1.6}}
.overlay{{max-width:860px;margin:2rem auto;padding:0 1.5rem}}
.error-header{{background:#2d1010;border:1px solid #e74c3c;border-radius:8px;
  padding:1.25rem 1.5rem;margin-bottom:1.5rem}}
.error-header h1{{margin:0;font-size:1rem;color:#e74c3c;font-weight:600}}
.error-header .message{{margin:0.5rem 0 0;font-size:0.95rem;color:#f0a0a0;
  word-break:break-word}}
.file{{font-size:0.8rem;color:#9e9e9e;margin-bottom:1rem;word-break:break-all}}
details{{margin-bottom:1.5rem}}
summary{{cursor:pointer;color:#9e9e9e;font-size:0.85rem;padding:0.5rem 0}}
.cause{{background:#1e1e1e;border:1px solid #3a3a3a;border-radius:8px;
  padding:1rem 1.25rem;font-size:0.8rem;white-space:pre-wrap;color:#9e9e9e}}
.hint{{font-size:0.8rem;color:#757575}}
</style>
</head>
<body>
<div class="overlay glance-error" data-version="{version}">
  <div class="error-header">
    <h1>{error_type}</h1>
    <p class="message">{error_message}</p>
  </div>
  <div class="file">{title}</div>
  {cause_section}
  <p class="hint">The preview reloads automatically once the file changes.</p>
</div>
{reload_script}</body>
</html>
"""


def _cause_section(error: BaseException) -> str:
    cause = error.__cause__
    if cause is None:
        return ""
    detail = html.escape(f"{type(cause).__qualname__}: {cause}")
    return (
        "<details>"
        "<summary>Details</summary>"
        f'<div class="cause">{detail}</div>'
        "</details>"
    )


def render_error_page(
    error: BaseException,
    *,
    title: str,
    version: int,
    poll_interval_ms: int,
) -> str:
    """Render the full fallback page for *error* at *version*."""
    return _ERROR_PAGE.format(
        version=int(version),
        title=html.escape(title),
        error_type=html.escape(type(error).__qualname__),
        error_message=html.escape(str(error)),
        cause_section=_cause_section(error),
        reload_script=reload_script(version, poll_interval_ms),
    )

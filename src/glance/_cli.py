"""Glance CLI — glance FILE [options].

Entry point for the ``glance`` command-line interface.
"""

from __future__ import annotations

import argparse
import sys


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the glance CLI.

    Options default to ``None`` so that values from a glance.yaml /
    glance.toml next to the file are only overridden when given.

    """
    parser = argparse.ArgumentParser(
        prog="glance",
        description="Offline live preview of a markdown file.",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {_get_version()}",
    )
    parser.add_argument("file", help="The markdown file to be served")
    parser.add_argument("--host", default=None, help="Loopback bind address (default 127.0.0.1)")
    parser.add_argument("--port", type=int, default=None, help="Bind port (default 8000)")
    parser.add_argument(
        "--debounce-ms", type=int, default=None,
        help="Coalesce file events within this window (default 100)",
    )
    parser.add_argument(
        "--poll-interval-ms", type=int, default=None,
        help="Browser reload poll period (default 1000)",
    )
    parser.add_argument(
        "--no-hard-breaks", dest="hard_breaks", action="store_const", const=False,
        default=None, help="Do not turn single newlines into <br>",
    )
    parser.add_argument(
        "--force-polling", action="store_const", const=True, default=None,
        help="Poll modification times instead of using OS notifications",
    )
    return parser


def _get_version() -> str:
    """Get the package version."""
    from glance import __version__

    return __version__


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    from glance._errors import GlanceError
    from glance.app import preview

    try:
        preview(
            args.file,
            host=args.host,
            port=args.port,
            debounce_ms=args.debounce_ms,
            poll_interval_ms=args.poll_interval_ms,
            hard_breaks=args.hard_breaks,
            force_polling=args.force_polling,
        )
    except GlanceError as exc:
        print(f"error: {exc}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()

"""docpreview CLI — docpreview dev / make / diff / serve.

Entry point for the ``docpreview`` command-line interface.
"""

from __future__ import annotations

import argparse
import json
import sys


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the docpreview CLI."""
    parser = argparse.ArgumentParser(
        prog="docpreview",
        description="Documentation previews for Elm packages and applications.",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {_get_version()}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # docpreview dev
    dev_parser = subparsers.add_parser(
        "dev",
        help="Start the local preview server with live updates",
    )
    dev_parser.add_argument("root", nargs="?", default=".", help="Project directory")
    dev_parser.add_argument("-a", "--address", default=None, help="Bind address")
    dev_parser.add_argument("-p", "--port", type=int, default=None, help="Bind port")
    dev_parser.add_argument(
        "--no-browser", action="store_true", help="Do not open a browser tab",
    )
    dev_parser.add_argument(
        "--no-reload", action="store_true", help="Do not watch the project",
    )
    dev_parser.add_argument(
        "--debug", action="store_true", help="Keep build artifacts and print reports",
    )

    # docpreview make
    make_parser = subparsers.add_parser(
        "make",
        help="Write the project's docs.json (exit 1 when the build fails)",
    )
    make_parser.add_argument("output", help="Output file (/dev/null to only check)")
    make_parser.add_argument("root", nargs="?", default=".", help="Project directory")
    make_parser.add_argument(
        "--debug", action="store_true", help="Keep build artifacts",
    )

    # docpreview diff
    diff_parser = subparsers.add_parser(
        "diff",
        help="Print the API and content diff against the latest release",
    )
    diff_parser.add_argument("root", nargs="?", default=".", help="Project directory")

    # docpreview serve
    serve_parser = subparsers.add_parser(
        "serve",
        help="Run hosted previews of GitHub refs",
    )
    serve_parser.add_argument("root", nargs="?", default=".", help="Configuration directory")
    serve_parser.add_argument("--host", default="0.0.0.0", help="Bind address")
    serve_parser.add_argument("--port", type=int, default=None, help="Bind port")
    serve_parser.add_argument("--workers", type=int, default=None, help="Worker count (0=auto)")

    return parser


def _get_version() -> str:
    """Get the package version."""
    from docpreview import __version__

    return __version__


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    from docpreview._errors import DocPreviewError
    from docpreview.app import dev, diff, make, serve
    from docpreview.console import error

    try:
        if args.command == "dev":
            dev(
                root=args.root,
                address=args.address,
                port=args.port,
                browser=False if args.no_browser else None,
                reload=False if args.no_reload else None,
                debug=True if args.debug else None,
            )
        elif args.command == "make":
            make(args.output, root=args.root, debug=True if args.debug else None)
        elif args.command == "diff":
            print(json.dumps(diff(root=args.root), indent=2))
        elif args.command == "serve":
            serve(root=args.root, address=args.host, port=args.port, workers=args.workers)
    except DocPreviewError as exc:
        error(str(exc))
        sys.exit(1)


if __name__ == "__main__":
    main()

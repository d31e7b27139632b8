#!/usr/bin/env python3
"""CLI entry point for mdmake."""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from .builder import build_site
from .buildlog import BuildLog
from .config import load_config_file, preflight, resolve_config
from .errors import MdmakeError
from .server import serve_site
from .watcher import watch


USAGE_HINT = "\n\nUsage: mdmake [OPTIONS] [COMMAND]\n\nFor more information, try '--help'."


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mdmake",
        description="Generate static websites from a directory of markdown files."
    )
    parser.add_argument("-i", "--input", metavar="DIRECTORY", help="The project root of the markdown files (default: src)")
    parser.add_argument("-o", "--output", metavar="DIRECTORY", help="The destination for the compiled webpage (default: out)")
    parser.add_argument("--style", metavar="FILE", help="The CSS stylesheet to use for all html files")
    parser.add_argument("--header", metavar="FILE", help="The HTML header to prepend to all HTML bodies")
    parser.add_argument("--footer", metavar="FILE", help="The HTML footer to append to all HTML bodies")
    parser.add_argument("--config", metavar="FILE", default=None, help="JSON settings file (default: mdmake.json)")
    parser.add_argument("--log-dir", metavar="DIRECTORY", default=None, help="Append build events to a daily JSON-lines file here")
    parser.add_argument("-w", "--watch", action="store_true", help="Same as the watch command")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")
    subparsers.add_parser("build", help="Compile the whole site (default)")
    subparsers.add_parser("watch", help="Watch for changes and automatically recompile")

    serve_parser = subparsers.add_parser("serve", help="Serve the compiled site locally")
    serve_parser.add_argument(
        "-p", "--port",
        type=int,
        default=8000,
        help="Port to serve on (default: 8000)"
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)

    settings = load_config_file(Path(args.config) if args.config else None)
    config = resolve_config(
        input=args.input,
        output=args.output,
        style=args.style,
        header=args.header,
        footer=args.footer,
        settings=settings,
    )
    log = BuildLog(args.log_dir or settings.get("log_dir"))

    command = "watch" if args.watch else (args.command or "build")

    if command == "serve":
        if not config.output_dir.is_dir():
            print(f"error: Directory '{config.output_dir}' does not exist", file=sys.stderr)
            return 1
        serve_site(config.output_dir, args.port)
        return 0

    for problem in preflight(config):
        print(f"error: {problem}{USAGE_HINT}", file=sys.stderr)

    try:
        if command == "watch":
            watch(config, log)
        else:
            result = build_site(config, log)
            print(
                f"Site built successfully: {config.output_dir} "
                f"({result.pages} pages, {result.resources} resources)"
            )
    except MdmakeError as e:
        log.error(str(e))
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())

from __future__ import annotations

import argparse
import logging
import sys
from typing import List

from rich.console import Console
from rich.logging import RichHandler

from ._version import NAME, __version__, default_user_agent
from .candidates import load_paths
from .reporter import print_results, write_json
from .scanner import run_check

EXIT_OK = 0
EXIT_ERROR = 1


def _configure_logging(debug: bool, quiet: bool) -> None:
    level = logging.DEBUG if debug else (logging.WARNING if quiet else logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[
            RichHandler(
                console=Console(stderr=True),
                rich_tracebacks=debug,
                markup=False,
                show_time=False,
                show_path=False,
            )
        ],
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=NAME,
        description=(
            "Read local file paths from stdin (one per line) and report which of them "
            "are published under the given base URL."
        ),
    )
    parser.add_argument("-u", "--url", help="Base URL the paths are resolved against")
    parser.add_argument("-c", "--concurrency", type=int, default=5, help="Request concurrency")
    parser.add_argument("-t", "--timeout", type=int, default=3, help="Request timeout in seconds")
    parser.add_argument(
        "-k", "--insecure", action="store_true", help="Allow connections to TLS sites without valid certs"
    )
    parser.add_argument(
        "-s", "--skip-errors", action="store_true", help="Log request and file errors and keep going"
    )
    parser.add_argument("--follow-redirects", action="store_true", help="Follow HTTP redirects")
    parser.add_argument("--user-agent", default=default_user_agent())
    parser.add_argument("--rate-limit", type=float, default=None, help="Max requests per second (RPS)")
    parser.add_argument("--json-output", help="Write all outcomes as JSON to the given path")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument("--quiet", action="store_true", help="Only log warnings and errors")
    parser.add_argument("--tui", action="store_true", help="Launch Textual TUI instead of Rich CLI")
    parser.add_argument("--version", action="store_true", help="Print version information and quit")
    return parser


def main(argv: List[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.version:
        print(f"{NAME} version {__version__}", file=sys.stderr)
        return EXIT_OK
    if not args.url:
        parser.error("the following arguments are required: -u/--url")
    if args.concurrency < 1:
        parser.error("--concurrency must be at least 1")
    if args.timeout < 1:
        parser.error("--timeout must be at least 1 second")

    _configure_logging(args.debug, args.quiet)
    log = logging.getLogger(__name__)

    try:
        text = sys.stdin.read()
    except (OSError, UnicodeDecodeError) as e:
        log.error("Cannot read paths from stdin: %s", e)
        return EXIT_ERROR

    paths = load_paths(text)
    if not paths:
        log.warning("No paths given on stdin. Nothing to do.")
        return EXIT_OK

    options = dict(
        concurrency=args.concurrency,
        timeout=float(args.timeout),
        insecure=args.insecure,
        skip_errors=args.skip_errors,
        follow_redirects=args.follow_redirects,
        user_agent=args.user_agent,
        rate_limit=args.rate_limit,
    )

    if args.tui:
        from .tui import LeakProbeApp

        app = LeakProbeApp(paths, args.url, **options)
        app.run()
        result = app.result
    else:
        result = run_check(paths, args.url, **options)
        print_results(result, args.url)

    if result is None:
        # TUI closed before the run finished
        return EXIT_ERROR

    if args.json_output:
        out_path = write_json(result, args.json_output)
        Console().print(f"[green]JSON results written to[/green] {out_path}")

    if not result.ok:
        log.error("Run failed: %s", result.fatal.message)
        return EXIT_ERROR
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())

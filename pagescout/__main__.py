"""CLI entry point: python -m pagescout {extract,crawl,reverse,email-scan} ..."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any

from pagescout.errors import (
    BlockedHost,
    FetchFailed,
    InvalidQuery,
    InvalidURL,
    PageScoutError,
    UnsupportedContentType,
)

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_BAD_INPUT = 2
EXIT_UPSTREAM = 3
EXIT_UNSUPPORTED_MEDIA = 4

_EXIT_CODES: dict[type[PageScoutError], int] = {
    InvalidURL: EXIT_BAD_INPUT,
    InvalidQuery: EXIT_BAD_INPUT,
    BlockedHost: EXIT_BAD_INPUT,
    FetchFailed: EXIT_UPSTREAM,
    UnsupportedContentType: EXIT_UNSUPPORTED_MEDIA,
}


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pagescout",
        description=(
            "Fetch a single web page safely and extract its title, description,\n"
            "canonical URL, preview image, links and email addresses.\n"
            "Also builds reverse image search links."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--log-level", default="WARNING",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                        metavar="{DEBUG,INFO,WARNING,ERROR}",
                        help="Logging level (default: WARNING)")
    parser.add_argument("--compact", action="store_true", default=False,
                        help="Print single-line JSON instead of pretty output")
    sub = parser.add_subparsers(dest="command", required=True)

    for name, help_text in (
        ("extract", "Extract page metadata and links"),
        ("crawl", "Extract page metadata, links and email addresses"),
    ):
        cmd = sub.add_parser(name, help=help_text)
        cmd.add_argument("url", metavar="URL", help="Page URL (scheme optional)")
        cmd.add_argument("--timeout", type=float, default=None, metavar="SECONDS",
                         help="Network timeout in seconds (default: 30)")
        cmd.add_argument("--user-agent", default=None, metavar="UA",
                         help="Override the browser User-Agent string")

    rev = sub.add_parser("reverse", help="Build reverse image search links")
    rev.add_argument("image_url", metavar="IMAGE_URL", help="Image URL (scheme optional)")
    rev.add_argument("--providers", default=None, metavar="IDS",
                     help="Comma-separated provider ids (google,bing,yandex,tineye)")
    rev.add_argument("--lang", default=None, metavar="TAG", help="Language tag (default: en)")
    rev.add_argument("--country", default=None, metavar="TAG", help="Country tag (default: US)")
    rev.add_argument("--safe", default=None, metavar="{off,moderate,strict}",
                     help="Safe-search level (default: moderate)")
    rev.add_argument("--settings", default=None, metavar="FILE",
                     help="YAML settings record to use for defaults")

    scan = sub.add_parser("email-scan", help="Build contact lookup links for an email or domain")
    scan.add_argument("query", metavar="QUERY", help="Email address or domain")
    return parser


def _emit(data: dict[str, Any], *, compact: bool) -> None:
    if compact:
        print(json.dumps(data, ensure_ascii=False))
        return
    from rich.console import Console

    Console().print_json(data=data)


def _report_error(exc: PageScoutError) -> int:
    from rich.console import Console

    console = Console(stderr=True)
    console.print("ERROR:", str(exc), style="bold red", markup=False, highlight=False)
    return _EXIT_CODES.get(type(exc), 1)


def _run(args: argparse.Namespace) -> dict[str, Any]:
    if args.command in ("extract", "crawl"):
        from pagescout.query import crawl, fetch
        from pagescout.settings import DEFAULT_TIMEOUT

        run = crawl if args.command == "crawl" else fetch
        page = run(
            args.url,
            timeout=args.timeout or DEFAULT_TIMEOUT,
            user_agent=args.user_agent,
        )
        return page.model_dump(mode="json")

    if args.command == "reverse":
        from pagescout.reverse_image import reverse_image_links
        from pagescout.settings import load_settings

        settings = load_settings(args.settings) if args.settings else None
        result = reverse_image_links(
            args.image_url,
            providers=args.providers,
            lang=args.lang,
            country=args.country,
            safe=args.safe,
            settings=settings,
        )
        return result.model_dump(mode="json")

    from pagescout.email_scan import email_lookup

    return email_lookup(args.query).model_dump(mode="json")


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        data = _run(args)
    except PageScoutError as exc:
        logger.debug("%s failed: %s", args.command, exc)
        return _report_error(exc)

    _emit(data, compact=args.compact)
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())

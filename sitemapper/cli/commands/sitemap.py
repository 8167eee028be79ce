"""CLI commands for sitemap generation.

Commands:
- sitemap generate: Crawl a domain and print its sitemap
"""

from __future__ import annotations

import argparse
import json
import logging
import signal
import sys
import threading
import time
from pathlib import Path

from sitemapper.config import get_config
from sitemapper.parsing.fetcher import HttpFetcher
from sitemapper.parsing.url_scope import SeedURLError, build_seed_url
from sitemapper.sitemap import CrawlConfig, SitemapGenerator, render_sitemap, write_sitemap

EXIT_SUCCESS = 0
EXIT_ERROR = 1


def register_commands(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    """Add sitemap subcommands to the main CLI parser."""

    sitemap_parser = subparsers.add_parser(
        "sitemap",
        description="Generate XML sitemaps by crawling a single domain.",
        help="Crawl a domain and build its sitemap.",
    )
    sitemap_subparsers = sitemap_parser.add_subparsers(
        dest="sitemap_command",
        metavar="SUBCOMMAND",
    )
    sitemap_subparsers.required = True

    generate_parser = sitemap_subparsers.add_parser(
        "generate",
        description="Crawl a domain breadth-first from its root and print the sitemap.",
        help="Generate a sitemap for a domain.",
    )
    generate_parser.add_argument(
        "--domain",
        type=str,
        help="The domain to generate a sitemap for (default: $SITEMAP_DOMAIN).",
    )
    generate_parser.add_argument(
        "--scheme",
        type=str,
        choices=("http", "https"),
        help="The scheme to use while crawling the domain (default: https).",
    )
    generate_parser.add_argument(
        "--max-depth",
        type=int,
        help="Deepest link level to follow from the root (default: 10).",
    )
    generate_parser.add_argument(
        "--timeout",
        type=float,
        help="Per-request timeout in seconds (default: 10).",
    )
    generate_parser.add_argument(
        "--workers",
        type=int,
        help="Pages fetched concurrently within one depth level (default: 1).",
    )
    generate_parser.add_argument(
        "--user-agent",
        type=str,
        help="User-Agent header sent with every request.",
    )
    generate_parser.add_argument(
        "--output",
        type=Path,
        help="Also write the sitemap to this file.",
    )
    generate_parser.add_argument(
        "--json",
        action="store_true",
        dest="output_json",
        help="Output the crawl result in JSON format instead of XML.",
    )
    generate_parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log every visited page.",
    )
    generate_parser.set_defaults(func=sitemap_generate_cli, sitemap_command="generate")


def _resolve_crawl_config(args: argparse.Namespace) -> CrawlConfig:
    config = get_config()
    return CrawlConfig(
        max_depth=args.max_depth if args.max_depth is not None else config.max_depth,
        timeout=args.timeout if args.timeout is not None else config.timeout,
        max_workers=args.workers if args.workers is not None else config.workers,
        user_agent=args.user_agent or config.user_agent,
    )


def _install_interrupt_handler(cancel_event: threading.Event):
    """Turn Ctrl-C into a cancellation request, returning the previous handler."""

    def _handler(signum, frame) -> None:
        print("Interrupted, finishing with the pages visited so far...", file=sys.stderr)
        cancel_event.set()

    try:
        return signal.signal(signal.SIGINT, _handler)
    except ValueError:
        # Not on the main thread
        return None


def sitemap_generate_cli(args: argparse.Namespace) -> int:
    """Execute the sitemap generate command."""
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    config = get_config()
    try:
        url = build_seed_url(args.domain or config.domain or "", args.scheme or config.scheme)
        crawl_config = _resolve_crawl_config(args)
    except (SeedURLError, ValueError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_ERROR

    if not args.output_json:
        print(f"Going to generate sitemap for [{url}]...")

    cancel_event = threading.Event()
    previous_handler = _install_interrupt_handler(cancel_event)
    start = time.perf_counter()
    try:
        with HttpFetcher(timeout=crawl_config.timeout, user_agent=crawl_config.user_agent) as fetcher:
            generator = SitemapGenerator.from_config(url, crawl_config, fetcher=fetcher)
            result = generator.crawl(cancel_event)
    finally:
        if previous_handler is not None:
            signal.signal(signal.SIGINT, previous_handler)
    elapsed = time.perf_counter() - start

    sitemap = render_sitemap(result.urls)
    if args.output:
        write_sitemap(sitemap, args.output)

    if args.output_json:
        payload = result.to_dict()
        payload["elapsed_seconds"] = round(elapsed, 2)
        print(json.dumps(payload, indent=2))
    else:
        print(f"Sitemap generated for [{url}] in {elapsed:.2f} seconds:\n")
        print(sitemap)

    return EXIT_SUCCESS

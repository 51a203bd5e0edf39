"""Command-line entry point for the question bank scraper."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
import time
from pathlib import Path
from typing import Iterable, Sequence

from .bulletin import run_bulletin
from .config import BASE_URL, BULLETIN_PAGE_LIMIT, BulletinConfig, ScrapeConfig
from .crawler import run_scraper

logger = logging.getLogger("etesty_scraper.cli")


def _ensure_command_prefix(argv: Sequence[str], commands: Iterable[str]) -> Sequence[str]:
    if argv and (argv[0] in commands or argv[0] in ("-h", "--help")):
        return argv
    return ("practice", *argv)


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--output",
        default=".",
        type=Path,
        help="Directory where CSV files, assets and screenshots are written",
    )
    parser.add_argument(
        "--base-url",
        default=BASE_URL,
        help="Portal root URL",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )


def _add_practice_arguments(parser: argparse.ArgumentParser) -> None:
    _add_common_arguments(parser)
    parser.add_argument(
        "--headed",
        action="store_true",
        help="Show the browser window instead of running headless",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=0.0,
        help="Question navigation timeout in seconds (0 waits forever)",
    )
    parser.add_argument(
        "--keep-going",
        action="store_true",
        help="Log and skip questions whose page cannot be extracted instead of aborting",
    )
    parser.add_argument(
        "--header",
        action="store_true",
        help="Write a header row at the top of every section CSV",
    )


def _add_bulletin_arguments(parser: argparse.ArgumentParser) -> None:
    _add_common_arguments(parser)
    parser.add_argument(
        "--page-limit",
        type=int,
        default=BULLETIN_PAGE_LIMIT,
        help="Stop paging a bulletin section before this page number",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=30.0,
        help="HTTP request timeout in seconds",
    )


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Scrape the driving test question bank into CSV files.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    practice_parser = subparsers.add_parser(
        "practice", help="Render practice questions in Chromium (default)"
    )
    _add_practice_arguments(practice_parser)

    bulletin_parser = subparsers.add_parser(
        "bulletin", help="Download the public question bulletin over HTTP"
    )
    _add_bulletin_arguments(bulletin_parser)

    argv = list(sys.argv[1:] if argv is None else argv)
    argv = list(_ensure_command_prefix(argv, subparsers.choices.keys()))
    return parser.parse_args(argv)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        force=True,
    )


def _run_practice(args: argparse.Namespace) -> None:
    config = ScrapeConfig(
        output_root=Path(args.output).resolve(),
        base_url=args.base_url,
        headless=not args.headed,
        navigation_timeout=args.timeout,
        keep_going=args.keep_going,
        write_header=args.header,
    )

    overall_start = time.perf_counter()
    reports = asyncio.run(run_scraper(config))
    total_elapsed = time.perf_counter() - overall_start

    written = sum(report.question_count for report in reports)
    skipped = sum(len(report.failures) for report in reports)
    logger.info(
        "Finished in %.2fs (%d sections, %d questions written, %d skipped)",
        total_elapsed,
        len(reports),
        written,
        skipped,
    )
    for report in reports:
        logger.debug(
            "%s -> %s (%d questions)",
            report.section.name,
            report.output_path,
            report.question_count,
        )


def _run_bulletin(args: argparse.Namespace) -> None:
    config = BulletinConfig(
        output_root=Path(args.output).resolve(),
        base_url=args.base_url,
        page_limit=args.page_limit,
        request_timeout=args.timeout,
    )

    overall_start = time.perf_counter()
    total = run_bulletin(config)
    logger.info(
        "Finished in %.2fs (%d bulletin questions)",
        time.perf_counter() - overall_start,
        total,
    )


def main(argv: Sequence[str] | None = None) -> None:
    args = parse_args(argv)
    _configure_logging(args.verbose)
    if args.command == "practice":
        _run_practice(args)
    else:
        _run_bulletin(args)


if __name__ == "__main__":
    main()

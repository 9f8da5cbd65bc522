"""Command-line interface entry point for the merchant map crawler."""

from __future__ import annotations

import argparse
import asyncio
from copy import deepcopy
from pathlib import Path
from typing import Any, Iterable

import yaml
from dotenv import load_dotenv

import merchantmap.selectors as selectors
from merchantmap.driver import RegionDriver
from merchantmap.errors import ConfigError, CrawlError
from merchantmap.logging_config import get_logger, set_level
from merchantmap.models import CrawlState
from merchantmap.paginator import ResultPaginator
from merchantmap.playwright_env import browser_session
from merchantmap.settle import build_settle
from merchantmap.storage.repo import CsvRecordWriter
from merchantmap.walker import DEFAULT_PAGE_SIZE, CategoryWalker

LOGGER = get_logger(__name__)


DEFAULT_CONFIG: dict[str, Any] = {
    "start_url": selectors.START_URL,
    "regions": [17],
    "output_dir": "dist",
    "page_size": DEFAULT_PAGE_SIZE,
    "settle": {
        "strategy": "fixed",
        "delay_ms": 3000,
        "attempts": 3,
        "timeout_ms": None,
    },
    "max_pages": None,
    "follow_last_region_link": False,
    "headless": None,
}


def parse_args(argv: Iterable[str] | None = None) -> argparse.Namespace:
    """Parse CLI arguments for the application."""

    parser = argparse.ArgumentParser(
        description="Build per-category merchant CSV files from the merchant locator."
    )
    parser.add_argument(
        "--config",
        default="config.yml",
        help="YAML configuration file (default: config.yml).",
    )
    parser.add_argument(
        "--regions",
        type=str,
        help="Comma-separated region indices, e.g. 17,18 (overrides configuration).",
    )
    parser.add_argument(
        "--output-dir",
        dest="output_dir",
        help="Directory receiving the CSV files.",
    )
    parser.add_argument(
        "--headed",
        action="store_true",
        help="Show the browser window.",
    )
    parser.add_argument(
        "--max-pages",
        dest="max_pages",
        type=int,
        help="Abort a category whose result list has more pages than this.",
    )
    parser.add_argument(
        "--settle",
        choices=("fixed", "condition", "instant"),
        help="Wait strategy used after each page action.",
    )
    parser.add_argument(
        "--list-regions",
        action="store_true",
        help="Print region indices and labels, then exit.",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging.",
    )

    args = parser.parse_args(list(argv) if argv is not None else None)

    if args.max_pages is not None and args.max_pages <= 0:
        parser.error("--max-pages must be a positive integer")

    region_arg = args.regions or ""
    try:
        args.regions = [int(part.strip()) for part in region_arg.split(",") if part.strip()]
    except ValueError:
        parser.error(f"Invalid --regions value: {region_arg!r}")
    if any(index < 0 for index in args.regions):
        parser.error("--regions indices must not be negative")
    return args


def _deep_merge(default: Any, override: Any) -> Any:
    if not isinstance(default, dict) or not isinstance(override, dict):
        return deepcopy(override)

    merged: dict[str, Any] = deepcopy(default)
    for key, value in override.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = deepcopy(value)
    return merged


def _load_config(path: Path) -> dict[str, Any]:
    if path.exists():
        with path.open("r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle) or {}
    else:
        LOGGER.warning("Configuration file %s not found; using defaults", path)
        data = {}

    if not isinstance(data, dict):
        raise ConfigError(f"Configuration file {path} must contain a mapping")
    return _deep_merge(DEFAULT_CONFIG, data) if data else deepcopy(DEFAULT_CONFIG)


def _apply_overrides(config: dict[str, Any], args: argparse.Namespace) -> dict[str, Any]:
    merged = deepcopy(config)
    if args.regions:
        merged["regions"] = list(args.regions)
    if args.output_dir:
        merged["output_dir"] = args.output_dir
    if args.max_pages is not None:
        merged["max_pages"] = args.max_pages
    if args.settle:
        merged["settle"]["strategy"] = args.settle
    if args.headed:
        merged["headless"] = False
    return merged


def _resolve_regions(config: dict[str, Any]) -> list[int]:
    raw = config.get("regions") or []
    if not isinstance(raw, (list, tuple)):
        raw = [raw]
    try:
        regions = [int(value) for value in raw]
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Invalid regions value: {raw!r}") from exc
    if not regions:
        raise ConfigError("No target regions configured")
    return regions


def build_driver(config: dict[str, Any]) -> RegionDriver:
    """Wire writer, settle strategy, paginator, walker and driver together."""

    settle = build_settle(config.get("settle"))
    writer = CsvRecordWriter(config.get("output_dir") or "dist")
    paginator = ResultPaginator(settle, max_pages=config.get("max_pages"))
    walker = CategoryWalker(
        writer,
        paginator=paginator,
        settle=settle,
        page_size=str(config.get("page_size") or DEFAULT_PAGE_SIZE),
    )
    return RegionDriver(
        walker,
        writer,
        settle=settle,
        follow_last_region_link=bool(config.get("follow_last_region_link")),
    )


async def _list_regions(config: dict[str, Any]) -> None:
    driver = build_driver(config)
    async with browser_session(config["start_url"], headless=config.get("headless")) as page:
        for region in await driver.list_regions(page):
            print(f"{region.index}\t{region.label}")


async def _crawl(config: dict[str, Any]) -> None:
    regions = _resolve_regions(config)
    driver = build_driver(config)
    state = CrawlState()
    async with browser_session(config["start_url"], headless=config.get("headless")) as page:
        results = await driver.run(page, regions, state)

    total = sum(len(records) for records in results.values())
    LOGGER.info(
        "Crawl finished: %s regions, %s records, %s files",
        len(results),
        total,
        len(driver.writer.written),
    )


async def _async_main(argv: Iterable[str] | None = None) -> None:
    load_dotenv()
    args = parse_args(argv)
    if args.verbose:
        set_level("DEBUG")

    config = _apply_overrides(_load_config(Path(args.config)), args)

    if args.list_regions:
        await _list_regions(config)
        return

    await _crawl(config)


def main() -> None:
    try:
        asyncio.run(_async_main())
    except CrawlError as exc:
        LOGGER.error("Crawl failed: %s", exc)
        raise SystemExit(1) from exc
    except ConfigError as exc:
        LOGGER.error("Invalid configuration: %s", exc)
        raise SystemExit(1) from exc
    except KeyboardInterrupt:  # pragma: no cover - interactive safety
        LOGGER.info("Interrupted by user")


if __name__ == "__main__":
    main()

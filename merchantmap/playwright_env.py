"""Centralised helpers for Playwright launch and session lifetime."""

from __future__ import annotations

import os
import shlex
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator
from urllib.parse import urlparse

from playwright.async_api import Browser, BrowserContext, Page, async_playwright

from merchantmap.logging_config import get_logger

LOGGER = get_logger(__name__)

_FALSE_VALUES = {"0", "false", "no", "off"}


def _as_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    return value.strip().lower() not in _FALSE_VALUES


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return int(raw.strip())
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return float(raw.strip())
    except ValueError:
        return default


def headless_enabled() -> bool:
    """Return True if Playwright should run in headless mode."""

    return _as_bool(os.getenv("MERCHANTMAP_HEADLESS"), True)


def _proxy_config() -> dict[str, str] | None:
    raw = os.getenv("MERCHANTMAP_PROXY")
    if not raw:
        return None
    parsed = urlparse(raw)
    if not parsed.scheme:
        return {"server": f"http://{raw}"}
    return {"server": raw}


def slow_mo_ms() -> int | None:
    value = _env_int("MERCHANTMAP_SLOW_MO_MS", 0)
    return value if value > 0 else None


def settle_multiplier() -> float:
    """Scale factor applied to every configured settle delay."""

    return max(_env_float("MERCHANTMAP_SETTLE_MULTIPLIER", 1.0), 0.0)


def launch_kwargs(*, headless: bool | None = None) -> dict[str, Any]:
    """Return kwargs passed to chromium.launch."""

    args = [
        "--disable-dev-shm-usage",
        "--lang=ja-JP",
        "--no-default-browser-check",
        "--window-size=1280,960",
    ]
    extra_args = os.getenv("MERCHANTMAP_CHROMIUM_ARGS")
    if extra_args:
        args.extend(shlex.split(extra_args))

    kwargs: dict[str, Any] = {
        "headless": headless_enabled() if headless is None else headless,
        "args": args,
    }

    channel = os.getenv("MERCHANTMAP_BROWSER_CHANNEL")
    if channel:
        kwargs["channel"] = channel

    proxy = _proxy_config()
    if proxy:
        kwargs["proxy"] = proxy

    slow_mo = slow_mo_ms()
    if slow_mo:
        kwargs["slow_mo"] = slow_mo

    return kwargs


async def close_browser(browser: Browser | None, context: BrowserContext | None) -> None:
    """Close the provided browser/context pair without raising."""

    if context is not None:
        try:
            await context.close()
        except Exception as exc:
            LOGGER.warning("Failed to close context: %s", exc)

    if browser is not None:
        try:
            await browser.close()
        except Exception as exc:
            LOGGER.warning("Failed to close browser: %s", exc)


@asynccontextmanager
async def browser_session(
    start_url: str | None = None,
    *,
    headless: bool | None = None,
    default_timeout_ms: int | None = None,
) -> AsyncIterator[Page]:
    """Yield one page in a fresh browser, closing everything on exit.

    The browser is released on every exit path, including when the crawl
    raises part way through.
    """

    async with async_playwright() as playwright:
        browser: Browser | None = None
        context: BrowserContext | None = None
        try:
            LOGGER.info("Launching browser")
            browser = await playwright.chromium.launch(**launch_kwargs(headless=headless))
            context = await browser.new_context(
                viewport={"width": 1280, "height": 960},
                locale="ja-JP",
            )
            page = await context.new_page()
            if default_timeout_ms:
                page.set_default_timeout(default_timeout_ms)
            if start_url:
                LOGGER.info("Opening %s", start_url)
                await page.goto(start_url, wait_until="domcontentloaded")
            yield page
        finally:
            await close_browser(browser, context)
            LOGGER.info("Resource cleanup complete")


__all__ = [
    "browser_session",
    "close_browser",
    "headless_enabled",
    "launch_kwargs",
    "settle_multiplier",
    "slow_mo_ms",
]

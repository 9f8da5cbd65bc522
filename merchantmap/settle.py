"""Strategies for waiting until the page has re-rendered after an action.

The merchant locator exposes no completion event for its AJAX searches, so
every click is followed by a settle step: an optional visibility wait on a
selector and a fixed delay.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from playwright.async_api import TimeoutError as PlaywrightTimeoutError
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_random_exponential

from merchantmap.errors import ConfigError
from merchantmap.logging_config import get_logger
from merchantmap.playwright_env import settle_multiplier

LOGGER = get_logger(__name__)

DEFAULT_DELAY_MS = 3000


class SettleStrategy:
    """Base class; ``settle`` must not return before the page is usable."""

    name = "base"

    async def settle(self, page: Any, *, visible: str | None = None) -> None:
        raise NotImplementedError


def _scaled(delay_ms: int) -> int:
    return max(int(delay_ms * settle_multiplier()), 0)


@dataclass
class FixedDelaySettle(SettleStrategy):
    """Wait for *visible* (when given), then sleep a fixed delay."""

    delay_ms: int = DEFAULT_DELAY_MS
    timeout_ms: int | None = None

    name = "fixed"

    async def settle(self, page: Any, *, visible: str | None = None) -> None:
        if visible:
            kwargs: dict[str, Any] = {"state": "visible"}
            if self.timeout_ms:
                kwargs["timeout"] = self.timeout_ms
            await page.wait_for_selector(visible, **kwargs)
        delay = _scaled(self.delay_ms)
        if delay:
            await page.wait_for_timeout(delay)


@dataclass
class ConditionSettle(SettleStrategy):
    """Retry the visibility wait a bounded number of times.

    When the selector never shows up the strategy falls back to the fixed
    delay instead of failing; the next DOM read decides whether the page is
    really broken. Without a selector it behaves like the fixed delay.
    """

    delay_ms: int = DEFAULT_DELAY_MS
    attempts: int = 3
    timeout_ms: int | None = 5000
    post_delay_ms: int = 500
    backoff_multiplier: float = 0.5

    name = "condition"

    async def settle(self, page: Any, *, visible: str | None = None) -> None:
        if not visible:
            await self._sleep(page, self.delay_ms)
            return

        @retry(
            stop=stop_after_attempt(max(self.attempts, 1)),
            wait=wait_random_exponential(multiplier=self.backoff_multiplier, max=5),
            retry=retry_if_exception_type(PlaywrightTimeoutError),
            reraise=True,
        )
        async def _wait_visible() -> None:
            kwargs: dict[str, Any] = {"state": "visible"}
            if self.timeout_ms:
                kwargs["timeout"] = self.timeout_ms
            await page.wait_for_selector(visible, **kwargs)

        try:
            await _wait_visible()
        except PlaywrightTimeoutError:
            LOGGER.warning(
                "Selector %s not visible after %s attempts; falling back to fixed delay",
                visible,
                self.attempts,
            )
            await self._sleep(page, self.delay_ms)
            return

        await self._sleep(page, self.post_delay_ms)

    async def _sleep(self, page: Any, delay_ms: int) -> None:
        delay = _scaled(delay_ms)
        if delay:
            await page.wait_for_timeout(delay)


class InstantSettle(SettleStrategy):
    """Do not wait at all. Only for fakes and dry runs."""

    name = "instant"

    async def settle(self, page: Any, *, visible: str | None = None) -> None:
        return None


def build_settle(config: dict[str, Any] | None) -> SettleStrategy:
    """Create the strategy described by the ``settle`` config section."""

    config = config or {}
    strategy = str(config.get("strategy") or "fixed").strip().lower()
    try:
        delay_ms = int(config.get("delay_ms", DEFAULT_DELAY_MS))
        timeout_raw = config.get("timeout_ms")
        timeout_ms = int(timeout_raw) if timeout_raw else None
        attempts = int(config.get("attempts", 3))
        post_delay_ms = int(config.get("post_delay_ms", 500))
        backoff = float(config.get("backoff_multiplier", 0.5))
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Invalid settle configuration: {exc}") from exc

    if strategy == "fixed":
        return FixedDelaySettle(delay_ms=delay_ms, timeout_ms=timeout_ms)
    if strategy == "condition":
        return ConditionSettle(
            delay_ms=delay_ms,
            attempts=attempts,
            timeout_ms=timeout_ms or 5000,
            post_delay_ms=post_delay_ms,
            backoff_multiplier=backoff,
        )
    if strategy == "instant":
        return InstantSettle()
    raise ConfigError(f"Unknown settle strategy: {strategy}")


__all__ = [
    "ConditionSettle",
    "FixedDelaySettle",
    "InstantSettle",
    "SettleStrategy",
    "build_settle",
]

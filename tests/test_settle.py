import asyncio

import pytest
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from merchantmap.errors import ConfigError
from merchantmap.settle import (
    ConditionSettle,
    FixedDelaySettle,
    InstantSettle,
    build_settle,
)


class _Page:
    def __init__(self, failures: int = 0) -> None:
        self.failures = failures
        self.calls: list[tuple] = []

    async def wait_for_selector(self, selector, **kwargs):
        self.calls.append(("wait", selector, kwargs))
        if self.failures > 0:
            self.failures -= 1
            raise PlaywrightTimeoutError("not visible")
        return object()

    async def wait_for_timeout(self, timeout):
        self.calls.append(("sleep", timeout))


def test_fixed_delay_waits_for_selector_then_sleeps(monkeypatch) -> None:
    monkeypatch.delenv("MERCHANTMAP_SETTLE_MULTIPLIER", raising=False)
    page = _Page()
    asyncio.run(FixedDelaySettle().settle(page, visible="#list"))
    assert page.calls == [("wait", "#list", {"state": "visible"}), ("sleep", 3000)]


def test_fixed_delay_without_selector_only_sleeps(monkeypatch) -> None:
    monkeypatch.setenv("MERCHANTMAP_SETTLE_MULTIPLIER", "0.5")
    page = _Page()
    asyncio.run(FixedDelaySettle(delay_ms=1000).settle(page))
    assert page.calls == [("sleep", 500)]


def test_fixed_delay_propagates_timeouts() -> None:
    page = _Page(failures=1)
    with pytest.raises(PlaywrightTimeoutError):
        asyncio.run(FixedDelaySettle(timeout_ms=10).settle(page, visible="#list"))


def test_condition_settle_falls_back_to_fixed_delay(monkeypatch) -> None:
    monkeypatch.delenv("MERCHANTMAP_SETTLE_MULTIPLIER", raising=False)
    page = _Page(failures=5)
    strategy = ConditionSettle(delay_ms=2000, attempts=1, timeout_ms=10)
    asyncio.run(strategy.settle(page, visible="#list"))
    assert page.calls[-1] == ("sleep", 2000)
    assert [c[0] for c in page.calls].count("wait") == 1


def test_condition_settle_retries_until_visible(monkeypatch) -> None:
    monkeypatch.delenv("MERCHANTMAP_SETTLE_MULTIPLIER", raising=False)
    page = _Page(failures=1)
    strategy = ConditionSettle(
        delay_ms=2000, attempts=3, timeout_ms=10, post_delay_ms=100, backoff_multiplier=0
    )
    asyncio.run(strategy.settle(page, visible="#list"))
    assert [c[0] for c in page.calls] == ["wait", "wait", "sleep"]
    assert page.calls[-1] == ("sleep", 100)


def test_condition_settle_gives_up_after_attempts(monkeypatch) -> None:
    monkeypatch.delenv("MERCHANTMAP_SETTLE_MULTIPLIER", raising=False)
    page = _Page(failures=5)
    strategy = ConditionSettle(
        delay_ms=2000, attempts=3, timeout_ms=10, post_delay_ms=100, backoff_multiplier=0
    )
    asyncio.run(strategy.settle(page, visible="#list"))
    assert [c[0] for c in page.calls] == ["wait", "wait", "wait", "sleep"]
    assert page.calls[-1] == ("sleep", 2000)
    assert page.failures == 2


def test_condition_settle_uses_short_delay_once_visible(monkeypatch) -> None:
    monkeypatch.delenv("MERCHANTMAP_SETTLE_MULTIPLIER", raising=False)
    page = _Page()
    strategy = ConditionSettle(delay_ms=2000, post_delay_ms=100)
    asyncio.run(strategy.settle(page, visible="#list"))
    assert page.calls == [
        ("wait", "#list", {"state": "visible", "timeout": 5000}),
        ("sleep", 100),
    ]


def test_instant_settle_touches_nothing() -> None:
    page = _Page()
    asyncio.run(InstantSettle().settle(page, visible="#list"))
    assert page.calls == []


def test_build_settle_from_config() -> None:
    fixed = build_settle({"strategy": "fixed", "delay_ms": 1200, "timeout_ms": 9000})
    assert isinstance(fixed, FixedDelaySettle)
    assert (fixed.delay_ms, fixed.timeout_ms) == (1200, 9000)

    condition = build_settle({"strategy": "Condition", "attempts": 4})
    assert isinstance(condition, ConditionSettle)
    assert condition.attempts == 4

    assert isinstance(build_settle({"strategy": "instant"}), InstantSettle)
    assert isinstance(build_settle(None), FixedDelaySettle)


def test_build_settle_rejects_unknown_strategy() -> None:
    with pytest.raises(ConfigError):
        build_settle({"strategy": "spin"})


def test_build_settle_rejects_non_numeric_delay() -> None:
    with pytest.raises(ConfigError):
        build_settle({"strategy": "condition", "delay_ms": "soon"})


def test_build_settle_reads_backoff_multiplier() -> None:
    condition = build_settle({"strategy": "condition", "backoff_multiplier": 0})
    assert condition.backoff_multiplier == 0

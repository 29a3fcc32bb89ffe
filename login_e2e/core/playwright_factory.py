from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from playwright.sync_api import sync_playwright, Browser, BrowserContext, Playwright, Error as PlaywrightError

from .settings import Settings

logger = logging.getLogger(__name__)


@dataclass
class PWContextBundle:
    playwright: Playwright
    browser: Browser
    context: BrowserContext


def launch_kwargs(settings: Settings) -> dict:
    kwargs = {"headless": settings.headless, "slow_mo": settings.slow_mo_ms}
    if settings.channel:
        kwargs["channel"] = settings.channel
    return kwargs


def new_isolated_context(browser: Browser, settings: Settings) -> BrowserContext:
    """
    シナリオごとに新しい context（cookie / localStorage を共有しない）。
    """
    context = browser.new_context(locale=settings.locale)

    # タイムアウト統一
    context.set_default_timeout(settings.timeout_ms)
    context.set_default_navigation_timeout(settings.nav_timeout_ms)

    # trace開始（stopは呼び出し側で）
    if settings.trace:
        context.tracing.start(screenshots=True, snapshots=True, sources=True)
    return context


def create_context(settings: Optional[Settings] = None) -> PWContextBundle:
    """
    Playwright インスタンスごと作る。
    sync API はスレッドをまたげないので、ワーカースレッドごとにこれを呼ぶ。
    """
    settings = settings or Settings.from_env()

    pw = sync_playwright().start()
    try:
        browser = pw.chromium.launch(**launch_kwargs(settings))
        context = new_isolated_context(browser, settings)
    except Exception:
        pw.stop()
        raise

    return PWContextBundle(playwright=pw, browser=browser, context=context)


def stop_tracing(context: BrowserContext, path: Optional[str] = None) -> None:
    try:
        if path:
            context.tracing.stop(path=path)
        else:
            context.tracing.stop()
    except PlaywrightError as e:
        # tracing 未開始 / context 終了済み
        logger.debug("tracing stop skipped: %s", e)


def close_context(bundle: PWContextBundle) -> None:
    for name, close in (
        ("context", bundle.context.close),
        ("browser", bundle.browser.close),
        ("playwright", bundle.playwright.stop),
    ):
        try:
            close()
        except Exception as e:
            logger.debug("close %s failed: %s", name, e)

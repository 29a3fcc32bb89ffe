# login_e2e/flows/baseline.py
from __future__ import annotations

from typing import Callable, Dict, List, Tuple

from playwright.sync_api import Page, expect, Error as PlaywrightError, TimeoutError as PlaywrightTimeoutError

from login_e2e.core.exceptions import NavigationFailure, StepTimeout
from login_e2e.core.locators import TARGETS
from login_e2e.core.settings import Settings

BaselineStep = Callable[[Page, str, Settings], None]


def open_login_page(page: Page, url: str, settings: Settings) -> None:
    try:
        resp = page.goto(url, wait_until="domcontentloaded", timeout=settings.nav_timeout_ms)
    except PlaywrightTimeoutError as e:
        raise NavigationFailure(f"{url} did not load within {settings.nav_timeout_ms}ms", locator=url) from e
    except PlaywrightError as e:
        # net::ERR_NAME_NOT_RESOLVED など
        raise NavigationFailure(f"{url} is unreachable: {e}", locator=url) from e

    if resp is not None and resp.status >= 400:
        raise NavigationFailure(
            f"{url} answered HTTP {resp.status}",
            locator=url,
            expected="HTTP < 400",
            actual=f"HTTP {resp.status}",
        )


def dismiss_consent(page: Page, url: str, settings: Settings) -> None:
    """Cookieバナーを「Nur Unbedingt Erforderlich」で閉じる"""
    btn = TARGETS["consent.reject"](page)
    try:
        btn.click(timeout=settings.timeout_ms)
        btn.wait_for(state="hidden", timeout=settings.timeout_ms)
    except PlaywrightTimeoutError as e:
        raise StepTimeout(
            f"consent banner could not be dismissed within {settings.timeout_ms}ms",
            locator="consent.reject",
            expected="clickable, then hidden",
        ) from e


def open_reset_dialog(page: Page, url: str, settings: Settings) -> None:
    try:
        TARGETS["login.forgot_password"](page).click(timeout=settings.timeout_ms)
    except PlaywrightTimeoutError as e:
        raise StepTimeout(
            f"'forgot password' trigger not clickable within {settings.timeout_ms}ms",
            locator="login.forgot_password",
            expected="clickable",
        ) from e
    try:
        expect(TARGETS["reset.form"](page)).to_be_visible(timeout=settings.timeout_ms)
    except AssertionError as e:
        raise StepTimeout(
            f"reset dialog did not open within {settings.timeout_ms}ms",
            locator="reset.form",
            expected="visible",
        ) from e


_LOGIN_BASELINE: List[Tuple[str, BaselineStep]] = [
    ("open login page", open_login_page),
    ("dismiss cookie consent", dismiss_consent),
]

BASELINES: Dict[str, List[Tuple[str, BaselineStep]]] = {
    "login": _LOGIN_BASELINE,
    "reset": _LOGIN_BASELINE + [("open reset dialog", open_reset_dialog)],
}


def baseline_steps(suite: str) -> List[Tuple[str, BaselineStep]]:
    if suite not in BASELINES:
        raise ValueError(f"Unknown suite: {suite}")
    return BASELINES[suite]

from __future__ import annotations

import re
from typing import Union

from playwright.sync_api import Page, Locator, expect, Error as PlaywrightError

from login_e2e.core.exceptions import PredicateMismatch
from login_e2e.core.locators import resolve
from login_e2e.core.text import normalize_text
from login_e2e.core.types import Predicate

# 失敗後に実際の状態を見に行くときの待ち時間（短く）
OBSERVE_TIMEOUT_MS = 1000


def _first_line(e: Exception) -> str:
    return (str(e).strip().splitlines() or [""])[0]


def _expect(page: Page, target: Union[Page, Locator], pred: Predicate, timeout_ms: int) -> None:
    state = pred.state
    if state == "has-url":
        expect(page).to_have_url(re.compile(pred.value or ""), timeout=timeout_ms)
        return

    if not isinstance(target, Locator):
        raise ValueError(f"State '{state}' needs an element locator")

    if state == "visible":
        expect(target).to_be_visible(timeout=timeout_ms)
    elif state == "hidden":
        expect(target).to_be_hidden(timeout=timeout_ms)
    elif state == "enabled":
        expect(target).to_be_enabled(timeout=timeout_ms)
    elif state == "checked":
        expect(target).to_be_checked(timeout=timeout_ms)
    elif state == "not-checked":
        expect(target).not_to_be_checked(timeout=timeout_ms)
    elif state == "has-attribute":
        expect(target).to_have_attribute(pred.attribute or "", pred.value or "", timeout=timeout_ms)
    elif state == "has-class":
        expect(target).to_have_class(re.compile(pred.value or ""), timeout=timeout_ms)
    elif state == "has-text":
        expect(target).to_contain_text(pred.value or "", timeout=timeout_ms)
    else:
        raise ValueError(f"Unknown state: {state}")


def observe(page: Page, target: Union[Page, Locator], pred: Predicate) -> str:
    """
    失敗時の診断用：実際の状態を文字列で返す（ここでは例外を投げない）
    """
    if pred.state == "has-url" or not isinstance(target, Locator):
        return page.url

    try:
        n = target.count()
        if n == 0:
            return "no matching element"
        if n > 1:
            return f"{n} matching elements"

        if pred.state in ("visible", "hidden"):
            return "visible" if target.is_visible() else "hidden"
        if pred.state == "enabled":
            return "enabled" if target.is_enabled(timeout=OBSERVE_TIMEOUT_MS) else "disabled"
        if pred.state in ("checked", "not-checked"):
            return "checked" if target.is_checked(timeout=OBSERVE_TIMEOUT_MS) else "not-checked"
        if pred.state == "has-attribute":
            v = target.get_attribute(pred.attribute or "", timeout=OBSERVE_TIMEOUT_MS)
            return f"{pred.attribute}={v!r}"
        if pred.state == "has-class":
            return f"class={target.get_attribute('class', timeout=OBSERVE_TIMEOUT_MS)!r}"
        if pred.state == "has-text":
            return repr(normalize_text(target.inner_text(timeout=OBSERVE_TIMEOUT_MS)))
    except PlaywrightError as e:
        return f"unavailable ({_first_line(e)})"

    return "unknown"


def check_predicate(page: Page, pred: Predicate, timeout_ms: int) -> None:
    """
    条件を満たすまで待つ。満たさなければ PredicateMismatch。
    """
    target = resolve(page, pred.locator)
    where = pred.locator.describe()
    expected = pred.describe_expected()
    try:
        _expect(page, target, pred, timeout_ms)
    except AssertionError as e:
        raise PredicateMismatch(
            f"{where} is not {expected} after {timeout_ms}ms",
            locator=where,
            expected=expected,
            actual=observe(page, target, pred),
        ) from e
    except PlaywrightError as e:
        # strict mode violation など
        raise PredicateMismatch(
            f"{where} could not be evaluated: {_first_line(e)}",
            locator=where,
            expected=expected,
            actual=observe(page, target, pred),
        ) from e

# login_e2e/flows/steps.py
from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Mapping, Optional

from playwright.sync_api import Page, Locator, expect, TimeoutError as PlaywrightTimeoutError

from login_e2e.core.exceptions import StepTimeout
from login_e2e.core.locators import resolve
from login_e2e.core.predicates import check_predicate
from login_e2e.core.settings import Settings
from login_e2e.core.text import render_template
from login_e2e.core.types import Fixture, LocatorSpec, Predicate, Scenario, Step

logger = logging.getLogger(__name__)


# --- fixture 参照の埋め込み ---

def render_locator(spec: Optional[LocatorSpec], ctx: Mapping[str, Any]) -> Optional[LocatorSpec]:
    if spec is None:
        return None
    return replace(spec, text=render_template(spec.text, ctx), name=render_template(spec.name, ctx))


def render_predicate(pred: Predicate, ctx: Mapping[str, Any]) -> Predicate:
    return replace(
        pred,
        locator=render_locator(pred.locator, ctx),
        value=render_template(pred.value, ctx),
    )


def render_step(step: Step, ctx: Mapping[str, Any]) -> Step:
    return replace(
        step,
        locator=render_locator(step.locator, ctx),
        focus=render_locator(step.focus, ctx),
        value=render_template(step.value, ctx),
        predicate=render_predicate(step.predicate, ctx) if step.predicate else None,
    )


def check_references(sc: Scenario, fixture: Fixture) -> None:
    """実行前に fixture 参照が全部解決できるか確認（ダメなら ValueError）"""
    ctx = fixture.template_context()
    try:
        for s in sc.steps:
            render_step(s, ctx)
        for p in sc.expected:
            render_predicate(p, ctx)
    except ValueError as e:
        raise ValueError(f"{sc.id}: {e}") from e


# --- 実行 ---

def _element(page: Page, spec: Optional[LocatorSpec]) -> Locator:
    loc = resolve(page, spec or LocatorSpec())
    if not isinstance(loc, Locator):
        raise ValueError("Interaction step needs an element locator")
    return loc


def _wait_editable(loc: Locator, where: str, timeout_ms: int) -> None:
    """fill の前提：表示されていて有効であること"""
    try:
        loc.wait_for(state="visible", timeout=timeout_ms)
        expect(loc).to_be_enabled(timeout=timeout_ms)
    except (PlaywrightTimeoutError, AssertionError) as e:
        raise StepTimeout(
            f"{where} not visible and enabled within {timeout_ms}ms",
            locator=where,
            expected="visible and enabled",
        ) from e


def run_step(page: Page, step: Step, settings: Settings) -> None:
    """
    1ステップ実行。step は render 済みの前提。
    - 操作系: タイムアウトで StepTimeout
    - expect: 不一致で PredicateMismatch
    """
    if step.action == "expect":
        if step.predicate is None:
            raise ValueError("expect step without predicate")
        check_predicate(page, step.predicate, settings.expect_timeout_ms)
        return

    t = settings.timeout_ms
    where = step.locator.describe() if step.locator else "page"
    loc = _element(page, step.locator)

    if step.action == "fill":
        _wait_editable(loc, where, t)

    try:
        if step.action == "fill":
            loc.click(timeout=t)
            loc.fill(step.value or "", timeout=t)
        elif step.action in ("click", "submit"):
            # submit: 送信時バリデーション（必須 / 認証）のトリガー
            loc.click(timeout=t)
        elif step.action == "check":
            loc.check(timeout=t)
        elif step.action == "uncheck":
            loc.uncheck(timeout=t)
        elif step.action == "blur":
            # blur: フォーカス移動時バリデーション（形式チェック）のトリガー
            if step.focus is not None:
                _element(page, step.focus).click(timeout=t)
            else:
                loc.blur(timeout=t)
        else:
            raise ValueError(f"Unknown action: {step.action}")
    except PlaywrightTimeoutError as e:
        raise StepTimeout(
            f"{step.describe()} timed out after {t}ms",
            locator=where,
            expected="actionable",
        ) from e

# login_e2e/flows/runner.py
from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, List, Optional, Sequence

from playwright.sync_api import Page, BrowserContext, Error as PlaywrightError

from login_e2e.core.artifacts import Artifacts
from login_e2e.core.exceptions import ScenarioError
from login_e2e.core.playwright_factory import close_context, create_context, stop_tracing
from login_e2e.core.predicates import check_predicate
from login_e2e.core.results import Failure, ScenarioResult, SuiteSummary
from login_e2e.core.settings import Settings
from login_e2e.core.types import Fixture, Scenario
from login_e2e.flows.baseline import baseline_steps
from login_e2e.flows.steps import check_references, render_predicate, render_step, run_step

logger = logging.getLogger(__name__)

ContextHook = Callable[[BrowserContext], None]


def run_scenario(
    sc: Scenario,
    page: Page,
    fixture: Fixture,
    settings: Optional[Settings] = None,
    artifacts: Optional[Artifacts] = None,
) -> ScenarioResult:
    """
    baseline -> steps -> expect の順に実行。
    最初の失敗で打ち切って ScenarioResult.failure に詰める（例外は外に出さない）。
    fixture 参照が解決できない場合だけ ValueError（定義ミス）。
    """
    settings = settings or Settings.from_env()
    ctx = fixture.template_context()
    steps = [render_step(s, ctx) for s in sc.steps]
    expected = [render_predicate(p, ctx) for p in sc.expected]
    url = sc.url or settings.login_url

    result = ScenarioResult(scenario_id=sc.id, name=sc.name)
    started = time.monotonic()
    logger.info("[%s] start: %s", sc.id, sc.name)

    phase, index, desc = "baseline", 0, ""
    try:
        for index, (desc, fn) in enumerate(baseline_steps(sc.suite), 1):
            fn(page, url, settings)
            result.trace.append(f"ok baseline #{index}: {desc}")

        phase = "step"
        for index, step in enumerate(steps, 1):
            desc = step.describe()
            logger.debug("[%s] step #%d: %s", sc.id, index, desc)
            run_step(page, step, settings)
            result.trace.append(f"ok step #{index}: {desc}")

        phase = "expected"
        for index, pred in enumerate(expected, 1):
            desc = f"expect {pred.locator.describe()} {pred.describe_expected()}"
            check_predicate(page, pred, settings.expect_timeout_ms)
            result.trace.append(f"ok expected #{index}: {desc}")

    except ScenarioError as e:
        result.failure = Failure.from_error(e, phase, index, desc)
    except PlaywrightError as e:
        # strict mode violation / ページクラッシュなど、分類できないもの
        result.failure = Failure(
            kind="error",
            phase=phase,
            index=index,
            step=desc,
            message=(str(e).strip().splitlines() or [type(e).__name__])[0],
        )
    finally:
        result.duration_sec = time.monotonic() - started

    if result.failure is not None:
        f = result.failure
        result.trace.append(f"FAILED {f.phase} #{f.index}: {f.step}")
        logger.warning("[%s] failed (%.1fs)\n%s", sc.id, result.duration_sec, f.describe())
        if artifacts is not None:
            artifacts.save_debug(page, f"{f.phase}{f.index}_{f.kind}")
    else:
        logger.info("[%s] passed (%.1fs)", sc.id, result.duration_sec)

    return result


def run_scenario_isolated(
    sc: Scenario,
    fixture: Fixture,
    settings: Settings,
    context_hook: Optional[ContextHook] = None,
) -> ScenarioResult:
    """
    Playwright インスタンス + 新規 context を作って1シナリオ実行。
    失敗したときだけ trace.zip を残す。
    """
    bundle = create_context(settings)
    try:
        if context_hook is not None:
            context_hook(bundle.context)
        page = bundle.context.new_page()
        artifacts = Artifacts(base_dir=settings.artifact_dir, scenario_id=sc.id)

        result = run_scenario(sc, page, fixture, settings, artifacts)

        if settings.trace:
            stop_tracing(bundle.context, None if result.ok else str(artifacts.trace_path))
        return result
    finally:
        close_context(bundle)


def run_suite(
    scenarios: Sequence[Scenario],
    fixture: Fixture,
    settings: Settings,
    workers: Optional[int] = None,
    context_hook: Optional[ContextHook] = None,
) -> SuiteSummary:
    """
    workers > 1 ならスレッドプールで並列実行（1スレッド = 1 Playwright + 1 context）。
    結果は定義順のまま返す。
    """
    for sc in scenarios:
        check_references(sc, fixture)

    n = max(1, workers if workers is not None else settings.workers)

    def _one(sc: Scenario) -> ScenarioResult:
        try:
            return run_scenario_isolated(sc, fixture, settings, context_hook)
        except Exception as e:
            # ブラウザ起動失敗など。他のシナリオは続ける
            logger.exception("[%s] aborted", sc.id)
            return ScenarioResult(
                scenario_id=sc.id,
                name=sc.name,
                failure=Failure(
                    kind="error",
                    phase="setup",
                    index=0,
                    step="create browser context",
                    message=f"{type(e).__name__}: {e}",
                ),
            )

    logger.info("running %d scenarios with %d worker(s)", len(scenarios), n)
    if n == 1:
        results: List[ScenarioResult] = [_one(sc) for sc in scenarios]
    else:
        with ThreadPoolExecutor(max_workers=n, thread_name_prefix="scenario") as ex:
            results = list(ex.map(_one, scenarios))

    summary = SuiteSummary(results=results)
    logger.info("suite finished: %d passed, %d failed", summary.passed, summary.failed)
    return summary

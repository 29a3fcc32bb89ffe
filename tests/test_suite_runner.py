import threading
from dataclasses import replace

import pytest
import yaml

from conftest import ROOT, install_mock_site
from login_e2e.core.results import Failure, ScenarioResult
from login_e2e.core.scenario_loader import load_scenarios, scenarios_from_list
from login_e2e.flows import runner

SCENARIOS = scenarios_from_list(yaml.safe_load("""
- {id: a, suite: login, name: A, expect: [{target: login.title, state: visible}]}
- {id: b, suite: login, name: B, expect: [{target: login.title, state: visible}]}
- {id: c, suite: reset, name: C, expect: [{target: reset.title, state: visible}]}
- {id: d, suite: reset, name: D, expect: [{target: reset.title, state: visible}]}
"""))


def _fake_isolated(outcomes, seen_threads=None):
    def fake(sc, fixture, settings, context_hook=None):
        if seen_threads is not None:
            seen_threads.add(threading.current_thread().name)
        outcome = outcomes.get(sc.id, "ok")
        if outcome == "boom":
            raise RuntimeError("browser crashed")
        failure = None
        if outcome == "fail":
            failure = Failure(kind="mismatch", phase="expected", index=1, step="expect", message="nope")
        return ScenarioResult(scenario_id=sc.id, name=sc.name, failure=failure)
    return fake


def test_sequential_summary(monkeypatch, mock_fixture, mock_settings):
    monkeypatch.setattr(runner, "run_scenario_isolated", _fake_isolated({"b": "fail"}))
    summary = runner.run_suite(SCENARIOS, mock_fixture, mock_settings)

    assert [r.scenario_id for r in summary.results] == ["a", "b", "c", "d"]
    assert (summary.total, summary.passed, summary.failed) == (4, 3, 1)
    assert summary.exit_code == 1


def test_worker_pool_keeps_definition_order(monkeypatch, mock_fixture, mock_settings):
    threads = set()
    monkeypatch.setattr(runner, "run_scenario_isolated", _fake_isolated({}, threads))
    summary = runner.run_suite(SCENARIOS, mock_fixture, mock_settings, workers=3)

    assert [r.scenario_id for r in summary.results] == ["a", "b", "c", "d"]
    assert summary.exit_code == 0
    assert all(name.startswith("scenario") for name in threads)


def test_unexpected_error_stays_in_its_scenario(monkeypatch, mock_fixture, mock_settings):
    monkeypatch.setattr(runner, "run_scenario_isolated", _fake_isolated({"c": "boom"}))
    summary = runner.run_suite(SCENARIOS, mock_fixture, mock_settings, workers=2)

    by_id = {r.scenario_id: r for r in summary.results}
    assert by_id["c"].failure.kind == "error"
    assert by_id["c"].failure.phase == "setup"
    assert "RuntimeError: browser crashed" in by_id["c"].failure.message
    assert by_id["a"].ok and by_id["b"].ok and by_id["d"].ok


def test_bad_fixture_reference_fails_before_running(monkeypatch, mock_fixture, mock_settings):
    called = []
    monkeypatch.setattr(runner, "run_scenario_isolated", lambda *a, **k: called.append(a))
    bad = scenarios_from_list(yaml.safe_load("""
- id: bad
  suite: login
  name: bad
  steps:
    - fill: {target: login.email, value: "{adminUser.email}"}
"""))
    with pytest.raises(ValueError, match="bad: Unknown fixture reference"):
        runner.run_suite(SCENARIOS + bad, mock_fixture, mock_settings)
    assert called == []


@pytest.mark.browser
def test_parallel_run_with_isolated_browsers(mock_fixture, mock_settings):
    by_id = {sc.id: sc for sc in load_scenarios(ROOT / "scenarios" / "scenarios.yaml")}
    picked = [by_id["login_valid_credentials"], by_id["login_ui_elements"], by_id["reset_valid_email"]]

    summary = runner.run_suite(picked, mock_fixture, mock_settings, workers=2, context_hook=install_mock_site)

    assert summary.exit_code == 0, summary.format()
    assert [r.scenario_id for r in summary.results] == [sc.id for sc in picked]


@pytest.mark.browser
def test_failed_scenario_keeps_trace_and_screenshot(mock_fixture, mock_settings):
    settings = replace(mock_settings, trace=True)
    failing = scenarios_from_list(yaml.safe_load("""
- id: wrong_heading
  suite: login
  name: wrong heading
  expect:
    - {role: heading, name: "Hallo {validUser.name}", state: visible}
"""))

    summary = runner.run_suite(failing, mock_fixture, settings, workers=2, context_hook=install_mock_site)

    assert summary.failed == 1
    out_dir = settings.artifact_dir / "wrong_heading"
    assert (out_dir / "trace.zip").exists()
    assert (out_dir / "expected1_mismatch.png").exists()

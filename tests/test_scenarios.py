import pytest

from conftest import ROOT, live_enabled
from login_e2e.core.artifacts import Artifacts
from login_e2e.core.scenario_loader import load_scenarios
from login_e2e.flows.runner import run_scenario

SCENARIOS = load_scenarios(ROOT / "scenarios" / "scenarios.yaml")

pytestmark = [
    pytest.mark.live,
    pytest.mark.skipif(not live_enabled(), reason="set E2E_LIVE=1 to run against the real site"),
]


@pytest.mark.parametrize("sc", SCENARIOS, ids=lambda s: s.id)
def test_scenario(sc, page, test_data, settings, artifacts_base_dir, tracing_stop):
    artifacts = Artifacts(base_dir=artifacts_base_dir, scenario_id=sc.id)
    result = run_scenario(sc, page, test_data, settings, artifacts)
    tracing_stop(str(artifacts.trace_path))
    assert result.ok, result.describe()

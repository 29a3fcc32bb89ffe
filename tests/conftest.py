import os
from dataclasses import replace
from datetime import datetime
from pathlib import Path

import pytest
from dotenv import load_dotenv
from playwright.sync_api import sync_playwright

from login_e2e.core.fixture_loader import fixture_from_dict, load_fixture
from login_e2e.core.playwright_factory import launch_kwargs, new_isolated_context, stop_tracing
from login_e2e.core.settings import Settings
from login_e2e.core.text import safe_name

ROOT = Path(__file__).resolve().parents[1]
PAGES_DIR = Path(__file__).parent / "pages"

# オフラインテスト用のダミーログインページ（page.route で返す）
MOCK_ORIGIN = "https://shop.test"
MOCK_LOGIN_URL = f"{MOCK_ORIGIN}/login"

# tests/pages/login.html の ACCOUNT と合わせる
MOCK_USERS = {
    "validUser": {"email": "kundin@example.com", "password": "Geheim123!", "name": "Erika"},
    "invalidUser": {"email": "niemand@example.com", "password": "Falsch123"},
}


def _truthy(v: str | None) -> bool:
    return (v or "").lower() in ("1", "true", "yes", "y", "on")


def live_enabled() -> bool:
    return _truthy(os.getenv("E2E_LIVE"))


@pytest.fixture(scope="session", autouse=True)
def _load_env():
    load_dotenv()


@pytest.fixture(scope="session")
def settings(_load_env) -> Settings:
    return Settings.from_env()


@pytest.fixture(scope="session")
def pw():
    with sync_playwright() as p:
        yield p


@pytest.fixture(scope="session")
def browser(pw, settings):
    # テストでは PW_HEADLESS を明示しない限り headless
    if os.getenv("PW_HEADLESS") is None:
        settings = replace(settings, headless=True)
    b = pw.chromium.launch(**launch_kwargs(settings))
    yield b
    b.close()


@pytest.fixture()
def context(browser, settings):
    """
    ✅ テストごとに新しい context（cookie / localStorage を持ち越さない）
    tracing は tracing_stop 側で開始する
    """
    ctx = new_isolated_context(browser, replace(settings, trace=False))
    yield ctx
    ctx.close()


@pytest.fixture()
def page(context):
    p = context.new_page()
    yield p
    p.close()


@pytest.fixture(scope="session")
def artifacts_base_dir(settings):
    base = settings.artifact_dir
    base.mkdir(parents=True, exist_ok=True)
    return base


@pytest.fixture(scope="session")
def test_data(settings):
    """suite開始時に1回だけ読む（読み取り専用）"""
    path = settings.test_data_path
    if not path.is_absolute():
        path = ROOT / path
    return load_fixture(path)


@pytest.fixture()
def tracing_stop(request, context, artifacts_base_dir):
    """
    テストごとに trace を保存する
    """
    scenario_id = None
    callspec = getattr(request.node, "callspec", None)
    if callspec is not None:
        scenario_id = getattr(callspec.params.get("sc"), "id", None)

    ts = datetime.now().strftime("%Y%m%d_%H%M%S")
    name = safe_name(scenario_id or request.node.name)
    out_dir = artifacts_base_dir / name
    out_dir.mkdir(parents=True, exist_ok=True)
    trace_path = out_dir / f"trace_{name}_{ts}.zip"

    context.tracing.start(screenshots=True, snapshots=True, sources=True)
    stopped = []

    def _stop(path: str | None = None):
        if stopped:
            return
        stopped.append(True)
        stop_tracing(context, path or str(trace_path))

    yield _stop

    _stop()


# --- offline: dummy login page ---

@pytest.fixture(scope="session")
def mock_fixture():
    return fixture_from_dict(MOCK_USERS)


@pytest.fixture()
def mock_settings(tmp_path):
    return Settings(
        login_url=MOCK_LOGIN_URL,
        headless=True,
        timeout_ms=3000,
        nav_timeout_ms=5000,
        expect_timeout_ms=2000,
        trace=False,
        artifact_dir=tmp_path / "artifacts",
    )


def install_mock_site(context_or_page) -> None:
    """shop.test へのリクエストをダミーページで返す（ネットワーク不要）"""
    html = (PAGES_DIR / "login.html").read_text(encoding="utf-8")

    def _handle(route):
        path = route.request.url.split("?", 1)[0]
        if path == MOCK_LOGIN_URL:
            route.fulfill(status=200, content_type="text/html; charset=utf-8", body=html)
        else:
            route.fulfill(status=404, content_type="text/plain", body="Not Found")

    context_or_page.route(f"{MOCK_ORIGIN}/**", _handle)


@pytest.fixture()
def mock_page(page):
    install_mock_site(page)
    return page

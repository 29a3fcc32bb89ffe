from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path

DEFAULT_LOGIN_URL = "https://www.douglas.de/login"


def _env_true(name: str, default: bool = False) -> bool:
    v = os.getenv(name)
    if v is None or not v.strip():
        return default
    return v.strip().lower() in ("1", "true", "yes", "y", "on")


def _env_int(name: str, default: int) -> int:
    v = (os.getenv(name) or "").strip()
    if not v:
        return default
    try:
        return int(v)
    except ValueError:
        raise ValueError(f"{name} must be an integer: {v!r}")


@dataclass(frozen=True)
class Settings:
    login_url: str = DEFAULT_LOGIN_URL
    headless: bool = True
    channel: str | None = None
    slow_mo_ms: int = 0
    timeout_ms: int = 30000
    nav_timeout_ms: int = 45000
    expect_timeout_ms: int = 10000
    locale: str = "de-DE"
    trace: bool = True
    artifact_dir: Path = Path("artifacts")
    scenarios_path: Path = Path("scenarios/scenarios.yaml")
    test_data_path: Path = Path("test-data/testData.json")
    workers: int = 1

    @classmethod
    def from_env(cls) -> "Settings":
        """
        .env は呼び出し側で load_dotenv() 済みの前提。
        PW_HEADLESS 未指定なら CI に合わせる。
        """
        is_ci = _env_true("CI")
        return cls(
            login_url=(os.getenv("E2E_LOGIN_URL") or DEFAULT_LOGIN_URL).strip(),
            headless=_env_true("PW_HEADLESS", default=is_ci),
            channel=os.getenv("PW_CHANNEL") or None,  # "chrome" 等（任意）
            slow_mo_ms=_env_int("PW_SLOWMO_MS", 0),
            timeout_ms=_env_int("PW_TIMEOUT_MS", 30000),
            nav_timeout_ms=_env_int("PW_NAV_TIMEOUT_MS", 45000),
            expect_timeout_ms=_env_int("PW_EXPECT_TIMEOUT_MS", 10000),
            locale=os.getenv("PW_LOCALE") or "de-DE",
            trace=_env_true("PW_TRACE", default=True),
            artifact_dir=Path(os.getenv("ARTIFACT_DIR", "artifacts")),
            scenarios_path=Path(os.getenv("E2E_SCENARIOS", "scenarios/scenarios.yaml")),
            test_data_path=Path(os.getenv("E2E_TEST_DATA", "test-data/testData.json")),
            workers=max(1, _env_int("E2E_WORKERS", 1)),
        )

    def with_overrides(self, **kwargs) -> "Settings":
        # None は「指定なし」として無視
        return replace(self, **{k: v for k, v in kwargs.items() if v is not None})

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from playwright.sync_api import Page, Error as PlaywrightError

from .text import safe_name

logger = logging.getLogger(__name__)


@dataclass
class Artifacts:
    base_dir: Path
    scenario_id: str

    @property
    def out_dir(self) -> Path:
        d = self.base_dir / safe_name(self.scenario_id)
        d.mkdir(parents=True, exist_ok=True)
        return d

    def path(self, filename: str) -> Path:
        return self.out_dir / filename

    def save_debug(self, page: Page, prefix: str) -> None:
        """
        失敗時のスクショ + HTML。
        ページが閉じている等で取れなくても本来の失敗を優先する（ログだけ残す）。
        """
        prefix = safe_name(prefix)
        try:
            page.screenshot(path=str(self.path(f"{prefix}.png")), full_page=True)
        except PlaywrightError as e:
            logger.warning("[%s] screenshot failed: %s", self.scenario_id, e)
        try:
            html = page.content()
            self.path(f"{prefix}.html").write_text(html, encoding="utf-8")
        except (PlaywrightError, OSError) as e:
            logger.warning("[%s] html dump failed: %s", self.scenario_id, e)

    @property
    def trace_path(self) -> Path:
        return self.path("trace.zip")


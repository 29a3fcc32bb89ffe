from __future__ import annotations

from typing import Optional


class ScenarioError(Exception):
    """シナリオ内で完結する失敗（suite全体は止めない）"""

    kind = "error"

    def __init__(
        self,
        message: str,
        locator: Optional[str] = None,
        expected: Optional[str] = None,
        actual: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.locator = locator
        self.expected = expected
        self.actual = actual


class StepTimeout(ScenarioError):
    """待機条件がタイムアウトまでに満たされなかった"""

    kind = "timeout"


class PredicateMismatch(ScenarioError):
    """期待した UI 状態と実際の状態が一致しない"""

    kind = "mismatch"


class NavigationFailure(ScenarioError):
    """対象ページに到達できない"""

    kind = "navigation"

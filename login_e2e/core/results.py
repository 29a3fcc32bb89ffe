from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from .exceptions import ScenarioError


@dataclass(frozen=True)
class Failure:
    kind: str
    phase: str  # "baseline" / "step" / "expected"
    index: int
    step: str
    message: str
    locator: Optional[str] = None
    expected: Optional[str] = None
    actual: Optional[str] = None

    @classmethod
    def from_error(cls, err: ScenarioError, phase: str, index: int, step: str) -> "Failure":
        return cls(
            kind=err.kind,
            phase=phase,
            index=index,
            step=step,
            message=err.message,
            locator=err.locator,
            expected=err.expected,
            actual=err.actual,
        )

    def describe(self) -> str:
        lines = [f"[{self.kind}] {self.phase} #{self.index}: {self.step}", f"  {self.message}"]
        if self.locator:
            lines.append(f"  locator : {self.locator}")
        if self.expected is not None:
            lines.append(f"  expected: {self.expected}")
        if self.actual is not None:
            lines.append(f"  actual  : {self.actual}")
        return "\n".join(lines)


@dataclass
class ScenarioResult:
    scenario_id: str
    name: str
    failure: Optional[Failure] = None
    trace: List[str] = field(default_factory=list)
    duration_sec: float = 0.0

    @property
    def ok(self) -> bool:
        return self.failure is None

    def describe(self) -> str:
        head = f"{'PASS' if self.ok else 'FAIL'} {self.scenario_id} ({self.name})"
        if self.failure is None:
            return head
        return head + "\n" + self.failure.describe()


@dataclass
class SuiteSummary:
    results: List[ScenarioResult] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.results)

    @property
    def passed(self) -> int:
        return sum(1 for r in self.results if r.ok)

    @property
    def failed(self) -> int:
        return self.total - self.passed

    @property
    def exit_code(self) -> int:
        return 0 if self.failed == 0 else 1

    def format(self) -> str:
        lines = [r.describe() for r in self.results]
        lines.append(f"{self.total} scenarios: {self.passed} passed, {self.failed} failed")
        return "\n".join(lines)

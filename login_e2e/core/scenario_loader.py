from __future__ import annotations

from pathlib import Path
from typing import List, Any, Dict, Optional

import yaml

from .locators import is_known_target
from .types import (
    ACTIONS,
    STATES,
    SUITES,
    VALUE_STATES,
    LocatorSpec,
    Predicate,
    Scenario,
    Step,
)

LOCATOR_KEYS = ("target", "text", "role", "name", "exact")


def load_scenarios(path: str | Path = "scenarios/scenarios.yaml") -> List[Scenario]:
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Scenario file not found: {p.resolve()}")

    raw = yaml.safe_load(p.read_text(encoding="utf-8"))
    return scenarios_from_list(raw)


def scenarios_from_list(raw: Any) -> List[Scenario]:
    if not isinstance(raw, list):
        raise ValueError("scenarios.yaml must be a list")

    out: List[Scenario] = []
    seen = set()
    for row in raw:
        if not isinstance(row, dict):
            raise ValueError("Each scenario must be a dict")
        sc = _to_scenario(row)
        if sc.id in seen:
            raise ValueError(f"Duplicate scenario id: {sc.id}")
        seen.add(sc.id)
        out.append(sc)
    return out


def _to_scenario(d: Dict[str, Any]) -> Scenario:
    required = ["id", "suite", "name"]
    for k in required:
        if k not in d:
            raise ValueError(f"Missing key '{k}' in scenario: {d}")

    sid = str(d["id"])
    suite = str(d["suite"])
    if suite not in SUITES:
        raise ValueError(f"Unknown suite '{suite}': {sid}")

    steps_raw = d.get("steps") or []
    expected_raw = d.get("expect") or []
    if not isinstance(steps_raw, list):
        raise ValueError(f"steps must be a list: {sid}")
    if not isinstance(expected_raw, list):
        raise ValueError(f"expect must be a list: {sid}")
    if not steps_raw and not expected_raw:
        raise ValueError(f"Scenario has neither steps nor expect: {sid}")

    tags = d.get("tags") or []
    if not isinstance(tags, list):
        raise ValueError(f"tags must be a list: {sid}")

    return Scenario(
        id=sid,
        suite=suite,  # type: ignore[arg-type]
        name=str(d["name"]),
        steps=tuple(_to_step(s, sid) for s in steps_raw),
        expected=tuple(_to_predicate(p, sid) for p in expected_raw),
        url=str(d["url"]) if d.get("url") else None,
        tags=tuple(str(t) for t in tags),
    )


def _to_locator(d: Any, sid: str, required: bool = True) -> Optional[LocatorSpec]:
    # "login.submit" のような文字列だけの指定も許可
    if isinstance(d, str):
        d = {"target": d}
    if not isinstance(d, dict):
        raise ValueError(f"Locator must be a dict or target name: {sid}")

    spec = LocatorSpec(
        target=str(d["target"]) if d.get("target") else None,
        text=str(d["text"]) if d.get("text") is not None else None,
        role=str(d["role"]) if d.get("role") else None,
        name=str(d["name"]) if d.get("name") is not None else None,
        exact=bool(d.get("exact", False)),
    )
    if spec.target is not None and not is_known_target(spec.target):
        raise ValueError(f"Unknown target '{spec.target}': {sid}")
    if spec.name is not None and spec.role is None:
        raise ValueError(f"'name' needs 'role': {sid}")
    if spec.target is None and spec.text is None and spec.role is None:
        if required:
            raise ValueError(f"Locator needs target, text or role: {sid}")
        return None
    return spec


def _to_predicate(d: Any, sid: str) -> Predicate:
    if not isinstance(d, dict):
        raise ValueError(f"Predicate must be a dict: {sid}")

    state = d.get("state")
    if state not in STATES:
        raise ValueError(f"Unknown state '{state}': {sid}")

    value = d.get("value")
    if state in VALUE_STATES and value is None:
        raise ValueError(f"State '{state}' needs a value: {sid}")
    attribute = d.get("attribute")
    if state == "has-attribute" and not attribute:
        raise ValueError(f"State 'has-attribute' needs an attribute: {sid}")

    loc_fields = {k: d[k] for k in LOCATOR_KEYS if k in d}
    if state == "has-url":
        locator = LocatorSpec()
    else:
        locator = _to_locator(loc_fields, sid)

    return Predicate(
        locator=locator,
        state=state,
        value=str(value) if value is not None else None,
        attribute=str(attribute) if attribute else None,
    )


def _to_step(d: Any, sid: str) -> Step:
    if not isinstance(d, dict) or len(d) != 1:
        raise ValueError(f"Each step must be a dict with exactly one action: {sid}")

    action, body = next(iter(d.items()))
    if action not in ACTIONS:
        raise ValueError(f"Unknown action '{action}': {sid}")

    if action == "expect":
        return Step(action="expect", predicate=_to_predicate(body, sid))

    if isinstance(body, str):
        body = {"target": body}
    if not isinstance(body, dict):
        raise ValueError(f"Step '{action}' must be a dict: {sid}")

    locator = _to_locator({k: body[k] for k in LOCATOR_KEYS if k in body}, sid)

    value = None
    if action == "fill":
        if body.get("value") is None:
            raise ValueError(f"fill needs a value: {sid}")
        value = str(body["value"])

    focus = None
    if action == "blur" and body.get("focus") is not None:
        focus = _to_locator(body["focus"], sid)

    return Step(action=action, locator=locator, value=value, focus=focus)

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Any, Dict

from .types import Fixture, UserRecord

REQUIRED_USERS = ("validUser", "invalidUser")

# ざっくり形式チェック（実在確認はしない）
EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def load_fixture(path: str | Path = "test-data/testData.json") -> Fixture:
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Test data file not found: {p.resolve()}")

    try:
        raw = json.loads(p.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ValueError(f"Test data is not valid JSON: {p} ({e})") from e

    return fixture_from_dict(raw)


def fixture_from_dict(raw: Any) -> Fixture:
    if not isinstance(raw, dict):
        raise ValueError("Test data must be a JSON object")

    for k in REQUIRED_USERS:
        if k not in raw:
            raise ValueError(f"Missing user '{k}' in test data")

    users: Dict[str, UserRecord] = {}
    for key, row in raw.items():
        users[key] = _to_user(key, row)

    if not users["validUser"].name:
        raise ValueError("validUser must have a 'name'")

    return Fixture(users=users)


def _to_user(key: str, d: Any) -> UserRecord:
    if not isinstance(d, dict):
        raise ValueError(f"User '{key}' must be an object")
    for k in ("email", "password"):
        if not isinstance(d.get(k), str):
            raise ValueError(f"Missing key '{k}' in user '{key}'")

    email = d["email"].strip()
    if not EMAIL_RE.match(email):
        raise ValueError(f"User '{key}' has an invalid email: {email!r}")

    return UserRecord(email=email, password=d["password"], name=str(d.get("name") or ""))

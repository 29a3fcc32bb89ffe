from __future__ import annotations

import re
from typing import Mapping, Any, Optional

# fixture 参照は {entry.field} の形だけ。正規表現の {2} や {1,3} はそのまま残す
_REF_RE = re.compile(r"\{(\w+)\.(\w+)\}")


def normalize_text(s: Optional[str]) -> str:
    # nbsp / 改行 / 連続スペースを1つに
    s = (s or "").replace("\u00a0", " ").replace("\u3000", " ").replace("\n", " ")
    return re.sub(r"\s+", " ", s).strip()


def safe_name(s: str, limit: int = 120) -> str:
    s = re.sub(r"[^a-zA-Z0-9_.-]+", "_", s or "")
    s = s.strip("_")
    return s[:limit] if s else "scenario"


def render_template(value: Optional[str], context: Mapping[str, Any]) -> Optional[str]:
    """
    fixture 参照（{validUser.email} 等）を埋め込む。
    参照が無い文字列はそのまま返す。
    """
    if value is None or "{" not in value:
        return value

    def _sub(m: "re.Match[str]") -> str:
        entry, field = m.group(1), m.group(2)
        if entry not in context or not hasattr(context[entry], field):
            raise ValueError(f"Unknown fixture reference in {value!r}: {entry}.{field}")
        return str(getattr(context[entry], field))

    return _REF_RE.sub(_sub, value)

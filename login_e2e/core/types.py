from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Literal, Optional, Mapping, Tuple, Dict

SuiteType = Literal["login", "reset"]
ActionType = Literal["fill", "click", "check", "uncheck", "blur", "submit", "expect"]
StateType = Literal[
    "visible",
    "hidden",
    "enabled",
    "checked",
    "not-checked",
    "has-attribute",
    "has-class",
    "has-text",
    "has-url",
]

SUITES: Tuple[str, ...] = ("login", "reset")
ACTIONS: Tuple[str, ...] = ("fill", "click", "check", "uncheck", "blur", "submit", "expect")
STATES: Tuple[str, ...] = (
    "visible",
    "hidden",
    "enabled",
    "checked",
    "not-checked",
    "has-attribute",
    "has-class",
    "has-text",
    "has-url",
)

# value が必須な state
VALUE_STATES: Tuple[str, ...] = ("has-attribute", "has-class", "has-text", "has-url")


@dataclass(frozen=True)
class UserRecord:
    email: str
    password: str
    name: str = ""


@dataclass(frozen=True)
class Fixture:
    """
    テストデータ（読み取り専用）。
    suite開始時に1回だけロードして、各シナリオには引数で渡す。
    """
    users: Mapping[str, UserRecord]

    def __post_init__(self) -> None:
        object.__setattr__(self, "users", MappingProxyType(dict(self.users)))

    @property
    def valid_user(self) -> UserRecord:
        return self.users["validUser"]

    @property
    def invalid_user(self) -> UserRecord:
        return self.users["invalidUser"]

    def template_context(self) -> Dict[str, UserRecord]:
        # "{validUser.email}" のような参照用
        return dict(self.users)


@dataclass(frozen=True)
class LocatorSpec:
    """
    target: locators.py のレジストリ名（無ければ page 全体）
    text / role+name: target の中でさらに絞り込む
    """
    target: Optional[str] = None
    text: Optional[str] = None
    role: Optional[str] = None
    name: Optional[str] = None
    exact: bool = False

    def describe(self) -> str:
        parts = [self.target or "page"]
        if self.role:
            parts.append(f"role={self.role}" + (f"[name={self.name!r}]" if self.name else ""))
        if self.text:
            parts.append(f"text={self.text!r}")
        return " >> ".join(parts)


@dataclass(frozen=True)
class Predicate:
    locator: LocatorSpec
    state: StateType
    value: Optional[str] = None
    attribute: Optional[str] = None

    def describe_expected(self) -> str:
        if self.state == "has-attribute":
            return f"{self.state} {self.attribute}={self.value!r}"
        if self.value is not None:
            return f"{self.state} {self.value!r}"
        return self.state


@dataclass(frozen=True)
class Step:
    action: ActionType
    locator: Optional[LocatorSpec] = None
    value: Optional[str] = None
    # blur: フォーカスの移動先（無ければ locator 自体を blur）
    focus: Optional[LocatorSpec] = None
    predicate: Optional[Predicate] = None

    def describe(self) -> str:
        if self.action == "expect" and self.predicate is not None:
            return f"expect {self.predicate.locator.describe()} {self.predicate.describe_expected()}"
        target = self.locator.describe() if self.locator else "page"
        if self.action == "fill":
            return f"fill {target} with {self.value!r}"
        if self.action == "blur" and self.focus is not None:
            return f"blur {target} (focus -> {self.focus.describe()})"
        return f"{self.action} {target}"


@dataclass(frozen=True)
class Scenario:
    id: str
    suite: SuiteType
    name: str
    steps: Tuple[Step, ...] = ()
    # 最終状態の期待値（steps の後に評価）
    expected: Tuple[Predicate, ...] = ()
    url: Optional[str] = None
    tags: Tuple[str, ...] = field(default_factory=tuple)

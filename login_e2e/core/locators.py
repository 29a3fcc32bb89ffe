from __future__ import annotations

from typing import Callable, Dict, Union

from playwright.sync_api import Page, Locator

from login_e2e.core.types import LocatorSpec
from login_e2e.selectors import login_selectors as L
from login_e2e.selectors import reset_selectors as R

LocatorBuilder = Callable[[Page], Locator]


def field_block(scope: Locator, inner: Locator, label_text: str) -> Locator:
    """
    input とそのラベルを両方含む一番内側の div。
    フィールド単位のエラー文言 / アイコンはこの中で探す（nth指定はしない）。
    """
    return (
        scope.locator(L.FIELD_BLOCK_SELECTOR)
        .filter(has=inner)
        .filter(has_text=label_text)
        .last
    )


# --- login ---

def _login_form(page: Page) -> Locator:
    return page.locator(L.LOGIN_FORM_SELECTOR)


def _login_email(page: Page) -> Locator:
    return _login_form(page).locator(L.EMAIL_INPUT_SELECTOR)


def _login_email_field(page: Page) -> Locator:
    return field_block(_login_form(page), page.locator(L.EMAIL_INPUT_SELECTOR), L.EMAIL_LABEL_TEXT)


def _login_password(page: Page) -> Locator:
    return _login_form(page).get_by_placeholder(L.PASSWORD_PLACEHOLDER)


def _login_password_field(page: Page) -> Locator:
    return field_block(_login_form(page), page.get_by_placeholder(L.PASSWORD_PLACEHOLDER), L.PASSWORD_LABEL_TEXT)


# --- reset ---

def _reset_form(page: Page) -> Locator:
    return page.locator(R.RESET_FORM_SELECTOR)


def _reset_dialog(page: Page) -> Locator:
    return page.get_by_role("dialog").filter(has=page.locator(R.RESET_FORM_SELECTOR))


def _reset_email(page: Page) -> Locator:
    return _reset_form(page).get_by_role("textbox", name=R.RESET_EMAIL_ROLE_NAME)


def _reset_email_field(page: Page) -> Locator:
    return field_block(
        _reset_form(page),
        page.get_by_role("textbox", name=R.RESET_EMAIL_ROLE_NAME),
        L.EMAIL_LABEL_TEXT,
    )


def _sent_dialog(page: Page) -> Locator:
    return page.get_by_role("dialog").filter(has=page.get_by_role("heading", name=R.SENT_TITLE_TEXT))


TARGETS: Dict[str, LocatorBuilder] = {
    "consent.reject": lambda p: p.get_by_role("button", name=L.CONSENT_REJECT_BUTTON_NAME),

    "login.form": _login_form,
    "login.title": lambda p: p.get_by_text(L.LOGIN_TITLE_TEXT),
    # フォーム上部の注記（フィールド下のものより先に出る）
    "login.required_hint": lambda p: _login_form(p).get_by_text(L.REQUIRED_HINT_TEXT).first,
    "login.email": _login_email,
    "login.email_field": _login_email_field,
    "login.password": _login_password,
    "login.password_field": _login_password_field,
    "login.password_toggle": lambda p: _login_password_field(p).get_by_role("button"),
    "login.remember_me": lambda p: p.get_by_test_id(L.REMEMBER_ME_TEST_ID),
    "login.remember_me_label": lambda p: p.get_by_text(L.REMEMBER_ME_LABEL_TEXT),
    # 部分一致だとダイアログタイトル「Du hast dein Passwort vergessen?」にも当たる
    "login.forgot_password": lambda p: p.get_by_text(L.FORGOT_PASSWORD_TEXT, exact=True),
    "login.submit": lambda p: _login_form(p).get_by_role("button", name=L.LOGIN_BUTTON_NAME),

    "account.grid": lambda p: p.get_by_test_id(L.GRID_TEST_ID),

    "reset.dialog": _reset_dialog,
    "reset.form": _reset_form,
    "reset.title": lambda p: p.get_by_text(R.RESET_TITLE_TEXT),
    "reset.intro": lambda p: p.get_by_text(R.RESET_INTRO_TEXT),
    "reset.header_close": lambda p: p.get_by_test_id(R.MODAL_HEADER_CLOSE_TEST_ID),
    "reset.required_hint": lambda p: _reset_form(p).get_by_text(L.REQUIRED_HINT_TEXT).first,
    "reset.email": _reset_email,
    "reset.email_field": _reset_email_field,
    "reset.submit": lambda p: p.get_by_role("button", name=R.RESET_SUBMIT_BUTTON_NAME),
    "reset.close": lambda p: p.get_by_role("button", name=R.CLOSE_BUTTON_NAME, exact=True),

    "sent.dialog": _sent_dialog,
    "sent.heading": lambda p: p.get_by_role("heading", name=R.SENT_TITLE_TEXT),
    "sent.icon": lambda p: _sent_dialog(p).get_by_role("img").first,
    "sent.close": lambda p: _sent_dialog(p).get_by_role("button", name=R.CLOSE_BUTTON_NAME, exact=True),
}


def is_known_target(name: str) -> bool:
    return name in TARGETS


def resolve(page: Page, spec: LocatorSpec) -> Union[Page, Locator]:
    """
    LocatorSpec -> Locator
    target 無し & 絞り込み無しなら page そのもの（has-url 用）
    """
    if spec.target is not None:
        if spec.target not in TARGETS:
            raise ValueError(f"Unknown target: {spec.target}")
        base = TARGETS[spec.target](page)
    else:
        base = page

    if spec.role:
        loc = base.get_by_role(spec.role, name=spec.name, exact=spec.exact or None)
        if spec.text:
            loc = loc.filter(has_text=spec.text)
        return loc

    if spec.text:
        return base.get_by_text(spec.text, exact=spec.exact or None)

    return base

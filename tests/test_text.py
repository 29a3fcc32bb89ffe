import pytest

from login_e2e.core.text import normalize_text, render_template, safe_name
from login_e2e.core.types import UserRecord


CTX = {"validUser": UserRecord(email="kundin@example.com", password="pw", name="Erika")}


def test_normalize_text():
    assert normalize_text("  Hallo \n  Erika ") == "Hallo Erika"
    assert normalize_text(None) == ""


def test_safe_name():
    assert safe_name("login valid/credentials") == "login_valid_credentials"
    assert safe_name("///") == "scenario"


def test_render_template():
    assert render_template("Hallo {validUser.name}", CTX) == "Hallo Erika"
    assert render_template("{validUser.email}", CTX) == "kundin@example.com"
    # 参照なしはそのまま
    assert render_template("E-Mail-Adresse*", CTX) == "E-Mail-Adresse*"
    assert render_template(None, CTX) is None


@pytest.mark.parametrize("value", ["{adminUser.email}", "{validUser.phone}"])
def test_render_template_unknown_reference(value):
    with pytest.raises(ValueError, match="Unknown fixture reference"):
        render_template(value, CTX)


@pytest.mark.parametrize("value", [r"/account/\d{2}", r"^https://[^/]+/login\?x={1,3}$", "{}", "{validUser}"])
def test_render_template_leaves_other_braces(value):
    assert render_template(value, CTX) == value


def test_render_template_mixed_with_regex():
    assert render_template(r"{validUser.name}\d{2}", CTX) == r"Erika\d{2}"

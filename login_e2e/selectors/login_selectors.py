# login_e2e/selectors/login_selectors.py

# Cookie同意バナー：「必須のみ」で閉じる
CONSENT_REJECT_BUTTON_NAME = "Nur Unbedingt Erforderlich"

# ログインフォーム
LOGIN_FORM_SELECTOR = "#loginForm"
GRID_TEST_ID = "grid"
LOGIN_TITLE_TEXT = "Ich bin bereits Douglas-Kund*in"

# 「* Pflichtfeld」：フォーム上部の注記 / 未入力時は各フィールド下にも出る
REQUIRED_HINT_TEXT = "* Pflichtfeld"

EMAIL_INPUT_SELECTOR = "input[type='email']"
EMAIL_LABEL_TEXT = "E-Mail-Adresse*"

PASSWORD_PLACEHOLDER = "Passwort*"
PASSWORD_LABEL_TEXT = "Passwort*"

# Eingeloggt bleiben
REMEMBER_ME_TEST_ID = "checkbox-remember-me"
REMEMBER_ME_LABEL_TEXT = "Eingeloggt bleiben"

FORGOT_PASSWORD_TEXT = "Passwort vergessen?"
LOGIN_BUTTON_NAME = "Anmelden"

# フィールドの枠（input とラベルを両方含む一番内側の div）
FIELD_BLOCK_SELECTOR = "div"

# login_e2e/selectors/reset_selectors.py

# パスワード再設定ダイアログ
RESET_FORM_SELECTOR = "#forgotPasswordForm"
RESET_TITLE_TEXT = "Du hast dein Passwort vergessen?"
# 長文なので先頭だけで部分一致
RESET_INTRO_TEXT = "Bitte gib hier die E-Mail-Adresse ein, mit der du dein Douglas-Konto erstellt ha"

# ×ボタン（ヘッダー）
MODAL_HEADER_CLOSE_TEST_ID = "modal-header-close"

RESET_EMAIL_ROLE_NAME = "E-Mail-Adresse*"
RESET_SUBMIT_BUTTON_NAME = "E-Mail absenden"
CLOSE_BUTTON_NAME = "Schliessen"

# 送信完了ダイアログ
SENT_TITLE_TEXT = "E-Mail verschickt"

from __future__ import annotations

from unax_helper.core.config import get_settings
from unax_helper.core.crypto import SymmetricCipher
from unax_helper.core.security import NonceManager
from unax_helper.domain.enums import FieldType, NoticeType
from unax_helper.domain.validation import prepare_fields, validate_field
from unax_helper.services.notices.store import NoticeStore

FIELD_RULES = {
    "full_name": (FieldType.TEXT, True, 2, 80),
    "email": (FieldType.EMAIL, True, None, None),
    "phone": (FieldType.TEL, False, None, 20),
    "topics": (FieldType.CHECKBOX, False, None, None),
}


def _handle_submission(form: dict, nonces: NonceManager, cipher: SymmetricCipher, notices: NoticeStore) -> dict:
    if not nonces.verify_request(form, "contact"):
        notices.add_notice("Session expired, please reload the page.", NoticeType.ERROR)
        return {}

    cleaned = {}
    errors = {}
    for name, (field_type, required, min_length, max_length) in FIELD_RULES.items():
        result = validate_field(form.get(name, ""), field_type, required, min_length, max_length)
        if result.success:
            cleaned[name] = result.data
        else:
            errors[name] = result.message

    if errors:
        for message in errors.values():
            notices.add_notice(message, NoticeType.ERROR)
        return prepare_fields(errors)

    cleaned["phone"] = cipher.encrypt(cleaned["phone"]).value if cleaned["phone"] else None
    notices.add_notice("Thanks, we will be in touch.", NoticeType.SUCCESS)
    return prepare_fields(cleaned)


def test_valid_submission_is_cleaned_and_phone_encrypted() -> None:
    settings = get_settings()
    nonces = NonceManager.from_settings(settings)
    cipher = SymmetricCipher.from_settings(settings)
    notices = NoticeStore()
    field_name, nonce = nonces.nonce_field("contact")

    stored = _handle_submission(
        {
            field_name: nonce,
            "full_name": "  Ada Lovelace ",
            "email": "ada@example.com",
            "phone": "+44 20 7946 0958",
            "topics": ["billing", "support"],
        },
        nonces,
        cipher,
        notices,
    )

    assert stored["full-name"] == "Ada Lovelace"
    assert stored["topics"] == ["billing", "support"]
    assert stored["phone"] != "+44 20 7946 0958"
    assert cipher.decrypt(stored["phone"]).value == "+44 20 7946 0958"
    assert [n.type for n in notices.get_notices()] == ["success"]


def test_invalid_submission_reports_field_errors() -> None:
    settings = get_settings()
    nonces = NonceManager.from_settings(settings)
    notices = NoticeStore()
    field_name, nonce = nonces.nonce_field("contact")

    errors = _handle_submission(
        {field_name: nonce, "full_name": "A", "email": "ada-at-example", "phone": "call me"},
        nonces,
        SymmetricCipher.from_settings(settings),
        notices,
    )

    assert errors == {
        "full-name": "Field length minimum 2.",
        "email": "Invalid email address",
        "phone": "Invalid phone number",
    }
    assert "notice-error" in notices.render_notices()


def test_missing_nonce_rejects_submission() -> None:
    settings = get_settings()
    notices = NoticeStore()
    result = _handle_submission(
        {"full_name": "Ada", "email": "ada@example.com"},
        NonceManager.from_settings(settings),
        SymmetricCipher.from_settings(settings),
        notices,
    )
    assert result == {}
    assert notices.get_notices()[0].text == "Session expired, please reload the page."

from __future__ import annotations

from unax_helper.core.config import Settings
from unax_helper.core.security import NonceManager, hash_value

NOW = 1_700_000_000.0
DAY = 86400


def _manager() -> NonceManager:
    return NonceManager("unit-test-secret", lifetime=DAY)


def test_nonce_shape_and_stability() -> None:
    manager = _manager()
    nonce = manager.create_nonce("contact-form", now=NOW)
    assert len(nonce) == 10
    assert all(ch in "0123456789abcdef" for ch in nonce)
    assert manager.create_nonce("contact-form", now=NOW) == nonce


def test_nonce_depends_on_action_user_and_secret() -> None:
    manager = _manager()
    nonce = manager.create_nonce("contact-form", now=NOW)
    assert manager.create_nonce("settings", now=NOW) != nonce
    assert manager.create_nonce("contact-form", user_id=5, now=NOW) != nonce
    assert NonceManager("other-secret", DAY).create_nonce("contact-form", now=NOW) != nonce


def test_nonce_age_and_expiry() -> None:
    manager = _manager()
    nonce = manager.create_nonce("contact-form", now=NOW)
    assert manager.verify_nonce(nonce, "contact-form", now=NOW) == 1
    assert manager.verify_nonce(nonce, "contact-form", now=NOW + DAY / 2) == 2
    assert manager.verify_nonce(nonce, "contact-form", now=NOW + DAY + 1) == 0
    assert manager.verify_nonce(nonce, "settings", now=NOW) == 0
    assert manager.verify_nonce("", "contact-form", now=NOW) == 0
    assert manager.verify_nonce("nönce", "contact-form", now=NOW) == 0


def test_nonce_field_defaults() -> None:
    manager = _manager()
    name, value = manager.nonce_field("contact")
    assert name == "_nonce_contact"
    assert manager.verify_nonce(value, "contact")

    name, value = manager.nonce_field("contact", context="contact-submit", prefix="_wp_")
    assert name == "_wp_contact"
    assert manager.verify_nonce(value, "contact-submit")


def test_verify_request(captured_logs) -> None:
    manager = _manager()
    name, value = manager.nonce_field("contact")
    assert manager.verify_request({name: f" {value} "}, "contact") is True

    assert manager.verify_request({}, "contact", post_id=12) is False
    assert captured_logs[-1] == "Verify nonce: Nonce missing (nonce #contact, context #contact, post_id #12)"

    assert manager.verify_request({name: "0123456789"}, "contact") is False
    assert "Nonce not valid" in captured_logs[-1]


def test_from_settings() -> None:
    manager = NonceManager.from_settings(Settings(secret_key="abc", nonce_lifetime=3600))
    assert manager.secret_key == b"abc"
    assert manager.lifetime == 3600


def test_hash_value() -> None:
    assert hash_value("abc") == "ba7816bf8f01cfea414140de5dae2223b00361a396177a9cb410ff61f20015ad"

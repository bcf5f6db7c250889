from __future__ import annotations

from typing import Any

import httpx

from unax_helper.core.config import Settings
from unax_helper.core.logging import get_logger

SITEVERIFY_URL = "https://www.google.com/recaptcha/api/siteverify"
logger = get_logger(__name__)


class RecaptchaError(RuntimeError):
    pass


class RecaptchaVerifier:
    def __init__(self, secret_key: str, client: httpx.Client | None = None, min_score: float = 0.5) -> None:
        self.secret_key = secret_key
        self._owns_client = client is None
        self.client = client or httpx.Client(timeout=10.0)
        self.min_score = min_score

    @classmethod
    def from_settings(cls, settings: Settings, client: httpx.Client | None = None) -> "RecaptchaVerifier":
        return cls(settings.recaptcha_secret_key, client=client, min_score=settings.recaptcha_min_score)

    def close(self) -> None:
        if self._owns_client:
            self.client.close()

    def __enter__(self) -> "RecaptchaVerifier":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _fetch(self, token: str) -> dict[str, Any]:
        try:
            response = self.client.get(SITEVERIFY_URL, params={"response": token, "secret": self.secret_key})
        except httpx.HTTPError as exc:
            raise RecaptchaError(f"Google Recaptcha request failed: {type(exc).__name__}.") from exc
        if not response.content:
            raise RecaptchaError("Google Recaptcha response error.")
        try:
            payload = response.json()
        except ValueError as exc:
            raise RecaptchaError("Google Recaptcha decoding error.") from exc
        if not payload or not isinstance(payload, dict):
            raise RecaptchaError("Google Recaptcha decoding error.")
        return payload

    def verify(self, token: str) -> None:
        if not token:
            raise RecaptchaError("Unauthorized")

        payload = self._fetch(token)
        if not payload.get("success"):
            codes = payload.get("error-codes")
            if isinstance(codes, str):
                codes = [codes]
            if isinstance(codes, list) and codes:
                raise RecaptchaError(f"Google Recaptcha error: {', '.join(map(str, codes))}.")
            raise RecaptchaError("Google Recaptcha failed.")

        try:
            score = float(payload["score"])
        except (KeyError, TypeError, ValueError) as exc:
            raise RecaptchaError("Google Recaptcha low score.") from exc
        if score <= self.min_score:
            raise RecaptchaError("Google Recaptcha low score.")

    def check(self, token: str) -> bool:
        try:
            self.verify(token)
        except RecaptchaError as exc:
            logger.warning("Recaptcha check rejected: %s", exc)
            return False
        return True

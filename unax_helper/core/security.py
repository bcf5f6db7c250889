from __future__ import annotations

import hashlib
import hmac
import math
import secrets
import time
from typing import Mapping

from unax_helper.core.config import Settings
from unax_helper.core.logging import get_logger, log_event

NONCE_PREFIX = "_nonce_"
logger = get_logger(__name__)


class NonceManager:
    def __init__(self, secret_key: str, lifetime: int = 86400) -> None:
        self.secret_key = secret_key.encode("utf-8")
        self.lifetime = lifetime

    @classmethod
    def from_settings(cls, settings: Settings) -> "NonceManager":
        return cls(settings.secret_key, settings.nonce_lifetime)

    def tick(self, now: float | None = None) -> int:
        now = time.time() if now is None else now
        return math.ceil(now / (self.lifetime / 2))

    def _nonce_for_tick(self, tick: int, action: str, user_id: int) -> str:
        digest = hmac.new(self.secret_key, f"{tick}|{action}|{user_id}".encode("utf-8"), hashlib.sha256).hexdigest()
        return digest[-12:-2]

    def create_nonce(self, action: str, user_id: int = 0, now: float | None = None) -> str:
        return self._nonce_for_tick(self.tick(now), action, user_id)

    def verify_nonce(self, nonce: str, action: str, user_id: int = 0, now: float | None = None) -> int:
        if not nonce:
            return 0
        tick = self.tick(now)
        # 1: generated in the current half-lifetime, 2: in the previous one.
        for age, candidate_tick in ((1, tick), (2, tick - 1)):
            expected = self._nonce_for_tick(candidate_tick, action, user_id)
            if secrets.compare_digest(nonce.encode("utf-8"), expected.encode("utf-8")):
                return age
        return 0

    def nonce_field(self, nonce: str, context: str | None = None, prefix: str | None = None) -> tuple[str, str]:
        prefix = NONCE_PREFIX if prefix is None else prefix
        context = nonce if context is None else context
        return f"{prefix}{nonce}", self.create_nonce(context)

    def verify_request(
        self,
        params: Mapping[str, str],
        nonce: str,
        context: str | None = None,
        post_id: int = 0,
        prefix: str | None = None,
    ) -> bool:
        prefix = NONCE_PREFIX if prefix is None else prefix
        context = nonce if context is None else context
        log_params = {"nonce": nonce, "context": context, "post_id": post_id}

        submitted = (params.get(f"{prefix}{nonce}") or "").strip()
        if not submitted:
            log_event(logger, "Verify nonce", "Nonce missing", log_params)
            return False

        if not self.verify_nonce(submitted, context):
            log_event(logger, "Verify nonce", "Nonce not valid", log_params)
            return False

        return True


def hash_value(value: str) -> str:
    return hashlib.sha256(value.encode("utf-8")).hexdigest()

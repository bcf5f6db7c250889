from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from unax_helper.core.logging import LOG_LEVELS

DEFAULT_SECRET_KEY = "dev-only-secret-change"


@dataclass(slots=True)
class Settings:
    environment: str = field(default_factory=lambda: os.getenv("UNAX_ENV", "dev"))
    data_dir: Path = field(default_factory=lambda: Path(os.getenv("UNAX_DATA_DIR", str(Path.home() / ".unax_helper"))))
    logs_dir_name: str = field(default_factory=lambda: os.getenv("UNAX_LOGS_DIR_NAME", "logs"))
    log_threshold: str = field(default_factory=lambda: os.getenv("UNAX_LOG_THRESHOLD", "info").lower())
    log_prefix: str = field(default_factory=lambda: os.getenv("UNAX_LOG_PREFIX", "unax-helper"))
    administrator_email: str = field(default_factory=lambda: os.getenv("UNAX_ADMIN_EMAIL", ""))
    reply_to: str = field(default_factory=lambda: os.getenv("UNAX_REPLY_TO", "no-reply@localhost"))
    mail_content_type: str = field(default_factory=lambda: os.getenv("UNAX_MAIL_CONTENT_TYPE", "text/html"))
    site_title: str = field(default_factory=lambda: os.getenv("UNAX_SITE_TITLE", "Unax"))
    smtp_host: str = field(default_factory=lambda: os.getenv("UNAX_SMTP_HOST", "localhost"))
    smtp_port: int = field(default_factory=lambda: int(os.getenv("UNAX_SMTP_PORT", "25")))
    cipher_algo: str = field(default_factory=lambda: os.getenv("UNAX_CIPHER_ALGO", "aes-256-ctr"))
    secret_key: str = field(default_factory=lambda: os.getenv("UNAX_SECRET_KEY", DEFAULT_SECRET_KEY))
    nonce_lifetime: int = field(default_factory=lambda: int(os.getenv("UNAX_NONCE_LIFETIME", "86400")))
    date_format: str = field(default_factory=lambda: os.getenv("UNAX_DATE_FORMAT", "%d/%m/%Y"))
    time_format: str = field(default_factory=lambda: os.getenv("UNAX_TIME_FORMAT", "%H:%M"))
    recaptcha_min_score: float = field(default_factory=lambda: float(os.getenv("UNAX_RECAPTCHA_MIN_SCORE", "0.5")))
    recaptcha_secret_key: str = field(default_factory=lambda: os.getenv("UNAX_RECAPTCHA_SECRET_KEY", ""))

    @property
    def logs_dir(self) -> Path:
        override = os.getenv("UNAX_LOGS_DIR")
        if override:
            return Path(override)
        return self.data_dir / self.logs_dir_name

    @property
    def is_production(self) -> bool:
        return self.environment == "prod"


def get_settings() -> Settings:
    settings = Settings()

    if settings.log_threshold not in LOG_LEVELS:
        raise ValueError(f"Unknown log threshold {settings.log_threshold!r}.")

    if settings.is_production and settings.secret_key == DEFAULT_SECRET_KEY:
        raise ValueError("Refusing the default UNAX_SECRET_KEY while UNAX_ENV=prod.")

    if "@" not in settings.reply_to:
        raise ValueError(f"Reply-to address {settings.reply_to!r} is not an e-mail address.")

    if settings.nonce_lifetime < 2:
        raise ValueError("UNAX_NONCE_LIFETIME must be at least 2 seconds.")

    return settings

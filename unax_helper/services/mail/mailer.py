from __future__ import annotations

import re
import smtplib
from email.message import EmailMessage
from typing import Callable

from unax_helper.core.config import Settings
from unax_helper.core.logging import get_logger

AUTOGENERATED_FOOTER = "This is an autogenerated message. Please do not reply."
_NEWLINE_RE = re.compile(r"(\r\n|\n|\r)")
logger = get_logger(__name__)


def nl2br(text: str) -> str:
    return _NEWLINE_RE.sub(r"<br />\1", text)


class Mailer:
    def __init__(self, settings: Settings, smtp_factory: Callable[..., smtplib.SMTP] = smtplib.SMTP) -> None:
        self.settings = settings
        self.smtp_factory = smtp_factory

    def build_message(self, to: str, subject: str, message: str) -> EmailMessage:
        recipients = [address.strip() for address in to.split(",") if address.strip()]
        email = EmailMessage()
        email["From"] = f"{self.settings.site_title} <{self.settings.reply_to}>"
        email["Reply-To"] = f"<{self.settings.reply_to}>"
        email["To"] = ", ".join(recipients)
        email["Subject"] = subject
        if self.settings.mail_content_type == "text/html":
            email.set_content(nl2br(message), subtype="html")
        else:
            email.set_content(message)
        return email

    def send_email(self, to: str, subject: str, message: str) -> bool:
        if not any(address.strip() for address in to.split(",")):
            logger.error("Sending email failed: no recipients")
            return False
        email = self.build_message(to, subject, message)
        try:
            with self.smtp_factory(self.settings.smtp_host, self.settings.smtp_port) as smtp:
                smtp.send_message(email)
        except (smtplib.SMTPException, OSError) as exc:
            logger.error("Sending email to %s failed (%s)", to, type(exc).__name__)
            return False
        return True

    def admin_notification(self, subject: str = "", message: str = "", to: str = "") -> bool:
        to = to or self.settings.administrator_email
        if not to:
            logger.warning("Admin notification skipped: no administrator e-mail configured")
            return False
        return self.send_email(to, subject, message)

    def notification(self, to: str, subject: str = "", message: str = "") -> bool:
        message += "<br><br>"
        message += AUTOGENERATED_FOOTER
        return self.send_email(to, subject, message)

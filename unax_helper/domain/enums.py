from __future__ import annotations

from enum import StrEnum


class FieldType(StrEnum):
    TEXT = "text"
    EMAIL = "email"
    TEL = "tel"
    TEXTAREA = "textarea"
    PASSWORD = "password"
    NUMBER = "number"
    DATE = "date"
    URL = "url"
    SELECT = "select"
    RADIO = "radio"
    CHECKBOX = "checkbox"
    HIDDEN = "hidden"


class NoticeType(StrEnum):
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"
    SUCCESS = "success"


class CipherErrorKind(StrEnum):
    EMPTY_INPUT = "empty_input"
    UNSUPPORTED_ALGORITHM = "unsupported_algorithm"
    DECRYPT_FAILED = "decrypt_failed"

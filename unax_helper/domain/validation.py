from __future__ import annotations

import re
from typing import Any, Callable, Mapping

from email_validator import EmailNotValidError, validate_email
from pydantic import BaseModel, ConfigDict, model_validator

from unax_helper.core.logging import get_logger
from unax_helper.domain.enums import FieldType

logger = get_logger(__name__)

_PHONE_FORBIDDEN_RE = re.compile(r"[^0-9+\s]")

MANDATORY_FIELD = "Mandatory field"
INVALID_EMAIL = "Invalid email address"
INVALID_PHONE = "Invalid phone number"


class ValidationResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    success: bool = False
    code: int = 400
    message: str | None = None
    data: Any = None

    @model_validator(mode="after")
    def _check_consistency(self) -> "ValidationResult":
        if not (self.success == (self.code == 200) == (self.message is None) == (self.data is not None)):
            raise ValueError("success, code, message and data disagree")
        return self

    @classmethod
    def ok(cls, data: Any) -> "ValidationResult":
        return cls(success=True, code=200, message=None, data=data)

    @classmethod
    def fail(cls, message: str) -> "ValidationResult":
        return cls(success=False, code=400, message=message, data=None)

    def as_dict(self) -> dict[str, Any]:
        return self.model_dump()


def _is_email(value: str) -> bool:
    try:
        validate_email(value, check_deliverability=False, globally_deliverable=False)
    except EmailNotValidError:
        return False
    return True


def _is_phone(value: str) -> bool:
    return _PHONE_FORBIDDEN_RE.search(value) is None


# Rule-less types map to None.
_RULES: dict[FieldType, tuple[Callable[[str], bool], str] | None] = {
    FieldType.TEXT: None,
    FieldType.EMAIL: (_is_email, INVALID_EMAIL),
    FieldType.TEL: (_is_phone, INVALID_PHONE),
    FieldType.TEXTAREA: None,
    FieldType.PASSWORD: None,
    FieldType.NUMBER: None,
    FieldType.DATE: None,
    FieldType.URL: None,
    FieldType.SELECT: None,
    FieldType.RADIO: None,
    FieldType.CHECKBOX: None,
    FieldType.HIDDEN: None,
}
if set(_RULES) != set(FieldType):
    raise RuntimeError("Every FieldType needs an entry in the validation rule table.")


def _coerce_type(field_type: FieldType | str) -> FieldType:
    try:
        return FieldType(field_type)
    except ValueError:
        logger.warning("Unknown field type %r, validating as text", field_type)
        return FieldType.TEXT


def validate_field(
    value: Any = "",
    field_type: FieldType | str = FieldType.TEXT,
    required: bool = True,
    min_length: int | float | None = None,
    max_length: int | float | None = None,
) -> ValidationResult:
    if isinstance(value, (list, tuple)):
        is_sequence = True
    else:
        is_sequence = False
        value = "" if value is None else str(value).strip()

    if required and len(value) == 0:
        return ValidationResult.fail(MANDATORY_FIELD)

    rule = _RULES[_coerce_type(field_type)]
    if rule is not None:
        check, message = rule
        items = [str(item).strip() for item in value] if is_sequence else [value]
        if not all(check(item) for item in items):
            return ValidationResult.fail(message)

    if not is_sequence:
        if min_length and len(value) < min_length:
            return ValidationResult.fail(f"Field length minimum {int(min_length)}.")
        if max_length and len(value) > max_length:
            return ValidationResult.fail(f"Field length maximum {int(max_length)}.")

    return ValidationResult.ok(value)


def prepare_fields(fields: Mapping[str, Any]) -> dict[str, Any]:
    return {key.replace("_", "-"): field for key, field in fields.items()}

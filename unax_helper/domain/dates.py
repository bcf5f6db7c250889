from __future__ import annotations

from datetime import date, datetime

from unax_helper.core.config import Settings, get_settings


def format_date(value: str, input_format: str | None = None, settings: Settings | None = None) -> str:
    if not value:
        return ""
    if input_format is None:
        input_format = (settings or get_settings()).date_format
    try:
        parsed = datetime.strptime(value.strip(), input_format)
    except ValueError:
        return ""
    return parsed.strftime("%Y-%m-%d")


def format_date_display(
    value: str,
    date_format: str | None = None,
    time_format: str | None = None,
    display_time: bool = False,
    settings: Settings | None = None,
) -> str:
    if not value:
        return ""
    if date_format is None or time_format is None:
        settings = settings or get_settings()
        date_format = date_format or settings.date_format
        time_format = time_format or settings.time_format
    try:
        parsed: date = datetime.fromisoformat(value.strip())
    except ValueError:
        return ""
    if display_time:
        return parsed.strftime(f"{date_format} {time_format}")
    return parsed.strftime(date_format)

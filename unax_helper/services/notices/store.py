from __future__ import annotations

from dataclasses import asdict, dataclass
from html import escape
from typing import Any, MutableMapping

from unax_helper.domain.enums import NoticeType

ADMIN_NOTICES_OPTION = "unax-admin-notices"
NOTICES_OPTION = "unax-notices"


@dataclass(slots=True)
class Notice:
    text: str
    type: str
    dismissible: bool = True

    @property
    def css_type(self) -> str:
        return self.type if self.type in set(NoticeType) else ""


class NoticeStore:
    def __init__(self, options: MutableMapping[str, list[dict[str, Any]]] | None = None) -> None:
        self.options = options if options is not None else {}

    def _push(self, option: str, notice: Notice) -> None:
        notices = list(self.options.get(option, []))
        notices.append(asdict(notice))
        self.options[option] = notices

    def _drain(self, option: str) -> list[Notice]:
        stored = self.options.pop(option, None) or []
        return [
            Notice(
                text=str(item.get("text", "")),
                type=str(item.get("type", "")),
                dismissible=bool(item.get("dismissible", True)),
            )
            for item in stored
        ]

    def add_admin_notice(self, text: str = "", type: str = NoticeType.ERROR, dismissible: bool = True) -> None:
        self._push(ADMIN_NOTICES_OPTION, Notice(text=text, type=str(type), dismissible=dismissible))

    def render_admin_notices(self) -> str:
        return "".join(
            '<div class="notice notice-{}{}"><p>{}</p></div>'.format(
                escape(notice.css_type),
                " is-dismissible" if notice.dismissible else "",
                escape(notice.text),
            )
            for notice in self._drain(ADMIN_NOTICES_OPTION)
        )

    def add_notice(self, text: str = "", type: str = NoticeType.INFO) -> None:
        self._push(NOTICES_OPTION, Notice(text=text, type=str(type), dismissible=False))

    def get_notices(self) -> list[Notice]:
        return self._drain(NOTICES_OPTION)

    def render_notices(self) -> str:
        return "".join(
            f'<p class="notice notice-{escape(notice.css_type)}">{escape(notice.text)}</p>'
            for notice in self.get_notices()
        )

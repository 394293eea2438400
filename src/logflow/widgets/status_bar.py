"""Bottom status bar."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.text import Text
from textual.widget import Widget

from logflow.models import SearchMode

if TYPE_CHECKING:
    from logflow.frame import ViewStatus

_MILLION = 1_000_000
_TEN_THOUSAND = 10_000
_THOUSAND = 1_000


def _format_count(n: int) -> str:
    """Format a line count compactly: 1234 -> '1,234', 1234567 -> '1.2M'."""
    if n >= _MILLION:
        return f"{n / _MILLION:.1f}M"
    if n >= _TEN_THOUSAND:
        return f"{n / _THOUSAND:.0f}K"
    return f"{n:,}"


class StatusBar(Widget):
    """Bottom status bar showing line counts, scroll position, search info, and source."""

    DEFAULT_CSS = """
    StatusBar {
        height: 1;
        dock: bottom;
        background: $primary;
        color: $text;
        padding: 0 1;
    }
    """

    def __init__(self, source: str = "", id: str | None = None) -> None:  # noqa: A002
        super().__init__(id=id)
        self._source = source
        self._status: ViewStatus | None = None

    def update_status(self, status: ViewStatus) -> None:
        self._status = status
        self.refresh()

    def render(self) -> Text:
        text = Text()
        status = self._status
        if status is not None:
            if status.is_following:
                text.append(" FOLLOW ", style="bold reverse")
            else:
                text.append(f" +{_format_count(status.reverse_index)} ", style="bold reverse")
            text.append(" ")
            text.append(status.tab, style="bold")
            text.append(f"  {_format_count(status.view_lines)} of {_format_count(status.total_lines)} lines")

            if status.match_count is not None:
                if status.match_count == 0:
                    text.append("  No matches", style="bold italic")
                else:
                    text.append(f"  [{status.match_index}/{status.match_count}]", style="bold")
            if status.search_mode == SearchMode.FILTER:
                text.append("  filtered", style="italic")

        right_part = self._source
        if right_part:
            used = len(text.plain)
            padding = max(1, self.size.width - used - len(right_part))
            text.append(" " * padding)
            text.append(right_part)

        return text

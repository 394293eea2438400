"""Tab menu at the top of the screen."""

from __future__ import annotations

from rich.text import Text
from textual.widget import Widget


class MenuBar(Widget):
    """One entry per configured filter, with the selected tab highlighted."""

    DEFAULT_CSS = """
    MenuBar {
        height: 1;
        dock: top;
        background: $surface-darken-1;
        padding: 0 1;
    }
    """

    def __init__(self, names: list[str], *, id: str | None = None) -> None:  # noqa: A002
        super().__init__(id=id)
        self._names = list(names)
        self._selected: int = 0

    @property
    def selected(self) -> int:
        return self._selected

    def select(self, index: int) -> None:
        """Highlight the tab at ``index``."""
        self._selected = min(max(0, index), max(0, len(self._names) - 1))
        self.refresh()

    def render(self) -> Text:
        text = Text()
        for i, name in enumerate(self._names):
            label = f" {i + 1}:{name} " if i < 9 else f" {name} "  # noqa: PLR2004
            if i == self._selected:
                text.append(label, style="bold reverse")
            else:
                text.append(label, style="dim")
            text.append(" ")

        shortcuts = " ←/→ tabs  / search  ? help"
        used = len(text.plain)
        padding = max(1, self.size.width - used - len(shortcuts))
        text.append(" " * padding)
        text.append(shortcuts, style="dim")
        return text

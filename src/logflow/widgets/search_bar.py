"""Search prompt shown above the status bar."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.text import Text
from textual.message import Message
from textual.widget import Widget

from logflow.models import SearchMode

if TYPE_CHECKING:
    from textual import events


class SearchBar(Widget, can_focus=True):
    """Displays the query being composed and forwards every key while focused.

    Editing itself happens in the dispatcher; this widget only reports keys and
    draws whatever prompt state it is handed.
    """

    DEFAULT_CSS = """
    SearchBar {
        height: 1;
        dock: bottom;
        background: $surface-darken-1;
        padding: 0 1;
        display: none;
    }
    SearchBar.-visible {
        display: block;
    }
    """

    class KeyRead(Message):
        """A key typed into the prompt."""

        def __init__(self, key: str) -> None:
            super().__init__()
            self.key = key

    class Cancelled(Message):
        """Escape pressed; leave search."""

    class ModeToggled(Message):
        """Switch between highlight and filter-down."""

    def __init__(self, *, id: str | None = None) -> None:  # noqa: A002
        super().__init__(id=id)
        self._prompt: str = "/"
        self._text: str = ""
        self._cursor: int = 0
        self._mode: SearchMode = SearchMode.HIGHLIGHT

    def show(self, *, visible: bool) -> None:
        self.set_class(visible, "-visible")

    def update_prompt(self, prompt: str, text: str, cursor: int, mode: SearchMode) -> None:
        self._prompt = prompt
        self._text = text
        self._cursor = cursor
        self._mode = mode
        self.refresh()

    def on_key(self, event: events.Key) -> None:
        event.prevent_default()
        event.stop()
        if event.key == "escape":
            self.post_message(self.Cancelled())
        elif event.key == "ctrl+t":
            self.post_message(self.ModeToggled())
        elif event.is_printable and event.character is not None:
            self.post_message(self.KeyRead(event.character))
        else:
            self.post_message(self.KeyRead(event.key))

    def render(self) -> Text:
        text = Text()
        text.append(self._prompt, style="bold")
        before, after = self._text[: self._cursor], self._text[self._cursor :]
        text.append(before)
        if self.has_focus:
            text.append(after[:1] or " ", style="reverse")
            text.append(after[1:])
        else:
            text.append(after)

        mode = "FILTER" if self._mode == SearchMode.FILTER else "HIGHLIGHT"
        hint = f" {mode}  ctrl+t mode  n/N matches "
        used = len(text.plain)
        padding = max(1, self.size.width - used - len(hint))
        text.append(" " * padding)
        text.append(hint, style="bold yellow" if self._mode == SearchMode.FILTER else "dim")
        return text

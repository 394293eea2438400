"""Help screen showing all keyboard shortcuts."""

from __future__ import annotations

from typing import TYPE_CHECKING, ClassVar, override

from textual.containers import VerticalScroll
from textual.screen import ModalScreen
from textual.widgets import Static

if TYPE_CHECKING:
    from textual.app import ComposeResult
    from textual.binding import BindingType

HELP_TEXT = """\
[bold]Tabs[/bold]
  Left/Right, h/l                       Previous/next tab
  1-9                                   Jump to tab

[bold]Scrolling[/bold]
  Up/Down, k/j                          Scroll one line
  PgUp/PgDn                             Scroll one page
  Home, g                               Jump to oldest line
  End, G                                Jump to newest line (follow)

  While scrolled up, new lines do not move the view.

[bold]Search[/bold]
  /                                     Start a new search
  Enter                                 Finish typing the query
  Esc                                   Leave search and clear highlights
  n                                     Next match
  N                                     Previous match
  Ctrl+T                                Toggle highlight / filter-down

  Search is a case-sensitive substring match on the text without colors.

[bold]General[/bold]
  ?                                     Show this help
  q                                     Quit
"""


class HelpScreen(ModalScreen[None]):
    """Modal help screen with keyboard shortcuts."""

    DEFAULT_CSS = """
    HelpScreen {
        align: center middle;
    }

    HelpScreen > VerticalScroll {
        width: 60%;
        height: 90%;
        max-height: 32;
        background: $surface;
        border: tall $accent;
        padding: 1 2;
    }
    """

    BINDINGS: ClassVar[list[BindingType]] = [
        ("escape", "dismiss_help", "Close"),
        ("question_mark", "dismiss_help", "Close"),
        ("q", "dismiss_help", "Close"),
    ]

    @override
    def compose(self) -> ComposeResult:
        with VerticalScroll():
            yield Static(HELP_TEXT, markup=True)

    def action_dismiss_help(self) -> None:
        self.dismiss(None)

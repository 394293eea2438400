"""Interface between the dispatcher and the terminal rendering backend."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

from pydantic import BaseModel

from logflow.models import SearchMode

if TYPE_CHECKING:
    from collections.abc import Iterable

    from logflow.ansi import AnsiColor, StyledRun
    from logflow.events import NavigationState
    from logflow.models import SearchQuery


class ViewStatus(BaseModel):
    """Summary shown in the status bar after every render."""

    tab: str
    total_lines: int
    view_lines: int
    reverse_index: int = 0
    match_index: int | None = None
    match_count: int | None = None
    search_mode: SearchMode | None = None

    @property
    def is_following(self) -> bool:
        return self.reverse_index == 0


class Frame(Protocol):
    """Rendering backend as seen from the dispatcher thread.

    ``print`` receives one list of styled runs per view line; the backend owns
    the viewport and reports its dimensions and the printed (virtual) height.
    """

    @property
    def width(self) -> int: ...

    @property
    def height(self) -> int: ...

    @property
    def virtual_height(self) -> int: ...

    def register_color_pair(self, pair_id: int, foreground: AnsiColor, background: AnsiColor) -> None: ...

    def print(self, lines: Iterable[list[StyledRun]], query: SearchQuery | None) -> None: ...

    def show_matches(self, query: SearchQuery | None) -> None: ...

    def scroll(self, reverse_index: int) -> None: ...

    def resize(self, width: int, height: int) -> None: ...

    def select_menu_item(self, index: int) -> None: ...

    def set_navigation(self, state: NavigationState) -> None: ...

    def render_search(self, prompt: str, text: str, cursor: int, mode: SearchMode) -> None: ...

    def set_status(self, status: ViewStatus) -> None: ...

    def destroy(self) -> None: ...

"""UI events, the queue that carries them, and the cancellation token."""

from __future__ import annotations

import queue
import threading
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


class Direction(StrEnum):
    LEFT = "left"
    RIGHT = "right"


class OffsetKind(StrEnum):
    """How far a scroll event moves the view."""

    LINE = "line"
    VIEWPORT = "viewport"
    TOP = "top"
    BOTTOM = "bottom"


class NavigationState(StrEnum):
    MENU = "menu"
    SEARCH = "search"


class SearchAction(StrEnum):
    READ_INPUT = "read_input"
    FIND_NEXT_MATCH = "find_next_match"
    FIND_PREVIOUS_MATCH = "find_previous_match"
    TOGGLE_FILTER_MODE = "toggle_filter_mode"


class _Event(BaseModel):
    model_config = ConfigDict(frozen=True)


class Offset(_Event):
    """Scroll amount. ``value`` is a signed line or page count; positive scrolls toward older lines."""

    kind: OffsetKind
    value: int = 0

    @classmethod
    def line(cls, value: int) -> Offset:
        return cls(kind=OffsetKind.LINE, value=value)

    @classmethod
    def viewport(cls, value: int) -> Offset:
        return cls(kind=OffsetKind.VIEWPORT, value=value)

    @classmethod
    def top(cls) -> Offset:
        return cls(kind=OffsetKind.TOP)

    @classmethod
    def bottom(cls) -> Offset:
        return cls(kind=OffsetKind.BOTTOM)


class SelectTab(_Event):
    """Move the tab selection one step, or jump to ``index``."""

    direction: Direction | None = None
    index: int | None = None


class Scroll(_Event):
    offset: Offset


class ChangeNavigation(_Event):
    state: NavigationState


class Search(_Event):
    action: SearchAction
    key: str | None = None


class Resize(_Event):
    width: int = Field(ge=0)
    height: int = Field(ge=0)


class Quit(_Event):
    pass


type Event = SelectTab | Scroll | ChangeNavigation | Search | Resize | Quit


class EventQueue:
    """Input/event backend: UI threads post events, the dispatcher waits for them."""

    def __init__(self) -> None:
        self._queue: queue.SimpleQueue[Event] = queue.SimpleQueue()

    def post(self, event: Event) -> None:
        self._queue.put(event)

    def wait_for_event(self, timeout: float) -> Event | None:
        """Block for at most ``timeout`` seconds; None means no event arrived."""
        try:
            return self._queue.get(timeout=timeout)
        except queue.Empty:
            return None


class CancellationToken:
    """Process-wide stop flag, set by the quit action and checked once per loop iteration."""

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def is_cancelled(self) -> bool:
        return self._event.is_set()

    def wait(self, timeout: float) -> bool:
        """Sleep up to ``timeout`` seconds, returning early (True) once cancelled."""
        return self._event.wait(timeout)

"""Single-line input editing for the search prompt."""

from __future__ import annotations

from typing import TYPE_CHECKING, ClassVar

if TYPE_CHECKING:
    from collections.abc import Callable


class LineEditor:
    """Readline-style editing over a single line of text.

    Keys are either one printable character or a Textual key name
    (``backspace``, ``left``, ``ctrl+u`` ...). Unknown keys are ignored.
    """

    def __init__(self, text: str = "") -> None:
        self._text = text
        self._cursor = len(text)

    @property
    def text(self) -> str:
        return self._text

    @property
    def cursor(self) -> int:
        return self._cursor

    def reset(self) -> None:
        self._text = ""
        self._cursor = 0

    def move(self, delta: int) -> None:
        self._cursor = min(max(0, self._cursor + delta), len(self._text))

    def insert(self, chars: str) -> None:
        self._text = self._text[: self._cursor] + chars + self._text[self._cursor :]
        self._cursor += len(chars)

    def feed(self, key: str) -> bool:
        """Apply a key. Returns False if the key is not an editing key."""
        if len(key) == 1 and key.isprintable():
            self.insert(key)
            return True
        handler = self._KEYS.get(key)
        if handler is None:
            return False
        handler(self)
        return True

    def _backspace(self) -> None:
        if self._cursor > 0:
            self._text = self._text[: self._cursor - 1] + self._text[self._cursor :]
            self._cursor -= 1

    def _delete(self) -> None:
        self._text = self._text[: self._cursor] + self._text[self._cursor + 1 :]

    def _left(self) -> None:
        self.move(-1)

    def _right(self) -> None:
        self.move(1)

    def _home(self) -> None:
        self._cursor = 0

    def _end(self) -> None:
        self._cursor = len(self._text)

    def _kill_to_start(self) -> None:
        self._text = self._text[self._cursor :]
        self._cursor = 0

    def _kill_to_end(self) -> None:
        self._text = self._text[: self._cursor]

    def _kill_word(self) -> None:
        start = self._text[: self._cursor].rstrip(" ").rfind(" ") + 1
        self._text = self._text[:start] + self._text[self._cursor :]
        self._cursor = start

    _KEYS: ClassVar[dict[str, Callable[[LineEditor], None]]] = {
        "space": lambda self: self.insert(" "),
        "backspace": _backspace,
        "ctrl+h": _backspace,
        "delete": _delete,
        "left": _left,
        "right": _right,
        "home": _home,
        "ctrl+a": _home,
        "end": _end,
        "ctrl+e": _end,
        "ctrl+u": _kill_to_start,
        "ctrl+k": _kill_to_end,
        "ctrl+w": _kill_word,
    }

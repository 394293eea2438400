"""ANSI SGR escape sequences to styled runs.

Only the single-parameter form ``ESC [ <digits> m`` is recognised. Each match
becomes a style component looked up in ``ANSI_CODES``; codes missing from the
table are dropped. Everything else, including truncated or multi-parameter
sequences, is carried through verbatim as content.

Style state is owned by ``AnsiStyleEngine`` and persists across lines: a color
opened on one line and never reset keeps applying to the following lines, the
way a real terminal behaves.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import IntEnum, StrEnum
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator


class AnsiColor(IntEnum):
    """The eight named terminal colors plus the terminal-default sentinel.

    DEFAULT is negative so that ``abs()`` puts it outside the 0-7 range of the
    named colors, which keeps ``color_pair_id`` collision free.
    """

    BLACK = 0
    RED = 1
    GREEN = 2
    YELLOW = 3
    BLUE = 4
    MAGENTA = 5
    CYAN = 6
    WHITE = 7
    DEFAULT = -9


class TextAttribute(StrEnum):
    """Boolean text attributes toggled by SGR codes."""

    BOLD = "bold"
    ITALIC = "italic"
    UNDERLINE = "underline"
    REVERSE = "reverse"
    STRIKE = "strike"


@dataclass(frozen=True, slots=True)
class Attribute:
    """Turn a text attribute on or off."""

    attribute: TextAttribute
    active: bool


@dataclass(frozen=True, slots=True)
class Color:
    """Set foreground and/or background. A ``None`` side keeps its active value."""

    foreground: AnsiColor | None = None
    background: AnsiColor | None = None


@dataclass(frozen=True, slots=True)
class Reset:
    """Clear all attributes and restore default colors."""


@dataclass(frozen=True, slots=True)
class Content:
    """A run of literal text between escape sequences."""

    text: str


type Style = Attribute | Color | Reset
type Component = Style | Content


@dataclass(frozen=True, slots=True)
class StyledRun:
    """Text with the color pair and attributes resolved at render time."""

    text: str
    pair_id: int
    attributes: frozenset[TextAttribute] = frozenset()


_ATTRIBUTE_CODES: tuple[tuple[int, int, TextAttribute], ...] = (
    (1, 22, TextAttribute.BOLD),
    (3, 23, TextAttribute.ITALIC),
    (4, 24, TextAttribute.UNDERLINE),
    (7, 27, TextAttribute.REVERSE),
    (9, 29, TextAttribute.STRIKE),
)


def _build_codes() -> dict[str, Style]:
    codes: dict[str, Style] = {"0": Reset()}
    for on_code, off_code, attribute in _ATTRIBUTE_CODES:
        codes[str(on_code)] = Attribute(attribute, active=True)
        codes[str(off_code)] = Attribute(attribute, active=False)
    for color in NAMED_COLORS:
        codes[str(30 + color)] = Color(foreground=color)
        codes[str(40 + color)] = Color(background=color)
    codes["39"] = Color(foreground=AnsiColor.DEFAULT)
    codes["49"] = Color(background=AnsiColor.DEFAULT)
    return codes


NAMED_COLORS: tuple[AnsiColor, ...] = tuple(c for c in AnsiColor if c is not AnsiColor.DEFAULT)
ALL_COLORS: tuple[AnsiColor, ...] = (*NAMED_COLORS, AnsiColor.DEFAULT)
# Keyed by the literal digit string, so "031" or an oversized code is simply unknown.
ANSI_CODES: dict[str, Style] = _build_codes()

_ANSI_SEQUENCE = re.compile(r"\x1b\[([0-9]+)m")
_ESCAPE = "\x1b"


def color_pair_id(foreground: AnsiColor, background: AnsiColor) -> int:
    """Deterministic pair id: ``100 + |fg| * 10 + |bg|``."""
    return 100 + abs(foreground) * 10 + abs(background)


DEFAULT_PAIR_ID = color_pair_id(AnsiColor.DEFAULT, AnsiColor.DEFAULT)


def all_color_pairs() -> Iterator[tuple[int, AnsiColor, AnsiColor]]:
    """Yield (pair_id, foreground, background) for all 81 combinations."""
    for foreground in ALL_COLORS:
        for background in ALL_COLORS:
            yield color_pair_id(foreground, background), foreground, background


class ColorPairRegistrar(Protocol):
    def register_color_pair(self, pair_id: int, foreground: AnsiColor, background: AnsiColor) -> None: ...


def register_color_pairs(registrar: ColorPairRegistrar) -> None:
    """Register every color pair with the rendering backend. Call once at startup."""
    for pair_id, foreground, background in all_color_pairs():
        registrar.register_color_pair(pair_id, foreground, background)


def has_ansi_escape_sequence(raw: str) -> bool:
    return _ESCAPE in raw


def strip_ansi(raw: str) -> str:
    """Remove every ``ESC[<digits>m`` sequence, including ones the table does not know."""
    if _ESCAPE not in raw:
        return raw
    # Single pass, same as break_into_components.
    return _ANSI_SEQUENCE.sub("", raw)


def break_into_components(raw: str) -> list[Component]:
    """Split a raw line into style and content components. Never raises."""
    components: list[Component] = []
    position = 0
    for match in _ANSI_SEQUENCE.finditer(raw):
        if match.start() > position:
            components.append(Content(raw[position : match.start()]))
        style = ANSI_CODES.get(match.group(1))
        if style is not None:
            components.append(style)
        position = match.end()
    if position < len(raw):
        components.append(Content(raw[position:]))
    return components


class AnsiStyleEngine:
    """Resolves components into styled runs against the currently active style.

    One instance lives for the whole process and is only touched from the
    dispatcher thread.
    """

    def __init__(self) -> None:
        self._attributes: list[TextAttribute] = []
        self.foreground: AnsiColor = AnsiColor.DEFAULT
        self.background: AnsiColor = AnsiColor.DEFAULT

    @property
    def attributes(self) -> frozenset[TextAttribute]:
        return frozenset(self._attributes)

    @property
    def pair_id(self) -> int:
        return color_pair_id(self.foreground, self.background)

    def reset(self) -> None:
        self._attributes.clear()
        self.foreground = AnsiColor.DEFAULT
        self.background = AnsiColor.DEFAULT

    def apply(self, style: Style) -> None:
        """Update the active state with a single style component."""
        if isinstance(style, Attribute):
            if style.active:
                if style.attribute not in self._attributes:
                    self._attributes.append(style.attribute)
            elif style.attribute in self._attributes:
                self._attributes.remove(style.attribute)
        elif isinstance(style, Color):
            if style.foreground is not None:
                self.foreground = style.foreground
            if style.background is not None:
                self.background = style.background
        else:
            self.reset()

    def current_run(self, text: str) -> StyledRun:
        return StyledRun(text, self.pair_id, self.attributes)

    def resolve(self, components: Iterable[Component]) -> list[StyledRun]:
        """Apply style components in order, emitting one run per content component."""
        runs: list[StyledRun] = []
        for component in components:
            if isinstance(component, Content):
                runs.append(self.current_run(component.text))
            else:
                self.apply(component)
        return runs

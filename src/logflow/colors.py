"""Rich styles for ANSI color pairs, text attributes, and search highlights."""

from __future__ import annotations

from functools import lru_cache

from rich.style import Style

from logflow.ansi import AnsiColor, StyledRun, TextAttribute

_RICH_COLOR_NAMES: dict[AnsiColor, str] = {
    AnsiColor.BLACK: "black",
    AnsiColor.RED: "red",
    AnsiColor.GREEN: "green",
    AnsiColor.YELLOW: "yellow",
    AnsiColor.BLUE: "blue",
    AnsiColor.MAGENTA: "magenta",
    AnsiColor.CYAN: "cyan",
    AnsiColor.WHITE: "white",
}

# (normal, current) backgrounds with white text. Amber, as in the search chips.
_SEARCH_COLORS: tuple[str, str] = ("#6e5600", "#9e7c00")

SEARCH_MATCH_STYLE = Style(bgcolor=_SEARCH_COLORS[0], color="#ffffff")
SEARCH_CURRENT_STYLE = Style(bgcolor=_SEARCH_COLORS[1], color="#ffffff", bold=True, underline=True)


def pair_style(foreground: AnsiColor, background: AnsiColor) -> Style:
    """Rich style for a color pair; DEFAULT leaves the terminal's own color in place."""
    return Style(color=_RICH_COLOR_NAMES.get(foreground), bgcolor=_RICH_COLOR_NAMES.get(background))


@lru_cache(maxsize=64)
def attribute_style(attributes: frozenset[TextAttribute]) -> Style:
    return Style(**{attribute.value: True for attribute in attributes})


class ColorPalette:
    """Registered color pairs, looked up by pair id when drawing styled runs."""

    def __init__(self) -> None:
        self._pairs: dict[int, Style] = {}

    def __len__(self) -> int:
        return len(self._pairs)

    def __contains__(self, pair_id: object) -> bool:
        return pair_id in self._pairs

    def register(self, pair_id: int, foreground: AnsiColor, background: AnsiColor) -> None:
        self._pairs[pair_id] = pair_style(foreground, background)

    def style_for(self, run: StyledRun) -> Style:
        """Style for a run. Unregistered pairs fall back to the terminal default."""
        style = self._pairs.get(run.pair_id, Style.null())
        if run.attributes:
            style += attribute_style(run.attributes)
        return style

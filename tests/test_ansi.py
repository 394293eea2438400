"""Tests for ANSI escape parsing and style resolution."""

from __future__ import annotations

from logflow.ansi import (
    ANSI_CODES,
    DEFAULT_PAIR_ID,
    AnsiColor,
    AnsiStyleEngine,
    Attribute,
    Color,
    Content,
    Reset,
    StyledRun,
    TextAttribute,
    all_color_pairs,
    break_into_components,
    color_pair_id,
    has_ansi_escape_sequence,
    register_color_pairs,
    strip_ansi,
)


class TestBreakIntoComponents:
    def test_colored_word(self) -> None:
        components = break_into_components("\x1b[31mHello\x1b[0m World")
        assert components == [Color(foreground=AnsiColor.RED), Content("Hello"), Reset(), Content(" World")]

    def test_plain_text(self) -> None:
        assert break_into_components("no escapes") == [Content("no escapes")]

    def test_empty(self) -> None:
        assert break_into_components("") == []

    def test_unknown_code_dropped(self) -> None:
        assert break_into_components("a\x1b[38mb") == [Content("a"), Content("b")]

    def test_multi_parameter_kept_as_content(self) -> None:
        raw = "\x1b[1;31mbold red"
        assert break_into_components(raw) == [Content(raw)]

    def test_oversized_code_dropped(self) -> None:
        raw = "a\x1b[" + "1" * 5000 + "mb"
        assert break_into_components(raw) == [Content("a"), Content("b")]
        assert strip_ansi(raw) == "ab"

    def test_non_ascii_digits_not_a_sequence(self) -> None:
        raw = "\x1b[\u0663\u0661mX"
        assert break_into_components(raw) == [Content(raw)]
        assert strip_ansi(raw) == raw

    def test_zero_padded_code_unknown(self) -> None:
        assert break_into_components("\x1b[031mX") == [Content("X")]

    def test_truncated_sequence_kept(self) -> None:
        assert break_into_components("tail \x1b[3") == [Content("tail \x1b[3")]

    def test_adjacent_sequences(self) -> None:
        components = break_into_components("\x1b[1m\x1b[44mX")
        assert components == [
            Attribute(TextAttribute.BOLD, active=True),
            Color(background=AnsiColor.BLUE),
            Content("X"),
        ]

    def test_background_and_default_codes(self) -> None:
        assert ANSI_CODES["47"] == Color(background=AnsiColor.WHITE)
        assert ANSI_CODES["39"] == Color(foreground=AnsiColor.DEFAULT)
        assert ANSI_CODES["49"] == Color(background=AnsiColor.DEFAULT)
        assert ANSI_CODES["22"] == Attribute(TextAttribute.BOLD, active=False)


class TestStripAnsi:
    def test_strip_scenario(self) -> None:
        assert strip_ansi("\x1b[31mHello\x1b[0m World") == "Hello World"

    def test_strips_unknown_codes(self) -> None:
        assert strip_ansi("a\x1b[38mb\x1b[999mc") == "abc"

    def test_no_escape_is_identity(self) -> None:
        assert strip_ansi("plain") == "plain"

    def test_nested_sequence_single_pass(self) -> None:
        assert strip_ansi("\x1b[\x1b[0m31mX") == "\x1b[31mX"

    def test_strip_matches_components(self) -> None:
        for raw in [
            "\x1b[31mHello\x1b[0m World",
            "x\x1b[1my\x1b[22mz",
            "\x1b[1;31mkept",
            "\x1b[\x1b[31m0m",
            "",
        ]:
            joined = "".join(c.text for c in break_into_components(raw) if isinstance(c, Content))
            assert strip_ansi(raw) == joined

    def test_has_escape(self) -> None:
        assert has_ansi_escape_sequence("\x1b[0m")
        assert not has_ansi_escape_sequence("plain")


class TestColorPairs:
    def test_default_pair(self) -> None:
        assert DEFAULT_PAIR_ID == 199

    def test_formula(self) -> None:
        assert color_pair_id(AnsiColor.RED, AnsiColor.BLACK) == 110
        assert color_pair_id(AnsiColor.WHITE, AnsiColor.DEFAULT) == 179
        assert color_pair_id(AnsiColor.DEFAULT, AnsiColor.BLUE) == 194

    def test_all_pairs_unique(self) -> None:
        pairs = list(all_color_pairs())
        assert len(pairs) == 81
        assert len({pair_id for pair_id, _, _ in pairs}) == 81

    def test_register_all(self) -> None:
        registered: dict[int, tuple[AnsiColor, AnsiColor]] = {}

        class Registrar:
            def register_color_pair(self, pair_id: int, foreground: AnsiColor, background: AnsiColor) -> None:
                registered[pair_id] = (foreground, background)

        register_color_pairs(Registrar())
        assert len(registered) == 81
        assert registered[110] == (AnsiColor.RED, AnsiColor.BLACK)


class TestAnsiStyleEngine:
    def test_scenario_runs(self) -> None:
        engine = AnsiStyleEngine()
        runs = engine.resolve(break_into_components("\x1b[31mHello\x1b[0m World"))
        assert runs == [
            StyledRun("Hello", color_pair_id(AnsiColor.RED, AnsiColor.DEFAULT)),
            StyledRun(" World", DEFAULT_PAIR_ID),
        ]

    def test_style_persists_across_lines(self) -> None:
        engine = AnsiStyleEngine()
        engine.resolve(break_into_components("\x1b[32mstart green"))
        runs = engine.resolve(break_into_components("still green"))
        assert runs == [StyledRun("still green", color_pair_id(AnsiColor.GREEN, AnsiColor.DEFAULT))]

    def test_one_sided_color_keeps_other_side(self) -> None:
        engine = AnsiStyleEngine()
        engine.apply(Color(background=AnsiColor.BLUE))
        engine.apply(Color(foreground=AnsiColor.YELLOW))
        assert engine.foreground == AnsiColor.YELLOW
        assert engine.background == AnsiColor.BLUE

    def test_attributes_toggle(self) -> None:
        engine = AnsiStyleEngine()
        engine.apply(Attribute(TextAttribute.BOLD, active=True))
        engine.apply(Attribute(TextAttribute.BOLD, active=True))
        engine.apply(Attribute(TextAttribute.UNDERLINE, active=True))
        assert engine.attributes == {TextAttribute.BOLD, TextAttribute.UNDERLINE}
        engine.apply(Attribute(TextAttribute.BOLD, active=False))
        assert engine.attributes == {TextAttribute.UNDERLINE}

    def test_reset_clears_everything(self) -> None:
        engine = AnsiStyleEngine()
        engine.resolve(break_into_components("\x1b[1m\x1b[31m\x1b[42mx"))
        engine.apply(Reset())
        assert engine.pair_id == DEFAULT_PAIR_ID
        assert engine.attributes == frozenset()

    def test_no_content_yields_no_runs(self) -> None:
        engine = AnsiStyleEngine()
        assert engine.resolve(break_into_components("\x1b[31m")) == []
        assert engine.foreground == AnsiColor.RED

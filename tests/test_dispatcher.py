"""Tests for rline.dispatcher and rline.keymap."""

from __future__ import annotations

import pytest

from rline.dispatcher import MAX_PARAM_LENGTH, DispatchState, InputDispatcher, KeyEvent
from rline.keymap import DEFAULT_CONTROL_BINDINGS, Keymap


def feed(dispatcher: InputDispatcher, data: str) -> list[KeyEvent]:
    events: list[KeyEvent] = []
    for ch in data:
        events.extend(dispatcher.feed(ord(ch)))
    return events


def actions(events: list[KeyEvent]) -> list[str]:
    return [e.action for e in events]


# ---------------------------------------------------------------------------
# Normal state
# ---------------------------------------------------------------------------


class TestNormalState:
    def test_printable_is_inserted(self) -> None:
        events = feed(InputDispatcher(), "a")
        assert events == [KeyEvent("insert", ord("a"))]

    def test_non_ascii_is_inserted(self) -> None:
        events = feed(InputDispatcher(), "é")
        assert events == [KeyEvent("insert", 0xE9)]

    @pytest.mark.parametrize(("code", "action"), sorted(DEFAULT_CONTROL_BINDINGS.items()))
    def test_control_bindings(self, code: int, action: str) -> None:
        assert actions(InputDispatcher().feed(code)) == [action]

    def test_unbound_control_code_is_inserted(self) -> None:
        assert InputDispatcher().feed(0x01) == [KeyEvent("insert", 0x01)]

    def test_escape_alone_emits_nothing(self) -> None:
        dispatcher = InputDispatcher()
        assert dispatcher.feed(0x1B) == []
        assert dispatcher.state is DispatchState.ESC_SEEN
        assert dispatcher.pending_sequence == "\x1b"


# ---------------------------------------------------------------------------
# Escape sequences
# ---------------------------------------------------------------------------


class TestEscapeSequences:
    @pytest.mark.parametrize(
        ("sequence", "action"),
        [
            ("\x1b[A", "historyPrevious"),
            ("\x1b[B", "historyNext"),
            ("\x1b[C", "cursorRight"),
            ("\x1b[D", "cursorLeft"),
            ("\x1b[H", "cursorLineStart"),
            ("\x1b[F", "cursorLineEnd"),
            ("\x1b[1~", "cursorLineStart"),
            ("\x1b[4~", "cursorLineEnd"),
            ("\x1b[3~", "deleteCharForward"),
            ("\x1b[1;5C", "cursorWordRight"),
            ("\x1b[1;5D", "cursorWordLeft"),
            ("\x1b[1;3C", "cursorWordRight"),
            ("\x1b[1;3D", "cursorWordLeft"),
            ("\x1b[1;2C", "cursorRight"),
        ],
    )
    def test_sequence(self, sequence: str, action: str) -> None:
        dispatcher = InputDispatcher()
        assert actions(feed(dispatcher, sequence)) == [action]
        assert dispatcher.state is DispatchState.NORMAL

    def test_nothing_emitted_before_final_byte(self) -> None:
        dispatcher = InputDispatcher()
        assert feed(dispatcher, "\x1b[1;5") == []
        assert dispatcher.state is DispatchState.CSI_PARAMS
        assert dispatcher.pending_sequence == "\x1b[1;5"

    def test_escape_then_letter_requeues_letter(self) -> None:
        dispatcher = InputDispatcher()
        assert feed(dispatcher, "\x1bx") == [KeyEvent("insert", ord("x"))]
        assert dispatcher.state is DispatchState.NORMAL

    def test_escape_then_control_code_requeues_control(self) -> None:
        assert actions(feed(InputDispatcher(), "\x1b\r")) == ["submit"]

    def test_double_escape_stays_armed(self) -> None:
        dispatcher = InputDispatcher()
        assert feed(dispatcher, "\x1b\x1b") == []
        assert dispatcher.state is DispatchState.ESC_SEEN
        assert actions(feed(dispatcher, "[A")) == ["historyPrevious"]

    def test_unknown_final_is_ignored(self) -> None:
        dispatcher = InputDispatcher()
        assert feed(dispatcher, "\x1b[Z") == []
        assert dispatcher.state is DispatchState.NORMAL
        assert feed(dispatcher, "q") == [KeyEvent("insert", ord("q"))]

    def test_unknown_tilde_number_is_ignored(self) -> None:
        assert feed(InputDispatcher(), "\x1b[99~") == []

    def test_non_ascii_final_is_ignored(self) -> None:
        dispatcher = InputDispatcher()
        assert feed(dispatcher, "\x1b[é") == []
        assert dispatcher.state is DispatchState.NORMAL

    def test_overlong_parameters_swallow_rest_of_sequence(self) -> None:
        dispatcher = InputDispatcher()
        assert feed(dispatcher, "\x1b[" + "1" * (MAX_PARAM_LENGTH + 1)) == []
        assert dispatcher.state is DispatchState.CSI_DISCARD
        assert feed(dispatcher, "111;5C") == []
        assert dispatcher.state is DispatchState.NORMAL
        assert feed(dispatcher, "A") == [KeyEvent("insert", ord("A"))]

    def test_overlong_sequence_at_the_limit_still_dispatches(self) -> None:
        params = "1;" + "0" * (MAX_PARAM_LENGTH - 3) + "5"
        assert len(params) == MAX_PARAM_LENGTH
        assert actions(feed(InputDispatcher(), "\x1b[" + params + "C")) == ["cursorWordRight"]

    def test_reset_discards_partial_sequence(self) -> None:
        dispatcher = InputDispatcher()
        feed(dispatcher, "\x1b[1")
        dispatcher.reset()
        assert dispatcher.pending_sequence == ""
        assert feed(dispatcher, "A") == [KeyEvent("insert", ord("A"))]


# ---------------------------------------------------------------------------
# Keymap
# ---------------------------------------------------------------------------


class TestKeymap:
    def test_override_control_binding(self) -> None:
        keymap = Keymap(control={0x01: "cursorLineStart"})
        assert keymap.control_action(0x01) == "cursorLineStart"
        assert keymap.control_action(0x03) == "interrupt"

    def test_custom_keymap_drives_dispatcher(self) -> None:
        dispatcher = InputDispatcher(Keymap(control={0x05: "cursorLineEnd"}))
        assert actions(dispatcher.feed(0x05)) == ["cursorLineEnd"]

    def test_modifier_needs_two_params(self) -> None:
        keymap = Keymap()
        assert keymap.csi_action("C", [5]) == "cursorRight"
        assert keymap.csi_action("C", [1, 5]) == "cursorWordRight"

    def test_tilde_without_number(self) -> None:
        assert Keymap().csi_action("~", []) is None

"""Key bindings: control codes and CSI sequences to editor actions."""

from __future__ import annotations

from typing import Literal

EditorAction = Literal[
    # Text input
    "insert",
    "submit",
    "tab",
    "reverseSearch",
    # Session
    "interrupt",
    "exitOrDeleteForward",
    "redraw",
    # Cursor movement
    "cursorLeft",
    "cursorRight",
    "cursorWordLeft",
    "cursorWordRight",
    "cursorLineStart",
    "cursorLineEnd",
    # History
    "historyPrevious",
    "historyNext",
    # Deletion
    "deleteCharBackward",
    "deleteCharForward",
    "deleteWordBackward",
]

ESC = 0x1B

# Control codes seen in the normal state (ESC is handled by the dispatcher).
DEFAULT_CONTROL_BINDINGS: dict[int, EditorAction] = {
    0x03: "interrupt",  # ctrl+c
    0x04: "exitOrDeleteForward",  # ctrl+d
    0x08: "deleteCharBackward",  # ctrl+h
    0x7F: "deleteCharBackward",  # backspace
    0x0A: "submit",
    0x0D: "submit",
    0x17: "deleteWordBackward",  # ctrl+w
    0x0C: "redraw",  # ctrl+l
    0x09: "tab",
    0x12: "reverseSearch",  # ctrl+r
}

# Final byte of ``ESC [ ... <final>``.
DEFAULT_CSI_BINDINGS: dict[str, EditorAction] = {
    "A": "historyPrevious",
    "B": "historyNext",
    "C": "cursorRight",
    "D": "cursorLeft",
    "H": "cursorLineStart",
    "F": "cursorLineEnd",
}

# Arrow keys carrying a ctrl or alt modifier (``ESC [ 1 ; 5 C``).
DEFAULT_MODIFIED_CSI_BINDINGS: dict[str, EditorAction] = {
    "C": "cursorWordRight",
    "D": "cursorWordLeft",
}

# ``ESC [ <n> ~`` keys.
DEFAULT_TILDE_BINDINGS: dict[int, EditorAction] = {
    1: "cursorLineStart",
    3: "deleteCharForward",
    4: "cursorLineEnd",
}

# xterm modifier parameter values: 3 = alt, 5 = ctrl.
WORD_MODIFIERS = frozenset({3, 5})


class Keymap:
    """Resolves raw key input to :data:`EditorAction` names.

    Each table starts from the defaults above; entries passed to the
    constructor replace or add to them.
    """

    def __init__(
        self,
        *,
        control: dict[int, EditorAction] | None = None,
        csi: dict[str, EditorAction] | None = None,
        modified_csi: dict[str, EditorAction] | None = None,
        tilde: dict[int, EditorAction] | None = None,
    ) -> None:
        self._control = {**DEFAULT_CONTROL_BINDINGS, **(control or {})}
        self._csi = {**DEFAULT_CSI_BINDINGS, **(csi or {})}
        self._modified_csi = {**DEFAULT_MODIFIED_CSI_BINDINGS, **(modified_csi or {})}
        self._tilde = {**DEFAULT_TILDE_BINDINGS, **(tilde or {})}

    def control_action(self, codepoint: int) -> EditorAction | None:
        return self._control.get(codepoint)

    def csi_action(self, final: str, params: list[int]) -> EditorAction | None:
        """Action for a complete CSI sequence, or ``None`` if unbound."""
        if final == "~":
            if not params:
                return None
            return self._tilde.get(params[0])

        if len(params) >= 2 and params[-1] in WORD_MODIFIERS:
            action = self._modified_csi.get(final)
            if action is not None:
                return action

        return self._csi.get(final)

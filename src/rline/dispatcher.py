"""Escape-sequence state machine turning decoded input into key events.

States:

* ``NORMAL`` - control codes map to actions, anything else is inserted.
* ``ESC_SEEN`` - an ESC arrived. ``[`` starts a CSI sequence, another ESC
  re-arms, and any other code point is requeued and handled as if it had
  been typed in ``NORMAL``.
* ``CSI_PARAMS`` - digits and ``;`` accumulate until a final byte picks
  the action. Unknown finals are dropped.
* ``CSI_DISCARD`` - the parameters overflowed; the rest of the sequence
  up to and including its final byte is swallowed without an action.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from rline.keymap import ESC, EditorAction, Keymap

logger = logging.getLogger(__name__)

MAX_PARAM_LENGTH = 16


class DispatchState(Enum):
    NORMAL = "normal"
    ESC_SEEN = "esc_seen"
    CSI_PARAMS = "csi_params"
    CSI_DISCARD = "csi_discard"


@dataclass(frozen=True)
class KeyEvent:
    action: EditorAction
    codepoint: int = 0


class InputDispatcher:
    def __init__(self, keymap: Keymap | None = None) -> None:
        self.keymap = keymap or Keymap()
        self.state = DispatchState.NORMAL
        self._params: list[str] = []
        self._lookahead: int | None = None

    def reset(self) -> None:
        self.state = DispatchState.NORMAL
        self._params.clear()
        self._lookahead = None

    @property
    def pending_sequence(self) -> str:
        """The escape sequence collected so far (empty in ``NORMAL``)."""
        if self.state is DispatchState.NORMAL:
            return ""
        if self.state is DispatchState.ESC_SEEN:
            return "\x1b"
        return "\x1b[" + "".join(self._params)

    def feed(self, codepoint: int) -> list[KeyEvent]:
        """Process one decoded code point and return the resulting events."""
        events: list[KeyEvent] = []
        self._lookahead = codepoint

        while self._lookahead is not None:
            cp = self._lookahead
            self._lookahead = None

            if self.state is DispatchState.NORMAL:
                event = self._normal(cp)
            elif self.state is DispatchState.ESC_SEEN:
                event = self._esc_seen(cp)
            elif self.state is DispatchState.CSI_DISCARD:
                event = self._csi_discard(cp)
            else:
                event = self._csi_params(cp)

            if event is not None:
                events.append(event)

        return events

    # -- states -------------------------------------------------------------

    def _normal(self, cp: int) -> KeyEvent | None:
        if cp == ESC:
            self.state = DispatchState.ESC_SEEN
            return None
        action = self.keymap.control_action(cp)
        if action is not None:
            return KeyEvent(action, cp)
        return KeyEvent("insert", cp)

    def _esc_seen(self, cp: int) -> KeyEvent | None:
        if cp == ESC:
            return None
        if cp == ord("["):
            self.state = DispatchState.CSI_PARAMS
            self._params.clear()
            return None
        # Not a CSI sequence: handle this code point as fresh input.
        self.state = DispatchState.NORMAL
        self._lookahead = cp
        return None

    def _csi_params(self, cp: int) -> KeyEvent | None:
        if ord("0") <= cp <= ord("9") or cp == ord(";"):
            if len(self._params) >= MAX_PARAM_LENGTH:
                logger.debug("dropping over-long escape sequence")
                self.state = DispatchState.CSI_DISCARD
                self._params.clear()
                return None
            self._params.append(chr(cp))
            return None

        params = _parse_params("".join(self._params))
        self.state = DispatchState.NORMAL
        self._params.clear()

        action = None
        if cp < 0x80:
            action = self.keymap.csi_action(chr(cp), params)
        if action is None:
            logger.debug("ignoring escape sequence ending in %r", cp)
            return None
        return KeyEvent(action)

    def _csi_discard(self, cp: int) -> KeyEvent | None:
        if ord("0") <= cp <= ord("9") or cp == ord(";"):
            return None
        self.state = DispatchState.NORMAL
        return None


def _parse_params(raw: str) -> list[int]:
    if not raw:
        return []
    return [int(p) if p else 0 for p in raw.split(";")]

"""Interactive line editing session.

``LineEditor.read_line`` owns the terminal for one line: it puts the
terminal in raw mode, reads one byte at a time, decodes and dispatches
key events, applies them to the line buffer and redraws. Completion and
reverse search run synchronously through :class:`RlineContext`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

from rline.config import EditorConfig
from rline.context import RlineCallback, RlineContext
from rline.decoder import UTF8_ACCEPT, UTF8_REJECT, Utf8Decoder
from rline.dispatcher import InputDispatcher, KeyEvent
from rline.highlight import Highlighter
from rline.history import HistoryStore, InMemoryHistory
from rline.keymap import EditorAction, Keymap
from rline.languages import get_language
from rline.line_buffer import Cell, LineBuffer
from rline.render import Renderer, ViewState
from rline.terminal import RESET_STYLE, ProcessTerminal, Terminal
from rline.theme import get_theme

logger = logging.getLogger(__name__)

_SPACE = 0x20


@dataclass(frozen=True)
class ReadResult:
    """Outcome of one editing session.

    ``committed`` is ``False`` when the session was interrupted or input
    ended; ``data`` is then empty.
    """

    committed: bool
    data: bytes = b""

    @property
    def length(self) -> int:
        return len(self.data)

    @property
    def text(self) -> str:
        return self.data.decode("utf-8", errors="replace")


# Handler return values: True commits, False aborts, None keeps editing.
_Handler = Callable[[KeyEvent], "bool | None"]


class LineEditor:
    """Single-line editor with syntax highlighting and history."""

    def __init__(
        self,
        config: EditorConfig | None = None,
        *,
        terminal: Terminal | None = None,
        history: HistoryStore | None = None,
        keymap: Keymap | None = None,
        tab_complete: RlineCallback | None = None,
        reverse_search: RlineCallback | None = None,
    ) -> None:
        self.config = config or EditorConfig.from_env()
        self.terminal: Terminal = terminal or ProcessTerminal()
        self.history: HistoryStore = history if history is not None else InMemoryHistory()
        self.keymap = keymap or Keymap()
        self.tab_complete_func = tab_complete
        self.reverse_search_func = reverse_search

        self.theme = get_theme(self.config.theme)
        self.highlighter = Highlighter(
            get_language(self.config.language), self.config.shell_commands
        )
        self.renderer = Renderer(self.terminal, self.config, self.theme)

        self.line = LineBuffer(self.highlighter)
        self.view = ViewState()
        self.history_cursor = 0
        self._saved_line = b""
        self._tabbed = False
        self._decoder = Utf8Decoder()
        self._dispatcher = InputDispatcher(self.keymap)

        self._handlers: dict[EditorAction, _Handler] = {
            "insert": lambda e: self.insert_char(e.codepoint),
            "submit": lambda e: True,
            "tab": lambda e: self._tab_complete(),
            "reverseSearch": lambda e: self._reverse_search(),
            "interrupt": lambda e: self._interrupt(),
            "exitOrDeleteForward": lambda e: self._exit_or_delete_forward(),
            "redraw": lambda e: self.redraw(),
            "cursorLeft": lambda e: self.cursor_left(),
            "cursorRight": lambda e: self.cursor_right(),
            "cursorWordLeft": lambda e: self.word_left(),
            "cursorWordRight": lambda e: self.word_right(),
            "cursorLineStart": lambda e: self.cursor_home(),
            "cursorLineEnd": lambda e: self.cursor_end(),
            "historyPrevious": lambda e: self.history_previous(),
            "historyNext": lambda e: self.history_next(),
            "deleteCharBackward": lambda e: self.delete_at_cursor(),
            "deleteCharForward": lambda e: self._delete_forward_unsupported(),
            "deleteWordBackward": lambda e: self.delete_word(),
        }

    # -- configuration -----------------------------------------------------

    def set_prompts(self, left: str, right: str, left_width: int, right_width: int) -> None:
        self.config.prompt = left
        self.config.prompt_right = right
        self.config.prompt_width = left_width
        self.config.prompt_right_width = right_width

    def set_shell_commands(self, commands: list[str]) -> None:
        self.config.shell_commands = list(commands)
        self.highlighter.set_commands(commands)

    def set_tab_complete_func(self, func: RlineCallback | None) -> None:
        self.tab_complete_func = func

    def set_reverse_search_func(self, func: RlineCallback | None) -> None:
        self.reverse_search_func = func

    # -- session -----------------------------------------------------------

    def read_line(self) -> ReadResult:
        """Edit one line and return it once committed or aborted."""
        with self.terminal.raw_mode():
            self._reset_session()
            committed = self._read_loop()
            self.terminal.write(RESET_STYLE + "\r\n")
            data = self.line.to_bytes() if committed else b""
        logger.debug("session ended (committed=%s, %d bytes)", committed, len(data))
        return ReadResult(committed=committed, data=data)

    def _reset_session(self) -> None:
        self.line = LineBuffer(self.highlighter)
        self.view = ViewState()
        self.history_cursor = 0
        self._saved_line = b""
        self._tabbed = False
        self._decoder.reset()
        self._dispatcher.reset()

    def _read_loop(self) -> bool:
        self.refresh()
        while True:
            byte = self.terminal.read_byte()
            if byte is None:
                logger.debug("input ended")
                return False

            state = self._decoder.decode(byte)
            if state == UTF8_REJECT:
                logger.debug("discarding malformed input byte 0x%02x", byte)
                self._decoder.reset()
                continue
            if state != UTF8_ACCEPT:
                continue

            for event in self._dispatcher.feed(self._decoder.codepoint):
                outcome = self.handle(event)
                if outcome is not None:
                    return outcome

    def handle(self, event: KeyEvent) -> bool | None:
        """Apply one key event; ``True``/``False`` end the session."""
        if event.action != "tab":
            self._tabbed = False
        handler = self._handlers.get(event.action)
        if handler is None:
            logger.debug("no handler for action %s", event.action)
            return None
        return handler(event)

    # -- drawing -----------------------------------------------------------

    def refresh(self) -> None:
        self.renderer.refresh(self.line, self.view)

    def place_cursor(self) -> None:
        self.renderer.place_cursor(self.line, self.view)

    def redraw(self) -> None:
        self.terminal.clear_screen()
        self.refresh()

    # -- editing -----------------------------------------------------------

    def insert_char(self, codepoint: int) -> None:
        self.line.insert(Cell.for_codepoint(codepoint), self.view.column)
        self.view.column += 1
        if not self.line.loading:
            self.refresh()

    def _scroll_back_one(self) -> None:
        if self.view.offset > 0:
            self.view.offset -= 1

    def delete_at_cursor(self) -> None:
        if self.view.column > 0:
            self.line.delete(self.view.column)
            self.view.column -= 1
            self._scroll_back_one()
            self.refresh()

    def delete_word(self) -> None:
        """Delete backwards through the previous run of non-space cells."""
        if not len(self.line) or not self.view.column:
            return

        with self.line.bulk():
            while True:
                if self.view.column > 0:
                    self.line.delete(self.view.column)
                    self.view.column -= 1
                    self._scroll_back_one()
                column = self.view.column
                if not column or self.line[column - 1].codepoint == _SPACE:
                    break

        self.refresh()

    def _exit_or_delete_forward(self) -> bool | None:
        if self.view.column == 0 and len(self.line) == 0:
            for ch in self.config.exit_token:
                self.insert_char(ord(ch))
            return True
        if self.view.column < len(self.line):
            self.line.delete(self.view.column + 1)
            self._scroll_back_one()
            self.refresh()
        return None

    def _delete_forward_unsupported(self) -> None:
        # TODO: make ESC [ 3 ~ delete the cell under the cursor like ^D does.
        logger.debug("forward delete key ignored")

    def _interrupt(self) -> bool:
        self.line.clear()
        self.terminal.write(self.theme.alt + "^C" + RESET_STYLE)
        return False

    # -- cursor motion -----------------------------------------------------

    def cursor_left(self) -> None:
        if self.view.column > 0:
            self.view.column -= 1
        self.place_cursor()

    def cursor_right(self) -> None:
        if self.view.column < len(self.line):
            self.view.column += 1
        self.place_cursor()

    def cursor_home(self) -> None:
        self.view.column = 0
        self.place_cursor()

    def cursor_end(self) -> None:
        self.view.column = len(self.line)
        self.place_cursor()

    def word_left(self) -> None:
        column = self.view.column
        if column == 0:
            return
        column -= 1
        while column and self.line[column].codepoint == _SPACE:
            column -= 1
        while column > 0:
            if self.line[column - 1].codepoint == _SPACE:
                break
            column -= 1
        self.view.column = column
        self.place_cursor()

    def word_right(self) -> None:
        n = len(self.line)
        column = self.view.column
        while column < n and self.line[column].codepoint == _SPACE:
            column += 1
        while column < n:
            column += 1
            if column < n and self.line[column].codepoint == _SPACE:
                break
        self.view.column = column
        self.place_cursor()

    # -- history -----------------------------------------------------------

    def _load_line(self, data: bytes) -> None:
        self.view.column = 0
        self.line.load(data)

    def history_previous(self) -> None:
        if self.history_cursor == 0:
            self._saved_line = self.line.to_bytes()

        if self.history_cursor < self.history.count:
            self.history_cursor += 1
            logger.debug("history previous -> %d", self.history_cursor)
            self._load_line(self.history.get_previous(self.history_cursor) or b"")

        self.view.column = len(self.line)
        self.refresh()

    def history_next(self) -> None:
        if self.history_cursor > 1:
            self.history_cursor -= 1
            logger.debug("history next -> %d", self.history_cursor)
            self._load_line(self.history.get_previous(self.history_cursor) or b"")
        elif self.history_cursor == 1:
            self.history_cursor = 0
            logger.debug("history next -> live line")
            self._load_line(self._saved_line)

        self.view.column = len(self.line)
        self.refresh()

    # -- callbacks ---------------------------------------------------------

    def call_rline_func(self, func: RlineCallback) -> RlineContext:
        """Run *func* on the current line and import its edits."""
        context = RlineContext(
            buffer=self.line.to_bytes(),
            offset=self.line.byte_offset(self.view.column),
            requested=self.config.buffer_size,
            tabbed=self._tabbed,
            quiet=True,
        )
        self.terminal.write(RESET_STYLE)
        func(context)

        data = bytes(context.buffer)
        offset = context.offset
        final_column: int | None = None
        decoder = Utf8Decoder()

        with self.line.bulk():
            self.line.clear()
            for i, byte in enumerate(data):
                if i == offset:
                    final_column = len(self.line)
                state = decoder.decode(byte)
                if state == UTF8_ACCEPT:
                    self.line.insert(Cell.for_codepoint(decoder.codepoint), len(self.line))
                elif state == UTF8_REJECT:
                    decoder.reset()

        if final_column is None:
            # Offset at, past or before the end of the returned buffer.
            self.view.column = len(self.line)
        else:
            self.view.column = final_column

        self._tabbed = context.tabbed
        logger.debug(
            "callback returned %d bytes, cursor at cell %d (cancel=%s)",
            len(data),
            self.view.column,
            context.cancel,
        )
        self.refresh()
        return context

    def _tab_complete(self) -> None:
        if self.tab_complete_func is None:
            return
        self.call_rline_func(self.tab_complete_func)

    def _reverse_search(self) -> bool | None:
        if self.reverse_search_func is None:
            return None
        context = self.call_rline_func(self.reverse_search_func)
        if not context.cancel:
            return True
        return None


def read_line(config: EditorConfig | None = None, **kwargs) -> ReadResult:
    """Read one line from the process terminal."""
    return LineEditor(config, **kwargs).read_line()

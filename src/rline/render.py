"""Single-line renderer with horizontal scrolling.

The line is drawn from the first visible cell (the render offset) up to
the terminal width minus the right prompt. Cells that the terminal
cannot show literally are replaced by visible notations in the theme's
alternate colors. A line that does not fit is cut off with ``--->``.
"""

from __future__ import annotations

from dataclasses import dataclass

from rline.config import EditorConfig
from rline.line_buffer import Cell, LineBuffer, is_unrenderable
from rline.terminal import RESET_STYLE, Terminal
from rline.theme import Theme, set_colors, set_fg_color

TAB_MARKER = "»"
TAB_FILL = "·"
TRAILING_SPACE = "·"
NBSP_GLYPH = "_"
OVERFLOW_FILL = "-"
OVERFLOW_MARKER = ">"


@dataclass
class ViewState:
    """Cursor position (a cell index) and the first visible column."""

    column: int = 0
    offset: int = 0


def special_glyph(cell: Cell, is_last: bool) -> str | None:
    """Replacement text for *cell*, or ``None`` to draw it literally."""
    cp = cell.codepoint
    if cp == 0x09:
        return TAB_MARKER + TAB_FILL * (cell.display_width - 1)
    if cp < 0x20:
        return "^" + chr(ord("@") + cp)
    if cp == 0x7F:
        return "^?"
    if 0x7F < cp < 0xA0:
        return f"<{cp:2x}>"
    if cp == 0xA0:
        return NBSP_GLYPH
    if is_unrenderable(cell):
        if cell.display_width == 8:
            return f"[U+{cp:04x}]"
        return f"[U+{cp:06x}]"
    if cp == 0x20 and is_last:
        return TRAILING_SPACE
    return None


class Renderer:
    """Draws a :class:`LineBuffer` and positions the cursor on a terminal."""

    def __init__(self, terminal: Terminal, config: EditorConfig, theme: Theme) -> None:
        self.terminal = terminal
        self.config = config
        self.theme = theme

    @property
    def width(self) -> int:
        """Columns available to the prompt and the text, queried on demand."""
        return self.terminal.columns - self.config.prompt_right_width

    # -- line --------------------------------------------------------------

    def build_line(self, buffer: LineBuffer, view: ViewState) -> str:
        """Return the escape-sequence text that draws the whole line.

        Cursor visibility is handled by :meth:`render_line` and
        :meth:`place_cursor`.
        """
        theme = self.theme
        width = self.width
        available = width - self.config.prompt_width
        offset = view.offset

        out: list[str] = [RESET_STYLE, "\r", self.config.prompt]
        out.append(theme.normal)

        last_color: str | None = None
        remainder = 0
        i = 0  # cell index
        j = 0  # terminal column, counted from the start of the line
        n = len(buffer)

        while i < n:
            if remainder:
                # Wide cell straddling the left edge: fill its visible part.
                if j >= offset:
                    out.append(theme.alt)
                    out.append(OVERFLOW_FILL)
                    out.append(theme.normal)
                remainder -= 1
                j += 1
                if remainder == 0:
                    i += 1
                continue

            cell = buffer[i]

            if j >= offset:
                if j - offset + cell.display_width >= available:
                    out.append(theme.alt)
                    while j - offset < available - 1:
                        out.append(OVERFLOW_FILL)
                        j += 1
                    out.append(OVERFLOW_MARKER)
                    out.append(theme.normal)
                    return "".join(out)

                color = theme.tag_color(cell.tag)
                if color != last_color:
                    out.append(set_fg_color(color))
                    last_color = color

                glyph = special_glyph(cell, i == n - 1)
                if glyph is None:
                    out.append(chr(cell.codepoint))
                elif cell.codepoint == 0x20:
                    out.append(theme.alt)
                    out.append(glyph)
                    out.append(theme.normal)
                else:
                    out.append(theme.alt)
                    out.append(glyph)
                    out.append(set_colors(last_color or theme.fg, theme.bg))

                j += cell.display_width
                i += 1
            elif cell.display_width > 1:
                remainder = cell.display_width - 1
                j += 1
            else:
                j += 1
                i += 1

        out.append(" " * max(0, width + offset - self.config.prompt_width - j))
        out.append(RESET_STYLE)
        out.append(self.config.prompt_right)
        return "".join(out)

    def render_line(self, buffer: LineBuffer, view: ViewState) -> None:
        self.terminal.hide_cursor()
        self.terminal.write(self.build_line(buffer, view))

    # -- cursor ------------------------------------------------------------

    def place_cursor(self, buffer: LineBuffer, view: ViewState) -> None:
        """Move the terminal cursor to *view.column*, scrolling as needed.

        Scrolling changes only ``view.offset`` and redraws the line.
        """
        width = self.width
        prompt_width = self.config.prompt_width

        x = prompt_width + 1 - view.offset + buffer.columns_before(view.column)

        if x > width - 1:
            diff = x - (width - 1)
            view.offset += diff
            x -= diff
            self.render_line(buffer, view)

        if x < prompt_width + 1:
            diff = (prompt_width + 1) - x
            view.offset -= diff
            x += diff
            self.render_line(buffer, view)

        self.terminal.show_cursor()
        self.terminal.move_to_column(x)

    def refresh(self, buffer: LineBuffer, view: ViewState) -> None:
        self.render_line(buffer, view)
        self.place_cursor(buffer, view)

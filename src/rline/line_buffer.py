"""Character-cell line buffer.

A line is an ordered run of :class:`Cell` values, each holding a code
point, the number of terminal columns it occupies, and a highlight tag.
The buffer grows by doubling and never shrinks; edits shift cells in
place and re-run the attached highlighter unless a bulk load is active.
"""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Callable, Iterator

import wcwidth as _wcwidth

from rline.decoder import decode_bytes, encode_codepoint

_INITIAL_CAPACITY = 32


# ---------------------------------------------------------------------------
# Display width
# ---------------------------------------------------------------------------


def codepoint_width(codepoint: int) -> int:
    """Return the number of columns the renderer uses for *codepoint*.

    Control characters are drawn as caret or hex notation and code points
    the terminal cannot draw as ``[U+XXXX]``, so their widths reflect that
    notation rather than the glyph.
    """
    if codepoint == 0x09:
        return 1
    if codepoint < 0x20:
        return 2  # ^@
    if codepoint == 0x7F:
        return 2  # ^?
    if 0x7F < codepoint < 0xA0:
        return 4  # <xx>
    if codepoint == 0xA0:
        return 1
    if codepoint > 256:
        if codepoint <= 0x10FFFF and not 0xD800 <= codepoint <= 0xDFFF:
            w = _wcwidth.wcwidth(chr(codepoint))
            if w >= 1:
                return w
        return 8 if codepoint < 0x10000 else 10
    return 1


def is_unrenderable(cell: Cell) -> bool:
    """True for cells drawn as bracketed ``U+`` notation."""
    return cell.codepoint > 256 and cell.display_width in (8, 10)


# ---------------------------------------------------------------------------
# Cell
# ---------------------------------------------------------------------------


@dataclass
class Cell:
    codepoint: int
    display_width: int = 1
    tag: int = 0

    @classmethod
    def for_codepoint(cls, codepoint: int) -> Cell:
        return cls(codepoint=codepoint, display_width=codepoint_width(codepoint))


# ---------------------------------------------------------------------------
# LineBuffer
# ---------------------------------------------------------------------------


class LineBuffer:
    """Growable sequence of cells with positional insert and delete.

    *highlighter* is called with the buffer after every edit made outside
    of :meth:`bulk`.
    """

    def __init__(
        self,
        highlighter: Callable[[LineBuffer], None] | None = None,
        *,
        capacity: int = _INITIAL_CAPACITY,
    ) -> None:
        self._cells: list[Cell | None] = [None] * max(capacity, 1)
        self._length: int = 0
        self.initial_state: int = 0
        self.highlighter = highlighter
        self.loading: bool = False

    # -- sizing -------------------------------------------------------------

    @property
    def capacity(self) -> int:
        return len(self._cells)

    def __len__(self) -> int:
        return self._length

    def _grow(self) -> None:
        self._cells.extend([None] * len(self._cells))

    # -- access -------------------------------------------------------------

    def __getitem__(self, index: int) -> Cell:
        if index < 0:
            index += self._length
        if not 0 <= index < self._length:
            raise IndexError("cell index out of range")
        cell = self._cells[index]
        assert cell is not None
        return cell

    def __iter__(self) -> Iterator[Cell]:
        for i in range(self._length):
            yield self._cells[i]  # type: ignore[misc]

    def codepoints(self) -> list[int]:
        return [cell.codepoint for cell in self]

    def text(self) -> str:
        """Return the line as ``str``; unencodable code points become U+FFFD."""
        return "".join(
            chr(cp) if cp <= 0x10FFFF and not 0xD800 <= cp <= 0xDFFF else "\ufffd"
            for cp in self.codepoints()
        )

    def to_bytes(self) -> bytes:
        return b"".join(encode_codepoint(cell.codepoint) for cell in self)

    def byte_offset(self, column: int) -> int:
        """Byte offset of cell *column* in the encoded line."""
        return sum(len(encode_codepoint(self[i].codepoint)) for i in range(column))

    def columns_before(self, column: int) -> int:
        """Total display width of the cells before *column*."""
        return sum(self[i].display_width for i in range(column))

    # -- mutation -----------------------------------------------------------

    def insert(self, cell: Cell, offset: int) -> None:
        """Insert *cell* so that it ends up at index *offset*."""
        if not 0 <= offset <= self._length:
            raise IndexError("insert offset out of range")

        if self._length == len(self._cells):
            self._grow()

        if offset < self._length:
            self._cells[offset + 1 : self._length + 1] = self._cells[offset : self._length]

        self._cells[offset] = cell
        self._length += 1

        self._changed()

    def delete(self, offset: int) -> None:
        """Remove the cell *before* *offset*; a no-op at offset 0."""
        if offset == 0 or offset > self._length:
            return

        if offset < self._length:
            self._cells[offset - 1 : self._length - 1] = self._cells[offset : self._length]

        self._length -= 1
        self._cells[self._length] = None

        self._changed()

    def clear(self) -> None:
        """Drop every cell, keeping the current capacity."""
        for i in range(self._length):
            self._cells[i] = None
        self._length = 0

    def load(self, data: bytes) -> None:
        """Replace the contents with the decoded *data*."""
        with self.bulk():
            self.clear()
            for cp in decode_bytes(data):
                self.insert(Cell.for_codepoint(cp), self._length)

    @contextmanager
    def bulk(self) -> Iterator[LineBuffer]:
        """Suspend per-edit highlighting; recompute once on exit."""
        was_loading = self.loading
        self.loading = True
        try:
            yield self
        finally:
            self.loading = was_loading
        if not was_loading:
            self._changed()

    def _changed(self) -> None:
        if not self.loading and self.highlighter is not None:
            self.highlighter(self)

"""Request structure shared with completion and search callbacks."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable


def _no_redraw(context: RlineContext) -> None:
    pass


@dataclass
class RlineContext:
    """The line as a callback sees it.

    ``buffer`` holds the encoded line and ``offset`` the cursor as a byte
    offset into it. A callback edits both in place. ``cancel`` is only
    meaningful for reverse search: ``True`` keeps editing, ``False``
    accepts the line. ``tabbed`` is the value the completion callback left
    on the previous Tab press; any other key clears it.
    """

    buffer: bytes = b""
    offset: int = 0
    requested: int = 1024
    cancel: bool = False
    tabbed: bool = False
    quiet: bool = True
    redraw_prompt: Callable[[RlineContext], None] = field(default=_no_redraw)

    @property
    def collected(self) -> int:
        return len(self.buffer)

    def insert(self, data: bytes) -> None:
        """Insert *data* at the cursor and move the cursor past it."""
        offset = max(0, min(self.offset, len(self.buffer)))
        self.buffer = self.buffer[:offset] + data + self.buffer[offset:]
        self.offset = offset + len(data)


RlineCallback = Callable[[RlineContext], None]

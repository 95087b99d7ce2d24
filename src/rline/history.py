"""History store interface and an in-memory implementation."""

from __future__ import annotations

from typing import Protocol


class HistoryStore(Protocol):
    """Read-only view of previously entered lines.

    ``get_previous(1)`` is the most recent entry, ``get_previous(count)``
    the oldest one still held.
    """

    @property
    def count(self) -> int: ...

    def get_previous(self, n: int) -> bytes | None: ...


class InMemoryHistory:
    """Bounded list of encoded lines; the oldest entries fall off first.

    Consecutive duplicates and empty lines are not recorded.
    """

    def __init__(self, entries: list[bytes] | None = None, *, max_entries: int = 255) -> None:
        self._max_entries = max_entries
        self._entries: list[bytes] = []
        for entry in entries or []:
            self.append(entry)

    def append(self, line: bytes) -> None:
        if not line:
            return
        if self._entries and self._entries[-1] == line:
            return
        self._entries.append(line)
        if len(self._entries) > self._max_entries:
            del self._entries[0]

    def get_previous(self, n: int) -> bytes | None:
        if n < 1 or n > len(self._entries):
            return None
        return self._entries[-n]

    @property
    def count(self) -> int:
        return len(self._entries)

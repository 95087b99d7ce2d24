"""Incremental syntax highlighting over a :class:`LineBuffer`.

Highlighting is a single left-to-right pass. At each cell that is not
covered by an active run, the language's extended matcher gets the first
chance to start a multi-cell run (strings, comments, expansions); failing
that, the keyword table and the caller's known command names are tried.
A match yields ``(tag, remaining)`` and the following *remaining* cells
inherit *tag* without being classified again.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Callable, Sequence

from rline.line_buffer import LineBuffer


class Tag(IntEnum):
    NONE = 0
    KEYWORD = 1
    STRING = 2
    COMMENT = 3
    TYPE = 4
    PRAGMA = 5
    NUMERAL = 6
    SELECT = 7
    STRING2 = 8
    DIFFPLUS = 9
    DIFFMINUS = 10


# (buffer, index, codepoint, previous codepoint) -> (tag, remaining) or None
ExtendedMatcher = Callable[[LineBuffer, int, int, int], "tuple[int, int] | None"]


@dataclass(frozen=True)
class LanguageRules:
    """Highlighting rules for one language."""

    name: str
    keywords: tuple[str, ...] = ()
    extended: ExtendedMatcher | None = None
    is_keyword_char: Callable[[int], bool] = field(default=lambda c: False)


def match_word(
    buffer: LineBuffer,
    start: int,
    word: str,
    last: int,
    is_keyword_char: Callable[[int], bool],
) -> bool:
    """Check whether *word* appears at *start* as a whole word.

    The word must not be preceded by a keyword character (*last* is the
    code point before *start*) and must be followed by a non-keyword
    character or the end of the line.
    """
    if is_keyword_char(last):
        return False
    n = len(buffer)
    end = start + len(word)
    if end > n:
        return False
    for offset, ch in enumerate(word):
        if buffer[start + offset].codepoint != ord(ch):
            return False
    return end == n or not is_keyword_char(buffer[end].codepoint)


class Highlighter:
    """Callable that re-tags a buffer using *rules* and known *commands*."""

    def __init__(self, rules: LanguageRules, commands: Sequence[str] = ()) -> None:
        self.rules = rules
        self.commands: list[str] = list(commands)

    def set_commands(self, commands: Sequence[str]) -> None:
        self.commands = list(commands)

    def __call__(self, buffer: LineBuffer) -> None:
        self.recompute(buffer)

    def _match_keyword(self, buffer: LineBuffer, i: int, last: int) -> int | None:
        is_kw = self.rules.is_keyword_char
        for table in (self.rules.keywords, self.commands):
            for word in table:
                if word and match_word(buffer, i, word, last, is_kw):
                    return len(word) - 1
        return None

    def recompute(self, buffer: LineBuffer) -> None:
        state = buffer.initial_state
        left = 0
        last = 0

        for i in range(len(buffer)):
            cell = buffer[i]
            if not left:
                state = Tag.NONE

            if state:
                left -= 1
                cell.tag = state
                if not left:
                    state = Tag.NONE
                last = cell.codepoint
                continue

            cell.tag = Tag.NONE

            match = None
            if self.rules.extended is not None:
                match = self.rules.extended(buffer, i, cell.codepoint, last)

            if match is not None:
                state, left = match
            else:
                remaining = self._match_keyword(buffer, i, last)
                if remaining is not None:
                    state, left = Tag.KEYWORD, remaining

            cell.tag = state
            last = cell.codepoint

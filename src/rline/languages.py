"""Language rule sets for the highlighter."""

from __future__ import annotations

from rline.highlight import LanguageRules, Tag
from rline.line_buffer import LineBuffer

# ---------------------------------------------------------------------------
# Shell
# ---------------------------------------------------------------------------

SH_KEYWORDS: tuple[str, ...] = (
    "cd",
    "exit",
    "export",
    "help",
    "history",
    "if",
    "empty?",
    "equals?",
    "return",
    "export-cmd",
    "source",
    "exec",
    "not",
    "while",
    "then",
    "else",
)

_BACKSLASH = ord("\\")


def _is_ascii_alnum(c: int) -> bool:
    return (
        ord("0") <= c <= ord("9")
        or ord("A") <= c <= ord("Z")
        or ord("a") <= c <= ord("z")
    )


def sh_variable_char(c: int) -> bool:
    return _is_ascii_alnum(c) or c in (ord("_"), ord("?"))


def sh_keyword_char(c: int) -> bool:
    return _is_ascii_alnum(c) or c in (ord("-"), ord("_"), ord("?"))


def _quoted(buffer: LineBuffer, i: int, quote: int) -> tuple[int, int]:
    last = 0
    for j in range(i + 1, len(buffer)):
        c = buffer[j].codepoint
        if last != _BACKSLASH and c == quote:
            return Tag.STRING, j - i
        if last == _BACKSLASH and c == _BACKSLASH:
            # An escaped backslash does not escape what follows it.
            c = 0
        last = c
    # Unterminated: run to the end of the line.
    return Tag.STRING, len(buffer) - i


def sh_extended(buffer: LineBuffer, i: int, c: int, last: int) -> tuple[int, int] | None:
    n = len(buffer)

    if c == ord("#"):
        return Tag.COMMENT, n - i

    if c in (ord("'"), ord('"')):
        return _quoted(buffer, i, c)

    if c == ord("$") and last != _BACKSLASH:
        if i + 1 < n and buffer[i + 1].codepoint == ord("{"):
            j = i + 2
            while j < n and buffer[j].codepoint != ord("}"):
                j += 1
            return Tag.NUMERAL, j - i
        j = i + 1
        while j < n and sh_variable_char(buffer[j].codepoint):
            j += 1
        return Tag.NUMERAL, j - i - 1

    return None


SH = LanguageRules(
    name="sh",
    keywords=SH_KEYWORDS,
    extended=sh_extended,
    is_keyword_char=sh_keyword_char,
)

# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

PLAIN = LanguageRules(name="plain")

_LANGUAGES: dict[str, LanguageRules] = {
    SH.name: SH,
    PLAIN.name: PLAIN,
}


def register_language(rules: LanguageRules) -> None:
    _LANGUAGES[rules.name] = rules


def get_language(name: str) -> LanguageRules:
    try:
        return _LANGUAGES[name]
    except KeyError:
        raise ValueError(f"Unknown language: {name!r}") from None


def language_names() -> list[str]:
    return sorted(_LANGUAGES)

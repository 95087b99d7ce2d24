"""Color themes and SGR sequence construction.

A color spec is either ``"@N"`` for an indexed palette entry (``N`` from
0 to 9 for the normal colors, 10 and up for the bright ones) or the tail
of an extended SGR color such as ``"2;230;230;230"`` (RGB) or ``"5;196"``
(256-color).
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from rline.highlight import Tag

THEME_ENV = "RLINE_THEME"

RESET = "\x1b[0m"


# ---------------------------------------------------------------------------
# SGR helpers
# ---------------------------------------------------------------------------


def _palette(spec: str, normal: str, bright: str) -> str:
    index = int(spec[1:])
    if index < 10:
        return f"{normal}{index}"
    return f"{bright}{index - 10}"


def fg_param(spec: str) -> str:
    if spec.startswith("@"):
        return _palette(spec, "3", "9")
    return f"38;{spec}"


def bg_param(spec: str) -> str:
    if spec.startswith("@"):
        return _palette(spec, "4", "10")
    return f"48;{spec}"


def set_colors(fg: str, bg: str) -> str:
    """SGR sequence selecting *fg* on *bg*, clearing bold and italic."""
    return f"\x1b[22;23;{bg_param(bg)};{fg_param(fg)}m"


def set_fg_color(fg: str) -> str:
    return f"\x1b[22;23;{fg_param(fg)}m"


# ---------------------------------------------------------------------------
# Theme
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Theme:
    name: str
    fg: str = "@9"
    bg: str = "@9"
    alt_fg: str = "@5"
    alt_bg: str = "@9"
    number_fg: str = "@3"
    number_bg: str = "@9"
    status_fg: str = "@7"
    status_bg: str = "@4"
    tabbar_bg: str = "@4"
    tab_bg: str = "@4"
    keyword: str = "@4"
    string: str = "@2"
    comment: str = "@5"
    type: str = "@3"
    pragma: str = "@1"
    numeral: str = "@1"
    error_fg: str = "@7"
    error_bg: str = "@1"
    search_fg: str = "@0"
    search_bg: str = "@3"
    select_fg: str = "@0"
    select_bg: str = "@7"
    red: str = "@1"
    green: str = "@2"

    def tag_color(self, tag: int) -> str:
        """Foreground color spec for a highlight tag."""
        tag &= 0x3F
        if tag == Tag.KEYWORD:
            return self.keyword
        if tag in (Tag.STRING, Tag.STRING2):
            return self.string
        if tag == Tag.COMMENT:
            return self.comment
        if tag == Tag.TYPE:
            return self.type
        if tag == Tag.NUMERAL:
            return self.numeral
        if tag == Tag.PRAGMA:
            return self.pragma
        if tag == Tag.DIFFPLUS:
            return self.green
        if tag == Tag.DIFFMINUS:
            return self.red
        return self.fg

    @property
    def normal(self) -> str:
        return set_colors(self.fg, self.bg)

    @property
    def alt(self) -> str:
        return set_colors(self.alt_fg, self.alt_bg)


DEFAULT_THEME = Theme(name="default")

SUNSMOKE_THEME = Theme(
    name="sunsmoke",
    fg="2;230;230;230",
    bg="@9",
    alt_fg="2;122;122;122",
    alt_bg="2;46;43;46",
    number_fg="2;150;139;57",
    number_bg="2;0;0;0",
    status_fg="2;230;230;230",
    status_bg="2;71;64;58",
    tabbar_bg="2;71;64;58",
    tab_bg="2;71;64;58",
    keyword="2;51;162;230",
    string="2;72;176;72",
    comment="2;158;153;129;3",
    type="2;230;206;110",
    pragma="2;194;70;54",
    numeral="2;230;43;127",
    error_fg="5;15",
    error_bg="5;196",
    search_fg="5;234",
    search_bg="5;226",
    select_fg="2;0;43;54",
    select_bg="2;147;161;161",
    red="2;222;53;53",
    green="2;55;167;0",
)

THEMES: dict[str, Theme] = {
    DEFAULT_THEME.name: DEFAULT_THEME,
    SUNSMOKE_THEME.name: SUNSMOKE_THEME,
}


def get_theme(name: str | None = None) -> Theme:
    """Look up a theme; unknown or empty names give the default theme."""
    if name is None:
        name = os.environ.get(THEME_ENV, "")
    return THEMES.get(name, DEFAULT_THEME)

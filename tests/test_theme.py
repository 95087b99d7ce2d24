"""Tests for rline.theme."""

from __future__ import annotations

import pytest

from rline.highlight import Tag
from rline.theme import (
    DEFAULT_THEME,
    SUNSMOKE_THEME,
    THEME_ENV,
    bg_param,
    fg_param,
    get_theme,
    set_colors,
    set_fg_color,
)


class TestColorParams:
    @pytest.mark.parametrize(
        ("spec", "fg", "bg"),
        [
            ("@0", "30", "40"),
            ("@9", "39", "49"),
            ("@10", "90", "100"),
            ("@17", "97", "107"),
            ("5;196", "38;5;196", "48;5;196"),
            ("2;1;2;3", "38;2;1;2;3", "48;2;1;2;3"),
        ],
    )
    def test_params(self, spec: str, fg: str, bg: str) -> None:
        assert fg_param(spec) == fg
        assert bg_param(spec) == bg

    def test_set_colors_clears_bold_and_italic(self) -> None:
        assert set_colors("@9", "@9") == "\x1b[22;23;49;39m"

    def test_set_fg_color(self) -> None:
        assert set_fg_color("@4") == "\x1b[22;23;34m"


class TestTheme:
    def test_default_normal_and_alt(self) -> None:
        assert DEFAULT_THEME.normal == "\x1b[22;23;49;39m"
        assert DEFAULT_THEME.alt == "\x1b[22;23;49;35m"

    def test_tag_colors(self) -> None:
        theme = DEFAULT_THEME
        assert theme.tag_color(Tag.NONE) == theme.fg
        assert theme.tag_color(Tag.KEYWORD) == theme.keyword
        assert theme.tag_color(Tag.STRING) == theme.string
        assert theme.tag_color(Tag.STRING2) == theme.string
        assert theme.tag_color(Tag.COMMENT) == theme.comment
        assert theme.tag_color(Tag.NUMERAL) == theme.numeral
        assert theme.tag_color(Tag.DIFFPLUS) == theme.green
        assert theme.tag_color(Tag.DIFFMINUS) == theme.red

    def test_select_tag_uses_plain_foreground(self) -> None:
        assert DEFAULT_THEME.tag_color(Tag.SELECT) == DEFAULT_THEME.fg

    def test_sunsmoke_uses_rgb(self) -> None:
        assert SUNSMOKE_THEME.normal == "\x1b[22;23;49;38;2;230;230;230m"


class TestGetTheme:
    def test_by_name(self) -> None:
        assert get_theme("sunsmoke") is SUNSMOKE_THEME

    def test_unknown_name_falls_back(self) -> None:
        assert get_theme("no-such-theme") is DEFAULT_THEME

    def test_from_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv(THEME_ENV, "sunsmoke")
        assert get_theme() is SUNSMOKE_THEME

    def test_environment_unset(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv(THEME_ENV, raising=False)
        assert get_theme() is DEFAULT_THEME

"""rline: syntax-highlighting single-line editor for terminals."""

# Configuration
from rline.config import EditorConfig, load_config

# Callback request structure
from rline.context import RlineCallback, RlineContext

# Unicode decoding
from rline.decoder import (
    UTF8_ACCEPT,
    UTF8_REJECT,
    Utf8Decoder,
    decode_bytes,
    encode_codepoint,
    encode_codepoints,
)

# Input dispatch
from rline.dispatcher import DispatchState, InputDispatcher, KeyEvent

# Highlighting
from rline.highlight import Highlighter, LanguageRules, Tag
from rline.languages import SH, get_language, register_language

# History
from rline.history import HistoryStore, InMemoryHistory

# Key bindings
from rline.keymap import EditorAction, Keymap

# Line buffer
from rline.line_buffer import Cell, LineBuffer, codepoint_width

# Rendering
from rline.render import Renderer, ViewState

# Session
from rline.session import LineEditor, ReadResult, read_line

# Terminal
from rline.terminal import ProcessTerminal, Terminal

# Themes
from rline.theme import DEFAULT_THEME, SUNSMOKE_THEME, THEMES, Theme, get_theme

__all__ = [
    # Config
    "EditorConfig",
    "load_config",
    # Context
    "RlineCallback",
    "RlineContext",
    # Decoder
    "UTF8_ACCEPT",
    "UTF8_REJECT",
    "Utf8Decoder",
    "decode_bytes",
    "encode_codepoint",
    "encode_codepoints",
    # Dispatcher
    "DispatchState",
    "InputDispatcher",
    "KeyEvent",
    # Highlighting
    "Highlighter",
    "LanguageRules",
    "Tag",
    "SH",
    "get_language",
    "register_language",
    # History
    "HistoryStore",
    "InMemoryHistory",
    # Keymap
    "EditorAction",
    "Keymap",
    # Line buffer
    "Cell",
    "LineBuffer",
    "codepoint_width",
    # Rendering
    "Renderer",
    "ViewState",
    # Session
    "LineEditor",
    "ReadResult",
    "read_line",
    # Terminal
    "ProcessTerminal",
    "Terminal",
    # Themes
    "DEFAULT_THEME",
    "SUNSMOKE_THEME",
    "THEMES",
    "Theme",
    "get_theme",
]

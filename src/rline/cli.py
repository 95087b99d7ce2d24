"""CLI entry point for rline. Uses Click for argument parsing."""

from __future__ import annotations

import logging
import os
import sys
from typing import Callable, Sequence

import click
import wcwidth

from rline.config import load_config
from rline.context import RlineCallback, RlineContext
from rline.history import InMemoryHistory
from rline.languages import get_language, language_names
from rline.session import LineEditor
from rline.theme import THEMES

LOG_FILE_ENV = "RLINE_LOG_FILE"

_LOG_LEVELS = ["debug", "info", "warning", "error"]


def _setup_logging(log_file: str | None, level: str) -> None:
    if not log_file:
        # Anything written to the terminal would corrupt the edited line.
        logging.getLogger("rline").addHandler(logging.NullHandler())
        return
    logging.basicConfig(
        filename=log_file,
        level=getattr(logging, level.upper()),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def _display_width(text: str) -> int:
    return max(wcwidth.wcswidth(text), 0)


def _common_prefix(words: Sequence[str]) -> str:
    if not words:
        return ""
    return os.path.commonprefix(list(words))


def make_completer(
    candidates: Sequence[str],
    echo: Callable[[str], None] | None = None,
) -> RlineCallback:
    """Build a Tab callback completing the word before the cursor.

    A unique match is completed with a trailing space. Several matches
    are extended to their common prefix; a second Tab in a row lists
    them through *echo*.
    """
    words = sorted(set(candidates))

    def _echo(text: str) -> None:
        if echo is not None:
            echo(text)
        else:
            sys.stdout.write(text)
            sys.stdout.flush()

    def complete(context: RlineContext) -> None:
        before = context.buffer[: context.offset]
        start = before.rfind(b" ") + 1
        prefix = before[start:].decode("utf-8", errors="replace")

        matches = [w for w in words if w.startswith(prefix)]
        if not matches:
            return

        if len(matches) == 1:
            context.insert((matches[0][len(prefix):] + " ").encode("utf-8"))
            context.tabbed = False
            return

        common = _common_prefix(matches)
        if len(common) > len(prefix):
            context.insert(common[len(prefix):].encode("utf-8"))
            context.tabbed = False
            return

        if context.tabbed:
            _echo("\r\n" + "  ".join(matches) + "\r\n")
            context.tabbed = False
        else:
            context.tabbed = True

    return complete


@click.command()
@click.option("--prompt", default=None, help="Left prompt text")
@click.option("--right-prompt", default=None, help="Right prompt text")
@click.option(
    "--theme",
    type=click.Choice(sorted(THEMES)),
    default=None,
    help="Color theme (defaults to $RLINE_THEME)",
)
@click.option(
    "--language",
    type=click.Choice(language_names()),
    default=None,
    help="Highlighting rules",
)
@click.option(
    "-c",
    "--command",
    "commands",
    multiple=True,
    help="Known command name to highlight and complete (repeatable)",
)
@click.option("--once", is_flag=True, help="Read a single line and exit")
@click.option("--log-file", envvar=LOG_FILE_ENV, default=None, help="Write debug logs here")
@click.option(
    "--log-level",
    type=click.Choice(_LOG_LEVELS),
    default="warning",
    help="Logging level for --log-file",
)
def main(prompt, right_prompt, theme, language, commands, once, log_file, log_level):
    """Read lines with syntax highlighting and echo them back."""
    _setup_logging(log_file, log_level)
    logger = logging.getLogger(__name__)

    config = load_config()
    if prompt is not None:
        config.prompt = prompt
        config.prompt_width = _display_width(prompt)
    if right_prompt is not None:
        config.prompt_right = right_prompt
        config.prompt_right_width = _display_width(right_prompt)
    if theme is not None:
        config.theme = theme
    if language is not None:
        config.language = language
    if commands:
        config.shell_commands = [*config.shell_commands, *commands]

    keywords = get_language(config.language).keywords
    history = InMemoryHistory()
    editor = LineEditor(
        config,
        history=history,
        tab_complete=make_completer([*keywords, *config.shell_commands]),
    )

    while True:
        result = editor.read_line()
        if not result.committed:
            logger.info("session aborted")
            break
        click.echo(result.text)
        history.append(result.data)
        if once or result.text == config.exit_token:
            break


if __name__ == "__main__":
    main()

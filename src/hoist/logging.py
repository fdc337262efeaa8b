# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Console output for hoist commands.

Messages carry a :class:`MessageLevel` that decides their prefix glyph and
colour. Consoles are shared per ``(color, emoji, tty)`` combination, so worker
threads reporting phase transitions write through the same Rich console (and
its internal lock) as the main thread.
"""

from __future__ import annotations

import sys
from enum import Enum
from functools import cache
from typing import Literal

from rich.console import Console
from rich.rule import Rule
from rich.text import Text

ColorSystem = Literal["auto", "standard", "256", "truecolor", "windows"]


class MessageLevel(Enum):
    """Severity of a user-facing message with its glyph and Rich style."""

    INFO = ("ℹ️ ", "cyan")
    OK = ("✅ ", "green")
    WARN = ("⚠️ ", "yellow")
    FAIL = ("❌ ", "red")

    def __init__(self, glyph: str, style: str) -> None:
        self.glyph = glyph
        self.style = style


def stdout_is_terminal() -> bool:
    try:
        return sys.stdout.isatty()
    except (AttributeError, ValueError):
        return False


@cache
def _console_for(color: bool, emoji: bool, tty: bool) -> Console:
    color_system: ColorSystem | None = "auto" if color and tty else None
    return Console(
        color_system=color_system,
        force_terminal=tty,
        no_color=not (color and tty),
        emoji=emoji,
        soft_wrap=True,
    )


def get_console(*, color: bool, emoji: bool) -> Console:
    """Return the shared console for the requested colour and emoji settings."""

    return _console_for(color, emoji, stdout_is_terminal())


def emit(
    level: MessageLevel,
    msg: str,
    *,
    use_emoji: bool,
    use_color: bool | None = None,
) -> None:
    """Print ``msg`` prefixed and styled according to ``level``.

    Args:
        level: Message severity.
        msg: Text to print; Rich markup is not interpreted.
        use_emoji: Prefix the level glyph.
        use_color: Force colour on or off; defaults to TTY detection.
    """

    color = stdout_is_terminal() if use_color is None else use_color
    text = Text(f"{level.glyph if use_emoji else ''}{msg}")
    if color:
        text.stylize(level.style)
    get_console(color=color, emoji=use_emoji).print(text)


def section(title: str, *, use_color: bool) -> None:
    console = get_console(color=use_color, emoji=False)
    if use_color:
        console.print()
        console.print(Rule(title))
    else:
        console.print(Text(f"\n--- {title} ---"))


def info(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    emit(MessageLevel.INFO, msg, use_emoji=use_emoji, use_color=use_color)


def ok(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    emit(MessageLevel.OK, msg, use_emoji=use_emoji, use_color=use_color)


def warn(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    emit(MessageLevel.WARN, msg, use_emoji=use_emoji, use_color=use_color)


def fail(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    emit(MessageLevel.FAIL, msg, use_emoji=use_emoji, use_color=use_color)


__all__ = [
    "MessageLevel",
    "emit",
    "fail",
    "get_console",
    "info",
    "ok",
    "section",
    "stdout_is_terminal",
    "warn",
]

"""Formatting helpers for status-tree rows."""

from __future__ import annotations

from typing import Protocol

from ..ui_theme import DEFAULT_THEME, UITheme
from .types import Entry, State

STATE_COLUMN_WIDTH = 14


class Renderer(Protocol):
    """Presentation hook: turns one entry into a displayable row."""

    def render(self, entry: Entry) -> str: ...


def state_label(state: State) -> str:
    return "" if state is State.NONE else state.value


def format_entry(entry: Entry, theme: UITheme | None = None) -> str:
    """Render one row as ANSI-styled text: mark flag, state column, path."""
    active_theme = theme or DEFAULT_THEME
    reset = active_theme.reset
    flag = f"{active_theme.mark}*{reset}" if entry.marked else " "
    if entry.is_header:
        name = "./" if entry.path == "." else entry.path.rstrip("/") + "/"
        return f"{flag} {' ' * STATE_COLUMN_WIDTH} {active_theme.header}{name}{reset}"

    label = state_label(entry.state).ljust(STATE_COLUMN_WIDTH)
    state_color = active_theme.state_color(entry.state)
    return f"{flag} {state_color}{label}{reset} {active_theme.path}{entry.path}{reset}"


class ThemedRowRenderer:
    """``Renderer`` backed by ``format_entry`` and a fixed theme."""

    def __init__(self, theme: UITheme | None = None) -> None:
        self.theme = theme or DEFAULT_THEME

    def render(self, entry: Entry) -> str:
        return format_entry(entry, self.theme)


__all__ = ["Renderer", "STATE_COLUMN_WIDTH", "state_label", "format_entry", "ThemedRowRenderer"]

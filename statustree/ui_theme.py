"""UI theme definitions and selection helpers.

Themes are ANSI palettes for status-tree rows: header, mark flag, and one
color per version-control state. Diff coloring uses a separate pygments style.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class UITheme:
    """Semantic ANSI palette used by row renderers."""

    name: str
    reset: str
    header: str
    mark: str
    path: str
    state_up_to_date: str
    state_edited: str
    state_added: str
    state_removed: str
    state_missing: str
    state_conflict: str
    state_ignored: str
    state_unregistered: str
    state_unknown: str
    state_none: str

    def state_color(self, state) -> str:
        """Color for a ``State`` member, looked up by its name."""
        return getattr(self, "state_" + state.name.lower())


DEFAULT_THEME = UITheme(
    name="default",
    reset="\033[0m",
    header="\033[1;34m",
    mark="\033[1;38;5;214m",
    path="\033[38;5;252m",
    state_up_to_date="\033[2;38;5;250m",
    state_edited="\033[38;5;214m",
    state_added="\033[38;5;42m",
    state_removed="\033[38;5;203m",
    state_missing="\033[38;5;203m",
    state_conflict="\033[1;38;5;196m",
    state_ignored="\033[2;38;5;244m",
    state_unregistered="\033[38;5;110m",
    state_unknown="\033[38;5;250m",
    state_none="\033[2m",
)

OCEAN_THEME = UITheme(
    name="ocean",
    reset="\033[0m",
    header="\033[1;38;5;45m",
    mark="\033[1;38;5;229m",
    path="\033[38;5;153m",
    state_up_to_date="\033[2;38;5;110m",
    state_edited="\033[38;5;215m",
    state_added="\033[38;5;84m",
    state_removed="\033[38;5;210m",
    state_missing="\033[38;5;210m",
    state_conflict="\033[1;38;5;197m",
    state_ignored="\033[2;38;5;67m",
    state_unregistered="\033[38;5;117m",
    state_unknown="\033[38;5;153m",
    state_none="\033[2;38;5;24m",
)

PLAIN_THEME = UITheme(
    name="plain",
    reset="",
    header="",
    mark="",
    path="",
    state_up_to_date="",
    state_edited="",
    state_added="",
    state_removed="",
    state_missing="",
    state_conflict="",
    state_ignored="",
    state_unregistered="",
    state_unknown="",
    state_none="",
)

_THEMES: dict[str, UITheme] = {
    DEFAULT_THEME.name: DEFAULT_THEME,
    OCEAN_THEME.name: OCEAN_THEME,
}


def available_theme_names() -> tuple[str, ...]:
    """Return selectable non-plain theme names."""
    return tuple(sorted(_THEMES.keys()))


def normalize_theme_name(name: str | None) -> str:
    """Return a valid theme name, falling back to default."""
    if not name:
        return DEFAULT_THEME.name
    candidate = str(name).strip().lower()
    if candidate in _THEMES:
        return candidate
    return DEFAULT_THEME.name


def resolve_theme(name: str | None, *, no_color: bool = False) -> UITheme:
    """Return concrete theme for requested name and color mode."""
    if no_color:
        return PLAIN_THEME
    return _THEMES[normalize_theme_name(name)]


__all__ = [
    "UITheme",
    "DEFAULT_THEME",
    "OCEAN_THEME",
    "PLAIN_THEME",
    "available_theme_names",
    "normalize_theme_name",
    "resolve_theme",
]

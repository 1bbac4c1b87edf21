"""One interactive status view: store handle, cursor, redraw cache, refresh.

Each view owns its own store; nothing is shared between views. Rows are
rendered lazily: mutations invalidate cursors and ``lines`` re-renders only
those rows.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from pathlib import Path

from ..tree_model import filtering, marking, navigation, selection
from ..tree_model.rendering import Renderer, ThemedRowRenderer
from ..tree_model.store import Cursor, OrderedStore
from ..tree_model.types import Entry, State
from .provider import StatusProvider
from .refresh import RefreshController, RefreshHandle, RefreshKind, RefreshOutcome


class StatusView:
    """Status tree bound to one root directory and one status provider."""

    def __init__(
        self,
        root: Path,
        provider: StatusProvider,
        *,
        renderer: Renderer | None = None,
        hide_up_to_date: bool = False,
        on_finished: Callable[[RefreshOutcome], None] | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.root = Path(root).resolve()
        self.renderer = renderer or ThemedRowRenderer()
        self.hide_up_to_date_after_refresh = hide_up_to_date
        self._on_finished = on_finished
        self._rendered: dict[Cursor, str] = {}
        self._dirty: set[Cursor] = set()
        self.store = OrderedStore(str(self.root), on_invalidate=self._dirty.add)
        self.controller = RefreshController(
            self.store,
            provider,
            self.root,
            on_finished=self._refresh_finished,
            logger=logger,
        )
        self._cursor: Cursor | None = None
        self._cursor_path: str | None = None
        self.render_calls = 0

    # -- cursor -----------------------------------------------------------

    @property
    def cursor(self) -> Cursor | None:
        """Row under point; relocated by path when its row was removed."""
        cursor = self._cursor
        if cursor is not None and cursor.alive:
            return cursor
        relocated = None
        if self._cursor_path is not None:
            relocated = navigation.find_entry(self.store, self._cursor_path)
        if relocated is None:
            relocated = self.store.first()
        self._set_cursor(relocated)
        return relocated

    def _set_cursor(self, cursor: Cursor | None) -> None:
        self._cursor = cursor
        self._cursor_path = cursor.entry.path if cursor is not None and not cursor.entry.is_header else None

    def goto(self, path: str) -> Cursor | None:
        cursor = navigation.find_entry(self.store, path) or navigation.find_directory(self.store, path)
        if cursor is not None:
            self._set_cursor(cursor)
        return cursor

    def move(self, direction: int = 1) -> Cursor | None:
        target = navigation.next_row(self.store, self.cursor, direction)
        if target is not None:
            self._set_cursor(target)
        return self.cursor

    def move_directory(self, direction: int = 1) -> Cursor | None:
        target = navigation.next_directory(self.store, self.cursor, direction)
        if target is not None:
            self._set_cursor(target)
        return self.cursor

    def current_entry(self) -> Entry:
        return selection.current_entry(self.store, self.cursor)

    # -- marking ----------------------------------------------------------

    def mark(self) -> Cursor:
        self._set_cursor(marking.mark(self.store, self.cursor, advance=True))
        return self._cursor

    def unmark(self) -> Cursor:
        self._set_cursor(marking.unmark(self.store, self.cursor, advance=True))
        return self._cursor

    def toggle(self) -> Cursor:
        self._set_cursor(marking.toggle(self.store, self.cursor, advance=True))
        return self._cursor

    def mark_all_by_state(self) -> list[Cursor]:
        return marking.mark_all_by_state(self.store, self.cursor)

    def unmark_all_by_state(self) -> list[Cursor]:
        return marking.unmark_all_by_state(self.store, self.cursor)

    def mark_all(self) -> list[Cursor]:
        return marking.mark_all(self.store)

    def unmark_all(self) -> list[Cursor]:
        return marking.unmark_all(self.store)

    def mark_unregistered(self) -> list[Cursor]:
        return marking.mark_by_state(self.store, State.UNREGISTERED)

    # -- queries ----------------------------------------------------------

    def marked_paths(self) -> list[str]:
        return selection.marked_paths(self.store)

    def operand_paths(self) -> list[str]:
        return selection.marked_or_current_paths(self.store, self.cursor)

    def fileset(self, *, only_files: bool = True) -> selection.FileSet:
        return selection.deduce_fileset(self.store, self.cursor, only_files=only_files)

    # -- refresh ----------------------------------------------------------

    def refresh(self) -> RefreshHandle:
        return self.controller.full_refresh()

    def refresh_files(self, paths: Sequence[str], default_state: State = State.UP_TO_DATE) -> RefreshHandle:
        return self.controller.partial_refresh(paths, default_state)

    def cancel(self) -> bool:
        return self.controller.cancel()

    @property
    def busy(self) -> bool:
        return self.controller.is_busy

    def hide_up_to_date(self, include_ignored: bool = False) -> list[Entry]:
        return filtering.hide_up_to_date(self.store, include_ignored)

    def hide_state(self, state: State | None = None) -> list[Entry]:
        """Hide rows in ``state``, defaulting to the state of the row under point."""
        if state is None:
            state = self.current_entry().state
        return filtering.hide_state(self.store, state)

    def _refresh_finished(self, outcome: RefreshOutcome) -> None:
        if outcome.completed and outcome.kind is RefreshKind.FULL and self.hide_up_to_date_after_refresh:
            filtering.hide_up_to_date(self.store)
        if self._on_finished is not None:
            self._on_finished(outcome)

    # -- presentation -----------------------------------------------------

    def lines(self) -> list[str]:
        """Rendered rows in store order; only invalidated rows are re-rendered."""
        out: list[str] = []
        live: dict[Cursor, str] = {}
        for cursor in self.store.cursors():
            text = self._rendered.get(cursor)
            if text is None or cursor in self._dirty:
                text = self.renderer.render(cursor.entry)
                self.render_calls += 1
            live[cursor] = text
            out.append(text)
        self._rendered = live
        self._dirty.clear()
        return out


__all__ = ["StatusView"]

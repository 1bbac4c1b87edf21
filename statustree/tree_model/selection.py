"""Operand queries for commands acting on the status tree.

Command layers (open, diff, commit) ask these helpers which files to act on:
the marked rows when there are any, otherwise the row under the cursor.
"""

from __future__ import annotations

from dataclasses import dataclass

from .paths import absolute_path, is_within
from .store import Cursor, OrderedStore
from .types import Entry, State


@dataclass(frozen=True)
class FileSet:
    """Files chosen for a command plus the states they were in."""

    paths: tuple[str, ...]
    states: tuple[State, ...]

    @property
    def uniform_state(self) -> State | None:
        """Shared state of every file, or ``None`` when states differ or the set is empty."""
        if not self.states:
            return None
        first = self.states[0]
        return first if all(state is first for state in self.states) else None


def current_entry(store: OrderedStore, cursor: Cursor | None) -> Entry:
    """Return the entry under ``cursor`` or raise ``NoEntryAtCursorError``."""
    return store.require(cursor).entry


def marked_paths(store: OrderedStore) -> list[str]:
    return [entry.path for entry in store if entry.marked]


def marked_or_current_paths(store: OrderedStore, cursor: Cursor | None) -> list[str]:
    marked = marked_paths(store)
    if marked:
        return marked
    return [current_entry(store, cursor).path]


def _child_files(store: OrderedStore, header: Cursor) -> list[Entry]:
    out: list[Entry] = []
    node = store.next(header)
    while node is not None and is_within(node.directory, header.directory):
        if not node.entry.is_header:
            out.append(node.entry)
        node = store.next(node)
    return out


def child_file_paths(store: OrderedStore, cursor: Cursor | None) -> list[str]:
    """Files below a header cursor, or the file itself for a file cursor."""
    cursor = store.require(cursor)
    if not cursor.entry.is_header:
        return [cursor.entry.path]
    return [entry.path for entry in _child_files(store, cursor)]


def marked_files_and_states(store: OrderedStore) -> list[tuple[str, State]]:
    """Marked files, with each marked header expanded to the files below it."""
    out: list[tuple[str, State]] = []
    for cursor in store.cursors():
        entry = cursor.entry
        if not entry.marked:
            continue
        if entry.is_header:
            out.extend((child.path, child.state) for child in _child_files(store, cursor))
        else:
            out.append((entry.path, entry.state))
    return out


def deduce_fileset(
    store: OrderedStore,
    cursor: Cursor | None,
    *,
    only_files: bool = False,
    absolute: bool = False,
) -> FileSet:
    """Resolve the operand fileset for a command.

    ``only_files`` expands marked headers (or a header cursor) into their files,
    as commands that operate per file state need.
    """
    pairs: list[tuple[str, State]]
    has_marks = any(entry.marked for entry in store)
    if only_files:
        if has_marks:
            pairs = marked_files_and_states(store)
        else:
            cursor = store.require(cursor)
            if cursor.entry.is_header:
                pairs = [(entry.path, entry.state) for entry in _child_files(store, cursor)]
            else:
                pairs = [(cursor.entry.path, cursor.entry.state)]
    elif has_marks:
        pairs = [(entry.path, entry.state) for entry in store if entry.marked]
    else:
        entry = current_entry(store, cursor)
        pairs = [(entry.path, entry.state)]

    if absolute and store.root_key is not None:
        root_key = store.root_key
        pairs = [(absolute_path(path, root_key), state) for path, state in pairs]
    return FileSet(
        paths=tuple(path for path, _state in pairs),
        states=tuple(state for _path, state in pairs),
    )


__all__ = [
    "FileSet",
    "current_entry",
    "marked_paths",
    "marked_or_current_paths",
    "child_file_paths",
    "marked_files_and_states",
    "deduce_fileset",
]

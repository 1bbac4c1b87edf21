"""Cursor navigation helpers over an ``OrderedStore``."""

from __future__ import annotations

from collections.abc import Callable

from .paths import directory_of, relative_path
from .store import Cursor, OrderedStore
from .types import Entry


def _step(
    store: OrderedStore,
    cursor: Cursor | None,
    direction: int,
    accept: Callable[[Entry], bool],
) -> Cursor | None:
    if cursor is None or direction == 0:
        return None
    node = store.next(cursor) if direction > 0 else store.prev(cursor)
    while node is not None:
        if accept(node.entry):
            return node
        node = store.next(node) if direction > 0 else store.prev(node)
    return None


def next_row(store: OrderedStore, cursor: Cursor | None, direction: int = 1) -> Cursor | None:
    """Return the adjacent row in ``direction`` or ``None`` past either end."""
    return _step(store, cursor, direction, lambda _entry: True)


def next_file(store: OrderedStore, cursor: Cursor | None, direction: int = 1) -> Cursor | None:
    return _step(store, cursor, direction, lambda entry: not entry.is_header)


def next_directory(store: OrderedStore, cursor: Cursor | None, direction: int = 1) -> Cursor | None:
    return _step(store, cursor, direction, lambda entry: entry.is_header)


def next_in_state(store: OrderedStore, cursor: Cursor | None, direction: int = 1) -> Cursor | None:
    """Return the next file sharing the state of the row under ``cursor``."""
    if cursor is None:
        return None
    state = cursor.entry.state
    return _step(store, cursor, direction, lambda entry: not entry.is_header and entry.state is state)


def find_entry(store: OrderedStore, path: str) -> Cursor | None:
    """Locate the file row for ``path`` (relative or absolute) by walking its directory group."""
    if store.root_key is None:
        return None
    root_key = store.root_key
    target = relative_path(path, root_key)
    directory = directory_of(target, root_key)
    for cursor in store.cursors():
        if cursor.directory < directory:
            continue
        if cursor.directory > directory:
            return None
        entry = cursor.entry
        if entry.is_header:
            continue
        if entry.path == target:
            return cursor
        if entry.path > target:
            return None
    return None


def find_directory(store: OrderedStore, directory_path: str) -> Cursor | None:
    """Locate the header row for a directory given relative to the root."""
    if store.root_key is None:
        return None
    root_key = store.root_key
    relative = relative_path(directory_path.rstrip("/") or ".", root_key)
    for cursor in store.cursors():
        if cursor.entry.is_header and cursor.entry.path == relative:
            return cursor
    return None


__all__ = [
    "next_row",
    "next_file",
    "next_directory",
    "next_in_state",
    "find_entry",
    "find_directory",
]

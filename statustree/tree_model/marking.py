"""Mark/unmark operations guarded by ancestor/descendant exclusivity.

A file may not be marked while a header of one of its directories is marked,
and a header may not be marked while anything below it is marked. A single
mark walks back to the head; bulk and region marks validate in one forward
pass with a stack of enclosing marked headers. Both rely on directory subtrees
being contiguous.
Every failing operation leaves all mark bits exactly as they were.
"""

from __future__ import annotations

from collections.abc import Callable

from ..errors import ChildMarkedError, DirectoryAlreadyMarkedError, ParentMarkedError
from .paths import is_within
from .store import Cursor, OrderedStore
from .types import Entry, State


def marked_parent(store: OrderedStore, cursor: Cursor) -> Entry | None:
    """Return a marked header whose directory contains ``cursor``'s row."""
    node = store.prev(cursor)
    while node is not None:
        entry = node.entry
        if entry.is_header and entry.marked and is_within(cursor.directory, node.directory):
            return entry
        node = store.prev(node)
    return None


def marked_child(store: OrderedStore, cursor: Cursor) -> Entry | None:
    """Return a marked row inside the subtree of header ``cursor``."""
    if not cursor.entry.is_header:
        return None
    node = store.next(cursor)
    while node is not None and is_within(node.directory, cursor.directory):
        if node.entry.marked:
            return node.entry
        node = store.next(node)
    return None


def check_markable(store: OrderedStore, cursor: Cursor) -> None:
    """Raise ``ChildMarkedError``/``ParentMarkedError`` when marking would conflict."""
    child = marked_child(store, cursor)
    if child is not None:
        raise ChildMarkedError(child.path)
    parent = marked_parent(store, cursor)
    if parent is not None:
        raise ParentMarkedError(parent.path)


def _set_marked(store: OrderedStore, cursor: Cursor, marked: bool) -> bool:
    if cursor.entry.marked == marked:
        return False
    cursor.entry.marked = marked
    store.invalidate(cursor)
    return True


def _advance(store: OrderedStore, cursor: Cursor, advance: bool) -> Cursor:
    if not advance:
        return cursor
    following = store.next(cursor)
    return following if following is not None else cursor


def mark(store: OrderedStore, cursor: Cursor | None, *, advance: bool = False) -> Cursor:
    """Mark one row and return the cursor to continue from.

    With ``advance`` (single interactive use) the returned cursor is the next
    row, or ``cursor`` itself at the end of the store.
    """
    cursor = store.require(cursor)
    check_markable(store, cursor)
    _set_marked(store, cursor, True)
    return _advance(store, cursor, advance)


def unmark(store: OrderedStore, cursor: Cursor | None, *, advance: bool = False) -> Cursor:
    cursor = store.require(cursor)
    _set_marked(store, cursor, False)
    return _advance(store, cursor, advance)


def toggle(store: OrderedStore, cursor: Cursor | None, *, advance: bool = False) -> Cursor:
    cursor = store.require(cursor)
    if cursor.entry.marked:
        return unmark(store, cursor, advance=advance)
    return mark(store, cursor, advance=advance)


def _subtree_files(store: OrderedStore, header: Cursor) -> list[Cursor]:
    out: list[Cursor] = []
    node = store.next(header)
    while node is not None and is_within(node.directory, header.directory):
        if not node.entry.is_header:
            out.append(node)
        node = store.next(node)
    return out


def _files_in_state(store: OrderedStore, state: State) -> list[Cursor]:
    return store.collect_cursors(lambda entry: not entry.is_header and entry.state is state)


def _pop_outside(stack: list[tuple[str, str]], directory: str) -> None:
    while stack and not is_within(directory, stack[-1][0]):
        stack.pop()


def _mark_validated(store: OrderedStore, targets: list[Cursor]) -> list[Cursor]:
    """Mark ``targets`` (files only) after checking all of them first.

    One forward walk keeps the marked headers enclosing the current row on a
    stack, so validation is linear in the store size.
    """
    wanted = set(targets)
    pending: list[Cursor] = []
    stack: list[tuple[str, str]] = []
    for cursor in store.cursors():
        _pop_outside(stack, cursor.directory)
        entry = cursor.entry
        if entry.is_header:
            if entry.marked:
                stack.append((cursor.directory, entry.path))
            continue
        if cursor in wanted and not entry.marked:
            if stack:
                raise ParentMarkedError(stack[-1][1])
            pending.append(cursor)
    for cursor in pending:
        _set_marked(store, cursor, True)
    return pending


def mark_by_state(store: OrderedStore, state: State) -> list[Cursor]:
    """Mark every unmarked file in ``state``; headers are never selected."""
    return _mark_validated(store, _files_in_state(store, state))


def mark_all_by_state(store: OrderedStore, anchor: Cursor | None) -> list[Cursor]:
    """Mark the files related to ``anchor`` and return the newly marked rows.

    A header anchor selects every file in its subtree; a file anchor selects
    every file in the store sharing its state.
    """
    anchor = store.require(anchor)
    if anchor.entry.is_header:
        return _mark_validated(store, _subtree_files(store, anchor))
    return mark_by_state(store, anchor.entry.state)


def mark_all(store: OrderedStore) -> list[Cursor]:
    """Mark every unmarked file, failing up front if any header is marked."""
    for cursor in store.cursors():
        if cursor.entry.is_header and cursor.entry.marked:
            raise DirectoryAlreadyMarkedError(cursor.entry.path)
    changed: list[Cursor] = []
    for cursor in store.cursors():
        if not cursor.entry.is_header and _set_marked(store, cursor, True):
            changed.append(cursor)
    return changed


def unmark_all_by_state(store: OrderedStore, anchor: Cursor | None) -> list[Cursor]:
    anchor = store.require(anchor)
    if anchor.entry.is_header:
        targets = _subtree_files(store, anchor)
    else:
        targets = _files_in_state(store, anchor.entry.state)
    return [cursor for cursor in targets if _set_marked(store, cursor, False)]


def unmark_all(store: OrderedStore) -> list[Cursor]:
    return [cursor for cursor in store.cursors() if _set_marked(store, cursor, False)]


def _span(store: OrderedStore, start: Cursor | None, end: Cursor | None) -> list[Cursor]:
    start = store.require(start)
    end = store.require(end)
    if store.position_of(end) < store.position_of(start):
        start, end = end, start
    out: list[Cursor] = []
    node: Cursor | None = start
    while node is not None:
        out.append(node)
        if node is end:
            break
        node = store.next(node)
    return out


def _enclosing_marked_headers(store: OrderedStore, stop: Cursor) -> list[tuple[str, str]]:
    """Marked headers still open when the forward walk reaches ``stop``."""
    stack: list[tuple[str, str]] = []
    node = store.first()
    while node is not None and node is not stop:
        _pop_outside(stack, node.directory)
        if node.entry.is_header and node.entry.marked:
            stack.append((node.directory, node.entry.path))
        node = store.next(node)
    return stack


def _apply_region(
    store: OrderedStore,
    start: Cursor | None,
    end: Cursor | None,
    want_marked: Callable[[Entry], bool],
) -> list[Cursor]:
    """Set each spanned row to ``want_marked(entry)``, as if done row by row.

    The whole span is planned first, so a conflict raises before any mark bit
    changes.
    """
    span = _span(store, start, end)
    stack = _enclosing_marked_headers(store, span[0])
    changes: list[tuple[Cursor, bool]] = []
    for cursor in span:
        _pop_outside(stack, cursor.directory)
        entry = cursor.entry
        target = want_marked(entry)
        if target and not entry.marked:
            child = marked_child(store, cursor)
            if child is not None:
                raise ChildMarkedError(child.path)
            if stack:
                raise ParentMarkedError(stack[-1][1])
        if target and entry.is_header:
            stack.append((cursor.directory, entry.path))
        if target != entry.marked:
            changes.append((cursor, target))
    for cursor, target in changes:
        _set_marked(store, cursor, target)
    return [cursor for cursor, _target in changes]


def mark_region(store: OrderedStore, start: Cursor | None, end: Cursor | None) -> list[Cursor]:
    return _apply_region(store, start, end, lambda _entry: True)


def unmark_region(store: OrderedStore, start: Cursor | None, end: Cursor | None) -> list[Cursor]:
    return _apply_region(store, start, end, lambda _entry: False)


def toggle_region(store: OrderedStore, start: Cursor | None, end: Cursor | None) -> list[Cursor]:
    return _apply_region(store, start, end, lambda entry: not entry.marked)


__all__ = [
    "marked_parent",
    "marked_child",
    "check_markable",
    "mark",
    "unmark",
    "toggle",
    "mark_by_state",
    "mark_all_by_state",
    "mark_all",
    "unmark_all_by_state",
    "unmark_all",
    "mark_region",
    "unmark_region",
    "toggle_region",
]

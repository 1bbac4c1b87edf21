"""Cursor-addressable ordered sequence of status-tree entries.

Entries live in a doubly linked list; a cursor is the list node itself, so it
stays valid while rows are inserted or removed elsewhere. The store never
reorders: callers insert at positions that already respect the sort order.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator

from ..errors import NoEntryAtCursorError
from .paths import entry_directory, normalize_root
from .types import Entry, State


class Cursor:
    """Stable reference to one row of an ``OrderedStore``."""

    __slots__ = ("entry", "directory", "_prev", "_next", "_store")

    def __init__(self, entry: Entry, directory: str, store: OrderedStore) -> None:
        self.entry = entry
        self.directory = directory
        self._prev: Cursor | None = None
        self._next: Cursor | None = None
        self._store: OrderedStore | None = store

    @property
    def alive(self) -> bool:
        return self._store is not None

    def __repr__(self) -> str:
        status = "" if self.alive else " removed"
        return f"<Cursor {self.entry.kind.value} {self.entry.path!r}{status}>"


class OrderedStore:
    """Sorted, cursor-addressable collection of ``Entry`` rows.

    ``on_invalidate`` is called with the cursor of every row whose displayed
    state changed; traversal never triggers it.
    """

    def __init__(
        self,
        root_dir: str | None = None,
        *,
        on_invalidate: Callable[[Cursor], None] | None = None,
    ) -> None:
        self.root_key: str | None = normalize_root(root_dir) if root_dir is not None else None
        self.on_invalidate = on_invalidate
        self._head: Cursor | None = None
        self._tail: Cursor | None = None
        self._size = 0

    def bind_root(self, root_dir: str) -> str:
        """Set the root directory on first use and return the root key."""
        if self.root_key is None:
            self.root_key = normalize_root(root_dir)
        return self.root_key

    def __len__(self) -> int:
        return self._size

    def __bool__(self) -> bool:
        return self._size > 0

    def __iter__(self) -> Iterator[Entry]:
        for cursor in self.cursors():
            yield cursor.entry

    def cursors(self) -> Iterator[Cursor]:
        """Iterate cursors front to back; the current row may be removed while iterating."""
        node = self._head
        while node is not None:
            following = node._next
            yield node
            node = following

    def entries(self) -> list[Entry]:
        return list(self)

    def first(self) -> Cursor | None:
        return self._head

    def last(self) -> Cursor | None:
        return self._tail

    def cursor_at(self, position: int) -> Cursor | None:
        """Return the cursor at ``position``; negative positions count from the end."""
        if position < 0:
            position += self._size
        if position < 0 or position >= self._size:
            return None
        if position <= self._size // 2:
            node = self._head
            for _ in range(position):
                assert node is not None
                node = node._next
            return node
        node = self._tail
        for _ in range(self._size - 1 - position):
            assert node is not None
            node = node._prev
        return node

    def position_of(self, cursor: Cursor) -> int:
        self.require(cursor)
        position = 0
        node = self._head
        while node is not None and node is not cursor:
            node = node._next
            position += 1
        return position

    def next(self, cursor: Cursor) -> Cursor | None:
        self.require(cursor)
        return cursor._next

    def prev(self, cursor: Cursor) -> Cursor | None:
        self.require(cursor)
        return cursor._prev

    def require(self, cursor: Cursor | None) -> Cursor:
        if cursor is None or cursor._store is not self:
            detail = None if cursor is None else cursor.entry.path
            raise NoEntryAtCursorError(detail)
        return cursor

    def _new_cursor(self, entry: Entry) -> Cursor:
        root_key = self.root_key
        if root_key is None:
            root_key = self.bind_root(".")
        return Cursor(entry, entry_directory(entry, root_key), self)

    def _link(self, node: Cursor, prev_node: Cursor | None, next_node: Cursor | None) -> None:
        node._prev = prev_node
        node._next = next_node
        if prev_node is None:
            self._head = node
        else:
            prev_node._next = node
        if next_node is None:
            self._tail = node
        else:
            next_node._prev = node
        self._size += 1

    def insert_before(self, cursor: Cursor, entry: Entry) -> Cursor:
        self.require(cursor)
        node = self._new_cursor(entry)
        self._link(node, cursor._prev, cursor)
        self.invalidate(node)
        return node

    def insert_after(self, cursor: Cursor, entry: Entry) -> Cursor:
        self.require(cursor)
        node = self._new_cursor(entry)
        self._link(node, cursor, cursor._next)
        self.invalidate(node)
        return node

    def append(self, entry: Entry) -> Cursor:
        node = self._new_cursor(entry)
        self._link(node, self._tail, None)
        self.invalidate(node)
        return node

    def update(self, cursor: Cursor, state: State, extra: object) -> None:
        self.require(cursor)
        cursor.entry.state = state
        cursor.entry.extra = extra
        self.invalidate(cursor)

    def remove(self, cursor: Cursor) -> None:
        self.require(cursor)
        prev_node = cursor._prev
        next_node = cursor._next
        if prev_node is None:
            self._head = next_node
        else:
            prev_node._next = next_node
        if next_node is None:
            self._tail = prev_node
        else:
            next_node._prev = prev_node
        cursor._prev = None
        cursor._next = None
        cursor._store = None
        self._size -= 1

    def invalidate(self, cursor: Cursor) -> None:
        """Report ``cursor`` as needing a redraw."""
        if self.on_invalidate is not None:
            self.on_invalidate(cursor)

    def map(self, fn: Callable[[Entry], object]) -> None:
        """Apply ``fn`` to every entry, invalidating rows where it returns true."""
        for cursor in self.cursors():
            if fn(cursor.entry):
                self.invalidate(cursor)

    def filter(self, predicate: Callable[[Entry], bool]) -> list[Entry]:
        """Remove entries failing ``predicate`` and return them in store order."""
        removed: list[Entry] = []
        for cursor in self.cursors():
            if not predicate(cursor.entry):
                removed.append(cursor.entry)
                self.remove(cursor)
        return removed

    def collect(self, predicate: Callable[[Entry], bool]) -> list[Entry]:
        return [entry for entry in self if predicate(entry)]

    def collect_cursors(self, predicate: Callable[[Entry], bool]) -> list[Cursor]:
        return [cursor for cursor in self.cursors() if predicate(cursor.entry)]

    def clear(self) -> None:
        for cursor in self.cursors():
            self.remove(cursor)


__all__ = ["Cursor", "OrderedStore"]

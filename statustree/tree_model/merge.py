"""Streaming merge of status batches into an ``OrderedStore``.

Incoming ``(path, state, extra)`` tuples are sorted the same way the store is
ordered, then folded in with a single forward walk. Directory headers are
synthesized whenever a new row starts a directory group.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from .paths import directory_of, header_path, relative_path
from .store import Cursor, OrderedStore
from .types import Entry, MergeResult, State, StatusTuple


@dataclass(frozen=True)
class _Incoming:
    directory: str
    path: str
    state: State | None
    extra: object


def _normalize_incoming(incoming: Iterable[StatusTuple], root_key: str) -> list[_Incoming]:
    """Normalize and sort a batch; a path reported twice keeps its last report."""
    by_path: dict[str, _Incoming] = {}
    for raw_path, raw_state, extra in incoming:
        path = relative_path(str(raw_path), root_key)
        if path == ".":
            continue
        state = None if raw_state is None else State.coerce(raw_state)
        by_path[path] = _Incoming(directory_of(path, root_key), path, state, extra)
    return sorted(by_path.values(), key=lambda item: (item.directory, item.path))


def _apply_update(store: OrderedStore, node: Cursor, item: _Incoming) -> None:
    """Update ``node`` in place; a vanished file stays pending so the sweep drops it."""
    if item.state is None:
        store.update(node, State.NONE, item.extra)
        return
    node.entry.pending_confirmation = False
    store.update(node, item.state, item.extra)


def _header_for(directory: str, root_key: str) -> Entry:
    return Entry.header(header_path(directory, root_key), directory)


def merge(
    store: OrderedStore,
    incoming: Iterable[StatusTuple],
    root_dir: str,
    suppress_append: bool = False,
) -> MergeResult:
    """Fold one batch of status tuples into ``store``.

    With ``suppress_append`` no rows are created: incoming tuples without a
    matching row are discarded.
    """
    root_key = store.bind_root(root_dir)
    items = _normalize_incoming(incoming, root_key)
    updated = inserted = headers_inserted = discarded = 0

    node = store.first()
    if node is None:
        store.append(_header_for(root_key, root_key))
        headers_inserted += 1
        node = store.first()

    index = 0
    while index < len(items) and node is not None:
        item = items[index]
        if node.directory < item.directory:
            node = store.next(node)
            continue
        if node.directory == item.directory:
            if node.entry.is_header or node.entry.path < item.path:
                node = store.next(node)
                continue
            if node.entry.path == item.path:
                _apply_update(store, node, item)
                updated += 1
                index += 1
                node = store.next(node)
                continue

        # ``node`` sorts after the incoming row.
        index += 1
        if suppress_append or item.state is None:
            discarded += 1
            continue
        prev_node = store.prev(node)
        prev_directory = prev_node.directory if prev_node is not None else None
        if prev_directory != item.directory:
            store.insert_before(node, _header_for(item.directory, root_key))
            headers_inserted += 1
        store.insert_before(node, Entry.file(item.path, item.state, item.extra))
        inserted += 1

    remaining = items[index:]
    if suppress_append:
        discarded += len(remaining)
        remaining = []

    if remaining:
        tail = store.last()
        last_directory = tail.directory if tail is not None else None
        for item in remaining:
            if item.state is None:
                discarded += 1
                continue
            if item.directory != last_directory:
                last_directory = item.directory
                store.append(_header_for(item.directory, root_key))
                headers_inserted += 1
            store.append(Entry.file(item.path, item.state, item.extra))
            inserted += 1

    return MergeResult(
        updated=updated,
        inserted=inserted,
        headers_inserted=headers_inserted,
        discarded=discarded,
    )


def is_sorted(store: OrderedStore) -> bool:
    """Check the sort invariant: directory groups ascend, header first, paths ascend."""
    previous: tuple[str, int, str] | None = None
    seen_headers: set[str] = set()
    for cursor in store.cursors():
        entry = cursor.entry
        key = (cursor.directory, 0 if entry.is_header else 1, "" if entry.is_header else entry.path)
        if previous is not None and key <= previous:
            return False
        if entry.is_header:
            if cursor.directory in seen_headers:
                return False
            seen_headers.add(cursor.directory)
        previous = key
    return True


__all__ = ["merge", "is_sorted"]

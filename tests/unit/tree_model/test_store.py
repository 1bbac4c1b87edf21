"""Tests for ``OrderedStore`` cursor addressing and bulk operations."""

from __future__ import annotations

import unittest

from statustree.errors import NoEntryAtCursorError
from statustree.tree_model.store import OrderedStore
from statustree.tree_model.types import Entry, State

ROOT = "/work/repo"


def _paths(store: OrderedStore) -> list[str]:
    return [entry.path for entry in store]


class OrderedStoreTests(unittest.TestCase):
    def setUp(self) -> None:
        self.invalidated: list[str] = []
        self.store = OrderedStore(ROOT, on_invalidate=lambda cursor: self.invalidated.append(cursor.entry.path))
        self.root = self.store.append(Entry.header(".", "/work/repo/"))
        self.b = self.store.append(Entry.file("b.txt", State.EDITED))

    def test_insert_before_and_after_keep_cursor_valid(self) -> None:
        a = self.store.insert_before(self.b, Entry.file("a.txt", State.ADDED))
        c = self.store.insert_after(self.b, Entry.file("c.txt", State.EDITED))

        self.assertEqual(_paths(self.store), [".", "a.txt", "b.txt", "c.txt"])
        self.assertIs(self.store.next(a), self.b)
        self.assertIs(self.store.prev(c), self.b)
        self.assertIs(self.store.last(), c)
        self.assertEqual(self.store.position_of(self.b), 2)

    def test_cursor_at_supports_negative_positions(self) -> None:
        self.store.append(Entry.file("c.txt", State.EDITED))

        self.assertIs(self.store.cursor_at(0), self.root)
        self.assertEqual(self.store.cursor_at(-1).entry.path, "c.txt")
        self.assertIs(self.store.cursor_at(1), self.b)
        self.assertIsNone(self.store.cursor_at(3))
        self.assertIsNone(self.store.cursor_at(-4))

    def test_cursor_directory_is_computed_from_root(self) -> None:
        nested = self.store.append(Entry.file("src/main.txt", State.EDITED))

        self.assertEqual(self.root.directory, "/work/repo/")
        self.assertEqual(self.b.directory, "/work/repo/")
        self.assertEqual(nested.directory, "/work/repo/src/")

    def test_update_changes_state_and_invalidates(self) -> None:
        self.invalidated.clear()
        self.store.update(self.b, State.CONFLICT, {"xy": "UU"})

        self.assertEqual(self.b.entry.state, State.CONFLICT)
        self.assertEqual(self.b.entry.extra, {"xy": "UU"})
        self.assertEqual(self.invalidated, ["b.txt"])

    def test_removed_cursor_is_rejected(self) -> None:
        self.store.remove(self.b)

        self.assertFalse(self.b.alive)
        self.assertEqual(len(self.store), 1)
        self.assertIs(self.store.last(), self.root)
        with self.assertRaises(NoEntryAtCursorError):
            self.store.next(self.b)
        with self.assertRaises(NoEntryAtCursorError):
            self.store.update(self.b, State.EDITED, None)

    def test_cursor_from_other_store_is_rejected(self) -> None:
        other = OrderedStore(ROOT)
        foreign = other.append(Entry.file("x", State.EDITED))

        with self.assertRaises(NoEntryAtCursorError):
            self.store.remove(foreign)

    def test_filter_removes_failing_entries_and_returns_them(self) -> None:
        self.store.append(Entry.file("c.txt", State.UP_TO_DATE))
        removed = self.store.filter(lambda entry: entry.state is not State.UP_TO_DATE)

        self.assertEqual([entry.path for entry in removed], ["c.txt"])
        self.assertEqual(_paths(self.store), [".", "b.txt"])

    def test_map_invalidates_only_rows_reporting_change(self) -> None:
        self.invalidated.clear()

        def flag_files(entry: Entry) -> bool:
            entry.pending_confirmation = True
            return not entry.is_header

        self.store.map(flag_files)

        self.assertTrue(all(entry.pending_confirmation for entry in self.store))
        self.assertEqual(self.invalidated, ["b.txt"])

    def test_collect_and_traversal_do_not_invalidate(self) -> None:
        self.invalidated.clear()
        collected = self.store.collect(lambda entry: not entry.is_header)
        list(self.store.cursors())
        self.store.next(self.root)

        self.assertEqual([entry.path for entry in collected], ["b.txt"])
        self.assertEqual(self.invalidated, [])

    def test_empty_store_is_falsy(self) -> None:
        store = OrderedStore()
        self.assertFalse(store)
        self.assertIsNone(store.first())
        self.assertIsNone(store.cursor_at(0))


if __name__ == "__main__":
    unittest.main()

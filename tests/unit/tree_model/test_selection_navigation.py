"""Tests for operand queries and cursor navigation."""

from __future__ import annotations

import unittest

from statustree.errors import NoEntryAtCursorError
from statustree.tree_model import marking, navigation, selection
from statustree.tree_model.merge import merge
from statustree.tree_model.store import OrderedStore
from statustree.tree_model.types import State

ROOT = "/work/repo"


class SelectionTests(unittest.TestCase):
    def setUp(self) -> None:
        self.store = OrderedStore()
        merge(
            self.store,
            [
                ("src/main.txt", "edited", None),
                ("src/lib/util.py", "added", None),
                ("README", "edited", None),
                ("docs/guide.md", "unregistered", None),
            ],
            ROOT,
        )

    def test_current_entry_requires_cursor(self) -> None:
        self.assertEqual(selection.current_entry(self.store, self.store.cursor_at(1)).path, "README")
        with self.assertRaises(NoEntryAtCursorError):
            selection.current_entry(self.store, None)

    def test_marked_or_current_prefers_marks(self) -> None:
        readme = navigation.find_entry(self.store, "README")
        self.assertEqual(selection.marked_or_current_paths(self.store, readme), ["README"])

        marking.mark(self.store, navigation.find_entry(self.store, "docs/guide.md"))
        self.assertEqual(selection.marked_or_current_paths(self.store, readme), ["docs/guide.md"])
        self.assertEqual(selection.marked_paths(self.store), ["docs/guide.md"])

    def test_child_file_paths_of_header_covers_subtree(self) -> None:
        src = navigation.find_directory(self.store, "src")
        self.assertEqual(selection.child_file_paths(self.store, src), ["src/main.txt", "src/lib/util.py"])
        readme = navigation.find_entry(self.store, "README")
        self.assertEqual(selection.child_file_paths(self.store, readme), ["README"])

    def test_marked_files_and_states_expands_headers(self) -> None:
        marking.mark(self.store, navigation.find_directory(self.store, "src"))
        marking.mark(self.store, navigation.find_entry(self.store, "README"))

        self.assertEqual(
            selection.marked_files_and_states(self.store),
            [("README", State.EDITED), ("src/main.txt", State.EDITED), ("src/lib/util.py", State.ADDED)],
        )

    def test_deduce_fileset_for_marked_headers(self) -> None:
        marking.mark(self.store, navigation.find_directory(self.store, "src"))

        plain = selection.deduce_fileset(self.store, None)
        self.assertEqual(plain.paths, ("src",))

        files = selection.deduce_fileset(self.store, None, only_files=True, absolute=True)
        self.assertEqual(files.paths, ("/work/repo/src/main.txt", "/work/repo/src/lib/util.py"))
        self.assertIsNone(files.uniform_state)

    def test_deduce_fileset_for_cursor_only(self) -> None:
        readme = navigation.find_entry(self.store, "README")
        fileset = selection.deduce_fileset(self.store, readme, only_files=True)

        self.assertEqual(fileset.paths, ("README",))
        self.assertIs(fileset.uniform_state, State.EDITED)

    def test_empty_fileset_has_no_uniform_state(self) -> None:
        self.assertIsNone(selection.FileSet((), ()).uniform_state)


class NavigationTests(unittest.TestCase):
    def setUp(self) -> None:
        self.store = OrderedStore()
        merge(
            self.store,
            [
                ("a.txt", "edited", None),
                ("b.txt", "added", None),
                ("sub/c.txt", "edited", None),
            ],
            ROOT,
        )

    def test_next_row_and_ends(self) -> None:
        first = self.store.first()
        self.assertEqual(navigation.next_row(self.store, first).entry.path, "a.txt")
        self.assertIsNone(navigation.next_row(self.store, first, -1))
        self.assertIsNone(navigation.next_row(self.store, self.store.last()))

    def test_next_file_skips_headers(self) -> None:
        b = navigation.find_entry(self.store, "b.txt")
        self.assertEqual(navigation.next_file(self.store, b).entry.path, "sub/c.txt")
        self.assertEqual(navigation.next_file(self.store, b, -1).entry.path, "a.txt")

    def test_next_directory(self) -> None:
        a = navigation.find_entry(self.store, "a.txt")
        self.assertEqual(navigation.next_directory(self.store, a).entry.path, "sub")
        self.assertEqual(navigation.next_directory(self.store, a, -1).entry.path, ".")

    def test_next_in_state(self) -> None:
        a = navigation.find_entry(self.store, "a.txt")
        self.assertEqual(navigation.next_in_state(self.store, a).entry.path, "sub/c.txt")
        self.assertIsNone(navigation.next_in_state(self.store, a, -1))

    def test_find_entry_accepts_absolute_paths(self) -> None:
        cursor = navigation.find_entry(self.store, "/work/repo/sub/c.txt")
        self.assertIsNotNone(cursor)
        self.assertEqual(cursor.entry.path, "sub/c.txt")
        self.assertIsNone(navigation.find_entry(self.store, "sub/missing.txt"))
        self.assertIsNone(navigation.find_entry(OrderedStore(), "a.txt"))

    def test_find_directory(self) -> None:
        self.assertEqual(navigation.find_directory(self.store, "sub/").entry.path, "sub")
        self.assertEqual(navigation.find_directory(self.store, ".").entry.path, ".")
        self.assertIsNone(navigation.find_directory(self.store, "nope"))


if __name__ == "__main__":
    unittest.main()

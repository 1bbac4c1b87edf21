"""Tests for state-based hiding and row formatting."""

from __future__ import annotations

import unittest

from statustree.tree_model import filtering, marking
from statustree.tree_model.merge import merge
from statustree.tree_model.navigation import find_entry
from statustree.tree_model.rendering import STATE_COLUMN_WIDTH, ThemedRowRenderer, format_entry, state_label
from statustree.tree_model.store import OrderedStore
from statustree.tree_model.types import Entry, State
from statustree.ui_theme import DEFAULT_THEME, PLAIN_THEME

ROOT = "/work/repo"


def _paths(store: OrderedStore) -> list[str]:
    return [entry.path for entry in store]


class HideStatesTests(unittest.TestCase):
    def setUp(self) -> None:
        self.store = OrderedStore()
        merge(
            self.store,
            [
                ("a.txt", "up-to-date", None),
                ("b.txt", "edited", None),
                ("sub/c.txt", "up-to-date", None),
                ("sub/d.txt", "up-to-date", None),
                ("other/e.txt", "edited", None),
            ],
            ROOT,
        )

    def test_hide_up_to_date_drops_files_and_empty_headers(self) -> None:
        removed = filtering.hide_up_to_date(self.store)

        self.assertEqual([entry.path for entry in removed], ["a.txt", "sub", "sub/c.txt", "sub/d.txt"])
        self.assertEqual(_paths(self.store), [".", "b.txt", "other", "other/e.txt"])

    def test_marked_rows_survive_hiding(self) -> None:
        marking.mark(self.store, find_entry(self.store, "sub/c.txt"))

        filtering.hide_up_to_date(self.store)

        self.assertEqual(_paths(self.store), [".", "b.txt", "other", "other/e.txt", "sub", "sub/c.txt"])

    def test_root_header_is_always_kept(self) -> None:
        filtering.hide_states(self.store, [State.UP_TO_DATE, State.EDITED])

        self.assertEqual(_paths(self.store), ["."])

    def test_header_followed_by_header_is_dropped(self) -> None:
        store = OrderedStore()
        merge(store, [("x/a.txt", "up-to-date", None), ("x/y/b.txt", "edited", None)], ROOT)

        filtering.hide_up_to_date(store)

        self.assertEqual(_paths(store), [".", "x/y", "x/y/b.txt"])

    def test_include_ignored(self) -> None:
        store = OrderedStore()
        merge(store, [("a.log", "ignored", None), ("b.txt", "up-to-date", None), ("c", "edited", None)], ROOT)

        filtering.hide_up_to_date(store)
        self.assertEqual(_paths(store), [".", "a.log", "c"])

        filtering.hide_up_to_date(store, include_ignored=True)
        self.assertEqual(_paths(store), [".", "c"])

    def test_hide_state(self) -> None:
        filtering.hide_state(self.store, State.EDITED)

        self.assertEqual(_paths(self.store), [".", "a.txt", "sub", "sub/c.txt", "sub/d.txt"])


class RenderingTests(unittest.TestCase):
    def test_plain_file_row(self) -> None:
        text = format_entry(Entry.file("src/main.txt", State.EDITED), PLAIN_THEME)

        self.assertEqual(text, "  " + "edited".ljust(STATE_COLUMN_WIDTH) + " src/main.txt")

    def test_plain_header_rows(self) -> None:
        root = format_entry(Entry.header(".", "/work/repo/"), PLAIN_THEME)
        nested = format_entry(Entry.header("src/lib", "/work/repo/src/lib/"), PLAIN_THEME)

        self.assertEqual(root, "  " + " " * STATE_COLUMN_WIDTH + " ./")
        self.assertEqual(nested, "  " + " " * STATE_COLUMN_WIDTH + " src/lib/")

    def test_marked_row_shows_flag(self) -> None:
        entry = Entry.file("a", State.ADDED)
        entry.marked = True

        self.assertTrue(format_entry(entry, PLAIN_THEME).startswith("* added"))

    def test_vanished_row_has_blank_state(self) -> None:
        self.assertEqual(state_label(State.NONE), "")
        self.assertEqual(state_label(State.UP_TO_DATE), "up-to-date")

    def test_default_theme_colors_state(self) -> None:
        text = ThemedRowRenderer().render(Entry.file("a", State.CONFLICT))

        self.assertIn(DEFAULT_THEME.state_conflict + "conflict", text)
        self.assertTrue(text.endswith(DEFAULT_THEME.path + "a" + DEFAULT_THEME.reset))


if __name__ == "__main__":
    unittest.main()

"""Time budgets for bulk and region marking on large status listings.

Budgets are conservative; they catch marking that rescans the store per row.
"""

from __future__ import annotations

import time
import unittest

from statustree.errors import ParentMarkedError
from statustree.tree_model import marking
from statustree.tree_model.merge import merge
from statustree.tree_model.navigation import find_directory, find_entry
from statustree.tree_model.store import OrderedStore

ROOT = "/work/repo"
BUDGET_SECONDS = 2.0


class MarkingBudgetTests(unittest.TestCase):
    def test_mark_by_state_budget_across_many_directories(self) -> None:
        store = OrderedStore()
        merge(
            store,
            [(f"pkg_{d:03d}/file_{f:03d}.txt", "edited", None) for d in range(200) for f in range(100)],
            ROOT,
        )
        marking.mark(store, find_directory(store, "pkg_199"))
        anchor = find_entry(store, "pkg_000/file_000.txt")

        started = time.perf_counter()
        with self.assertRaises(ParentMarkedError):
            marking.mark_all_by_state(store, anchor)
        marking.unmark_all(store)
        changed = marking.mark_all_by_state(store, anchor)
        elapsed = time.perf_counter() - started

        self.assertEqual(len(changed), 20000)
        self.assertLess(elapsed, BUDGET_SECONDS)

    def test_region_budget_in_one_large_directory(self) -> None:
        store = OrderedStore()
        merge(store, [(f"big/file_{f:05d}.txt", "edited", None) for f in range(20000)], ROOT)
        first = find_entry(store, "big/file_00000.txt")
        last = find_entry(store, "big/file_19999.txt")

        started = time.perf_counter()
        changed = marking.mark_region(store, first, last)
        marking.unmark_region(store, last, first)
        toggled = marking.toggle_region(store, first, last)
        elapsed = time.perf_counter() - started

        self.assertEqual(len(changed), 20000)
        self.assertEqual(len(toggled), 20000)
        self.assertLess(elapsed, BUDGET_SECONDS)


if __name__ == "__main__":
    unittest.main()

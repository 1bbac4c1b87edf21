"""Status-tree model: entries, ordered store, merge, marking, and queries.

Defines ``Entry`` and the cursor-addressable ``OrderedStore`` it lives in.
Merge, marking, selection, navigation, and hiding all operate on a store handle.
"""

from __future__ import annotations

from .filtering import hide_state, hide_states, hide_up_to_date
from .marking import (
    check_markable,
    mark,
    mark_all,
    mark_all_by_state,
    mark_by_state,
    mark_region,
    toggle,
    toggle_region,
    unmark,
    unmark_all,
    unmark_all_by_state,
    unmark_region,
)
from .merge import is_sorted, merge
from .navigation import find_directory, find_entry, next_directory, next_file, next_in_state, next_row
from .rendering import Renderer, ThemedRowRenderer, format_entry
from .selection import (
    FileSet,
    child_file_paths,
    current_entry,
    deduce_fileset,
    marked_files_and_states,
    marked_or_current_paths,
    marked_paths,
)
from .store import Cursor, OrderedStore
from .types import Entry, EntryKind, MergeResult, State, StatusTuple

__all__ = [
    "Entry",
    "EntryKind",
    "State",
    "StatusTuple",
    "MergeResult",
    "Cursor",
    "OrderedStore",
    "merge",
    "is_sorted",
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
    "FileSet",
    "current_entry",
    "marked_paths",
    "marked_or_current_paths",
    "child_file_paths",
    "marked_files_and_states",
    "deduce_fileset",
    "next_row",
    "next_file",
    "next_directory",
    "next_in_state",
    "find_entry",
    "find_directory",
    "hide_states",
    "hide_state",
    "hide_up_to_date",
    "Renderer",
    "ThemedRowRenderer",
    "format_entry",
]

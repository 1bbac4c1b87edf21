"""Presentational hiding of rows by state.

Hidden rows are simply removed from the store; the next merge that reports
them brings them back. The root header is always kept.
"""

from __future__ import annotations

from collections.abc import Iterable

from .store import OrderedStore
from .types import Entry, State


def hide_states(store: OrderedStore, states: Iterable[State]) -> list[Entry]:
    """Remove unmarked files in ``states`` and headers left without files.

    Walks from the last row backwards so a header is judged after the files
    that followed it were already dropped. Returns removed entries in store order.
    """
    hidden = frozenset(states)
    first = store.first()
    removed: list[Entry] = []
    node = store.last()
    while node is not None and node is not first:
        previous = store.prev(node)
        entry = node.entry
        if entry.is_header:
            following = store.next(node)
            drop = not entry.marked and (following is None or following.entry.is_header)
        else:
            drop = not entry.marked and entry.state in hidden
        if drop:
            removed.append(entry)
            store.remove(node)
        node = previous
    removed.reverse()
    return removed


def hide_state(store: OrderedStore, state: State) -> list[Entry]:
    return hide_states(store, (state,))


def hide_up_to_date(store: OrderedStore, include_ignored: bool = False) -> list[Entry]:
    """Hide up-to-date files (and ignored ones when ``include_ignored``)."""
    states = [State.UP_TO_DATE]
    if include_ignored:
        states.append(State.IGNORED)
    return hide_states(store, states)


__all__ = ["hide_states", "hide_state", "hide_up_to_date"]

"""Status-tree entry datatypes shared by store, merge, and marking modules."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class EntryKind(str, Enum):
    FILE = "file"
    DIRECTORY_HEADER = "directory"


class State(str, Enum):
    """Version-control state of one row.

    ``NONE`` is carried by directory headers and by rows whose file vanished.
    """

    UP_TO_DATE = "up-to-date"
    EDITED = "edited"
    ADDED = "added"
    REMOVED = "removed"
    MISSING = "missing"
    CONFLICT = "conflict"
    IGNORED = "ignored"
    UNREGISTERED = "unregistered"
    UNKNOWN = "unknown"
    NONE = "none"

    @classmethod
    def coerce(cls, value: State | str | None) -> State:
        """Map backend state values to ``State``; ``None`` means the file vanished."""
        if value is None:
            return cls.NONE
        if isinstance(value, State):
            return value
        normalized = str(value).strip().lower().replace("_", "-")
        if normalized == "uptodate":
            normalized = "up-to-date"
        try:
            return cls(normalized)
        except ValueError:
            return cls.UNKNOWN


# One incoming status tuple: (path, state, extra). ``state is None`` means vanished.
StatusTuple = tuple[str, "State | str | None", object]


@dataclass
class Entry:
    """One row in the status tree (file or synthetic directory header)."""

    path: str
    kind: EntryKind = EntryKind.FILE
    state: State = State.NONE
    extra: object = None
    marked: bool = False
    pending_confirmation: bool = False
    directory: str | None = None

    @property
    def is_header(self) -> bool:
        return self.kind is EntryKind.DIRECTORY_HEADER

    @classmethod
    def header(cls, path: str, directory: str) -> Entry:
        return cls(path=path, kind=EntryKind.DIRECTORY_HEADER, state=State.NONE, directory=directory)

    @classmethod
    def file(cls, path: str, state: State | str | None, extra: object = None) -> Entry:
        return cls(path=path, kind=EntryKind.FILE, state=State.coerce(state), extra=extra)


@dataclass(frozen=True)
class MergeResult:
    """Counts describing what one merge did to the store."""

    updated: int = 0
    inserted: int = 0
    headers_inserted: int = 0
    discarded: int = 0

"""Error taxonomy for status-tree operations.

Every error aborts only the requested operation and leaves the store as it was.
``format_error`` turns any exception into a one-line user-facing message.
"""

from __future__ import annotations


class StatusTreeError(Exception):
    """Base class for locally recoverable status-tree failures."""

    code = "status_tree"

    def __init__(self, message: str, *, detail: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.detail = detail

    def __str__(self) -> str:
        if self.detail:
            return f"{self.message} ({self.detail})"
        return self.message


class MarkConflictError(StatusTreeError):
    """A mark would break ancestor/descendant exclusivity."""

    code = "mark_conflict"

    def __init__(self, message: str, blocking_path: str) -> None:
        super().__init__(message, detail=blocking_path)
        self.blocking_path = blocking_path


class ParentMarkedError(MarkConflictError):
    code = "parent_marked"

    def __init__(self, blocking_path: str) -> None:
        super().__init__("Parent directory already marked", blocking_path)


class ChildMarkedError(MarkConflictError):
    code = "child_marked"

    def __init__(self, blocking_path: str) -> None:
        super().__init__("File in this directory already marked", blocking_path)


class DirectoryAlreadyMarkedError(MarkConflictError):
    code = "directory_marked"

    def __init__(self, blocking_path: str) -> None:
        super().__init__("Cannot mark all files, directory marked", blocking_path)


class BusyError(StatusTreeError):
    code = "busy"

    def __init__(self, detail: str | None = None) -> None:
        super().__init__("Another refresh is already running", detail=detail)


class NoEntryAtCursorError(StatusTreeError):
    code = "no_entry"

    def __init__(self, detail: str | None = None) -> None:
        super().__init__("No entry at cursor", detail=detail)


class ProviderError(StatusTreeError):
    """The status backend failed while producing a batch."""

    code = "provider_failed"

    def __init__(self, message: str, *, detail: str | None = None) -> None:
        super().__init__(message, detail=detail)


def format_error(error: BaseException) -> str:
    if isinstance(error, StatusTreeError):
        prefix = f"[{error.code}] " if error.code else ""
        return f"{prefix}{error}"
    return f"{error}"


def wrap_error(error: BaseException, *, message: str) -> StatusTreeError:
    """Return ``error`` unchanged when already typed, else wrap it as ``ProviderError``."""
    if isinstance(error, StatusTreeError):
        return error
    return ProviderError(message, detail=str(error))


__all__ = [
    "StatusTreeError",
    "MarkConflictError",
    "ParentMarkedError",
    "ChildMarkedError",
    "DirectoryAlreadyMarkedError",
    "BusyError",
    "NoEntryAtCursorError",
    "ProviderError",
    "format_error",
    "wrap_error",
]

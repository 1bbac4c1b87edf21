"""Status-provider interface consumed by the refresh controller.

A provider produces ``(path, state, extra)`` tuples in one or more batches.
Paths are relative to the tree root the provider was created for.
Callbacks must be invoked on the thread that owns the store.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Protocol

from ..tree_model.types import State, StatusTuple

BatchCallback = Callable[[list[StatusTuple], bool], None]
ErrorCallback = Callable[[BaseException], None]


class ProviderOperation(Protocol):
    """Handle for one in-flight provider request."""

    def cancel(self) -> None: ...


class StatusProvider(Protocol):
    def request_full_status(
        self,
        root_dir: Path,
        on_batch: BatchCallback,
        on_error: ErrorCallback,
    ) -> ProviderOperation: ...

    def request_status_for(
        self,
        paths: Sequence[str],
        default_state: State,
        on_batch: BatchCallback,
        on_error: ErrorCallback,
    ) -> ProviderOperation: ...


__all__ = ["BatchCallback", "ErrorCallback", "ProviderOperation", "StatusProvider"]

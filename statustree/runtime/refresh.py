"""Refresh orchestration between a status provider and one store.

The controller is either idle or busy with exactly one refresh handle. Full
refreshes flag every row as pending, merge each batch as it arrives, re-ask the
provider about rows nobody confirmed, and finally sweep what is still pending.
Partial refreshes only merge. Batches from a cancelled or superseded handle are
dropped, so late deliveries cannot touch the store.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import Enum
from functools import partial
from pathlib import Path
from typing import NoReturn

from ..errors import BusyError, StatusTreeError, wrap_error
from ..logging import get_logger, log_event
from ..tree_model.merge import merge
from ..tree_model.store import OrderedStore
from ..tree_model.types import Entry, State, StatusTuple
from .provider import ProviderOperation, StatusProvider


class RefreshPhase(str, Enum):
    IDLE = "idle"
    BUSY = "busy"


class RefreshKind(str, Enum):
    FULL = "full"
    CONFIRM = "confirm"
    PARTIAL = "partial"


@dataclass
class RefreshHandle:
    """One outstanding provider request owned by the controller."""

    kind: RefreshKind
    generation: int
    operation: ProviderOperation | None = None
    batches: int = 0
    cancelled: bool = False


@dataclass(frozen=True)
class RefreshOutcome:
    """Summary delivered to ``on_finished`` when a refresh cycle ends."""

    kind: RefreshKind
    completed: bool
    cancelled: bool = False
    error: BaseException | None = None
    removed: tuple[str, ...] = ()


def _set_pending(entry: Entry) -> bool:
    entry.pending_confirmation = True
    return False


def _clear_pending(entry: Entry) -> bool:
    entry.pending_confirmation = False
    return False


def _reset_header_state(entry: Entry) -> bool:
    if entry.is_header and entry.state is State.UP_TO_DATE:
        entry.state = State.NONE
        return True
    return False


class RefreshController:
    """Drives full and partial refresh cycles for one store handle."""

    def __init__(
        self,
        store: OrderedStore,
        provider: StatusProvider,
        root_dir: Path | str,
        *,
        on_finished: Callable[[RefreshOutcome], None] | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.store = store
        self.provider = provider
        self.root_dir = Path(root_dir)
        self.on_finished = on_finished
        self.logger = logger or get_logger("statustree.refresh")
        self.last_error: BaseException | None = None
        self.last_outcome: RefreshOutcome | None = None
        self._handle: RefreshHandle | None = None
        self._generation = 0
        store.bind_root(str(self.root_dir))

    @property
    def phase(self) -> RefreshPhase:
        return RefreshPhase.BUSY if self._handle is not None else RefreshPhase.IDLE

    @property
    def is_busy(self) -> bool:
        return self._handle is not None

    @property
    def handle(self) -> RefreshHandle | None:
        return self._handle

    def _begin(self, kind: RefreshKind) -> RefreshHandle:
        self._generation += 1
        handle = RefreshHandle(kind=kind, generation=self._generation)
        self._handle = handle
        return handle

    def _attach(self, handle: RefreshHandle, operation: ProviderOperation) -> None:
        # Synchronous providers may already have finished this handle.
        if self._handle is handle:
            handle.operation = operation

    def _is_current(self, handle: RefreshHandle) -> bool:
        return self._handle is handle and not handle.cancelled

    def _finish(self, outcome: RefreshOutcome) -> None:
        self._handle = None
        self.last_outcome = outcome
        if self.on_finished is not None:
            self.on_finished(outcome)

    def full_refresh(self) -> RefreshHandle:
        """Start a full scan; raises ``BusyError`` while another refresh runs."""
        if self._handle is not None:
            raise BusyError(self._handle.kind.value)
        self.last_error = None
        self.store.map(_set_pending)
        handle = self._begin(RefreshKind.FULL)
        log_event(self.logger, "refresh_started", kind=handle.kind.value, root=str(self.root_dir), rows=len(self.store))
        try:
            operation = self.provider.request_full_status(
                self.root_dir,
                partial(self._on_full_batch, handle),
                partial(self._on_error, handle),
            )
        except Exception as exc:
            self._raise_request_failure(handle, exc)
        self._attach(handle, operation)
        return handle

    def partial_refresh(self, paths: Sequence[str], default_state: State = State.UP_TO_DATE) -> RefreshHandle:
        """Refresh only ``paths``; rows are never created and nothing is swept."""
        if self._handle is not None:
            raise BusyError(self._handle.kind.value)
        self.last_error = None
        handle = self._begin(RefreshKind.PARTIAL)
        log_event(self.logger, "refresh_started", kind=handle.kind.value, root=str(self.root_dir), paths=len(paths))
        try:
            operation = self.provider.request_status_for(
                list(paths),
                default_state,
                partial(self._on_partial_batch, handle),
                partial(self._on_error, handle),
            )
        except Exception as exc:
            self._raise_request_failure(handle, exc)
        self._attach(handle, operation)
        return handle

    def cancel(self) -> bool:
        """Stop applying batches of the current refresh; the store keeps what was merged."""
        handle = self._handle
        if handle is None:
            return False
        handle.cancelled = True
        if handle.operation is not None:
            handle.operation.cancel()
        self.store.map(_clear_pending)
        log_event(self.logger, "refresh_cancelled", kind=handle.kind.value, batches=handle.batches)
        self._finish(RefreshOutcome(kind=handle.kind, completed=False, cancelled=True))
        return True

    def _merge_batch(self, handle: RefreshHandle, entries: list[StatusTuple], suppress_append: bool) -> None:
        handle.batches += 1
        result = merge(self.store, entries, str(self.root_dir), suppress_append=suppress_append)
        log_event(
            self.logger,
            "batch_merged",
            level=logging.DEBUG,
            kind=handle.kind.value,
            batch=handle.batches,
            updated=result.updated,
            inserted=result.inserted,
            headers=result.headers_inserted,
            discarded=result.discarded,
        )

    def _on_full_batch(self, handle: RefreshHandle, entries: list[StatusTuple], more_to_come: bool) -> None:
        if not self._is_current(handle):
            return
        self._merge_batch(handle, entries, suppress_append=False)
        if more_to_come:
            return

        unconfirmed = self.store.collect(lambda entry: entry.pending_confirmation and not entry.is_header)
        if not unconfirmed:
            self._sweep(handle)
            return

        confirm = self._begin(RefreshKind.CONFIRM)
        paths = [entry.path for entry in unconfirmed]
        log_event(self.logger, "refresh_confirming", paths=len(paths))
        try:
            operation = self.provider.request_status_for(
                paths,
                State.UP_TO_DATE,
                partial(self._on_confirm_batch, confirm),
                partial(self._on_error, confirm),
            )
        except Exception as exc:
            # Reported through last_error and on_finished; batch callbacks never raise.
            self._on_error(confirm, exc)
            return
        self._attach(confirm, operation)

    def _on_confirm_batch(self, handle: RefreshHandle, entries: list[StatusTuple], more_to_come: bool) -> None:
        if not self._is_current(handle):
            return
        self._merge_batch(handle, entries, suppress_append=True)
        if not more_to_come:
            self._sweep(handle)

    def _on_partial_batch(self, handle: RefreshHandle, entries: list[StatusTuple], more_to_come: bool) -> None:
        if not self._is_current(handle):
            return
        self._merge_batch(handle, entries, suppress_append=True)
        if not more_to_come:
            log_event(self.logger, "refresh_finished", kind=handle.kind.value, batches=handle.batches)
            self._finish(RefreshOutcome(kind=handle.kind, completed=True))

    def _sweep(self, handle: RefreshHandle) -> None:
        """Drop rows nobody confirmed; headers always survive."""
        self.store.map(_reset_header_state)
        removed = self.store.filter(lambda entry: entry.is_header or not entry.pending_confirmation)
        self.store.map(_clear_pending)
        removed_paths = tuple(entry.path for entry in removed)
        log_event(self.logger, "refresh_swept", kind=handle.kind.value, removed=len(removed_paths), rows=len(self.store))
        self._finish(RefreshOutcome(kind=RefreshKind.FULL, completed=True, removed=removed_paths))

    def _raise_request_failure(self, handle: RefreshHandle, error: Exception) -> NoReturn:
        """End ``handle`` after its provider request raised, then raise the typed error."""
        failure = self._on_error(handle, error) or wrap_error(error, message="Status provider failed")
        if failure is error:
            raise failure
        raise failure from error

    def _on_error(self, handle: RefreshHandle, error: BaseException) -> StatusTreeError | None:
        if not self._is_current(handle):
            return None
        failure = wrap_error(error, message="Status provider failed")
        self.last_error = failure
        self.store.map(_clear_pending)
        log_event(self.logger, "refresh_failed", level=logging.WARNING, kind=handle.kind.value, error=str(failure))
        self._finish(RefreshOutcome(kind=handle.kind, completed=False, error=failure))
        return failure


__all__ = ["RefreshPhase", "RefreshKind", "RefreshHandle", "RefreshOutcome", "RefreshController"]

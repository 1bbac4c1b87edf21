"""Refresh orchestration and per-view state.

``RefreshController`` drives status providers against one store.
``StatusView`` wires a store, cursor, redraw cache, and controller together.
"""

from __future__ import annotations

from .provider import BatchCallback, ErrorCallback, ProviderOperation, StatusProvider
from .refresh import RefreshController, RefreshHandle, RefreshKind, RefreshOutcome, RefreshPhase
from .view import StatusView

__all__ = [
    "BatchCallback",
    "ErrorCallback",
    "ProviderOperation",
    "StatusProvider",
    "RefreshController",
    "RefreshHandle",
    "RefreshKind",
    "RefreshOutcome",
    "RefreshPhase",
    "StatusView",
]

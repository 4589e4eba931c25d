"""Notification batching engine.

Store mutations inside a `batch`-decorated function or `with transaction()`
mark their stores as pending and flush listener notification once at the
end of the outermost block, so subscribers never see intermediate states.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from storescope.store import StoreState

# Batch depth counter. When > 0, notifications are deferred.
_batch_depth: int = 0

# Stores mutated during a batch, in first-mutation order, awaiting flush.
_pending: dict[StoreState, None] = {}


def begin_batch() -> None:
    """Enter a batching scope. Nested batches are supported."""
    global _batch_depth
    _batch_depth += 1


def end_batch() -> None:
    """Exit a batching scope. When the outermost scope exits, flush pending stores."""
    global _batch_depth
    _batch_depth -= 1
    if _batch_depth == 0:
        _flush_pending()


def schedule(store_state: StoreState) -> None:
    """Schedule listener notification for a store.

    If inside a batch, defers. Otherwise, notifies immediately.
    """
    if _batch_depth > 0:
        _pending[store_state] = None
    else:
        store_state.notify()


def _flush_pending() -> None:
    """Notify all pending stores. Handles stores scheduled during flush."""
    while _pending:
        # Snapshot and clear; listeners may mutate stores during notify.
        batch = list(_pending)
        _pending.clear()
        for store_state in batch:
            store_state.notify()


def get_pending_count() -> int:
    """Number of stores waiting to notify. Useful for testing."""
    return len(_pending)

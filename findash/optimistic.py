"""
Optimistic Updates with Rollback

The local snapshot changes before the durable write finishes, so the
dashboard reflects the user's action immediately. If the write fails the
snapshot captured beforehand is restored and the failure is re-raised to
the caller unchanged.

Snapshots are immutable, so "capture" is holding a reference and
"restore" is assigning it back.
"""

from typing import Awaitable, Callable, Optional, TypeVar

from findash.models.snapshot import OwnerSnapshot


T = TypeVar("T")


class SnapshotHolder:
    """The single mutable slot holding an owner's current snapshot."""

    def __init__(self, snapshot: OwnerSnapshot):
        self.snapshot = snapshot


async def apply_optimistically(
    holder: SnapshotHolder,
    change: Callable[[OwnerSnapshot], OwnerSnapshot],
    write: Callable[[], Awaitable[T]],
    commit: Optional[Callable[[OwnerSnapshot, T], OwnerSnapshot]] = None,
    on_rollback: Optional[Callable[[Exception], None]] = None,
) -> T:
    """
    Apply ``change`` locally, then await ``write``.

    Args:
        holder: Slot whose snapshot is changed
        change: Local change applied before the write
        write: The durable write
        commit: Folds the write's result into the snapshot (for example,
                swapping a provisional record for the stored one)
        on_rollback: Called with the failure after the snapshot is restored

    Returns:
        Whatever ``write`` returned
    """
    previous = holder.snapshot
    holder.snapshot = change(previous)

    try:
        result = await write()
    except Exception as e:
        holder.snapshot = previous
        if on_rollback:
            on_rollback(e)
        raise

    if commit:
        holder.snapshot = commit(holder.snapshot, result)
    return result

"""Page replacement policies — choosing which frame to reclaim.

When every frame is occupied and a process touches a page that isn't
resident, the memory manager must evict something.  Which frame loses
its page is the **replacement policy**'s decision.

Replacement Policies (Strategy pattern, like the scheduler):
    - **FIFO** — evict the frame whose page was loaded earliest, even if
      it was accessed a moment ago.  Simple but can suffer from Belady's
      anomaly (more frames → more faults for some patterns).
    - **LRU** — evict the frame accessed longest ago.  Approximates the
      optimal algorithm.  No extra queue is needed: each frame already
      carries its last-access timestamp.

Replacement is **global**: any process's page can be evicted to make
room for any other process's page.
"""

from __future__ import annotations

from collections import deque
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from py_ossim.memory.frames import Frame, FrameTable


class ReplacementPolicy(Protocol):
    """Interface for page replacement algorithms.

    The memory manager tells the policy about loads and accesses, and
    asks it for a victim when no frame is free.
    """

    name: str

    def on_load(self, frame: Frame) -> None:
        """Record that a page was loaded into *frame*."""
        ...  # pragma: no cover

    def on_access(self, frame: Frame) -> None:
        """Record that the page in *frame* was accessed (a hit)."""
        ...  # pragma: no cover

    def select_victim(self, table: FrameTable) -> int:
        """Choose the frame id to overwrite.

        Raises:
            IndexError: If no frame is eligible.

        """
        ...  # pragma: no cover

    def rebuild(self, table: FrameTable) -> None:
        """Reset internal bookkeeping from the frames' current timestamps."""
        ...  # pragma: no cover


class FIFOPolicy:
    """First In, First Out — evict the frame loaded longest ago.

    Keeps a queue of frame ids in load order.  The queue is the single
    source of truth for eviction order; it is only reconstructed from
    timestamps when the policy is installed over an existing pool.
    """

    name = "FIFO"

    def __init__(self) -> None:
        """Create an empty FIFO policy."""
        self._queue: deque[int] = deque()

    @property
    def load_order(self) -> list[int]:
        """Return the frame ids from oldest to newest load."""
        return list(self._queue)

    def on_load(self, frame: Frame) -> None:
        """Move *frame* to the tail of the load queue."""
        if frame.frame_id in self._queue:
            self._queue.remove(frame.frame_id)
        self._queue.append(frame.frame_id)

    def on_access(self, frame: Frame) -> None:
        """FIFO ignores accesses — order is purely by load time."""

    def select_victim(self, table: FrameTable) -> int:  # noqa: ARG002
        """Return the frame at the head of the load queue.

        Raises:
            IndexError: If no frames are tracked.

        """
        if not self._queue:
            msg = "No frames to evict"
            raise IndexError(msg)
        return self._queue[0]

    def rebuild(self, table: FrameTable) -> None:
        """Order occupied frames by load time, ties by frame id."""
        occupied = sorted(table.occupied(), key=lambda f: (f.loaded_at, f.frame_id))
        self._queue = deque(f.frame_id for f in occupied)

    def __repr__(self) -> str:
        """Return a debug-friendly representation."""
        return "FIFOPolicy()"


class LRUPolicy:
    """Least Recently Used — evict the frame accessed longest ago.

    Scans the table for the smallest ``last_accessed`` timestamp.  Ties
    go to the lowest frame id.  O(n) per eviction, fine for a learning
    simulator.
    """

    name = "LRU"

    def on_load(self, frame: Frame) -> None:
        """Nothing to track — the frame's timestamps carry the order."""

    def on_access(self, frame: Frame) -> None:
        """Nothing to track — the frame's timestamps carry the order."""

    def select_victim(self, table: FrameTable) -> int:
        """Return the least recently accessed occupied frame.

        Raises:
            IndexError: If no frames are occupied.

        """
        occupied = table.occupied()
        if not occupied:
            msg = "No frames to evict"
            raise IndexError(msg)
        victim = min(occupied, key=lambda f: (f.last_accessed, f.frame_id))
        return victim.frame_id

    def rebuild(self, table: FrameTable) -> None:
        """Nothing to rebuild."""

    def __repr__(self) -> str:
        """Return a debug-friendly representation."""
        return "LRUPolicy()"

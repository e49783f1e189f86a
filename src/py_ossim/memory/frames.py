"""Physical frames — the fixed pool of RAM slots shared by every process.

Physical memory is divided into a fixed number of **frames**.  Each frame
is either free or holds exactly one virtual page of exactly one process,
identified by the pair ``(pid, page_number)``.

Two logical timestamps are kept per frame:

- ``loaded_at`` — when the current page was brought in (FIFO order).
- ``last_accessed`` — when the page was last touched (LRU order).

Both come from the memory manager's clock, which is global to the
simulation rather than per process.

The pool never grows or shrinks.  Frame contents are overwritten in
place; resizing means building a brand-new table.
"""

from __future__ import annotations

from dataclasses import dataclass

from py_ossim.errors import InvalidArgumentError


@dataclass
class Frame:
    """One physical frame slot.

    Attributes:
        frame_id: Fixed index into the pool (0..N-1).
        owner_pid: The owning process, or None if the frame is free.
        page_number: The resident virtual page (meaningless when free).
        loaded_at: Clock value when the page was loaded.
        last_accessed: Clock value of the most recent access.

    """

    frame_id: int
    owner_pid: int | None = None
    page_number: int = -1
    loaded_at: int = -1
    last_accessed: int = -1

    @property
    def is_free(self) -> bool:
        """Return True if no page occupies this frame."""
        return self.owner_pid is None

    def holds(self, pid: int, page_number: int) -> bool:
        """Return True if this frame holds *page_number* of *pid*."""
        return self.owner_pid == pid and self.page_number == page_number

    def load(self, *, pid: int, page_number: int, now: int) -> None:
        """Overwrite the frame with a freshly loaded page."""
        self.owner_pid = pid
        self.page_number = page_number
        self.loaded_at = now
        self.last_accessed = now


@dataclass(frozen=True)
class FrameSnapshot:
    """Read-only copy of a frame, for display."""

    frame_id: int
    owner_pid: int | None
    page_number: int | None
    loaded_at: int | None
    last_accessed: int | None

    @property
    def is_free(self) -> bool:
        """Return True if the frame was free when the snapshot was taken."""
        return self.owner_pid is None

    def __str__(self) -> str:
        """Format as ``id : pid,page (l@loaded a@accessed)`` or ``id : <free>``."""
        if self.owner_pid is None:
            return f"{self.frame_id} : <free>"
        return (
            f"{self.frame_id} : {self.owner_pid},{self.page_number} "
            f"(l@{self.loaded_at} a@{self.last_accessed})"
        )


class FrameTable:
    """A fixed-size array of frames.

    The table knows nothing about replacement policy or processes — it
    answers "where is this page?" and "which frame is free?".
    """

    def __init__(self, *, capacity: int) -> None:
        """Create a table of *capacity* free frames.

        Raises:
            InvalidArgumentError: If capacity is not positive.

        """
        if capacity <= 0:
            msg = f"Frame capacity must be positive, got {capacity}"
            raise InvalidArgumentError(msg)
        self._frames = [Frame(frame_id=i) for i in range(capacity)]

    @property
    def capacity(self) -> int:
        """Return the number of frames in the pool."""
        return len(self._frames)

    @property
    def frames(self) -> list[Frame]:
        """Return the live frame objects, ordered by frame id."""
        return list(self._frames)

    def __getitem__(self, frame_id: int) -> Frame:
        """Return the frame with the given id."""
        return self._frames[frame_id]

    def __len__(self) -> int:
        """Return the number of frames in the pool."""
        return len(self._frames)

    def find(self, pid: int, page_number: int) -> Frame | None:
        """Return the frame holding ``(pid, page_number)``, or None."""
        for frame in self._frames:
            if frame.holds(pid, page_number):
                return frame
        return None

    def first_free(self) -> Frame | None:
        """Return the lowest-numbered free frame, or None if the pool is full."""
        for frame in self._frames:
            if frame.is_free:
                return frame
        return None

    def occupied(self) -> list[Frame]:
        """Return every occupied frame, ordered by frame id."""
        return [f for f in self._frames if not f.is_free]

    def snapshot(self) -> tuple[FrameSnapshot, ...]:
        """Return an immutable copy of every frame."""
        return tuple(
            FrameSnapshot(
                frame_id=f.frame_id,
                owner_pid=f.owner_pid,
                page_number=None if f.is_free else f.page_number,
                loaded_at=None if f.is_free else f.loaded_at,
                last_accessed=None if f.is_free else f.last_accessed,
            )
            for f in self._frames
        )

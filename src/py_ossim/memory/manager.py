"""Memory manager — demand paging over a shared pool of frames.

Every memory reference in the simulator goes through ``access()``:

1. If the ``(pid, page)`` pair is **resident**, the access is a *hit*:
   the frame's last-access time is refreshed and nothing else changes.
2. Otherwise it is a **page fault**.  The page is loaded into the
   lowest-numbered free frame, or — when every frame is occupied — into
   a victim frame chosen by the replacement policy (a *replacement*).

The manager keeps its own logical clock.  The driver must call
``advance_tick()`` once per simulated tick, before that tick's access,
so load and access timestamps line up with scheduler ticks.

Changing policy alone keeps every resident page and lets the new policy
rebuild its bookkeeping from the frame timestamps.  Changing capacity
throws the old pool away and starts from an empty one, with the
paging counters back at zero.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

from py_ossim.errors import InvalidArgumentError
from py_ossim.logging import LogLevel
from py_ossim.memory.frames import FrameSnapshot, FrameTable
from py_ossim.memory.replacement import FIFOPolicy

if TYPE_CHECKING:
    from py_ossim.logging import Logger
    from py_ossim.memory.replacement import ReplacementPolicy


class AccessOutcome(StrEnum):
    """Result kind of a memory reference."""

    HIT = "hit"
    FAULT = "fault"


@dataclass(frozen=True)
class AccessResult:
    """What happened on a single memory reference.

    Attributes:
        outcome: HIT or FAULT.
        frame_id: The frame the page was loaded into (FAULT only).
        evicted: The ``(pid, page)`` pair thrown out, if the fault
            needed a replacement.

    """

    outcome: AccessOutcome
    frame_id: int | None = None
    evicted: tuple[int, int] | None = None

    @property
    def hit(self) -> bool:
        """Return True if the page was already resident."""
        return self.outcome is AccessOutcome.HIT


class MemoryManager:
    """Own the frame pool and resolve memory references.

    Counters are cumulative until the pool is resized; a resize starts
    a fresh pool with zeroed counters.  The clock is never reset.
    """

    def __init__(
        self,
        *,
        capacity: int,
        policy: ReplacementPolicy | None = None,
        logger: Logger | None = None,
    ) -> None:
        """Create a manager with *capacity* free frames.

        Args:
            capacity: Number of physical frames (must be positive).
            policy: Replacement algorithm (FIFO by default).
            logger: Optional event log for faults and evictions.

        Raises:
            InvalidArgumentError: If capacity is not positive.

        """
        self._table = FrameTable(capacity=capacity)
        self._policy: ReplacementPolicy = policy if policy is not None else FIFOPolicy()
        self._policy.rebuild(self._table)
        self._logger = logger
        self._clock = 0
        self._faults = 0
        self._replacements = 0
        self._hits = 0

    @property
    def policy(self) -> ReplacementPolicy:
        """Return the active replacement policy."""
        return self._policy

    @property
    def capacity(self) -> int:
        """Return the number of physical frames."""
        return self._table.capacity

    @property
    def clock(self) -> int:
        """Return the current logical time."""
        return self._clock

    @property
    def faults(self) -> int:
        """Return the total number of page faults."""
        return self._faults

    @property
    def replacements(self) -> int:
        """Return the number of faults that had to evict a page."""
        return self._replacements

    @property
    def hits(self) -> int:
        """Return the total number of accesses to resident pages."""
        return self._hits

    @property
    def resident_count(self) -> int:
        """Return the number of occupied frames."""
        return len(self._table.occupied())

    def is_resident(self, pid: int, page_number: int) -> bool:
        """Return True if the page is in a frame (no side effects)."""
        return self._table.find(pid, page_number) is not None

    def snapshot(self) -> tuple[FrameSnapshot, ...]:
        """Return a read-only copy of every frame."""
        return self._table.snapshot()

    def advance_tick(self) -> None:
        """Advance the logical clock by one tick."""
        self._clock += 1

    def set_policy(self, policy: ReplacementPolicy, *, capacity: int | None = None) -> None:
        """Install a new replacement policy, optionally resizing the pool.

        Args:
            policy: The new replacement algorithm.
            capacity: If given, replace the pool with this many free
                frames.  Resident pages are discarded and the fault,
                replacement and hit counters restart from zero.

        Raises:
            InvalidArgumentError: If capacity is given and not positive.

        """
        if capacity is not None:
            self._table = FrameTable(capacity=capacity)
            self._faults = 0
            self._replacements = 0
            self._hits = 0
        self._policy = policy
        self._policy.rebuild(self._table)
        size = f" frames={capacity}" if capacity is not None else ""
        self._log(LogLevel.INFO, f"POLICY {policy.name}{size}")

    def access(self, pid: int, page_number: int) -> AccessResult:
        """Resolve a reference to *page_number* of process *pid*.

        Returns:
            A HIT result, or a FAULT result carrying the frame that now
            holds the page (and the evicted pair, if any).

        Raises:
            InvalidArgumentError: If page_number is negative.

        """
        if page_number < 0:
            msg = f"Page number must be non-negative, got {page_number}"
            raise InvalidArgumentError(msg)

        frame = self._table.find(pid, page_number)
        if frame is not None:
            frame.last_accessed = self._clock
            self._policy.on_access(frame)
            self._hits += 1
            self._log(LogLevel.DEBUG, f"HIT pid={pid} page={page_number}")
            return AccessResult(outcome=AccessOutcome.HIT)

        self._faults += 1
        evicted: tuple[int, int] | None = None
        frame = self._table.first_free()
        if frame is None:
            frame = self._table[self._policy.select_victim(self._table)]
            assert frame.owner_pid is not None  # noqa: S101
            evicted = (frame.owner_pid, frame.page_number)
            self._replacements += 1
            self._log(
                LogLevel.DEBUG,
                f"EVICT pid={evicted[0]} page={evicted[1]} from frame={frame.frame_id}",
            )

        frame.load(pid=pid, page_number=page_number, now=self._clock)
        self._policy.on_load(frame)
        self._log(
            LogLevel.WARNING,
            f"PAGE_FAULT pid={pid} page={page_number} loaded in frame={frame.frame_id}",
        )
        return AccessResult(outcome=AccessOutcome.FAULT, frame_id=frame.frame_id, evicted=evicted)

    def _log(self, level: LogLevel, message: str) -> None:
        if self._logger is not None:
            self._logger.log(level, message, source="memory", tick=self._clock)

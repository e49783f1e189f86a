"""The simulator — the per-tick glue between scheduler and memory.

Neither the scheduler nor the memory manager knows the other exists.
The simulator owns one of each and drives them in a fixed order every
tick:

    1. Advance the memory manager's clock.
    2. Advance the scheduler, which reports the PID that ran (if any).
    3. Ask the reference source which page that process touches.
    4. Resolve the reference with the memory manager and, on a fault,
       charge it to the process.

Keeping both clocks in step is the simulator's job; the components do
not check each other.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from py_ossim.config import SimulatorConfig
from py_ossim.errors import InvalidArgumentError
from py_ossim.logging import Logger
from py_ossim.memory.manager import MemoryManager
from py_ossim.process.pcb import ProcessState
from py_ossim.process.scheduler import Scheduler
from py_ossim.references import RandomReferenceSource, TraceReferenceSource

if TYPE_CHECKING:
    from collections.abc import Sequence

    from py_ossim.memory.manager import AccessResult
    from py_ossim.memory.replacement import ReplacementPolicy
    from py_ossim.process.scheduler import SchedulingPolicy
    from py_ossim.references import ReferenceSource


@dataclass(frozen=True)
class TickReport:
    """What happened during one simulated tick.

    Attributes:
        tick: The tick number (0-based) that was simulated.
        pid: The process that ran, or None if the CPU was idle.
        page: The page it referenced, or None if idle.
        access: The memory manager's verdict, or None if idle.

    """

    tick: int
    pid: int | None = None
    page: int | None = None
    access: AccessResult | None = None

    @property
    def idle(self) -> bool:
        """Return True if no process ran this tick."""
        return self.pid is None

    def __str__(self) -> str:
        """Format as a one-line event description."""
        if self.pid is None or self.access is None:
            return f"[tick {self.tick}] IDLE"
        if self.access.hit:
            return f"[tick {self.tick}] HIT pid={self.pid} page={self.page}"
        return (
            f"[tick {self.tick}] PAGE_FAULT pid={self.pid} page={self.page} "
            f"loaded in frame={self.access.frame_id}"
        )


class Simulator:
    """Drive a scheduler and a memory manager together, tick by tick."""

    def __init__(
        self,
        config: SimulatorConfig | None = None,
        *,
        source: ReferenceSource | None = None,
    ) -> None:
        """Build a simulator from a configuration.

        Args:
            config: Settings (defaults if None).
            source: Page reference source.  Defaults to trace replay with
                a random fallback seeded from ``config.seed``.

        """
        self._config = config if config is not None else SimulatorConfig()
        self._logger = Logger()
        self._scheduler = Scheduler(
            policy=self._config.scheduling_policy(),
            logger=self._logger,
        )
        self._memory = MemoryManager(
            capacity=self._config.total_frames,
            policy=self._config.replacement_policy(),
            logger=self._logger,
        )
        if source is None:
            source = TraceReferenceSource(
                fallback=RandomReferenceSource(seed=self._config.seed),
            )
        self._source = source

    @property
    def config(self) -> SimulatorConfig:
        """Return the configuration the simulator was built from."""
        return self._config

    @property
    def scheduler(self) -> Scheduler:
        """Return the CPU scheduler."""
        return self._scheduler

    @property
    def memory(self) -> MemoryManager:
        """Return the memory manager."""
        return self._memory

    @property
    def logger(self) -> Logger:
        """Return the event log."""
        return self._logger

    @property
    def tick(self) -> int:
        """Return the number of ticks simulated so far."""
        return self._scheduler.tick

    def spawn(
        self,
        burst: int,
        page_count: int | None = None,
        trace: Sequence[int] = (),
    ) -> int:
        """Create a process and admit it straight away.

        Args:
            burst: CPU ticks required.
            page_count: Virtual pages (config default if None).
            trace: Optional page reference trace.

        Returns:
            The new PID.

        """
        pages = page_count if page_count is not None else self._config.default_pages
        pid = self._scheduler.create_process(burst, pages, trace)
        self._scheduler.admit(pid)
        return pid

    def kill(self, pid: int) -> bool:
        """Terminate *pid*; return False if it is unknown or already dead."""
        return self._scheduler.terminate(pid)

    def set_scheduler(self, policy: SchedulingPolicy) -> None:
        """Switch the CPU scheduling policy."""
        self._scheduler.set_policy(policy)

    def set_page_policy(self, policy: ReplacementPolicy, *, capacity: int | None = None) -> None:
        """Switch the page replacement policy, optionally resizing memory."""
        self._memory.set_policy(policy, capacity=capacity)

    def step(self) -> TickReport:
        """Simulate exactly one tick."""
        tick = self._scheduler.tick
        self._memory.advance_tick()
        pid = self._scheduler.advance_one_tick()
        if pid is None:
            return TickReport(tick=tick)

        process = self._scheduler.process(pid)
        assert process is not None  # noqa: S101
        page = self._source.next_page(process)
        result = self._memory.access(pid, page)
        if not result.hit:
            process.record_page_fault()
        return TickReport(tick=tick, pid=pid, page=page, access=result)

    def run(self, n: int) -> list[TickReport]:
        """Simulate *n* ticks and return one report per tick.

        Raises:
            InvalidArgumentError: If n is negative.

        """
        if n < 0:
            msg = f"Tick count must be non-negative, got {n}"
            raise InvalidArgumentError(msg)
        return [self.step() for _ in range(n)]

    def stats(self) -> dict[str, int | float]:
        """Return a summary of the run so far.

        Averages cover terminated processes only and are 0.0 when none
        have finished.
        """
        processes = self._scheduler.processes
        finished = [p for p in processes if p.state is ProcessState.TERMINATED]
        turnarounds = [p.turnaround_ticks for p in finished if p.turnaround_ticks is not None]
        avg_wait = sum(p.waiting_ticks for p in finished) / len(finished) if finished else 0.0
        avg_turnaround = sum(turnarounds) / len(turnarounds) if turnarounds else 0.0
        return {
            "tick": self._scheduler.tick,
            "processes": len(processes),
            "terminated": len(finished),
            "context_switches": self._scheduler.context_switches,
            "page_faults": self._memory.faults,
            "replacements": self._memory.replacements,
            "hits": self._memory.hits,
            "avg_waiting": avg_wait,
            "avg_turnaround": avg_turnaround,
        }

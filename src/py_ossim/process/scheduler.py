"""CPU scheduler — decides which READY process gets the CPU each tick.

The scheduler owns the process table and the ready queue, and delegates
the *ordering* decision to a pluggable SchedulingPolicy.  Two policies
ship out of the box:

- **RoundRobinPolicy**: each process gets a fixed time quantum, then is
  preempted to the back of the queue so the next process can run.
- **ShortestJobFirstPolicy** (non-preemptive): when the CPU goes idle,
  the READY process with the least remaining burst is dispatched and
  keeps the CPU until it finishes or is killed.  Ties go to the lowest
  PID so runs are reproducible.

Time is discrete.  ``advance_one_tick()`` is the only operation that
moves the clock, and it always performs the same four steps in the same
order: dispatch if idle, charge waiting time, run one unit of work,
advance the tick counter.

Design: Strategy pattern
    The Scheduler is the *context*; SchedulingPolicy is the *strategy*.
    Adding a new algorithm means writing a new policy class — existing
    code is never touched.

Invariant: a process is READY if and only if it sits in the ready queue.
"""

from __future__ import annotations

from collections import deque
from typing import TYPE_CHECKING, Protocol

from py_ossim.errors import InvalidArgumentError
from py_ossim.logging import LogLevel
from py_ossim.process.pcb import Process, ProcessState

if TYPE_CHECKING:
    from collections.abc import Sequence

    from py_ossim.logging import Logger


class SchedulingPolicy(Protocol):
    """Interface that every scheduling algorithm must satisfy.

    - select: remove and return the next process to run.
    - should_preempt: decide whether the running process has used up its slice.
    """

    def select(self, ready_queue: deque[Process]) -> Process | None:
        """Remove and return the next process to run, or None if empty."""
        ...  # pragma: no cover

    def should_preempt(self, slice_used: int) -> bool:
        """Return True if a process that has run *slice_used* ticks must yield."""
        ...  # pragma: no cover


class RoundRobinPolicy:
    """Round Robin — each process gets a fixed time quantum.

    Selection is plain FIFO; the scheduler preempts the running process
    after ``quantum`` consecutive ticks and appends it to the back.
    """

    def __init__(self, *, quantum: int) -> None:
        """Create a Round Robin policy with the given time quantum.

        Args:
            quantum: Number of ticks before forced preemption.

        Raises:
            InvalidArgumentError: If quantum is not positive.

        """
        if quantum <= 0:
            msg = f"Quantum must be positive, got {quantum}"
            raise InvalidArgumentError(msg)
        self._quantum = quantum

    @property
    def quantum(self) -> int:
        """Return the time quantum (ticks per slice)."""
        return self._quantum

    def select(self, ready_queue: deque[Process]) -> Process | None:
        """Pop the front of the queue (earliest admitted or preempted)."""
        if not ready_queue:
            return None
        return ready_queue.popleft()

    def should_preempt(self, slice_used: int) -> bool:
        """Preempt once the slice reaches the quantum."""
        return slice_used >= self._quantum

    def __repr__(self) -> str:
        """Return a debug-friendly representation."""
        return f"RoundRobinPolicy(quantum={self._quantum})"


class ShortestJobFirstPolicy:
    """Shortest Job First, non-preemptive.

    Picks the READY process with the smallest remaining burst.  Once
    dispatched it is never interrupted, even if a shorter job arrives.

    Tiebreaker: lowest PID, independent of queue order.
    """

    def select(self, ready_queue: deque[Process]) -> Process | None:
        """Remove and return the shortest remaining job, or None."""
        if not ready_queue:
            return None
        best = min(ready_queue, key=lambda p: (p.remaining_burst, p.pid))
        ready_queue.remove(best)
        return best

    def should_preempt(self, slice_used: int) -> bool:  # noqa: ARG002
        """Never preempt."""
        return False

    def __repr__(self) -> str:
        """Return a debug-friendly representation."""
        return "ShortestJobFirstPolicy()"


class Scheduler:
    """The CPU scheduler — manages processes, the ready queue, and the CPU.

    The scheduler does not *decide* the ordering — that's the policy's
    job.  The scheduler orchestrates: it validates states, calls the
    policy, tracks which process owns the CPU, and keeps the clock.
    """

    def __init__(self, *, policy: SchedulingPolicy, logger: Logger | None = None) -> None:
        """Create a scheduler with the given scheduling policy.

        Args:
            policy: The algorithm that determines dispatch order.
            logger: Optional event log for lifecycle events.

        """
        self._policy = policy
        self._logger = logger
        self._processes: dict[int, Process] = {}
        self._ready_queue: deque[Process] = deque()
        self._current: Process | None = None
        self._slice_used = 0
        self._tick = 0
        self._last_pid = 0
        self._context_switches = 0

    # -- Read-only views ------------------------------------------------------

    @property
    def policy(self) -> SchedulingPolicy:
        """Return the current scheduling policy."""
        return self._policy

    @property
    def tick(self) -> int:
        """Return the number of ticks simulated so far."""
        return self._tick

    @property
    def current(self) -> Process | None:
        """Return the process holding the CPU, or None if idle."""
        return self._current

    @property
    def slice_used(self) -> int:
        """Return the ticks the current process has run in this slice."""
        return self._slice_used

    @property
    def context_switches(self) -> int:
        """Return the total number of dispatches."""
        return self._context_switches

    @property
    def ready_count(self) -> int:
        """Return the number of processes in the ready queue."""
        return len(self._ready_queue)

    @property
    def ready_processes(self) -> list[Process]:
        """Return a snapshot of the ready queue as a list."""
        return list(self._ready_queue)

    @property
    def processes(self) -> list[Process]:
        """Return every process ever created, in PID order."""
        return [self._processes[pid] for pid in sorted(self._processes)]

    @property
    def running_count(self) -> int:
        """Return how many processes are in the RUNNING state (0 or 1)."""
        return sum(1 for p in self._processes.values() if p.state is ProcessState.RUNNING)

    def process(self, pid: int) -> Process | None:
        """Return the process with *pid*, or None if unknown."""
        return self._processes.get(pid)

    # -- Process lifecycle ----------------------------------------------------

    def create_process(
        self,
        burst: int,
        page_count: int = 4,
        trace: Sequence[int] = (),
    ) -> int:
        """Create a process in the NEW state and return its PID.

        The process is not schedulable until ``admit()`` is called.

        Args:
            burst: Total CPU ticks required (must be positive).
            page_count: Virtual pages addressable by the process.
            trace: Optional page reference trace.

        Returns:
            The newly assigned PID.

        Raises:
            InvalidArgumentError: If burst or page_count is invalid.

        """
        process = Process(
            pid=self._last_pid + 1,
            burst=burst,
            arrival_tick=self._tick,
            page_count=page_count,
            trace=trace,
        )
        self._last_pid = process.pid
        self._processes[process.pid] = process
        self._log(
            LogLevel.INFO,
            f"CREATED pid={process.pid} burst={burst} pages={page_count}",
        )
        return process.pid

    def admit(self, pid: int) -> bool:
        """Move a NEW process to READY and append it to the ready queue.

        Returns:
            True if the process was admitted, False if the PID is unknown
            or the process was already admitted.

        """
        process = self._processes.get(pid)
        if process is None or process.state is not ProcessState.NEW:
            return False
        process.admit()
        self._ready_queue.append(process)
        self._log(LogLevel.DEBUG, f"ADMIT pid={pid}")
        return True

    def terminate(self, pid: int) -> bool:
        """Kill a process regardless of its current state.

        Removes it from the ready queue and, if it holds the CPU, frees
        the CPU and resets the slice counter.

        Returns:
            True if the process was killed, False if the PID is unknown or
            the process had already terminated.

        """
        process = self._processes.get(pid)
        if process is None or process.state is ProcessState.TERMINATED:
            return False
        if process in self._ready_queue:
            self._ready_queue.remove(process)
        if self._current is process:
            self._current = None
            self._slice_used = 0
        process.force_terminate(tick=self._tick)
        self._log(LogLevel.WARNING, f"KILLED pid={pid}")
        return True

    def set_policy(self, policy: SchedulingPolicy) -> None:
        """Switch the scheduling algorithm.

        Slice accounting is reset and the CPU is released.  The process
        that was running goes back to READY at the tail of the queue so
        the new policy can consider it on the next dispatch.
        """
        if self._current is not None:
            self._current.preempt()
            self._ready_queue.append(self._current)
            self._current = None
        self._slice_used = 0
        self._policy = policy
        self._log(LogLevel.INFO, f"POLICY {policy!r}")

    # -- The clock ------------------------------------------------------------

    def advance_one_tick(self) -> int | None:
        """Simulate one tick and return the PID that ran, or None if idle.

        Steps, in order:
            1. If the CPU is idle, dispatch a READY process.
            2. Every READY process accrues one tick of waiting time.
            3. The running process executes one unit of work; it may
               finish or, under a time-sliced policy, be preempted.
            4. The tick counter advances.
        """
        if self._current is None:
            self._dispatch()

        for process in self._ready_queue:
            process.accrue_wait()

        ran: int | None = None
        if self._current is not None:
            process = self._current
            ran = process.pid
            remaining = process.execute_tick()
            self._log(LogLevel.DEBUG, f"RUN pid={ran} rem={remaining}")
            if remaining <= 0:
                process.finish(tick=self._tick + 1)
                self._log(LogLevel.INFO, f"EXIT pid={ran}")
                self._current = None
                self._slice_used = 0
            else:
                self._slice_used += 1
                if self._policy.should_preempt(self._slice_used):
                    process.preempt()
                    self._ready_queue.append(process)
                    self._log(LogLevel.DEBUG, f"PREEMPT pid={ran}")
                    self._current = None
                    self._slice_used = 0

        self._tick += 1
        return ran

    def run_ticks(self, n: int) -> list[int | None]:
        """Advance *n* ticks and return who ran on each one."""
        return [self.advance_one_tick() for _ in range(n)]

    # -- Private helpers ------------------------------------------------------

    def _dispatch(self) -> None:
        """Give the CPU to the policy's choice, if any process is READY."""
        process = self._policy.select(self._ready_queue)
        if process is None:
            return
        process.dispatch(tick=self._tick)
        self._current = process
        self._slice_used = 0
        self._context_switches += 1
        self._log(LogLevel.INFO, f"SCHEDULE pid={process.pid}")

    def _log(self, level: LogLevel, message: str) -> None:
        if self._logger is not None:
            self._logger.log(level, message, source="scheduler", tick=self._tick)

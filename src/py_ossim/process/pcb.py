"""Process and Process Control Block (PCB).

A process is a program in execution.  The simulator tracks each one via
a PCB holding its PID, state, CPU burst accounting, timing stamps, and
the virtual pages it touches.

Processes follow a strict state machine — each transition method
(admit, dispatch, preempt, finish) enforces that the process is in the
correct source state before moving it.  ``force_terminate`` is the kill
path and works from any state except TERMINATED.

State machine::

    NEW → READY ⇄ RUNNING → TERMINATED

    force_terminate:  NEW | READY | RUNNING | BLOCKED → TERMINATED

BLOCKED is part of the classic five-state model and is kept in the
enum, but the simulator has no I/O model, so nothing ever enters it.
"""

from __future__ import annotations

from enum import StrEnum
from typing import TYPE_CHECKING

from py_ossim.errors import InvalidArgumentError

if TYPE_CHECKING:
    from collections.abc import Sequence


class ProcessState(StrEnum):
    """Lifecycle states of a process.

    - NEW: just created, not yet admitted to the scheduler.
    - READY: waiting in the ready queue for CPU time.
    - RUNNING: currently executing on the CPU.
    - BLOCKED: waiting on an event (unused by the simulator).
    - TERMINATED: burst exhausted or killed; never runs again.
    """

    NEW = "new"
    READY = "ready"
    RUNNING = "running"
    BLOCKED = "blocked"
    TERMINATED = "terminated"


class Process:
    """A simulated process (the Process Control Block).

    PIDs are handed out by the owning ``Scheduler`` rather than a
    module-level counter, so two independent simulations never share a
    PID sequence.

    State transitions are enforced: calling dispatch() on a NEW process
    raises RuntimeError, because the scheduler must admit it first.
    """

    def __init__(
        self,
        *,
        pid: int,
        burst: int,
        arrival_tick: int = 0,
        page_count: int = 4,
        trace: Sequence[int] = (),
    ) -> None:
        """Create a new process in the NEW state.

        Args:
            pid: Unique process identifier (assigned by the scheduler).
            burst: Total CPU ticks the process needs to complete.
            arrival_tick: Scheduler tick at which the process was created.
            page_count: Number of virtual pages the process can address.
            trace: Page numbers to touch on successive ticks, replayed
                cyclically.  Empty means "no trace".

        Raises:
            InvalidArgumentError: If burst or page_count is not positive.

        """
        if burst <= 0:
            msg = f"Burst must be positive, got {burst}"
            raise InvalidArgumentError(msg)
        if page_count < 1:
            msg = f"Page count must be at least 1, got {page_count}"
            raise InvalidArgumentError(msg)

        self._pid = pid
        self._state = ProcessState.NEW
        self._remaining_burst = burst
        self._total_burst = burst
        self._arrival_tick = arrival_tick
        self._start_tick: int | None = None
        self._finish_tick: int | None = None
        self._waiting_ticks = 0
        self._page_count = page_count
        self._trace: tuple[int, ...] = tuple(trace)
        self._trace_pos = 0
        self._page_faults = 0

    @property
    def pid(self) -> int:
        """Return the unique process identifier."""
        return self._pid

    @property
    def state(self) -> ProcessState:
        """Return the current process state."""
        return self._state

    @property
    def remaining_burst(self) -> int:
        """Return the CPU ticks still needed to finish."""
        return self._remaining_burst

    @property
    def total_burst(self) -> int:
        """Return the CPU ticks requested at creation (immutable)."""
        return self._total_burst

    @property
    def arrival_tick(self) -> int:
        """Return the tick at which the process was created."""
        return self._arrival_tick

    @property
    def start_tick(self) -> int | None:
        """Return the tick of first dispatch, or None if never dispatched."""
        return self._start_tick

    @property
    def finish_tick(self) -> int | None:
        """Return the tick of termination, or None if still alive."""
        return self._finish_tick

    @property
    def waiting_ticks(self) -> int:
        """Return the number of ticks spent READY but not running."""
        return self._waiting_ticks

    @property
    def page_count(self) -> int:
        """Return the size of the virtual address space in pages."""
        return self._page_count

    @property
    def reference_trace(self) -> tuple[int, ...]:
        """Return the page reference trace (may be empty)."""
        return self._trace

    @property
    def trace_position(self) -> int:
        """Return the index of the next trace entry to replay."""
        return self._trace_pos

    @property
    def page_fault_count(self) -> int:
        """Return the number of page faults charged to this process."""
        return self._page_faults

    @property
    def turnaround_ticks(self) -> int | None:
        """Return finish − arrival, or None if the process has not finished."""
        if self._finish_tick is None:
            return None
        return self._finish_tick - self._arrival_tick

    @property
    def response_ticks(self) -> int | None:
        """Return start − arrival, or None if the process never ran."""
        if self._start_tick is None:
            return None
        return self._start_tick - self._arrival_tick

    def _transition(self, action: str, expected: ProcessState, target: ProcessState) -> None:
        """Enforce a state transition.

        Raises:
            RuntimeError: If the process is not in the expected state.

        """
        if self._state is not expected:
            msg = f"Cannot {action}: process {self._pid} is {self._state}, expected {expected}"
            raise RuntimeError(msg)
        self._state = target

    def admit(self) -> None:
        """Transition NEW → READY."""
        self._transition("admit", ProcessState.NEW, ProcessState.READY)

    def dispatch(self, *, tick: int) -> None:
        """Transition READY → RUNNING, stamping the first-dispatch tick."""
        self._transition("dispatch", ProcessState.READY, ProcessState.RUNNING)
        if self._start_tick is None:
            self._start_tick = tick

    def preempt(self) -> None:
        """Transition RUNNING → READY. Give the CPU back."""
        self._transition("preempt", ProcessState.RUNNING, ProcessState.READY)

    def finish(self, *, tick: int) -> None:
        """Transition RUNNING → TERMINATED once the burst is exhausted."""
        self._transition("finish", ProcessState.RUNNING, ProcessState.TERMINATED)
        self._finish_tick = tick

    def force_terminate(self, *, tick: int) -> None:
        """Kill the process from any live state.

        Raises:
            RuntimeError: If the process is already TERMINATED.

        """
        if self._state is ProcessState.TERMINATED:
            msg = f"Cannot force_terminate: process {self._pid} is already terminated"
            raise RuntimeError(msg)
        self._state = ProcessState.TERMINATED
        self._finish_tick = tick

    def execute_tick(self) -> int:
        """Consume one tick of CPU and return the remaining burst.

        Raises:
            RuntimeError: If the process is not running.

        """
        if self._state is not ProcessState.RUNNING:
            msg = f"Cannot execute: process {self._pid} is not running"
            raise RuntimeError(msg)
        self._remaining_burst -= 1
        return self._remaining_burst

    def accrue_wait(self) -> None:
        """Charge one tick of waiting time."""
        self._waiting_ticks += 1

    def next_trace_page(self) -> int | None:
        """Return the next page from the reference trace, or None if there is none.

        The cursor wraps back to the start after the last entry.  Entries
        outside ``[0, page_count)`` are reduced modulo ``page_count``.
        """
        if not self._trace:
            return None
        page = self._trace[self._trace_pos]
        self._trace_pos = (self._trace_pos + 1) % len(self._trace)
        return page % self._page_count

    def record_page_fault(self) -> None:
        """Charge one page fault to this process."""
        self._page_faults += 1

    def __repr__(self) -> str:
        """Return a debug-friendly representation."""
        return (
            f"Process(pid={self._pid}, state={self._state}, "
            f"remaining={self._remaining_burst}/{self._total_burst})"
        )

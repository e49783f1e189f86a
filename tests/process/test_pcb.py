"""Tests for the Process Control Block and its state machine.

The PCB enforces legal transitions (NEW → READY ⇄ RUNNING → TERMINATED),
tracks CPU burst accounting, and replays the page reference trace.
"""

import pytest

from py_ossim.errors import InvalidArgumentError
from py_ossim.process.pcb import Process, ProcessState


def _running(burst: int = 3, **kwargs: object) -> Process:
    """Create a process and move it to RUNNING."""
    process = Process(pid=1, burst=burst, **kwargs)  # type: ignore[arg-type]
    process.admit()
    process.dispatch(tick=0)
    return process


class TestProcessCreation:
    """Verify the initial state of a new process."""

    def test_starts_new(self) -> None:
        """A freshly created process is NEW."""
        process = Process(pid=1, burst=5)
        assert process.state is ProcessState.NEW

    def test_burst_fields(self) -> None:
        """Remaining and total burst both start at the requested burst."""
        burst = 5
        process = Process(pid=1, burst=burst)
        assert process.remaining_burst == burst
        assert process.total_burst == burst

    def test_timing_fields_unset(self) -> None:
        """Start and finish ticks are unset until the events happen."""
        process = Process(pid=1, burst=5, arrival_tick=3)
        expected_arrival = 3
        assert process.arrival_tick == expected_arrival
        assert process.start_tick is None
        assert process.finish_tick is None
        assert process.turnaround_ticks is None
        assert process.response_ticks is None

    def test_zero_burst_rejected(self) -> None:
        """A burst of zero is an invalid argument."""
        with pytest.raises(InvalidArgumentError, match="Burst"):
            Process(pid=1, burst=0)

    def test_negative_burst_rejected(self) -> None:
        """A negative burst is an invalid argument."""
        with pytest.raises(InvalidArgumentError):
            Process(pid=1, burst=-4)

    def test_zero_pages_rejected(self) -> None:
        """A process must address at least one page."""
        with pytest.raises(InvalidArgumentError, match="Page count"):
            Process(pid=1, burst=1, page_count=0)

    def test_invalid_argument_is_value_error(self) -> None:
        """InvalidArgumentError can be caught as ValueError."""
        with pytest.raises(ValueError, match="Burst"):
            Process(pid=1, burst=0)


class TestTransitions:
    """Verify the enforced state machine."""

    def test_admit(self) -> None:
        """NEW → READY."""
        process = Process(pid=1, burst=2)
        process.admit()
        assert process.state is ProcessState.READY

    def test_dispatch_sets_start_once(self) -> None:
        """The first dispatch stamps start_tick; later ones do not."""
        process = Process(pid=1, burst=5)
        process.admit()
        first = 4
        process.dispatch(tick=first)
        process.preempt()
        process.dispatch(tick=9)
        assert process.start_tick == first

    def test_dispatch_new_raises(self) -> None:
        """A NEW process must be admitted before dispatch."""
        process = Process(pid=1, burst=2)
        with pytest.raises(RuntimeError, match="Cannot dispatch"):
            process.dispatch(tick=0)

    def test_preempt_requires_running(self) -> None:
        """Only a RUNNING process can be preempted."""
        process = Process(pid=1, burst=2)
        process.admit()
        with pytest.raises(RuntimeError, match="Cannot preempt"):
            process.preempt()

    def test_finish_stamps_tick(self) -> None:
        """Finishing records the finish tick and turnaround."""
        process = _running(arrival_tick=2)
        finish = 7
        process.finish(tick=finish)
        assert process.state is ProcessState.TERMINATED
        assert process.finish_tick == finish
        expected_turnaround = 5
        assert process.turnaround_ticks == expected_turnaround

    def test_force_terminate_from_new(self) -> None:
        """Killing works even before admission."""
        process = Process(pid=1, burst=2)
        process.force_terminate(tick=0)
        assert process.state is ProcessState.TERMINATED

    def test_force_terminate_twice_raises(self) -> None:
        """A terminated process cannot be killed again."""
        process = Process(pid=1, burst=2)
        process.force_terminate(tick=0)
        with pytest.raises(RuntimeError, match="already terminated"):
            process.force_terminate(tick=1)


class TestExecution:
    """Verify burst accounting."""

    def test_execute_tick_decrements(self) -> None:
        """Each executed tick consumes one unit of burst."""
        process = _running(burst=3)
        expected_remaining = 2
        assert process.execute_tick() == expected_remaining
        assert process.remaining_burst == expected_remaining
        assert process.total_burst == expected_remaining + 1

    def test_execute_requires_running(self) -> None:
        """A READY process cannot execute."""
        process = Process(pid=1, burst=3)
        process.admit()
        with pytest.raises(RuntimeError, match="not running"):
            process.execute_tick()

    def test_accrue_wait(self) -> None:
        """Waiting time accumulates one tick at a time."""
        process = Process(pid=1, burst=3)
        process.accrue_wait()
        process.accrue_wait()
        expected_wait = 2
        assert process.waiting_ticks == expected_wait


class TestReferenceTrace:
    """Verify cyclic trace replay."""

    def test_no_trace_returns_none(self) -> None:
        """Without a trace there is no next page."""
        process = Process(pid=1, burst=3)
        assert process.next_trace_page() is None

    def test_trace_replays_cyclically(self) -> None:
        """After the last entry the trace starts over."""
        process = Process(pid=1, burst=3, page_count=4, trace=[0, 1, 2])
        pages = [process.next_trace_page() for _ in range(5)]
        assert pages == [0, 1, 2, 0, 1]

    def test_out_of_range_reduced_modulo(self) -> None:
        """Entries beyond the address space wrap around."""
        process = Process(pid=1, burst=3, page_count=4, trace=[5, 9])
        assert [process.next_trace_page() for _ in range(2)] == [1, 1]

    def test_negative_entry_lands_in_range(self) -> None:
        """Negative entries also land inside the address space."""
        process = Process(pid=1, burst=3, page_count=4, trace=[-1])
        expected_page = 3
        assert process.next_trace_page() == expected_page

    def test_trace_position_wraps(self) -> None:
        """The cursor points at the next entry and returns to 0 after the last."""
        process = Process(pid=1, burst=3, page_count=4, trace=[0, 1])
        assert process.trace_position == 0
        process.next_trace_page()
        assert process.trace_position == 1
        process.next_trace_page()
        assert process.trace_position == 0

    def test_trace_is_copied(self) -> None:
        """Mutating the caller's list does not change the trace."""
        trace = [1, 2]
        process = Process(pid=1, burst=3, trace=trace)
        trace.append(3)
        assert process.reference_trace == (1, 2)

    def test_page_faults_counted(self) -> None:
        """Page faults charged to the process accumulate."""
        process = Process(pid=1, burst=3)
        process.record_page_fault()
        assert process.page_fault_count == 1

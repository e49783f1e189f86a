"""Tests for the shell — the command interpreter.

The shell returns strings rather than printing, so every command can be
checked directly.  User mistakes come back as ``Error: ...`` text and
never raise.
"""

import pytest

from py_ossim.config import SimulatorConfig
from py_ossim.memory.replacement import LRUPolicy
from py_ossim.process.pcb import ProcessState
from py_ossim.process.scheduler import RoundRobinPolicy, ShortestJobFirstPolicy
from py_ossim.shell import Shell, parse_trace
from py_ossim.simulator import Simulator


def _shell(**kwargs: object) -> Shell:
    """Create a shell over a small simulator."""
    config = SimulatorConfig(total_frames=2, **kwargs)  # type: ignore[arg-type]
    return Shell(simulator=Simulator(config))


class TestParseTrace:
    """Verify trace parsing."""

    def test_commas_and_spaces(self) -> None:
        """Both separators are accepted."""
        assert parse_trace("0,1, 2 3") == [0, 1, 2, 3]

    def test_empty(self) -> None:
        """An empty string is an empty trace."""
        assert parse_trace("  ") == []

    def test_non_integer_raises(self) -> None:
        """Non-numeric entries raise ValueError."""
        with pytest.raises(ValueError, match="invalid literal"):
            parse_trace("1,x")


class TestDispatch:
    """Verify command lookup."""

    def test_empty_command(self) -> None:
        """Blank input produces no output."""
        assert _shell().execute("   ") == ""

    def test_unknown_command(self) -> None:
        """Unknown commands point the user at help."""
        assert _shell().execute("frobnicate") == "Unknown command: frobnicate. Type 'help'."

    def test_help_text_matches_help(self) -> None:
        """The help_text property is what help prints, and is not recorded."""
        shell = _shell()
        text = shell.help_text
        assert shell.execute("history") == "  1  history"
        assert shell.execute("help") == text

    def test_help_lists_commands(self) -> None:
        """Help mentions every public command."""
        shell = _shell()
        result = shell.execute("help")
        for name in shell.command_names:
            if name != "history":
                assert name in result

    def test_history(self) -> None:
        """History numbers previously entered commands."""
        shell = _shell()
        shell.execute("ps")
        shell.execute("tick")
        assert shell.execute("history") == "  1  ps\n  2  tick\n  3  history"


class TestNew:
    """Verify the new command."""

    def test_creates_process(self) -> None:
        """new reports the PID and the effective page count."""
        assert _shell().execute("new 5") == "[tick 0] CREATED pid=1 burst=5 pages=4"

    def test_with_pages_and_trace(self) -> None:
        """A trace may follow the page count."""
        shell = _shell()
        assert shell.execute("new 10 3 0,1,2,1") == "[tick 0] CREATED pid=1 burst=10 pages=3"
        process = shell.simulator.scheduler.process(1)
        assert process is not None
        assert process.reference_trace == (0, 1, 2, 1)
        assert process.state is ProcessState.READY

    def test_space_separated_trace(self) -> None:
        """Space-separated trace entries are joined back together."""
        shell = _shell()
        shell.execute("new 2 2 1 0")
        process = shell.simulator.scheduler.process(1)
        assert process is not None
        assert process.reference_trace == (1, 0)

    def test_usage(self) -> None:
        """new with no arguments prints usage."""
        assert _shell().execute("new").startswith("Usage: new")

    def test_non_integer(self) -> None:
        """Non-numeric arguments are rejected."""
        assert _shell().execute("new abc") == "Error: burst, npages and trace must be integers"

    def test_invalid_burst(self) -> None:
        """A zero burst is rejected without consuming a PID."""
        shell = _shell()
        assert shell.execute("new 0") == "Error: Burst must be positive, got 0"
        assert "pid=1" in shell.execute("new 1")


class TestPs:
    """Verify the process table."""

    def test_header_only(self) -> None:
        """An empty table still has its header."""
        assert _shell().execute("ps").startswith("PID    STATE")

    def test_rows(self) -> None:
        """Each process gets one row with its state."""
        shell = _shell()
        shell.execute("new 3")
        shell.execute("new 2")
        shell.execute("tick")
        lines = shell.execute("ps").splitlines()
        expected_lines = 3
        assert len(lines) == expected_lines
        assert lines[1].split()[:3] == ["1", "running", "2"]
        assert lines[2].split()[:2] == ["2", "ready"]


class TestTicks:
    """Verify tick and run."""

    def test_idle_tick(self) -> None:
        """tick with nothing to run reports IDLE."""
        assert _shell().execute("tick") == "[tick 0] IDLE"

    def test_tick_with_trace(self) -> None:
        """tick reports the page fault."""
        shell = _shell()
        shell.execute("new 2 4 3")
        assert shell.execute("tick") == "[tick 0] PAGE_FAULT pid=1 page=3 loaded in frame=0"

    def test_run(self) -> None:
        """run N prints one line per tick."""
        shell = _shell()
        shell.execute("new 2 4 0")
        result = shell.execute("run 3")
        assert result.splitlines() == [
            "[tick 0] PAGE_FAULT pid=1 page=0 loaded in frame=0",
            "[tick 1] HIT pid=1 page=0",
            "[tick 2] IDLE",
        ]

    def test_run_usage(self) -> None:
        """run without N prints usage."""
        assert _shell().execute("run") == "Usage: run N"

    def test_run_invalid(self) -> None:
        """Non-numeric and negative counts are errors."""
        shell = _shell()
        assert shell.execute("run x").startswith("Error: invalid tick count 'x'")
        assert shell.execute("run -2").startswith("Error: invalid tick count '-2'")
        assert shell.simulator.tick == 0


class TestKill:
    """Verify the kill command."""

    def test_kill(self) -> None:
        """Killing a live process reports the tick."""
        shell = _shell()
        shell.execute("new 5")
        shell.execute("tick")
        assert shell.execute("kill 1") == "[tick 1] KILLED pid=1"

    def test_kill_unknown(self) -> None:
        """Unknown PIDs are reported as not found."""
        assert _shell().execute("kill 42") == "Error: pid 42 not found"

    def test_kill_twice(self) -> None:
        """A dead process cannot be killed again."""
        shell = _shell()
        shell.execute("new 5")
        shell.execute("kill 1")
        assert shell.execute("kill 1") == "Error: pid 1 not found"

    def test_kill_invalid(self) -> None:
        """Non-numeric PIDs are rejected."""
        assert _shell().execute("kill me") == "Error: invalid PID 'me'"


class TestSetSched:
    """Verify scheduler switching."""

    def test_show_current(self) -> None:
        """With no argument the current policy is shown."""
        assert _shell().execute("set_sched") == "Current policy: RoundRobinPolicy(quantum=2)"

    def test_round_robin(self) -> None:
        """RR takes an optional quantum."""
        shell = _shell()
        assert shell.execute("set_sched rr 3") == "Scheduler set to RR quantum=3"
        policy = shell.simulator.scheduler.policy
        assert isinstance(policy, RoundRobinPolicy)
        expected_quantum = 3
        assert policy.quantum == expected_quantum

    def test_round_robin_default_quantum(self) -> None:
        """RR without a quantum uses 2."""
        assert _shell().execute("set_sched RR") == "Scheduler set to RR quantum=2"

    def test_round_robin_quantum_from_config(self) -> None:
        """RR without a quantum uses the configured one."""
        shell = _shell(quantum=5)
        assert shell.execute("set_sched RR") == "Scheduler set to RR quantum=5"

    def test_sjf(self) -> None:
        """SJF is non-preemptive."""
        shell = _shell()
        assert shell.execute("set_sched SJF") == "Scheduler set to SJF (non-preemptive)"
        assert isinstance(shell.simulator.scheduler.policy, ShortestJobFirstPolicy)

    def test_bad_quantum(self) -> None:
        """A zero quantum is rejected and the policy is unchanged."""
        shell = _shell()
        assert shell.execute("set_sched RR 0") == "Error: Quantum must be positive, got 0"
        assert shell.execute("set_sched RR q").startswith("Error:")
        assert isinstance(shell.simulator.scheduler.policy, RoundRobinPolicy)

    def test_unknown(self) -> None:
        """Unknown scheduler names are errors."""
        assert _shell().execute("set_sched MLFQ").startswith("Error: unknown scheduler")


class TestSetPagemode:
    """Verify page replacement switching."""

    def test_switch(self) -> None:
        """Switching keeps the pool size."""
        shell = _shell()
        assert shell.execute("set_pagemode lru") == "Page replacement = LRU"
        assert isinstance(shell.simulator.memory.policy, LRUPolicy)

    def test_switch_and_resize(self) -> None:
        """An optional frame count resizes memory."""
        shell = _shell()
        assert shell.execute("set_pagemode FIFO 5") == "Page replacement = FIFO frames=5"
        expected_capacity = 5
        assert shell.simulator.memory.capacity == expected_capacity

    def test_usage(self) -> None:
        """set_pagemode with no arguments prints usage."""
        assert _shell().execute("set_pagemode").startswith("Usage:")

    def test_unknown_policy(self) -> None:
        """Unknown policy names are errors."""
        assert _shell().execute("set_pagemode OPT") == "Error: Unknown page policy 'OPT'"

    def test_invalid_size(self) -> None:
        """A zero frame count is rejected and memory is unchanged."""
        shell = _shell()
        assert shell.execute("set_pagemode LRU 0").startswith("Error:")
        expected_capacity = 2
        assert shell.simulator.memory.capacity == expected_capacity


class TestReports:
    """Verify memstat, stats and log."""

    def test_memstat(self) -> None:
        """memstat shows counters and one line per frame."""
        shell = _shell()
        shell.execute("new 2 4 0")
        shell.execute("tick")
        lines = shell.execute("memstat").splitlines()
        assert lines[0] == "Memory stats at tick 1 (FIFO, 2 frames)"
        assert lines[1] == "Total page faults: 1 total replacements: 0 hits: 0"
        assert lines[3] == "0 : 1,0 (l@1 a@1)"
        assert lines[4] == "1 : <free>"

    def test_stats(self) -> None:
        """stats lists the summary keys."""
        result = _shell().execute("stats")
        assert "context_switches" in result
        assert "avg_turnaround    0.00" in result

    def test_log_empty(self) -> None:
        """A fresh simulator has nothing at INFO."""
        assert _shell().execute("log") == "No log entries."

    def test_log_default_level(self) -> None:
        """log shows INFO and above but hides DEBUG."""
        shell = _shell()
        shell.execute("new 1 4 0")
        shell.execute("tick")
        result = shell.execute("log")
        assert "CREATED pid=1" in result
        assert "PAGE_FAULT pid=1 page=0" in result
        assert "RUN pid=1" not in result
        assert "RUN pid=1" in shell.execute("log debug")

    def test_log_bad_level(self) -> None:
        """Unknown levels are errors."""
        assert _shell().execute("log loud") == "Error: unknown log level 'loud'"


class TestExit:
    """Verify the exit command."""

    def test_exit_returns_sentinel(self) -> None:
        """exit returns the sentinel and halts the shell."""
        shell = _shell()
        assert not shell.halted
        assert shell.execute("exit") == Shell.EXIT_SENTINEL
        assert shell.halted

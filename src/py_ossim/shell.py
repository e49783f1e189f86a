"""The shell — command interpreter for the simulator.

The shell reads a command string, parses it into a command name and
arguments, dispatches to the appropriate handler, and returns a string
result.

Design choices:
    - **Returns strings, not prints.**  This keeps the shell fully
      testable and separates concerns (the caller decides how to
      display output).
    - **Command dispatch via a dict.**  Adding a new command means
      writing a method and adding one dict entry.
    - **User errors never raise.**  Bad numbers, unknown PIDs, and
      invalid sizes come back as ``Error: ...`` strings.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from typing import TypeAlias

from py_ossim.config import make_replacement_policy
from py_ossim.errors import InvalidArgumentError
from py_ossim.logging import LogLevel
from py_ossim.process.scheduler import RoundRobinPolicy, ShortestJobFirstPolicy
from py_ossim.simulator import Simulator

# Type alias for a command handler: takes a list of args, returns output.
_Handler: TypeAlias = Callable[[list[str]], str]


_HELP = """\
Commands:
  new <burst> [npages] [trace]          create and admit a process
                                        e.g. new 10 4 0,1,2,1
  ps                                    list processes
  tick                                  advance 1 tick
  run N                                 advance N ticks
  kill PID                              terminate a process
  set_sched RR [quantum]                Round Robin
  set_sched SJF                         non-preemptive Shortest Job First
  set_pagemode FIFO|LRU [nframes]       replacement policy, optional resize
  memstat                               frames and paging counters
  stats                                 run summary
  log [debug|info|warning]              event log
  help                                  show this help
  exit                                  quit"""


def parse_trace(text: str) -> list[int]:
    """Parse a comma- or whitespace-separated list of page numbers.

    Raises:
        ValueError: If any token is not an integer.

    """
    return [int(token) for token in re.split(r"[,\s]+", text.strip()) if token]


class Shell:
    """Command interpreter bound to one simulator."""

    EXIT_SENTINEL = "__EXIT__"

    def __init__(self, *, simulator: Simulator | None = None) -> None:
        """Create a shell attached to *simulator* (a fresh one if None)."""
        self._sim = simulator if simulator is not None else Simulator()
        self._halted = False
        self._history: list[str] = []

        # Command name -> handler method.
        self._commands: dict[str, _Handler] = {
            "help": self._cmd_help,
            "new": self._cmd_new,
            "ps": self._cmd_ps,
            "tick": self._cmd_tick,
            "run": self._cmd_run,
            "kill": self._cmd_kill,
            "set_sched": self._cmd_set_sched,
            "set_pagemode": self._cmd_set_pagemode,
            "memstat": self._cmd_memstat,
            "stats": self._cmd_stats,
            "log": self._cmd_log,
            "history": self._cmd_history,
            "exit": self._cmd_exit,
        }

    @property
    def simulator(self) -> Simulator:
        """Return the simulator this shell drives."""
        return self._sim

    @property
    def halted(self) -> bool:
        """Return True once ``exit`` has been executed."""
        return self._halted

    @property
    def help_text(self) -> str:
        """Return the command summary shown by ``help``."""
        return _HELP

    @property
    def command_names(self) -> list[str]:
        """Return all command names, sorted."""
        return sorted(self._commands)

    def execute(self, command: str) -> str:
        """Parse and execute a single command line.

        Returns:
            The command output, an ``Error: ...`` message, or
            ``EXIT_SENTINEL`` for ``exit``.

        """
        stripped = command.strip()
        if not stripped:
            return ""
        self._history.append(stripped)

        parts = stripped.split()
        name, args = parts[0], parts[1:]
        handler = self._commands.get(name)
        if handler is None:
            return f"Unknown command: {name}. Type 'help'."
        return handler(args)

    # -- Command handlers ------------------------------------------------

    def _cmd_help(self, _args: list[str]) -> str:
        return _HELP

    def _cmd_new(self, args: list[str]) -> str:
        """Create and admit a process."""
        if not args:
            return "Usage: new <burst> [npages] [trace]"
        try:
            burst = int(args[0])
            pages = int(args[1]) if len(args) > 1 else None
            trace = parse_trace(" ".join(args[2:]))
        except ValueError:
            return "Error: burst, npages and trace must be integers"
        try:
            pid = self._sim.spawn(burst, pages, trace)
        except InvalidArgumentError as e:
            return f"Error: {e}"
        process = self._sim.scheduler.process(pid)
        assert process is not None  # noqa: S101
        return (
            f"[tick {self._sim.tick}] CREATED pid={pid} burst={burst} "
            f"pages={process.page_count}"
        )

    def _cmd_ps(self, _args: list[str]) -> str:
        """Show the process table."""
        lines = ["PID    STATE       BURST  PAGES  ARR    START  FIN    WAIT   PF"]
        for p in self._sim.scheduler.processes:
            start = "-" if p.start_tick is None else p.start_tick
            fin = "-" if p.finish_tick is None else p.finish_tick
            lines.append(
                f"{p.pid:<6} {p.state!s:<11} {p.remaining_burst:<6} {p.page_count:<6} "
                f"{p.arrival_tick:<6} {start!s:<6} {fin!s:<6} {p.waiting_ticks:<6} "
                f"{p.page_fault_count}"
            )
        return "\n".join(lines)

    def _cmd_tick(self, _args: list[str]) -> str:
        """Advance one tick."""
        return str(self._sim.step())

    def _cmd_run(self, args: list[str]) -> str:
        """Advance N ticks."""
        if not args:
            return "Usage: run N"
        try:
            n = int(args[0])
            reports = self._sim.run(n)
        except ValueError as e:
            return f"Error: invalid tick count '{args[0]}' ({e})"
        return "\n".join(str(r) for r in reports)

    def _cmd_kill(self, args: list[str]) -> str:
        """Terminate a process by PID."""
        if not args:
            return "Usage: kill PID"
        try:
            pid = int(args[0])
        except ValueError:
            return f"Error: invalid PID '{args[0]}'"
        if not self._sim.kill(pid):
            return f"Error: pid {pid} not found"
        return f"[tick {self._sim.tick}] KILLED pid={pid}"

    def _cmd_set_sched(self, args: list[str]) -> str:
        """Switch the CPU scheduling policy."""
        if not args:
            return f"Current policy: {self._sim.scheduler.policy!r}"
        match args[0].upper():
            case "RR":
                try:
                    quantum = int(args[1]) if len(args) > 1 else self._sim.config.quantum
                    policy = RoundRobinPolicy(quantum=quantum)
                except ValueError as e:
                    return f"Error: {e}"
                self._sim.set_scheduler(policy)
                return f"Scheduler set to RR quantum={quantum}"
            case "SJF":
                self._sim.set_scheduler(ShortestJobFirstPolicy())
                return "Scheduler set to SJF (non-preemptive)"
            case _:
                return f"Error: unknown scheduler '{args[0]}'. Use RR or SJF."

    def _cmd_set_pagemode(self, args: list[str]) -> str:
        """Switch the page replacement policy, optionally resizing memory."""
        if not args:
            return "Usage: set_pagemode FIFO|LRU [nframes]"
        try:
            policy = make_replacement_policy(args[0])
            capacity = int(args[1]) if len(args) > 1 else None
            self._sim.set_page_policy(policy, capacity=capacity)
        except ValueError as e:
            return f"Error: {e}"
        size = f" frames={capacity}" if capacity is not None else ""
        return f"Page replacement = {policy.name}{size}"

    def _cmd_memstat(self, _args: list[str]) -> str:
        """Show frames and paging counters."""
        memory = self._sim.memory
        lines = [
            f"Memory stats at tick {self._sim.tick} ({memory.policy.name}, "
            f"{memory.capacity} frames)",
            f"Total page faults: {memory.faults} total replacements: {memory.replacements} "
            f"hits: {memory.hits}",
            "Frames (id : pid,page,loaded_at,last_access):",
        ]
        lines.extend(str(frame) for frame in memory.snapshot())
        return "\n".join(lines)

    def _cmd_stats(self, _args: list[str]) -> str:
        """Show a run summary."""
        stats = self._sim.stats()
        return "\n".join(
            f"{key:<17} {value:.2f}" if isinstance(value, float) else f"{key:<17} {value}"
            for key, value in stats.items()
        )

    def _cmd_log(self, args: list[str]) -> str:
        """Show log entries at or above a level (INFO by default)."""
        level_name = args[0].upper() if args else "INFO"
        try:
            level = LogLevel[level_name]
        except KeyError:
            return f"Error: unknown log level '{args[0]}'"
        entries = self._sim.logger.filter(min_level=level)
        return "\n".join(str(e) for e in entries) if entries else "No log entries."

    def _cmd_history(self, _args: list[str]) -> str:
        lines = [f"  {i + 1}  {cmd}" for i, cmd in enumerate(self._history)]
        return "\n".join(lines)

    def _cmd_exit(self, _args: list[str]) -> str:
        """Stop accepting commands and signal the REPL to stop."""
        self._halted = True
        return self.EXIT_SENTINEL

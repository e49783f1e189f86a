"""Interactive REPL (Read-Eval-Print Loop) for the simulator.

The REPL is the terminal interface.  It builds a simulator (optionally
from a JSON config file named on the command line), creates a shell,
and enters the classic loop:

    1. **Read** — display a prompt and read user input.
    2. **Eval** — pass the command to ``shell.execute()``.
    3. **Print** — display the result.
    4. **Loop** — repeat until the shell returns the exit sentinel.

The shell is fully testable (returns strings, no I/O); the REPL is the
thin I/O wrapper that connects it to ``stdin``/``stdout``.
"""

import readline
import sys
from pathlib import Path

from py_ossim.config import SimulatorConfig, load_config
from py_ossim.errors import ConfigError
from py_ossim.shell import Shell
from py_ossim.simulator import Simulator

_BANNER_WIDTH = 38


def format_banner(config: SimulatorConfig) -> str:
    """Return the start-up banner describing the active configuration."""
    border = "=" * _BANNER_WIDTH
    scheduler = (
        f"RR quantum={config.quantum}" if config.scheduler == "rr" else "SJF (non-preemptive)"
    )
    return (
        f"\n  {border}\n         OS Simulator (RR/SJF + FIFO/LRU)\n  {border}\n\n"
        f"  Scheduler: {scheduler}\n"
        f"  Memory:    {config.total_frames} frames, {config.page_policy.upper()}\n"
        "\nType 'help' for commands, 'exit' to quit.\n"
    )


def build_prompt(shell: Shell) -> str:
    """Build the prompt, showing the current tick."""
    return f"[{shell.simulator.tick}] >> "


def _load(argv: list[str]) -> SimulatorConfig:
    """Return the config named by the first CLI argument, or the defaults."""
    if not argv:
        return SimulatorConfig()
    return load_config(Path(argv[0]))


def run(argv: list[str] | None = None) -> int:
    """Run the interactive REPL.

    This is the ``py-ossim`` console entry point.

    Returns:
        The process exit status.

    """
    try:
        config = _load(sys.argv[1:] if argv is None else argv)
    except (ConfigError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)  # noqa: T201
        return 1

    shell = Shell(simulator=Simulator(config))
    readline.parse_and_bind("tab: complete")
    print(format_banner(config))  # noqa: T201

    try:
        while True:
            try:
                command = input(build_prompt(shell))
            except EOFError:
                # Ctrl+D
                print()  # noqa: T201
                break

            result = shell.execute(command)
            if result == Shell.EXIT_SENTINEL:
                break
            if result:
                print(result)  # noqa: T201

    except KeyboardInterrupt:
        # Ctrl+C
        print("\nInterrupted.")  # noqa: T201

    print("Exiting...")  # noqa: T201
    return 0

"""Simulation event log.

The logger records structured entries for everything interesting that
happens during a run — process creation, dispatch, preemption, page
faults, evictions — stamped with the simulated tick they happened on.

Real operating systems keep a kernel log buffer (``dmesg``) for the same
purpose.  Ours is an in-memory, append-only list:

- **LogLevel** — severity levels ordered for filtering (DEBUG < ERROR).
- **LogEntry** — a single structured record (level, message, source, tick).
- **Logger** — an append-only log with filtering and clearing.

Design choices:
    - **IntEnum for levels** so they compare naturally with ``<``.
    - **Frozen dataclass for entries** — log records should be immutable.
    - **Filter returns a list, not a generator** — the log is typically
      small and callers usually want to iterate multiple times.
"""

from dataclasses import dataclass
from enum import IntEnum


class LogLevel(IntEnum):
    """Severity levels for log entries.

    Per-tick chatter (RUN, HIT) is DEBUG; lifecycle events are INFO;
    anything the user should notice (page faults, kills) is WARNING.
    """

    DEBUG = 0
    INFO = 1
    WARNING = 2
    ERROR = 3


@dataclass(frozen=True)
class LogEntry:
    """A single structured log record.

    Attributes:
        level: The severity of this event.
        message: A human-readable description of what happened.
        source: The component that generated the event ("scheduler", "memory").
        tick: The simulated tick the event belongs to.

    """

    level: LogLevel
    message: str
    source: str
    tick: int = 0

    def __str__(self) -> str:
        """Format as ``[tick N] source: message``."""
        return f"[tick {self.tick}] {self.source}: {self.message}"


class Logger:
    """Append-only log buffer with filtering."""

    def __init__(self) -> None:
        """Create an empty logger."""
        self._entries: list[LogEntry] = []

    @property
    def entries(self) -> list[LogEntry]:
        """Return all log entries in chronological order."""
        return list(self._entries)

    def log(
        self,
        level: LogLevel,
        message: str,
        *,
        source: str,
        tick: int = 0,
    ) -> None:
        """Append a new entry to the log.

        Args:
            level: Severity of the event.
            message: Human-readable event description.
            source: Component that generated the event.
            tick: Simulated tick of the event.

        """
        self._entries.append(LogEntry(level=level, message=message, source=source, tick=tick))

    def filter(
        self,
        *,
        min_level: LogLevel | None = None,
        source: str | None = None,
    ) -> list[LogEntry]:
        """Return entries matching the given criteria.

        Args:
            min_level: If set, only return entries at or above this level.
            source: If set, only return entries from this source.

        Returns:
            A filtered list of log entries.

        """
        result = self._entries
        if min_level is not None:
            result = [e for e in result if e.level >= min_level]
        if source is not None:
            result = [e for e in result if e.source == source]
        return result if result is not self._entries else list(result)

    def clear(self) -> None:
        """Remove all log entries."""
        self._entries.clear()

    def __len__(self) -> int:
        """Return the number of stored entries."""
        return len(self._entries)

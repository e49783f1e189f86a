"""Page reference sources — which page a process touches on each tick.

Every tick the running process makes exactly one memory reference.  The
scheduler and memory manager never invent page numbers themselves; the
driver asks a **reference source** instead.  Keeping randomness out of
the core means a run with fixed traces is fully reproducible.

Two sources ship:

- **TraceReferenceSource** — replays the process's own trace cyclically,
  falling back to another source for processes without a trace.
- **RandomReferenceSource** — uniform pages in ``[0, page_count)`` from a
  private, optionally seeded generator.
"""

from __future__ import annotations

import random
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from py_ossim.process.pcb import Process


class ReferenceSource(Protocol):
    """Interface for anything that can pick a page for a process."""

    def next_page(self, process: Process) -> int:
        """Return a page number in ``[0, process.page_count)``."""
        ...  # pragma: no cover


class RandomReferenceSource:
    """Pick pages uniformly at random.

    Each instance owns its own ``random.Random`` so seeding one
    simulation never disturbs another.
    """

    def __init__(self, *, seed: int | None = None) -> None:
        """Create a source; the same *seed* yields the same page stream."""
        self._rng = random.Random(seed)  # noqa: S311

    def next_page(self, process: Process) -> int:
        """Return a random page of *process*."""
        return self._rng.randrange(process.page_count)


class TraceReferenceSource:
    """Replay each process's reference trace, cyclically.

    Processes created without a trace are delegated to *fallback*.
    """

    def __init__(self, *, fallback: ReferenceSource | None = None) -> None:
        """Create a trace source.

        Args:
            fallback: Source for trace-less processes.  Defaults to an
                unseeded ``RandomReferenceSource``.

        """
        self._fallback = fallback if fallback is not None else RandomReferenceSource()

    def next_page(self, process: Process) -> int:
        """Return the next trace entry, or ask the fallback."""
        page = process.next_trace_page()
        if page is None:
            return self._fallback.next_page(process)
        return page

"""Simulator configuration — defaults plus an optional JSON file.

A configuration plays the role a kernel image plays at boot: it carries
the settings the simulator needs to initialise itself (scheduler policy,
quantum, frame count, page replacement policy, default process size,
random seed).  Every key is optional; missing keys take the defaults.

Example file::

    {"scheduler": "sjf", "total_frames": 4, "page_policy": "lru", "seed": 7}
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import TYPE_CHECKING

from py_ossim.errors import ConfigError, InvalidArgumentError
from py_ossim.memory.replacement import FIFOPolicy, LRUPolicy
from py_ossim.process.scheduler import RoundRobinPolicy, ShortestJobFirstPolicy

if TYPE_CHECKING:
    from pathlib import Path

    from py_ossim.memory.replacement import ReplacementPolicy
    from py_ossim.process.scheduler import SchedulingPolicy

SCHEDULERS = ("rr", "sjf")
PAGE_POLICIES = ("fifo", "lru")


@dataclass(frozen=True)
class SimulatorConfig:
    """Settings used to build a ``Simulator``.

    Attributes:
        scheduler: ``"rr"`` or ``"sjf"``.
        quantum: Round Robin time slice (ignored by SJF).
        total_frames: Size of the physical frame pool.
        page_policy: ``"fifo"`` or ``"lru"``.
        default_pages: Page count for processes created without one.
        seed: Seed for random page references (None = unseeded).

    """

    scheduler: str = "rr"
    quantum: int = 2
    total_frames: int = 8
    page_policy: str = "fifo"
    default_pages: int = 4
    seed: int | None = None

    def __post_init__(self) -> None:
        """Reject values no component would accept.

        Raises:
            InvalidArgumentError: On an unknown policy name or a
                non-positive size.

        """
        if self.scheduler not in SCHEDULERS:
            msg = f"Unknown scheduler '{self.scheduler}' (expected one of {SCHEDULERS})"
            raise InvalidArgumentError(msg)
        if self.page_policy not in PAGE_POLICIES:
            msg = f"Unknown page policy '{self.page_policy}' (expected one of {PAGE_POLICIES})"
            raise InvalidArgumentError(msg)
        for name in ("quantum", "total_frames", "default_pages"):
            value = getattr(self, name)
            if not _is_int(value):
                msg = f"{name} must be an integer, got {value!r}"
                raise InvalidArgumentError(msg)
            if value <= 0:
                msg = f"{name} must be positive, got {value}"
                raise InvalidArgumentError(msg)
        if self.seed is not None and not _is_int(self.seed):
            msg = f"seed must be an integer or null, got {self.seed!r}"
            raise InvalidArgumentError(msg)

    def scheduling_policy(self) -> SchedulingPolicy:
        """Build the configured scheduling policy."""
        if self.scheduler == "sjf":
            return ShortestJobFirstPolicy()
        return RoundRobinPolicy(quantum=self.quantum)

    def replacement_policy(self) -> ReplacementPolicy:
        """Build the configured page replacement policy."""
        return make_replacement_policy(self.page_policy)


def _is_int(value: object) -> bool:
    # JSON true/false load as bool, which is an int subclass.
    return isinstance(value, int) and not isinstance(value, bool)


def make_replacement_policy(name: str) -> ReplacementPolicy:
    """Return a fresh replacement policy for *name* (case-insensitive).

    Raises:
        InvalidArgumentError: If the name is not FIFO or LRU.

    """
    match name.lower():
        case "fifo":
            return FIFOPolicy()
        case "lru":
            return LRUPolicy()
        case _:
            msg = f"Unknown page policy '{name}'"
            raise InvalidArgumentError(msg)


def load_config(path: Path) -> SimulatorConfig:
    """Read a JSON configuration file.

    Raises:
        ConfigError: If the file cannot be read or is not a JSON object.
        InvalidArgumentError: If a value is out of range.

    """
    try:
        data = json.loads(path.read_text())
    except (OSError, json.JSONDecodeError) as e:
        msg = f"Cannot load config: {e}"
        raise ConfigError(msg) from e
    if not isinstance(data, dict):
        msg = f"Cannot load config: expected a JSON object in {path}"
        raise ConfigError(msg)

    defaults = SimulatorConfig()
    return SimulatorConfig(
        scheduler=str(data.get("scheduler", defaults.scheduler)).lower(),
        quantum=data.get("quantum", defaults.quantum),
        total_frames=data.get("total_frames", defaults.total_frames),
        page_policy=str(data.get("page_policy", defaults.page_policy)).lower(),
        default_pages=data.get("default_pages", defaults.default_pages),
        seed=data.get("seed", defaults.seed),
    )

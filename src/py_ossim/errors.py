"""Error types shared by the scheduler, memory manager, and driver.

Only two kinds of abnormal outcome exist in the simulator:

- **Invalid arguments** — a call that would create invalid state (a
  zero-length burst, a zero quantum, an empty frame pool).  These raise
  ``InvalidArgumentError`` at the offending call and are never clamped.
- **Unknown PIDs** — these are *not* exceptions.  Operations on an
  unknown PID report ``False`` (or ``None``) and do nothing, so a typo at
  the shell never brings the simulation down.
"""


class InvalidArgumentError(ValueError):
    """Raise when an argument would put a component into an invalid state."""


class ConfigError(RuntimeError):
    """Raise when a configuration file cannot be read or parsed."""

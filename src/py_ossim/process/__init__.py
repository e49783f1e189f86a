"""Process subsystem — PCB and CPU scheduling.

Re-exports public symbols so callers can write::

    from py_ossim.process import Process, Scheduler, RoundRobinPolicy
"""

from py_ossim.process.pcb import Process, ProcessState
from py_ossim.process.scheduler import (
    RoundRobinPolicy,
    Scheduler,
    SchedulingPolicy,
    ShortestJobFirstPolicy,
)

__all__ = [
    "Process",
    "ProcessState",
    "RoundRobinPolicy",
    "Scheduler",
    "SchedulingPolicy",
    "ShortestJobFirstPolicy",
]

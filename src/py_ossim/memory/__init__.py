"""Memory subsystem — frame pool, replacement policies, demand paging.

Re-exports public symbols so callers can write::

    from py_ossim.memory import MemoryManager, LRUPolicy
"""

from py_ossim.memory.frames import Frame, FrameSnapshot, FrameTable
from py_ossim.memory.manager import AccessOutcome, AccessResult, MemoryManager
from py_ossim.memory.replacement import FIFOPolicy, LRUPolicy, ReplacementPolicy

__all__ = [
    "AccessOutcome",
    "AccessResult",
    "FIFOPolicy",
    "Frame",
    "FrameSnapshot",
    "FrameTable",
    "LRUPolicy",
    "MemoryManager",
    "ReplacementPolicy",
]

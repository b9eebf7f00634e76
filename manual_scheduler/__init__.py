"""
Manual Task Scheduler
=====================

An interactive simulator of a single CPU where the player is the scheduler:
tasks are moved by hand from the ready queue onto the CPU while the simulator
advances a discrete clock, blocks tasks for I/O, and keeps score of CPU
efficiency and per-priority waiting time.
"""

from manual_scheduler.config import RandomPolicy, SimulationConfig
from manual_scheduler.metrics import Metrics, PriorityBreakdown
from manual_scheduler.simulator import Cadence, Simulator
from manual_scheduler.state import Snapshot
from manual_scheduler.tasks import (
    STARTING_WORKLOAD,
    Priority,
    Task,
    TaskSeed,
    TaskState,
    create_task,
)

__all__ = [
    "Cadence",
    "Metrics",
    "Priority",
    "PriorityBreakdown",
    "RandomPolicy",
    "STARTING_WORKLOAD",
    "SimulationConfig",
    "Simulator",
    "Snapshot",
    "Task",
    "TaskSeed",
    "TaskState",
    "create_task",
]

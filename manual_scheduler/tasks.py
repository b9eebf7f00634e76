"""
Task entity model.

A task moves through four states. The fields that only make sense in one
state (the I/O timer while blocked, the quantum counter while ready or running) live
on a per-state status record instead of being optional fields on the task.
"""

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Optional, Tuple, Union

from manual_scheduler.config import RandomPolicy


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class Priority(IntEnum):
    """Task priority; a higher value means a more urgent task."""

    LOW = 1
    MEDIUM = 2
    HIGH = 3

    @property
    def label(self) -> str:
        return self.name.capitalize()


class TaskState(Enum):
    READY = "ready"
    RUNNING = "running"
    BLOCKED = "blocked"
    TERMINATED = "terminated"


# ---------------------------------------------------------------------------
# Per-state status records
# ---------------------------------------------------------------------------


@dataclass
class Ready:
    quantum_used: int = 0
    state = TaskState.READY


@dataclass
class Running:
    quantum_used: int = 0
    state = TaskState.RUNNING


@dataclass
class Blocked:
    io_timer: int
    state = TaskState.BLOCKED


@dataclass
class Terminated:
    state = TaskState.TERMINATED


Status = Union[Ready, Running, Blocked, Terminated]


# ---------------------------------------------------------------------------
# Task
# ---------------------------------------------------------------------------


@dataclass
class Task:
    """
    A unit of simulated work.

    Attributes:
        id:             Stable identifier, never reused within a run.
        remaining_time: CPU ticks left before the task completes.
        priority:       Urgency level, fixed at creation.
        io_countdown:   CPU ticks left before the task must block for I/O.
        waiting_time:   Ticks spent in the ready queue.
        execution_time: Ticks elapsed while the task was ready, running or
                        blocked during CPU work and context switches. This is
                        time spent in the system, not CPU time alone.
        status:         Current state together with its state-only fields.
    """

    id: str
    remaining_time: int
    priority: Priority
    io_countdown: int
    waiting_time: int = 0
    execution_time: int = 0
    status: Status = field(default_factory=Ready)

    @property
    def state(self) -> TaskState:
        return self.status.state

    @property
    def io_timer(self) -> Optional[int]:
        """Ticks until I/O completes; ``None`` unless the task is blocked."""
        if isinstance(self.status, Blocked):
            return self.status.io_timer
        return None

    @property
    def quantum_used(self) -> Optional[int]:
        """Ticks used in the current running stretch; ``None`` while blocked or done."""
        if isinstance(self.status, (Ready, Running)):
            return self.status.quantum_used
        return None

    # Transitions ------------------------------------------------------

    def mark_ready(self) -> None:
        self.status = Ready()

    def mark_running(self) -> None:
        self.status = Running(quantum_used=0)

    def mark_blocked(self, io_timer: int) -> None:
        # The countdown stays parked at zero until the I/O completes.
        self.io_countdown = 0
        self.status = Blocked(io_timer=io_timer)

    def mark_terminated(self) -> None:
        self.remaining_time = 0
        self.status = Terminated()


@dataclass(frozen=True)
class TaskSeed:
    """Fixed attributes used to build a task for a deterministic workload."""

    id: str
    remaining_time: int
    priority: Priority
    io_countdown: int

    def to_task(self) -> Task:
        return Task(
            id=self.id,
            remaining_time=self.remaining_time,
            priority=Priority(self.priority),
            io_countdown=self.io_countdown,
        )


# The demo workload loaded on every restart.
STARTING_WORKLOAD: Tuple[TaskSeed, ...] = (
    TaskSeed("1", remaining_time=15, priority=Priority.HIGH, io_countdown=5),
    TaskSeed("2", remaining_time=13, priority=Priority.MEDIUM, io_countdown=7),
    TaskSeed("3", remaining_time=4, priority=Priority.MEDIUM, io_countdown=3),
    TaskSeed("4", remaining_time=20, priority=Priority.LOW, io_countdown=10),
    TaskSeed("5", remaining_time=7, priority=Priority.HIGH, io_countdown=3),
)


def create_task(task_id: str, policy: RandomPolicy) -> Task:
    """
    Create a ready task with randomized work, priority and I/O countdown.

    Args:
        task_id: Identifier for the new task.
        policy:  Source of randomness (see ``RandomPolicy``).

    Returns:
        A ``Task`` in the ready state with zeroed counters.
    """
    return Task(
        id=task_id,
        remaining_time=policy.remaining_time(),
        priority=Priority(policy.priority_level()),
        io_countdown=policy.io_countdown(),
    )

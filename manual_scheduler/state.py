"""Mutable simulation state and its read-only snapshot."""

import copy
from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Tuple

from manual_scheduler.config import RandomPolicy, SimulationConfig
from manual_scheduler.tasks import Task


# Feedback messages shown to the player.
FEEDBACK_DECISION_REQUIRED = "DECISION REQUIRED"
FEEDBACK_INTERRUPTED = "TASK INTERRUPTED - DECISION REQUIRED"
FEEDBACK_CPU_IDLE = "CPU IDLE"
FEEDBACK_WAITING_FOR_IO = "CPU IDLE - WAITING FOR I/O"

MAX_EVENTS = 200


def feedback_executing(task_id: str) -> str:
    return f"EXECUTING {task_id}"


@dataclass
class SimulationState:
    """
    Everything the simulator knows about one run.

    The four collections partition the tasks: a task lives in exactly one of
    them, and its status matches the collection.
    """

    config: SimulationConfig
    policy: RandomPolicy
    ready_queue: List[Task] = field(default_factory=list)
    running_task: Optional[Task] = None
    blocked_tasks: List[Task] = field(default_factory=list)
    terminated_tasks: List[Task] = field(default_factory=list)
    global_time: int = 0
    context_switch_time: int = 0
    cpu_execution_time: int = 0
    quantum: int = 5
    context_switch_cost: int = 1
    is_paused: bool = True
    is_executing: bool = False
    feedback: str = FEEDBACK_DECISION_REQUIRED
    tasks_created: int = 0
    events: List[str] = field(default_factory=list)

    @classmethod
    def fresh(cls, config: SimulationConfig, policy: RandomPolicy) -> "SimulationState":
        return cls(
            config=config,
            policy=policy,
            quantum=config.quantum,
            context_switch_cost=config.context_switch_cost,
        )

    def all_tasks(self) -> Iterator[Task]:
        """Iterate over every task in the system, whatever its state."""
        yield from self.ready_queue
        if self.running_task is not None:
            yield self.running_task
        yield from self.blocked_tasks
        yield from self.terminated_tasks

    def find_ready(self, task_id: str) -> Optional[Task]:
        for task in self.ready_queue:
            if task.id == task_id:
                return task
        return None

    def log(self, message: str) -> None:
        """Record a timestamped event, newest first."""
        self.events.insert(0, f"[{self.global_time:03d}] {message}")
        del self.events[MAX_EVENTS:]


@dataclass(frozen=True)
class Snapshot:
    """Immutable copy of the observable simulation state."""

    ready_queue: Tuple[Task, ...]
    running_task: Optional[Task]
    blocked_tasks: Tuple[Task, ...]
    terminated_tasks: Tuple[Task, ...]
    global_time: int
    context_switch_time: int
    cpu_execution_time: int
    quantum: int
    context_switch_cost: int
    is_paused: bool
    is_executing: bool
    feedback: str

    @classmethod
    def of(cls, state: SimulationState) -> "Snapshot":
        return cls(
            ready_queue=tuple(copy.deepcopy(state.ready_queue)),
            running_task=copy.deepcopy(state.running_task),
            blocked_tasks=tuple(copy.deepcopy(state.blocked_tasks)),
            terminated_tasks=tuple(copy.deepcopy(state.terminated_tasks)),
            global_time=state.global_time,
            context_switch_time=state.context_switch_time,
            cpu_execution_time=state.cpu_execution_time,
            quantum=state.quantum,
            context_switch_cost=state.context_switch_cost,
            is_paused=state.is_paused,
            is_executing=state.is_executing,
            feedback=state.feedback,
        )

    @property
    def task_count(self) -> int:
        running = 1 if self.running_task is not None else 0
        return len(self.ready_queue) + running + len(self.blocked_tasks) + len(self.terminated_tasks)

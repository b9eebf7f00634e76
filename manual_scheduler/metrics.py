"""
Performance metrics derived from the simulation state.

Everything here is a pure read of the current state and is recomputed on
every call; task counts are small enough that no caching is needed.

Definitions:
    Efficiency      E = CPU busy time / global time * 100.
    CPU idle time     = global time - CPU busy time - context switch time.
    Per-priority averages are taken over the tasks of that priority level
    (0 when a level has no tasks).
"""

from dataclasses import dataclass
from typing import Iterable

from manual_scheduler.state import SimulationState
from manual_scheduler.tasks import Priority, Task


@dataclass(frozen=True)
class PriorityBreakdown:
    """An average value for each priority level."""

    high: float = 0.0
    medium: float = 0.0
    low: float = 0.0

    def for_priority(self, priority: Priority) -> float:
        return getattr(self, priority.name.lower())

    @property
    def overall(self) -> float:
        """Unweighted mean of the three levels."""
        return (self.high + self.medium + self.low) / 3


@dataclass(frozen=True)
class Metrics:
    global_time: int
    context_switch_time: int
    cpu_execution_time: int
    cpu_idle_time: int
    efficiency: float
    avg_waiting_time_by_priority: PriorityBreakdown
    avg_execution_time_by_priority: PriorityBreakdown

    def share(self, portion: int) -> float:
        """Percentage of global time taken by ``portion`` ticks."""
        total = self.global_time or 1
        return portion / total * 100

    @property
    def running_share(self) -> float:
        return self.share(self.cpu_execution_time)

    @property
    def idle_share(self) -> float:
        return self.share(self.cpu_idle_time)

    @property
    def context_switch_share(self) -> float:
        return self.share(self.context_switch_time)


def _average_by_priority(tasks: Iterable[Task], attribute: str) -> PriorityBreakdown:
    tasks = list(tasks)
    averages = {}
    for priority in Priority:
        values = [getattr(task, attribute) for task in tasks if task.priority == priority]
        averages[priority.name.lower()] = sum(values) / len(values) if values else 0.0
    return PriorityBreakdown(**averages)


def calculate_efficiency(cpu_execution_time: int, global_time: int) -> float:
    """Percentage of global time the CPU spent executing, to 2 decimals."""
    if global_time <= 0:
        return 0.0
    return round(cpu_execution_time / global_time * 100, 2)


def calculate_metrics(state: SimulationState) -> Metrics:
    """Aggregate figures over the whole task population."""
    tasks = list(state.all_tasks())
    idle = max(0, state.global_time - state.cpu_execution_time - state.context_switch_time)
    return Metrics(
        global_time=state.global_time,
        context_switch_time=state.context_switch_time,
        cpu_execution_time=state.cpu_execution_time,
        cpu_idle_time=idle,
        efficiency=calculate_efficiency(state.cpu_execution_time, state.global_time),
        avg_waiting_time_by_priority=_average_by_priority(tasks, "waiting_time"),
        avg_execution_time_by_priority=_average_by_priority(tasks, "execution_time"),
    )


def priority_wait_metrics(state: SimulationState) -> PriorityBreakdown:
    """Average waiting time per priority, over the ready queue only."""
    return _average_by_priority(state.ready_queue, "waiting_time")

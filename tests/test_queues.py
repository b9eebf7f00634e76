from manual_scheduler import Priority, Simulator, TaskSeed, TaskState


def _ids(tasks) -> list:
    return [task.id for task in tasks]


def test_dispatch_from_restart(simulator: Simulator) -> None:
    assert simulator.dispatch("1") is True

    snap = simulator.snapshot()
    assert snap.global_time == 1
    assert snap.context_switch_time == 1
    assert snap.running_task.id == "1"
    assert snap.running_task.state is TaskState.RUNNING
    assert snap.running_task.quantum_used == 0
    assert _ids(snap.ready_queue) == ["2", "3", "4", "5"]
    assert snap.is_executing is True
    assert snap.is_paused is False
    assert snap.feedback == "EXECUTING 1"


def test_dispatch_charges_switch_cost_to_other_ready_tasks(simulator: Simulator) -> None:
    simulator.set_context_switch_cost(3)
    simulator.dispatch("4")

    snap = simulator.snapshot()
    assert snap.global_time == 3
    assert snap.context_switch_time == 3
    assert snap.cpu_execution_time == 0
    for task in snap.ready_queue:
        assert task.waiting_time == 3
        assert task.execution_time == 3
    assert snap.running_task.waiting_time == 0


def test_dispatch_with_zero_cost_takes_no_time(simulator: Simulator) -> None:
    simulator.set_context_switch_cost(0)
    simulator.dispatch("2")
    assert simulator.snapshot().global_time == 0


def test_dispatch_charges_blocked_tasks_without_moving_their_timer() -> None:
    sim = Simulator(seed=1)
    sim.restart([
        TaskSeed("A", remaining_time=10, priority=Priority.HIGH, io_countdown=1),
        TaskSeed("B", remaining_time=10, priority=Priority.LOW, io_countdown=5),
    ])
    sim.dispatch("A")
    sim.tick()
    blocked = sim.snapshot().blocked_tasks[0]
    assert blocked.id == "A"
    assert blocked.execution_time == 1

    sim.dispatch("B")

    blocked = sim.snapshot().blocked_tasks[0]
    assert blocked.execution_time == 2
    assert blocked.io_timer == 10


def test_dispatch_unknown_task_is_ignored(simulator: Simulator) -> None:
    before = simulator.snapshot()
    assert simulator.dispatch("does-not-exist") is False
    assert simulator.snapshot() == before


def test_dispatch_while_cpu_busy_leaves_state_unchanged(simulator: Simulator) -> None:
    simulator.dispatch("1")
    simulator.tick()
    before = simulator.snapshot()

    assert simulator.dispatch("2") is False
    assert simulator.dispatch("1") is False
    assert simulator.snapshot() == before


def test_interrupt_returns_task_to_back_of_ready(simulator: Simulator) -> None:
    simulator.dispatch("1")
    for _ in range(3):
        simulator.tick()
    assert simulator.snapshot().running_task.quantum_used == 3

    assert simulator.interrupt() is True

    snap = simulator.snapshot()
    assert snap.running_task is None
    interrupted = snap.ready_queue[-1]
    assert interrupted.id == "1"
    assert interrupted.state is TaskState.READY
    assert interrupted.quantum_used == 0
    assert interrupted.remaining_time == 12
    assert snap.is_paused is True
    assert snap.is_executing is False
    assert snap.feedback == "TASK INTERRUPTED - DECISION REQUIRED"


def test_interrupt_with_empty_cpu_is_ignored(simulator: Simulator) -> None:
    before = simulator.snapshot()
    assert simulator.interrupt() is False
    assert simulator.snapshot() == before


def test_redispatch_after_interrupt_starts_a_new_stretch(simulator: Simulator) -> None:
    simulator.dispatch("1")
    simulator.tick()
    simulator.tick()
    simulator.interrupt()
    simulator.dispatch("1")
    assert simulator.snapshot().running_task.quantum_used == 0


def test_create_task_allocates_fresh_ids(simulator: Simulator) -> None:
    task = simulator.create_task()
    assert task.id == "T6"
    assert simulator.tasks_created == 6
    assert _ids(simulator.snapshot().ready_queue)[-1] == "T6"
    assert simulator.create_task().id == "T7"


def test_restart_resets_everything(simulator: Simulator) -> None:
    simulator.set_context_switch_cost(4)
    simulator.dispatch("3")
    simulator.tick()
    simulator.create_task()

    simulator.restart()

    snap = simulator.snapshot()
    assert _ids(snap.ready_queue) == ["1", "2", "3", "4", "5"]
    assert snap.running_task is None
    assert snap.blocked_tasks == ()
    assert snap.terminated_tasks == ()
    assert snap.global_time == 0
    assert snap.context_switch_time == 0
    assert snap.cpu_execution_time == 0
    assert snap.context_switch_cost == 1
    assert snap.quantum == 5
    assert snap.is_paused is True
    assert snap.is_executing is False
    assert snap.feedback == "DECISION REQUIRED"
    assert simulator.tasks_created == 5


def test_interrupted_task_reports_a_reset_quantum(simulator: Simulator) -> None:
    simulator.dispatch("1")
    for _ in range(3):
        simulator.tick()
    simulator.interrupt()

    task = simulator.snapshot().ready_queue[-1]
    assert task.id == "1"
    assert task.state is TaskState.READY
    assert task.quantum_used == 0
    assert simulator.snapshot().is_paused is True

import random

import pytest

from manual_scheduler import Cadence, Priority, Simulator, TaskSeed, TaskState


def _check_invariants(sim: Simulator) -> None:
    snap = sim.snapshot()
    collections = {
        TaskState.READY: snap.ready_queue,
        TaskState.RUNNING: (snap.running_task,) if snap.running_task else (),
        TaskState.BLOCKED: snap.blocked_tasks,
        TaskState.TERMINATED: snap.terminated_tasks,
    }
    seen = []
    for state, tasks in collections.items():
        for task in tasks:
            assert task.state is state
            seen.append(task.id)
    assert len(seen) == len(set(seen))
    assert len(seen) == sim.tasks_created
    assert snap.task_count == sim.tasks_created
    for task in snap.terminated_tasks:
        assert task.remaining_time == 0
    for task in snap.ready_queue + snap.blocked_tasks:
        assert task.remaining_time > 0
    for task in snap.blocked_tasks:
        assert 0 < task.io_timer <= 10


def test_cadence_follows_the_state() -> None:
    sim = Simulator(seed=2)
    sim.restart([TaskSeed("A", remaining_time=2, priority=Priority.HIGH, io_countdown=1)])
    assert sim.cadence() is Cadence.WAIT

    sim.dispatch("A")
    assert sim.cadence() is Cadence.RUN

    assert sim.step() is Cadence.RUN
    assert sim.cadence() is Cadence.IDLE_IO

    for _ in range(9):
        assert sim.step() is Cadence.IDLE_IO
    assert sim.step() is Cadence.IDLE_IO
    assert sim.cadence() is Cadence.WAIT

    sim.dispatch("A")
    sim.step()
    assert sim.cadence() is Cadence.IDLE
    time_before = sim.snapshot().global_time
    assert sim.step() is Cadence.IDLE
    assert sim.snapshot().global_time == time_before + 1


def test_step_does_nothing_while_waiting(simulator: Simulator) -> None:
    before = simulator.snapshot()
    assert simulator.step() is Cadence.WAIT
    assert simulator.snapshot() == before


def test_interrupted_run_waits_for_player(simulator: Simulator) -> None:
    simulator.dispatch("2")
    simulator.interrupt()
    assert simulator.cadence() is Cadence.WAIT


def test_quantum_is_stored_but_never_enforced(simulator: Simulator) -> None:
    simulator.set_quantum(2)
    simulator.dispatch("4")
    for _ in range(5):
        simulator.tick()
    snap = simulator.snapshot()
    assert snap.quantum == 2
    assert snap.running_task.id == "4"
    assert snap.running_task.quantum_used == 5


def test_invalid_settings_raise_and_keep_previous_values(simulator: Simulator) -> None:
    with pytest.raises(ValueError):
        simulator.set_quantum(0)
    with pytest.raises(ValueError):
        simulator.set_context_switch_cost(-2)
    snap = simulator.snapshot()
    assert snap.quantum == 5
    assert snap.context_switch_cost == 1


def test_snapshot_is_a_copy(simulator: Simulator) -> None:
    snap = simulator.snapshot()
    snap.ready_queue[0].remaining_time = 999
    assert simulator.snapshot().ready_queue[0].remaining_time == 15


def test_event_log_is_newest_first(simulator: Simulator) -> None:
    simulator.dispatch("3")
    events = simulator.events()
    assert events[0] == "[001] Task 3 dispatched (context switch 1)"
    assert events[1] == "[000] Simulation restarted"


def test_scenario_restart_then_dispatch() -> None:
    sim = Simulator()
    sim.restart()
    sim.dispatch("1")
    snap = sim.snapshot()
    assert snap.global_time == snap.context_switch_cost == 1
    assert snap.running_task.id == "1"
    assert snap.running_task.quantum_used == 0
    assert len(snap.ready_queue) == 4


@pytest.mark.parametrize("seed", [0, 1, 2, 3, 4])
def test_invariants_hold_over_random_commands(seed: int) -> None:
    rng = random.Random(seed)
    sim = Simulator(seed=seed)
    sim.restart()
    previous_time = 0

    for _ in range(600):
        snap = sim.snapshot()
        roll = rng.random()
        if roll < 0.03:
            sim.create_task()
        elif roll < 0.15:
            candidates = [t.id for t in snap.ready_queue] + ["missing"]
            before = sim.snapshot()
            dispatched = sim.dispatch(rng.choice(candidates))
            if not dispatched:
                assert sim.snapshot() == before
        elif roll < 0.2:
            sim.interrupt()
        elif roll < 0.7:
            before = sim.snapshot().global_time
            if sim.tick():
                assert sim.snapshot().global_time == before + 1
        elif roll < 0.85:
            before = sim.snapshot().global_time
            if sim.advance_idle_tick():
                assert sim.snapshot().global_time == before + 1
        else:
            sim.step()

        _check_invariants(sim)
        now = sim.snapshot().global_time
        assert now >= previous_time
        previous_time = now


def test_configure_applies_nothing_when_one_value_is_invalid(simulator: Simulator) -> None:
    with pytest.raises(ValueError):
        simulator.configure(quantum=3, context_switch_cost=-1)
    with pytest.raises(ValueError):
        simulator.configure(quantum=0, context_switch_cost=2)
    snap = simulator.snapshot()
    assert snap.quantum == 5
    assert snap.context_switch_cost == 1

    simulator.configure(quantum=3, context_switch_cost=2)
    snap = simulator.snapshot()
    assert snap.quantum == 3
    assert snap.context_switch_cost == 2


def test_executing_flag_without_a_task_does_not_stall_io() -> None:
    sim = Simulator(seed=2)
    sim.restart([TaskSeed("A", remaining_time=5, priority=Priority.LOW, io_countdown=1)])
    sim.dispatch("A")
    sim.tick()
    sim.set_executing(True)

    assert sim.cadence() is Cadence.IDLE_IO
    assert sim.step() is Cadence.IDLE_IO
    assert sim.snapshot().blocked_tasks[0].io_timer == 9

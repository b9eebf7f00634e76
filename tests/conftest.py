import pytest

from manual_scheduler import Simulator


@pytest.fixture
def simulator() -> Simulator:
    sim = Simulator(seed=7)
    sim.restart()
    return sim

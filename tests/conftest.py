import random
from typing import Optional

import pytest

from sprout.helpers import (
    DataHelper,
    EventHelper,
    GardenHelper,
    LoggingHelper,
    PlantHelper,
    SimulationHelper,
)
from sprout.models import GameState

from .fakes import DATA_PATH, FakeAdvisor


@pytest.fixture
def logger():
    return LoggingHelper(None)


@pytest.fixture
def plant_helper(logger):
    data_loader = DataHelper(DATA_PATH, logger)
    data_loader.load_all_data()
    return PlantHelper(data_loader.plant_specs)


@pytest.fixture
def simulation_helper(plant_helper):
    return SimulationHelper(plant_helper)


@pytest.fixture
def event_helper():
    return EventHelper(rng=random.Random(7))


@pytest.fixture
def make_garden(plant_helper, simulation_helper, event_helper, logger):
    def _make(advisor=None, state: Optional[GameState] = None) -> GardenHelper:
        return GardenHelper(plant_helper, simulation_helper, event_helper, advisor or FakeAdvisor(), logger,
                            state=state)

    return _make

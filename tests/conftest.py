from concurrent.futures import Executor, Future

import pytest

from gorillas_ai.config import WORLD
from gorillas_ai.core.skyline import Building, Skyline, layout_buildings


class ImmediateExecutor(Executor):
    """Runs submitted work inline so model tasks finish within one tick."""

    def submit(self, fn, /, *args, **kwargs):
        future = Future()
        try:
            future.set_result(fn(*args, **kwargs))
        except Exception as exc:
            future.set_exception(exc)
        return future


def make_skyline(tile_widths, tile_heights, config=WORLD):
    return Skyline(layout_buildings(tile_widths, tile_heights, config), config=config)


@pytest.fixture
def flat_skyline():
    """Ten 4x4-tile buildings; every roof at y=592."""
    return make_skyline([4] * 10, [4] * 10)


@pytest.fixture
def clear_shot_skyline():
    """Flat roofs with building 7 centred at x=992, on the 70/1200 arc from building 0."""
    return make_skyline([4, 4, 4, 4, 4, 4, 5, 4, 4, 3], [4] * 10)


@pytest.fixture
def tower_skyline():
    """Flat roofs except a 12-tile tower at building 5 (x=640..768, roof y=336)."""
    return make_skyline([4] * 10, [4, 4, 4, 4, 4, 12, 4, 4, 4, 4])


@pytest.fixture
def scenario_skyline():
    """Building 0 at x=0 (160 wide, 200 tall); building 9 centred at x=1120."""
    buildings = [Building(x=0, y=WORLD.world_height - 200, width=160, height=200)]
    x = 160
    for width in (108,) * 8:
        buildings.append(Building(x=x, y=WORLD.world_height - 32, width=width, height=32))
        x += width
    buildings.append(Building(x=x, y=WORLD.world_height - 96, width=192, height=96))
    return Skyline(buildings)


@pytest.fixture
def immediate_executor():
    return ImmediateExecutor()

import dataclasses
import random

import pytest

from gorillas_ai.config import WORLD
from gorillas_ai.core.entities import Combatant
from gorillas_ai.core.skyline import Skyline, random_tile_widths
from gorillas_ai.utils import validate_world_config


@pytest.mark.parametrize("seed", range(20))
def test_generated_skyline_fills_the_world(seed):
    skyline = Skyline.generate(random.Random(seed))

    assert len(skyline) == WORLD.num_buildings
    assert sum(building.width for building in skyline) == WORLD.world_width
    assert skyline[0].x == 0
    for left, right in zip(skyline, list(skyline)[1:]):
        assert right.x == left.right
    for building in skyline:
        assert WORLD.min_building_tiles <= building.width // WORLD.tile_size <= WORLD.max_building_tiles
        assert WORLD.min_building_height_tiles <= building.height // WORLD.tile_size <= WORLD.max_building_height_tiles
        assert building.y == WORLD.world_height - building.height


def test_random_tile_widths_fill_the_skyline():
    widths = random_tile_widths(random.Random(7))

    assert sum(widths) == WORLD.skyline_tiles
    assert skyline_tiles_in_range(widths)


def skyline_tiles_in_range(widths):
    return all(WORLD.min_building_tiles <= width <= WORLD.max_building_tiles for width in widths)


def test_is_solid_inside_buildings_only(tower_skyline):
    assert tower_skyline.is_solid(700, 400)
    assert not tower_skyline.is_solid(700, 300)
    assert tower_skyline.is_solid(10, 700)
    assert not tower_skyline.is_solid(10, 500)


def test_points_off_world_are_not_solid(flat_skyline):
    assert not flat_skyline.is_solid(-1, 700)
    assert not flat_skyline.is_solid(WORLD.world_width + 1, 700)
    assert not flat_skyline.is_solid(100, WORLD.world_height + 1)


def test_carved_crater_removes_solid(flat_skyline):
    assert flat_skyline.is_solid(200, 620)

    flat_skyline.carve_crater(200, 620, 16)

    assert not flat_skyline.is_solid(200, 620)
    assert not flat_skyline.is_solid(210, 630)
    assert flat_skyline.is_solid(200, 660)


def test_building_at_uses_left_edges(flat_skyline):
    assert flat_skyline.building_at(0) is flat_skyline[0]
    assert flat_skyline.building_at(128) is flat_skyline[1]
    assert flat_skyline.building_at(127.5) is flat_skyline[0]
    assert flat_skyline.building_at(-3) is None


def test_combatant_stands_on_roof_centre(tower_skyline):
    combatant = Combatant(1)
    combatant.restart(tower_skyline, 5)

    assert combatant.x == 704
    assert combatant.y == 336 - combatant.height
    assert combatant.alive


def test_restart_on_new_platform_clears_shot_state(flat_skyline):
    combatant = Combatant(1)
    combatant.restart(flat_skyline, 0)
    combatant.correction.angle = 5
    combatant.throw(60, 900)

    combatant.restart(flat_skyline)
    assert combatant.correction.angle == 5
    assert combatant.shots_fired == 1

    combatant.restart(flat_skyline, 2)
    assert combatant.correction.angle == 0
    assert combatant.shots_fired == 0


def test_invalid_world_config_is_rejected():
    with pytest.raises(ValueError):
        validate_world_config(dataclasses.replace(WORLD, num_buildings=20))
    with pytest.raises(ValueError):
        validate_world_config(dataclasses.replace(WORLD, min_angle=85))
    validate_world_config(WORLD)

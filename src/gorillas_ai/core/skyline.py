"""Randomised building skyline for one level."""

from __future__ import annotations

import bisect
import random
from dataclasses import dataclass, field

from gorillas_ai.config import WORLD, WorldConfig
from gorillas_ai.runtime import Circle, Rect
from gorillas_ai.utils import validate_world_config


@dataclass(frozen=True)
class Building:
    x: int
    y: int
    width: int
    height: int

    @property
    def right(self) -> int:
        return self.x + self.width

    @property
    def center_x(self) -> float:
        return self.x + self.width / 2

    def rect(self) -> Rect:
        return Rect(self.x, self.y, self.width, self.height)


def random_tile_widths(rng: random.Random, config: WorldConfig = WORLD) -> list[int]:
    """Pick building widths in tiles that fill the skyline exactly."""
    widths = [
        rng.randint(config.min_building_tiles, config.max_building_tiles)
        for _ in range(config.num_buildings)
    ]
    total = sum(widths)
    while total != config.skyline_tiles:
        idx = rng.randint(0, config.num_buildings - 1)
        if total < config.skyline_tiles and widths[idx] < config.max_building_tiles:
            widths[idx] += 1
            total += 1
        elif total > config.skyline_tiles and widths[idx] > config.min_building_tiles:
            widths[idx] -= 1
            total -= 1
    return widths


def layout_buildings(
    tile_widths: list[int],
    tile_heights: list[int],
    config: WorldConfig = WORLD,
) -> list[Building]:
    buildings: list[Building] = []
    x = 0
    for width_tiles, height_tiles in zip(tile_widths, tile_heights):
        width = width_tiles * config.tile_size
        height = height_tiles * config.tile_size
        buildings.append(Building(x=x, y=config.world_height - height, width=width, height=height))
        x += width
    return buildings


@dataclass
class Skyline:
    """Ordered buildings plus the craters explosions have carved into them."""

    buildings: list[Building]
    config: WorldConfig = WORLD
    craters: list[Circle] = field(default_factory=list)

    def __post_init__(self) -> None:
        self._left_edges = [building.x for building in self.buildings]

    @classmethod
    def generate(cls, rng: random.Random | None = None, config: WorldConfig = WORLD) -> "Skyline":
        validate_world_config(config)
        rng = rng or random.Random()
        tile_heights = [
            rng.randint(config.min_building_height_tiles, config.max_building_height_tiles)
            for _ in range(config.num_buildings)
        ]
        tile_widths = random_tile_widths(rng, config)
        return cls(buildings=layout_buildings(tile_widths, tile_heights, config), config=config)

    def __len__(self) -> int:
        return len(self.buildings)

    def __getitem__(self, index: int) -> Building:
        return self.buildings[index]

    def __iter__(self):
        return iter(self.buildings)

    def tile_widths(self) -> list[int]:
        return [building.width // self.config.tile_size for building in self.buildings]

    def tile_heights(self) -> list[int]:
        return [building.height // self.config.tile_size for building in self.buildings]

    def is_solid(self, x: float, y: float) -> bool:
        """True when (x, y) is inside a building and not inside a crater."""
        if x < 0 or x > self.config.world_width or y < 0 or y > self.config.world_height:
            return False
        building = self.building_at(x)
        if building is None or not building.rect().contains_point(x, y):
            return False
        return not any(crater.contains_point(x, y) for crater in self.craters)

    def building_at(self, x: float) -> Building | None:
        index = bisect.bisect_right(self._left_edges, x) - 1
        if index < 0:
            return None
        return self.buildings[index]

    def carve_crater(self, x: float, y: float, radius: float) -> Circle:
        crater = Circle(float(x), float(y), float(radius))
        self.craters.append(crater)
        return crater

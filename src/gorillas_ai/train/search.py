"""Brute-force trajectory search that labels viewing geometry with a hitting shot."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Callable

from gorillas_ai.config import (
    MAX_SEARCH_RETRIES,
    POSITIONS_PER_LAYOUT,
    RECORDS_TO_COLLECT,
    SEARCH_FINE_DISTANCE_PX,
    SEARCH_FINE_TIME_STEP,
    SEARCH_MAX_TIME,
    SEARCH_PROJECTILE_SIZE,
    SEARCH_TIME_STEP,
    SEARCH_VELOCITY_FACTOR,
    SHOOTER_PLATFORMS,
    TARGET_PLATFORMS,
    WORLD,
    WorldConfig,
)
from gorillas_ai.core.ballistics import is_hit_obstacle, is_out_of_bounds, position_at
from gorillas_ai.core.entities import Combatant
from gorillas_ai.core.skyline import Skyline
from gorillas_ai.core.viewing import ViewingSample, compute_viewing_geometry
from gorillas_ai.errors import DataCollectionStalled
from gorillas_ai.runtime import Rect, Vec2, rect_from_center
from gorillas_ai.train.dataset import Dataset
from gorillas_ai.utils import median_by_index

LOGGER = logging.getLogger("gorillas_ai.search")


@dataclass(frozen=True)
class Trajectory:
    angle: int
    power: int
    points: tuple[tuple[float, float], ...]


class TrajectorySearch:
    """Scan the (angle, power) grid for shots that land on a target."""

    def __init__(
        self,
        config: WorldConfig = WORLD,
        time_step: float = SEARCH_TIME_STEP,
        fine_time_step: float = SEARCH_FINE_TIME_STEP,
        fine_distance: float = SEARCH_FINE_DISTANCE_PX,
        max_time: float = SEARCH_MAX_TIME,
        velocity_factor: float = SEARCH_VELOCITY_FACTOR,
        probe_size: int = SEARCH_PROJECTILE_SIZE,
    ):
        self.config = config
        self.time_step = time_step
        self.fine_time_step = fine_time_step
        self.fine_distance = fine_distance
        self.max_time = max_time
        self.velocity_factor = velocity_factor
        self.probe_size = probe_size

    def trace(
        self,
        shooter: Combatant,
        target_bounds: Rect,
        skyline: Skyline,
        angle: int,
        power: int,
    ) -> Trajectory | None:
        """Follow one shot; return it when it reaches the target before anything else."""
        fine_from_x = target_bounds.center_x - self.fine_distance
        points: list[tuple[float, float]] = []
        step = self.time_step
        t = 0.0
        while t < self.max_time:
            # The search launch offset is not stretched vertically.
            x, y = position_at(
                shooter.x,
                shooter.y,
                angle,
                power,
                t,
                self.config.gravity,
                offset_y_scale=1.0,
                velocity_factor=self.velocity_factor,
            )
            if x > fine_from_x:
                step = self.fine_time_step
            points.append((x, y))

            if is_hit_obstacle(x, y, self.config.projectile_radius, skyline) or is_out_of_bounds(
                x, y, self.config.projectile_size, self.config.projectile_size, self.config
            ):
                return None
            if rect_from_center(Vec2(x, y), self.probe_size).colliderect(target_bounds):
                return Trajectory(angle=angle, power=power, points=tuple(points))
            t += step
        return None

    def scan(self, shooter: Combatant, target: Combatant, skyline: Skyline) -> list[Trajectory]:
        target_bounds = target.bounds()
        hits: list[Trajectory] = []
        for angle in self.config.angle_range:
            for power in self.config.power_range:
                trajectory = self.trace(shooter, target_bounds, skyline, angle, power)
                if trajectory is not None:
                    hits.append(trajectory)
        return hits


@dataclass(frozen=True)
class CollectStep:
    """Outcome of processing one shooter/target placement."""

    shooter_platform: int
    target_platform: int
    sample: ViewingSample
    hits: tuple[Trajectory, ...]
    label: Trajectory | None


class DataCollector:
    """Walks shooter/target placements across fresh skylines, one record per placement."""

    def __init__(
        self,
        dataset: Dataset,
        config: WorldConfig = WORLD,
        rng: random.Random | None = None,
        search: TrajectorySearch | None = None,
        records_to_collect: int = RECORDS_TO_COLLECT,
        max_retries: int = MAX_SEARCH_RETRIES,
        skyline_factory: Callable[[random.Random], Skyline] | None = None,
        shooter: Combatant | None = None,
        target: Combatant | None = None,
    ):
        self.dataset = dataset
        self.config = config
        self.rng = rng or random.Random()
        self.search = search or TrajectorySearch(config)
        self.records_to_collect = int(records_to_collect)
        self.max_retries = int(max_retries)
        self.skyline_factory = skyline_factory or (lambda rng: Skyline.generate(rng, config))
        self.shooter = shooter or Combatant(1, config)
        self.target = target or Combatant(2, config)
        self.skyline: Skyline | None = None
        self.position_index = POSITIONS_PER_LAYOUT
        self.records_collected = 0
        self.retries = 0
        self.begin()

    def begin(self) -> None:
        self.position_index = POSITIONS_PER_LAYOUT
        self.records_collected = 0
        self.retries = 0
        self._shrink_combatants()

    @property
    def done(self) -> bool:
        return self.records_collected >= self.records_to_collect

    @property
    def progress(self) -> float:
        if self.records_to_collect <= 0:
            return 1.0
        return self.records_collected / self.records_to_collect

    def _shrink_combatants(self) -> None:
        # Tiny combatants give tighter, more accurate labels.
        self.shooter.set_scale(self.config.collect_scale_x, self.config.collect_scale_y)
        self.target.set_scale(self.config.collect_scale_x, self.config.collect_scale_y)

    def _enlarge_target(self) -> None:
        self.target.set_scale(
            self.config.collect_scale_x * 2,
            self.target.scale_y + self.config.collect_scale_y,
        )

    def current_platforms(self) -> tuple[int, int]:
        shooter_platform = SHOOTER_PLATFORMS[self.position_index % len(SHOOTER_PLATFORMS)]
        target_platform = TARGET_PLATFORMS[-1 - self.position_index // len(SHOOTER_PLATFORMS)]
        return shooter_platform, target_platform

    def step(self) -> CollectStep:
        if self.position_index >= POSITIONS_PER_LAYOUT:
            self.skyline = self.skyline_factory(self.rng)
            self.position_index = 0

        shooter_platform, target_platform = self.current_platforms()
        self.shooter.restart(self.skyline, shooter_platform)
        self.target.restart(self.skyline, target_platform)

        sample = compute_viewing_geometry(self.shooter, self.target, self.skyline)
        hits = self.search.scan(self.shooter, self.target, self.skyline)

        if not hits:
            self.retries += 1
            if self.retries > self.max_retries:
                raise DataCollectionStalled(shooter_platform, target_platform, self.retries)
            self._enlarge_target()
            LOGGER.debug(
                "No hit from platform %d to %d, retry %d with a larger target",
                shooter_platform,
                target_platform,
                self.retries,
            )
            return CollectStep(shooter_platform, target_platform, sample, (), None)

        label = median_by_index(hits)
        self.dataset.add(sample, label.angle, label.power)
        self.position_index += 1
        self.records_collected += 1
        self.retries = 0
        self.target.set_scale(self.config.collect_scale_x, self.config.collect_scale_y)
        return CollectStep(shooter_platform, target_platform, sample, tuple(hits), label)

    def collect(self, on_step: Callable[[CollectStep], None] | None = None) -> int:
        """Run until the record target is reached; returns the number of new records."""
        while not self.done:
            result = self.step()
            if on_step is not None:
                on_step(result)
        return self.records_collected

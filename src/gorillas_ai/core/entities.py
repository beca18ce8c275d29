"""Combatant and projectile entities shared by both match modes."""

from __future__ import annotations

import enum
from dataclasses import dataclass

from gorillas_ai.config import EXPLOSION_RADIUS_FACTOR, WORLD, WorldConfig
from gorillas_ai.core.ballistics import launch_offset, launch_velocity
from gorillas_ai.core.skyline import Skyline
from gorillas_ai.runtime import Rect, Vec2, rect_from_center, rect_from_top_center


@dataclass
class Action:
    angle: float = 0.0
    power: float = 0.0


@dataclass
class Correction(Action):
    """Accumulated adjustment on top of a predicted action."""


class ExplosionSource(enum.Enum):
    COMBATANT = "combatant"
    PROJECTILE = "projectile"


@dataclass(frozen=True)
class Explosion:
    source: ExplosionSource
    x: float
    y: float
    radius: float


class Projectile:
    """A thrown banana: dormant until launched, resolved by the match."""

    def __init__(self, config: WorldConfig = WORLD):
        self.config = config
        self.size = config.projectile_size
        self.radius = config.projectile_radius
        self.position = Vec2(0.0, 0.0)
        self.velocity = Vec2(0.0, 0.0)
        self.alive = False
        self.in_flight = False

    @property
    def x(self) -> float:
        return self.position.x

    @property
    def y(self) -> float:
        return self.position.y

    def restart(self, x: float, y: float) -> None:
        self.position = Vec2(float(x), float(y))
        self.velocity = Vec2(0.0, 0.0)
        self.alive = True
        self.in_flight = False

    def launch(self, angle_degrees: float, power: float) -> None:
        offset_x, offset_y = launch_offset(angle_degrees, power, self.config.launch_offset_y_scale)
        velocity_x, velocity_y = launch_velocity(angle_degrees, power)
        self.position = Vec2(self.position.x + offset_x, self.position.y + offset_y)
        self.velocity = Vec2(velocity_x, velocity_y)
        self.in_flight = True

    def update(self, dt: float) -> None:
        if not (self.alive and self.in_flight):
            return
        self.velocity = Vec2(self.velocity.x, self.velocity.y + self.config.gravity * dt)
        self.position = Vec2(self.position.x + self.velocity.x * dt, self.position.y + self.velocity.y * dt)

    def move_to(self, x: float, y: float) -> None:
        self.position = Vec2(float(x), float(y))

    def bounds(self) -> Rect:
        return rect_from_center(self.position, self.size)

    def explosion(self) -> Explosion:
        return Explosion(ExplosionSource.PROJECTILE, self.x, self.y, self.size * EXPLOSION_RADIUS_FACTOR)

    def kill(self) -> None:
        self.alive = False
        self.in_flight = False


class Combatant:
    """A gorilla standing on top of one building of the skyline."""

    def __init__(self, combatant_id: int, config: WorldConfig = WORLD):
        self.id = combatant_id
        self.config = config
        self.direction = 1 if combatant_id == 1 else -1
        self.projectile = Projectile(config)
        self.platform = 0
        self.position = Vec2(0.0, 0.0)
        self.scale_x = config.play_scale
        self.scale_y = config.play_scale
        self.alive = False
        self.action = Action()
        self.correction = Correction()
        self.shots_fired = 0
        self.launcher = Vec2(0.0, 0.0)

    @property
    def x(self) -> float:
        return self.position.x

    @property
    def y(self) -> float:
        return self.position.y

    @property
    def width(self) -> float:
        return self.config.combatant_width * self.scale_x

    @property
    def height(self) -> float:
        return self.config.combatant_height * self.scale_y

    def set_scale(self, scale_x: float, scale_y: float | None = None) -> None:
        self.scale_x = scale_x
        self.scale_y = scale_x if scale_y is None else scale_y

    def restart(self, skyline: Skyline, platform: int | None = None) -> None:
        """Stand on top of a building; a new platform also clears the shot state."""
        if platform is not None:
            self.platform = platform
            self.action = Action()
            self.correction = Correction()
            self.shots_fired = 0

        building = skyline[self.platform]
        self.position = Vec2(building.x + building.width / 2, building.y - self.height)
        self.launcher = self.position
        self.alive = True

    def bounds(self) -> Rect:
        return rect_from_top_center(self.position, self.width, self.height)

    def explosion(self) -> Explosion:
        return Explosion(
            ExplosionSource.COMBATANT,
            self.x,
            self.y + self.height / 2,
            self.width * EXPLOSION_RADIUS_FACTOR,
        )

    def throw(self, angle_degrees: float, power: float) -> None:
        self.projectile.restart(self.x, self.y)
        self.projectile.launch(angle_degrees, power)
        self.shots_fired += 1

    def kill(self) -> None:
        self.alive = False

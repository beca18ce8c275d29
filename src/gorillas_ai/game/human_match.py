"""Two-player hot-seat match driven by the pointer."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass

from gorillas_ai.config import LEFT_PLATFORM_RANGE, POINTER_POWER_FACTOR, RIGHT_PLATFORM_RANGE, WORLD, WorldConfig
from gorillas_ai.core.ballistics import is_hit_combatant, is_hit_obstacle, is_out_of_bounds
from gorillas_ai.core.entities import Combatant, Explosion
from gorillas_ai.core.skyline import Skyline
from gorillas_ai.game.status import MatchStatus
from gorillas_ai.runtime import Vec2, distance, pointer_angle_degrees

LOGGER = logging.getLogger("gorillas_ai.human")


@dataclass
class PointerState:
    """Pointer position in top-left world coordinates."""

    x: float = 0.0
    y: float = 0.0
    inside: bool = False
    pressed: bool = False

    @property
    def position(self) -> Vec2:
        return Vec2(self.x, self.y)


def pointer_shot(shooter: Combatant, pointer: Vec2) -> tuple[float, float]:
    """Angle and power of a shot released at ``pointer``."""
    return pointer_angle_degrees(shooter.position, pointer), distance(shooter.position, pointer) * POINTER_POWER_FACTOR


class HumanMatch:
    """Players take turns; press and release the pointer to throw."""

    def __init__(self, config: WorldConfig = WORLD, rng: random.Random | None = None):
        self.config = config
        self.rng = rng or random.Random()
        self.skyline = Skyline.generate(self.rng, config)
        self.left = Combatant(1, config)
        self.right = Combatant(2, config)
        self.shooter: Combatant | None = None
        self.status = MatchStatus.CREATE_LEVEL
        self.pointer = PointerState()
        self.can_launch = False
        self.explosions: list[Explosion] = []
        self.scores = {self.left.id: 0, self.right.id: 0}

    @property
    def aim_line(self) -> tuple[float, float, float, float] | None:
        if self.status != MatchStatus.AIM or self.shooter is None or not self.pointer.inside:
            return None
        return self.shooter.x, self.shooter.y, self.pointer.x, self.pointer.y

    def tick(self, dt: float, pointer: PointerState | None = None) -> None:
        if pointer is not None:
            self.pointer = pointer
        if self.status == MatchStatus.CREATE_LEVEL:
            self._create_level()
        elif self.status == MatchStatus.AIM:
            self._aim()
        elif self.status == MatchStatus.SHOT:
            self._shot(dt)

    def _other(self, combatant: Combatant | None) -> Combatant:
        return self.right if combatant is self.left else self.left

    def _create_level(self) -> None:
        self.skyline = Skyline.generate(self.rng, self.config)
        self.explosions = []
        for combatant, (low, high) in ((self.left, LEFT_PLATFORM_RANGE), (self.right, RIGHT_PLATFORM_RANGE)):
            combatant.projectile.kill()
            combatant.set_scale(self.config.play_scale)
            combatant.restart(self.skyline, self.rng.randint(low, high))
        self.shooter = self._other(self.shooter)
        self.shooter.projectile.restart(self.shooter.x, self.shooter.y)
        self.can_launch = False
        self.status = MatchStatus.AIM

    def _aim(self) -> None:
        shooter = self.shooter
        # Banana waits in the shooter's hand.
        shooter.projectile.restart(shooter.x, shooter.y)
        if self.pointer.pressed:
            self.can_launch = True
        elif self.can_launch:
            shooter.launcher = self.pointer.position
            angle, power = pointer_shot(shooter, shooter.launcher)
            shooter.throw(angle, power)
            LOGGER.debug("Combatant %d throws: angle=%.1f power=%.1f", shooter.id, angle, power)
            self.can_launch = False
            self.status = MatchStatus.SHOT

    def _shot(self, dt: float) -> None:
        self._resolve_projectile(self.left, self.right, dt)
        self._resolve_projectile(self.right, self.left, dt)

        if not (self.left.alive and self.right.alive):
            for combatant in (self.left, self.right):
                if combatant.alive:
                    self.scores[combatant.id] += 1
            self.status = MatchStatus.CREATE_LEVEL
        elif not (self.left.projectile.alive or self.right.projectile.alive):
            self.shooter = self._other(self.shooter)
            self.status = MatchStatus.AIM

    def _resolve_projectile(self, shooter: Combatant, target: Combatant, dt: float) -> None:
        projectile = shooter.projectile
        if not (projectile.alive and projectile.in_flight):
            return
        projectile.update(dt)

        if target.alive and is_hit_combatant(projectile.bounds(), target.bounds()):
            self._explode(target.explosion())
            projectile.kill()
            target.kill()
        elif self._is_hit_self(shooter):
            self._explode(shooter.explosion())
            projectile.kill()
            shooter.kill()
        elif is_hit_obstacle(projectile.x, projectile.y, projectile.radius, self.skyline):
            self._explode(projectile.explosion())
            projectile.kill()
        elif is_out_of_bounds(projectile.x, projectile.y, projectile.size, projectile.size, self.config):
            projectile.kill()

    @staticmethod
    def _is_hit_self(shooter: Combatant) -> bool:
        # Only a falling banana can come back down on its thrower.
        projectile = shooter.projectile
        return projectile.velocity.y > 0 and is_hit_combatant(projectile.bounds(), shooter.bounds())

    def _explode(self, explosion: Explosion) -> None:
        self.explosions.append(explosion)
        self.skyline.carve_crater(explosion.x, explosion.y, explosion.radius)

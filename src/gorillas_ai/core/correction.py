"""Iterative adjustment of a predicted shot after each miss."""

from __future__ import annotations

import enum
import logging

from gorillas_ai.config import (
    CORRECTION_ANGLE_DELTA,
    CORRECTION_POWER_DELTA,
    MAX_CORRECTION_SHOTS,
    SELF_PROXIMITY_PX,
    WORLD,
    WorldConfig,
)
from gorillas_ai.core.entities import Action, Combatant, Correction

LOGGER = logging.getLogger("gorillas_ai.correction")


class MissKind(enum.Enum):
    NEAR_SELF = "near_self"
    BEYOND_TARGET = "beyond_target"
    SHORT_OF_TARGET = "short_of_target"


def classify_miss(shooter: Combatant, target: Combatant, impact_x: float) -> MissKind:
    if abs(impact_x - shooter.x) < SELF_PROXIMITY_PX:
        return MissKind.NEAR_SELF
    if impact_x > target.x:
        return MissKind.BEYOND_TARGET
    return MissKind.SHORT_OF_TARGET


def update_correction(correction: Correction, direction: int, miss: MissKind) -> Correction:
    d_power = direction * CORRECTION_POWER_DELTA
    d_angle = direction * CORRECTION_ANGLE_DELTA

    if miss is MissKind.NEAR_SELF:
        correction.angle += d_angle * 2
        correction.power += d_power
    elif miss is MissKind.BEYOND_TARGET:
        correction.power -= d_power
        correction.angle -= d_angle
    else:
        correction.power += d_power
        correction.angle += d_angle
    return correction


def next_shot(action: Action, correction: Correction, direction: int, config: WorldConfig = WORLD) -> tuple[float, float]:
    """Clamp the corrected action into range, then point it at the opponent."""
    angle = config.clamp_angle(action.angle + correction.angle)
    power = config.clamp_power(action.power + correction.power)
    return angle * direction, power * direction


def charge_shot(shooter: Combatant) -> None:
    angle, power = next_shot(shooter.action, shooter.correction, shooter.direction, shooter.config)
    shooter.throw(angle, power)


def correct_shot(shooter: Combatant, target: Combatant, max_shots: int = MAX_CORRECTION_SHOTS) -> bool:
    """Correct a missed shot and throw again.

    Returns ``False`` (and retires the projectile) when either combatant is dead
    or the shooter has used up its shots for this level.
    """
    if not (shooter.alive and target.alive):
        shooter.projectile.kill()
        return False

    if shooter.shots_fired >= max_shots:
        LOGGER.info("Combatant %s gave up after %d shots", shooter.id, shooter.shots_fired)
        shooter.projectile.kill()
        return False

    miss = classify_miss(shooter, target, shooter.projectile.x)
    update_correction(shooter.correction, shooter.direction, miss)
    charge_shot(shooter)
    return True

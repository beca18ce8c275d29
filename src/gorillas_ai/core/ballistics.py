"""Constant-gravity projectile motion and collision predicates."""

from __future__ import annotations

import math

from gorillas_ai.config import WORLD, WorldConfig
from gorillas_ai.core.skyline import Skyline
from gorillas_ai.runtime import Rect, launch_angle_radians
from gorillas_ai.utils import sign


def launch_offset(angle_degrees: float, power: float, y_scale: float = WORLD.launch_offset_y_scale) -> tuple[float, float]:
    """Shift applied once at launch so the projectile clears the thrower's hand."""
    radians = launch_angle_radians(angle_degrees)
    start = sign(power) * 1
    return start * math.cos(radians), start * math.sin(radians) * y_scale


def launch_velocity(angle_degrees: float, power: float) -> tuple[float, float]:
    radians = launch_angle_radians(angle_degrees)
    return power * math.cos(radians), power * math.sin(radians)


def position_at(
    launch_x: float,
    launch_y: float,
    angle_degrees: float,
    power: float,
    t: float,
    gravity: float = WORLD.gravity,
    *,
    offset_y_scale: float = WORLD.launch_offset_y_scale,
    velocity_factor: float = 1.0,
) -> tuple[float, float]:
    """Closed-form projectile position ``t`` seconds after launch."""
    offset_x, offset_y = launch_offset(angle_degrees, power, offset_y_scale)
    velocity_x, velocity_y = launch_velocity(angle_degrees, power)
    x = launch_x + offset_x + velocity_x * velocity_factor * t
    y = launch_y + offset_y + velocity_y * velocity_factor * t + 0.5 * gravity * t * t
    return x, y


def apex_time(angle_degrees: float, power: float, gravity: float = WORLD.gravity) -> float:
    """Time at which the vertical velocity changes sign (0 for downward shots)."""
    _, velocity_y = launch_velocity(angle_degrees, power)
    return max(0.0, -velocity_y / gravity)


def is_out_of_bounds(x: float, y: float, width: float, height: float, config: WorldConfig = WORLD) -> bool:
    # Projectiles may fly above the top edge and fall back in.
    return x - width > config.world_width or x + width < 0 or y - height > config.world_height


def is_hit_obstacle(x: float, y: float, radius: float, skyline: Skyline) -> bool:
    """Sample the four diagonal corners of the projectile's bounding circle."""
    px = int(x)
    py = int(y)
    r = int(radius)
    corners = ((px - r, py - r), (px - r, py + r), (px + r, py - r), (px + r, py + r))
    return any(skyline.is_solid(cx, cy) for cx, cy in corners)


def is_hit_combatant(bounds_a: Rect, bounds_b: Rect) -> bool:
    return bounds_a.colliderect(bounds_b)

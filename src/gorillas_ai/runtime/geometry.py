"""Generic 2D geometry helpers for top-left game spaces."""

from __future__ import annotations

import math
from dataclasses import dataclass

from pyglet.math import Vec2


@dataclass(frozen=True)
class Rect:
    """Axis-aligned rectangle in top-left coordinate space."""

    left: float
    top: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.left + self.width

    @property
    def bottom(self) -> float:
        return self.top + self.height

    @property
    def center_x(self) -> float:
        return self.left + self.width / 2

    def colliderect(self, other: "Rect") -> bool:
        return not (
            self.right <= other.left
            or self.left >= other.right
            or self.bottom <= other.top
            or self.top >= other.bottom
        )

    def contains_point(self, x: float, y: float) -> bool:
        return self.left <= x < self.right and self.top <= y < self.bottom


@dataclass(frozen=True)
class Circle:
    x: float
    y: float
    radius: float

    def contains_point(self, x: float, y: float) -> bool:
        dx = x - self.x
        dy = y - self.y
        return dx * dx + dy * dy <= self.radius * self.radius


def launch_angle_radians(angle_degrees: float) -> float:
    """Map a screen-convention launch angle to radians in y-down space."""
    if angle_degrees > 180:
        angle_degrees -= 360
    return -math.radians(angle_degrees)


def heading_to_vector(angle_degrees: float) -> Vec2:
    radians = launch_angle_radians(angle_degrees)
    return Vec2(math.cos(radians), math.sin(radians))


def rect_from_center(position: Vec2, size: int | float) -> Rect:
    half = float(size) / 2.0
    return Rect(position.x - half, position.y - half, float(size), float(size))


def rect_from_top_center(position: Vec2, width: float, height: float) -> Rect:
    return Rect(position.x - width / 2.0, position.y, float(width), float(height))


def pointer_angle_degrees(origin: Vec2, pointer: Vec2) -> float:
    """Screen-convention angle in [0, 360) from origin towards a y-down pointer."""
    dx = pointer.x - origin.x
    dy = -(pointer.y - origin.y)
    angle = math.degrees(math.atan2(dy, dx))
    if angle < 0:
        angle += 360
    return angle


def distance(point_a: Vec2, point_b: Vec2) -> float:
    return math.hypot(point_b.x - point_a.x, point_b.y - point_a.y)

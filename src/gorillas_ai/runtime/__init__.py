"""Runtime helpers for Gorillas AI."""

from .geometry import (
    Circle,
    Rect,
    Vec2,
    distance,
    heading_to_vector,
    launch_angle_radians,
    pointer_angle_degrees,
    rect_from_center,
    rect_from_top_center,
)

__all__ = [
    "Circle",
    "Rect",
    "Vec2",
    "distance",
    "heading_to_vector",
    "launch_angle_radians",
    "pointer_angle_degrees",
    "rect_from_center",
    "rect_from_top_center",
]

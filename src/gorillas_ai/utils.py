"""Shared utility helpers."""

from __future__ import annotations

from typing import Sequence, TypeVar

from gorillas_ai.config import WorldConfig

T = TypeVar("T")


def sign(value: float) -> int:
    if value > 0:
        return 1
    if value < 0:
        return -1
    return 0


def median_by_index(items: Sequence[T]) -> T:
    """Return the middle element, favouring the upper one for even lengths."""
    if not items:
        raise ValueError("median_by_index() requires at least one item")
    return items[len(items) // 2]


def validate_world_config(config: WorldConfig) -> None:
    if config.num_buildings * config.min_building_tiles > config.skyline_tiles:
        raise ValueError(
            f"{config.num_buildings} buildings of at least {config.min_building_tiles} tiles "
            f"cannot fit into {config.skyline_tiles} tiles"
        )
    if config.num_buildings * config.max_building_tiles < config.skyline_tiles:
        raise ValueError(
            f"{config.num_buildings} buildings of at most {config.max_building_tiles} tiles "
            f"cannot fill {config.skyline_tiles} tiles"
        )
    if config.skyline_tiles * config.tile_size != config.world_width:
        raise ValueError(
            f"Skyline width {config.skyline_tiles * config.tile_size}px must match world width {config.world_width}px"
        )
    if config.max_building_height_tiles * config.tile_size >= config.world_height:
        raise ValueError("Tallest building must leave room above it for a combatant")
    if not (0 < config.min_angle < config.max_angle < 90):
        raise ValueError(f"Angle range must lie inside (0, 90), got [{config.min_angle}, {config.max_angle}]")
    if not (0 < config.min_power < config.max_power):
        raise ValueError(f"Power range must be positive, got [{config.min_power}, {config.max_power}]")
    if config.power_step <= 0:
        raise ValueError("power_step must be positive")

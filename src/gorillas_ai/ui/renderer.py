"""Arcade renderers for the skyline and both match modes."""

from __future__ import annotations

import arcade

from gorillas_ai.config import (
    COLOR_BANANA,
    COLOR_BUILDING,
    COLOR_BUILDING_WINDOW,
    COLOR_GORILLA_1,
    COLOR_GORILLA_2,
    COLOR_LAUNCHER_ACTIVE,
    COLOR_LAUNCHER_LAST,
    COLOR_TEXT_DARK,
    COLOR_TEXT_LIGHT,
    COLOR_TRAJECTORY,
    COLOR_VIEW_LINE_1,
    COLOR_VIEW_LINE_2,
    FONT_SIZE_BANNER,
    FONT_SIZE_STATUS,
    STATUS_BAR_Y,
)
from gorillas_ai.core.entities import Combatant
from gorillas_ai.runtime import heading_to_vector
from gorillas_ai.runtime.arcade_runtime import ArcadeWindowController, TextCache

WINDOW_INSET = 8
AIM_TICK_LENGTH = 24
UI_STATUS_SEPARATOR = "   |   "


class Renderer:
    """Draw the skyline, craters, combatants and projectiles of a match."""

    def __init__(self, match, title: str, enabled: bool, queue_input_events: bool = True):
        self.match = match
        self.config = match.config
        self.width = self.config.world_width
        self.height = self.config.world_height
        self.enabled = bool(enabled)
        self.window_controller = ArcadeWindowController(
            self.width,
            self.height,
            title,
            enabled=self.enabled,
            queue_input_events=queue_input_events,
            vsync=False,
        )
        self.window = self.window_controller.window
        self.text_cache = TextCache(max_entries=256)

    def close(self) -> None:
        self.window_controller.close()
        self.window = None

    def poll_events(self) -> None:
        self.window_controller.poll_events_or_raise()

    def draw_frame(self) -> None:
        if self.window_controller.window is None:
            return
        self.window_controller.clear(self.config.background_color)
        self._draw_skyline()
        self._draw_combatants()
        self._draw_overlay()
        self.window_controller.flip()

    def _draw_overlay(self) -> None:
        """Mode-specific lines and text on top of the world."""

    def _to_arcade(self, x: float, y: float) -> tuple[float, float]:
        return x, self.window_controller.to_arcade_y(y)

    def _draw_skyline(self) -> None:
        tile = self.config.tile_size
        for building in self.match.skyline:
            bottom = self.window_controller.top_left_to_bottom(building.y, building.height)
            arcade.draw_lbwh_rectangle_filled(building.x, bottom, building.width, building.height, COLOR_BUILDING)
            window_size = tile - 2 * WINDOW_INSET
            for dx in range(0, building.width, tile):
                for dy in range(0, building.height, tile):
                    arcade.draw_lbwh_rectangle_filled(
                        building.x + dx + WINDOW_INSET,
                        self.window_controller.top_left_to_bottom(building.y + dy + WINDOW_INSET, window_size),
                        window_size,
                        window_size,
                        COLOR_BUILDING_WINDOW,
                    )

        for crater in self.match.skyline.craters:
            x, y = self._to_arcade(crater.x, crater.y)
            arcade.draw_circle_filled(x, y, crater.radius, self.config.background_color)

    def _draw_combatants(self) -> None:
        for combatant, color in ((self.match.left, COLOR_GORILLA_1), (self.match.right, COLOR_GORILLA_2)):
            if combatant.alive:
                bounds = combatant.bounds()
                bottom = self.window_controller.top_left_to_bottom(bounds.top, bounds.height)
                arcade.draw_lbwh_rectangle_filled(bounds.left, bottom, bounds.width, bounds.height, color)
            projectile = combatant.projectile
            if projectile.alive:
                x, y = self._to_arcade(projectile.x, projectile.y)
                arcade.draw_circle_filled(x, y, projectile.radius, COLOR_BANANA)

    def _draw_line(self, x1: float, y1: float, x2: float, y2: float, color, line_width: float) -> None:
        start = self._to_arcade(x1, y1)
        end = self._to_arcade(x2, y2)
        arcade.draw_line(start[0], start[1], end[0], end[1], color, line_width)

    def _draw_text_row(self, segments: list[tuple[str, tuple[int, int, int]]], center_y: float) -> None:
        text_objects = []
        total_width = 0.0
        for text, color in segments:
            text_obj = self.text_cache.get_text(
                text=text,
                color=color,
                font_size=FONT_SIZE_STATUS,
                anchor_x="left",
                anchor_y="center",
            )
            text_objects.append(text_obj)
            total_width += float(text_obj.content_width)

        cursor_x = (self.width - total_width) / 2.0
        for text_obj in text_objects:
            text_obj.x = cursor_x
            text_obj.y = center_y
            text_obj.draw()
            cursor_x += float(text_obj.content_width)

    def _draw_banner(self, text: str, center_y: float, color) -> None:
        if not text:
            return
        text_obj = self.text_cache.get_text(
            text=text,
            color=color,
            font_size=FONT_SIZE_BANNER,
            anchor_x="center",
            anchor_y="center",
        )
        text_obj.x = self.width / 2.0
        text_obj.y = center_y
        text_obj.draw()


class AIMatchRenderer(Renderer):
    """Adds sightlines, search trajectories and dataset/training status."""

    def _draw_overlay(self) -> None:
        match = self.match
        sample = match.view_sample
        if sample is not None:
            if match.left.alive and sample.x1 >= 0:
                self._draw_line(match.left.x, match.left.y, sample.x1, sample.y1, COLOR_VIEW_LINE_1, 4)
            if match.right.alive and sample.x2 >= 0:
                self._draw_line(match.right.x, match.right.y, sample.x2, sample.y2, COLOR_VIEW_LINE_2, 4)

        for trajectory in match.trajectories:
            points = [self._to_arcade(x, y) for x, y in trajectory.points]
            if len(points) > 1:
                arcade.draw_line_strip(points, COLOR_TRAJECTORY, 1)

        for combatant in (match.left, match.right):
            self._draw_aim_tick(combatant)

        request_color = COLOR_TEXT_DARK if match.accepts_requests else COLOR_TEXT_LIGHT
        self._draw_text_row(
            [
                (match.dataset_text, COLOR_TEXT_DARK),
                (UI_STATUS_SEPARATOR, COLOR_TEXT_DARK),
                (match.training_text, COLOR_TEXT_DARK),
                (UI_STATUS_SEPARATOR, COLOR_TEXT_DARK),
                ("[C] Collect  [T] Train  [S] Save", request_color),
            ],
            STATUS_BAR_Y,
        )
        self._draw_banner(match.progress_text, self.height - 70, COLOR_TEXT_LIGHT)

    def _draw_aim_tick(self, combatant: Combatant) -> None:
        if not (combatant.alive and combatant.projectile.in_flight):
            return
        angle = self.config.clamp_angle(combatant.action.angle + combatant.correction.angle)
        # Mirror the heading for the right-hand combatant.
        facing = heading_to_vector(angle if combatant.direction > 0 else 180 - angle)
        tick_end = combatant.position + facing * AIM_TICK_LENGTH
        self._draw_line(combatant.x, combatant.y, tick_end.x, tick_end.y, COLOR_TEXT_LIGHT, 2)


class HumanMatchRenderer(Renderer):
    """Adds the live and previous launcher lines plus the score row."""

    def _draw_overlay(self) -> None:
        match = self.match
        aim_line = match.aim_line
        if aim_line is not None:
            self._draw_line(*aim_line, COLOR_LAUNCHER_ACTIVE, 6)
            shooter = match.shooter
            self._draw_line(shooter.x, shooter.y, shooter.launcher.x, shooter.launcher.y, COLOR_LAUNCHER_LAST, 3)

        self._draw_text_row(
            [
                (f"P1 Score: {match.scores[match.left.id]}", COLOR_GORILLA_1),
                (UI_STATUS_SEPARATOR, COLOR_TEXT_DARK),
                (f"P2 Score: {match.scores[match.right.id]}", COLOR_GORILLA_2),
            ],
            STATUS_BAR_Y,
        )

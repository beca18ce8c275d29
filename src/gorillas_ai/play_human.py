"""Two-player hot-seat Gorillas: aim with the mouse, release to throw."""

from __future__ import annotations

if __package__ in {None, ""}:
    import sys
    from pathlib import Path

    sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

import logging

import arcade

from gorillas_ai.config import FPS, HUMAN_WINDOW_TITLE, TICK_SECONDS
from gorillas_ai.errors import WindowClosed
from gorillas_ai.game.human_match import HumanMatch, PointerState
from gorillas_ai.logging_utils import configure_logging, log_run_context
from gorillas_ai.runtime.arcade_runtime import ArcadeFrameClock
from gorillas_ai.ui.renderer import HumanMatchRenderer

LOGGER = logging.getLogger("gorillas_ai.play")


class HumanGame:
    """Window loop around a :class:`HumanMatch`."""

    def __init__(self):
        self.match = HumanMatch()
        self.renderer = HumanMatchRenderer(
            self.match,
            HUMAN_WINDOW_TITLE,
            enabled=True,
            queue_input_events=False,
        )
        self.window_controller = self.renderer.window_controller
        self.frame_clock = ArcadeFrameClock()

    def close(self) -> None:
        self.renderer.close()

    def read_pointer(self) -> PointerState:
        mouse_pos = self.window_controller.mouse_position()
        pressed = self.window_controller.is_mouse_button_down(arcade.MOUSE_BUTTON_LEFT)
        if mouse_pos is None:
            return PointerState(self.match.pointer.x, self.match.pointer.y, inside=False, pressed=pressed)
        return PointerState(mouse_pos[0], mouse_pos[1], inside=True, pressed=pressed)

    def play_step(self) -> None:
        self.renderer.poll_events()
        self.match.tick(TICK_SECONDS, self.read_pointer())
        self.renderer.draw_frame()
        self.frame_clock.tick(FPS)


def run_human() -> None:
    configure_logging()
    game = HumanGame()
    log_run_context("play-human", {"fps": FPS})
    try:
        while True:
            game.play_step()
    except WindowClosed:
        LOGGER.info("Final score %d : %d", game.match.scores[1], game.match.scores[2])
    finally:
        game.close()


if __name__ == "__main__":
    run_human()

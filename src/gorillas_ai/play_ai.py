"""Watch two model-driven gorillas duel; collect data, train and save from the keyboard."""

from __future__ import annotations

if __package__ in {None, ""}:
    import sys
    from pathlib import Path

    sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

import logging

import arcade

from gorillas_ai.config import (
    DATASET_PATH,
    FPS,
    PRETRAINED_MODEL,
    RECORDS_TO_COLLECT,
    TICK_SECONDS,
    USE_GPU,
    WINDOW_TITLE,
    resolve_show_game,
)
from gorillas_ai.errors import WindowClosed
from gorillas_ai.game.ai_match import AIMatch
from gorillas_ai.logging_utils import configure_logging, log_run_context
from gorillas_ai.runtime.arcade_runtime import ArcadeFrameClock
from gorillas_ai.ui.renderer import AIMatchRenderer

LOGGER = logging.getLogger("gorillas_ai.play")


class AIMatchRunner:
    """Drives an :class:`AIMatch` at a fixed tick rate and maps keys to requests."""

    def __init__(self, show_game: bool = True):
        self.show_game = bool(show_game)
        self.match = AIMatch()
        self.renderer = AIMatchRenderer(self.match, WINDOW_TITLE, enabled=self.show_game)
        self.frame_clock = ArcadeFrameClock()
        self.key_requests = {
            arcade.key.C: self.match.request_data_collect,
            arcade.key.T: self.match.request_train,
            arcade.key.S: self.match.request_save,
        }

    def close(self) -> None:
        self.renderer.close()
        self.match.close()

    def handle_input(self) -> None:
        self.renderer.poll_events()
        for symbol in self.renderer.window_controller.drain_key_presses():
            request = self.key_requests.get(symbol)
            if request is not None and not request():
                LOGGER.info("Request ignored while %s", self.match.status.name)

    def step(self) -> None:
        self.handle_input()
        self.match.tick(TICK_SECONDS)
        self.renderer.draw_frame()
        self.frame_clock.tick(FPS if self.show_game else 0)

    def run(self, max_ticks: int | None = None) -> None:
        ticks = 0
        while max_ticks is None or ticks < max_ticks:
            self.step()
            ticks += 1


def run_ai(max_ticks: int | None = None) -> None:
    configure_logging()
    show_game = resolve_show_game(default_value=True)
    runner = AIMatchRunner(show_game=show_game)
    log_run_context(
        "play-ai",
        {
            "render": show_game,
            "fps": FPS if show_game else "unlocked",
            "gpu": USE_GPU,
            "pretrained_model": PRETRAINED_MODEL or "none",
            "dataset": DATASET_PATH,
            "dataset_records": len(runner.match.dataset),
            "records_to_collect": RECORDS_TO_COLLECT,
        },
    )
    try:
        runner.run(max_ticks=max_ticks)
    except WindowClosed:
        LOGGER.info("Window closed after %d levels", runner.match.levels_played)
    finally:
        runner.close()


if __name__ == "__main__":
    run_ai()

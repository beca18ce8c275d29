import logging
import math

import pytest

from gorillas_ai.logging_utils import log_key_values, log_run_context
from gorillas_ai.runtime import Rect, Vec2, heading_to_vector, pointer_angle_degrees, rect_from_top_center
from gorillas_ai.utils import median_by_index, sign


def test_import_package():
    import gorillas_ai

    assert gorillas_ai.__version__


def test_median_by_index_prefers_upper_middle():
    assert median_by_index([1, 2, 3]) == 2
    assert median_by_index([1, 2, 3, 4]) == 3
    with pytest.raises(ValueError):
        median_by_index([])


def test_sign():
    assert [sign(-3.5), sign(0), sign(2)] == [-1, 0, 1]


def test_rect_overlap_excludes_touching_edges():
    rect = rect_from_top_center(Vec2(50, 10), 20, 10)

    assert rect == Rect(40, 10, 20, 10)
    assert rect.colliderect(Rect(55, 15, 10, 10))
    assert not rect.colliderect(Rect(60, 10, 10, 10))


def test_pointer_angle_is_screen_convention():
    origin = Vec2(100, 100)

    assert pointer_angle_degrees(origin, Vec2(200, 100)) == pytest.approx(0.0)
    assert pointer_angle_degrees(origin, Vec2(100, 0)) == pytest.approx(90.0)
    assert pointer_angle_degrees(origin, Vec2(100, 200)) == pytest.approx(270.0)


def test_heading_points_up_the_screen():
    heading = heading_to_vector(90)

    assert heading.x == pytest.approx(0.0, abs=1e-9)
    assert heading.y == pytest.approx(-1.0)
    assert math.hypot(*heading_to_vector(300)) == pytest.approx(1.0)


def test_run_context_is_logged(caplog):
    with caplog.at_level(logging.INFO, logger="gorillas_ai.run"):
        log_run_context("play-ai", {"show_game": False, "pretrained_model": 0, "device": None})

    assert "Play AI\tShow Game: off\tPretrained Model: 0" in caplog.text


def test_key_values_are_logged_on_one_line(caplog):
    with caplog.at_level(logging.INFO, logger="gorillas_ai.train"):
        log_key_values("gorillas_ai.train", {"Iteration": 3, "Loss": 0.5, "Skipped": None, "GPU": True})

    assert "Iteration=3\tLoss=0.500\tGPU=on" in caplog.text
    assert "Skipped" not in caplog.text

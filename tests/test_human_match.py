import random

import pytest

from gorillas_ai.core.entities import Combatant
from gorillas_ai.game import HumanMatch, MatchStatus, PointerState
from gorillas_ai.game.human_match import pointer_shot
from gorillas_ai.runtime import Vec2


def _aiming_match():
    match = HumanMatch(rng=random.Random(1))
    match.tick(0.0)
    return match


def _throw(match, dx=30, dy=-40):
    shooter = match.shooter
    match.tick(0.0, PointerState(shooter.x + dx, shooter.y + dy, inside=True, pressed=True))
    match.tick(0.0, PointerState(shooter.x + dx, shooter.y + dy, inside=True, pressed=False))


def test_pointer_shot_angle_and_power(flat_skyline):
    shooter = Combatant(1)
    shooter.restart(flat_skyline, 0)

    angle, power = pointer_shot(shooter, Vec2(shooter.x + 30, shooter.y - 40))

    assert angle == pytest.approx(53.13, abs=0.01)
    assert power == pytest.approx(300.0)


def test_first_level_starts_with_left_shooter():
    match = _aiming_match()

    assert match.status == MatchStatus.AIM
    assert match.shooter is match.left
    assert match.left.projectile.alive
    assert not match.left.projectile.in_flight
    assert (match.left.projectile.x, match.left.projectile.y) == (match.left.x, match.left.y)
    assert not match.right.projectile.alive


def test_aim_line_follows_pointer():
    match = _aiming_match()
    match.tick(0.0, PointerState(100, 200, inside=True))

    assert match.aim_line == (match.left.x, match.left.y, 100, 200)
    match.tick(0.0, PointerState(100, 200, inside=False))
    assert match.aim_line is None


def test_press_and_release_throws():
    match = _aiming_match()

    _throw(match)

    assert match.status == MatchStatus.SHOT
    assert match.left.shots_fired == 1
    assert match.left.projectile.in_flight
    assert match.left.launcher == Vec2(match.left.x + 30, match.left.y - 40)


def test_release_without_press_does_not_throw():
    match = _aiming_match()
    match.tick(0.0, PointerState(10, 10, inside=True, pressed=False))

    assert match.status == MatchStatus.AIM
    assert match.left.shots_fired == 0


def test_missed_shot_passes_the_turn():
    match = _aiming_match()
    _throw(match)
    match.left.projectile.move_to(-100, 300)

    match.tick(0.0)

    assert not match.left.projectile.alive
    assert match.status == MatchStatus.AIM
    assert match.shooter is match.right


def test_hitting_the_opponent_scores():
    match = _aiming_match()
    _throw(match)
    match.left.projectile.move_to(match.right.x, match.right.y + 4)

    match.tick(0.0)

    assert not match.right.alive
    assert match.scores == {1: 1, 2: 0}
    assert match.status == MatchStatus.CREATE_LEVEL
    assert len(match.explosions) == 1


def test_falling_banana_can_hit_its_thrower():
    match = _aiming_match()
    _throw(match)
    projectile = match.left.projectile
    projectile.move_to(match.left.x, match.left.y + 4)
    projectile.velocity = Vec2(0.0, 100.0)

    match.tick(0.0)

    assert not match.left.alive
    assert match.scores == {1: 0, 2: 1}
    assert match.status == MatchStatus.CREATE_LEVEL


def test_new_level_after_a_hit_swaps_the_shooter():
    match = _aiming_match()
    _throw(match)
    match.left.projectile.move_to(match.right.x, match.right.y + 4)
    match.tick(0.0)

    match.tick(0.0)

    assert match.status == MatchStatus.AIM
    assert match.right.alive
    assert match.shooter is match.right
    assert match.right.projectile.alive
    assert not match.left.projectile.alive

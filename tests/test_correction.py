import random

from gorillas_ai.config import CORRECTION_POWER_DELTA, WORLD
from gorillas_ai.core.correction import MissKind, classify_miss, correct_shot, next_shot, update_correction
from gorillas_ai.core.entities import Action, Combatant, Correction


def _pair(skyline):
    left = Combatant(1)
    right = Combatant(2)
    left.restart(skyline, 1)
    right.restart(skyline, 8)
    return left, right


def test_classify_miss(flat_skyline):
    left, right = _pair(flat_skyline)

    assert classify_miss(left, right, left.x + 30) is MissKind.NEAR_SELF
    assert classify_miss(left, right, right.x + 10) is MissKind.BEYOND_TARGET
    assert classify_miss(left, right, right.x - 200) is MissKind.SHORT_OF_TARGET


def test_update_correction_follows_direction():
    short = update_correction(Correction(), 1, MissKind.SHORT_OF_TARGET)
    beyond = update_correction(Correction(), 1, MissKind.BEYOND_TARGET)
    near = update_correction(Correction(), -1, MissKind.NEAR_SELF)

    assert (short.angle, short.power) == (1, CORRECTION_POWER_DELTA)
    assert (beyond.angle, beyond.power) == (-1, -CORRECTION_POWER_DELTA)
    assert (near.angle, near.power) == (-2, -CORRECTION_POWER_DELTA)


def test_next_shot_points_at_the_opponent():
    angle, power = next_shot(Action(60, 1000), Correction(5, 100), -1)

    assert (angle, power) == (-65, -1100)


def test_corrected_shots_stay_in_range_over_many_misses():
    rng = random.Random(11)
    for direction in (1, -1):
        action = Action(rng.uniform(-200, 200), rng.uniform(-5000, 5000))
        correction = Correction()
        for _ in range(50):
            miss = rng.choice(list(MissKind))
            update_correction(correction, direction, miss)
            angle, power = next_shot(action, correction, direction)

            assert WORLD.min_power <= abs(power) <= WORLD.max_power
            assert WORLD.min_angle <= abs(angle) <= WORLD.max_angle


def test_correct_shot_throws_again(flat_skyline):
    left, right = _pair(flat_skyline)
    left.action = Action(70, 1200)
    left.throw(70, 1200)
    left.projectile.move_to(right.x - 300, 600)

    assert correct_shot(left, right)
    assert left.shots_fired == 2
    assert left.correction.power == CORRECTION_POWER_DELTA
    assert left.projectile.alive and left.projectile.in_flight


def test_correct_shot_gives_up_on_dead_target(flat_skyline):
    left, right = _pair(flat_skyline)
    left.throw(70, 1200)
    right.kill()

    assert not correct_shot(left, right)
    assert not left.projectile.alive


def test_correct_shot_gives_up_after_the_shot_cap(flat_skyline):
    left, right = _pair(flat_skyline)
    left.throw(70, 1200)

    assert not correct_shot(left, right, max_shots=1)
    assert not left.projectile.alive
    assert left.shots_fired == 1

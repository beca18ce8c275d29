from gorillas_ai.core.entities import Combatant
from gorillas_ai.core.viewing import NO_EDGE_THETA, THETA_SEED, compute_viewing_geometry, view_line


def _place(skyline, left_platform, right_platform):
    left = Combatant(1)
    right = Combatant(2)
    left.restart(skyline, left_platform)
    right.restart(skyline, right_platform)
    return left, right


def test_tower_sets_both_sightlines(tower_skyline):
    left, right = _place(tower_skyline, 0, 9)

    sample = compute_viewing_geometry(left, right, tower_skyline)

    assert sample.dist == 1152
    assert (sample.theta1, sample.x1, sample.y1) == (22, 640, 336)
    assert (sample.theta2, sample.x2, sample.y2) == (27, 768, 336)


def test_features_put_own_theta_first(tower_skyline):
    left, right = _place(tower_skyline, 0, 9)
    sample = compute_viewing_geometry(left, right, tower_skyline)

    assert sample.features_for(1) == (22, 27, 1152)
    assert sample.features_for(2) == (27, 22, 1152)


def test_edges_outside_the_gap_are_ignored(tower_skyline):
    left, right = _place(tower_skyline, 0, 9)

    line = view_line(left, tower_skyline[9], left.x, right.x)

    # Only the left edge of the right-hand building lies between the combatants.
    assert line.x == tower_skyline[9].x
    assert line.theta != NO_EDGE_THETA


def test_adjacent_combatants_keep_seed_theta(flat_skyline):
    left, right = _place(flat_skyline, 3, 3)

    sample = compute_viewing_geometry(left, right, flat_skyline)

    assert sample.theta1 == THETA_SEED
    assert sample.theta2 == THETA_SEED
    assert sample.dist == 0


def test_flat_roofs_give_negative_angles(flat_skyline):
    left, right = _place(flat_skyline, 0, 9)

    sample = compute_viewing_geometry(left, right, flat_skyline)

    # Distant roof corners tie at -1 degree: the left combatant keeps the first,
    # the right combatant the last one scanned.
    assert sample.theta1 == -1
    assert sample.x1 == 1024
    assert sample.theta2 == -1
    assert sample.x2 == 256

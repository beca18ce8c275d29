"""Sightline features: the steepest building edge each combatant must clear."""

from __future__ import annotations

import math
from dataclasses import dataclass

from gorillas_ai.core.entities import Combatant
from gorillas_ai.core.skyline import Building, Skyline

NO_EDGE_THETA = -1000
THETA_SEED = -180


@dataclass(frozen=True)
class ViewLine:
    theta: int
    x: float
    y: float


@dataclass(frozen=True)
class ViewingSample:
    dist: float
    theta1: int
    x1: float
    y1: float
    theta2: int
    x2: float
    y2: float

    def features_for(self, combatant_id: int) -> tuple[int, int, float]:
        """Model inputs from one combatant's point of view: own theta first."""
        if combatant_id == 1:
            return self.theta1, self.theta2, self.dist
        return self.theta2, self.theta1, self.dist


def _edge_theta(viewer: Combatant, edge_x: float, dy: float, left_x: float, right_x: float) -> int:
    if not (left_x < edge_x < right_x):
        return NO_EDGE_THETA
    dx = viewer.direction * (edge_x - viewer.x)
    return math.ceil(math.degrees(math.atan2(dy, dx)))


def view_line(viewer: Combatant, building: Building, left_x: float, right_x: float) -> ViewLine:
    """Elevation of the steeper of a building's two roof corners as seen by ``viewer``.

    Only edges lying strictly between the two combatants count; ties go to the
    right-hand edge.
    """
    dy = viewer.y - building.y
    theta_left = _edge_theta(viewer, building.x, dy, left_x, right_x)
    theta_right = _edge_theta(viewer, building.right, dy, left_x, right_x)
    if theta_left > theta_right:
        return ViewLine(theta_left, building.x, building.y)
    return ViewLine(theta_right, building.right, building.y)


def compute_viewing_geometry(left: Combatant, right: Combatant, skyline: Skyline) -> ViewingSample:
    theta1, x1, y1 = THETA_SEED, -1.0, -1.0
    theta2, x2, y2 = THETA_SEED, -1.0, -1.0

    for index in range(left.platform, right.platform + 1):
        building = skyline[index]
        line1 = view_line(left, building, left.x, right.x)
        line2 = view_line(right, building, left.x, right.x)

        if line1.theta > theta1:
            theta1, x1, y1 = line1.theta, line1.x, line1.y
        # Later buildings win ties for the right combatant.
        if line2.theta >= theta2:
            theta2, x2, y2 = line2.theta, line2.x, line2.y

    return ViewingSample(
        dist=right.x - left.x,
        theta1=theta1,
        x1=x1,
        y1=y1,
        theta2=theta2,
        x2=x2,
        y2=y2,
    )

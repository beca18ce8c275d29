"""Core gameplay modules."""

from .entities import Action, Combatant, Correction, Explosion, ExplosionSource, Projectile
from .skyline import Building, Skyline
from .viewing import ViewingSample, compute_viewing_geometry

__all__ = [
    "Action",
    "Building",
    "Combatant",
    "Correction",
    "Explosion",
    "ExplosionSource",
    "Projectile",
    "Skyline",
    "ViewingSample",
    "compute_viewing_geometry",
]

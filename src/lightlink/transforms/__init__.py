"""Coordinate and orbit transformation utilities."""

from lightlink.transforms.orbital_mechanics import (
    KeplerianElements,
    keplerian_to_state_vector,
    solve_kepler,
    state_vector_to_keplerian,
)

__all__ = [
    "KeplerianElements",
    "keplerian_to_state_vector",
    "solve_kepler",
    "state_vector_to_keplerian",
]

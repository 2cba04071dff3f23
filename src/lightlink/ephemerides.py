"""Analytic state functions for bodies and stations.

Each provider is an ``equinox.Module`` called as ``provider(time) -> 6-vector``
(position in m, velocity in m/s, in the global frame). They stand in for a
full ephemeris service wherever a closed-form trajectory is good enough.
"""

from typing import final

import equinox as eqx
import jax.numpy as jnp
from jaxtyping import Array

from lightlink import constants as const
from lightlink.transforms.orbital_mechanics import (
    KeplerianElements,
    keplerian_to_state_vector,
    state_vector_to_keplerian,
)


@final
class LinearMotion(eqx.Module):
    """Straight-line motion at constant velocity (zero velocity: fixed point)."""

    position: Array
    velocity: Array
    epoch: float

    def __init__(self, position, velocity=(0.0, 0.0, 0.0), epoch: float = 0.0):
        """Initialize the linear trajectory."""
        self.position = jnp.asarray(position, dtype=float)
        self.velocity = jnp.asarray(velocity, dtype=float)
        self.epoch = float(epoch)

    def __call__(self, time: float) -> Array:
        """State at ``time``."""
        return jnp.concatenate([self.position + self.velocity * (time - self.epoch), self.velocity])


@final
class KeplerOrbit(eqx.Module):
    """Two-body orbit around a (possibly moving) central body.

    Attributes:
        elements: ``KeplerianElements`` at ``epoch``.
        gravitational_parameter: Central body mu in m^3/s^2.
        epoch: Epoch of the elements in seconds.
        central_body_state: Optional state function added to the relative
            state; None keeps the orbit centred on the origin.
    """

    elements: KeplerianElements
    gravitational_parameter: float
    epoch: float
    central_body_state: callable

    def __init__(self, elements, gravitational_parameter: float, epoch: float = 0.0, central_body_state=None):
        """Initialize the Keplerian orbit."""
        self.elements = KeplerianElements(*(float(value) for value in elements))
        if not 0.0 <= self.elements.e < 1.0:
            raise ValueError(f"Only elliptical orbits are supported, got e = {self.elements.e}.")
        self.gravitational_parameter = float(gravitational_parameter)
        self.epoch = float(epoch)
        self.central_body_state = central_body_state

    @classmethod
    def from_state(cls, state, gravitational_parameter, epoch=0.0, central_body_state=None):
        """Orbit through a state given relative to the central body at ``epoch``."""
        elements = state_vector_to_keplerian(jnp.asarray(state, dtype=float), gravitational_parameter)
        return cls(elements, gravitational_parameter, epoch, central_body_state)

    @property
    def mean_motion(self) -> float:
        """Mean motion in rad/s."""
        return (self.gravitational_parameter / self.elements.a**3) ** 0.5

    def __call__(self, time: float) -> Array:
        """State at ``time``."""
        mean_anomaly = self.elements.M + self.mean_motion * (time - self.epoch)
        state = keplerian_to_state_vector(
            self.elements._replace(M=mean_anomaly), self.gravitational_parameter
        )
        if self.central_body_state is None:
            return state
        return state + self.central_body_state(time)


@final
class RotatingStation(eqx.Module):
    """Station fixed on a body spinning uniformly about its z axis.

    Attributes:
        body_fixed_position: Station position in the body-fixed frame, m.
        central_body_state: State function of the body centre.
        rotation_rate: Spin rate in rad/s.
        epoch: Epoch at which the rotation angle equals ``initial_angle``.
        initial_angle: Rotation angle at ``epoch`` in rad.
    """

    body_fixed_position: Array
    central_body_state: callable
    rotation_rate: float
    epoch: float
    initial_angle: float

    def __init__(
        self,
        body_fixed_position,
        central_body_state,
        rotation_rate: float = const.omega_earth,
        epoch: float = 0.0,
        initial_angle: float = 0.0,
    ):
        """Initialize the rotating station."""
        self.body_fixed_position = jnp.asarray(body_fixed_position, dtype=float)
        self.central_body_state = central_body_state
        self.rotation_rate = float(rotation_rate)
        self.epoch = float(epoch)
        self.initial_angle = float(initial_angle)

    @classmethod
    def from_geodetic(cls, latitude_deg, longitude_deg, central_body_state, radius=const.R_earth_m, **kwargs):
        """Station on a sphere of ``radius`` at a latitude/longitude in degrees."""
        lat = latitude_deg * const.deg2rad
        lon = longitude_deg * const.deg2rad
        position = radius * jnp.array(
            [jnp.cos(lat) * jnp.cos(lon), jnp.cos(lat) * jnp.sin(lon), jnp.sin(lat)]
        )
        return cls(position, central_body_state, **kwargs)

    def __call__(self, time: float) -> Array:
        """State at ``time``."""
        angle = self.initial_angle + self.rotation_rate * (time - self.epoch)
        cos_a, sin_a = jnp.cos(angle), jnp.sin(angle)
        x, y, z = self.body_fixed_position
        position = jnp.array([cos_a * x - sin_a * y, sin_a * x + cos_a * y, z])
        velocity = self.rotation_rate * jnp.array([-position[1], position[0], 0.0])
        return jnp.concatenate([position, velocity]) + self.central_body_state(time)

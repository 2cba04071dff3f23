"""Proper-time rates of link-end clocks.

A proper-time rate is d(tau)/dt, the ratio between the elapsed time of a
clock at a link end and coordinate time. It is close to one and varies with
the clock's velocity and the gravitational potential it sits in.
"""

import abc
from typing import final

import equinox as eqx
import jax.numpy as jnp
from jaxtyping import Array

from lightlink import constants as const


class AbstractProperTimeRateCalculator(eqx.Module):
    """Maps the state of a link end at a given time to its proper-time rate."""

    @abc.abstractmethod
    def rate(self, state: Array, time: float) -> float | Array:
        """Return d(tau)/dt (dimensionless, near 1)."""
        raise NotImplementedError

    def rate_deviation(self, state: Array, time: float) -> float | Array:
        """Return d(tau)/dt - 1."""
        return self.rate(state, time) - 1.0


@final
class UnitProperTimeRate(AbstractProperTimeRateCalculator):
    """No correction: the clock runs at coordinate time."""

    def rate(self, state, time):
        """Always 1."""
        return 1.0

    def rate_deviation(self, state, time):
        """Always 0."""
        return 0.0


@final
class DirectFirstOrderProperTimeRate(AbstractProperTimeRateCalculator):
    """First-order rate from velocity and a central body's point-mass potential.

        d(tau)/dt = 1 - (|v|^2 / 2 + mu / |r - r_c|) / c^2

    The velocity is the link-end velocity in the frame of the supplied states;
    the potential uses the distance to the central body.

    Attributes:
        gravitational_parameter: Central body mu in m^3/s^2.
        central_body_state: State function of the central body.
    """

    gravitational_parameter: float
    central_body_state: callable

    def __init__(self, gravitational_parameter: float, central_body_state):
        """Initialize the first-order proper-time rate calculator."""
        self.gravitational_parameter = float(gravitational_parameter)
        self.central_body_state = central_body_state

    def rate_deviation(self, state: Array, time: float) -> Array:
        """Return d(tau)/dt - 1."""
        relative_position = state[:3] - self.central_body_state(time)[:3]
        kinetic = 0.5 * jnp.dot(state[3:6], state[3:6])
        potential = self.gravitational_parameter / jnp.linalg.norm(relative_position)
        return -const.inv_c2 * (kinetic + potential)

    def rate(self, state, time):
        """Return d(tau)/dt."""
        return 1.0 + self.rate_deviation(state, time)

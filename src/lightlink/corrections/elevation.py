"""Elevation mapping shared by the media corrections.

Media delays are modelled as a zenith delay scaled by 1 / sin(elevation) at
the ground end of the leg, with a floor on sin(elevation) so the mapping stays
bounded near the horizon.
"""

import jax.numpy as jnp
from jaxtyping import Array

from lightlink.core.link_ends import LinkEndType


def ground_and_target(transmitter_state, receiver_state, ground_end):
    """Split the leg states into (ground state, other-end state)."""
    if ground_end == LinkEndType.TRANSMITTER:
        return transmitter_state, receiver_state
    return receiver_state, transmitter_state


def ground_time(transmission_time, reception_time, ground_end):
    """Time at the ground end of the leg."""
    if ground_end == LinkEndType.TRANSMITTER:
        return transmission_time
    return reception_time


def elevation_sine(
    ground_position: Array, target_position: Array, central_body_position: Array
) -> Array:
    """Sine of the elevation of ``target_position`` seen from the ground end."""
    up = ground_position - central_body_position
    line_of_sight = target_position - ground_position
    return jnp.dot(up, line_of_sight) / (
        jnp.linalg.norm(up) * jnp.linalg.norm(line_of_sight)
    )


def mapping_function(sine: Array, minimum_sine: float) -> Array:
    """1 / sin(elevation), floored at ``minimum_sine``."""
    return 1.0 / jnp.maximum(sine, minimum_sine)


def mapping_gradient(
    ground_position: Array,
    target_position: Array,
    central_body_position: Array,
    minimum_sine: float,
    wrt_ground: bool,
) -> Array:
    """Gradient of ``mapping_function`` with respect to one end's position."""
    up_vector = ground_position - central_body_position
    up_distance = jnp.linalg.norm(up_vector)
    up = up_vector / up_distance
    line_of_sight = target_position - ground_position
    distance = jnp.linalg.norm(line_of_sight)
    direction = line_of_sight / distance
    sine = jnp.dot(up, direction)

    d_sine_d_target = (up - sine * direction) / distance
    if wrt_ground:
        d_sine = -d_sine_d_target + (direction - sine * up) / up_distance
    else:
        d_sine = d_sine_d_target

    # The floor makes the mapping constant below the minimum elevation
    d_mapping_d_sine = jnp.where(sine > minimum_sine, -1.0 / sine**2, 0.0)
    return d_mapping_d_sine * d_sine


def mapping_rate_from_body_motion(
    ground_position: Array,
    target_position: Array,
    central_body_state: Array,
    minimum_sine: float,
) -> Array:
    """Rate of ``mapping_function`` due to the central body moving under fixed ends.

    The mapping only depends on positions relative to the body, so its
    gradient with respect to the body position is minus the sum of the two
    end gradients.
    """
    body_position = central_body_state[:3]
    body_gradient = -(
        mapping_gradient(ground_position, target_position, body_position, minimum_sine, True)
        + mapping_gradient(ground_position, target_position, body_position, minimum_sine, False)
    )
    return jnp.dot(body_gradient, central_body_state[3:6])

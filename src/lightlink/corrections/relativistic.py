"""First-order relativistic (Shapiro) light-time correction."""

from typing import final

import jax.numpy as jnp
from jaxtyping import Array

from lightlink import constants as const
from lightlink.core.light_time_corrections import AbstractLightTimeCorrection
from lightlink.core.link_ends import LinkEndType


def shapiro_delay(
    transmitter_position: Array,
    receiver_position: Array,
    perturber_position: Array,
    gravitational_parameter: float,
    ppn_gamma: float = 1.0,
) -> Array:
    """One-body first-order relativistic delay in seconds.

    dt = (1 + gamma) mu / c^3 * ln((r_t + r_r + r_tr) / (r_t + r_r - r_tr))
    with r_t, r_r the distances of the ends to the perturber and r_tr the
    distance between the ends.
    """
    r_t = jnp.linalg.norm(transmitter_position - perturber_position)
    r_r = jnp.linalg.norm(receiver_position - perturber_position)
    r_tr = jnp.linalg.norm(receiver_position - transmitter_position)
    scale = (1.0 + ppn_gamma) * gravitational_parameter * const.inv_c**3
    return scale * jnp.log((r_t + r_r + r_tr) / (r_t + r_r - r_tr))


def shapiro_delay_partial(
    transmitter_position: Array,
    receiver_position: Array,
    perturber_position: Array,
    gravitational_parameter: float,
    link_end: LinkEndType,
    ppn_gamma: float = 1.0,
) -> Array:
    """Gradient of ``shapiro_delay`` with respect to one end's position (s/m)."""
    to_transmitter = transmitter_position - perturber_position
    to_receiver = receiver_position - perturber_position
    link = receiver_position - transmitter_position
    r_t = jnp.linalg.norm(to_transmitter)
    r_r = jnp.linalg.norm(to_receiver)
    r_tr = jnp.linalg.norm(link)
    scale = (1.0 + ppn_gamma) * gravitational_parameter * const.inv_c**3

    if link_end == LinkEndType.RECEIVER:
        grad_distance = to_receiver / r_r
        grad_link = link / r_tr
    else:
        grad_distance = to_transmitter / r_t
        grad_link = -link / r_tr

    return scale * (
        (grad_distance + grad_link) / (r_t + r_r + r_tr)
        - (grad_distance - grad_link) / (r_t + r_r - r_tr)
    )


@final
class FirstOrderRelativisticCorrection(AbstractLightTimeCorrection):
    """Shapiro delay summed over a set of perturbing bodies.

    Perturber positions are taken at the mid time of the leg.

    Attributes:
        perturber_states: State functions of the perturbing bodies.
        gravitational_parameters: Their gravitational parameters in m^3/s^2.
        ppn_gamma: PPN parameter gamma (1 in general relativity).
    """

    perturber_states: tuple
    gravitational_parameters: tuple[float, ...]
    ppn_gamma: float

    def __init__(self, perturber_states, gravitational_parameters, ppn_gamma: float = 1.0):
        """Initialize the relativistic correction."""
        if len(perturber_states) != len(gravitational_parameters):
            raise ValueError(
                "Each perturbing body needs exactly one gravitational parameter."
            )
        self.perturber_states = tuple(perturber_states)
        self.gravitational_parameters = tuple(float(mu) for mu in gravitational_parameters)
        self.ppn_gamma = float(ppn_gamma)

    def value(
        self,
        transmitter_state,
        receiver_state,
        transmission_time,
        reception_time,
        ancillary=None,
        leg_index=0,
    ):
        """Return the summed relativistic delay in seconds."""
        mid_time = 0.5 * (transmission_time + reception_time)
        delay = 0.0
        for state_function, mu in zip(self.perturber_states, self.gravitational_parameters):
            delay += shapiro_delay(
                transmitter_state[:3],
                receiver_state[:3],
                state_function(mid_time)[:3],
                mu,
                self.ppn_gamma,
            )
        return delay

    def partial_wrt_link_end_position(
        self,
        transmitter_state,
        receiver_state,
        transmission_time,
        reception_time,
        link_end,
        ancillary=None,
        leg_index=0,
    ):
        """Return the delay gradient with respect to ``link_end`` position."""
        mid_time = 0.5 * (transmission_time + reception_time)
        partial = jnp.zeros(3)
        for state_function, mu in zip(self.perturber_states, self.gravitational_parameters):
            partial = partial + shapiro_delay_partial(
                transmitter_state[:3],
                receiver_state[:3],
                state_function(mid_time)[:3],
                mu,
                link_end,
                self.ppn_gamma,
            )
        return partial

    def partial_wrt_link_end_time(
        self,
        transmitter_state,
        receiver_state,
        transmission_time,
        reception_time,
        link_end,
        ancillary=None,
        leg_index=0,
    ):
        """Return the delay rate from perturber motion, half per leg end.

        The delay depends on positions relative to each perturber, so its
        gradient with respect to a perturber position is minus the sum of the
        two end gradients.
        """
        if link_end not in (LinkEndType.TRANSMITTER, LinkEndType.RECEIVER):
            return jnp.zeros(())
        mid_time = 0.5 * (transmission_time + reception_time)
        rate = jnp.zeros(())
        for state_function, mu in zip(self.perturber_states, self.gravitational_parameters):
            perturber = state_function(mid_time)
            end_gradients = sum(
                shapiro_delay_partial(
                    transmitter_state[:3],
                    receiver_state[:3],
                    perturber[:3],
                    mu,
                    end,
                    self.ppn_gamma,
                )
                for end in (LinkEndType.TRANSMITTER, LinkEndType.RECEIVER)
            )
            rate = rate - jnp.dot(end_gradients, perturber[3:6])
        return 0.5 * rate

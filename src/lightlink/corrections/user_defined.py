"""Light-time correction built from user-supplied functions."""

from typing import final

import jax
import jax.numpy as jnp

from lightlink.core.light_time_corrections import AbstractLightTimeCorrection
from lightlink.core.link_ends import LinkEndType


@final
class UserDefinedCorrection(AbstractLightTimeCorrection):
    """Arbitrary additive delay.

    ``value_function(transmitter_state, receiver_state, transmission_time,
    reception_time)`` returns the delay in seconds. If no
    ``partial_function`` (same arguments plus the link end) is given, the
    position gradient is obtained with ``jax.grad``, so the value function
    must then be written with ``jax.numpy``.
    """

    value_function: callable
    partial_function: callable

    def __init__(self, value_function, partial_function=None):
        """Initialize the user-defined correction."""
        self.value_function = value_function
        self.partial_function = partial_function

    def value(
        self,
        transmitter_state,
        receiver_state,
        transmission_time,
        reception_time,
        ancillary=None,
        leg_index=0,
    ):
        """Return the user delay in seconds."""
        return self.value_function(
            transmitter_state, receiver_state, transmission_time, reception_time
        )

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
        if self.partial_function is not None:
            return jnp.asarray(
                self.partial_function(
                    transmitter_state,
                    receiver_state,
                    transmission_time,
                    reception_time,
                    link_end,
                )
            )
        if link_end == LinkEndType.TRANSMITTER:

            def delay(position):
                state = jnp.asarray(transmitter_state).at[:3].set(position)
                return self.value_function(
                    state, receiver_state, transmission_time, reception_time
                )

            return jax.grad(delay)(jnp.asarray(transmitter_state[:3]))
        if link_end == LinkEndType.RECEIVER:

            def delay(position):
                state = jnp.asarray(receiver_state).at[:3].set(position)
                return self.value_function(
                    transmitter_state, state, transmission_time, reception_time
                )

            return jax.grad(delay)(jnp.asarray(receiver_state[:3]))
        return jnp.zeros(3)

"""Module holding the light-time correction interface."""

from abc import abstractmethod

import equinox as eqx
import jax.numpy as jnp
from jaxtyping import Array

from lightlink.core.link_ends import LinkEndType


class AbstractLightTimeCorrection(eqx.Module):
    """The base class for all light-time corrections.

    A correction adds a delay (in seconds) to the geometric light time of a
    single leg, and gives the gradient of that delay with respect to the
    position of either end of the leg. Corrections with an explicit time
    dependence also give the partial with respect to an end's time.
    Corrections are evaluated on the current iterate of the light-time solver and never depend on each other.
    """

    @abstractmethod
    def value(
        self,
        transmitter_state: Array,
        receiver_state: Array,
        transmission_time: float,
        reception_time: float,
        ancillary=None,
        leg_index: int = 0,
    ) -> Array:
        """Return the light-time delay in seconds."""
        raise NotImplementedError

    @abstractmethod
    def partial_wrt_link_end_position(
        self,
        transmitter_state: Array,
        receiver_state: Array,
        transmission_time: float,
        reception_time: float,
        link_end: LinkEndType,
        ancillary=None,
        leg_index: int = 0,
    ) -> Array:
        """Return d(delay)/d(position) of ``link_end`` as a 3-vector in s/m."""
        raise NotImplementedError

    def partial_wrt_link_end_time(
        self,
        transmitter_state: Array,
        receiver_state: Array,
        transmission_time: float,
        reception_time: float,
        link_end: LinkEndType,
        ancillary=None,
        leg_index: int = 0,
    ) -> Array:
        """Return d(delay)/d(time of ``link_end``) with both positions held fixed.

        Nonzero only for corrections with an explicit time dependence, such as
        media delays referenced to a moving central body. Dimensionless.
        """
        return jnp.zeros(())

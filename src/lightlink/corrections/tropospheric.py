"""Simple tropospheric light-time correction for legs touching a ground station."""

from typing import final

import jax.numpy as jnp

from lightlink import constants as const
from lightlink.core.light_time_corrections import AbstractLightTimeCorrection
from lightlink.core.link_ends import LinkEndType
from lightlink.corrections.elevation import (
    elevation_sine,
    ground_and_target,
    ground_time,
    mapping_function,
    mapping_gradient,
    mapping_rate_from_body_motion,
)


@final
class TroposphericCorrection(AbstractLightTimeCorrection):
    """Zenith tropospheric delay mapped with 1 / sin(elevation).

    Attributes:
        ground_end: Which end of the leg is the ground station.
        central_body_state: State function of the body the station sits on.
        zenith_delay_m: Zenith path delay in meters.
        minimum_elevation_sine: Floor on sin(elevation) in the mapping.
    """

    ground_end: LinkEndType
    central_body_state: callable
    zenith_delay_m: float
    minimum_elevation_sine: float

    def __init__(
        self,
        ground_end: LinkEndType,
        central_body_state,
        zenith_delay_m: float = 2.3,
        minimum_elevation_sine: float = 0.2,
    ):
        """Initialize the tropospheric correction."""
        if ground_end not in (LinkEndType.TRANSMITTER, LinkEndType.RECEIVER):
            raise ValueError("The ground end must be the leg transmitter or receiver.")
        self.ground_end = LinkEndType(ground_end)
        self.central_body_state = central_body_state
        self.zenith_delay_m = float(zenith_delay_m)
        self.minimum_elevation_sine = float(minimum_elevation_sine)

    def value(
        self,
        transmitter_state,
        receiver_state,
        transmission_time,
        reception_time,
        ancillary=None,
        leg_index=0,
    ):
        """Return the tropospheric delay in seconds."""
        ground, target = ground_and_target(transmitter_state, receiver_state, self.ground_end)
        body = self.central_body_state(
            ground_time(transmission_time, reception_time, self.ground_end)
        )
        sine = elevation_sine(ground[:3], target[:3], body[:3])
        return self.zenith_delay_m * const.inv_c * mapping_function(
            sine, self.minimum_elevation_sine
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
        if link_end not in (LinkEndType.TRANSMITTER, LinkEndType.RECEIVER):
            return jnp.zeros(3)
        ground, target = ground_and_target(transmitter_state, receiver_state, self.ground_end)
        body = self.central_body_state(
            ground_time(transmission_time, reception_time, self.ground_end)
        )
        return (
            self.zenith_delay_m
            * const.inv_c
            * mapping_gradient(
                ground[:3],
                target[:3],
                body[:3],
                self.minimum_elevation_sine,
                wrt_ground=link_end == self.ground_end,
            )
        )

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
        """Return the delay rate from the central body moving at the ground time."""
        if link_end != self.ground_end:
            return jnp.zeros(())
        ground, target = ground_and_target(transmitter_state, receiver_state, self.ground_end)
        body = self.central_body_state(
            ground_time(transmission_time, reception_time, self.ground_end)
        )
        return (
            self.zenith_delay_m
            * const.inv_c
            * mapping_rate_from_body_motion(
                ground[:3], target[:3], body, self.minimum_elevation_sine
            )
        )

"""Dispersive ionospheric light-time correction.

The first-order ionospheric group delay is

    dt = 40.3 * TEC / (c * f^2)

so it needs the carrier frequency of the leg. The frequency is taken from the
leg's band in the observation's ancillary settings; without them the
correction cannot be evaluated and raises.
"""

from typing import final

import jax.numpy as jnp

from lightlink import constants as const
from lightlink.core.ancillary import require_ancillary
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


def ionospheric_zenith_delay(vertical_tec: float, frequency_hz: float) -> float:
    """Zenith group delay in seconds for a vertical TEC in electrons/m^2."""
    return const.ionospheric_k * vertical_tec / (const.c * frequency_hz**2)


@final
class IonosphericCorrection(AbstractLightTimeCorrection):
    """Vertical TEC delay at the leg frequency, mapped with 1 / sin(elevation).

    Attributes:
        ground_end: Which end of the leg is the ground station.
        central_body_state: State function of the body the station sits on.
        vertical_tec: Vertical total electron content in electrons/m^2.
        minimum_elevation_sine: Floor on sin(elevation) in the mapping.
    """

    ground_end: LinkEndType
    central_body_state: callable
    vertical_tec: float
    minimum_elevation_sine: float

    def __init__(
        self,
        ground_end: LinkEndType,
        central_body_state,
        vertical_tec: float = 10.0 * const.TECU,
        minimum_elevation_sine: float = 0.2,
    ):
        """Initialize the ionospheric correction."""
        if ground_end not in (LinkEndType.TRANSMITTER, LinkEndType.RECEIVER):
            raise ValueError("The ground end must be the leg transmitter or receiver.")
        self.ground_end = LinkEndType(ground_end)
        self.central_body_state = central_body_state
        self.vertical_tec = float(vertical_tec)
        self.minimum_elevation_sine = float(minimum_elevation_sine)

    def zenith_delay(self, ancillary, leg_index: int) -> float:
        """Zenith delay in seconds at the frequency of leg ``leg_index``."""
        ancillary = require_ancillary(ancillary, "the ionospheric correction")
        band = ancillary.frequency_band(leg_index)
        return ionospheric_zenith_delay(self.vertical_tec, band.nominal_frequency_hz)

    def value(
        self,
        transmitter_state,
        receiver_state,
        transmission_time,
        reception_time,
        ancillary=None,
        leg_index=0,
    ):
        """Return the ionospheric delay in seconds."""
        zenith = self.zenith_delay(ancillary, leg_index)
        ground, target = ground_and_target(transmitter_state, receiver_state, self.ground_end)
        body = self.central_body_state(
            ground_time(transmission_time, reception_time, self.ground_end)
        )
        sine = elevation_sine(ground[:3], target[:3], body[:3])
        return zenith * mapping_function(sine, self.minimum_elevation_sine)

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
        zenith = self.zenith_delay(ancillary, leg_index)
        if link_end not in (LinkEndType.TRANSMITTER, LinkEndType.RECEIVER):
            return jnp.zeros(3)
        ground, target = ground_and_target(transmitter_state, receiver_state, self.ground_end)
        body = self.central_body_state(
            ground_time(transmission_time, reception_time, self.ground_end)
        )
        return zenith * mapping_gradient(
            ground[:3],
            target[:3],
            body[:3],
            self.minimum_elevation_sine,
            wrt_ground=link_end == self.ground_end,
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
        zenith = self.zenith_delay(ancillary, leg_index)
        if link_end != self.ground_end:
            return jnp.zeros(())
        ground, target = ground_and_target(transmitter_state, receiver_state, self.ground_end)
        body = self.central_body_state(
            ground_time(transmission_time, reception_time, self.ground_end)
        )
        return zenith * mapping_rate_from_body_motion(
            ground[:3], target[:3], body, self.minimum_elevation_sine
        )

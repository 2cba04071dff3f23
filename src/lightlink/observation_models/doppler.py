"""Doppler observables.

The one-way Doppler observable is minus the derivative of the light time
with respect to the reception time. With ``n`` the unit vector from the
transmitter to the receiver, ``g_tx``/``g_rx`` the summed position partials
of the correction stack and ``p_tx``/``p_rx`` its explicit time partials at
each end, the derivative follows from the light-time equation as

    A = (n / c + g_rx) . v_rx + p_rx
    B = (n / c - g_tx) . v_tx - p_tx
    d(light_time)/dt_rx = (A - B) / (1 - B)

The dimensionless value is multiplied by ``c`` (giving m/s) unless the model
is configured with ``normalize_with_speed_of_light=True``.
"""

from typing import final

import jax.numpy as jnp

from lightlink import constants as const
from lightlink.core.link_ends import LinkEndType
from lightlink.core.proper_time import UnitProperTimeRate
from lightlink.exceptions import LinkEndTopologyError
from lightlink.observation_models.base import ObservationModel, require_roles, resolve_legs


def light_time_rate(
    solution,
    transmitter_partial=None,
    receiver_partial=None,
    transmitter_time_partial=0.0,
    receiver_time_partial=0.0,
):
    """d(light_time)/dt_rx of a resolved leg.

    Args:
        solution: ``LightTimeSolution`` of the leg.
        transmitter_partial: Summed correction partial w.r.t. the transmitter
            position in s/m, or None for a purely geometric leg.
        receiver_partial: Same for the receiver position.
        transmitter_time_partial: Summed explicit correction partial w.r.t.
            the transmission time, with both positions held fixed.
        receiver_time_partial: Same for the reception time.
    """
    relative_position = solution.receiver_state[:3] - solution.transmitter_state[:3]
    direction = relative_position / jnp.linalg.norm(relative_position) * const.inv_c
    receiver_term = direction
    transmitter_term = direction
    if receiver_partial is not None:
        receiver_term = receiver_term + receiver_partial
    if transmitter_partial is not None:
        transmitter_term = transmitter_term - transmitter_partial
    receiver_projection = (
        jnp.dot(receiver_term, solution.receiver_state[3:6]) + receiver_time_partial
    )
    transmitter_projection = (
        jnp.dot(transmitter_term, solution.transmitter_state[3:6]) - transmitter_time_partial
    )
    return (receiver_projection - transmitter_projection) / (1.0 - transmitter_projection)


def apply_proper_time(fraction, transmitter_deviation, receiver_deviation):
    """Convert a coordinate-time Doppler fraction to the clocks' proper times.

    Evaluates ``rate_tx * (1 + fraction) / rate_rx - 1`` from the rate
    deviations ``rate - 1``, keeping full precision when both are tiny.
    """
    ratio = (1.0 + transmitter_deviation) / (1.0 + receiver_deviation)
    return (transmitter_deviation - receiver_deviation) / (1.0 + receiver_deviation) + ratio * fraction


@final
class OneWayDopplerObservationModel(ObservationModel):
    """One-way Doppler of a single leg.

    Runtime options:
        normalize_with_speed_of_light: Return the dimensionless fraction
            instead of m/s. Default False.

    Attributes:
        light_time_calculator: Solver of the leg.
        transmitter_proper_time: Proper-time rate of the transmitter clock.
        receiver_proper_time: Proper-time rate of the receiver clock.
    """

    def __init__(
        self,
        link_ends,
        light_time_calculator,
        transmitter_proper_time=None,
        receiver_proper_time=None,
        bias=None,
    ):
        super().__init__(link_ends, bias, normalize_with_speed_of_light=False)
        self.light_time_calculator = light_time_calculator
        self.transmitter_proper_time = transmitter_proper_time or UnitProperTimeRate()
        self.receiver_proper_time = receiver_proper_time or UnitProperTimeRate()

    def _check_topology(self):
        require_roles(
            self.link_ends,
            (LinkEndType.TRANSMITTER, LinkEndType.RECEIVER),
            "One-way Doppler",
        )

    @property
    def has_proper_time(self) -> bool:
        """Whether either clock deviates from coordinate time."""
        return not (
            isinstance(self.transmitter_proper_time, UnitProperTimeRate)
            and isinstance(self.receiver_proper_time, UnitProperTimeRate)
        )

    def fractional_shift(self, solution, ancillary=None, leg_index=0):
        """Dimensionless Doppler ``-d(light_time)/dt_rx`` of a resolved leg.

        Proper-time rates are applied when configured. ``leg_index`` is the
        position of the leg in the enclosing observable and selects its
        ancillary data.
        """
        calculator = self.light_time_calculator
        if not calculator.corrections:
            fraction = -light_time_rate(solution)
        else:
            fraction = -light_time_rate(
                solution,
                calculator.correction_partials(
                    solution, LinkEndType.TRANSMITTER, ancillary, leg_index
                ),
                calculator.correction_partials(
                    solution, LinkEndType.RECEIVER, ancillary, leg_index
                ),
                calculator.correction_time_partials(
                    solution, LinkEndType.TRANSMITTER, ancillary, leg_index
                ),
                calculator.correction_time_partials(
                    solution, LinkEndType.RECEIVER, ancillary, leg_index
                ),
            )
        if not self.has_proper_time:
            return fraction
        return apply_proper_time(
            fraction,
            self.transmitter_proper_time.rate_deviation(
                solution.transmitter_state, solution.transmission_time
            ),
            self.receiver_proper_time.rate_deviation(
                solution.receiver_state, solution.reception_time
            ),
        )

    def _compute_ideal(self, time, reference_end, ancillary):
        self._reference_index(reference_end)
        solution = self.light_time_calculator.solve(time, reference_end, ancillary, 0)
        fraction = self.fractional_shift(solution, ancillary, 0)
        if self._runtime_options["normalize_with_speed_of_light"]:
            return fraction, [solution]
        return const.c * fraction, [solution]


@final
class TwoWayDopplerObservationModel(ObservationModel):
    """Two-way Doppler composed of an uplink and a downlink one-way Doppler.

    The legs combine as ``(1 + total) = (1 + up) * (1 + down)`` in normalized
    units. The intermediate end may be a reflector or a retransmitter and may
    hold a retransmission delay (ancillary ``RETRANSMISSION_DELAYS``).

    Runtime options:
        normalize_with_speed_of_light: Return the dimensionless fraction
            instead of m/s. Default False.
    """

    def __init__(self, link_ends, uplink_model, downlink_model, bias=None):
        super().__init__(link_ends, bias, normalize_with_speed_of_light=False)
        self.uplink_model = uplink_model
        self.downlink_model = downlink_model

    def _check_topology(self):
        if len(self.link_ends.intermediate_roles) != 1:
            raise LinkEndTopologyError(
                f"Two-way Doppler needs exactly one intermediate link end, "
                f"got {self.link_ends!r}."
            )

    def _compute_ideal(self, time, reference_end, ancillary):
        reference_index = self._reference_index(reference_end)
        solutions = resolve_legs(
            (
                self.uplink_model.light_time_calculator,
                self.downlink_model.light_time_calculator,
            ),
            reference_index,
            time,
            self._retransmission_delays(ancillary),
            ancillary,
        )
        uplink = self.uplink_model.fractional_shift(solutions[0], ancillary, 0)
        downlink = self.downlink_model.fractional_shift(solutions[1], ancillary, 1)
        fraction = uplink + downlink + uplink * downlink
        if self._runtime_options["normalize_with_speed_of_light"]:
            return fraction, solutions
        return const.c * fraction, solutions

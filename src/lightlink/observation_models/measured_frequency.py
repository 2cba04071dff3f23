"""Frequency received after a transponder turnaround."""

from typing import final

from lightlink.core.ancillary import AncillaryKey, require_ancillary
from lightlink.core.link_ends import LinkEndType
from lightlink.frequencies import DsnTurnaroundRatios
from lightlink.logger import logger
from lightlink.observation_models.base import ObservationModel, require_roles, resolve_legs


@final
class DopplerMeasuredFrequencyObservationModel(ObservationModel):
    """Received frequency in Hz of a transmitter -> retransmitter -> receiver link.

        f_rx = f_tx(t_tx) * M(band_up, band_down) * (1 + up) * (1 + down)

    with ``up``/``down`` the normalized one-way Doppler of each leg and ``M``
    the turnaround ratio of the retransmitter. The uplink and downlink bands
    come from the ancillary ``FREQUENCY_BANDS`` and are required.

    Runtime options:
        turnaround_ratio: Lookup ``(station, band_in, band_out, time) ->
            ratio``. Defaults to the DSN table.

    Attributes:
        uplink_model: ``OneWayDopplerObservationModel`` of the uplink.
        downlink_model: ``OneWayDopplerObservationModel`` of the downlink.
        transmitting_frequency: ``(time) -> Hz`` of the transmitter. When None
            the ancillary ``REFERENCE_FREQUENCY`` is used as a constant.
    """

    def __init__(
        self,
        link_ends,
        uplink_model,
        downlink_model,
        transmitting_frequency=None,
        turnaround_ratio=None,
        bias=None,
    ):
        super().__init__(
            link_ends, bias, turnaround_ratio=turnaround_ratio or DsnTurnaroundRatios()
        )
        self.uplink_model = uplink_model
        self.downlink_model = downlink_model
        self.transmitting_frequency = transmitting_frequency

    def _check_topology(self):
        require_roles(
            self.link_ends,
            (LinkEndType.TRANSMITTER, LinkEndType.RETRANSMITTER, LinkEndType.RECEIVER),
            "Doppler measured frequency",
        )

    def _transmitted_frequency(self, time, ancillary):
        if self.transmitting_frequency is not None:
            return self.transmitting_frequency(time)
        return float(ancillary[AncillaryKey.REFERENCE_FREQUENCY])

    def _compute_ideal(self, time, reference_end, ancillary):
        reference_index = self._reference_index(reference_end)
        ancillary = require_ancillary(ancillary, "a Doppler measured frequency")
        uplink_band = ancillary.frequency_band(0)
        downlink_band = ancillary.frequency_band(1)

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

        station = self.link_ends[LinkEndType.RETRANSMITTER]
        ratio = self._runtime_options["turnaround_ratio"](
            station, uplink_band, downlink_band, solutions[0].reception_time
        )
        frequency = self._transmitted_frequency(solutions[0].transmission_time, ancillary)
        logger.debug(
            "Turnaround %s -> %s at %s: ratio %.12f", uplink_band.name, downlink_band.name, station, ratio
        )
        return frequency * ratio * (1.0 + uplink) * (1.0 + downlink), solutions

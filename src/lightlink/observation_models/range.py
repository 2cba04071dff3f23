"""Range observables."""

from typing import final

from lightlink import constants as const
from lightlink.core.link_ends import LinkEndType
from lightlink.exceptions import LinkEndTopologyError
from lightlink.logger import logger
from lightlink.observation_models.base import ObservationModel, require_roles, resolve_legs


@final
class OneWayRangeObservationModel(ObservationModel):
    """One-way range: ``c * light_time`` of a single leg, in meters."""

    def __init__(self, link_ends, light_time_calculator, bias=None):
        super().__init__(link_ends, bias)
        self.light_time_calculator = light_time_calculator

    def _check_topology(self):
        require_roles(
            self.link_ends,
            (LinkEndType.TRANSMITTER, LinkEndType.RECEIVER),
            "One-way range",
        )

    def _compute_ideal(self, time, reference_end, ancillary):
        self._reference_index(reference_end)
        solution = self.light_time_calculator.solve(time, reference_end, ancillary, 0)
        return const.c * solution.light_time, [solution]


@final
class NWayRangeObservationModel(ObservationModel):
    """Range over any number of legs, in meters.

    The observable is ``c`` times the total time between the first
    transmission and the final reception: the sum of all leg light times plus
    the retransmission delays at the intermediate ends. Two-way range is the
    two-leg case.
    """

    def __init__(self, link_ends, light_time_calculators, bias=None):
        super().__init__(link_ends, bias)
        self.light_time_calculators = tuple(light_time_calculators)
        if len(self.light_time_calculators) != self.link_ends.number_of_legs:
            raise LinkEndTopologyError(
                f"{self.link_ends.number_of_legs} leg(s) need as many light-time "
                f"calculators, got {len(self.light_time_calculators)}."
            )

    def _compute_ideal(self, time, reference_end, ancillary):
        reference_index = self._reference_index(reference_end)
        delays = self._retransmission_delays(ancillary)
        logger.debug(
            "Resolving %d range leg(s) from %s", len(self.light_time_calculators), reference_end.name
        )
        solutions = resolve_legs(
            self.light_time_calculators, reference_index, time, delays, ancillary
        )
        total_time = sum(solution.light_time for solution in solutions) + sum(delays)
        return const.c * total_time, solutions

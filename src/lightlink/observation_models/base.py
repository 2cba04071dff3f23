"""Common query contract and leg resolution for all observation models."""

import abc
from typing import NamedTuple

import jax.numpy as jnp
from jaxtyping import Array

from lightlink.core.ancillary import retransmission_delays
from lightlink.core.link_ends import LinkEnds, LinkEndType
from lightlink.exceptions import LinkEndTopologyError, UnsupportedReferenceLinkEndError
from lightlink.logger import logger


class ObservationWithLinkEndData(NamedTuple):
    """Observable together with the resolved times and states of every leg.

    ``link_end_times`` and ``link_end_states`` hold two entries per leg, the
    transmission and reception of that leg, ordered from the first
    transmitter to the final receiver.
    """

    observation: Array
    link_end_times: Array
    link_end_states: Array


def resolve_legs(calculators, reference_index, reference_time, delays, ancillary=None):
    """Solve the light time of every leg of a link.

    Legs downstream of the reference end are solved forward in transmission
    order, legs upstream of it backward in reverse order. Each solve is
    anchored on the time handed over by the previous one, shifted by the
    retransmission delay of the intermediate end in between. When the
    reference end is intermediate, ``reference_time`` is its reception time.

    Args:
        calculators: One ``LightTimeCalculator`` per leg, in transmission order.
        reference_index: Position of the reference end in transmission order.
        reference_time: Time at the reference end in seconds.
        delays: Retransmission delay of each intermediate end in seconds.
        ancillary: Optional ``ObservationAncillarySettings``.

    Returns:
        list[LightTimeSolution]: One solution per leg, in transmission order.
    """
    number_of_legs = len(calculators)
    solutions = [None] * number_of_legs

    if reference_index < number_of_legs:
        start = reference_time
        if reference_index > 0:
            start = reference_time + delays[reference_index - 1]
        for leg in range(reference_index, number_of_legs):
            solution = calculators[leg].solve(
                start, LinkEndType.TRANSMITTER, ancillary, leg
            )
            solutions[leg] = solution
            if leg + 1 < number_of_legs:
                start = solution.reception_time + delays[leg]

    end = reference_time
    for leg in reversed(range(reference_index)):
        solution = calculators[leg].solve(end, LinkEndType.RECEIVER, ancillary, leg)
        solutions[leg] = solution
        if leg > 0:
            end = solution.transmission_time - delays[leg - 1]

    return solutions


def link_end_data(solutions):
    """Flatten leg solutions into (times, states) arrays, two entries per leg."""
    times = []
    states = []
    for solution in solutions:
        times.extend((solution.transmission_time, solution.reception_time))
        states.extend((solution.transmitter_state, solution.receiver_state))
    return jnp.asarray(times), jnp.stack([jnp.asarray(state) for state in states])


class ObservationModel(abc.ABC):
    """Base class of all observable types.

    A model is built once and then queried many times. Queries are pure
    functions of (time, reference end, ancillary settings); nothing is cached
    between them. The only mutable state is a small set of runtime options
    changed through ``configure``.

    Attributes:
        link_ends: The ``LinkEnds`` of the observable.
        bias: Optional ``AbstractObservationBias`` applied by
            ``compute_observations``.
    """

    observable_size = 1

    def __init__(self, link_ends, bias=None, **runtime_options):
        self.link_ends = LinkEnds(link_ends)
        self.bias = bias
        self._runtime_options = dict(runtime_options)
        self._check_topology()

    def __repr__(self):
        return f"{type(self).__name__}({self.link_ends!r}, bias={self.bias!r})"

    def _check_topology(self):
        """Raise ``LinkEndTopologyError`` if the link ends do not fit the model."""

    @abc.abstractmethod
    def _compute_ideal(self, time, reference_end, ancillary):
        """Return (observable value, list of leg solutions)."""
        raise NotImplementedError

    def _reference_index(self, reference_end) -> int:
        reference_end = LinkEndType(reference_end)
        if reference_end not in self.link_ends:
            raise UnsupportedReferenceLinkEndError(
                f"{reference_end.name} is not a link end of {self.link_ends!r}."
            )
        return self.link_ends.index_of(reference_end)

    def _retransmission_delays(self, ancillary):
        return retransmission_delays(ancillary, len(self.link_ends.intermediate_roles))

    def configure(self, **options):
        """Change runtime options of the model.

        Not thread-safe: concurrent queries on the same instance must not run
        while options are being changed. Use separate instances for concurrent
        evaluation with different options.

        Raises:
            AttributeError: If an option is not defined for this model.
        """
        for key, value in options.items():
            if key not in self._runtime_options:
                raise AttributeError(
                    f"{key} is not a valid runtime option of {type(self).__name__}."
                )
            self._runtime_options[key] = value
            logger.debug("%s: %s set to %r", type(self).__name__, key, value)

    def runtime_options(self) -> dict:
        """Current runtime options (a copy)."""
        return dict(self._runtime_options)

    def compute_ideal_observations_with_link_end_data(
        self, time: float, reference_end: LinkEndType, ancillary=None
    ) -> ObservationWithLinkEndData:
        """Observable without bias, plus the resolved times/states of every leg."""
        value, solutions = self._compute_ideal(float(time), LinkEndType(reference_end), ancillary)
        times, states = link_end_data(solutions)
        return ObservationWithLinkEndData(jnp.atleast_1d(value), times, states)

    def compute_observations_with_link_end_data(
        self, time: float, reference_end: LinkEndType, ancillary=None
    ) -> ObservationWithLinkEndData:
        """Observable with bias applied, plus the resolved times/states of every leg."""
        ideal = self.compute_ideal_observations_with_link_end_data(
            time, reference_end, ancillary
        )
        if self.bias is None:
            return ideal
        observation = self.bias.apply(
            ideal.observation, ideal.link_end_times, ideal.link_end_states
        )
        return ideal._replace(observation=observation)

    def compute_ideal_observations(
        self, time: float, reference_end: LinkEndType, ancillary=None
    ) -> Array:
        """Observable without bias."""
        return self.compute_ideal_observations_with_link_end_data(
            time, reference_end, ancillary
        ).observation

    def compute_observations(
        self, time: float, reference_end: LinkEndType, ancillary=None
    ) -> Array:
        """Observable with bias applied."""
        return self.compute_observations_with_link_end_data(
            time, reference_end, ancillary
        ).observation


def require_roles(link_ends, roles, observable_name):
    """Raise ``LinkEndTopologyError`` unless the link ends have exactly ``roles``."""
    if tuple(link_ends.roles) != tuple(roles):
        expected = ", ".join(role.name for role in roles)
        raise LinkEndTopologyError(
            f"{observable_name} needs link ends ({expected}), got {link_ends!r}."
        )

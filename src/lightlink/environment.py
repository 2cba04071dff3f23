"""State-provider context handed to the observation-model factory."""

from lightlink.core.link_ends import LinkEndId, as_link_end_id
from lightlink.frequencies import DsnTurnaroundRatios


class ObservationEnvironment:
    """Injected collaborators the factory wires into the models.

    State functions and transmitting frequencies are keyed by ``LinkEndId``,
    by its string form (``"Earth/DSS-63"``) or, for body centres, by the bare
    body name.

    Attributes:
        state_functions: ``{link end: (time) -> 6-vector}``.
        gravitational_parameters: ``{body: mu in m^3/s^2}``.
        transmitting_frequencies: ``{link end: (time) -> Hz}``.
        turnaround_ratio: ``(station, band_in, band_out, time) -> ratio``.
    """

    def __init__(
        self,
        state_functions,
        gravitational_parameters=None,
        transmitting_frequencies=None,
        turnaround_ratio=None,
    ):
        self.state_functions = dict(state_functions)
        self.gravitational_parameters = dict(gravitational_parameters or {})
        self.transmitting_frequencies = dict(transmitting_frequencies or {})
        self.turnaround_ratio = turnaround_ratio or DsnTurnaroundRatios()

    def __repr__(self):
        return (
            f"ObservationEnvironment(bodies={sorted(map(str, self.state_functions))}, "
            f"gravitational_parameters={sorted(self.gravitational_parameters)})"
        )

    @staticmethod
    def _lookup(table, link_end, what):
        link_end = as_link_end_id(link_end)
        for key in (link_end, str(link_end)):
            if key in table:
                return table[key]
        raise KeyError(f"No {what} for link end '{link_end}'.")

    def state_function(self, link_end):
        """State function of a link end (station or body centre)."""
        return self._lookup(self.state_functions, link_end, "state function")

    def body_state(self, body: str):
        """State function of a body centre."""
        return self.state_function(LinkEndId(body))

    def gravitational_parameter(self, body: str) -> float:
        """Gravitational parameter of a body."""
        if body not in self.gravitational_parameters:
            raise KeyError(f"No gravitational parameter for body '{body}'.")
        return self.gravitational_parameters[body]

    def transmitting_frequency(self, link_end):
        """Transmitting-frequency function of a link end, or None."""
        link_end = as_link_end_id(link_end)
        for key in (link_end, str(link_end)):
            if key in self.transmitting_frequencies:
                return self.transmitting_frequencies[key]
        return None

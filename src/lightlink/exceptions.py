"""Errors raised by the observation-model engine.

Every error reaches the caller of the query (or of the factory) that
triggered it. None of them are retried internally.
"""


class ObservationModelError(Exception):
    """Base class for all lightlink errors."""


class LightTimeConvergenceError(ObservationModelError, RuntimeError):
    """The light-time iteration exceeded its iteration cap.

    Usually points at non-physical inputs (non-causal or superluminal states).
    """

    def __init__(self, reference_time, iterations, last_change):
        self.reference_time = reference_time
        self.iterations = iterations
        self.last_change = last_change
        super().__init__(
            f"Light time did not converge at reference time {reference_time} s "
            f"after {iterations} iterations (last change {last_change:.3e} s)."
        )


class LinkEndTopologyError(ObservationModelError, ValueError):
    """Link ends do not match the cardinality or roles an observable needs."""


class MissingAncillaryDataError(ObservationModelError, KeyError):
    """A model or correction needs ancillary data that was not provided."""

    def __str__(self):
        # KeyError quotes its argument, keep the message readable
        return str(self.args[0]) if self.args else ""


class UnsupportedReferenceLinkEndError(ObservationModelError, ValueError):
    """The reference link end is not valid for the observable's topology."""

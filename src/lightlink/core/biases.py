"""Observation biases layered on top of the ideal observable.

Every bias splits into an additive term A and a relative term B, and the
biased observable is

    observed = A + (1 + B) * ideal

For a ``MultipleBias`` the A and B of all members are summed first, so the
result does not depend on the order in which the members are listed.
"""

import abc
from typing import final

import equinox as eqx
import jax.numpy as jnp
import numpy as np
from jaxtyping import Array


class AbstractObservationBias(eqx.Module):
    """Base class for all observation biases."""

    @abc.abstractmethod
    def additive_term(self, link_end_times, link_end_states) -> Array:
        """Additive contribution A, in observable units."""
        raise NotImplementedError

    @abc.abstractmethod
    def relative_term(self, link_end_times, link_end_states) -> Array:
        """Relative (multiplicative) contribution B, dimensionless."""
        raise NotImplementedError

    def apply(self, ideal: Array, link_end_times, link_end_states) -> Array:
        """Return ``A + (1 + B) * ideal``."""
        additive = self.additive_term(link_end_times, link_end_states)
        relative = self.relative_term(link_end_times, link_end_states)
        return additive + (1.0 + relative) * ideal


@final
class ConstantBias(AbstractObservationBias):
    """Constant additive bias."""

    value: Array

    def __init__(self, value):
        """Initialize the constant bias."""
        self.value = jnp.atleast_1d(jnp.asarray(value, dtype=float))

    def additive_term(self, link_end_times, link_end_states):
        """Return the constant."""
        return self.value

    def relative_term(self, link_end_times, link_end_states):
        """No relative part."""
        return jnp.zeros_like(self.value)


@final
class ConstantRelativeBias(AbstractObservationBias):
    """Constant bias proportional to the ideal observable."""

    value: Array

    def __init__(self, value):
        """Initialize the relative bias."""
        self.value = jnp.atleast_1d(jnp.asarray(value, dtype=float))

    def additive_term(self, link_end_times, link_end_states):
        """No additive part."""
        return jnp.zeros_like(self.value)

    def relative_term(self, link_end_times, link_end_states):
        """Return the constant."""
        return self.value


@final
class TimeDriftBias(AbstractObservationBias):
    """Additive bias growing linearly with the time at one link end.

    Attributes:
        drift: Bias rate in observable units per second.
        reference_epoch: Epoch at which the bias is zero.
        reference_end_index: Index into the link-end times used as the clock.
    """

    drift: Array
    reference_epoch: float
    reference_end_index: int

    def __init__(self, drift, reference_epoch: float, reference_end_index: int = 0):
        """Initialize the time-drift bias."""
        self.drift = jnp.atleast_1d(jnp.asarray(drift, dtype=float))
        self.reference_epoch = float(reference_epoch)
        self.reference_end_index = int(reference_end_index)

    def additive_term(self, link_end_times, link_end_states):
        """Return ``drift * (t - reference_epoch)``."""
        time = link_end_times[self.reference_end_index]
        return self.drift * (time - self.reference_epoch)

    def relative_term(self, link_end_times, link_end_states):
        """No relative part."""
        return jnp.zeros_like(self.drift)


@final
class ArcWiseConstantBias(AbstractObservationBias):
    """Piecewise-constant bias, one value per arc.

    Arc ``i`` starts at ``arc_start_times[i]`` and lasts until the next start.
    The arc is selected with the time at ``reference_end_index``.
    """

    arc_start_times: np.ndarray
    values: Array
    reference_end_index: int
    relative: bool

    def __init__(self, arc_start_times, values, reference_end_index: int = 0, relative: bool = False):
        """Initialize the arc-wise bias."""
        arc_start_times = np.asarray(arc_start_times, dtype=float)
        values = jnp.asarray(values, dtype=float)
        if values.ndim == 1:
            values = values[:, None]
        if arc_start_times.ndim != 1 or len(arc_start_times) != values.shape[0]:
            raise ValueError("Each arc start time needs exactly one bias value.")
        if np.any(np.diff(arc_start_times) <= 0.0):
            raise ValueError("Arc start times must be strictly increasing.")
        self.arc_start_times = arc_start_times
        self.values = values
        self.reference_end_index = int(reference_end_index)
        self.relative = bool(relative)

    def arc_index(self, time: float) -> int:
        """Index of the arc containing ``time``."""
        index = int(np.searchsorted(self.arc_start_times, time, side="right")) - 1
        if index < 0:
            raise ValueError(
                f"Time {time} s precedes the first bias arc "
                f"({self.arc_start_times[0]} s)."
            )
        return index

    def _arc_value(self, link_end_times):
        return self.values[self.arc_index(float(link_end_times[self.reference_end_index]))]

    def additive_term(self, link_end_times, link_end_states):
        """Arc value when the bias is additive, else zero."""
        value = self._arc_value(link_end_times)
        return jnp.zeros_like(value) if self.relative else value

    def relative_term(self, link_end_times, link_end_states):
        """Arc value when the bias is relative, else zero."""
        value = self._arc_value(link_end_times)
        return value if self.relative else jnp.zeros_like(value)


@final
class MultipleBias(AbstractObservationBias):
    """Combination of biases: A and B are summed over all members."""

    biases: tuple[AbstractObservationBias, ...]

    def __init__(self, biases):
        """Initialize the combined bias."""
        self.biases = tuple(biases)

    def additive_term(self, link_end_times, link_end_states):
        """Sum of the members' additive terms."""
        total = 0.0
        for bias in self.biases:
            total = total + bias.additive_term(link_end_times, link_end_states)
        return jnp.atleast_1d(total)

    def relative_term(self, link_end_times, link_end_states):
        """Sum of the members' relative terms."""
        total = 0.0
        for bias in self.biases:
            total = total + bias.relative_term(link_end_times, link_end_states)
        return jnp.atleast_1d(total)

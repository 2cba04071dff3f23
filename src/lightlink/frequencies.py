"""Transmitter frequencies and transponder turnaround ratios.

A transmitting-frequency provider is any callable ``(time) -> Hz``. A
turnaround-ratio lookup is any callable
``(station, uplink_band, downlink_band, time) -> ratio``; the DSN table below
is the default one.
"""

from typing import final

import equinox as eqx
import interpax
import jax.numpy as jnp
import numpy as np
from jaxtyping import Array

from lightlink.core.ancillary import FrequencyBand
from lightlink.core.link_ends import as_link_end_id

# Uplink -> downlink turnaround ratios of deep-space transponders
_DSN_TURNAROUND_RATIOS = {
    (FrequencyBand.S, FrequencyBand.S): 240.0 / 221.0,
    (FrequencyBand.S, FrequencyBand.X): 880.0 / 221.0,
    (FrequencyBand.S, FrequencyBand.KA): 3344.0 / 221.0,
    (FrequencyBand.X, FrequencyBand.S): 240.0 / 749.0,
    (FrequencyBand.X, FrequencyBand.X): 880.0 / 749.0,
    (FrequencyBand.X, FrequencyBand.KA): 3344.0 / 749.0,
    (FrequencyBand.KA, FrequencyBand.S): 240.0 / 3599.0,
    (FrequencyBand.KA, FrequencyBand.X): 880.0 / 3599.0,
    (FrequencyBand.KA, FrequencyBand.KA): 3344.0 / 3599.0,
}


def dsn_default_turnaround_ratio(uplink_band, downlink_band) -> float:
    """Standard DSN transponder ratio f_down / f_up for a band pair.

    Args:
        uplink_band: ``FrequencyBand`` (or its value) of the received signal.
        downlink_band: ``FrequencyBand`` (or its value) of the retransmitted signal.

    Raises:
        ValueError: For band pairs without a standard ratio.
    """
    key = (FrequencyBand(uplink_band), FrequencyBand(downlink_band))
    if key not in _DSN_TURNAROUND_RATIOS:
        raise ValueError(
            f"No DSN turnaround ratio for uplink {key[0].name} / downlink {key[1].name}."
        )
    return _DSN_TURNAROUND_RATIOS[key]


class DsnTurnaroundRatios:
    """Turnaround-ratio lookup backed by the DSN table.

    Per-station overrides can be given as
    ``{station: {(band_in, band_out): ratio}}``, where a station is a body
    name, a ``(body, reference_point)`` pair or a ``LinkEndId``; a plain body
    name matches the link end with no reference point. Anything not
    overridden falls back to ``dsn_default_turnaround_ratio``. The ratios do
    not vary in time.
    """

    def __init__(self, overrides=None):
        self.overrides = {
            as_link_end_id(station): {
                (FrequencyBand(band_in), FrequencyBand(band_out)): float(ratio)
                for (band_in, band_out), ratio in table.items()
            }
            for station, table in (overrides or {}).items()
        }

    def __call__(self, station, band_in, band_out, time) -> float:
        key = (FrequencyBand(band_in), FrequencyBand(band_out))
        station_table = self.overrides.get(as_link_end_id(station), {})
        if key in station_table:
            return station_table[key]
        return dsn_default_turnaround_ratio(*key)

    def __repr__(self):
        return f"DsnTurnaroundRatios(overrides={self.overrides})"


@final
class ConstantFrequency(eqx.Module):
    """Transmitter running at a fixed frequency."""

    frequency_hz: float

    def __init__(self, frequency_hz: float):
        """Initialize the constant frequency."""
        if frequency_hz <= 0.0:
            raise ValueError(f"Frequency must be positive, got {frequency_hz} Hz.")
        self.frequency_hz = float(frequency_hz)

    def __call__(self, time: float) -> float:
        """Return the frequency in Hz."""
        return self.frequency_hz


@final
class PiecewiseLinearFrequency(eqx.Module):
    """Ramped transmitter frequency, linearly interpolated between samples.

    Times outside the tabulated span are rejected rather than extrapolated.
    """

    times: Array
    frequencies_hz: Array
    interp: interpax.Interpolator1D

    def __init__(self, times, frequencies_hz):
        """Initialize the ramp table."""
        times = np.asarray(times, dtype=float)
        if times.ndim != 1 or len(times) < 2:
            raise ValueError("A frequency ramp needs at least two samples.")
        if np.any(np.diff(times) <= 0.0):
            raise ValueError("Frequency ramp times must be strictly increasing.")
        self.times = jnp.asarray(times)
        self.frequencies_hz = jnp.asarray(frequencies_hz, dtype=float)
        self.interp = interpax.Interpolator1D(
            self.times, self.frequencies_hz, method="linear"
        )

    def __call__(self, time: float) -> Array:
        """Return the frequency in Hz at ``time``."""
        if not float(self.times[0]) <= float(time) <= float(self.times[-1]):
            raise ValueError(
                f"Time {time} s is outside the frequency ramp "
                f"[{float(self.times[0])}, {float(self.times[-1])}] s."
            )
        return self.interp(jnp.asarray(time, dtype=float))

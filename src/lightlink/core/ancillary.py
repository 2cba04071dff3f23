"""Per-observation auxiliary parameters (frequency bands, delays, ...)."""

from collections.abc import Mapping
from enum import Enum

from lightlink.exceptions import MissingAncillaryDataError

_MISSING = object()


class FrequencyBand(Enum):
    """Radio frequency bands used in deep-space tracking."""

    S = "s_band"
    X = "x_band"
    KA = "ka_band"
    KU = "ku_band"

    @property
    def nominal_frequency_hz(self) -> float:
        """Representative carrier frequency of the band in Hz."""
        return _NOMINAL_FREQUENCIES_HZ[self]


_NOMINAL_FREQUENCIES_HZ = {
    FrequencyBand.S: 2.3e9,
    FrequencyBand.X: 8.4e9,
    FrequencyBand.KA: 32.0e9,
    FrequencyBand.KU: 15.0e9,
}


class AncillaryKey(Enum):
    """Keys understood by the observation models and corrections."""

    FREQUENCY_BANDS = "frequency_bands"
    RETRANSMISSION_DELAYS = "retransmission_delays"
    INTEGRATION_TIME = "integration_time"
    REFERENCE_FREQUENCY = "reference_frequency"
    REFERENCE_FREQUENCY_BAND = "reference_frequency_band"


class ObservationAncillarySettings(Mapping):
    """Read-only key -> value map of auxiliary observation parameters.

    Keys may be given as ``AncillaryKey`` members or their string values.

    Example:
        ```python
        ancillary = ObservationAncillarySettings(
            frequency_bands=[FrequencyBand.X, FrequencyBand.X],
            retransmission_delays=[0.0],
        )
        ```
    """

    def __init__(self, data=None, **kwargs):
        merged = dict(data or {})
        merged.update(kwargs)
        self._data = {AncillaryKey(key): value for key, value in merged.items()}

    def __getitem__(self, key):
        key = AncillaryKey(key)
        if key not in self._data:
            raise MissingAncillaryDataError(
                f"Ancillary setting '{key.value}' is required but was not provided."
            )
        return self._data[key]

    def __iter__(self):
        return iter(self._data)

    def __len__(self):
        return len(self._data)

    def __repr__(self):
        parts = ", ".join(f"{key.value}={value!r}" for key, value in self._data.items())
        return f"ObservationAncillarySettings({parts})"

    def get(self, key, default=_MISSING):
        """Return the value for ``key``; raise when absent and no default is given."""
        if default is _MISSING:
            return self[key]
        return self._data.get(AncillaryKey(key), default)

    def frequency_band(self, leg_index: int) -> FrequencyBand:
        """Frequency band of a leg (0 is the first leg in transmission order)."""
        bands = self[AncillaryKey.FREQUENCY_BANDS]
        if leg_index >= len(bands):
            raise MissingAncillaryDataError(
                f"Frequency band for leg {leg_index} is required, "
                f"only {len(bands)} band(s) provided."
            )
        return FrequencyBand(bands[leg_index])

    def retransmission_delays(self, number_of_intermediate_ends: int) -> list[float]:
        """Delays at each intermediate link end, zero when not provided."""
        delays = self.get(AncillaryKey.RETRANSMISSION_DELAYS, None)
        if delays is None:
            return [0.0] * number_of_intermediate_ends
        if len(delays) != number_of_intermediate_ends:
            raise MissingAncillaryDataError(
                f"Expected {number_of_intermediate_ends} retransmission delay(s), "
                f"got {len(delays)}."
            )
        return [float(delay) for delay in delays]


def retransmission_delays(ancillary, number_of_intermediate_ends):
    """Delays for an optional ancillary object."""
    if ancillary is None:
        return [0.0] * number_of_intermediate_ends
    return ancillary.retransmission_delays(number_of_intermediate_ends)


def require_ancillary(ancillary, purpose: str) -> ObservationAncillarySettings:
    """Fail fast when ancillary settings are needed but absent."""
    if ancillary is None:
        raise MissingAncillaryDataError(
            f"Ancillary settings are required for {purpose} but none were provided."
        )
    return ancillary

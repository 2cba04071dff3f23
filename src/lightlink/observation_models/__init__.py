"""Observation models: range, Doppler and measured frequency."""

from lightlink.observation_models.base import (
    ObservationModel,
    ObservationWithLinkEndData,
    resolve_legs,
)
from lightlink.observation_models.doppler import (
    OneWayDopplerObservationModel,
    TwoWayDopplerObservationModel,
)
from lightlink.observation_models.measured_frequency import (
    DopplerMeasuredFrequencyObservationModel,
)
from lightlink.observation_models.range import (
    NWayRangeObservationModel,
    OneWayRangeObservationModel,
)

__all__ = [
    "ObservationModel",
    "ObservationWithLinkEndData",
    "resolve_legs",
    "OneWayRangeObservationModel",
    "NWayRangeObservationModel",
    "OneWayDopplerObservationModel",
    "TwoWayDopplerObservationModel",
    "DopplerMeasuredFrequencyObservationModel",
]

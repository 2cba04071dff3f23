"""Core building blocks: link ends, light time, corrections, clocks and biases."""

from lightlink.core.ancillary import (
    AncillaryKey,
    FrequencyBand,
    ObservationAncillarySettings,
)
from lightlink.core.biases import (
    AbstractObservationBias,
    ArcWiseConstantBias,
    ConstantBias,
    ConstantRelativeBias,
    MultipleBias,
    TimeDriftBias,
)
from lightlink.core.light_time import (
    LightTimeCalculator,
    LightTimeSolution,
    geometric_light_time,
)
from lightlink.core.light_time_corrections import AbstractLightTimeCorrection
from lightlink.core.link_ends import LinkEndId, LinkEnds, LinkEndType
from lightlink.core.proper_time import (
    AbstractProperTimeRateCalculator,
    DirectFirstOrderProperTimeRate,
    UnitProperTimeRate,
)

__all__ = [
    "AncillaryKey",
    "FrequencyBand",
    "ObservationAncillarySettings",
    "AbstractObservationBias",
    "ArcWiseConstantBias",
    "ConstantBias",
    "ConstantRelativeBias",
    "MultipleBias",
    "TimeDriftBias",
    "LightTimeCalculator",
    "LightTimeSolution",
    "geometric_light_time",
    "AbstractLightTimeCorrection",
    "LinkEndId",
    "LinkEnds",
    "LinkEndType",
    "AbstractProperTimeRateCalculator",
    "DirectFirstOrderProperTimeRate",
    "UnitProperTimeRate",
]

"""Light-time and observation models for radiometric tracking in JAX."""

import jax

# Light times of deep-space links need double precision
jax.config.update("jax_enable_x64", True)

from lightlink import constants, conversions  # noqa: E402
from lightlink.core import (  # noqa: E402
    AncillaryKey,
    ArcWiseConstantBias,
    ConstantBias,
    ConstantRelativeBias,
    DirectFirstOrderProperTimeRate,
    FrequencyBand,
    LightTimeCalculator,
    LightTimeSolution,
    LinkEndId,
    LinkEnds,
    LinkEndType,
    MultipleBias,
    ObservationAncillarySettings,
    TimeDriftBias,
    UnitProperTimeRate,
)
from lightlink.corrections import (  # noqa: E402
    FirstOrderRelativisticCorrection,
    IonosphericCorrection,
    TroposphericCorrection,
    UserDefinedCorrection,
)
from lightlink.creation import (  # noqa: E402
    create_light_time_calculator,
    create_observation_model,
)
from lightlink.environment import ObservationEnvironment  # noqa: E402
from lightlink.ephemerides import KeplerOrbit, LinearMotion, RotatingStation  # noqa: E402
from lightlink.exceptions import (  # noqa: E402
    LightTimeConvergenceError,
    LinkEndTopologyError,
    MissingAncillaryDataError,
    ObservationModelError,
    UnsupportedReferenceLinkEndError,
)
from lightlink.frequencies import (  # noqa: E402
    ConstantFrequency,
    DsnTurnaroundRatios,
    PiecewiseLinearFrequency,
    dsn_default_turnaround_ratio,
)
from lightlink.observation_models import (  # noqa: E402
    DopplerMeasuredFrequencyObservationModel,
    NWayRangeObservationModel,
    ObservationModel,
    ObservationWithLinkEndData,
    OneWayDopplerObservationModel,
    OneWayRangeObservationModel,
    TwoWayDopplerObservationModel,
)
from lightlink.observation_settings import (  # noqa: E402
    ArcWiseBiasSettings,
    ConstantBiasSettings,
    DirectFirstOrderProperTimeRateSettings,
    FirstOrderRelativisticCorrectionSettings,
    IonosphericCorrectionSettings,
    MultipleBiasSettings,
    ObservableType,
    ObservationModelSettings,
    TimeDriftBiasSettings,
    TroposphericCorrectionSettings,
    UserDefinedCorrectionSettings,
)
from lightlink.settings import LightTimeConvergenceSettings  # noqa: E402

__all__ = [
    "constants",
    "conversions",
    "AncillaryKey",
    "ArcWiseConstantBias",
    "ConstantBias",
    "ConstantRelativeBias",
    "DirectFirstOrderProperTimeRate",
    "FrequencyBand",
    "LightTimeCalculator",
    "LightTimeSolution",
    "LinkEndId",
    "LinkEnds",
    "LinkEndType",
    "MultipleBias",
    "ObservationAncillarySettings",
    "TimeDriftBias",
    "UnitProperTimeRate",
    "FirstOrderRelativisticCorrection",
    "IonosphericCorrection",
    "TroposphericCorrection",
    "UserDefinedCorrection",
    "create_light_time_calculator",
    "create_observation_model",
    "ObservationEnvironment",
    "KeplerOrbit",
    "LinearMotion",
    "RotatingStation",
    "LightTimeConvergenceError",
    "LinkEndTopologyError",
    "MissingAncillaryDataError",
    "ObservationModelError",
    "UnsupportedReferenceLinkEndError",
    "ConstantFrequency",
    "DsnTurnaroundRatios",
    "PiecewiseLinearFrequency",
    "dsn_default_turnaround_ratio",
    "DopplerMeasuredFrequencyObservationModel",
    "NWayRangeObservationModel",
    "ObservationModel",
    "ObservationWithLinkEndData",
    "OneWayDopplerObservationModel",
    "OneWayRangeObservationModel",
    "TwoWayDopplerObservationModel",
    "ArcWiseBiasSettings",
    "ConstantBiasSettings",
    "DirectFirstOrderProperTimeRateSettings",
    "FirstOrderRelativisticCorrectionSettings",
    "IonosphericCorrectionSettings",
    "MultipleBiasSettings",
    "ObservableType",
    "ObservationModelSettings",
    "TimeDriftBiasSettings",
    "TroposphericCorrectionSettings",
    "UserDefinedCorrectionSettings",
    "LightTimeConvergenceSettings",
]

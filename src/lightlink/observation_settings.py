"""Declarative settings consumed by the observation-model factory.

Settings form an owned tree: an ``ObservationModelSettings`` holds its
correction, bias and proper-time settings by value, and composite biases hold
their members the same way. Nothing in the tree points back up.

Example:
    ```python
    settings = ObservationModelSettings(
        ObservableType.TWO_WAY_DOPPLER,
        {
            LinkEndType.TRANSMITTER: ("Earth", "DSS-63"),
            LinkEndType.RETRANSMITTER: "Spacecraft",
            LinkEndType.RECEIVER: ("Earth", "DSS-63"),
        },
        light_time_corrections=[FirstOrderRelativisticCorrectionSettings(["Sun"])],
        bias=ConstantBiasSettings(1e-3),
    )
    ```
"""

from enum import Enum

import equinox as eqx

from lightlink.core.link_ends import LinkEnds, LinkEndType


class ObservableType(Enum):
    """Observable types the factory can build."""

    ONE_WAY_RANGE = "one_way_range"
    N_WAY_RANGE = "n_way_range"
    TWO_WAY_RANGE = "two_way_range"
    ONE_WAY_DOPPLER = "one_way_doppler"
    TWO_WAY_DOPPLER = "two_way_doppler"
    DOPPLER_MEASURED_FREQUENCY = "doppler_measured_frequency"

    @property
    def is_doppler(self) -> bool:
        """Whether the observable is derived from light-time rates."""
        return self in (
            ObservableType.ONE_WAY_DOPPLER,
            ObservableType.TWO_WAY_DOPPLER,
            ObservableType.DOPPLER_MEASURED_FREQUENCY,
        )


# Light-time corrections
class LightTimeCorrectionSettings(eqx.Module):
    """Base of all correction settings."""


class FirstOrderRelativisticCorrectionSettings(LightTimeCorrectionSettings):
    """Shapiro delay of the listed bodies."""

    perturbing_bodies: tuple[str, ...]
    ppn_gamma: float = 1.0

    def __init__(self, perturbing_bodies, ppn_gamma: float = 1.0):
        self.perturbing_bodies = tuple(perturbing_bodies)
        self.ppn_gamma = float(ppn_gamma)


class TroposphericCorrectionSettings(LightTimeCorrectionSettings):
    """Tropospheric delay, applied at every ground-station end of every leg."""

    zenith_delay_m: float = 2.3
    minimum_elevation_sine: float = 0.2


class IonosphericCorrectionSettings(LightTimeCorrectionSettings):
    """Ionospheric delay, applied at every ground-station end of every leg."""

    vertical_tec: float = 1.0e17
    minimum_elevation_sine: float = 0.2


class UserDefinedCorrectionSettings(LightTimeCorrectionSettings):
    """Arbitrary delay function, see ``UserDefinedCorrection``."""

    value_function: callable
    partial_function: callable = None


# Biases
class ObservationBiasSettings(eqx.Module):
    """Base of all bias settings."""


class ConstantBiasSettings(ObservationBiasSettings):
    """Constant bias, additive or relative."""

    value: object
    additive: bool = True


class TimeDriftBiasSettings(ObservationBiasSettings):
    """Additive bias ``drift * (t - reference_epoch)`` with t the time at ``reference_end``."""

    drift: object
    reference_epoch: float
    reference_end: LinkEndType = LinkEndType.RECEIVER


class ArcWiseBiasSettings(ObservationBiasSettings):
    """Piecewise-constant bias selected by the time at ``reference_end``."""

    arc_start_times: object
    values: object
    reference_end: LinkEndType = LinkEndType.RECEIVER
    additive: bool = True


class MultipleBiasSettings(ObservationBiasSettings):
    """Combination of biases, ``A + (1 + B) * ideal``."""

    biases: tuple[ObservationBiasSettings, ...]

    def __init__(self, biases):
        self.biases = tuple(biases)


# Proper time
class ProperTimeRateSettings(eqx.Module):
    """Base of all proper-time rate settings."""


class DirectFirstOrderProperTimeRateSettings(ProperTimeRateSettings):
    """First-order rate in the point-mass potential of ``central_body``."""

    central_body: str


class ObservationModelSettings(eqx.Module):
    """Everything needed to build one observation model.

    Attributes:
        observable_type: ``ObservableType`` to build.
        link_ends: ``LinkEnds`` (or a mapping accepted by it).
        light_time_corrections: Corrections applied to every leg.
        bias: Optional bias settings.
        proper_time_rates: ``{role: ProperTimeRateSettings}``; unlisted roles
            run at coordinate time. Only used by Doppler observables.
    """

    observable_type: ObservableType
    link_ends: LinkEnds
    light_time_corrections: tuple[LightTimeCorrectionSettings, ...]
    bias: ObservationBiasSettings | None
    proper_time_rates: dict

    def __init__(
        self,
        observable_type,
        link_ends,
        light_time_corrections=(),
        bias=None,
        proper_time_rates=None,
    ):
        self.observable_type = ObservableType(observable_type)
        self.link_ends = LinkEnds(link_ends)
        self.light_time_corrections = tuple(light_time_corrections)
        self.bias = bias
        self.proper_time_rates = {
            LinkEndType(role): rate for role, rate in (proper_time_rates or {}).items()
        }

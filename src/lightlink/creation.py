"""Factory turning declarative settings into wired observation models.

All topology checks happen here, at construction; a model that is returned
is fully wired and never fails on link-end cardinality at query time.
"""

from lightlink.core.biases import (
    ArcWiseConstantBias,
    ConstantBias,
    ConstantRelativeBias,
    MultipleBias,
    TimeDriftBias,
)
from lightlink.core.light_time import LightTimeCalculator
from lightlink.core.link_ends import LinkEnds, LinkEndType
from lightlink.core.proper_time import DirectFirstOrderProperTimeRate
from lightlink.corrections import (
    FirstOrderRelativisticCorrection,
    IonosphericCorrection,
    TroposphericCorrection,
    UserDefinedCorrection,
)
from lightlink.exceptions import LinkEndTopologyError
from lightlink.logger import logger
from lightlink.observation_models import (
    DopplerMeasuredFrequencyObservationModel,
    NWayRangeObservationModel,
    OneWayDopplerObservationModel,
    OneWayRangeObservationModel,
    TwoWayDopplerObservationModel,
)
from lightlink.observation_settings import (
    ArcWiseBiasSettings,
    ConstantBiasSettings,
    DirectFirstOrderProperTimeRateSettings,
    FirstOrderRelativisticCorrectionSettings,
    IonosphericCorrectionSettings,
    MultipleBiasSettings,
    ObservableType,
    TimeDriftBiasSettings,
    TroposphericCorrectionSettings,
    UserDefinedCorrectionSettings,
)

_ONE_WAY_ROLES = (LinkEndType.TRANSMITTER, LinkEndType.RECEIVER)
_TURNAROUND_ROLES = (
    LinkEndType.TRANSMITTER,
    LinkEndType.RETRANSMITTER,
    LinkEndType.RECEIVER,
)


def check_topology(observable_type: ObservableType, link_ends: LinkEnds):
    """Raise ``LinkEndTopologyError`` if the link ends cannot carry the observable."""
    roles = link_ends.roles
    if observable_type in (ObservableType.ONE_WAY_RANGE, ObservableType.ONE_WAY_DOPPLER):
        valid = roles == _ONE_WAY_ROLES
    elif observable_type in (ObservableType.TWO_WAY_RANGE, ObservableType.TWO_WAY_DOPPLER):
        valid = len(link_ends.intermediate_roles) == 1
    elif observable_type == ObservableType.DOPPLER_MEASURED_FREQUENCY:
        valid = roles == _TURNAROUND_ROLES
    else:
        valid = link_ends.number_of_legs >= 1
    if not valid:
        raise LinkEndTopologyError(
            f"Link ends {link_ends!r} are not valid for {observable_type.value}."
        )


def link_end_time_index(link_ends: LinkEnds, role: LinkEndType) -> int:
    """Index of a role's time in the flattened link-end times of an observable.

    Times hold two entries per leg, so an intermediate end appears twice; its
    reception time is used.
    """
    if role not in link_ends:
        raise LinkEndTopologyError(f"{LinkEndType(role).name} is not in {link_ends!r}.")
    position = link_ends.index_of(role)
    return 0 if position == 0 else 2 * position - 1


def create_light_time_corrections(correction_settings, transmitter, receiver, environment):
    """Build the correction stack of one leg.

    Media corrections are attached at every ground-station end of the leg and
    skipped on legs without one.
    """
    corrections = []
    for settings in correction_settings:
        if isinstance(settings, FirstOrderRelativisticCorrectionSettings):
            corrections.append(
                FirstOrderRelativisticCorrection(
                    [environment.body_state(body) for body in settings.perturbing_bodies],
                    [
                        environment.gravitational_parameter(body)
                        for body in settings.perturbing_bodies
                    ],
                    settings.ppn_gamma,
                )
            )
        elif isinstance(settings, (TroposphericCorrectionSettings, IonosphericCorrectionSettings)):
            for ground_end, link_end in (
                (LinkEndType.TRANSMITTER, transmitter),
                (LinkEndType.RECEIVER, receiver),
            ):
                if not link_end.is_ground_station:
                    continue
                central_body_state = environment.body_state(link_end.body)
                if isinstance(settings, TroposphericCorrectionSettings):
                    corrections.append(
                        TroposphericCorrection(
                            ground_end,
                            central_body_state,
                            settings.zenith_delay_m,
                            settings.minimum_elevation_sine,
                        )
                    )
                else:
                    corrections.append(
                        IonosphericCorrection(
                            ground_end,
                            central_body_state,
                            settings.vertical_tec,
                            settings.minimum_elevation_sine,
                        )
                    )
        elif isinstance(settings, UserDefinedCorrectionSettings):
            corrections.append(
                UserDefinedCorrection(settings.value_function, settings.partial_function)
            )
        else:
            raise TypeError(f"Unknown light-time correction settings {settings!r}.")
    return corrections


def create_light_time_calculator(
    link_ends,
    from_role,
    to_role,
    environment,
    corrections=(),
    convergence=None,
):
    """Build the light-time solver of the leg ``from_role`` -> ``to_role``.

    Args:
        link_ends: ``LinkEnds`` of the observable.
        from_role: Transmitting role of the leg.
        to_role: Receiving role of the leg, later in transmission order.
        environment: ``ObservationEnvironment`` providing the state functions.
        corrections: Light-time correction settings.
        convergence: Optional ``LightTimeConvergenceSettings``.
    """
    link_ends = LinkEnds(link_ends)
    for role in (from_role, to_role):
        if role not in link_ends:
            raise LinkEndTopologyError(f"{LinkEndType(role).name} is not in {link_ends!r}.")
    if link_ends.index_of(from_role) >= link_ends.index_of(to_role):
        raise LinkEndTopologyError(
            f"A leg must go forward in transmission order, got "
            f"{LinkEndType(from_role).name} -> {LinkEndType(to_role).name}."
        )
    transmitter = link_ends[from_role]
    receiver = link_ends[to_role]
    return LightTimeCalculator.from_settings(
        environment.state_function(transmitter),
        environment.state_function(receiver),
        create_light_time_corrections(corrections, transmitter, receiver, environment),
        convergence,
    )


def create_observation_bias(settings, link_ends):
    """Build a bias from its settings; None stays None."""
    if settings is None:
        return None
    if isinstance(settings, ConstantBiasSettings):
        if settings.additive:
            return ConstantBias(settings.value)
        return ConstantRelativeBias(settings.value)
    if isinstance(settings, TimeDriftBiasSettings):
        return TimeDriftBias(
            settings.drift,
            settings.reference_epoch,
            link_end_time_index(link_ends, settings.reference_end),
        )
    if isinstance(settings, ArcWiseBiasSettings):
        return ArcWiseConstantBias(
            settings.arc_start_times,
            settings.values,
            link_end_time_index(link_ends, settings.reference_end),
            relative=not settings.additive,
        )
    if isinstance(settings, MultipleBiasSettings):
        return MultipleBias(
            [create_observation_bias(member, link_ends) for member in settings.biases]
        )
    raise TypeError(f"Unknown bias settings {settings!r}.")


def create_proper_time_rate(settings, environment):
    """Build a proper-time rate calculator; None means coordinate time."""
    if settings is None:
        return None
    if isinstance(settings, DirectFirstOrderProperTimeRateSettings):
        return DirectFirstOrderProperTimeRate(
            environment.gravitational_parameter(settings.central_body),
            environment.body_state(settings.central_body),
        )
    raise TypeError(f"Unknown proper-time rate settings {settings!r}.")


def _one_way_doppler(link_ends, from_role, to_role, settings, environment, convergence):
    leg_ends = LinkEnds(
        {
            LinkEndType.TRANSMITTER: link_ends[from_role],
            LinkEndType.RECEIVER: link_ends[to_role],
        }
    )
    rates = settings.proper_time_rates
    return OneWayDopplerObservationModel(
        leg_ends,
        create_light_time_calculator(
            link_ends,
            from_role,
            to_role,
            environment,
            settings.light_time_corrections,
            convergence,
        ),
        transmitter_proper_time=create_proper_time_rate(rates.get(from_role), environment),
        receiver_proper_time=create_proper_time_rate(rates.get(to_role), environment),
    )


def create_observation_model(settings, environment, convergence=None):
    """Build a fully wired observation model from its settings.

    Args:
        settings: ``ObservationModelSettings``.
        environment: ``ObservationEnvironment`` with every body and station
            the settings refer to.
        convergence: Optional ``LightTimeConvergenceSettings`` for all legs.

    Raises:
        LinkEndTopologyError: If the link ends do not fit the observable type
            or proper-time rates name roles that are not link ends.
        KeyError: If the environment lacks a body or station.
    """
    link_ends = settings.link_ends
    observable_type = settings.observable_type
    check_topology(observable_type, link_ends)
    for role in settings.proper_time_rates:
        if role not in link_ends:
            raise LinkEndTopologyError(
                f"Proper-time rate given for {role.name}, which is not in {link_ends!r}."
            )
    if settings.proper_time_rates and not observable_type.is_doppler:
        raise ValueError(f"Proper-time rates do not apply to {observable_type.value}.")

    bias = create_observation_bias(settings.bias, link_ends)
    legs = link_ends.legs()

    if observable_type == ObservableType.ONE_WAY_RANGE:
        model = OneWayRangeObservationModel(
            link_ends,
            create_light_time_calculator(
                link_ends, *legs[0], environment, settings.light_time_corrections, convergence
            ),
            bias=bias,
        )
    elif observable_type in (ObservableType.TWO_WAY_RANGE, ObservableType.N_WAY_RANGE):
        model = NWayRangeObservationModel(
            link_ends,
            [
                create_light_time_calculator(
                    link_ends, *leg, environment, settings.light_time_corrections, convergence
                )
                for leg in legs
            ],
            bias=bias,
        )
    elif observable_type == ObservableType.ONE_WAY_DOPPLER:
        leg_model = _one_way_doppler(link_ends, *legs[0], settings, environment, convergence)
        model = OneWayDopplerObservationModel(
            link_ends,
            leg_model.light_time_calculator,
            leg_model.transmitter_proper_time,
            leg_model.receiver_proper_time,
            bias=bias,
        )
    elif observable_type == ObservableType.TWO_WAY_DOPPLER:
        model = TwoWayDopplerObservationModel(
            link_ends,
            _one_way_doppler(link_ends, *legs[0], settings, environment, convergence),
            _one_way_doppler(link_ends, *legs[1], settings, environment, convergence),
            bias=bias,
        )
    else:
        model = DopplerMeasuredFrequencyObservationModel(
            link_ends,
            _one_way_doppler(link_ends, *legs[0], settings, environment, convergence),
            _one_way_doppler(link_ends, *legs[1], settings, environment, convergence),
            transmitting_frequency=environment.transmitting_frequency(
                link_ends[LinkEndType.TRANSMITTER]
            ),
            turnaround_ratio=environment.turnaround_ratio,
            bias=bias,
        )
    logger.info("Created %s for %r", type(model).__name__, link_ends)
    return model

"""Tests for the light-time solver in lightlink.core.light_time."""

import jax.numpy as jnp
import pytest

from lightlink import constants as const
from lightlink.core.light_time import LightTimeCalculator, LightTimeSolution
from lightlink.core.link_ends import LinkEndType
from lightlink.corrections import FirstOrderRelativisticCorrection, UserDefinedCorrection
from lightlink.ephemerides import LinearMotion
from lightlink.exceptions import (
    LightTimeConvergenceError,
    UnsupportedReferenceLinkEndError,
)
from lightlink.settings import LightTimeConvergenceSettings

from helpers import reference_light_time


@pytest.fixture
def downlink(spacecraft_state, station_state):
    """Geometric spacecraft -> station solver."""
    return LightTimeCalculator(spacecraft_state, station_state)


class TestGeometricLightTime:
    """Tests for the uncorrected solver against an independent root find."""

    @pytest.mark.parametrize("anchored_at_transmitter", [True, False])
    def test_matches_root_find(self, downlink, spacecraft_state, station_state, epoch, anchored_at_transmitter):
        """Light time agrees with brentq on the light-time equation."""
        reference_end = (
            LinkEndType.TRANSMITTER if anchored_at_transmitter else LinkEndType.RECEIVER
        )
        light_time = downlink.light_time(epoch, reference_end)
        expected = reference_light_time(
            spacecraft_state, station_state, epoch, anchored_at_transmitter
        )
        assert light_time == pytest.approx(expected, rel=1e-12)

    def test_reception_minus_transmission_is_light_time(self, downlink, epoch):
        """Resolved times differ by the light time."""
        for reference_end in (LinkEndType.TRANSMITTER, LinkEndType.RECEIVER):
            solution = downlink.solve(epoch, reference_end)
            assert solution.reception_time - solution.transmission_time == pytest.approx(
                solution.light_time, abs=1e-9
            )

    def test_reference_time_is_kept(self, downlink, epoch):
        """The anchored end keeps exactly the reference time."""
        assert downlink.solve(epoch, LinkEndType.TRANSMITTER).transmission_time == epoch
        assert downlink.solve(epoch, LinkEndType.RECEIVER).reception_time == epoch

    def test_states_are_evaluated_at_resolved_times(self, downlink, spacecraft_state, station_state, epoch):
        """Returned states belong to the returned times."""
        solution = downlink.solve(epoch, LinkEndType.RECEIVER)
        assert jnp.allclose(
            solution.transmitter_state, spacecraft_state(solution.transmission_time)
        )
        assert jnp.allclose(solution.receiver_state, station_state(solution.reception_time))

    def test_forward_and_backward_solves_agree(self, downlink, epoch):
        """Anchoring at the receiver undoes anchoring at the transmitter."""
        forward = downlink.solve(epoch, LinkEndType.TRANSMITTER)
        backward = downlink.solve(forward.reception_time, LinkEndType.RECEIVER)
        assert backward.transmission_time == pytest.approx(epoch, abs=1e-9)
        assert backward.light_time == pytest.approx(forward.light_time, rel=1e-12)

    def test_static_ends(self):
        """Ends at rest give distance / c after one update."""
        calculator = LightTimeCalculator(
            LinearMotion([0.0, 0.0, 0.0]), LinearMotion([3.0e8, 4.0e8, 0.0])
        )
        solution = calculator.solve(0.0, LinkEndType.TRANSMITTER)
        assert solution.light_time == pytest.approx(5.0e8 / const.c, rel=1e-15)
        assert solution.iterations <= 2

    def test_receding_receiver_closed_form(self):
        """Receiver moving radially away: T = d0 / (c - v)."""
        velocity = 1.0e4
        distance = 1.0e9
        calculator = LightTimeCalculator(
            LinearMotion([0.0, 0.0, 0.0]),
            LinearMotion([distance, 0.0, 0.0], [velocity, 0.0, 0.0]),
        )
        light_time = calculator.light_time(0.0, LinkEndType.TRANSMITTER)
        assert light_time == pytest.approx(distance / (const.c - velocity), rel=1e-13)

    def test_every_call_is_fresh(self, downlink, epoch):
        """Repeated solves give identical, independent results."""
        first = downlink.solve(epoch, LinkEndType.RECEIVER)
        downlink.solve(epoch + 500.0, LinkEndType.TRANSMITTER)
        second = downlink.solve(epoch, LinkEndType.RECEIVER)
        assert isinstance(second, LightTimeSolution)
        assert first.light_time == second.light_time
        assert first.transmission_time == second.transmission_time


class TestCorrectedLightTime:
    """Tests for the correction stack inside the iteration."""

    def test_constant_correction_adds_to_light_time(self, downlink, spacecraft_state, station_state, epoch):
        """A constant delay shifts the light time by the same amount."""
        delay = 1.0e-6
        corrected = LightTimeCalculator(
            spacecraft_state,
            station_state,
            [UserDefinedCorrection(lambda tx, rx, t_tx, t_rx: delay)],
        )
        geometric = downlink.light_time(epoch, LinkEndType.RECEIVER)
        # Transmitter moves during the extra microsecond, hence the loose bound
        assert corrected.light_time(epoch, LinkEndType.RECEIVER) - geometric == pytest.approx(
            delay, rel=1e-3
        )

    def test_corrections_are_order_independent(self, spacecraft_state, station_state, sun_state, epoch):
        """Swapping the correction order does not change the light time."""
        shapiro = FirstOrderRelativisticCorrection([sun_state], [const.GM_sun])
        constant = UserDefinedCorrection(lambda tx, rx, t_tx, t_rx: 2.0e-7)
        a = LightTimeCalculator(spacecraft_state, station_state, [shapiro, constant])
        b = LightTimeCalculator(spacecraft_state, station_state, [constant, shapiro])
        assert a.light_time(epoch, LinkEndType.RECEIVER) == pytest.approx(
            b.light_time(epoch, LinkEndType.RECEIVER), abs=1e-12
        )

    def test_frozen_corrections_match_iterated(self, spacecraft_state, station_state, sun_state, epoch):
        """Evaluating the corrections once is accurate for slowly varying delays."""
        shapiro = FirstOrderRelativisticCorrection([sun_state], [const.GM_sun])
        iterated = LightTimeCalculator(spacecraft_state, station_state, [shapiro])
        frozen = LightTimeCalculator(
            spacecraft_state, station_state, [shapiro], iterate_corrections=False
        )
        assert frozen.light_time(epoch, LinkEndType.RECEIVER) == pytest.approx(
            iterated.light_time(epoch, LinkEndType.RECEIVER), abs=1e-10
        )

    def test_shapiro_delay_is_positive(self, downlink, spacecraft_state, station_state, sun_state, epoch):
        """The Sun's relativistic delay lengthens the light time."""
        corrected = LightTimeCalculator(
            spacecraft_state,
            station_state,
            [FirstOrderRelativisticCorrection([sun_state], [const.GM_sun])],
        )
        difference = corrected.light_time(epoch, LinkEndType.RECEIVER) - downlink.light_time(
            epoch, LinkEndType.RECEIVER
        )
        assert 1e-7 < difference < 1e-3


class TestSolverConfiguration:
    """Tests for solver parameters and failure modes."""

    def test_unsupported_reference_end(self, downlink, epoch):
        """A leg cannot be anchored at an intermediate role."""
        with pytest.raises(UnsupportedReferenceLinkEndError):
            downlink.solve(epoch, LinkEndType.REFLECTOR1)

    def test_iteration_cap_raises(self, spacecraft_state, station_state, epoch):
        """Exceeding the cap raises instead of returning a stale value."""
        calculator = LightTimeCalculator(spacecraft_state, station_state, max_iterations=1)
        with pytest.raises(LightTimeConvergenceError) as excinfo:
            calculator.solve(epoch, LinkEndType.RECEIVER)
        assert excinfo.value.iterations == 1

    def test_superluminal_receiver_does_not_converge(self):
        """A receiver receding faster than light makes the iteration diverge."""
        calculator = LightTimeCalculator(
            LinearMotion([0.0, 0.0, 0.0]),
            LinearMotion([1.0e9, 0.0, 0.0], [2.0 * const.c, 0.0, 0.0]),
        )
        with pytest.raises(LightTimeConvergenceError):
            calculator.solve(0.0, LinkEndType.TRANSMITTER)

    @pytest.mark.parametrize(
        "kwargs", [{"tolerance": 0.0}, {"tolerance": -1e-9}, {"max_iterations": 0}]
    )
    def test_invalid_parameters(self, spacecraft_state, station_state, kwargs):
        """Non-positive tolerance or cap is rejected at construction."""
        with pytest.raises(ValueError):
            LightTimeCalculator(spacecraft_state, station_state, **kwargs)

    def test_from_settings(self, spacecraft_state, station_state):
        """Convergence settings are forwarded to the solver."""
        settings = LightTimeConvergenceSettings(
            custom_settings={"tolerance": 1e-10, "max_iterations": 7, "iterate_corrections": False}
        )
        calculator = LightTimeCalculator.from_settings(
            spacecraft_state, station_state, convergence=settings
        )
        assert calculator.tolerance == 1e-10
        assert calculator.max_iterations == 7
        assert calculator.iterate_corrections is False

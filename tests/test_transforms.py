"""Tests for two-body conversions in lightlink.transforms."""

import jax.numpy as jnp
import pytest

from lightlink import constants as const
from lightlink.transforms import (
    KeplerianElements,
    keplerian_to_state_vector,
    solve_kepler,
    state_vector_to_keplerian,
)


class TestSolveKepler:
    """Tests for the eccentric-anomaly solver."""

    @pytest.mark.parametrize("e", [0.0, 0.1, 0.5, 0.9, 0.99])
    def test_satisfies_kepler_equation(self, e):
        """E - e sin(E) reproduces M."""
        M = jnp.linspace(0.0, 2 * jnp.pi, 17)[:-1]
        E = solve_kepler(M, e)
        assert jnp.allclose(E - e * jnp.sin(E), M, atol=1e-12)

    def test_circular_is_identity(self):
        """For e = 0 the eccentric anomaly is the mean anomaly."""
        assert float(solve_kepler(1.3, 0.0)) == pytest.approx(1.3, abs=1e-15)


class TestStateVectorToKeplerian:
    """Tests for orbital mechanics conversion."""

    def test_circular_orbit(self):
        """Circular orbit should have e ≈ 0."""
        mu = const.GM_sun
        r_m = const.AU2m

        # Position on x-axis, velocity on y-axis (circular)
        v_circular = jnp.sqrt(mu / r_m)
        state = jnp.array([r_m, 0.0, 0.0, 0.0, v_circular, 0.0])

        a, e, i, W, w, M = state_vector_to_keplerian(state, mu)

        assert jnp.isclose(a, r_m, rtol=1e-9)
        assert e < 1e-9

    def test_elliptical_orbit(self):
        """Elliptical orbit should have e = 0.5."""
        mu = const.GM_sun
        r_perihelion = const.AU2m
        e_target = 0.5
        a_target = r_perihelion / (1 - e_target)

        # At perihelion, all velocity is tangential
        v_perihelion = jnp.sqrt(mu * (2 / r_perihelion - 1 / a_target))
        state = jnp.array([r_perihelion, 0.0, 0.0, 0.0, v_perihelion, 0.0])

        elements = state_vector_to_keplerian(state, mu)

        assert jnp.isclose(elements.e, e_target, rtol=1e-9)
        assert jnp.isclose(elements.a, a_target, rtol=1e-9)
        # Perihelion: mean anomaly is zero
        assert float(jnp.minimum(elements.M, 2 * jnp.pi - elements.M)) < 1e-6

    def test_inclined_orbit(self):
        """Inclined orbit should have i > 0."""
        mu = const.GM_sun
        r_m = const.AU2m

        # Inclined at 30 degrees - position in x-z plane
        v_circular = jnp.sqrt(mu / r_m)
        state = jnp.array(
            [r_m * jnp.cos(jnp.pi / 6), 0.0, r_m * jnp.sin(jnp.pi / 6), 0.0, v_circular, 0.0]
        )

        elements = state_vector_to_keplerian(state, mu)

        assert jnp.isclose(elements.i, jnp.pi / 6, atol=1e-9)


class TestRoundTrip:
    """Tests for elements -> state -> elements."""

    @pytest.mark.parametrize(
        "elements",
        [
            KeplerianElements(const.AU2m, 0.0167, 0.05, 0.3, 1.8, 0.4),
            KeplerianElements(1.4 * const.AU2m, 0.2, 0.1, 0.5, 0.9, 1.6),
            KeplerianElements(4.2e7, 0.7, 1.2, 4.0, 5.5, 3.0),
        ],
    )
    def test_elements_recovered(self, elements):
        """Generic elliptical inclined orbits survive a round trip."""
        mu = const.GM_sun if elements.a > 1e10 else const.GM_earth
        recovered = state_vector_to_keplerian(keplerian_to_state_vector(elements, mu), mu)
        assert float(recovered.a) == pytest.approx(elements.a, rel=1e-9)
        for name in ("e", "i", "W", "w", "M"):
            assert float(getattr(recovered, name)) == pytest.approx(
                getattr(elements, name), abs=1e-8
            )

    def test_energy(self):
        """Vis-viva holds for the generated state."""
        elements = KeplerianElements(1.4 * const.AU2m, 0.2, 0.1, 0.5, 0.9, 1.6)
        state = keplerian_to_state_vector(elements, const.GM_sun)
        r = jnp.linalg.norm(state[:3])
        v = jnp.linalg.norm(state[3:])
        expected = jnp.sqrt(const.GM_sun * (2 / r - 1 / elements.a))
        assert jnp.isclose(v, expected, rtol=1e-12)

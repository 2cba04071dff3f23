"""Shared pytest fixtures for lightlink tests."""

import jax.numpy as jnp
import pytest

from lightlink import constants as const
from lightlink.core.link_ends import LinkEndType
from lightlink.environment import ObservationEnvironment
from lightlink.ephemerides import KeplerOrbit, LinearMotion, RotatingStation

from helpers import STATION


@pytest.fixture
def epoch():
    """Standard query time (one hour after the reference epoch)."""
    return 3600.0


@pytest.fixture
def sun_state():
    """Sun fixed at the origin."""
    return LinearMotion(jnp.zeros(3))


@pytest.fixture
def earth_state():
    """Earth on a slightly eccentric heliocentric orbit."""
    return KeplerOrbit((const.AU2m, 0.0167, 0.05, 0.3, 1.8, 0.4), const.GM_sun)


@pytest.fixture
def station_state(earth_state):
    """Rotating ground station near Madrid."""
    return RotatingStation.from_geodetic(40.43, -4.25, earth_state)


@pytest.fixture
def spacecraft_state():
    """Spacecraft on an eccentric heliocentric orbit outside Earth's."""
    return KeplerOrbit((1.4 * const.AU2m, 0.2, 0.1, 0.5, 0.9, 1.6), const.GM_sun)


@pytest.fixture
def environment(sun_state, earth_state, station_state, spacecraft_state):
    """Heliocentric environment with one station and one spacecraft."""
    return ObservationEnvironment(
        state_functions={
            "Sun": sun_state,
            "Earth": earth_state,
            STATION: station_state,
            "Spacecraft": spacecraft_state,
        },
        gravitational_parameters={"Sun": const.GM_sun, "Earth": const.GM_earth},
    )


@pytest.fixture
def one_way_link_ends():
    """Spacecraft -> ground station downlink."""
    return {
        LinkEndType.TRANSMITTER: "Spacecraft",
        LinkEndType.RECEIVER: STATION,
    }


@pytest.fixture
def two_way_link_ends():
    """Ground station -> spacecraft transponder -> same ground station."""
    return {
        LinkEndType.TRANSMITTER: STATION,
        LinkEndType.RETRANSMITTER: "Spacecraft",
        LinkEndType.RECEIVER: STATION,
    }

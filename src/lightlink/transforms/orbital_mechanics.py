"""JAX friendly two-body orbital mechanics.

Elements are (a, e, i, W, w, M): semi-major axis (m), eccentricity,
inclination, longitude of the ascending node, argument of periapsis and mean
anomaly, all angles in radians. Only bound (elliptical) orbits are handled.
"""

from typing import NamedTuple

import jax
import jax.numpy as jnp

_TOL_E = 1e-9
_TOL_I = 1e-9
_KEPLER_ITERATIONS = 30


class KeplerianElements(NamedTuple):
    """Classical elements of an elliptical orbit."""

    a: float
    e: float
    i: float
    W: float
    w: float
    M: float


def solve_kepler(M, e, iterations: int = _KEPLER_ITERATIONS):
    """Eccentric anomaly E solving ``M = E - e sin(E)`` by Newton iteration.

    A fixed iteration count keeps the function traceable; 30 Newton steps from
    the starting guess below reach round-off for any e < 1.
    """
    M = jnp.mod(M, 2 * jnp.pi)
    E0 = jnp.where(e < 0.8, M, jnp.pi)

    def newton_step(_, E):
        return E - (E - e * jnp.sin(E) - M) / (1.0 - e * jnp.cos(E))

    return jax.lax.fori_loop(0, iterations, newton_step, E0)


def _perifocal_to_inertial(i, W, w):
    cW, sW = jnp.cos(W), jnp.sin(W)
    cw, sw = jnp.cos(w), jnp.sin(w)
    ci, si = jnp.cos(i), jnp.sin(i)
    return jnp.array(
        [
            [cW * cw - sW * sw * ci, -cW * sw - sW * cw * ci, sW * si],
            [sW * cw + cW * sw * ci, -sW * sw + cW * cw * ci, -cW * si],
            [sw * si, cw * si, ci],
        ]
    )


def keplerian_to_state_vector(elements, mu):
    """Convert Keplerian elements to a 6-vector (position m, velocity m/s).

    Args:
        elements: ``KeplerianElements`` or any (a, e, i, W, w, M) sequence.
        mu (float): Gravitational parameter in m^3/s^2.
    """
    a, e, i, W, w, M = elements
    E = solve_kepler(M, e)
    cos_E, sin_E = jnp.cos(E), jnp.sin(E)
    root = jnp.sqrt(1.0 - e**2)
    r_mag = a * (1.0 - e * cos_E)

    r_perifocal = jnp.array([a * (cos_E - e), a * root * sin_E, 0.0])
    v_perifocal = (jnp.sqrt(mu * a) / r_mag) * jnp.array([-sin_E, root * cos_E, 0.0])

    rotation = _perifocal_to_inertial(i, W, w)
    return jnp.concatenate([rotation @ r_perifocal, rotation @ v_perifocal])


def state_vector_to_keplerian(state, mu) -> KeplerianElements:
    """Convert a 6-vector state to Keplerian elements.

    Circular and equatorial orbits are resolved with ``jnp.where`` so the
    function stays traceable: for circular orbits w is 0 and M is the
    argument of latitude (inclined) or true longitude (equatorial); for
    equatorial orbits W is 0.

    Args:
        state: Position (m) and velocity (m/s) relative to the central body.
        mu (float): Gravitational parameter in m^3/s^2.
    """
    r = jnp.asarray(state[:3])
    v = jnp.asarray(state[3:6])
    r_mag = jnp.linalg.norm(r)
    v_mag = jnp.linalg.norm(v)

    h = jnp.cross(r, v)
    h_mag = jnp.linalg.norm(h)
    i = jnp.arccos(jnp.clip(h[2] / h_mag, -1.0, 1.0))

    n = jnp.cross(jnp.array([0.0, 0.0, 1.0]), h)
    n_mag = jnp.linalg.norm(n)

    e_vec = ((v_mag**2 - mu / r_mag) * r - jnp.dot(r, v) * v) / mu
    e = jnp.linalg.norm(e_vec)
    a = -mu / (2.0 * (0.5 * v_mag**2 - mu / r_mag))

    is_circular = e < _TOL_E
    is_inclined = n_mag > _TOL_I

    W = jnp.where(is_inclined, jnp.arctan2(n[1], n[0]), 0.0)

    # Periapsis measured from the node, or from the x axis when equatorial
    w_inclined = jnp.arccos(jnp.clip(jnp.dot(n, e_vec) / (n_mag * e), -1.0, 1.0))
    w_inclined = jnp.where(e_vec[2] < 0, 2 * jnp.pi - w_inclined, w_inclined)
    w_equatorial = jnp.arctan2(e_vec[1], e_vec[0]) * jnp.sign(h[2])
    w = jnp.where(is_circular, 0.0, jnp.where(is_inclined, w_inclined, w_equatorial))

    nu_elliptical = jnp.arccos(jnp.clip(jnp.dot(e_vec, r) / (e * r_mag), -1.0, 1.0))
    nu_elliptical = jnp.where(jnp.dot(r, v) < 0, 2 * jnp.pi - nu_elliptical, nu_elliptical)
    u_inclined = jnp.arccos(jnp.clip(jnp.dot(n, r) / (n_mag * r_mag), -1.0, 1.0))
    u_inclined = jnp.where(r[2] < 0, 2 * jnp.pi - u_inclined, u_inclined)
    nu_equatorial = jnp.arctan2(r[1], r[0]) * jnp.sign(h[2])
    nu = jnp.where(
        is_circular, jnp.where(is_inclined, u_inclined, nu_equatorial), nu_elliptical
    )

    E = jnp.arctan2(jnp.sqrt(1 - e**2) * jnp.sin(nu), e + jnp.cos(nu))
    M = (E - e * jnp.sin(E)) % (2 * jnp.pi)

    return KeplerianElements(a, e, i, W % (2 * jnp.pi), w % (2 * jnp.pi), M)

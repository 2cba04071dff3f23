"""Unit and time-scale conversion functions using centralized constants.

Note: Functions are NOT JIT-compiled to allow JAX to fuse them into larger kernels.
"""

from astropy.time import Time

from lightlink import constants as const


# Range and Doppler conversions
def light_time_to_range(light_time_s):
    """Convert a light time in seconds to a range in meters."""
    return light_time_s * const.c


def range_to_light_time(range_m):
    """Convert a range in meters to a light time in seconds."""
    return range_m * const.inv_c


def doppler_to_fraction(doppler_m_per_s):
    """Convert an unnormalized Doppler (m/s) to a dimensionless frequency fraction."""
    return doppler_m_per_s * const.inv_c


def fraction_to_doppler(fraction):
    """Convert a dimensionless frequency fraction to an unnormalized Doppler (m/s)."""
    return fraction * const.c


def doppler_to_frequency_shift(doppler_m_per_s, frequency_hz):
    """Frequency shift in Hz of a carrier at ``frequency_hz`` for a Doppler in m/s."""
    return doppler_m_per_s * const.inv_c * frequency_hz


# Length conversions
def au_to_m(length_au):
    """Convert length from AU to meters."""
    return length_au * const.AU2m


def m_to_au(length_m):
    """Convert length from meters to AU."""
    return length_m * const.m2AU


def km_to_m(length_km):
    """Convert length from kilometers to meters."""
    return length_km * const.km2m


# Time conversions
def iso_to_tdb_seconds(iso_time: str, scale: str = "utc") -> float:
    """Seconds since J2000 (TDB) for a calendar epoch.

    Args:
        iso_time: Calendar epoch, e.g. ``"2025-03-01T12:00:00"``.
        scale: Time scale of ``iso_time`` as understood by astropy.

    Returns:
        TDB seconds since 2000-01-01T12:00:00 TDB.
    """
    tdb = Time(iso_time, scale=scale).tdb
    # Subtract the epoch from the large part first to keep sub-microsecond precision
    return ((tdb.jd1 - const.J2000_JD) + tdb.jd2) * const.d2s


def tdb_seconds_to_iso(seconds: float) -> str:
    """ISO calendar string (TDB scale) for TDB seconds since J2000."""
    time = Time(const.J2000_JD, seconds * const.s2d, format="jd", scale="tdb")
    return time.isot

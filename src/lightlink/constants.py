"""Physical constants and unit conversions for lightlink."""

# Physical constants
c = 299792458.0  # Speed of light in m/s
inv_c = 1.0 / c  # s/m
inv_c2 = 1.0 / c**2  # s^2/m^2

# Gravitational parameters (DE440 values)
GM_sun = 1.32712440041279419e20  # m^3/s^2
GM_earth = 3.986004418e14  # m^3/s^2

# Body constants
R_earth_m = 6378137.0  # Earth equatorial radius in meters
omega_earth = 7.2921150e-5  # Earth rotation rate in rad/s

# Ionospheric refraction constant (m^3/s^2), delay = 40.3 * TEC / (c * f^2)
ionospheric_k = 40.3
TECU = 1e16  # electrons/m^2 per TEC unit

# Time conversions
d2s = 86400.0  # days to seconds
s2d = 1.157407407407407e-05  # seconds to days
J2000_JD = 2451545.0  # J2000 epoch in Julian days

# Distance conversions
AU2m = 1.495978707e11  # AU to meters
m2AU = 6.684587122268445e-12  # meters to AU
km2m = 1e3  # kilometers to meters

# Angular conversions
deg2rad = 0.017453292519943295  # degrees to radians

from __future__ import annotations

from dataclasses import dataclass
from math import fmod

import math


# ------------------------------------------------------------
# Units & helpers
# ------------------------------------------------------------

def wrap_deg(x_deg: float) -> float:
    """Wrap degrees to [0,360)."""
    y = fmod(x_deg, 360.0)
    if y < 0:
        y += 360.0
    # fmod of a tiny negative can round up to exactly 360.0
    return 0.0 if y >= 360.0 else y

def wrap180(deg: float) -> float:
    """Wraps an angle in degrees to the range [-180.0, 180.0)."""
    return (deg + 180.0) % 360.0 - 180.0

def sin_deg(x: float) -> float:
    return math.sin(math.radians(x))

def cos_deg(x: float) -> float:
    return math.cos(math.radians(x))


# ------------------------------------------------------------
# Time variable (TT)
# ------------------------------------------------------------

J2000_TT = 2451545.0


def T_centuries(jd_tt: float) -> float:
    """Julian centuries from J2000.0 in TT."""
    return (jd_tt - J2000_TT) / 36525.0


# ------------------------------------------------------------
# Low-accuracy solar elements (Meeus ch. 25 / 28)
# ------------------------------------------------------------

@dataclass(frozen=True)
class SolarMeanElements:
    L0_deg: float    # geometric mean longitude
    M_deg: float     # mean anomaly
    e: float         # eccentricity of Earth's orbit


def solar_mean_elements(T: float) -> SolarMeanElements:
    L0 = 280.46646 + (36000.76983 + 0.0003032 * T) * T
    M = 357.52911 + (35999.05029 - 0.0001537 * T) * T
    e = 0.016708634 - (0.000042037 + 0.0000001267 * T) * T
    return SolarMeanElements(L0_deg=L0, M_deg=M, e=e)


def obliquity_deg(T: float) -> float:
    """Mean obliquity (Meeus 22.2) plus the leading nutation term in obliquity."""
    eps0 = 23.0 + 26.0 / 60.0 + (21.448 + (-46.815 + (-0.00059 + 0.001813 * T) * T) * T) / 3600.0
    return eps0 + 0.00256 * cos_deg(125.04 - 1934.136 * T)

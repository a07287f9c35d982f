# reference/solar.py

from __future__ import annotations

import math

from ..core.errors import InternalConsistencyError
from ..core.time import gregorian_to_epoch_day, EPOCH_JD
from . import astro_args as aa
from . import time_scales as ts

MEAN_TROPICAL_YEAR = 365.242189

# Bretagnon & Simon, "Planetary Programs and Tables from -4000 to +2800" (1986).
# (amplitude in 1e-7 rad, phase in degrees, rate in degrees per Julian century)
_BS_AMPL = (
    403406, 195207, 119433, 112392, 3891, 2819, 1721, 660, 350, 334, 314, 268, 242, 234,
    158, 132, 129, 114, 99, 93, 86, 78, 72, 68, 64, 46, 38, 37, 32, 29, 28, 27, 27, 25,
    24, 21, 21, 20, 18, 17, 14, 13, 13, 13, 12, 10, 10, 10, 10,
)
_BS_PHASE = (
    270.54861, 340.19128, 63.91854, 331.2622, 317.843, 86.631, 240.052, 310.26, 247.23,
    260.87, 297.82, 343.14, 166.79, 81.53, 3.5, 132.75, 182.95, 162.03, 29.8, 266.4,
    249.2, 157.6, 257.8, 185.1, 69.9, 8.0, 197.1, 250.4, 65.3, 162.7, 341.5, 291.6, 98.5,
    146.7, 110.0, 5.2, 342.6, 230.9, 256.1, 45.3, 242.9, 115.2, 151.8, 285.3, 53.3,
    126.6, 205.7, 85.9, 146.1,
)
_BS_RATE = (
    0.9287892, 35999.1376958, 35999.4089666, 35998.7287385, 71998.20261, 71998.4403,
    36000.35726, 71997.4812, 32964.4678, -19.441, 445267.1117, 45036.884, 3.1008,
    22518.4434, -19.9739, 65928.9345, 9038.0293, 3034.7684, 33718.148, 3034.448,
    -2280.773, 29929.992, 31556.493, 149.588, 9037.75, 107997.405, -4444.176, 151.771,
    67555.316, 31556.08, -4561.54, 107996.706, 1221.655, 62894.167, 31437.369,
    14578.298, -31931.757, 34777.243, 1221.999, 62894.511, -4442.039, 107997.909,
    119.066, 16859.071, -4.578, 26895.292, -39.127, 12297.536, 90073.778,
)

_SEARCH_MAX_ITER = 64
_SEARCH_EPS_DAYS = 1e-5


# ============================================================
# Longitude and equation of time
# ============================================================

def apparent_solar_longitude(jd_tt: float) -> float:
    """
    Apparent geocentric solar longitude in degrees [0,360) for JD(TT).

    Truncated 49-term Bretagnon–Simon series with aberration and the two leading
    nutation terms; accurate to roughly 0.0006 deg over -4000..+2800.
    """
    T = aa.T_centuries(jd_tt)
    s = 0.0
    for a, p, r in zip(_BS_AMPL, _BS_PHASE, _BS_RATE):
        s += a * aa.sin_deg(p + r * T)
    lon = 282.7771834 + 36000.76953744 * T + 5.729577951308232e-6 * s
    aberration = 0.0000974 * aa.cos_deg(177.63 + 35999.01848 * T) - 0.005575
    nutation = (
        -0.004778 * aa.sin_deg(124.9 + (-1934.134 + 0.002063 * T) * T)
        - 0.0003667 * aa.sin_deg(201.11 + (72001.5377 + 0.00057 * T) * T)
    )
    return aa.wrap_deg(lon + aberration + nutation)


def equation_of_time_seconds(jd_tt: float) -> float:
    """
    Apparent minus mean solar time in seconds (Meeus, Astronomical Algorithms, p.185).
    """
    T = aa.T_centuries(jd_tt)
    sm = aa.solar_mean_elements(T)
    y = math.tan(math.radians(aa.obliquity_deg(T)) / 2.0) ** 2
    L0 = math.radians(sm.L0_deg)
    M = math.radians(sm.M_deg)
    e = sm.e
    eot = (
        y * math.sin(2 * L0)
        - 2 * e * math.sin(M)
        + 4 * e * y * math.sin(M) * math.cos(2 * L0)
        - 0.5 * y * y * math.sin(4 * L0)
        - 1.25 * e * e * math.sin(2 * M)
    )
    return math.degrees(eot) * 240.0


def apparent_local_days(jd_ut: float, longitude_deg_east: float) -> float:
    """Fractional epoch days of the instant jd_ut in apparent solar time at the longitude."""
    jd_tt = ts.jd_ut_to_jd_tt(jd_ut)
    offset_hours = ts.lmt_offset_hours(longitude_deg_east) + equation_of_time_seconds(jd_tt) / 3600.0
    return jd_ut + offset_hours / 24.0 - EPOCH_JD


def apparent_local_epoch_day(jd_ut: float, longitude_deg_east: float) -> int:
    """Civil day, reckoned in apparent solar time at the longitude, containing jd_ut."""
    return int(math.floor(apparent_local_days(jd_ut, longitude_deg_east)))


# ============================================================
# Solar terms
# ============================================================

def solar_longitude_at_or_after(jd_tt: float, angle: float) -> float:
    """
    First instant (JD TT) at or after jd_tt where the apparent longitude equals angle.
    Bisection on a ±5 day window around the mean-motion estimate.
    """
    angle = aa.wrap_deg(angle)
    est = jd_tt + aa.wrap_deg(angle - apparent_solar_longitude(jd_tt)) * MEAN_TROPICAL_YEAR / 360.0
    low = max(jd_tt, est - 5.0)
    high = est + 5.0
    for _ in range(_SEARCH_MAX_ITER):
        if high - low <= _SEARCH_EPS_DAYS:
            return low + (high - low) / 2.0
        x = low + (high - low) / 2.0
        if aa.wrap_deg(apparent_solar_longitude(x) - angle) < 180.0:
            high = x
        else:
            low = x
    raise InternalConsistencyError(
        f"solar longitude search for {angle} deg did not converge from JD(TT) {jd_tt}"
    )


def season_jd_tt(year: int, angle: int) -> float:
    """
    Equinox (0, 180) or solstice (90, 270) of a Gregorian year as JD(TT).
    """
    if angle not in (0, 90, 180, 270):
        raise ValueError("angle must be one of 0, 90, 180, 270")
    jd0 = EPOCH_JD + gregorian_to_epoch_day(year, 1, 1)
    return solar_longitude_at_or_after(ts.jd_ut_to_jd_tt(jd0), angle)


def major_solar_term(jd_tt: float) -> int:
    """
    Index 1..12 of the most recent major solar term (zhongqi).
    Term 11 begins at the winter solstice (270 deg).
    """
    lon = apparent_solar_longitude(jd_tt)
    return ((2 + int(math.floor(lon / 30.0))) % 12) or 12


def solar_term_index(jd_tt: float) -> int:
    """
    Index 1..24 of the current solar term, counted from Lichun (315 deg).
    Even indices are the major terms: index == 2 * major_solar_term for those.
    """
    lon = apparent_solar_longitude(jd_tt)
    return int(math.floor(aa.wrap_deg(lon - 315.0) / 15.0)) + 1


def next_solar_term(jd_tt: float) -> tuple:
    """(index, JD TT) of the next solar-term boundary strictly after jd_tt."""
    idx = solar_term_index(jd_tt)
    nxt = idx % 24 + 1
    angle = aa.wrap_deg(315.0 + 15.0 * (nxt - 1))
    return nxt, solar_longitude_at_or_after(jd_tt + _SEARCH_EPS_DAYS, angle)

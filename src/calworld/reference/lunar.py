# reference/lunar.py

from __future__ import annotations

from ..core.errors import InternalConsistencyError
from . import astro_args as aa
from . import time_scales as ts

MEAN_SYNODIC_MONTH = 29.530588861

# JD(UT) of the new moon of lunation 0: 2000-01-06 18:13:42 UTC
LUNATION_ZERO_JD_UT = 2451549.5 + (18 * 3600 + 13 * 60 + 42) / 86400.0

# Meeus, Astronomical Algorithms, ch. 49, new moon periodic terms:
# (coefficient, power of E, multiple of M, of M', of F)
_NEW_MOON_TERMS = (
    (-0.40720, 0, 0, 1, 0),
    (0.17241, 1, 1, 0, 0),
    (0.01608, 0, 0, 2, 0),
    (0.01039, 0, 0, 0, 2),
    (0.00739, 1, -1, 1, 0),
    (-0.00514, 1, 1, 1, 0),
    (0.00208, 2, 2, 0, 0),
    (-0.00111, 0, 0, 1, -2),
    (-0.00057, 0, 0, 1, 2),
    (0.00056, 1, 1, 2, 0),
    (-0.00042, 0, 0, 3, 0),
    (0.00042, 1, 1, 0, 2),
    (0.00038, 1, 1, 0, -2),
    (-0.00024, 1, -1, 2, 0),
    (-0.00007, 0, 2, 1, 0),
    (0.00004, 0, 0, 2, -2),
    (0.00004, 0, 3, 0, 0),
    (0.00003, 0, 1, 1, -2),
    (0.00003, 0, 0, 2, 2),
    (-0.00003, 0, 1, 1, 2),
    (0.00003, 0, -1, 1, 2),
    (-0.00002, 0, -1, 1, -2),
    (-0.00002, 0, 1, 3, 0),
    (0.00002, 0, 0, 4, 0),
)

# Planetary arguments A1..A14: (phase, rate per lunation, coefficient)
_PLANETARY = (
    (251.88, 0.016321, 0.000165),
    (251.83, 26.651886, 0.000164),
    (349.42, 36.412478, 0.000126),
    (84.66, 18.206239, 0.000110),
    (141.74, 53.303771, 0.000062),
    (207.14, 2.453732, 0.000060),
    (154.84, 7.306860, 0.000056),
    (34.52, 27.261239, 0.000047),
    (207.19, 0.121824, 0.000042),
    (291.34, 1.844379, 0.000040),
    (161.72, 24.198154, 0.000037),
    (239.56, 25.513099, 0.000035),
    (331.55, 3.592518, 0.000023),
)

_MAX_STEPS = 8


def new_moon_jde(n: int) -> float:
    """
    Instant of true new moon for lunation n as JDE (TT).
    Lunation 0 is the new moon of 2000-01-06.
    """
    k = float(n)
    T = k / 1236.85
    T2 = T * T

    jde = 2451550.09766 + MEAN_SYNODIC_MONTH * k + (0.00015437 + (-0.00000015 + 0.00000000073 * T) * T) * T2

    E = 1.0 - (0.002516 + 0.0000074 * T) * T
    M = 2.5534 + 29.1053567 * k - (0.0000014 + 0.00000011 * T) * T2
    Mp = 201.5643 + 385.81693528 * k + (0.0107582 + (0.00001238 - 0.000000058 * T) * T) * T2
    F = 160.7108 + 390.67050284 * k + (-0.0016118 + (-0.00000227 + 0.000000011 * T) * T) * T2
    Omega = 124.7746 - 1.56375588 * k + (0.0020672 + 0.00000215 * T) * T2

    corr = -0.00017 * aa.sin_deg(Omega)
    for v, w, x, y, z in _NEW_MOON_TERMS:
        corr += v * (E ** w) * aa.sin_deg(x * M + y * Mp + z * F)

    corr += 0.000325 * aa.sin_deg(299.77 + 0.107408 * k - 0.009173 * T2)
    for phase, rate, coeff in _PLANETARY:
        corr += coeff * aa.sin_deg(phase + rate * k)

    return jde + corr


def new_moon_ut(n: int) -> float:
    """New moon of lunation n as JD(UT)."""
    return ts.jd_tt_to_jd_ut(new_moon_jde(n))


def lunation_number(jd_ut: float) -> int:
    """Nearest lunation index by mean motion (an estimate only)."""
    return int(round((jd_ut - LUNATION_ZERO_JD_UT) / MEAN_SYNODIC_MONTH))


def lunation_at_or_after(jd_ut: float) -> int:
    """Smallest lunation n with new_moon_ut(n) >= jd_ut."""
    n = lunation_number(jd_ut)
    for _ in range(_MAX_STEPS):
        if new_moon_ut(n) < jd_ut:
            n += 1
        elif new_moon_ut(n - 1) >= jd_ut:
            n -= 1
        else:
            return n
    raise InternalConsistencyError(f"new moon search did not settle near JD(UT) {jd_ut}")


def new_moon_at_or_after(jd_ut: float) -> float:
    return new_moon_ut(lunation_at_or_after(jd_ut))


def new_moon_before(jd_ut: float) -> float:
    """Latest new moon strictly before jd_ut, as JD(UT)."""
    return new_moon_ut(lunation_at_or_after(jd_ut) - 1)


def lunar_phase_fraction(jd_ut: float) -> float:
    """Elapsed fraction [0,1) of the current lunation, measured between true new moons."""
    n = lunation_at_or_after(jd_ut)
    t1 = new_moon_ut(n)
    if t1 == jd_ut:
        return 0.0
    t0 = new_moon_ut(n - 1)
    return (jd_ut - t0) / (t1 - t0)


from __future__ import annotations

import math

from ..core.time import EPOCH_JD
from .deltat import delta_t_seconds


# ============================================================
# Basic JD / JDN helpers
# ============================================================

def jd_to_jdn(jd: float) -> int:
    """
    Julian Date (days from noon) -> Julian Day Number of the civil day.
      JDN = floor(JD + 0.5)
    """
    return int(math.floor(jd + 0.5))


def jdn_to_jd(jdn: int) -> float:
    """JD at midnight of the JDN day."""
    return float(jdn) - 0.5


def decimal_year_from_jd(jd: float) -> float:
    """Julian-year approximation, good enough as the ΔT argument."""
    return 2000.0 + (jd - 2451545.0) / 365.25


# ============================================================
# UT <-> TT (via ΔT)
# ============================================================

def jd_ut_to_jd_tt(jd_ut: float) -> float:
    return jd_ut + delta_t_seconds(decimal_year_from_jd(jd_ut)) / 86400.0


def jd_tt_to_jd_ut(jd_tt: float) -> float:
    """
    Inverse of jd_ut_to_jd_tt by fixed-point iteration.
    Two steps suffice because ΔT changes by well under a second per day.
    """
    jd_ut = jd_tt
    for _ in range(2):
        jd_ut = jd_tt - delta_t_seconds(decimal_year_from_jd(jd_ut)) / 86400.0
    return jd_ut


# ============================================================
# Local civil days
# ============================================================

def lmt_offset_hours(longitude_deg_east: float) -> float:
    """
    Offset (hours) of Local Mean Time from UTC at the given longitude.
      360° -> 24h  =>  1° -> 4 minutes.
    """
    return longitude_deg_east / 15.0


def dms(deg: int, minutes: int = 0, seconds: float = 0.0) -> float:
    return deg + minutes / 60.0 + seconds / 3600.0


def local_midnight_jd_ut(epoch_day: int, offset_hours: float) -> float:
    """JD(UT) of 00:00 local time on the given epoch day."""
    return EPOCH_JD + epoch_day - offset_hours / 24.0


def local_epoch_day(jd_ut: float, offset_hours: float) -> int:
    """Local civil epoch day containing the instant jd_ut."""
    return int(math.floor(jd_ut + offset_hours / 24.0 - EPOCH_JD))

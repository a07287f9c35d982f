"""
calworld.core.time
------------------
The epoch-day timeline.

An epoch day is a signed integer count of days since 1972-01-01 (proleptic Gregorian).
Every engine converts to and from this value; it is the only interchange format.
"""

from __future__ import annotations
from datetime import date
from typing import Tuple

# JDN of 1972-01-01 (epoch day 0)
EPOCH_JDN = 2441318

# JD(UT) at 1972-01-01 00:00
EPOCH_JD = 2441317.5

MIN_GREGORIAN_YEAR = -999999
MAX_GREGORIAN_YEAR = 999999

_DAYS_IN_MONTH = (31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31)


def epoch_day_from_jdn(jdn: int) -> int:
    return jdn - EPOCH_JDN

def jdn_from_epoch_day(e: int) -> int:
    return e + EPOCH_JDN


def is_gregorian_leap(y: int) -> bool:
    return (y % 4 == 0) and ((y % 100 != 0) or (y % 400 == 0))

def gregorian_month_length(y: int, m: int) -> int:
    if m == 2 and is_gregorian_leap(y):
        return 29
    return _DAYS_IN_MONTH[m - 1]

def gregorian_year_length(y: int) -> int:
    return 366 if is_gregorian_leap(y) else 365


def gregorian_to_jdn(y: int, m: int, d: int) -> int:
    """Proleptic Gregorian date (astronomical year numbering) -> JDN."""
    a = (14 - m) // 12
    y2 = y + 4800 - a
    m2 = m + 12 * a - 3
    return d + (153 * m2 + 2) // 5 + 365 * y2 + y2 // 4 - y2 // 100 + y2 // 400 - 32045

def jdn_to_gregorian(jdn: int) -> Tuple[int, int, int]:
    """Fliegel-Van Flandern inverse of gregorian_to_jdn. Floor division keeps it valid for negative years."""
    a = jdn + 32044
    b = (4 * a + 3) // 146097
    c = a - (146097 * b) // 4
    d = (4 * c + 3) // 1461
    e = c - (1461 * d) // 4
    m = (5 * e + 2) // 153
    day = e - (153 * m + 2) // 5 + 1
    month = m + 3 - 12 * (m // 10)
    year = 100 * b + d - 4800 + (m // 10)
    return year, month, day


def gregorian_to_epoch_day(y: int, m: int, d: int) -> int:
    return gregorian_to_jdn(y, m, d) - EPOCH_JDN

def epoch_day_to_gregorian(e: int) -> Tuple[int, int, int]:
    return jdn_to_gregorian(e + EPOCH_JDN)


def epoch_day_from_date(d: date) -> int:
    """datetime.date -> epoch day."""
    return gregorian_to_epoch_day(d.year, d.month, d.day)

def date_from_epoch_day(e: int) -> date:
    """Epoch day -> datetime.date (years 1..9999 only)."""
    y, m, d = epoch_day_to_gregorian(e)
    return date(y, m, d)


def day_of_week(e: int) -> int:
    """ISO day of week, Monday=1 .. Sunday=7. 1972-01-01 was a Saturday."""
    return (e + 5) % 7 + 1


def jd_to_epoch_day(jd: float) -> int:
    """Civil day (00:00 boundary) containing a fractional JD on the same time scale."""
    return int((jd - EPOCH_JD) // 1)

def epoch_day_to_jd(e: int) -> float:
    """JD at 00:00 of the epoch day."""
    return EPOCH_JD + e

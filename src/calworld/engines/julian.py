"""
calworld.engines.julian
-----------------------
Proleptic Julian calendar and historic Julian/Gregorian cutover calendars.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from ..core.errors import InvalidDateError
from ..core.time import (
    MAX_GREGORIAN_YEAR,
    MIN_GREGORIAN_YEAR,
    epoch_day_to_gregorian,
    gregorian_month_length,
    gregorian_to_epoch_day,
    is_gregorian_leap,
)
from ..core.types import CalendarDate, EngineId
from .calendar import BaseCalendarEngine

# Day count of the March-based Julian reckoning at epoch day 0
_OFFSET = 719470 + 730

_MONTH_LENGTHS = (31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31)

Ymd = Tuple[int, int, int]


def is_julian_leap(year: int) -> bool:
    return year % 4 == 0


def julian_month_length(year: int, month: int) -> int:
    if month == 2 and is_julian_leap(year):
        return 29
    return _MONTH_LENGTHS[month - 1]


def julian_to_epoch_day(year: int, month: int, day: int) -> int:
    y, m = year, month
    if m < 3:
        y -= 1
        m += 12
    return y * 365 + y // 4 + ((m + 1) * 153) // 5 - 123 + day - _OFFSET


def epoch_day_to_julian(e: int) -> Ymd:
    days = e + _OFFSET
    q4, r4 = divmod(days, 1461)
    if r4 == 1460:
        return (q4 + 1) * 4, 2, 29
    q1, r1 = divmod(r4, 365)
    y = q4 * 4 + q1
    m = ((r1 + 31) * 5) // 153 + 2
    d = r1 - ((m + 1) * 153) // 5 + 123
    if m > 12:
        y += 1
        m -= 12
    return y, m, d


@dataclass(frozen=True)
class JulianParams:
    variant: str = "julian"


class JulianEngine(BaseCalendarEngine):
    """Proleptic Julian calendar in astronomical year numbering."""

    def __init__(self, p: JulianParams):
        self.p = p
        self.variant = p.variant
        self.id = EngineId("julian", p.variant)
        self.min_year = MIN_GREGORIAN_YEAR
        self.max_year = MAX_GREGORIAN_YEAR
        self.min_epoch_day = julian_to_epoch_day(MIN_GREGORIAN_YEAR, 1, 1)
        self.max_epoch_day = julian_to_epoch_day(MAX_GREGORIAN_YEAR, 12, 31)

    def is_leap_year(self, year: int, era: Optional[str] = None) -> bool:
        self._check_year(year, era)
        return is_julian_leap(year)

    def length_of_month(self, year: int, month: int, *, leap: bool = False, era: Optional[str] = None) -> int:
        return julian_month_length(year, month)

    def _to_epoch_day(self, d: CalendarDate) -> int:
        return julian_to_epoch_day(d.year, d.month, d.day)

    def _from_epoch_day(self, e: int) -> CalendarDate:
        y, m, d = epoch_day_to_julian(e)
        return CalendarDate(self.variant, y, m, d)


# ============================================================
# Historic cutover
# ============================================================

@dataclass(frozen=True)
class HistoricParams:
    """Julian before `cutover` (first Gregorian day, Gregorian fields), Gregorian from it on."""
    variant: str
    cutover: Ymd


class HistoricEngine(BaseCalendarEngine):
    """
    Julian up to the day before the cutover, Gregorian from the cutover on.
    Labels between the last Julian and the first Gregorian date do not exist.
    """

    def __init__(self, p: HistoricParams):
        self.p = p
        self.variant = p.variant
        self.id = EngineId("historic", p.variant)
        self.cutover_day = gregorian_to_epoch_day(*p.cutover)
        self.first_gregorian: Ymd = tuple(p.cutover)  # type: ignore[assignment]
        self.last_julian: Ymd = epoch_day_to_julian(self.cutover_day - 1)
        self.min_year = MIN_GREGORIAN_YEAR
        self.max_year = MAX_GREGORIAN_YEAR
        self.min_epoch_day = julian_to_epoch_day(MIN_GREGORIAN_YEAR, 1, 1)
        self.max_epoch_day = gregorian_to_epoch_day(MAX_GREGORIAN_YEAR, 12, 31)

    def in_gap(self, year: int, month: int, day: int) -> bool:
        return self.last_julian < (year, month, day) < self.first_gregorian

    def _is_gregorian_month(self, year: int, month: int) -> bool:
        return (year, month) >= self.first_gregorian[:2]

    def is_leap_year(self, year: int, era: Optional[str] = None) -> bool:
        self._check_year(year, era)
        # the rule in force on 1 March decides
        if (year, 3, 1) >= self.first_gregorian:
            return is_gregorian_leap(year)
        return is_julian_leap(year)

    def _natural_length(self, year: int, month: int) -> int:
        if self._is_gregorian_month(year, month):
            return gregorian_month_length(year, month)
        return julian_month_length(year, month)

    def length_of_month(self, year: int, month: int, *, leap: bool = False, era: Optional[str] = None) -> int:
        n = self._natural_length(year, month)
        if (year, month) < self.last_julian[:2] or (year, month) > self.first_gregorian[:2]:
            return n
        return sum(1 for day in range(1, n + 1) if not self.in_gap(year, month, day))

    def _valid_day(self, year: int, month: int, day: int, leap: bool, era: Optional[str]) -> bool:
        return 1 <= day <= self._natural_length(year, month) and not self.in_gap(year, month, day)

    def _to_epoch_day(self, d: CalendarDate) -> int:
        ymd = (d.year, d.month, d.day)
        if ymd >= self.first_gregorian:
            return gregorian_to_epoch_day(*ymd)
        if ymd <= self.last_julian:
            return julian_to_epoch_day(*ymd)
        raise InvalidDateError(f"{self.variant}: {d.year}-{d.month}-{d.day} falls in the cutover gap")

    def _from_epoch_day(self, e: int) -> CalendarDate:
        if e >= self.cutover_day:
            y, m, d = epoch_day_to_gregorian(e)
        else:
            y, m, d = epoch_day_to_julian(e)
        return CalendarDate(self.variant, y, m, d)

    def max_day_of(self, ly: int, month: int, leap: bool) -> int:
        return self._natural_length(ly, month)

    def compose(self, ly: int, month: int, day: int, leap: bool = False, *, era: Optional[str] = None) -> CalendarDate:
        if self.in_gap(ly, month, day):
            y, m, dd = self.first_gregorian
            return CalendarDate(self.variant, y, m, dd, era=era)
        return CalendarDate(self.variant, ly, month, min(day, self._natural_length(ly, month)), era=era)

    def info(self):
        out = super().info()
        out["last_julian"] = "%d-%02d-%02d" % self.last_julian
        out["first_gregorian"] = "%d-%02d-%02d" % self.first_gregorian
        return out

"""
calworld.engines.hebrew
-----------------------
Hebrew (Anno Mundi) calendar.

Months use the civil numbering with a fixed slot for Adar I:

    1 Tishri, 2 Heshvan, 3 Kislev, 4 Tevet, 5 Shevat, 6 Adar I (leap years only),
    7 Adar / Adar II, 8 Nisan, 9 Iyar, 10 Sivan, 11 Tamuz, 12 Av, 13 Elul

The new year comes from the molad of Tishri (counted in parts of 1/1080 hour) with
the postponement rules: 1 Tishri never falls on Sunday, Wednesday or Friday, and
years of 356 or 382 days cannot occur.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import List, Optional

from ..core.errors import InternalConsistencyError, InvalidDateError
from ..core.time import gregorian_to_epoch_day
from ..core.types import CalendarDate, EngineId
from .calendar import BaseCalendarEngine, MonthKey

# Epoch day of 1 Tishri AM 1 (proleptic Gregorian -3760-09-07)
HEBREW_EPOCH = gregorian_to_epoch_day(-3760, 9, 7)

TISHRI, HESHVAN, KISLEV, TEVET, SHEVAT, ADAR_I, ADAR, NISAN, IYAR, SIVAN, TAMUZ, AV, ELUL = range(1, 14)

_SHORT_MONTHS = frozenset((TEVET, ADAR, IYAR, TAMUZ, ELUL))


def is_hebrew_leap(year: int) -> bool:
    return (7 * year + 1) % 19 < 7


def _elapsed_days(year: int) -> int:
    """Days from the epoch to the molad-based new year, with the one-day delay."""
    months = (235 * year - 234) // 19
    parts = 12084 + 13753 * months
    days = 29 * months + parts // 25920
    return days + 1 if (3 * (days + 1)) % 7 < 3 else days


def _year_length_correction(year: int) -> int:
    ny0 = _elapsed_days(year - 1)
    ny1 = _elapsed_days(year)
    ny2 = _elapsed_days(year + 1)
    if ny2 - ny1 == 356:
        return 2
    if ny1 - ny0 == 382:
        return 1
    return 0


@lru_cache(maxsize=8192)
def new_year(year: int) -> int:
    """Epoch day of 1 Tishri of the given year."""
    return HEBREW_EPOCH + _elapsed_days(year) + _year_length_correction(year)


def year_length(year: int) -> int:
    return new_year(year + 1) - new_year(year)


def biblical_month(civil: int, leap_year: bool) -> int:
    """Civil month (Tishri = 1) -> biblical numbering (Nisan = 1, Adar II = 13)."""
    if civil == ADAR_I and not leap_year:
        raise InvalidDateError("Adar I exists only in leap years")
    if civil == ADAR:
        return 13 if leap_year else 12
    if civil <= ADAR_I:
        return civil + 6
    return civil - 7


def civil_month(biblical: int, leap_year: bool) -> int:
    """Biblical month (Nisan = 1) -> civil numbering (Tishri = 1)."""
    if not (1 <= biblical <= (13 if leap_year else 12)):
        raise InvalidDateError(f"Biblical month {biblical} does not exist")
    if biblical <= 6:
        return biblical + 7
    if biblical <= 11:
        return biblical - 6
    if biblical == 12:
        return ADAR_I if leap_year else ADAR
    return ADAR


@dataclass(frozen=True)
class HebrewParams:
    variant: str = "hebrew"
    min_year: int = 1
    max_year: int = 9999


class HebrewEngine(BaseCalendarEngine):

    def __init__(self, p: HebrewParams):
        self.p = p
        self.variant = p.variant
        self.id = EngineId("hebrew", p.variant)
        self.min_year = p.min_year
        self.max_year = p.max_year
        self.min_epoch_day = new_year(p.min_year)
        self.max_epoch_day = new_year(p.max_year + 1) - 1

    def months(self, year: int, era: Optional[str] = None) -> List[MonthKey]:
        leap = is_hebrew_leap(year)
        return [(m, False) for m in range(1, 14) if leap or m != ADAR_I]

    def is_leap_year(self, year: int, era: Optional[str] = None) -> bool:
        self._check_year(year, era)
        return is_hebrew_leap(year)

    def length_of_year(self, year: int, era: Optional[str] = None) -> int:
        self._check_year(year, era)
        return year_length(year)

    def length_of_month(self, year: int, month: int, *, leap: bool = False, era: Optional[str] = None) -> int:
        if month == HESHVAN:
            return 30 if year_length(year) % 10 == 5 else 29
        if month == KISLEV:
            return 29 if year_length(year) % 10 == 3 else 30
        if month == ADAR_I and not is_hebrew_leap(year):
            raise InvalidDateError(f"hebrew: no Adar I in common year {year}")
        return 29 if month in _SHORT_MONTHS else 30

    def _to_epoch_day(self, d: CalendarDate) -> int:
        e = new_year(d.year)
        for m, _ in self.months(d.year):
            if m == d.month:
                break
            e += self.length_of_month(d.year, m)
        return e + d.day - 1

    def _from_epoch_day(self, e: int) -> CalendarDate:
        year = (98496 * (e - HEBREW_EPOCH)) // 35975351 + 1
        while new_year(year) > e:
            year -= 1
        while new_year(year + 1) <= e:
            year += 1
        rest = e - new_year(year)
        for m, _ in self.months(year):
            n = self.length_of_month(year, m)
            if rest < n:
                return CalendarDate(self.variant, year, m, rest + 1)
            rest -= n
        raise InternalConsistencyError(f"hebrew: day {e} not placed in year {year}")

    def fallback_month(self, ly: int, month: int, leap: bool):
        if month == ADAR_I and not is_hebrew_leap(ly):
            return (ADAR, False)
        return super().fallback_month(ly, month, leap)

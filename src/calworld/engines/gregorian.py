"""
calworld.engines.gregorian
--------------------------
Proleptic Gregorian engine and the Thai solar calendar layered on it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from ..core.errors import RangeError
from ..core.time import (
    MAX_GREGORIAN_YEAR,
    MIN_GREGORIAN_YEAR,
    epoch_day_to_gregorian,
    gregorian_month_length,
    gregorian_to_epoch_day,
    is_gregorian_leap,
)
from ..core.types import CalendarDate, EngineId
from .calendar import BaseCalendarEngine, MonthKey


@dataclass(frozen=True)
class GregorianParams:
    variant: str = "gregorian"


class GregorianEngine(BaseCalendarEngine):
    """Proleptic Gregorian calendar, astronomical year numbering (year 0 = 1 BC)."""

    def __init__(self, p: GregorianParams):
        self.p = p
        self.variant = p.variant
        self.id = EngineId("gregorian", p.variant)
        self.min_year = MIN_GREGORIAN_YEAR
        self.max_year = MAX_GREGORIAN_YEAR
        self.min_epoch_day = gregorian_to_epoch_day(MIN_GREGORIAN_YEAR, 1, 1)
        self.max_epoch_day = gregorian_to_epoch_day(MAX_GREGORIAN_YEAR, 12, 31)

    def is_leap_year(self, year: int, era: Optional[str] = None) -> bool:
        self._check_year(year, era)
        return is_gregorian_leap(year)

    def length_of_month(self, year: int, month: int, *, leap: bool = False, era: Optional[str] = None) -> int:
        return gregorian_month_length(year, month)

    def _to_epoch_day(self, d: CalendarDate) -> int:
        return gregorian_to_epoch_day(d.year, d.month, d.day)

    def _from_epoch_day(self, e: int) -> CalendarDate:
        y, m, d = epoch_day_to_gregorian(e)
        return CalendarDate(self.variant, y, m, d)


# ============================================================
# Thai solar calendar (Buddhist era)
# ============================================================

@dataclass(frozen=True)
class ThaiSolarParams:
    variant: str = "thai"
    offset: int = 543                 # Buddhist year = ISO year + 543
    first_january_year: int = 1941    # ISO year from which the year starts on 1 January


class ThaiSolarEngine(BaseCalendarEngine):
    """
    Gregorian months with Buddhist year numbering. Before 1941 the year began on
    1 April, so January..March belonged to the previous Buddhist year; BE 2483 (1940)
    ran from April to December only.
    """

    def __init__(self, p: ThaiSolarParams):
        self.p = p
        self.variant = p.variant
        self.id = EngineId("thai", p.variant)
        self._short_year = p.first_january_year - 1 + p.offset
        self.min_year = 1
        self.max_year = MAX_GREGORIAN_YEAR + p.offset
        self.min_epoch_day = gregorian_to_epoch_day(1 - p.offset, 4, 1)
        self.max_epoch_day = gregorian_to_epoch_day(MAX_GREGORIAN_YEAR, 12, 31)

    def iso_year(self, year: int, month: int) -> int:
        if year < self._short_year and month < 4:
            return year - self.p.offset + 1
        return year - self.p.offset

    def months(self, year: int, era: Optional[str] = None) -> List[MonthKey]:
        if year < self._short_year:
            return [(m, False) for m in (4, 5, 6, 7, 8, 9, 10, 11, 12, 1, 2, 3)]
        if year == self._short_year:
            return [(m, False) for m in range(4, 13)]
        return [(m, False) for m in range(1, 13)]

    def is_leap_year(self, year: int, era: Optional[str] = None) -> bool:
        self._check_year(year, era)
        if year == self._short_year:
            return False
        return is_gregorian_leap(self.iso_year(year, 2))

    def length_of_month(self, year: int, month: int, *, leap: bool = False, era: Optional[str] = None) -> int:
        return gregorian_month_length(self.iso_year(year, month), month)

    def _to_epoch_day(self, d: CalendarDate) -> int:
        return gregorian_to_epoch_day(self.iso_year(d.year, d.month), d.month, d.day)

    def _from_epoch_day(self, e: int) -> CalendarDate:
        y, m, d = epoch_day_to_gregorian(e)
        year = y + self.p.offset
        if y < self.p.first_january_year and m < 4:
            year -= 1
        if year < 1:
            raise RangeError(f"{self.variant}: epoch day {e} precedes Buddhist year 1")
        return CalendarDate(self.variant, year, m, d)

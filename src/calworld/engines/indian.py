"""
calworld.engines.indian
-----------------------
Indian national calendar (Saka era), aligned with the Gregorian leap rule.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.time import MAX_GREGORIAN_YEAR, epoch_day_to_gregorian, gregorian_to_epoch_day, is_gregorian_leap
from ..core.types import CalendarDate, EngineId
from .calendar import BaseCalendarEngine

SAKA_OFFSET = 78


@dataclass(frozen=True)
class IndianParams:
    variant: str = "indian"


class IndianEngine(BaseCalendarEngine):
    """
    Chaitra 1 is 22 March, or 21 March when the Gregorian year (Saka + 78) is leap.
    Chaitra has 30 days (31 in leap years), months 2-6 have 31 and months 7-12 have 30.
    """

    def __init__(self, p: IndianParams):
        self.p = p
        self.variant = p.variant
        self.id = EngineId("indian", p.variant)
        self.min_year = 1
        self.max_year = MAX_GREGORIAN_YEAR - SAKA_OFFSET - 1
        self.min_epoch_day = self.new_year(1)
        self.max_epoch_day = self.new_year(self.max_year + 1) - 1

    @staticmethod
    def new_year(year: int) -> int:
        gy = year + SAKA_OFFSET
        return gregorian_to_epoch_day(gy, 3, 21 if is_gregorian_leap(gy) else 22)

    def is_leap_year(self, year: int, era: Optional[str] = None) -> bool:
        self._check_year(year, era)
        return is_gregorian_leap(year + SAKA_OFFSET)

    def length_of_month(self, year: int, month: int, *, leap: bool = False, era: Optional[str] = None) -> int:
        if month == 1:
            return 31 if is_gregorian_leap(year + SAKA_OFFSET) else 30
        return 31 if month <= 6 else 30

    def _to_epoch_day(self, d: CalendarDate) -> int:
        e = self.new_year(d.year)
        for m in range(1, d.month):
            e += self.length_of_month(d.year, m)
        return e + d.day - 1

    def _from_epoch_day(self, e: int) -> CalendarDate:
        gy = epoch_day_to_gregorian(e)[0]
        year = gy - SAKA_OFFSET
        if e < self.new_year(year):
            year -= 1
        rest = e - self.new_year(year)
        month = 1
        while rest >= self.length_of_month(year, month):
            rest -= self.length_of_month(year, month)
            month += 1
        return CalendarDate(self.variant, year, month, rest + 1)

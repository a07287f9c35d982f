"""
calworld.engines.french
-----------------------
French Republican calendar: twelve months of 30 days and a 13th month of 5 or 6
complementary days (sansculottides).

Two new-year rules:
  - "equinox": the day of the autumnal equinox in apparent time at the Paris meridian
  - "romme":   equinox years before year 15, then Gregorian-style leap rules
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import List, Literal, Optional

from ..core.time import epoch_day_to_gregorian, gregorian_to_epoch_day
from ..core.types import CalendarDate, EngineId
from ..reference import solar
from ..reference import time_scales as ts
from .calendar import BaseCalendarEngine, MonthKey

FrenchAlgorithm = Literal["equinox", "romme"]

# Paris Observatory meridian, 2°20'14.025" E
PARIS_MERIDIAN_DEG = ts.dms(2, 20, 14.025)

# 1 Vendemiaire I
FRENCH_EPOCH = gregorian_to_epoch_day(1792, 9, 22)

MAX_YEAR = 1202


@lru_cache(maxsize=2048)
def new_year_equinox(year: int) -> int:
    jd_ut = ts.jd_tt_to_jd_ut(solar.season_jd_tt(year + 1791, 180))
    return solar.apparent_local_epoch_day(jd_ut, PARIS_MERIDIAN_DEG)


def new_year_romme(year: int) -> int:
    if year < 15:
        return new_year_equinox(year)
    y = year - 1
    return FRENCH_EPOCH + 365 * y + y // 4 - y // 100 + y // 400


@dataclass(frozen=True)
class FrenchRepublicanParams:
    variant: str = "french-republican"
    algorithm: FrenchAlgorithm = "equinox"


class FrenchRepublicanEngine(BaseCalendarEngine):

    def __init__(self, p: FrenchRepublicanParams):
        self.p = p
        self.variant = p.variant
        self.id = EngineId("french", p.variant)
        self.new_year = new_year_romme if p.algorithm == "romme" else new_year_equinox
        self.min_year = 1
        self.max_year = MAX_YEAR
        self.min_epoch_day = FRENCH_EPOCH
        self.max_epoch_day = self.new_year(MAX_YEAR + 1) - 1

    def months(self, year: int, era: Optional[str] = None) -> List[MonthKey]:
        return [(m, False) for m in range(1, 14)]

    def is_leap_year(self, year: int, era: Optional[str] = None) -> bool:
        self._check_year(year, era)
        return self.new_year(year + 1) - self.new_year(year) == 366

    def length_of_month(self, year: int, month: int, *, leap: bool = False, era: Optional[str] = None) -> int:
        if month <= 12:
            return 30
        return 6 if self.is_leap_year(year) else 5

    def _to_epoch_day(self, d: CalendarDate) -> int:
        return self.new_year(d.year) + 30 * (d.month - 1) + d.day - 1

    def _from_epoch_day(self, e: int) -> CalendarDate:
        gy, gm, _ = epoch_day_to_gregorian(e)
        year = gy - 1791 if gm >= 9 else gy - 1792
        year = max(1, min(year, MAX_YEAR))
        while year > 1 and self.new_year(year) > e:
            year -= 1
        while year < MAX_YEAR and self.new_year(year + 1) <= e:
            year += 1
        doy = e - self.new_year(year)
        return CalendarDate(self.variant, year, doy // 30 + 1, doy % 30 + 1)

    def info(self):
        out = super().info()
        out["algorithm"] = self.p.algorithm
        return out

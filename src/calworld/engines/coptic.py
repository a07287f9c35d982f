"""
calworld.engines.coptic
-----------------------
Thirteen-month Alexandrian scheme shared by the Coptic and Ethiopian calendars:
twelve months of 30 days and a 13th month of 5 days, 6 in leap years.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple

from ..core.types import CalendarDate, EngineId
from .calendar import BaseCalendarEngine, MonthKey
from .julian import julian_to_epoch_day


@dataclass(frozen=True)
class AlexandrianParams:
    variant: str
    family: str
    epoch: Tuple[int, int, int]   # Julian date of 1-01-01
    min_year: int
    max_year: int


class AlexandrianEngine(BaseCalendarEngine):
    """Coptic-style conversion. A year is leap when year mod 4 == 3."""

    def __init__(self, p: AlexandrianParams):
        self.p = p
        self.variant = p.variant
        self.id = EngineId(p.family, p.variant)  # type: ignore[arg-type]
        self.epoch_day = julian_to_epoch_day(*p.epoch)
        self.min_year = p.min_year
        self.max_year = p.max_year
        self.min_epoch_day = self._days(p.min_year, 1, 1)
        self.max_epoch_day = self._days(p.max_year + 1, 1, 1) - 1

    def _days(self, y: int, m: int, d: int) -> int:
        return self.epoch_day - 1 + 365 * (y - 1) + y // 4 + 30 * (m - 1) + d

    def months(self, year: int, era: Optional[str] = None) -> List[MonthKey]:
        return [(m, False) for m in range(1, 14)]

    def is_leap_year(self, year: int, era: Optional[str] = None) -> bool:
        self._check_year(year, era)
        return year % 4 == 3

    def length_of_month(self, year: int, month: int, *, leap: bool = False, era: Optional[str] = None) -> int:
        if month <= 12:
            return 30
        return 6 if year % 4 == 3 else 5

    def _to_epoch_day(self, d: CalendarDate) -> int:
        return self._days(d.year, d.month, d.day)

    def _from_epoch_day(self, e: int) -> CalendarDate:
        y = (4 * (e - self.epoch_day) + 1463) // 1461
        doy = e - self._days(y, 1, 1)
        m = doy // 30 + 1
        d = doy - 30 * (m - 1) + 1
        return CalendarDate(self.variant, y, m, d)

"""
calworld.engines.japanese
-------------------------
Civil Japanese calendar underneath the Nengo eras.

Until the end of Meiji 5 (1872-12-31) months and days are lunisolar, read from the
`japanese-lunisolar` year tables; from 1873-01-01 they are Gregorian. Years are
numbered by their related Gregorian year on both sides, which is what the era table
counts from. Meiji 5 has only two days in its twelfth month.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple

from ..core.errors import InvalidDateError
from ..core.time import epoch_day_to_gregorian, gregorian_month_length, gregorian_to_epoch_day, is_gregorian_leap
from ..core.types import CalendarDate, EngineId
from .calendar import BaseCalendarEngine, MonthKey
from .gregorian import GregorianEngine, GregorianParams
from .lunisolar import RELATED_YEAR_OFFSET, LunarMonth, LunisolarEngine, LunisolarParams


@dataclass(frozen=True)
class JapaneseCivilParams:
    variant: str
    lunisolar: LunisolarParams
    cutover: Tuple[int, int, int] = (1873, 1, 1)   # first Gregorian day


class JapaneseCivilEngine(BaseCalendarEngine):

    def __init__(self, p: JapaneseCivilParams):
        self.p = p
        self.variant = p.variant
        self.id = EngineId("japanese", p.variant)
        self.lunisolar = LunisolarEngine(p.lunisolar)
        self.gregorian = GregorianEngine(GregorianParams(p.variant))
        self.cutover = gregorian_to_epoch_day(*p.cutover)
        self.cutover_year = p.cutover[0]
        self.min_epoch_day = self.lunisolar.min_epoch_day
        self.max_epoch_day = self.gregorian.max_epoch_day
        self.min_year = self.lunisolar.min_year - RELATED_YEAR_OFFSET
        self.max_year = self.gregorian.max_year

    def _is_lunisolar(self, year: int) -> bool:
        return year < self.cutover_year

    def lunar_months(self, year: int) -> List[LunarMonth]:
        """Lunisolar months of a pre-cutover year, cut short at the cutover."""
        out = []
        for m in self.lunisolar.year_months(year):
            if m.start >= self.cutover:
                break
            if m.start + m.length > self.cutover:
                m = LunarMonth(m.start, m.month, m.leap, self.cutover - m.start)
            out.append(m)
        return out

    def _find(self, year: int, month: int, leap: bool) -> LunarMonth:
        for m in self.lunar_months(year):
            if m.month == month and m.leap == leap:
                return m
        kind = "leap month" if leap else "month"
        raise InvalidDateError(f"{self.variant}: no {kind} {month} in year {year}")

    def months(self, year: int, era: Optional[str] = None) -> List[MonthKey]:
        self._check_year(year, era)
        if self._is_lunisolar(year):
            return [m.key for m in self.lunar_months(year)]
        return [(m, False) for m in range(1, 13)]

    def is_leap_year(self, year: int, era: Optional[str] = None) -> bool:
        self._check_year(year, era)
        if self._is_lunisolar(year):
            return any(m.leap for m in self.lunar_months(year))
        return is_gregorian_leap(year)

    def length_of_month(self, year: int, month: int, *, leap: bool = False, era: Optional[str] = None) -> int:
        self._check_year(year, era)
        if self._is_lunisolar(year):
            return self._find(year, month, leap).length
        return gregorian_month_length(year, month)

    def _to_epoch_day(self, d: CalendarDate) -> int:
        if self._is_lunisolar(d.year):
            return self._find(d.year, d.month, d.leap).start + d.day - 1
        return gregorian_to_epoch_day(d.year, d.month, d.day)

    def _from_epoch_day(self, e: int) -> CalendarDate:
        if e < self.cutover:
            ld = self.lunisolar.from_epoch_day(e)
            year = self.lunisolar.related_gregorian_year(ld)
            return CalendarDate(self.variant, year, ld.month, ld.day, leap=ld.leap)
        y, m, d = epoch_day_to_gregorian(e)
        return CalendarDate(self.variant, y, m, d)

    def fallback_month(self, ly: int, month: int, leap: bool) -> MonthKey:
        if self._is_lunisolar(ly) and (month, False) in self.months_of(ly):
            return (month, False)
        return super().fallback_month(ly, month, leap)

    def info(self):
        out = super().info()
        y, m, d = self.p.cutover
        out["gregorian_from"] = f"{y:04d}-{m:02d}-{d:02d}"
        return out

"""
calworld.engines.calendar
-------------------------
Shared orchestration for every engine: validation, range checks and the
"linear year" view that generic arithmetic walks over.

Subclasses supply the raw conversion (`_to_epoch_day`, `_from_epoch_day`) and the
month structure of a year (`months`, `length_of_month`). Everything a caller sees
goes through `check`, so no engine returns a partial result for bad input.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

from ..core.errors import InvalidDateError, RangeError
from ..core.types import CalendarDate, EngineId, Leniency

MonthKey = Tuple[int, bool]   # (month number, leap flag)


class BaseCalendarEngine:
    """
    Template for the conversion contract. Not meant to be used directly.
    """
    id: EngineId
    variant: str
    min_year: int
    max_year: int
    min_epoch_day: int
    max_epoch_day: int

    # ---------------------------------------------------------
    # Hooks
    # ---------------------------------------------------------

    def _to_epoch_day(self, d: CalendarDate) -> int:
        raise NotImplementedError

    def _from_epoch_day(self, e: int) -> CalendarDate:
        raise NotImplementedError

    def months(self, year: int, era: Optional[str] = None) -> List[MonthKey]:
        """Months of a year in calendar order."""
        return [(m, False) for m in range(1, 13)]

    def length_of_month(self, year: int, month: int, *, leap: bool = False, era: Optional[str] = None) -> int:
        raise NotImplementedError

    def is_leap_year(self, year: int, era: Optional[str] = None) -> bool:
        raise NotImplementedError

    def _check_year(self, year: int, era: Optional[str]) -> None:
        if not (self.min_year <= year <= self.max_year):
            raise RangeError(
                f"{self.variant}: year {year} outside [{self.min_year}, {self.max_year}]"
            )

    def _valid_day(self, year: int, month: int, day: int, leap: bool, era: Optional[str]) -> bool:
        return 1 <= day <= self.length_of_month(year, month, leap=leap, era=era)

    # ---------------------------------------------------------
    # Contract
    # ---------------------------------------------------------

    def check(self, d: CalendarDate, *, leniency: Leniency = Leniency.SMART) -> int:
        """
        Validate d and return its epoch day.
        RangeError for out-of-bounds years or days, InvalidDateError for unrealizable fields.
        """
        self._check_year(d.year, d.era)
        if (d.month, d.leap) not in self.months(d.year, d.era):
            kind = "leap month" if d.leap else "month"
            raise InvalidDateError(f"{self.variant}: no {kind} {d.month} in year {d.year}")
        if not self._valid_day(d.year, d.month, d.day, d.leap, d.era):
            raise InvalidDateError(f"{self.variant}: invalid day {d.day} in {d.year}-{d.month}")
        e = self._to_epoch_day(d)
        self._check_epoch_day(e)
        return e

    def _check_epoch_day(self, e: int) -> None:
        if not (self.min_epoch_day <= e <= self.max_epoch_day):
            raise RangeError(
                f"{self.variant}: epoch day {e} outside [{self.min_epoch_day}, {self.max_epoch_day}]"
            )

    def to_epoch_day(self, d: CalendarDate, *, leniency: Leniency = Leniency.SMART) -> int:
        return self.check(d, leniency=leniency)

    def from_epoch_day(self, e: int) -> CalendarDate:
        self._check_epoch_day(e)
        return self._from_epoch_day(e)

    def is_valid(self, d: CalendarDate, *, leniency: Leniency = Leniency.SMART) -> bool:
        try:
            self.check(d, leniency=leniency)
        except (InvalidDateError, RangeError):
            return False
        return True

    def length_of_year(self, year: int, era: Optional[str] = None) -> int:
        self._check_year(year, era)
        return sum(self.length_of_month(year, m, leap=lp, era=era) for m, lp in self.months(year, era))

    def minimum_epoch_day(self) -> int:
        return self.min_epoch_day

    def maximum_epoch_day(self) -> int:
        return self.max_epoch_day

    def first_day_of_year(self, year: int, era: Optional[str] = None) -> CalendarDate:
        m, lp = self.months(year, era)[0]
        day = 1
        while not self._valid_day(year, m, day, lp, era):
            day += 1
        return self.compose(year, m, day, lp, era=era)

    def info(self) -> Dict[str, Any]:
        return {
            "variant": self.variant,
            "family": self.id.family,
            "engine": type(self).__name__,
            "min_epoch_day": self.min_epoch_day,
            "max_epoch_day": self.max_epoch_day,
            "min_year": self.min_year,
            "max_year": self.max_year,
        }

    # ---------------------------------------------------------
    # Linear-year view (used by arithmetic)
    # ---------------------------------------------------------

    def linear_year(self, d: CalendarDate) -> int:
        return d.year

    def months_of(self, ly: int) -> List[MonthKey]:
        return self.months(ly)

    def month_length_of(self, ly: int, month: int, leap: bool) -> int:
        return self.length_of_month(ly, month, leap=leap)

    def max_day_of(self, ly: int, month: int, leap: bool) -> int:
        """Highest day number of a month (differs from its length when days are skipped)."""
        return self.month_length_of(ly, month, leap)

    def compose(self, ly: int, month: int, day: int, leap: bool = False, *, era: Optional[str] = None) -> CalendarDate:
        return CalendarDate(self.variant, ly, month, day, leap=leap, era=era)

    def fallback_month(self, ly: int, month: int, leap: bool) -> MonthKey:
        """
        Month used when (month, leap) does not exist in linear year ly,
        e.g. after adding years to a leap month.
        """
        keys = self.months_of(ly)
        if (month, False) in keys:
            return (month, False)
        later = [k for k in keys if k[0] > month]
        return later[0] if later else keys[-1]

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.variant!r})"

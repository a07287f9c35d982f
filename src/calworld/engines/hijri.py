"""
calworld.engines.hijri
----------------------
Islamic (Hijri) calendar variants.

Three families share one conversion contract:

  1) Arithmetic: a fixed pattern of eleven 355-day years per 30-year cycle, civil
     (Julian 622-07-16) or astronomical (Julian 622-07-15) epoch.
  2) Tabulated: month lengths read from a HijriMonthData provider (Umm al-Qura or
     user supplied) and walked by binary search over month starts.
  3) Adjusted: any of the above shifted by a fixed number of days
     ("islamic-umalqura:-1").
"""

from __future__ import annotations

import bisect
import logging
import re
from dataclasses import dataclass, field
from datetime import date
from typing import Dict, FrozenSet, List, Optional, Sequence, Tuple

from ..core.errors import InternalConsistencyError, InvalidDateError, RangeError
from ..core.time import epoch_day_from_date
from ..core.types import CalendarDate, EngineId
from .calendar import BaseCalendarEngine
from .interfaces import HijriMonthData
from .julian import julian_to_epoch_day

logger = logging.getLogger(__name__)

CIVIL_EPOCH = julian_to_epoch_day(622, 7, 16)
ASTRONOMICAL_EPOCH = julian_to_epoch_day(622, 7, 15)

CYCLE_YEARS = 30
CYCLE_DAYS = 30 * 354 + 11

# Leap positions within the 30-year cycle
LEAP_PATTERNS: Dict[str, FrozenSet[int]] = {
    "east": frozenset((2, 5, 7, 10, 13, 15, 18, 21, 24, 26, 29)),
    "west": frozenset((2, 5, 7, 10, 13, 16, 18, 21, 24, 26, 29)),
    "fatimid": frozenset((2, 5, 8, 10, 13, 16, 19, 21, 24, 27, 29)),
    "habash": frozenset((2, 5, 8, 11, 13, 16, 19, 21, 24, 27, 30)),
}

MAX_ADJUSTMENT = 3


def _days_before_month(month: int) -> int:
    # 30, 29, 30, 29, ...
    return 29 * (month - 1) + month // 2


# ============================================================
# Arithmetic variants
# ============================================================

@dataclass(frozen=True)
class ArithmeticHijriParams:
    variant: str
    pattern: str            # key of LEAP_PATTERNS
    astronomical: bool      # epoch Julian 622-07-15 instead of 622-07-16
    max_year: int = 1600


class ArithmeticHijriEngine(BaseCalendarEngine):

    def __init__(self, p: ArithmeticHijriParams):
        if p.pattern not in LEAP_PATTERNS:
            raise ValueError(f"Unknown Hijri leap pattern '{p.pattern}'")
        self.p = p
        self.variant = p.variant
        self.id = EngineId("hijri", p.variant)
        self.leaps = LEAP_PATTERNS[p.pattern]
        self.epoch = ASTRONOMICAL_EPOCH if p.astronomical else CIVIL_EPOCH
        self._leaps_before = [sum(1 for k in self.leaps if k <= r) for r in range(CYCLE_YEARS + 1)]
        self.min_year = 1
        self.max_year = p.max_year
        self.min_epoch_day = self.epoch
        self.max_epoch_day = self.new_year(p.max_year + 1) - 1

    def _is_leap(self, year: int) -> bool:
        return ((year - 1) % CYCLE_YEARS) + 1 in self.leaps

    def new_year(self, year: int) -> int:
        q, r = divmod(year - 1, CYCLE_YEARS)
        return self.epoch + q * CYCLE_DAYS + 354 * r + self._leaps_before[r]

    def is_leap_year(self, year: int, era: Optional[str] = None) -> bool:
        self._check_year(year, era)
        return self._is_leap(year)

    def length_of_month(self, year: int, month: int, *, leap: bool = False, era: Optional[str] = None) -> int:
        if month == 12 and self._is_leap(year):
            return 30
        return 30 if month % 2 == 1 else 29

    def _to_epoch_day(self, d: CalendarDate) -> int:
        return self.new_year(d.year) + _days_before_month(d.month) + d.day - 1

    def _from_epoch_day(self, e: int) -> CalendarDate:
        year = (CYCLE_YEARS * (e - self.epoch) + 10646) // CYCLE_DAYS
        while self.new_year(year) > e:
            year -= 1
        while self.new_year(year + 1) <= e:
            year += 1
        doy = e - self.new_year(year)
        month = 1
        while month < 12 and _days_before_month(month + 1) <= doy:
            month += 1
        return CalendarDate(self.variant, year, month, doy - _days_before_month(month) + 1)

    def info(self):
        out = super().info()
        out["leap_pattern"] = sorted(self.leaps)
        out["epoch"] = "astronomical" if self.p.astronomical else "civil"
        return out


# ============================================================
# Tabulated month-length data
# ============================================================

@dataclass(frozen=True)
class TabulatedHijriData:
    """Concrete HijriMonthData backed by an in-memory table."""
    variant: str
    min_year: int
    max_year: int
    first_epoch_day: int
    lengths: Dict[int, Tuple[int, ...]] = field(repr=False)

    def __post_init__(self) -> None:
        for y in range(self.min_year, self.max_year + 1):
            row = self.lengths.get(y)
            if row is None:
                raise InvalidDateError(f"{self.variant}: missing month lengths for year {y}")
            if len(row) != 12 or any(n not in (29, 30) for n in row):
                raise InvalidDateError(f"{self.variant}: bad month lengths for year {y}: {row}")

    def month_lengths(self, year: int) -> Sequence[int]:
        if not (self.min_year <= year <= self.max_year):
            raise RangeError(f"{self.variant}: year {year} outside [{self.min_year}, {self.max_year}]")
        return self.lengths[year]


_ROW_RE = re.compile(r"^\s*(\d+)\s*=\s*(.+)$")


def parse_hijri_table(text: str) -> TabulatedHijriData:
    """
    Parse a line-oriented table:

        type=islamic-custom
        version=1
        iso-start=2007-01-20
        min=1428
        max=1429
        1428=30 29 30 29 30 29 30 29 30 29 30 29
        1429=...

    Blank lines and '#' comments are ignored.
    """
    header: Dict[str, str] = {}
    rows: Dict[int, Tuple[int, ...]] = {}
    for lineno, raw in enumerate(text.splitlines(), start=1):
        line = raw.split("#", 1)[0].strip()
        if not line:
            continue
        m = _ROW_RE.match(line)
        if m:
            try:
                rows[int(m.group(1))] = tuple(int(x) for x in m.group(2).split())
            except ValueError:
                raise InvalidDateError(f"line {lineno}: month lengths must be integers") from None
            continue
        if "=" not in line:
            raise InvalidDateError(f"line {lineno}: expected key=value, got {raw!r}")
        key, value = line.split("=", 1)
        header[key.strip().lower()] = value.strip()

    missing = [k for k in ("type", "iso-start", "min", "max") if k not in header]
    if missing:
        raise InvalidDateError(f"Hijri table header lacks {', '.join(missing)}")
    try:
        first = epoch_day_from_date(date.fromisoformat(header["iso-start"]))
        min_year, max_year = int(header["min"]), int(header["max"])
    except ValueError as exc:
        raise InvalidDateError(f"Hijri table header: {exc}") from None
    return TabulatedHijriData(
        variant=header["type"],
        min_year=min_year,
        max_year=max_year,
        first_epoch_day=first,
        lengths=rows,
    )


class TabulatedHijriEngine(BaseCalendarEngine):
    """Month starts accumulated once from a HijriMonthData provider."""

    def __init__(self, data: HijriMonthData, *, variant: Optional[str] = None):
        self.data = data
        self.variant = variant or data.variant
        self.id = EngineId("hijri", self.variant)
        self.min_year = data.min_year
        self.max_year = data.max_year
        starts: List[int] = []
        e = data.first_epoch_day
        for y in range(data.min_year, data.max_year + 1):
            for n in data.month_lengths(y):
                starts.append(e)
                e += n
        self._starts = starts
        self.min_epoch_day = data.first_epoch_day
        self.max_epoch_day = e - 1
        logger.debug("tabulated Hijri %s: %d months, epoch days %d..%d",
                     self.variant, len(starts), self.min_epoch_day, self.max_epoch_day)

    def _index(self, year: int, month: int) -> int:
        return (year - self.min_year) * 12 + month - 1

    def is_leap_year(self, year: int, era: Optional[str] = None) -> bool:
        return self.length_of_year(year) == 355

    def length_of_month(self, year: int, month: int, *, leap: bool = False, era: Optional[str] = None) -> int:
        self._check_year(year, era)
        return self.data.month_lengths(year)[month - 1]

    def _to_epoch_day(self, d: CalendarDate) -> int:
        return self._starts[self._index(d.year, d.month)] + d.day - 1

    def _from_epoch_day(self, e: int) -> CalendarDate:
        i = bisect.bisect_right(self._starts, e) - 1
        if i < 0:
            raise InternalConsistencyError(f"{self.variant}: no month start at or before {e}")
        year, month0 = divmod(i, 12)
        return CalendarDate(self.variant, self.min_year + year, month0 + 1, e - self._starts[i] + 1)


# ============================================================
# Day-adjustment decorator
# ============================================================

class AdjustedHijriEngine(BaseCalendarEngine):
    """
    A base variant shifted by `days`: a date labelled d here is the day
    base.to_epoch_day(d) - days.
    """

    def __init__(self, base: BaseCalendarEngine, days: int):
        if isinstance(base, AdjustedHijriEngine):
            days += base.days
            base = base.base
        self.base = base
        self.days = days
        self.variant = f"{base.variant}:{days:+d}"
        self.id = EngineId("hijri", self.variant)
        self.min_year = base.min_year
        self.max_year = base.max_year
        self.min_epoch_day = base.min_epoch_day - days
        self.max_epoch_day = base.max_epoch_day - days

    def _base_date(self, d: CalendarDate) -> CalendarDate:
        return CalendarDate(self.base.variant, d.year, d.month, d.day, leap=d.leap, era=d.era)

    def months(self, year, era=None):
        return self.base.months(year, era)

    def is_leap_year(self, year: int, era: Optional[str] = None) -> bool:
        return self.base.is_leap_year(year, era)

    def length_of_month(self, year: int, month: int, *, leap: bool = False, era: Optional[str] = None) -> int:
        return self.base.length_of_month(year, month, leap=leap, era=era)

    def _to_epoch_day(self, d: CalendarDate) -> int:
        return self.base.check(self._base_date(d)) - self.days

    def _from_epoch_day(self, e: int) -> CalendarDate:
        b = self.base.from_epoch_day(e + self.days)
        return CalendarDate(self.variant, b.year, b.month, b.day, leap=b.leap, era=b.era)

    def info(self):
        out = super().info()
        out["base"] = self.base.variant
        out["adjustment"] = self.days
        return out


def adjusted(engine: BaseCalendarEngine, days: int) -> BaseCalendarEngine:
    """Shift engine by days; offsets of nested adjustments add up and zero yields the base."""
    if isinstance(engine, AdjustedHijriEngine):
        days += engine.days
        engine = engine.base
    if days == 0:
        return engine
    return AdjustedHijriEngine(engine, days)


_ADJUSTED_RE = re.compile(r"^(?P<base>[^:]+):(?P<days>[+-]\d+)$")


def resolve_adjusted(registry, name: str) -> Optional[BaseCalendarEngine]:
    """Registry resolver for names of the form '<hijri variant>:+k'."""
    m = _ADJUSTED_RE.match(name)
    if not m:
        return None
    days = int(m.group("days"))
    if abs(days) > MAX_ADJUSTMENT:
        return None
    base = registry.get(m.group("base"))
    if base.id.family != "hijri":
        return None
    return adjusted(base, days)

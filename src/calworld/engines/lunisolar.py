"""
calworld.engines.lunisolar
--------------------------
East Asian lunisolar calendars (Chinese, Korean, Vietnamese, Japanese lunisolar).

Months run from local new moon to local new moon. The year is kept in step with the
sun by the sui, the span from one winter solstice to the next:

  - the month containing the solstice is month 11;
  - a sui holding 12 lunations after month 11 has a leap month, which is the first
    month without a major solar term;
  - month labels are counted from the month after month 11.

Variants differ only in the UTC offset used to turn astronomical instants into civil
days. Month tables are computed per sui on first use and cached per engine.
"""

from __future__ import annotations

import bisect
import logging
import math
import threading
from dataclasses import dataclass
from functools import lru_cache
from typing import Dict, List, Optional, Tuple

from ..core.errors import InternalConsistencyError, InvalidDateError, RangeError
from ..core.time import epoch_day_to_gregorian, gregorian_to_epoch_day
from ..core.types import CalendarDate, EngineId, Leniency
from ..reference import lunar, solar
from ..reference import time_scales as ts
from .calendar import BaseCalendarEngine, MonthKey

logger = logging.getLogger(__name__)

SYNODIC_MONTH = lunar.MEAN_SYNODIC_MONTH
TROPICAL_YEAR = solar.MEAN_TROPICAL_YEAR

# Day 1 of the first sexagenary cycle
EPOCH_CHINESE = gregorian_to_epoch_day(-2636, 2, 15)

# linear year - related Gregorian year
RELATED_YEAR_OFFSET = 2637

DANGI_OFFSET = 2333

_FOREVER = -(10 ** 9)

OffsetSchedule = Tuple[Tuple[int, float], ...]   # (first epoch day, hours east of UTC)


def _lmt(deg: int, minutes: int) -> float:
    return ts.lmt_offset_hours(ts.dms(deg, minutes))


CHINA_OFFSETS: OffsetSchedule = (
    (_FOREVER, _lmt(116, 25)),
    (gregorian_to_epoch_day(1929, 1, 1), 8.0),
)

KOREA_OFFSETS: OffsetSchedule = (
    (_FOREVER, _lmt(126, 58)),
    (gregorian_to_epoch_day(1908, 4, 1), 8.5),
    (gregorian_to_epoch_day(1912, 1, 1), 9.0),
    (gregorian_to_epoch_day(1954, 3, 21), 8.5),
    (gregorian_to_epoch_day(1961, 8, 10), 9.0),
)

VIETNAM_OFFSETS: OffsetSchedule = (
    (_FOREVER, _lmt(116, 25)),
    (gregorian_to_epoch_day(1841, 1, 1), _lmt(107, 35)),
    (gregorian_to_epoch_day(1954, 7, 1), 8.0),
    (gregorian_to_epoch_day(1968, 1, 1), 7.0),
)

JAPAN_OFFSETS: OffsetSchedule = (
    (_FOREVER, _lmt(135, 45)),
    (gregorian_to_epoch_day(1888, 1, 1), 9.0),
)

REFORM_1645 = gregorian_to_epoch_day(1645, 1, 28)
MAX_LIMIT = gregorian_to_epoch_day(3000, 1, 27)


@lru_cache(maxsize=4096)
def winter_solstice_jd_ut(year: int) -> float:
    return ts.jd_tt_to_jd_ut(solar.season_jd_tt(year, 270))


def lunations(m1: int, m2: int) -> int:
    """Number of lunations between two new-moon days."""
    return int(round((m2 - m1) / SYNODIC_MONTH))


def split_linear_year(ly: int) -> Tuple[int, int]:
    """Linear (elapsed) year -> (cycle, year of cycle)."""
    cycle = (ly - 1) // 60 + 1
    yoc = ly % 60
    return cycle, (yoc or 60)


def linear_year_of(cycle: int, year_of_cycle: int) -> int:
    return (cycle - 1) * 60 + year_of_cycle


def related_gregorian_year(cycle: int, year_of_cycle: int) -> int:
    return linear_year_of(cycle, year_of_cycle) - RELATED_YEAR_OFFSET


def dangi_year(cycle: int, year_of_cycle: int) -> int:
    """Korean Dangi year (counted from 2333 BC)."""
    return related_gregorian_year(cycle, year_of_cycle) + DANGI_OFFSET


@dataclass(frozen=True)
class LunisolarParams:
    variant: str
    offsets: OffsetSchedule
    min_epoch_day: int = REFORM_1645
    max_epoch_day: int = MAX_LIMIT


@dataclass(frozen=True)
class LunarMonth:
    start: int
    month: int
    leap: bool
    length: int

    @property
    def key(self) -> MonthKey:
        return (self.month, self.leap)


class LunisolarEngine(BaseCalendarEngine):
    """
    Dates carry `cycle` and `year` (year of cycle, 1..60). A date without a cycle is
    read with `year` as the related Gregorian year.
    """

    def __init__(self, p: LunisolarParams):
        self.p = p
        self.variant = p.variant
        self.id = EngineId("lunisolar", p.variant)
        self._offset_starts = [s for s, _ in p.offsets]
        self._lock = threading.RLock()
        self._sui: Dict[int, Tuple[Tuple[int, int, bool], ...]] = {}
        self._years: Dict[int, Tuple[LunarMonth, ...]] = {}
        self.min_epoch_day = p.min_epoch_day
        self.max_epoch_day = p.max_epoch_day
        self.min_year = self._linear_year_at(p.min_epoch_day)
        self.max_year = self._linear_year_at(p.max_epoch_day)

    # ---------------------------------------------------------
    # Local days
    # ---------------------------------------------------------

    def offset_hours(self, e: int) -> float:
        i = bisect.bisect_right(self._offset_starts, e) - 1
        return self.p.offsets[max(i, 0)][1]

    def _midnight_ut(self, e: int) -> float:
        return ts.local_midnight_jd_ut(e, self.offset_hours(e))

    def new_moon_on_or_after(self, e: int) -> int:
        jd = lunar.new_moon_at_or_after(self._midnight_ut(e))
        return ts.local_epoch_day(jd, self.offset_hours(e))

    def new_moon_before(self, e: int) -> int:
        jd = lunar.new_moon_before(self._midnight_ut(e))
        return ts.local_epoch_day(jd, self.offset_hours(e))

    def winter_on_or_before(self, e: int) -> int:
        y, m, d = epoch_day_to_gregorian(e)
        year = y - 1 if (m <= 11 or d <= 15) else y
        off = self.offset_hours(e)
        s = ts.local_epoch_day(winter_solstice_jd_ut(year), off)
        if s > e:
            s = ts.local_epoch_day(winter_solstice_jd_ut(year - 1), off)
        return s

    def major_term_at(self, e: int) -> int:
        """Major solar term (1..12) in force at local midnight of e."""
        return solar.major_solar_term(ts.jd_ut_to_jd_tt(self._midnight_ut(e)))

    # ---------------------------------------------------------
    # Sui and year tables
    # ---------------------------------------------------------

    def _sui_table(self, s1: int) -> Tuple[Tuple[int, int, bool], ...]:
        table = self._sui.get(s1)
        if table is not None:
            return table
        with self._lock:
            table = self._sui.get(s1)
            if table is None:
                table = self._compute_sui(s1)
                self._sui[s1] = table
        return table

    def _compute_sui(self, s1: int) -> Tuple[Tuple[int, int, bool], ...]:
        """(start, month, leap) from month 11 of this sui up to month 11 of the next."""
        s2 = self.winter_on_or_before(s1 + 370)
        m11 = self.new_moon_before(s1 + 1)
        m12 = self.new_moon_on_or_after(s1 + 1)
        next_m11 = self.new_moon_before(s2 + 1)
        leap_sui = lunations(m12, next_m11) == 12

        starts = [m11]
        while starts[-1] < next_m11:
            starts.append(self.new_moon_on_or_after(starts[-1] + 1))
        if starts[-1] != next_m11:
            raise InternalConsistencyError(f"{self.variant}: new moons of sui {s1} overshoot month 11")
        ends = starts[1:] + [self.new_moon_on_or_after(next_m11 + 1)]

        out: List[Tuple[int, int, bool]] = []
        leap_seen = False
        for start, end in zip(starts, ends):
            if start < m12:
                out.append((start, 11, False))
                continue
            me = lunations(m12, start)
            leap = False
            if leap_sui and not leap_seen and start < next_m11 \
                    and self.major_term_at(start) == self.major_term_at(end):
                leap = leap_seen = True
            if leap_seen:
                me -= 1
            out.append((start, (me % 12) or 12, leap))
        if leap_sui and not leap_seen:
            raise InternalConsistencyError(f"{self.variant}: sui {s1} has 13 months but no month without a major term")
        logger.debug("%s: sui %d computed, %d months, leap=%s", self.variant, s1, len(out), leap_seen)
        return tuple(out)

    def _month_at(self, e: int) -> Tuple[int, int, bool]:
        table = self._sui_table(self.winter_on_or_before(e))
        i = bisect.bisect_right(table, (e, 99, True)) - 1
        if i < 0:
            raise InternalConsistencyError(f"{self.variant}: epoch day {e} precedes its sui")
        return table[i]

    def _new_year_in_sui(self, e: int) -> int:
        for start, month, leap in self._sui_table(self.winter_on_or_before(e)):
            if month == 1 and not leap:
                return start
        raise InternalConsistencyError(f"{self.variant}: no new year in the sui of epoch day {e}")

    def new_year(self, ly: int) -> int:
        """Epoch day of the first day of linear year ly."""
        mid = int(math.floor(EPOCH_CHINESE + (ly - 0.5) * TROPICAL_YEAR))
        ny = self._new_year_in_sui(mid)
        if mid >= ny:
            return ny
        return self._new_year_in_sui(mid - 180)

    def _year_table(self, ly: int) -> Tuple[LunarMonth, ...]:
        table = self._years.get(ly)
        if table is not None:
            return table
        with self._lock:
            table = self._years.get(ly)
            if table is None:
                table = self._compute_year(ly)
                self._years[ly] = table
        return table

    def _compute_year(self, ly: int) -> Tuple[LunarMonth, ...]:
        start, stop = self.new_year(ly), self.new_year(ly + 1)
        months: List[LunarMonth] = []
        e = start
        while e < stop:
            m_start, month, leap = self._month_at(e)
            nxt = self.new_moon_on_or_after(m_start + 1)
            months.append(LunarMonth(m_start, month, leap, nxt - m_start))
            e = nxt
        _check_sequence(self.variant, ly, months)
        return tuple(months)

    # ---------------------------------------------------------
    # Year numbering
    # ---------------------------------------------------------

    def _linear_year_at(self, e: int) -> int:
        _, month, _ = self._month_at(e)
        return int(math.floor(1.5 - month / 12.0 + (e - EPOCH_CHINESE) / TROPICAL_YEAR))

    def _linear(self, year: int, cycle: Optional[int]) -> int:
        if cycle is None:
            return year + RELATED_YEAR_OFFSET
        if not (1 <= year <= 60):
            raise InvalidDateError(f"{self.variant}: year of cycle must be 1..60, got {year}")
        return linear_year_of(cycle, year)

    def _check_linear(self, ly: int) -> None:
        if not (self.min_year <= ly <= self.max_year):
            c, y = split_linear_year(ly)
            raise RangeError(f"{self.variant}: cycle {c} year {y} outside the supported range")

    def year_months(self, year: int, *, cycle: Optional[int] = None) -> Tuple[LunarMonth, ...]:
        ly = self._linear(year, cycle)
        self._check_linear(ly)
        return self._year_table(ly)

    def leap_month(self, cycle: int, year: int) -> int:
        """Number of the leap month of the year, 0 if none."""
        leaps = [m.month for m in self.year_months(year, cycle=cycle) if m.leap]
        return leaps[0] if leaps else 0

    def related_gregorian_year(self, d: CalendarDate) -> int:
        return self._linear(d.year, d.cycle) - RELATED_YEAR_OFFSET

    # ---------------------------------------------------------
    # Contract
    # ---------------------------------------------------------

    def months(self, year: int, era: Optional[str] = None, *, cycle: Optional[int] = None) -> List[MonthKey]:
        return [m.key for m in self.year_months(year, cycle=cycle)]

    def _find(self, ly: int, month: int, leap: bool) -> LunarMonth:
        for m in self._year_table(ly):
            if m.month == month and m.leap == leap:
                return m
        kind = "leap month" if leap else "month"
        c, y = split_linear_year(ly)
        raise InvalidDateError(f"{self.variant}: no {kind} {month} in cycle {c} year {y}")

    def length_of_month(self, year: int, month: int, *, leap: bool = False, era: Optional[str] = None,
                        cycle: Optional[int] = None) -> int:
        ly = self._linear(year, cycle)
        self._check_linear(ly)
        return self._find(ly, month, leap).length

    def is_leap_year(self, year: int, era: Optional[str] = None, *, cycle: Optional[int] = None) -> bool:
        return any(m.leap for m in self.year_months(year, cycle=cycle))

    def length_of_year(self, year: int, era: Optional[str] = None, *, cycle: Optional[int] = None) -> int:
        return sum(m.length for m in self.year_months(year, cycle=cycle))

    def check(self, d: CalendarDate, *, leniency: Leniency = Leniency.SMART) -> int:
        ly = self._linear(d.year, d.cycle)
        self._check_linear(ly)
        m = self._find(ly, d.month, d.leap)
        if not (1 <= d.day <= m.length):
            raise InvalidDateError(f"{self.variant}: invalid day {d.day} in month of {m.length} days")
        e = m.start + d.day - 1
        self._check_epoch_day(e)
        return e

    def _from_epoch_day(self, e: int) -> CalendarDate:
        start, month, leap = self._month_at(e)
        ly = int(math.floor(1.5 - month / 12.0 + (e - EPOCH_CHINESE) / TROPICAL_YEAR))
        cycle, yoc = split_linear_year(ly)
        return CalendarDate(self.variant, yoc, month, e - start + 1, leap=leap, cycle=cycle)

    # linear view: elapsed years since the epoch of the first cycle
    def linear_year(self, d: CalendarDate) -> int:
        return self._linear(d.year, d.cycle)

    def months_of(self, ly: int) -> List[MonthKey]:
        self._check_linear(ly)
        return [m.key for m in self._year_table(ly)]

    def month_length_of(self, ly: int, month: int, leap: bool) -> int:
        return self._find(ly, month, leap).length

    def compose(self, ly: int, month: int, day: int, leap: bool = False, *, era: Optional[str] = None) -> CalendarDate:
        cycle, yoc = split_linear_year(ly)
        return CalendarDate(self.variant, yoc, month, day, leap=leap, cycle=cycle)

    def fallback_month(self, ly: int, month: int, leap: bool) -> MonthKey:
        # a leap month missing in the target year falls back to its regular month
        return (month, False)

    def first_day_of_year(self, year: int, era: Optional[str] = None, *, cycle: Optional[int] = None) -> CalendarDate:
        ly = self._linear(year, cycle)
        self._check_linear(ly)
        first = self._year_table(ly)[0]
        return self.compose(ly, first.month, 1, first.leap)

    def info(self):
        out = super().info()
        out["utc_offsets"] = [(s if s != _FOREVER else None, h) for s, h in self.p.offsets]
        return out


class KoreanLunisolarEngine(LunisolarEngine):
    """Korean calendar with Dangi year numbering available."""

    def dangi_year(self, d: CalendarDate) -> int:
        return self.related_gregorian_year(d) + DANGI_OFFSET


def _check_sequence(variant: str, ly: int, months: List[LunarMonth]) -> None:
    if not months or months[0].key != (1, False):
        raise InternalConsistencyError(f"{variant}: year {ly} does not start with month 1")
    leaps = sum(1 for m in months if m.leap)
    if leaps > 1:
        raise InternalConsistencyError(f"{variant}: year {ly} has {leaps} leap months")
    for prev, cur in zip(months, months[1:]):
        if cur.leap:
            ok = cur.month == prev.month and not prev.leap
        else:
            ok = cur.month == prev.month + 1
        if not ok:
            raise InternalConsistencyError(
                f"{variant}: month {cur.month}{'*' if cur.leap else ''} cannot follow {prev.month} in year {ly}"
            )

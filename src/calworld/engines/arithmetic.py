"""
calworld.engines.arithmetic
---------------------------
Calendar arithmetic on any engine through its linear-year view.

  - days/weeks: epoch-day offsets
  - months:     steps over the actual month sequence (leap months included)
  - years:      same month in the target year, day clamped; a missing month
                falls back via the engine's `fallback_month`

Results outside the engine's range raise RangeError.
"""

from __future__ import annotations

from typing import List, Tuple

from ..core.errors import InvalidDateError
from ..core.time import day_of_week as _iso_day_of_week
from ..core.types import CalendarDate, Unit
from .calendar import BaseCalendarEngine, MonthKey

UNITS: Tuple[str, ...] = ("days", "weeks", "months", "years")


def _check_unit(unit: str) -> None:
    if unit not in UNITS:
        raise ValueError(f"unit must be one of {UNITS}, got {unit!r}")


def _settle(engine: BaseCalendarEngine, ly: int, key: MonthKey, day: int, era) -> CalendarDate:
    month, leap = key
    day = min(day, engine.max_day_of(ly, month, leap))
    out = engine.compose(ly, month, day, leap, era=era)
    return engine.from_epoch_day(engine.check(out))


def _month_position(engine: BaseCalendarEngine, d: CalendarDate) -> Tuple[int, List[MonthKey], int]:
    ly = engine.linear_year(d)
    keys = engine.months_of(ly)
    try:
        return ly, keys, keys.index((d.month, d.leap))
    except ValueError:
        raise InvalidDateError(f"{engine.variant}: month {d.month} not in year {d.year}") from None


def plus(engine: BaseCalendarEngine, d: CalendarDate, amount: int, unit: Unit = "days") -> CalendarDate:
    _check_unit(unit)
    e = engine.check(d)
    if unit == "days":
        return engine.from_epoch_day(e + amount)
    if unit == "weeks":
        return engine.from_epoch_day(e + 7 * amount)

    if unit == "years":
        ly = engine.linear_year(d) + amount
        keys = engine.months_of(ly)
        key = (d.month, d.leap)
        if key not in keys:
            key = engine.fallback_month(ly, d.month, d.leap)
        return _settle(engine, ly, key, d.day, d.era)

    ly, keys, idx = _month_position(engine, d)
    idx += amount
    while idx >= len(keys):
        idx -= len(keys)
        ly += 1
        keys = engine.months_of(ly)
    while idx < 0:
        ly -= 1
        keys = engine.months_of(ly)
        idx += len(keys)
    return _settle(engine, ly, keys[idx], d.day, d.era)


def minus(engine: BaseCalendarEngine, d: CalendarDate, amount: int, unit: Unit = "days") -> CalendarDate:
    return plus(engine, d, -amount, unit)


def _months_between(engine: BaseCalendarEngine, a: CalendarDate, b: CalendarDate) -> int:
    ly1, _, i1 = _month_position(engine, a)
    ly2, _, i2 = _month_position(engine, b)
    n = i2 - i1
    if ly2 >= ly1:
        n += sum(len(engine.months_of(y)) for y in range(ly1, ly2))
    else:
        n -= sum(len(engine.months_of(y)) for y in range(ly2, ly1))
    return n


def until(engine: BaseCalendarEngine, start: CalendarDate, end: CalendarDate, unit: Unit = "days") -> int:
    """Whole units from start to end (negative if end is earlier)."""
    _check_unit(unit)
    e1, e2 = engine.check(start), engine.check(end)
    if unit == "days":
        return e2 - e1
    if unit == "weeks":
        q = abs(e2 - e1) // 7
        return q if e2 >= e1 else -q

    if unit == "years":
        n = engine.linear_year(end) - engine.linear_year(start)
    else:
        n = _months_between(engine, start, end)
    # only completed units count
    if n > 0 and engine.check(plus(engine, start, n, unit)) > e2:
        n -= 1
    elif n < 0 and engine.check(plus(engine, start, n, unit)) < e2:
        n += 1
    return n


def day_of_week(engine: BaseCalendarEngine, d: CalendarDate) -> int:
    """ISO day of week, Monday = 1."""
    return _iso_day_of_week(engine.check(d))


def day_of_year(engine: BaseCalendarEngine, d: CalendarDate) -> int:
    e = engine.check(d)
    ly = engine.linear_year(d)
    month, leap = engine.months_of(ly)[0]
    first = engine.compose(ly, month, 1, leap, era=d.era)
    return e - engine.check(first) + 1

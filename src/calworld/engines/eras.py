"""
calworld.engines.eras
---------------------
Era year numbering over a base engine.

An EraTransitionTable is an ordered list of eras with strictly increasing start days.
EraCalendar maps (era, year_of_era, month, day) onto the base engine's own year
numbering and checks the era name against the date with an explicit Leniency:

  - STRICT: the date must lie in the era's span [start, next era's start)
  - SMART:  also accepts an era name used past its end (Heisei 31-05-01 == Reiwa 1-05-01)
  - LAX:    also accepts an era name used before its start (year of era >= 1)
"""

from __future__ import annotations

import bisect
import importlib.resources
from dataclasses import dataclass, field
from datetime import date
from functools import lru_cache
from typing import Any, Callable, Dict, List, Optional, Tuple

from ..core.errors import InvalidDateError, RangeError
from ..core.time import epoch_day_from_date, epoch_day_to_gregorian, gregorian_to_epoch_day
from ..core.types import CalendarDate, EngineId, Leniency
from .calendar import BaseCalendarEngine, MonthKey


@dataclass(frozen=True)
class Era:
    name: str
    start_epoch_day: int
    start_year: int               # base-calendar year that is year 1 (or the last year, if descending)
    descending: bool = False
    label: Optional[str] = None   # native-script name, if any

    def year_of_era(self, related_year: int) -> int:
        if self.descending:
            return self.start_year - related_year + 1
        return related_year - self.start_year + 1

    def related_year(self, year_of_era: int) -> int:
        if self.descending:
            return self.start_year - year_of_era + 1
        return self.start_year + year_of_era - 1


def _gregorian_year(e: int) -> int:
    return epoch_day_to_gregorian(e)[0]


@dataclass(frozen=True)
class EraTransitionTable:
    eras: Tuple[Era, ...]
    related_year: Callable[[int], int] = field(default=_gregorian_year, compare=False, repr=False)

    def __post_init__(self) -> None:
        if not self.eras:
            raise ValueError("era table is empty")
        starts = [e.start_epoch_day for e in self.eras]
        for a, b in zip(starts, starts[1:]):
            if not a < b:
                raise ValueError("era starts must be strictly increasing")
        names = [e.name for e in self.eras]
        if len(set(names)) != len(names):
            raise ValueError("era names must be unique")
        object.__setattr__(self, "_starts", tuple(starts))

    def active_era(self, epoch_day: int) -> Era:
        i = bisect.bisect_right(self._starts, epoch_day) - 1  # type: ignore[attr-defined]
        if i < 0:
            raise RangeError(f"epoch day {epoch_day} precedes the first era ({self.eras[0].name})")
        return self.eras[i]

    def year_of_era(self, epoch_day: int, era: Optional[Era] = None) -> int:
        era = era or self.active_era(epoch_day)
        return era.year_of_era(self.related_year(epoch_day))

    def era_by_name(self, name: str) -> Era:
        for era in self.eras:
            if era.name == name or era.label == name:
                return era
        raise InvalidDateError(f"Unknown era '{name}'. Available: {[e.name for e in self.eras]}")

    def next_era(self, era: Era) -> Optional[Era]:
        i = self.eras.index(era)
        return self.eras[i + 1] if i + 1 < len(self.eras) else None

    def to_related_year(self, era: Era, year_of_era: int) -> int:
        return era.related_year(year_of_era)

    def names(self) -> List[str]:
        return [e.name for e in self.eras]


# ============================================================
# Engine
# ============================================================

class EraCalendar(BaseCalendarEngine):
    """
    Base engine with era year numbering. A date without an era is read in
    `default_era`, or in the base engine's own numbering when there is none.
    """

    def __init__(self, variant: str, base: BaseCalendarEngine, table: EraTransitionTable,
                 default_era: Optional[str] = None):
        self.variant = variant
        self.default_era = default_era
        self.base = base
        self.id = EngineId("era", variant)
        self.table = EraTransitionTable(table.eras, related_year=lambda e: base.from_epoch_day(e).year)
        self.min_epoch_day = max(base.min_epoch_day, table.eras[0].start_epoch_day)
        self.max_epoch_day = base.max_epoch_day
        self.min_year = base.min_year
        self.max_year = base.max_year

    def _related(self, year: int, era: Optional[str]) -> int:
        era = era or self.default_era
        if era is None:
            return year
        if year < 1:
            raise InvalidDateError(f"{self.variant}: year of era must be >= 1, got {year}")
        return self.table.era_by_name(era).related_year(year)

    def _base_date(self, d: CalendarDate) -> CalendarDate:
        return CalendarDate(self.base.variant, self._related(d.year, d.era), d.month, d.day, leap=d.leap)

    def _check_year(self, year: int, era: Optional[str]) -> None:
        self.base._check_year(self._related(year, era), None)

    def months(self, year: int, era: Optional[str] = None) -> List[MonthKey]:
        return self.base.months(self._related(year, era))

    def is_leap_year(self, year: int, era: Optional[str] = None) -> bool:
        return self.base.is_leap_year(self._related(year, era))

    def length_of_month(self, year: int, month: int, *, leap: bool = False, era: Optional[str] = None) -> int:
        return self.base.length_of_month(self._related(year, era), month, leap=leap)

    def length_of_year(self, year: int, era: Optional[str] = None) -> int:
        return self.base.length_of_year(self._related(year, era))

    def check(self, d: CalendarDate, *, leniency: Leniency = Leniency.SMART) -> int:
        e = self.base.check(self._base_date(d))
        name = d.era or self.default_era
        if name is not None:
            era = self.table.era_by_name(name)
            nxt = self.table.next_era(era)
            if e < era.start_epoch_day:
                if not leniency.is_lax():
                    raise InvalidDateError(f"{self.variant}: {d} precedes the start of era {era.name}")
            elif nxt is not None and e >= nxt.start_epoch_day:
                if leniency.is_strict():
                    raise InvalidDateError(f"{self.variant}: {d} is past the end of era {era.name}")
        self._check_epoch_day(e)
        return e

    def _from_epoch_day(self, e: int) -> CalendarDate:
        b = self.base.from_epoch_day(e)
        era = self.table.active_era(e)
        return CalendarDate(self.variant, era.year_of_era(b.year), b.month, b.day, leap=b.leap, era=era.name)

    def active_era(self, epoch_day: int) -> Era:
        self._check_epoch_day(epoch_day)
        return self.table.active_era(epoch_day)

    def year_of_era(self, epoch_day: int, era: Optional[str] = None) -> int:
        self._check_epoch_day(epoch_day)
        return self.table.year_of_era(epoch_day, self.table.era_by_name(era) if era else None)

    # linear view: the base engine's year numbering
    def linear_year(self, d: CalendarDate) -> int:
        return self._related(d.year, d.era)

    def months_of(self, ly: int) -> List[MonthKey]:
        return self.base.months_of(ly)

    def month_length_of(self, ly: int, month: int, leap: bool) -> int:
        return self.base.month_length_of(ly, month, leap)

    def compose(self, ly: int, month: int, day: int, leap: bool = False, *, era: Optional[str] = None) -> CalendarDate:
        bd = self.base.compose(ly, month, day, leap)
        return self.from_epoch_day(self.base.check(bd))

    def max_day_of(self, ly: int, month: int, leap: bool) -> int:
        return self.base.max_day_of(ly, month, leap)

    def fallback_month(self, ly: int, month: int, leap: bool) -> MonthKey:
        return self.base.fallback_month(ly, month, leap)

    def first_day_of_year(self, year: int, era: Optional[str] = None) -> CalendarDate:
        return self.from_epoch_day(self.base.check(self.base.first_day_of_year(self._related(year, era))))

    def info(self):
        out = super().info()
        out["base"] = self.base.variant
        out["eras"] = self.table.names()
        return out


# ============================================================
# Era tables
# ============================================================

def bc_ad_table(first_day: int, ad_start: int) -> EraTransitionTable:
    return EraTransitionTable((
        Era("BC", first_day, 0, descending=True),
        Era("AD", ad_start, 1),
    ))


def minguo_table(first_day: int) -> EraTransitionTable:
    return EraTransitionTable((
        Era("BEFORE_ROC", first_day, 1911, descending=True, label="民前"),
        Era("ROC", gregorian_to_epoch_day(1912, 1, 1), 1912, label="民國"),
    ))


def juche_table() -> EraTransitionTable:
    return EraTransitionTable((Era("JUCHE", gregorian_to_epoch_day(1912, 1, 1), 1912, label="주체"),))


def ethiopian_table(first_day: int, mihret_start: int) -> EraTransitionTable:
    return EraTransitionTable((
        Era("AMETE_ALEM", first_day, -5499),
        Era("AMETE_MIHRET", mihret_start, 1),
    ))


@lru_cache(maxsize=1)
def nengo_table() -> EraTransitionTable:
    """Japanese eras from the packaged table (romaji|kanji|first day)."""
    text = importlib.resources.files("calworld.data").joinpath("nengo.txt").read_text(encoding="utf-8")
    return parse_era_table(text)


def parse_era_table(text: str) -> EraTransitionTable:
    """
    Lines of `name|label|YYYY-MM-DD[|related year]`. The related year of year 1
    defaults to the Gregorian year of the first day.
    """
    eras = []
    for lineno, raw in enumerate(text.splitlines(), start=1):
        line = raw.split("#", 1)[0].strip()
        if not line:
            continue
        parts = [p.strip() for p in line.split("|")]
        if len(parts) not in (3, 4):
            raise ValueError(f"era table line {lineno}: expected name|label|YYYY-MM-DD[|year]")
        name, label, iso = parts[:3]
        start = date.fromisoformat(iso)
        related = int(parts[3]) if len(parts) == 4 else start.year
        eras.append(Era(name, epoch_day_from_date(start), related, label=label or None))
    return EraTransitionTable(tuple(eras))


def nengo_for_related_year(year: int) -> Era:
    """Latest Japanese era whose year 1 relates to the given Gregorian year or an earlier one."""
    table = nengo_table()
    found = None
    for era in table.eras:
        if era.start_year <= year:
            found = era
    if found is None:
        raise RangeError(f"no Japanese era starts in or before {year}")
    return found


# ============================================================
# Spec payload
# ============================================================

@dataclass(frozen=True)
class EraParams:
    variant: str
    base: Any                       # params of the base engine
    table: str                      # key of ERA_TABLES
    default_era: Optional[str] = None


def _bc_ad(base: BaseCalendarEngine) -> EraTransitionTable:
    return bc_ad_table(base.min_epoch_day, base.check(CalendarDate(base.variant, 1, 1, 1)))


def _minguo(base: BaseCalendarEngine) -> EraTransitionTable:
    return minguo_table(base.min_epoch_day)


def _juche(base: BaseCalendarEngine) -> EraTransitionTable:
    return juche_table()


def _ethiopian(base: BaseCalendarEngine) -> EraTransitionTable:
    return ethiopian_table(base.min_epoch_day, base.check(CalendarDate(base.variant, 1, 1, 1)))


def _nengo(base: BaseCalendarEngine) -> EraTransitionTable:
    return nengo_table()


ERA_TABLES: Dict[str, Callable[[BaseCalendarEngine], EraTransitionTable]] = {
    "bc-ad": _bc_ad,
    "minguo": _minguo,
    "juche": _juche,
    "ethiopian": _ethiopian,
    "nengo": _nengo,
}


def build_era_calendar(p: EraParams, base: BaseCalendarEngine) -> EraCalendar:
    try:
        make_table = ERA_TABLES[p.table]
    except KeyError:
        raise ValueError(f"Unknown era table '{p.table}'") from None
    return EraCalendar(p.variant, base, make_table(base), default_era=p.default_era)

from __future__ import annotations

from datetime import date
from typing import Any, Dict, List, Optional, Union

from .core.engine import CalendarEngine, EngineFactory, VariantRegistry
from .core.errors import RangeError
from .core.time import date_from_epoch_day, epoch_day_from_date
from .core.types import CalendarDate, Leniency, Unit
from .engines import arithmetic as _arith

_registry: Optional[VariantRegistry] = None


def set_registry(reg: VariantRegistry) -> None:
    global _registry
    _registry = reg


def _reg() -> VariantRegistry:
    if _registry is None:
        raise RuntimeError("Variant registry not initialized")
    return _registry


def _engine_of(date_or_variant: Union[CalendarDate, str]):
    if isinstance(date_or_variant, CalendarDate):
        return _reg().get(date_or_variant.variant)
    return _reg().get(date_or_variant)


def _cycle_kw(cycle: Optional[int]) -> Dict[str, int]:
    # only lunisolar engines take a cycle
    return {} if cycle is None else {"cycle": cycle}


# ============================================================
# Registry
# ============================================================

def list_variants() -> List[str]:
    return _reg().list()


def resolve_variant(name: str) -> CalendarEngine:
    return _reg().get(name)


def register_variant(name: str, engine: Union[CalendarEngine, EngineFactory], *, overwrite: bool = False) -> None:
    _reg().register(name, engine, overwrite=overwrite)


def engine_info(variant: str) -> Dict[str, Any]:
    return _reg().get(variant).info()


# ============================================================
# Conversion contract
# ============================================================

def to_epoch_day(
    variant: Union[str, CalendarDate],
    d: Optional[CalendarDate] = None,
    *,
    leniency: Leniency = Leniency.SMART,
) -> int:
    """
    to_epoch_day("hebrew", d) reads the fields of d in the named variant;
    to_epoch_day(d) uses the variant the date carries.
    """
    if d is None:
        if not isinstance(variant, CalendarDate):
            raise TypeError("to_epoch_day() needs a CalendarDate")
        d = variant
    return _engine_of(variant).to_epoch_day(d, leniency=leniency)


def from_epoch_day(variant: str, epoch_day: int) -> CalendarDate:
    return _reg().get(variant).from_epoch_day(epoch_day)


def is_leap_year(variant: str, year: int, *, era: Optional[str] = None, cycle: Optional[int] = None) -> bool:
    return _reg().get(variant).is_leap_year(year, era, **_cycle_kw(cycle))


def length_of_month(
    variant: str,
    year: int,
    month: int,
    *,
    leap: bool = False,
    era: Optional[str] = None,
    cycle: Optional[int] = None,
) -> int:
    return _reg().get(variant).length_of_month(year, month, leap=leap, era=era, **_cycle_kw(cycle))


def length_of_year(variant: str, year: int, *, era: Optional[str] = None, cycle: Optional[int] = None) -> int:
    return _reg().get(variant).length_of_year(year, era, **_cycle_kw(cycle))


def minimum_epoch_day(variant: str) -> int:
    return _reg().get(variant).minimum_epoch_day()


def maximum_epoch_day(variant: str) -> int:
    return _reg().get(variant).maximum_epoch_day()


def make_date(
    variant: str,
    year: int,
    month: int,
    day: int,
    *,
    leap: bool = False,
    era: Optional[str] = None,
    cycle: Optional[int] = None,
    leniency: Leniency = Leniency.SMART,
) -> CalendarDate:
    """
    Validated construction. The result is normalised through the epoch day, so a
    lenient era such as Heisei 31-05-01 comes back as Reiwa 1-05-01.
    """
    eng = _reg().get(variant)
    d = CalendarDate(variant, year, month, day, leap=leap, era=era, cycle=cycle)
    return eng.from_epoch_day(eng.to_epoch_day(d, leniency=leniency))


def is_valid(d: CalendarDate, *, leniency: Leniency = Leniency.SMART) -> bool:
    return _engine_of(d).is_valid(d, leniency=leniency)


def convert(d: CalendarDate, target_variant: str) -> CalendarDate:
    return from_epoch_day(target_variant, to_epoch_day(d))


def from_gregorian(variant: str, d: date) -> CalendarDate:
    return from_epoch_day(variant, epoch_day_from_date(d))


def to_gregorian(d: CalendarDate) -> date:
    e = to_epoch_day(d)
    try:
        return date_from_epoch_day(e)
    except ValueError:
        raise RangeError(f"{d} lies outside the range of datetime.date") from None


# ============================================================
# Arithmetic
# ============================================================

def plus(d: CalendarDate, amount: int, unit: Unit = "days") -> CalendarDate:
    return _arith.plus(_engine_of(d), d, amount, unit)


def minus(d: CalendarDate, amount: int, unit: Unit = "days") -> CalendarDate:
    return _arith.minus(_engine_of(d), d, amount, unit)


def until(start: CalendarDate, end: CalendarDate, unit: Unit = "days") -> int:
    if start.variant != end.variant:
        end = convert(end, start.variant)
    return _arith.until(_engine_of(start), start, end, unit)


def day_of_week(d: CalendarDate) -> int:
    return _arith.day_of_week(_engine_of(d), d)


def day_of_year(d: CalendarDate) -> int:
    return _arith.day_of_year(_engine_of(d), d)

"""
calworld.engines.factory
------------------------
Transforms pure data specifications into live, executable engine objects.
"""

from __future__ import annotations

from typing import Any

from ..core.types import VariantSpec
from .calendar import BaseCalendarEngine
from .coptic import AlexandrianEngine, AlexandrianParams
from .eras import EraParams, build_era_calendar
from .french import FrenchRepublicanEngine, FrenchRepublicanParams
from .gregorian import GregorianEngine, GregorianParams, ThaiSolarEngine, ThaiSolarParams
from .hebrew import HebrewEngine, HebrewParams
from .hijri import ArithmeticHijriEngine, ArithmeticHijriParams, TabulatedHijriEngine
from .hijri_data import UmalquraParams, umalqura_data
from .indian import IndianEngine, IndianParams
from .japanese import JapaneseCivilEngine, JapaneseCivilParams
from .julian import HistoricEngine, HistoricParams, JulianEngine, JulianParams
from .lunisolar import KoreanLunisolarEngine, LunisolarEngine, LunisolarParams
from .persian import PersianEngine, PersianParams


def build_engine(p: Any) -> BaseCalendarEngine:
    """Dispatch on the params type."""
    if isinstance(p, EraParams):
        return build_era_calendar(p, build_engine(p.base))
    if isinstance(p, GregorianParams):
        return GregorianEngine(p)
    if isinstance(p, JulianParams):
        return JulianEngine(p)
    if isinstance(p, HistoricParams):
        return HistoricEngine(p)
    if isinstance(p, AlexandrianParams):
        return AlexandrianEngine(p)
    if isinstance(p, PersianParams):
        return PersianEngine(p)
    if isinstance(p, HebrewParams):
        return HebrewEngine(p)
    if isinstance(p, IndianParams):
        return IndianEngine(p)
    if isinstance(p, ThaiSolarParams):
        return ThaiSolarEngine(p)
    if isinstance(p, FrenchRepublicanParams):
        return FrenchRepublicanEngine(p)
    if isinstance(p, ArithmeticHijriParams):
        return ArithmeticHijriEngine(p)
    if isinstance(p, UmalquraParams):
        return TabulatedHijriEngine(umalqura_data(), variant=p.variant)
    if isinstance(p, JapaneseCivilParams):
        return JapaneseCivilEngine(p)
    if isinstance(p, LunisolarParams):
        if p.variant == "korean":
            return KoreanLunisolarEngine(p)
        return LunisolarEngine(p)
    raise TypeError(f"Unknown params type: {type(p)}")


def make_engine(spec: VariantSpec) -> BaseCalendarEngine:
    """The universal entry point."""
    return build_engine(spec.params)

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Any, Literal, Optional

Family = Literal[
    "gregorian", "julian", "historic", "coptic", "ethiopian", "persian", "hebrew",
    "indian", "thai", "minguo", "juche", "french", "hijri", "lunisolar", "era",
]

Unit = Literal["days", "weeks", "months", "years"]


class Leniency(Enum):
    """How strictly era/year combinations are checked at construction."""
    STRICT = "strict"
    SMART = "smart"
    LAX = "lax"

    def is_strict(self) -> bool:
        return self is Leniency.STRICT

    def is_lax(self) -> bool:
        return self is Leniency.LAX


@dataclass(frozen=True)
class EngineId:
    family: Family
    name: str
    version: str = "1"


@dataclass(frozen=True)
class CalendarDate:
    """
    Immutable calendar date of one variant.

    For lunisolar variants `year` is the year of the sexagenary cycle and `cycle` is set;
    `leap` marks an intercalary month. Era-based variants carry the era name in `era`.
    """
    variant: str
    year: int
    month: int
    day: int
    leap: bool = False
    era: Optional[str] = None
    cycle: Optional[int] = None

    def __str__(self) -> str:
        head = f"{self.era}-" if self.era else ""
        if self.cycle is not None:
            head += f"{self.cycle}/"
        leap = "*" if self.leap else ""
        return f"{head}{self.year:04d}-{self.month:02d}{leap}-{self.day:02d}[{self.variant}]"


@dataclass(frozen=True)
class VariantSpec:
    """Pure data payload naming a variant and the parameters of its engine."""
    id: EngineId
    params: Any
    meta: Optional[dict] = None

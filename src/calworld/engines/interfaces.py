"""
calworld.engines.interfaces
---------------------------
Capability protocols for pluggable engine parts.

Standard Reference Frame:
All day values are epoch days (days since 1972-01-01, proleptic Gregorian).
"""

from __future__ import annotations

from typing import Protocol, Sequence


class HijriMonthData(Protocol):
    """
    Tabulated month lengths of a Hijri variant.
    Years min_year..max_year are contiguous; 1 Muharram of min_year is first_epoch_day.
    """
    variant: str
    min_year: int
    max_year: int
    first_epoch_day: int

    def month_lengths(self, year: int) -> Sequence[int]:
        """Twelve lengths, each 29 or 30."""
        ...


class NewYearRule(Protocol):
    """Epoch day of the first day of a calendar year (Persian, French Republican)."""

    def __call__(self, year: int) -> int: ...

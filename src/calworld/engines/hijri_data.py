"""
calworld.engines.hijri_data
---------------------------
Umm al-Qura month lengths, taken from the tables published with `hijri-converter`.

The published table is authoritative: days where other providers disagree are not
reconciled here.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import lru_cache

from hijri_converter import Hijri

from ..core.time import epoch_day_from_date
from .hijri import TabulatedHijriData

logger = logging.getLogger(__name__)

UMALQURA_VARIANT = "islamic-umalqura"
UMALQURA_MIN_YEAR = 1343
UMALQURA_MAX_YEAR = 1500


@lru_cache(maxsize=1)
def umalqura_data() -> TabulatedHijriData:
    """Read the Umm al-Qura table once for the process lifetime."""
    lengths = {
        y: tuple(Hijri(y, m, 1).month_length() for m in range(1, 13))
        for y in range(UMALQURA_MIN_YEAR, UMALQURA_MAX_YEAR + 1)
    }
    first = epoch_day_from_date(Hijri(UMALQURA_MIN_YEAR, 1, 1).to_gregorian())
    logger.debug("loaded Umm al-Qura table AH %d..%d", UMALQURA_MIN_YEAR, UMALQURA_MAX_YEAR)
    return TabulatedHijriData(
        variant=UMALQURA_VARIANT,
        min_year=UMALQURA_MIN_YEAR,
        max_year=UMALQURA_MAX_YEAR,
        first_epoch_day=first,
        lengths=lengths,
    )


@dataclass(frozen=True)
class UmalquraParams:
    variant: str = UMALQURA_VARIANT

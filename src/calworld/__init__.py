"""calworld public API.

Keep this surface small: users should mostly interact with functions re-exported here.
"""

import logging

# Initialize registry on import
from . import api_init as _api_init  # noqa: F401

from .api import (
    convert,
    day_of_week,
    day_of_year,
    engine_info,
    from_epoch_day,
    from_gregorian,
    is_leap_year,
    is_valid,
    length_of_month,
    length_of_year,
    list_variants,
    make_date,
    maximum_epoch_day,
    minimum_epoch_day,
    minus,
    plus,
    register_variant,
    resolve_variant,
    to_epoch_day,
    to_gregorian,
    until,
)
from .core.errors import (
    CalworldError,
    EngineUnavailableError,
    InternalConsistencyError,
    InvalidDateError,
    RangeError,
    VariantConflictError,
    VariantNotFoundError,
)
from .core.types import CalendarDate, Leniency

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "CalendarDate",
    "Leniency",
    "convert",
    "day_of_week",
    "day_of_year",
    "engine_info",
    "from_epoch_day",
    "from_gregorian",
    "is_leap_year",
    "is_valid",
    "length_of_month",
    "length_of_year",
    "list_variants",
    "make_date",
    "maximum_epoch_day",
    "minimum_epoch_day",
    "minus",
    "plus",
    "register_variant",
    "resolve_variant",
    "to_epoch_day",
    "to_gregorian",
    "until",
    "CalworldError",
    "RangeError",
    "InvalidDateError",
    "VariantNotFoundError",
    "VariantConflictError",
    "InternalConsistencyError",
    "EngineUnavailableError",
]

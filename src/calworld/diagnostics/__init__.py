"""Diagnostics package.

- diagnostics: always available, light-weight checks (no ephemeris)
- diagnostics.ephem: optional (requires ephemeris extras)
"""

__all__ = ["new_years_table", "round_trip", "leap_months"]

class CalworldError(Exception):
    """Base error."""

class RangeError(CalworldError, ValueError):
    """Epoch day or calendar date outside the supported bounds of an engine."""

class InvalidDateError(CalworldError, ValueError):
    """Date fields that cannot be realized under the rules of a calendar."""

class VariantNotFoundError(CalworldError, KeyError):
    """Raised when an unregistered calendar variant is requested."""

class VariantConflictError(CalworldError, KeyError):
    """Raised when a variant name is registered twice without overwrite=True."""

class InternalConsistencyError(CalworldError, RuntimeError):
    """A search failed to converge or an engine invariant broke. Always a defect."""

class EngineUnavailableError(CalworldError):
    """Raised when an optional extra (ephemeris, plotting) is not available."""

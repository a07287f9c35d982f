from __future__ import annotations
import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Protocol, Union

from .errors import VariantConflictError, VariantNotFoundError
from .types import CalendarDate

logger = logging.getLogger(__name__)


class CalendarEngine(Protocol):
    """Conversion contract shared by every calendar engine."""
    variant: str

    def to_epoch_day(self, d: CalendarDate) -> int: ...
    def from_epoch_day(self, e: int) -> CalendarDate: ...
    def is_valid(self, d: CalendarDate) -> bool: ...
    def is_leap_year(self, year: int, era: Optional[str] = None) -> bool: ...
    def length_of_month(self, year: int, month: int, *, leap: bool = False, era: Optional[str] = None) -> int: ...
    def length_of_year(self, year: int, era: Optional[str] = None) -> int: ...
    def minimum_epoch_day(self) -> int: ...
    def maximum_epoch_day(self) -> int: ...
    def info(self) -> Dict[str, Any]: ...


EngineFactory = Callable[[], CalendarEngine]
# Hook for names that are not registered but can be derived from a registered one
Resolver = Callable[["VariantRegistry", str], Optional[CalendarEngine]]


@dataclass
class VariantRegistry:
    """
    Name -> engine map. Entries are either live engines or zero-argument factories,
    built lazily on first lookup and then kept for the process lifetime.
    """
    _entries: Dict[str, Union[CalendarEngine, EngineFactory]]
    _resolvers: List[Resolver] = field(default_factory=list)
    _lock: threading.RLock = field(default_factory=threading.RLock, repr=False)

    def get(self, name: str) -> CalendarEngine:
        entry = self._entries.get(name)
        if entry is None:
            eng = self._derive(name)
            if eng is None:
                raise VariantNotFoundError(f"Unknown variant '{name}'. Available: {self.list()}")
            return eng
        if _is_engine(entry):
            return entry  # type: ignore[return-value]
        with self._lock:
            entry = self._entries[name]
            if not _is_engine(entry):
                logger.debug("building engine for variant %s", name)
                entry = entry()  # type: ignore[operator]
                self._entries[name] = entry
        return entry  # type: ignore[return-value]

    def _derive(self, name: str) -> Optional[CalendarEngine]:
        for resolver in self._resolvers:
            eng = resolver(self, name)
            if eng is not None:
                with self._lock:
                    # first writer wins; a racing duplicate is equivalent
                    self._entries.setdefault(name, eng)
                    return self._entries[name]  # type: ignore[return-value]
        return None

    def list(self) -> List[str]:
        return sorted(self._entries.keys())

    def __contains__(self, name: str) -> bool:
        return name in self._entries

    def register(self, name: str, engine: Union[CalendarEngine, EngineFactory], *, overwrite: bool = False) -> None:
        if not (_is_engine(engine) or callable(engine)):
            raise TypeError(f"Variant '{name}' needs an engine or a zero-argument factory, got {type(engine).__name__}")
        with self._lock:
            if (not overwrite) and (name in self._entries):
                raise VariantConflictError(f"Variant '{name}' already exists. Use overwrite=True to replace.")
            self._entries[name] = engine
        logger.debug("registered variant %s", name)

    def add_resolver(self, resolver: Resolver) -> None:
        self._resolvers.append(resolver)


def _is_engine(entry: Any) -> bool:
    # an engine class is a factory, not an engine
    if isinstance(entry, type):
        return False
    return hasattr(entry, "to_epoch_day") and hasattr(entry, "from_epoch_day")

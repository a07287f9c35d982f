from __future__ import annotations
from calworld.core.engine import VariantRegistry
from calworld.engines.factory import make_engine
from calworld.engines.hijri import resolve_adjusted
from calworld.engines.specs import ALL_SPECS


def _factory(spec):
    return lambda: make_engine(spec)


def build_registry() -> VariantRegistry:
    # engines are built on first lookup; the lunisolar ones do astronomy at construction
    engines = {name: _factory(spec) for name, spec in ALL_SPECS.items()}
    reg = VariantRegistry(engines)
    reg.add_resolver(resolve_adjusted)
    return reg

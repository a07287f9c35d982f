from __future__ import annotations

"""
calworld.reference.deltat

ΔT (= TT − UT) in seconds.

Calendar engines use the Espenak–Meeus (NASA, 2006) piecewise polynomials only, so that
every conversion is reproducible across machines. An optional IERS-style monthly table
can be supplied for diagnostics:

  1) CALWORLD_DELTAT_TABLE environment variable (path to CSV)
  2) user cache ($XDG_CACHE_HOME/calworld/deltat_monthly.csv or ~/.cache/calworld/...)

Expected CSV columns: decimal_year, delta_t_seconds.
"""

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Iterable, Optional, Tuple
import csv
import logging
import os

logger = logging.getLogger(__name__)

TABLE_ENV = "CALWORLD_DELTAT_TABLE"
TABLE_FILENAME = "deltat_monthly.csv"


# ---------------------------------------------------------------------------
# Table model
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class DeltaTTable:
    """Piecewise-linear ΔT over a decimal-year coordinate."""
    x: Tuple[float, ...]
    y: Tuple[float, ...]

    def __len__(self) -> int:
        return len(self.x)

    @property
    def range(self) -> Tuple[float, float]:
        return (self.x[0], self.x[-1])

    def eval(self, xq: float) -> float:
        if not (self.x[0] <= xq <= self.x[-1]):
            raise ValueError(f"x out of range [{self.x[0]}, {self.x[-1]}]: {xq}")
        lo, hi = 0, len(self.x) - 1
        while hi - lo > 1:
            mid = (lo + hi) // 2
            if self.x[mid] <= xq:
                lo = mid
            else:
                hi = mid
        x0, x1 = self.x[lo], self.x[hi]
        if x1 == x0:
            return self.y[lo]
        t = (xq - x0) / (x1 - x0)
        return self.y[lo] + t * (self.y[hi] - self.y[lo])


def table_from_rows(rows: Iterable[dict]) -> DeltaTTable:
    xs: list[float] = []
    ys: list[float] = []
    for r in rows:
        xs.append(float(r["decimal_year"]))
        ys.append(float(r["delta_t_seconds"]))
    if len(xs) < 2:
        raise ValueError("ΔT table needs at least two rows")
    for i in range(1, len(xs)):
        if not (xs[i] > xs[i - 1]):
            raise ValueError("ΔT table x is not strictly increasing")
    return DeltaTTable(tuple(xs), tuple(ys))


def _read_table(path: Path) -> Optional[DeltaTTable]:
    try:
        with path.open("r", encoding="utf-8", newline="") as f:
            return table_from_rows(csv.DictReader(f))
    except (OSError, KeyError, ValueError) as exc:
        logger.warning("ignoring unreadable ΔT table %s: %s", path, exc)
        return None


def cache_dir() -> Path:
    xdg = os.environ.get("XDG_CACHE_HOME", "").strip()
    return (Path(xdg).expanduser() / "calworld") if xdg else (Path.home() / ".cache" / "calworld")


@lru_cache(maxsize=1)
def load_monthly_table() -> Optional[DeltaTTable]:
    """Locate the optional ΔT table. Returns None when no readable table exists."""
    p = os.environ.get(TABLE_ENV, "").strip()
    if p:
        path = Path(p).expanduser()
        if path.is_file():
            tbl = _read_table(path)
            if tbl is not None:
                logger.debug("ΔT table from %s=%s", TABLE_ENV, path)
                return tbl
        else:
            logger.warning("%s points to a missing file: %s", TABLE_ENV, path)

    cache_path = cache_dir() / TABLE_FILENAME
    if cache_path.is_file():
        tbl = _read_table(cache_path)
        if tbl is not None:
            logger.debug("ΔT table from user cache %s", cache_path)
            return tbl

    logger.debug("no ΔT table found; polynomial model only")
    return None


# ---------------------------------------------------------------------------
# Espenak–Meeus (NASA) piecewise polynomial
# ---------------------------------------------------------------------------

def _poly(u: float, coeffs: Tuple[float, ...]) -> float:
    acc = 0.0
    for c in reversed(coeffs):
        acc = acc * u + c
    return acc


def _parabola(y: float) -> float:
    u = (y - 1820.0) / 100.0
    return -20.0 + 32.0 * u * u


def delta_t_em2006(y: float) -> float:
    """
    Espenak–Meeus piecewise polynomial ΔT(y) in seconds, y a decimal year.
    Valid roughly −1999..+3000; the long-term parabola is used beyond.
    """
    if y < -500.0:
        return _parabola(y)
    if y < 500.0:
        return _poly(y / 100.0, (
            10583.6, -1014.41, 33.78311, -5.952053, -0.1798452, 0.022174192, 0.0090316521,
        ))
    if y < 1600.0:
        return _poly((y - 1000.0) / 100.0, (
            1574.2, -556.01, 71.23472, 0.319781, -0.8503463, -0.005050998, 0.0083572073,
        ))
    if y < 1700.0:
        return _poly(y - 1600.0, (120.0, -0.9808, -0.01532, 1.0 / 7129.0))
    if y < 1800.0:
        return _poly(y - 1700.0, (8.83, 0.1603, -0.0059285, 0.00013336, -1.0 / 1174000.0))
    if y < 1860.0:
        return _poly(y - 1800.0, (
            13.72, -0.332447, 0.0068612, 0.0041116, -0.00037436,
            0.0000121272, -0.0000001699, 0.000000000875,
        ))
    if y < 1900.0:
        return _poly(y - 1860.0, (7.62, 0.5737, -0.251754, 0.01680668, -0.0004473624, 1.0 / 233174.0))
    if y < 1920.0:
        return _poly(y - 1900.0, (-2.79, 1.494119, -0.0598939, 0.0061966, -0.000197))
    if y < 1941.0:
        return _poly(y - 1920.0, (21.20, 0.84493, -0.076100, 0.0020936))
    if y < 1961.0:
        return _poly(y - 1950.0, (29.07, 0.407, -1.0 / 233.0, 1.0 / 2547.0))
    if y < 1986.0:
        return _poly(y - 1975.0, (45.45, 1.067, -1.0 / 260.0, -1.0 / 718.0))
    if y < 2005.0:
        return _poly(y - 2000.0, (63.86, 0.3345, -0.060374, 0.0017275, 0.000651814, 0.00002373599))
    if y < 2050.0:
        return _poly(y - 2000.0, (62.92, 0.32217, 0.005589))
    if y < 2150.0:
        return _parabola(y) - 0.5628 * (2150.0 - y)
    return _parabola(y)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def delta_t_seconds(y: float, *, method: str = "em2006") -> float:
    """
    ΔT(y) in seconds.

    method:
      - "em2006": polynomial only (what the calendar engines use).
      - "best": the optional table inside its range, polynomial elsewhere.
      - "table": require the table and require y inside its range.
    """
    method = method.lower().strip()
    if method not in {"best", "table", "em2006"}:
        raise ValueError("method must be one of: best, table, em2006")
    if method == "em2006":
        return delta_t_em2006(y)

    tbl = load_monthly_table()
    if tbl is None:
        if method == "table":
            raise RuntimeError(f"No ΔT table available. Set {TABLE_ENV} to a CSV file.")
        return delta_t_em2006(y)

    a, b = tbl.range
    if a <= y <= b:
        return tbl.eval(y)
    if method == "table":
        raise ValueError(f"y={y} out of ΔT table range [{a},{b}]")
    return delta_t_em2006(y)

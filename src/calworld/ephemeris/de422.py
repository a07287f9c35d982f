#ephemeris/de422.py
from __future__ import annotations

import math
from dataclasses import dataclass

from . import require_ephemeris
from ..reference import astro_args as aa


# --------------------------
# small numeric helpers
# --------------------------

EPS_J2000_DEG = 23.439291111

# the package's own range, JD(TT)
DE422_MIN_JD = 625648.5
DE422_MAX_JD = 2816816.5

# constant of aberration for the Sun (arcsec at 1 AU)
ABERRATION_ARCSEC = 20.4898


def _rot_x_minus_eps(v):
    eps = math.radians(EPS_J2000_DEG)
    x, y, z = float(v[0]), float(v[1]), float(v[2])
    y2 = math.cos(eps) * y + math.sin(eps) * z
    z2 = -math.sin(eps) * y + math.cos(eps) * z
    return (x, y2, z2)


def _lon_ecl_deg(v_eq) -> float:
    x, y, z = _rot_x_minus_eps(v_eq)
    return math.degrees(math.atan2(y, x)) % 360.0


def precession_in_longitude_deg(jd_tt: float) -> float:
    """General precession in longitude from J2000.0 (Meeus 21.x, low order)."""
    T = aa.T_centuries(jd_tt)
    return (5029.0966 * T + 1.11113 * T * T) / 3600.0


def _get_emrat(de422_mod) -> float:
    # de422 exposes its header constants on some releases
    constants = getattr(de422_mod, "constants", None) or {}
    for k in ("EMRAT", "emrat"):
        if k in constants:
            return float(constants[k])
    return 81.30056907419062


@dataclass
class DE422Ephemeris:
    """
    Geocentric Sun and Moon from JPL DE422.

    Requires optional deps:
      pip install "calworld[ephemeris]"
    """
    eph: object
    emrat: float

    @classmethod
    def load(cls) -> "DE422Ephemeris":
        require_ephemeris()
        import de422  # type: ignore
        from jplephem import Ephemeris  # type: ignore

        return cls(eph=Ephemeris(de422), emrat=_get_emrat(de422))

    def _vectors(self, jd_tt: float):
        if not (DE422_MIN_JD < jd_tt < DE422_MAX_JD):
            raise ValueError(f"JD(TT) {jd_tt} outside DE422 [{DE422_MIN_JD}, {DE422_MAX_JD}]")
        r_emb = self.eph.compute("earthmoon", jd_tt)[:3]
        r_em = self.eph.compute("moon", jd_tt)[:3]      # geocentric moon
        r_sun = self.eph.compute("sun", jd_tt)[:3]      # barycentric sun
        # r_earth = r_emb - r_em/(EMRAT+1)
        r_earth = r_emb - r_em / (self.emrat + 1.0)
        return r_sun - r_earth, r_em

    def sun_longitude_j2000_deg(self, jd_tt: float) -> float:
        r_es, _ = self._vectors(jd_tt)
        return _lon_ecl_deg(r_es)

    def sun_longitude_of_date_deg(self, jd_tt: float) -> float:
        """
        Geometric longitude moved to the equinox of date, with annual aberration.
        Nutation is not applied.
        """
        lon = self.sun_longitude_j2000_deg(jd_tt) + precession_in_longitude_deg(jd_tt)
        return aa.wrap_deg(lon - ABERRATION_ARCSEC / 3600.0)

    def elong_deg(self, jd_tt: float) -> float:
        """Elongation lambda_moon - lambda_sun in degrees at TT Julian day jd_tt."""
        r_es, r_em = self._vectors(jd_tt)
        return (_lon_ecl_deg(r_em) - _lon_ecl_deg(r_es)) % 360.0


# --------------------------
# root finding for elongation targets
# --------------------------

def solve_target_near(el: DE422Ephemeris, t_guess: float, target_deg: float, halfwidth_days: float = 3.0) -> float:
    """
    Solve elong(t)=target (deg) near t_guess, in TT JD, with Newton+bracket.
    """
    def f(t: float) -> float:
        return aa.wrap180(el.elong_deg(t) - target_deg)

    # Newton
    t = t_guess
    for _ in range(10):
        y = f(t)
        if abs(y) < 1e-8:
            return t
        h = 1e-3
        dy = aa.wrap180(el.elong_deg(t + h) - el.elong_deg(t - h)) / (2 * h)
        if not math.isfinite(dy) or abs(dy) < 1e-6:
            break
        t -= y / dy

    # bracket+bisect
    w = halfwidth_days
    a, b = t_guess - w, t_guess + w
    fa, fb = f(a), f(b)
    while fa * fb > 0 and w < 40.0:
        w *= 1.6
        a, b = t_guess - w, t_guess + w
        fa, fb = f(a), f(b)
    if fa * fb > 0:
        return t

    for _ in range(140):
        m = 0.5 * (a + b)
        fm = f(m)
        if fa * fm <= 0:
            b, fb = m, fm
        else:
            a, fa = m, fm
        if (b - a) < 1e-10:
            break
    return 0.5 * (a + b)


def new_moon_near(el: DE422Ephemeris, jd_tt: float) -> float:
    """DE422 new moon (JD TT) closest to an estimate good to a few hours."""
    return solve_target_near(el, jd_tt, 0.0, halfwidth_days=1.0)

#!/usr/bin/env python3
from __future__ import annotations

import argparse
from typing import List, Optional

from calworld.ephemeris.de422 import DE422_MAX_JD, DE422_MIN_JD, DE422Ephemeris, new_moon_near
from calworld.reference import astro_args as aa
from calworld.reference import lunar, solar


def _need_numpy():
    try:
        import numpy as np
        return np
    except ImportError as e:
        raise RuntimeError('Need numpy. Install: pip install "calworld[diagnostics]"') from e


def _need_matplotlib():
    try:
        import matplotlib.pyplot as plt
        return plt
    except ImportError as e:
        raise RuntimeError('Need matplotlib. Install: pip install "calworld[diagnostics]"') from e


def main(argv: Optional[List[str]] = None) -> int:
    p = argparse.ArgumentParser(description="Validate the solar longitude series and Meeus new moons against DE422.")
    p.add_argument("--year-start", type=int, default=1600)
    p.add_argument("--year-end", type=int, default=2400)
    p.add_argument("--step-days", type=int, default=50)
    p.add_argument("--out-png", default="reference_validation.png")
    args = p.parse_args(argv)

    np = _need_numpy()
    plt = _need_matplotlib()

    print("Loading DE422 Ephemeris...")
    eph = DE422Ephemeris.load()

    jd_start = aa.J2000_TT + (args.year_start - 2000) * 365.25
    jd_end = aa.J2000_TT + (args.year_end - 2000) * 365.25

    # Strictly clip to ephemeris bounds
    jd_start = max(jd_start, DE422_MIN_JD + 40.0)
    jd_end = min(jd_end, DE422_MAX_JD - 40.0)
    if jd_start > jd_end:
        raise ValueError(f"Requested range is outside valid ephemeris range [{DE422_MIN_JD}, {DE422_MAX_JD}]")

    jds = np.arange(jd_start, jd_end, args.step_days)
    years = 2000 + (jds - aa.J2000_TT) / 365.25
    print(f"Validating {len(jds)} solar points from {years[0]:.0f} to {years[-1]:.0f}...")

    # residuals include nutation in longitude (about 17 arcsec amplitude)
    err_solar = [
        aa.wrap180(solar.apparent_solar_longitude(jd) - eph.sun_longitude_of_date_deg(jd)) * 3600.0
        for jd in jds
    ]

    n0 = int(round((jd_start - lunar.LUNATION_ZERO_JD_UT) / lunar.MEAN_SYNODIC_MONTH)) + 1
    n1 = int(round((jd_end - lunar.LUNATION_ZERO_JD_UT) / lunar.MEAN_SYNODIC_MONTH)) - 1
    lun_years, err_new_moon = [], []
    for n in range(n0, n1 + 1, max(1, args.step_days // 30)):
        jde = lunar.new_moon_jde(n)
        lun_years.append(2000 + (jde - aa.J2000_TT) / 365.25)
        err_new_moon.append((jde - new_moon_near(eph, jde)) * 1440.0)
    print(f"Validated {len(err_new_moon)} new moons.")

    err_solar = np.array(err_solar)
    err_new_moon = np.array(err_new_moon)
    print(f"  solar longitude: max |err| = {np.abs(err_solar).max():.2f} arcsec, rms = {np.sqrt((err_solar ** 2).mean()):.2f}")
    print(f"  new moon:        max |err| = {np.abs(err_new_moon).max():.3f} min, rms = {np.sqrt((err_new_moon ** 2).mean()):.3f}")

    fig, axs = plt.subplots(2, 1, figsize=(12, 7), sharex=True)

    axs[0].scatter(years, err_solar, s=1, alpha=0.5, color="orange")
    axs[0].set_title("Apparent Solar Longitude Error (series - DE422, nutation not removed)")
    axs[0].set_ylabel("Error (arcsec)")
    axs[0].grid(True, alpha=0.3)

    axs[1].scatter(lun_years, err_new_moon, s=2, alpha=0.6, color="blue")
    axs[1].set_title("New Moon Instant Error (Meeus - DE422)")
    axs[1].set_ylabel("Error (minutes)")
    axs[1].set_xlabel("Year")
    axs[1].grid(True, alpha=0.3)

    plt.suptitle(f"Reference Model Validation against DE422 ({years[0]:.0f} to {years[-1]:.0f})", fontsize=14)
    plt.tight_layout()
    plt.savefig(args.out_png, dpi=200)
    print(f"Validation complete. Plot saved to {args.out_png}")

    return 0


if __name__ == "__main__":
    raise SystemExit(main())

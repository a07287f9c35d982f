from __future__ import annotations

import argparse
import importlib
import inspect
import logging
import re
import sys
from typing import List, Optional

_FIELDS_RE = re.compile(r"^(-?\d+)-(\d{1,2})(\*?)-(\d{1,2})$")


def _parse_fields(s: str):
    """'Y-M-D', with '*' after the month marking a leap month: '2023-02*-15'."""
    m = _FIELDS_RE.match(s)
    if not m:
        raise SystemExit(f"bad date fields {s!r}, expected Y-M-D (leap month as Y-M*-D)")
    return int(m.group(1)), int(m.group(2)), bool(m.group(3)), int(m.group(4))


def _run_module_main(modpath: str, argv: List[str]) -> int:
    """
    Import module and run its main().

    Supports:
      - main(argv: list[str] | None = None) -> int|None
      - main() -> int|None
    """
    mod = importlib.import_module(modpath)
    if not hasattr(mod, "main"):
        raise SystemExit(f"Module {modpath} has no main()")
    fn = getattr(mod, "main")

    sig = inspect.signature(fn)
    if len(sig.parameters) == 0:
        rv = fn()
    else:
        rv = fn(argv)
    return int(rv or 0)


def _configure_logging(verbosity: int) -> None:
    if verbosity <= 0:
        return
    level = logging.DEBUG if verbosity > 1 else logging.INFO
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def cmd_convert(argv: List[str]) -> int:
    import calworld

    p = argparse.ArgumentParser(prog="calworld convert", description="Convert a date between calendar variants")
    p.add_argument("variant", help="source variant, e.g. gregorian, chinese, islamic-umalqura:-1")
    p.add_argument("date", help="Y-M-D (leap month as Y-M*-D)")
    p.add_argument("--to", dest="target", action="append", default=[], help="target variant (repeatable)")
    p.add_argument("--era", default=None)
    p.add_argument("--cycle", type=int, default=None, help="sexagenary cycle (lunisolar variants)")
    p.add_argument("--leniency", choices=[x.value for x in calworld.Leniency], default="smart")
    args = p.parse_args(argv)

    y, m, leap, d = _parse_fields(args.date)
    src = calworld.make_date(
        args.variant, y, m, d, leap=leap, era=args.era, cycle=args.cycle,
        leniency=calworld.Leniency(args.leniency),
    )
    e = calworld.to_epoch_day(src)
    print(f"{src}  epoch_day={e}  iso_weekday={calworld.day_of_week(src)}")
    for target in args.target or ["gregorian"]:
        print(f"  -> {calworld.convert(src, target)}")
    return 0


def cmd_info(argv: List[str]) -> int:
    import calworld

    p = argparse.ArgumentParser(prog="calworld info", description="Engine bounds and year data")
    p.add_argument("variant")
    p.add_argument("--year", type=int, default=None, help="also print leap/length data for this year")
    p.add_argument("--era", default=None)
    p.add_argument("--cycle", type=int, default=None)
    args = p.parse_args(argv)

    for k, v in calworld.engine_info(args.variant).items():
        print(f"{k:>16}: {v}")
    if args.year is not None:
        kw = {"era": args.era, "cycle": args.cycle}
        eng = calworld.resolve_variant(args.variant)
        print()
        print(f"year {args.year}: leap={calworld.is_leap_year(args.variant, args.year, **kw)} "
              f"length={calworld.length_of_year(args.variant, args.year, **kw)}")
        month_kw = {"cycle": args.cycle} if args.cycle is not None else {}
        for month, leap in eng.months(args.year, args.era, **month_kw):
            n = calworld.length_of_month(args.variant, args.year, month, leap=leap, **kw)
            print(f"  month {month:>2}{'*' if leap else ' '} {n:>3} days")
    return 0


def cmd_list(argv: List[str]) -> int:
    import calworld

    p = argparse.ArgumentParser(prog="calworld list", description="Registered variants")
    p.parse_args(argv)
    for name in calworld.list_variants():
        print(name)
    return 0


def _jd_ut_arg(p: argparse.ArgumentParser) -> None:
    g = p.add_mutually_exclusive_group()
    g.add_argument("--jd-ut", type=float, default=None, help="Julian Date (UT)")
    g.add_argument("--date", default=None, help="YYYY-MM-DD, 00:00 UT")


def _resolve_jd_ut(args) -> float:
    from calworld.core.time import EPOCH_JD, gregorian_to_epoch_day

    if args.date is not None:
        y, m, _, d = _parse_fields(args.date)
        return EPOCH_JD + gregorian_to_epoch_day(y, m, d)
    if args.jd_ut is not None:
        return args.jd_ut
    return 2451545.0


def cmd_solar(argv: List[str]) -> int:
    from calworld.reference import solar
    from calworld.reference import time_scales as ts

    p = argparse.ArgumentParser(prog="calworld solar", description="Apparent solar longitude and solar terms.")
    _jd_ut_arg(p)
    args = p.parse_args(argv)

    jd_ut = _resolve_jd_ut(args)
    jd_tt = ts.jd_ut_to_jd_tt(jd_ut)
    idx, nxt_tt = solar.next_solar_term(jd_tt)

    print("Time Input:")
    print(f"  JD_UT = {jd_ut:.6f}")
    print(f"  JD_TT = {jd_tt:.6f}")
    print()
    print(f"  Apparent longitude     = {solar.apparent_solar_longitude(jd_tt):.6f} deg")
    print(f"  Major solar term       = {solar.major_solar_term(jd_tt)}")
    print(f"  Solar term (1..24)     = {solar.solar_term_index(jd_tt)}")
    print(f"  Equation of time       = {solar.equation_of_time_seconds(jd_tt) / 60.0:.4f} min")
    print(f"  Next term {idx:>2} at JD_UT = {ts.jd_tt_to_jd_ut(nxt_tt):.6f}")
    return 0


def cmd_lunar(argv: List[str]) -> int:
    from calworld.reference import lunar

    p = argparse.ArgumentParser(prog="calworld lunar", description="New moons around an instant.")
    _jd_ut_arg(p)
    args = p.parse_args(argv)

    jd_ut = _resolve_jd_ut(args)
    print("Time Input:")
    print(f"  JD_UT = {jd_ut:.6f}")
    print()
    print(f"  Previous new moon (JD_UT) = {lunar.new_moon_before(jd_ut):.6f}")
    print(f"  Next new moon     (JD_UT) = {lunar.new_moon_at_or_after(jd_ut):.6f}")
    print(f"  Lunation fraction         = {lunar.lunar_phase_fraction(jd_ut):.6f}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    if argv is None:
        argv = sys.argv[1:]

    p = argparse.ArgumentParser(prog="calworld", description="Calendar conversion toolkit CLI.")
    p.add_argument("-v", "--verbose", action="count", default=0, help="-v for INFO, -vv for DEBUG logging")
    sub = p.add_subparsers(dest="cmd", required=True)

    sub.add_parser("convert", help="Convert a date between variants")
    sub.add_parser("info", help="Engine bounds and year data")
    sub.add_parser("list", help="List registered variants")
    sub.add_parser("new-years", help="Print lunisolar New Year table (diagnostics)")

    p_diag = sub.add_parser("diag", help="Diagnostics tools (no ephemeris required)")
    p_diag.add_argument("tool", choices=["round-trip", "leap-months"], help="Which diagnostic to run")

    p_ephem = sub.add_parser("ephem", help="Ephemeris-based diagnostics")
    p_ephem.add_argument("tool", choices=["validate-ref"], help="Which ephemeris diagnostic to run")

    sub.add_parser("solar", help="Apparent solar longitude and solar terms.")
    sub.add_parser("lunar", help="New moons around an instant.")

    args, rest = p.parse_known_args(argv)
    _configure_logging(args.verbose)

    if args.cmd == "convert":
        return cmd_convert(rest)

    if args.cmd == "info":
        return cmd_info(rest)

    if args.cmd == "list":
        return cmd_list(rest)

    if args.cmd == "new-years":
        return _run_module_main("calworld.diagnostics.new_years_table", rest)

    if args.cmd == "diag":
        tool_map = {
            "round-trip": "calworld.diagnostics.round_trip",
            "leap-months": "calworld.diagnostics.leap_months",
        }
        return _run_module_main(tool_map[args.tool], rest)

    if args.cmd == "ephem":
        tool_map = {
            "validate-ref": "calworld.diagnostics.ephem.validate_reference",
        }
        return _run_module_main(tool_map[args.tool], rest)

    if args.cmd == "solar":
        return cmd_solar(rest)

    if args.cmd == "lunar":
        return cmd_lunar(rest)

    raise RuntimeError("unreachable")


if __name__ == "__main__":
    raise SystemExit(main())

from __future__ import annotations

import argparse
from datetime import date
from typing import List, Optional, Tuple

import calworld
from calworld.engines.lunisolar import RELATED_YEAR_OFFSET


DEFAULT_VARIANTS: List[Tuple[str, str]] = [
    ("Chinese", "chinese"),
    ("Korean", "korean"),
    ("Vietnamese", "vietnamese"),
    ("Japanese", "japanese-lunisolar"),
]


def mmdd(d: date) -> str:
    return f"{d.month:02d}-{d.day:02d}"


def parse_variants(arg: str) -> List[Tuple[str, str]]:
    """
    Parse variants list from CLI.
    Example:
      --variants "CN=chinese,VN=vietnamese"
    If you pass just variants, names will be capitalized variants:
      --variants "chinese,korean"
    """
    items = [x.strip() for x in arg.split(",") if x.strip()]
    out: List[Tuple[str, str]] = []
    for it in items:
        if "=" in it:
            name, var = it.split("=", 1)
            out.append((name.strip(), var.strip()))
        else:
            out.append((it.capitalize(), it))
    return out


def new_year_day(variant: str, year: int) -> date:
    """Gregorian date of month 1, day 1 of the lunisolar year related to `year`."""
    eng = calworld.resolve_variant(variant)
    return calworld.to_gregorian(eng.first_day_of_year(year))


def main(argv: Optional[List[str]] = None) -> int:
    p = argparse.ArgumentParser(
        description="Print lunisolar New Year date table for multiple variants."
    )
    p.add_argument("--from-year", type=int, default=2000)
    p.add_argument("--to-year", type=int, default=2030)
    p.add_argument(
        "--variants",
        type=str,
        default="",
        help='Comma list like "CN=chinese,VN=vietnamese" (default: the four East Asian variants).',
    )
    p.add_argument(
        "--dates",
        choices=("mmdd", "iso"),
        default="mmdd",
        help="Display format in table columns (default: mmdd).",
    )
    args = p.parse_args(argv)

    variants = parse_variants(args.variants) if args.variants else DEFAULT_VARIANTS

    def fmt(d: date) -> str:
        return mmdd(d) if args.dates == "mmdd" else d.isoformat()

    Y0, Y1 = args.from_year, args.to_year
    if Y1 < Y0:
        raise SystemExit("--to-year must be >= --from-year")

    # table header
    headers = ["Year", "Cycle/Y"] + [name for name, _ in variants]
    colw = [5, 7] + [max(6, len(h)) for h in headers[2:]]
    line = "  ".join(h.ljust(w) for h, w in zip(headers, colw))
    print(line)
    print("-" * len(line))

    split: List[Tuple[int, List[date]]] = []

    for Y in range(Y0, Y1 + 1):
        ly = Y + RELATED_YEAR_OFFSET
        cy = f"{(ly - 1) // 60 + 1}/{ly % 60 or 60}"
        row = [str(Y).ljust(colw[0]), cy.ljust(colw[1])]
        days = []
        for (_, var), w in zip(variants, colw[2:]):
            d = new_year_day(var, Y)
            days.append(d)
            row.append(fmt(d).ljust(w))
        if len(set(days)) > 1:
            split.append((Y, days))
        print("  ".join(row))

    print("\nYears where the variants disagree:")
    if not split:
        print("(none)")
        return 0
    for Y, days in split:
        print(f"{Y}  " + "  ".join(f"{name}={d.isoformat()}" for (name, _), d in zip(variants, days)))

    return 0


if __name__ == "__main__":
    raise SystemExit(main())

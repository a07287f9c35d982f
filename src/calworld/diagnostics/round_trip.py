from __future__ import annotations

import argparse
import random
from typing import List, Optional

import calworld


def parse_variants(s: str) -> List[str]:
    # "chinese,hebrew" -> ["chinese", "hebrew"]
    return [x.strip() for x in s.split(",") if x.strip()]


def roundtrip_test(variant: str, N: int, seed: int, *, max_failures: int) -> int:
    """
    epoch day -> date -> epoch day over N random days of the variant's range,
    plus the two range ends.
    """
    random.seed(seed)
    lo, hi = calworld.minimum_epoch_day(variant), calworld.maximum_epoch_day(variant)
    failures = 0

    for e0 in [lo, hi] + [random.randint(lo, hi) for _ in range(N)]:
        d = calworld.from_epoch_day(variant, e0)
        back = calworld.to_epoch_day(d)
        if back != e0:
            failures += 1
            print("\nFAIL")
            print("variant:", variant)
            print("epoch_day:", e0)
            print("date:", d)
            print("back:", back)
            if failures >= max_failures:
                return failures

    return failures


def main(argv: Optional[List[str]] = None) -> int:
    p = argparse.ArgumentParser(description="Random round-trip tests: epoch day -> calendar date -> epoch day.")
    p.add_argument("--variants", type=str, default="", help="Comma-separated variant list (default: all registered).")
    p.add_argument("--N", type=int, default=2000, help="Trials per variant.")
    p.add_argument("--seed", type=int, default=123, help="RNG seed.")
    p.add_argument("--max-failures", type=int, default=5, help="Stop after this many failures per variant.")
    args = p.parse_args(argv)

    variants = parse_variants(args.variants) if args.variants else calworld.list_variants()

    total = 0
    for v in variants:
        f = roundtrip_test(v, args.N, args.seed, max_failures=args.max_failures)
        total += f
        print(f"{v:>24}: {'OK' if f == 0 else f'{f} failure(s)'}")

    return 1 if total else 0


if __name__ == "__main__":
    raise SystemExit(main())

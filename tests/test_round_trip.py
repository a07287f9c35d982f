# tests/test_round_trip.py

import random

import pytest

import calworld
from calworld.core.time import gregorian_to_epoch_day
from calworld.diagnostics import new_years_table, round_trip

LUNISOLAR = {"chinese", "korean", "vietnamese", "japanese-lunisolar"}

SOLAR = [
    "gregorian", "julian", "historic-rome", "historic-britain", "historic-russia", "historic-sweden",
    "coptic", "ethiopian", "persian", "persian-khayyam", "persian-birashk", "persian-astronomical",
    "hebrew", "indian", "thai", "minguo", "juche", "french-republican", "french-republican-romme",
    "japanese",
]

HIJRI = [
    "islamic-eastc", "islamic-easta", "islamic-civil", "islamic-tbla", "islamic-fatimidc",
    "islamic-fatimida", "islamic-habashalhasibc", "islamic-habashalhasiba", "islamic-umalqura",
    "islamic-umalqura:+1", "islamic-civil:-2",
]

WINDOW = (gregorian_to_epoch_day(1900, 1, 1), gregorian_to_epoch_day(2100, 12, 31))


def _window(variant):
    lo = max(WINDOW[0], calworld.minimum_epoch_day(variant))
    hi = min(WINDOW[1], calworld.maximum_epoch_day(variant))
    return lo, hi


@pytest.mark.parametrize("variant", SOLAR + HIJRI + sorted(LUNISOLAR))
def test_random_round_trip(variant):
    rng = random.Random(2024)
    lo, hi = _window(variant)
    n = 150 if variant in LUNISOLAR else 500
    for e in [lo, hi] + [rng.randint(lo, hi) for _ in range(n)]:
        d = calworld.from_epoch_day(variant, e)
        assert d.variant == variant
        assert calworld.is_valid(d)
        assert calworld.to_epoch_day(d) == e, (variant, e, str(d))

@pytest.mark.parametrize("variant", ["hebrew", "chinese", "historic-britain", "islamic-umalqura", "persian-astronomical"])
def test_consecutive_days(variant):
    # a year and a bit of consecutive days; each step is one day or the first day of the next month
    rng = random.Random(7)
    lo, hi = _window(variant)
    start = rng.randint(lo, hi - 400)
    prev = calworld.from_epoch_day(variant, start)
    for e in range(start + 1, start + 400):
        d = calworld.from_epoch_day(variant, e)
        assert calworld.plus(prev, 1) == d
        if (d.year, d.month, d.leap) == (prev.year, prev.month, prev.leap):
            assert d.day == prev.day + 1
        else:
            assert d.day == 1 or variant.startswith("historic")
        prev = d

def test_both_range_ends():
    for v in SOLAR + HIJRI + sorted(LUNISOLAR):
        lo, hi = calworld.minimum_epoch_day(v), calworld.maximum_epoch_day(v)
        for e in (lo, lo + 1, hi - 1, hi):
            d = calworld.from_epoch_day(v, e)
            assert calworld.to_epoch_day(d) == e, (v, e, str(d))
        with pytest.raises(calworld.RangeError):
            calworld.from_epoch_day(v, lo - 1)
        with pytest.raises(calworld.RangeError):
            calworld.from_epoch_day(v, hi + 1)

def test_lunisolar_range_ends():
    assert calworld.from_epoch_day("chinese", calworld.minimum_epoch_day("chinese")) == \
        calworld.CalendarDate("chinese", 22, 1, 1, cycle=72)
    assert calworld.from_epoch_day("chinese", calworld.maximum_epoch_day("chinese")) == \
        calworld.CalendarDate("chinese", 56, 12, 30, cycle=94)
    assert calworld.from_epoch_day("vietnamese", calworld.maximum_epoch_day("vietnamese")) == \
        calworld.CalendarDate("vietnamese", 57, 1, 1, cycle=94)


# ------------------------------------------------------------
# Diagnostic entry points
# ------------------------------------------------------------

def test_round_trip_main(capsys):
    assert round_trip.main(["--variants", "hebrew,coptic", "--N", "50"]) == 0
    out = capsys.readouterr().out
    assert "hebrew: OK" in out
    assert "coptic: OK" in out

def test_roundtrip_test_counts_failures():
    assert round_trip.roundtrip_test("gregorian", 20, 1, max_failures=3) == 0

def test_new_years_table_main(capsys):
    assert new_years_table.main(["--from-year", "2023", "--to-year", "2024"]) in (0, None)
    out = capsys.readouterr().out
    assert "01-22" in out
    assert "02-10" in out

def test_leap_month_points():
    from calworld.diagnostics import leap_months

    assert leap_months.leap_month_of("chinese", 2023) == 2
    assert leap_months.leap_month_of("chinese", 2024) == 0
    assert leap_months.parse_variants("chinese, korean") == ["chinese", "korean"]
    with pytest.raises(SystemExit):
        leap_months.parse_variants("a,b,c,d")

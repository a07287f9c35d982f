# tests/test_hijri.py

import random
from datetime import date, timedelta

import pytest
from hijri_converter import Gregorian

import calworld
from calworld import CalendarDate, InvalidDateError, RangeError, VariantNotFoundError
from calworld.bootstrap import build_registry
from calworld.engines.hijri import (
    AdjustedHijriEngine,
    TabulatedHijriEngine,
    adjusted,
    parse_hijri_table,
)

UQ = "islamic-umalqura"

CUSTOM_TABLE = """
# two years of a custom Hijri table
type=islamic-custom
version=1
iso-start=2007-01-20
min=1428
max=1429
1428=30 29 30 29 30 29 30 29 30 29 30 29
1429=30 30 29 30 29 30 29 30 29 30 29 30
"""


# ------------------------------------------------------------
# Umm al-Qura
# ------------------------------------------------------------

def test_umalqura_fixture():
    assert calworld.to_gregorian(CalendarDate(UQ, 1436, 9, 29)) == date(2015, 7, 16)
    assert calworld.from_gregorian(UQ, date(2015, 7, 17)) == CalendarDate(UQ, 1436, 10, 1)

def test_umalqura_matches_published_table():
    random.seed(42)
    start = date(1930, 1, 1)
    for _ in range(300):
        g = start + timedelta(days=random.randint(0, 50000))
        h = Gregorian(g.year, g.month, g.day).to_hijri()
        assert calworld.from_gregorian(UQ, g) == CalendarDate(UQ, h.year, h.month, h.day)

def test_umalqura_range():
    lo = calworld.minimum_epoch_day(UQ)
    hi = calworld.maximum_epoch_day(UQ)
    assert calworld.from_epoch_day(UQ, lo) == CalendarDate(UQ, 1343, 1, 1)
    assert calworld.from_epoch_day(UQ, hi).year == 1500
    with pytest.raises(RangeError):
        calworld.from_epoch_day(UQ, lo - 1)
    with pytest.raises(RangeError):
        calworld.from_epoch_day(UQ, hi + 1)
    with pytest.raises(RangeError):
        calworld.to_epoch_day(CalendarDate(UQ, 1501, 1, 1))

def test_umalqura_month_lengths():
    for m in range(1, 13):
        assert calworld.length_of_month(UQ, 1445, m) in (29, 30)
    assert calworld.length_of_year(UQ, 1445) in (354, 355)


# ------------------------------------------------------------
# Arithmetic variants
# ------------------------------------------------------------

def test_civil_epoch():
    assert calworld.to_gregorian(CalendarDate("islamic-civil", 1, 1, 1)) == date(622, 7, 19)
    assert calworld.to_gregorian(CalendarDate("islamic-tbla", 1, 1, 1)) == date(622, 7, 18)

def test_civil_1445():
    assert calworld.to_gregorian(CalendarDate("islamic-civil", 1445, 1, 1)) == date(2023, 7, 19)
    assert calworld.to_gregorian(CalendarDate("islamic-tbla", 1445, 1, 1)) == date(2023, 7, 18)

def test_leap_patterns():
    assert calworld.length_of_year("islamic-civil", 2) == 355
    assert calworld.length_of_year("islamic-eastc", 15) == 355
    assert calworld.length_of_year("islamic-civil", 15) == 354
    assert calworld.length_of_year("islamic-civil", 16) == 355
    assert calworld.is_leap_year("islamic-habashalhasibc", 30)
    assert not calworld.is_leap_year("islamic-fatimidc", 7)
    assert calworld.length_of_month("islamic-civil", 2, 12) == 30
    assert calworld.length_of_month("islamic-civil", 1, 12) == 29

def test_cycle_length():
    for v in ("islamic-civil", "islamic-eastc", "islamic-fatimida", "islamic-habashalhasiba"):
        total = sum(calworld.length_of_year(v, y) for y in range(31, 61))
        assert total == 10631

def test_arithmetic_info():
    info = calworld.engine_info("islamic-tbla")
    assert info["epoch"] == "astronomical"
    assert len(info["leap_pattern"]) == 11


# ------------------------------------------------------------
# Table provider
# ------------------------------------------------------------

def test_custom_table():
    data = parse_hijri_table(CUSTOM_TABLE)
    assert (data.variant, data.min_year, data.max_year) == ("islamic-custom", 1428, 1429)
    eng = TabulatedHijriEngine(data)
    assert eng.variant == "islamic-custom"
    first = eng.to_epoch_day(CalendarDate("islamic-custom", 1428, 1, 1))
    assert calworld.from_epoch_day("gregorian", first) == CalendarDate("gregorian", 2007, 1, 20)
    assert eng.to_epoch_day(CalendarDate("islamic-custom", 1428, 2, 1)) == first + 30
    assert eng.from_epoch_day(first + 354) == CalendarDate("islamic-custom", 1429, 1, 1)
    assert eng.length_of_year(1429) == 355
    assert eng.is_leap_year(1429)
    with pytest.raises(RangeError):
        eng.from_epoch_day(first - 1)

def test_custom_table_registration():
    reg = build_registry()
    reg.register("islamic-custom", TabulatedHijriEngine(parse_hijri_table(CUSTOM_TABLE)))
    assert reg.get("islamic-custom").variant == "islamic-custom"
    # derived adjustments work for registered tables too
    shifted = reg.get("islamic-custom:+1")
    assert shifted.from_epoch_day(shifted.minimum_epoch_day()) == CalendarDate("islamic-custom:+1", 1428, 1, 1)

def test_table_rejects_bad_rows():
    with pytest.raises(InvalidDateError):
        parse_hijri_table(CUSTOM_TABLE.replace("1429=30 30 29", "1429=31 30 29"))
    with pytest.raises(InvalidDateError):
        parse_hijri_table(CUSTOM_TABLE.replace("1429=30 30 29 30 29 30 29 30 29 30 29 30", "1429=30 30"))
    with pytest.raises(InvalidDateError):
        parse_hijri_table(CUSTOM_TABLE.replace("max=1429", "max=1430"))
    with pytest.raises(InvalidDateError):
        parse_hijri_table(CUSTOM_TABLE.replace("iso-start=2007-01-20", ""))
    with pytest.raises(InvalidDateError):
        parse_hijri_table(CUSTOM_TABLE.replace("version=1", "version 1"))


# ------------------------------------------------------------
# Day adjustments
# ------------------------------------------------------------

def test_adjusted_shifts_labels():
    plus_one = calworld.from_gregorian(UQ + ":+1", date(2015, 7, 16))
    assert plus_one == CalendarDate(UQ + ":+1", 1436, 10, 1)
    minus_one = calworld.from_gregorian(UQ + ":-1", date(2015, 7, 16))
    assert minus_one == CalendarDate(UQ + ":-1", 1436, 9, 28)
    base_e = calworld.to_epoch_day(CalendarDate(UQ, 1436, 10, 1))
    assert calworld.to_epoch_day(CalendarDate(UQ + ":+1", 1436, 10, 1)) == base_e - 1

def test_adjustments_compose():
    base = calworld.resolve_variant(UQ)
    two = adjusted(adjusted(base, 1), 1)
    assert isinstance(two, AdjustedHijriEngine)
    assert (two.base, two.days, two.variant) == (base, 2, UQ + ":+2")
    assert adjusted(adjusted(base, 1), -1) is base
    e = calworld.to_epoch_day(CalendarDate(UQ, 1440, 5, 10))
    d = two.from_epoch_day(e)
    assert (d.year, d.month, d.day) == (1440, 5, 12)

def _fields(d):
    return (d.year, d.month, d.day)

@pytest.mark.parametrize("variant", [UQ, "islamic-civil", "islamic-tbla", "islamic-fatimidc", "islamic-habashalhasiba"])
def test_opposite_adjustments_restore_base(variant):
    base = calworld.resolve_variant(variant)
    rng = random.Random(42)
    lo, hi = base.minimum_epoch_day() + 6, base.maximum_epoch_day() - 6
    for k in (1, 2, 3, -1, -2, -3):
        there_and_back = AdjustedHijriEngine(AdjustedHijriEngine(base, k), -k)
        assert there_and_back.base is base
        for e in [lo, hi] + [rng.randint(lo, hi) for _ in range(200)]:
            d = base.from_epoch_day(e)
            got = there_and_back.from_epoch_day(e)
            assert _fields(got) == _fields(d), (k, e)
            assert there_and_back.to_epoch_day(got) == e
            assert base.to_epoch_day(d) == e

@pytest.mark.parametrize("variant", [UQ, "islamic-civil"])
def test_adjustments_commute(variant):
    base = calworld.resolve_variant(variant)
    rng = random.Random(42)
    lo, hi = base.minimum_epoch_day() + 6, base.maximum_epoch_day() - 6
    for k, j in [(1, 2), (3, -1), (-2, -3), (2, -2)]:
        kj = AdjustedHijriEngine(AdjustedHijriEngine(base, k), j)
        jk = AdjustedHijriEngine(AdjustedHijriEngine(base, j), k)
        for e in [rng.randint(lo, hi) for _ in range(100)]:
            assert _fields(kj.from_epoch_day(e)) == _fields(jk.from_epoch_day(e))
            assert _fields(kj.from_epoch_day(e)) == _fields(base.from_epoch_day(e + k + j))

def test_adjusted_bounds_shift():
    lo = calworld.minimum_epoch_day(UQ)
    assert calworld.minimum_epoch_day(UQ + ":+2") == lo - 2
    with pytest.raises(RangeError):
        calworld.from_epoch_day(UQ + ":-1", lo)

def test_adjustment_limits():
    with pytest.raises(VariantNotFoundError):
        calworld.resolve_variant(UQ + ":+4")
    with pytest.raises(VariantNotFoundError):
        calworld.resolve_variant("gregorian:+1")
    with pytest.raises(VariantNotFoundError):
        calworld.resolve_variant("islamic-nonexistent:+1")
    info = calworld.engine_info("islamic-civil:-3")
    assert (info["base"], info["adjustment"]) == ("islamic-civil", -3)

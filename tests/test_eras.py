# tests/test_eras.py

from datetime import date

import pytest

import calworld
from calworld import CalendarDate, InvalidDateError, Leniency, RangeError
from calworld.core.time import gregorian_to_epoch_day
from calworld.engines.eras import (
    Era,
    EraTransitionTable,
    nengo_for_related_year,
    nengo_table,
    parse_era_table,
)


# ------------------------------------------------------------
# Transition tables
# ------------------------------------------------------------

def test_table_requires_increasing_starts():
    with pytest.raises(ValueError):
        EraTransitionTable((Era("A", 10, 2000), Era("B", 10, 2001)))
    with pytest.raises(ValueError):
        EraTransitionTable((Era("A", 10, 2000), Era("A", 20, 2001)))
    with pytest.raises(ValueError):
        EraTransitionTable(())

def test_table_lookup():
    t = EraTransitionTable((
        Era("A", gregorian_to_epoch_day(2000, 1, 1), 2000),
        Era("B", gregorian_to_epoch_day(2010, 7, 1), 2010, label="b"),
    ))
    assert t.active_era(gregorian_to_epoch_day(2010, 6, 30)).name == "A"
    assert t.active_era(gregorian_to_epoch_day(2010, 7, 1)).name == "B"
    assert t.year_of_era(gregorian_to_epoch_day(2012, 1, 1)) == 3
    assert t.year_of_era(gregorian_to_epoch_day(2012, 1, 1), t.era_by_name("A")) == 13
    assert t.era_by_name("b").name == "B"
    assert t.next_era(t.era_by_name("A")).name == "B"
    assert t.next_era(t.era_by_name("B")) is None
    assert t.to_related_year(t.era_by_name("B"), 1) == 2010
    with pytest.raises(RangeError):
        t.active_era(gregorian_to_epoch_day(1999, 12, 31))
    with pytest.raises(InvalidDateError):
        t.era_by_name("C")

def test_parse_era_table():
    t = parse_era_table("# comment\nOne|一|2000-01-01\nTwo||2005-03-01\n")
    assert t.names() == ["One", "Two"]
    assert t.eras[1].label is None
    assert t.eras[1].start_year == 2005
    with pytest.raises(ValueError):
        parse_era_table("One|2000-01-01\n")
    t = parse_era_table("Late||2001-01-20|2000\n")
    assert t.eras[0].start_year == 2000

def test_descending_era():
    bc = Era("BC", 0, 0, descending=True)
    assert bc.year_of_era(0) == 1
    assert bc.year_of_era(-1) == 2
    assert bc.related_year(1) == 0


# ------------------------------------------------------------
# Japanese (nengo)
# ------------------------------------------------------------

def test_nengo_table():
    names = nengo_table().names()
    assert names[-2:] == ["Heisei", "Reiwa"]
    assert nengo_for_related_year(1989).name == "Heisei"
    assert nengo_for_related_year(2018).name == "Heisei"
    assert nengo_for_related_year(2019).name == "Reiwa"
    assert nengo_for_related_year(1854).name == "Ansei"
    assert nengo_for_related_year(1855).name == "Ansei"
    with pytest.raises(RangeError):
        nengo_for_related_year(1800)

def test_reiwa_transition():
    assert calworld.from_gregorian("japanese", date(2019, 4, 30)) == CalendarDate("japanese", 31, 4, 30, era="Heisei")
    assert calworld.from_gregorian("japanese", date(2019, 5, 1)) == CalendarDate("japanese", 1, 5, 1, era="Reiwa")
    assert calworld.from_gregorian("japanese", date(1989, 1, 7)).era == "Showa"

def test_smart_accepts_overlong_era():
    d = calworld.make_date("japanese", 31, 5, 1, era="Heisei")
    assert d == CalendarDate("japanese", 1, 5, 1, era="Reiwa")

def test_strict_rejects_overlong_era():
    with pytest.raises(InvalidDateError):
        calworld.make_date("japanese", 31, 5, 1, era="Heisei", leniency=Leniency.STRICT)
    assert calworld.is_valid(CalendarDate("japanese", 31, 4, 30, era="Heisei"), leniency=Leniency.STRICT)
    assert not calworld.is_valid(CalendarDate("japanese", 31, 5, 1, era="Heisei"), leniency=Leniency.STRICT)

def test_lax_accepts_era_before_start():
    with pytest.raises(InvalidDateError):
        calworld.make_date("japanese", 1, 1, 1, era="Reiwa")
    d = calworld.make_date("japanese", 1, 1, 1, era="Reiwa", leniency=Leniency.LAX)
    assert d == CalendarDate("japanese", 31, 1, 1, era="Heisei")

def test_native_era_label():
    a = calworld.to_epoch_day(CalendarDate("japanese", 1, 5, 1, era="令和"))
    b = calworld.to_epoch_day(CalendarDate("japanese", 1, 5, 1, era="Reiwa"))
    assert a == b

def test_year_of_era_must_be_positive():
    with pytest.raises(InvalidDateError):
        calworld.to_epoch_day(CalendarDate("japanese", 0, 5, 1, era="Reiwa"))

def test_japanese_range_starts_with_first_era():
    assert calworld.minimum_epoch_day("japanese") == gregorian_to_epoch_day(1845, 1, 9)
    assert calworld.from_gregorian("japanese", date(1845, 1, 9)).era == "Koka"
    with pytest.raises(RangeError):
        calworld.from_gregorian("japanese", date(1845, 1, 8))

def test_meiji_starts_in_the_lunisolar_calendar():
    assert calworld.from_gregorian("japanese", date(1868, 10, 23)) == CalendarDate("japanese", 1, 9, 8, era="Meiji")
    assert calworld.to_gregorian(CalendarDate("japanese", 1, 9, 8, era="Meiji")) == date(1868, 10, 23)
    assert calworld.from_gregorian("japanese", date(1868, 10, 22)).era == "Keio"

def test_gregorian_from_meiji_6():
    # the last lunisolar month is cut after two days
    assert calworld.from_gregorian("japanese", date(1872, 12, 31)) == CalendarDate("japanese", 5, 12, 2, era="Meiji")
    assert calworld.from_gregorian("japanese", date(1873, 1, 1)) == CalendarDate("japanese", 6, 1, 1, era="Meiji")
    assert calworld.length_of_month("japanese", 5, 12, era="Meiji") == 2
    with pytest.raises(InvalidDateError):
        calworld.to_epoch_day(CalendarDate("japanese", 5, 12, 3, era="Meiji"))
    assert calworld.plus(CalendarDate("japanese", 5, 12, 2, era="Meiji"), 1) == \
        CalendarDate("japanese", 6, 1, 1, era="Meiji")

def test_lunisolar_era_years_follow_the_lunisolar_calendar():
    ls = calworld.from_gregorian("japanese-lunisolar", date(1860, 6, 1))
    d = calworld.from_gregorian("japanese", date(1860, 6, 1))
    assert (d.month, d.leap, d.day) == (ls.month, ls.leap, ls.day)
    assert d == CalendarDate("japanese", 1, ls.month, ls.day, leap=ls.leap, era="Man'en")
    # Ansei was proclaimed late in lunisolar 1854, which counts as its first year
    a = calworld.from_gregorian("japanese", date(1855, 1, 15))
    assert (a.era, a.year, a.month) == ("Ansei", 1, 11)
    assert calworld.is_leap_year("japanese", 1, era="Meiji") == calworld.is_leap_year("japanese-lunisolar", 1868)

def test_engine_era_queries():
    eng = calworld.resolve_variant("japanese")
    e = gregorian_to_epoch_day(2024, 6, 1)
    assert eng.active_era(e).name == "Reiwa"
    assert eng.year_of_era(e) == 6
    assert eng.year_of_era(e, "Heisei") == 36
    assert "Meiji" in calworld.engine_info("japanese")["eras"]


# ------------------------------------------------------------
# Minguo, Juche
# ------------------------------------------------------------

def test_minguo():
    assert calworld.from_gregorian("minguo", date(2023, 5, 1)) == CalendarDate("minguo", 112, 5, 1, era="ROC")
    assert calworld.from_gregorian("minguo", date(1911, 12, 31)) == CalendarDate("minguo", 1, 12, 31, era="BEFORE_ROC")
    assert calworld.from_gregorian("minguo", date(1901, 1, 1)) == CalendarDate("minguo", 11, 1, 1, era="BEFORE_ROC")
    # a date without an era is read in the ROC era
    assert calworld.to_gregorian(CalendarDate("minguo", 112, 5, 1)) == date(2023, 5, 1)
    assert calworld.to_gregorian(CalendarDate("minguo", 1, 1, 1, era="民前")) == date(1911, 1, 1)
    assert calworld.is_leap_year("minguo", 113)

def test_minguo_year_zero_is_invalid():
    with pytest.raises(InvalidDateError):
        calworld.to_epoch_day(CalendarDate("minguo", 0, 1, 1, era="ROC"))

def test_juche():
    assert calworld.from_gregorian("juche", date(2023, 5, 1)) == CalendarDate("juche", 112, 5, 1, era="JUCHE")
    assert calworld.from_gregorian("juche", date(1912, 1, 1)) == CalendarDate("juche", 1, 1, 1, era="JUCHE")
    with pytest.raises(RangeError):
        calworld.from_gregorian("juche", date(1911, 12, 31))


# ------------------------------------------------------------
# Ethiopian eras
# ------------------------------------------------------------

def test_ethiopian_era_boundary():
    first_mihret = CalendarDate("ethiopian", 1, 1, 1, era="AMETE_MIHRET")
    before = calworld.minus(first_mihret, 1)
    assert before == CalendarDate("ethiopian", 5500, 13, 5, era="AMETE_ALEM")
    assert calworld.to_epoch_day(CalendarDate("ethiopian", 5500, 13, 5, era="AMETE_ALEM")) == \
        calworld.to_epoch_day(first_mihret) - 1

def test_ethiopian_start_of_amete_alem():
    first = CalendarDate("ethiopian", 1, 1, 1, era="AMETE_ALEM")
    assert calworld.to_epoch_day(first) == calworld.minimum_epoch_day("ethiopian")
    with pytest.raises(RangeError):
        calworld.minus(first, 1)


# ------------------------------------------------------------
# BC / AD
# ------------------------------------------------------------

def test_julian_bc():
    ad1 = CalendarDate("julian", 1, 1, 1, era="AD")
    assert calworld.minus(ad1, 1) == CalendarDate("julian", 1, 12, 31, era="BC")
    assert calworld.is_leap_year("julian", 1, era="BC")
    assert not calworld.is_leap_year("julian", 2, era="BC")
    # without an era the year is astronomical
    assert calworld.to_epoch_day(CalendarDate("julian", 0, 12, 31)) == calworld.to_epoch_day(ad1) - 1

def test_era_name_unknown():
    with pytest.raises(InvalidDateError):
        calworld.to_epoch_day(CalendarDate("julian", 1, 1, 1, era="CE"))

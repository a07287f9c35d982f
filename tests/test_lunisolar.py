# tests/test_lunisolar.py

from datetime import date

import pytest

import calworld
from calworld import CalendarDate, InternalConsistencyError, InvalidDateError, RangeError
from calworld.engines import lunisolar as ls


def leap_month(variant: str, year: int) -> int:
    cycle, yoc = ls.split_linear_year(year + ls.RELATED_YEAR_OFFSET)
    return calworld.resolve_variant(variant).leap_month(cycle, yoc)


# Published leap months of the Chinese calendar
CHINESE_LEAP_MONTHS = {
    2001: 4, 2004: 2, 2006: 7, 2009: 5, 2012: 4, 2014: 9,
    2017: 6, 2020: 4, 2023: 2, 2025: 6,
}

CHINESE_NEW_YEARS = {
    2020: date(2020, 1, 25),
    2021: date(2021, 2, 12),
    2022: date(2022, 2, 1),
    2023: date(2023, 1, 22),
    2024: date(2024, 2, 10),
    2025: date(2025, 1, 29),
}


def test_cycle_numbering():
    assert ls.split_linear_year(4660) == (78, 40)
    assert ls.split_linear_year(60) == (1, 60)
    assert ls.split_linear_year(61) == (2, 1)
    assert ls.linear_year_of(78, 40) == 4660
    assert ls.related_gregorian_year(78, 40) == 2023
    assert ls.dangi_year(78, 40) == 4356

def test_chinese_leap_months():
    for year in range(2000, 2027):
        assert leap_month("chinese", year) == CHINESE_LEAP_MONTHS.get(year, 0), year

def test_chinese_new_years():
    eng = calworld.resolve_variant("chinese")
    for year, expected in CHINESE_NEW_YEARS.items():
        assert calworld.to_gregorian(eng.first_day_of_year(year)) == expected

def test_chinese_new_year_2023_fields():
    d = calworld.from_gregorian("chinese", date(2023, 1, 22))
    assert d == CalendarDate("chinese", 40, 1, 1, cycle=78)
    assert calworld.from_gregorian("chinese", date(2023, 1, 21)) == CalendarDate("chinese", 39, 12, 30, cycle=78)

def test_leap_month_dates():
    d = calworld.from_gregorian("chinese", date(2023, 3, 22))
    assert d == CalendarDate("chinese", 40, 2, 1, leap=True, cycle=78)
    # without a cycle the year is read as the related Gregorian year
    assert calworld.make_date("chinese", 2023, 2, 1, leap=True) == d
    with pytest.raises(InvalidDateError):
        calworld.make_date("chinese", 2024, 2, 1, leap=True)

def test_year_structure_2023():
    eng = calworld.resolve_variant("chinese")
    months = eng.year_months(40, cycle=78)
    assert [m.key for m in months][:4] == [(1, False), (2, False), (2, True), (3, False)]
    assert len(months) == 13
    assert all(m.length in (29, 30) for m in months)
    assert calworld.is_leap_year("chinese", 40, cycle=78)
    assert calworld.length_of_year("chinese", 2023) == 384
    assert calworld.length_of_month("chinese", 2023, 2, leap=True) == months[2].length
    assert not calworld.is_leap_year("chinese", 2024)
    assert calworld.length_of_year("chinese", 2024) == 354

def test_related_year_and_dangi():
    d = calworld.from_gregorian("korean", date(2023, 6, 1))
    eng = calworld.resolve_variant("korean")
    assert eng.related_gregorian_year(d) == 2023
    assert eng.dangi_year(d) == 4356

def test_korean_new_year_2024():
    eng = calworld.resolve_variant("korean")
    assert calworld.to_gregorian(eng.first_day_of_year(2024)) == date(2024, 2, 10)

def test_vietnamese_tet_1985():
    # in UTC+7 month 11 of 1984 starts a month earlier, so Tet falls a month before the Chinese new year
    assert calworld.to_gregorian(calworld.resolve_variant("vietnamese").first_day_of_year(1985)) == date(1985, 1, 21)
    assert calworld.to_gregorian(calworld.resolve_variant("chinese").first_day_of_year(1985)) == date(1985, 2, 20)

def test_japanese_lunisolar_2023():
    eng = calworld.resolve_variant("japanese-lunisolar")
    assert calworld.to_gregorian(eng.first_day_of_year(2023)) == date(2023, 1, 22)

def test_year_of_cycle_bounds():
    with pytest.raises(InvalidDateError):
        calworld.to_epoch_day(CalendarDate("chinese", 61, 1, 1, cycle=78))
    with pytest.raises(InvalidDateError):
        calworld.to_epoch_day(CalendarDate("chinese", 40, 1, 31, cycle=78))

def test_range():
    lo = calworld.minimum_epoch_day("chinese")
    assert lo == ls.REFORM_1645
    with pytest.raises(RangeError):
        calworld.from_epoch_day("chinese", lo - 1)
    with pytest.raises(RangeError):
        calworld.to_epoch_day(CalendarDate("chinese", 1600, 1, 1))
    assert calworld.minimum_epoch_day("vietnamese") == calworld.to_epoch_day(CalendarDate("gregorian", 1813, 2, 1))

def test_month_sequence_is_contiguous():
    eng = calworld.resolve_variant("chinese")
    for year in range(2019, 2026):
        months = eng.year_months(year)
        for a, b in zip(months, months[1:]):
            assert a.start + a.length == b.start
        nxt = eng.year_months(year + 1)[0]
        assert months[-1].start + months[-1].length == nxt.start

def test_offset_schedule():
    eng = calworld.resolve_variant("korean")
    assert eng.offset_hours(calworld.to_epoch_day(CalendarDate("gregorian", 1900, 1, 1))) == pytest.approx(126 / 15 + 58 / 900)
    assert eng.offset_hours(calworld.to_epoch_day(CalendarDate("gregorian", 1958, 1, 1))) == 8.5
    assert eng.offset_hours(calworld.to_epoch_day(CalendarDate("gregorian", 2000, 1, 1))) == 9.0
    info = calworld.engine_info("korean")
    assert info["utc_offsets"][0][0] is None

def test_sequence_check_rejects_double_leap():
    bad = [
        ls.LunarMonth(0, 1, False, 30),
        ls.LunarMonth(30, 1, True, 29),
        ls.LunarMonth(59, 2, False, 30),
        ls.LunarMonth(89, 2, True, 29),
    ]
    with pytest.raises(InternalConsistencyError):
        ls._check_sequence("test", 1, bad)
    with pytest.raises(InternalConsistencyError):
        ls._check_sequence("test", 1, [ls.LunarMonth(0, 2, False, 30)])
    with pytest.raises(InternalConsistencyError):
        ls._check_sequence("test", 1, [ls.LunarMonth(0, 1, False, 30), ls.LunarMonth(30, 3, False, 29)])

@pytest.mark.parametrize("variant", ["chinese", "korean", "vietnamese", "japanese-lunisolar"])
def test_leap_month_is_first_without_major_term(variant):
    eng = calworld.resolve_variant(variant)
    first = 1814 if variant == "vietnamese" else 1646
    for year in range(first, 2101, 7):
        months = eng.year_months(year)
        leaps = [m for m in months if m.leap]
        assert len(leaps) <= 1, year
        for m in leaps:
            assert eng.major_term_at(m.start) == eng.major_term_at(m.start + m.length), year
            # every earlier month of the same sui after month 11 holds a major term
            starts = [s for s, _, _ in eng._sui_table(eng.winter_on_or_before(m.start))]
            i = starts.index(m.start)
            for a, b in zip(starts[1:i], starts[2:i + 1]):
                assert eng.major_term_at(a) != eng.major_term_at(b), year

def test_historic_leap_months():
    assert leap_month("chinese", 2033) == 11
    assert leap_month("korean", 2033) == 11
    assert leap_month("chinese", 1984) == 10
    assert leap_month("chinese", 1995) == 8
    assert leap_month("chinese", 1900) == 8
    assert leap_month("vietnamese", 1985) == 2
    cycle, yoc = ls.split_linear_year(2033 + ls.RELATED_YEAR_OFFSET)
    months = calworld.resolve_variant("chinese").year_months(yoc, cycle=cycle)
    assert [m.key for m in months][-3:] == [(11, False), (11, True), (12, False)]

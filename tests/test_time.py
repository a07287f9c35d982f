# tests/test_time.py

import random
from datetime import date

import pytest

from calworld.core import time as ct
from calworld.reference import deltat
from calworld.reference import time_scales as ts


def test_epoch_anchor():
    assert ct.gregorian_to_epoch_day(1972, 1, 1) == 0
    assert ct.gregorian_to_epoch_day(1970, 1, 1) == -730
    assert ct.epoch_day_from_date(date(2000, 1, 1)) == 10227
    assert ct.jdn_from_epoch_day(0) == 2441318

def test_epoch_day_gregorian_roundtrip():
    random.seed(42)
    for _ in range(5000):
        e = random.randint(-800000, 800000)
        assert ct.gregorian_to_epoch_day(*ct.epoch_day_to_gregorian(e)) == e

def test_date_roundtrip_matches_datetime():
    random.seed(42)
    for _ in range(2000):
        d = date.fromordinal(random.randint(1, date(9999, 12, 31).toordinal()))
        e = ct.epoch_day_from_date(d)
        assert ct.date_from_epoch_day(e) == d
        assert e == d.toordinal() - date(1972, 1, 1).toordinal()

def test_negative_years():
    # year 0 is 1 BC and is leap
    assert ct.is_gregorian_leap(0)
    assert ct.gregorian_year_length(-100) == 365
    assert ct.epoch_day_to_gregorian(ct.gregorian_to_epoch_day(0, 2, 29)) == (0, 2, 29)

def test_day_of_week():
    # 1972-01-01 was a Saturday
    assert ct.day_of_week(0) == 6
    assert ct.day_of_week(1) == 7
    assert ct.day_of_week(2) == 1
    assert ct.day_of_week(ct.epoch_day_from_date(date(2024, 3, 20))) == date(2024, 3, 20).isoweekday()

def test_jd_epoch_day():
    assert ct.jd_to_epoch_day(ct.EPOCH_JD) == 0
    assert ct.jd_to_epoch_day(ct.EPOCH_JD + 0.75) == 0
    assert ct.jd_to_epoch_day(ct.EPOCH_JD - 0.25) == -1
    assert ct.epoch_day_to_jd(10) == ct.EPOCH_JD + 10


# ------------------------------------------------------------
# time scales
# ------------------------------------------------------------

def test_tt_ut_inverse():
    for jd_ut in (2299160.5, 2415020.5, 2451545.0, 2460000.5):
        jd_tt = ts.jd_ut_to_jd_tt(jd_ut)
        assert jd_tt > jd_ut
        assert ts.jd_tt_to_jd_ut(jd_tt) == pytest.approx(jd_ut, abs=1e-8)

def test_local_days():
    assert ts.lmt_offset_hours(120.0) == 8.0
    assert ts.dms(116, 25) == pytest.approx(116.4166667, abs=1e-6)
    for e in (-1000, 0, 18000):
        for off in (-5.0, 0.0, 7.0, 8.0, 9.0):
            assert ts.local_epoch_day(ts.local_midnight_jd_ut(e, off) + 1e-4, off) == e
            assert ts.local_epoch_day(ts.local_midnight_jd_ut(e, off) - 1e-4, off) == e - 1

def test_jdn_helpers():
    assert ts.jd_to_jdn(2451545.0) == 2451545
    assert ts.jd_to_jdn(2451544.5) == 2451545
    assert ts.jdn_to_jd(2451545) == 2451544.5


# ------------------------------------------------------------
# ΔT
# ------------------------------------------------------------

def test_delta_t_polynomial():
    assert deltat.delta_t_seconds(2000.0) == pytest.approx(63.86, abs=1e-9)
    # historical values, within a few seconds
    assert deltat.delta_t_seconds(1900.0) == pytest.approx(-2.79, abs=0.01)
    assert deltat.delta_t_seconds(1700.0) == pytest.approx(8.83, abs=0.01)

def test_delta_t_method_validation():
    with pytest.raises(ValueError):
        deltat.delta_t_seconds(2000.0, method="iers")

def test_delta_t_table_from_env(tmp_path, monkeypatch):
    csv_path = tmp_path / "dt.csv"
    csv_path.write_text("decimal_year,delta_t_seconds\n2000.0,60.0\n2001.0,62.0\n", encoding="utf-8")
    deltat.load_monthly_table.cache_clear()
    monkeypatch.setenv(deltat.TABLE_ENV, str(csv_path))
    try:
        assert deltat.delta_t_seconds(2000.5, method="table") == pytest.approx(61.0)
        assert deltat.delta_t_seconds(2000.5, method="best") == pytest.approx(61.0)
        # outside the table, "best" falls back to the polynomial
        assert deltat.delta_t_seconds(1990.0, method="best") == deltat.delta_t_em2006(1990.0)
        with pytest.raises(ValueError):
            deltat.delta_t_seconds(1990.0, method="table")
        # engines never see the table
        assert deltat.delta_t_seconds(2000.5) == deltat.delta_t_em2006(2000.5)
    finally:
        deltat.load_monthly_table.cache_clear()

def test_delta_t_table_rejects_unsorted():
    with pytest.raises(ValueError):
        deltat.table_from_rows([
            {"decimal_year": "2001.0", "delta_t_seconds": "1"},
            {"decimal_year": "2000.0", "delta_t_seconds": "2"},
        ])

# tests/test_cli.py

import pytest

from calworld import cli


def run(capsys, *argv):
    rc = cli.main(list(argv))
    return rc, capsys.readouterr().out


def test_convert_to_chinese(capsys):
    rc, out = run(capsys, "convert", "gregorian", "2023-01-22", "--to", "chinese")
    assert rc == 0
    assert "2023-01-22[gregorian]" in out
    assert "iso_weekday=7" in out
    assert "-> 78/0040-01-01[chinese]" in out

def test_convert_leap_month_and_several_targets(capsys):
    rc, out = run(capsys, "convert", "chinese", "2023-02*-01", "--to", "gregorian", "--to", "hebrew")
    assert rc == 0
    assert "78/0040-02*-01[chinese]" in out
    assert "-> 2023-03-22[gregorian]" in out
    assert "[hebrew]" in out

def test_convert_era(capsys):
    rc, out = run(capsys, "convert", "japanese", "31-05-01", "--era", "Heisei", "--to", "gregorian")
    assert rc == 0
    assert "Reiwa-0001-05-01[japanese]" in out
    assert "-> 2019-05-01[gregorian]" in out

def test_convert_strict_era_fails(capsys):
    from calworld import InvalidDateError

    with pytest.raises(InvalidDateError):
        cli.main(["convert", "japanese", "31-05-01", "--era", "Heisei", "--leniency", "strict"])

def test_convert_bad_fields():
    with pytest.raises(SystemExit):
        cli.main(["convert", "gregorian", "2023/01/22"])

def test_list(capsys):
    rc, out = run(capsys, "list")
    assert rc == 0
    lines = out.split()
    assert "hebrew" in lines
    assert "islamic-umalqura" in lines

def test_info_with_year(capsys):
    rc, out = run(capsys, "info", "hebrew", "--year", "5784")
    assert rc == 0
    assert "HebrewEngine" in out
    assert "year 5784: leap=True length=383" in out
    assert out.count(" days") == 13

def test_info_lunisolar_year(capsys):
    rc, out = run(capsys, "info", "chinese", "--year", "2023")
    assert rc == 0
    assert "month  2*" in out
    assert "length=384" in out

def test_solar(capsys):
    rc, out = run(capsys, "solar", "--date", "2024-03-20")
    assert rc == 0
    assert "Apparent longitude" in out
    assert "Next term" in out

def test_lunar(capsys):
    rc, out = run(capsys, "lunar", "--jd-ut", "2451545.0")
    assert rc == 0
    assert "Previous new moon" in out
    assert "Lunation fraction" in out

def test_diag_round_trip(capsys):
    rc, out = run(capsys, "diag", "round-trip", "--variants", "coptic", "--N", "20")
    assert rc == 0
    assert "coptic: OK" in out

def test_new_years(capsys):
    rc, out = run(capsys, "new-years", "--from-year", "2024", "--to-year", "2024", "--variants", "chinese")
    assert rc == 0
    assert "02-10" in out

def test_missing_command():
    with pytest.raises(SystemExit):
        cli.main([])

from datetime import date, datetime, timedelta, timezone

import pytest
from rnokpp.codec.dates import (
    Sex,
    date_to_days,
    days_to_date,
    decode_dob,
    decode_sex,
    is_birth_date_plausible,
    same_ymd,
)
from rnokpp.errors import ErrorKind, TinValidationError

UTC = timezone.utc
NOW = datetime(2026, 10, 18, 12, 0, tzinfo=UTC)


def test_days_to_date_epoch():
    assert days_to_date(0) == datetime(1899, 12, 31, tzinfo=UTC)
    assert days_to_date(1) == datetime(1900, 1, 1, tzinfo=UTC)

def test_days_to_date_handles_leap_years():
    # 1900 is not a leap year, 2000 is.
    assert days_to_date(60) == datetime(1900, 3, 1, tzinfo=UTC)
    assert days_to_date(36584) == datetime(2000, 2, 29, tzinfo=UTC)

def test_days_to_date_known_offsets():
    assert days_to_date(30360) == datetime(1983, 2, 14, tzinfo=UTC)
    assert days_to_date(29411) == datetime(1980, 7, 10, tzinfo=UTC)
    assert days_to_date(36524) == datetime(1999, 12, 31, tzinfo=UTC)

def test_date_to_days_inverts_days_to_date():
    for n in (1, 59, 60, 12345, 29411, 30360, 36584, 45000):
        assert date_to_days(days_to_date(n)) == n
    assert date_to_days(date(1983, 2, 14)) == 30360

def test_decode_dob():
    assert decode_dob("3036045681") == datetime(1983, 2, 14, tzinfo=UTC)
    assert decode_dob("30360") == datetime(1983, 2, 14, tzinfo=UTC)

def test_decode_dob_rejects_short_or_non_digit():
    with pytest.raises(TinValidationError) as ei:
        decode_dob("123")
    assert ei.value.kind is ErrorKind.LENGTH

    with pytest.raises(TinValidationError) as ei:
        decode_dob("12a45")
    assert ei.value.kind is ErrorKind.NON_DIGIT

def test_decode_sex_by_parity_of_ninth_digit():
    assert decode_sex("3036045681") is Sex.FEMALE  # 8
    assert decode_sex("2941156717") is Sex.MALE    # 1

def test_plausible_bounds():
    assert is_birth_date_plausible(datetime(1983, 2, 14, tzinfo=UTC), NOW, 130)
    assert not is_birth_date_plausible(None, NOW, 130)
    assert not is_birth_date_plausible(datetime(1899, 12, 31, tzinfo=UTC), NOW, 0)
    assert is_birth_date_plausible(datetime(1900, 1, 1, tzinfo=UTC), NOW, 0)
    assert not is_birth_date_plausible(NOW + timedelta(days=1), NOW, 0)

def test_plausible_same_day_as_now():
    assert is_birth_date_plausible(datetime(2026, 10, 18, tzinfo=UTC), NOW, 130)

def test_max_age_uses_calendar_years():
    assert is_birth_date_plausible(datetime(1906, 10, 18, 12, tzinfo=UTC), NOW, 120)
    assert not is_birth_date_plausible(datetime(1906, 10, 17, tzinfo=UTC), NOW, 120)
    # zero disables the cap
    assert is_birth_date_plausible(datetime(1901, 1, 1, tzinfo=UTC), NOW, 0)

def test_max_age_boundary_ignores_time_of_day():
    # A decoded date is UTC midnight; `now` is midday. Exactly 120 years back is still in range.
    boundary = days_to_date(date_to_days(date(1906, 10, 18)))
    assert is_birth_date_plausible(boundary, NOW, 120)
    assert not is_birth_date_plausible(boundary - timedelta(days=1), NOW, 120)
    late_evening = datetime(2026, 10, 18, 23, 59, tzinfo=UTC)
    assert is_birth_date_plausible(boundary, late_evening, 120)

def test_max_age_from_leap_day_rolls_to_march_first():
    leap = datetime(2024, 2, 29, tzinfo=UTC)
    assert not is_birth_date_plausible(datetime(2023, 2, 28, tzinfo=UTC), leap, 1)
    assert is_birth_date_plausible(datetime(2023, 3, 1, tzinfo=UTC), leap, 1)

def test_huge_max_age_is_effectively_unbounded():
    assert is_birth_date_plausible(datetime(1900, 1, 1, tzinfo=UTC), NOW, 5000)

def test_plausible_accepts_plain_dates_and_naive_now():
    assert is_birth_date_plausible(date(1983, 2, 14), datetime(2026, 10, 18), 130)

def test_same_ymd():
    kyiv_evening = datetime(1983, 2, 14, 20, 0, tzinfo=timezone(timedelta(hours=2)))
    assert same_ymd(datetime(1983, 2, 14, tzinfo=UTC), kyiv_evening)
    assert same_ymd(datetime(1983, 2, 14, tzinfo=UTC), date(1983, 2, 14))
    assert same_ymd(date(1983, 2, 14), date(1983, 2, 14))
    assert not same_ymd(date(1983, 2, 14), date(1983, 2, 15))

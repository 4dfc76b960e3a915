"""
Birth date and sex encoded in an RNOKPP.

Digits 1-5 hold the number of days since 1899-12-31 (so 00001 is
1900-01-01); digit 9 is even for women and odd for men. All dates produced here
are aware datetimes at UTC midnight; callers convert to a display zone.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from enum import Enum
from typing import Optional, Union

from ..errors import ErrorKind, TinValidationError
from .validators import digits_only

EPOCH = datetime(1899, 12, 31, tzinfo=timezone.utc)
MIN_BIRTH_DATE = datetime(1900, 1, 1, tzinfo=timezone.utc)

DateLike = Union[date, datetime]


class Sex(str, Enum):
    MALE = "male"
    FEMALE = "female"


def as_utc(value: DateLike) -> datetime:
    """Return `value` as an aware UTC datetime. Naive values are taken as UTC."""
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)
    return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)


def days_to_date(days: int) -> datetime:
    """UTC midnight `days` days after 1899-12-31."""
    return EPOCH + timedelta(days=days)


def date_to_days(value: DateLike) -> int:
    """Inverse of `days_to_date`; the date part is taken in UTC."""
    d = as_utc(value)
    return (datetime(d.year, d.month, d.day, tzinfo=timezone.utc) - EPOCH).days


def decode_dob(tin: str) -> datetime:
    """
    Decode the birth date from the first five digits of a TIN.

    Raises:
        TinValidationError: Length if shorter than five characters, NonDigit
            if the prefix is not all digits.
    """
    if len(tin) < 5:
        raise TinValidationError(ErrorKind.LENGTH, tin, "tin too short to hold a birth date")
    prefix = tin[:5]
    if digits_only(prefix) != prefix:
        raise TinValidationError(ErrorKind.NON_DIGIT, tin, "birth date prefix must be digits")
    return days_to_date(int(prefix))


def decode_sex(tin: str) -> Sex:
    """Sex from digit 9 of a normalized 10-digit TIN."""
    return Sex.FEMALE if (ord(tin[8]) - 48) % 2 == 0 else Sex.MALE


def _years_before(moment: date, years: int) -> Optional[date]:
    """
    `moment` moved back by whole calendar years.

    Feb 29 on a non-leap target year rolls over to Mar 1. Returns None when
    the target year falls outside what datetime can represent.
    """
    year = moment.year - years
    if year < 1:
        return None
    try:
        return moment.replace(year=year)
    except ValueError:
        return moment.replace(year=year, month=3, day=1)


def is_birth_date_plausible(d: Optional[DateLike], now: DateLike, max_age: int) -> bool:
    """
    Check that a birth date is within a believable range.

    Implausible when unset, before 1900-01-01, after `now`, or, with a
    non-zero `max_age`, before `now` minus `max_age` calendar years.
    """
    if d is None:
        return False
    # Day granularity: the time of day of `now` never matters.
    d = as_utc(d).date()
    now = as_utc(now).date()
    if d < MIN_BIRTH_DATE.date() or d > now:
        return False
    if max_age > 0:
        floor = _years_before(now, max_age)
        if floor is not None and d < floor:
            return False
    return True


def same_ymd(a: DateLike, b: DateLike) -> bool:
    """Compare year, month and day only. Datetimes are compared in UTC."""
    if not isinstance(a, datetime) and not isinstance(b, datetime):
        return (a.year, a.month, a.day) == (b.year, b.month, b.day)
    a, b = as_utc(a), as_utc(b)
    return (a.year, a.month, a.day) == (b.year, b.month, b.day)

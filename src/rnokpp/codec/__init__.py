"""Pure encoding helpers: digit normalizer, checksum and date codec."""

from .dates import (
    Sex,
    date_to_days,
    days_to_date,
    decode_dob,
    decode_sex,
    is_birth_date_plausible,
    same_ymd,
)
from .validators import checksum_ok, digits_only

__all__ = [
    "Sex",
    "checksum_ok",
    "date_to_days",
    "days_to_date",
    "decode_dob",
    "decode_sex",
    "digits_only",
    "is_birth_date_plausible",
    "same_ymd",
]

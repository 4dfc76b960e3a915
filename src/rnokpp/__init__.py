"""rnokpp — validate and decode Ukrainian taxpayer identification numbers."""

from .codec import (
    Sex,
    checksum_ok,
    date_to_days,
    days_to_date,
    decode_dob,
    decode_sex,
    digits_only,
    is_birth_date_plausible,
)
from .config import ValidatorConfig, load_config
from .engine.rules import Rules, ValidationRule, rule, rule_checksum
from .engine.validator import ValidationResult, Validator
from .errors import ErrorKind, TinValidationError

__version__ = "0.1.0"

__all__ = [
    "ErrorKind",
    "Rules",
    "Sex",
    "TinValidationError",
    "ValidationResult",
    "ValidationRule",
    "Validator",
    "ValidatorConfig",
    "checksum_ok",
    "date_to_days",
    "days_to_date",
    "decode_dob",
    "decode_sex",
    "digits_only",
    "is_birth_date_plausible",
    "load_config",
    "rule",
    "rule_checksum",
]

"""
Orchestrates one TIN check: normalize, run rules, decode, judge plausibility,
verify the checksum and compare against a caller-known birth date.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, tzinfo
from typing import Any, Dict, Iterable, Optional, Tuple

from ..codec.dates import (
    DateLike,
    Sex,
    days_to_date,
    decode_sex,
    is_birth_date_plausible,
    same_ymd,
)
from ..codec.validators import checksum_ok, digits_only
from ..config import ValidatorConfig
from ..errors import ErrorKind, TinValidationError
from .rules import Rule, Rules, structural_rules

_STRUCTURAL = structural_rules()


@dataclass
class ValidationResult:
    """
    Everything learned about a TIN in one call.

    Fields after a failing step keep their defaults; `tin` is always set.
    `dob_matched` is True when no comparison date was supplied.
    """
    tin: str = ""
    birth_date: Optional[datetime] = None
    sex: Optional[Sex] = None
    checksum_ok: bool = False
    birth_date_plausible: bool = False
    dob_matched: bool = False
    valid: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tin": self.tin,
            "birth_date": self.birth_date.isoformat() if self.birth_date else None,
            "sex": self.sex.value if self.sex else None,
            "checksum_ok": self.checksum_ok,
            "birth_date_plausible": self.birth_date_plausible,
            "dob_matched": self.dob_matched,
            "valid": self.valid,
        }


class Validator:
    """
    Reusable RNOKPP validator.

    Configure at construction:

        Validator(max_age=120, strict=True, tz="Europe/Kyiv")

    or with chained setters, which are equivalent:

        Validator().max_age(120).strict(True).location("Europe/Kyiv")

    A validator may be shared between threads once configured; `validate`
    only reads the configuration.
    """

    def __init__(
        self,
        config: Optional[ValidatorConfig] = None,
        *,
        max_age: Optional[int] = None,
        strict: Optional[bool] = None,
        tz: Optional[tzinfo | str] = None,
        now: Optional[datetime] = None,
        rules: Optional[Iterable[Rule]] = None,
        extra_rules: Optional[Iterable[str]] = None,
    ) -> None:
        if config is None:
            self._config = ValidatorConfig()
        else:
            self._config = config.model_copy(update={"rules": list(config.rules)})

        if max_age is not None:
            self.max_age(max_age)
        if strict is not None:
            self.strict(strict)
        self.location(tz)
        if now is not None:
            self.now(now)
        if rules is not None:
            self.rules(rules)
        if extra_rules is not None:
            self.extra_rules(extra_rules)

    @property
    def config(self) -> ValidatorConfig:
        return self._config

    # ---------------- Chained setters ----------------

    def max_age(self, years: int) -> "Validator":
        """Age cap in years; 0 disables it."""
        self._config.max_age = years
        return self

    def strict(self, on: bool = True) -> "Validator":
        """Make a DOB mismatch a validation error."""
        self._config.strict = on
        return self

    def location(self, tz: Optional[tzinfo | str]) -> "Validator":
        """Zone used to expose the birth date. None leaves it unchanged."""
        if tz is not None:
            self._config.tz = tz
        return self

    def now(self, t: datetime) -> "Validator":
        """Override the reference time (stored in UTC)."""
        self._config.now = t
        return self

    def rules(self, rules: Iterable[Rule]) -> "Validator":
        """Replace the custom rules run after the structural ones."""
        self._config.rules = list(rules)
        return self

    def extra_rules(self, names: Iterable[str]) -> "Validator":
        """Replace the registry rules (by name) run after the custom ones."""
        self._config.extra_rules = list(names)
        return self

    # ---------------- Public API ----------------

    def validate(self, tin: str, dob: Optional[DateLike] = None) -> ValidationResult:
        """
        Run every check on `tin`.

        A bad checksum does not raise; it shows up as `checksum_ok=False` and
        `valid=False`.

        Args:
            tin: Raw input; everything except ASCII digits is discarded.
            dob: Optional birth date known to the caller.

        Returns:
            The populated ValidationResult.

        Raises:
            TinValidationError: structural or custom rule failure, implausible
                birth date, or (strict mode) a DOB mismatch. `err.result`
                holds what was decoded before the failure.
        """
        res = ValidationResult(tin=digits_only(tin))
        try:
            self._run(res, dob)
        except TinValidationError as err:
            err.result = res
            raise
        return res

    def check(
        self, tin: str, dob: Optional[DateLike] = None
    ) -> Tuple[ValidationResult, Optional[TinValidationError]]:
        """Like `validate`, but return the error instead of raising it."""
        try:
            return self.validate(tin, dob), None
        except TinValidationError as err:
            return err.result, err

    def is_valid(self, tin: str, dob: Optional[DateLike] = None) -> bool:
        res, err = self.check(tin, dob)
        return err is None and res.valid

    # --------------- Internals ------------------

    def _run(self, res: ValidationResult, dob: Optional[DateLike]) -> None:
        cfg = self._config
        tin = res.tin

        _STRUCTURAL.validate(tin)
        Rules(cfg.custom_rules()).validate(tin)

        decoded = days_to_date(int(tin[:5]))
        res.birth_date = decoded.astimezone(cfg.tz)
        res.sex = decode_sex(tin)

        if not is_birth_date_plausible(decoded, cfg.now, cfg.max_age):
            raise TinValidationError(
                ErrorKind.BIRTH_OUT_OF_RANGE,
                tin,
                "encoded birth date out of plausible range",
                decoded_dob=decoded,
                provided_dob=dob,
            )
        res.birth_date_plausible = True

        res.checksum_ok = checksum_ok(tin)

        if dob is not None:
            res.dob_matched = same_ymd(decoded, dob)
            if cfg.strict and not res.dob_matched:
                raise TinValidationError(
                    ErrorKind.DOB_MISMATCH,
                    tin,
                    "provided DOB does not match encoded date",
                    decoded_dob=decoded,
                    provided_dob=dob,
                )
        else:
            res.dob_matched = True

        res.valid = res.checksum_ok and res.birth_date_plausible
        if cfg.strict and dob is not None:
            res.valid = res.valid and res.dob_matched
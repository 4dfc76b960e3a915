from __future__ import annotations

from datetime import date, datetime, timezone, tzinfo
from pathlib import Path
from typing import Any, Callable, List, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .engine.rules import named_rules

DEFAULT_MAX_AGE = 130


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def resolve_tz(value: Any) -> tzinfo:
    """Accept a tzinfo or an IANA name ("Europe/Kyiv", "UTC")."""
    if value is None:
        return timezone.utc
    if isinstance(value, tzinfo):
        return value
    if isinstance(value, str):
        if value.upper() == "UTC":
            return timezone.utc
        try:
            return ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError, OSError) as exc:
            raise ValueError(f"unknown time zone {value!r}") from exc
    raise ValueError(f"expected a tzinfo or zone name, got {type(value).__name__}")


# ---- Validator settings (toggle and tune without code changes) ----
class ValidatorConfig(BaseModel):
    """
    Settings read by `Validator.validate`.

    Assignment is validated too, so the chained setters on Validator go through
    the same checks as construction.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, validate_assignment=True)

    now: datetime = Field(default_factory=_utcnow)       # reference time, stored in UTC
    max_age: int = Field(default=DEFAULT_MAX_AGE, ge=0)  # years; 0 disables the cap
    strict: bool = False                                 # DOB mismatch is a hard failure
    tz: tzinfo = timezone.utc                            # zone used to expose birth dates
    rules: List[Callable[[str], None]] = Field(default_factory=list)
    extra_rules: List[str] = Field(default_factory=list)  # registry names, run after `rules`

    @field_validator("now", mode="before")
    @classmethod
    def _date_as_midnight(cls, v: Any) -> Any:
        # YAML reads "now: 2026-10-18" as a plain date.
        if isinstance(v, date) and not isinstance(v, datetime):
            return datetime(v.year, v.month, v.day)
        return v

    @field_validator("now")
    @classmethod
    def _now_in_utc(cls, v: datetime) -> datetime:
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v.astimezone(timezone.utc)

    @field_validator("tz", mode="before")
    @classmethod
    def _resolve_tz(cls, v: Any) -> tzinfo:
        return resolve_tz(v)

    @field_validator("extra_rules")
    @classmethod
    def _known_rules(cls, v: List[str]) -> List[str]:
        named_rules(v)  # raises ValueError on unknown names
        return v

    def custom_rules(self) -> List[Callable[[str], None]]:
        """Caller rules followed by the named registry rules."""
        return list(self.rules) + named_rules(self.extra_rules)


# ---- Loader ----
def load_config(path: Optional[Path]) -> ValidatorConfig:
    if not path:
        return ValidatorConfig()
    data = yaml.safe_load(Path(path).read_text()) or {}
    return ValidatorConfig(**data)

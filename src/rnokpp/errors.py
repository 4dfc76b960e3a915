"""
Error kinds and the exception raised by the validation pipeline.

Callers branch on `err.kind`, never on the message text:

    try:
        v.validate(raw)
    except TinValidationError as err:
        if err.kind is ErrorKind.ALL_SAME:
            ...

`ErrorKind` is a `str` enum, so `err.kind == "AllSame"` works too. Custom rules
may raise with any string kind of their own.
"""

from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from typing import TYPE_CHECKING, Optional, Union

if TYPE_CHECKING:
    from .engine.validator import ValidationResult


class ErrorKind(str, Enum):
    NON_DIGIT = "NonDigit"
    LENGTH = "Length"
    ALL_SAME = "AllSame"
    CHECKSUM = "Checksum"
    BIRTH_OUT_OF_RANGE = "BirthOutOfRange"
    DOB_MISMATCH = "DOBMismatch"


class TinValidationError(ValueError):
    """
    A TIN failed one of the pipeline checks.

    Attributes:
        kind: ErrorKind for built-in checks, or the caller's own string.
        tin: The normalized value the failing check saw.
        message: Human-readable detail.
        decoded_dob: Birth date decoded from the TIN, when it got that far.
        provided_dob: Comparison date passed by the caller, if any.
        result: Partially populated ValidationResult (set by the Validator).
    """

    def __init__(
        self,
        kind: Union[ErrorKind, str],
        tin: str,
        message: str = "",
        decoded_dob: Optional[datetime] = None,
        provided_dob: Optional[Union[date, datetime]] = None,
    ) -> None:
        self.kind = kind
        self.tin = tin
        self.message = message
        self.decoded_dob = decoded_dob
        self.provided_dob = provided_dob
        self.result: Optional["ValidationResult"] = None
        super().__init__(message or str(getattr(kind, "value", kind)))

    def matches(self, kind: Union[ErrorKind, str]) -> bool:
        return self.kind == kind

    def __repr__(self) -> str:
        kind = getattr(self.kind, "value", self.kind)
        return f"TinValidationError(kind={kind!r}, tin={self.tin!r}, message={self.message!r})"

"""
Ordered, short-circuiting validation rules over a normalized TIN.

What this does
--------------
- A *rule* is any callable taking the normalized string and raising
  `TinValidationError` when the value is unacceptable (returning otherwise).
- `Rules` runs a sequence of them in order and stops at the first failure.
  Failures are not accumulated: the first one wins, which keeps error
  reporting deterministic.
- The structural rules (digits, length, not-all-same) always run first; caller
  rules plug in after them without touching the checksum or date logic.

Named rules
-----------
Configuration files cannot hold callables, so a few rules are registered by
name (`RULES`) and can be enabled from YAML via `extra_rules`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Iterable, Iterator, List, Union

from ..codec.validators import TIN_LENGTH, checksum_ok, digits_only
from ..errors import ErrorKind, TinValidationError

Rule = Callable[[str], None]
Predicate = Callable[[str], bool]


# ---- Rule built from a boolean predicate -------------------------------------------------

@dataclass(frozen=True)
class ValidationRule:
    """
    A named predicate over the normalized TIN.

    Attributes:
        kind: Failure kind raised when the predicate returns False.
        predicate: Returns True when the value is acceptable.
        message: Human-readable failure detail.
    """
    kind: Union[ErrorKind, str]
    predicate: Predicate
    message: str = ""

    def __call__(self, value: str) -> None:
        if not self.predicate(value):
            raise TinValidationError(self.kind, value, self.message)


def rule(kind: Union[ErrorKind, str], message: str = "") -> Callable[[Predicate], ValidationRule]:
    """
    Decorator turning a predicate into a ValidationRule.

        @rule("Blackout", "blackout date not allowed")
        def no_millennium_eve(tin: str) -> bool:
            return tin[:5] != "36524"
    """
    def wrap(predicate: Predicate) -> ValidationRule:
        return ValidationRule(kind=kind, predicate=predicate, message=message)
    return wrap


# ---- Pipeline ------------------------------------------------------------------------------

class Rules:
    """Immutable ordered collection of rules with first-failure semantics."""

    def __init__(self, rules: Iterable[Rule] = ()) -> None:
        self._rules: tuple = tuple(rules)

    def add(self, *more: Rule) -> "Rules":
        """Return a new pipeline with `more` appended; allows chaining."""
        return Rules(self._rules + more)

    def validate(self, value: str) -> None:
        """Run every rule in order; the first TinValidationError propagates."""
        for r in self._rules:
            r(value)

    def __iter__(self) -> Iterator[Rule]:
        return iter(self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    def __bool__(self) -> bool:
        return bool(self._rules)

    def __repr__(self) -> str:
        return f"Rules({list(self._rules)!r})"


# ---- Built-in rules --------------------------------------------------------------------------

def rule_all_digits() -> Rule:
    """Only ASCII digits; also rejects anything a format mask left behind."""
    return ValidationRule(
        ErrorKind.NON_DIGIT,
        lambda s: digits_only(s) == s,
        "only digits allowed",
    )


def rule_length(n: int = TIN_LENGTH) -> Rule:
    return ValidationRule(ErrorKind.LENGTH, lambda s: len(s) == n, f"need {n} digits")


def rule_not_all_same() -> Rule:
    """Disallow '1111111111', '0000000000' and friends."""
    def check(s: str) -> None:
        if s == "":
            raise TinValidationError(ErrorKind.LENGTH, s, "empty")
        if len(set(s)) == 1:
            raise TinValidationError(
                ErrorKind.ALL_SAME, s, "implausible: all digits identical or zero"
            )
    return check


def rule_checksum() -> Rule:
    """Turn a checksum mismatch into a hard failure (off by default)."""
    return ValidationRule(ErrorKind.CHECKSUM, checksum_ok, "checksum mismatch")


def structural_rules() -> Rules:
    # Order matters: digit content, then length, then degenerate values.
    return Rules().add(
        rule_all_digits(),
        rule_length(TIN_LENGTH),
        rule_not_all_same(),
    )


# ---- Registry of named rules -----------------------------------------------------------------

# Map rule names (as used in YAML) to factories.
RULES: Dict[str, Callable[[], Rule]] = {
    "all_digits": rule_all_digits,
    "not_all_same": rule_not_all_same,
    "checksum": rule_checksum,
}


def named_rules(names: Iterable[str]) -> List[Rule]:
    """
    Build rules from registry names, in order. Unknown names raise ValueError.
    """
    out: List[Rule] = []
    for name in names:
        factory = RULES.get(name)
        if factory is None:
            raise ValueError(f"unknown rule {name!r}; known: {', '.join(sorted(RULES))}")
        out.append(factory())
    return out

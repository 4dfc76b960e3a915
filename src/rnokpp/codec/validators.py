"""
Digit normalizer and the RNOKPP checksum.

Why this file exists
--------------------
People type identifiers with spaces, dashes and stray punctuation
("3036 045 681", "3036-045681"). The normalizer reduces any input to its digits
so the rest of the pipeline only ever sees a canonical string. The checksum is
the cheap, deterministic check that rejects most mistyped numbers.

Design principles
-----------------
- **Pure functions**: no configuration, no state, no I/O.
- **Never raise**: malformed input yields "" or False; the rule pipeline turns
  that into a structured error.
"""

from __future__ import annotations

# Position-aligned weights for digits 1..9.
WEIGHTS = (-1, 5, 7, 9, 4, 6, 10, 5, 7)

TIN_LENGTH = 10


def is_ascii_digit(ch: str) -> bool:
    # str.isdigit() also accepts superscripts and other scripts' digits.
    return "0" <= ch <= "9"


def digits_only(s: str) -> str:
    """
    Return only the ASCII digit characters from a string, in order.

    "3036-045 681" -> "3036045681"; "12A" -> "12"; "" -> "".
    """
    return "".join(ch for ch in s if is_ascii_digit(ch))


def checksum_ok(tin: str) -> bool:
    """
    Validate a 10-digit RNOKPP against its control digit.

    The first nine digits are multiplied by WEIGHTS and summed; the control
    digit is ``(sum mod 11) mod 10``.

    Args:
        tin: Normalized TIN.

    Returns:
        True if the 10th digit matches; False otherwise, including for inputs
        that are not exactly ten ASCII digits.
    """
    if len(tin) != TIN_LENGTH or not all(is_ascii_digit(ch) for ch in tin):
        return False

    total = 0
    for ch, weight in zip(tin[:9], WEIGHTS):
        total += (ord(ch) - 48) * weight  # '0' -> 48

    # Python's % already lands in [0, 10] for a positive modulus.
    ctrl = total % 11
    return ctrl % 10 == ord(tin[9]) - 48

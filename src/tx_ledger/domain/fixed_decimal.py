from __future__ import annotations

import re
from dataclasses import dataclass
from typing import ClassVar

from .errors import AmountUnderflow, MalformedAmount

FRACTION_DIGITS = 4
_SCALE = 10**FRACTION_DIGITS


@dataclass(frozen=True, slots=True, order=True)
class FixedDecimal:
    """Non-negative decimal with exactly four fractional digits.

    Ordering compares ``integer_part`` first, then ``fractional_part``.
    Subtraction below zero raises ``AmountUnderflow``; callers compare before
    subtracting when a shortfall is an expected outcome.
    """

    integer_part: int = 0
    fractional_part: int = 0

    ZERO: ClassVar[FixedDecimal]

    def __post_init__(self) -> None:
        if self.integer_part < 0:
            raise ValueError("FixedDecimal integer_part must be non-negative")
        if not 0 <= self.fractional_part < _SCALE:
            raise ValueError(f"FixedDecimal fractional_part must be in [0, {_SCALE})")

    def __add__(self, other: FixedDecimal) -> FixedDecimal:
        if not isinstance(other, FixedDecimal):
            return NotImplemented
        integer = self.integer_part + other.integer_part
        fraction = self.fractional_part + other.fractional_part
        if fraction >= _SCALE:
            fraction -= _SCALE
            integer += 1
        return FixedDecimal(integer, fraction)

    def __sub__(self, other: FixedDecimal) -> FixedDecimal:
        if not isinstance(other, FixedDecimal):
            return NotImplemented
        if self < other:
            raise AmountUnderflow(self, other)
        integer = self.integer_part - other.integer_part
        fraction = self.fractional_part - other.fractional_part
        if fraction < 0:
            # Borrow one whole unit.
            fraction += _SCALE
            integer -= 1
        return FixedDecimal(integer, fraction)

    def __str__(self) -> str:
        return f"{self.integer_part}.{self.fractional_part:0{FRACTION_DIGITS}d}"

    @classmethod
    def parse(cls, text: str) -> FixedDecimal:
        return parse_fixed_decimal(text)


FixedDecimal.ZERO = FixedDecimal(0, 0)


# Whole units, then an optional point followed by one to four digits.
_AMOUNT_PATTERN = re.compile(r"(\d+)(?:\.(\d{1,%d}))?" % FRACTION_DIGITS, re.ASCII)


def parse_fixed_decimal(text: str) -> FixedDecimal:
    if not isinstance(text, str):
        raise MalformedAmount(text)

    match = _AMOUNT_PATTERN.fullmatch(text)
    if match is None:
        raise MalformedAmount(text)

    integer_text, fraction_text = match.groups()
    # Short fractions are right-padded: "1.12" means 1.1200.
    fraction = int((fraction_text or "").ljust(FRACTION_DIGITS, "0"))
    try:
        integer = int(integer_text)
    except ValueError as exc:
        # Digit strings past the interpreter's int conversion limit.
        raise MalformedAmount(text) from exc
    return FixedDecimal(integer, fraction)


def format_fixed_decimal(value: FixedDecimal) -> str:
    return str(value)

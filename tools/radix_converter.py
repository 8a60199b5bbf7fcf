#!/usr/bin/env python3
"""
radix_converter.py - Unsigned integer <-> digit string in bases 2..36

Digits are 0-9 then A-Z. Input is case-insensitive, output is uppercase.
Only bare digit strings are accepted: no sign, no 0x/0b/0o prefix.

Usage:
    from radix_converter import to_string, parse

    to_string(255, 16)           # 'FF'
    to_string(5, 2, 8)           # '00000101'
    parse('ff', 16).value        # 255
    parse('12', 2).error         # InvalidNumeral(base=2)
    parse('99999', 10, 16383).error   # OutOfRange(0, 16383)
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from conversion_errors import BASE_LABELS, InvalidNumeral, OutOfRange, Result


logger = logging.getLogger(__name__)

DIGITS = '0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ'
MIN_BASE = 2
MAX_BASE = 36

# Character -> digit value, both cases
DIGIT_VALUES = {c: i for i, c in enumerate(DIGITS)}
DIGIT_VALUES.update({c.lower(): i for i, c in enumerate(DIGITS)})

BASE_ALIASES = {
    'bin': 2, 'binary': 2,
    'oct': 8, 'octal': 8,
    'dec': 10, 'decimal': 10,
    'hex': 16, 'hexadecimal': 16,
}


def check_base(base: int) -> int:
    """Return base unchanged, or raise ValueError if outside 2..36."""
    if isinstance(base, bool) or not isinstance(base, int):
        raise ValueError(f"Base must be an integer, got {base!r}")
    if base < MIN_BASE or base > MAX_BASE:
        raise ValueError(f"Base must be {MIN_BASE}-{MAX_BASE}, got {base}")
    return base


def resolve_base(name: str) -> int:
    """Resolve 'hex', 'binary', '16', ... to a numeral base."""
    key = str(name).strip().lower()
    if key in BASE_ALIASES:
        return BASE_ALIASES[key]
    try:
        return check_base(int(key, 10))
    except ValueError:
        raise ValueError(f"Unknown base: {name!r}") from None


def to_string(value: int, base: int, min_width: Optional[int] = None) -> str:
    """
    Convert a non-negative integer to its base-`base` digit string.

    Left-pads with '0' up to `min_width`; a longer natural representation
    is never truncated.
    """
    check_base(base)
    if value < 0:
        raise ValueError(f"Cannot convert negative value {value}")

    digits = []
    while value:
        value, rem = divmod(value, base)
        digits.append(DIGITS[rem])
    text = ''.join(reversed(digits)) or '0'

    if min_width is not None:
        text = text.rjust(min_width, '0')
    return text


def parse(text: str, base: int, max_value: Optional[int] = None) -> Result:
    """
    Parse a bare digit string in `base`. Fails with InvalidNumeral(base).

    With `max_value`, accumulation stops as soon as the value exceeds it and
    the result fails with OutOfRange(0, max_value). Digits are checked first,
    so a bad digit is always reported as InvalidNumeral.
    """
    check_base(base)
    clean = str(text).strip()
    if not clean:
        return Result.fail(InvalidNumeral(base))

    digits = []
    for ch in clean:
        digit = DIGIT_VALUES.get(ch)
        if digit is None or digit >= base:
            logger.debug("Rejected %r: %r is not a base-%d digit", clean[:32], ch, base)
            return Result.fail(InvalidNumeral(base))
        digits.append(digit)

    value = 0
    for digit in digits:
        value = value * base + digit
        if max_value is not None and value > max_value:
            logger.debug("Rejected %r: exceeds %d", clean[:32], max_value)
            return Result.fail(OutOfRange(0, max_value))
    return Result.ok(value)


def convert(text: str, from_base: int, to_base: int) -> Result:
    """Re-express a digit string from one base in another."""
    parsed = parse(text, from_base)
    if not parsed.success:
        return parsed
    return Result.ok(to_string(parsed.value, to_base))


@dataclass(frozen=True)
class RadixBreakdown:
    """One value shown in the four common bases."""
    input: str
    input_base: int
    decimal: int

    @property
    def binary(self) -> str:
        return to_string(self.decimal, 2)

    @property
    def octal(self) -> str:
        return to_string(self.decimal, 8)

    @property
    def hex(self) -> str:
        return to_string(self.decimal, 16)

    @property
    def input_name(self) -> str:
        return BASE_LABELS.get(self.input_base, f'base-{self.input_base}')

    def in_base(self, base: int) -> str:
        return to_string(self.decimal, base)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'input': self.input,
            'input_base': self.input_base,
            'input_name': self.input_name,
            'decimal': self.decimal,
            'binary': self.binary,
            'octal': self.octal,
            'hex': self.hex,
        }


def breakdown(text: str, from_base: int) -> Result:
    """Parse `text` and return a RadixBreakdown of the value."""
    parsed = parse(text, from_base)
    if not parsed.success:
        return parsed
    return Result.ok(RadixBreakdown(
        input=str(text).strip(),
        input_base=from_base,
        decimal=parsed.value,
    ))

#!/usr/bin/env python3
"""
conversion_errors.py - Error values and result container for code conversion

Every conversion in the point code tools returns a Result instead of raising.
A failed Result carries exactly one ConversionError describing what was wrong
with the input, with enough context to render a message for the user.

Error taxonomy:
    InvalidNumeral      - empty input or a digit outside the stated base
    OutOfRange          - integer outside [min, max] for the target width
    MalformedFieldText  - wrong number of '-' separated fields
    UnknownSchema       - schema id not in the catalog (MalformedFieldText kind)
    FieldOverflow       - one field's value exceeds its bit width

Usage:
    from conversion_errors import Result, OutOfRange

    result = Result.fail(OutOfRange(0, 16383))
    if not result.success:
        print(result.error.message)    # Invalid (Range: 0-16383)
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional


BASE_LABELS = {
    2: 'binary',
    8: 'octal',
    10: 'decimal',
    16: 'hexadecimal',
}


@dataclass(frozen=True)
class ConversionError:
    """Base class for all conversion error values."""

    @property
    def kind(self) -> str:
        return type(self).__name__

    @property
    def message(self) -> str:
        return 'Invalid input'

    def to_dict(self) -> Dict[str, Any]:
        data = {'error': self.kind, 'message': self.message}
        data.update(self.__dict__)
        return data

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True)
class InvalidNumeral(ConversionError):
    """Input is empty or holds a character that is not a digit of `base`."""
    base: int

    @property
    def message(self) -> str:
        label = BASE_LABELS.get(self.base, f'base-{self.base}')
        return f'Invalid {label} number'


@dataclass(frozen=True)
class OutOfRange(ConversionError):
    """Integer lies outside the inclusive range [minimum, maximum]."""
    minimum: int
    maximum: int

    @property
    def message(self) -> str:
        return f'Invalid (Range: {self.minimum}-{self.maximum})'


@dataclass(frozen=True)
class MalformedFieldText(ConversionError):
    """Formatted text has the wrong number of fields."""
    expected_field_count: int
    got_field_count: int

    @property
    def message(self) -> str:
        return (f'Invalid formatted input: expected {self.expected_field_count} '
                f'fields, got {self.got_field_count}')


@dataclass(frozen=True)
class UnknownSchema(MalformedFieldText):
    """Schema id not found in the catalog."""
    schema_id: str = ''

    @property
    def message(self) -> str:
        return f'Invalid format: unknown schema {self.schema_id!r}'


@dataclass(frozen=True)
class FieldOverflow(ConversionError):
    """Field `field_index` (zero based) exceeds `max_value`."""
    field_index: int
    max_value: int

    @property
    def message(self) -> str:
        return f'Part {self.field_index + 1} exceeds range (0-{self.max_value})'


class ConversionFailed(ValueError):
    """Raised by Result.unwrap() when the result holds an error."""

    def __init__(self, error: ConversionError):
        super().__init__(error.message)
        self.error = error


@dataclass(frozen=True)
class Result:
    """Outcome of a conversion: a value, or an error, never both."""
    value: Any = None
    error: Optional[ConversionError] = None

    @classmethod
    def ok(cls, value: Any) -> 'Result':
        return cls(value=value)

    @classmethod
    def fail(cls, error: ConversionError) -> 'Result':
        return cls(error=error)

    @property
    def success(self) -> bool:
        return self.error is None

    def unwrap(self) -> Any:
        if self.error is not None:
            raise ConversionFailed(self.error)
        return self.value

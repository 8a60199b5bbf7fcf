#!/usr/bin/env python3
"""
field_codec.py - Encode integers into field-separated point codes and back

One generic routine serves every layout: the value is written as a
zero-padded binary string of the schema's total width, sliced left to right
by the field widths, and each slice is shown as a decimal number.

    1234 under 7-7:
        binary  00010011010010
        slices  0001001 | 1010010
        text    9-82

Usage:
    from bitfield_schema import default_registry
    from field_codec import encode, decode

    pc77 = default_registry().lookup('7-7')
    encode(1234, pc77).value.formatted_text     # '9-82'
    decode('9-82', pc77).value.decimal          # 1234
    decode('128-0', pc77).error                 # FieldOverflow(0, 127)
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Sequence, Tuple

from bitfield_schema import BitFieldSchema
from conversion_errors import (
    FieldOverflow, InvalidNumeral, MalformedFieldText, OutOfRange, Result,
)
import radix_converter


logger = logging.getLogger(__name__)

FIELD_SEPARATOR = '-'


@dataclass(frozen=True)
class CodedValue:
    """A value and its representations under one schema."""
    schema_id: str
    decimal: int
    binary: str
    hex: str
    fields_values: Tuple[int, ...]
    field_widths: Tuple[int, ...]

    @property
    def formatted_text(self) -> str:
        return FIELD_SEPARATOR.join(str(v) for v in self.fields_values)

    @property
    def total_bits(self) -> int:
        return len(self.binary)

    @property
    def field_bits(self) -> List[str]:
        """Binary slice for each field, e.g. ['0001001', '1010010']."""
        return split_binary(self.binary, self.field_widths)

    @property
    def unpadded_binary(self) -> str:
        return self.binary.lstrip('0') or '0'

    @property
    def octal(self) -> str:
        return radix_converter.to_string(self.decimal, 8)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'schema': self.schema_id,
            'decimal': self.decimal,
            'hex': self.hex,
            'octal': self.octal,
            'binary': self.binary,
            'formatted': self.formatted_text,
            'fields': list(self.fields_values),
            'field_bits': self.field_bits,
        }


def split_binary(binary: str, widths: Sequence[int]) -> List[str]:
    """Slice a bit string into consecutive parts of the given widths."""
    parts = []
    offset = 0
    for width in widths:
        parts.append(binary[offset:offset + width])
        offset += width
    return parts


def _coded_value(value: int, binary: str, fields_values: List[int],
                 schema: BitFieldSchema) -> CodedValue:
    return CodedValue(
        schema_id=schema.id,
        decimal=value,
        binary=binary,
        hex=radix_converter.to_string(value, 16),
        fields_values=tuple(fields_values),
        field_widths=schema.field_widths,
    )


def encode(value: int, schema: BitFieldSchema) -> Result:
    """Encode an unsigned integer as the schema's formatted text."""
    if isinstance(value, bool) or not isinstance(value, int) \
            or value < 0 or value > schema.max_value:
        logger.debug("Value %r out of range for %s", value, schema.id)
        return Result.fail(OutOfRange(0, schema.max_value))

    binary = radix_converter.to_string(value, 2, schema.total_bits)
    fields_values = [radix_converter.parse(part, 2).value
                     for part in split_binary(binary, schema.field_widths)]
    return Result.ok(_coded_value(value, binary, fields_values, schema))


def decode(text: str, schema: BitFieldSchema) -> Result:
    """Decode 'a-b-c' formatted text back to its integer."""
    parts = str(text).strip().split(FIELD_SEPARATOR)
    if len(parts) != schema.field_count:
        return Result.fail(MalformedFieldText(schema.field_count, len(parts)))

    bits = []
    fields_values = []
    for i, part in enumerate(parts):
        field_max = schema.field_max(i)
        parsed = radix_converter.parse(part, 10, field_max)
        if isinstance(parsed.error, OutOfRange):
            logger.debug("Field %d exceeds %d for %s", i, field_max, schema.id)
            return Result.fail(FieldOverflow(i, field_max))
        if not parsed.success:
            return Result.fail(InvalidNumeral(10))
        fields_values.append(parsed.value)
        bits.append(radix_converter.to_string(parsed.value, 2, schema.field_widths[i]))

    binary = ''.join(bits)
    value = radix_converter.parse(binary, 2).value
    return Result.ok(_coded_value(value, binary, fields_values, schema))


class FieldCodec:
    """Codec bound to a single schema."""

    def __init__(self, schema: BitFieldSchema):
        self.schema = schema

    def encode(self, value: int) -> Result:
        return encode(value, self.schema)

    def decode(self, text: str) -> Result:
        return decode(text, self.schema)

    def __repr__(self) -> str:
        return f"FieldCodec({self.schema.id!r})"

#!/usr/bin/env python3
"""
point_code_converter.py - Convert point codes between representations

Accepts a value as decimal, hexadecimal, binary, octal or formatted text
under some schema, and produces its representation under a target schema.
Formatted input may use a different schema than the target as long as both
have the same total width, e.g. an ANSI 8-8-8 code read back out as a
Russian 5-8-11 code.

Usage:
    from point_code_converter import ConversionFacade, InputRepresentation

    facade = ConversionFacade()
    facade.convert('1234', InputRepresentation.DECIMAL, '7-7').value.formatted_text
    # '9-82'

    facade.convert('75-37-103', 'formatted', 'Russian 5-8-11',
                   input_schema_id='ANSI 8-8-8')

    facade.all_representations(1234, 14).value
    # [('7-7 (ITU-T)', '9-82'), ('6-8', '4-210'), ...]
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Union

from bitfield_schema import BitFieldSchema, SchemaRegistry, default_registry
from conversion_errors import OutOfRange, Result, UnknownSchema
from field_codec import CodedValue, FIELD_SEPARATOR, decode, encode
import radix_converter


logger = logging.getLogger(__name__)


class InputRepresentation(Enum):
    DECIMAL = 'decimal'
    HEXADECIMAL = 'hexadecimal'
    BINARY = 'binary'
    OCTAL = 'octal'
    FORMATTED = 'formatted'


RADIX_OF = {
    InputRepresentation.DECIMAL: 10,
    InputRepresentation.HEXADECIMAL: 16,
    InputRepresentation.BINARY: 2,
    InputRepresentation.OCTAL: 8,
}


@dataclass(frozen=True)
class ConversionReport:
    """Coded value under the target schema plus the same-width comparison table."""
    result: CodedValue
    schema_name: str
    description: str = ''
    comparisons: List[Tuple[str, str]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        data = self.result.to_dict()
        data['schema_name'] = self.schema_name
        if self.description:
            data['description'] = self.description
        data['all_conversions'] = [
            {'schema': name, 'formatted': text} for name, text in self.comparisons
        ]
        return data


class ConversionFacade:
    """Conversion entry points over a schema registry."""

    def __init__(self, registry: Optional[SchemaRegistry] = None):
        self.registry = registry if registry is not None else default_registry()

    def _schema(self, schema_id: str) -> Union[BitFieldSchema, UnknownSchema]:
        schema = self.registry.lookup(schema_id)
        if schema is None:
            return UnknownSchema(0, 0, schema_id=schema_id)
        return schema

    def convert(self, text: str,
                representation: Union[InputRepresentation, str],
                target_schema_id: str,
                input_schema_id: Optional[str] = None) -> Result:
        """
        Convert `text` given in `representation` to the target schema.

        For formatted input the text is decoded under `input_schema_id`
        (default: the target schema) and re-encoded under the target.
        `input_schema_id` with any other representation raises ValueError.
        Numeric input stops parsing as soon as it passes the target's maximum.
        """
        representation = InputRepresentation(representation)
        target = self._schema(target_schema_id)
        if isinstance(target, UnknownSchema):
            return Result.fail(target)

        if representation is InputRepresentation.FORMATTED:
            source = self._schema(input_schema_id or target_schema_id)
            if isinstance(source, UnknownSchema):
                got = len(str(text).strip().split(FIELD_SEPARATOR))
                return Result.fail(UnknownSchema(0, got, schema_id=source.schema_id))
            if source.total_bits != target.total_bits:
                logger.debug("Width mismatch: %s is %d-bit, %s is %d-bit",
                             source.id, source.total_bits, target.id, target.total_bits)
                return Result.fail(OutOfRange(0, target.max_value))
            decoded = decode(text, source)
            if not decoded.success:
                return decoded
            value = decoded.value.decimal
        else:
            if input_schema_id is not None:
                raise ValueError(f"input_schema_id applies only to formatted input, "
                                 f"not {representation.value}")
            base = RADIX_OF[representation]
            parsed = radix_converter.parse(text, base, target.max_value)
            if not parsed.success:
                return parsed
            value = parsed.value

        return encode(value, target)

    def all_representations(self, value: int, total_bits: int) -> Result:
        """
        Formatted text of `value` under every schema of `total_bits`, in catalog order.

        A width no schema has (including zero or negative) gives an empty list.
        """
        if isinstance(total_bits, bool) or not isinstance(total_bits, int) or total_bits <= 0:
            return Result.ok([])

        max_value = (1 << total_bits) - 1
        if isinstance(value, bool) or not isinstance(value, int) \
                or value < 0 or value > max_value:
            return Result.fail(OutOfRange(0, max_value))

        rows = []
        for schema in self.registry.all_for_width(total_bits):
            rows.append((schema.name, encode(value, schema).value.formatted_text))
        return Result.ok(rows)

    def describe(self, text: str,
                 representation: Union[InputRepresentation, str],
                 target_schema_id: str,
                 input_schema_id: Optional[str] = None) -> Result:
        """convert() plus the comparison table for the target's width."""
        converted = self.convert(text, representation, target_schema_id, input_schema_id)
        if not converted.success:
            return converted

        coded = converted.value
        target = self.registry.lookup(target_schema_id)
        table = self.all_representations(coded.decimal, target.total_bits)
        return Result.ok(ConversionReport(
            result=coded,
            schema_name=target.name,
            description=target.description,
            comparisons=table.value,
        ))


def convert(text: str, representation: Union[InputRepresentation, str],
            target_schema_id: str, input_schema_id: Optional[str] = None) -> Result:
    """Module-level shortcut using the built-in catalog."""
    return ConversionFacade().convert(text, representation, target_schema_id, input_schema_id)


def all_representations(value: int, total_bits: int) -> Result:
    """Module-level shortcut using the built-in catalog."""
    return ConversionFacade().all_representations(value, total_bits)

"""
Tests for the conversion facade: input parsing, cross-standard conversion
and the all-conversions table.
"""

import pytest
import sys
from pathlib import Path

# Add tools to path
sys.path.insert(0, str(Path(__file__).parent.parent / 'tools'))

from bitfield_schema import BitFieldSchema, SchemaRegistry
from conversion_errors import (
    ConversionFailed, FieldOverflow, InvalidNumeral, MalformedFieldText,
    OutOfRange, UnknownSchema,
)
from point_code_converter import (
    ConversionFacade, InputRepresentation, all_representations, convert,
)


class TestConvert:
    """Tests for ConversionFacade.convert()."""

    def test_decimal(self, facade):
        result = facade.convert('1234', InputRepresentation.DECIMAL, '7-7')
        assert result.success
        assert result.value.formatted_text == '9-82'

    def test_representation_by_name(self, facade):
        assert facade.convert('1234', 'decimal', '7-7').value.formatted_text == '9-82'

    def test_hexadecimal(self, facade):
        coded = facade.convert('1F4A', InputRepresentation.HEXADECIMAL, '7-7').value
        assert coded.decimal == 8010
        assert coded.formatted_text == '62-74'

    def test_hexadecimal_lowercase(self, facade):
        assert facade.convert('4d2', 'hexadecimal', '7-7').value.formatted_text == '9-82'

    def test_binary_and_octal(self, facade):
        assert facade.convert('10011010010', 'binary', '7-7').value.decimal == 1234
        assert facade.convert('2322', 'octal', '7-7').value.decimal == 1234

    def test_formatted_same_schema(self, facade):
        coded = facade.convert('9-82', InputRepresentation.FORMATTED, '7-7').value
        assert coded.decimal == 1234
        assert coded.formatted_text == '9-82'

    def test_formatted_between_14_bit_layouts(self, facade):
        coded = facade.convert('9-82', 'formatted', '3-8-3', input_schema_id='7-7').value
        assert coded.formatted_text == '0-154-2'
        assert coded.schema_id == '3-8-3'

    def test_ansi_to_russian(self, facade):
        coded = facade.convert('75-37-103', 'formatted', 'Russian 5-8-11',
                               input_schema_id='ANSI 8-8-8').value
        assert coded.decimal == 4924775
        assert coded.formatted_text == '9-100-1383'

    def test_japanese_to_brazilian(self, facade):
        coded = facade.convert('2-6-18', 'formatted', '3-8-5', input_schema_id='7-4-5').value
        assert coded.decimal == 1234
        assert coded.formatted_text == '0-38-18'

    def test_width_mismatch(self, facade):
        result = facade.convert('0-0-1', 'formatted', 'Japanese 7-4-5',
                                input_schema_id='ANSI 8-8-8')
        assert result.error == OutOfRange(0, 65535)

    def test_width_mismatch_even_for_small_values(self, facade):
        result = facade.convert('0-1', 'formatted', 'ANSI 8-8-8', input_schema_id='7-7')
        assert result.error == OutOfRange(0, 16777215)

    def test_decimal_out_of_range(self, facade):
        result = facade.convert('16384', 'decimal', '7-7')
        assert result.error == OutOfRange(0, 16383)
        assert result.error.message == 'Invalid (Range: 0-16383)'

    def test_24_bit_range(self, facade):
        assert facade.convert('16777215', 'decimal', '8-8-8').value.formatted_text == '255-255-255'
        assert facade.convert('16777216', 'decimal', '8-8-8').error == OutOfRange(0, 16777215)

    @pytest.mark.parametrize("text,rep,base", [
        ('', 'decimal', 10),
        ('   ', 'hexadecimal', 16),
        ('-1', 'decimal', 10),
        ('12a', 'decimal', 10),
        ('0x4D2', 'hexadecimal', 16),
        ('102', 'binary', 2),
        ('9', 'octal', 8),
    ])
    def test_invalid_numeral(self, facade, text, rep, base):
        assert facade.convert(text, rep, '7-7').error == InvalidNumeral(base)

    def test_formatted_errors(self, facade):
        assert facade.convert('1-2-3', 'formatted', '7-7').error == MalformedFieldText(2, 3)
        assert facade.convert('128-0', 'formatted', '7-7').error == FieldOverflow(0, 127)
        assert facade.convert('x-0', 'formatted', '7-7').error == InvalidNumeral(10)

    def test_unknown_target(self, facade):
        result = facade.convert('1234', 'decimal', '7-8')
        assert isinstance(result.error, UnknownSchema)
        assert isinstance(result.error, MalformedFieldText)
        assert result.error.schema_id == '7-8'
        assert "unknown schema '7-8'" in result.error.message

    def test_unknown_input_schema(self, facade):
        result = facade.convert('1-2-3', 'formatted', '7-7', input_schema_id='1-2-3')
        assert isinstance(result.error, UnknownSchema)
        assert result.error.got_field_count == 3

    @pytest.mark.parametrize("rep,digit", [
        ('decimal', '9'), ('hexadecimal', 'F'), ('binary', '1'), ('octal', '7'),
    ])
    def test_huge_numeric_input_out_of_range(self, facade, rep, digit):
        result = facade.convert(digit * 100000, rep, '7-7')
        assert result.error == OutOfRange(0, 16383)

    def test_huge_input_bad_digit_still_invalid(self, facade):
        assert facade.convert('9' * 100000 + 'x', 'decimal', '7-7').error == InvalidNumeral(10)

    def test_huge_formatted_field_overflows(self, facade):
        result = facade.convert('9' * 100000 + '-0', 'formatted', '7-7')
        assert result.error == FieldOverflow(0, 127)

    def test_input_schema_only_for_formatted(self, facade):
        with pytest.raises(ValueError, match="only to formatted input"):
            facade.convert('1234', 'decimal', '7-7', input_schema_id='nope')

    def test_invalid_representation(self, facade):
        with pytest.raises(ValueError):
            facade.convert('1', 'roman', '7-7')

    def test_module_shortcut(self):
        assert convert('1234', 'decimal', 'pc77').value.formatted_text == '9-82'


class TestAllRepresentations:
    """Tests for the all-conversions table."""

    def test_14_bit_table(self, facade):
        rows = facade.all_representations(1234, 14).value
        assert rows == [
            ('7-7 (ITU-T)', '9-82'),
            ('6-8', '4-210'),
            ('5-9', '2-210'),
            ('8-6', '19-18'),
            ('9-5', '38-18'),
            ('4-3-7', '1-1-82'),
            ('3-8-3 (ITU-T)', '0-154-2'),
            ('4-3-4-3', '1-1-10-2'),
            ('4-4-6', '1-3-18'),
        ]

    def test_24_bit_table(self, facade):
        rows = facade.all_representations(1234567, 24).value
        assert rows == [
            ('ANSI (8-8-8)', '18-214-135'),
            ('Chinese (8-8-8)', '18-214-135'),
            ('Russian (5-8-11)', '2-90-1671'),
        ]

    def test_width_scoped(self, facade):
        names = [name for name, _ in facade.all_representations(0, 16).value]
        assert names == ['Japanese (7-4-5)', 'Brazilian (3-8-5)']

    def test_out_of_range(self, facade):
        assert facade.all_representations(16384, 14).error == OutOfRange(0, 16383)
        assert facade.all_representations(-1, 16).error == OutOfRange(0, 65535)

    def test_unregistered_width(self, facade):
        assert facade.all_representations(5, 8).value == []

    @pytest.mark.parametrize("bits", [0, -1, -14])
    def test_non_positive_width(self, facade, bits):
        result = facade.all_representations(0, bits)
        assert result.success
        assert result.value == []

    def test_module_shortcut(self):
        assert all_representations(0, 14).value[0] == ('7-7 (ITU-T)', '0-0')


class TestDescribe:
    """Tests for the combined report."""

    def test_report(self, facade):
        report = facade.describe('75-37-103', 'formatted', 'ANSI 8-8-8').value
        assert report.schema_name == 'ANSI (8-8-8)'
        assert report.description == 'North America: Network-Cluster-Member'
        assert report.result.decimal == 4924775
        assert len(report.comparisons) == 3

    def test_report_to_dict(self, facade):
        data = facade.describe('1234', 'decimal', '7-7').value.to_dict()
        assert data['formatted'] == '9-82'
        assert data['schema_name'] == '7-7 (ITU-T)'
        assert data['all_conversions'][1] == {'schema': '6-8', 'formatted': '4-210'}

    def test_report_error(self, facade):
        assert facade.describe('99999', 'decimal', '7-7').error == OutOfRange(0, 16383)

    def test_report_via_alias(self, facade):
        report = facade.describe('1234567', 'decimal', '8-8-8').value
        assert report.schema_name == 'ANSI (8-8-8)'


class TestCustomRegistry:
    """The facade works against an injected registry."""

    def test_injected_registry(self):
        registry = SchemaRegistry(name='test')
        registry.register(BitFieldSchema('2-12', '2-12', (2, 12)))
        facade = ConversionFacade(registry)
        assert facade.convert('16383', 'decimal', '2-12').value.formatted_text == '3-4095'
        assert isinstance(facade.convert('1', 'decimal', '7-7').error, UnknownSchema)


class TestResult:
    """Tests for Result.unwrap()."""

    def test_unwrap_ok(self, facade):
        assert facade.convert('1234', 'decimal', '7-7').unwrap().formatted_text == '9-82'

    def test_unwrap_error(self, facade):
        with pytest.raises(ConversionFailed, match=r"Invalid \(Range: 0-16383\)") as exc:
            facade.convert('16384', 'decimal', '7-7').unwrap()
        assert exc.value.error == OutOfRange(0, 16383)

    def test_error_to_dict(self):
        assert FieldOverflow(0, 127).to_dict() == {
            'error': 'FieldOverflow',
            'message': 'Part 1 exceeds range (0-127)',
            'field_index': 0,
            'max_value': 127,
        }

#!/usr/bin/env python3
"""
validate_catalog.py - Validate a point code catalog and run its test vectors

Usage:
    python tools/validate_catalog.py catalog.yaml
    python tools/validate_catalog.py catalog.yaml --verbose
    python tools/validate_catalog.py catalog.yaml --json

Features:
    - Validates catalog syntax (ids, bit widths, declared total width)
    - Runs all embedded test vectors through the converter
    - Reports pass/fail with details
    - Optionally outputs JSON results

Test vector format:
    test_vectors:
      - name: pc77_sample
        schema: 7-7
        input: "1234"
        representation: decimal      # default: decimal
        expected:
          formatted: 9-82
          hex: 4D2
      - name: pc77_field_overflow
        schema: 7-7
        input: 128-0
        representation: formatted
        expected:
          error: FieldOverflow
"""

import argparse
import json
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

sys.path.insert(0, str(Path(__file__).parent))
from bitfield_schema import registry_from_dict, validate_schemas
from point_code_converter import ConversionFacade, InputRepresentation


REPRESENTATIONS = [r.value for r in InputRepresentation]
EXPECTED_KEYS = ('decimal', 'hex', 'binary', 'octal', 'formatted', 'fields', 'error')


@dataclass
class VectorResult:
    """Result of a single test vector."""
    name: str
    passed: bool
    description: str = ""
    schema: str = ""
    input: str = ""
    expected: Dict[str, Any] = field(default_factory=dict)
    actual: Dict[str, Any] = field(default_factory=dict)
    errors: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'passed': self.passed,
            'description': self.description,
            'schema': self.schema,
            'input': self.input,
            'expected': self.expected,
            'actual': self.actual,
            'errors': self.errors,
        }


@dataclass
class ValidationResult:
    """Result of catalog validation."""
    catalog_valid: bool
    catalog_errors: List[str] = field(default_factory=list)
    test_results: List[VectorResult] = field(default_factory=list)

    @property
    def tests_passed(self) -> int:
        return sum(1 for t in self.test_results if t.passed)

    @property
    def tests_failed(self) -> int:
        return sum(1 for t in self.test_results if not t.passed)

    @property
    def total_tests(self) -> int:
        return len(self.test_results)

    @property
    def all_passed(self) -> bool:
        return self.catalog_valid and self.tests_failed == 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'catalog_valid': self.catalog_valid,
            'catalog_errors': self.catalog_errors,
            'tests_passed': self.tests_passed,
            'tests_failed': self.tests_failed,
            'total_tests': self.total_tests,
            'all_passed': self.all_passed,
            'test_results': [t.to_dict() for t in self.test_results],
        }


def validate_vector_entry(tv: Any, i: int, errors: List[str], seen_ids: Dict[str, str]) -> None:
    """Validate one entry of the 'test_vectors' array."""
    if not isinstance(tv, dict):
        errors.append(f"Test vector {i}: must be an object")
        return

    name = tv.get('name', '?')
    for key in ('name', 'schema', 'input', 'expected'):
        if key not in tv:
            errors.append(f"Test vector {i} ({name}): missing '{key}'")

    for key in ('schema', 'input_schema'):
        if key in tv and str(tv[key]) not in seen_ids:
            errors.append(f"Test vector {i} ({name}): '{key}' references unknown schema '{tv[key]}'")

    rep = tv.get('representation', 'decimal')
    if rep not in REPRESENTATIONS:
        errors.append(f"Test vector {i} ({name}): 'representation' must be one of "
                      f"{', '.join(REPRESENTATIONS)}")
    elif 'input_schema' in tv and rep != 'formatted':
        errors.append(f"Test vector {i} ({name}): 'input_schema' requires "
                      f"representation 'formatted'")

    expected = tv.get('expected')
    if expected is not None:
        if not isinstance(expected, dict):
            errors.append(f"Test vector {i} ({name}): 'expected' must be an object")
        else:
            unknown = [k for k in expected if k not in EXPECTED_KEYS]
            if unknown:
                errors.append(f"Test vector {i} ({name}): unknown expected keys {unknown}")


def validate_catalog_structure(catalog: Dict[str, Any]) -> List[str]:
    """Validate catalog structure and return list of errors."""
    errors, seen_ids = validate_schemas(catalog)
    if not isinstance(catalog, dict):
        return errors

    if 'test_vectors' in catalog:
        if not isinstance(catalog['test_vectors'], list):
            errors.append("'test_vectors' must be an array")
        else:
            for i, tv in enumerate(catalog['test_vectors']):
                validate_vector_entry(tv, i, errors, seen_ids)

    return errors


def run_test_vector(facade: ConversionFacade, tv: Dict[str, Any]) -> VectorResult:
    """Run a single test vector and return result."""
    result = VectorResult(
        name=tv.get('name', 'unnamed'),
        passed=False,
        description=tv.get('description', ''),
        schema=str(tv.get('schema', '')),
        input=str(tv.get('input', '')),
        expected=tv.get('expected', {}),
    )

    converted = facade.convert(
        result.input,
        tv.get('representation', 'decimal'),
        result.schema,
        tv.get('input_schema'),
    )

    if converted.success:
        result.actual = converted.value.to_dict()
    else:
        result.actual = converted.error.to_dict()

    expected = result.expected
    if 'error' in expected:
        if converted.success:
            result.errors.append(f"expected error {expected['error']}, "
                                 f"got '{converted.value.formatted_text}'")
        elif converted.error.kind != expected['error']:
            result.errors.append(f"error: expected {expected['error']}, got {converted.error.kind}")
    elif not converted.success:
        result.errors.append(f"Conversion failed: {converted.error.message}")
    else:
        for key, expected_value in expected.items():
            actual_value = result.actual.get(key)
            if key == 'hex' and isinstance(expected_value, str):
                expected_value = expected_value.upper()
            if key in ('binary', 'octal', 'hex', 'formatted'):
                expected_value = str(expected_value)
            if actual_value != expected_value:
                result.errors.append(f"{key}: expected {expected_value!r}, got {actual_value!r}")

    result.passed = len(result.errors) == 0
    return result


def validate_catalog(catalog: Dict[str, Any]) -> ValidationResult:
    """Validate catalog and run all test vectors."""
    result = ValidationResult(catalog_valid=True)

    structure_errors = validate_catalog_structure(catalog)
    if structure_errors:
        result.catalog_valid = False
        result.catalog_errors = structure_errors
        return result

    try:
        registry = registry_from_dict(catalog)
    except ValueError as e:
        result.catalog_valid = False
        result.catalog_errors.append(f"Failed to build catalog: {e}")
        return result

    facade = ConversionFacade(registry)
    for tv in catalog.get('test_vectors', []):
        result.test_results.append(run_test_vector(facade, tv))

    return result


def print_results(result: ValidationResult, verbose: bool = False):
    """Print validation results to console."""
    if result.catalog_valid:
        print("Catalog: VALID")
    else:
        print("Catalog: INVALID")
        for error in result.catalog_errors:
            print(f"  - {error}")
        return

    if result.total_tests == 0:
        print("\nNo test vectors found in catalog.")
        return

    print(f"\nTest Vectors: {result.tests_passed}/{result.total_tests} passed")
    print("-" * 50)

    for tr in result.test_results:
        status = "PASS" if tr.passed else "FAIL"
        symbol = "✓" if tr.passed else "✗"
        print(f"{symbol} {tr.name}: {status}")

        if verbose or not tr.passed:
            if tr.description:
                print(f"    Description: {tr.description}")
            print(f"    Input: {tr.input} ({tr.schema})")
            for error in tr.errors:
                print(f"    ERROR: {error}")
            if verbose and tr.passed:
                print(f"    Expected: {tr.expected}")
                print(f"    Actual: {tr.actual}")
            print()

    print("-" * 50)
    if result.all_passed:
        print(f"PASSED: All {result.total_tests} tests passed")
    else:
        print(f"FAILED: {result.tests_failed} of {result.total_tests} tests failed")


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description='Validate a point code catalog and run its test vectors'
    )
    parser.add_argument('catalog', help='Path to catalog YAML file')
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Show detailed output for all tests')
    parser.add_argument('--json', action='store_true',
                        help='Output results as JSON')
    args = parser.parse_args(argv)

    try:
        with open(args.catalog) as f:
            catalog = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        print(f"Error loading catalog: {e}", file=sys.stderr)
        return 1

    result = validate_catalog(catalog)

    if args.json:
        print(json.dumps(result.to_dict(), indent=2))
    else:
        print(f"Validating: {args.catalog}")
        print("=" * 50)
        print_results(result, args.verbose)

    return 0 if result.all_passed else 1


if __name__ == '__main__':
    sys.exit(main())

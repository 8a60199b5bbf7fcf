#!/usr/bin/env python3
"""
point_code_cli.py - Command line point code and radix converter

Usage:
    python tools/point_code_cli.py base FF --from hex --to dec
    python tools/point_code_cli.py encode 1234 --schema 7-7
    python tools/point_code_cli.py encode 1F4A --hex --schema 7-7
    python tools/point_code_cli.py decode 9-82 --schema 7-7
    python tools/point_code_cli.py convert 75-37-103 --input-format formatted \\
        --input-schema "ANSI 8-8-8" --schema "Russian 5-8-11"
    python tools/point_code_cli.py table 8010 --bits 14
    python tools/point_code_cli.py schemas --bits 24

Global options:
    --catalog FILE   YAML catalog to use instead of the built-in one
                     (default: $POINT_CODE_CATALOG if set)
    --json           Print results as JSON
    -v, --verbose    Debug logging on stderr
"""

import argparse
import json
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional

import yaml

sys.path.insert(0, str(Path(__file__).parent))
from bitfield_schema import SchemaRegistry, default_registry, load_catalog
from conversion_errors import Result
from point_code_converter import ConversionFacade, InputRepresentation
import radix_converter


logger = logging.getLogger(__name__)

CATALOG_ENV = 'POINT_CODE_CATALOG'


def load_registry(path: Optional[str]) -> SchemaRegistry:
    """Registry from --catalog, then $POINT_CODE_CATALOG, then the built-in catalog."""
    path = path or os.environ.get(CATALOG_ENV)
    if path:
        logger.debug("Using catalog %s", path)
        return load_catalog(path)
    return default_registry()


def fail(result: Result, as_json: bool) -> int:
    """Report a failed result and return the exit status. The message always goes to stderr."""
    if as_json:
        print(json.dumps(result.error.to_dict(), indent=2))
    print(f"Error: {result.error.message}", file=sys.stderr)
    return 1


def positive_int(text: str) -> int:
    value = int(text)
    if value <= 0:
        raise argparse.ArgumentTypeError(f"must be a positive integer, got {value}")
    return value


def print_coded(data: dict) -> None:
    print(f"Formatted: {data['formatted']}")
    print(f"Decimal:   {data['decimal']}")
    print(f"Hex:       {data['hex']}")
    print(f"Binary:    {data['binary']}")
    print(f"Fields:    {' | '.join(data['field_bits'])}")


def cmd_base(args, facade: ConversionFacade) -> int:
    from_base = radix_converter.resolve_base(args.from_base)
    to_base = radix_converter.resolve_base(args.to_base)

    result = radix_converter.breakdown(args.value, from_base)
    if not result.success:
        return fail(result, args.json)

    info = result.value
    output = info.in_base(to_base)
    if args.json:
        data = info.to_dict()
        data['output'] = output
        data['output_base'] = to_base
        print(json.dumps(data, indent=2))
        return 0

    print(output)
    if not args.quiet:
        print(f"# Decimal: {info.decimal}", file=sys.stderr)
        print(f"# Binary:  {info.binary}", file=sys.stderr)
        print(f"# Octal:   {info.octal}", file=sys.stderr)
        print(f"# Hex:     {info.hex}", file=sys.stderr)
    return 0


def run_convert(args, facade: ConversionFacade, representation: str,
                input_schema: Optional[str], quiet_decimal: bool = False) -> int:
    result = facade.describe(args.value, representation, args.schema, input_schema)
    if not result.success:
        return fail(result, args.json)

    report = result.value
    if args.json:
        print(json.dumps(report.to_dict(), indent=2))
        return 0

    if args.quiet:
        print(report.result.decimal if quiet_decimal else report.result.formatted_text)
        return 0

    print(f"Schema:    {report.schema_name}")
    if report.description:
        print(f"           {report.description}")
    print_coded(report.result.to_dict())
    if args.all:
        print()
        print(f"All {report.result.total_bits}-bit conversions:")
        for name, text in report.comparisons:
            print(f"  {name:<20} {text}")
    return 0


def cmd_encode(args, facade: ConversionFacade) -> int:
    representation = 'hexadecimal' if args.hex else 'decimal'
    return run_convert(args, facade, representation, None)


def cmd_decode(args, facade: ConversionFacade) -> int:
    return run_convert(args, facade, 'formatted', None, quiet_decimal=True)


def cmd_convert(args, facade: ConversionFacade) -> int:
    return run_convert(args, facade, args.input_format, args.input_schema)


def cmd_table(args, facade: ConversionFacade) -> int:
    base = 16 if args.hex else 10
    parsed = radix_converter.parse(args.value, base, (1 << args.bits) - 1)
    if not parsed.success:
        return fail(parsed, args.json)

    result = facade.all_representations(parsed.value, args.bits)
    if not result.success:
        return fail(result, args.json)

    if args.json:
        print(json.dumps({
            'decimal': parsed.value,
            'total_bits': args.bits,
            'all_conversions': [{'schema': n, 'formatted': t} for n, t in result.value],
        }, indent=2))
        return 0

    print(f"{parsed.value} ({args.bits}-bit):")
    for name, text in result.value:
        print(f"  {name:<20} {text}")
    return 0


def cmd_schemas(args, facade: ConversionFacade) -> int:
    schemas = list(facade.registry)
    if args.bits is not None:
        schemas = [s for s in schemas if s.total_bits == args.bits]

    if args.json:
        print(json.dumps([s.to_dict() for s in schemas], indent=2))
        return 0

    for s in schemas:
        widths = '-'.join(str(w) for w in s.field_widths)
        line = f"{s.id:<18} {s.total_bits:>2}-bit  [{widths}]  {s.name}"
        if s.description:
            line += f" - {s.description}"
        print(line)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='Convert point codes and numbers between representations'
    )
    parser.add_argument('--catalog', help=f'Catalog YAML file (default: ${CATALOG_ENV} or built-in)')
    parser.add_argument('--json', action='store_true', help='Output as JSON')
    parser.add_argument('-v', '--verbose', action='store_true', help='Debug logging')
    subparsers = parser.add_subparsers(dest='command', required=True)

    # Base command
    base = subparsers.add_parser('base', help='Convert a number between bases')
    base.add_argument('value', help='Digit string, no prefix')
    base.add_argument('--from', dest='from_base', default='dec',
                      help='Input base: bin, oct, dec, hex or 2-36 (default: dec)')
    base.add_argument('--to', dest='to_base', default='hex',
                      help='Output base (default: hex)')
    base.add_argument('-q', '--quiet', action='store_true', help='Only print the result')
    base.set_defaults(func=cmd_base)

    # Encode command
    enc = subparsers.add_parser('encode', help='Integer to formatted point code')
    enc.add_argument('value', help='Decimal (or hex with --hex) value')
    enc.add_argument('-s', '--schema', default='7-7', help='Target schema id (default: 7-7)')
    enc.add_argument('--hex', action='store_true', help='Value is hexadecimal')
    enc.add_argument('-a', '--all', action='store_true', help='Also show all same-width formats')
    enc.add_argument('-q', '--quiet', action='store_true', help='Only print the formatted code')
    enc.set_defaults(func=cmd_encode)

    # Decode command
    dec = subparsers.add_parser('decode', help='Formatted point code to integer')
    dec.add_argument('value', help='Formatted code, e.g. 9-82')
    dec.add_argument('-s', '--schema', default='7-7', help='Schema id (default: 7-7)')
    dec.add_argument('-a', '--all', action='store_true', help='Also show all same-width formats')
    dec.add_argument('-q', '--quiet', action='store_true', help='Only print the decimal value')
    dec.set_defaults(func=cmd_decode)

    # Convert command
    conv = subparsers.add_parser('convert', help='Convert between any representation and schema')
    conv.add_argument('value', help='Input value')
    conv.add_argument('-f', '--input-format', default='decimal',
                      choices=[r.value for r in InputRepresentation],
                      help='How the input is written (default: decimal)')
    conv.add_argument('-i', '--input-schema', help='Schema of formatted input (default: target)')
    conv.add_argument('-s', '--schema', required=True, help='Target schema id')
    conv.add_argument('-a', '--all', action='store_true', help='Also show all same-width formats')
    conv.add_argument('-q', '--quiet', action='store_true', help='Only print the formatted code')
    conv.set_defaults(func=cmd_convert)

    # Table command
    table = subparsers.add_parser('table', help='Show a value under every schema of one width')
    table.add_argument('value', help='Decimal (or hex with --hex) value')
    table.add_argument('-b', '--bits', type=positive_int, default=14,
                       help='Total width (default: 14)')
    table.add_argument('--hex', action='store_true', help='Value is hexadecimal')
    table.set_defaults(func=cmd_table)

    # Schemas command
    sch = subparsers.add_parser('schemas', help='List catalog schemas')
    sch.add_argument('-b', '--bits', type=int, help='Only schemas of this width')
    sch.set_defaults(func=cmd_schemas)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose and not logging.getLogger().handlers:
        logging.basicConfig(level=logging.DEBUG,
                            format='%(levelname)s %(name)s: %(message)s')

    try:
        facade = ConversionFacade(load_registry(args.catalog))
        return args.func(args, facade)
    except (OSError, ValueError, yaml.YAMLError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main())

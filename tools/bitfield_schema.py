#!/usr/bin/env python3
"""
bitfield_schema.py - Bit-field schemas and the point code catalog

A schema partitions a fixed-width unsigned integer into consecutive fields,
most significant field first. The catalog holds the ITU-T 14-bit layouts and
the national 16/24-bit variants:

    14-bit: 7-7 (PC77), 6-8, 5-9, 8-6, 9-5, 4-3-7, 3-8-3, 4-3-4-3, 4-4-6
    16-bit: Japanese 7-4-5, Brazilian 3-8-5
    24-bit: ANSI 8-8-8, Chinese 8-8-8, Russian 5-8-11

Catalogs can also be loaded from YAML:

    name: point_codes
    schemas:
      - id: 7-7
        name: 7-7 (ITU-T)
        bits: [7, 7]
        total_bits: 14
        aliases: [pc77]

Usage:
    from bitfield_schema import default_registry, load_catalog

    registry = default_registry()
    pc77 = registry.lookup('7-7')
    for schema in registry.all_for_width(24):
        print(schema.name, schema.field_widths)
"""

import logging
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Tuple, Union

import yaml


logger = logging.getLogger(__name__)

SUPPORTED_WIDTHS = (14, 16, 24)


@dataclass(frozen=True)
class BitFieldSchema:
    """Named, ordered list of field bit widths."""
    id: str
    name: str
    field_widths: Tuple[int, ...]
    description: str = ''
    aliases: Tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self):
        # Normalize lists from YAML into tuples so the schema stays hashable
        object.__setattr__(self, 'field_widths', tuple(self.field_widths))
        object.__setattr__(self, 'aliases', tuple(self.aliases))
        if not self.field_widths:
            raise ValueError(f"Schema '{self.id}': field widths must not be empty")
        for i, width in enumerate(self.field_widths):
            if isinstance(width, bool) or not isinstance(width, int) or width <= 0:
                raise ValueError(f"Schema '{self.id}': field {i} width must be a "
                                 f"positive integer, got {width!r}")

    @property
    def total_bits(self) -> int:
        return sum(self.field_widths)

    @property
    def field_count(self) -> int:
        return len(self.field_widths)

    @property
    def max_value(self) -> int:
        return (1 << self.total_bits) - 1

    def field_max(self, index: int) -> int:
        return (1 << self.field_widths[index]) - 1

    def to_dict(self) -> Dict[str, Any]:
        data = {
            'id': self.id,
            'name': self.name,
            'bits': list(self.field_widths),
            'total_bits': self.total_bits,
        }
        if self.description:
            data['description'] = self.description
        if self.aliases:
            data['aliases'] = list(self.aliases)
        return data


class SchemaRegistry:
    """
    Catalog of schemas keyed by id (and alias).

    Built once, then only read. Registration order is kept so that
    comparison tables come out in a stable order.
    """

    def __init__(self, name: str = 'point_codes',
                 widths: Tuple[int, ...] = SUPPORTED_WIDTHS):
        self.name = name
        self.supported_widths = tuple(widths)
        self._schemas: List[BitFieldSchema] = []
        self._by_key: Dict[str, BitFieldSchema] = {}

    def register(self, schema: BitFieldSchema,
                 total_bits: Optional[int] = None) -> BitFieldSchema:
        """
        Add a schema. Raises ValueError when the field widths do not sum to
        the declared total, the width is unsupported, or the id is taken.
        """
        declared = schema.total_bits if total_bits is None else total_bits
        if schema.total_bits != declared:
            raise ValueError(f"Schema '{schema.id}': field widths {list(schema.field_widths)} "
                             f"sum to {schema.total_bits}, declared {declared}")
        if declared not in self.supported_widths:
            raise ValueError(f"Schema '{schema.id}': unsupported total width {declared} "
                             f"(supported: {', '.join(str(w) for w in self.supported_widths)})")

        for key in (schema.id,) + schema.aliases:
            if key in self._by_key:
                raise ValueError(f"Schema '{schema.id}': id '{key}' already registered "
                                 f"by '{self._by_key[key].id}'")

        self._schemas.append(schema)
        for key in (schema.id,) + schema.aliases:
            self._by_key[key] = schema
        return schema

    def lookup(self, schema_id: str) -> Optional[BitFieldSchema]:
        return self._by_key.get(schema_id)

    def all_for_width(self, total_bits: int) -> List[BitFieldSchema]:
        return [s for s in self._schemas if s.total_bits == total_bits]

    def widths(self) -> List[int]:
        """Distinct total widths, in registration order."""
        seen = []
        for s in self._schemas:
            if s.total_bits not in seen:
                seen.append(s.total_bits)
        return seen

    def __iter__(self) -> Iterator[BitFieldSchema]:
        return iter(self._schemas)

    def __len__(self) -> int:
        return len(self._schemas)

    def __contains__(self, schema_id: object) -> bool:
        return schema_id in self._by_key

    def __repr__(self) -> str:
        return f"SchemaRegistry({self.name!r}, {len(self)} schemas)"


# Built-in catalog, same shape as the YAML catalog format
DEFAULT_CATALOG: Dict[str, Any] = {
    'name': 'point_codes',
    'schemas': [
        {'id': '7-7', 'name': '7-7 (ITU-T)', 'bits': [7, 7], 'total_bits': 14,
         'description': 'ITU-T PC77', 'aliases': ['pc77']},
        {'id': '6-8', 'name': '6-8', 'bits': [6, 8], 'total_bits': 14},
        {'id': '5-9', 'name': '5-9', 'bits': [5, 9], 'total_bits': 14},
        {'id': '8-6', 'name': '8-6', 'bits': [8, 6], 'total_bits': 14},
        {'id': '9-5', 'name': '9-5', 'bits': [9, 5], 'total_bits': 14},
        {'id': '4-3-7', 'name': '4-3-7', 'bits': [4, 3, 7], 'total_bits': 14},
        {'id': '3-8-3', 'name': '3-8-3 (ITU-T)', 'bits': [3, 8, 3], 'total_bits': 14,
         'description': 'ITU-T Zone-Area-Signalling Point'},
        {'id': '4-3-4-3', 'name': '4-3-4-3', 'bits': [4, 3, 4, 3], 'total_bits': 14},
        {'id': '4-4-6', 'name': '4-4-6', 'bits': [4, 4, 6], 'total_bits': 14},
        {'id': 'ANSI 8-8-8', 'name': 'ANSI (8-8-8)', 'bits': [8, 8, 8], 'total_bits': 24,
         'description': 'North America: Network-Cluster-Member', 'aliases': ['8-8-8']},
        {'id': 'Japanese 7-4-5', 'name': 'Japanese (7-4-5)', 'bits': [7, 4, 5],
         'total_bits': 16, 'description': 'Japan Variant', 'aliases': ['7-4-5']},
        {'id': 'Chinese 8-8-8', 'name': 'Chinese (8-8-8)', 'bits': [8, 8, 8],
         'total_bits': 24, 'description': 'China Variant: Network-Cluster-Member',
         'aliases': ['8-8-8-cn']},
        {'id': 'Russian 5-8-11', 'name': 'Russian (5-8-11)', 'bits': [5, 8, 11],
         'total_bits': 24, 'description': 'Russia: Zone-Area-ID', 'aliases': ['5-8-11']},
        {'id': 'Brazilian 3-8-5', 'name': 'Brazilian (3-8-5)', 'bits': [3, 8, 5],
         'total_bits': 16, 'description': 'Brazil Variant', 'aliases': ['3-8-5']},
    ],
}


def schema_from_dict(entry: Dict[str, Any]) -> Tuple[BitFieldSchema, Optional[int]]:
    """Build a schema from a catalog entry. Returns (schema, declared total_bits)."""
    schema = BitFieldSchema(
        id=str(entry['id']),
        name=str(entry.get('name', entry['id'])),
        field_widths=tuple(entry['bits']),
        description=entry.get('description', ''),
        aliases=tuple(str(a) for a in entry.get('aliases', [])),
    )
    return schema, entry.get('total_bits')


def validate_schema_entry(entry: Any, path: str, errors: List[str],
                          seen_ids: Dict[str, str]) -> None:
    """Validate one entry of the 'schemas' array."""
    if not isinstance(entry, dict):
        errors.append(f"{path}: must be an object")
        return

    schema_id = entry.get('id')
    if schema_id is None or str(schema_id).strip() == '':
        errors.append(f"{path}: missing required 'id'")
        schema_id = '?'
    else:
        schema_id = str(schema_id)

    bits = entry.get('bits')
    if bits is None:
        errors.append(f"{path} ({schema_id}): missing required 'bits' array")
    elif not isinstance(bits, list) or len(bits) == 0:
        errors.append(f"{path} ({schema_id}): 'bits' must be a non-empty array")
    else:
        bad = [b for b in bits if isinstance(b, bool) or not isinstance(b, int) or b <= 0]
        if bad:
            errors.append(f"{path} ({schema_id}): 'bits' must be positive integers, got {bad}")
        elif 'total_bits' in entry:
            total = entry['total_bits']
            if total not in SUPPORTED_WIDTHS:
                errors.append(f"{path} ({schema_id}): 'total_bits' must be one of "
                              f"{list(SUPPORTED_WIDTHS)}, got {total}")
            elif sum(bits) != total:
                errors.append(f"{path} ({schema_id}): bits {bits} sum to {sum(bits)}, "
                              f"'total_bits' declares {total}")
        elif sum(bits) not in SUPPORTED_WIDTHS:
            errors.append(f"{path} ({schema_id}): bits {bits} sum to {sum(bits)}, "
                          f"must be one of {list(SUPPORTED_WIDTHS)}")

    aliases = entry.get('aliases', [])
    if not isinstance(aliases, list):
        errors.append(f"{path} ({schema_id}): 'aliases' must be an array")
        aliases = []

    for key in [schema_id] + [str(a) for a in aliases]:
        if key == '?':
            continue
        if key in seen_ids:
            errors.append(f"{path} ({schema_id}): id '{key}' already used by '{seen_ids[key]}'")
        else:
            seen_ids[key] = schema_id


def validate_schemas(catalog: Any) -> Tuple[List[str], Dict[str, str]]:
    """
    Validate the 'schemas' array of a catalog mapping.

    Returns (errors, ids) where ids maps every id and alias to its schema id.
    """
    errors: List[str] = []
    seen_ids: Dict[str, str] = {}

    if not isinstance(catalog, dict):
        return ["Catalog must be an object"], seen_ids

    if 'schemas' not in catalog:
        errors.append("Missing required field: 'schemas'")
        return errors, seen_ids

    schemas = catalog['schemas']
    if not isinstance(schemas, list):
        errors.append("'schemas' must be an array")
        return errors, seen_ids
    if len(schemas) == 0:
        errors.append("'schemas' array must not be empty")

    for i, entry in enumerate(schemas):
        validate_schema_entry(entry, f"schemas[{i}]", errors, seen_ids)

    return errors, seen_ids


def registry_from_dict(data: Dict[str, Any]) -> SchemaRegistry:
    """Build a registry from a parsed catalog mapping. Raises ValueError if invalid."""
    errors, _ = validate_schemas(data)
    if errors:
        raise ValueError("Invalid catalog:\n  " + "\n  ".join(errors))

    registry = SchemaRegistry(name=data.get('name', 'point_codes'))
    for entry in data['schemas']:
        schema, declared = schema_from_dict(entry)
        registry.register(schema, declared)

    logger.debug("Built catalog %r: %d schemas, widths %s",
                 registry.name, len(registry), registry.widths())
    return registry


def load_catalog(path: Union[str, Path]) -> SchemaRegistry:
    """Load a YAML catalog file into a registry."""
    path = Path(path)
    with open(path) as f:
        data = yaml.safe_load(f)
    if not isinstance(data, dict):
        raise ValueError(f"Invalid catalog {path}: top level must be a mapping")
    logger.debug("Loaded catalog file %s", path)
    return registry_from_dict(data)


@lru_cache(maxsize=1)
def default_registry() -> SchemaRegistry:
    """The built-in catalog, built on first use and shared afterwards."""
    return registry_from_dict(DEFAULT_CATALOG)

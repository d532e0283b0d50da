"""
YAML data pack loader with schema validation.

Loads species profiles, compatibility rules, and tank configuration (with
its default stocking list) from YAML files and validates them against JSON
schemas when a schema directory is given.
"""

import yaml
import json
from functools import lru_cache
from pathlib import Path
from typing import List, Optional, Tuple
import jsonschema

from .data_types import (
    SpeciesProfile, SpeciesRenderProfile, CompatibilityRule,
    TankConfig, PopulationGroup
)
from .species import create_species_index
from .compatibility import build_compatibility_lookup


class DataLoadError(Exception):
    """Raised when data loading or validation fails"""
    pass


def load_yaml(file_path: Path) -> dict:
    """
    Parse a data pack file.

    Raises:
        DataLoadError: If the file is unreadable, malformed, or not a mapping
    """
    file_path = Path(file_path)
    try:
        data = yaml.safe_load(file_path.read_text(encoding='utf-8'))
    except OSError as e:
        raise DataLoadError(f"Cannot read {file_path}: {e.strerror or e}") from e
    except yaml.YAMLError as e:
        raise DataLoadError(f"YAML parse error in {file_path}: {e}") from e

    if not isinstance(data, dict):
        raise DataLoadError(f"Expected a mapping at the top of {file_path}, "
                            f"got {type(data).__name__}")
    return data


@lru_cache(maxsize=None)
def load_schema_validator(schema_path: Path) -> Optional[jsonschema.Draft7Validator]:
    """Compiled validator for a schema file, or None if the file is absent"""
    if not schema_path.exists():
        return None

    try:
        schema = json.loads(schema_path.read_text(encoding='utf-8'))
        jsonschema.Draft7Validator.check_schema(schema)
    except (json.JSONDecodeError, jsonschema.SchemaError) as e:
        raise DataLoadError(f"Invalid JSON schema {schema_path}: {e}") from e
    return jsonschema.Draft7Validator(schema)


def validate_against_schema(data: dict, schema_path: Path, data_path: Path):
    """
    Validate a parsed file against its schema (skipped if the schema file is absent).

    Every violation is reported, each prefixed with its field path.
    """
    validator = load_schema_validator(Path(schema_path))
    if validator is None:
        return

    errors = sorted(validator.iter_errors(data), key=lambda e: [str(p) for p in e.absolute_path])
    if errors:
        details = "; ".join(
            f"{'.'.join(str(p) for p in e.absolute_path) or '<root>'}: {e.message}"
            for e in errors
        )
        raise DataLoadError(f"Validation error in {data_path}: {details}")


def _validate(data: dict, schema_dir: Optional[Path], schema_name: str, data_path: Path):
    if schema_dir:
        validate_against_schema(data, Path(schema_dir) / schema_name, data_path)


def load_species(file_path: Path, schema_dir: Optional[Path] = None) -> SpeciesProfile:
    """Load one species profile from YAML"""
    data = load_yaml(file_path)
    _validate(data, schema_dir, "species.schema.json", file_path)

    render = None
    if data.get('render'):
        render = SpeciesRenderProfile(
            body_rgb=tuple(data['render']['body_rgb']),
            fin_rgb=tuple(data['render']['fin_rgb']),
            eye_rgb=tuple(data['render']['eye_rgb'])
        )

    try:
        return SpeciesProfile(
            species_id=data['species_id'],
            label=data['label'],
            size_class=data['size_class'],
            schooling=data['schooling'],
            temperament=data['temperament'],
            territory_need=data['territory_need'],
            activity=data['activity'],
            preferred_depth=data['preferred_depth'],
            bioload=data['bioload'],
            oxygen_use=data['oxygen_use'],
            compatibility_tags=tuple(data.get('compatibility_tags', [])),
            render=render
        )
    except KeyError as e:
        raise DataLoadError(f"Missing field {e} in {file_path}")
    except ValueError as e:
        raise DataLoadError(f"Invalid species in {file_path}: {e}")


def load_species_catalog(species_dir: Path, schema_dir: Optional[Path] = None) -> List[SpeciesProfile]:
    """Load all species from directory (sorted by file name for stable order)"""
    species_dir = Path(species_dir)
    if not species_dir.exists():
        raise DataLoadError(f"Species directory not found: {species_dir}")

    catalog = [load_species(p, schema_dir) for p in sorted(species_dir.glob("*.yaml"))]

    if not catalog:
        raise DataLoadError(f"No species files found in {species_dir}")

    return catalog


def load_compatibility_rules(file_path: Path, schema_dir: Optional[Path] = None) -> List[CompatibilityRule]:
    """Load pairwise compatibility rules from YAML"""
    data = load_yaml(file_path)
    _validate(data, schema_dir, "compatibility.schema.json", file_path)

    return [
        CompatibilityRule(
            species_a=rule['a'],
            species_b=rule['b'],
            score=float(rule['score'])
        )
        for rule in data.get('rules', [])
    ]


def load_tank(file_path: Path, schema_dir: Optional[Path] = None) -> Tuple[TankConfig, List[PopulationGroup]]:
    """
    Load tank configuration and its default stocking list.

    Returns:
        Tuple of (TankConfig, list of PopulationGroup)
    """
    data = load_yaml(file_path)
    _validate(data, schema_dir, "tank.schema.json", file_path)

    try:
        config = TankConfig(**data.get('config', {}))
    except (TypeError, ValueError) as e:
        raise DataLoadError(f"Invalid tank config in {file_path}: {e}")

    population = [PopulationGroup(**group) for group in data.get('population', [])]
    return config, population


def load_all_data(data_root: Path, schema_dir: Optional[Path] = None) -> dict:
    """Load a complete data pack from the data directory

    Returns dict with keys: species, species_index, compatibility_rules,
    compatibility, tank_config, population
    """
    data_root = Path(data_root)

    species = load_species_catalog(data_root / "species", schema_dir)
    rules = load_compatibility_rules(data_root / "compatibility" / "rules.yaml", schema_dir)
    tank_config, population = load_tank(data_root / "tank" / "default.yaml", schema_dir)

    try:
        species_index = create_species_index(species)
        compatibility = build_compatibility_lookup(rules)
    except ValueError as e:
        raise DataLoadError(f"Inconsistent data pack in {data_root}: {e}")

    return {
        'species': species,
        'species_index': species_index,
        'compatibility_rules': rules,
        'compatibility': compatibility,
        'tank_config': tank_config,
        'population': population,
    }

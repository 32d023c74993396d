"""
YAML configuration loader with schema validation.

Loads the simulation configuration from a YAML file, optionally validates it
against a JSON schema, and builds the configuration dataclasses. Sections and
keys missing from the file keep their documented defaults.
"""

import yaml
import json
from pathlib import Path
from typing import Optional
import jsonschema

from .data_types import (
    SimulationConfig, GridConfig, SoilConfig, PopulationConfig, GrowthConfig
)
from .constants import WORLD_SEED_DEFAULT


class ConfigLoadError(Exception):
    """Raised when configuration loading or validation fails"""
    pass


def load_yaml(file_path: Path) -> dict:
    """Load YAML file and return parsed dict (empty file gives {})"""
    file_path = Path(file_path)
    if not file_path.exists():
        raise ConfigLoadError(f"File not found: {file_path}")

    try:
        with open(file_path, 'r') as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigLoadError(f"YAML parse error in {file_path}: {e}")

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigLoadError(f"Top level of {file_path} must be a mapping")
    return data


def validate_against_schema(data: dict, schema_path: Path, data_path: Path):
    """Validate data dict against JSON schema"""
    if not schema_path.exists():
        # Schema validation is optional
        return

    try:
        with open(schema_path, 'r') as f:
            schema = json.load(f)
        jsonschema.validate(instance=data, schema=schema)
    except jsonschema.ValidationError as e:
        raise ConfigLoadError(f"Validation error in {data_path}: {e.message}")
    except json.JSONDecodeError as e:
        raise ConfigLoadError(f"Invalid JSON schema {schema_path}: {e}")


def _build_section(cls, data: dict, section: str):
    """Build one config dataclass from its YAML section"""
    values = data.get(section) or {}
    try:
        return cls(**values)
    except TypeError as e:
        raise ConfigLoadError(f"Bad '{section}' section: {e}")


def config_from_dict(data: dict) -> SimulationConfig:
    """
    Build a SimulationConfig from a nested dict.

    Does not validate value ranges; call SimulationConfig.validate() for that.
    """
    return SimulationConfig(
        seed=data.get('seed', WORLD_SEED_DEFAULT),
        grid=_build_section(GridConfig, data, 'grid'),
        soil=_build_section(SoilConfig, data, 'soil'),
        population=_build_section(PopulationConfig, data, 'population'),
        growth=_build_section(GrowthConfig, data, 'growth')
    )


def load_config(file_path: Path, schema_dir: Optional[Path] = None) -> SimulationConfig:
    """
    Load simulation configuration from YAML.

    Args:
        file_path: YAML config file
        schema_dir: Optional directory containing meadow.schema.json

    Returns:
        Validated SimulationConfig

    Raises:
        ConfigLoadError: Missing file, YAML syntax error or schema violation
        InvalidConfigError: Values that cannot start a simulation
    """
    file_path = Path(file_path)
    data = load_yaml(file_path)

    # Validate if schema available
    if schema_dir:
        schema_path = Path(schema_dir) / "meadow.schema.json"
        validate_against_schema(data, schema_path, file_path)

    config = config_from_dict(data)
    config.validate()
    return config

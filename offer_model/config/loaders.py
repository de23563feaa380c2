import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from cerberus import Validator
from pydantic import ValidationError

from offer_model.config.models import EngineConfig

# Configure logger for this module
logger = logging.getLogger(__name__)


class ConfigLoadError(Exception):
    """Custom exception for errors during config loading."""

    pass


_RATIO = {"type": "number", "nullable": True, "required": False}

CONFIG_SCHEMA: Dict[str, Any] = {
    "global_parameters": {
        "type": "dict",
        "required": False,
        "schema": {
            "years_to_display": {"type": "integer", "min": 1, "max": 10, "required": False},
            "current_grid_payout": {"type": "number", "required": False},
            "new_grid_payout": {"type": "number", "required": False},
            "annual_growth_rate": {"type": "number", "required": False},
            "backend_growth_pct": {"type": "number", "required": False},
            "backend_assets_pct": {"type": "number", "required": False},
            "backend_service_pct": {"type": "number", "required": False},
        },
    },
    "firm_terms": {
        "type": "dict",
        "required": False,
        "keysrules": {"type": "string"},
        "valuesrules": {
            "type": "dict",
            "schema": {
                "grid_payout_ratio": _RATIO,
                "fallback_upfront_ratio": _RATIO,
                "fallback_backend_ratio": _RATIO,
                "upfront_override_ratio": _RATIO,
            },
        },
    },
}


def load_yaml_config(config_path: Union[str, Path]) -> Optional[Dict[str, Any]]:
    """
    Loads configuration data from a YAML file.

    Args:
        config_path: Path pointing to the YAML configuration file.

    Returns:
        A dictionary containing the loaded configuration. An empty file
        yields an empty dictionary.

    Raises:
        ConfigLoadError: If the file cannot be found or parsed.
    """
    if not isinstance(config_path, Path):
        config_path = Path(config_path)

    logger.info(f"Attempting to load configuration from: {config_path}")

    if not config_path.is_file():
        logger.error(f"Configuration file not found at path: {config_path}")
        raise ConfigLoadError(f"Configuration file not found: {config_path}")

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            config_data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        logger.exception(f"Error parsing YAML configuration file {config_path}: {e}")
        raise ConfigLoadError(f"Error parsing YAML file {config_path}") from e
    except OSError as e:
        logger.exception(f"Could not read configuration file {config_path}: {e}")
        raise ConfigLoadError(f"Could not read configuration file {config_path}") from e

    if config_data is None:
        return {}
    if not isinstance(config_data, dict):
        logger.error(f"Configuration file {config_path} did not parse into a dictionary.")
        raise ConfigLoadError(
            f"Invalid configuration format in {config_path}: Expected a dictionary."
        )

    logger.info(f"Successfully loaded configuration from {config_path}")
    return config_data


def engine_config_from_dict(config_data: Dict[str, Any]) -> EngineConfig:
    """Validate raw configuration data and build an EngineConfig.

    Raises:
        ConfigLoadError: On schema or model validation errors.
    """
    v = Validator(CONFIG_SCHEMA)
    if not v.validate(config_data):
        raise ConfigLoadError(f"Config validation failed: {v.errors}")

    try:
        config = EngineConfig.model_validate(config_data)
    except ValidationError as e:
        raise ConfigLoadError(f"Config validation failed: {e}") from e

    logger.debug(f"Engine configuration loaded: {config}")
    return config


def load_engine_config(config_path: Union[str, Path]) -> EngineConfig:
    """Load, validate and parse an engine configuration file."""
    return engine_config_from_dict(load_yaml_config(config_path))


# Expose for import
__all__ = [
    "CONFIG_SCHEMA",
    "ConfigLoadError",
    "engine_config_from_dict",
    "load_engine_config",
    "load_yaml_config",
]

from .loaders import ConfigLoadError, engine_config_from_dict, load_engine_config, load_yaml_config
from .models import DEFAULT_CONFIG, EngineConfig, FirmTermsOverride, GlobalParameters

__all__ = [
    "ConfigLoadError",
    "DEFAULT_CONFIG",
    "EngineConfig",
    "FirmTermsOverride",
    "GlobalParameters",
    "engine_config_from_dict",
    "load_engine_config",
    "load_yaml_config",
]

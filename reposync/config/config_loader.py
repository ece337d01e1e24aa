import os
from dataclasses import fields, replace
from typing import Any, Dict, Optional

import yaml

from reposync.config.logging_config import LOGGING_CONFIG, LoggingConfig
from reposync.core.errors import ConfigError
from reposync.utils.custom_logger import Logger

logger = Logger("config_loader")

def load_external_configs(yaml_path: Optional[str] = None) -> Dict[str, Any]:
    external_data: Dict[str, Any] = {}
    if yaml_path and os.path.exists(yaml_path):
        try:
            with open(yaml_path, 'r') as yf:
                loaded = yaml.safe_load(yf)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {yaml_path}: {e}") from e
        except OSError as e:
            raise ConfigError(f"Cannot read {yaml_path}: {e}") from e
        if loaded is None:
            return external_data
        if not isinstance(loaded, dict):
            raise ConfigError(f"Expected a mapping at the top of {yaml_path}")
        external_data.update(loaded)
    elif yaml_path:
        raise ConfigError(f"Config file not found: {yaml_path}")
    return external_data

def merge_config(base, overrides):
    if isinstance(base, dict) and isinstance(overrides, dict):
        for k, v in overrides.items():
            if k in base and isinstance(base[k], dict):
                base[k] = merge_config(base[k], v)
            else:
                base[k] = v
    return base

def finalize_logging_config(yaml_path: Optional[str] = None, log_level: Optional[str] = None) -> LoggingConfig:
    """Build the logging configuration.

    Defaults come from LOGGING_CONFIG, overridden by the ``logging`` section of
    the YAML file at ``yaml_path`` and finally by an explicit ``log_level``.
    """
    final_config = {'logging': dict(LOGGING_CONFIG.get_config())}
    external_data = load_external_configs(yaml_path)
    final_config = merge_config(final_config, external_data)

    known = {f.name for f in fields(LoggingConfig)}
    section = final_config.get('logging') or {}
    if not isinstance(section, dict):
        raise ConfigError("The 'logging' section must be a mapping")
    for key in sorted(set(section) - known):
        logger.warning(f"Ignoring unknown logging option: {key}")
    values = {k: v for k, v in section.items() if k in known}
    if log_level:
        values['log_level'] = log_level.upper()
    return replace(LOGGING_CONFIG, **values)

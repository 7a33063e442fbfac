"""
Logging configuration for the network diagnostics engine.

Logging is configured from a JSON dictConfig file: one of the two files
packaged next to this module ('dev' or 'prod'), or a user supplied file
('custom'). Every record is tagged with the instance id so that logs of
several engine instances can be told apart.
"""

import json
import logging.config
import os
from typing import Any, Dict

from network_diagnostics.config import DiagnosticsContext

BUILTIN_CONFIGS = {
    "dev": "logging-config-dev.json",
    "prod": "logging-config-prod.json",
}


def configure_logging(context: DiagnosticsContext) -> None:
    """
    Configure logging according to the logging type of the context.

    Args:
        context: Configuration context containing logging settings.

    Raises:
        ValueError: If the logging type is empty or unknown, or if the 'custom'
            type is selected without a configuration file.
        RuntimeError: If the configuration file cannot be loaded.
    """
    logging_type: str = context.logging_type.lower()
    if not logging_type:
        raise ValueError("Logging type must be provided.")

    if logging_type in BUILTIN_CONFIGS:
        config_file = _get_local_package_file_path(BUILTIN_CONFIGS[logging_type])
    elif logging_type == "custom":
        if not context.logging_config_file:
            raise ValueError("Custom logging configuration file must be provided.")
        config_file = context.logging_config_file
    else:
        raise ValueError(
            f"Invalid logging type: {context.logging_type}. Allowed values are: dev, prod, custom"
        )

    _load_logging_config(config_file)

    # Filters on a logger do not see records propagated from child loggers,
    # so the instance id is attached at handler level.
    instance_filter = _InstanceIdFilter(instance_id=context.instance_id)
    for handler in logging.getLogger().handlers:
        handler.addFilter(instance_filter)

    logging.getLogger(__name__).debug(f"Logging configured from {config_file}.")


def _load_logging_config(config_file: str) -> None:
    """
    Apply a JSON dictConfig file to the logging system.

    Raises:
        RuntimeError: If the file is missing, is not valid JSON, or is rejected
            by dictConfig.
    """
    try:
        with open(config_file) as f:
            config: Dict[str, Any] = json.load(f)
        logging.config.dictConfig(config)
    except FileNotFoundError as err:
        raise RuntimeError(f"Logging config file not found: {config_file}") from err
    except json.JSONDecodeError as err:
        raise RuntimeError(f"Invalid JSON format in logging config file: {config_file}") from err
    except (ValueError, TypeError, AttributeError, ImportError) as err:
        raise RuntimeError(f"Error loading logging config: {err}") from err


def _get_local_package_file_path(config_file: str) -> str:
    """Absolute path of a file shipped in this package directory."""
    return os.path.join(os.path.dirname(__file__), config_file)


class _InstanceIdFilter(logging.Filter):
    """Injects an 'instance_id' attribute into every log record."""

    def __init__(self, instance_id: str) -> None:
        super().__init__()
        self._instance_id: str = instance_id

    def filter(self, record: logging.LogRecord) -> bool:
        record.instance_id = self._instance_id
        return True

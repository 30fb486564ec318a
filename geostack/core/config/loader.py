"""
Configuration loader — reads geostack.yml into ``ProvisionConfig``.

The file is optional: without one every default applies. It reads
YAML, validates against the Pydantic schema and returns a typed
config object.

Example::

    env_name: geo-stack-dev
    gdal_modules: [gdal/3.10.2, gdal]
    critical_packages: [pandas, xarray]
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from geostack.core.models.config import ProvisionConfig

logger = logging.getLogger(__name__)

CONFIG_FILE = "geostack.yml"


class ConfigError(Exception):
    """Raised when geostack.yml is unreadable or invalid."""


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Search for geostack.yml starting from ``start_dir``, walking up.

    Returns:
        Path to the file, or None if not found.
    """
    current = (start_dir or Path.cwd()).resolve()

    for _ in range(20):  # safety limit
        candidate = current / CONFIG_FILE
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            break
        current = parent

    return None


def load_config(path: Path | None = None, *, search: bool = True) -> ProvisionConfig:
    """Load and validate provisioning configuration.

    Args:
        path: Explicit config file. If None and ``search`` is set,
            searches upward from the current directory.
        search: Whether to look for geostack.yml when ``path`` is None.

    Raises:
        ConfigError: The explicit file is missing, or a file is invalid.
    """
    if path is None and search:
        path = find_config_file()
    if path is None:
        return ProvisionConfig()

    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    logger.debug("Loading config from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return ProvisionConfig()
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    try:
        config = ProvisionConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration in {path}: {e}") from e

    logger.info("Loaded config from %s (env '%s')", path, config.env_name)
    return config

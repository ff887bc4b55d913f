"""
Configuration loading for getgo.

Settings come from three layers, later layers winning:

    1. Built-in defaults
    2. YAML file (--config PATH, $GETGO_CONFIG, or ~/.getgo.yaml)
    3. Environment variables (GETGO_CATALOG_URL, GETGO_DOWNLOAD_URL,
       GETGO_PROXY, GETGO_HOME)

Example ~/.getgo.yaml:

    catalog_url: https://go.dev/dl/?mode=json&include=all
    module_proxy: https://proxy.golang.org,direct
    request_timeout: 60
"""

import logging
import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from .exceptions import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_CATALOG_URL = "https://golang.google.cn/dl/?mode=json&include=all"
DEFAULT_DOWNLOAD_URL = "https://dl.google.com/go/"
DEFAULT_MODULE_PROXY = "https://goproxy.cn,direct"
DEFAULT_CONFIG_NAME = ".getgo.yaml"

ENV_OVERRIDES = {
    "GETGO_CATALOG_URL": "catalog_url",
    "GETGO_DOWNLOAD_URL": "download_url",
    "GETGO_PROXY": "module_proxy",
    "GETGO_HOME": "home",
}


@dataclass(frozen=True)
class GetgoConfig:
    """
    Effective getgo settings.

    Attributes:
        catalog_url: JSON endpoint listing published releases
        download_url: Base URL for archive downloads during bootstrap
        module_proxy: GOPROXY used when fetching per-version installers
        request_timeout: HTTP timeout in seconds
        home: Directory holding the sdk/ tree (defaults to the user's home)
    """

    catalog_url: str = DEFAULT_CATALOG_URL
    download_url: str = DEFAULT_DOWNLOAD_URL
    module_proxy: str = DEFAULT_MODULE_PROXY
    request_timeout: int = 30
    home: Optional[Path] = None

    @property
    def home_dir(self) -> Path:
        return self.home if self.home is not None else Path.home()


def default_config_path(environ: Optional[Mapping[str, str]] = None) -> Path:
    """Return $GETGO_CONFIG if set, else ~/.getgo.yaml."""
    if environ is None:
        environ = os.environ
    override = environ.get("GETGO_CONFIG")
    if override:
        return Path(override).expanduser()
    return Path.home() / DEFAULT_CONFIG_NAME


def load_yaml_config(config_file: Path, required: bool = False) -> Dict[str, Any]:
    """
    Load and parse a YAML configuration file.

    Args:
        config_file: Path to YAML configuration file
        required: If True, raise error if file doesn't exist

    Returns:
        Configuration dictionary (empty dict if file doesn't exist and not required)

    Raises:
        ConfigError: If the file is required but missing, is not valid YAML,
            or does not contain a mapping
    """
    if not config_file.exists():
        if required:
            raise ConfigError(f"Configuration file not found: {config_file}")
        logger.debug(f"Config file not found (optional): {config_file}")
        return {}

    logger.debug(f"Loading configuration from {config_file}")

    try:
        with open(config_file, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {config_file}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Cannot read {config_file}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"{config_file}: expected a mapping at top level")
    return data


def _coerce(values: Dict[str, Any]) -> Dict[str, Any]:
    known = {f.name for f in fields(GetgoConfig)}
    result = {}
    for key, value in values.items():
        if key not in known:
            logger.debug(f"Ignoring unknown config key: {key}")
            continue
        if value is None:
            continue
        if key == "home":
            value = Path(str(value)).expanduser()
        elif key == "request_timeout":
            try:
                value = int(value)
            except (TypeError, ValueError) as e:
                raise ConfigError(f"request_timeout must be an integer: {value!r}") from e
        else:
            value = str(value)
        result[key] = value
    return result


def load_config(
    config_file: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> GetgoConfig:
    """
    Build the effective configuration.

    Args:
        config_file: Explicit config path (must exist); None uses the default
            location, which is optional
        environ: Environment mapping (defaults to os.environ)

    Returns:
        GetgoConfig with file values and environment overrides applied
    """
    if environ is None:
        environ = os.environ

    if config_file is not None:
        data = load_yaml_config(Path(config_file), required=True)
    else:
        data = load_yaml_config(default_config_path(environ), required=False)

    config = replace(GetgoConfig(), **_coerce(data))

    overrides = {
        attr: environ[var] for var, attr in ENV_OVERRIDES.items() if environ.get(var)
    }
    if overrides:
        logger.debug(f"Environment overrides: {sorted(overrides)}")
        config = replace(config, **_coerce(overrides))

    return config


__all__ = [
    "GetgoConfig",
    "load_config",
    "load_yaml_config",
    "default_config_path",
    "DEFAULT_CATALOG_URL",
    "DEFAULT_DOWNLOAD_URL",
    "DEFAULT_MODULE_PROXY",
]

# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: Apache-2.0

"""
Configuration utilities for the workspace tooling.

Settings come from three layers, later ones winning: built-in defaults, an
optional ``wspm.yml`` at the workspace root, and ``WSPM_*`` environment
variables.
"""

import importlib.metadata
import logging
import os
from dataclasses import dataclass, field, fields
from typing import Any, Dict, List, Optional

import yaml

from wspm.utils.core.errors import ConfigError

logger = logging.getLogger(__name__)

PROJECT_NAME = "wspm"
CONFIG_FILENAME = "wspm.yml"

# Environment variable -> (config key, converter)
ENVIRONMENT_OVERRIDES = {
    "WSPM_PACKAGE_MANAGER": ("package_manager", str),
    "WSPM_PARALLELISM": ("parallelism", int),
    "WSPM_COMMAND_TIMEOUT": ("command_timeout", float),
    "WSPM_DATA_DIR": ("data_dir", str),
}


@dataclass
class WorkspaceConfig:
    """Workspace settings."""

    package_manager: str = "yarn"
    parallelism: int = 4
    project_globs: List[str] = field(default_factory=list)
    install_args: List[str] = field(default_factory=list)
    command_timeout: Optional[float] = None
    data_dir: str = ".wspm"


def get_project_name() -> str:
    """Get the project name used for log and data file names."""
    return PROJECT_NAME


def get_dist_version(dist: str = PROJECT_NAME) -> str:
    """Get the version of a distribution."""
    try:
        return importlib.metadata.version(dist)
    except importlib.metadata.PackageNotFoundError:
        return "unknown"


def load_yaml_config(config_path: str) -> Dict[str, Any]:
    """
    Load YAML configuration file.

    Args:
        config_path: Path to the YAML configuration file

    Returns:
        Dict containing the configuration

    Raises:
        FileNotFoundError: If config file doesn't exist
        ConfigError: If config file is invalid YAML or not a mapping
    """
    if not os.path.exists(config_path):
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    try:
        with open(config_path, "r") as file:
            config = yaml.safe_load(file)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {config_path}: {e}", {"path": config_path})

    if config is None:
        return {}
    if not isinstance(config, dict):
        raise ConfigError(f"Configuration in {config_path} must be a mapping", {"path": config_path})
    return config


def get_environment_config() -> Dict[str, Any]:
    """
    Get configuration values from environment variables.

    Returns:
        Dict containing environment-based configuration
    """
    env_config = {}

    for var, (key, convert) in ENVIRONMENT_OVERRIDES.items():
        value = os.environ.get(var)
        if value is None:
            continue
        try:
            env_config[key] = convert(value)
        except ValueError:
            raise ConfigError(f"Invalid value for {var}: {value!r}", {var: value})

    return env_config


def merge_configs(base_config: Dict[str, Any], override_config: Dict[str, Any]) -> Dict[str, Any]:
    """Shallow merge, ignoring ``None`` overrides."""
    merged = dict(base_config)
    merged.update({key: value for key, value in override_config.items() if value is not None})
    return merged


def _build_config(values: Dict[str, Any]) -> WorkspaceConfig:
    known = {f.name: f for f in fields(WorkspaceConfig)}
    defaults = WorkspaceConfig()
    kwargs = {}

    for key, value in values.items():
        if key not in known:
            logger.warning(f"Ignoring unknown configuration key: {key}")
            continue

        default = getattr(defaults, key)
        if key == "command_timeout":
            valid = value is None or (isinstance(value, (int, float)) and not isinstance(value, bool) and value > 0)
        elif key == "parallelism":
            valid = isinstance(value, int) and not isinstance(value, bool) and value > 0
        elif isinstance(default, list):
            valid = isinstance(value, list) and all(isinstance(v, str) for v in value)
        else:
            valid = isinstance(value, type(default))

        if not valid:
            raise ConfigError(f"Invalid value for configuration key {key}: {value!r}", {key: repr(value)})
        kwargs[key] = value

    return WorkspaceConfig(**kwargs)


def load_workspace_config(root_path: str, overrides: Optional[Dict[str, Any]] = None) -> WorkspaceConfig:
    """
    Load the configuration of the workspace rooted at ``root_path``.

    Args:
        root_path: Workspace root directory
        overrides: Values taking precedence over every other layer (e.g. CLI options)

    Returns:
        WorkspaceConfig: Resolved configuration
    """
    values: Dict[str, Any] = {}

    config_path = os.path.join(root_path, CONFIG_FILENAME)
    if os.path.exists(config_path):
        logger.debug(f"Loading configuration from {config_path}")
        values = load_yaml_config(config_path)

    values = merge_configs(values, get_environment_config())
    values = merge_configs(values, overrides or {})
    return _build_config(values)


def setup_data_dir(root_path: Optional[str] = None, data_dir: Optional[str] = None) -> str:
    """
    Setup data directory for logs.

    Args:
        root_path: Workspace root, defaults to the current directory
        data_dir: Data directory, relative paths are resolved against the root

    Returns:
        str: Path to the data directory
    """
    root_path = root_path or os.getcwd()
    data_dir = os.path.join(root_path, data_dir or WorkspaceConfig.data_dir)

    os.makedirs(data_dir, exist_ok=True)
    os.makedirs(os.path.join(data_dir, "logs"), exist_ok=True)

    return data_dir

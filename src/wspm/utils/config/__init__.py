# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: Apache-2.0

"""
Configuration utilities package.

Provides utilities for loading and managing configuration from the workspace
YAML file and environment variables.
"""

from .config import *

# Re-export all functions and classes
__all__ = [
    "CONFIG_FILENAME",
    "PROJECT_NAME",
    "WorkspaceConfig",
    "get_project_name",
    "get_dist_version",
    "load_yaml_config",
    "get_environment_config",
    "merge_configs",
    "load_workspace_config",
    "setup_data_dir",
]

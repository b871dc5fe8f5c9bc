# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: Apache-2.0

"""
Utility modules for the workspace tooling.

This package is organized into focused sub-packages:
- core: Errors, shared interrupt state and process execution
- workspace: Manifests, projects, validation, reconciliation and graph
- config: Configuration management
- logging: Logging configuration and utilities
- cli: Argument parsing and command implementations
"""

from . import config, core, logging, workspace

__all__ = [
    "core",
    "workspace",
    "config",
    "logging",
]

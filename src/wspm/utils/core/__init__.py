# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: Apache-2.0

"""
Core utilities package.

This package contains core functionality for the framework including:
- Error taxonomy shared by every workspace operation
- Shared interrupt state
- Process execution
"""

from . import shared_state
from .errors import (
    CliError,
    ConfigError,
    DependencyMismatchError,
    DependencyValidationError,
    ManifestError,
    MismatchKind,
    PatchError,
    ProcessError,
)
from .process import (
    ProcessExecutionMode,
    ProcessExecutor,
    ProcessResult,
    cleanup_processes,
    configure_executor,
    get_executor,
    run_command,
)

__all__ = [
    # Errors
    "CliError",
    "ConfigError",
    "DependencyMismatchError",
    "DependencyValidationError",
    "ManifestError",
    "MismatchKind",
    "PatchError",
    "ProcessError",
    # Shared state
    "shared_state",
    # Process execution
    "ProcessExecutionMode",
    "ProcessExecutor",
    "ProcessResult",
    "cleanup_processes",
    "configure_executor",
    "get_executor",
    "run_command",
]

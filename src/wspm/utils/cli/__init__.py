# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: Apache-2.0

"""
CLI utilities package for the workspace tooling.

This package contains modular CLI command implementations,
handlers, and utilities to keep the main CLI file lightweight.
"""

from .handlers import handle_interrupt, install_signal_handlers
from .helpers import WorkspaceContext, load_workspace
from .parsers import create_argument_parser

# Commands are imported dynamically as needed

__all__ = [
    "handle_interrupt",
    "install_signal_handlers",
    "WorkspaceContext",
    "load_workspace",
    "create_argument_parser",
]

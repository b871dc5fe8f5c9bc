# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: Apache-2.0

"""
Validate command implementation.

Builds the dependency graph, which validates every cross-project dependency
and reports all mismatches at once.
"""
import logging
from typing import Optional

from wspm.utils.cli.helpers import load_workspace

logger = logging.getLogger(__name__)


def validate_dependencies(root: Optional[str] = None, verbose: bool = False, debug: bool = False) -> int:
    """
    Validate the cross-project dependencies of the whole repository.

    Returns:
        int: Exit code (0 for success, non-zero for failure)
    """
    ctx = load_workspace("validate", root, verbose=verbose, debug=debug)

    edges = sum(len(deps) for deps in ctx.graph.values())
    logger.info(f"All {edges} cross-project dependencies of {len(ctx.projects)} projects are valid")
    return 0

# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: Apache-2.0

"""
Dependency installation commands.

Provides the exact-version install of a single dependency and the pruning of
extraneous workspace links from the root node_modules.
"""
import logging
from typing import Optional

from wspm.utils.cli.helpers import load_workspace
from wspm.utils.core.errors import CliError
from wspm.utils.workspace import get_workspace_root

logger = logging.getLogger(__name__)


def install_version(
    project_name: str,
    dependency: str,
    version: str,
    dev: bool = False,
    version_range: Optional[str] = None,
    root: Optional[str] = None,
    verbose: bool = False,
    debug: bool = False,
) -> int:
    """
    Install ``dependency`` at ``version`` in one project and record a range.

    Returns:
        int: Exit code (0 for success, non-zero for failure)
    """
    ctx = load_workspace("install-version", root, verbose=verbose, debug=debug, validate=False)

    project = ctx.projects.get(project_name)
    if project is None:
        raise CliError(f"Unknown project [{project_name}]", {"known": ", ".join(sorted(ctx.projects))})

    project.install_dependency_version(dependency, version, dev=dev, range=version_range)
    return 0


def prune_links(root: Optional[str] = None, verbose: bool = False, debug: bool = False) -> int:
    """
    Remove links of unused workspace projects from the root node_modules.

    Returns:
        int: Exit code (0 for success, non-zero for failure)
    """
    ctx = load_workspace("prune-links", root, verbose=verbose, debug=debug, validate=False)

    workspace_root = get_workspace_root(ctx.projects)
    if workspace_root is None:
        raise CliError("No workspace root found", {"root": ctx.root_path})

    removed = workspace_root.remove_extraneous_links()
    if removed:
        logger.info(f"Removed {len(removed)} extraneous links: {', '.join(removed)}")
    else:
        logger.info("No extraneous links found")
    return 0

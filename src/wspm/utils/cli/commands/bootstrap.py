# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: Apache-2.0

"""
Bootstrap command implementation.

Installs the dependencies of the repository, runs the bootstrap script of each
project in dependency order and builds the projects declaring build targets.
"""
import logging
from typing import List, Optional

from wspm.utils.cli.helpers import load_workspace
from wspm.utils.workspace import Project, parallelize_batches, topologically_batch_projects

logger = logging.getLogger(__name__)

BOOTSTRAP_SCRIPT = "wspm:bootstrap"


def bootstrap(
    root: Optional[str] = None,
    include: List[str] = None,
    exclude: List[str] = None,
    parallelism: Optional[int] = None,
    frozen_lockfile: bool = False,
    skip_build: bool = False,
    source_maps: bool = False,
    verbose: bool = False,
    debug: bool = False,
) -> int:
    """
    Bootstrap the repository.

    Returns:
        int: Exit code (0 for success, non-zero for failure)
    """
    ctx = load_workspace(
        "bootstrap", root, include or [], exclude or [], parallelism, verbose=verbose, debug=debug
    )
    batches = topologically_batch_projects(ctx.selected, ctx.graph)

    extra_args = list(ctx.config.install_args)
    if frozen_lockfile:
        extra_args.append("--frozen-lockfile")

    # Workspace members are installed by the root install
    for project in ctx.selected.values():
        if (project.is_workspace_root or not project.is_workspace_project) and project.has_dependencies():
            project.install_dependencies(extra_args=extra_args)

    logger.info("Installed all packages")

    def run_bootstrap_script(project: Project) -> None:
        if project.has_script(BOOTSTRAP_SCRIPT):
            project.run_script_streaming(BOOTSTRAP_SCRIPT, debug=debug)

    parallelize_batches(batches, run_bootstrap_script, ctx.config.parallelism)

    if not skip_build:
        parallelize_batches(
            [[p for p in batch if p.has_build_targets()] for batch in batches],
            lambda project: project.build_for_targets(source_maps=source_maps),
            ctx.config.parallelism,
        )

    logger.info(f"Bootstrapped {len(ctx.selected)} projects")
    return 0

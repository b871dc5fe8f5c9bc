# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: Apache-2.0

"""
Run and build command implementations.

Both commands walk the selected projects in dependency order, running
independent projects of a batch concurrently.
"""
import logging
from typing import List, Optional

from wspm.utils.cli.helpers import load_workspace
from wspm.utils.workspace import parallelize_batches, topologically_batch_projects

logger = logging.getLogger(__name__)


def run_script(
    script: str,
    script_args: List[str] = None,
    root: Optional[str] = None,
    include: List[str] = None,
    exclude: List[str] = None,
    parallelism: Optional[int] = None,
    verbose: bool = False,
    debug: bool = False,
) -> int:
    """
    Run ``script`` in every selected project that defines it.

    Returns:
        int: Exit code (0 for success, non-zero for failure)
    """
    ctx = load_workspace("run", root, include or [], exclude or [], parallelism, verbose=verbose, debug=debug)

    args = list(script_args or [])
    if args and args[0] == "--":
        args = args[1:]

    with_script = {name: p for name, p in ctx.selected.items() if p.has_script(script)}
    if not with_script:
        logger.warning(f"No projects define the script [{script}]")
        return 0

    logger.info(f"Running [{script}] in {len(with_script)} projects: {', '.join(with_script)}")

    batches = topologically_batch_projects(with_script, ctx.graph)
    parallelize_batches(
        batches,
        lambda project: project.run_script_streaming(script, args, debug=debug),
        ctx.config.parallelism,
    )
    return 0


def build_projects(
    root: Optional[str] = None,
    include: List[str] = None,
    exclude: List[str] = None,
    parallelism: Optional[int] = None,
    source_maps: bool = False,
    verbose: bool = False,
    debug: bool = False,
) -> int:
    """
    Build every selected project declaring build targets.

    Returns:
        int: Exit code (0 for success, non-zero for failure)
    """
    ctx = load_workspace("build", root, include or [], exclude or [], parallelism, verbose=verbose, debug=debug)

    targeted = {name: p for name, p in ctx.selected.items() if p.has_build_targets()}
    if not targeted:
        logger.warning("No projects declare build targets")
        return 0

    batches = topologically_batch_projects(targeted, ctx.graph)
    parallelize_batches(
        batches, lambda project: project.build_for_targets(source_maps=source_maps), ctx.config.parallelism
    )

    logger.info(f"Built {len(targeted)} projects")
    return 0

# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: Apache-2.0

"""
Clean command implementation.

Deletes the node_modules and target directories of each project, plus the
extra patterns a project lists in its clean configuration.
"""
import glob
import logging
import os
import shutil
from typing import List, Optional

from wspm.utils.cli.helpers import load_workspace
from wspm.utils.workspace import Project

logger = logging.getLogger(__name__)


def get_paths_to_clean(project: Project) -> List[str]:
    """Existing paths of ``project`` that the clean command removes."""
    paths = [project.node_modules_location, project.target_location]
    for pattern in project.get_clean_config().extra_patterns:
        paths.extend(sorted(glob.glob(os.path.join(project.path, pattern))))

    return [path for path in dict.fromkeys(paths) if os.path.lexists(path)]


def _delete_path(path: str) -> None:
    if os.path.isdir(path) and not os.path.islink(path):
        shutil.rmtree(path)
    else:
        os.unlink(path)


def clean_projects(
    root: Optional[str] = None,
    include: List[str] = None,
    exclude: List[str] = None,
    parallelism: Optional[int] = None,
    verbose: bool = False,
    debug: bool = False,
) -> int:
    """
    Clean the selected projects.

    Returns:
        int: Exit code (0 for success, non-zero for failure)
    """
    ctx = load_workspace(
        "clean", root, include or [], exclude or [], parallelism, verbose=verbose, debug=debug, validate=False
    )

    to_delete = []
    for project in ctx.selected.values():
        to_delete.extend(get_paths_to_clean(project))

    if not to_delete:
        logger.info("Nothing to delete")
        return 0

    for path in to_delete:
        logger.info(f"Deleting {os.path.relpath(path, ctx.root_path)}")
        _delete_path(path)

    logger.info(f"Deleted {len(to_delete)} paths")
    return 0

# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: Apache-2.0

"""
List command implementation.
"""
import logging
import os
from typing import List, Optional

from wspm.utils.cli.helpers import load_workspace

logger = logging.getLogger(__name__)


def list_projects(
    root: Optional[str] = None,
    include: List[str] = None,
    exclude: List[str] = None,
    parallelism: Optional[int] = None,
    verbose: bool = False,
    debug: bool = False,
) -> int:
    """
    List the discovered projects with their roles and build targets.

    Returns:
        int: Exit code (0 for success, non-zero for failure)
    """
    ctx = load_workspace(
        "list", root, include or [], exclude or [], parallelism, verbose=verbose, debug=debug, validate=False
    )

    print("\nPROJECTS")
    print("=" * 50)

    for name, project in ctx.selected.items():
        roles = []
        if project.is_workspace_root:
            roles.append("workspace root")
        if project.is_workspace_project:
            roles.append("workspace")
        if project.is_flagged_as_dev_only():
            roles.append("dev only")

        print(f"\n{name} {project.version or ''}".rstrip())
        print(f"  Path: {os.path.relpath(project.path, ctx.root_path)}")
        if roles:
            print(f"  Roles: {', '.join(roles)}")
        if project.has_build_targets():
            print(f"  Build targets: {', '.join(t.value for t in project.build_targets)}")
        if verbose and project.scripts:
            print(f"  Scripts: {', '.join(project.scripts)}")

    print(f"\nTotal projects: {len(ctx.selected)}")
    return 0

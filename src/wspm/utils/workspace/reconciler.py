# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: Apache-2.0

"""
Workspace link reconciliation.

yarn workspaces symlink every workspace project into the root node_modules,
even when nothing depends on it. Those links end up in build archives, so the
ones matching no dependency edge are removed after each root install.
"""
import logging
import os
import shutil
from typing import TYPE_CHECKING, List, Optional, Set

from wspm.utils.workspace.driver import PackageManagerDriver

if TYPE_CHECKING:
    from wspm.utils.workspace.project import Project

logger = logging.getLogger(__name__)


def find_unused_workspaces(workspaces_info) -> Set[str]:
    """Workspace members that no other workspace member depends on."""
    unused = set(workspaces_info)
    for info in workspaces_info.values():
        unused -= info.workspace_dependencies
    return unused


def remove_extraneous_links(root: "Project", driver: Optional[PackageManagerDriver] = None) -> List[str]:
    """
    Remove node_modules entries of the workspace root that match no dependency.

    Args:
        root: The workspace root project (any other project is a no-op)
        driver: Driver queried for workspace membership, defaults to the project's

    Returns:
        List[str]: Sorted names of the removed entries
    """
    if not root.is_workspace_root:
        return []

    driver = driver or root.driver
    unused = find_unused_workspaces(driver.workspaces_info(root.path))

    removed = []
    for name in sorted(unused):
        if name in root.production_dependencies or name in root.dev_dependencies:
            continue

        link_path = os.path.join(root.node_modules_location, name)
        if not os.path.lexists(link_path):
            continue

        logger.debug(f"No dependency on {name}, removing link in node_modules")
        if os.path.isdir(link_path) and not os.path.islink(link_path):
            shutil.rmtree(link_path)
        else:
            os.unlink(link_path)
        removed.append(name)

    return removed

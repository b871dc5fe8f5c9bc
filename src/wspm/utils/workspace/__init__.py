# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: Apache-2.0

"""
Workspace model and operations.

This package provides:
- Manifest parsing into immutable values
- The Project model and its package manager operations
- Cross-project dependency validation
- Reconciliation of workspace links in the root node_modules
- Project discovery, dependency graph and batched parallel execution
"""
from .driver import PackageManagerDriver, WorkspaceInfo, YarnDriver, configure_driver, get_driver
from .manifest import (
    BuildConfig,
    BuildTarget,
    CleanConfig,
    Manifest,
    ProjectSettings,
    is_link_dependency,
    read_manifest,
)
from .parallel import directory_lock, parallelize_batches
from .project import Project
from .projects import (
    build_project_graph,
    filter_projects,
    get_projects,
    get_workspace_root,
    topologically_batch_projects,
)
from .reconciler import remove_extraneous_links
from .validator import ensure_valid_project_dependency

__all__ = [
    "PackageManagerDriver",
    "WorkspaceInfo",
    "YarnDriver",
    "configure_driver",
    "get_driver",
    "BuildConfig",
    "BuildTarget",
    "CleanConfig",
    "Manifest",
    "ProjectSettings",
    "is_link_dependency",
    "read_manifest",
    "directory_lock",
    "parallelize_batches",
    "Project",
    "build_project_graph",
    "filter_projects",
    "get_projects",
    "get_workspace_root",
    "topologically_batch_projects",
    "remove_extraneous_links",
    "ensure_valid_project_dependency",
]

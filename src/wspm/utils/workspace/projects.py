# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: Apache-2.0

"""
Project discovery and dependency graph.

Projects are built in two phases: every manifest is read first, so workspace
membership is known before any Project is constructed; the role flags of a
Project are then fixed for its whole lifetime.
"""
import glob
import logging
import os
from typing import Dict, Iterable, List, Optional, Sequence

from wspm.utils.core.errors import CliError, DependencyMismatchError, DependencyValidationError
from wspm.utils.workspace.driver import PackageManagerDriver
from wspm.utils.workspace.manifest import MANIFEST_FILENAME, Manifest, read_manifest
from wspm.utils.workspace.project import Project

logger = logging.getLogger(__name__)

ProjectMap = Dict[str, Project]
ProjectGraph = Dict[str, List[Project]]


def _find_manifests(root_path: str, patterns: Iterable[str]) -> List[str]:
    """Return the directories matched by ``patterns`` that contain a manifest."""
    found = []
    for pattern in patterns:
        matches = sorted(glob.glob(os.path.join(root_path, pattern, MANIFEST_FILENAME)))
        for manifest_path in matches:
            project_dir = os.path.dirname(os.path.abspath(manifest_path))
            if "node_modules" in project_dir.split(os.sep):
                continue
            if project_dir not in found:
                found.append(project_dir)
    return found


def get_projects(
    root_path: str,
    project_globs: Sequence[str] = (),
    driver: Optional[PackageManagerDriver] = None,
) -> ProjectMap:
    """
    Discover the root project and every project matched by the workspace globs.

    Args:
        root_path: Directory of the root package.json
        project_globs: Additional glob patterns, relative to the root, of
            projects that are not yarn workspace members
        driver: Driver handed to every project (defaults to the global driver)

    Returns:
        ProjectMap: Projects by name, the root project first
    """
    root_path = os.path.abspath(root_path)
    root_manifest = read_manifest(os.path.join(root_path, MANIFEST_FILENAME))

    workspace_dirs = set(_find_manifests(root_path, root_manifest.workspaces or ()))
    workspace_dirs.discard(root_path)

    manifests: Dict[str, Manifest] = {root_path: root_manifest}
    for project_dir in _find_manifests(root_path, list(root_manifest.workspaces or ()) + list(project_globs)):
        if project_dir not in manifests:
            manifests[project_dir] = read_manifest(os.path.join(project_dir, MANIFEST_FILENAME))

    projects: ProjectMap = {}
    for project_dir, manifest in manifests.items():
        if manifest.name in projects:
            raise CliError(
                f"There are multiple projects with the same name [{manifest.name}]",
                {"first": projects[manifest.name].path, "second": project_dir},
            )
        projects[manifest.name] = Project(
            manifest, project_dir, is_workspace_project=project_dir in workspace_dirs, driver=driver
        )

    logger.debug(f"Found {len(projects)} projects in {root_path}")
    return projects


def filter_projects(
    projects: ProjectMap, include: Sequence[str] = (), exclude: Sequence[str] = ()
) -> ProjectMap:
    """Keep the projects named in ``include`` (all when empty) minus those in ``exclude``."""
    unknown = [name for name in list(include) + list(exclude) if name not in projects]
    if unknown:
        logger.warning(f"Ignoring unknown projects: {', '.join(unknown)}")

    return {
        name: project
        for name, project in projects.items()
        if (not include or name in include) and name not in exclude
    }


def get_workspace_root(projects: ProjectMap) -> Optional[Project]:
    for project in projects.values():
        if project.is_workspace_root:
            return project
    return None


def build_project_graph(projects: ProjectMap) -> ProjectGraph:
    """
    Map every project to the projects of the repository it depends on.

    Every cross-project dependency is validated; all mismatches are collected
    and reported together.

    Raises:
        DependencyValidationError: If any dependency declaration is invalid
    """
    graph: ProjectGraph = {}
    errors: List[DependencyMismatchError] = []

    for project in projects.values():
        project_deps = []
        dependent_is_in_workspace = project.is_workspace_project or project.is_workspace_root

        for dep_name in project.all_dependencies:
            dependency = projects.get(dep_name)
            if dependency is None:
                continue
            try:
                project.ensure_valid_project_dependency(dependency, dependent_is_in_workspace)
            except DependencyMismatchError as e:
                errors.append(e)
            project_deps.append(dependency)

        graph[project.name] = project_deps

    if errors:
        raise DependencyValidationError(errors)

    return graph


def topologically_batch_projects(projects: ProjectMap, graph: ProjectGraph) -> List[List[Project]]:
    """
    Group projects in batches whose dependencies all live in earlier batches.

    Dependencies on projects outside ``projects`` are ignored.

    Raises:
        CliError: If the graph contains a cycle
    """
    remaining = {
        name: {dep.name for dep in graph.get(name, []) if dep.name in projects} for name in projects
    }

    batches = []
    while remaining:
        ready = sorted(name for name, deps in remaining.items() if not deps)
        if not ready:
            raise CliError(
                "Encountered a cycle in the dependency graph", {"projects": ", ".join(sorted(remaining))}
            )

        batches.append([projects[name] for name in ready])
        for name in ready:
            del remaining[name]
        for deps in remaining.values():
            deps.difference_update(ready)

    return batches

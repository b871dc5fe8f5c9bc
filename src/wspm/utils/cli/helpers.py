# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: Apache-2.0

"""
Helper utilities for CLI operations.

Contains the workspace loading shared by every command: configuration,
logging, driver setup, project discovery and graph validation.
"""
import logging
import os
from dataclasses import dataclass
from typing import Optional, Sequence

from wspm.utils.config import WorkspaceConfig, load_workspace_config, setup_data_dir
from wspm.utils.core.process import configure_executor
from wspm.utils.logging import setup_command_logging
from wspm.utils.workspace import (
    build_project_graph,
    configure_driver,
    filter_projects,
    get_projects,
)
from wspm.utils.workspace.projects import ProjectGraph, ProjectMap

logger = logging.getLogger(__name__)


@dataclass
class WorkspaceContext:
    """Everything a command needs to know about the workspace."""

    root_path: str
    config: WorkspaceConfig
    projects: ProjectMap
    selected: ProjectMap
    graph: Optional[ProjectGraph]


def load_workspace(
    command: str,
    root: Optional[str] = None,
    include: Sequence[str] = (),
    exclude: Sequence[str] = (),
    parallelism: Optional[int] = None,
    verbose: bool = False,
    debug: bool = False,
    validate: bool = True,
) -> WorkspaceContext:
    """
    Load configuration, set up command logging and discover the projects.

    Args:
        command: Command name, used for the log file name
        root: Workspace root directory, defaults to the current directory
        include: Project names to operate on (all when empty)
        exclude: Project names to skip
        parallelism: Override of the configured parallelism
        verbose: Whether to show debug messages
        debug: Whether to show debug output
        validate: Whether to build and validate the dependency graph

    Returns:
        WorkspaceContext: Loaded workspace

    Raises:
        DependencyValidationError: If validation finds invalid dependencies
    """
    root_path = os.path.abspath(root or os.getcwd())
    config = load_workspace_config(root_path, {"parallelism": parallelism})

    setup_command_logging(command, verbose=verbose, debug=debug, data_dir=setup_data_dir(root_path, config.data_dir))

    configure_executor(config.command_timeout)
    driver = configure_driver(config.package_manager, config.command_timeout)

    projects = get_projects(root_path, config.project_globs, driver=driver)
    graph = build_project_graph(projects) if validate else None
    selected = filter_projects(projects, include, exclude)

    logger.debug(f"Selected {len(selected)} of {len(projects)} projects")
    return WorkspaceContext(root_path=root_path, config=config, projects=projects, selected=selected, graph=graph)

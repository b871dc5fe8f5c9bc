# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: Apache-2.0

"""
Cross-project dependency validation.

A project that depends on another project of the same repository must declare
that dependency either as the workspace version (workspace members and the
workspace root) or as a ``link:`` to the dependency's directory.
"""
import logging
import os
import re
from typing import TYPE_CHECKING, Optional

from wspm.utils.core.errors import DependencyMismatchError, MismatchKind
from wspm.utils.workspace.manifest import LINK_PREFIX, is_link_dependency

if TYPE_CHECKING:
    from wspm.utils.workspace.project import Project

logger = logging.getLogger(__name__)


def normalize_path(path: str) -> str:
    """Collapse every run of path separators into a single ``/``."""
    return re.sub(r"[\\/]+", "/", path)


def expected_dependency_version(
    dependent: "Project", dependency: "Project", dependent_is_in_workspace: bool
) -> Optional[str]:
    if dependent_is_in_workspace:
        return dependency.version
    return LINK_PREFIX + normalize_path(os.path.relpath(dependency.path, dependent.path))


def ensure_valid_project_dependency(
    dependent: "Project", dependency: "Project", dependent_is_in_workspace: bool
) -> None:
    """
    Check the version ``dependent`` declares for ``dependency``.

    Raises:
        DependencyMismatchError: If the declaration differs from the expected one
    """
    actual = dependent.all_dependencies.get(dependency.name)
    expected = expected_dependency_version(dependent, dependency, dependent_is_in_workspace)

    if actual == expected:
        return

    if is_link_dependency(actual) and dependent_is_in_workspace:
        kind = MismatchKind.SHOULD_USE_WORKSPACE
    elif is_link_dependency(actual):
        kind = MismatchKind.WRONG_LINK_PATH
    else:
        kind = MismatchKind.NOT_LOCAL

    logger.debug(f"[{dependent.name}] -> [{dependency.name}]: {kind.name} ({actual!r} != {expected!r})")

    raise DependencyMismatchError(
        dependent=dependent.name,
        dependency=dependency.name,
        kind=kind,
        actual=_fragment(dependency.name, actual),
        expected=_fragment(dependency.name, expected),
        package=f"{dependent.name} ({dependent.manifest_location})",
    )


def _fragment(name: str, version: Optional[str]) -> str:
    """Format a dependency declaration the way it appears in package.json."""
    if version is None:
        return f'"{name}": <not declared>'
    return f'"{name}": "{version}"'

# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: Apache-2.0

"""
Shared fixtures for the workspace tests.

Workspaces are built in temporary directories from manifest dictionaries and
operated through a recording fake driver, so no test spawns the package manager.
"""
import json
import logging
import os
import signal
from typing import Any, Dict, Optional

import pytest

from wspm.utils.core import shared_state
from wspm.utils.core.process import ProcessResult
from wspm.utils.logging import cleanup_logging
from wspm.utils.workspace.driver import PackageManagerDriver, WorkspaceInfo
from wspm.utils.workspace.manifest import parse_manifest
from wspm.utils.workspace.project import Project


class FakeDriver(PackageManagerDriver):
    """Driver recording every call instead of spawning yarn."""

    def __init__(self, workspaces: Optional[Dict[str, WorkspaceInfo]] = None):
        self.calls = []
        self.workspaces = workspaces or {}

    def install(self, directory, extra_args=(), use_add=False):
        self.calls.append(("install", directory, list(extra_args), use_add))

    def run_script(self, script, args, project):
        self.calls.append(("run_script", script, list(args), project.name))
        return ProcessResult(0, command=["yarn", "run", script])

    def run_script_streaming(self, script, args, project, debug=False):
        self.calls.append(("run_script_streaming", script, list(args), project.name))
        return ProcessResult(0, command=["yarn", "run", script])

    def workspaces_info(self, directory):
        self.calls.append(("workspaces_info", directory))
        return self.workspaces

    def build_targeted_package(self, project, source_maps=False):
        self.calls.append(("build", project.name, source_maps))

    def call_names(self):
        return [call[0] for call in self.calls]


def write_manifest(directory, manifest: Dict[str, Any]) -> str:
    """Write ``manifest`` as package.json inside ``directory`` and return the file path."""
    os.makedirs(directory, exist_ok=True)
    path = os.path.join(str(directory), "package.json")
    with open(path, "w", encoding="utf-8") as f:
        json.dump(manifest, f, indent=2)
    return path


def make_project(path: str, manifest: Dict[str, Any], **kwargs) -> Project:
    """Build a Project without touching the filesystem."""
    return Project(parse_manifest(manifest, os.path.join(path, "package.json")), path, **kwargs)


@pytest.fixture
def fake_driver():
    return FakeDriver()


@pytest.fixture
def workspace(tmp_path):
    """
    A yarn workspace with three members and one project outside the workspace.

    root (workspaces: packages/*) depends on @ws/a
    packages/a depends on @ws/b
    packages/b, packages/c have no internal dependencies
    plugins/p links to @ws/b
    """
    write_manifest(
        tmp_path,
        {
            "name": "root",
            "version": "1.0.0",
            "private": True,
            "workspaces": ["packages/*"],
            "dependencies": {"@ws/a": "1.0.0"},
        },
    )
    write_manifest(
        tmp_path / "packages" / "a",
        {"name": "@ws/a", "version": "1.0.0", "dependencies": {"@ws/b": "1.0.0", "lodash": "^4.17.21"}},
    )
    write_manifest(
        tmp_path / "packages" / "b",
        {"name": "@ws/b", "version": "1.0.0", "scripts": {"wspm:bootstrap": "tsc"}, "wspm": {"node": True}},
    )
    write_manifest(tmp_path / "packages" / "c", {"name": "@ws/c", "version": "1.0.0"})
    write_manifest(
        tmp_path / "plugins" / "p",
        {"name": "plugin-p", "version": "0.1.0", "dependencies": {"@ws/b": "link:../../packages/b"}},
    )
    return tmp_path


@pytest.fixture(autouse=True)
def reset_state():
    root_logger = logging.getLogger()
    handlers, level = list(root_logger.handlers), root_logger.level
    shared_state.reset()
    yield
    shared_state.reset()
    cleanup_logging()
    # Drop the console handlers the CLI attached to the captured stdout
    for handler in root_logger.handlers[:]:
        if handler not in handlers:
            root_logger.removeHandler(handler)
    root_logger.setLevel(level)


@pytest.fixture
def restore_signals():
    """Restore the SIGINT/SIGTERM handlers replaced by the CLI entry point."""
    saved = {sig: signal.getsignal(sig) for sig in (signal.SIGINT, signal.SIGTERM)}
    yield
    for sig, handler in saved.items():
        signal.signal(sig, handler)

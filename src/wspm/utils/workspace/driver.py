# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: Apache-2.0

"""
Package manager driver.

The driver is the narrow command interface through which projects install
dependencies, run scripts and build targets. ``PackageManagerDriver`` defines
the contract; ``YarnDriver`` implements it by spawning yarn through
``wspm.utils.core.process``.
"""
import json
import logging
import os
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict, FrozenSet, List, Optional, Sequence

from wspm.utils.core.errors import CliError, PatchError, ProcessError
from wspm.utils.core.process import ProcessResult, run_command

if TYPE_CHECKING:
    from wspm.utils.workspace.project import Project

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WorkspaceInfo:
    """Workspace membership of one package as reported by the package manager."""

    location: str
    workspace_dependencies: FrozenSet[str] = field(default_factory=frozenset)


class PackageManagerDriver(ABC):
    """Contract between the project model and the external package manager."""

    @abstractmethod
    def install(self, directory: str, extra_args: Sequence[str] = (), use_add: bool = False) -> None:
        """Install dependencies in ``directory``; ``use_add`` adds the packages named in ``extra_args``."""

    @abstractmethod
    def run_script(self, script: str, args: Sequence[str], project: "Project") -> ProcessResult:
        """Run a manifest script inside the project directory and capture its output."""

    @abstractmethod
    def run_script_streaming(
        self, script: str, args: Sequence[str], project: "Project", debug: bool = False
    ) -> ProcessResult:
        """Run a manifest script inside the project directory, streaming its output."""

    @abstractmethod
    def workspaces_info(self, directory: str) -> Dict[str, WorkspaceInfo]:
        """Describe every workspace member of the workspace rooted at ``directory``."""

    @abstractmethod
    def build_targeted_package(self, project: "Project", source_maps: bool = False) -> None:
        """Build every declared target of the project."""

    def patch_file(self, path: str, search: str, replace: str) -> int:
        """
        Replace every literal occurrence of ``search`` with ``replace`` in a text file.

        The file is read and written without newline translation, so every
        byte outside the replaced occurrences is kept as found.

        Returns:
            int: Number of replaced occurrences

        Raises:
            PatchError: If the file is missing or does not contain ``search``
        """
        try:
            with open(path, "r", encoding="utf-8", newline="") as f:
                content = f.read()
        except FileNotFoundError:
            raise PatchError(f"Unable to patch {os.path.basename(path)}: file not found", {"path": path})

        count = content.count(search)
        if count == 0:
            raise PatchError(
                f"Unable to patch {os.path.basename(path)}: text not found",
                {"path": path, "search": search, "replace": replace},
            )

        with open(path, "w", encoding="utf-8", newline="") as f:
            f.write(content.replace(search, replace))

        logger.debug(f"Patched {count} occurrence(s) of {search!r} in {path}")
        return count


class YarnDriver(PackageManagerDriver):
    """Driver spawning the yarn (v1) command line."""

    def __init__(self, executable: str = "yarn", timeout: Optional[float] = None):
        self.executable = executable
        self.timeout = timeout

    def _run(self, args: List[str], cwd: str, stream: bool = False, prefix: Optional[str] = None) -> ProcessResult:
        command = [self.executable] + args
        result = run_command(command, cwd=cwd, timeout=self.timeout, stream_output=stream, prefix=prefix)
        if result.failed:
            if result.interrupted:
                reason = "was interrupted"
            elif result.timed_out:
                reason = f"timed out after {self.timeout}s"
            else:
                reason = f"exited with code {result.returncode}"
            raise ProcessError(f"Command [{' '.join(command)}] {reason}", command, cwd, result.returncode, result.output)
        return result

    def install(self, directory: str, extra_args: Sequence[str] = (), use_add: bool = False) -> None:
        args = ["add" if use_add else "install", "--non-interactive"] + list(extra_args)
        self._run(args, directory)

    def run_script(self, script: str, args: Sequence[str], project: "Project") -> ProcessResult:
        return self._run(["run", script] + list(args), project.path)

    def run_script_streaming(
        self, script: str, args: Sequence[str], project: "Project", debug: bool = False
    ) -> ProcessResult:
        yarn_args = ["run", script] + list(args)
        if debug:
            yarn_args.insert(0, "--verbose")
        return self._run(yarn_args, project.path, stream=True, prefix=project.name)

    def workspaces_info(self, directory: str) -> Dict[str, WorkspaceInfo]:
        result = self._run(["--json", "workspaces", "info"], directory)
        return parse_workspaces_info(result.stdout)

    def build_targeted_package(self, project: "Project", source_maps: bool = False) -> None:
        for target in project.build_targets:
            script = f"build:{target.value}"
            if project.has_script(script):
                args = ["run", script]
            else:
                args = ["run", "build", "--target", target.value]
            if source_maps:
                args.append("--source-maps")

            logger.info(f"[{project.name}] building for target [{target.value}]")
            self._run(args, project.path, stream=True, prefix=project.name)


def parse_workspaces_info(stdout: str) -> Dict[str, WorkspaceInfo]:
    """
    Parse the output of ``yarn --json workspaces info``.

    yarn wraps the JSON document describing the workspaces in a log event whose
    ``data`` field is itself a JSON string.
    """
    try:
        payload = json.loads(json.loads(stdout)["data"])
        return {
            name: WorkspaceInfo(
                location=info.get("location", ""),
                workspace_dependencies=frozenset(info.get("workspaceDependencies", [])),
            )
            for name, info in payload.items()
        }
    except (ValueError, KeyError, TypeError, AttributeError):
        raise CliError(
            "'yarn --json workspaces info' produced unexpected output", {"output": stdout.strip()}
        )


# Global driver instance
_global_driver = None


def get_driver() -> PackageManagerDriver:
    """Get the global package manager driver, creating a yarn driver on first use."""
    global _global_driver
    if _global_driver is None:
        _global_driver = YarnDriver()
    return _global_driver


def configure_driver(package_manager: str = "yarn", timeout: Optional[float] = None) -> PackageManagerDriver:
    """Replace the global driver according to the workspace configuration."""
    global _global_driver
    _global_driver = YarnDriver(executable=package_manager, timeout=timeout)
    return _global_driver

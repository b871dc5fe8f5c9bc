# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: Apache-2.0

"""
Project model.

A Project wraps one package manifest and the directory containing it. Its
derived views (merged dependencies, build targets, executables) are computed
from the immutable manifest, and every operation on the package directory is
delegated to the package manager driver.
"""
import logging
import os
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Sequence

from wspm.utils.core.errors import ManifestError, PatchError
from wspm.utils.core.process import ProcessResult
from wspm.utils.workspace.driver import PackageManagerDriver, get_driver
from wspm.utils.workspace.manifest import (
    MANIFEST_FILENAME,
    BuildConfig,
    BuildTarget,
    CleanConfig,
    Manifest,
    read_manifest,
)
from wspm.utils.workspace.parallel import directory_lock
from wspm.utils.workspace.reconciler import remove_extraneous_links
from wspm.utils.workspace.validator import ensure_valid_project_dependency

logger = logging.getLogger(__name__)

LOCKFILE_NAME = "yarn.lock"


class Project:
    """One package of the workspace."""

    @classmethod
    def from_manifest(cls, manifest_path: str, **kwargs) -> "Project":
        manifest_path = os.path.abspath(manifest_path)
        return cls(read_manifest(manifest_path), os.path.dirname(manifest_path), **kwargs)

    @classmethod
    def from_path(cls, project_path: str, **kwargs) -> "Project":
        return cls.from_manifest(os.path.join(project_path, MANIFEST_FILENAME), **kwargs)

    def __init__(
        self,
        manifest: Manifest,
        project_path: str,
        is_workspace_project: bool = False,
        driver: Optional[PackageManagerDriver] = None,
    ):
        self.manifest = manifest
        self.path = os.path.abspath(project_path)
        self._is_workspace_project = is_workspace_project
        self._driver = driver

        # Absolute locations inside the project, they might not exist
        self.manifest_location = os.path.join(self.path, MANIFEST_FILENAME)
        self.node_modules_location = os.path.join(self.path, "node_modules")
        self.target_location = os.path.join(self.path, "target")

        # Production entries win over dev entries declaring the same package
        self.all_dependencies: Mapping[str, str] = MappingProxyType(
            {**manifest.dev_dependencies, **manifest.dependencies}
        )
        self.build_targets: List[BuildTarget] = [t for t in BuildTarget if t in manifest.settings.targets]

    def __repr__(self) -> str:
        return f"Project({self.name!r}, {self.path!r})"

    @property
    def name(self) -> str:
        return self.manifest.name

    @property
    def version(self) -> Optional[str]:
        return self.manifest.version

    @property
    def json(self) -> Mapping:
        """The parsed package.json, read-only."""
        return self.manifest.raw

    @property
    def production_dependencies(self) -> Mapping[str, str]:
        return self.manifest.dependencies

    @property
    def dev_dependencies(self) -> Mapping[str, str]:
        return self.manifest.dev_dependencies

    @property
    def scripts(self) -> Mapping[str, str]:
        return self.manifest.scripts

    @property
    def is_workspace_root(self) -> bool:
        return self.manifest.is_workspace_root

    @property
    def is_workspace_project(self) -> bool:
        return self._is_workspace_project

    @property
    def driver(self) -> PackageManagerDriver:
        return self._driver or get_driver()

    def ensure_valid_project_dependency(self, project: "Project", dependent_project_is_in_workspace: bool) -> None:
        ensure_valid_project_dependency(self, project, dependent_project_is_in_workspace)

    def get_build_config(self) -> BuildConfig:
        return self.manifest.settings.build

    def get_clean_config(self) -> CleanConfig:
        return self.manifest.settings.clean

    def get_intermediate_build_directory(self) -> str:
        """
        Returns the directory that should be copied into the distributable build.

        It can be configured to only include the project's build output instead
        of everything located in the project directory.
        """
        return os.path.normpath(os.path.join(self.path, self.get_build_config().intermediate_build_directory or "."))

    def is_flagged_as_dev_only(self) -> bool:
        return self.manifest.settings.dev_only

    def has_script(self, name: str) -> bool:
        return name in self.scripts

    def has_build_targets(self) -> bool:
        return len(self.build_targets) > 0

    def has_dependencies(self) -> bool:
        return len(self.all_dependencies) > 0

    def get_executables(self) -> Dict[str, str]:
        raw = self.manifest.bin

        if raw is None or raw == "":
            return {}

        if isinstance(raw, str):
            return {self.name: os.path.normpath(os.path.join(self.path, raw))}

        if isinstance(raw, dict) and all(isinstance(v, str) for v in raw.values()):
            return {name: os.path.normpath(os.path.join(self.path, path)) for name, path in raw.items()}

        raise ManifestError(
            f'[{self.name}] has an invalid "bin" field in its package.json, expected an object or a string',
            {
                "bin_config": repr(raw),
                "package": f"{self.name} ({self.manifest_location})",
            },
        )

    def run_script(self, script_name: str, args: Sequence[str] = ()) -> ProcessResult:
        logger.info(f"Running script [{script_name}] in [{self.name}]:")
        with directory_lock(self.path):
            return self.driver.run_script(script_name, list(args), self)

    def run_script_streaming(
        self, script_name: str, args: Sequence[str] = (), debug: bool = False
    ) -> ProcessResult:
        with directory_lock(self.path):
            return self.driver.run_script_streaming(script_name, list(args), self, debug=debug)

    def build_for_targets(self, source_maps: bool = False) -> bool:
        if not self.has_build_targets():
            logger.warning(f"There are no build targets defined for [{self.name}]")
            return False

        with directory_lock(self.path):
            self.driver.build_targeted_package(self, source_maps=source_maps)
        return True

    def install_dependencies(self, extra_args: Sequence[str] = ()) -> None:
        logger.info(f"[{self.name}] running yarn")

        with directory_lock(self.path):
            self.driver.install(self.path, list(extra_args))
            self.remove_extraneous_links()

    def install_dependency_version(
        self, dep_name: str, version: str, dev: bool = False, range: Optional[str] = None
    ) -> None:
        """
        Install a specific version of a dependency and update the package.json.

        When a range is not specified, ^<version> is used. The range is then
        placed in the package.json with intentionally no validation.
        """
        logger.info(f"[{self.name}] running yarn to install {dep_name}@{version}")

        range_to_use = range or f"^{version}"
        extra_args = [f"{dep_name}@{version}"]
        if dev:
            extra_args.append("--dev")

        with directory_lock(self.path):
            if self.is_workspace_project:
                # Workspace members share the root lockfile, yarn only reinstalls them
                self.driver.install(self.path)
            else:
                self.driver.install(self.path, extra_args, use_add=True)

            logger.info(f"[{self.name}] updating manifests with {dep_name}@{range_to_use}")

            self._patch(self.manifest_location, f'"{dep_name}": "{version}"', f'"{dep_name}": "{range_to_use}"')
            # The lock-file of workspace packages are symlinked to the root project's and editing the one in the project suffices
            self._patch(
                os.path.join(self.path, LOCKFILE_NAME), f"{dep_name}@{version}", f"{dep_name}@{range_to_use}"
            )

            self.remove_extraneous_links()

    def _patch(self, path: str, search: str, replace: str) -> None:
        try:
            self.driver.patch_file(path, search, replace)
        except PatchError as e:
            if not self.is_workspace_project:
                raise
            logger.warning(f"[{self.name}] {e.message}, nothing was pinned in {path}")

    def remove_extraneous_links(self) -> List[str]:
        return remove_extraneous_links(self, self.driver)

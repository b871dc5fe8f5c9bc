# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: Apache-2.0

"""
Package manifest reader.

Parses ``package.json`` files into immutable Manifest values. The wspm
settings block of a manifest is validated here, at load time, into typed
configuration objects so the rest of the code never looks up free-form keys.
"""
import json
import logging
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, FrozenSet, Mapping, Optional, Tuple

from wspm.utils.core.errors import ManifestError

logger = logging.getLogger(__name__)

MANIFEST_FILENAME = "package.json"
SETTINGS_KEY = "wspm"
LINK_PREFIX = "link:"


class BuildTarget(Enum):
    """Output flavors a package may opt into, in build order."""

    NODE = "node"
    WEB = "web"


@dataclass(frozen=True)
class BuildConfig:
    skip: bool = False
    intermediate_build_directory: Optional[str] = None
    oss: bool = False


@dataclass(frozen=True)
class CleanConfig:
    extra_patterns: Tuple[str, ...] = ()


@dataclass(frozen=True)
class ProjectSettings:
    """Typed view of the ``"wspm"`` block of a manifest."""

    build: BuildConfig = field(default_factory=BuildConfig)
    clean: CleanConfig = field(default_factory=CleanConfig)
    dev_only: bool = False
    targets: FrozenSet[BuildTarget] = frozenset()


@dataclass(frozen=True)
class Manifest:
    """Immutable parsed package manifest."""

    name: str
    version: Optional[str]
    dependencies: Mapping[str, str]
    dev_dependencies: Mapping[str, str]
    scripts: Mapping[str, str]
    bin: Any
    workspaces: Optional[Tuple[str, ...]]
    settings: ProjectSettings
    raw: Mapping[str, Any]
    location: str

    @property
    def is_workspace_root(self) -> bool:
        return self.workspaces is not None


def is_link_dependency(version: Optional[str]) -> bool:
    return isinstance(version, str) and version.startswith(LINK_PREFIX)


def read_manifest(manifest_path: str) -> Manifest:
    """
    Read and parse the manifest file at ``manifest_path``.

    Raises:
        ManifestError: If the file is missing, unreadable or not a JSON object
    """
    try:
        with open(manifest_path, "r", encoding="utf-8") as f:
            raw = json.load(f)
    except FileNotFoundError:
        raise ManifestError(f"Manifest not found: {manifest_path}", {"path": manifest_path})
    except OSError as e:
        raise ManifestError(f"Unable to read manifest {manifest_path}: {e}", {"path": manifest_path})
    except json.JSONDecodeError as e:
        raise ManifestError(f"Manifest {manifest_path} is not valid JSON: {e}", {"path": manifest_path})

    logger.debug(f"Loaded manifest {manifest_path}")
    return parse_manifest(raw, manifest_path)


def parse_manifest(raw: Any, location: str) -> Manifest:
    """Build a Manifest from an already decoded JSON document."""
    if not isinstance(raw, dict):
        raise ManifestError(f"Manifest {location} must contain a JSON object", {"path": location})

    name = raw.get("name")
    if not isinstance(name, str) or not name:
        raise ManifestError(f"Manifest {location} has no \"name\" field", {"path": location})

    version = raw.get("version")
    if version is not None and not isinstance(version, str):
        raise ManifestError(
            f"[{name}] has an invalid \"version\" field", {"version": repr(version), "path": location}
        )

    return Manifest(
        name=name,
        version=version,
        dependencies=_string_mapping(raw, "dependencies", name, location),
        dev_dependencies=_string_mapping(raw, "devDependencies", name, location),
        scripts=_string_mapping(raw, "scripts", name, location),
        bin=raw.get("bin"),
        workspaces=_parse_workspaces(raw, name, location),
        settings=_parse_settings(raw.get(SETTINGS_KEY), name, location),
        raw=MappingProxyType(raw),
        location=location,
    )


def _string_mapping(raw: Dict[str, Any], key: str, name: str, location: str) -> Mapping[str, str]:
    value = raw.get(key) or {}
    if not isinstance(value, dict) or not all(isinstance(v, str) for v in value.values()):
        raise ManifestError(
            f"[{name}] has an invalid \"{key}\" field, expected an object of strings",
            {key: repr(value), "path": location},
        )
    return MappingProxyType(dict(value))


def _parse_workspaces(raw: Dict[str, Any], name: str, location: str) -> Optional[Tuple[str, ...]]:
    if "workspaces" not in raw:
        return None

    value = raw["workspaces"]
    # yarn accepts both ["packages/*"] and {"packages": ["packages/*"], "nohoist": [...]}
    if isinstance(value, dict):
        value = value.get("packages", [])
    if value is None:
        value = []
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ManifestError(
            f"[{name}] has an invalid \"workspaces\" field",
            {"workspaces": repr(raw["workspaces"]), "path": location},
        )
    return tuple(value)


def _parse_settings(block: Any, name: str, location: str) -> ProjectSettings:
    if block is None:
        return ProjectSettings()
    if not isinstance(block, dict):
        raise ManifestError(
            f"[{name}] has an invalid \"{SETTINGS_KEY}\" block, expected an object",
            {SETTINGS_KEY: repr(block), "path": location},
        )

    def option(container: Dict[str, Any], key: str, expected: type, label: str, default: Any = None) -> Any:
        value = container.get(key, default)
        if value is not None and not isinstance(value, expected):
            raise ManifestError(
                f"[{name}] has an invalid \"{SETTINGS_KEY}.{label}\" option, expected {expected.__name__}",
                {label: repr(value), "path": location},
            )
        return value

    build_block = option(block, "build", dict, "build") or {}
    clean_block = option(block, "clean", dict, "clean") or {}

    extra_patterns = option(clean_block, "extraPatterns", list, "clean.extraPatterns") or []
    if not all(isinstance(p, str) for p in extra_patterns):
        raise ManifestError(
            f"[{name}] has an invalid \"{SETTINGS_KEY}.clean.extraPatterns\" option, expected a list of strings",
            {"clean.extraPatterns": repr(extra_patterns), "path": location},
        )

    return ProjectSettings(
        build=BuildConfig(
            skip=bool(option(build_block, "skip", bool, "build.skip", False)),
            intermediate_build_directory=option(
                build_block, "intermediateBuildDirectory", str, "build.intermediateBuildDirectory"
            ),
            oss=bool(option(build_block, "oss", bool, "build.oss", False)),
        ),
        clean=CleanConfig(extra_patterns=tuple(extra_patterns)),
        dev_only=bool(option(block, "devOnly", bool, "devOnly", False)),
        targets=frozenset(target for target in BuildTarget if block.get(target.value)),
    )

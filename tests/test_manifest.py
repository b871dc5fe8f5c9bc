# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: Apache-2.0

"""
Tests for package manifest parsing.
"""
import dataclasses

import allure
import pytest

from conftest import write_manifest
from wspm.utils.core.errors import ManifestError
from wspm.utils.workspace.manifest import (
    BuildConfig,
    BuildTarget,
    is_link_dependency,
    parse_manifest,
    read_manifest,
)


@allure.title("Manifest fields and the wspm settings block are parsed")
def test_read_manifest(tmp_path):
    path = write_manifest(
        tmp_path,
        {
            "name": "@ws/app",
            "version": "2.1.0",
            "dependencies": {"lodash": "^4.17.21"},
            "devDependencies": {"jest": "29.7.0"},
            "scripts": {"build": "tsc"},
            "wspm": {
                "web": True,
                "devOnly": True,
                "build": {"intermediateBuildDirectory": "target/build", "oss": True},
                "clean": {"extraPatterns": ["coverage", "*.tsbuildinfo"]},
            },
        },
    )

    manifest = read_manifest(path)

    assert manifest.name == "@ws/app"
    assert manifest.version == "2.1.0"
    assert dict(manifest.dependencies) == {"lodash": "^4.17.21"}
    assert dict(manifest.dev_dependencies) == {"jest": "29.7.0"}
    assert dict(manifest.scripts) == {"build": "tsc"}
    assert manifest.location == path
    assert not manifest.is_workspace_root

    settings = manifest.settings
    assert settings.targets == frozenset({BuildTarget.WEB})
    assert settings.dev_only is True
    assert settings.build == BuildConfig(skip=False, intermediate_build_directory="target/build", oss=True)
    assert settings.clean.extra_patterns == ("coverage", "*.tsbuildinfo")


def test_defaults_without_settings_block():
    manifest = parse_manifest({"name": "plain"}, "/ws/plain/package.json")

    assert manifest.version is None
    assert dict(manifest.dependencies) == {}
    assert manifest.settings.targets == frozenset()
    assert manifest.settings.build == BuildConfig()
    assert manifest.settings.clean.extra_patterns == ()
    assert manifest.settings.dev_only is False


@pytest.mark.parametrize(
    "workspaces, expected",
    [
        (["packages/*"], ("packages/*",)),
        ({"packages": ["packages/*", "plugins/*"], "nohoist": ["**/foo"]}, ("packages/*", "plugins/*")),
        ([], ()),
    ],
)
def test_workspaces_forms(workspaces, expected):
    manifest = parse_manifest({"name": "root", "workspaces": workspaces}, "/ws/package.json")

    assert manifest.workspaces == expected
    assert manifest.is_workspace_root


def test_manifest_is_immutable():
    manifest = parse_manifest({"name": "app", "dependencies": {"a": "1.0.0"}}, "/ws/app/package.json")

    with pytest.raises(dataclasses.FrozenInstanceError):
        manifest.name = "other"
    with pytest.raises(TypeError):
        manifest.dependencies["b"] = "2.0.0"
    with pytest.raises(TypeError):
        manifest.raw["name"] = "other"


def test_missing_manifest(tmp_path):
    with pytest.raises(ManifestError) as exc_info:
        read_manifest(str(tmp_path / "package.json"))

    assert "Manifest not found" in exc_info.value.message
    assert exc_info.value.meta["path"] == str(tmp_path / "package.json")


def test_malformed_json(tmp_path):
    path = tmp_path / "package.json"
    path.write_text("{ not json")

    with pytest.raises(ManifestError, match="is not valid JSON"):
        read_manifest(str(path))


@pytest.mark.parametrize(
    "raw, message",
    [
        (["not", "an", "object"], "must contain a JSON object"),
        ({"version": "1.0.0"}, 'has no "name" field'),
        ({"name": "app", "version": 1}, 'invalid "version" field'),
        ({"name": "app", "dependencies": {"a": 1}}, 'invalid "dependencies" field'),
        ({"name": "app", "workspaces": "packages/*"}, 'invalid "workspaces" field'),
        ({"name": "app", "wspm": ["node"]}, 'invalid "wspm" block'),
        ({"name": "app", "wspm": {"build": {"skip": "yes"}}}, '"wspm.build.skip" option'),
        ({"name": "app", "wspm": {"clean": {"extraPatterns": [1]}}}, '"wspm.clean.extraPatterns" option'),
    ],
)
def test_invalid_manifests(raw, message):
    with pytest.raises(ManifestError) as exc_info:
        parse_manifest(raw, "/ws/app/package.json")

    assert message in exc_info.value.message
    assert exc_info.value.meta["path"] == "/ws/app/package.json"


@pytest.mark.parametrize(
    "version, expected",
    [("link:../lib", True), ("^1.0.0", False), ("file:../lib", False), (None, False)],
)
def test_is_link_dependency(version, expected):
    assert is_link_dependency(version) is expected

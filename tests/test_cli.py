# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: Apache-2.0

"""
End-to-end tests of the command line entry point.

Commands run against temporary workspaces with the package manager driver
replaced by the recording fake.
"""
import os
import signal

import allure
import pytest

from conftest import FakeDriver, write_manifest
import wspm.cli as cli_module
from wspm.cli import main
from wspm.utils.cli.handlers import handle_interrupt
from wspm.utils.cli import helpers
from wspm.utils.cli.parsers import create_argument_parser
from wspm.utils.core import shared_state
from wspm.utils.core.process import get_executor
from wspm.utils.workspace.driver import WorkspaceInfo


@pytest.fixture
def cli_driver(monkeypatch, restore_signals):
    """Install a fake driver for the commands and keep the environment clean."""
    for var in ("WSPM_PACKAGE_MANAGER", "WSPM_PARALLELISM", "WSPM_COMMAND_TIMEOUT", "WSPM_DATA_DIR"):
        monkeypatch.delenv(var, raising=False)

    driver = FakeDriver()
    monkeypatch.setattr(helpers, "configure_driver", lambda package_manager, timeout: driver)
    return driver


def test_parser_global_and_command_flags():
    args = create_argument_parser().parse_args(["-d", "run", "-i", "@ws/a", "test", "--", "--ci"])

    assert args.global_debug
    assert args.command == "run"
    assert args.script == "test"
    assert args.include == ["@ws/a"]
    assert args.script_args[-1:] == ["--ci"]


def test_parser_install_version():
    args = create_argument_parser().parse_args(
        ["install-version", "app", "jest", "29.7.0", "--dev", "--range", "~29.7.0"]
    )

    assert (args.project, args.dependency, args.dependency_version) == ("app", "jest", "29.7.0")
    assert args.dev
    assert args.version_range == "~29.7.0"


def test_no_command_prints_help(capsys, restore_signals):
    assert main([]) == 0
    assert "usage:" in capsys.readouterr().out


@allure.title("The list command prints every project with its roles")
def test_list(workspace, cli_driver, capsys):
    assert main(["list", "--root", str(workspace)]) == 0

    out = capsys.readouterr().out
    assert "Total projects: 4" in out
    assert "root 1.0.0" in out
    assert "Roles: workspace root" in out
    assert "Build targets: node" in out
    assert os.path.isfile(workspace / ".wspm" / "logs" / "wspm_list.log")


def test_validate_success(workspace, cli_driver):
    (workspace / "wspm.yml").write_text("project_globs:\n  - plugins/*\n")

    assert main(["validate", "--root", str(workspace)]) == 0


def test_validate_reports_every_mismatch(workspace, cli_driver, caplog):
    write_manifest(
        workspace / "packages" / "c",
        {"name": "@ws/c", "version": "1.0.0", "dependencies": {"@ws/a": "link:../a", "@ws/b": "^1.0.0"}},
    )

    assert main(["validate", "--root", str(workspace)]) == 1

    assert "Found 2 invalid cross-project dependencies" in caplog.text
    assert "[@ws/c] depends on [@ws/a] but should be using a workspace" in caplog.text
    assert "[@ws/c] depends on [@ws/b] but it's not using the local package" in caplog.text
    assert '  expected: "@ws/b": "1.0.0"' in caplog.text


def test_run_script(workspace, cli_driver):
    assert main(["run", "--root", str(workspace), "wspm:bootstrap", "--", "--watch"]) == 0

    assert cli_driver.calls == [("run_script_streaming", "wspm:bootstrap", ["--watch"], "@ws/b")]


def test_build(workspace, cli_driver):
    assert main(["build", "--root", str(workspace), "--source-maps"]) == 0

    assert cli_driver.calls == [("build", "@ws/b", True)]


@allure.title("Bootstrap installs, runs bootstrap scripts and builds")
def test_bootstrap(workspace, cli_driver):
    (workspace / "wspm.yml").write_text("project_globs:\n  - plugins/*\n")

    assert main(["bootstrap", "--root", str(workspace), "--frozen-lockfile"]) == 0

    with allure.step("Install the workspace root and projects outside the workspace"):
        installs = [call for call in cli_driver.calls if call[0] == "install"]
        assert installs == [
            ("install", str(workspace), ["--frozen-lockfile"], False),
            ("install", str(workspace / "plugins" / "p"), ["--frozen-lockfile"], False),
        ]

    with allure.step("Run bootstrap scripts before building"):
        names = cli_driver.call_names()
        assert names.index("run_script_streaming") < names.index("build")
        assert ("build", "@ws/b", False) in cli_driver.calls


def test_bootstrap_skip_build(workspace, cli_driver):
    assert main(["bootstrap", "--root", str(workspace), "--skip-build"]) == 0

    assert "build" not in cli_driver.call_names()


def test_clean(workspace, cli_driver):
    write_manifest(
        workspace / "packages" / "c",
        {"name": "@ws/c", "version": "1.0.0", "wspm": {"clean": {"extraPatterns": ["*.tsbuildinfo"]}}},
    )
    (workspace / "packages" / "a" / "node_modules" / "x").mkdir(parents=True)
    (workspace / "packages" / "b" / "target").mkdir()
    (workspace / "packages" / "c" / "tsconfig.tsbuildinfo").write_text("{}")

    assert main(["clean", "--root", str(workspace)]) == 0

    assert not (workspace / "packages" / "a" / "node_modules").exists()
    assert not (workspace / "packages" / "b" / "target").exists()
    assert not (workspace / "packages" / "c" / "tsconfig.tsbuildinfo").exists()
    assert (workspace / "packages" / "c" / "package.json").exists()


def test_install_version(workspace, cli_driver):
    (workspace / "plugins" / "p" / "yarn.lock").write_text("lodash@4.17.21:\n")
    write_manifest(
        workspace / "plugins" / "p",
        {"name": "plugin-p", "version": "0.1.0", "dependencies": {"lodash": "4.17.21"}},
    )
    (workspace / "wspm.yml").write_text("project_globs:\n  - plugins/*\n")

    assert main(["install-version", "plugin-p", "lodash", "4.17.21", "--root", str(workspace)]) == 0

    assert '"lodash": "^4.17.21"' in (workspace / "plugins" / "p" / "package.json").read_text()
    assert (workspace / "plugins" / "p" / "yarn.lock").read_text() == "lodash@^4.17.21:\n"


def test_install_version_unknown_project(workspace, cli_driver, caplog):
    assert main(["install-version", "missing", "lodash", "4.17.21", "--root", str(workspace)]) == 1

    assert "Unknown project [missing]" in caplog.text


def test_prune_links(workspace, cli_driver):
    cli_driver.workspaces = {
        "@ws/a": WorkspaceInfo(location="packages/a", workspace_dependencies=frozenset({"@ws/b"})),
        "@ws/b": WorkspaceInfo(location="packages/b"),
        "@ws/c": WorkspaceInfo(location="packages/c"),
    }
    (workspace / "node_modules" / "@ws" / "c").mkdir(parents=True)
    (workspace / "node_modules" / "@ws" / "a").mkdir()

    assert main(["prune-links", "--root", str(workspace)]) == 0

    assert not (workspace / "node_modules" / "@ws" / "c").exists()
    assert (workspace / "node_modules" / "@ws" / "a").exists()


def test_prune_links_without_workspace_root(tmp_path, cli_driver, caplog):
    write_manifest(tmp_path, {"name": "single"})

    assert main(["prune-links", "--root", str(tmp_path)]) == 1

    assert "No workspace root found" in caplog.text


def test_missing_root_manifest(tmp_path, cli_driver, caplog):
    assert main(["list", "--root", str(tmp_path)]) == 1

    assert "Manifest not found" in caplog.text


def test_interrupt_handler_leaves_process_registry_alone():
    # The signal may arrive while the main thread holds the registry lock
    with get_executor()._process_lock:
        with pytest.raises(KeyboardInterrupt):
            handle_interrupt(signal.SIGINT, None)

    assert shared_state.INTERRUPT_OCCURRED
    assert shared_state.INTERRUPT_SIGNAL == signal.SIGINT


def test_terminate_signal_exits():
    with pytest.raises(SystemExit, match="Terminated by SIGTERM"):
        handle_interrupt(signal.SIGTERM, None)

    assert shared_state.INTERRUPT_SIGNAL_NAME == "SIGTERM (Termination)"


@pytest.mark.parametrize("error", [KeyboardInterrupt, SystemExit])
def test_interrupted_command_terminates_children(workspace, monkeypatch, restore_signals, error):
    cleaned = []

    def interrupted(**kwargs):
        raise error()

    monkeypatch.setattr(cli_module, "cleanup_processes", lambda: cleaned.append(True))
    monkeypatch.setattr(cli_module, "get_command_function", lambda name: interrupted)

    if error is KeyboardInterrupt:
        assert main(["list", "--root", str(workspace)]) == 130
    else:
        with pytest.raises(SystemExit):
            main(["list", "--root", str(workspace)])

    assert cleaned == [True]

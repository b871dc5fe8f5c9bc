# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: Apache-2.0

"""
Argument parser setup for CLI commands.

Contains the main argument parser configuration and all subparsers
for different CLI commands, keeping argument definitions centralized.
"""

import argparse

from wspm.utils.config import get_dist_version, get_project_name


def get_cli_name() -> str:
    """Get the CLI command name."""
    return get_project_name().lower()


def _add_common_options(parser: argparse.ArgumentParser, selection: bool = True) -> None:
    """Options shared by every subcommand."""
    parser.add_argument("--root", metavar="DIRECTORY", help="Workspace root directory (default: current directory)")
    if selection:
        parser.add_argument(
            "--include",
            "-i",
            action="append",
            default=[],
            metavar="PROJECT",
            help="Only operate on the named project. Can be used multiple times.",
        )
        parser.add_argument(
            "--exclude",
            "-e",
            action="append",
            default=[],
            metavar="PROJECT",
            help="Skip the named project. Can be used multiple times.",
        )
        parser.add_argument(
            "--parallelism", "-p", type=int, metavar="N", help="Number of projects processed concurrently"
        )
    parser.add_argument("--verbose", "-v", action="store_true", help="Display debug messages")
    parser.add_argument("--debug", "-d", action="store_true", help="Display debug output with full traceback")


def create_argument_parser() -> argparse.ArgumentParser:
    """
    Create and configure the main argument parser with all subcommands.

    Returns:
        argparse.ArgumentParser: Configured parser ready for argument parsing
    """
    cli_name = get_cli_name()

    parser = argparse.ArgumentParser(
        prog=cli_name,
        description="Workspace package manager orchestrator",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    parser.add_argument("--version", action="version", version=f"{get_dist_version()}")
    parser.add_argument("--verbose", "-v", dest="global_verbose", action="store_true", help="Display debug messages")
    parser.add_argument(
        "--debug", "-d", dest="global_debug", action="store_true", help="Display debug output with full traceback"
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    # Bootstrap command
    bootstrap_parser = subparsers.add_parser(
        "bootstrap",
        help="Install dependencies and prepare every project",
        description=f"""
Validate cross-project dependencies, install the workspace root and every
project outside the workspace, run the wspm:bootstrap script of each project
and build the projects declaring build targets.

EXAMPLES:
  {cli_name} bootstrap                             # Bootstrap the whole repository
  {cli_name} bootstrap --frozen-lockfile           # Fail when yarn.lock needs an update
  {cli_name} bootstrap -i @wspm/utils --skip-build # Only one project, no builds
        """,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    bootstrap_parser.add_argument(
        "--frozen-lockfile", action="store_true", help="Pass --frozen-lockfile to the package manager"
    )
    bootstrap_parser.add_argument("--skip-build", action="store_true", help="Do not build projects after install")
    bootstrap_parser.add_argument("--source-maps", action="store_true", help="Generate source maps when building")
    _add_common_options(bootstrap_parser)

    # Run command
    run_parser = subparsers.add_parser(
        "run",
        help="Run a script in every project that defines it",
        description=f"""
Run a package.json script in dependency order. Projects without the script
are skipped.

EXAMPLES:
  {cli_name} run build
  {cli_name} run test -- --ci
        """,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    run_parser.add_argument("script", help="Script name")
    run_parser.add_argument("script_args", nargs=argparse.REMAINDER, help="Arguments passed to the script")
    _add_common_options(run_parser)

    # Build command
    build_parser = subparsers.add_parser("build", help="Build every project declaring build targets")
    build_parser.add_argument("--source-maps", action="store_true", help="Generate source maps")
    _add_common_options(build_parser)

    # Clean command
    clean_parser = subparsers.add_parser(
        "clean", help="Delete node_modules, target directories and extra clean patterns"
    )
    _add_common_options(clean_parser)

    # List command
    list_parser = subparsers.add_parser("list", help="List projects with their roles and build targets")
    _add_common_options(list_parser)

    # Validate command
    validate_parser = subparsers.add_parser("validate", help="Validate every cross-project dependency")
    _add_common_options(validate_parser, selection=False)

    # Install version command
    install_parser = subparsers.add_parser(
        "install-version",
        help="Install one dependency at an exact version and record a range",
        description=f"""
Install a dependency at an exact version, then rewrite package.json and
yarn.lock to the given range (default: ^VERSION).

EXAMPLES:
  {cli_name} install-version my-app lodash 4.17.21
  {cli_name} install-version my-app jest 29.7.0 --dev --range ~29.7.0
        """,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    install_parser.add_argument("project", help="Project receiving the dependency")
    install_parser.add_argument("dependency", help="Dependency name")
    install_parser.add_argument("dependency_version", metavar="version", help="Exact version to install")
    install_parser.add_argument("--dev", action="store_true", help="Install as a development dependency")
    install_parser.add_argument("--range", dest="version_range", help="Range recorded in the manifests")
    _add_common_options(install_parser, selection=False)

    # Prune links command
    prune_parser = subparsers.add_parser(
        "prune-links", help="Remove workspace links from the root node_modules that match no dependency"
    )
    _add_common_options(prune_parser, selection=False)

    return parser

# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: Apache-2.0

"""
Command Line Interface for the workspace package manager orchestrator.

This is the main CLI entry point. Command implementations live in
wspm.utils.cli.commands.
"""

import atexit
import logging
import sys
from typing import List, Optional

from wspm.utils.cli import create_argument_parser, install_signal_handlers
from wspm.utils.cli.commands import get_command_function
from wspm.utils.core import CliError, shared_state
from wspm.utils.core.process import cleanup_processes
from wspm.utils.logging import cleanup_logging, configure_logging

logger = logging.getLogger(__name__)


def report_error(error: CliError) -> None:
    """Log a CliError with its structured details."""
    logger.error(error.message)
    for line in error.format_details():
        logger.error(line)


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the CLI.

    Returns:
        int: Exit code (0 for success, non-zero for failure)
    """
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    # Merge global and subcommand flags
    verbose = args.global_verbose or getattr(args, "verbose", False)
    debug = args.global_debug or getattr(args, "debug", False)

    configure_logging(verbose=verbose, debug=debug)

    if not args.command:
        parser.print_help()
        return 0

    shared_state.reset()
    install_signal_handlers()
    atexit.register(cleanup_logging)

    common = dict(root=args.root, verbose=verbose, debug=debug)
    selection = dict(
        include=getattr(args, "include", []),
        exclude=getattr(args, "exclude", []),
        parallelism=getattr(args, "parallelism", None),
    )

    # Route to appropriate command handler
    try:
        if args.command == "bootstrap":
            bootstrap = get_command_function("bootstrap")
            return bootstrap(
                frozen_lockfile=args.frozen_lockfile,
                skip_build=args.skip_build,
                source_maps=args.source_maps,
                **selection,
                **common,
            )
        elif args.command == "run":
            run_script = get_command_function("run_script")
            return run_script(script=args.script, script_args=args.script_args, **selection, **common)
        elif args.command == "build":
            build_projects = get_command_function("build_projects")
            return build_projects(source_maps=args.source_maps, **selection, **common)
        elif args.command == "clean":
            clean_projects = get_command_function("clean_projects")
            return clean_projects(**selection, **common)
        elif args.command == "list":
            list_projects = get_command_function("list_projects")
            return list_projects(**selection, **common)
        elif args.command == "validate":
            validate_dependencies = get_command_function("validate_dependencies")
            return validate_dependencies(**common)
        elif args.command == "install-version":
            install_version = get_command_function("install_version")
            return install_version(
                project_name=args.project,
                dependency=args.dependency,
                version=args.dependency_version,
                dev=args.dev,
                version_range=args.version_range,
                **common,
            )
        elif args.command == "prune-links":
            prune_links = get_command_function("prune_links")
            return prune_links(**common)
        else:
            parser.print_help()
            return 0
    except CliError as e:
        report_error(e)
        return 1
    except KeyboardInterrupt:
        cleanup_processes()
        logger.error("Interrupted")
        return 130
    except SystemExit:
        cleanup_processes()
        raise
    except Exception as e:
        logger.error(f"Command execution failed: {e}", exc_info=debug)
        return 1


if __name__ == "__main__":
    sys.exit(main())

# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: Apache-2.0

"""
CLI command implementations package.

Contains individual command implementations for the CLI,
organized by functionality to maintain clean separation of concerns.
"""

# Commands are imported dynamically to avoid circular imports
# Use get_command_function() to safely import and get command functions


def get_command_function(command_name: str):
    """
    Dynamically import and return a command function.

    Args:
        command_name: Name of the command to import

    Returns:
        The command function
    """
    if command_name == "bootstrap":
        from .bootstrap import bootstrap

        return bootstrap
    elif command_name == "run_script":
        from .run import run_script

        return run_script
    elif command_name == "build_projects":
        from .run import build_projects

        return build_projects
    elif command_name == "clean_projects":
        from .clean import clean_projects

        return clean_projects
    elif command_name == "list_projects":
        from .list import list_projects

        return list_projects
    elif command_name == "validate_dependencies":
        from .validate import validate_dependencies

        return validate_dependencies
    elif command_name == "install_version":
        from .install import install_version

        return install_version
    elif command_name == "prune_links":
        from .install import prune_links

        return prune_links
    else:
        raise ValueError(f"Unknown command: {command_name}")


__all__ = ["get_command_function"]

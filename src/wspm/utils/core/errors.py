# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: Apache-2.0

"""
Error taxonomy for workspace operations.

Every error raised by the workspace core derives from CliError and carries a
``meta`` dictionary of structured fields, so callers can aggregate failures
across many projects before reporting them.
"""
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence


class CliError(Exception):
    """Base error shown to the user as a message plus structured metadata."""

    def __init__(self, message: str, meta: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.meta = dict(meta or {})

    def __str__(self) -> str:
        return self.message

    def format_details(self) -> List[str]:
        """Render the metadata as indented ``key: value`` lines."""
        return [f"  {key}: {value}" for key, value in self.meta.items()]


class ManifestError(CliError):
    """Missing or malformed package manifest, or an unsupported field shape."""


class ConfigError(CliError):
    """Invalid workspace configuration file or override."""


class PatchError(CliError):
    """A literal text patch found nothing to replace."""


class ProcessError(CliError):
    """An external package manager command exited unsuccessfully."""

    def __init__(
        self,
        message: str,
        command: Sequence[str],
        cwd: Optional[str],
        returncode: int,
        output: str = "",
    ):
        super().__init__(
            message,
            {
                "command": " ".join(command),
                "cwd": cwd,
                "returncode": returncode,
                "output": output.strip(),
            },
        )
        self.command = list(command)
        self.cwd = cwd
        self.returncode = returncode
        self.output = output


class MismatchKind(Enum):
    """Classification of a dependency declaration that breaks the linking policy."""

    SHOULD_USE_WORKSPACE = "but should be using a workspace"
    WRONG_LINK_PATH = "using 'link:', but the path is wrong"
    NOT_LOCAL = "but it's not using the local package"


class DependencyMismatchError(CliError):
    """One dependent/dependency pair whose declared version breaks the policy."""

    def __init__(
        self,
        dependent: str,
        dependency: str,
        kind: MismatchKind,
        actual: str,
        expected: str,
        package: str,
    ):
        message = (
            f"[{dependent}] depends on [{dependency}] {kind.value}. "
            f"Update its package.json to the expected value below."
        )
        super().__init__(message, {"actual": actual, "expected": expected, "package": package})
        self.dependent = dependent
        self.dependency = dependency
        self.kind = kind
        self.actual = actual
        self.expected = expected
        self.package = package


class DependencyValidationError(CliError):
    """Aggregate of every dependency mismatch found while building a project graph."""

    def __init__(self, errors: Sequence[DependencyMismatchError]):
        super().__init__(f"Found {len(errors)} invalid cross-project dependencies")
        self.errors = list(errors)

    def format_details(self) -> List[str]:
        lines = []
        for error in self.errors:
            lines.append(error.message)
            lines.extend(error.format_details())
        return lines

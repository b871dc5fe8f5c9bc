# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: Apache-2.0

"""
Subprocess execution utilities.

This module provides the single place where external commands (the package
manager and the scripts it runs) are spawned. It implements:
- Captured and streamed execution modes
- Optional timeouts, enforced by the executor and never by callers
- Tracking of active child processes so they can be terminated on interrupt
- Logging of every command before dispatch

All subprocess usage across the application should go through this module.
"""

import logging
import os
import select
import subprocess  # nosec B404 # For process execution API
import threading
import time
from enum import Enum
from typing import Dict, List, Optional, Sequence, Union

from wspm.utils.core import shared_state

logger = logging.getLogger(__name__)


class ProcessResult:
    """
    Container for subprocess execution results with metadata.
    """

    def __init__(
        self,
        returncode: int,
        stdout: str = "",
        stderr: str = "",
        command: List[str] = None,
        cwd: Optional[str] = None,
        execution_time: float = 0.0,
        timed_out: bool = False,
        interrupted: bool = False,
    ):
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr
        self.command = command or []
        self.cwd = cwd
        self.execution_time = execution_time
        self.timed_out = timed_out
        self.interrupted = interrupted

    @property
    def success(self) -> bool:
        """Check if the command executed successfully."""
        return self.returncode == 0 and not self.timed_out and not self.interrupted

    @property
    def failed(self) -> bool:
        """Check if the command failed."""
        return not self.success

    @property
    def output(self) -> str:
        """Combined stdout and stderr, for error reports."""
        return "\n".join(part for part in (self.stdout, self.stderr) if part)

    def __str__(self) -> str:
        status = "SUCCESS" if self.success else "FAILED"
        return f"ProcessResult(status={status}, returncode={self.returncode}, time={self.execution_time:.2f}s)"


class ProcessExecutionMode(Enum):
    """Execution modes for subprocess operations."""

    CAPTURE = "capture"  # Capture stdout/stderr
    PIPE = "pipe"  # Real-time streaming


class ProcessExecutor:
    """
    Subprocess executor that tracks its children.

    A single executor is shared by every driver call of a command invocation,
    so that an interrupt can terminate all running package manager processes.
    """

    def __init__(self, default_timeout: Optional[float] = None):
        self.default_timeout = default_timeout
        self._active_processes: Dict[int, subprocess.Popen] = {}
        self._process_lock = threading.Lock()

    def run(
        self,
        command: Sequence[str],
        cwd: Optional[str] = None,
        env: Optional[Dict[str, str]] = None,
        timeout: Optional[float] = None,
        mode: ProcessExecutionMode = ProcessExecutionMode.CAPTURE,
        prefix: Optional[str] = None,
    ) -> ProcessResult:
        """
        Execute a command and return its result without raising on failure.

        Args:
            command: Command and arguments to execute
            cwd: Working directory for command execution
            env: Extra environment variables
            timeout: Maximum execution time in seconds (None waits forever)
            mode: Capture the output or stream it line by line
            prefix: Label prepended to streamed lines

        Returns:
            ProcessResult: Execution results with metadata
        """
        cmd_list = [str(arg) for arg in command]
        if not cmd_list:
            raise ValueError("Empty command not allowed")

        effective_timeout = timeout if timeout is not None else self.default_timeout
        safe_env = self._prepare_environment(env)

        logger.debug(f"Executing command: {' '.join(cmd_list)} (cwd={cwd}, timeout={effective_timeout})")

        start_time = time.time()
        try:
            if mode == ProcessExecutionMode.PIPE:
                return self._run_with_pipe(cmd_list, cwd, safe_env, effective_timeout, prefix)
            return self._run_standard(cmd_list, cwd, safe_env, effective_timeout)

        except subprocess.TimeoutExpired:
            execution_time = time.time() - start_time
            logger.warning(f"Command timed out after {execution_time:.2f}s: {' '.join(cmd_list)}")
            return ProcessResult(
                returncode=-1,
                stderr=f"Command timed out after {effective_timeout}s",
                command=cmd_list,
                cwd=cwd,
                execution_time=execution_time,
                timed_out=True,
            )

        except OSError as e:
            execution_time = time.time() - start_time
            logger.error(f"Unable to execute {cmd_list[0]}: {e}")
            return ProcessResult(
                returncode=-1, stderr=str(e), command=cmd_list, cwd=cwd, execution_time=execution_time
            )

    def _prepare_environment(self, env: Optional[Dict[str, str]]) -> Dict[str, str]:
        """Copy the current environment and apply overrides."""
        safe_env = os.environ.copy()
        # Package managers colorize output when they think they own a TTY
        safe_env.setdefault("FORCE_COLOR", "0")

        if env:
            for key, value in env.items():
                if not isinstance(key, str) or not isinstance(value, str):
                    raise ValueError(f"Invalid environment variable: {key}={value}")
                safe_env[key] = value

        return safe_env

    def _run_standard(
        self, cmd_list: List[str], cwd: Optional[str], env: Dict[str, str], timeout: Optional[float]
    ) -> ProcessResult:
        """Execute command and capture its output."""
        start_time = time.time()

        process = subprocess.Popen(
            cmd_list, cwd=cwd, env=env, stdout=subprocess.PIPE, stderr=subprocess.PIPE, text=True
        )
        self._track(process)
        try:
            try:
                stdout, stderr = process.communicate(timeout=timeout)
            except subprocess.TimeoutExpired:
                process.kill()
                process.communicate()
                raise
        finally:
            self._untrack(process)

        return ProcessResult(
            returncode=process.returncode,
            stdout=stdout or "",
            stderr=stderr or "",
            command=cmd_list,
            cwd=cwd,
            execution_time=time.time() - start_time,
            interrupted=shared_state.INTERRUPT_OCCURRED,
        )

    def _run_with_pipe(
        self,
        cmd_list: List[str],
        cwd: Optional[str],
        env: Dict[str, str],
        timeout: Optional[float],
        prefix: Optional[str],
    ) -> ProcessResult:
        """
        Execute command with real-time output streaming to the log.

        The pipe is read in raw chunks of whatever is available, so a child
        printing a partial line (e.g. a prompt) never blocks the timeout and
        interrupt checks.
        """
        start_time = time.time()
        stdout_lines = []
        interrupted = False

        process = subprocess.Popen(
            cmd_list,
            cwd=cwd,
            env=env,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,  # Merge stderr into stdout for unified output
        )
        self._track(process)
        fd = process.stdout.fileno()
        pending = b""
        eof = False

        def emit(raw: bytes) -> None:
            line = raw.decode("utf-8", errors="replace").rstrip()
            if not line:
                return
            stdout_lines.append(line)
            logger.info(f"{prefix}: {line}" if prefix else line)

        try:
            while process.poll() is None:
                if shared_state.INTERRUPT_OCCURRED:
                    logger.debug(f"Interrupt detected, terminating process {process.pid}")
                    self._stop(process)
                    interrupted = True
                    break

                if timeout is not None and time.time() - start_time > timeout:
                    logger.debug(f"Timeout detected for process {process.pid} (limit: {timeout}s)")
                    self._stop(process)
                    raise subprocess.TimeoutExpired(cmd_list, timeout)

                if eof:
                    # The child closed its output but is still running
                    time.sleep(0.1)
                    continue

                # Poll with a short timeout so interrupts and timeouts are noticed
                ready, _, _ = select.select([fd], [], [], 0.1)
                if not ready:
                    continue

                chunk = os.read(fd, 65536)
                if not chunk:
                    eof = True
                    continue
                *lines, pending = (pending + chunk).split(b"\n")
                for line in lines:
                    emit(line)

            while not eof:
                chunk = os.read(fd, 65536)
                eof = not chunk
                pending += chunk
            for line in pending.split(b"\n"):
                emit(line)

        finally:
            process.stdout.close()
            self._untrack(process)

        return ProcessResult(
            returncode=process.returncode,
            stdout="\n".join(stdout_lines),
            command=cmd_list,
            cwd=cwd,
            execution_time=time.time() - start_time,
            interrupted=interrupted,
        )

    def _stop(self, process: subprocess.Popen) -> None:
        process.terminate()
        try:
            process.wait(timeout=5)
        except subprocess.TimeoutExpired:
            logger.warning(f"Process {process.pid} didn't respond to SIGTERM after 5s, sending SIGKILL")
            process.kill()
            process.wait()

    def _track(self, process: subprocess.Popen) -> None:
        with self._process_lock:
            self._active_processes[process.pid] = process

    def _untrack(self, process: subprocess.Popen) -> None:
        with self._process_lock:
            self._active_processes.pop(process.pid, None)

    def terminate_all_processes(self) -> None:
        """Terminate all active child processes."""
        with self._process_lock:
            processes = list(self._active_processes.values())
            self._active_processes.clear()

        for process in processes:
            try:
                self._stop(process)
            except OSError as e:
                logger.debug(f"Failed to stop process {process.pid}: {e}")

    def get_active_processes(self) -> List[int]:
        """Get list of active process PIDs."""
        with self._process_lock:
            return list(self._active_processes.keys())


# Global executor instance
_global_executor = None


def get_executor(default_timeout: Optional[float] = None) -> ProcessExecutor:
    """
    Get the global process executor instance.

    Args:
        default_timeout: Timeout applied to commands (only used for first call)

    Returns:
        ProcessExecutor: Global executor instance
    """
    global _global_executor
    if _global_executor is None:
        _global_executor = ProcessExecutor(default_timeout)
    return _global_executor


def configure_executor(default_timeout: Optional[float] = None) -> ProcessExecutor:
    """Replace the global executor, e.g. after loading the workspace configuration."""
    global _global_executor
    _global_executor = ProcessExecutor(default_timeout)
    return _global_executor


def run_command(
    command: Union[str, Sequence[str]],
    cwd: Optional[str] = None,
    env: Optional[Dict[str, str]] = None,
    timeout: Optional[float] = None,
    stream_output: bool = False,
    prefix: Optional[str] = None,
) -> ProcessResult:
    """
    Execute a command with the global executor.

    This is the primary function that should be used throughout the application
    for subprocess execution instead of direct subprocess calls.

    Args:
        command: Command to execute (a string is split on whitespace)
        cwd: Working directory
        env: Environment variables
        timeout: Execution timeout
        stream_output: Stream output in real-time to the log
        prefix: Label for streamed lines

    Returns:
        ProcessResult: Execution results
    """
    if isinstance(command, str):
        command = command.split()
    mode = ProcessExecutionMode.PIPE if stream_output else ProcessExecutionMode.CAPTURE
    return get_executor().run(command, cwd=cwd, env=env, timeout=timeout, mode=mode, prefix=prefix)


# Cleanup function for graceful shutdown
def cleanup_processes() -> None:
    """Clean up all active processes."""
    if _global_executor:
        _global_executor.terminate_all_processes()

# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: Apache-2.0

"""
Bounded parallel execution over batches of projects.

Projects of one batch are independent of each other and may run concurrently;
operations on the same directory are serialized through ``directory_lock``.
"""
import concurrent.futures
import logging
import os
import threading
from typing import TYPE_CHECKING, Callable, Dict, List, Sequence

from wspm.utils.core import shared_state

if TYPE_CHECKING:
    from wspm.utils.workspace.project import Project

logger = logging.getLogger(__name__)

_directory_locks: Dict[str, threading.RLock] = {}
_registry_lock = threading.Lock()


def directory_lock(path: str) -> threading.RLock:
    """Return the lock guarding mutations of ``path``, shared across Project instances."""
    key = os.path.normcase(os.path.abspath(path))
    with _registry_lock:
        lock = _directory_locks.get(key)
        if lock is None:
            lock = _directory_locks[key] = threading.RLock()
        return lock


def parallelize_batches(
    batches: Sequence[Sequence["Project"]],
    fn: Callable[["Project"], object],
    parallelism: int = 4,
) -> None:
    """
    Run ``fn`` for every project, batch after batch.

    Every project of a batch is submitted before waiting on any of them, so one
    failure does not cancel its siblings; a failure of the batch is
    re-raised once the whole batch has finished, and later batches are skipped.
    """
    parallelism = max(1, parallelism)

    with concurrent.futures.ThreadPoolExecutor(max_workers=parallelism) as executor:
        for batch in batches:
            if shared_state.INTERRUPT_OCCURRED:
                logger.warning("Interrupt detected, skipping remaining projects")
                return

            futures = {executor.submit(fn, project): project for project in batch}
            errors: List[BaseException] = []
            for future in concurrent.futures.as_completed(futures):
                error = future.exception()
                if error is not None:
                    logger.debug(f"[{futures[future].name}] failed: {error}")
                    errors.append(error)

            if errors:
                raise errors[0]

# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: Apache-2.0

"""
Tests for batched parallel execution and directory locks.
"""
import threading

import pytest

from conftest import make_project
from wspm.utils.core import shared_state
from wspm.utils.workspace.parallel import directory_lock, parallelize_batches


def _projects(*names):
    return [make_project(f"/ws/{name}", {"name": name}) for name in names]


def test_batches_run_in_order():
    events = []
    lock = threading.Lock()

    def record(project):
        with lock:
            events.append(project.name)

    parallelize_batches([_projects("a", "b", "c"), _projects("d"), _projects("e", "f")], record, parallelism=2)

    assert sorted(events[:3]) == ["a", "b", "c"]
    assert events[3] == "d"
    assert sorted(events[4:]) == ["e", "f"]


def test_failure_stops_later_batches_but_not_siblings():
    seen = []

    def run(project):
        seen.append(project.name)
        if project.name == "a":
            raise RuntimeError("a failed")

    with pytest.raises(RuntimeError, match="a failed"):
        parallelize_batches([_projects("a", "b"), _projects("c")], run)

    assert sorted(seen) == ["a", "b"]


def test_interrupt_skips_remaining_batches():
    seen = []

    def run(project):
        seen.append(project.name)
        shared_state.INTERRUPT_OCCURRED = True

    parallelize_batches([_projects("a"), _projects("b")], run)

    assert seen == ["a"]


def test_empty_batches():
    parallelize_batches([], lambda project: None)
    parallelize_batches([[]], lambda project: None, parallelism=0)


def test_directory_lock_is_shared_per_path():
    assert directory_lock("/ws/app") is directory_lock("/ws/app/")
    assert directory_lock("/ws/app") is directory_lock("/ws/lib/../app")
    assert directory_lock("/ws/app") is not directory_lock("/ws/lib")


def test_directory_lock_is_reentrant():
    lock = directory_lock("/ws/app")

    with lock:
        with directory_lock("/ws/app"):
            pass

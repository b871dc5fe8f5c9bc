# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: Apache-2.0

"""
Workspace package manager orchestrator.

Models a repository of interdependent JavaScript packages, validates their
cross-package dependencies and drives the package manager over them.
"""

# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: Apache-2.0

"""
Signal handlers and interrupt management for CLI operations.

Provides centralized signal handling for graceful shutdown: the interrupt is
recorded in the shared state, so batches stop scheduling new projects and
streaming commands stop their child; the entry point terminates the rest.
"""

import logging
import signal

from wspm.utils.core import shared_state

logger = logging.getLogger(__name__)


def handle_interrupt(sig, frame):
    """
    Global signal handler for various interrupts.
    Sets the global flag and re-raises appropriate exception.
    """

    logger.debug(f"handle_interrupt called with signal: {sig}, frame: {frame}")
    signal_names = {
        signal.SIGINT: "SIGINT (Keyboard Interrupt)",
        signal.SIGTERM: "SIGTERM (Termination)",
    }

    signal_name = signal_names.get(sig, f"Signal {sig}")

    shared_state.INTERRUPT_OCCURRED = True
    shared_state.INTERRUPT_SIGNAL = sig
    shared_state.INTERRUPT_SIGNAL_NAME = signal_name

    logger.warning(f"Interrupt detected: {signal_name}. Stopping all running commands.")

    # Child processes are terminated by the entry point once the exception unwinds
    if sig == signal.SIGINT:
        raise KeyboardInterrupt()
    raise SystemExit(f"Terminated by {signal_name}")


def install_signal_handlers() -> None:
    """Route SIGINT and SIGTERM to handle_interrupt."""
    signal.signal(signal.SIGINT, handle_interrupt)
    signal.signal(signal.SIGTERM, handle_interrupt)

"""Utility modules for fsmconvert."""

from fsmconvert.utils.atomic import (
    AtomicFileWriter,
    AtomicWriteError,
    atomic_write,
    atomic_write_text,
)
from fsmconvert.utils.logging import (
    configure_logging,
    get_correlation_id,
    get_logger,
    log_export_result,
    set_correlation_id,
    machine_context,
)

__all__ = [
    # Logging
    "configure_logging",
    "get_logger",
    "get_correlation_id",
    "set_correlation_id",
    "machine_context",
    "log_export_result",
    # Atomic writes
    "AtomicFileWriter",
    "AtomicWriteError",
    "atomic_write",
    "atomic_write_text",
]

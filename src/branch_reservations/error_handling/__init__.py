"""
Error handling module for the reservation settings client.

Main Components:
    - exceptions: Failure taxonomy (transport faults, rejected requests, batch failures)
    - error_messages: Operator-facing message extraction
    - logging_config: loguru setup and structured log helpers
"""

from .exceptions import (
    ReservationSystemError,
    RequestFailure,
    TransportFailure,
    RequestRejected,
    BatchPartialFailure,
    HierarchyIntegrityError,
    ConfigurationError,
)

from .error_messages import (
    classify,
    get_error_message,
    extract_error_message,
    GENERIC_FAILURE_MESSAGE,
    TRANSPORT_FAILURE_MESSAGE,
    TIMEOUT_MESSAGE,
)

from .logging_config import (
    configure_logging,
    init_logging,
    log_api_call,
    log_batch_event,
    log_performance,
    LogContext,
)

__all__ = [
    # Exceptions
    "ReservationSystemError",
    "RequestFailure",
    "TransportFailure",
    "RequestRejected",
    "BatchPartialFailure",
    "HierarchyIntegrityError",
    "ConfigurationError",

    # Error Messages
    "classify",
    "get_error_message",
    "extract_error_message",
    "GENERIC_FAILURE_MESSAGE",
    "TRANSPORT_FAILURE_MESSAGE",
    "TIMEOUT_MESSAGE",

    # Logging
    "configure_logging",
    "init_logging",
    "log_api_call",
    "log_batch_event",
    "log_performance",
    "LogContext",
]

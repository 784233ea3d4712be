"""
Operator-facing error message generation.

Turns any failure captured around an API call into a short, human-readable
message. The server's own `message` is surfaced verbatim when there is one;
everything else falls back to a generic description so that reporting an
error can never fail itself.
"""
from typing import Any, Optional

import httpx
from loguru import logger

from .exceptions import (
    ReservationSystemError,
    RequestRejected,
    TransportFailure,
    BatchPartialFailure,
    ConfigurationError,
)


TRANSPORT_FAILURE_MESSAGE = (
    "Unable to reach the reservations service. "
    "Please check your connection and try again."
)
TIMEOUT_MESSAGE = "The reservations service took too long to respond. Please try again."
GENERIC_FAILURE_MESSAGE = "Something went wrong while talking to the reservations service."


def extract_error_message(body: Any) -> Optional[str]:
    """
    Pull the `message` field out of a structured error body.

    Args:
        body: Parsed JSON body (or anything else)

    Returns:
        The message string, or None if the body has no usable message
    """
    if not isinstance(body, dict):
        return None
    message = body.get("message")
    if isinstance(message, str) and message.strip():
        return message
    return None


def status_fallback_message(status_code: int) -> str:
    """Message used when a rejected request carried no usable body."""
    return f"Request failed with status {status_code}."


# ============================================================================
# Per-variant messages
# ============================================================================

def get_request_rejected_message(error: RequestRejected) -> str:
    """Server message verbatim, or the status fallback."""
    if error.server_message:
        return error.server_message
    return status_fallback_message(error.status_code)


def get_transport_failure_message(error: TransportFailure) -> str:
    """Generic message for failures where no response arrived."""
    if error.error_type == "timeout":
        return TIMEOUT_MESSAGE
    return TRANSPORT_FAILURE_MESSAGE


def get_batch_failure_message(error: BatchPartialFailure) -> str:
    """Summary of a bulk operation with failed branches."""
    outcome = error.outcome
    failed = len(outcome.failed_ids)
    if failed == outcome.total:
        return f"None of the {outcome.total} branches could be updated."
    return f"{failed} of {outcome.total} branches could not be updated."


def _message_from_http_status_error(error: httpx.HTTPStatusError) -> str:
    response = error.response
    try:
        body = response.json()
    except ValueError:
        body = None
    return extract_error_message(body) or status_fallback_message(response.status_code)


# ============================================================================
# Main Error Message Router
# ============================================================================

def get_error_message(error: object) -> str:
    """
    Get a human-readable message for any captured failure.

    This is the main entry point for reporting failures to an operator.
    It never raises.

    Args:
        error: Failure that occurred (usually an exception)

    Returns:
        Message suitable for display
    """
    try:
        if isinstance(error, RequestRejected):
            return get_request_rejected_message(error)
        elif isinstance(error, TransportFailure):
            return get_transport_failure_message(error)
        elif isinstance(error, BatchPartialFailure):
            return get_batch_failure_message(error)
        elif isinstance(error, ConfigurationError):
            return error.user_message
        elif isinstance(error, ReservationSystemError):
            return error.user_message or GENERIC_FAILURE_MESSAGE
        elif isinstance(error, httpx.HTTPStatusError):
            return _message_from_http_status_error(error)
        elif isinstance(error, httpx.TimeoutException):
            return TIMEOUT_MESSAGE
        elif isinstance(error, httpx.RequestError):
            return TRANSPORT_FAILURE_MESSAGE
    except Exception as e:
        logger.warning(f"Could not build error message for {type(error).__name__}: {e}")
        return GENERIC_FAILURE_MESSAGE

    logger.debug(f"Unclassified failure: {type(error).__name__}: {error!r}")
    return GENERIC_FAILURE_MESSAGE


def classify(cause: object) -> str:
    """Alias of :func:`get_error_message` used by consumers reporting failures."""
    return get_error_message(cause)

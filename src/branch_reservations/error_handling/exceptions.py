"""
Custom Exception Classes for the branch reservation settings client.

This module defines exception classes for different error categories:
- Request Errors (transport faults, rejected requests)
- Batch Errors (some branch updates in a bulk operation failed)
- Data Errors (hierarchy snapshot inconsistencies)
- Configuration Errors

Each exception includes context for error reporting and logging.
"""

from typing import Optional, Any, Dict, List, TYPE_CHECKING

if TYPE_CHECKING:
    from ..services.batch_coordinator import BatchOutcome


class ReservationSystemError(Exception):
    """Base exception for all reservation settings errors."""

    def __init__(
        self,
        message: str,
        user_message: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        recoverable: bool = True
    ):
        """
        Initialize reservation system error.

        Args:
            message: Technical error message for logging
            user_message: Operator-facing message
            context: Additional context for error reporting
            recoverable: Whether the error is recoverable
        """
        super().__init__(message)
        self.message = message
        self.user_message = user_message or message
        self.context = context or {}
        self.recoverable = recoverable


# ============================================================================
# Request Errors
# ============================================================================

class RequestFailure(ReservationSystemError):
    """
    Raised when a single API request does not succeed.

    Never raised directly; the transport raises one of the two variants
    below so callers can match on what actually went wrong.
    """

    def __init__(
        self,
        message: str,
        method: Optional[str] = None,
        url: Optional[str] = None,
        original_error: Optional[Exception] = None,
        user_message: Optional[str] = None,
        **kwargs
    ):
        """
        Initialize request failure.

        Args:
            message: Error message
            method: HTTP method of the failed request
            url: URL of the failed request
            original_error: Original exception if any
            user_message: Operator-facing message
            **kwargs: Additional context
        """
        context = {
            "method": method,
            "url": url,
            "original_error": str(original_error) if original_error else None,
            **kwargs
        }
        super().__init__(message, user_message=user_message, context=context, recoverable=True)
        self.method = method
        self.url = url
        self.original_error = original_error


class TransportFailure(RequestFailure):
    """
    Raised when no response was received.

    Examples:
    - Connection refused or DNS failure
    - Request timed out
    - Connection dropped mid-response
    - Request httpx refused to build (error_type "invalid_request")
    """

    def __init__(
        self,
        message: str,
        error_type: str = "network",
        **kwargs
    ):
        super().__init__(message, error_type=error_type, **kwargs)
        self.error_type = error_type


class RequestRejected(RequestFailure):
    """
    Raised when the server answered with a non-2xx status.

    Examples:
    - 404 for an unknown branch or table
    - 422 validation rejection
    - 401/403 authorization failure
    """

    def __init__(
        self,
        status_code: int,
        server_message: Optional[str] = None,
        body: Any = None,
        **kwargs
    ):
        """
        Initialize request rejection.

        Args:
            status_code: HTTP status code of the response
            server_message: `message` field of the error body, if present
            body: Parsed (or raw text) response body
            **kwargs: Additional context
        """
        message = f"Request rejected with status {status_code}"
        if server_message:
            message += f": {server_message}"
        super().__init__(
            message,
            user_message=server_message,
            status_code=status_code,
            **kwargs
        )
        self.status_code = status_code
        self.server_message = server_message
        self.body = body


# ============================================================================
# Batch Errors
# ============================================================================

class BatchPartialFailure(ReservationSystemError):
    """
    Raised when one or more branch updates in a bulk operation failed.

    The successful updates are already applied server-side; the outcome
    lists which branches succeeded and which did not.
    """

    def __init__(self, outcome: "BatchOutcome"):
        failed_ids: List[str] = outcome.failed_ids
        message = (
            f"{len(failed_ids)} of {outcome.total} branch updates failed: "
            f"{', '.join(failed_ids)}"
        )
        super().__init__(
            message,
            context={
                "failed_ids": failed_ids,
                "succeeded_ids": outcome.succeeded_ids,
            },
            recoverable=True
        )
        self.outcome = outcome
        self.failed_ids = failed_ids


# ============================================================================
# Data Errors
# ============================================================================

class HierarchyIntegrityError(ReservationSystemError):
    """Raised when a back-reference does not match its containing entity."""

    def __init__(
        self,
        entity: str,
        entity_id: str,
        expected_parent: str,
        actual_parent: str,
        **kwargs
    ):
        message = (
            f"{entity} {entity_id} references parent {actual_parent} "
            f"but is nested under {expected_parent}"
        )
        context = {
            "entity": entity,
            "entity_id": entity_id,
            "expected_parent": expected_parent,
            "actual_parent": actual_parent,
            **kwargs
        }
        super().__init__(message, context=context, recoverable=False)
        self.entity = entity
        self.entity_id = entity_id


# ============================================================================
# System Errors
# ============================================================================

class ConfigurationError(ReservationSystemError):
    """Raised when required configuration is missing or invalid."""

    def __init__(self, message: str, setting: Optional[str] = None, **kwargs):
        context = {"setting": setting, **kwargs}
        super().__init__(
            message,
            user_message="The reservations client is not configured. Please contact an administrator.",
            context=context,
            recoverable=False
        )
        self.setting = setting

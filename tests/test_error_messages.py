"""
Unit tests for failure classification.

Tests:
- Server messages surfaced verbatim
- Fallbacks for bodies without a message
- Transport faults, timeouts and unknown causes never raise
"""
import httpx
import pytest

from branch_reservations.error_handling import (
    RequestRejected,
    TransportFailure,
    BatchPartialFailure,
    ConfigurationError,
    classify,
    extract_error_message,
    GENERIC_FAILURE_MESSAGE,
    TRANSPORT_FAILURE_MESSAGE,
    TIMEOUT_MESSAGE,
)
from branch_reservations.services import BatchOutcome, BranchUpdateResult


class TestExtractErrorMessage:
    """Test message extraction from raw bodies."""

    def test_message_field(self):
        assert extract_error_message({"message": "Branch not found"}) == "Branch not found"

    @pytest.mark.parametrize("body", [
        None,
        "<html>Bad Gateway</html>",
        [],
        {},
        {"message": None},
        {"message": 42},
        {"message": "   "},
        {"errors": {"name": ["required"]}},
    ])
    def test_unusable_bodies(self, body):
        assert extract_error_message(body) is None


class TestClassify:
    """Test classify() across failure variants."""

    def test_rejected_with_message(self):
        """Test that the server message is returned exactly."""
        error = RequestRejected(404, server_message="Branch not found", body={"message": "Branch not found"})

        assert classify(error) == "Branch not found"

    def test_rejected_without_message(self):
        error = RequestRejected(502, server_message=None, body="<html>Bad Gateway</html>")

        assert classify(error) == "Request failed with status 502."

    def test_transport_failure(self):
        error = TransportFailure("GET /branches failed", original_error=httpx.ConnectError("refused"))

        assert classify(error) == TRANSPORT_FAILURE_MESSAGE

    def test_transport_timeout(self):
        error = TransportFailure("GET /branches timed out", error_type="timeout")

        assert classify(error) == TIMEOUT_MESSAGE

    def test_configuration_error(self):
        error = ConfigurationError("token missing", setting="RESERVATIONS_API_TOKEN")

        assert "not configured" in classify(error)

    def test_batch_partial_failure(self):
        outcome = BatchOutcome(results=[
            BranchUpdateResult("A", "A"),
            BranchUpdateResult("B", "B", error=RequestRejected(404, "Branch not found"), message="Branch not found"),
        ])

        assert classify(BatchPartialFailure(outcome)) == "1 of 2 branches could not be updated."

    def test_batch_total_failure(self):
        error = RequestRejected(403, "Forbidden")
        outcome = BatchOutcome(results=[
            BranchUpdateResult("A", "A", error=error),
            BranchUpdateResult("B", "B", error=error),
        ])

        assert classify(BatchPartialFailure(outcome)) == "None of the 2 branches could be updated."

    def test_raw_http_status_error_with_body(self):
        """Test an httpx error that escaped the transport boundary."""
        request = httpx.Request("PUT", "https://reservations.test/api/branches/x")
        response = httpx.Response(422, json={"message": "Invalid duration"}, request=request)
        error = httpx.HTTPStatusError("422", request=request, response=response)

        assert classify(error) == "Invalid duration"

    def test_raw_http_status_error_without_json(self):
        request = httpx.Request("GET", "https://reservations.test/api/branches")
        response = httpx.Response(500, text="oops", request=request)
        error = httpx.HTTPStatusError("500", request=request, response=response)

        assert classify(error) == "Request failed with status 500."

    def test_raw_network_error(self):
        assert classify(httpx.ConnectError("refused")) == TRANSPORT_FAILURE_MESSAGE

    @pytest.mark.parametrize("cause", [
        None,
        "just a string",
        42,
        {"response": {"data": {}}},
        ValueError("boom"),
        RuntimeError(),
    ])
    def test_unknown_causes_fall_back(self, cause):
        """Test that unstructured causes never raise."""
        assert classify(cause) == GENERIC_FAILURE_MESSAGE

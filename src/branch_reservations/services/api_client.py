"""
ApiClient - Authenticated JSON client for the reservations API.

Wraps a pooled httpx.AsyncClient configured from explicit Settings and
translates every failure into a RequestFailure variant at this boundary:
- no response at all   -> TransportFailure
- request not sendable -> TransportFailure (error_type="invalid_request")
- non-2xx response     -> RequestRejected (with the server's `message`)
"""
import time
from typing import Any, Optional, Tuple

import httpx
from loguru import logger

from ..config import Settings, require_api_settings
from ..error_handling.exceptions import RequestRejected, TransportFailure
from ..error_handling.error_messages import extract_error_message
from ..error_handling.logging_config import log_api_call


class ApiClient:
    """
    HTTP client for the reservations API.

    Use as an async context manager so the connection pool is closed:

        async with ApiClient(settings) as client:
            branches = await fetch_hierarchy(client)
    """

    def __init__(
        self,
        settings: Settings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the client.

        Args:
            settings: Explicit configuration (API root, token, timeout)
            transport: Optional httpx transport, used by tests to fake the server

        Raises:
            ConfigurationError: If the API root or token is missing
        """
        base_url, token = require_api_settings(settings)
        self.base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            headers={
                "Content-Type": "application/json",
                "Accept": "application/json",
                "Authorization": f"Bearer {token}",
            },
            timeout=settings.api_timeout,
            transport=transport,
        )

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the underlying connection pool."""
        if not self._client.is_closed:
            await self._client.aclose()

    async def request(
        self,
        method: str,
        path: str,
        json: Optional[dict] = None,
        params: Optional[dict] = None,
    ) -> Any:
        """
        Send one request and return the decoded JSON body.

        Args:
            method: HTTP method
            path: Path relative to the API root
            json: Optional JSON body
            params: Optional query parameters

        Returns:
            Decoded body, or None for empty / non-JSON success responses

        Raises:
            TransportFailure: If no response was received
            RequestRejected: If the server answered with a non-2xx status
        """
        _, body = await self.send(method, path, json=json, params=params)
        return body

    async def send(
        self,
        method: str,
        path: str,
        json: Optional[dict] = None,
        params: Optional[dict] = None,
    ) -> Tuple[int, Any]:
        """
        Like `request`, but also return the success status code.

        Returns:
            Tuple of (status_code, decoded body)
        """
        url = f"{self.base_url}{path}"
        start_time = time.perf_counter()

        try:
            response = await self._client.request(method, path, json=json, params=params)
        except httpx.TimeoutException as e:
            log_api_call(method, path, False, time.perf_counter() - start_time)
            raise TransportFailure(
                f"{method} {path} timed out",
                error_type="timeout",
                method=method,
                url=url,
                original_error=e,
            ) from e
        except httpx.RequestError as e:
            log_api_call(method, path, False, time.perf_counter() - start_time)
            raise TransportFailure(
                f"{method} {path} failed: {e}",
                method=method,
                url=url,
                original_error=e,
            ) from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            # e.g. an id httpx cannot turn into a URL; nothing reached the server
            log_api_call(method, path, False, time.perf_counter() - start_time)
            raise TransportFailure(
                f"{method} {path} could not be sent: {e}",
                error_type="invalid_request",
                method=method,
                url=url,
                original_error=e,
            ) from e

        duration = time.perf_counter() - start_time
        body = _decode_body(response)

        if not response.is_success:
            log_api_call(method, path, False, duration, response.status_code)
            server_message = extract_error_message(body)
            if server_message is None:
                logger.debug(f"{method} {path} returned {response.status_code} without a message body")
            raise RequestRejected(
                status_code=response.status_code,
                server_message=server_message,
                body=body,
                method=method,
                url=url,
            )

        log_api_call(method, path, True, duration, response.status_code)
        return response.status_code, body

    async def get(self, path: str, params: Optional[dict] = None) -> Any:
        return await self.request("GET", path, params=params)

    async def put(self, path: str, json: dict) -> Any:
        return await self.request("PUT", path, json=json)


def _decode_body(response: httpx.Response) -> Any:
    """JSON body if there is one, raw text otherwise, None when empty."""
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text

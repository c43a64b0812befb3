"""
HTTP transport for the ADCortex ad matching endpoint.

Wraps httpx so the rest of the client only sees parsed JSON bodies or
:class:`~adcortex.exceptions.TransportError`.
"""

import logging
from typing import Any

import httpx

from .config import AD_FETCH_URL
from .exceptions import TransportError, TransportTimeoutError, ValidationError

logger = logging.getLogger(__name__)


class AdcortexTransport:
    """POSTs JSON payloads to the matching service."""

    def __init__(
        self,
        api_key: str,
        url: str = AD_FETCH_URL,
        timeout_seconds: float = 10.0,
        retries: int = 3,
    ):
        """
        Args:
            api_key: Value for the X-API-KEY header
            url: Endpoint to POST to
            timeout_seconds: Request timeout in seconds
            retries: Connection attempts retried by the HTTP transport
        """
        self.url = url
        self.timeout = timeout_seconds
        self.retries = retries
        self.headers = {
            "Content-Type": "application/json",
            "X-API-KEY": api_key,
        }

    def post(self, payload: dict[str, Any]) -> Any:
        """Send a payload and return the decoded JSON body."""
        logger.debug(f"POST {self.url}")
        with httpx.Client(
            timeout=self.timeout,
            transport=httpx.HTTPTransport(retries=self.retries),
        ) as client:
            try:
                response = client.post(self.url, json=payload, headers=self.headers)
                response.raise_for_status()
            except httpx.HTTPError as e:
                raise self._wrap_error(e) from e
            return self._decode(response)

    async def apost(self, payload: dict[str, Any]) -> Any:
        """Send a payload asynchronously and return the decoded JSON body."""
        logger.debug(f"POST {self.url} (async)")
        async with httpx.AsyncClient(
            timeout=self.timeout,
            transport=httpx.AsyncHTTPTransport(retries=self.retries),
        ) as client:
            try:
                response = await client.post(self.url, json=payload, headers=self.headers)
                response.raise_for_status()
            except httpx.HTTPError as e:
                raise self._wrap_error(e) from e
            return self._decode(response)

    def _wrap_error(self, error: httpx.HTTPError) -> TransportError:
        if isinstance(error, httpx.TimeoutException):
            return TransportTimeoutError(f"Request timed out: {error}")
        if isinstance(error, httpx.HTTPStatusError):
            status = error.response.status_code
            return TransportError(f"HTTP error fetching ad: {error}", status_code=status)
        return TransportError(f"Error fetching ad: {error}")

    def _decode(self, response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise ValidationError(f"response body is not JSON: {e}") from e

"""
SmartConnect API client.

Sends form-encoded requests to the SmartConnect cloud API with httpx and
interprets the responses the same way for every endpoint:

- 200: the body is JSON; required fields are checked.
- other 2xx: rejected, the API only answers 200.
- 4xx: the body usually carries ``{"error": "..."}`` (not on 404).
- 5xx or an unusable body: the HTTP reason phrase is the only message.

Requests and raw responses are logged for diagnostics only.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Optional

import httpx

from ..core.exceptions import (
    ApiConnectionError,
    ExpectedRemoteError,
    InvalidRequestUrlError,
    InvalidStatusCodeError,
    MalformedResponseError,
    ResponseParseError,
    UnexpectedRemoteError,
)
from ..loggers import logger
from .settings import ApiSettings


FormParameters = Mapping[str, Any]


# =============================================================================
# Response Interpretation
# =============================================================================


@dataclass(frozen=True)
class ApiResponse:
    """
    Successful (HTTP 200) API response.

    Attributes:
        status_code: HTTP status code.
        text: Raw body text.
        payload: Decoded JSON body, None when the body was not parsed.
    """

    status_code: int
    text: str
    payload: Any = None


def extract_field(payload: Any, path: str) -> Any:
    """
    Look up a dotted path (``data.PollingUrl``) in a decoded body.

    Returns:
        The value, or None if any step is missing.
    """
    value = payload
    for key in path.split("."):
        if not isinstance(value, Mapping):
            return None
        value = value.get(key)
    return value


def parse_json(response: httpx.Response) -> Any:
    """
    Decode a response body as JSON.

    Raises:
        ResponseParseError: If the body is not valid JSON.
    """
    try:
        return response.json()
    except ValueError as e:
        raise ResponseParseError(
            f"Invalid JSON in response: {e}",
            details={"status_code": response.status_code},
        ) from e


def error_message(response: httpx.Response) -> tuple[str, bool]:
    """
    Extract the error message of a failed response.

    Returns:
        The message and whether it came from the body's ``error`` field.
    """
    try:
        body = response.json()
    except ValueError:
        body = None

    if isinstance(body, Mapping):
        error = body.get("error")
        if isinstance(error, str) and error:
            return error, True

    return response.reason_phrase or f"HTTP {response.status_code}", False


def interpret_response(
    response: httpx.Response,
    required_fields: Iterable[str] = (),
    parse_body: bool = True,
) -> ApiResponse:
    """
    Turn an HTTP response into an ApiResponse or raise.

    Args:
        response: Response to interpret.
        required_fields: Dotted paths that must be present and non-empty.
        parse_body: Decode the body even if no field is required.

    Returns:
        ApiResponse for a 200.

    Raises:
        ResponseParseError: 200 with a body that is not JSON.
        MalformedResponseError: 200 without a required field.
        InvalidStatusCodeError: 2xx other than 200.
        ExpectedRemoteError: Error response with an ``error`` message.
        UnexpectedRemoteError: Any other error response.
    """
    status = response.status_code
    required = tuple(required_fields)

    if status == 200:
        payload = None
        if parse_body or required:
            payload = parse_json(response)
            for path in required:
                value = extract_field(payload, path)
                if value is None or value == "":
                    raise MalformedResponseError(
                        f"Returned 200 but '{path}' missing",
                        missing_field=path,
                    )
        return ApiResponse(status_code=status, text=response.text, payload=payload)

    if response.is_success:
        raise InvalidStatusCodeError("Invalid status code received", status_code=status)

    message, from_body = error_message(response)
    if from_body:
        raise ExpectedRemoteError(message, status_code=status)
    raise UnexpectedRemoteError(message, status_code=status)


# =============================================================================
# Client
# =============================================================================


class SmartConnectClient:
    """
    Async HTTP client for the SmartConnect API.

    Owns an ``httpx.AsyncClient`` unless one is injected. Use as an async
    context manager or call ``aclose()`` when done.
    """

    def __init__(
        self,
        settings: ApiSettings,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        """
        Initialize the client.

        Args:
            settings: Base URL and request timeout.
            http_client: Client to use instead of creating one.
        """
        self._settings = settings
        self._owns_http_client = http_client is None
        self._http = http_client or httpx.AsyncClient(
            timeout=settings.request_timeout,
            follow_redirects=True,
        )

    @property
    def base_url(self) -> str:
        return self._settings.base_url

    def url_for(self, *segments: str) -> str:
        """Build an endpoint URL by appending segments to the base URL."""
        return self._settings.base_url + "".join(segments)

    async def send(
        self,
        method: str,
        url: str,
        params: Optional[FormParameters] = None,
    ) -> httpx.Response:
        """
        Send a request and return the raw response, whatever its status.

        Args:
            method: HTTP method.
            url: Absolute URL.
            params: Form parameters for the body.

        Returns:
            The HTTP response.

        Raises:
            InvalidRequestUrlError: If the URL cannot be requested.
            ApiConnectionError: If no response was received.
        """
        logger.info(f"Sending {method} request to: {url}")
        if params:
            logger.debug(f"Request parameters: {json.dumps(dict(params))}")

        try:
            response = await self._http.request(method, url, data=params)
        except (httpx.InvalidURL, httpx.UnsupportedProtocol) as e:
            raise InvalidRequestUrlError(f"Invalid request URL {url!r}: {e}") from e
        except httpx.RequestError as e:
            raise ApiConnectionError(
                f"{method} {url} failed: {e}",
                details={"url": url},
            ) from e

        logger.info(f"{method} response received ({response.status_code}): {response.text}")
        return response

    async def request(
        self,
        method: str,
        url: str,
        params: Optional[FormParameters] = None,
        required_fields: Iterable[str] = (),
        parse_body: bool = True,
    ) -> ApiResponse:
        """
        Send a request and interpret the response.

        See ``interpret_response`` for the failure modes.
        """
        response = await self.send(method, url, params)
        return interpret_response(response, required_fields, parse_body)

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this instance created it."""
        if self._owns_http_client:
            await self._http.aclose()

    async def __aenter__(self) -> "SmartConnectClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

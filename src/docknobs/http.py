"""HTTP request utilities for talking to a JSON document store server.

The request functions take the ``requests`` module as an argument so tests
can pass a double in its place.
"""

from __future__ import annotations

import json
from collections.abc import Callable
from typing import Any

import requests

DEFAULT_TIMEOUT = 30
HEADERS = {"Content-Type": "application/json", "Accept": "application/json"}


def json_api_response_handler(
    resp: requests.models.Response,
) -> tuple[requests.models.Response, Any]:
    result = None
    if resp.text:
        result = json.loads(resp.text)
    return (resp, result)


default_api_response_handler = json_api_response_handler


def get_request(
    api_request: str,
    params: dict[str, Any] | None = None,
    headers: dict[str, Any] | None = None,
    timeout: float = DEFAULT_TIMEOUT,
    api_response_handler: Callable[
        [requests.models.Response], tuple[requests.models.Response, Any]
    ] = default_api_response_handler,
    requests: Any = requests,  # pylint: disable-msg=W0621
) -> ServerResponse:
    """Execute an HTTP GET request.

    Args:
        api_request: Full URL for the request.
        params: Query parameters. Defaults to None.
        headers: HTTP headers. If None, uses HEADERS. Defaults to None.
        timeout: Request timeout in seconds. Defaults to DEFAULT_TIMEOUT.
        api_response_handler: Function to process the response.
        requests: Requests library or double for testing.

    Returns:
        ServerResponse: Wrapped response with parsed result.
    """
    if headers is None:
        headers = HEADERS
    return ServerResponse(
        *api_response_handler(
            requests.get(api_request, headers=headers, params=params, timeout=timeout)
        )
    )


def post_request(
    api_request: str,
    payload: str,
    params: dict[str, Any] | None = None,
    headers: dict[str, Any] | None = None,
    timeout: float = DEFAULT_TIMEOUT,
    api_response_handler: Callable[
        [requests.models.Response], tuple[requests.models.Response, Any]
    ] = default_api_response_handler,
    requests: Any = requests,  # pylint: disable-msg=W0621
) -> ServerResponse:
    """Execute an HTTP POST request with an already encoded body."""
    if headers is None:
        headers = HEADERS
    return ServerResponse(
        *api_response_handler(
            requests.post(
                api_request,
                data=payload,
                headers=headers,
                params=params,
                timeout=timeout,
            )
        )
    )


def put_request(
    api_request: str,
    payload: str,
    params: dict[str, Any] | None = None,
    headers: dict[str, Any] | None = None,
    timeout: float = DEFAULT_TIMEOUT,
    api_response_handler: Callable[
        [requests.models.Response], tuple[requests.models.Response, Any]
    ] = default_api_response_handler,
    requests: Any = requests,  # pylint: disable-msg=W0621
) -> ServerResponse:
    """Execute an HTTP PUT request with an already encoded body."""
    if headers is None:
        headers = HEADERS
    return ServerResponse(
        *api_response_handler(
            requests.put(
                api_request,
                data=payload,
                headers=headers,
                params=params,
                timeout=timeout,
            )
        )
    )


class ServerResponse:
    """Wrapper for HTTP response data with convenience properties.

    Attributes:
        resp: The underlying response object.
        result: Parsed response data (typically JSON).
    """

    def __init__(self, resp: requests.models.Response | None, result: Any) -> None:
        self.resp = resp
        self.result = result

    def __repr__(self) -> str:
        if self.result:
            return f"({self.status}):\n{json.dumps(self.result, indent=2)}"
        return str(self.status)

    @property
    def succeeded(self) -> bool:
        """Check if the request succeeded (any 2xx status)."""
        return self.status is not None and 200 <= self.status < 300

    @property
    def status(self) -> int | None:
        """Get the HTTP status code, or None if there was no response."""
        return self.resp.status_code if self.resp is not None else None

    @property
    def json(self) -> Any:
        """Get the parsed JSON response data."""
        return self.result

    @property
    def reason(self) -> str | None:
        """Get the server's error reason, when the body carries one."""
        if isinstance(self.result, dict):
            return self.result.get("reason") or self.result.get("error")
        return None


class MockResponse:
    """Mock HTTP response for testing.

    Attributes:
        status_code: HTTP status code.
        result: Response data.
        text: Response as text (JSON-serialized if result is not a string).
    """

    def __init__(self, status_code: int, result: Any) -> None:
        self.status_code = status_code
        self.result = result
        self.text = result
        if not isinstance(result, str):
            self.text = json.dumps(result)

    def to_server_response(self) -> ServerResponse:
        return ServerResponse(self, self.result)  # type: ignore[arg-type]

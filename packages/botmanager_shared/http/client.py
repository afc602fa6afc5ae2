"""Synchronous HTTP client wrapper over httpx for Bot API calls."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import httpx

from .errors import HttpJsonDecodeError, HttpRequestError, HttpStatusError


def _response_text(response: httpx.Response) -> str:
    """Return response text without raising secondary decode errors."""
    try:
        return response.text
    except Exception:
        return ""


def _status_error(response: httpx.Response, *, url: str) -> HttpStatusError:
    """Build a typed status error from one HTTP response."""
    status_code = response.status_code
    return HttpStatusError(
        message=f"HTTP {status_code} for {response.request.method} {url}",
        method=response.request.method,
        url=url,
        retryable=status_code >= 500 or status_code == 429,
        status_code=status_code,
        response_body=_response_text(response),
        response_headers=dict(response.headers.items()),
    )


class HttpClient:
    """Thin synchronous wrapper over ``httpx.Client``.

    ``redact`` substrings (for example bot tokens embedded in URL paths) are
    masked in every error message and URL this wrapper raises.
    """

    def __init__(
        self,
        *,
        base_url: str = "",
        timeout_seconds: float = 10.0,
        headers: Mapping[str, str] | None = None,
        redact: tuple[str, ...] = (),
        transport: httpx.BaseTransport | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        self._owns_client = client is None
        self._redact = tuple(value for value in redact if value)
        self._client = client or httpx.Client(
            base_url=base_url,
            timeout=timeout_seconds,
            headers=dict(headers or {}),
            transport=transport,
        )

    def close(self) -> None:
        """Close underlying transport resources when owned."""
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> HttpClient:
        return self

    def __exit__(self, *_: object) -> None:
        self.close()

    def request(
        self,
        method: str,
        url: str,
        *,
        raise_for_status: bool = True,
        **kwargs: Any,
    ) -> httpx.Response:
        """Issue one request and map transport/status failures to typed errors."""
        try:
            response = self._client.request(method=method, url=url, **kwargs)
        except httpx.RequestError as exc:
            request = exc.request if _has_request(exc) else None
            request_url = self._masked(str(request.url) if request is not None else url)
            request_method = request.method if request is not None else method.upper()
            raise HttpRequestError(
                message=f"HTTP request failed for {request_method} {request_url}",
                method=request_method,
                url=request_url,
                retryable=True,
                cause=exc,
            ) from exc

        if raise_for_status and response.is_error:
            raise _status_error(response, url=self._masked(str(response.request.url)))
        return response

    def post_json(self, url: str, **kwargs: Any) -> Any:
        """Issue one POST and decode JSON regardless of the response status.

        APIs that describe failures in a JSON body (the Bot API answers
        ``{"ok": false, ...}`` with 4xx codes) are decoded instead of raised.
        Non-JSON error responses still raise ``HttpStatusError``.
        """
        response = self.request("POST", url, raise_for_status=False, **kwargs)
        try:
            return response.json()
        except ValueError as exc:
            masked_url = self._masked(str(response.request.url))
            if response.is_error:
                raise _status_error(response, url=masked_url) from exc
            raise HttpJsonDecodeError(
                message=f"Invalid JSON response for {response.request.method} {masked_url}",
                method=response.request.method,
                url=masked_url,
                retryable=False,
                status_code=response.status_code,
                response_body=_response_text(response),
                cause=exc,
            ) from exc

    def _masked(self, text: str) -> str:
        """Replace configured secret substrings with a fixed placeholder."""
        for secret in self._redact:
            text = text.replace(secret, "***")
        return text


def _has_request(exc: httpx.RequestError) -> bool:
    """Return True when httpx attached a request to the raised error."""
    try:
        exc.request
    except RuntimeError:
        return False
    return True

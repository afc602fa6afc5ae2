"""Typed errors for shared HTTP client and server helpers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping


@dataclass(frozen=True)
class HttpError(Exception):
    """Base error type for shared HTTP helper failures."""

    message: str

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True)
class HttpClientError(HttpError):
    """Base error for outbound HTTP client call failures."""

    method: str
    url: str
    retryable: bool = False


@dataclass(frozen=True)
class HttpRequestError(HttpClientError):
    """HTTP client transport-level failure."""

    cause: Exception | None = None


@dataclass(frozen=True)
class HttpStatusError(HttpClientError):
    """Non-success status code without a decodable body."""

    status_code: int = 0
    response_body: str = ""
    response_headers: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class HttpJsonDecodeError(HttpClientError):
    """Successful response whose body is not JSON."""

    status_code: int = 0
    response_body: str = ""
    cause: Exception | None = None


@dataclass(frozen=True)
class HttpServerError(HttpError):
    """Base error type for inbound HTTP parsing helpers."""


@dataclass(frozen=True)
class InvalidBodyError(HttpServerError):
    """Inbound HTTP body cannot be read in the expected shape."""

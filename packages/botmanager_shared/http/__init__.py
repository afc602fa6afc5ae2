"""Public shared HTTP API for Bot Manager packages."""

from .client import HttpClient
from .errors import (
    HttpClientError,
    HttpError,
    HttpJsonDecodeError,
    HttpRequestError,
    HttpServerError,
    HttpStatusError,
    InvalidBodyError,
)
from .server import (
    RawRequestData,
    create_app,
    read_raw_body,
    read_raw_request,
    run_app,
)

__all__ = [
    "HttpClient",
    "HttpClientError",
    "HttpError",
    "HttpJsonDecodeError",
    "HttpRequestError",
    "HttpServerError",
    "HttpStatusError",
    "InvalidBodyError",
    "RawRequestData",
    "create_app",
    "read_raw_body",
    "read_raw_request",
    "run_app",
]

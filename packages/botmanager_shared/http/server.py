"""Minimal FastAPI and uvicorn helpers for raw HTTP handling."""

from __future__ import annotations

from dataclasses import dataclass

import uvicorn
from fastapi import FastAPI, Request

from .errors import InvalidBodyError


@dataclass(frozen=True)
class RawRequestData:
    """Raw inbound body, query parameters, headers and transport peer."""

    body: bytes
    query: dict[str, str]
    headers: dict[str, str]
    client_host: str | None


def create_app(*, title: str = "botmanager", version: str = "0.0.0") -> FastAPI:
    """Create a FastAPI app with project defaults."""
    return FastAPI(title=title, version=version)


def run_app(
    app: FastAPI,
    *,
    host: str = "127.0.0.1",
    port: int = 8000,
    log_level: str = "info",
) -> None:
    """Run one FastAPI app through uvicorn."""
    uvicorn.run(app, host=host, port=port, log_level=log_level)


async def read_raw_body(request: Request) -> bytes:
    """Read raw request body bytes without interpretation."""
    try:
        return await request.body()
    except RuntimeError as exc:
        raise InvalidBodyError(message="Body stream already consumed") from exc


async def read_raw_request(request: Request) -> RawRequestData:
    """Read everything a webhook delivery check needs in one snapshot.

    Header names are lower-cased; repeated query keys keep the last value.
    """
    body = await read_raw_body(request)
    return RawRequestData(
        body=body,
        query=dict(request.query_params.items()),
        headers={key.lower(): value for key, value in request.headers.items()},
        client_host=request.client.host if request.client is not None else None,
    )

"""Lookalike Portrait - FastAPI Application.

This module is the single entry point for the web application.  It defines
the ``create_app()`` factory, the default ``app`` instance, all routes, and
the ``main()`` CLI function that launches the uvicorn server.

Architecture
------------
The application is a thin, stateless integration layer:

- **Configuration** is one frozen :class:`~lookalike.core.config.LookalikeConfig`
  built at startup and stored on ``app.state.settings``.
- **Generation** is delegated to the provider client selected by
  ``settings.provider`` (see :mod:`lookalike.core.provider_clients`).  Each
  valid request makes exactly one outbound call; nothing is retried, cached
  or stored.
- **Errors** are :class:`~lookalike.core.errors.LookalikeError` subclasses,
  rendered as ``{"error": message}`` with the status each class carries.
  Any other exception is rendered as a 500 :class:`~lookalike.core.errors.InternalError`.
- **Static assets** for the front-end are served from ``settings.static_dir``
  for every other ``GET`` path.

Endpoints
---------
========  ====================  ==========================================
Method    Path                  Purpose
========  ====================  ==========================================
POST      ``/api/lookalike``    Generate a lookalike portrait
GET       ``/api/health``       Version and active provider
GET       ``/{path}``           Static front-end files (``/`` = index.html)
========  ====================  ==========================================

Usage
-----
CLI (installed entry point)::

    lookalike

Direct invocation::

    python -m lookalike.api.main
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx
from fastapi import APIRouter, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse, PlainTextResponse, Response

from lookalike import __version__
from lookalike.api.static_files import (
    StaticFileForbidden,
    StaticFileNotFound,
    content_type_for,
    resolve_static_file,
)
from lookalike.api.validation import parse_lookalike_request
from lookalike.core.config import LookalikeConfig, config
from lookalike.core.errors import InternalError, LookalikeError, PayloadTooLargeError
from lookalike.core.provider_clients import ProviderClientBase, provider_registry

logger = logging.getLogger(__name__)

router = APIRouter()


# ---------------------------------------------------------------------------
# Request body helper.
# ---------------------------------------------------------------------------


async def read_limited_body(request: Request, limit: int) -> bytes:
    """Read the request body, refusing anything larger than ``limit`` bytes.

    A declared ``Content-Length`` over the limit is rejected before any byte
    is read; otherwise the stream is consumed chunk by chunk and reading
    stops as soon as the running total passes the limit.

    Args:
        request: The incoming request.
        limit: Maximum body size in bytes.

    Returns:
        The complete body.

    Raises:
        PayloadTooLargeError: If the body exceeds ``limit``.
    """
    declared = request.headers.get("content-length")
    if declared and declared.isdigit() and int(declared) > limit:
        raise PayloadTooLargeError()

    chunks: list[bytes] = []
    total = 0
    async for chunk in request.stream():
        total += len(chunk)
        if total > limit:
            raise PayloadTooLargeError()
        chunks.append(chunk)
    return b"".join(chunks)


# ---------------------------------------------------------------------------
# Routes.
# ---------------------------------------------------------------------------


@router.post("/api/lookalike")
async def create_lookalike(request: Request) -> dict:
    """Generate a lookalike animal-costume portrait.

    This endpoint:

    1. Reads the body, bounded by ``settings.max_body_bytes``.
    2. Validates it into a :class:`~lookalike.core.models.LookalikeRequest`.
    3. Makes one call to the configured provider.
    4. Returns the normalised result.

    Args:
        request: The incoming request; its body is read manually so that
            oversize and malformed bodies map onto the error taxonomy.

    Returns:
        Dictionary with ``imageDataUrl`` and ``analysisText``.

    Raises:
        LookalikeError: 400/413 for caller faults, 500 for provider and
            internal faults.
    """
    settings: LookalikeConfig = request.app.state.settings
    provider: ProviderClientBase = request.app.state.provider

    body = await read_limited_body(request, settings.max_body_bytes)
    lookalike_request = parse_lookalike_request(body)

    try:
        result = await provider.generate(lookalike_request)
    except LookalikeError:
        raise
    except Exception as e:
        logger.exception(f"Unexpected error from provider {provider.provider_id}")
        raise InternalError(str(e) or None) from e

    return result.model_dump(by_alias=True)


@router.get("/api/health")
async def health(request: Request) -> dict:
    """Return the API version and the active provider.

    Returns:
        Dictionary with ``status``, ``version`` and ``provider`` (provider
        metadata, never credentials).
    """
    provider: ProviderClientBase = request.app.state.provider
    return {
        "status": "ok",
        "version": __version__,
        "provider": provider.get_provider_info(),
    }


@router.get("/{full_path:path}")
async def serve_static(full_path: str, request: Request) -> Response:
    """Serve a front-end file from the static root.

    Args:
        full_path: Request path without the leading slash.

    Returns:
        The file content with a content type chosen by extension, or a
        plain-text 403/404.
    """
    settings: LookalikeConfig = request.app.state.settings
    try:
        path = resolve_static_file(settings.static_dir, full_path)
    except StaticFileForbidden:
        return PlainTextResponse("Forbidden", status_code=403)
    except StaticFileNotFound:
        return PlainTextResponse("Not Found", status_code=404)

    return FileResponse(path, media_type=content_type_for(path))


# ---------------------------------------------------------------------------
# Error rendering.
# ---------------------------------------------------------------------------


async def lookalike_error_handler(request: Request, exc: LookalikeError) -> JSONResponse:
    """Render a :class:`LookalikeError` as ``{"error": message}``.

    Oversized bodies also close the connection so the rest of the upload is
    never read.
    """
    if exc.status_code >= 500:
        logger.error(f"{type(exc).__name__}: {exc.message}")
    headers = {"Connection": "close"} if isinstance(exc, PayloadTooLargeError) else None
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.message},
        headers=headers,
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Render any other exception as a generic :class:`InternalError`.

    The exception text is logged only; the caller gets the default message.
    """
    logger.error(f"Unhandled error on {request.method} {request.url.path}", exc_info=exc)
    return await lookalike_error_handler(request, InternalError())


# ---------------------------------------------------------------------------
# Application factory.
# ---------------------------------------------------------------------------


def create_app(
    settings: LookalikeConfig | None = None,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    """Build the FastAPI application.

    Args:
        settings: Configuration to use.  Defaults to the global
            :data:`~lookalike.core.config.config`.
        transport: Optional httpx transport for the outbound client (tests
            pass an ``httpx.MockTransport``).

    Returns:
        The configured application.  The provider client and its HTTP client
        are created in the lifespan, so they exist only while the app runs.
    """
    settings = settings or config

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        """Create the shared HTTP client and provider; close them on shutdown."""
        # --- Startup -------------------------------------------------------
        http_client = httpx.AsyncClient(timeout=settings.request_timeout, transport=transport)
        app.state.provider = provider_registry.instantiate(settings.provider, settings, http_client)
        logger.info(f"Serving lookalike requests with provider '{settings.provider}'.")

        yield  # Application runs here.

        # --- Shutdown ------------------------------------------------------
        await http_client.aclose()
        logger.info("Outbound HTTP client closed on shutdown.")

    app = FastAPI(
        title="Lookalike Portrait",
        description="Animal-costume lookalike portraits from a face photo.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings

    # Allow cross-origin requests so the front-end can be served from a
    # different port during development.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(LookalikeError, lookalike_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
    app.include_router(router)
    return app


app = create_app()


# ---------------------------------------------------------------------------
# CLI entry point.
# ---------------------------------------------------------------------------


def main() -> None:
    """Launch the uvicorn ASGI server.

    Reads host and port from :data:`~lookalike.core.config.config` (which
    loads from ``LOOKALIKE_SERVER_HOST`` and ``LOOKALIKE_SERVER_PORT``
    environment variables).  Defaults to ``0.0.0.0:3000``.

    This function is registered as the ``lookalike`` console script in
    ``pyproject.toml``.
    """
    import uvicorn

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    uvicorn.run(
        "lookalike.api.main:app",
        host=config.server_host,
        port=config.server_port,
        reload=False,
    )


if __name__ == "__main__":
    main()

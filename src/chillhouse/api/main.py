"""Chillhouse relay — FastAPI Application.

This module is the single entry point for the web service.  It defines the
application factory, the module-level ``app`` instance, all routes, and the
``main()`` CLI function that launches the uvicorn server.

Architecture
------------
- **Configuration** is a :class:`~chillhouse.core.config.ChillhouseConfig`
  handed to :func:`create_app` (the global ``config`` by default).
- **Transforms** are run by :class:`~chillhouse.api.transform.TransformService`,
  which relays the upload to the upstream ``images/edits`` endpoint through a
  shared ``httpx.AsyncClient``.
- **Results** live in a :class:`~chillhouse.api.result_store.ResultStore` held
  in process memory for the lifetime of the application.

Endpoints
---------
========  ========================  =========================================
Method    Path                      Purpose
========  ========================  =========================================
POST      ``/transform``            Transform an uploaded image, return an id
GET       ``/result/{image_id}``    Fetch a transformed image as PNG
GET       ``/styles``               List recognised style keys
========  ========================  =========================================

Usage
-----
CLI (installed entry point)::

    chillhouse

Direct invocation::

    python -m chillhouse.api.main
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx
from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse, Response
from starlette.datastructures import UploadFile

from chillhouse import __version__
from chillhouse.api.errors import ChillhouseError, MissingInput, NotFound
from chillhouse.api.models import ErrorResponse, StylesResponse, TransformResponse
from chillhouse.api.prompt_builder import available_styles
from chillhouse.api.result_store import ResultStore
from chillhouse.api.transform import TransformService
from chillhouse.api.uploads import staged_upload
from chillhouse.core.config import ChillhouseConfig, config

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Application lifecycle — result store and upstream client setup/teardown.
# ---------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage application startup and shutdown lifecycle.

    On startup:
        Creates the :class:`ResultStore`, the shared ``httpx.AsyncClient``
        (with the configured upstream timeout) and the
        :class:`TransformService`, and stores them on ``app.state``.

    On shutdown:
        Closes the HTTP client.  Stored results are discarded with the
        process.

    Args:
        app: The FastAPI application instance.

    Yields:
        Control back to the application for the duration of its lifetime.
    """
    settings: ChillhouseConfig = app.state.settings

    # --- Startup -----------------------------------------------------------
    app.state.result_store = ResultStore()
    app.state.http_client = httpx.AsyncClient(
        timeout=settings.upstream_timeout,
        transport=app.state.upstream_transport,
    )
    app.state.transform_service = TransformService(
        settings,
        app.state.http_client,
        app.state.result_store,
    )
    if not settings.has_credentials:
        logger.warning("OPENAI_API_KEY is not set; /transform will fail until it is configured.")
    logger.info(f"Chillhouse relay ready (model={settings.image_model}, size={settings.image_size}).")

    yield  # Application runs here.

    # --- Shutdown ----------------------------------------------------------
    await app.state.http_client.aclose()
    logger.info("Upstream client closed on shutdown.")


# ---------------------------------------------------------------------------
# Dependencies.
# ---------------------------------------------------------------------------


def get_transform_service(request: Request) -> TransformService:
    return request.app.state.transform_service


def get_result_store(request: Request) -> ResultStore:
    return request.app.state.result_store


# ---------------------------------------------------------------------------
# Error rendering.
# ---------------------------------------------------------------------------


async def chillhouse_error_handler(request: Request, exc: ChillhouseError) -> Response:
    """Render a :class:`ChillhouseError` as the API's error response.

    Lookups of unknown results answer with a bare plain-text 404.  Every
    other error answers with an :class:`ErrorResponse` JSON body.
    """
    if isinstance(exc, NotFound):
        return PlainTextResponse("Not found", status_code=404)

    if exc.status_code >= 500:
        logger.error(f"Transform error on {request.url.path}: {exc}", exc_info=exc)
    else:
        logger.warning(f"Rejected request on {request.url.path}: {exc}")

    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(error=str(exc)).model_dump(),
    )


# ---------------------------------------------------------------------------
# Routes.
# ---------------------------------------------------------------------------

router = APIRouter()


@router.post(
    "/transform",
    response_model=TransformResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    openapi_extra={
        "requestBody": {
            "content": {
                "multipart/form-data": {
                    "schema": {
                        "type": "object",
                        "properties": {
                            "image": {"type": "string", "format": "binary"},
                            "style": {"type": "string"},
                        },
                        "required": ["image"],
                    }
                }
            },
        }
    },
)
async def transform_image(
    request: Request,
    service: TransformService = Depends(get_transform_service),
) -> TransformResponse:
    """Transform an uploaded image into the Chillhouse style.

    The form is read directly rather than through ``File``/``Form``
    parameters so that an ``image`` part sent as plain text is reported as a
    missing upload instead of a validation error.

    This endpoint:

    1. Fails fast with 500 if no upstream credential is configured.
    2. Fails with 400 if the ``image`` field is missing or is not a file.
    3. Stages the upload to a scratch file for the duration of the call.
    4. Relays it upstream with the style prompt and stores the result.

    Form fields:
        image: The uploaded image file.
        style: Optional style key.

    Returns:
        :class:`TransformResponse` carrying the new ``image_id``.

    Raises:
        Misconfiguration: 500 when the credential is missing.
        MissingInput: 400 when no image was uploaded.
        UploadStagingError: 500 when the upload cannot be written to disk.
        UpstreamError: 500 when the upstream call fails.
        UpstreamProtocolError: 500 when upstream returns no image.
    """
    service.ensure_configured()

    async with request.form() as form:
        image = form.get("image")
        style = form.get("style")
        if not isinstance(image, UploadFile) or not image.filename:
            raise MissingInput("Missing image upload")
        if not isinstance(style, str):
            style = None

        content = await image.read()
        filename = image.filename
        content_type = image.content_type

    with staged_upload(
        content,
        filename,
        content_type,
        service.settings.uploads_dir,
    ) as upload:
        image_id = await service.transform(upload, style)

    return TransformResponse(image_id=image_id)


@router.get(
    "/result/{image_id}",
    response_class=Response,
    responses={
        200: {"content": {"image/png": {}}},
        404: {"content": {"text/plain": {}}},
    },
)
async def get_result(
    image_id: str,
    store: ResultStore = Depends(get_result_store),
) -> Response:
    """Return a stored transform result as a PNG.

    Args:
        image_id: Identifier returned by ``POST /transform``.
        store: The application's result store.

    Returns:
        The raw image bytes with ``Content-Type: image/png``.

    Raises:
        NotFound: 404 if no result is stored under *image_id*.
    """
    data = store.get(image_id)
    if data is None:
        raise NotFound(f"No result stored for {image_id}")
    return Response(content=data, media_type="image/png")


@router.get("/styles", response_model=StylesResponse)
async def list_styles() -> StylesResponse:
    """Return the style keys accepted by ``POST /transform``."""
    return StylesResponse(styles=available_styles())


# ---------------------------------------------------------------------------
# Application factory.
# ---------------------------------------------------------------------------


def create_app(
    settings: ChillhouseConfig | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    """Build a configured FastAPI application.

    Args:
        settings: Service configuration.  Defaults to the global ``config``.
        transport: Optional httpx transport for the upstream client (tests
            pass an ``httpx.MockTransport``).

    Returns:
        The FastAPI application.
    """
    app = FastAPI(
        title="Chillhouse",
        description="Relay that turns uploaded photos into Chillhouse meme images.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings or config
    app.state.upstream_transport = transport

    # Browser clients may be served from a different origin than the API.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(ChillhouseError, chillhouse_error_handler)
    app.include_router(router)
    return app


app = create_app()


# ---------------------------------------------------------------------------
# CLI entry point.
# ---------------------------------------------------------------------------


def main() -> None:
    """Launch the uvicorn ASGI server.

    Reads host and port from :data:`~chillhouse.core.config.config` (which
    loads from ``CHILLHOUSE_SERVER_HOST`` and ``PORT`` /
    ``CHILLHOUSE_SERVER_PORT``).  Defaults to ``0.0.0.0:3000``.

    This function is registered as the ``chillhouse`` console script in
    ``pyproject.toml``.
    """
    import uvicorn

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    uvicorn.run(
        "chillhouse.api.main:app",
        host=config.server_host,
        port=config.server_port,
        reload=False,
    )


if __name__ == "__main__":
    main()

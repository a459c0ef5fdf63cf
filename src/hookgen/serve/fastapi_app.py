"""FastAPI relay between the hook-message page and Gemini.

Endpoints:
- GET /, GET /index.html
- GET /api/health
- POST /api/generate  { "prompt": "..." }
"""
from __future__ import annotations
import logging

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse

from hookgen.common.logging_setup import setup_logging
from hookgen.common.pages import load_page
from hookgen.common.schema import (
    BAD_REQUEST_MESSAGE,
    CONFIG_ERROR_MESSAGE,
    GENERATION_ERROR_MESSAGE,
    HEALTH_MESSAGE,
    ErrorOut,
    GenerateIn,
    GenerateOut,
    HealthOut,
)
from hookgen.common.settings import Settings, SettingsError, get_settings, load_settings
from hookgen.serve.gemini import GeminiClient, MissingCredentialError, UpstreamError

LOGGER = logging.getLogger("hookgen.serve.app")


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorOut(error=message).model_dump())


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or load_settings()
    app = FastAPI(title="XIVIX Hook Message Generator")
    # Applied app-wide; only the /api routes are ever called cross-origin.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.on_event("startup")
    def _check_environment_on_startup() -> None:
        """Warn about a missing key or page; neither blocks startup."""
        try:
            if not load_settings().api_key:
                LOGGER.warning("GEMINI_API_KEY is not set; /api/generate will answer 500")
        except SettingsError as e:
            LOGGER.warning("Settings are invalid; /api/generate will answer 500: %s", e)
        try:
            load_page()
        except OSError as e:
            LOGGER.warning("Failed to read index page: %s", e)

    @app.exception_handler(RequestValidationError)
    async def _bad_request(request: Request, exc: RequestValidationError) -> JSONResponse:
        LOGGER.info("Rejected request to %s: %s", request.url.path, exc.errors())
        return _error(400, BAD_REQUEST_MESSAGE)

    @app.exception_handler(MissingCredentialError)
    async def _missing_credential(request: Request, exc: MissingCredentialError) -> JSONResponse:
        LOGGER.error("Cannot generate: %s", exc)
        return _error(500, CONFIG_ERROR_MESSAGE)

    @app.exception_handler(SettingsError)
    async def _bad_settings(request: Request, exc: SettingsError) -> JSONResponse:
        LOGGER.error("Cannot generate: %s", exc)
        return _error(500, CONFIG_ERROR_MESSAGE)

    @app.exception_handler(UpstreamError)
    async def _upstream_failed(request: Request, exc: UpstreamError) -> JSONResponse:
        LOGGER.error("Generation failed (%s)", exc.cause.value)
        return _error(500, GENERATION_ERROR_MESSAGE)

    @app.get("/", response_class=HTMLResponse)
    @app.get("/index.html", response_class=HTMLResponse)
    def index() -> HTMLResponse:
        return HTMLResponse(load_page())

    @app.get("/api/health", response_model=HealthOut)
    def health() -> HealthOut:
        return HealthOut(status="ok", message=HEALTH_MESSAGE)

    @app.post(
        "/api/generate",
        response_model=GenerateOut,
        responses={400: {"model": ErrorOut}, 500: {"model": ErrorOut}},
    )
    def generate(body: GenerateIn, settings: Settings = Depends(get_settings)) -> JSONResponse:
        client = GeminiClient(settings)
        result = client.generate(body.prompt)
        # Relayed verbatim: no reordering or filtering of suggestions.
        return JSONResponse(content=result)

    return app


_settings = load_settings()
setup_logging(_settings.log_level)
app = create_app(_settings)

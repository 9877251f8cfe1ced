from __future__ import annotations

import logging
import time
import uuid

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from leagueboards.config.settings import settings
from leagueboards.core.errors import UpstreamError

from .errors import AppError, error_payload
from .routers.boards import router as boards_router

logger = logging.getLogger("leagueboards_api")

HTTP_ERROR_CODES = {404: "NOT_FOUND", 405: "METHOD_NOT_ALLOWED"}


def _configure_logging() -> None:
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )


def _request_id(request: Request) -> str:
    return getattr(request.state, "request_id", "-")


def _error_response(exc: AppError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status,
        content=error_payload(exc.message, exc.code, exc.status, exc.details),
    )


async def request_context_middleware(request: Request, call_next):  # type: ignore[no-untyped-def]
    """Tag every request with an id, log its outcome and keep board payloads out of shared caches."""
    request.state.request_id = f"req_{uuid.uuid4().hex[:12]}"
    started_at = time.perf_counter()

    try:
        response = await call_next(request)
    except Exception as exc:
        logger.exception("request_failed path=%s request_id=%s", request.url.path, _request_id(request))
        response = _error_response(
            AppError(
                message="Internal server error.",
                code="INTERNAL_ERROR",
                status=500,
                details={"error": type(exc).__name__},
            )
        )

    response.headers["X-Request-Id"] = _request_id(request)
    if request.url.path.startswith("/api/"):
        response.headers["Cache-Control"] = "no-store"
    logger.log(
        logging.ERROR if response.status_code >= 500 else logging.INFO,
        "request method=%s path=%s status=%s request_id=%s duration_ms=%.2f",
        request.method,
        request.url.path,
        response.status_code,
        _request_id(request),
        (time.perf_counter() - started_at) * 1000,
    )
    return response


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    logger.warning(
        "app_error code=%s status=%s path=%s request_id=%s",
        exc.code,
        exc.status,
        request.url.path,
        _request_id(request),
    )
    return _error_response(exc)


async def upstream_error_handler(request: Request, exc: UpstreamError) -> JSONResponse:
    return await app_error_handler(request, AppError.from_upstream(exc))


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return _error_response(
        AppError(
            message=str(exc.detail) if exc.detail else "HTTP error.",
            code=HTTP_ERROR_CODES.get(exc.status_code, "HTTP_ERROR"),
            status=exc.status_code,
        )
    )


def create_app() -> FastAPI:
    _configure_logging()
    application = FastAPI(title="leagueboards-api", version="1.0.0", docs_url="/docs", redoc_url="/redoc")
    application.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["GET"], allow_headers=["*"])
    application.middleware("http")(request_context_middleware)
    application.add_exception_handler(AppError, app_error_handler)
    application.add_exception_handler(UpstreamError, upstream_error_handler)
    application.add_exception_handler(StarletteHTTPException, http_error_handler)

    @application.get("/health", tags=["health"])
    def healthcheck() -> dict[str, str]:
        return {"status": "ok"}

    application.include_router(boards_router)
    return application


app = create_app()

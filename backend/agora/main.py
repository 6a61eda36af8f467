"""FastAPI application factory.

Run with `uvicorn agora.main:create_app --factory`.

- Settings are read once here and kept on `app.state.settings`.
- One engine and session factory per application.
- Request-id propagation and structured JSON access logs.
- Every failure is rendered as `{"error": "<message>"}`.
"""

from __future__ import annotations

import json
import logging
import time
import uuid
from typing import Callable, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

import agora.models as _models  # noqa: F401  (register all ORM models deterministically)
from agora import __version__
from agora.api.router import router as api_router
from agora.core.config import Settings
from agora.core.db import create_db_engine, create_session_factory
from agora.core.errors import AgoraError


logger = logging.getLogger("agora")


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def _validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    field = ".".join(str(p) for p in first.get("loc", ()) if p not in ("body", "query", "path"))
    msg = first.get("msg", "invalid value")
    return f"Invalid {field}: {msg}" if field else f"Invalid request: {msg}"


def _install_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(AgoraError)
    async def handle_agora_error(request: Request, exc: AgoraError) -> JSONResponse:
        return _error(exc.status_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        return _error(400, _validation_message(exc))

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return _error(exc.status_code, str(exc.detail))

    @app.exception_handler(SQLAlchemyError)
    async def handle_store_error(request: Request, exc: SQLAlchemyError) -> JSONResponse:
        logger.exception("Unhandled store error", exc_info=exc)
        return _error(500, "Database error")


def create_app(settings: Optional[Settings] = None, *, engine: Optional[Engine] = None) -> FastAPI:
    settings = settings or Settings.from_env()
    logger.setLevel(settings.log_level)

    app = FastAPI(
        title="Agora Event Coordination API",
        version=__version__,
        openapi_url="/openapi.json",
        description="IR event calendar, RSVPs and sector subscriptions.",
    )
    app.state.settings = settings
    app.state.engine = engine if engine is not None else create_db_engine(settings)
    app.state.session_factory = create_session_factory(app.state.engine)

    origins = list(settings.cors_allow_origins)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        # Credentials cannot be combined with a wildcard origin.
        allow_credentials=origins != ["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    _install_error_handlers(app)
    app.include_router(api_router, prefix="/api")

    @app.middleware("http")
    async def request_id_and_access_log(request: Request, call_next: Callable):
        request_id = request.headers.get("x-request-id") or str(uuid.uuid4())
        start = time.time()
        try:
            response = await call_next(request)
        except Exception:  # noqa: BLE001
            logger.exception("Unhandled error", extra={"request_id": request_id})
            response = _error(500, "Internal server error")

        duration_ms = int((time.time() - start) * 1000)
        response.headers["x-request-id"] = request_id

        # Structured access log (no headers or bodies).
        logger.info(
            json.dumps(
                {
                    "event": "access",
                    "request_id": request_id,
                    "method": request.method,
                    "path": request.url.path,
                    "status_code": getattr(response, "status_code", None),
                    "duration_ms": duration_ms,
                }
            )
        )
        return response

    return app

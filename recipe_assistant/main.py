from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from recipe_assistant.api.v1.pantry import router as pantry_router
from recipe_assistant.api.v1.profile import router as profile_router
from recipe_assistant.api.v1.receipts import router as receipts_router
from recipe_assistant.api.v1.recipes import router as recipes_router
from recipe_assistant.config import Settings
from recipe_assistant.services.exceptions import AIFormatError, ServiceError, ValidationError

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    """Every pipeline error becomes a structured failure body; none escape as a 500 crash."""
    body = {"success": False, "error": str(exc), "kind": type(exc).__name__}
    if isinstance(exc, AIFormatError):
        body["raw"] = exc.raw_text
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc, exc_info=exc.__cause__)
    else:
        logger.info("%s %s rejected: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=exc.status_code, content=body)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed request bodies get the same failure envelope as a ValidationError."""
    problems = "; ".join(
        f"{'.'.join(str(p) for p in err['loc'] if p != 'body') or 'body'}: {err['msg']}"
        for err in exc.errors()
    )
    logger.info("%s %s rejected: %s", request.method, request.url.path, problems)
    return JSONResponse(
        status_code=ValidationError.status_code,
        content={"success": False, "error": f"Invalid request: {problems}", "kind": ValidationError.__name__},
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Ensure data dir exists so repos can write
    settings = Settings()
    os.makedirs(settings.data_dir, exist_ok=True)
    yield


def create_app() -> FastAPI:
    """Application factory.

    Settings are read when the app is built, so there is no module-level ``app``.
    Run with ``uvicorn recipe_assistant.main:create_app --factory`` or via
    ``gunicorn -c docker/gunicorn_conf.py``.
    """
    settings = Settings()
    configure_logging(settings.log_level)
    app = FastAPI(title="Recipe Assistant API", version="1.0", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(ServiceError, service_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)

    app.include_router(profile_router)
    app.include_router(pantry_router)
    app.include_router(receipts_router)
    app.include_router(recipes_router)

    @app.get("/healthz")
    def healthz():
        return {"status": "ok"}

    @app.get("/readyz")
    def readyz():
        return {"status": "ready"}

    return app

from contextlib import asynccontextmanager
from datetime import datetime, timezone

import httpx
import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config import settings
from app.core.db.base import dispose_engine
from app.core.logging import get_logger, setup_logging
from app.apis.auth.main import router as auth_router
from app.apis.dashboard.main import router as dashboard_router
from app.apis.ml.main import router as ml_router
from app.apis.user.main import router as user_router
from app.modules.generation import GenerationConfig, LearningToolsService


logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    config = GenerationConfig.from_settings(settings)
    async with httpx.AsyncClient() as client:
        app.state.learning_tools = LearningToolsService(config, http=client)
        logger.info(
            "providers: huggingface=%s gemini=%s",
            "on" if config.hf_enabled else "off",
            "on" if config.gemini_enabled else "off",
        )
        yield
    await dispose_engine()


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    # dict details (e.g. password rules) are already shaped for the client
    content = exc.detail if isinstance(exc.detail, dict) else {"error": exc.detail}
    return JSONResponse(
        status_code=exc.status_code, content=content, headers=getattr(exc, "headers", None)
    )


async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "Validation failed", "details": _validation_details(exc)},
    )


def _validation_details(exc: RequestValidationError) -> list[dict]:
    return [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg", "")}
        for err in exc.errors()
    ]


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Something went wrong!"},
    )


def create_app() -> FastAPI:
    setup_logging()
    app = FastAPI(
        title=settings.app.name, version=settings.app.version, lifespan=lifespan
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.app.frontend_url],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    app.include_router(auth_router)
    app.include_router(user_router)
    app.include_router(dashboard_router)
    app.include_router(ml_router)

    @app.get("/health")
    async def health():
        return {"status": "OK", "timestamp": datetime.now(timezone.utc).isoformat()}

    @app.get("/")
    async def root():
        return {
            "status": "ok",
            "app": settings.app.name,
            "version": settings.app.version,
        }

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=settings.app.port,
        reload=not settings.app.is_production,
    )

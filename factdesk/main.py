from contextlib import asynccontextmanager
from datetime import datetime
from typing import Callable, Optional
import logging

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from factdesk import __version__
from factdesk.api.v1.endpoints import api_router
from factdesk.core import logging as _logging  # noqa: F401  configures handlers
from factdesk.core.config import Settings, settings as default_settings
from factdesk.core.exceptions import FactDeskError, InternalError
from factdesk.core.timeutils import utcnow
from factdesk.db import models  # noqa: F401  registers tables on Base.metadata
from factdesk.db.base import Base
from factdesk.db.session import build_engine, build_session_factory

logger = logging.getLogger("factdesk")


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Application startup...")
    if app.state.settings.AUTO_CREATE_TABLES:
        Base.metadata.create_all(bind=app.state.engine)

    yield

    logger.info("Application shutdown...")
    app.state.engine.dispose()


async def factdesk_error_handler(request: Request, exc: FactDeskError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def validation_error_handler(request: Request, exc: RequestValidationError):
    details = [
        {"field": ".".join(str(part) for part in err["loc"]), "message": err["msg"]}
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=jsonable_encoder({
            "error": "VALIDATION_ERROR",
            "message": "Request validation failed",
            "details": details,
        }),
    )


async def http_error_handler(request: Request, exc: StarletteHTTPException):
    if isinstance(exc.detail, dict):
        content = exc.detail
    else:
        content = {"error": "HTTP_ERROR", "message": str(exc.detail)}
    return JSONResponse(status_code=exc.status_code, content=content, headers=getattr(exc, "headers", None))


async def database_error_handler(request: Request, exc: SQLAlchemyError):
    logger.error(f"Database error on {request.method} {request.url.path}: {exc}", exc_info=True)
    error = InternalError()
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=True)
    error = InternalError()
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


def create_app(
    settings: Optional[Settings] = None,
    clock: Optional[Callable[[], datetime]] = None,
) -> FastAPI:
    """
    Build the application around one engine and session factory.

    Everything stateful hangs off ``app.state`` so tests can build as many
    isolated apps as they like.
    """
    settings = settings or default_settings
    engine = build_engine(settings.DATABASE_URL, echo=settings.DEBUG)

    app = FastAPI(title="FactDesk", version=__version__, lifespan=lifespan)
    app.state.settings = settings
    app.state.clock = clock or utcnow
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(FactDeskError, factdesk_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(SQLAlchemyError, database_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    app.include_router(api_router, prefix="/api/v1")

    @app.get("/")
    def read_root():
        return {"message": "Welcome to FactDesk"}

    @app.get("/health")
    def health():
        return {"status": "ok", "version": __version__}

    return app


app = create_app()

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from jingjai.api.v1.api import api_router
from jingjai.api.v1.endpoints.health import probes
from jingjai.core.config import settings
from jingjai.core.errors import InternalError, InvalidArgumentError, ServiceError
from jingjai.core.logging import setup_logging
from jingjai.db.session import init_db

logger = logging.getLogger(__name__)


def _error_response(exc: ServiceError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": exc.to_dict()})


async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return _error_response(exc)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    # Report each bad input under its innermost field name
    field_errors = {}
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ()) if part != "body"]
        field_errors.setdefault(loc[-1] if loc else "body", error.get("msg", "Invalid value."))
    return _error_response(InvalidArgumentError("Validation failed", field_errors))


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return _error_response(InternalError())


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    yield


def create_app(create_tables: bool = True) -> FastAPI:
    setup_logging()

    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        openapi_url=f"{settings.API_V1_STR}/openapi.json",
        lifespan=lifespan if create_tables else None,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(ServiceError, service_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    app.include_router(api_router, prefix=settings.API_V1_STR)
    app.include_router(probes)
    return app


app = create_app()

"""FastAPI application factory and setup."""

import time
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from loguru import logger
from starlette.responses import JSONResponse

from src.crud_api.api.http.app_data import ApplicationDependencies
from src.crud_api.api.http.routers import health, products, users
from src.crud_api.api.utils.app_startup import configure_logging
from src.crud_api.core.exceptions import CrudApiError, ValidationError
from src.crud_api.core.services import (
    DbManageService,
    DbSessionService,
    ProductService,
    UserService,
)
from src.crud_api.runtime.config.config_data import ConfigData
from src.crud_api.runtime.context import get_config


def build_dependencies(config: ConfigData | None = None) -> ApplicationDependencies:
    """Compose the services shared by every request."""
    config = config or get_config()
    if not config.security.api_key:
        raise RuntimeError("security.api_key must be configured (set API_KEY)")

    database_service = DbSessionService(config=config)
    if config.database.auto_migrate:
        DbManageService(database_service.engine).upgrade()

    return ApplicationDependencies(
        database_service=database_service,
        user_service=UserService(database_service),
        product_service=ProductService(),
        api_key=config.security.api_key,
        api_key_header=config.security.api_key_header,
    )


def _request_id(request: Request) -> str:
    return getattr(request.state, "request_id", "-")


async def handle_api_error(request: Request, exc: CrudApiError) -> JSONResponse:
    request_id = _request_id(request)
    return JSONResponse(
        status_code=exc.status_code,
        content=jsonable_encoder({**exc.to_dict(), "request_id": request_id}),
        headers={"X-Request-ID": request_id},
    )


async def handle_request_validation_error(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    error = ValidationError("Request validation failed", errors=list(exc.errors()))
    return await handle_api_error(request, error)


async def log_requests(request: Request, call_next):
    """Record start, end and duration of every request.

    The response is passed through untouched apart from the correlation
    header; exceptions are logged and re-raised as they are.
    """
    request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
    request.state.request_id = request_id

    base_ctx = {
        "request_id": request_id,
        "method": request.method,
        "path": request.url.path,
        "client_ip": request.client.host if request.client else "unknown",
    }

    start = time.perf_counter()

    with logger.contextualize(**base_ctx):
        logger.info("request.start")
        try:
            response = await call_next(request)
        except Exception as exc:
            duration_ms = (time.perf_counter() - start) * 1000
            logger.bind(
                duration_ms=round(duration_ms, 1),
                error_type=type(exc).__name__,
            ).exception("request.error")
            raise

        duration_ms = (time.perf_counter() - start) * 1000
        logger.bind(
            status_code=response.status_code,
            duration_ms=round(duration_ms, 1),
        ).info("request.end")

        response.headers.setdefault("X-Request-ID", request_id)
        return response


def create_app(dependencies: ApplicationDependencies | None = None) -> FastAPI:
    """Build the application.

    When ``dependencies`` is omitted they are composed from the current
    configuration during startup.
    """
    configure_logging()
    config = get_config()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if dependencies is None:
            app.state.app_dependencies = build_dependencies(config)
        else:
            app.state.app_dependencies = dependencies
        logger.info("Starting up application in {} environment", config.app.environment)
        try:
            yield
        finally:
            logger.info("Shutting down application")
            app.state.app_dependencies.database_service.dispose()

    app = FastAPI(
        title="Users CRUD API",
        lifespan=lifespan,
        docs_url=None if config.app.environment == "production" else "/docs",
        redoc_url=None if config.app.environment == "production" else "/redoc",
    )

    app.add_exception_handler(CrudApiError, handle_api_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    app.middleware("http")(log_requests)

    app.include_router(health.router)
    app.include_router(users.router, prefix="/users", tags=["users"])
    app.include_router(products.router, prefix="/products", tags=["products"])

    return app


if __name__ == "__main__":
    import uvicorn

    main_config = get_config()
    uvicorn.run(
        create_app(),
        host=main_config.app.host,
        port=main_config.app.port,
        access_log=False,
    )

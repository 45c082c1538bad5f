"""FastAPI dependency implementations."""

from __future__ import annotations

from fastapi import Request
from loguru import logger

from src.crud_api.api.http.app_data import ApplicationDependencies
from src.crud_api.core.exceptions import Unauthorized
from src.crud_api.core.security import verify_api_key
from src.crud_api.core.services import DbSessionService, ProductService, UserService


def get_app_dependencies(request: Request) -> ApplicationDependencies:
    """Get the dependencies composed at application startup."""
    return request.app.state.app_dependencies


def get_database_service(request: Request) -> DbSessionService:
    """Get the database session service instance."""
    return get_app_dependencies(request).database_service


def get_user_service(request: Request) -> UserService:
    """Get the User service instance."""
    return get_app_dependencies(request).user_service


def get_product_service(request: Request) -> ProductService:
    """Get the Product service instance."""
    return get_app_dependencies(request).product_service


def require_api_key(request: Request) -> None:
    """Reject the request unless it carries the pre-shared API key.

    Runs as a router-level dependency, so it is resolved before any other
    dependency of the route and before the request body is validated.
    """
    app_deps = get_app_dependencies(request)
    provided = request.headers.get(app_deps.api_key_header)
    if provided is None:
        logger.warning("Rejected request without {} header", app_deps.api_key_header)
        raise Unauthorized(f"Missing {app_deps.api_key_header} header")
    if not verify_api_key(provided, app_deps.api_key):
        logger.warning("Rejected request with invalid API key")
        raise Unauthorized("Invalid API key")

"""Explicit route tables.

Routers are assembled from a list of ``Route`` entries instead of decorators,
so the full method/path/handler mapping of a resource reads in one place.
"""

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from starlette.responses import Response


@dataclass(frozen=True)
class Route:
    method: str
    path: str
    endpoint: Callable[..., Any]
    status_code: int = 200
    response_model: Any = None
    response_class: type[Response] = JSONResponse


def build_router(routes: Sequence[Route], **router_kwargs: Any) -> APIRouter:
    """Create an ``APIRouter`` and register every route of ``routes`` on it."""
    router = APIRouter(**router_kwargs)
    for route in routes:
        router.add_api_route(
            route.path,
            route.endpoint,
            methods=[route.method],
            status_code=route.status_code,
            response_model=route.response_model,
            response_class=route.response_class,
        )
    return router

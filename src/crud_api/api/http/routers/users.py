"""User API router: create, list and fetch by id."""

from fastapi import Depends, status

from src.crud_api.api.http.deps import get_user_service, require_api_key
from src.crud_api.api.http.routing import Route, build_router
from src.crud_api.core.services import UserService
from src.crud_api.entities.core.user import User, UserCreate


def create_user(
    payload: UserCreate,
    user_service: UserService = Depends(get_user_service),
) -> User:
    """Create a new user."""
    return user_service.create(payload)


def list_users(
    user_service: UserService = Depends(get_user_service),
) -> list[User]:
    """List all users in insertion order."""
    return user_service.find_all()


def get_user(
    user_id: int,
    user_service: UserService = Depends(get_user_service),
) -> User:
    """Get a user by ID."""
    return user_service.find_one(user_id)


ROUTES = [
    Route("POST", "", create_user, status.HTTP_201_CREATED, User),
    Route("GET", "", list_users, status.HTTP_200_OK, list[User]),
    Route("GET", "/{user_id}", get_user, status.HTTP_200_OK, User),
]

router = build_router(ROUTES, dependencies=[Depends(require_api_key)])

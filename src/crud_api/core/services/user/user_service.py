from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import TypeVar

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError

from src.crud_api.core.exceptions import NotFound, PersistenceError
from src.crud_api.core.services.database.db_session import DbSessionService
from src.crud_api.entities.core.user import User, UserCreate, UserRepository

T = TypeVar("T")

# Store identifiers are signed 64-bit integers
MIN_USER_ID = -(2**63)
MAX_USER_ID = 2**63 - 1


class UserService:
    """Create and read users.

    Every public method runs exactly one repository operation inside its own
    session scope. Store failures surface as ``PersistenceError``; a missing
    user surfaces as ``NotFound``.
    """

    def __init__(self, database_service: DbSessionService):
        self._database_service = database_service

    @contextmanager
    def _repository(self, operation: str) -> Iterator[UserRepository]:
        try:
            with self._database_service.session_scope() as session:
                yield UserRepository(session)
        except SQLAlchemyError as e:
            logger.bind(operation=operation, error_type=type(e).__name__).error(
                "User store operation failed"
            )
            raise PersistenceError(operation, e) from e

    def _run(self, operation: str, action: Callable[[UserRepository], T]) -> T:
        with self._repository(operation) as repository:
            return action(repository)

    def create(self, data: UserCreate) -> User:
        user = self._run("create user", lambda repo: repo.create(data))
        logger.info("Created user {}", user.id)
        return user

    def find_all(self) -> list[User]:
        return self._run("list users", lambda repo: repo.list_all())

    def find_one(self, user_id: int) -> User:
        if not MIN_USER_ID <= user_id <= MAX_USER_ID:
            raise NotFound("User", user_id)
        user = self._run("get user", lambda repo: repo.get(user_id))
        if user is None:
            raise NotFound("User", user_id)
        return user

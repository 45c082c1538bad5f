"""Entity package: User."""

from .entity import User, UserCreate
from .repository import UserRepository
from .table import UserTable

__all__ = ["User", "UserCreate", "UserRepository", "UserTable"]

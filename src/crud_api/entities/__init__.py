"""Entities module with an entity-centric structure.

Each entity has its own package containing:
- entity.py: Domain model and request schemas
- table.py: Database persistence model
- repository.py: Data access layer
"""

from .core.user import User, UserCreate, UserRepository, UserTable

__all__ = [
    "User",
    "UserCreate",
    "UserTable",
    "UserRepository",
]

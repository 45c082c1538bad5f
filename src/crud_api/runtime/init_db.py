"""Database initialization script."""

from src.crud_api.core.services import DbManageService, DbSessionService


def init_db() -> list[str]:
    """Apply all pending migrations and return the names of those applied."""
    database_service = DbSessionService()
    try:
        return DbManageService(database_service.engine).upgrade()
    finally:
        database_service.dispose()


if __name__ == "__main__":
    init_db()

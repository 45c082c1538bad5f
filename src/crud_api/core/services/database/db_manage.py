"""Versioned schema migrations.

Applied versions are recorded in the ``migrations`` table. ``upgrade`` applies
every pending migration in version order; ``downgrade`` reverts the most
recently applied one. Each call runs inside a single transaction.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import UTC, datetime

from loguru import logger
from sqlalchemy import (
    BigInteger,
    Column,
    Connection,
    DateTime,
    Engine,
    MetaData,
    String,
    Table,
    delete,
    insert,
    select,
)
from sqlmodel import SQLModel

from src.crud_api.entities.core.user import UserTable

_migration_metadata = MetaData()

migrations_table = Table(
    "migrations",
    _migration_metadata,
    Column("version", BigInteger, primary_key=True, autoincrement=False),
    Column("name", String(255), nullable=False),
    Column("applied_at", DateTime(timezone=True), nullable=False),
)


class Migration(ABC):
    """A single reversible schema change."""

    version: int
    name: str

    @abstractmethod
    def up(self, connection: Connection) -> None: ...

    @abstractmethod
    def down(self, connection: Connection) -> None: ...


class InitialSchema(Migration):
    """Create the ``user`` table."""

    version = 1771333588923
    name = "InitialSchema1771333588923"

    def up(self, connection: Connection) -> None:
        SQLModel.metadata.tables[UserTable.__tablename__].create(connection, checkfirst=True)

    def down(self, connection: Connection) -> None:
        SQLModel.metadata.tables[UserTable.__tablename__].drop(connection, checkfirst=True)


MIGRATIONS: list[Migration] = [InitialSchema()]


class DbManageService:
    def __init__(self, engine: Engine, migrations: list[Migration] | None = None):
        self._engine = engine
        self._migrations = sorted(migrations or MIGRATIONS, key=lambda m: m.version)

    def _applied_versions(self, connection: Connection) -> list[int]:
        _migration_metadata.create_all(connection)
        rows = connection.execute(
            select(migrations_table.c.version).order_by(migrations_table.c.version)
        )
        return [row.version for row in rows]

    def upgrade(self) -> list[str]:
        """Apply all pending migrations and return their names."""
        applied: list[str] = []
        with self._engine.begin() as connection:
            done = set(self._applied_versions(connection))
            for migration in self._migrations:
                if migration.version in done:
                    continue
                logger.info("Applying migration {}", migration.name)
                migration.up(connection)
                connection.execute(
                    insert(migrations_table).values(
                        version=migration.version,
                        name=migration.name,
                        applied_at=datetime.now(UTC),
                    )
                )
                applied.append(migration.name)
        if not applied:
            logger.info("Database schema is up to date")
        return applied

    def downgrade(self) -> str | None:
        """Revert the latest applied migration; return its name, or None."""
        by_version = {m.version: m for m in self._migrations}
        with self._engine.begin() as connection:
            done = self._applied_versions(connection)
            if not done:
                logger.info("No migrations to revert")
                return None
            latest = done[-1]
            migration = by_version.get(latest)
            if migration is None:
                raise RuntimeError(f"Applied migration {latest} is not known to this build")
            logger.info("Reverting migration {}", migration.name)
            migration.down(connection)
            connection.execute(
                delete(migrations_table).where(migrations_table.c.version == latest)
            )
            return migration.name

    def status(self) -> list[tuple[str, bool]]:
        """Return ``(name, applied)`` for every known migration."""
        with self._engine.begin() as connection:
            done = set(self._applied_versions(connection))
        return [(m.name, m.version in done) for m in self._migrations]

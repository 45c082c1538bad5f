"""User database table model."""

from sqlmodel import Field, SQLModel


class UserTable(SQLModel, table=True):
    """Persistence model for users.

    Maps to the ``user`` table created by the initial schema migration.
    """

    __tablename__ = "user"

    id: int | None = Field(default=None, primary_key=True)
    name: str = Field(nullable=False)
    age: int = Field(nullable=False)

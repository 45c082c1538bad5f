"""User domain entity."""

from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr


class UserCreate(BaseModel):
    """Request body for creating a user.

    Strict types mirror the decoding contract: ``name`` must be a JSON string
    and ``age`` a JSON integer. Numeric strings, floats and booleans are
    rejected rather than coerced.
    """

    model_config = ConfigDict(extra="forbid")

    name: StrictStr = Field(min_length=1, description="User's display name")
    age: StrictInt = Field(description="User's age in years")


class User(BaseModel):
    """User entity as stored and returned by the API."""

    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: int = Field(description="Store-assigned identifier")
    name: str = Field(description="User's display name")
    age: int = Field(description="User's age in years")

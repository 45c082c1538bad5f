"""Entity: Product request schemas.

Products are not persisted; these models only validate request bodies.
"""

from pydantic import BaseModel, Field, StrictStr


class ProductCreate(BaseModel):
    """Request body for creating a product.

    ``price`` accepts numeric strings and converts them to integers.
    """

    name: StrictStr = Field(description="Product name")
    price: int = Field(description="Price in MMK")


class ProductUpdate(BaseModel):
    """Partial update of a product; omitted fields stay unchanged."""

    name: StrictStr | None = Field(default=None, description="Product name")
    price: int | None = Field(default=None, description="Price in MMK")

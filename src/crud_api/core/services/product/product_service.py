from src.crud_api.entities.service.product import ProductCreate, ProductUpdate


class ProductService:
    """Placeholder product operations; nothing is persisted."""

    def create(self, data: ProductCreate) -> str:
        return f"Created {data.name} with {data.price} MMK."

    def find_all(self) -> str:
        return "This action returns all products"

    def find_one(self, product_id: int) -> str:
        return f"This action returns a #{product_id} product"

    def update(self, product_id: int, data: ProductUpdate) -> str:
        name = data.name if data.name is not None else "unchanged"
        price = data.price if data.price is not None else "unchanged"
        return f"update product of #{product_id} to Name: {name} and Price: {price}"

    def remove(self, product_id: int) -> str:
        return f"This action removes a #{product_id} product"

from dataclasses import dataclass

from src.crud_api.core.services import (
    DbSessionService,
    ProductService,
    UserService,
)


@dataclass
class ApplicationDependencies:
    database_service: DbSessionService
    user_service: UserService
    product_service: ProductService
    api_key: str
    api_key_header: str = "X-Api-Key"

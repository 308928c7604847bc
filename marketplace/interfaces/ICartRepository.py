from abc import ABC, abstractmethod
from typing import Optional

from marketplace.interfaces.results import RepositoryResult

class ICartRepository(ABC):
    @abstractmethod
    async def read_cart_items(self, owner_id: str) -> RepositoryResult:
        """Joined read, newest first; data is a list of CartItemView."""
        pass

    @abstractmethod
    async def delete_cart_items(self, owner_id: str) -> RepositoryResult:
        pass

    @abstractmethod
    async def find_item(self, owner_id: str, product_id: str) -> RepositoryResult:
        """data is the CartItemView or None when the product is not in the cart."""
        pass

    @abstractmethod
    async def insert_item(self, item_id: str, owner_id: str, product_id: str, quantity: int) -> RepositoryResult:
        pass

    @abstractmethod
    async def update_quantity(self, item_id: str, quantity: int) -> RepositoryResult:
        pass

    @abstractmethod
    async def delete_item(self, item_id: str, owner_id: Optional[str] = None) -> RepositoryResult:
        pass

    @abstractmethod
    async def get_product(self, product_id: str) -> RepositoryResult:
        """data is the ProductInfo or None for unknown or inactive products."""
        pass

    @abstractmethod
    async def list_products(self, search: Optional[str] = None, category_id: Optional[str] = None) -> RepositoryResult:
        """Active products only; data is a list of CatalogProduct."""
        pass

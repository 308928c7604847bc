from abc import ABC, abstractmethod

from marketplace.domain.schemas import OrderRecord
from marketplace.interfaces.results import RepositoryResult

class IOrderRepository(ABC):
    @abstractmethod
    async def create_order(self, record: OrderRecord) -> RepositoryResult:
        """Insert-and-return; data is the stored OrderRecord."""
        pass

    @abstractmethod
    async def list_orders(self, user_id: str) -> RepositoryResult:
        pass

    @abstractmethod
    async def delete_order(self, order_id: str, user_id: str) -> RepositoryResult:
        pass

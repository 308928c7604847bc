from abc import ABC, abstractmethod

from marketplace.domain.schemas import QuoteRecord
from marketplace.interfaces.results import RepositoryResult

class IQuoteRepository(ABC):
    @abstractmethod
    async def create_quote(self, record: QuoteRecord) -> RepositoryResult:
        pass

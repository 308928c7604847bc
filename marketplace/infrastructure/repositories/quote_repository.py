import logging

from marketplace.interfaces.IQuoteRepository import IQuoteRepository
from marketplace.interfaces.results import RepositoryResult
from marketplace.domain.models import QuoteRequest
from marketplace.domain.schemas import ChangeEvent, QuoteRecord
from marketplace.infrastructure.repositories.base import SqlAlchemyRepository

logger = logging.getLogger(__name__)

class SqlAlchemyQuoteRepository(SqlAlchemyRepository, IQuoteRepository):

    async def create_quote(self, record: QuoteRecord) -> RepositoryResult:
        result = await self._run(self._insert, record)
        if result.ok:
            logger.info(f"✅ Quote {record.id} stored for product {record.product_id}")
            self._publish(ChangeEvent(event_type="INSERT", table="quote_requests", new=record.model_dump(mode="json")))
        return result

    @staticmethod
    def _insert(session, record: QuoteRecord) -> QuoteRecord:
        data = record.model_dump()
        data["urgency"] = record.urgency.value
        session.add(QuoteRequest(**data))
        session.flush()
        return record

import logging
from datetime import datetime
from typing import Callable, Optional

from marketplace.core.clock import default_clock
from marketplace.domain.errors import (
    AuthenticationError,
    CartOperationError,
    NotFoundError,
    OrderValidationError,
    describe_backend_error,
)
from marketplace.domain.schemas import QuoteRecord, QuoteRequestDraft, UserContext
from marketplace.domain.validators import validate_quote_request
from marketplace.interfaces.ICartRepository import ICartRepository
from marketplace.interfaces.IQuoteRepository import IQuoteRepository

logger = logging.getLogger(__name__)


class QuoteService:
    """Single-product quote requests sent straight to the product's supplier."""

    def __init__(self, quote_repo: IQuoteRepository, catalog: ICartRepository,
                 clock: Optional[Callable[[], datetime]] = None):
        self.quote_repo = quote_repo
        self.catalog = catalog
        self.clock = clock or default_clock

    async def request_quote(self, user: UserContext, request: QuoteRequestDraft) -> QuoteRecord:
        if user is None or not user.id:
            raise AuthenticationError("Please log in to request a quote")

        errors = validate_quote_request(request)
        if errors:
            raise OrderValidationError(errors)

        product = await self.catalog.get_product(request.product_id)
        if product.error is not None:
            raise CartOperationError(describe_backend_error(product.error, "submit quote request"))
        if product.data is None:
            raise NotFoundError("Product not found")

        now = self.clock()
        unit_price = product.data.price or 0
        record = QuoteRecord(
            id=f"quote_{user.id}_{request.product_id}_{int(now.timestamp() * 1000)}",
            buyer_id=user.id,
            product_id=request.product_id,
            product_name=product.data.name or "Unknown Product",
            supplier_id=product.data.supplier_id,
            quantity=request.quantity,
            urgency=request.urgency,
            notes=request.notes.strip(),
            delivery_address=request.delivery_address.strip(),
            contact_person=request.contact_person.strip(),
            phone=request.phone.strip(),
            unit_price=unit_price,
            total_price=unit_price * request.quantity,
            created_at=now,
        )

        result = await self.quote_repo.create_quote(record)
        if result.error is not None:
            logger.error(f"❌ Quote request failed for {user.id}: {result.error.message}")
            raise CartOperationError(describe_backend_error(result.error, "submit quote request"))
        return record

import asyncio
import logging
import random
import string
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Dict, List, Optional

from marketplace.core.clock import default_clock
from marketplace.core.config import settings
from marketplace.domain.errors import (
    AuthenticationError,
    CartClearError,
    OrderCreateError,
    OrderValidationError,
)
from marketplace.domain.grouping import SupplierBucket, group_by_supplier
from marketplace.domain.pricing import OrderTotals, calculate_totals
from marketplace.domain.schemas import (
    CartItemView,
    OrderDraft,
    OrderItemSnapshot,
    OrderRecord,
    OrderStatus,
    Urgency,
    UserContext,
)
from marketplace.domain.validators import validate_order_details
from marketplace.infrastructure.draft_store import (
    STATE_CLEARING_CART,
    STATE_CREATING_ORDERS,
    STATE_IDLE,
    STATE_SUCCESS,
    STATE_VALIDATING,
    CheckoutDraftStore,
)
from marketplace.interfaces.ICartRepository import ICartRepository
from marketplace.interfaces.IOrderRepository import IOrderRepository

logger = logging.getLogger(__name__)


def lead_time_for(urgency: Urgency) -> timedelta:
    if urgency == Urgency.EMERGENCY:
        return timedelta(hours=settings.LEAD_TIME_HOURS_EMERGENCY)
    if urgency == Urgency.URGENT:
        return timedelta(hours=settings.LEAD_TIME_HOURS_URGENT)
    return timedelta(hours=settings.LEAD_TIME_HOURS_STANDARD)


@dataclass
class SubmissionResult:
    orders: List[OrderRecord]
    totals: OrderTotals


class OrderSubmissionOrchestrator:
    """
    Turns a buyer's cart into one order per supplier, then clears the cart.

    The order creates and the cart clear are independent backend writes with
    no transaction around them: a failed create does not undo the creates that
    succeeded, and a failed clear leaves the placed orders in place.
    """

    def __init__(self, order_repo: IOrderRepository, cart_repo: ICartRepository,
                 draft_store: CheckoutDraftStore, clock: Optional[Callable[[], datetime]] = None):
        self.order_repo = order_repo
        self.cart_repo = cart_repo
        self.draft_store = draft_store
        self.clock = clock or default_clock

    async def submit(self, user: UserContext, cart_items: List[CartItemView], draft: OrderDraft) -> SubmissionResult:
        if user is None or not user.id:
            raise AuthenticationError()
        user_id = user.id

        # 1. VALIDATE (no network)
        self.draft_store.set_state(user_id, STATE_VALIDATING)
        errors = validate_order_details(draft)
        if not cart_items:
            errors.append("Your cart is empty")
        if errors:
            logger.info(f"Checkout rejected for {user_id}: {len(errors)} validation error(s)")
            self._fail(user_id, draft)
            raise OrderValidationError(errors)

        # 2. ONE ORDER PER SUPPLIER, ALL IN FLIGHT AT ONCE
        self.draft_store.set_state(user_id, STATE_CREATING_ORDERS)
        buckets = group_by_supplier(cart_items)
        now = self.clock()
        records = [self._build_order(user_id, bucket, draft, now) for bucket in buckets.values()]
        logger.info(f"⏳ Creating {len(records)} order(s) for {user_id}")

        results = await asyncio.gather(
            *(self.order_repo.create_order(record) for record in records),
            return_exceptions=True,
        )

        created: List[OrderRecord] = []
        failures: Dict[str, str] = {}
        for record, result in zip(records, results):
            # CancelledError is a BaseException, not an Exception
            if isinstance(result, BaseException):
                failures[record.supplier_id] = str(result) or type(result).__name__
            elif result.error is not None:
                failures[record.supplier_id] = result.error.message
            else:
                created.append(result.data or record)

        if failures:
            logger.error(f"❌ {len(failures)} of {len(records)} order create(s) failed for {user_id}: {failures}")
            self._fail(user_id, draft)
            raise OrderCreateError(failures, created_orders=created)

        # 3. CLEAR CART, strictly after every create succeeded
        self.draft_store.set_state(user_id, STATE_CLEARING_CART)
        cleared = await self.cart_repo.delete_cart_items(user_id)
        if cleared.error is not None:
            logger.error(f"❌ Orders placed but cart clear failed for {user_id}: {cleared.error.message}")
            self._fail(user_id, draft)
            raise CartClearError(created, cleared.error.message)

        self.draft_store.discard_draft(user_id)
        self.draft_store.set_state(user_id, STATE_SUCCESS)
        logger.info(f"✅ Checkout complete for {user_id}: {[o.order_number for o in created]}")
        return SubmissionResult(orders=created, totals=calculate_totals(cart_items))

    def _fail(self, user_id: str, draft: OrderDraft):
        # Keep the form so the buyer can retry without retyping it
        self.draft_store.save_draft(user_id, draft)
        self.draft_store.set_state(user_id, STATE_IDLE)

    def _build_order(self, user_id: str, bucket: SupplierBucket, draft: OrderDraft, now: datetime) -> OrderRecord:
        totals = calculate_totals(bucket.items)
        stamp = int(now.timestamp() * 1000)
        items = [
            OrderItemSnapshot(
                product_id=item.product_id,
                product_name=(item.product.name if item.product else None) or "Unknown Product",
                price=item.unit_price,
                quantity=item.quantity,
                image=item.product.image if item.product else None,
            )
            for item in bucket.items
        ]
        return OrderRecord(
            id=f"order_{user_id}_{stamp}_{bucket.supplier_id}",
            order_number=f"ORD-{stamp}-{_random_suffix()}",
            user_id=user_id,
            supplier_id=bucket.supplier_id,
            supplier_name=bucket.supplier_name,
            items=items,
            total_amount=totals.total,
            shipping_cost=totals.delivery_fee,
            status=OrderStatus.PENDING,
            urgency=draft.urgency,
            shipping_address=draft.delivery_address.strip(),
            contact_person=draft.contact_person.strip(),
            phone=draft.phone.strip(),
            notes=draft.notes.strip(),
            payment_terms=draft.payment_terms,
            expected_delivery=now + lead_time_for(draft.urgency),
            created_at=now,
            updated_at=now,
        )


def _random_suffix(length: int = 9) -> str:
    return "".join(random.choices(string.ascii_lowercase + string.digits, k=length))

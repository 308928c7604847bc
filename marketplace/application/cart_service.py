import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, List, Optional

from marketplace.core.clock import default_clock
from marketplace.domain.errors import AuthenticationError, CartOperationError, NotFoundError, describe_backend_error
from marketplace.domain.pricing import OrderTotals, calculate_totals
from marketplace.domain.reducers import apply_quantity_change, revert_quantity_change
from marketplace.domain.schemas import CartItemView, CatalogProduct, UserContext
from marketplace.interfaces.ICartRepository import ICartRepository

logger = logging.getLogger(__name__)


@dataclass
class CartUpdate:
    """Cart as the buyer should now see it; ``error`` is set when the write was reverted."""
    items: List[CartItemView]
    error: Optional[str] = None


def _require_user(user: Optional[UserContext]) -> str:
    if user is None or not user.id:
        raise AuthenticationError("Please log in to manage your cart")
    return user.id


class CartService:
    def __init__(self, cart_repo: ICartRepository, clock: Optional[Callable[[], datetime]] = None):
        self.cart_repo = cart_repo
        self.clock = clock or default_clock

    async def load_cart(self, user: UserContext) -> List[CartItemView]:
        user_id = _require_user(user)
        result = await self.cart_repo.read_cart_items(user_id)
        if result.error is not None:
            raise CartOperationError(describe_backend_error(result.error, "load cart"))
        return result.data or []

    async def browse_catalog(self, search: Optional[str] = None,
                             category_id: Optional[str] = None) -> List[CatalogProduct]:
        result = await self.cart_repo.list_products(search, category_id)
        if result.error is not None:
            raise CartOperationError(describe_backend_error(result.error, "load products"))
        return result.data or []

    @staticmethod
    def summarize(items: List[CartItemView]) -> OrderTotals:
        return calculate_totals(items)

    async def add_to_cart(self, user: UserContext, product_id: str, quantity: int = 1) -> CartItemView:
        """Adds a product, or bumps the quantity of the row already holding it."""
        user_id = _require_user(user)
        if quantity < 1:
            raise CartOperationError("Quantity must be at least 1")

        product = await self.cart_repo.get_product(product_id)
        if product.error is not None:
            raise CartOperationError(describe_backend_error(product.error, "add to cart"))
        if product.data is None:
            raise NotFoundError("Product not found")

        existing = await self.cart_repo.find_item(user_id, product_id)
        if existing.error is not None:
            raise CartOperationError(describe_backend_error(existing.error, "add to cart"))

        if existing.data is not None:
            result = await self.cart_repo.update_quantity(existing.data.id, existing.data.quantity + quantity)
        else:
            stamp = int(self.clock().timestamp() * 1000)
            item_id = f"cart_{user_id}_{product_id}_{stamp}"
            result = await self.cart_repo.insert_item(item_id, user_id, product_id, quantity)

        if result.error is not None:
            logger.error(f"❌ Add to cart failed for {user_id}/{product_id}: {result.error.message}")
            raise CartOperationError(describe_backend_error(result.error, "add to cart"))
        return result.data

    async def change_quantity(self, user: UserContext, items: List[CartItemView],
                              item_id: str, quantity: int) -> CartUpdate:
        """
        Optimistic quantity change over the buyer's current cart list. The new
        quantity is applied locally first; when the backend write fails the
        previous quantity is restored and the error is reported alongside.
        """
        _require_user(user)
        current = next((item for item in items if item.id == item_id), None)
        if current is None:
            raise NotFoundError("Cart item not found")
        if quantity < 1:
            return CartUpdate(items=list(items))

        optimistic = apply_quantity_change(items, item_id, quantity)
        result = await self.cart_repo.update_quantity(item_id, quantity)
        if result.error is not None or result.data is None:
            reason = describe_backend_error(result.error, "update quantity") if result.error else "Cart item not found"
            logger.warning(f"⚠️ Reverting quantity change on {item_id}: {reason}")
            return CartUpdate(items=revert_quantity_change(optimistic, item_id, current.quantity), error=reason)
        return CartUpdate(items=optimistic)

    async def remove_item(self, user: UserContext, item_id: str):
        user_id = _require_user(user)
        result = await self.cart_repo.delete_item(item_id, user_id)
        if result.error is not None:
            raise CartOperationError(describe_backend_error(result.error, "remove item"))
        if not result.data:
            raise NotFoundError("Cart item not found")

from typing import List

from marketplace.domain.errors import AuthenticationError, CartOperationError, NotFoundError, describe_backend_error
from marketplace.domain.schemas import DashboardSummary, OrderRecord, OrderStatus, UserContext
from marketplace.interfaces.IOrderRepository import IOrderRepository


def summarize_orders(orders: List[OrderRecord]) -> DashboardSummary:
    delivered = [o for o in orders if o.status == OrderStatus.DELIVERED]
    return DashboardSummary(
        total_orders=len(orders),
        pending_orders=sum(1 for o in orders if o.status == OrderStatus.PENDING),
        delivered_orders=len(delivered),
        total_spent=sum((o.total_amount for o in delivered), 0),
    )


class BuyerDashboard:
    def __init__(self, order_repo: IOrderRepository):
        self.order_repo = order_repo

    async def list_orders(self, user: UserContext) -> List[OrderRecord]:
        if user is None or not user.id:
            raise AuthenticationError("Please log in to view your orders")
        result = await self.order_repo.list_orders(user.id)
        if result.error is not None:
            raise CartOperationError(describe_backend_error(result.error, "load orders"))
        return result.data or []

    async def delete_order(self, user: UserContext, order_id: str):
        """Explicit buyer-initiated delete of an order that already exists."""
        if user is None or not user.id:
            raise AuthenticationError("Please log in to manage your orders")
        result = await self.order_repo.delete_order(order_id, user.id)
        if result.error is not None:
            raise CartOperationError(describe_backend_error(result.error, "delete order"))
        if not result.data:
            raise NotFoundError("Order not found")

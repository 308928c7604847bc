from dataclasses import dataclass
from typing import Iterable

from marketplace.core.config import settings
from marketplace.domain.schemas import CartItemView


@dataclass(frozen=True)
class OrderTotals:
    subtotal: float
    delivery_fee: float
    total: float


def calculate_totals(
    items: Iterable[CartItemView],
    free_delivery_threshold: float | None = None,
    delivery_fee: float | None = None,
) -> OrderTotals:
    """
    Subtotal over price x quantity, then the flat delivery fee unless the
    subtotal is strictly above the free-delivery threshold.
    Items without a joined price count as 0.
    """
    threshold = settings.FREE_DELIVERY_THRESHOLD if free_delivery_threshold is None else free_delivery_threshold
    flat_fee = settings.DELIVERY_FEE if delivery_fee is None else delivery_fee

    subtotal = sum((item.unit_price * item.quantity for item in items), 0)
    fee = 0 if subtotal > threshold else flat_fee
    return OrderTotals(subtotal=subtotal, delivery_fee=fee, total=subtotal + fee)

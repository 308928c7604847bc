from dataclasses import dataclass, field
from typing import Dict, Iterable, List

from marketplace.domain.schemas import CartItemView

UNKNOWN_SUPPLIER_KEY = "unknown"
UNKNOWN_SUPPLIER_NAME = "Unknown Supplier"


@dataclass
class SupplierBucket:
    supplier_id: str
    supplier_name: str
    items: List[CartItemView] = field(default_factory=list)


def group_by_supplier(items: Iterable[CartItemView]) -> Dict[str, SupplierBucket]:
    """
    Partition cart items per supplier. Supplier order follows first
    appearance and item order is kept inside each bucket. Items without a
    supplier land in the "unknown" bucket instead of being dropped.
    """
    buckets: Dict[str, SupplierBucket] = {}
    named = set()

    for item in items:
        product = item.product
        supplier_id = (product.supplier_id if product else None) or UNKNOWN_SUPPLIER_KEY
        supplier_name = product.supplier_name if product else None

        bucket = buckets.get(supplier_id)
        if bucket is None:
            fallback = supplier_id if supplier_id != UNKNOWN_SUPPLIER_KEY else UNKNOWN_SUPPLIER_NAME
            bucket = SupplierBucket(supplier_id=supplier_id, supplier_name=fallback)
            buckets[supplier_id] = bucket

        # First item that actually carries a display name wins
        if supplier_name and supplier_id not in named:
            bucket.supplier_name = supplier_name
            named.add(supplier_id)

        bucket.items.append(item)

    return buckets

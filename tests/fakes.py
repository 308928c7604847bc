"""In-memory stand-ins for the backend collaborator, with switchable failures."""
import asyncio
from datetime import datetime, timezone

from marketplace.domain.schemas import CartItemView, CatalogProduct, OrderDraft, ProductInfo
from marketplace.interfaces.ICartRepository import ICartRepository
from marketplace.interfaces.IOrderRepository import IOrderRepository
from marketplace.interfaces.IQuoteRepository import IQuoteRepository
from marketplace.interfaces.results import RepositoryResult


def build_item(item_id, supplier_id="S1", price=1000, quantity=1, user_id="buyer-1",
               supplier_name=None, name=None):
    return CartItemView(
        id=item_id,
        user_id=user_id,
        product_id=f"prod-{item_id}",
        quantity=quantity,
        product=ProductInfo(
            name=name or f"Product {item_id}",
            price=price,
            image=f"/img/{item_id}.png",
            supplier_id=supplier_id,
            supplier_name=supplier_name,
            category_id="cat-1",
        ),
    )


def build_draft(**overrides):
    values = {
        "contact_person": "Ada Obi",
        "phone": "+234 801 234 5678",
        "delivery_address": "12 Marina Road, Lagos Island",
        "notes": "Gate 3",
    }
    values.update(overrides)
    return OrderDraft(**values)


class FakeCartRepository(ICartRepository):
    def __init__(self, items=None, products=None):
        self.items = {item.id: item for item in (items or [])}
        self.products = dict(products or {})
        self.fail_delete_all = False
        self.fail_update = False
        self.fail_read = False
        self.delete_all_calls = []

    async def read_cart_items(self, owner_id):
        if self.fail_read:
            return RepositoryResult.failure("connection reset", code="42P01")
        return RepositoryResult.success([i for i in self.items.values() if i.user_id == owner_id])

    async def delete_cart_items(self, owner_id):
        self.delete_all_calls.append(owner_id)
        if self.fail_delete_all:
            return RepositoryResult.failure("permission denied for table cart_items", code="42501")
        removed = [i.id for i in self.items.values() if i.user_id == owner_id]
        for item_id in removed:
            del self.items[item_id]
        return RepositoryResult.success(removed)

    async def find_item(self, owner_id, product_id):
        found = next(
            (i for i in self.items.values() if i.user_id == owner_id and i.product_id == product_id), None
        )
        return RepositoryResult.success(found)

    async def insert_item(self, item_id, owner_id, product_id, quantity):
        product = self.products.get(product_id)
        item = CartItemView(id=item_id, user_id=owner_id, product_id=product_id, quantity=quantity,
                            created_at=datetime.now(timezone.utc), product=product)
        self.items[item_id] = item
        return RepositoryResult.success(item)

    async def update_quantity(self, item_id, quantity):
        if self.fail_update:
            return RepositoryResult.failure("network error")
        item = self.items.get(item_id)
        if item is None:
            return RepositoryResult.success(None)
        self.items[item_id] = item.model_copy(update={"quantity": quantity})
        return RepositoryResult.success(self.items[item_id])

    async def delete_item(self, item_id, owner_id=None):
        item = self.items.get(item_id)
        if item is None or (owner_id and item.user_id != owner_id):
            return RepositoryResult.success(False)
        del self.items[item_id]
        return RepositoryResult.success(True)

    async def get_product(self, product_id):
        return RepositoryResult.success(self.products.get(product_id))

    async def list_products(self, search=None, category_id=None):
        needle = (search or "").strip().lower()
        listed = []
        for product_id, info in self.products.items():
            if category_id and category_id != "all" and info.category_id != category_id:
                continue
            haystack = [info.name, info.supplier_name]
            if needle and not any(needle in (text or "").lower() for text in haystack):
                continue
            listed.append(CatalogProduct(id=product_id, **info.model_dump()))
        return RepositoryResult.success(listed)


class FakeOrderRepository(IOrderRepository):
    def __init__(self, failing_suppliers=(), raising_suppliers=(), cancelled_suppliers=()):
        self.failing_suppliers = set(failing_suppliers)
        self.raising_suppliers = set(raising_suppliers)
        self.cancelled_suppliers = set(cancelled_suppliers)
        self.fail_list = False
        self.create_calls = []
        self.stored = []

    async def create_order(self, record):
        self.create_calls.append(record)
        if record.supplier_id in self.raising_suppliers:
            raise ConnectionError("socket closed")
        if record.supplier_id in self.cancelled_suppliers:
            raise asyncio.CancelledError()
        if record.supplier_id in self.failing_suppliers:
            return RepositoryResult.failure("new row violates row-level security policy", code="42501")
        self.stored.append(record)
        return RepositoryResult.success(record)

    async def list_orders(self, user_id):
        if self.fail_list:
            return RepositoryResult.failure("relation \"orders\" does not exist")
        orders = [o for o in self.stored if o.user_id == user_id]
        return RepositoryResult.success(sorted(orders, key=lambda o: o.created_at, reverse=True))

    async def delete_order(self, order_id, user_id):
        before = len(self.stored)
        self.stored = [o for o in self.stored if not (o.id == order_id and o.user_id == user_id)]
        return RepositoryResult.success(len(self.stored) < before)


class GatedOrderRepository(FakeOrderRepository):
    """Holds every create until `expected` of them are waiting at the same time."""

    def __init__(self, expected):
        super().__init__()
        self.expected = expected
        self.in_flight = 0
        self.peak = 0
        self.all_started = None

    async def create_order(self, record):
        if self.all_started is None:
            self.all_started = asyncio.Event()
        self.in_flight += 1
        self.peak = max(self.peak, self.in_flight)
        if self.in_flight == self.expected:
            self.all_started.set()
        try:
            await asyncio.wait_for(self.all_started.wait(), timeout=1)
        finally:
            self.in_flight -= 1
        return await super().create_order(record)


class FakeQuoteRepository(IQuoteRepository):
    def __init__(self, fail=False):
        self.fail = fail
        self.stored = []

    async def create_quote(self, record):
        if self.fail:
            return RepositoryResult.failure("duplicate key value", code="23505")
        self.stored.append(record)
        return RepositoryResult.success(record)

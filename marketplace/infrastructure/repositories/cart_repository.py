import logging
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import desc, func, or_
from marketplace.interfaces.ICartRepository import ICartRepository
from marketplace.interfaces.results import RepositoryResult
from marketplace.domain.models import CartItem, Product
from marketplace.domain.schemas import CartItemView, CatalogProduct, ChangeEvent, ProductInfo
from marketplace.infrastructure.repositories.base import SqlAlchemyRepository

logger = logging.getLogger(__name__)

TABLE = "cart_items"

def product_to_info(product: Optional[Product]) -> Optional[ProductInfo]:
    if product is None:
        return None
    return ProductInfo(
        name=product.name,
        price=product.price,
        image=product.image,
        supplier_id=product.supplier_id,
        supplier_name=product.supplier_name,
        category_id=product.category_id,
    )

def cart_item_to_view(row: CartItem) -> CartItemView:
    return CartItemView(
        id=row.id,
        user_id=row.user_id,
        product_id=row.product_id,
        quantity=row.quantity,
        created_at=row.created_at,
        updated_at=row.updated_at,
        product=product_to_info(row.product),
    )

class SqlAlchemyCartRepository(SqlAlchemyRepository, ICartRepository):

    async def read_cart_items(self, owner_id: str) -> RepositoryResult:
        return await self._run(self._select_for_user, owner_id)

    async def delete_cart_items(self, owner_id: str) -> RepositoryResult:
        result = await self._run(self._delete_for_user, owner_id)
        if result.ok:
            logger.info(f"🧹 Cleared {len(result.data)} cart row(s) for {owner_id}")
            for item_id in result.data:
                self._publish(ChangeEvent(event_type="DELETE", table=TABLE, old={"id": item_id, "user_id": owner_id}))
        return result

    async def find_item(self, owner_id: str, product_id: str) -> RepositoryResult:
        return await self._run(self._select_one, owner_id, product_id)

    async def insert_item(self, item_id: str, owner_id: str, product_id: str, quantity: int) -> RepositoryResult:
        result = await self._run(self._insert, item_id, owner_id, product_id, quantity)
        if result.ok:
            self._publish(ChangeEvent(event_type="INSERT", table=TABLE, new=result.data.model_dump(mode="json")))
        return result

    async def update_quantity(self, item_id: str, quantity: int) -> RepositoryResult:
        result = await self._run(self._update_quantity, item_id, quantity)
        if result.ok and result.data is not None:
            self._publish(ChangeEvent(event_type="UPDATE", table=TABLE, new=result.data.model_dump(mode="json")))
        return result

    async def delete_item(self, item_id: str, owner_id: Optional[str] = None) -> RepositoryResult:
        result = await self._run(self._delete_one, item_id, owner_id)
        if result.ok and result.data:
            self._publish(ChangeEvent(event_type="DELETE", table=TABLE, old={"id": item_id, "user_id": owner_id}))
        return result

    async def get_product(self, product_id: str) -> RepositoryResult:
        return await self._run(self._select_product, product_id)

    async def list_products(self, search: Optional[str] = None, category_id: Optional[str] = None) -> RepositoryResult:
        return await self._run(self._select_catalog, search, category_id)

    # ---------------------------------------------------------
    # SESSION OPERATIONS (run in a worker thread)
    # ---------------------------------------------------------

    @staticmethod
    def _select_for_user(session, owner_id: str) -> List[CartItemView]:
        rows = (
            session.query(CartItem)
            .filter(CartItem.user_id == owner_id)
            .order_by(desc(CartItem.created_at), desc(CartItem.id))
            .all()
        )
        return [cart_item_to_view(row) for row in rows]

    @staticmethod
    def _delete_for_user(session, owner_id: str) -> List[str]:
        ids = [row.id for row in session.query(CartItem.id).filter(CartItem.user_id == owner_id).all()]
        session.query(CartItem).filter(CartItem.user_id == owner_id).delete(synchronize_session=False)
        return ids

    @staticmethod
    def _select_one(session, owner_id: str, product_id: str) -> Optional[CartItemView]:
        row = (
            session.query(CartItem)
            .filter(CartItem.user_id == owner_id, CartItem.product_id == product_id)
            .first()
        )
        return cart_item_to_view(row) if row else None

    @staticmethod
    def _insert(session, item_id: str, owner_id: str, product_id: str, quantity: int) -> CartItemView:
        now = datetime.now(timezone.utc)
        row = CartItem(
            id=item_id,
            user_id=owner_id,
            product_id=product_id,
            quantity=quantity,
            created_at=now,
            updated_at=now,
        )
        session.add(row)
        session.flush()
        session.refresh(row)
        return cart_item_to_view(row)

    @staticmethod
    def _update_quantity(session, item_id: str, quantity: int) -> Optional[CartItemView]:
        row = session.query(CartItem).filter(CartItem.id == item_id).first()
        if row is None:
            return None
        row.quantity = quantity
        row.updated_at = datetime.now(timezone.utc)
        session.flush()
        return cart_item_to_view(row)

    @staticmethod
    def _delete_one(session, item_id: str, owner_id: Optional[str]) -> bool:
        q = session.query(CartItem).filter(CartItem.id == item_id)
        if owner_id:
            q = q.filter(CartItem.user_id == owner_id)
        return q.delete(synchronize_session=False) > 0

    @staticmethod
    def _select_product(session, product_id: str) -> Optional[ProductInfo]:
        product = (
            session.query(Product)
            .filter(Product.id == product_id, Product.status == "active")
            .first()
        )
        return product_to_info(product)

    @staticmethod
    def _select_catalog(session, search: Optional[str], category_id: Optional[str]) -> List[CatalogProduct]:
        q = session.query(Product).filter(Product.status == "active")
        if category_id and category_id != "all":
            q = q.filter(Product.category_id == category_id)
        if search and search.strip():
            pattern = f"%{search.strip().lower()}%"
            q = q.filter(or_(
                func.lower(Product.name).like(pattern),
                func.lower(Product.supplier_name).like(pattern),
                func.lower(Product.description).like(pattern),
            ))
        return [
            CatalogProduct(id=product.id, description=product.description,
                           **product_to_info(product).model_dump())
            for product in q.order_by(Product.name, Product.id).all()
        ]

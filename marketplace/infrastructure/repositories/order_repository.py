import logging
from typing import List

from sqlalchemy import desc
from marketplace.interfaces.IOrderRepository import IOrderRepository
from marketplace.interfaces.results import RepositoryResult
from marketplace.domain.models import Order
from marketplace.domain.schemas import ChangeEvent, OrderRecord
from marketplace.infrastructure.repositories.base import SqlAlchemyRepository

logger = logging.getLogger(__name__)

TABLE = "orders"

def order_to_record(row: Order) -> OrderRecord:
    return OrderRecord(
        id=row.id,
        order_number=row.order_number,
        user_id=row.user_id,
        supplier_id=row.supplier_id,
        supplier_name=row.supplier_name,
        items=row.items or [],
        total_amount=row.total_amount,
        shipping_cost=row.shipping_cost,
        status=row.status,
        urgency=row.urgency,
        shipping_address=row.shipping_address,
        contact_person=row.contact_person,
        phone=row.phone,
        notes=row.notes or "",
        payment_terms=row.payment_terms,
        expected_delivery=row.expected_delivery,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )

class SqlAlchemyOrderRepository(SqlAlchemyRepository, IOrderRepository):

    async def create_order(self, record: OrderRecord) -> RepositoryResult:
        result = await self._run(self._insert, record)
        if result.ok:
            logger.info(f"✅ Order {record.order_number} stored for supplier {record.supplier_id}")
            self._publish(ChangeEvent(event_type="INSERT", table=TABLE, new=record.model_dump(mode="json")))
        return result

    async def list_orders(self, user_id: str) -> RepositoryResult:
        """Orders of one buyer, newest first."""
        return await self._run(self._select_for_user, user_id)

    async def delete_order(self, order_id: str, user_id: str) -> RepositoryResult:
        result = await self._run(self._delete, order_id, user_id)
        if result.ok and result.data:
            self._publish(ChangeEvent(event_type="DELETE", table=TABLE, old={"id": order_id, "user_id": user_id}))
        return result

    @staticmethod
    def _insert(session, record: OrderRecord) -> OrderRecord:
        data = record.model_dump()
        # JSON column: store plain dicts, enums as their values
        data["items"] = [item.model_dump(mode="json") for item in record.items]
        data["status"] = record.status.value
        data["urgency"] = record.urgency.value
        data["payment_terms"] = record.payment_terms.value
        session.add(Order(**data))
        session.flush()
        return record

    @staticmethod
    def _select_for_user(session, user_id: str) -> List[OrderRecord]:
        rows = (
            session.query(Order)
            .filter(Order.user_id == user_id)
            .order_by(desc(Order.created_at))
            .all()
        )
        return [order_to_record(row) for row in rows]

    @staticmethod
    def _delete(session, order_id: str, user_id: str) -> bool:
        deleted = (
            session.query(Order)
            .filter(Order.id == order_id, Order.user_id == user_id)
            .delete(synchronize_session=False)
        )
        return deleted > 0

"""
Pydantic shapes passed between the HTTP layer, the application services and
the repositories. The ORM rows in ``models.py`` never leave the repositories.
"""
import enum
from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field


class Urgency(str, enum.Enum):
    STANDARD = "standard"
    URGENT = "urgent"
    EMERGENCY = "emergency"


class PaymentTerms(str, enum.Enum):
    NET30 = "net30"
    NET15 = "net15"
    POD = "pod"
    ADVANCE = "advance"


class OrderStatus(str, enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class UserType(str, enum.Enum):
    BUYER = "buyer"
    SUPPLIER = "supplier"
    ADMIN = "admin"


class UserContext(BaseModel):
    """Authenticated user as handed over by the session collaborator."""
    id: Optional[str] = None
    email: Optional[str] = None
    user_type: Optional[str] = None


# ---------------------------------------------------------
# CART
# ---------------------------------------------------------

class ProductInfo(BaseModel):
    """Product columns joined onto a cart row."""
    name: Optional[str] = None
    price: Optional[float] = None
    image: Optional[str] = None
    supplier_id: Optional[str] = None
    supplier_name: Optional[str] = None
    category_id: Optional[str] = None


class CatalogProduct(ProductInfo):
    """An active product as listed in the buyer catalogue."""
    id: str
    description: Optional[str] = None


class CartItemView(BaseModel):
    id: str
    user_id: str
    product_id: str
    quantity: int = Field(1, ge=1)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    product: Optional[ProductInfo] = None

    @property
    def unit_price(self) -> float:
        if self.product is None or self.product.price is None:
            return 0
        return self.product.price


class AddToCartRequest(BaseModel):
    product_id: str
    quantity: int = Field(1, ge=1)


class QuantityUpdate(BaseModel):
    quantity: int


# ---------------------------------------------------------
# CHECKOUT
# ---------------------------------------------------------

class OrderDraft(BaseModel):
    """Buyer-entered checkout form, applied to every order of one submission."""
    urgency: Urgency = Urgency.STANDARD
    delivery_address: str = ""
    contact_person: str = ""
    phone: str = ""
    notes: str = ""
    payment_terms: PaymentTerms = PaymentTerms.NET30


class OrderItemSnapshot(BaseModel):
    product_id: str
    product_name: str
    price: float
    quantity: int
    image: Optional[str] = None


class OrderRecord(BaseModel):
    id: str
    order_number: str
    user_id: str
    supplier_id: str
    supplier_name: str
    items: List[OrderItemSnapshot]
    total_amount: float
    shipping_cost: float
    status: OrderStatus = OrderStatus.PENDING
    urgency: Urgency
    shipping_address: str
    contact_person: str
    phone: str
    notes: str = ""
    payment_terms: PaymentTerms
    expected_delivery: datetime
    created_at: datetime
    updated_at: datetime


class DashboardSummary(BaseModel):
    total_orders: int
    pending_orders: int
    delivered_orders: int
    total_spent: float


# ---------------------------------------------------------
# QUOTES
# ---------------------------------------------------------

class QuoteRequestDraft(BaseModel):
    product_id: str
    quantity: int = 1
    urgency: Urgency = Urgency.STANDARD
    notes: str = ""
    delivery_address: str = ""
    contact_person: str = ""
    phone: str = ""


class QuoteRecord(BaseModel):
    id: str
    buyer_id: str
    product_id: str
    product_name: str
    supplier_id: Optional[str] = None
    quantity: int
    urgency: Urgency
    notes: str = ""
    delivery_address: str
    contact_person: str
    phone: str
    status: str = "pending"
    unit_price: float
    total_price: float
    created_at: datetime


# ---------------------------------------------------------
# REALTIME
# ---------------------------------------------------------

class ChangeEvent(BaseModel):
    """One insert/update/delete notification for a watched table."""
    event_type: Literal["INSERT", "UPDATE", "DELETE"]
    table: str
    new: Optional[Dict[str, Any]] = None
    old: Optional[Dict[str, Any]] = None

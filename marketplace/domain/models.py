from sqlalchemy import Column, DateTime, Float, ForeignKey, Integer, JSON, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from marketplace.infrastructure.database import Base

class Product(Base):
    __tablename__ = "products"

    id = Column(String, primary_key=True, index=True)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    price = Column(Float, nullable=False)
    image = Column(String, nullable=True)
    supplier_id = Column(String, index=True, nullable=True)
    supplier_name = Column(String, nullable=True)
    category_id = Column(String, nullable=True)
    status = Column(String, default="active")  # active, inactive


class CartItem(Base):
    __tablename__ = "cart_items"
    # One row per (buyer, product); re-adding bumps quantity
    __table_args__ = (UniqueConstraint("user_id", "product_id", name="uq_cart_items_user_product"),)

    id = Column(String, primary_key=True, index=True)
    user_id = Column(String, index=True, nullable=False)
    product_id = Column(String, ForeignKey("products.id"), nullable=False)
    quantity = Column(Integer, nullable=False, default=1)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    product = relationship("Product", lazy="joined")


class Order(Base):
    __tablename__ = "orders"

    id = Column(String, primary_key=True, index=True)
    order_number = Column(String, unique=True, nullable=False)
    user_id = Column(String, index=True, nullable=False)
    supplier_id = Column(String, index=True, nullable=False)
    supplier_name = Column(String, nullable=False)

    # Snapshot of the cart lines at submission time, not a live reference
    items = Column(JSON, nullable=False)

    total_amount = Column(Float, nullable=False)
    shipping_cost = Column(Float, nullable=False)
    status = Column(String, default="pending")  # pending, approved, delivered, cancelled
    urgency = Column(String, nullable=False)
    shipping_address = Column(Text, nullable=False)
    contact_person = Column(String, nullable=False)
    phone = Column(String, nullable=False)
    notes = Column(Text, default="")
    payment_terms = Column(String, nullable=False)
    expected_delivery = Column(DateTime(timezone=True), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)


class QuoteRequest(Base):
    __tablename__ = "quote_requests"

    id = Column(String, primary_key=True, index=True)
    buyer_id = Column(String, index=True, nullable=False)
    product_id = Column(String, ForeignKey("products.id"), nullable=False)
    product_name = Column(String, nullable=False)
    supplier_id = Column(String, nullable=True)
    quantity = Column(Integer, nullable=False)
    urgency = Column(String, nullable=False)
    notes = Column(Text, default="")
    delivery_address = Column(Text, nullable=False)
    contact_person = Column(String, nullable=False)
    phone = Column(String, nullable=False)
    status = Column(String, default="pending")
    unit_price = Column(Float, nullable=False)
    total_price = Column(Float, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False)

"""SQLAlchemy Core table definitions."""

from __future__ import annotations

from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    Numeric,
    String,
    Table,
    Text,
    UniqueConstraint,
)

metadata = MetaData()

MONEY = Numeric(10, 2, asdecimal=True)

products = Table(
    "products",
    metadata,
    Column("id", String(64), primary_key=True),
    Column("name", String(255), nullable=False),
    Column("price", MONEY, nullable=False),
    Column("stock", Integer, nullable=False, default=0),
    Column("image_url", Text),
    Column("updated_at", DateTime(timezone=True), nullable=False),
    CheckConstraint("stock >= 0", name="ck_products_stock_non_negative"),
)

orders = Table(
    "orders",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("order_id", String(64), nullable=False, unique=True),
    Column("user_id", String(64), nullable=False),
    Column("customer_email", String(255), nullable=False, default=""),
    Column("customer_name", String(255), nullable=False, default=""),
    Column("status", String(32), nullable=False),
    Column("subtotal", MONEY, nullable=False),
    Column("shipping", MONEY, nullable=False),
    Column("tax", MONEY, nullable=False),
    Column("total", MONEY, nullable=False),
    Column("shipping_name", String(255), nullable=False),
    Column("shipping_address", Text, nullable=False),
    Column("shipping_city", String(128), nullable=False),
    Column("shipping_state", String(128), nullable=False),
    Column("shipping_zip", String(32), nullable=False),
    Column("shipping_country", String(8), nullable=False, default="US"),
    Column("payment_method", String(32), nullable=False, default="card"),
    Column("created_at", DateTime(timezone=True), nullable=False),
    Column("updated_at", DateTime(timezone=True), nullable=False),
    Index("ix_orders_user_created", "user_id", "created_at"),
)

order_items = Table(
    "order_items",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("order_id", Integer, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False),
    Column("product_id", String(64), nullable=False),
    Column("product_name", String(255), nullable=False),
    Column("quantity", Integer, nullable=False),
    Column("price", MONEY, nullable=False),
    Column("created_at", DateTime(timezone=True), nullable=False),
    CheckConstraint("quantity > 0", name="ck_order_items_quantity_positive"),
    Index("ix_order_items_order", "order_id"),
)

order_status_logs = Table(
    "order_status_logs",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("order_id", Integer, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False),
    Column("status", String(32), nullable=False),
    Column("note", Text, nullable=False, default=""),
    Column("created_at", DateTime(timezone=True), nullable=False),
    Index("ix_order_status_logs_order", "order_id"),
)

cart_items = Table(
    "cart_items",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("user_id", String(64), nullable=False),
    Column("product_id", String(64), ForeignKey("products.id"), nullable=False),
    Column("quantity", Integer, nullable=False),
    UniqueConstraint("user_id", "product_id", name="uq_cart_items_user_product"),
)

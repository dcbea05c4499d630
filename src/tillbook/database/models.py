"""SQLAlchemy models for tillbook database."""

from datetime import datetime, UTC

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    create_engine,
    event,
)
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, relationship, sessionmaker

from tillbook.domain.entities import PaymentMethod, PaymentStatus

Base = declarative_base()

# Money columns: exact decimal, two fractional digits
Money = Numeric(12, 2, asdecimal=True)


def utcnow() -> datetime:
    return datetime.now(UTC)


def _enum_values(enum_cls):
    return [member.value for member in enum_cls]


PaymentMethodType = Enum(PaymentMethod, name="payment_method", values_callable=_enum_values)
PaymentStatusType = Enum(PaymentStatus, name="payment_status", values_callable=_enum_values)


class Product(Base):
    """Catalog product model."""

    __tablename__ = "products"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    barcode = Column(String, nullable=True)
    price = Column(Money, nullable=False)
    cost = Column(Money, nullable=True)
    stock_quantity = Column(Integer, nullable=False, default=0)
    min_stock = Column(Integer, nullable=True)
    category = Column(String, nullable=True)
    image_url = Column(String, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    __table_args__ = (
        CheckConstraint("stock_quantity >= 0", name="ck_products_stock_non_negative"),
        CheckConstraint("price >= 0", name="ck_products_price_non_negative"),
    )

    items = relationship("TransactionItem", back_populates="product")


class Customer(Base):
    """Customer model."""

    __tablename__ = "customers"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    phone = Column(String, nullable=True)
    email = Column(String, nullable=True)
    address = Column(String, nullable=True)
    debt_limit = Column(Money, nullable=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    transactions = relationship("Transaction", back_populates="customer")
    payments = relationship("Payment", back_populates="customer")


class Transaction(Base):
    """Sale transaction model."""

    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True)
    customer_id = Column(Integer, ForeignKey("customers.id"), nullable=True)
    total_amount = Column(Money, nullable=False)
    discount_amount = Column(Money, nullable=False, default=0)
    tax_amount = Column(Money, nullable=False, default=0)
    final_amount = Column(Money, nullable=False)
    payment_method = Column(PaymentMethodType, nullable=False)
    payment_status = Column(PaymentStatusType, nullable=False, default=PaymentStatus.PAID)
    notes = Column(String, nullable=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    __table_args__ = (
        Index("ix_transactions_customer_status", "customer_id", "payment_status"),
        Index("ix_transactions_created_at", "created_at"),
    )

    customer = relationship("Customer", back_populates="transactions")
    items = relationship(
        "TransactionItem",
        back_populates="transaction",
        cascade="all, delete-orphan",
        order_by="TransactionItem.id",
    )
    payments = relationship("Payment", back_populates="transaction", order_by="Payment.id")


class TransactionItem(Base):
    """Sale line item model."""

    __tablename__ = "transaction_items"

    id = Column(Integer, primary_key=True)
    transaction_id = Column(Integer, ForeignKey("transactions.id"), nullable=False, index=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False)
    quantity = Column(Integer, nullable=False)
    unit_price = Column(Money, nullable=False)
    subtotal = Column(Money, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    __table_args__ = (CheckConstraint("quantity > 0", name="ck_transaction_items_quantity_positive"),)

    transaction = relationship("Transaction", back_populates="items")
    product = relationship("Product", back_populates="items")


class Payment(Base):
    """Payment against a credit sale."""

    __tablename__ = "payments"

    id = Column(Integer, primary_key=True)
    transaction_id = Column(Integer, ForeignKey("transactions.id"), nullable=False, index=True)
    customer_id = Column(Integer, ForeignKey("customers.id"), nullable=False, index=True)
    amount = Column(Money, nullable=False)
    payment_method = Column(PaymentMethodType, nullable=False)
    notes = Column(String, nullable=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    __table_args__ = (CheckConstraint("amount > 0", name="ck_payments_amount_positive"),)

    transaction = relationship("Transaction", back_populates="payments")
    customer = relationship("Customer", back_populates="payments")


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_engine_for_url(database_url: str) -> Engine:
    """Create an engine, enabling foreign keys and a lock timeout on SQLite."""
    connect_args = {}
    if database_url.startswith("sqlite"):
        # Writers wait for each other instead of failing straight away
        connect_args["timeout"] = 30
    engine = create_engine(database_url, echo=False, connect_args=connect_args)
    if engine.dialect.name == "sqlite":
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
    return engine


def create_session_factory(engine: Engine) -> sessionmaker[Session]:
    """Create the schema if needed and return a session factory bound to engine."""
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine, expire_on_commit=False)

"""Domain model entities for tillbook.

These are pure data classes representing business concepts, independent of
database schema. Services and the storage layer exchange these instead of ORM
rows, so nothing outside the database package ever holds a live session object.
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional


class PaymentMethod(str, Enum):
    """How a sale or a payment was settled."""

    CASH = "cash"
    QRIS = "qris"
    BANK_TRANSFER = "bank_transfer"
    DEBT = "debt"


class PaymentStatus(str, Enum):
    """Settlement state of a transaction."""

    PAID = "paid"
    PENDING = "pending"
    PARTIAL = "partial"


class ReportGroupBy(str, Enum):
    """Period granularity for the sales report."""

    DAY = "day"
    WEEK = "week"
    MONTH = "month"


# Statuses that still contribute principal to a customer's outstanding debt
OPEN_STATUSES = (PaymentStatus.PENDING, PaymentStatus.PARTIAL)


@dataclass(frozen=True)
class Product:
    """Catalog product domain entity."""

    id: int
    name: str
    barcode: Optional[str]
    price: Decimal
    cost: Optional[Decimal]
    stock_quantity: int
    min_stock: Optional[int]
    category: Optional[str]
    image_url: Optional[str]
    is_active: bool
    created_at: datetime
    updated_at: datetime

    @property
    def is_low_stock(self) -> bool:
        return self.min_stock is not None and self.stock_quantity <= self.min_stock


@dataclass(frozen=True)
class Customer:
    """Customer domain entity."""

    id: int
    name: str
    phone: Optional[str]
    email: Optional[str]
    address: Optional[str]
    debt_limit: Optional[Decimal]
    created_at: datetime


@dataclass(frozen=True)
class Transaction:
    """Sale transaction domain entity."""

    id: int
    customer_id: Optional[int]
    total_amount: Decimal
    discount_amount: Decimal
    tax_amount: Decimal
    final_amount: Decimal
    payment_method: PaymentMethod
    payment_status: PaymentStatus
    notes: Optional[str]
    created_at: datetime

    @property
    def is_credit_sale(self) -> bool:
        return self.payment_method == PaymentMethod.DEBT


@dataclass(frozen=True)
class TransactionItem:
    """Line item of a committed sale."""

    id: int
    transaction_id: int
    product_id: int
    quantity: int
    unit_price: Decimal
    subtotal: Decimal
    created_at: datetime


@dataclass(frozen=True)
class Payment:
    """Payment recorded against a credit sale."""

    id: int
    transaction_id: int
    customer_id: int
    amount: Decimal
    payment_method: PaymentMethod
    notes: Optional[str]
    created_at: datetime


@dataclass(frozen=True)
class CartItem:
    """A proposed (product, quantity, price) line prior to commit."""

    product_id: int
    quantity: int
    unit_price: Decimal

    @property
    def subtotal(self) -> Decimal:
        return self.unit_price * self.quantity


@dataclass(frozen=True)
class TransactionDetail:
    """A transaction together with its line items and payment history."""

    transaction: Transaction
    items: tuple[TransactionItem, ...] = ()
    payments: tuple[Payment, ...] = ()

    @property
    def amount_paid(self) -> Decimal:
        return sum((p.amount for p in self.payments), Decimal("0.00"))

    @property
    def balance_due(self) -> Decimal:
        if not self.transaction.is_credit_sale:
            return Decimal("0.00")
        return max(Decimal("0.00"), self.transaction.final_amount - self.amount_paid)


@dataclass(frozen=True)
class SalesReportRow:
    """Aggregated sales for one reporting period."""

    period: str
    total_sales: Decimal
    total_transactions: int
    average_transaction: Decimal
    total_items_sold: int


@dataclass
class SalesReport:
    """Sales report for a date range."""

    group_by: ReportGroupBy
    rows: list[SalesReportRow] = field(default_factory=list)

    @property
    def total_sales(self) -> Decimal:
        return sum((row.total_sales for row in self.rows), Decimal("0.00"))

    @property
    def total_transactions(self) -> int:
        return sum(row.total_transactions for row in self.rows)

"""Abstract database interface."""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from datetime import datetime
from decimal import Decimal
from typing import Any, Iterable, Optional

# Import entities directly to avoid circular import through domain/__init__.py
from tillbook.domain.entities import (
    Customer,
    Payment,
    PaymentMethod,
    PaymentStatus,
    Product,
    Transaction,
    TransactionItem,
)


class UnitOfWork(ABC):
    """Scoped handle for the writes of one ledger operation.

    Everything done through a unit of work lands together when the scope
    exits normally and is rolled back when it exits with an exception.
    """

    @abstractmethod
    def get_products(self, product_ids: Iterable[int], for_update: bool = False) -> dict[int, Product]:
        """Load products by ID. Missing IDs are absent from the result."""
        pass

    @abstractmethod
    def get_customer(self, customer_id: int) -> Optional[Customer]:
        """Get customer by ID."""
        pass

    @abstractmethod
    def get_stock_quantity(self, product_id: int) -> Optional[int]:
        """Read a product's current stock, or None if the product does not exist."""
        pass

    @abstractmethod
    def decrement_stock(self, product_id: int, quantity: int) -> bool:
        """Decrement stock by quantity if at least quantity is on hand.

        Returns False, leaving the row untouched, when stock is short.
        """
        pass

    @abstractmethod
    def add_transaction(
        self,
        customer_id: Optional[int],
        total_amount: Decimal,
        discount_amount: Decimal,
        tax_amount: Decimal,
        final_amount: Decimal,
        payment_method: PaymentMethod,
        payment_status: PaymentStatus,
        notes: Optional[str] = None,
    ) -> Transaction:
        """Insert a transaction row. Returns it with its assigned ID."""
        pass

    @abstractmethod
    def add_transaction_item(
        self, transaction_id: int, product_id: int, quantity: int, unit_price: Decimal, subtotal: Decimal
    ) -> TransactionItem:
        """Insert a line item for a transaction."""
        pass

    @abstractmethod
    def get_transaction(self, transaction_id: int, for_update: bool = False) -> Optional[Transaction]:
        """Get transaction by ID, optionally locking its row."""
        pass

    @abstractmethod
    def add_payment(
        self,
        transaction_id: int,
        customer_id: int,
        amount: Decimal,
        payment_method: PaymentMethod,
        notes: Optional[str] = None,
    ) -> Payment:
        """Append a payment to the ledger."""
        pass

    @abstractmethod
    def list_payment_amounts(self, transaction_id: int) -> list[Decimal]:
        """Amounts of every payment recorded for a transaction."""
        pass

    @abstractmethod
    def set_payment_status(self, transaction_id: int, status: PaymentStatus) -> None:
        """Overwrite a transaction's payment status."""
        pass

    @abstractmethod
    def get_open_principals(self, customer_id: int) -> list[Decimal]:
        """Final amounts of a customer's pending or partial transactions."""
        pass

    @abstractmethod
    def list_customer_payment_amounts(self, customer_id: int) -> list[Decimal]:
        """Amounts of every payment a customer has made."""
        pass


class Database(ABC):
    """Abstract database interface for tillbook."""

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    @abstractmethod
    def unit_of_work(self) -> AbstractContextManager[UnitOfWork]:
        """Open an all-or-nothing unit of work.

        Usage::

            with db.unit_of_work() as uow:
                ...

        Raises:
            StorageError: If the store fails; nothing from the scope is kept.
        """
        pass

    # Product operations
    @abstractmethod
    def create_product(
        self,
        name: str,
        price: Decimal,
        stock_quantity: int = 0,
        barcode: Optional[str] = None,
        cost: Optional[Decimal] = None,
        min_stock: Optional[int] = None,
        category: Optional[str] = None,
        image_url: Optional[str] = None,
    ) -> int:
        """Create a product. Returns product ID."""
        pass

    @abstractmethod
    def get_product(self, product_id: int) -> Optional[Product]:
        """Get product by ID."""
        pass

    @abstractmethod
    def list_products(
        self,
        category: Optional[str] = None,
        is_active: Optional[bool] = None,
        low_stock: bool = False,
        search: Optional[str] = None,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> list[Product]:
        """List products with optional filters, ordered by name."""
        pass

    @abstractmethod
    def update_product(self, product_id: int, fields: dict[str, Any]) -> Product:
        """Apply a partial update to a product. Returns the updated product."""
        pass

    # Customer operations
    @abstractmethod
    def create_customer(
        self,
        name: str,
        phone: Optional[str] = None,
        email: Optional[str] = None,
        address: Optional[str] = None,
        debt_limit: Optional[Decimal] = None,
    ) -> int:
        """Create a customer. Returns customer ID."""
        pass

    @abstractmethod
    def get_customer(self, customer_id: int) -> Optional[Customer]:
        """Get customer by ID."""
        pass

    @abstractmethod
    def list_customers(self) -> list[Customer]:
        """List all customers ordered by name."""
        pass

    @abstractmethod
    def update_customer(self, customer_id: int, fields: dict[str, Any]) -> Customer:
        """Apply a partial update to a customer. Returns the updated customer."""
        pass

    # Transaction reads
    @abstractmethod
    def get_transaction(self, transaction_id: int) -> Optional[Transaction]:
        """Get transaction by ID."""
        pass

    @abstractmethod
    def list_transaction_items(self, transaction_ids: Iterable[int]) -> list[TransactionItem]:
        """List line items belonging to the given transactions."""
        pass

    @abstractmethod
    def list_transactions(
        self,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        customer_id: Optional[int] = None,
        payment_status: Optional[PaymentStatus] = None,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> list[Transaction]:
        """List transactions newest first.

        Args:
            start: Inclusive lower bound on created_at
            end: Exclusive upper bound on created_at
            customer_id: Optional customer filter
            payment_status: Optional status filter
            limit: Maximum rows to return (None for all)
            offset: Rows to skip
        """
        pass

    # Payment reads
    @abstractmethod
    def list_payments(
        self, transaction_id: Optional[int] = None, customer_id: Optional[int] = None
    ) -> list[Payment]:
        """List payments in insertion order, optionally filtered."""
        pass

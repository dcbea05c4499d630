"""Ledger engine: turns a cart into a committed sale.

A sale is the transaction row, its line items and the stock decrement of
every product in the cart. All three are written through one unit of work,
so a failed commit leaves no trace in the store.
"""

import logging
from datetime import date
from decimal import Decimal
from typing import Any, Iterable, Mapping, Optional, Union

from tillbook.database.base import Database
from tillbook.database.concurrency import run_with_retry
from tillbook.domain.entities import (
    CartItem,
    PaymentMethod,
    PaymentStatus,
    Transaction,
    TransactionDetail,
)
from tillbook.domain.errors import (
    InsufficientStockError,
    NotFoundError,
    ValidationError,
    negative_amount,
    product_not_found,
)
from tillbook.utils.date_parser import day_bounds
from tillbook.utils.money import ZERO, MoneyLike, check_money_range, sum_money, to_money

logger = logging.getLogger(__name__)

DEFAULT_RETRY_ATTEMPTS = 3
DEFAULT_PAGE_SIZE = 50

CartLine = Union[CartItem, Mapping[str, Any]]


def coerce_payment_method(value: Union[PaymentMethod, str]) -> PaymentMethod:
    """Convert a string such as 'cash' into a PaymentMethod."""
    try:
        return PaymentMethod(value)
    except ValueError:
        allowed = ", ".join(m.value for m in PaymentMethod)
        raise ValidationError(f"Unknown payment method '{value}'. Expected one of: {allowed}")


def normalize_cart(items: Iterable[CartLine]) -> list[CartItem]:
    """Validate cart lines and convert them to CartItem.

    Lines may be CartItem instances or mappings with product_id, quantity and
    unit_price keys.

    Raises:
        ValidationError: If the cart is empty or a line has a non-positive
            quantity or unit price.
    """
    cart: list[CartItem] = []
    for position, line in enumerate(items or (), start=1):
        if isinstance(line, CartItem):
            product_id, quantity, unit_price = line.product_id, line.quantity, line.unit_price
        else:
            try:
                product_id = line["product_id"]
                quantity = line["quantity"]
                unit_price = line["unit_price"]
            except (KeyError, TypeError):
                raise ValidationError(
                    f"Cart line {position} must provide product_id, quantity and unit_price"
                )

        if isinstance(product_id, bool) or not isinstance(product_id, int):
            raise ValidationError(f"Cart line {position}: product_id must be an integer")
        if isinstance(quantity, bool) or not isinstance(quantity, int):
            raise ValidationError(f"Cart line {position}: quantity must be an integer")
        if quantity <= 0:
            raise ValidationError(f"Cart line {position}: quantity must be greater than zero")
        price = to_money(unit_price, f"Cart line {position}: unit_price")
        if price <= ZERO:
            raise ValidationError(f"Cart line {position}: unit_price must be greater than zero")

        cart.append(CartItem(product_id=product_id, quantity=quantity, unit_price=price))

    if not cart:
        raise ValidationError("A sale needs at least one item")
    return cart


def aggregate_demand(cart: Iterable[CartItem]) -> dict[int, int]:
    """Total requested quantity per distinct product, in first-seen order."""
    demand: dict[int, int] = {}
    for item in cart:
        demand[item.product_id] = demand.get(item.product_id, 0) + item.quantity
    return demand


def compute_totals(
    cart: Iterable[CartItem], discount_amount: Decimal, tax_amount: Decimal
) -> tuple[Decimal, Decimal]:
    """Return (total_amount, final_amount) for a cart.

    Raises:
        ValidationError: If a line subtotal or either total exceeds MAX_MONEY
    """
    subtotals = [check_money_range(item.subtotal, "subtotal") for item in cart]
    total_amount = check_money_range(sum_money(subtotals), "total_amount")
    final_amount = check_money_range(total_amount - discount_amount + tax_amount, "final_amount")
    return total_amount, final_amount


def initial_payment_status(payment_method: PaymentMethod) -> PaymentStatus:
    """Credit sales start pending; everything else is settled at the till."""
    if payment_method == PaymentMethod.DEBT:
        return PaymentStatus.PENDING
    return PaymentStatus.PAID


class LedgerEngine:
    """Commits sales and answers queries about committed transactions."""

    def __init__(
        self,
        db: Database,
        retry_attempts: int = DEFAULT_RETRY_ATTEMPTS,
        retry_backoff: float = 0.1,
    ):
        """Initialize the ledger engine.

        Args:
            db: Database instance
            retry_attempts: How many times a commit is attempted when the
                store reports a transient failure
            retry_backoff: Base delay in seconds between attempts
        """
        self.db = db
        self.retry_attempts = retry_attempts
        self.retry_backoff = retry_backoff

    def commit_sale(
        self,
        items: Iterable[CartLine],
        customer_id: Optional[int] = None,
        discount_amount: MoneyLike = ZERO,
        tax_amount: MoneyLike = ZERO,
        payment_method: Union[PaymentMethod, str] = PaymentMethod.CASH,
        notes: Optional[str] = None,
    ) -> Transaction:
        """Commit a cart as a sale.

        Checks run in this order, each failing fast:

        1. the cart is non-empty with positive quantities and unit prices
        2. every product exists and is active; the customer, if given, exists
        3. cumulative demand per product fits in current stock
        4. discount and tax are not negative

        The client-supplied unit prices are charged as-is. A discount larger
        than the total is accepted and yields a negative final amount.

        Returns:
            The committed transaction

        Raises:
            ValidationError: Malformed cart, unknown payment method, inactive
                product, or negative discount/tax
            NotFoundError: A product or the customer does not exist
            InsufficientStockError: Stock cannot cover the requested quantity
            StorageError: The store failed on every attempt
        """
        cart = normalize_cart(items)
        method = coerce_payment_method(payment_method)
        discount = to_money(discount_amount, "discount_amount")
        tax = to_money(tax_amount, "tax_amount")

        return run_with_retry(
            lambda: self._commit(cart, customer_id, discount, tax, method, notes),
            attempts=self.retry_attempts,
            backoff_base=self.retry_backoff,
        )

    def _commit(
        self,
        cart: list[CartItem],
        customer_id: Optional[int],
        discount: Decimal,
        tax: Decimal,
        method: PaymentMethod,
        notes: Optional[str],
    ) -> Transaction:
        demand = aggregate_demand(cart)

        with self.db.unit_of_work() as uow:
            products = uow.get_products(demand.keys(), for_update=True)

            missing = [pid for pid in demand if pid not in products]
            if missing:
                entity_id = missing[0] if len(missing) == 1 else missing
                raise NotFoundError("Product", entity_id, product_not_found(missing))
            inactive = [products[pid] for pid in demand if not products[pid].is_active]
            if inactive:
                raise ValidationError(f"Product '{inactive[0].name}' ({inactive[0].id}) is not active")
            if customer_id is not None and uow.get_customer(customer_id) is None:
                raise NotFoundError("Customer", customer_id)

            for product_id, requested in demand.items():
                product = products[product_id]
                if product.stock_quantity < requested:
                    raise InsufficientStockError(product_id, product.stock_quantity, requested, product.name)

            if discount < ZERO:
                raise ValidationError(negative_amount("discount_amount", discount))
            if tax < ZERO:
                raise ValidationError(negative_amount("tax_amount", tax))

            total_amount, final_amount = compute_totals(cart, discount, tax)
            if final_amount < ZERO:
                logger.warning(
                    "Discount %s exceeds total %s; final amount is %s", discount, total_amount, final_amount
                )

            transaction = uow.add_transaction(
                customer_id=customer_id,
                total_amount=total_amount,
                discount_amount=discount,
                tax_amount=tax,
                final_amount=final_amount,
                payment_method=method,
                payment_status=initial_payment_status(method),
                notes=notes,
            )
            for item in cart:
                uow.add_transaction_item(
                    transaction_id=transaction.id,
                    product_id=item.product_id,
                    quantity=item.quantity,
                    unit_price=item.unit_price,
                    subtotal=item.subtotal,
                )

            # The conditional decrement re-checks stock against the row itself,
            # so a concurrent commit that got there first is caught here.
            for product_id, requested in demand.items():
                if not uow.decrement_stock(product_id, requested):
                    available = uow.get_stock_quantity(product_id) or 0
                    raise InsufficientStockError(product_id, available, requested, products[product_id].name)

        logger.info(
            "Committed transaction %d: %d line(s), final %s, %s/%s",
            transaction.id,
            len(cart),
            transaction.final_amount,
            transaction.payment_method.value,
            transaction.payment_status.value,
        )
        return transaction

    def get_transaction(self, transaction_id: int) -> Transaction:
        """Get a transaction by ID.

        Raises:
            NotFoundError: If the transaction does not exist
        """
        transaction = self.db.get_transaction(transaction_id)
        if transaction is None:
            raise NotFoundError("Transaction", transaction_id)
        return transaction

    def get_transaction_detail(self, transaction_id: int) -> TransactionDetail:
        """Get a transaction with its line items and payments."""
        transaction = self.get_transaction(transaction_id)
        return TransactionDetail(
            transaction=transaction,
            items=tuple(self.db.list_transaction_items([transaction_id])),
            payments=tuple(self.db.list_payments(transaction_id=transaction_id)),
        )

    def list_transactions(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        customer_id: Optional[int] = None,
        payment_status: Optional[Union[PaymentStatus, str]] = None,
        limit: Optional[int] = DEFAULT_PAGE_SIZE,
        offset: int = 0,
    ) -> list[Transaction]:
        """List transactions newest first.

        Args:
            start_date: Optional inclusive start date
            end_date: Optional inclusive end date
            customer_id: Optional customer filter
            payment_status: Optional status filter
            limit: Page size (None for no limit)
            offset: Rows to skip

        Returns:
            List of transactions
        """
        if start_date is not None and end_date is not None and start_date > end_date:
            raise ValidationError("start_date must not be after end_date")
        if limit is not None and limit <= 0:
            raise ValidationError("limit must be greater than zero")
        if offset < 0:
            raise ValidationError("offset must not be negative")

        status = None
        if payment_status is not None:
            try:
                status = PaymentStatus(payment_status)
            except ValueError:
                raise ValidationError(f"Unknown payment status '{payment_status}'")

        start, end = day_bounds(start_date, end_date)
        return self.db.list_transactions(
            start=start,
            end=end,
            customer_id=customer_id,
            payment_status=status,
            limit=limit,
            offset=offset,
        )

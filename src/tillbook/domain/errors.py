"""Shared domain error messages and error types."""

from decimal import Decimal
from typing import Optional


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""

    def __init__(self, entity: str, entity_id, message: Optional[str] = None):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(message or f"{entity} {entity_id} not found")


class InsufficientStockError(DomainError):
    """Requested quantity exceeds the product's available stock."""

    def __init__(self, product_id: int, available: int, requested: int, product_name: Optional[str] = None):
        self.product_id = product_id
        self.available = available
        self.requested = requested
        self.product_name = product_name
        super().__init__(insufficient_stock(product_id, available, requested, product_name))


class InvalidStateError(DomainError):
    """Operation does not apply to the entity in its current state."""

    def __init__(self, message: str, transaction_id: Optional[int] = None, payment_method: Optional[str] = None):
        self.transaction_id = transaction_id
        self.payment_method = payment_method
        super().__init__(message)


class StorageError(Exception):
    """Storage failure.

    No partial writes survive a failed unit of work. ``retryable`` is True for
    lock and connection failures, where running the whole operation again can
    succeed, and False for constraint or data errors, which would fail the
    same way every time.
    """

    def __init__(self, message: str, retryable: bool = True):
        self.retryable = retryable
        super().__init__(message)


def product_not_found(product_ids: list[int]) -> str:
    """Return message for one or more missing products."""
    if len(product_ids) == 1:
        return f"Product {product_ids[0]} not found"
    return f"Products {', '.join(str(pid) for pid in product_ids)} not found"


def insufficient_stock(
    product_id: int, available: int, requested: int, product_name: Optional[str] = None
) -> str:
    """Return message for a stock shortfall."""
    label = f"product {product_id}" if product_name is None else f"product '{product_name}' ({product_id})"
    return f"Insufficient stock for {label}. Available: {available}, Requested: {requested}"


def payment_requires_credit_sale(transaction_id: int, payment_method: str) -> str:
    """Return message when a payment targets a non-credit sale."""
    return (
        f"Transaction {transaction_id} was settled by {payment_method}; "
        "payment only applies to credit sales"
    )


def negative_amount(field_name: str, amount: Decimal) -> str:
    """Return message for a money field below zero."""
    return f"{field_name} must not be negative (got {amount})"

"""Mapper functions to convert SQLAlchemy models into domain entities.

Entities are built while the owning session is still open, so callers never
see lazy-loading or detached-instance surprises.
"""

from decimal import Decimal
from typing import Optional

from tillbook.domain import entities as domain
from tillbook.database.models import (
    Customer as ORMCustomer,
    Payment as ORMPayment,
    Product as ORMProduct,
    Transaction as ORMTransaction,
    TransactionItem as ORMTransactionItem,
)

_CENT = Decimal("0.01")


def _money(value) -> Optional[Decimal]:
    # SQLite hands back Numeric through float storage; normalise the scale
    if value is None:
        return None
    return Decimal(value).quantize(_CENT)


def product_to_domain(orm_product: ORMProduct) -> domain.Product:
    """Convert SQLAlchemy Product model to domain Product entity."""
    return domain.Product(
        id=orm_product.id,
        name=orm_product.name,
        barcode=orm_product.barcode,
        price=_money(orm_product.price),
        cost=_money(orm_product.cost),
        stock_quantity=orm_product.stock_quantity,
        min_stock=orm_product.min_stock,
        category=orm_product.category,
        image_url=orm_product.image_url,
        is_active=orm_product.is_active,
        created_at=orm_product.created_at,
        updated_at=orm_product.updated_at,
    )


def customer_to_domain(orm_customer: ORMCustomer) -> domain.Customer:
    """Convert SQLAlchemy Customer model to domain Customer entity."""
    return domain.Customer(
        id=orm_customer.id,
        name=orm_customer.name,
        phone=orm_customer.phone,
        email=orm_customer.email,
        address=orm_customer.address,
        debt_limit=_money(orm_customer.debt_limit),
        created_at=orm_customer.created_at,
    )


def transaction_to_domain(orm_transaction: ORMTransaction) -> domain.Transaction:
    """Convert SQLAlchemy Transaction model to domain Transaction entity."""
    return domain.Transaction(
        id=orm_transaction.id,
        customer_id=orm_transaction.customer_id,
        total_amount=_money(orm_transaction.total_amount),
        discount_amount=_money(orm_transaction.discount_amount),
        tax_amount=_money(orm_transaction.tax_amount),
        final_amount=_money(orm_transaction.final_amount),
        payment_method=domain.PaymentMethod(orm_transaction.payment_method),
        payment_status=domain.PaymentStatus(orm_transaction.payment_status),
        notes=orm_transaction.notes,
        created_at=orm_transaction.created_at,
    )


def transaction_item_to_domain(orm_item: ORMTransactionItem) -> domain.TransactionItem:
    """Convert SQLAlchemy TransactionItem model to domain TransactionItem entity."""
    return domain.TransactionItem(
        id=orm_item.id,
        transaction_id=orm_item.transaction_id,
        product_id=orm_item.product_id,
        quantity=orm_item.quantity,
        unit_price=_money(orm_item.unit_price),
        subtotal=_money(orm_item.subtotal),
        created_at=orm_item.created_at,
    )


def payment_to_domain(orm_payment: ORMPayment) -> domain.Payment:
    """Convert SQLAlchemy Payment model to domain Payment entity."""
    return domain.Payment(
        id=orm_payment.id,
        transaction_id=orm_payment.transaction_id,
        customer_id=orm_payment.customer_id,
        amount=_money(orm_payment.amount),
        payment_method=domain.PaymentMethod(orm_payment.payment_method),
        notes=orm_payment.notes,
        created_at=orm_payment.created_at,
    )

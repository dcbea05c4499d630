"""Tests for domain entities and ORM mappers."""

import os
import subprocess
import sys
from dataclasses import FrozenInstanceError
from datetime import datetime, UTC
from decimal import Decimal

import pytest

import tillbook.domain
from tillbook.database import models
from tillbook.database.mappers import payment_to_domain, transaction_to_domain
from tillbook.domain.entities import (
    CartItem,
    Payment,
    PaymentMethod,
    PaymentStatus,
    Product,
    Transaction,
    TransactionDetail,
)

NOW = datetime(2024, 1, 15, 10, 0, tzinfo=UTC)


def _transaction(**overrides):
    values = dict(
        id=1,
        customer_id=7,
        total_amount=Decimal("100.00"),
        discount_amount=Decimal("0.00"),
        tax_amount=Decimal("0.00"),
        final_amount=Decimal("100.00"),
        payment_method=PaymentMethod.DEBT,
        payment_status=PaymentStatus.PENDING,
        notes=None,
        created_at=NOW,
    )
    values.update(overrides)
    return Transaction(**values)


def _payment(payment_id, amount):
    return Payment(
        id=payment_id,
        transaction_id=1,
        customer_id=7,
        amount=Decimal(amount),
        payment_method=PaymentMethod.CASH,
        notes=None,
        created_at=NOW,
    )


def test_entities_are_frozen():
    """Entities cannot be mutated after construction."""
    transaction = _transaction()
    with pytest.raises(FrozenInstanceError):
        transaction.payment_status = PaymentStatus.PAID


def test_cart_item_subtotal():
    """Subtotal is quantity times the frozen unit price."""
    assert CartItem(product_id=1, quantity=3, unit_price=Decimal("2.35")).subtotal == Decimal("7.05")


@pytest.mark.parametrize(
    "stock, min_stock, expected",
    [(5, 5, True), (4, 5, True), (6, 5, False), (0, None, False)],
)
def test_product_is_low_stock(stock, min_stock, expected):
    """Low stock only applies when a threshold is set."""
    product = Product(
        id=1,
        name="Gula",
        barcode=None,
        price=Decimal("1.00"),
        cost=None,
        stock_quantity=stock,
        min_stock=min_stock,
        category=None,
        image_url=None,
        is_active=True,
        created_at=NOW,
        updated_at=NOW,
    )
    assert product.is_low_stock is expected


def test_transaction_detail_balance():
    """Balance due never goes below zero and is zero for non-credit sales."""
    detail = TransactionDetail(transaction=_transaction(), payments=(_payment(1, "30.00"), _payment(2, "20.00")))
    assert detail.amount_paid == Decimal("50.00")
    assert detail.balance_due == Decimal("50.00")

    overpaid = TransactionDetail(transaction=_transaction(), payments=(_payment(1, "150.00"),))
    assert overpaid.balance_due == Decimal("0.00")

    cash = TransactionDetail(transaction=_transaction(payment_method=PaymentMethod.CASH))
    assert not cash.transaction.is_credit_sale
    assert cash.balance_due == Decimal("0.00")


def test_transaction_mapper_normalises_money():
    """Mapped amounts always carry two decimal places."""
    orm = models.Transaction(
        id=3,
        customer_id=None,
        total_amount=Decimal("12.5"),
        discount_amount=Decimal("0"),
        tax_amount=Decimal("1.2"),
        final_amount=Decimal("13.7"),
        payment_method=PaymentMethod.QRIS,
        payment_status=PaymentStatus.PAID,
        notes="table 2",
        created_at=NOW,
    )

    transaction = transaction_to_domain(orm)

    assert isinstance(transaction, Transaction)
    assert str(transaction.total_amount) == "12.50"
    assert str(transaction.discount_amount) == "0.00"
    assert transaction.payment_method == PaymentMethod.QRIS
    assert transaction.notes == "table 2"


def test_payment_mapper():
    """Payments map method values back to the enum."""
    orm = models.Payment(
        id=9,
        transaction_id=3,
        customer_id=4,
        amount=Decimal("5"),
        payment_method="bank_transfer",
        notes=None,
        created_at=NOW,
    )

    payment = payment_to_domain(orm)

    assert payment.payment_method == PaymentMethod.BANK_TRANSFER
    assert payment.amount == Decimal("5.00")


def test_domain_package_exports_services():
    """Services are importable straight from the domain package."""
    from tillbook.domain import LedgerEngine

    assert tillbook.domain.__all__ == [
        "CatalogService",
        "CustomerService",
        "LedgerEngine",
        "SettlementTracker",
        "ReportService",
    ]
    assert LedgerEngine.__module__ == "tillbook.domain.ledger"
    for name in tillbook.domain.__all__:
        assert getattr(tillbook.domain, name).__name__ == name


@pytest.mark.parametrize(
    "module",
    [
        "tillbook.utils.money",
        "tillbook.utils.date_parser",
        "tillbook.database",
        "tillbook.database.concurrency",
        "tillbook.database.sqlalchemy_db",
        "tillbook.domain.errors",
        "tillbook.domain.settlement",
        "tillbook.cli.main",
    ],
)
def test_any_module_imports_first(module):
    """Importing any module first in a fresh interpreter does not hit an import cycle."""
    env = {**os.environ, "PYTHONPATH": os.pathsep.join(sys.path)}
    result = subprocess.run(
        [sys.executable, "-c", f"import {module}"], env=env, capture_output=True, text=True
    )
    assert result.returncode == 0, result.stderr

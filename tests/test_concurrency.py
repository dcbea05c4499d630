"""Concurrent commits and payments against one SQLite file."""

import threading
from decimal import Decimal

from tillbook.database.factories import create_sqlite_database
from tillbook.domain.entities import PaymentStatus
from tillbook.domain.errors import InsufficientStockError
from tillbook.domain.ledger import LedgerEngine
from tillbook.domain.settlement import SettlementTracker


def _run_in_threads(target, count):
    results = []
    errors = []
    lock = threading.Lock()
    barrier = threading.Barrier(count)

    def worker(index):
        barrier.wait()
        try:
            outcome = target(index)
        except Exception as exc:
            with lock:
                errors.append(exc)
        else:
            with lock:
                results.append(outcome)

    threads = [threading.Thread(target=worker, args=(i,)) for i in range(count)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    return results, errors


def test_concurrent_sales_never_oversell(temp_db, catalog_service):
    """Ten buyers race for five units; exactly five sales land."""
    product_id = catalog_service.create_product(name="Gula", price="10.00", stock_quantity=5)

    def buy(_):
        # Separate engine per thread, like separate API workers
        db = create_sqlite_database(database_path=temp_db.database_path)
        try:
            return LedgerEngine(db, retry_attempts=5, retry_backoff=0.01).commit_sale(
                [{"product_id": product_id, "quantity": 1, "unit_price": "10.00"}]
            )
        finally:
            db.disconnect()

    results, errors = _run_in_threads(buy, 10)

    assert len(results) == 5
    assert len(errors) == 5
    assert all(isinstance(e, InsufficientStockError) for e in errors)
    assert catalog_service.get_product(product_id).stock_quantity == 0
    assert len(temp_db.list_transactions()) == 5


def test_concurrent_payments_converge(temp_db, ledger, catalog_service, sample_customer):
    """Racing payments are all kept and the final status reflects their sum."""
    product_id = catalog_service.create_product(name="Beras", price="100.00", stock_quantity=1)
    sale = ledger.commit_sale(
        [{"product_id": product_id, "quantity": 1, "unit_price": "100.00"}],
        customer_id=sample_customer.id,
        payment_method="debt",
    )

    def pay(_):
        db = create_sqlite_database(database_path=temp_db.database_path)
        try:
            return SettlementTracker(db).record_payment(sale.id, sample_customer.id, "25.00", "cash")
        finally:
            db.disconnect()

    results, errors = _run_in_threads(pay, 4)

    assert errors == []
    assert len(results) == 4
    tracker = SettlementTracker(temp_db)
    assert tracker.get_amount_paid(sale.id) == Decimal("100.00")
    assert ledger.get_transaction(sale.id).payment_status == PaymentStatus.PAID
    assert tracker.get_customer_debt(sample_customer.id) == Decimal("0.00")

"""Shared pytest fixtures for tillbook tests."""

import os
import tempfile
from decimal import Decimal

import pytest
from click.testing import CliRunner

from tillbook.database.factories import create_sqlite_database
from tillbook.domain.catalog import CatalogService
from tillbook.domain.customer import CustomerService
from tillbook.domain.ledger import LedgerEngine
from tillbook.domain.report import ReportService
from tillbook.domain.settlement import SettlementTracker


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    db = create_sqlite_database(database_path=db_path)
    # Store the path for CLI tests
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def catalog_service(temp_db):
    """Create a CatalogService with a temporary database."""
    return CatalogService(temp_db)


@pytest.fixture
def customer_service(temp_db):
    """Create a CustomerService with a temporary database."""
    return CustomerService(temp_db)


@pytest.fixture
def ledger(temp_db):
    """Create a LedgerEngine with a temporary database and no retry delay."""
    return LedgerEngine(temp_db, retry_backoff=0)


@pytest.fixture
def tracker(temp_db):
    """Create a SettlementTracker with a temporary database."""
    return SettlementTracker(temp_db)


@pytest.fixture
def report_service(temp_db):
    """Create a ReportService with a temporary database."""
    return ReportService(temp_db)


@pytest.fixture
def sample_products(catalog_service):
    """Create a few products and return them keyed by short name."""
    ids = {
        "coffee": catalog_service.create_product(
            name="Kopi Susu", price="10.00", stock_quantity=50, min_stock=5, category="drinks"
        ),
        "tea": catalog_service.create_product(
            name="Teh Botol", price="5.00", stock_quantity=5, min_stock=10, category="drinks"
        ),
        "bread": catalog_service.create_product(
            name="Roti Tawar", price="15.50", stock_quantity=20, barcode="8991234567890", category="bakery"
        ),
    }
    return {key: catalog_service.get_product(pid) for key, pid in ids.items()}


@pytest.fixture
def sample_customer(customer_service):
    """Create a sample customer with a debt limit."""
    customer_id = customer_service.create_customer(
        name="Budi", phone="08123456789", debt_limit=Decimal("100.00")
    )
    return customer_service.get_customer(customer_id)


@pytest.fixture
def other_customer(customer_service):
    """Create a second customer without a debt limit."""
    customer_id = customer_service.create_customer(name="Siti")
    return customer_service.get_customer(customer_id)


@pytest.fixture
def cli_runner():
    """Create a Click CLI runner."""
    return CliRunner()

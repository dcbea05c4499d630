"""Tests for the sales report."""

from datetime import date, datetime
from decimal import Decimal

import pytest

from tillbook.database.models import Transaction
from tillbook.domain.entities import ReportGroupBy
from tillbook.domain.errors import ValidationError
from tillbook.domain.report import period_key


def _sell(ledger, product, quantity, created_at, temp_db, **kwargs):
    """Commit a sale and backdate it."""
    transaction = ledger.commit_sale(
        [{"product_id": product.id, "quantity": quantity, "unit_price": product.price}], **kwargs
    )
    with temp_db._session_scope() as session:
        session.query(Transaction).filter(Transaction.id == transaction.id).update(
            {Transaction.created_at: created_at}, synchronize_session=False
        )
    return transaction


@pytest.mark.parametrize(
    "group_by, expected",
    [
        (ReportGroupBy.DAY, "2024-01-17"),
        (ReportGroupBy.WEEK, "2024-01-15"),
        (ReportGroupBy.MONTH, "2024-01"),
    ],
)
def test_period_key(group_by, expected):
    """Period labels for a Wednesday in January 2024."""
    assert period_key(datetime(2024, 1, 17, 13, 45), group_by) == expected


def test_week_key_crosses_month_boundary():
    """Weeks are labelled by their Monday even in the previous month."""
    assert period_key(datetime(2024, 3, 2, 9, 0), ReportGroupBy.WEEK) == "2024-02-26"


def test_daily_report(ledger, report_service, sample_products, temp_db):
    """Daily rows carry totals, counts, averages and items sold."""
    coffee = sample_products["coffee"]
    bread = sample_products["bread"]
    _sell(ledger, coffee, 2, datetime(2024, 1, 15, 8, 0), temp_db)
    _sell(ledger, bread, 1, datetime(2024, 1, 15, 17, 30), temp_db)
    _sell(ledger, coffee, 1, datetime(2024, 1, 16, 10, 0), temp_db)
    # Outside the range
    _sell(ledger, coffee, 5, datetime(2024, 1, 17, 0, 0), temp_db)

    report = report_service.sales_report(date(2024, 1, 15), date(2024, 1, 16))

    assert report.group_by == ReportGroupBy.DAY
    assert [row.period for row in report.rows] == ["2024-01-15", "2024-01-16"]
    first, second = report.rows
    assert first.total_sales == Decimal("35.50")
    assert first.total_transactions == 2
    assert first.average_transaction == Decimal("17.75")
    assert first.total_items_sold == 3
    assert second.total_sales == Decimal("10.00")
    assert report.total_sales == Decimal("45.50")
    assert report.total_transactions == 3


def test_weekly_and_monthly_report(ledger, report_service, sample_products, temp_db):
    """Week and month grouping fold days together."""
    coffee = sample_products["coffee"]
    _sell(ledger, coffee, 1, datetime(2024, 1, 29, 12, 0), temp_db)
    _sell(ledger, coffee, 1, datetime(2024, 2, 1, 12, 0), temp_db)
    _sell(ledger, coffee, 1, datetime(2024, 2, 6, 12, 0), temp_db)

    weekly = report_service.sales_report(date(2024, 1, 1), date(2024, 2, 29), group_by="week")
    assert [(r.period, r.total_transactions) for r in weekly.rows] == [("2024-01-29", 2), ("2024-02-05", 1)]

    monthly = report_service.sales_report(date(2024, 1, 1), date(2024, 2, 29), group_by=ReportGroupBy.MONTH)
    assert [(r.period, r.total_sales) for r in monthly.rows] == [
        ("2024-01", Decimal("10.00")),
        ("2024-02", Decimal("20.00")),
    ]


def test_average_rounds_half_up(ledger, report_service, catalog_service, temp_db):
    """Averages are rounded to cents."""
    product_id = catalog_service.create_product(name="Permen", price="0.05", stock_quantity=100)
    product = catalog_service.get_product(product_id)
    _sell(ledger, product, 1, datetime(2024, 5, 1, 9, 0), temp_db)
    _sell(ledger, product, 2, datetime(2024, 5, 1, 10, 0), temp_db)

    (row,) = report_service.sales_report(date(2024, 5, 1), date(2024, 5, 1)).rows
    assert row.total_sales == Decimal("0.15")
    assert row.average_transaction == Decimal("0.08")


def test_empty_report(report_service):
    """No sales gives no rows."""
    report = report_service.sales_report(date(2024, 1, 1), date(2024, 1, 31))
    assert report.rows == []
    assert report.total_sales == Decimal("0.00")


def test_report_rejects_inverted_range(report_service):
    """start_date after end_date is a validation error."""
    with pytest.raises(ValidationError):
        report_service.sales_report(date(2024, 2, 1), date(2024, 1, 1))


def test_report_rejects_unknown_grouping(report_service):
    """Only day, week and month are supported."""
    with pytest.raises(ValidationError, match="Unknown grouping"):
        report_service.sales_report(date(2024, 1, 1), date(2024, 1, 31), group_by="quarter")


def test_report_through_last_representable_date(ledger, report_service, sample_products, temp_db):
    """An end date of date.max covers everything from the start date on."""
    _sell(ledger, sample_products["coffee"], 2, datetime(2024, 1, 15, 9, 0), temp_db)
    _sell(ledger, sample_products["coffee"], 1, datetime(2023, 12, 31, 9, 0), temp_db)

    report = report_service.sales_report(date(2024, 1, 1), date.max, group_by="month")

    assert [row.period for row in report.rows] == ["2024-01"]
    assert report.total_sales == Decimal("20.00")

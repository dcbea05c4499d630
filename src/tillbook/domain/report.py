"""Sales report domain service.

Read-only rollup of committed transactions by calendar period. Timestamps
are stored in UTC, so periods are UTC days, ISO weeks and months.
"""

from datetime import date, datetime, timedelta
from typing import Union

from tillbook.database.base import Database
from tillbook.domain.entities import ReportGroupBy, SalesReport, SalesReportRow, Transaction
from tillbook.domain.errors import ValidationError
from tillbook.utils.date_parser import day_bounds
from tillbook.utils.money import divide_money, sum_money


def period_key(created_at: datetime, group_by: ReportGroupBy) -> str:
    """Label of the reporting period a timestamp falls in.

    day: 2024-01-15, week: date of that week's Monday, month: 2024-01.
    """
    day = created_at.date()
    if group_by == ReportGroupBy.DAY:
        return day.isoformat()
    if group_by == ReportGroupBy.WEEK:
        return (day - timedelta(days=day.weekday())).isoformat()
    return f"{day.year:04d}-{day.month:02d}"


class ReportService:
    """Service for building sales reports."""

    def __init__(self, db: Database):
        """Initialize report service.

        Args:
            db: Database instance
        """
        self.db = db

    def sales_report(
        self,
        start_date: date,
        end_date: date,
        group_by: Union[ReportGroupBy, str] = ReportGroupBy.DAY,
    ) -> SalesReport:
        """Aggregate sales between two dates (both inclusive).

        Raises:
            ValidationError: If the range is inverted or group_by is unknown
        """
        if start_date > end_date:
            raise ValidationError("start_date must not be after end_date")
        try:
            grouping = ReportGroupBy(group_by)
        except ValueError:
            raise ValidationError(f"Unknown grouping '{group_by}'. Expected day, week or month")

        start, end = day_bounds(start_date, end_date)
        transactions = self.db.list_transactions(start=start, end=end, limit=None)
        items = self.db.list_transaction_items(t.id for t in transactions)

        items_sold: dict[int, int] = {}
        for item in items:
            items_sold[item.transaction_id] = items_sold.get(item.transaction_id, 0) + item.quantity

        grouped: dict[str, list[Transaction]] = {}
        for transaction in transactions:
            grouped.setdefault(period_key(transaction.created_at, grouping), []).append(transaction)

        report = SalesReport(group_by=grouping)
        for period in sorted(grouped):
            period_transactions = grouped[period]
            total_sales = sum_money(t.final_amount for t in period_transactions)
            report.rows.append(
                SalesReportRow(
                    period=period,
                    total_sales=total_sales,
                    total_transactions=len(period_transactions),
                    average_transaction=divide_money(total_sales, len(period_transactions)),
                    total_items_sold=sum(items_sold.get(t.id, 0) for t in period_transactions),
                )
            )
        return report

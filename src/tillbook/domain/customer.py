"""Customer domain service."""

from decimal import Decimal
from typing import Any, Optional

from tillbook.database.base import Database
from tillbook.domain.entities import Customer
from tillbook.domain.errors import NotFoundError, ValidationError
from tillbook.domain.settlement import SettlementTracker
from tillbook.utils.money import ZERO, MoneyLike, to_money

_UNSET: Any = object()


def _validate_name(name: Optional[str]) -> str:
    if name is None or not name.strip():
        raise ValidationError("Customer name must not be empty")
    return name.strip()


def _validate_email(email: Optional[str]) -> Optional[str]:
    if email is None:
        return None
    email = email.strip()
    local, _, domain = email.partition("@")
    if not local or not domain:
        raise ValidationError(f"Invalid email address '{email}'")
    return email


def _validate_debt_limit(debt_limit: Optional[MoneyLike]) -> Optional[Decimal]:
    if debt_limit is None:
        return None
    amount = to_money(debt_limit, "debt_limit")
    if amount <= ZERO:
        raise ValidationError("debt_limit must be greater than zero")
    return amount


class CustomerService:
    """Service for managing customers."""

    def __init__(self, db: Database):
        """Initialize customer service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_customer(
        self,
        name: str,
        phone: Optional[str] = None,
        email: Optional[str] = None,
        address: Optional[str] = None,
        debt_limit: Optional[MoneyLike] = None,
    ) -> int:
        """Create a new customer.

        Returns:
            Customer ID

        Raises:
            ValidationError: If name is empty, email is malformed, or
                debt_limit is not positive
        """
        return self.db.create_customer(
            name=_validate_name(name),
            phone=phone,
            email=_validate_email(email),
            address=address,
            debt_limit=_validate_debt_limit(debt_limit),
        )

    def get_customer(self, customer_id: int) -> Optional[Customer]:
        """Get customer by ID, or None if it does not exist."""
        return self.db.get_customer(customer_id)

    def require_customer(self, customer_id: int) -> Customer:
        """Get customer by ID or raise NotFoundError."""
        customer = self.db.get_customer(customer_id)
        if customer is None:
            raise NotFoundError("Customer", customer_id)
        return customer

    def list_customers(self) -> list[Customer]:
        """List all customers."""
        return self.db.list_customers()

    def update_customer(
        self,
        customer_id: int,
        name: Optional[str] = _UNSET,
        phone: Optional[str] = _UNSET,
        email: Optional[str] = _UNSET,
        address: Optional[str] = _UNSET,
        debt_limit: Optional[MoneyLike] = _UNSET,
    ) -> Customer:
        """Update the given customer fields; omitted fields are left as they are.

        Raises:
            NotFoundError: If customer doesn't exist
            ValidationError: If a field is invalid
        """
        fields: dict[str, Any] = {}
        if name is not _UNSET:
            fields["name"] = _validate_name(name)
        if phone is not _UNSET:
            fields["phone"] = phone
        if email is not _UNSET:
            fields["email"] = _validate_email(email)
        if address is not _UNSET:
            fields["address"] = address
        if debt_limit is not _UNSET:
            fields["debt_limit"] = _validate_debt_limit(debt_limit)

        if not fields:
            return self.require_customer(customer_id)
        return self.db.update_customer(customer_id, fields)

    def is_over_debt_limit(self, customer_id: int) -> bool:
        """Whether the customer's outstanding debt exceeds their debt limit.

        The limit is advisory: sales are never blocked on it.
        """
        customer = self.require_customer(customer_id)
        if customer.debt_limit is None:
            return False
        return SettlementTracker(self.db).get_customer_debt(customer_id) > customer.debt_limit

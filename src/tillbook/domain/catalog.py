"""Catalog domain service."""

from typing import Any, Optional

from tillbook.database.base import Database
from tillbook.domain.entities import Product
from tillbook.domain.errors import NotFoundError, ValidationError
from tillbook.utils.money import ZERO, MoneyLike, to_money

_UNSET: Any = object()


def _validate_name(name: Optional[str]) -> str:
    if name is None or not name.strip():
        raise ValidationError("Product name must not be empty")
    return name.strip()


def _validate_count(value: Optional[int], field_name: str) -> Optional[int]:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"{field_name} must be an integer")
    if value < 0:
        raise ValidationError(f"{field_name} must not be negative")
    return value


def _validate_price(value: MoneyLike, field_name: str):
    amount = to_money(value, field_name)
    if amount < ZERO:
        raise ValidationError(f"{field_name} must not be negative")
    return amount


class CatalogService:
    """Service for managing catalog products."""

    def __init__(self, db: Database):
        """Initialize catalog service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_product(
        self,
        name: str,
        price: MoneyLike,
        stock_quantity: int = 0,
        barcode: Optional[str] = None,
        cost: Optional[MoneyLike] = None,
        min_stock: Optional[int] = None,
        category: Optional[str] = None,
        image_url: Optional[str] = None,
    ) -> int:
        """Create a new product.

        Args:
            name: Product name
            price: Unit sale price
            stock_quantity: Units on hand
            barcode: Optional barcode
            cost: Optional unit cost
            min_stock: Optional low-stock threshold
            category: Optional display category
            image_url: Optional image URL

        Returns:
            Product ID

        Raises:
            ValidationError: If any field is out of range
        """
        return self.db.create_product(
            name=_validate_name(name),
            price=_validate_price(price, "price"),
            stock_quantity=_validate_count(stock_quantity, "stock_quantity"),
            barcode=barcode,
            cost=None if cost is None else _validate_price(cost, "cost"),
            min_stock=_validate_count(min_stock, "min_stock"),
            category=category,
            image_url=image_url,
        )

    def get_product(self, product_id: int) -> Optional[Product]:
        """Get product by ID, or None if it does not exist."""
        return self.db.get_product(product_id)

    def require_product(self, product_id: int) -> Product:
        """Get product by ID or raise NotFoundError."""
        product = self.db.get_product(product_id)
        if product is None:
            raise NotFoundError("Product", product_id)
        return product

    def list_products(
        self,
        category: Optional[str] = None,
        is_active: Optional[bool] = None,
        low_stock: bool = False,
        search: Optional[str] = None,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> list[Product]:
        """List products.

        Args:
            category: Only products in this category
            is_active: Only active (True) or inactive (False) products
            low_stock: Only products at or below their min_stock
            search: Case-insensitive name match or exact barcode
            limit: Page size
            offset: Rows to skip
        """
        return self.db.list_products(
            category=category,
            is_active=is_active,
            low_stock=low_stock,
            search=search,
            limit=limit,
            offset=offset,
        )

    def get_low_stock_products(self) -> list[Product]:
        """Products with a min_stock threshold whose stock is at or below it."""
        return self.db.list_products(low_stock=True)

    def update_product(
        self,
        product_id: int,
        name: Optional[str] = _UNSET,
        price: MoneyLike = _UNSET,
        stock_quantity: int = _UNSET,
        barcode: Optional[str] = _UNSET,
        cost: Optional[MoneyLike] = _UNSET,
        min_stock: Optional[int] = _UNSET,
        category: Optional[str] = _UNSET,
        image_url: Optional[str] = _UNSET,
        is_active: bool = _UNSET,
    ) -> Product:
        """Update the given product fields; omitted fields are left as they are.

        Passing None for an optional field (barcode, cost, min_stock, category,
        image_url) clears it.

        Raises:
            NotFoundError: If product doesn't exist
            ValidationError: If a field is out of range
        """
        fields: dict[str, Any] = {}
        if name is not _UNSET:
            fields["name"] = _validate_name(name)
        if price is not _UNSET:
            fields["price"] = _validate_price(price, "price")
        if stock_quantity is not _UNSET:
            if stock_quantity is None:
                raise ValidationError("stock_quantity must not be empty")
            fields["stock_quantity"] = _validate_count(stock_quantity, "stock_quantity")
        if barcode is not _UNSET:
            fields["barcode"] = barcode
        if cost is not _UNSET:
            fields["cost"] = None if cost is None else _validate_price(cost, "cost")
        if min_stock is not _UNSET:
            fields["min_stock"] = _validate_count(min_stock, "min_stock")
        if category is not _UNSET:
            fields["category"] = category
        if image_url is not _UNSET:
            fields["image_url"] = image_url
        if is_active is not _UNSET:
            fields["is_active"] = bool(is_active)

        if not fields:
            return self.require_product(product_id)
        return self.db.update_product(product_id, fields)

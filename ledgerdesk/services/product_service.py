"""
Product Service - catalogue CRUD with per-currency price lists.

The base price is in the organisation base currency; additional prices
cover any other currency a product is sold in.
"""
from __future__ import annotations

import logging
from typing import Sequence

from sqlalchemy import or_
from sqlalchemy.orm import selectinload

from ledgerdesk.core.exceptions import (
    BaseCurrencyNotConfiguredError,
    CodeGenerationError,
    InvalidAdditionalPriceError,
    ProductNotFoundError,
)
from ledgerdesk.models.models import Product, ProductAdditionalPrice
from ledgerdesk.models.schemas import AdditionalPriceIn, ProductCreate, ProductUpdate
from ledgerdesk.services.base import BaseService
from ledgerdesk.services.settings_service import get_app_settings
from ledgerdesk.utils.id_generator import SkuGenerationFailed, generate_unique_sku

logger = logging.getLogger(__name__)


class ProductService(BaseService):
    def _active(self):
        return (
            self._db.query(Product)
            .options(selectinload(Product.additional_prices))
            .filter(Product.deleted_at.is_(None))
        )

    def _require_base_currency(self) -> str:
        row = get_app_settings(self._db)
        if row is None or not row.base_currency:
            raise BaseCurrencyNotConfiguredError()
        return row.base_currency

    @staticmethod
    def _validate_additional_prices(prices: list[AdditionalPriceIn], base_currency: str) -> None:
        seen: set[str] = set()
        for price in prices:
            if price.currency_code == base_currency:
                raise InvalidAdditionalPriceError(
                    f"Additional price currency cannot be the base currency ({base_currency})",
                    price.currency_code,
                )
            if price.currency_code in seen:
                raise InvalidAdditionalPriceError(
                    f"Duplicate additional price for {price.currency_code}",
                    price.currency_code,
                )
            seen.add(price.currency_code)

    def create_product(self, data: ProductCreate) -> Product:
        """Create a product under a freshly generated SKU."""
        base_currency = self._require_base_currency()
        self._validate_additional_prices(data.additional_prices, base_currency)

        result = generate_unique_sku(self._db)
        if isinstance(result, SkuGenerationFailed):
            raise CodeGenerationError("SKU", result.reason)

        product = Product(
            sku=result.sku,
            name=data.name.strip(),
            unit=data.unit,
            base_price=data.base_price,
            status=data.status,
            description=data.description,
        )
        product.additional_prices = [
            ProductAdditionalPrice(currency_code=p.currency_code, price=p.price)
            for p in data.additional_prices
        ]
        self._db.add(product)
        self._db.commit()
        self._db.refresh(product)
        logger.info("Created product: %s (sku=%s)", product.name, product.sku)
        return product

    def get_product(self, sku: str) -> Product:
        product = self._active().filter(Product.sku == sku).first()
        if product is None:
            raise ProductNotFoundError(sku)
        return product

    def list_products(self, status: str | None = None, search: str | None = None) -> Sequence[Product]:
        query = self._active()
        if status:
            query = query.filter(Product.status == status)
        if search:
            term = f"%{search.strip()}%"
            query = query.filter(or_(Product.name.ilike(term), Product.sku.ilike(term)))
        return query.order_by(Product.name).all()

    def update_product(self, sku: str, data: ProductUpdate) -> Product:
        product = self.get_product(sku)
        changes = data.model_dump(exclude_unset=True, exclude={"additional_prices"})
        for field, value in changes.items():
            if value is not None:
                setattr(product, field, value)

        if data.additional_prices is not None:
            base_currency = self._require_base_currency()
            self._validate_additional_prices(data.additional_prices, base_currency)
            product.additional_prices.clear()
            # Flush the orphan deletes before re-inserting the same currencies
            self._db.flush()
            product.additional_prices.extend(
                ProductAdditionalPrice(currency_code=p.currency_code, price=p.price)
                for p in data.additional_prices
            )

        self._db.commit()
        self._db.refresh(product)
        logger.info("Updated product %s", sku)
        return product

    def delete_product(self, sku: str) -> None:
        product = self.get_product(sku)
        product.deleted_at = self._now()
        self._db.commit()
        logger.info("Soft-deleted product %s", sku)

"""Django ORM implementation of the product repository."""

from __future__ import annotations

from typing import Optional

from django.core.exceptions import ValidationError

from modules.catalog.models import Product
from modules.catalog.repositories.interfaces import IProductRepository


class ProductDjangoRepository(IProductRepository):
    """Concrete product repository backed by Django ORM."""

    def get_by_id(self, id: str) -> Optional[Product]:
        """Returns ``None`` for non-existent or malformed IDs."""
        try:
            return Product.objects.select_related("seller").filter(id=id).first()
        except (ValueError, ValidationError):
            return None

"""Product repository interface (read-only for the engine)."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from modules.catalog.models import Product


class IProductRepository(ABC):
    """Repository contract for catalog products."""

    @abstractmethod
    def get_by_id(self, id: str) -> Optional[Product]:
        """Retrieve a product with its seller, ``None`` for unknown ids."""

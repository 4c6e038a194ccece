# app/domain/ports/inventory_repository.py
from abc import ABC, abstractmethod
from typing import List, Optional

from app.domain.models.inventory import InventoryItem


class InventoryRepository(ABC):
    """Puerto para los productos de inventario."""

    @abstractmethod
    def find_by_id(self, item_id: str) -> Optional[InventoryItem]:
        pass

    @abstractmethod
    def list_items(self, search: Optional[str] = None) -> List[InventoryItem]:
        pass

    @abstractmethod
    def save(self, item: InventoryItem) -> InventoryItem:
        pass

    @abstractmethod
    def delete(self, item_id: str) -> None:
        pass

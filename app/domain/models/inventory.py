# app/domain/models/inventory.py
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import date


class InventoryItem(BaseModel):
    """Producto de fumigación en inventario. No participa en la facturación."""
    id: str
    lot: str
    name: str
    quantity: float = Field(ge=0)
    unit: str
    expiration: date

    model_config = ConfigDict(from_attributes=True)

    def is_low_stock(self, threshold: float) -> bool:
        return self.quantity < threshold

    def days_until_expiration(self, today: date) -> int:
        return (self.expiration - today).days

    def is_expiring(self, today: date, within_days: int) -> bool:
        return self.days_until_expiration(today) <= within_days


class InventoryItemView(InventoryItem):
    low_stock: bool = False
    expiring: bool = False
    days_to_expire: Optional[int] = None

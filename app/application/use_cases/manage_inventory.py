# app/application/use_cases/manage_inventory.py
import uuid
from typing import Optional, List, Callable
from datetime import date

from pydantic import BaseModel, Field

from app.domain.exceptions import NotFound
from app.domain.models.caller import CallerIdentity
from app.domain.models.inventory import InventoryItem, InventoryItemView
from app.domain.ports.inventory_repository import InventoryRepository
from .common import require_caller, operation, utc_now


def today_utc() -> date:
    return utc_now().date()


class InventoryItemData(BaseModel):
    lot: str
    name: str
    quantity: float = Field(ge=0)
    unit: str
    expiration: date


class ManageInventoryUseCase:
    """
    Inventario de productos. Marca los productos con poca existencia y los
    que vencen pronto; no afecta la facturación.
    """

    def __init__(
        self,
        inventory_repo: InventoryRepository,
        low_stock_threshold: float = 10,
        expiring_within_days: int = 30,
        today: Callable[[], date] = today_utc
    ):
        self.inventory_repo = inventory_repo
        self.low_stock_threshold = low_stock_threshold
        self.expiring_within_days = expiring_within_days
        self.today = today

    def _view(self, item: InventoryItem, today: date) -> InventoryItemView:
        return InventoryItemView(
            **item.model_dump(),
            low_stock=item.is_low_stock(self.low_stock_threshold),
            expiring=item.is_expiring(today, self.expiring_within_days),
            days_to_expire=item.days_until_expiration(today),
        )

    @operation("listInventory")
    def list(
        self,
        caller: Optional[CallerIdentity],
        search: Optional[str] = None,
        low_stock: bool = False,
        expiring: bool = False
    ) -> List[InventoryItemView]:
        require_caller(caller)
        today = self.today()
        views = [self._view(item, today) for item in self.inventory_repo.list_items(search)]
        if low_stock:
            views = [v for v in views if v.low_stock]
        if expiring:
            views = [v for v in views if v.expiring]
        return views

    @operation("getInventoryItem")
    def get(self, caller: Optional[CallerIdentity], item_id: str) -> InventoryItemView:
        require_caller(caller)
        item = self.inventory_repo.find_by_id(item_id)
        if item is None:
            raise NotFound('El producto especificado no existe.')
        return self._view(item, self.today())

    @operation("createInventoryItem")
    def create(self, caller: Optional[CallerIdentity], data: InventoryItemData) -> InventoryItemView:
        require_caller(caller)
        item = self.inventory_repo.save(InventoryItem(id=uuid.uuid4().hex, **data.model_dump()))
        return self._view(item, self.today())

    @operation("updateInventoryItem")
    def update(self, caller: Optional[CallerIdentity], item_id: str, data: InventoryItemData) -> InventoryItemView:
        require_caller(caller)
        if self.inventory_repo.find_by_id(item_id) is None:
            raise NotFound('El producto especificado no existe.')
        item = self.inventory_repo.save(InventoryItem(id=item_id, **data.model_dump()))
        return self._view(item, self.today())

    @operation("deleteInventoryItem")
    def delete(self, caller: Optional[CallerIdentity], item_id: str) -> None:
        require_caller(caller)
        self.inventory_repo.delete(item_id)

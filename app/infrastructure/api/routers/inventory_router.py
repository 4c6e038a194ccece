# app/infrastructure/api/routers/inventory_router.py
from typing import List, Optional

from fastapi import APIRouter, Depends

from app.application.use_cases.manage_inventory import InventoryItemData, ManageInventoryUseCase
from app.domain.models.caller import CallerIdentity
from app.domain.models.inventory import InventoryItemView
from app.infrastructure.api import dependencies as deps
from app.infrastructure.api.auth import get_caller

router = APIRouter(prefix="/api/v1/inventory", tags=["Inventario"])


@router.get("/", response_model=List[InventoryItemView])
def list_inventory(
    search: Optional[str] = None,
    low_stock: bool = False,
    expiring: bool = False,
    caller: Optional[CallerIdentity] = Depends(get_caller),
    use_case: ManageInventoryUseCase = Depends(deps.get_manage_inventory),
):
    """Productos en inventario; `low_stock` y `expiring` filtran las alertas."""
    return use_case.list(caller, search=search, low_stock=low_stock, expiring=expiring)


@router.post("/", status_code=201, response_model=InventoryItemView)
def create_inventory_item(
    data: InventoryItemData,
    caller: Optional[CallerIdentity] = Depends(get_caller),
    use_case: ManageInventoryUseCase = Depends(deps.get_manage_inventory),
):
    return use_case.create(caller, data)


@router.get("/{item_id}", response_model=InventoryItemView)
def get_inventory_item(
    item_id: str,
    caller: Optional[CallerIdentity] = Depends(get_caller),
    use_case: ManageInventoryUseCase = Depends(deps.get_manage_inventory),
):
    return use_case.get(caller, item_id)


@router.put("/{item_id}", response_model=InventoryItemView)
def update_inventory_item(
    item_id: str,
    data: InventoryItemData,
    caller: Optional[CallerIdentity] = Depends(get_caller),
    use_case: ManageInventoryUseCase = Depends(deps.get_manage_inventory),
):
    return use_case.update(caller, item_id, data)


@router.delete("/{item_id}", status_code=204)
def delete_inventory_item(
    item_id: str,
    caller: Optional[CallerIdentity] = Depends(get_caller),
    use_case: ManageInventoryUseCase = Depends(deps.get_manage_inventory),
):
    use_case.delete(caller, item_id)

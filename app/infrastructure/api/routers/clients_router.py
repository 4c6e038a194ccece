# app/infrastructure/api/routers/clients_router.py
from typing import List, Optional

from fastapi import APIRouter, Depends

from app.application.use_cases.manage_clients import ClientData, ManageClientsUseCase
from app.domain.models.caller import CallerIdentity
from app.domain.models.client import Client
from app.infrastructure.api import dependencies as deps
from app.infrastructure.api.auth import get_caller

router = APIRouter(prefix="/api/v1/clients", tags=["Clientes"])


@router.get("/", response_model=List[Client])
def list_clients(
    caller: Optional[CallerIdentity] = Depends(get_caller),
    use_case: ManageClientsUseCase = Depends(deps.get_manage_clients),
):
    return use_case.list(caller)


@router.post("/", status_code=201, response_model=Client)
def create_client(
    data: ClientData,
    caller: Optional[CallerIdentity] = Depends(get_caller),
    use_case: ManageClientsUseCase = Depends(deps.get_manage_clients),
):
    return use_case.create(caller, data)


@router.get("/{client_id}", response_model=Client)
def get_client(
    client_id: str,
    caller: Optional[CallerIdentity] = Depends(get_caller),
    use_case: ManageClientsUseCase = Depends(deps.get_manage_clients),
):
    return use_case.get(caller, client_id)


@router.put("/{client_id}", response_model=Client)
def update_client(
    client_id: str,
    data: ClientData,
    caller: Optional[CallerIdentity] = Depends(get_caller),
    use_case: ManageClientsUseCase = Depends(deps.get_manage_clients),
):
    return use_case.update(caller, client_id, data)


@router.delete("/{client_id}", status_code=204)
def delete_client(
    client_id: str,
    caller: Optional[CallerIdentity] = Depends(get_caller),
    use_case: ManageClientsUseCase = Depends(deps.get_manage_clients),
):
    use_case.delete(caller, client_id)

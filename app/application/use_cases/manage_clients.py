# app/application/use_cases/manage_clients.py
import uuid
from typing import Optional, List, Callable
from datetime import datetime

from pydantic import BaseModel

from app.domain.exceptions import InvalidArgument, NotFound, FailedPrecondition
from app.domain.models.caller import CallerIdentity
from app.domain.models.client import Client
from app.domain.ports.invoicing_repository import InvoicingRepository
from .common import require_caller, operation, utc_now


class ClientData(BaseModel):
    name: str
    rnc: Optional[str] = None
    address: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None


class ManageClientsUseCase:
    def __init__(self, invoicing_repo: InvoicingRepository, now: Callable[[], datetime] = utc_now):
        self.invoicing_repo = invoicing_repo
        self.now = now

    @operation("listClients")
    def list(self, caller: Optional[CallerIdentity]) -> List[Client]:
        require_caller(caller)
        return self.invoicing_repo.list_clients()

    @operation("getClient")
    def get(self, caller: Optional[CallerIdentity], client_id: str) -> Client:
        require_caller(caller)
        client = self.invoicing_repo.find_client(client_id)
        if client is None:
            raise NotFound('El cliente especificado no existe.')
        return client

    @operation("createClient")
    def create(self, caller: Optional[CallerIdentity], data: ClientData) -> Client:
        require_caller(caller)
        if not data.name.strip():
            raise InvalidArgument('El nombre del cliente es obligatorio.')
        client = Client(id=uuid.uuid4().hex, created_at=self.now(), **data.model_dump())
        return self.invoicing_repo.save_client(client)

    @operation("updateClient")
    def update(self, caller: Optional[CallerIdentity], client_id: str, data: ClientData) -> Client:
        current = self.get(caller, client_id)
        if not data.name.strip():
            raise InvalidArgument('El nombre del cliente es obligatorio.')
        return self.invoicing_repo.save_client(current.model_copy(update=data.model_dump()))

    @operation("deleteClient")
    def delete(self, caller: Optional[CallerIdentity], client_id: str) -> None:
        require_caller(caller)
        # Un cliente con facturas no se borra: el XML y el PDF dependen de él
        if any(i.client_id == client_id for i in self.invoicing_repo.list_invoices()):
            raise FailedPrecondition('El cliente tiene facturas registradas y no puede eliminarse.')
        self.invoicing_repo.delete_client(client_id)

# app/application/use_cases/register_invoice.py
import uuid
from typing import Optional, List, Callable
from datetime import datetime
import datetime as dt

from pydantic import BaseModel

from app.domain.exceptions import InvalidArgument, NotFound, FailedPrecondition
from app.domain.models.caller import CallerIdentity
from app.domain.models.invoice import Invoice, InvoiceItem, InvoiceStatus
from app.domain.ports.invoicing_repository import InvoicingRepository
from .common import require_caller, load_invoice, operation, utc_now


class InvoiceDraft(BaseModel):
    """Datos que captura el usuario al registrar una factura."""
    client_id: str
    items: List[InvoiceItem]
    ncf: Optional[str] = None
    date: Optional[dt.date] = None
    auto_process: bool = True
    auto_send_to_dgii: bool = False


class RegisterInvoiceUseCase:
    """Alta y baja de facturas. Los totales se calculan a partir de las líneas."""

    def __init__(
        self,
        invoicing_repo: InvoicingRepository,
        now: Callable[[], datetime] = utc_now
    ):
        self.invoicing_repo = invoicing_repo
        self.now = now

    @operation("registerInvoice")
    def execute(self, caller: Optional[CallerIdentity], draft: InvoiceDraft) -> Invoice:
        require_caller(caller)
        if not draft.items:
            raise InvalidArgument('La factura debe tener al menos una línea.')
        if self.invoicing_repo.find_client(draft.client_id) is None:
            raise NotFound('El cliente especificado no existe.')

        created_at = self.now()
        invoice = Invoice(
            id=uuid.uuid4().hex,
            invoice_number=self.invoicing_repo.next_invoice_number(created_at.date()),
            ncf=draft.ncf,
            client_id=draft.client_id,
            items=draft.items,
            date=draft.date or created_at.date(),
            status=InvoiceStatus.PENDIENTE,
            auto_process=draft.auto_process,
            auto_send_to_dgii=draft.auto_send_to_dgii,
            created_at=created_at,
        )
        invoice.recompute_totals()
        return self.invoicing_repo.add_invoice(invoice)

    @operation("deleteInvoice")
    def delete(self, caller: Optional[CallerIdentity], invoice_id: str) -> None:
        require_caller(caller)
        invoice = load_invoice(self.invoicing_repo, invoice_id)
        # Una vez enviada a la DGII la factura no se borra; sólo se anula.
        if invoice.status is not InvoiceStatus.PENDIENTE:
            raise FailedPrecondition('Sólo se pueden eliminar facturas pendientes.')
        self.invoicing_repo.delete_invoice(invoice.id)

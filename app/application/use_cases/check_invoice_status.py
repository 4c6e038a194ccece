# app/application/use_cases/check_invoice_status.py
import logging
from typing import Optional, Callable
from datetime import datetime

from app.domain.exceptions import FailedPrecondition
from app.domain.models.caller import CallerIdentity
from app.domain.ports.dgii_gateway import DGIIGatewayProvider
from app.domain.ports.invoicing_repository import InvoicingRepository
from app.domain.services.invoice_status import status_after_check
from .common import require_caller, load_invoice, resolve_test_mode, operation, utc_now

logger = logging.getLogger(__name__)


class CheckInvoiceStatusUseCase:
    def __init__(
        self,
        invoicing_repo: InvoicingRepository,
        gateways: DGIIGatewayProvider,
        now: Callable[[], datetime] = utc_now
    ):
        self.invoicing_repo = invoicing_repo
        self.gateways = gateways
        self.now = now

    @operation("checkInvoiceStatus")
    def execute(self, caller: Optional[CallerIdentity], invoice_id: str, test_mode: Optional[bool] = None) -> dict:
        """
        Consulta en la DGII el resultado de una factura enviada y actualiza
        su estado: Aceptado -> aceptada, Rechazado -> rechazada, cualquier
        otra respuesta la deja en enviada.
        """
        require_caller(caller, 'El usuario debe estar autenticado para verificar el estado de facturas.')
        invoice = load_invoice(self.invoicing_repo, invoice_id)
        if not invoice.track_id:
            raise FailedPrecondition('La factura no ha sido enviada a la DGII.')

        test_mode = resolve_test_mode(self.invoicing_repo, test_mode)
        result = self.gateways.for_mode(test_mode).check_status(invoice.track_id)
        new_status = status_after_check(invoice.status, result.status)
        logger.info(f"[{invoice.id}] DGII respondió '{result.status}'. Estado: {invoice.status.value} -> {new_status.value}")

        self.invoicing_repo.update_invoice(
            invoice.id,
            status=new_status,
            dgii_status_date=self.now(),
            dgii_status_response={"status": result.status, "message": result.message, **result.raw},
        )

        return {
            "success": True,
            "status": result.status,
            "invoiceStatus": new_status.value,
            "message": result.message,
            "data": result.raw
        }

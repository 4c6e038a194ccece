# app/application/use_cases/process_new_invoice.py
import logging

from app.domain.models.caller import SYSTEM_CALLER
from app.domain.models.invoice import InvoiceStatus
from app.domain.ports.invoicing_repository import InvoicingRepository
from .generate_invoice_pdf import GenerateInvoicePDFUseCase
from .send_invoice_to_dgii import SendInvoiceToDGIIUseCase

logger = logging.getLogger(__name__)


class ProcessNewInvoiceUseCase:
    """
    Procesamiento automático que sigue a la creación de una factura: genera
    el PDF y, si la factura lo pide, la envía a la DGII en modo prueba.
    """
    def __init__(
        self,
        invoicing_repo: InvoicingRepository,
        generate_pdf: GenerateInvoicePDFUseCase,
        send_to_dgii: SendInvoiceToDGIIUseCase
    ):
        self.invoicing_repo = invoicing_repo
        self.generate_pdf = generate_pdf
        self.send_to_dgii = send_to_dgii

    def execute(self, invoice_id: str) -> dict:
        try:
            invoice = self.invoicing_repo.find_invoice(invoice_id)
            if invoice is None:
                logger.warning(f"[{invoice_id}] La factura no existe. No hay nada que procesar.")
                return {"success": False, "error": "La factura especificada no existe."}

            if invoice.status is not InvoiceStatus.PENDIENTE or not invoice.auto_process:
                logger.info(f"[{invoice_id}] Factura no apta para procesamiento automático. Omitiendo.")
                return {"success": True, "skipped": True}

            pdf_result = self.generate_pdf.execute(SYSTEM_CALLER, invoice_id)
            logger.info(f"[{invoice_id}] PDF generado automáticamente: {pdf_result['pdfUrl']}")

            result = {"success": True, "pdfUrl": pdf_result["pdfUrl"]}
            if invoice.auto_send_to_dgii:
                dgii_result = self.send_to_dgii.execute(SYSTEM_CALLER, invoice_id, test_mode=True)
                logger.info(f"[{invoice_id}] Factura enviada automáticamente a la DGII: {dgii_result['trackId']}")
                result["trackId"] = dgii_result["trackId"]
            return result

        except Exception as e:
            logger.error(f"[{invoice_id}] Error en procesamiento automático de factura: {e}", exc_info=True)
            return {"success": False, "error": str(e)}

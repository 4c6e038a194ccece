# app/application/use_cases/generate_invoice_pdf.py
import logging
import time
from typing import Optional, Callable
from datetime import datetime

from app.domain.exceptions import NotFound
from app.domain.models.caller import CallerIdentity
from app.domain.ports.file_storage import FileStorage, invoice_pdf_path
from app.domain.ports.invoicing_repository import InvoicingRepository
from app.domain.ports.pdf_renderer import PDFRenderer
from .common import require_caller, load_invoice, operation, utc_now

logger = logging.getLogger(__name__)


def upload_with_retry(
    file_storage: FileStorage,
    path: str,
    content: bytes,
    content_type: str,
    attempts: int = 3,
    delay: float = 1.0,
    sleep: Callable[[float], None] = time.sleep
) -> str:
    """Sube el archivo reintentando hasta `attempts` veces. Relanza el último error."""
    for attempt in range(1, attempts + 1):
        try:
            url = file_storage.upload(path, content, content_type)
            logger.info(f"{path} subido exitosamente en el intento {attempt}")
            return url
        except Exception as e:
            logger.warning(f"Error al subir {path} (intento {attempt}/{attempts}): {e}")
            if attempt >= attempts:
                raise
            sleep(delay)


class GenerateInvoicePDFUseCase:
    def __init__(
        self,
        invoicing_repo: InvoicingRepository,
        file_storage: FileStorage,
        renderer: PDFRenderer,
        upload_attempts: int = 3,
        retry_delay: float = 1.0,
        sleep: Callable[[float], None] = time.sleep,
        now: Callable[[], datetime] = utc_now
    ):
        self.invoicing_repo = invoicing_repo
        self.file_storage = file_storage
        self.renderer = renderer
        self.upload_attempts = upload_attempts
        self.retry_delay = retry_delay
        self.sleep = sleep
        self.now = now

    @operation("generateInvoicePDF")
    def execute(self, caller: Optional[CallerIdentity], invoice_id: str) -> dict:
        require_caller(caller, 'El usuario debe estar autenticado para generar PDFs.')
        invoice = load_invoice(self.invoicing_repo, invoice_id)

        client = self.invoicing_repo.find_client(invoice.client_id)
        if client is None:
            raise NotFound('El cliente especificado no existe.')
        company = self.invoicing_repo.get_company()

        logger.info(f"[{invoice.id}] Iniciando generación de PDF...")
        pdf_content = self.renderer.render(invoice, company, client)

        pdf_url = upload_with_retry(
            self.file_storage,
            invoice_pdf_path(invoice.id),
            pdf_content,
            'application/pdf',
            attempts=self.upload_attempts,
            delay=self.retry_delay,
            sleep=self.sleep,
        )

        self.invoicing_repo.update_invoice(invoice.id, pdf_url=pdf_url, pdf_generated_date=self.now())
        logger.info(f"[{invoice.id}] Factura actualizada con URL del PDF")

        return {
            "success": True,
            "pdfUrl": pdf_url,
            "message": 'PDF generado correctamente'
        }

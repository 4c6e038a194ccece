# app/application/use_cases/send_invoice_email.py
import logging
from typing import Optional, Callable
from datetime import datetime

from app.domain.exceptions import InvalidArgument, FailedPrecondition
from app.domain.models.caller import CallerIdentity
from app.domain.ports.file_storage import FileStorage, invoice_pdf_path
from app.domain.ports.invoicing_repository import InvoicingRepository
from app.domain.ports.notification import Notification
from .common import require_caller, load_invoice, operation, utc_now

logger = logging.getLogger(__name__)

DEFAULT_MESSAGE = 'Adjunto encontrará su factura electrónica. Gracias por su preferencia.'


class SendInvoiceEmailUseCase:
    def __init__(
        self,
        invoicing_repo: InvoicingRepository,
        file_storage: FileStorage,
        notification_service: Notification,
        now: Callable[[], datetime] = utc_now
    ):
        self.invoicing_repo = invoicing_repo
        self.file_storage = file_storage
        self.notification_service = notification_service
        self.now = now

    @operation("sendInvoiceEmail")
    def execute(
        self,
        caller: Optional[CallerIdentity],
        invoice_id: str,
        recipient_email: str,
        subject: Optional[str] = None,
        message: Optional[str] = None
    ) -> dict:
        require_caller(caller, 'El usuario debe estar autenticado para enviar correos.')
        if not invoice_id or not recipient_email:
            raise InvalidArgument('Se requiere ID de factura y correo del destinatario.')
        if '@' not in recipient_email:
            raise InvalidArgument(f'Correo del destinatario inválido: {recipient_email}')

        invoice = load_invoice(self.invoicing_repo, invoice_id)
        company = self.invoicing_repo.get_company()

        try:
            pdf_content = self.file_storage.download(invoice_pdf_path(invoice.id))
        except FileNotFoundError as e:
            raise FailedPrecondition('La factura no tiene un PDF generado.') from e

        self.notification_service.send_invoice_email(
            recipient=recipient_email,
            subject=subject or f'Factura Electrónica #{invoice.display_number}',
            message=message or DEFAULT_MESSAGE,
            invoice=invoice,
            company=company,
            pdf_filename=f'Factura_{invoice.display_number}.pdf',
            pdf_content=pdf_content,
        )

        self.invoicing_repo.update_invoice(
            invoice.id,
            email_sent=True,
            email_sent_date=self.now(),
            email_recipient=recipient_email,
        )
        return {"success": True, "message": 'Correo enviado correctamente'}

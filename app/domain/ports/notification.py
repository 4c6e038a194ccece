# app/domain/ports/notification.py
from abc import ABC, abstractmethod
from typing import Optional
from app.domain.models.invoice import Invoice
from app.domain.models.company import CompanySettings


class Notification(ABC):
    """Puerto para el envío de facturas por correo (Gmail)."""
    @abstractmethod
    def send_invoice_email(
        self,
        recipient: str,
        subject: str,
        message: str,
        invoice: Invoice,
        company: Optional[CompanySettings],
        pdf_filename: str,
        pdf_content: bytes
    ) -> dict:
        """
        Compone y envía el correo con el PDF de la factura adjunto.
        Retorna la respuesta del proveedor de correo.
        """
        pass

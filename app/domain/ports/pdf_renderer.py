# app/domain/ports/pdf_renderer.py
from abc import ABC, abstractmethod
from typing import Optional

from app.domain.models.invoice import Invoice
from app.domain.models.client import Client
from app.domain.models.company import CompanySettings


class PDFRenderer(ABC):
    """Puerto para generar la representación imprimible de la factura."""
    @abstractmethod
    def render(self, invoice: Invoice, company: Optional[CompanySettings], client: Client) -> bytes:
        pass

# app/domain/ports/invoicing_repository.py
from abc import ABC, abstractmethod
from typing import List, Optional
from datetime import date

from app.domain.models.invoice import Invoice, InvoiceEvent
from app.domain.models.client import Client
from app.domain.models.company import CompanySettings, EcfConfig
from app.domain.models.certificate import Certificate


class InvoicingRepository(ABC):
    """
    Contrato del almacén de documentos: facturas, clientes, configuración
    de la empresa y certificado. Las escrituras concurrentes sobre la misma
    factura no se reconcilian; gana la última.
    """

    # --- Facturas ---
    @abstractmethod
    def find_invoice(self, invoice_id: str) -> Optional[Invoice]:
        pass

    @abstractmethod
    def list_invoices(self, status: Optional[str] = None, search: Optional[str] = None) -> List[Invoice]:
        pass

    @abstractmethod
    def add_invoice(self, invoice: Invoice) -> Invoice:
        pass

    @abstractmethod
    def update_invoice(self, invoice_id: str, **fields) -> Invoice:
        """Actualiza sólo los campos indicados y devuelve la factura resultante."""
        pass

    @abstractmethod
    def next_invoice_number(self, day: date) -> str:
        """
        Genera un número de factura único y secuencial con el formato
        FAC-YYYYMMDD-XXX. El contador XXX se reinicia cada día.
        """
        pass

    @abstractmethod
    def delete_invoice(self, invoice_id: str) -> None:
        pass

    @abstractmethod
    def add_invoice_event(self, event: InvoiceEvent) -> None:
        pass

    @abstractmethod
    def list_invoice_events(self, invoice_id: str) -> List[InvoiceEvent]:
        pass

    # --- Clientes ---
    @abstractmethod
    def find_client(self, client_id: str) -> Optional[Client]:
        pass

    @abstractmethod
    def list_clients(self) -> List[Client]:
        pass

    @abstractmethod
    def save_client(self, client: Client) -> Client:
        """Crea o reemplaza el cliente."""
        pass

    @abstractmethod
    def delete_client(self, client_id: str) -> None:
        pass

    # --- Configuración ---
    @abstractmethod
    def get_company(self) -> Optional[CompanySettings]:
        pass

    @abstractmethod
    def save_company(self, company: CompanySettings) -> CompanySettings:
        pass

    @abstractmethod
    def get_certificate(self) -> Optional[Certificate]:
        pass

    @abstractmethod
    def save_certificate(self, certificate: Certificate) -> None:
        pass

    @abstractmethod
    def get_ecf_config(self) -> Optional[EcfConfig]:
        pass

    @abstractmethod
    def save_ecf_config(self, ecf_config: EcfConfig) -> EcfConfig:
        pass

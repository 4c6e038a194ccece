# app/domain/models/invoice.py
from pydantic import BaseModel, Field, ConfigDict, computed_field
from typing import Optional, List, Dict, Any
from datetime import datetime
import datetime as dt
from decimal import Decimal, ROUND_HALF_UP
from enum import Enum


def round_money(value) -> float:
    """Redondea a centavos (half-up), igual que se imprime en la factura."""
    return float(Decimal(str(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


class InvoiceStatus(str, Enum):
    PENDIENTE = "pendiente"
    ENVIADA = "enviada"
    ACEPTADA = "aceptada"
    RECHAZADA = "rechazada"
    ANULADA = "anulada"


class InvoiceItem(BaseModel):
    description: str
    quantity: float = Field(gt=0)
    price: float = Field(ge=0)
    # Tasa de ITBIS en porcentaje
    tax: float = Field(default=18, ge=0)

    @computed_field
    @property
    def subtotal(self) -> float:
        return round_money(self.quantity * self.price)

    @computed_field
    @property
    def itbis(self) -> float:
        return round_money(self.quantity * self.price * self.tax / 100)


class Invoice(BaseModel):
    """
    Factura tal como se guarda en el almacén de documentos. Los totales se
    calculan a partir de las líneas al registrarla y luego sólo cambian los
    campos de seguimiento (DGII, PDF, correo y anulación).
    """
    id: str
    invoice_number: Optional[str] = None
    ncf: Optional[str] = None
    client_id: str
    items: List[InvoiceItem] = Field(default_factory=list)
    subtotal: float = 0.0
    tax: float = 0.0
    total: float = 0.0
    date: Optional[dt.date] = None
    status: InvoiceStatus = InvoiceStatus.PENDIENTE

    # --- Automatización al crear ---
    auto_process: bool = True
    auto_send_to_dgii: bool = False

    # --- Seguimiento DGII ---
    track_id: Optional[str] = None
    xml_url: Optional[str] = None
    dgii_submission_date: Optional[datetime] = None
    dgii_response: Optional[Dict[str, Any]] = None
    dgii_status_date: Optional[datetime] = None
    dgii_status_response: Optional[Dict[str, Any]] = None

    # --- Artefactos y correo ---
    pdf_url: Optional[str] = None
    pdf_generated_date: Optional[datetime] = None
    email_sent: bool = False
    email_sent_date: Optional[datetime] = None
    email_recipient: Optional[str] = None

    # --- Anulación ---
    cancellation_reason_code: Optional[str] = None
    cancellation_reason: Optional[str] = None
    cancellation_date: Optional[datetime] = None
    cancellation_track_id: Optional[str] = None

    created_at: Optional[datetime] = None

    model_config = ConfigDict(
        from_attributes=True,
        use_enum_values=False
    )

    @property
    def display_number(self) -> str:
        return self.invoice_number or self.id

    def recompute_totals(self) -> None:
        self.subtotal = round_money(sum(item.quantity * item.price for item in self.items))
        self.tax = round_money(sum(item.quantity * item.price * item.tax / 100 for item in self.items))
        self.total = round_money(self.subtotal + self.tax)


class InvoiceEvent(BaseModel):
    """Registro de auditoría de acciones sobre una factura."""
    invoice_id: str
    type: str
    timestamp: datetime
    user_id: Optional[str] = None
    details: Dict[str, Any] = Field(default_factory=dict)

    model_config = ConfigDict(from_attributes=True)

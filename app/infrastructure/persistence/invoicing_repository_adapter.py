from sqlalchemy.orm import Session
from sqlalchemy import or_
from typing import List, Optional, Dict, Any
from datetime import date, datetime, timezone

from app.domain.exceptions import NotFound
from app.domain.ports.invoicing_repository import InvoicingRepository
from app.domain.models.invoice import Invoice, InvoiceEvent, InvoiceStatus
from app.domain.models.client import Client
from app.domain.models.company import CompanySettings, EcfConfig
from app.domain.models.certificate import Certificate
from .models import Factura, Cliente, Configuracion, EventoFactura

# Campo del dominio -> columna de la tabla 'facturas'
INVOICE_COLUMNS = {
    "id": "id",
    "invoice_number": "numero",
    "ncf": "ncf",
    "client_id": "cliente_id",
    "items": "items",
    "subtotal": "subtotal",
    "tax": "itbis",
    "total": "total",
    "date": "fecha",
    "status": "estado",
    "auto_process": "procesar_automaticamente",
    "auto_send_to_dgii": "enviar_dgii_automaticamente",
    "track_id": "track_id",
    "xml_url": "url_xml",
    "dgii_submission_date": "fecha_envio_dgii",
    "dgii_response": "respuesta_dgii",
    "dgii_status_date": "fecha_estado_dgii",
    "dgii_status_response": "respuesta_estado_dgii",
    "pdf_url": "url_pdf",
    "pdf_generated_date": "fecha_generacion_pdf",
    "email_sent": "correo_enviado",
    "email_sent_date": "fecha_correo",
    "email_recipient": "destinatario_correo",
    "cancellation_reason_code": "codigo_motivo_anulacion",
    "cancellation_reason": "motivo_anulacion",
    "cancellation_date": "fecha_anulacion",
    "cancellation_track_id": "track_id_anulacion",
    "created_at": "creado_en",
}

CLIENT_COLUMNS = {
    "id": "id",
    "name": "nombre",
    "rnc": "rnc",
    "address": "direccion",
    "phone": "telefono",
    "email": "correo",
    "created_at": "creado_en",
}

KEY_COMPANY = "company"
KEY_CERTIFICATE = "certificate"
KEY_ECF = "ecf"


def _column_value(field: str, value: Any) -> Any:
    if field == "status" and value is not None:
        return InvoiceStatus(value).value
    if field == "items" and value is not None:
        return [
            {"description": i.description, "quantity": i.quantity, "price": i.price, "tax": i.tax}
            if hasattr(i, "description") else dict(i)
            for i in value
        ]
    return value


class SQLAlchemyInvoicingRepository(InvoicingRepository):
    def __init__(self, db: Session):
        self.db = db

    # --- Conversión entre filas y modelos de dominio ---

    def _to_invoice(self, row: Factura) -> Invoice:
        data = {field: getattr(row, column) for field, column in INVOICE_COLUMNS.items()}
        data["items"] = data["items"] or []
        return Invoice.model_validate(data)

    def _to_client(self, row: Cliente) -> Client:
        return Client.model_validate({field: getattr(row, column) for field, column in CLIENT_COLUMNS.items()})

    def _get_invoice_row(self, invoice_id: str) -> Factura:
        row = self.db.query(Factura).filter(Factura.id == invoice_id).first()
        if row is None:
            raise NotFound("La factura especificada no existe.")
        return row

    def _get_document(self, key: str) -> Optional[Dict[str, Any]]:
        row = self.db.query(Configuracion).filter(Configuracion.clave == key).first()
        return row.datos if row else None

    def _put_document(self, key: str, data: Dict[str, Any]) -> None:
        row = self.db.query(Configuracion).filter(Configuracion.clave == key).first()
        if row is None:
            self.db.add(Configuracion(clave=key, datos=data))
        else:
            row.datos = data
        self.db.flush()

    # --- Facturas ---

    def find_invoice(self, invoice_id: str) -> Optional[Invoice]:
        row = self.db.query(Factura).filter(Factura.id == invoice_id).first()
        return self._to_invoice(row) if row else None

    def list_invoices(self, status: Optional[str] = None, search: Optional[str] = None) -> List[Invoice]:
        query = self.db.query(Factura).outerjoin(Cliente, Cliente.id == Factura.cliente_id)
        if status and status != "all":
            query = query.filter(Factura.estado == status)
        if search:
            pattern = f"%{search}%"
            query = query.filter(or_(
                Factura.numero.ilike(pattern),
                Factura.ncf.ilike(pattern),
                Factura.estado.ilike(pattern),
                Cliente.nombre.ilike(pattern),
            ))
        rows = query.order_by(Factura.fecha.desc(), Factura.id).all()
        return [self._to_invoice(row) for row in rows]

    def add_invoice(self, invoice: Invoice) -> Invoice:
        if invoice.created_at is None:
            invoice = invoice.model_copy(update={"created_at": datetime.now(timezone.utc)})
        row = Factura(**{
            column: _column_value(field, getattr(invoice, field))
            for field, column in INVOICE_COLUMNS.items()
        })
        self.db.add(row)
        self.db.flush()
        return self._to_invoice(row)

    def update_invoice(self, invoice_id: str, **fields) -> Invoice:
        row = self._get_invoice_row(invoice_id)
        for field, value in fields.items():
            if field not in INVOICE_COLUMNS or field == "id":
                raise ValueError(f"Campo de factura desconocido: {field}")
            setattr(row, INVOICE_COLUMNS[field], _column_value(field, value))
        self.db.flush()
        return self._to_invoice(row)

    def next_invoice_number(self, day: date) -> str:
        id_prefix = f"FAC-{day.strftime('%Y%m%d')}-"

        # El contador se compara como número: "-1000" ordena antes que "-999" como texto
        numbers_today = self.db.query(Factura.numero)\
            .filter(Factura.numero.like(f"{id_prefix}%"))\
            .all()
        counters = [int(n.rsplit('-', 1)[-1]) for (n,) in numbers_today if n.rsplit('-', 1)[-1].isdigit()]

        next_number = max(counters) + 1 if counters else 1
        return f"{id_prefix}{next_number:03d}"

    def delete_invoice(self, invoice_id: str) -> None:
        row = self._get_invoice_row(invoice_id)
        self.db.delete(row)
        self.db.flush()

    def add_invoice_event(self, event: InvoiceEvent) -> None:
        self.db.add(EventoFactura(
            factura_id=event.invoice_id,
            tipo=event.type,
            fecha=event.timestamp,
            usuario_id=event.user_id,
            detalles=event.details,
        ))
        self.db.flush()

    def list_invoice_events(self, invoice_id: str) -> List[InvoiceEvent]:
        rows = self.db.query(EventoFactura)\
            .filter(EventoFactura.factura_id == invoice_id)\
            .order_by(EventoFactura.id)\
            .all()
        return [
            InvoiceEvent(invoice_id=r.factura_id, type=r.tipo, timestamp=r.fecha,
                         user_id=r.usuario_id, details=r.detalles or {})
            for r in rows
        ]

    # --- Clientes ---

    def find_client(self, client_id: str) -> Optional[Client]:
        if not client_id:
            return None
        row = self.db.query(Cliente).filter(Cliente.id == client_id).first()
        return self._to_client(row) if row else None

    def list_clients(self) -> List[Client]:
        return [self._to_client(row) for row in self.db.query(Cliente).order_by(Cliente.nombre).all()]

    def save_client(self, client: Client) -> Client:
        row = self.db.query(Cliente).filter(Cliente.id == client.id).first()
        if row is None:
            row = Cliente(id=client.id, creado_en=client.created_at or datetime.now(timezone.utc))
            self.db.add(row)
        for field, column in CLIENT_COLUMNS.items():
            if field in ("id", "created_at"):
                continue
            setattr(row, column, getattr(client, field))
        self.db.flush()
        return self._to_client(row)

    def delete_client(self, client_id: str) -> None:
        row = self.db.query(Cliente).filter(Cliente.id == client_id).first()
        if row is None:
            raise NotFound("El cliente especificado no existe.")
        self.db.delete(row)
        self.db.flush()

    # --- Configuración ---

    def get_company(self) -> Optional[CompanySettings]:
        data = self._get_document(KEY_COMPANY)
        return CompanySettings.model_validate(data) if data is not None else None

    def save_company(self, company: CompanySettings) -> CompanySettings:
        self._put_document(KEY_COMPANY, company.model_dump(mode="json"))
        return company

    def get_certificate(self) -> Optional[Certificate]:
        data = self._get_document(KEY_CERTIFICATE)
        return Certificate.model_validate(data) if data is not None else None

    def save_certificate(self, certificate: Certificate) -> None:
        self._put_document(KEY_CERTIFICATE, certificate.model_dump(mode="json"))

    def get_ecf_config(self) -> Optional[EcfConfig]:
        data = self._get_document(KEY_ECF)
        return EcfConfig.model_validate(data) if data is not None else None

    def save_ecf_config(self, ecf_config: EcfConfig) -> EcfConfig:
        self._put_document(KEY_ECF, ecf_config.model_dump(mode="json"))
        return ecf_config

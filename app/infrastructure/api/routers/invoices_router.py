# app/infrastructure/api/routers/invoices_router.py
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.orm import Session

from app.application.use_cases.cancel_invoice import CancelInvoiceUseCase
from app.application.use_cases.check_invoice_status import CheckInvoiceStatusUseCase
from app.application.use_cases.common import require_caller, load_invoice
from app.application.use_cases.generate_invoice_pdf import GenerateInvoicePDFUseCase
from app.application.use_cases.register_invoice import InvoiceDraft, RegisterInvoiceUseCase
from app.application.use_cases.send_invoice_email import SendInvoiceEmailUseCase
from app.application.use_cases.send_invoice_to_dgii import SendInvoiceToDGIIUseCase
from app.domain.models.caller import CallerIdentity
from app.domain.models.invoice import Invoice, InvoiceEvent
from app.domain.ports.invoicing_repository import InvoicingRepository
from app.infrastructure.api import dependencies as deps
from app.infrastructure.api.auth import get_caller

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/invoices", tags=["Facturas"])


class SendEmailRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    recipient_email: str = Field(alias="recipientEmail")
    subject: Optional[str] = None
    message: Optional[str] = None


class TestModeRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    test_mode: Optional[bool] = Field(default=None, alias="testMode")


class CancelRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    reason_code: Optional[str] = Field(default=None, alias="reasonCode")
    reason: Optional[str] = None


# --- Registro y consulta ---

@router.get("/", response_model=List[Invoice], summary="Listar facturas")
def list_invoices(
    status: Optional[str] = None,
    search: Optional[str] = None,
    caller: Optional[CallerIdentity] = Depends(get_caller),
    repo: InvoicingRepository = Depends(deps.get_invoicing_repo),
):
    require_caller(caller)
    return repo.list_invoices(status=status, search=search)


@router.post("/", status_code=201, response_model=Invoice, summary="Registrar una factura")
def create_invoice(
    draft: InvoiceDraft,
    caller: Optional[CallerIdentity] = Depends(get_caller),
    use_case: RegisterInvoiceUseCase = Depends(deps.get_register_invoice),
    db: Session = Depends(deps.get_db),
    dispatch: deps.InvoiceDispatcher = Depends(deps.get_invoice_dispatcher),
):
    """
    Guarda la factura y lanza en segundo plano su procesamiento automático
    (PDF y, si se pidió, envío a la DGII).
    """
    invoice = use_case.execute(caller, draft)
    # El worker debe encontrar la factura ya confirmada
    db.commit()
    dispatch(invoice.id)
    logger.info(f"[{invoice.id}] Factura {invoice.invoice_number} registrada y encolada para procesamiento")
    return invoice


@router.get("/{invoice_id}", response_model=Invoice, summary="Obtener una factura")
def get_invoice(
    invoice_id: str,
    caller: Optional[CallerIdentity] = Depends(get_caller),
    repo: InvoicingRepository = Depends(deps.get_invoicing_repo),
):
    require_caller(caller)
    return load_invoice(repo, invoice_id)


@router.get("/{invoice_id}/events", response_model=List[InvoiceEvent], summary="Historial de la factura")
def list_invoice_events(
    invoice_id: str,
    caller: Optional[CallerIdentity] = Depends(get_caller),
    repo: InvoicingRepository = Depends(deps.get_invoicing_repo),
):
    require_caller(caller)
    load_invoice(repo, invoice_id)
    return repo.list_invoice_events(invoice_id)


@router.delete("/{invoice_id}", status_code=204, summary="Eliminar una factura pendiente")
def delete_invoice(
    invoice_id: str,
    caller: Optional[CallerIdentity] = Depends(get_caller),
    use_case: RegisterInvoiceUseCase = Depends(deps.get_register_invoice),
):
    use_case.delete(caller, invoice_id)


# --- Operaciones sobre la factura ---

@router.post("/{invoice_id}/email", summary="Enviar la factura por correo")
def send_invoice_email(
    invoice_id: str,
    body: SendEmailRequest,
    caller: Optional[CallerIdentity] = Depends(get_caller),
    use_case: SendInvoiceEmailUseCase = Depends(deps.get_send_email),
):
    return use_case.execute(caller, invoice_id, body.recipient_email, body.subject, body.message)


@router.post("/{invoice_id}/dgii/send", summary="Enviar la factura a la DGII")
def send_invoice_to_dgii(
    invoice_id: str,
    body: Optional[TestModeRequest] = None,
    caller: Optional[CallerIdentity] = Depends(get_caller),
    use_case: SendInvoiceToDGIIUseCase = Depends(deps.get_send_to_dgii),
):
    return use_case.execute(caller, invoice_id, test_mode=body.test_mode if body else None)


@router.post("/{invoice_id}/pdf", summary="Generar el PDF de la factura")
def generate_invoice_pdf(
    invoice_id: str,
    caller: Optional[CallerIdentity] = Depends(get_caller),
    use_case: GenerateInvoicePDFUseCase = Depends(deps.get_generate_pdf),
):
    return use_case.execute(caller, invoice_id)


@router.post("/{invoice_id}/dgii/status", summary="Consultar el estado de la factura en la DGII")
def check_invoice_status(
    invoice_id: str,
    body: Optional[TestModeRequest] = None,
    caller: Optional[CallerIdentity] = Depends(get_caller),
    use_case: CheckInvoiceStatusUseCase = Depends(deps.get_check_invoice_status),
):
    return use_case.execute(caller, invoice_id, test_mode=body.test_mode if body else None)


@router.post("/{invoice_id}/cancel", summary="Anular la factura ante la DGII")
def cancel_invoice(
    invoice_id: str,
    body: CancelRequest,
    caller: Optional[CallerIdentity] = Depends(get_caller),
    use_case: CancelInvoiceUseCase = Depends(deps.get_cancel_invoice),
):
    return use_case.execute(caller, invoice_id, body.reason_code, body.reason)

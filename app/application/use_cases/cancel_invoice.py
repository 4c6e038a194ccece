# app/application/use_cases/cancel_invoice.py
import logging
from typing import Optional, Callable
from datetime import datetime

from app.domain.exceptions import FailedPrecondition
from app.domain.models.caller import CallerIdentity
from app.domain.models.company import CompanySettings
from app.domain.models.invoice import InvoiceStatus, InvoiceEvent
from app.domain.ports.dgii_gateway import DGIIGatewayProvider
from app.domain.ports.invoicing_repository import InvoicingRepository
from app.domain.ports.xml_signer import XMLSigner
from app.domain.services.ecf_xml import build_cancellation_xml, validate_cancellation_reason
from app.domain.services.invoice_status import ensure_can_cancel
from app.domain.ports.certificate_vault import CertificateVault
from .common import require_caller, load_invoice, resolve_test_mode, operation, utc_now

logger = logging.getLogger(__name__)


class CancelInvoiceUseCase:
    """
    Anula ante la DGII una factura aceptada. Es la única modificación
    permitida una vez que la factura fue aceptada.
    """
    def __init__(
        self,
        invoicing_repo: InvoicingRepository,
        signer: XMLSigner,
        vault: CertificateVault,
        gateways: DGIIGatewayProvider,
        now: Callable[[], datetime] = utc_now
    ):
        self.invoicing_repo = invoicing_repo
        self.signer = signer
        self.vault = vault
        self.gateways = gateways
        self.now = now

    @operation("cancelInvoice")
    def execute(
        self,
        caller: Optional[CallerIdentity],
        invoice_id: str,
        reason_code: str,
        reason: Optional[str] = None,
        test_mode: Optional[bool] = None
    ) -> dict:
        caller = require_caller(caller)
        validate_cancellation_reason(reason_code, reason)
        invoice = load_invoice(self.invoicing_repo, invoice_id, 'Factura no encontrada')

        ensure_can_cancel(invoice.status)
        if not invoice.ncf:
            raise FailedPrecondition('La factura no tiene un NCF válido')

        certificate = self.invoicing_repo.get_certificate()
        if certificate is None:
            raise FailedPrecondition('No hay un certificado digital configurado')

        company = self.invoicing_repo.get_company() or CompanySettings()
        issued_at = self.now()
        cancellation_xml = build_cancellation_xml(invoice, company, reason_code, reason, issued_at)

        certificate_pem, private_key_pem = self.vault.open(certificate)
        signed_xml = self.signer.sign(cancellation_xml, certificate_pem, private_key_pem, certificate.password)
        if not self.signer.verify(signed_xml, certificate_pem):
            raise FailedPrecondition('La firma del XML de anulación no es válida.')

        test_mode = resolve_test_mode(self.invoicing_repo, test_mode)
        result = self.gateways.for_mode(test_mode).cancel(signed_xml)
        logger.info(f"[{invoice.id}] Anulación enviada a la DGII. trackId={result.track_id}")

        self.invoicing_repo.update_invoice(
            invoice.id,
            status=InvoiceStatus.ANULADA,
            cancellation_date=issued_at,
            cancellation_reason=reason,
            cancellation_reason_code=reason_code,
            cancellation_track_id=result.track_id,
        )
        self.invoicing_repo.add_invoice_event(InvoiceEvent(
            invoice_id=invoice.id,
            type='cancellation',
            timestamp=issued_at,
            user_id=caller.uid,
            details={"reasonCode": reason_code, "reason": reason, "trackId": result.track_id},
        ))

        return {
            "success": True,
            "message": 'Factura anulada correctamente',
            "trackId": result.track_id
        }

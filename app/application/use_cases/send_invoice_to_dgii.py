# app/application/use_cases/send_invoice_to_dgii.py
import logging
from typing import Optional, Callable
from datetime import datetime

from app.domain.exceptions import InvalidArgument, NotFound, FailedPrecondition
from app.domain.models.caller import CallerIdentity
from app.domain.models.invoice import InvoiceStatus, InvoiceEvent
from app.domain.ports.dgii_gateway import DGIIGatewayProvider
from app.domain.ports.file_storage import FileStorage, invoice_xml_path
from app.domain.ports.invoicing_repository import InvoicingRepository
from app.domain.ports.xml_signer import XMLSigner
from app.domain.services.ecf_xml import build_invoice_xml, validate_xml, xml_filename
from app.domain.services.invoice_status import ensure_can_submit
from app.domain.ports.certificate_vault import CertificateVault
from .common import require_caller, load_invoice, resolve_test_mode, operation, utc_now

logger = logging.getLogger(__name__)


class SendInvoiceToDGIIUseCase:
    """
    Genera el e-CF de una factura pendiente, lo firma, guarda el XML firmado
    y lo envía a la DGII (o al simulador en modo prueba).
    """
    def __init__(
        self,
        invoicing_repo: InvoicingRepository,
        file_storage: FileStorage,
        signer: XMLSigner,
        vault: CertificateVault,
        gateways: DGIIGatewayProvider,
        now: Callable[[], datetime] = utc_now
    ):
        self.invoicing_repo = invoicing_repo
        self.file_storage = file_storage
        self.signer = signer
        self.vault = vault
        self.gateways = gateways
        self.now = now

    @operation("sendInvoiceToDGII")
    def execute(self, caller: Optional[CallerIdentity], invoice_id: str, test_mode: Optional[bool] = None) -> dict:
        caller = require_caller(caller, 'El usuario debe estar autenticado para enviar facturas a la DGII.')
        invoice = load_invoice(self.invoicing_repo, invoice_id)
        ensure_can_submit(invoice.status)

        client = self.invoicing_repo.find_client(invoice.client_id)
        if client is None:
            raise NotFound('El cliente especificado no existe.')
        company = self.invoicing_repo.get_company()
        if company is None:
            raise NotFound('No se encontraron datos de la empresa.')

        # 1. Generar y validar el XML
        xml_string = build_invoice_xml(invoice, company, client)
        if not validate_xml(xml_string):
            raise InvalidArgument('El XML generado no es válido.')

        # 2. Firmar con el certificado de la empresa
        certificate = self.invoicing_repo.get_certificate()
        if certificate is None:
            raise NotFound('No se encontró el certificado digital.')
        if not certificate.is_valid_at(self.now()):
            raise FailedPrecondition('El certificado digital está vencido o aún no es válido.')

        certificate_pem, private_key_pem = self.vault.open(certificate)
        signed_xml = self.signer.sign(xml_string, certificate_pem, private_key_pem, certificate.password)
        if not self.signer.verify(signed_xml, certificate_pem):
            raise FailedPrecondition('La firma del XML no es válida.')

        # 3. Guardar el XML firmado
        filename = xml_filename(company.rnc, invoice.display_number)
        xml_url = self.file_storage.upload(invoice_xml_path(filename), signed_xml.encode('utf-8'), 'application/xml')
        logger.info(f"[{invoice.id}] XML firmado guardado como {filename}")

        # 4. Enviar a la DGII
        test_mode = resolve_test_mode(self.invoicing_repo, test_mode)
        result = self.gateways.for_mode(test_mode).submit(signed_xml, filename)
        logger.info(f"[{invoice.id}] Enviada a la DGII (modo prueba={test_mode}). trackId={result.track_id}")

        submitted_at = self.now()
        self.invoicing_repo.update_invoice(
            invoice.id,
            status=InvoiceStatus.ENVIADA,
            track_id=result.track_id,
            xml_url=xml_url,
            dgii_submission_date=submitted_at,
            dgii_response={"trackId": result.track_id, "message": result.message, **result.raw},
        )
        self.invoicing_repo.add_invoice_event(InvoiceEvent(
            invoice_id=invoice.id,
            type='dgii_submission',
            timestamp=submitted_at,
            user_id=caller.uid,
            details={"trackId": result.track_id, "testMode": test_mode},
        ))

        return {
            "success": True,
            "trackId": result.track_id,
            "xmlUrl": xml_url,
            "message": 'Factura enviada correctamente a la DGII'
        }

# app/infrastructure/wiring.py
"""
Construcción de los adaptadores a partir de `config`. Es el único lugar,
junto con las dependencias de la API y el worker, que lee la configuración.
"""
import functools
import logging
from typing import Optional

from sqlalchemy.orm import Session

import config
from app.application.use_cases.generate_invoice_pdf import GenerateInvoicePDFUseCase
from app.application.use_cases.process_new_invoice import ProcessNewInvoiceUseCase
from app.application.use_cases.send_invoice_to_dgii import SendInvoiceToDGIIUseCase
from app.domain.ports.dgii_gateway import DGIIGatewayProvider
from app.domain.ports.file_storage import FileStorage
from app.domain.ports.notification import Notification
from app.infrastructure.external.dgii_adapter import DGIIRestAdapter
from app.infrastructure.external.dgii_simulator import DGIISimulator
from app.infrastructure.external.gcs_storage_adapter import GoogleCloudStorageAdapter
from app.infrastructure.external.gmail_adapter import GmailAdapter
from app.infrastructure.external.google_auth import get_google_credentials
from app.infrastructure.external.local_storage_adapter import LocalFileStorage
from app.infrastructure.pdf.invoice_pdf_renderer import ReportLabInvoiceRenderer
from app.infrastructure.persistence.invoicing_repository_adapter import SQLAlchemyInvoicingRepository
from app.infrastructure.signing.certificate_vault import FernetCertificateVault, create_development_certificate
from app.infrastructure.signing.xmldsig_signer import XMLDSigSigner

logger = logging.getLogger(__name__)


@functools.lru_cache(maxsize=None)
def build_file_storage() -> FileStorage:
    if config.STORAGE_BACKEND == "gcs":
        logger.info(f"Usando Google Cloud Storage (bucket {config.GCS_BUCKET})")
        credentials = get_google_credentials(config.TOKEN_FILE, config.SCOPES)
        return GoogleCloudStorageAdapter(config.GCS_BUCKET, credentials)
    return LocalFileStorage(config.LOCAL_STORAGE_DIR, config.LOCAL_STORAGE_BASE_URL)


@functools.lru_cache(maxsize=None)
def build_notification_service() -> Notification:
    credentials = get_google_credentials(config.TOKEN_FILE, config.SCOPES)
    return GmailAdapter(credentials, config.EMAIL_SENDER, config.DEFAULT_COMPANY_NAME)


@functools.lru_cache(maxsize=None)
def build_certificate_vault() -> FernetCertificateVault:
    return FernetCertificateVault(config.CERTIFICATE_ENCRYPTION_KEY)


@functools.lru_cache(maxsize=None)
def build_signer() -> XMLDSigSigner:
    return XMLDSigSigner()


@functools.lru_cache(maxsize=None)
def build_pdf_renderer() -> ReportLabInvoiceRenderer:
    return ReportLabInvoiceRenderer()


@functools.lru_cache(maxsize=None)
def _live_gateway(rnc: Optional[str]) -> DGIIRestAdapter:
    # Una instancia por RNC para reutilizar el token de acceso
    return DGIIRestAdapter(
        config.DGII_BASE_URL,
        config.DGII_USERNAME,
        config.DGII_PASSWORD,
        rnc=rnc,
        timeout=config.DGII_TIMEOUT,
        probe_timeout=config.DGII_PROBE_TIMEOUT,
    )


def build_gateway_provider(rnc: Optional[str] = None) -> DGIIGatewayProvider:
    return DGIIGatewayProvider(
        simulator=DGIISimulator(config.DGII_SIMULATED_STATUS),
        live=_live_gateway(rnc),
    )


def build_development_certificate(company_name: Optional[str], rnc: str, password: Optional[str]):
    return create_development_certificate(build_certificate_vault(), company_name, rnc, password)


def build_process_new_invoice(db_session: Session) -> ProcessNewInvoiceUseCase:
    invoicing_repo = SQLAlchemyInvoicingRepository(db_session)
    company = invoicing_repo.get_company()
    file_storage = build_file_storage()
    return ProcessNewInvoiceUseCase(
        invoicing_repo=invoicing_repo,
        generate_pdf=GenerateInvoicePDFUseCase(
            invoicing_repo,
            file_storage,
            build_pdf_renderer(),
            upload_attempts=config.PDF_UPLOAD_ATTEMPTS,
            retry_delay=config.PDF_UPLOAD_RETRY_DELAY,
        ),
        send_to_dgii=SendInvoiceToDGIIUseCase(
            invoicing_repo,
            file_storage,
            build_signer(),
            build_certificate_vault(),
            build_gateway_provider(company.rnc if company else None),
        ),
    )

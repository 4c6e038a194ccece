# app/infrastructure/api/dependencies.py
from typing import Callable, Iterator

from fastapi import Depends
from sqlalchemy.orm import Session

import config
from app.application.use_cases.cancel_invoice import CancelInvoiceUseCase
from app.application.use_cases.check_dgii_status import CheckDGIIStatusUseCase
from app.application.use_cases.check_invoice_status import CheckInvoiceStatusUseCase
from app.application.use_cases.company_settings import CompanySettingsUseCase
from app.application.use_cases.generate_invoice_pdf import GenerateInvoicePDFUseCase
from app.application.use_cases.manage_clients import ManageClientsUseCase
from app.application.use_cases.manage_inventory import ManageInventoryUseCase
from app.application.use_cases.register_invoice import RegisterInvoiceUseCase
from app.application.use_cases.send_invoice_email import SendInvoiceEmailUseCase
from app.application.use_cases.send_invoice_to_dgii import SendInvoiceToDGIIUseCase
from app.domain.ports.dgii_gateway import DGIIGatewayProvider
from app.domain.ports.file_storage import FileStorage
from app.domain.ports.invoicing_repository import InvoicingRepository
from app.domain.ports.notification import Notification
from app.domain.ports.pdf_renderer import PDFRenderer
from app.domain.ports.xml_signer import XMLSigner
from app.infrastructure import wiring
from app.infrastructure.celery.worker import celery_app
from app.infrastructure.persistence.database import SessionLocal
from app.infrastructure.persistence.inventory_repository_adapter import SQLAlchemyInventoryRepository
from app.infrastructure.persistence.invoicing_repository_adapter import SQLAlchemyInvoicingRepository
from app.domain.ports.certificate_vault import CertificateVault

InvoiceDispatcher = Callable[[str], None]


def get_db() -> Iterator[Session]:
    """Una sesión por petición: commit si todo sale bien, rollback si no."""
    db_session = SessionLocal()
    try:
        yield db_session
        db_session.commit()
    except Exception:
        db_session.rollback()
        raise
    finally:
        db_session.close()


def get_invoicing_repo(db: Session = Depends(get_db)) -> InvoicingRepository:
    return SQLAlchemyInvoicingRepository(db)


def get_file_storage() -> FileStorage:
    return wiring.build_file_storage()


def get_notification_service() -> Notification:
    return wiring.build_notification_service()


def get_certificate_vault() -> CertificateVault:
    return wiring.build_certificate_vault()


def get_signer() -> XMLSigner:
    return wiring.build_signer()


def get_pdf_renderer() -> PDFRenderer:
    return wiring.build_pdf_renderer()


def get_gateway_provider(repo: InvoicingRepository = Depends(get_invoicing_repo)) -> DGIIGatewayProvider:
    company = repo.get_company()
    return wiring.build_gateway_provider(company.rnc if company else None)


def dispatch_invoice_created(invoice_id: str) -> None:
    celery_app.send_task('tasks.process_new_invoice', args=[invoice_id])


def get_invoice_dispatcher() -> InvoiceDispatcher:
    return dispatch_invoice_created


# --- Casos de uso ---

def get_register_invoice(repo: InvoicingRepository = Depends(get_invoicing_repo)) -> RegisterInvoiceUseCase:
    return RegisterInvoiceUseCase(repo)


def get_manage_clients(repo: InvoicingRepository = Depends(get_invoicing_repo)) -> ManageClientsUseCase:
    return ManageClientsUseCase(repo)


def get_manage_inventory(db: Session = Depends(get_db)) -> ManageInventoryUseCase:
    return ManageInventoryUseCase(
        SQLAlchemyInventoryRepository(db),
        low_stock_threshold=config.LOW_STOCK_THRESHOLD,
        expiring_within_days=config.EXPIRING_WITHIN_DAYS,
    )


def get_company_settings(repo: InvoicingRepository = Depends(get_invoicing_repo)) -> CompanySettingsUseCase:
    return CompanySettingsUseCase(repo, certificate_factory=wiring.build_development_certificate)


def get_generate_pdf(
    repo: InvoicingRepository = Depends(get_invoicing_repo),
    storage: FileStorage = Depends(get_file_storage),
    renderer: PDFRenderer = Depends(get_pdf_renderer),
) -> GenerateInvoicePDFUseCase:
    return GenerateInvoicePDFUseCase(
        repo, storage, renderer,
        upload_attempts=config.PDF_UPLOAD_ATTEMPTS,
        retry_delay=config.PDF_UPLOAD_RETRY_DELAY,
    )


def get_send_email(
    repo: InvoicingRepository = Depends(get_invoicing_repo),
    storage: FileStorage = Depends(get_file_storage),
    notification_service: Notification = Depends(get_notification_service),
) -> SendInvoiceEmailUseCase:
    return SendInvoiceEmailUseCase(repo, storage, notification_service)


def get_send_to_dgii(
    repo: InvoicingRepository = Depends(get_invoicing_repo),
    storage: FileStorage = Depends(get_file_storage),
    signer: XMLSigner = Depends(get_signer),
    vault: CertificateVault = Depends(get_certificate_vault),
    gateways: DGIIGatewayProvider = Depends(get_gateway_provider),
) -> SendInvoiceToDGIIUseCase:
    return SendInvoiceToDGIIUseCase(repo, storage, signer, vault, gateways)


def get_check_invoice_status(
    repo: InvoicingRepository = Depends(get_invoicing_repo),
    gateways: DGIIGatewayProvider = Depends(get_gateway_provider),
) -> CheckInvoiceStatusUseCase:
    return CheckInvoiceStatusUseCase(repo, gateways)


def get_check_dgii_status(
    repo: InvoicingRepository = Depends(get_invoicing_repo),
    gateways: DGIIGatewayProvider = Depends(get_gateway_provider),
) -> CheckDGIIStatusUseCase:
    return CheckDGIIStatusUseCase(repo, gateways.live)


def get_cancel_invoice(
    repo: InvoicingRepository = Depends(get_invoicing_repo),
    signer: XMLSigner = Depends(get_signer),
    vault: CertificateVault = Depends(get_certificate_vault),
    gateways: DGIIGatewayProvider = Depends(get_gateway_provider),
) -> CancelInvoiceUseCase:
    return CancelInvoiceUseCase(repo, signer, vault, gateways)

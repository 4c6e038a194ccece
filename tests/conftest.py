import os
import tempfile

# Antes de importar `config`: base en memoria y almacenamiento en un directorio temporal
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("STORAGE_BACKEND", "local")
os.environ.setdefault("LOCAL_STORAGE_DIR", tempfile.mkdtemp(prefix="facturacion-tests-"))
os.environ.setdefault("CERTIFICATE_ENCRYPTION_KEY", "clave-de-pruebas")

from datetime import date, datetime, timezone

import pytest
from sqlalchemy.orm import sessionmaker

from app.domain.models.caller import CallerIdentity
from app.domain.models.client import Client
from app.domain.models.company import CompanySettings
from app.domain.models.invoice import Invoice, InvoiceItem, InvoiceStatus
from app.domain.ports.dgii_gateway import DGIIGatewayProvider
from app.domain.ports.file_storage import FileStorage
from app.domain.ports.notification import Notification
from app.infrastructure.external.dgii_simulator import DGIISimulator
from app.infrastructure.persistence.database import build_engine, init_db
from app.infrastructure.persistence.invoicing_repository_adapter import SQLAlchemyInvoicingRepository
from app.infrastructure.signing.certificate_vault import FernetCertificateVault, create_development_certificate
from app.infrastructure.signing.xmldsig_signer import XMLDSigSigner

COMPANY_RNC = "131234567"
FIXED_NOW = datetime(2024, 3, 15, 10, 30, tzinfo=timezone.utc)


class InMemoryStorage(FileStorage):
    def __init__(self, failures: int = 0):
        self.files = {}
        self.failures = failures
        self.upload_calls = 0

    def upload(self, path, content, content_type):
        self.upload_calls += 1
        if self.upload_calls <= self.failures:
            raise ConnectionError("almacenamiento no disponible")
        self.files[path] = content
        return f"https://storage.test/{path}"

    def download(self, path):
        if path not in self.files:
            raise FileNotFoundError(path)
        return self.files[path]


class RecordingNotification(Notification):
    def __init__(self):
        self.sent = []

    def send_invoice_email(self, recipient, subject, message, invoice, company, pdf_filename, pdf_content):
        self.sent.append({
            "recipient": recipient,
            "subject": subject,
            "message": message,
            "invoice_id": invoice.id,
            "pdf_filename": pdf_filename,
            "pdf_content": pdf_content,
        })
        return {"id": f"msg-{len(self.sent)}"}


class FailingGateway(DGIISimulator):
    """Servicio real que nunca debería usarse en modo prueba."""

    def submit(self, signed_xml, filename):
        raise AssertionError("no se esperaba usar el servicio real")

    def check_status(self, track_id):
        raise AssertionError("no se esperaba usar el servicio real")

    def cancel(self, signed_xml):
        raise AssertionError("no se esperaba usar el servicio real")


@pytest.fixture
def engine():
    engine = build_engine("sqlite://")
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db_session(engine):
    session = sessionmaker(bind=engine, autocommit=False, autoflush=False)()
    yield session
    session.close()


@pytest.fixture
def repo(db_session):
    return SQLAlchemyInvoicingRepository(db_session)


@pytest.fixture
def caller():
    return CallerIdentity(uid="user-123", email="contabilidad@example.com")


@pytest.fixture(scope="session")
def vault():
    return FernetCertificateVault("clave-de-pruebas")


@pytest.fixture(scope="session")
def certificate(vault):
    return create_development_certificate(vault, "Fumigaciones del Caribe", COMPANY_RNC, "secreto")


@pytest.fixture(scope="session")
def signer():
    return XMLDSigSigner()


@pytest.fixture
def storage():
    return InMemoryStorage()


@pytest.fixture
def notification():
    return RecordingNotification()


@pytest.fixture
def gateways():
    return DGIIGatewayProvider(simulator=DGIISimulator(), live=FailingGateway())


@pytest.fixture
def company():
    return CompanySettings(
        name="Fumigaciones del Caribe",
        rnc=COMPANY_RNC,
        address="Av. Independencia 45, Santo Domingo",
        phone="809-555-0101",
        email="info@fumigaciones.do",
    )


@pytest.fixture
def client_record():
    return Client(id="cli-1", name="Hotel Playa & Sol", rnc="101010101", email="compras@playasol.do")


def make_invoice(**overrides) -> Invoice:
    data = dict(
        id="inv-1",
        invoice_number="FAC-20240315-001",
        ncf="E310000000001",
        client_id="cli-1",
        items=[
            InvoiceItem(description="Fumigación general", quantity=2, price=1500),
            InvoiceItem(description="Control de roedores", quantity=1, price=800),
        ],
        date=date(2024, 3, 15),
        status=InvoiceStatus.PENDIENTE,
        created_at=FIXED_NOW,
    )
    data.update(overrides)
    invoice = Invoice(**data)
    invoice.recompute_totals()
    return invoice


@pytest.fixture
def seeded(repo, company, client_record, certificate):
    """Empresa, cliente, certificado y una factura pendiente."""
    repo.save_company(company)
    repo.save_client(client_record)
    repo.save_certificate(certificate)
    return repo.add_invoice(make_invoice())

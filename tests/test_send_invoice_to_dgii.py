import pytest

from app.application.use_cases.send_invoice_to_dgii import SendInvoiceToDGIIUseCase
from app.domain.exceptions import FailedPrecondition, NotFound, Unauthenticated
from app.domain.models.certificate import Certificate
from app.domain.models.company import EcfConfig
from app.domain.models.invoice import InvoiceItem, InvoiceStatus
from conftest import make_invoice


@pytest.fixture
def use_case(repo, storage, signer, vault, gateways):
    return SendInvoiceToDGIIUseCase(repo, storage, signer, vault, gateways)


def test_submit_pending_invoice(use_case, repo, storage, signer, vault, certificate, caller, seeded):
    result = use_case.execute(caller, seeded.id, test_mode=True)

    assert result["success"] is True
    assert result["trackId"].startswith("SIM-")

    invoice = repo.find_invoice(seeded.id)
    assert invoice.status is InvoiceStatus.ENVIADA
    assert invoice.track_id == result["trackId"]
    assert invoice.dgii_submission_date is not None
    assert invoice.dgii_response["trackId"] == result["trackId"]

    path = "invoices/xml/131234567FAC-20240315-001.xml"
    assert invoice.xml_url == result["xmlUrl"] == f"https://storage.test/{path}"
    certificate_pem, _ = vault.open(certificate)
    assert signer.verify(storage.files[path].decode("utf-8"), certificate_pem)

    events = repo.list_invoice_events(seeded.id)
    assert [(e.type, e.user_id) for e in events] == [("dgii_submission", caller.uid)]


def test_test_mode_defaults_to_saved_config(use_case, repo, caller, seeded):
    repo.save_ecf_config(EcfConfig(test_mode=True))
    assert use_case.execute(caller, seeded.id)["trackId"].startswith("SIM-")


def test_requires_caller(use_case, repo, seeded):
    with pytest.raises(Unauthenticated):
        use_case.execute(None, seeded.id)
    assert repo.find_invoice(seeded.id).status is InvoiceStatus.PENDIENTE


def test_already_sent_invoice_is_rejected(use_case, repo, caller, seeded):
    use_case.execute(caller, seeded.id, test_mode=True)
    with pytest.raises(FailedPrecondition):
        use_case.execute(caller, seeded.id, test_mode=True)


def test_missing_certificate(repo, storage, signer, vault, gateways, caller, company, client_record):
    repo.save_company(company)
    repo.save_client(client_record)
    invoice = repo.add_invoice(make_invoice())

    use_case = SendInvoiceToDGIIUseCase(repo, storage, signer, vault, gateways)
    with pytest.raises(NotFound, match="certificado"):
        use_case.execute(caller, invoice.id, test_mode=True)
    assert storage.files == {}


def test_expired_certificate(use_case, repo, storage, caller, seeded, certificate):
    expired = Certificate(**{**certificate.model_dump(), "valid_to": certificate.valid_from})
    repo.save_certificate(expired)

    with pytest.raises(FailedPrecondition):
        use_case.execute(caller, seeded.id, test_mode=True)
    assert repo.find_invoice(seeded.id).status is InvoiceStatus.PENDIENTE


def test_unknown_invoice(use_case, caller, seeded):
    with pytest.raises(NotFound):
        use_case.execute(caller, "no-existe", test_mode=True)


def test_description_with_control_character_is_submitted(use_case, repo, caller, seeded):
    repo.update_invoice(seeded.id, items=[InvoiceItem(description="Fumigación\x0bpatio", quantity=1, price=100)])

    result = use_case.execute(caller, seeded.id, test_mode=True)

    assert result["success"] is True
    assert repo.find_invoice(seeded.id).status is InvoiceStatus.ENVIADA

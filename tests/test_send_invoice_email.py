import pytest

from app.application.use_cases.send_invoice_email import SendInvoiceEmailUseCase
from app.domain.exceptions import FailedPrecondition, InvalidArgument, Unauthenticated
from conftest import FIXED_NOW


@pytest.fixture
def use_case(repo, storage, notification):
    return SendInvoiceEmailUseCase(repo, storage, notification, now=lambda: FIXED_NOW)


def test_sends_pdf_and_records_delivery(use_case, repo, storage, notification, caller, seeded):
    storage.files[f"invoices/{seeded.id}.pdf"] = b"%PDF-1.4 factura"

    result = use_case.execute(caller, seeded.id, "compras@playasol.do")

    assert result["success"] is True
    sent = notification.sent[0]
    assert sent["recipient"] == "compras@playasol.do"
    assert sent["subject"] == "Factura Electrónica #FAC-20240315-001"
    assert sent["pdf_filename"] == "Factura_FAC-20240315-001.pdf"
    assert sent["pdf_content"] == b"%PDF-1.4 factura"

    invoice = repo.find_invoice(seeded.id)
    assert invoice.email_sent is True
    assert invoice.email_recipient == "compras@playasol.do"
    assert invoice.email_sent_date is not None


def test_custom_subject_and_message(use_case, storage, notification, caller, seeded):
    storage.files[f"invoices/{seeded.id}.pdf"] = b"%PDF"
    use_case.execute(caller, seeded.id, "a@b.do", subject="Su factura", message="Saludos")
    assert (notification.sent[0]["subject"], notification.sent[0]["message"]) == ("Su factura", "Saludos")


def test_pdf_must_exist(use_case, repo, notification, caller, seeded):
    with pytest.raises(FailedPrecondition):
        use_case.execute(caller, seeded.id, "a@b.do")
    assert notification.sent == []
    assert repo.find_invoice(seeded.id).email_sent is False


def test_argument_and_auth_checks(use_case, caller, seeded):
    with pytest.raises(Unauthenticated):
        use_case.execute(None, seeded.id, "a@b.do")
    with pytest.raises(InvalidArgument):
        use_case.execute(caller, seeded.id, "")
    with pytest.raises(InvalidArgument):
        use_case.execute(caller, seeded.id, "no-es-correo")

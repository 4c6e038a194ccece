import pytest

from app.application.use_cases.generate_invoice_pdf import GenerateInvoicePDFUseCase, upload_with_retry
from app.domain.exceptions import InternalError, NotFound
from app.infrastructure.pdf.invoice_pdf_renderer import ReportLabInvoiceRenderer
from conftest import FIXED_NOW, InMemoryStorage


def test_upload_retries_then_succeeds():
    storage = InMemoryStorage(failures=2)
    delays = []

    url = upload_with_retry(storage, "invoices/a.pdf", b"%PDF", "application/pdf", sleep=delays.append)

    assert url == "https://storage.test/invoices/a.pdf"
    assert storage.upload_calls == 3
    assert delays == [1.0, 1.0]


def test_upload_gives_up_after_three_attempts():
    storage = InMemoryStorage(failures=5)
    delays = []

    with pytest.raises(ConnectionError):
        upload_with_retry(storage, "invoices/a.pdf", b"%PDF", "application/pdf", sleep=delays.append)
    assert storage.upload_calls == 3
    assert len(delays) == 2


def test_generate_pdf_stores_url(repo, storage, caller, seeded):
    use_case = GenerateInvoicePDFUseCase(repo, storage, ReportLabInvoiceRenderer(), now=lambda: FIXED_NOW)

    result = use_case.execute(caller, seeded.id)

    assert result == {
        "success": True,
        "pdfUrl": f"https://storage.test/invoices/{seeded.id}.pdf",
        "message": "PDF generado correctamente",
    }
    assert storage.files[f"invoices/{seeded.id}.pdf"].startswith(b"%PDF")
    invoice = repo.find_invoice(seeded.id)
    assert invoice.pdf_url == result["pdfUrl"]
    assert invoice.pdf_generated_date is not None


def test_storage_outage_is_reported_as_internal(repo, caller, seeded):
    use_case = GenerateInvoicePDFUseCase(
        repo, InMemoryStorage(failures=3), ReportLabInvoiceRenderer(), sleep=lambda _: None
    )
    with pytest.raises(InternalError, match="almacenamiento no disponible"):
        use_case.execute(caller, seeded.id)
    assert repo.find_invoice(seeded.id).pdf_url is None


def test_client_is_required(repo, storage, caller, seeded):
    repo.delete_client(seeded.client_id)
    use_case = GenerateInvoicePDFUseCase(repo, storage, ReportLabInvoiceRenderer())
    with pytest.raises(NotFound):
        use_case.execute(caller, seeded.id)

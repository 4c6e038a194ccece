import pytest

from app.domain.ports.file_storage import invoice_pdf_path, invoice_xml_path
from app.infrastructure.external.gmail_adapter import build_invoice_email
from app.infrastructure.external.local_storage_adapter import LocalFileStorage
from conftest import make_invoice


def test_local_storage_round_trip(tmp_path):
    storage = LocalFileStorage(str(tmp_path), "http://localhost:8000/files/")

    url = storage.upload(invoice_pdf_path("inv-1"), b"%PDF-1.4", "application/pdf")

    assert url == "http://localhost:8000/files/invoices/inv-1.pdf"
    assert storage.download("invoices/inv-1.pdf") == b"%PDF-1.4"
    assert (tmp_path / "invoices" / "inv-1.pdf").exists()


def test_local_storage_missing_file_and_traversal(tmp_path):
    storage = LocalFileStorage(str(tmp_path), "http://localhost/files")
    with pytest.raises(FileNotFoundError):
        storage.download(invoice_xml_path("nada.xml"))
    with pytest.raises(ValueError):
        storage.upload("../fuera.txt", b"x", "text/plain")


def test_invoice_email_has_pdf_attachment_and_escaped_html(company):
    company = company.model_copy(update={"name": "Fumigaciones <Caribe>"})
    msg = build_invoice_email(
        "facturacion@example.com", "cliente@example.com", "Factura #1", "Gracias",
        make_invoice(), company, "Factura_FAC-20240315-001.pdf", b"%PDF-1.4",
        "Sistema de Facturación",
    )

    assert msg["To"] == "cliente@example.com"
    attachments = list(msg.iter_attachments())
    assert [a.get_filename() for a in attachments] == ["Factura_FAC-20240315-001.pdf"]
    assert attachments[0].get_content() == b"%PDF-1.4"
    html_part = msg.get_body(preferencelist=("html",))
    assert "Fumigaciones &lt;Caribe&gt;" in html_part.get_content()


def test_invoice_email_defaults_company_name():
    msg = build_invoice_email(
        "facturacion@example.com", "cliente@example.com", "Factura", "Hola",
        make_invoice(), None, "f.pdf", b"%PDF", "Sistema de Facturación",
    )
    assert "Sistema de Facturación" in msg.get_body(preferencelist=("html",)).get_content()

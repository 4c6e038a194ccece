import requests

from app.domain.models.company import CompanySettings
from app.domain.models.invoice import InvoiceItem
from app.infrastructure.pdf.invoice_pdf_renderer import (
    ReportLabInvoiceRenderer, format_currency, format_date, format_quantity,
)
from conftest import make_invoice


class UnreachableLogo:
    def __init__(self):
        self.requested = []

    def get(self, url, timeout=None):
        self.requested.append(url)
        raise requests.exceptions.ConnectionError("sin red")


def test_renders_single_page_pdf(company, client_record):
    rendered = ReportLabInvoiceRenderer().render_document(make_invoice(), company, client_record)
    assert rendered.content.startswith(b"%PDF")
    assert rendered.page_count == 1


def test_logo_failure_falls_back_to_placeholder(company, client_record):
    http = UnreachableLogo()
    renderer = ReportLabInvoiceRenderer(http=http)
    company = company.model_copy(update={"logo_url": "https://cdn.example.com/logo.png"})

    pdf = renderer.render(make_invoice(), company, client_record)

    assert pdf.startswith(b"%PDF")
    assert http.requested == ["https://cdn.example.com/logo.png"]


def test_missing_company_and_items(client_record):
    rendered = ReportLabInvoiceRenderer().render_document(make_invoice(items=[]), None, client_record)
    assert rendered.page_count == 1


def test_long_item_list_paginates(company, client_record):
    items = [InvoiceItem(description=f"Servicio de fumigación #{n}", quantity=1, price=100) for n in range(120)]
    rendered = ReportLabInvoiceRenderer().render_document(make_invoice(items=items), company, client_record)
    assert rendered.page_count > 1


def test_formatters():
    assert format_currency(1234.5) == "RD$ 1,234.50"
    assert format_currency(None) == "RD$ 0.00"
    assert format_quantity(3) == "3"
    assert format_quantity(2.5) == "2.50"
    assert format_date(None) == "N/A"
    assert format_date(make_invoice().date) == "15/03/2024"

from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from typing import Any, List, Optional

import requests
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.lib.utils import ImageReader, simpleSplit
from reportlab.pdfgen import canvas

from app.domain.models.client import Client
from app.domain.models.company import CompanySettings
from app.domain.models.invoice import Invoice
from app.domain.ports.pdf_renderer import PDFRenderer

logger = logging.getLogger(__name__)

_ND = "N/A"

HEADER_FILL = colors.HexColor("#424242")
GRAY_BORDER = colors.HexColor("#BDBDBD")
GRAY_TEXT = colors.HexColor("#666666")

PAGE_WIDTH, PAGE_HEIGHT = A4
MARGIN = 20 * mm
TOP = PAGE_HEIGHT - 15 * mm
BOTTOM = 25 * mm

TABLE_COLUMNS = ["Descripción", "Cantidad", "Precio Unitario", "ITBIS", "Subtotal"]
COLUMN_WIDTHS = [70 * mm, 20 * mm, 27 * mm, 25 * mm, 28 * mm]
LINE_HEIGHT = 4 * mm
CELL_PADDING = 1.5 * mm

FOOTER_TEXT = "Gracias por su preferencia"


def _clean(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return str(value)


def _safe(value: Any, fallback: str = _ND) -> str:
    return _clean(value) or fallback


def format_currency(amount: Any) -> str:
    return f"RD$ {float(amount or 0):,.2f}"


def format_quantity(quantity: Any) -> str:
    q = float(quantity or 0)
    return f"{q:g}" if q == int(q) else f"{q:,.2f}"


def format_date(value: Any) -> str:
    if not value:
        return _ND
    try:
        return value.strftime("%d/%m/%Y")
    except AttributeError:
        return _ND


@dataclass
class RenderedPDF:
    content: bytes
    page_count: int


class ReportLabInvoiceRenderer(PDFRenderer):
    """
    Dibuja la factura en A4 con reportlab: encabezado con logo y datos de la
    empresa, datos del cliente, tabla de líneas paginada, totales y pie.
    """

    def __init__(self, logo_timeout: float = 3.0, http: Optional[requests.Session] = None):
        self.logo_timeout = logo_timeout
        self.http = http or requests.Session()

    def render(self, invoice: Invoice, company: Optional[CompanySettings], client: Client) -> bytes:
        return self.render_document(invoice, company, client).content

    def render_document(self, invoice: Invoice, company: Optional[CompanySettings], client: Client) -> RenderedPDF:
        company = company or CompanySettings()
        buffer = io.BytesIO()
        c = canvas.Canvas(buffer, pagesize=A4)
        c.setTitle(f"Factura {invoice.display_number}")

        y = self._draw_header(c, invoice, company)
        y = self._draw_client(c, client, y - 10 * mm)
        y = self._draw_items(c, invoice, y - 10 * mm)
        self._draw_totals(c, invoice, y - 10 * mm)
        self._draw_footer(c)
        pages = c.getPageNumber()
        c.showPage()
        c.save()
        return RenderedPDF(content=buffer.getvalue(), page_count=pages)

    # --- Encabezado ---

    def _load_logo(self, logo_url: Optional[str]) -> Optional[ImageReader]:
        if not logo_url:
            return None
        if not logo_url.startswith("http"):
            logger.warning(f"URL del logo inválida: {logo_url}")
            return None
        try:
            response = self.http.get(logo_url, timeout=self.logo_timeout)
            response.raise_for_status()
            return ImageReader(io.BytesIO(response.content))
        except Exception as e:
            logger.warning(f"No se pudo cargar el logo, usando placeholder: {e}")
            return None

    def _draw_logo(self, c: canvas.Canvas, logo_url: Optional[str], y: float) -> None:
        x, w, h = MARGIN, 40 * mm, 20 * mm
        logo = self._load_logo(logo_url)
        if logo is not None:
            try:
                c.drawImage(logo, x, y - h, width=w, height=h, preserveAspectRatio=True, mask="auto")
                return
            except Exception as e:
                logger.warning(f"No se pudo dibujar el logo, usando placeholder: {e}")
        c.setStrokeColor(GRAY_BORDER)
        c.rect(x, y - h, w, h)
        c.setFont("Helvetica", 10)
        c.setFillColor(GRAY_TEXT)
        c.drawCentredString(x + w / 2, y - h / 2 - 1.5 * mm, "LOGO")
        c.setFillColor(colors.black)
        c.setStrokeColor(colors.black)

    def _draw_header(self, c: canvas.Canvas, invoice: Invoice, company: CompanySettings) -> float:
        y = TOP
        self._draw_logo(c, company.logo_url, y)

        right = PAGE_WIDTH - MARGIN
        c.setFont("Helvetica-Bold", 16)
        c.drawRightString(right, y - 5 * mm, _safe(company.name, "Empresa de Fumigación"))
        c.setFont("Helvetica", 10)
        lines = [
            f"RNC: {_safe(company.rnc)}",
            _safe(company.address, "Dirección no disponible"),
            f"Tel: {_safe(company.phone)}",
            _safe(company.email, "correo@ejemplo.com"),
        ]
        for offset, line in enumerate(lines, start=2):
            c.drawRightString(right, y - offset * 5 * mm, line)

        y -= 40 * mm
        c.setFont("Helvetica-Bold", 14)
        c.drawCentredString(PAGE_WIDTH / 2, y, "FACTURA")

        y -= 10 * mm
        c.setFont("Helvetica-Bold", 10)
        c.drawString(MARGIN, y, f"Número de Factura: {invoice.display_number}")
        if invoice.ncf:
            y -= 5 * mm
            c.drawString(MARGIN, y, f"NCF: {invoice.ncf}")
        y -= 5 * mm
        c.drawString(MARGIN, y, f"Fecha de Emisión: {format_date(invoice.date)}")
        if invoice.track_id:
            y -= 5 * mm
            c.drawString(MARGIN, y, f"Track ID DGII: {invoice.track_id}")
        return y

    def _draw_client(self, c: canvas.Canvas, client: Client, y: float) -> float:
        c.setFont("Helvetica-Bold", 12)
        c.drawString(MARGIN, y, "CLIENTE")
        c.setFont("Helvetica", 10)
        for line in (
            f"Nombre/Razón Social: {_safe(client.name)}",
            f"RNC/Cédula: {_safe(client.rnc)}",
            f"Dirección: {_safe(client.address)}",
            f"Teléfono: {_safe(client.phone)}",
            f"Correo: {_safe(client.email)}",
        ):
            y -= 5 * mm
            c.drawString(MARGIN, y, line)
        return y

    # --- Tabla de líneas ---

    def _draw_table_header(self, c: canvas.Canvas, y: float) -> float:
        height = LINE_HEIGHT + 2 * CELL_PADDING
        c.setFillColor(HEADER_FILL)
        c.rect(MARGIN, y - height, sum(COLUMN_WIDTHS), height, stroke=0, fill=1)
        c.setFillColor(colors.white)
        c.setFont("Helvetica-Bold", 9)
        x = MARGIN
        for title, width in zip(TABLE_COLUMNS, COLUMN_WIDTHS):
            c.drawString(x + CELL_PADDING, y - height + CELL_PADDING + 1 * mm, title)
            x += width
        c.setFillColor(colors.black)
        return y - height

    def _draw_row(self, c: canvas.Canvas, cells: List[str], y: float) -> float:
        c.setFont("Helvetica", 9)
        description_lines = simpleSplit(cells[0], "Helvetica", 9, COLUMN_WIDTHS[0] - 2 * CELL_PADDING) or [""]
        height = len(description_lines) * LINE_HEIGHT + 2 * CELL_PADDING

        c.setStrokeColor(GRAY_BORDER)
        x = MARGIN
        for width in COLUMN_WIDTHS:
            c.rect(x, y - height, width, height, stroke=1, fill=0)
            x += width
        c.setStrokeColor(colors.black)

        text_y = y - CELL_PADDING - 3 * mm
        for i, line in enumerate(description_lines):
            c.drawString(MARGIN + CELL_PADDING, text_y - i * LINE_HEIGHT, line)

        x = MARGIN + COLUMN_WIDTHS[0]
        c.drawCentredString(x + COLUMN_WIDTHS[1] / 2, text_y, cells[1])
        x += COLUMN_WIDTHS[1]
        for value, width in zip(cells[2:], COLUMN_WIDTHS[2:]):
            x += width
            c.drawRightString(x - CELL_PADDING, text_y, value)
        return y - height

    def _row_height(self, description: str) -> float:
        lines = simpleSplit(description, "Helvetica", 9, COLUMN_WIDTHS[0] - 2 * CELL_PADDING) or [""]
        return len(lines) * LINE_HEIGHT + 2 * CELL_PADDING

    def _new_page(self, c: canvas.Canvas) -> float:
        self._draw_footer(c)
        c.showPage()
        return TOP

    def _draw_items(self, c: canvas.Canvas, invoice: Invoice, y: float) -> float:
        rows = [
            [
                _safe(item.description),
                format_quantity(item.quantity),
                format_currency(item.price),
                format_currency(item.itbis),
                format_currency(item.subtotal),
            ]
            for item in invoice.items
        ] or [["No hay items en esta factura", "", "", "", ""]]

        y = self._draw_table_header(c, y)
        for row in rows:
            if y - self._row_height(row[0]) < BOTTOM:
                y = self._draw_table_header(c, self._new_page(c))
            y = self._draw_row(c, row, y)
        return y

    # --- Totales y pie ---

    def _draw_totals(self, c: canvas.Canvas, invoice: Invoice, y: float) -> None:
        if y - 15 * mm < BOTTOM:
            y = self._new_page(c)
        label_x = PAGE_WIDTH - MARGIN - 60 * mm
        right = PAGE_WIDTH - MARGIN
        for label, amount in (
            ("Subtotal:", invoice.subtotal),
            ("ITBIS (18%):", invoice.tax),
            ("TOTAL:", invoice.total),
        ):
            c.setFont("Helvetica-Bold", 10)
            c.drawString(label_x, y, label)
            c.setFont("Helvetica", 10)
            c.drawRightString(right, y, format_currency(amount))
            y -= 5 * mm

    def _draw_footer(self, c: canvas.Canvas) -> None:
        c.setFont("Helvetica", 8)
        c.setFillColor(GRAY_TEXT)
        c.drawCentredString(PAGE_WIDTH / 2, 10 * mm, FOOTER_TEXT)
        c.drawRightString(PAGE_WIDTH - MARGIN, 10 * mm, f"Página {c.getPageNumber()}")
        c.setFillColor(colors.black)

# app/infrastructure/external/gmail_adapter.py
import base64
import html
import logging
from email.message import EmailMessage
from typing import Optional
from googleapiclient.discovery import build
from app.domain.ports.notification import Notification
from app.domain.models.invoice import Invoice
from app.domain.models.company import CompanySettings

logger = logging.getLogger(__name__)


def format_amount(amount) -> str:
    return "{:,.2f}".format(amount or 0)


def build_invoice_email(
    sender: str,
    recipient: str,
    subject: str,
    message: str,
    invoice: Invoice,
    company: Optional[CompanySettings],
    pdf_filename: str,
    pdf_content: bytes,
    default_company_name: str
) -> EmailMessage:
    company = company or CompanySettings()
    company_name = company.name or default_company_name
    issue_date = invoice.date.strftime('%d/%m/%Y') if invoice.date else ''

    e = html.escape
    logo = f'<img src="{e(company.logo_url)}" alt="Logo" style="max-height: 80px; margin-bottom: 15px;">' if company.logo_url else ''
    body_html = (
        '<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">'
        f'<div style="background-color: #f8f9fa; padding: 20px; text-align: center;">{logo}'
        f'<h2 style="color: #333;">{e(company_name)}</h2></div>'
        '<div style="padding: 20px;">'
        '<p>Estimado cliente,</p>'
        f'<p>{e(message)}</p>'
        '<p>Detalles de la factura:</p><ul>'
        f'<li><strong>Número de factura:</strong> {e(invoice.display_number)}</li>'
        f'<li><strong>Fecha:</strong> {e(issue_date)}</li>'
        f'<li><strong>Total:</strong> RD$ {format_amount(invoice.total)}</li>'
        '</ul>'
        '<p>Para cualquier consulta, no dude en contactarnos.</p>'
        f'<p>Atentamente,</p><p><strong>{e(company_name)}</strong><br>'
        f'{e(company.address or "")}<br>{e(company.phone or "")}<br>{e(company.email or sender)}</p>'
        '</div>'
        '<div style="background-color: #f8f9fa; padding: 15px; text-align: center; font-size: 12px; color: #666;">'
        '<p>Este es un correo electrónico automático. Por favor, no responda a este mensaje.</p>'
        '</div></div>'
    )

    msg = EmailMessage()
    msg['From'] = f'"{company_name}" <{sender}>'
    msg['To'] = recipient
    msg['Subject'] = subject
    msg.set_content(message)
    msg.add_alternative(body_html, subtype='html')
    msg.add_attachment(pdf_content, maintype='application', subtype='pdf', filename=pdf_filename)
    return msg


class GmailAdapter(Notification):
    """Envía las facturas a través de la API de Gmail de la cuenta configurada."""

    def __init__(self, credentials, sender: str, default_company_name: str):
        self.service = build('gmail', 'v1', credentials=credentials, cache_discovery=False)
        self.sender = sender
        self.default_company_name = default_company_name

    def send_invoice_email(
        self,
        recipient: str,
        subject: str,
        message: str,
        invoice: Invoice,
        company: Optional[CompanySettings],
        pdf_filename: str,
        pdf_content: bytes
    ) -> dict:
        msg = build_invoice_email(
            self.sender, recipient, subject, message, invoice, company,
            pdf_filename, pdf_content, self.default_company_name
        )
        raw = base64.urlsafe_b64encode(msg.as_bytes()).decode('ascii')
        logger.info(f"[{invoice.id}] Enviando factura a {recipient} vía Gmail...")
        sent = self.service.users().messages().send(userId='me', body={'raw': raw}).execute()
        logger.info(f"[{invoice.id}] Correo enviado. Id de mensaje: {sent.get('id')}")
        return sent

# app/domain/services/ecf_xml.py
"""
Generación de los documentos XML que se envían a la DGII: el e-CF de la
factura y la solicitud de anulación.

La salida es determinista: el mismo (factura, empresa, cliente) produce
siempre los mismos bytes. No se lee el reloj; las fechas salen de los datos.
"""
import re
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

from lxml import etree

from app.domain.exceptions import InvalidArgument
from app.domain.models.client import Client
from app.domain.models.company import CompanySettings
from app.domain.models.invoice import Invoice

ECF_VERSION = "1.0"
# Factura de Crédito Fiscal Electrónica
TIPO_ECF_CREDITO_FISCAL = "31"
# 1 = bien, 2 = servicio. La fumigación se factura como servicio.
INDICADOR_SERVICIO = "2"

CANCELLATION_NS = "http://dgii.gov.do/etf/anulaciones"

CANCELLATION_REASONS = {
    "01": "Factura emitida con errores",
    "02": "Factura con datos incorrectos",
    "03": "Factura duplicada",
    "04": "Orden de compra cancelada",
    "05": "Otros",
}
REASON_OTHER = "05"

# Caracteres fuera del rango Char de XML 1.0 (controles pegados desde otras aplicaciones)
_XML_ILLEGAL_CHARS = re.compile("[^\u0009\u000A\u000D\u0020-\uD7FF\uE000-\uFFFD\U00010000-\U0010FFFF]")

REQUIRED_ECF_PATHS = (
    "Encabezado/IdDoc/eNCF",
    "Encabezado/Emisor/RNCEmisor",
    "Encabezado/Totales/MontoTotal",
    "DetallesItems",
)


def _amount(value) -> str:
    return str(Decimal(str(value or 0)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def _text(value) -> str:
    if value is None:
        return ""
    return _XML_ILLEGAL_CHARS.sub("", str(value)).strip()


def _add(parent, tag: str, value) -> etree._Element:
    element = etree.SubElement(parent, tag)
    element.text = _text(value)
    return element


def _serialize(root) -> str:
    return etree.tostring(root, xml_declaration=True, encoding="UTF-8", pretty_print=True).decode("utf-8")


def _issue_date(invoice: Invoice) -> Optional[str]:
    if invoice.date:
        return invoice.date.strftime("%d-%m-%Y")
    if invoice.created_at:
        return invoice.created_at.strftime("%d-%m-%Y")
    return None


def xml_filename(rnc: str, invoice_number: str) -> str:
    """Nombre del XML firmado: RNC del emisor seguido del número de comprobante."""
    return f"{_text(rnc)}{_text(invoice_number)}.xml"


def build_invoice_xml(invoice: Invoice, company: CompanySettings, client: Client) -> str:
    if not invoice.id:
        raise InvalidArgument("La factura no tiene identificador.")
    if not company or not _text(company.rnc):
        raise InvalidArgument("La empresa no tiene RNC configurado.")

    root = etree.Element("ECF")
    encabezado = etree.SubElement(root, "Encabezado")
    _add(encabezado, "Version", ECF_VERSION)

    id_doc = etree.SubElement(encabezado, "IdDoc")
    _add(id_doc, "TipoeCF", TIPO_ECF_CREDITO_FISCAL)
    _add(id_doc, "eNCF", invoice.ncf or invoice.display_number)

    emisor = etree.SubElement(encabezado, "Emisor")
    _add(emisor, "RNCEmisor", company.rnc)
    _add(emisor, "RazonSocialEmisor", company.name)
    _add(emisor, "DireccionEmisor", company.address)
    fecha = _issue_date(invoice)
    if fecha:
        _add(emisor, "FechaEmision", fecha)

    comprador = etree.SubElement(encabezado, "Comprador")
    _add(comprador, "RNCComprador", client.rnc if client else None)
    _add(comprador, "RazonSocialComprador", client.name if client else None)

    totales = etree.SubElement(encabezado, "Totales")
    _add(totales, "MontoGravadoTotal", _amount(invoice.subtotal))
    _add(totales, "TotalITBIS", _amount(invoice.tax))
    _add(totales, "MontoTotal", _amount(invoice.total))

    detalles = etree.SubElement(root, "DetallesItems")
    for line_number, item in enumerate(invoice.items, start=1):
        node = etree.SubElement(detalles, "Item")
        _add(node, "NumeroLinea", line_number)
        _add(node, "IndicadorFacturacion", "1" if item.tax else "4")
        _add(node, "NombreItem", item.description)
        _add(node, "IndicadorBienoServicio", INDICADOR_SERVICIO)
        _add(node, "CantidadItem", _amount(item.quantity))
        _add(node, "PrecioUnitarioItem", _amount(item.price))
        _add(node, "MontoItem", _amount(item.subtotal))

    return _serialize(root)


def validate_cancellation_reason(reason_code: Optional[str], reason: Optional[str]) -> None:
    if not reason_code:
        raise InvalidArgument("Se requiere el código de motivo de anulación")
    if reason_code not in CANCELLATION_REASONS:
        raise InvalidArgument(f"Código de motivo de anulación desconocido: {reason_code}")
    if reason_code == REASON_OTHER and not _text(reason):
        raise InvalidArgument("Debe especificar el motivo de anulación")


def build_cancellation_xml(
    invoice: Invoice,
    company: CompanySettings,
    reason_code: str,
    reason: Optional[str],
    issued_at: datetime,
) -> str:
    if not invoice.ncf:
        raise InvalidArgument("La factura no tiene un NCF válido")

    root = etree.Element(f"{{{CANCELLATION_NS}}}Anulacion", nsmap={None: CANCELLATION_NS})
    encabezado = etree.SubElement(root, f"{{{CANCELLATION_NS}}}Encabezado")
    for tag, value in (
        ("Version", ECF_VERSION),
        ("FechaHora", issued_at.replace(microsecond=0, tzinfo=None).isoformat()),
        ("RNCEmisor", company.rnc if company else None),
        ("RazonSocialEmisor", company.name if company else None),
    ):
        _add(encabezado, f"{{{CANCELLATION_NS}}}{tag}", value)

    detalle = etree.SubElement(root, f"{{{CANCELLATION_NS}}}DetalleAnulacion")
    _add(detalle, f"{{{CANCELLATION_NS}}}NCF", invoice.ncf)
    _add(detalle, f"{{{CANCELLATION_NS}}}CodigoMotivo", reason_code)
    _add(detalle, f"{{{CANCELLATION_NS}}}Motivo", reason or CANCELLATION_REASONS.get(reason_code))

    return _serialize(root)


def validate_xml(xml_string: str) -> bool:
    """Comprueba que el e-CF esté bien formado y tenga los nodos obligatorios."""
    try:
        root = etree.fromstring(xml_string.encode("utf-8"))
    except (etree.XMLSyntaxError, ValueError):
        return False

    if etree.QName(root).localname != "ECF":
        return False

    for path in REQUIRED_ECF_PATHS:
        node = root.find(path)
        if node is None:
            return False
        if len(node) == 0 and not _text(node.text):
            return False
    return True

# app/domain/services/invoice_status.py
"""
Máquina de estados de la factura electrónica.

    pendiente --(envío exitoso)--> enviada
    enviada   --(Aceptado)-------> aceptada
    enviada   --(Rechazado)------> rechazada
    aceptada  --(anulación)------> anulada

Ninguna transición se reintenta de forma automática.
"""
from typing import Dict, FrozenSet

from app.domain.exceptions import FailedPrecondition
from app.domain.models.invoice import InvoiceStatus

TRANSITIONS: Dict[InvoiceStatus, FrozenSet[InvoiceStatus]] = {
    InvoiceStatus.PENDIENTE: frozenset({InvoiceStatus.ENVIADA}),
    InvoiceStatus.ENVIADA: frozenset({InvoiceStatus.ACEPTADA, InvoiceStatus.RECHAZADA}),
    InvoiceStatus.ACEPTADA: frozenset({InvoiceStatus.ANULADA}),
    InvoiceStatus.RECHAZADA: frozenset(),
    InvoiceStatus.ANULADA: frozenset(),
}

GATEWAY_ACCEPTED = "Aceptado"
GATEWAY_REJECTED = "Rechazado"


def can_transition(current: InvoiceStatus, target: InvoiceStatus) -> bool:
    return target in TRANSITIONS[InvoiceStatus(current)]


def ensure_can_submit(current: InvoiceStatus) -> None:
    if InvoiceStatus(current) is not InvoiceStatus.PENDIENTE:
        raise FailedPrecondition(
            f"Sólo se pueden enviar a la DGII facturas pendientes (estado actual: {InvoiceStatus(current).value})."
        )


def ensure_can_cancel(current: InvoiceStatus) -> None:
    current = InvoiceStatus(current)
    if current is InvoiceStatus.ANULADA:
        raise FailedPrecondition("La factura ya está anulada")
    if current is not InvoiceStatus.ACEPTADA:
        raise FailedPrecondition("Solo se pueden anular facturas que hayan sido aceptadas por la DGII")


def map_gateway_status(gateway_status: str) -> InvoiceStatus:
    if gateway_status == GATEWAY_ACCEPTED:
        return InvoiceStatus.ACEPTADA
    if gateway_status == GATEWAY_REJECTED:
        return InvoiceStatus.RECHAZADA
    return InvoiceStatus.ENVIADA


def status_after_check(current: InvoiceStatus, gateway_status: str) -> InvoiceStatus:
    """
    Estado resultante de una consulta a la DGII. Sólo una factura `enviada`
    puede cambiar; las demás conservan su estado.
    """
    current = InvoiceStatus(current)
    target = map_gateway_status(gateway_status)
    if current is InvoiceStatus.ENVIADA and (target is current or can_transition(current, target)):
        return target
    return current

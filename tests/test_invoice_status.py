import pytest

from app.domain.exceptions import FailedPrecondition
from app.domain.models.invoice import InvoiceStatus
from app.domain.services.invoice_status import (
    can_transition, ensure_can_cancel, ensure_can_submit, map_gateway_status, status_after_check,
)


def test_allowed_transitions():
    assert can_transition(InvoiceStatus.PENDIENTE, InvoiceStatus.ENVIADA)
    assert can_transition(InvoiceStatus.ENVIADA, InvoiceStatus.ACEPTADA)
    assert can_transition(InvoiceStatus.ENVIADA, InvoiceStatus.RECHAZADA)
    assert can_transition(InvoiceStatus.ACEPTADA, InvoiceStatus.ANULADA)


def test_terminal_states_have_no_exits():
    for target in InvoiceStatus:
        assert not can_transition(InvoiceStatus.RECHAZADA, target)
        assert not can_transition(InvoiceStatus.ANULADA, target)
    assert not can_transition(InvoiceStatus.PENDIENTE, InvoiceStatus.ACEPTADA)
    assert not can_transition(InvoiceStatus.ENVIADA, InvoiceStatus.ANULADA)


def test_gateway_status_mapping():
    assert map_gateway_status("Aceptado") is InvoiceStatus.ACEPTADA
    assert map_gateway_status("Rechazado") is InvoiceStatus.RECHAZADA
    assert map_gateway_status("En Proceso") is InvoiceStatus.ENVIADA
    assert map_gateway_status("Aceptado Condicional") is InvoiceStatus.ENVIADA


def test_status_check_only_moves_sent_invoices():
    assert status_after_check(InvoiceStatus.ENVIADA, "Aceptado") is InvoiceStatus.ACEPTADA
    assert status_after_check(InvoiceStatus.ENVIADA, "En Proceso") is InvoiceStatus.ENVIADA
    # Una factura anulada no vuelve a 'aceptada' por una consulta posterior
    assert status_after_check(InvoiceStatus.ANULADA, "Aceptado") is InvoiceStatus.ANULADA
    assert status_after_check(InvoiceStatus.ACEPTADA, "Rechazado") is InvoiceStatus.ACEPTADA


def test_only_pending_invoices_can_be_submitted():
    ensure_can_submit(InvoiceStatus.PENDIENTE)
    with pytest.raises(FailedPrecondition):
        ensure_can_submit(InvoiceStatus.ENVIADA)


def test_cancel_rules():
    ensure_can_cancel(InvoiceStatus.ACEPTADA)
    with pytest.raises(FailedPrecondition, match="ya está anulada"):
        ensure_can_cancel(InvoiceStatus.ANULADA)
    with pytest.raises(FailedPrecondition, match="aceptadas por la DGII"):
        ensure_can_cancel(InvoiceStatus.ENVIADA)

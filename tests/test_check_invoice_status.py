import pytest

from app.application.use_cases.check_invoice_status import CheckInvoiceStatusUseCase
from app.domain.exceptions import FailedPrecondition
from app.domain.models.invoice import InvoiceStatus
from app.domain.ports.dgii_gateway import DGIIGatewayProvider
from app.infrastructure.external.dgii_simulator import DGIISimulator
from conftest import FIXED_NOW


def provider(outcome):
    return DGIIGatewayProvider(simulator=DGIISimulator(outcome), live=DGIISimulator(outcome))


@pytest.fixture
def sent_invoice(repo, seeded):
    return repo.update_invoice(seeded.id, status=InvoiceStatus.ENVIADA, track_id="SIM-abc")


@pytest.mark.parametrize("outcome, expected", [
    ("Aceptado", InvoiceStatus.ACEPTADA),
    ("Rechazado", InvoiceStatus.RECHAZADA),
    ("En Proceso", InvoiceStatus.ENVIADA),
])
def test_status_is_mapped(repo, caller, sent_invoice, outcome, expected):
    use_case = CheckInvoiceStatusUseCase(repo, provider(outcome), now=lambda: FIXED_NOW)
    result = use_case.execute(caller, sent_invoice.id, test_mode=True)

    assert result["status"] == outcome
    assert result["invoiceStatus"] == expected.value
    invoice = repo.find_invoice(sent_invoice.id)
    assert invoice.status is expected
    assert invoice.dgii_status_response["status"] == outcome
    assert invoice.dgii_status_date is not None


def test_never_sent_invoice(repo, caller, seeded):
    use_case = CheckInvoiceStatusUseCase(repo, provider("Aceptado"))
    with pytest.raises(FailedPrecondition):
        use_case.execute(caller, seeded.id, test_mode=True)


def test_cancelled_invoice_keeps_its_status(repo, caller, seeded):
    repo.update_invoice(seeded.id, status=InvoiceStatus.ANULADA, track_id="SIM-abc")
    use_case = CheckInvoiceStatusUseCase(repo, provider("Aceptado"))

    result = use_case.execute(caller, seeded.id, test_mode=True)

    assert result["invoiceStatus"] == "anulada"
    assert repo.find_invoice(seeded.id).status is InvoiceStatus.ANULADA

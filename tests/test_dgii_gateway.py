import pytest
import requests

from app.domain.exceptions import GatewayError
from app.domain.ports.dgii_gateway import (
    DGIIGatewayProvider, SERVICE_DEGRADED, SERVICE_OFFLINE, SERVICE_ONLINE,
)
from app.infrastructure.external.dgii_adapter import DGIIRestAdapter
from app.infrastructure.external.dgii_simulator import DGIISimulator


class FakeResponse:
    def __init__(self, status_code=200, payload=None, text=""):
        self.status_code = status_code
        self._payload = payload
        self.text = text

    def json(self):
        if self._payload is None:
            raise ValueError("no JSON")
        return self._payload

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(f"{self.status_code} Error")


class FakeSession:
    def __init__(self, get=None, post=None):
        self._get = get or []
        self._post = post or []
        self.calls = []

    def _next(self, queue, method, url, kwargs):
        self.calls.append((method, url, kwargs))
        result = queue.pop(0)
        if isinstance(result, Exception):
            raise result
        return result

    def get(self, url, **kwargs):
        return self._next(self._get, "GET", url, kwargs)

    def post(self, url, **kwargs):
        return self._next(self._post, "POST", url, kwargs)


def adapter(session):
    return DGIIRestAdapter("https://dgii.test/", "usuario", "clave", rnc="131234567", session=session)


def test_simulator_accepts_everything():
    simulator = DGIISimulator()
    submission = simulator.submit("<ECF/>", "x.xml")
    assert submission.track_id.startswith("SIM-")
    assert simulator.check_status(submission.track_id).status == "Aceptado"
    assert simulator.cancel("<Anulacion/>").track_id.startswith("AN-SIM-")
    assert simulator.probe(True).status == SERVICE_ONLINE


def test_provider_selects_by_mode():
    simulator, live = DGIISimulator(), DGIISimulator("Rechazado")
    provider = DGIIGatewayProvider(simulator=simulator, live=live)
    assert provider.for_mode(True) is simulator
    assert provider.for_mode(False) is live


@pytest.mark.parametrize("response, expected", [
    (FakeResponse(200), SERVICE_ONLINE),
    (FakeResponse(204), SERVICE_ONLINE),
    (FakeResponse(503), SERVICE_OFFLINE),
    (FakeResponse(404), SERVICE_DEGRADED),
    (requests.exceptions.Timeout("timeout"), SERVICE_DEGRADED),
    (requests.exceptions.ConnectionError("dns"), SERVICE_OFFLINE),
])
def test_probe_classification(response, expected):
    session = FakeSession(get=[response])
    status = adapter(session).probe(test_mode=True)

    assert status.status == expected
    assert status.test_mode is True
    method, url, kwargs = session.calls[0]
    assert url == "https://dgii.test/testecf/emisorreceptor-ws/EstatusDocumentosSolicitudes/status"
    assert kwargs["timeout"] == 5


def test_probe_production_environment():
    session = FakeSession(get=[FakeResponse(200)])
    adapter(session).probe(test_mode=False)
    assert session.calls[0][1].startswith("https://dgii.test/ecf/")


def test_submit_authenticates_once_and_returns_track_id():
    session = FakeSession(post=[
        FakeResponse(200, {"token": "abc"}),
        FakeResponse(200, {"trackId": "T-1", "mensaje": "Recibido"}),
        FakeResponse(200, {"trackId": "T-2"}),
    ])
    gateway = adapter(session)

    first = gateway.submit("<ECF/>", "131234567FAC-1.xml")
    second = gateway.submit("<ECF/>", "131234567FAC-2.xml")

    assert (first.track_id, first.message) == ("T-1", "Recibido")
    assert second.track_id == "T-2"
    assert [c[1].rsplit("/", 1)[-1] for c in session.calls] == [
        "Autenticacion", "FacturasElectronicas", "FacturasElectronicas",
    ]
    assert session.calls[1][2]["headers"]["Authorization"] == "Bearer abc"


def test_submit_without_track_id_fails():
    session = FakeSession(post=[FakeResponse(200, {"token": "abc"}), FakeResponse(200, {"mensaje": "?"})])
    with pytest.raises(GatewayError):
        adapter(session).submit("<ECF/>", "f.xml")


def test_check_status_reads_estado_and_messages():
    session = FakeSession(
        post=[FakeResponse(200, {"token": "abc"})],
        get=[FakeResponse(200, {"estado": "Rechazado", "mensajes": [{"valor": "RNC inválido"}]})],
    )
    result = adapter(session).check_status("T-1")

    assert result.status == "Rechazado"
    assert result.message == "RNC inválido"
    assert session.calls[1][2]["params"] == {"trackid": "T-1"}


def test_http_errors_become_gateway_errors():
    session = FakeSession(post=[FakeResponse(200, {"token": "abc"}), FakeResponse(500, text="boom")])
    with pytest.raises(GatewayError):
        adapter(session).cancel("<Anulacion/>")

# app/infrastructure/external/dgii_simulator.py
import logging
import time
import uuid

from app.domain.ports.dgii_gateway import (
    DGIIGateway, SubmissionResult, StatusResult, ServiceStatus, SERVICE_ONLINE,
)
from app.domain.services.invoice_status import GATEWAY_ACCEPTED

logger = logging.getLogger(__name__)


class DGIISimulator(DGIIGateway):
    """
    Simulador en proceso de la DGII para el modo de prueba. Responde de
    inmediato con trackIds sintéticos y el estado configurado.
    """

    def __init__(self, status_outcome: str = GATEWAY_ACCEPTED):
        self.status_outcome = status_outcome

    def submit(self, signed_xml: str, filename: str) -> SubmissionResult:
        track_id = f"SIM-{uuid.uuid4().hex}"
        logger.info(f"[SIMULADOR] {filename} recibido. trackId={track_id}")
        return SubmissionResult(
            track_id=track_id,
            message="Documento recibido (simulado)",
            raw={"trackId": track_id, "simulated": True},
        )

    def check_status(self, track_id: str) -> StatusResult:
        message = f"Estado simulado para {track_id}: {self.status_outcome}"
        return StatusResult(
            status=self.status_outcome,
            message=message,
            raw={"trackId": track_id, "estado": self.status_outcome, "simulated": True},
        )

    def cancel(self, signed_xml: str) -> SubmissionResult:
        track_id = f"AN-SIM-{int(time.time() * 1000)}"
        return SubmissionResult(track_id=track_id, message="Anulación recibida (simulada)",
                                raw={"trackId": track_id, "simulated": True})

    def probe(self, test_mode: bool) -> ServiceStatus:
        return ServiceStatus(status=SERVICE_ONLINE, test_mode=test_mode, message="Simulador DGII disponible")

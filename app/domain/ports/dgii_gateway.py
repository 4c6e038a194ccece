# app/domain/ports/dgii_gateway.py
from abc import ABC, abstractmethod
from typing import Optional, Dict, Any
from pydantic import BaseModel, Field

SERVICE_ONLINE = "online"
SERVICE_OFFLINE = "offline"
SERVICE_DEGRADED = "degraded"


class SubmissionResult(BaseModel):
    track_id: str
    message: Optional[str] = None
    raw: Dict[str, Any] = Field(default_factory=dict)


class StatusResult(BaseModel):
    # 'Aceptado', 'Rechazado' o cualquier otro valor mientras está en proceso
    status: str
    message: Optional[str] = None
    raw: Dict[str, Any] = Field(default_factory=dict)


class ServiceStatus(BaseModel):
    status: str
    test_mode: bool
    message: str


class DGIIGateway(ABC):
    """Puerto para los servicios web de facturación electrónica de la DGII."""

    @abstractmethod
    def submit(self, signed_xml: str, filename: str) -> SubmissionResult:
        """Envía un e-CF firmado y retorna el trackId asignado."""
        pass

    @abstractmethod
    def check_status(self, track_id: str) -> StatusResult:
        pass

    @abstractmethod
    def cancel(self, signed_xml: str) -> SubmissionResult:
        """Envía una solicitud de anulación firmada."""
        pass

    @abstractmethod
    def probe(self, test_mode: bool) -> ServiceStatus:
        """
        Verifica la disponibilidad del servicio. Nunca lanza excepciones:
        los problemas se reportan como 'offline' o 'degraded'.
        """
        pass


class DGIIGatewayProvider:
    """Selecciona el simulador (modo prueba) o el servicio real."""

    def __init__(self, simulator: DGIIGateway, live: DGIIGateway):
        self.simulator = simulator
        self.live = live

    def for_mode(self, test_mode: bool) -> DGIIGateway:
        return self.simulator if test_mode else self.live
